"""fairdraw: deterministic draws with independently verifiable proofs."""

__version__ = "1.0.0"
