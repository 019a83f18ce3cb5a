from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from fairdraw.config import load_settings
from fairdraw.draw import format_for_sharing
from fairdraw.workflows import build_verifier


def main(argv: Optional[list[str]] = None) -> int:
    """Verify a proof stored as JSON and print the verdict.

    Exit status is 0 for a valid proof, 1 for a rejected proof and 2 when the
    file cannot be read or parsed.
    """
    parser = argparse.ArgumentParser(description="Verify a draw proof JSON file.")
    parser.add_argument("path", type=Path, help="Path to the proof JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        proof = json.loads(args.path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        print(f"Could not read proof from {args.path}: {exc}", file=sys.stderr)
        return 2

    settings = load_settings()
    verdict = build_verifier(settings).verify(proof)
    if not verdict.valid:
        print(f"INVALID ({verdict.reason}): {verdict.message}")
        return 1

    share = format_for_sharing(proof, settings.verify_base_url)
    print(f"VALID: {verdict.algorithm} drawn at {verdict.timestamp.isoformat()}")
    print(f"Verification code: {share.code}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
