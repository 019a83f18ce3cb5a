from __future__ import annotations

import json
import unittest
from datetime import datetime, timedelta, timezone

from fairdraw.draw import (
    DrawKind,
    EntropySource,
    InvalidInput,
    LinearCongruentialGenerator,
    LotteryEngine,
    MalformedProof,
    Proof,
    ProofVerifier,
    StaleProof,
    perform_draw,
    validate_proof_format,
    verify_proof,
)
from fairdraw.draw.proof import compute_proof_hash

FIXED_MOMENT = datetime(2024, 5, 1, 12, 0, 1, 234000, tzinfo=timezone.utc)

# a * state wraps to 0, so every state yields the same output
STUCK_GENERATOR = LinearCongruentialGenerator(multiplier=2**32, increment=7)

SAMPLE_CONFIGS = {
    "names": {"items": ["A", "B", "C", "D"], "count": 2},
    "numbers": {"min": 1, "max": 50, "count": 6},
    "teams": {"players": ["P1", "P2", "P3", "P4", "P5"], "teamCount": 2},
    "order": {"items": ["first", "second", "third"]},
    "bingo": {"type": "75", "count": 10},
}


def make_engine(**kwargs) -> LotteryEngine:
    entropy = EntropySource(
        clock=lambda: FIXED_MOMENT,
        token_factory=lambda: "AbCd1234",
        platform="test",
    )
    return LotteryEngine(entropy=entropy, **kwargs)


class PerformDrawTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()

    def test_successful_outcome_carries_result_and_proof(self) -> None:
        outcome = self.engine.perform_draw("names", SAMPLE_CONFIGS["names"])
        self.assertTrue(outcome.success)
        self.assertEqual(outcome.type, "names")
        self.assertIsNone(outcome.error)
        self.assertIsNone(outcome.error_code)
        self.assertEqual(outcome.timestamp, FIXED_MOMENT)

        proof = outcome.proof
        self.assertEqual(proof.type, "names")
        self.assertEqual(proof.timestamp, "2024-05-01T12:00:01.234Z")
        self.assertEqual(proof.algorithm, "names-v1.0")
        self.assertEqual(proof.version, "1.0.0")
        self.assertEqual(proof.result, outcome.result)
        self.assertEqual(proof.config, SAMPLE_CONFIGS["names"])
        self.assertEqual(len(proof.seed), 32)
        self.assertEqual(
            proof.hash,
            compute_proof_hash(
                proof.seed, proof.timestamp, proof.type, proof.config, proof.result
            ),
        )
        self.assertEqual(validate_proof_format(proof), [])

    def test_fixed_entropy_reproduces_the_whole_outcome(self) -> None:
        first = self.engine.perform_draw("bingo", SAMPLE_CONFIGS["bingo"])
        second = make_engine().perform_draw(DrawKind.BINGO, SAMPLE_CONFIGS["bingo"])
        self.assertEqual(first.proof, second.proof)

    def test_unsupported_type(self) -> None:
        outcome = self.engine.perform_draw("dice", {"sides": 6})
        self.assertFalse(outcome.success)
        self.assertEqual(outcome.type, "dice")
        self.assertEqual(outcome.error_code, "UnsupportedType")
        self.assertIsNone(outcome.proof)
        self.assertIsNone(outcome.result)

    def test_invalid_input(self) -> None:
        outcome = self.engine.perform_draw("names", {"items": [], "count": 1})
        self.assertFalse(outcome.success)
        self.assertEqual(outcome.error_code, "InvalidInput")
        self.assertTrue(outcome.error)

    def test_non_serializable_config_is_invalid_input(self) -> None:
        outcome = self.engine.perform_draw("names", {"items": ["A"], "extra": {1, 2}})
        self.assertEqual(outcome.error_code, "InvalidInput")
        outcome = self.engine.perform_draw("names", None)
        self.assertEqual(outcome.error_code, "InvalidInput")

    def test_draw_raises_instead_of_tagging(self) -> None:
        with self.assertRaises(InvalidInput):
            self.engine.draw("numbers", {"min": 3, "max": 1})

    def test_exhausted_attempts_is_reported(self) -> None:
        engine = make_engine(generator=STUCK_GENERATOR, max_attempts=5)
        outcome = engine.perform_draw("numbers", {"min": 1, "max": 3, "count": 2})
        self.assertFalse(outcome.success)
        self.assertEqual(outcome.error_code, "ExhaustedAttempts")

    def test_mutating_the_result_leaves_the_proof_intact(self) -> None:
        outcome = self.engine.perform_draw("names", SAMPLE_CONFIGS["names"])
        self.assertIsNot(outcome.result, outcome.proof.result)
        outcome.result["winners"].reverse()
        outcome.result["winners"].append("Z")
        self.assertEqual(len(outcome.proof.result["winners"]), 2)
        self.assertTrue(ProofVerifier().verify(outcome.proof).valid)

    def test_mutating_the_result_leaves_the_proof_config_intact(self) -> None:
        config = {"items": [{"n": 1}, {"n": 2}]}
        outcome = self.engine.perform_draw("order", config)
        outcome.result["order"][0]["item"]["n"] = 99
        self.assertEqual(outcome.proof.config, {"items": [{"n": 1}, {"n": 2}]})
        self.assertEqual(config, {"items": [{"n": 1}, {"n": 2}]})
        self.assertTrue(ProofVerifier().verify(outcome.proof).valid)

    def test_failures_are_logged(self) -> None:
        with self.assertLogs("fairdraw.draw.engine", level="WARNING") as captured:
            self.engine.perform_draw("dice", {})
        self.assertIn("UnsupportedType", captured.output[0])

    def test_private_keys_are_stripped_from_proof(self) -> None:
        config = {
            "items": ["A", "B", "C"],
            "count": 1,
            "privateData": {"email": "someone@example.com"},
            "internalIds": [1, 2, 3],
        }
        outcome = self.engine.perform_draw("names", config)
        self.assertTrue(outcome.success)
        self.assertNotIn("privateData", outcome.proof.config)
        self.assertNotIn("internalIds", outcome.proof.config)
        self.assertIn("privateData", config)
        self.assertTrue(ProofVerifier().verify(outcome.proof).valid)

    def test_custom_private_keys(self) -> None:
        engine = make_engine(private_keys=("secret",))
        self.assertEqual(engine.sanitize({"secret": 1, "privateData": 2}), {"privateData": 2})

    def test_quick_draw_uses_defaults_and_overrides(self) -> None:
        outcome = self.engine.quick_draw("numbers", max=20, count=3)
        self.assertTrue(outcome.success)
        self.assertEqual(outcome.proof.config["min"], 1)
        self.assertEqual(outcome.proof.config["max"], 20)
        self.assertEqual(outcome.result["count"], 3)

        outcome = self.engine.quick_draw("teams")
        self.assertEqual(outcome.result["teamCount"], 2)
        self.assertEqual(self.engine.quick_draw("dice").error_code, "UnsupportedType")

    def test_module_level_helpers(self) -> None:
        outcome = perform_draw("order", SAMPLE_CONFIGS["order"])
        self.assertTrue(outcome.success)
        self.assertTrue(verify_proof(outcome.proof).valid)


class VerificationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        self.verifier = ProofVerifier()

    def _proof(self, kind: str = "names") -> dict:
        return self.engine.perform_draw(kind, SAMPLE_CONFIGS[kind]).proof.to_dict()

    def test_every_kind_verifies(self) -> None:
        for kind in SAMPLE_CONFIGS:
            with self.subTest(kind=kind):
                proof = self._proof(kind)
                verdict = self.verifier.verify(proof)
                self.assertTrue(verdict.valid, verdict.message)
                self.assertIsNone(verdict.reason)
                self.assertEqual(verdict.timestamp, FIXED_MOMENT)
                self.assertEqual(verdict.algorithm, f"{kind}-v1.0")

    def test_proof_object_and_json_round_trip_verify(self) -> None:
        proof = self.engine.perform_draw("teams", SAMPLE_CONFIGS["teams"]).proof
        self.assertTrue(self.verifier.verify(proof).valid)
        restored = Proof.from_json(proof.to_json())
        self.assertEqual(restored, proof)
        self.assertTrue(self.verifier.verify(json.loads(proof.to_json())).valid)

    def test_tampered_result(self) -> None:
        proof = self._proof("names")
        proof["result"]["totalItems"] = 99
        verdict = self.verifier.verify(proof)
        self.assertFalse(verdict.valid)
        self.assertEqual(verdict.reason, "ResultMismatch")

    def test_swapped_winner(self) -> None:
        proof = self._proof("names")
        winners = proof["result"]["winners"]
        loser = next(item for item in SAMPLE_CONFIGS["names"]["items"] if item not in winners)
        winners[0] = loser
        self.assertEqual(self.verifier.verify(proof).reason, "ResultMismatch")

    def test_tampered_config(self) -> None:
        proof = self._proof("names")
        proof["config"]["count"] = 1
        self.assertEqual(self.verifier.verify(proof).reason, "ResultMismatch")

    def test_config_that_cannot_be_replayed(self) -> None:
        proof = self._proof("numbers")
        proof["config"]["min"] = 100
        self.assertEqual(self.verifier.verify(proof).reason, "ResultMismatch")

    def test_tampered_seed(self) -> None:
        proof = self._proof("numbers")
        proof["seed"] = proof["seed"][::-1]
        verdict = self.verifier.verify(proof)
        self.assertFalse(verdict.valid)
        self.assertIn(verdict.reason, {"ResultMismatch", "HashMismatch"})

    def test_tampered_hash(self) -> None:
        proof = self._proof("order")
        proof["hash"] = format((int(proof["hash"], 16) + 1) % 2**32, "08x")
        self.assertEqual(self.verifier.verify(proof).reason, "HashMismatch")

    def test_tampered_timestamp(self) -> None:
        proof = self._proof("bingo")
        proof["timestamp"] = "2024-05-01T12:00:02.234Z"
        self.assertEqual(self.verifier.verify(proof).reason, "HashMismatch")

    def test_missing_field(self) -> None:
        proof = self._proof()
        del proof["seed"]
        verdict = self.verifier.verify(proof)
        self.assertEqual(verdict.reason, "MalformedProof")
        self.assertIn("seed", verdict.message)

    def test_malformed_values(self) -> None:
        cases = {
            "type": "dice",
            "timestamp": "yesterday",
            "algorithm": "names-v9.9",
            "config": ["not", "a", "dict"],
            "hash": "",
        }
        for name, value in cases.items():
            with self.subTest(field=name):
                proof = self._proof()
                proof[name] = value
                self.assertEqual(self.verifier.verify(proof).reason, "MalformedProof")

    def test_non_mapping_proof(self) -> None:
        self.assertEqual(self.verifier.verify("not a proof").reason, "MalformedProof")
        with self.assertRaises(MalformedProof):
            Proof.from_json("{not json")

    def test_oversized_count_is_not_replayed(self) -> None:
        proof = self._proof("numbers")
        proof["config"] = {"min": 1, "max": 10**12, "count": 10**9, "allowRepeats": True}
        verdict = self.verifier.verify(proof)
        self.assertFalse(verdict.valid)
        self.assertEqual(verdict.reason, "ResultMismatch")

    def test_replay_uses_the_drawing_generator(self) -> None:
        generator = LinearCongruentialGenerator(multiplier=22695477, increment=1)
        engine = make_engine(generator=generator)
        proof = engine.perform_draw("numbers", SAMPLE_CONFIGS["numbers"]).proof
        self.assertTrue(ProofVerifier(generator=generator).verify(proof).valid)
        self.assertEqual(self.verifier.verify(proof).reason, "ResultMismatch")

    def test_rejections_are_logged(self) -> None:
        proof = self._proof()
        proof["hash"] = "00000000" if proof["hash"] != "00000000" else "00000001"
        with self.assertLogs("fairdraw.draw.verify", level="INFO"):
            self.verifier.verify(proof)


class StalenessTests(unittest.TestCase):
    def setUp(self) -> None:
        self.proof = make_engine().perform_draw("order", SAMPLE_CONFIGS["order"]).proof

    def test_old_proof_without_max_age_is_valid(self) -> None:
        verifier = ProofVerifier(clock=lambda: FIXED_MOMENT + timedelta(days=3650))
        self.assertTrue(verifier.verify(self.proof).valid)

    def test_proof_older_than_max_age(self) -> None:
        verifier = ProofVerifier(
            max_age=timedelta(days=365),
            clock=lambda: FIXED_MOMENT + timedelta(days=400),
        )
        verdict = verifier.verify(self.proof)
        self.assertEqual(verdict.reason, "StaleProof")
        with self.assertRaises(StaleProof):
            verifier.check(self.proof)

    def test_proof_within_max_age(self) -> None:
        verifier = ProofVerifier(
            max_age=timedelta(days=365),
            clock=lambda: FIXED_MOMENT + timedelta(days=30),
        )
        self.assertEqual(verifier.check(self.proof), FIXED_MOMENT)

    def test_future_dated_proof(self) -> None:
        verifier = ProofVerifier(clock=lambda: FIXED_MOMENT - timedelta(hours=1))
        self.assertEqual(verifier.verify(self.proof).reason, "StaleProof")

    def test_small_clock_skew_is_tolerated(self) -> None:
        verifier = ProofVerifier(clock=lambda: FIXED_MOMENT - timedelta(minutes=2))
        self.assertTrue(verifier.verify(self.proof).valid)
        strict = ProofVerifier(
            future_tolerance=None, clock=lambda: FIXED_MOMENT - timedelta(hours=1)
        )
        self.assertTrue(strict.verify(self.proof).valid)


if __name__ == "__main__":
    unittest.main()
