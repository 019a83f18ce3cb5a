from __future__ import annotations

import json
import re
import unittest
from datetime import datetime, timezone
from urllib.parse import unquote

from fairdraw.draw import (
    EntropySource,
    LotteryEngine,
    extract_proof_info,
    format_for_sharing,
    get_security_stats,
    get_statistics,
    parse_verification_code,
    to_qr_data,
    to_share_text,
    to_verification_url,
    verification_code,
)

FIXED_MOMENT = datetime(2024, 5, 1, 12, 0, 1, 234000, tzinfo=timezone.utc)


def fixed_proof(kind: str, config: dict):
    engine = LotteryEngine(
        entropy=EntropySource(
            clock=lambda: FIXED_MOMENT,
            token_factory=lambda: "AbCd1234",
            platform="test",
        )
    )
    return engine.perform_draw(kind, config).proof


class VerificationCodeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.proof = fixed_proof("names", {"items": ["Ana", "Ben", "Cleo"], "count": 1})

    def test_code_combines_hash_prefix_and_time_suffix(self) -> None:
        code = verification_code(self.proof)
        self.assertRegex(code, r"^[0-9A-F]{4}-1234$")
        self.assertEqual(code, f"{self.proof.hash[:4].upper()}-1234")
        self.assertEqual(verification_code(self.proof.to_dict()), code)

    def test_parse_code(self) -> None:
        self.assertEqual(parse_verification_code("ABCD-1234"), ("abcd", "1234"))
        self.assertEqual(parse_verification_code(" 0f9e-0001 "), ("0f9e", "0001"))

    def test_parse_rejects_malformed_codes(self) -> None:
        for code in ("", "ABCD1234", "ABCG-1234", "ABCD-12345", "ABC-1234", None):
            with self.subTest(code=code):
                with self.assertRaises(ValueError):
                    parse_verification_code(code)  # type: ignore[arg-type]


class SharingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.proof = fixed_proof(
            "order", {"items": ["Zoë & co", "Ben?", "Cleo/Dan"]}
        )

    def test_url_embeds_code_and_encoded_proof(self) -> None:
        url = to_verification_url(self.proof, "https://example.test/verify")
        code = verification_code(self.proof)
        prefix = f"https://example.test/verify?code={code}&proof="
        self.assertTrue(url.startswith(prefix))
        encoded = url[len(prefix):]
        self.assertIsNone(re.search(r"[ &?/\"{}]", encoded))
        self.assertEqual(json.loads(unquote(encoded)), self.proof.to_dict())

    def test_qr_data_is_the_url(self) -> None:
        self.assertEqual(to_qr_data(self.proof), to_verification_url(self.proof))

    def test_share_text(self) -> None:
        text = to_share_text(self.proof, "https://example.test/verify")
        lines = text.splitlines()
        self.assertEqual(lines[0], "Random Order")
        self.assertIn("Date: 2024-05-01T12:00:01.234Z", lines)
        self.assertIn(f"Code: {verification_code(self.proof)}", lines)
        self.assertEqual(lines[-1], "Verify at: https://example.test/verify")

    def test_format_for_sharing(self) -> None:
        payload = format_for_sharing(self.proof)
        self.assertEqual(payload.code, verification_code(self.proof))
        self.assertEqual(payload.url, to_verification_url(self.proof))
        self.assertEqual(payload.text, to_share_text(self.proof))


class StatisticsTests(unittest.TestCase):
    def test_names_statistics(self) -> None:
        proof = fixed_proof("names", {"items": ["A", "B", "C", "D"], "count": 1})
        stats = get_statistics(proof)
        self.assertEqual(stats["type"], "Name Draw")
        self.assertEqual(stats["winners"], 1)
        self.assertEqual(stats["total_options"], 4)
        self.assertEqual(stats["probability"], "25.00%")

    def test_numbers_statistics(self) -> None:
        proof = fixed_proof("numbers", {"min": 1, "max": 10, "count": 2, "allowRepeats": True})
        stats = get_statistics(proof)
        self.assertEqual(stats["range"], "1 - 10")
        self.assertEqual(stats["probability"], "N/A (with repeats)")

    def test_order_and_bingo_statistics(self) -> None:
        order = get_statistics(fixed_proof("order", {"items": ["a", "b", "c", "d"]}))
        self.assertEqual(order["permutations"], 24)
        bingo = get_statistics(fixed_proof("bingo", {"type": "90", "count": 9}))
        self.assertEqual(bingo["type"], "Bingo 90")
        self.assertEqual(bingo["probability"], "10.00%")

    def test_teams_statistics(self) -> None:
        proof = fixed_proof("teams", {"players": ["a", "b", "c", "d"], "teamCount": 2})
        stats = get_statistics(proof)
        self.assertEqual(stats["teams"], 2)
        self.assertEqual(stats["players"], 4)
        self.assertTrue(stats["balanced"])

    def test_security_stats(self) -> None:
        names = get_security_stats(fixed_proof("names", {"items": ["A", "B", "C"], "count": 2}))
        self.assertEqual(names["total_possibilities"], 6)
        self.assertEqual(names["selected_items"], 2)
        self.assertEqual(names["probability"], "1 in 6")

        numbers = get_security_stats(
            fixed_proof("numbers", {"min": 1, "max": 10, "count": 2, "allowRepeats": True})
        )
        self.assertEqual(numbers["total_possibilities"], 100)

    def test_security_stats_for_huge_spaces(self) -> None:
        proof = fixed_proof("order", {"items": [f"item {i}" for i in range(30)]})
        stats = get_security_stats(proof)
        self.assertEqual(stats["total_possibilities"], "very large")
        self.assertEqual(stats["probability"], "practically impossible to predict")

    def test_extract_proof_info(self) -> None:
        proof = fixed_proof("names", {"items": ["A", "B", "C", "D"], "count": 2})
        info = extract_proof_info(proof)
        self.assertEqual(info["type"], "Name Draw")
        self.assertEqual(info["date"], FIXED_MOMENT)
        self.assertEqual(info["algorithm"], "names-v1.0")
        self.assertEqual(info["verification_code"], verification_code(proof))
        self.assertEqual(
            info["details"], {"total_items": 4, "winners": 2, "items": ["A", "B", "C"]}
        )


if __name__ == "__main__":
    unittest.main()
