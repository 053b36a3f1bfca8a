"""Token table construction tests.

Checks the greedy merge order, the documented tie-break, profitability
cutoff and that encoding with the finished table matches the planner.
"""

from __future__ import annotations

import unittest
from collections import Counter

from kallsyms.compress import TOKEN_CODES, TokenTable, build_token_table
from kallsyms.compress.tokens import _pair_counts


class BuildTokenTableTests(unittest.TestCase):
    def test_raw_bytes_keep_their_own_codes(self) -> None:
        plan = build_token_table([b"foo", b"bar"])

        for code in b"fobar":
            self.assertEqual(plan.table.expansions[code], bytes((code,)))
        self.assertEqual(len(plan.table.expansions), TOKEN_CODES)
        self.assertEqual(plan.table.used_codes, 5)

    def test_unprofitable_pairs_are_not_merged(self) -> None:
        plan = build_token_table([b"foo", b"bar", b"baz"])

        self.assertEqual(plan.table.merges, ())
        self.assertEqual(plan.encoded_names, (b"foo", b"bar", b"baz"))

    def test_most_frequent_pair_takes_lowest_free_code(self) -> None:
        plan = build_token_table([b"abab", b"abab"])

        self.assertEqual(plan.table.merges, ((b"ab", 0),))
        self.assertEqual(plan.table.expansions[0], b"ab")
        self.assertEqual(plan.encoded_names, (b"\x00\x00", b"\x00\x00"))

    def test_equal_counts_break_ties_by_smallest_pair(self) -> None:
        plan = build_token_table([b"abcd"] * 3)

        self.assertEqual(plan.table.merges, ((b"ab", 0), (b"cd", 1)))
        self.assertEqual(plan.encoded_names, (b"\x00\x01",) * 3)

    def test_overlapping_runs_replace_left_to_right(self) -> None:
        plan = build_token_table([b"aaa"] * 3)

        self.assertEqual(plan.table.merges, ((b"aa", 0),))
        self.assertEqual(plan.encoded_names, (b"\x00a",) * 3)
        self.assertEqual(plan.table.decode(plan.encoded_names[0]), b"aaa")

    def test_runs_count_only_replaceable_pairs(self) -> None:
        self.assertEqual(_pair_counts(b"aaaaa")[b"aa"], b"aaaaa".count(b"aa"))
        self.assertEqual(_pair_counts(b"xaaay"), Counter({b"xa": 1, b"aa": 1, b"ay": 1}))

    def test_merge_that_would_grow_the_table_is_skipped(self) -> None:
        plan = build_token_table([b"a" * 12])

        self.assertEqual(plan.table.merges, ((b"aa", 0),))
        self.assertEqual(plan.encoded_names, (b"\x00" * 6,))
        table_size = sum(len(expansion) + 1 for expansion in plan.table.expansions)
        self.assertEqual(len(plan.encoded_names[0]) + table_size, 265)

    def test_merges_stop_when_code_space_is_full(self) -> None:
        names = [bytes(range(1, 256))] * 4
        plan = build_token_table(names)

        self.assertEqual(plan.table.merges, ((bytes((1, 2)), 0),))
        self.assertEqual(plan.table.used_codes, TOKEN_CODES)

    def test_empty_input_produces_empty_table(self) -> None:
        plan = build_token_table([])

        self.assertEqual(plan.encoded_names, ())
        self.assertEqual(plan.table.used_codes, 0)

    def test_identical_input_gives_identical_table(self) -> None:
        names = [f"sys_{verb}_{noun}".encode() for verb in ("read", "write", "open") for noun in ("file", "pipe")]

        self.assertEqual(build_token_table(names), build_token_table(list(names)))

    def test_every_name_round_trips(self) -> None:
        names = [
            b"start_kernel",
            b"start_secondary",
            b"rest_init",
            b"kernel_init",
            b"kernel_thread",
            b"do_one_initcall",
        ] * 4
        plan = build_token_table(names)

        self.assertTrue(plan.table.merges)
        for raw, encoded in zip(names, plan.encoded_names):
            self.assertEqual(plan.table.decode(encoded), raw)
            self.assertLess(len(encoded), len(raw) + 1)


class TokenTableEncodeTests(unittest.TestCase):
    def test_encode_matches_planner_output(self) -> None:
        names = [b"kernel_init", b"kernel_thread", b"kernel_clone"] * 3
        plan = build_token_table(names)

        for raw, encoded in zip(names, plan.encoded_names):
            self.assertEqual(plan.table.encode(raw), encoded)

    def test_encode_applies_merges_in_order(self) -> None:
        table = build_token_table([b"abcd"] * 3).table

        self.assertEqual(table.encode(b"abcdab"), b"\x00\x01\x00")
        self.assertEqual(table.decode(b"\x00\x01\x00"), b"abcdab")

    def test_encode_rejects_bytes_without_raw_token(self) -> None:
        table = TokenTable(expansions=(b"",) * TOKEN_CODES)

        with self.assertRaises(ValueError):
            table.encode(b"x")


if __name__ == "__main__":
    unittest.main()
