from __future__ import annotations

import unittest
from dataclasses import replace

from kallsyms.config import DEFAULT_CONFIG
from kallsyms.listing import filter_symbols, ignore_reason, parse_listing, read_symbols, resolve_text_ranges


def names(records) -> list[str]:
    return [record.name for record in records]


class IgnoreReasonTests(unittest.TestCase):
    def test_local_and_compiler_generated_prefixes_are_ignored(self) -> None:
        listing = [
            "1000 t .LC0",
            "1001 t $x",
            "1002 R __crc_printk",
            "1003 r __kstrtab_printk",
            "1004 r __ksymtab_printk",
            "1005 t __efistub_memcpy",
            "1006 d __func__.1234",
            "1007 r anon.0f1e2d.3",
            "1008 T keep_me",
        ]
        self.assertEqual(names(parse_listing(listing)), ["keep_me"])

    def test_reserved_suffixes_are_ignored(self) -> None:
        listing = ["1000 t foo_veneer", "1001 t bar_from_arm", "1002 t baz_from_thumb", "1003 t ok"]
        self.assertEqual(names(parse_listing(listing)), ["ok"])

    def test_ignored_type_characters(self) -> None:
        listing = ["0 a local_abs", "0 N .debug_info", "1000 A global_abs", "1001 T text"]
        self.assertEqual(names(parse_listing(listing)), ["global_abs", "text"])

    def test_table_labels_never_appear_in_their_own_table(self) -> None:
        listing = ["1000 R kallsyms_names", "1008 R kallsyms_num", "1010 T kallsyms_lookup"]
        self.assertEqual(names(parse_listing(listing)), ["kallsyms_lookup"])

    def test_reason_is_none_for_kept_records(self) -> None:
        (record,) = read_symbols(["1000 T foo"])
        self.assertIsNone(ignore_reason(record))
        self.assertEqual(ignore_reason(replace(record, name=".Ltmp1")), "reserved prefix")


class FilterSymbolsTests(unittest.TestCase):
    def test_exact_duplicate_markers_are_dropped(self) -> None:
        listing = ["2000 T __start_data", "2000 T __start_data", "2000 T data_begin", "3000 T __start_data"]
        records = parse_listing(listing)

        self.assertEqual(
            [(record.address, record.name) for record in records],
            [(0x2000, "__start_data"), (0x2000, "data_begin"), (0x3000, "__start_data")],
        )

    def test_overlong_names_are_skipped_with_warning(self) -> None:
        config = replace(DEFAULT_CONFIG, max_name_length=8)
        records = read_symbols(["1000 T short", "1008 T much_too_long"])

        with self.assertLogs("kallsyms.listing.filters", level="WARNING") as logs:
            kept = filter_symbols(records, config)

        self.assertEqual(names(kept), ["short"])
        self.assertIn("line 2", logs.output[0])

    def test_text_ranges_apply_only_without_all_symbols(self) -> None:
        listing = [
            "0500 D early_data",
            "1000 T _text",
            "1010 T start_kernel",
            "2000 T _etext",
            "3000 D jiffies",
            "4000 T _sinittext",
            "4010 t init_setup",
            "5000 T _einittext",
        ]
        text_only = replace(DEFAULT_CONFIG, all_symbols=False)

        self.assertEqual(len(parse_listing(listing)), 8)
        self.assertEqual(
            names(parse_listing(listing, text_only)),
            ["_text", "start_kernel", "_etext", "_sinittext", "init_setup", "_einittext"],
        )

    def test_unresolved_text_ranges_disable_range_filter(self) -> None:
        text_only = replace(DEFAULT_CONFIG, all_symbols=False)
        records = read_symbols(["1000 T foo", "2000 D bar", "3000 T _etext"])

        self.assertEqual(resolve_text_ranges(records, text_only), [])
        self.assertEqual(names(filter_symbols(records, text_only)), ["foo", "bar", "_etext"])


if __name__ == "__main__":
    unittest.main()
