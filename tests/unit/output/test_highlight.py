from __future__ import annotations

import unittest

from kallsyms.highlight import DEFAULT_STYLE, colorize_assembly, normalize_style


class HighlightTests(unittest.TestCase):
    def test_colorize_assembly_emits_ansi_sequences(self) -> None:
        source = "\t.globl kallsyms_num\nkallsyms_num:\n\t.quad 3\n"

        rendered = colorize_assembly(source)

        self.assertIn("\x1b[", rendered)
        self.assertIn("kallsyms_num", rendered)

    def test_unknown_style_falls_back_to_default(self) -> None:
        self.assertEqual(normalize_style("definitely-not-a-style"), DEFAULT_STYLE)
        self.assertEqual(normalize_style("default"), "default")

    def test_unknown_style_still_renders(self) -> None:
        rendered = colorize_assembly("foo:\n\t.byte 0x01\n", style="definitely-not-a-style")

        self.assertIn("\x1b[", rendered)


if __name__ == "__main__":
    unittest.main()
