import unittest

from transtree.text_format import TextFormat, unescape_string


class TestTextFormat(unittest.TestCase):

    def test_from_name(self):
        self.assertIs(TextFormat.from_name("dotnet"), TextFormat.DOTNET)
        self.assertIs(TextFormat.from_name("ARB-NO-ESCAPING"), TextFormat.ARB_NO_ESCAPING)
        self.assertIs(TextFormat.from_name("backslash_escaping"), TextFormat.BACKSLASH_ESCAPING)
        self.assertIs(TextFormat.from_name(" None "), TextFormat.NONE)

    def test_from_name_unknown(self):
        with self.assertRaises(ValueError):
            TextFormat.from_name("gettext")


class TestUnescapeString(unittest.TestCase):

    def test_simple_escapes(self):
        self.assertEqual(unescape_string(r'Line\nTab\t\"q\" \\ \/'), 'Line\nTab\t"q" \\ /')

    def test_unicode_escape(self):
        self.assertEqual(unescape_string(r'caf\u00e9'), 'caf\u00e9')

    def test_malformed_unicode_escape_is_kept(self):
        self.assertEqual(unescape_string(r'\u12'), '\\u12')
        self.assertEqual(unescape_string(r'\uzzzz!'), '\\uzzzz!')

    def test_unicode_escape_needs_four_hex_digits(self):
        self.assertEqual(unescape_string(r'\u+041'), '\\u+041')
        self.assertEqual(unescape_string(r'\u 41 '), '\\u 41 ')
        self.assertEqual(unescape_string(r'\u0_41'), '\\u0_41')

    def test_unknown_escape_is_kept(self):
        self.assertEqual(unescape_string(r'\q'), '\\q')

    def test_trailing_backslash_is_dropped(self):
        self.assertEqual(unescape_string('end\\'), 'end')

    def test_plain_text_is_unchanged(self):
        self.assertEqual(unescape_string('Hello {0}'), 'Hello {0}')


if __name__ == '__main__':
    unittest.main()
