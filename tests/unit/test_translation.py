import unittest

from transtree.exceptions import DuplicateKeyError
from transtree.placeholders import Placeholder
from transtree.translation import Literal, Reference, Translation, TranslationEntry


class TestTranslationEntry(unittest.TestCase):

    def test_literal_accessors(self):
        entry = TranslationEntry("a", Literal("x\ny", escaped_text="x\\ny"))
        self.assertEqual(entry.text, "x\ny")
        self.assertEqual(entry.escaped_text, "x\\ny")
        self.assertIsNone(entry.reference)
        self.assertFalse(entry.is_reference)

    def test_reference_accessors(self):
        entry = TranslationEntry("a", Reference("b.c"))
        self.assertIsNone(entry.text)
        self.assertIsNone(entry.escaped_text)
        self.assertEqual(entry.reference, "b.c")
        self.assertTrue(entry.is_reference)

    def test_add_placeholder(self):
        entry = TranslationEntry("a", Literal("{n}"), is_templated=True)
        entry.add_placeholder(Placeholder("n", type="int"))
        self.assertEqual([p.name for p in entry.placeholders], ["n"])


class TestTranslation(unittest.TestCase):

    def test_duplicate_key_keeps_first_entry(self):
        translation = Translation(locale="en")
        first = TranslationEntry("greeting", Literal("Hello"))
        translation.add("greeting", first)

        with self.assertRaises(DuplicateKeyError) as ctx:
            translation["greeting"] = TranslationEntry("greeting", Literal("Hi"))
        self.assertEqual(ctx.exception.key, "greeting")
        self.assertIs(translation["greeting"], first)

    def test_duplicate_key_reports_line(self):
        translation = Translation()
        translation.add("a", TranslationEntry("a", Literal("1")))
        with self.assertRaisesRegex(DuplicateKeyError, "on line 7"):
            translation.add("a", TranslationEntry("a", Literal("2")), 7)

    def test_keys_are_case_sensitive(self):
        translation = Translation()
        translation.add("Title", TranslationEntry("Title", Literal("1")))
        translation.add("title", TranslationEntry("title", Literal("2")))
        self.assertEqual(len(translation), 2)

    def test_delete_then_add(self):
        translation = Translation()
        translation.add("a", TranslationEntry("a", Literal("1")))
        del translation["a"]
        translation.add("a", TranslationEntry("a", Literal("2")))
        self.assertEqual(translation["a"].text, "2")

    def test_equality_includes_metadata(self):
        first, second = Translation(locale="de"), Translation(locale="de")
        for translation in (first, second):
            translation.add("a", TranslationEntry("a", Literal("1")))
        self.assertEqual(first, second)

        second.custom_properties["generator"] = "tool"
        self.assertNotEqual(first, second)


if __name__ == '__main__':
    unittest.main()
