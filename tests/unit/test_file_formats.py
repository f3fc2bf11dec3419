"""Unit tests for the format registry and configuration-driven tree loading."""
import os

import pytest

from transtree import file_formats
from transtree.exceptions import ParserConfigError, ParserLoadError
from transtree.json_parser import ArbParser, JsonParser
from transtree.table_parser import CsvParser, TsvParser


class TestRegistry:

    def test_registry_starts_empty(self):
        assert file_formats.supported_extensions() == []
        assert file_formats.get_parser(".json") is None

    def test_default_formats(self, default_formats):
        assert sorted(file_formats.supported_extensions()) == [".arb", ".csv", ".json", ".tsv"]
        assert isinstance(file_formats.get_parser(".CSV"), CsvParser)
        assert isinstance(file_formats.get_parser(".tsv"), TsvParser)
        assert isinstance(file_formats.get_parser_for_file("strings.de.ARB"), ArbParser)
        assert isinstance(file_formats.get_config_parser(".jsoncfg"), JsonParser)
        assert isinstance(file_formats.get_config_parser(".arbcfg"), ArbParser)
        assert file_formats.get_parser(".jsoncfg") is None
        assert file_formats.get_parser("") is None

    def test_factories_create_new_parsers(self, default_formats):
        assert file_formats.get_parser(".json") is not file_formats.get_parser(".json")

    def test_first_registration_wins(self):
        file_formats.register_parser(".txt", CsvParser)
        file_formats.register_parser(".TXT", TsvParser)
        assert isinstance(file_formats.get_parser(".txt"), CsvParser)

    def test_clear(self, default_formats):
        file_formats.clear()
        assert file_formats.get_parser(".csv") is None
        assert file_formats.get_config_parser(".jsoncfg") is None


class TestLoadTranslationStructure:

    def test_tree_from_json_configuration(self, default_formats, write_file):
        write_file("strings.json", '{"title": "Hi {0}", "menu": {"open": "Open"}}')
        config_path = write_file(
            "strings.jsoncfg", '{"default_file": "strings.json", "translations": {"de": "strings.de.json"}}')

        tree, configuration = file_formats.load_translation_structure(config_path)

        assert configuration.default_file == "strings.json"
        assert configuration.translations == {"de": "strings.de.json"}
        assert configuration.directory_hint == os.path.dirname(config_path)
        assert tree.root.keys["title"].is_templated is True
        assert tree.find_node("menu").keys["open"].is_templated is False

    def test_default_file_of_another_format(self, default_formats, write_file):
        write_file("texts.csv", "Key,en\nmenu.open,Open\n")
        config_path = write_file("app.jsoncfg", '{"default_file": "texts.csv"}')

        tree, _ = file_formats.load_translation_structure(config_path)

        assert list(tree.find_node("menu").keys) == ["open"]

    def test_base_directory_overrides_config_directory(self, default_formats, write_file, tmp_path):
        write_file("data/strings.arb", '{"@@locale": "en", "hello": "Hello"}')
        config_path = write_file("conf/strings.arbcfg", '{"default_file": "strings.arb"}')

        tree, configuration = file_formats.load_translation_structure(
            config_path, base_directory=str(tmp_path / "data"))

        assert configuration.text_processing_mode is ArbParser.text_processing_mode
        assert list(tree.root.keys) == ["hello"]

    def test_unregistered_configuration_extension(self, default_formats, write_file):
        config_path = write_file("strings.cfg", '{"default_file": "strings.json"}')
        with pytest.raises(ParserConfigError):
            file_formats.load_translation_structure(config_path)

    def test_missing_default_file_setting(self, default_formats, write_file):
        config_path = write_file("strings.jsoncfg", '{"default_locale": "en"}')
        with pytest.raises(ParserConfigError, match="default_file"):
            file_formats.load_translation_structure(config_path)

    def test_default_file_without_parser(self, default_formats, write_file):
        write_file("strings.po", 'msgid "a"')
        config_path = write_file("strings.jsoncfg", '{"default_file": "strings.po"}')
        with pytest.raises(ParserLoadError):
            file_formats.load_translation_structure(config_path)

    def test_empty_default_file(self, default_formats, write_file):
        write_file("strings.json", "")
        config_path = write_file("strings.jsoncfg", '{"default_file": "strings.json"}')
        with pytest.raises(ParserLoadError, match="empty"):
            file_formats.load_translation_structure(config_path)

    def test_missing_default_file(self, default_formats, write_file):
        config_path = write_file("strings.jsoncfg", '{"default_file": "absent.json"}')
        with pytest.raises(ParserLoadError):
            file_formats.load_translation_structure(config_path)
