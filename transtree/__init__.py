"""Parsing and tree-assembly engine for localizable text in CSV, TSV and JSON files."""

__version__ = "0.1.0"
