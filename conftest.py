"""Pytest configuration: run the Python code blocks in docs/ as tests."""

from pathlib import Path

from sybil import Sybil
from sybil.parsers.markdown import PythonCodeBlockParser, SkipParser

pytest_collect_file = Sybil(
    parsers=[PythonCodeBlockParser(), SkipParser()],
    path=str(Path(__file__).parent / "docs"),
    pattern="*.md",
).pytest()
