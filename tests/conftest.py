"""Pytest fixtures for nuvl-world tests."""

import pytest

from nuvlworld.testing import SAMPLE_FACTS, load_sample_store


@pytest.fixture
def write_lines(tmp_path):
    """Write lines to a file under tmp_path and return its path."""
    def _write(name: str, lines: list[str]):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def sample_file(write_lines):
    return write_lines("sample.scm", SAMPLE_FACTS)


@pytest.fixture
def store():
    """A store loaded with SAMPLE_FACTS."""
    return load_sample_store()
