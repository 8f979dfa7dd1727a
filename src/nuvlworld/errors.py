"""Exceptions raised by the fact store and its loaders."""

from typing import Optional


class NuvlWorldError(Exception):
    """Base exception for nuvlworld failures."""


class FactSyntaxError(NuvlWorldError):
    """A fact line matched none of the recognized triple shapes.

    Attributes:
        line: The offending line, without its trailing newline.
        source: Name of the file (or other source) being loaded, if known.
        line_number: 1-based line number within the source, if known.
    """

    def __init__(
        self,
        line: str,
        source: Optional[str] = None,
        line_number: Optional[int] = None,
    ):
        self.line = line
        self.source = source
        self.line_number = line_number
        where = ""
        if source is not None:
            where = f" in {source}"
            if line_number is not None:
                where += f" at line {line_number}"
        super().__init__(f"Unrecognized fact syntax{where}: {line!r}")


class LoadError(NuvlWorldError):
    """Reading a fact or description source failed.

    The underlying ``OSError`` (or decode error) is chained as ``__cause__``.
    """

    def __init__(self, source: str, reason: str):
        self.source = source
        super().__init__(f"Failed to load {source}: {reason}")


class MalformedReferenceError(NuvlWorldError):
    """A fact's nested value did not decompose into the expected shape."""


class ConfigError(NuvlWorldError):
    """Raised when a configuration value is invalid."""
