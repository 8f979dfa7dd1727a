"""Core value types and interfaces for the nuvlworld fact store.

Facts are immutable and identified by their exact text. Event time
intervals are derived from facts and never stored back into the store.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class FactShape(Enum):
    """The recognized triple shapes, named by their value grammar."""
    TERM = "term"          # (PRED ARG2 VALUE), VALUE a term or (NameFn ...)
    TERM4 = "term4"        # (PRED ARG2 ARG3 VALUE)
    INTEGER = "integer"    # (PRED ARG2 -123)
    STRING = "string"      # (PRED ARG2 "text")


@dataclass(frozen=True)
class Fact:
    """A single parsed triple.

    Equality and hashing use ``text`` only, so two facts read from
    identical lines are the same fact wherever they come from.

    Attributes:
        text: The canonical fact text, e.g. ``(subAttrOf e1 Busy)``.
        predicate: First positional term; the primary index key.
        arg2: Second positional term; the secondary index key.
        value: Raw text of the last field. String values keep their quotes.
        shape: Which triple shape matched.
        qualifier: The third field of the four-field form, else None.
    """
    text: str
    predicate: str = field(compare=False)
    arg2: str = field(compare=False)
    value: str = field(compare=False)
    shape: FactShape = field(compare=False)
    qualifier: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class EventTimeInterval:
    """An event term with start and end instants in UTC epoch millis.

    ``end_utc_millis < start_utc_millis`` is not rejected; day placement
    then uses the start day only.
    """
    event: str
    start_utc_millis: int
    end_utc_millis: int


@dataclass
class LoadSummary:
    """Result summary of one load call.

    Attributes:
        source: Name of the loaded file or line source.
        lines: Lines read, including blank and comment lines.
        facts_added: Facts newly added to the indices.
        descriptions_stored: Description entries written.
        descriptions_dropped: Descriptions dropped because their subject
            is not referenced by any loaded fact.
        skipped: Blank and comment lines.
        duration_ms: Wall-clock time spent in the load call.
    """
    source: str
    lines: int = 0
    facts_added: int = 0
    descriptions_stored: int = 0
    descriptions_dropped: int = 0
    skipped: int = 0
    duration_ms: float = 0.0


class IFactIndex(ABC):
    """Read-only view of a fact store used by derived indices."""

    @abstractmethod
    def facts_by_predicate(self, predicate: str) -> frozenset[Fact]:
        """Return all facts with the given predicate (empty if unknown)."""
        pass

    @abstractmethod
    def is_referenced(self, term: str) -> bool:
        """Return True if ``term`` is the second argument of any fact."""
        pass

    @abstractmethod
    def description(self, subject: str) -> Optional[str]:
        """Return the display text for ``subject``, if any."""
        pass
