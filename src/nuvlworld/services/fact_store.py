"""In-memory fact store with predicate and secondary-argument indices.

Facts are read line by line from fact files (see ``classifier``) and held
once in an arena keyed by their text. Two indices reference the same
Fact objects:

- by predicate, used for all lookups;
- by second argument, used only to decide whether a subject is
  referenced anywhere.

Descriptions (subject -> display text) come from ``description`` facts
and from bulk ``id<TAB>text`` files. Both obey the same admission rule:
a description is kept only if its subject is already the second argument
of some loaded fact. Load fact files before description files.

Memory:
    Wikidata-derived inputs run to tens of millions of lines. Dropping
    descriptions of unreferenced subjects keeps the description table
    proportional to the facts actually loaded.
"""

import json
import logging
import os
import re
import time
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Optional, Union

from ..errors import FactSyntaxError, LoadError
from ..interfaces import Fact, FactShape, IFactIndex, LoadSummary
from .classifier import classify_line

logger = logging.getLogger(__name__)

DESCRIPTION_PREDICATE = "description"
WIKIDATA_SUBJECT_PREFIX = "Q"

# Progress is logged every N lines
PROGRESS_INTERVAL_FACTS = 1_000_000
PROGRESS_INTERVAL_DESCRIPTIONS = 10_000_000

FactSource = Union[str, os.PathLike, Iterable[str]]


def from_escaped_string(s: str) -> str:
    """Decode a JSON string literal (with its quotes) to plain text."""
    value = json.loads(s)
    if not isinstance(value, str):
        raise ValueError(f"Not a JSON string: {s!r}")
    return value


def to_escaped_string(s: str) -> str:
    """Encode text as a JSON string literal, including the quotes."""
    return json.dumps(s, ensure_ascii=False)


def source_name(source: FactSource) -> str:
    """Human-readable name of a source for logs and errors."""
    if isinstance(source, (str, os.PathLike)):
        return str(Path(source).expanduser())
    return getattr(source, "name", "<lines>")


def _iter_lines(source: FactSource) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, line)`` pairs without trailing newlines.

    I/O and decode failures are raised as LoadError.
    """
    name = source_name(source)
    try:
        if isinstance(source, (str, os.PathLike)):
            with open(Path(source).expanduser(), "r", encoding="utf-8") as handle:
                for number, line in enumerate(handle, start=1):
                    yield number, line.rstrip("\r\n")
        else:
            for number, line in enumerate(source, start=1):
                yield number, line.rstrip("\r\n")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(name, str(exc)) from exc


class FactStore(IFactIndex):
    """Holds loaded facts, their indices and the description table."""

    def __init__(self):
        self._facts: dict[str, Fact] = {}
        self._by_predicate: dict[str, set[Fact]] = {}
        self._by_arg2: dict[str, set[Fact]] = {}
        self._descriptions: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._facts)

    def __contains__(self, text: object) -> bool:
        return text in self._facts

    # -------------------------------------------------------------- #
    #  Loading                                                         #
    # -------------------------------------------------------------- #

    def load_facts(self, source: FactSource) -> LoadSummary:
        """Load a fact file (or any iterable of lines) into the indices.

        ``description`` lines are routed to the description table instead,
        and only if their subject is already referenced.

        Args:
            source: A path, or an iterable of lines.

        Returns:
            LoadSummary for this call.

        Raises:
            LoadError: If the source cannot be opened or read.
            FactSyntaxError: On the first unrecognized line. Lines before
                it stay loaded.
        """
        name = source_name(source)
        summary = LoadSummary(source=name)
        t0 = time.monotonic()
        logger.info("Loading facts from %s", name)

        for number, line in _iter_lines(source):
            summary.lines += 1
            if number % PROGRESS_INTERVAL_FACTS == 0:
                logger.info("Loading %s, line %d", name, number)

            try:
                fact = classify_line(line)
            except FactSyntaxError as exc:
                raise FactSyntaxError(line, name, number) from exc
            if fact is None:
                summary.skipped += 1
                continue

            if fact.predicate == DESCRIPTION_PREDICATE:
                self._load_description_fact(fact, name, number, summary)
                continue

            if self._add_fact(fact):
                summary.facts_added += 1

        summary.duration_ms = (time.monotonic() - t0) * 1000
        logger.info(
            "Loaded %s: %d lines, %d new facts, %d descriptions "
            "(%d dropped) in %.0fms",
            name, summary.lines, summary.facts_added,
            summary.descriptions_stored, summary.descriptions_dropped,
            summary.duration_ms,
        )
        return summary

    def load_descriptions(self, source: FactSource) -> LoadSummary:
        """Load a tab-separated ``id<TAB>text`` description file.

        The subject of each row is ``"Q" + id``. Rows whose subject is not
        referenced by a loaded fact are dropped. The text is JSON-escaped
        and is unescaped before storing.

        Text without surrounding quotes is wrapped in quotes before
        decoding, so it must already be escaped: a raw ``"`` in an unquoted
        label is a syntax error that aborts the load.

        Raises:
            LoadError: If the source cannot be opened or read.
            FactSyntaxError: If a row has no tab or undecodable text.
        """
        name = source_name(source)
        summary = LoadSummary(source=name)
        t0 = time.monotonic()
        logger.info("Loading descriptions from %s", name)

        for number, line in _iter_lines(source):
            summary.lines += 1
            if number % PROGRESS_INTERVAL_DESCRIPTIONS == 0:
                logger.info("Loading %s, line %d", name, number)

            if not line.strip():
                summary.skipped += 1
                continue
            item_id, tab, text = line.partition("\t")
            if not tab:
                raise FactSyntaxError(line, name, number)

            subject = WIKIDATA_SUBJECT_PREFIX + item_id
            if not self.is_referenced(subject):
                summary.descriptions_dropped += 1
                continue

            if not text.startswith('"'):
                text = f'"{text}"'
            self._store_description(subject, text, line, name, number)
            summary.descriptions_stored += 1

        summary.duration_ms = (time.monotonic() - t0) * 1000
        logger.info(
            "Loaded %s: %d descriptions stored, %d dropped in %.0fms",
            name, summary.descriptions_stored,
            summary.descriptions_dropped, summary.duration_ms,
        )
        return summary

    def _add_fact(self, fact: Fact) -> bool:
        """Intern ``fact`` and index it. Returns False if already present."""
        if fact.text in self._facts:
            return False
        self._facts[fact.text] = fact
        self._by_predicate.setdefault(fact.predicate, set()).add(fact)
        self._by_arg2.setdefault(fact.arg2, set()).add(fact)
        return True

    def _load_description_fact(
        self, fact: Fact, name: str, number: int, summary: LoadSummary
    ) -> None:
        # Check before storing: descriptions never create index entries
        if not self.is_referenced(fact.arg2):
            summary.descriptions_dropped += 1
            return
        if fact.shape is FactShape.STRING:
            self._store_description(fact.arg2, fact.value, fact.text, name, number)
        else:
            self._descriptions[fact.arg2] = fact.value
        summary.descriptions_stored += 1

    def _store_description(
        self, subject: str, escaped: str, line: str, name: str, number: int
    ) -> None:
        try:
            self._descriptions[subject] = from_escaped_string(escaped)
        except ValueError as exc:
            raise FactSyntaxError(line, name, number) from exc

    # -------------------------------------------------------------- #
    #  Queries                                                         #
    # -------------------------------------------------------------- #

    def facts_by_predicate(self, predicate: str) -> frozenset[Fact]:
        """Return the facts with ``predicate``; empty if none."""
        return frozenset(self._by_predicate.get(predicate, ()))

    def predicates(self) -> list[str]:
        """Return all indexed predicates, sorted."""
        return sorted(self._by_predicate)

    def is_referenced(self, term: str) -> bool:
        return term in self._by_arg2

    def find_first_matching(
        self,
        predicate: str,
        pattern: Union[str, re.Pattern],
        group: int,
        expected: str,
    ) -> Optional[re.Match]:
        """Find one fact whose text matches ``pattern`` with a given group.

        Searches the facts of ``predicate`` and returns the first match
        whose ``group`` equals ``expected``. If several facts qualify,
        which one is returned is unspecified.

        Args:
            predicate: Predicate whose facts are searched.
            pattern: Regex (string or compiled) applied with ``search``.
            group: Group number to compare.
            expected: Required value of that group.

        Returns:
            The ``re.Match`` for the fact text, or None.
        """
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        for fact in self._by_predicate.get(predicate, ()):
            match = pattern.search(fact.text)
            if match and match.group(group) == expected:
                return match
        return None

    def description(self, subject: str) -> Optional[str]:
        return self._descriptions.get(subject)

    def title(self, subject: str) -> str:
        """Display text for ``subject``, falling back to the raw identifier."""
        return self._descriptions.get(subject, subject)

    @property
    def description_count(self) -> int:
        return len(self._descriptions)
