"""Input for an external assumption-based argumentation engine.

The engine that computes grounded and preferred extensions lives outside
this package. This module only turns store facts into the assumptions
and rules it consumes:

- ``(implies IN OUT)``, read as "task IN implies attr OUT", makes
  ``(task IN)`` an assumption with rules ``(task IN) -> (attr IN)``
  and ``(task IN) -> (attr OUT)``.
- ``(disjointAttrs A B)`` adds ``(attr A) -> contrary of (attr B)``.

Sentences are plain symbols, so the engine never needs store internals.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..interfaces import IFactIndex
from .classifier import TERM

IMPLIES_PATTERN = re.compile(rf"\(implies ({TERM}) ({TERM})\)", re.ASCII)
DISJOINT_PATTERN = re.compile(
    rf"\(disjointAttrs ({TERM}) ({TERM})\)", re.ASCII
)
ATTR_PATTERN = re.compile(rf"\(attr ({TERM})\)", re.ASCII)


@dataclass(frozen=True)
class Sentence:
    """A symbol, optionally negated as the contrary of that symbol."""
    symbol: str
    is_contrary: bool = False

    def __str__(self) -> str:
        return f"!{self.symbol}" if self.is_contrary else self.symbol


@dataclass(frozen=True)
class Rule:
    """``antecedent`` derives ``consequent``."""
    antecedent: Sentence
    consequent: Sentence


@dataclass
class FrameworkInput:
    assumptions: set[Sentence] = field(default_factory=set)
    rules: set[Rule] = field(default_factory=set)


def task(name: str) -> Sentence:
    return Sentence(f"(task {name})")


def attr(name: str, is_contrary: bool = False) -> Sentence:
    return Sentence(f"(attr {name})", is_contrary)


def build_framework_input(index: IFactIndex) -> FrameworkInput:
    """Collect assumptions and rules from ``implies`` and ``disjointAttrs``."""
    result = FrameworkInput()

    for fact in index.facts_by_predicate("implies"):
        match = IMPLIES_PATTERN.fullmatch(fact.text)
        if match is None:
            continue
        in_attr, out_attr = match.groups()
        result.rules.add(Rule(task(in_attr), attr(in_attr)))
        result.rules.add(Rule(task(in_attr), attr(out_attr)))
        result.assumptions.add(task(in_attr))

    for fact in index.facts_by_predicate("disjointAttrs"):
        match = DISJOINT_PATTERN.fullmatch(fact.text)
        if match is None:
            continue
        first, second = match.groups()
        result.rules.add(Rule(attr(first), attr(second, is_contrary=True)))

    return result


def attrs_of(sentences: Iterable[Sentence]) -> set[str]:
    """Names X of every non-contrary ``(attr X)`` sentence."""
    names = set()
    for sentence in sentences:
        if sentence.is_contrary:
            continue
        match = ATTR_PATTERN.fullmatch(sentence.symbol)
        if match:
            names.add(match.group(1))
    return names
