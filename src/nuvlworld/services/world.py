"""Factory for a loaded fact world: store plus date-overlap index."""

import logging
from dataclasses import dataclass

from ..interfaces import LoadSummary
from .fact_store import FactStore
from .intervals import IntervalIndex

logger = logging.getLogger(__name__)


@dataclass
class World:
    """A loaded store and the interval index derived from it."""
    store: FactStore
    intervals: IntervalIndex
    summaries: list[LoadSummary]


def load_world(config) -> World:
    """Load all configured inputs into a new store.

    Fact files are loaded first, in the configured order, and the
    description file last. Descriptions are only admitted for subjects
    referenced by a loaded fact, so this order is required.

    Args:
        config: A ``NuvlWorldConfig``.

    Raises:
        LoadError: If an input cannot be read.
        FactSyntaxError: If an input contains an unrecognized line.
    """
    store = FactStore()
    summaries = [store.load_facts(path) for path in config.data.fact_paths]

    descriptions = config.data.descriptions_path
    if descriptions is not None:
        summaries.append(store.load_descriptions(descriptions))

    logger.info(
        "World loaded: %d facts, %d descriptions from %d files",
        len(store), store.description_count, len(summaries),
    )
    return World(store=store, intervals=IntervalIndex(store), summaries=summaries)
