"""API route handlers.

Read-only display endpoints over a loaded world. The store is loaded
once at startup; the date overlap cache rebuilds inside the first
request that names a new time zone.
"""

from datetime import date, tzinfo
from typing import Optional
from zoneinfo import ZoneInfoNotFoundError

from fastapi import APIRouter, HTTPException, Depends

from ..services.intervals import resolve_zone, to_local_datetime
from ..services.scenarios import build_framework_input
from ..services.temporal import resolve_date, week_dates
from ..services.world import World
from .config import NuvlWorldConfig
from .models import (
    DayResponse,
    DescriptionResponse,
    EventResponse,
    FactsResponse,
    HealthResponse,
    RuleResponse,
    ScenarioInputResponse,
    WeekResponse,
)

router = APIRouter(prefix="/v1", tags=["calendar"])


def get_world() -> World:
    """Dependency injection for the loaded world.

    This is set by the app during startup.
    """
    from .app import _world
    if _world is None:
        raise HTTPException(status_code=503, detail="World not loaded")
    return _world


def get_config() -> NuvlWorldConfig:
    """Get the active configuration."""
    from .app import _config
    return _config or NuvlWorldConfig()


def _zone_or_400(name: str) -> tzinfo:
    try:
        return resolve_zone(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(status_code=400, detail=f"Unknown time zone: {name}")


def _day_or_400(expression: str, zone: tzinfo) -> date:
    try:
        return resolve_date(expression, zone)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _day_response(world: World, day: date, zone: tzinfo, zone_name: str) -> DayResponse:
    intervals = sorted(
        world.intervals.overlaps_date(day, zone),
        key=lambda i: (i.start_utc_millis, i.event),
    )
    return DayResponse(
        day=day,
        time_zone=zone_name,
        events=[
            EventResponse(
                event=i.event,
                title=world.store.title(i.event),
                start=to_local_datetime(i.start_utc_millis, zone),
                end=to_local_datetime(i.end_utc_millis, zone),
                start_utc_millis=i.start_utc_millis,
                end_utc_millis=i.end_utc_millis,
            )
            for i in intervals
        ],
    )


@router.get("/health", response_model=HealthResponse)
async def health(world: World = Depends(get_world)) -> HealthResponse:
    """Health check with store statistics."""
    zone = world.intervals.zone
    return HealthResponse(
        status="ok",
        fact_count=len(world.store),
        description_count=world.store.description_count,
        predicates=world.store.predicates(),
        cached_zone=str(getattr(zone, "key", zone)) if zone is not None else None,
    )


@router.get("/days/{day}", response_model=DayResponse)
async def get_day(
    day: str,
    tz: Optional[str] = None,
    world: World = Depends(get_world),
    config: NuvlWorldConfig = Depends(get_config),
) -> DayResponse:
    """Events overlapping a day (ISO date or expression like "today")."""
    zone_name = tz or config.display.time_zone
    zone = _zone_or_400(zone_name)
    return _day_response(world, _day_or_400(day, zone), zone, zone_name)


@router.get("/weeks/{day}", response_model=WeekResponse)
async def get_week(
    day: str,
    tz: Optional[str] = None,
    world: World = Depends(get_world),
    config: NuvlWorldConfig = Depends(get_config),
) -> WeekResponse:
    """Events for each day of the week containing ``day``."""
    zone_name = tz or config.display.time_zone
    zone = _zone_or_400(zone_name)
    start_of_week = config.display.start_of_week
    return WeekResponse(
        time_zone=zone_name,
        start_of_week=start_of_week,
        days=[
            _day_response(world, d, zone, zone_name)
            for d in week_dates(_day_or_400(day, zone), start_of_week)
        ],
    )


@router.get("/descriptions/{subject}", response_model=DescriptionResponse)
async def get_description(
    subject: str,
    world: World = Depends(get_world),
) -> DescriptionResponse:
    """Display text for a subject."""
    text = world.store.description(subject)
    if text is None:
        raise HTTPException(status_code=404, detail=f"No description for {subject}")
    return DescriptionResponse(subject=subject, description=text)


@router.get("/facts/{predicate}", response_model=FactsResponse)
async def get_facts(
    predicate: str,
    world: World = Depends(get_world),
) -> FactsResponse:
    """All facts with a predicate."""
    facts = sorted(f.text for f in world.store.facts_by_predicate(predicate))
    return FactsResponse(predicate=predicate, facts=facts)


@router.get("/scenario-input", response_model=ScenarioInputResponse)
async def get_scenario_input(
    world: World = Depends(get_world),
) -> ScenarioInputResponse:
    """Assumptions and rules for the argumentation engine."""
    framework = build_framework_input(world.store)
    return ScenarioInputResponse(
        assumptions=sorted(str(s) for s in framework.assumptions),
        rules=sorted(
            (
                RuleResponse(antecedent=str(r.antecedent), consequent=str(r.consequent))
                for r in framework.rules
            ),
            key=lambda r: (r.antecedent, r.consequent),
        ),
    )
