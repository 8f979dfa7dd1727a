"""Pydantic models for HTTP API responses."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class EventResponse(BaseModel):
    """An event interval overlapping a day."""
    event: str = Field(..., description="Event term, e.g. Q12345")
    title: str = Field(..., description="Description, or the event term if none")
    start: datetime = Field(..., description="Start in the requested zone")
    end: datetime = Field(..., description="End in the requested zone")
    start_utc_millis: int
    end_utc_millis: int


class DayResponse(BaseModel):
    """Events overlapping one calendar day."""
    day: date
    time_zone: str
    events: list[EventResponse]


class WeekResponse(BaseModel):
    """Seven consecutive days starting at the configured week start."""
    time_zone: str
    start_of_week: str
    days: list[DayResponse]


class DescriptionResponse(BaseModel):
    subject: str
    description: str


class FactsResponse(BaseModel):
    """Facts of one predicate, sorted by text."""
    predicate: str
    facts: list[str]


class RuleResponse(BaseModel):
    antecedent: str
    consequent: str


class ScenarioInputResponse(BaseModel):
    """Assumptions and rules for the argumentation engine."""
    assumptions: list[str]
    rules: list[RuleResponse]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    fact_count: int
    description_count: int
    predicates: list[str]
    cached_zone: Optional[str] = None
    version: str = "0.1.0"
