"""Tests for the HTTP server."""

import pytest
from fastapi.testclient import TestClient

from nuvlworld.server.app import create_app
from nuvlworld.server.config import DataConfig, DisplayConfig, NuvlWorldConfig
from nuvlworld.server import app as app_module
from nuvlworld.services.intervals import IntervalIndex
from nuvlworld.services.world import World
from nuvlworld.testing import Q1_END, Q1_START, SAMPLE_FACTS


@pytest.fixture
def test_config():
    """Display in UTC with Monday week starts."""
    return NuvlWorldConfig(display=DisplayConfig(time_zone="UTC"))


@pytest.fixture
def client(test_config, store):
    """Create test client over the sample store."""
    # Directly set the module-level variables
    app_module._world = World(store=store, intervals=IntervalIndex(store), summaries=[])
    app_module._config = test_config

    # Create app without lifespan (the world is set manually)
    from fastapi import FastAPI
    from nuvlworld.server.routes import router

    app = FastAPI()
    app.include_router(router)

    yield TestClient(app)

    # Cleanup
    app_module._world = None
    app_module._config = None


class TestHealthEndpoint:
    """Tests for /v1/health endpoint."""

    def test_health_returns_ok(self, client):
        response = client.get("/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["fact_count"] == 7
        assert data["description_count"] == 1
        assert "subAttrOf" in data["predicates"]
        assert data["cached_zone"] is None

    def test_health_reports_cached_zone(self, client):
        client.get("/v1/days/2024-01-01", params={"tz": "Asia/Tokyo"})

        data = client.get("/v1/health").json()

        assert data["cached_zone"] == "Asia/Tokyo"

    def test_not_loaded_returns_503(self, client):
        app_module._world = None

        response = client.get("/v1/health")

        assert response.status_code == 503


class TestDayEndpoint:
    """Tests for /v1/days/{day}."""

    def test_events_for_day(self, client):
        response = client.get("/v1/days/2024-01-01")

        assert response.status_code == 200
        data = response.json()
        assert data["day"] == "2024-01-01"
        assert data["time_zone"] == "UTC"
        assert len(data["events"]) == 1
        event = data["events"][0]
        assert event["event"] == "Q1"
        assert event["title"] == "Team sync"
        assert event["start_utc_millis"] == Q1_START
        assert event["end_utc_millis"] == Q1_END

    def test_title_falls_back_to_event(self, client):
        data = client.get("/v1/days/1970-01-01").json()

        assert [e["title"] for e in data["events"]] == ["e1"]

    def test_empty_day(self, client):
        data = client.get("/v1/days/2024-01-02").json()

        assert data["events"] == []

    def test_zone_parameter(self, client):
        """00:00Z on Jan 1 is still Dec 31 in New York."""
        data = client.get(
            "/v1/days/2023-12-31", params={"tz": "America/New_York"}
        ).json()

        assert data["time_zone"] == "America/New_York"
        assert [e["event"] for e in data["events"]] == ["Q1"]
        assert data["events"][0]["start"].startswith("2023-12-31T19:00:00")

    def test_unknown_zone_returns_400(self, client):
        response = client.get("/v1/days/2024-01-01", params={"tz": "Not/AZone"})

        assert response.status_code == 400

    def test_bad_date_returns_400(self, client):
        response = client.get("/v1/days/qqqq")

        assert response.status_code == 400


class TestWeekEndpoint:

    def test_week_starts_on_configured_day(self, client):
        response = client.get("/v1/weeks/2024-01-03")

        assert response.status_code == 200
        data = response.json()
        assert data["start_of_week"] == "monday"
        assert [d["day"] for d in data["days"]][0] == "2024-01-01"
        assert len(data["days"]) == 7
        assert len(data["days"][0]["events"]) == 1
        assert all(d["events"] == [] for d in data["days"][1:])


class TestDescriptionEndpoint:

    def test_known_subject(self, client):
        response = client.get("/v1/descriptions/Q1")

        assert response.status_code == 200
        assert response.json() == {"subject": "Q1", "description": "Team sync"}

    def test_unknown_subject_returns_404(self, client):
        response = client.get("/v1/descriptions/Q9")

        assert response.status_code == 404


class TestFactsEndpoint:

    def test_facts_by_predicate(self, client):
        data = client.get("/v1/facts/implies").json()

        assert data == {
            "predicate": "implies",
            "facts": ["(implies Commute LondonWet)"],
        }

    def test_unknown_predicate_is_empty(self, client):
        data = client.get("/v1/facts/nothing").json()

        assert data["facts"] == []


class TestScenarioInputEndpoint:

    def test_assumptions_and_rules(self, client):
        data = client.get("/v1/scenario-input").json()

        assert data["assumptions"] == ["(task Commute)"]
        assert {"antecedent": "(attr LondonWet)",
                "consequent": "!(attr LondonDry)"} in data["rules"]
        assert len(data["rules"]) == 3


class TestLifespan:
    """create_app loads the configured world at startup."""

    def test_world_loaded_and_released(self, write_lines):
        path = write_lines("sample.scm", SAMPLE_FACTS)
        config = NuvlWorldConfig(data=DataConfig(
            directory=str(path.parent), fact_files=["sample.scm"],
        ))

        with TestClient(create_app(config)) as client:
            assert client.get("/").json()["service"] == "nuvl-world"
            assert client.get("/v1/health").json()["fact_count"] == 7

        assert app_module._world is None
