"""
Tests for the NASA NeoWs client.

All HTTP traffic goes through httpx.MockTransport; nothing hits the network.
"""

import argparse
import importlib.util
import json
import pytest
from pathlib import Path

import httpx

import impactsim
from impactsim.asteroid import AsteroidType, sphere_mass_from_diameter
from impactsim.neo import DEMO_API_KEY, NEO, NEOClient
from impactsim.scenarios import ScenarioParams


APOPHIS = {
    "id": "2099942",
    "name": "99942 Apophis (2004 MN4)",
    "absolute_magnitude_h": 19.09,
    "is_potentially_hazardous_asteroid": True,
    "nasa_jpl_url": "https://ssd.jpl.nasa.gov/tools/sbdb_lookup.html#/?sstr=2099942",
    "estimated_diameter": {
        "meters": {"estimated_diameter_min": 300.0, "estimated_diameter_max": 500.0},
    },
}

NO_SIZE = {
    "id": "3000001",
    "name": "Unsized object",
}


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def requests_seen():
    return []


@pytest.fixture
def client(requests_seen):
    """NEOClient backed by a mock NeoWs API."""
    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        path = request.url.path
        if path.endswith("/neo/browse"):
            return httpx.Response(200, json={"near_earth_objects": [APOPHIS, NO_SIZE]})
        if path.endswith(f"/neo/{APOPHIS['id']}"):
            return httpx.Response(200, json=APOPHIS)
        return httpx.Response(404, json={"error": "not found"})

    http = httpx.Client(transport=httpx.MockTransport(handler))
    return NEOClient(api_key="test-key", client=http)


# =============================================================================
# NEO RECORDS
# =============================================================================

class TestNEORecord:
    """Tests for NEO.from_api and to_scenario."""

    def test_mean_diameter(self):
        neo = NEO.from_api(APOPHIS)
        assert neo.estimated_diameter_m == 400.0
        assert neo.is_potentially_hazardous
        assert neo.absolute_magnitude_h == 19.09

    def test_default_diameter(self):
        neo = NEO.from_api(NO_SIZE)
        assert neo.estimated_diameter_m == 1000.0
        assert not neo.is_potentially_hazardous
        assert neo.nasa_jpl_url is None

    def test_to_scenario_sphere_mass(self):
        scenario = NEO.from_api(APOPHIS).to_scenario()
        assert scenario.diameter_m == 400.0
        assert scenario.mass_kg == pytest.approx(sphere_mass_from_diameter(400.0, 3000))
        assert scenario.asteroid_type == AsteroidType.ROCKY
        assert scenario.is_valid

    def test_to_scenario_keeps_base(self):
        base = ScenarioParams(target_lat_deg=48.0, target_lng_deg=2.0, entry_speed_ms=17_000)
        scenario = NEO.from_api(APOPHIS).to_scenario(base, density=2000)
        assert scenario.target_lat_deg == 48.0
        assert scenario.entry_speed_ms == 17_000
        assert scenario.mass_kg == pytest.approx(sphere_mass_from_diameter(400.0, 2000))


# =============================================================================
# CLIENT
# =============================================================================

class TestNEOClient:
    """Tests for NEOClient."""

    def test_fetch_neos(self, client, requests_seen):
        neos = client.fetch_neos(page=2)
        assert [n.id for n in neos] == ["2099942", "3000001"]

        params = requests_seen[0].url.params
        assert params["page"] == "2"
        assert params["size"] == "20"
        assert params["api_key"] == "test-key"

    def test_fetch_neo_by_id(self, client):
        neo = client.fetch_neo_by_id("2099942")
        assert neo is not None
        assert neo.name.startswith("99942 Apophis")

    def test_fetch_neo_by_id_not_found(self, client):
        assert client.fetch_neo_by_id("0") is None

    def test_fetch_neo_by_id_escapes_path(self, client, requests_seen):
        """Ids are percent-encoded as a single path segment."""
        assert client.fetch_neo_by_id("a/b c") is None

        path = requests_seen[0].url.raw_path.split(b"?")[0]
        assert path.endswith(b"/neo/a%2Fb%20c")

    def test_browse_error_raises(self):
        http = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(429)))
        client = NEOClient(api_key="k", client=http)
        with pytest.raises(httpx.HTTPStatusError):
            client.fetch_neos()

    def test_empty_page(self):
        http = httpx.Client(transport=httpx.MockTransport(
            lambda r: httpx.Response(200, content=json.dumps({}).encode())
        ))
        assert NEOClient(api_key="k", client=http).fetch_neos() == []

    def test_demo_key_fallback(self, monkeypatch, capsys):
        monkeypatch.delenv("NASA_API_KEY", raising=False)
        client = NEOClient(client=httpx.Client(transport=httpx.MockTransport(
            lambda r: httpx.Response(404)
        )))
        assert client.api_key == DEMO_API_KEY
        assert "[NEO]" in capsys.readouterr().out

    def test_env_key(self, monkeypatch):
        monkeypatch.setenv("NASA_API_KEY", "from-env")
        client = NEOClient(client=httpx.Client(transport=httpx.MockTransport(
            lambda r: httpx.Response(404)
        )))
        assert client.api_key == "from-env"


# =============================================================================
# RUN_IMPACT --neo
# =============================================================================

def load_run_impact():
    """Import scripts/run_impact.py as a module."""
    path = Path(__file__).parent.parent / "scripts" / "run_impact.py"
    spec = importlib.util.spec_from_file_location("run_impact", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def cli_args(**overrides):
    values = dict(
        preset=None, json=None, neo=None, type="rocky", mass=None,
        diameter=100.0, speed=20_000.0, altitude=120_000.0,
        lat=0.0, lng=0.0, angle=45.0,
    )
    values.update(overrides)
    return argparse.Namespace(**values)


class TestRunImpactNeoSource:
    """Tests for building a scenario from a catalogue object."""

    def test_package_exports_client(self):
        assert impactsim.NEO is NEO
        assert impactsim.NEOClient is NEOClient

    def test_neo_sizes_the_impactor(self, client):
        run_impact = load_run_impact()
        params = run_impact.build_params(
            cli_args(neo="2099942", lat=40.7, lng=-74.0, type="iron"), neo_client=client
        )

        assert params.diameter_m == 400.0
        assert params.mass_kg == pytest.approx(sphere_mass_from_diameter(400.0, 7800))
        assert params.asteroid_type == AsteroidType.IRON
        assert params.target_lat_deg == 40.7
        assert params.target_lng_deg == -74.0

    def test_unknown_neo_rejected(self, client):
        run_impact = load_run_impact()
        with pytest.raises(ValueError, match="not found"):
            run_impact.build_params(cli_args(neo="0"), neo_client=client)
