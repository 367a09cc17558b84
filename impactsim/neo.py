"""
NASA NeoWs client for real near-Earth objects.

Uses the NeoWs REST API directly with httpx and turns catalogue entries
into impact scenarios.
"""

import os
import httpx
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from dotenv import load_dotenv

from .asteroid import AsteroidType, sphere_mass_from_diameter
from .scenarios import ScenarioParams

# Load environment variables
load_dotenv()


DEFAULT_NEO_DIAMETER_M = 1000.0
DEFAULT_NEO_DENSITY = 3000.0
DEMO_API_KEY = "DEMO_KEY"


@dataclass
class NEO:
    """A near-Earth object from the catalogue."""
    id: str
    name: str
    estimated_diameter_m: float = DEFAULT_NEO_DIAMETER_M
    is_potentially_hazardous: bool = False
    absolute_magnitude_h: Optional[float] = None
    nasa_jpl_url: Optional[str] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> 'NEO':
        """
        Build from a NeoWs object record.

        The diameter is the mean of the catalogue's min/max estimate in
        meters, or 1000 m when the record has none.
        """
        meters = (item.get("estimated_diameter") or {}).get("meters")
        if meters:
            diameter = (meters["estimated_diameter_min"] + meters["estimated_diameter_max"]) / 2
        else:
            diameter = DEFAULT_NEO_DIAMETER_M

        return cls(
            id=str(item["id"]),
            name=item.get("name", ""),
            estimated_diameter_m=diameter,
            is_potentially_hazardous=bool(item.get("is_potentially_hazardous_asteroid")),
            absolute_magnitude_h=item.get("absolute_magnitude_h"),
            nasa_jpl_url=item.get("nasa_jpl_url"),
        )

    def to_scenario(
        self,
        base: Optional[ScenarioParams] = None,
        density: float = DEFAULT_NEO_DENSITY
    ) -> ScenarioParams:
        """
        Scenario for this object with a spherical mass estimate.

        Args:
            base: Scenario supplying entry conditions and target (defaults used if None)
            density: Assumed bulk density (kg/m^3)
        """
        data = (base or ScenarioParams(asteroid_type=AsteroidType.ROCKY)).to_dict()
        data["diameter_m"] = self.estimated_diameter_m
        data["mass_kg"] = sphere_mass_from_diameter(self.estimated_diameter_m, density)
        return ScenarioParams.from_dict(data)


class NEOClient:
    """
    Client for the NeoWs browse and lookup endpoints.

    Usage:
        client = NEOClient()
        for neo in client.fetch_neos(page=0):
            print(neo.name, neo.estimated_diameter_m)
    """

    BASE_URL = "https://api.nasa.gov/neo/rest/v1"

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the NEO client.

        Args:
            api_key: NASA API key (defaults to NASA_API_KEY env var, then DEMO_KEY)
            client: Preconfigured httpx client, e.g. with a mock transport
        """
        self.api_key = api_key or os.getenv("NASA_API_KEY")
        if not self.api_key:
            print("[NEO] NASA_API_KEY not set, falling back to DEMO_KEY rate limits")
            self.api_key = DEMO_API_KEY

        self._client = client or httpx.Client(timeout=30.0)

    def fetch_neos(self, page: int = 0, size: int = 20) -> List[NEO]:
        """
        Fetch one page of the NEO catalogue.

        Args:
            page: Zero-based page index
            size: Objects per page

        Returns:
            List of NEO records

        Raises:
            httpx.HTTPStatusError: If the API answers with an error status.
        """
        response = self._client.get(
            f"{self.BASE_URL}/neo/browse",
            params={"page": page, "size": size, "api_key": self.api_key},
        )
        response.raise_for_status()
        data = response.json()

        items = data.get("near_earth_objects") or []
        return [NEO.from_api(item) for item in items]

    def fetch_neo_by_id(self, neo_id: str) -> Optional[NEO]:
        """
        Look up a single object.

        Returns:
            The NEO, or None if the API does not answer with success.
        """
        response = self._client.get(
            f"{self.BASE_URL}/neo/{quote(str(neo_id), safe='')}",
            params={"api_key": self.api_key},
        )
        if not response.is_success:
            return None
        return NEO.from_api(response.json())

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()
