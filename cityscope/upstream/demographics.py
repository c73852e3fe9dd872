from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from cityscope.errors import MissingParameter
from .base import Failure, UpstreamClient, UpstreamResult, _opt_float


@dataclass(frozen=True)
class DemographicsReading:
    population: Optional[int]
    elevation_m: Optional[float]


class DemographicsClient(UpstreamClient[DemographicsReading]):
    """
    GeoDB Cities (RapidAPI) lookup by name prefix + country code.
    Takes the first match; an empty match list is a reading with nothing in it.
    """

    name = "demographics"

    def __init__(self, http: httpx.AsyncClient, base_url: str, api_key: str, host: str, timeout: float = 10.0):
        super().__init__(http, base_url, timeout)
        self.api_key = api_key
        self.host = host

    async def fetch(self, city: str, country_code: str) -> UpstreamResult[DemographicsReading]:
        city = (city or "").strip()
        country_code = (country_code or "").strip()
        if not city:
            return Failure(MissingParameter("city"))
        if not country_code:
            return Failure(MissingParameter("countryCode"))
        return await self._get(
            {"namePrefix": city, "countryIds": country_code},
            headers={"X-RapidAPI-Key": self.api_key, "X-RapidAPI-Host": self.host},
        )

    def parse(self, body: dict) -> DemographicsReading:
        matches = body["data"]
        if not matches:
            return DemographicsReading(population=None, elevation_m=None)
        first = matches[0]
        pop = first.get("population")
        return DemographicsReading(
            population=None if pop is None else int(pop),
            elevation_m=_opt_float(first.get("elevationMeters")),
        )
