"""NHTSA recalls API client.

API docs: https://www.nhtsa.gov/nhtsa-datasets-and-apis#recalls
Two query paths over the same endpoint: by make/model/year and by VIN.
They are kept separate on purpose; they are not guaranteed to hit the same dataset.
"""

from __future__ import annotations

import logging

import httpx

from .http import fetch_json

logger = logging.getLogger(__name__)

API_BASE = "https://api.nhtsa.gov/recalls/recallsByVehicle"


async def fetch_recalls_by_vehicle(
    client: httpx.AsyncClient,
    make: str,
    model: str,
    model_year: str,
) -> list[dict]:
    """Fetch raw recall rows for a make/model/year, as given."""
    params = {"make": make, "model": model, "modelYear": model_year}
    data = await fetch_json(client, API_BASE, params=params)
    return data.get("results") or []


async def fetch_recalls_by_vin(client: httpx.AsyncClient, vin: str) -> list[dict]:
    """Fetch raw recall rows for a single VIN."""
    data = await fetch_json(client, API_BASE, params={"vin": vin})
    return data.get("results") or []
