"""NHTSA consumer complaints API client.

API docs: https://www.nhtsa.gov/nhtsa-datasets-and-apis#complaints
"""

from __future__ import annotations

import logging

import httpx

from .http import fetch_json

logger = logging.getLogger(__name__)

API_BASE = "https://api.nhtsa.gov/complaints/complaintsByVehicle"


async def fetch_complaints_by_vehicle(
    client: httpx.AsyncClient,
    make: str,
    model: str,
    year: int,
) -> list[dict]:
    """Fetch raw complaint rows for a make/model/year, in upstream order."""
    params = {"make": make, "model": model, "modelYear": str(year)}
    data = await fetch_json(client, API_BASE, params=params)
    return data.get("results") or []
