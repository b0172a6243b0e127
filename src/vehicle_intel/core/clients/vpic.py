"""NHTSA vPIC (Product Information Catalog) API client.

API docs: https://vpic.nhtsa.dot.gov/api/
No authentication required.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from .http import fetch_json

logger = logging.getLogger(__name__)

API_BASE = "https://vpic.nhtsa.dot.gov/api/vehicles"


async def decode_vin(client: httpx.AsyncClient, vin: str) -> list[dict]:
    """Decode a VIN into vPIC's raw ``{Variable, Value}`` attribute list."""
    data = await fetch_json(client, f"{API_BASE}/decodevin/{quote(vin, safe='')}", params={"format": "json"})
    return data.get("Results") or []


async def fetch_all_makes(client: httpx.AsyncClient) -> list[dict]:
    """Fetch every make known to vPIC."""
    data = await fetch_json(client, f"{API_BASE}/GetAllMakes", params={"format": "json"})
    return data.get("Results") or []


async def fetch_models_for_make(client: httpx.AsyncClient, make: str) -> list[dict]:
    """Fetch ``{Make_Name, Model_Name}`` rows for a make, in upstream order."""
    data = await fetch_json(
        client,
        f"{API_BASE}/GetModelsForMake/{quote(make, safe='')}",
        params={"format": "json"},
    )
    return data.get("Results") or []
