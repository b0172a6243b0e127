"""Lookup orchestration over the NHTSA clients.

Each public coroutine is one lookup operation. It owns the sequencing of its
upstream calls and decides, per call site, whether an ``UpstreamError``
fails the whole lookup or degrades to an empty/zero result:

- VIN decodes, model catalogs, complaints: fail.
- Recall rows for ``recalls_by_vin`` (phase 2): degrade to no recalls.
- Per-VIN recall counts inside ``compare_vehicles``: degrade to 0 for that VIN only.

Every coroutine accepts an optional ``httpx.AsyncClient``; when omitted, a
client is opened for the duration of the lookup.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

import httpx

from .clients import complaints, http, recalls, vpic
from .clients.http import UpstreamError
from .models import (
    ERROR_CODE,
    ERROR_TEXT,
    CleanedSpec,
    ComparisonRow,
    DecodedVin,
    ModelCatalog,
    VehicleComparison,
    VehicleComplaints,
    VehicleIdentity,
    VehicleOverview,
    VinRecalls,
)
from .normalize import (
    clean_vin_results,
    comparison_row,
    engine_summary,
    manufacturer_summary,
    normalize_complaints,
    normalize_recalls,
    safety_summary,
    vehicle_summary,
)

logger = logging.getLogger(__name__)

POPULAR_MAKES = [
    "Toyota", "Ford", "Honda", "Chevrolet", "Tesla",
    "BMW", "Mercedes-Benz", "Audi", "Volkswagen", "Nissan",
]

CAPABILITIES = [
    "VIN decoding - Get full vehicle specs from any 17-digit VIN",
    "Safety recalls - Check open recalls by VIN or make/model/year",
    "Complaints - View consumer complaints by make/model/year",
    "Makes catalog - All vehicle manufacturers",
    "Models lookup - Models by make",
]

DATA_SOURCE = "NHTSA (National Highway Traffic Safety Administration)"

UNRESOLVED_VIN_MESSAGE = "Could not decode VIN to get vehicle details"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@asynccontextmanager
async def _client_scope(client: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with http.new_client() as owned:
        yield owned


async def _decode_specs(client: httpx.AsyncClient, vin: str) -> CleanedSpec:
    results = await vpic.decode_vin(client, vin)
    return clean_vin_results(results)


async def overview(client: Optional[httpx.AsyncClient] = None) -> VehicleOverview:
    """Size of the make catalog plus a static description of what can be looked up."""
    async with _client_scope(client) as c:
        makes = await vpic.fetch_all_makes(c)
    return VehicleOverview(
        total_makes=len(makes),
        popular_makes=POPULAR_MAKES,
        capabilities=CAPABILITIES,
        data_source=DATA_SOURCE,
        fetched_at=_now(),
    )


async def decode_vin(vin: str, client: Optional[httpx.AsyncClient] = None) -> DecodedVin:
    """Decode a VIN into grouped specs.

    An "Error Code" other than "0" in the decode marks the VIN invalid; it is
    reported in the result, not raised.
    """
    vin = vin.upper()
    async with _client_scope(client) as c:
        specs = await _decode_specs(c, vin)
    return DecodedVin(
        vin=vin,
        is_valid=specs.get(ERROR_CODE) == "0",
        error_message=specs.get(ERROR_TEXT),
        vehicle=vehicle_summary(specs),
        engine=engine_summary(specs),
        manufacturer=manufacturer_summary(specs),
        safety=safety_summary(specs),
        specs=specs,
        fetched_at=_now(),
    )


async def recalls_by_vin(vin: str, client: Optional[httpx.AsyncClient] = None) -> VinRecalls:
    """Recalls for a VIN via its decoded make/model/year.

    Phase 1 decodes the VIN; a decode failure fails the lookup. If make, model,
    or model year is missing, no recall query is made. Phase 2 queries recalls
    with lower-cased make/model and the decoded year string; if that call
    fails the VIN is reported with no recalls.
    """
    vin = vin.upper()
    async with _client_scope(client) as c:
        specs = await _decode_specs(c, vin)
        identity = VehicleIdentity.from_specs(specs)
        if identity is None:
            return VinRecalls(
                vin=vin,
                error=UNRESOLVED_VIN_MESSAGE,
                fetched_at=_now(),
            )

        try:
            rows = await recalls.fetch_recalls_by_vehicle(
                c,
                identity.make.lower(),
                identity.model.lower(),
                identity.model_year,
            )
        except UpstreamError as exc:
            logger.warning("Recall lookup failed for %s (%s): %s", vin, identity.label, exc)
            rows = []

    return VinRecalls(
        vin=vin,
        vehicle=identity.label,
        recall_count=len(rows),
        recalls=normalize_recalls(rows),
        fetched_at=_now(),
    )


async def models_for_make(make: str, client: Optional[httpx.AsyncClient] = None) -> ModelCatalog:
    """Model names for a make, one per upstream row in upstream order (null when a row has no name)."""
    async with _client_scope(client) as c:
        rows = await vpic.fetch_models_for_make(c, make)
    models = [r.get("Model_Name") for r in rows]
    return ModelCatalog(
        make=make,
        model_count=len(models),
        models=models,
        fetched_at=_now(),
    )


async def complaints_by_vehicle(
    make: str,
    model: str,
    year: int,
    client: Optional[httpx.AsyncClient] = None,
) -> VehicleComplaints:
    """Consumer complaints for a make/model/year, first 20 with summaries cut to 500 chars."""
    async with _client_scope(client) as c:
        rows = await complaints.fetch_complaints_by_vehicle(c, make, model, year)
    return VehicleComplaints(
        vehicle=f"{year} {make} {model}",
        complaint_count=len(rows),
        complaints=normalize_complaints(rows),
        fetched_at=_now(),
    )


async def _recall_count_by_vin(client: httpx.AsyncClient, vin: str) -> int:
    try:
        rows = await recalls.fetch_recalls_by_vin(client, vin)
    except UpstreamError as exc:
        logger.warning("Recall count lookup failed for %s: %s", vin, exc)
        return 0
    return len(rows)


async def _compare_row(client: httpx.AsyncClient, vin: str) -> ComparisonRow:
    vin = vin.upper()
    specs = await _decode_specs(client, vin)
    recall_count = await _recall_count_by_vin(client, vin)
    return comparison_row(vin, specs, recall_count)


async def compare_vehicles(
    vins: list[str],
    client: Optional[httpx.AsyncClient] = None,
) -> VehicleComparison:
    """Side-by-side specs and recall counts for several VINs.

    One pipeline per VIN runs concurrently (decode, then recall count by VIN).
    Rows come back in input order. A decode failure for any VIN fails the
    comparison once every pipeline has finished; a recall-count failure only
    zeroes that VIN's count.
    """
    async with _client_scope(client) as c:
        results = await asyncio.gather(
            *(_compare_row(c, vin) for vin in vins),
            return_exceptions=True,
        )

    # Every pipeline has finished; the first failure in input order fails the comparison.
    rows: list[ComparisonRow] = []
    for vin, result in zip(vins, results):
        if isinstance(result, BaseException):
            logger.warning("Compare failed for %s: %s", vin.upper(), result)
            raise result
        rows.append(result)
    return VehicleComparison(comparison=rows, compared_at=_now())
