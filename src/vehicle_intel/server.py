"""Vehicle Intelligence MCP Server.

FastMCP server with six NHTSA lookup tools, two usage-analytics tools, and
an ERC-8004 registration resource.
Run: vehicle-intel-mcp
"""

from __future__ import annotations

import json
import logging
import os
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from .core import lookups
from .db import close_db, init_db
from .ledger import get_summary, get_transactions, metered

logger = logging.getLogger(__name__)

SERVICE_NAME = "vehicle-intel"
SERVICE_DESCRIPTION = (
    "Vehicle Intelligence from NHTSA - VIN decoding, safety recalls, makes/models. "
    "Official US government vehicle data for AI agents."
)
DEFAULT_PUBLIC_DOMAIN = "vehicle-intel-production.up.railway.app"

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=True)

Vin = Annotated[str, Field(min_length=17, max_length=17, description="17-character Vehicle Identification Number")]


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Configure logging and open the usage ledger."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    await init_db()
    try:
        yield
    finally:
        await close_db()


mcp = FastMCP(
    "Vehicle Intelligence",
    instructions="Decode VINs, check safety recalls, list models for a make, read consumer complaints, and compare vehicles side by side. Data from NHTSA.",
    lifespan=lifespan,
)


def _public_base_url() -> str:
    domain = os.environ.get("PUBLIC_DOMAIN", "")
    return f"https://{domain}" if domain else f"https://{DEFAULT_PUBLIC_DOMAIN}"


# ─── Registration Resource ───────────────────────────────────────────────────

REGISTRATION_URI = "vehicle-intel://registration"


def registration_document() -> dict:
    base_url = _public_base_url()
    return {
        "type": "https://eips.ethereum.org/EIPS/eip-8004#registration-v1",
        "name": SERVICE_NAME,
        "description": SERVICE_DESCRIPTION,
        "image": f"{base_url}/icon.png",
        "services": [
            {"name": "web", "endpoint": base_url},
            {"name": "A2A", "endpoint": f"{base_url}/.well-known/agent.json", "version": "0.3.0"},
        ],
        "x402Support": True,
        "active": True,
        "registrations": [],
        "supportedTrust": ["reputation"],
    }


@mcp.resource(REGISTRATION_URI, mime_type="application/json")
def registration() -> str:
    """ERC-8004 service registration document."""
    return json.dumps(registration_document())


# ─── Tool 1: Overview (free) ─────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def vehicle_overview() -> dict:
    """Free overview of the vehicle database — number of makes, popular makes, and what can be looked up."""
    async with metered("vehicle_overview"):
        result = await lookups.overview()
    return result.to_output()


# ─── Tool 2: VIN Decode ──────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def vehicle_decode_vin(vin: Vin) -> dict:
    """Decode a VIN to get full vehicle specifications — make, model, year, engine, body type, and more.

    Args:
        vin: 17-character Vehicle Identification Number.
    """
    async with metered("vehicle_decode_vin"):
        result = await lookups.decode_vin(vin)
    return result.to_output()


# ─── Tool 3: Recalls by VIN ──────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def vehicle_recalls_by_vin(vin: Vin) -> dict:
    """Check safety recalls for a VIN — decodes the VIN and looks up recalls by make/model/year.

    Args:
        vin: 17-character VIN to check for recalls.
    """
    async with metered("vehicle_recalls_by_vin"):
        result = await lookups.recalls_by_vin(vin)
    return result.to_output()


# ─── Tool 4: Models by Make ──────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def vehicle_models(make: str) -> dict:
    """Get all models for a vehicle make.

    Args:
        make: Vehicle manufacturer name (e.g., Toyota, Tesla, Ford).
    """
    async with metered("vehicle_models"):
        result = await lookups.models_for_make(make)
    return result.to_output()


# ─── Tool 5: Complaints ──────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def vehicle_complaints(make: str, model: str, year: int) -> dict:
    """Get consumer complaints for a specific vehicle make/model/year.

    Args:
        make: Vehicle make (e.g., Toyota).
        model: Vehicle model (e.g., Camry).
        year: Model year (e.g., 2020).
    """
    async with metered("vehicle_complaints"):
        result = await lookups.complaints_by_vehicle(make, model, year)
    return result.to_output()


# ─── Tool 6: Compare ─────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def vehicle_compare(
    vins: Annotated[list[Vin], Field(min_length=2, max_length=5, description="2-5 VINs to compare")],
) -> dict:
    """Compare multiple VINs side by side — specs and recall counts.

    Args:
        vins: 2-5 VINs to compare.
    """
    async with metered("vehicle_compare"):
        result = await lookups.compare_vehicles(vins)
    return result.to_output()


# ─── Tool 7: Analytics ───────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def vehicle_analytics(window_ms: Optional[int] = None) -> dict:
    """Usage and payment analytics summary from the local ledger.

    Args:
        window_ms: Only count calls from the last N milliseconds. Default: all time.
    """
    return await get_summary(window_ms)


@mcp.tool(annotations=READ_ONLY)
async def vehicle_analytics_transactions(window_ms: Optional[int] = None, limit: int = 50) -> dict:
    """Recent tool calls with their price tier, most recent first.

    Args:
        window_ms: Only list calls from the last N milliseconds. Default: all time.
        limit: Maximum number of calls to return. Default 50.
    """
    transactions = await get_transactions(window_ms, limit)
    return {"transactions": transactions}


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
