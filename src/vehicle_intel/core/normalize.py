"""Normalization of raw NHTSA rows into typed records.

All functions here are pure.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .models import (
    CleanedSpec,
    ComparisonRow,
    ComplaintRecord,
    EngineSummary,
    ManufacturerSummary,
    RecallRecord,
    SafetySummary,
    VehicleSummary,
)

# The only two values treated as "no data" in a vPIC decode.
NOT_APPLICABLE = "Not Applicable"
SUPPRESSED_VALUES = frozenset({"", NOT_APPLICABLE})

MAX_ITEMS = 20
MAX_SUMMARY_CHARS = 500


def clean_vin_results(results: Iterable[dict]) -> CleanedSpec:
    """Collapse a vPIC ``{Variable, Value}`` list into a name -> value mapping.

    Entries whose value is empty, missing, or "Not Applicable" are dropped
    entirely. A repeated variable keeps its last value.
    """
    cleaned: CleanedSpec = {}
    for item in results:
        value = item.get("Value")
        if value is None or value in SUPPRESSED_VALUES:
            continue
        cleaned[item["Variable"]] = value
    return cleaned


def vehicle_summary(specs: CleanedSpec) -> VehicleSummary:
    return VehicleSummary(
        make=specs.get("Make"),
        model=specs.get("Model"),
        year=specs.get("Model Year"),
        trim=specs.get("Trim"),
        body_class=specs.get("Body Class"),
        vehicle_type=specs.get("Vehicle Type"),
        doors=specs.get("Doors"),
    )


def engine_summary(specs: CleanedSpec) -> EngineSummary:
    return EngineSummary(
        displacement=specs.get("Displacement (L)"),
        cylinders=specs.get("Engine Number of Cylinders"),
        fuel_type=specs.get("Fuel Type - Primary"),
        horsepower=specs.get("Engine Brake (hp) From"),
    )


def manufacturer_summary(specs: CleanedSpec) -> ManufacturerSummary:
    return ManufacturerSummary(
        name=specs.get("Manufacturer Name"),
        plant_city=specs.get("Plant City"),
        plant_country=specs.get("Plant Country"),
    )


def safety_summary(specs: CleanedSpec) -> SafetySummary:
    return SafetySummary(
        airbags=specs.get("Air Bag Loc Front"),
        abs=specs.get("Brake System Type"),
    )


def engine_label(specs: CleanedSpec) -> Optional[str]:
    """Short engine description like '2.4L 4-cyl' from whatever parts were decoded."""
    parts = []
    displacement = specs.get("Displacement (L)")
    cylinders = specs.get("Engine Number of Cylinders")
    if displacement:
        parts.append(f"{displacement}L")
    if cylinders:
        parts.append(f"{cylinders}-cyl")
    return " ".join(parts) if parts else None


def comparison_row(vin: str, specs: CleanedSpec, recall_count: int) -> ComparisonRow:
    return ComparisonRow(
        vin=vin,
        year=specs.get("Model Year"),
        make=specs.get("Make"),
        model=specs.get("Model"),
        trim=specs.get("Trim"),
        body_class=specs.get("Body Class"),
        engine=engine_label(specs),
        fuel_type=specs.get("Fuel Type - Primary"),
        manufacturer=specs.get("Manufacturer Name"),
        plant_country=specs.get("Plant Country"),
        recall_count=recall_count,
    )


def normalize_recall(row: dict) -> RecallRecord:
    return RecallRecord(
        campaign_number=row.get("NHTSACampaignNumber"),
        component=row.get("Component"),
        summary=row.get("Summary"),
        consequence=row.get("Consequence"),
        remedy=row.get("Remedy"),
        manufacturer=row.get("Manufacturer"),
    )


def normalize_complaint(row: dict) -> ComplaintRecord:
    summary = row.get("summary")
    return ComplaintRecord(
        id=row.get("odiNumber"),
        component=row.get("components"),
        summary=summary[:MAX_SUMMARY_CHARS] if summary is not None else None,
        crash=row.get("crash"),
        fire=row.get("fire"),
        injuries=row.get("injuries"),
        date_received=row.get("dateOfIncident"),
    )


def normalize_recalls(rows: list[dict]) -> list[RecallRecord]:
    """Normalize every row, then keep the first MAX_ITEMS in upstream order."""
    return [normalize_recall(r) for r in rows][:MAX_ITEMS]


def normalize_complaints(rows: list[dict]) -> list[ComplaintRecord]:
    """Normalize every row, then keep the first MAX_ITEMS in upstream order."""
    return [normalize_complaint(r) for r in rows][:MAX_ITEMS]
