"""Pydantic data models — the result shapes returned by every lookup.

Field names are snake_case in Python and camelCase on the wire
(``model_dump(by_alias=True)``), matching the public tool output.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# vPIC attribute names used for identity resolution and validity.
MAKE = "Make"
MODEL = "Model"
MODEL_YEAR = "Model Year"
ERROR_CODE = "Error Code"
ERROR_TEXT = "Error Text"

CleanedSpec = dict[str, str]


class LookupModel(BaseModel):
    """Base for all result shapes — camelCase aliases, populate by field name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())

    def to_output(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class VehicleIdentity(LookupModel):
    """Make, model, and model year resolved from a decode."""

    make: str
    model: str
    model_year: str

    @classmethod
    def from_specs(cls, specs: CleanedSpec) -> Optional["VehicleIdentity"]:
        """Return the identity, or ``None`` if any of the three fields is missing."""
        make = specs.get(MAKE)
        model = specs.get(MODEL)
        year = specs.get(MODEL_YEAR)
        if not make or not model or not year:
            return None
        return cls(make=make, model=model, model_year=year)

    @property
    def label(self) -> str:
        return f"{self.model_year} {self.make} {self.model}"


class VehicleSummary(LookupModel):
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[str] = None
    trim: Optional[str] = None
    body_class: Optional[str] = None
    vehicle_type: Optional[str] = None
    doors: Optional[str] = None


class EngineSummary(LookupModel):
    displacement: Optional[str] = None
    cylinders: Optional[str] = None
    fuel_type: Optional[str] = None
    horsepower: Optional[str] = None


class ManufacturerSummary(LookupModel):
    name: Optional[str] = None
    plant_city: Optional[str] = None
    plant_country: Optional[str] = None


class SafetySummary(LookupModel):
    airbags: Optional[str] = None
    abs: Optional[str] = None


class DecodedVin(LookupModel):
    """Result of a VIN decode.

    Decode problems reported by vPIC itself are data here (``is_valid=False``
    plus the upstream ``error_message``), never an exception.
    """

    vin: str
    is_valid: bool
    error_message: Optional[str] = None
    vehicle: VehicleSummary
    engine: EngineSummary
    manufacturer: ManufacturerSummary
    safety: SafetySummary
    specs: CleanedSpec = Field(default_factory=dict, description="Every non-empty decoded attribute")
    fetched_at: datetime


class RecallRecord(LookupModel):
    campaign_number: Optional[str] = None
    component: Optional[str] = None
    summary: Optional[str] = None
    consequence: Optional[str] = None
    remedy: Optional[str] = None
    manufacturer: Optional[str] = None


class VinRecalls(LookupModel):
    """Recalls for a VIN, looked up through its decoded make/model/year."""

    vin: str
    vehicle: Optional[str] = Field(None, description="'{year} {make} {model}' when the VIN resolved")
    recall_count: int = Field(0, description="Upstream recall rows before truncation")
    recalls: list[RecallRecord] = Field(default_factory=list)
    error: Optional[str] = None
    fetched_at: datetime


class ModelCatalog(LookupModel):
    make: str
    model_count: int
    models: list[Optional[str]]
    fetched_at: datetime


class ComplaintRecord(LookupModel):
    id: Optional[int] = None
    component: Optional[str] = None
    summary: Optional[str] = None
    crash: Optional[bool] = None
    fire: Optional[bool] = None
    injuries: Optional[int] = None
    date_received: Optional[str] = None


class VehicleComplaints(LookupModel):
    vehicle: str
    complaint_count: int = Field(description="Upstream complaint rows before truncation")
    complaints: list[ComplaintRecord]
    fetched_at: datetime


class ComparisonRow(LookupModel):
    vin: str
    year: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    trim: Optional[str] = None
    body_class: Optional[str] = None
    engine: Optional[str] = None
    fuel_type: Optional[str] = None
    manufacturer: Optional[str] = None
    plant_country: Optional[str] = None
    recall_count: int = Field(0, description="0 when the recall-count lookup failed")


class VehicleComparison(LookupModel):
    comparison: list[ComparisonRow]
    compared_at: datetime


class VehicleOverview(LookupModel):
    total_makes: int
    popular_makes: list[str]
    capabilities: list[str]
    data_source: str
    fetched_at: datetime
