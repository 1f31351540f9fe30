"""Project wire models: the creation request and the created project."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field

from project_intake.models.base import WireModel


class ProjectStatus(str, Enum):
    """Server-side project lifecycle."""
    DETAILS_COLLECTION = "details_collection"
    SOW_GENERATION = "sow_generation"
    SOW_READY = "sow_ready"
    BUILDERS_INVITED = "builders_invited"
    QUOTES_RECEIVED = "quotes_received"
    PLANNING = "planning"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"


class PropertyAddress(WireModel):
    line1: str = ""
    line2: str | None = None
    city: str = ""
    postcode: str = ""
    country: str = "United Kingdom"


class Dimensions(WireModel):
    length: float | None = None
    width: float | None = None
    height: float | None = None


class Budget(WireModel):
    min: float | None = None
    max: float | None = None


class Requirements(WireModel):
    """What the homeowner wants built, in their own words plus optional detail."""
    description: str = ""
    dimensions: Dimensions | None = None
    materials: list[str] = Field(default_factory=list)
    timeline: str | None = None
    budget: Budget | None = None
    special_requirements: list[str] = Field(default_factory=list)


class CreateProjectRequest(WireModel):
    """Body of POST /projects."""
    property_address: PropertyAddress
    project_type: str
    requirements: Requirements
    property_assessment: dict[str, Any] | None = None


class Project(WireModel):
    id: str
    owner_id: str | None = None
    property_address: PropertyAddress | None = None
    project_type: str = ""
    status: ProjectStatus | str = ProjectStatus.DETAILS_COLLECTION
    requirements: Requirements | None = None
    sow_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
