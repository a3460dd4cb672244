"""Pydantic v2 validation models for rows read by the EML pipeline.

Each model maps directly to the row shape of one relational lookup in
``src.eml.queries``. Rows are validated at the fetch boundary so a
schema drift in the database surfaces as a ``ValidationError`` at read
time, not as a malformed EML document downstream.

Lookups modeled:
- data_package -> DataPackageRecord
- occurrence_submission -> OccurrenceSubmissionRecord
- survey_status -> SurveyStatusRecord
- survey -> SurveyRecord
- project -> ProjectRecord
- project_funding_source (+ category, source names) -> FundingSourceRecord
- ST_Envelope extrema -> BoundingBoxRecord
- ST_DumpPoints aggregation -> PolygonRecord
- wldtaxonomic_units -> TaxonomicUnitRecord
- IUCN classification levels -> IucnConservationActionRecord
- stakeholder_partnership -> StakeholderPartnershipRecord

All models allow extra columns because several lookups select ``*``.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

# Date-like columns arrive as driver datetimes or as ISO strings from fakes
DateLike = Union[datetime, date, str]


def _uuid_to_str(value):
    if isinstance(value, UUID):
        return str(value)
    return value


# ── Identity rows ──

class DataPackageRecord(BaseModel):
    """The data package being described. Only its UUID is rendered."""

    data_package_id: Optional[int] = Field(
        default=None,
        description="Primary key of the data package",
        examples=[1],
    )
    uuid: str = Field(
        ...,
        description="Data package UUID, rendered as the EML packageId",
        examples=["0f4c3a9e-6f1b-4a5e-9d0b-2a8c4a1c6b11"],
    )

    model_config = {"extra": "allow"}

    @field_validator("uuid", mode="before")
    @classmethod
    def uuid_as_str(cls, v):
        return _uuid_to_str(v)


class OccurrenceSubmissionRecord(BaseModel):
    """Occurrence submission bound to a data package."""

    occurrence_submission_id: int = Field(
        ...,
        description="Primary key of the occurrence submission",
    )
    survey_id: int = Field(
        ...,
        description="Survey the submission belongs to",
    )
    output_key: Optional[str] = Field(
        default=None,
        description="Storage key of the processed Darwin Core archive",
        examples=["projects/1/surveys/2/submissions/3/output.zip"],
    )

    model_config = {"extra": "allow"}


class SurveyStatusRecord(BaseModel):
    """Published status event for an occurrence submission."""

    occurrence_submission_id: Optional[int] = None
    status_event_timestamp: DateLike = Field(
        ...,
        description="Timestamp of the publish event; truncated to a date for pubDate",
    )

    model_config = {"extra": "allow"}


# ── Survey / Project ──

class SurveyRecord(BaseModel):
    """Survey row. Rendered as the main EML ``project`` entry."""

    survey_id: int
    project_id: int
    uuid: str = Field(..., description="Survey UUID")
    name: Optional[str] = None
    objectives: Optional[str] = None
    start_date: Optional[DateLike] = None
    end_date: Optional[DateLike] = None
    lead_first_name: Optional[str] = None
    lead_last_name: Optional[str] = None
    location_name: Optional[str] = None
    location_description: Optional[str] = None

    model_config = {"extra": "allow"}

    @field_validator("uuid", mode="before")
    @classmethod
    def uuid_as_str(cls, v):
        return _uuid_to_str(v)


class ProjectRecord(BaseModel):
    """Project row. Rendered as the EML ``relatedProject`` entry.

    ``coordinator_public`` gates whether the coordinator's personal
    details or the organizational fallback identity is rendered.
    """

    project_id: int
    uuid: str = Field(..., description="Project UUID")
    name: Optional[str] = None
    objectives: Optional[str] = None
    caveats: Optional[str] = None
    comments: Optional[str] = None
    coordinator_first_name: Optional[str] = None
    coordinator_last_name: Optional[str] = None
    coordinator_email_address: Optional[str] = None
    coordinator_agency_name: Optional[str] = None
    coordinator_public: bool = Field(
        default=False,
        description="Whether coordinator contact details may be published",
    )
    location_name: Optional[str] = None
    location_description: Optional[str] = None

    model_config = {"extra": "allow"}

    @field_validator("uuid", mode="before")
    @classmethod
    def uuid_as_str(cls, v):
        return _uuid_to_str(v)

    @field_validator("coordinator_public", mode="before")
    @classmethod
    def null_is_private(cls, v):
        return False if v is None else v


# ── Funding ──

class FundingSourceRecord(BaseModel):
    """Funding source joined with its investment action category."""

    funding_source_name: Optional[str] = Field(
        default=None,
        description="Name of the funding agency",
        examples=["Habitat Conservation Trust Foundation"],
    )
    investment_action_category_name: Optional[str] = Field(
        default=None,
        description="Investment action category under the funding source",
        examples=["Action"],
    )
    funding_source_project_id: Optional[Union[str, int]] = Field(
        default=None,
        description="Funding agency's identifier for the funded project",
    )
    funding_amount: Optional[Union[Decimal, int, float]] = None
    funding_start_date: Optional[DateLike] = None
    funding_end_date: Optional[DateLike] = None

    model_config = {"extra": "allow"}


# ── Geometry ──

class BoundingBoxRecord(BaseModel):
    """Envelope extrema of a survey or project geometry.

    All values are None when the entity has no geometry.
    """

    st_xmax: Optional[float] = None
    st_ymax: Optional[float] = None
    st_xmin: Optional[float] = None
    st_ymin: Optional[float] = None

    model_config = {"extra": "allow"}


class PolygonRecord(BaseModel):
    """One polygon ring as an ordered list of ``[lat, lon]`` pairs."""

    points: list[list[float]] = Field(
        default_factory=list,
        description="Ring points in path order, each [latitude, longitude]",
        examples=[[[49.1, -123.2], [49.2, -123.1], [49.1, -123.2]]],
    )

    model_config = {"extra": "allow"}


# ── Taxonomy / classification ──

class TaxonomicUnitRecord(BaseModel):
    """Focal species row from the taxonomic units table."""

    tty_name: Optional[str] = Field(default=None, examples=["SPECIES"])
    unit_name1: Optional[str] = Field(default=None, examples=["Alces"])
    unit_name2: Optional[str] = Field(default=None, examples=["alces"])
    english_name: Optional[str] = Field(default=None, examples=["Moose"])
    code: Optional[str] = Field(default=None, examples=["M-ALAM"])

    model_config = {"extra": "allow"}


class IucnConservationActionRecord(BaseModel):
    """Three-level IUCN conservation action classification."""

    level_1_name: Optional[str] = None
    level_2_name: Optional[str] = None
    level_3_name: Optional[str] = None

    model_config = {"extra": "allow"}


class StakeholderPartnershipRecord(BaseModel):
    """Stakeholder partner associated with a project."""

    name: Optional[str] = None

    model_config = {"extra": "allow"}
