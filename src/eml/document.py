"""Typed records for the in-memory EML document graph.

The document is a tree of dataclasses mirroring the EML 2.2.0
vocabulary. Field declaration order is element order in the rendered
XML. Field names are snake_case and render as their camelCase EML
element names unless ``xml_name`` overrides them.

Field roles (see ``src.eml.serializer``):
  attribute(name) -- rendered as an XML attribute of the parent element
  text()          -- rendered as the parent element's character data
  child(...)      -- rendered as a child element (the default)

A child set to None is omitted entirely. Children declared with
``keep_empty=True`` render as an empty element instead, for values EML
expects to be present even when blank.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

EML_NAMESPACE = "https://eml.ecoinformatics.org/eml-2.2.0"
XSI_NAMESPACE = "http://www.xml-cml.org/schema/stmml-1.1"
STMML_NAMESPACE = "http://www.xml-cml.org/schema/stmml-1.1"
EML_SCHEMA_LOCATION = "https://eml.ecoinformatics.org/eml-2.2.0 xsd/eml.xsd"
EML_LANGUAGE = "english"


def attribute(name: str, **kwargs):
    return field(metadata={"xml": "attribute", "xml_name": name}, **kwargs)


def text(**kwargs):
    return field(metadata={"xml": "text"}, **kwargs)


def child(name: str | None = None, keep_empty: bool = False, **kwargs):
    metadata = {"xml": "element", "keep_empty": keep_empty}
    if name:
        metadata["xml_name"] = name
    return field(metadata=metadata, **kwargs)


# ── Parties ──

@dataclass
class IndividualName:
    given_name: Optional[str] = child(keep_empty=True, default=None)
    sur_name: Optional[str] = child(keep_empty=True, default=None)


@dataclass
class Party:
    """A creator, contact, provider or personnel entry.

    Either an individual (with agency) or the organizational fallback
    identity, depending on the project's coordinator visibility flag.
    """
    individual_name: Optional[IndividualName] = None
    organization_name: Optional[str] = None
    electronic_mail_address: Optional[str] = None
    online_url: Optional[str] = None
    role: Optional[str] = None


# ── Access ──

@dataclass
class Allow:
    principal: str = "public"
    permission: str = "read"


@dataclass
class Access:
    """Static public-read access policy."""
    auth_system: str = attribute("authSystem")
    order: str = attribute("order", default="allowFirst")
    allow: Allow = field(default_factory=Allow)


# ── Text sections ──

@dataclass
class Section:
    title: str
    para: Optional[object] = child(keep_empty=True, default=None)
    section: Union[Section, list[Section], None] = None


@dataclass
class Abstract:
    section: Union[Section, list[Section]]


@dataclass
class Funding:
    section: Section


@dataclass
class IntellectualRights:
    para: str


# ── Coverage ──

@dataclass
class BoundingCoordinates:
    west_bounding_coordinate: Optional[float] = None
    east_bounding_coordinate: Optional[float] = None
    north_bounding_coordinate: Optional[float] = None
    south_bounding_coordinate: Optional[float] = None


@dataclass
class GRingPoint:
    g_ring_latitude: float
    g_ring_longitude: float


@dataclass
class DatasetGPolygonOuterGRing:
    g_ring_point: list[GRingPoint] = field(default_factory=list)


@dataclass
class DatasetGPolygon:
    dataset_g_polygon_outer_g_ring: DatasetGPolygonOuterGRing


@dataclass
class GeographicCoverage:
    geographic_description: str
    bounding_coordinates: BoundingCoordinates
    dataset_g_polygon: list[DatasetGPolygon] = field(default_factory=list)


@dataclass
class CalendarDate:
    calendar_date: Optional[str] = child(keep_empty=True, default=None)


@dataclass
class RangeOfDates:
    begin_date: CalendarDate
    end_date: CalendarDate


@dataclass
class TemporalCoverage:
    range_of_dates: RangeOfDates


@dataclass
class TaxonId:
    provider: str = attribute("provider")
    value: Optional[str] = text(default=None)


@dataclass
class TaxonomicClassification:
    taxon_rank_name: Optional[str]
    taxon_rank_value: str
    common_name: Optional[str]
    taxon_id: TaxonId


@dataclass
class TaxonomicCoverage:
    taxonomic_classification: list[TaxonomicClassification] = field(default_factory=list)


@dataclass
class Coverage:
    geographic_coverage: GeographicCoverage
    temporal_coverage: Optional[TemporalCoverage] = None
    taxonomic_coverage: Optional[TaxonomicCoverage] = None


@dataclass
class StudyAreaDescription:
    coverage: Coverage


# ── Projects ──

@dataclass
class ProjectEntry:
    """An EML ``project`` element.

    ``dataset.project`` holds the survey; its ``related_project`` holds
    the parent project. ``funding`` is None when there are no funding rows.
    """
    id: str = attribute("id")
    system: str = attribute("system")
    title: Optional[str] = child(keep_empty=True, default=None)
    personnel: Optional[Party] = None
    abstract: Optional[Abstract] = None
    funding: Optional[Funding] = None
    study_area_description: Optional[StudyAreaDescription] = None
    related_project: Optional[ProjectEntry] = None


# ── Dataset ──

@dataclass
class Dataset:
    system: str = attribute("system")
    id: str = attribute("id")
    title: str = ""
    creator: Optional[Party] = None
    metadata_provider: Optional[Party] = None
    pub_date: str = ""
    language: str = EML_LANGUAGE
    intellectual_rights: Optional[IntellectualRights] = None
    contact: Optional[Party] = None
    project: Optional[ProjectEntry] = None


# ── Additional metadata ──

@dataclass
class IUCNConservationAction:
    level_1: Optional[str] = child("IUCNConservationActionLevel1Classification", keep_empty=True, default=None)
    level_2: Optional[str] = child("IUCNConservationActionLevel2SubClassification", keep_empty=True, default=None)
    level_3: Optional[str] = child("IUCNConservationActionLevel3SubClassification", keep_empty=True, default=None)


@dataclass
class IUCNConservationActions:
    actions: list[IUCNConservationAction] = child("IUCNConservationAction", default_factory=list)


@dataclass
class StakeholderPartnership:
    name: Optional[str] = child(keep_empty=True, default=None)


@dataclass
class StakeholderPartnerships:
    stakeholder_partnership: list[StakeholderPartnership] = field(default_factory=list)


@dataclass
class Metadata:
    iucn_conservation_actions: Optional[IUCNConservationActions] = child("IUCNConservationActions", default=None)
    stakeholder_partnerships: Optional[StakeholderPartnerships] = None


@dataclass
class AdditionalMetadata:
    describes: str
    metadata: Metadata


# ── Root ──

@dataclass
class EmlDocument:
    """Root ``eml:eml`` element.

    ``additional_metadata`` is None unless the project has IUCN
    conservation actions or stakeholder partnerships.
    """
    xml_tag = "eml:eml"

    package_id: str = attribute("packageId")
    system: str = attribute("system")
    xmlns_eml: str = attribute("xmlns:eml", default=EML_NAMESPACE)
    xmlns_xsi: str = attribute("xmlns:xsi", default=XSI_NAMESPACE)
    xmlns_stmml: str = attribute("xmlns:stmml", default=STMML_NAMESPACE)
    schema_location: str = attribute("xsi:schemaLocation", default=EML_SCHEMA_LOCATION)
    access: Optional[Access] = None
    dataset: Optional[Dataset] = None
    additional_metadata: Optional[list[AdditionalMetadata]] = None
