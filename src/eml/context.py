"""EmlSourceData dataclass handed from the fetch phases to the builder.

Holds every relational fragment and resolved constant needed to build
one EML document, so document construction is a pure function of this
record.
"""

from dataclasses import dataclass, field

from src.eml.constants import EmlConstants
from src.schemas.models import (
    BoundingBoxRecord,
    DataPackageRecord,
    FundingSourceRecord,
    IucnConservationActionRecord,
    OccurrenceSubmissionRecord,
    PolygonRecord,
    ProjectRecord,
    StakeholderPartnershipRecord,
    SurveyRecord,
    SurveyStatusRecord,
    TaxonomicUnitRecord,
)


@dataclass
class EmlSourceData:
    """Aggregated inputs for a single data package's EML document.

    Resolution phase (sequential, each depends on the previous):
        data_package, occurrence_submission, published_status,
        survey, project.

    Fan-out phase (independent reads):
        funding, bounding boxes, polygons, taxonomic coverage,
        IUCN conservation actions, stakeholder partnerships.

    Constants:
        constants: the six system constants, "Not Supplied" when absent.
    """

    # Resolution phase
    data_package: DataPackageRecord
    occurrence_submission: OccurrenceSubmissionRecord
    published_status: SurveyStatusRecord | None
    survey: SurveyRecord
    project: ProjectRecord
    constants: EmlConstants

    # Fan-out phase
    survey_funding: list[FundingSourceRecord] = field(default_factory=list)
    project_funding: list[FundingSourceRecord] = field(default_factory=list)
    survey_bounding_box: BoundingBoxRecord = field(default_factory=BoundingBoxRecord)
    survey_polygons: list[PolygonRecord] = field(default_factory=list)
    project_bounding_box: BoundingBoxRecord = field(default_factory=BoundingBoxRecord)
    project_polygons: list[PolygonRecord] = field(default_factory=list)
    focal_taxonomic_coverage: list[TaxonomicUnitRecord] = field(default_factory=list)
    iucn_conservation_actions: list[IucnConservationActionRecord] = field(default_factory=list)
    stakeholder_partnerships: list[StakeholderPartnershipRecord] = field(default_factory=list)
