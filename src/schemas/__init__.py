"""Pydantic v2 row models for the EML pipeline's relational reads.

Provides validation models for every lookup the document assembler
consumes:
- DataPackageRecord / OccurrenceSubmissionRecord / SurveyStatusRecord:
  package identity and publication state
- SurveyRecord / ProjectRecord: the two EML "project" entries
- FundingSourceRecord: survey- and project-scoped funding
- BoundingBoxRecord / PolygonRecord: geographic coverage
- TaxonomicUnitRecord: focal taxonomic coverage
- IucnConservationActionRecord / StakeholderPartnershipRecord:
  additional metadata
"""

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

__all__ = [
    "BoundingBoxRecord",
    "DataPackageRecord",
    "FundingSourceRecord",
    "IucnConservationActionRecord",
    "OccurrenceSubmissionRecord",
    "PolygonRecord",
    "ProjectRecord",
    "StakeholderPartnershipRecord",
    "SurveyRecord",
    "SurveyStatusRecord",
    "TaxonomicUnitRecord",
]
