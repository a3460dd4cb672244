"""Entity fetchers: one read-only lookup per EML input fragment.

Every fetcher takes an identifier and a ``ReadConnection`` and returns
validated row models. Only two fetchers enforce cardinality:

  - ``get_data_package``: zero rows -> NotFoundError
  - ``get_survey_occurrence_submission``: row count != 1 -> NotFoundError

All others return whatever was found, including nothing, and leave the
"is this acceptable" decision to the document assembler. A missing or
invalid identifier raises BuildError from the statement builder before
any query runs.
"""

import logging

from src.eml import queries
from src.eml.connection import ReadConnection
from src.eml.errors import NotFoundError
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

logger = logging.getLogger(__name__)


# ── Required records ──

async def get_data_package(
    data_package_id: int, connection: ReadConnection
) -> DataPackageRecord:
    """Fetch the data package record.

    Raises:
        BuildError: If ``data_package_id`` is not a positive integer.
        NotFoundError: If no data package exists for the ID.
    """
    result = await connection.query(queries.get_data_package_sql(data_package_id))
    if not result.row_count:
        raise NotFoundError("Failed to acquire data package record")
    return DataPackageRecord.model_validate(result.rows[0])


async def get_survey_occurrence_submission(
    data_package_id: int, connection: ReadConnection
) -> OccurrenceSubmissionRecord:
    """Fetch the single occurrence submission bound to a data package.

    Raises:
        BuildError: If ``data_package_id`` is not a positive integer.
        NotFoundError: If zero or more than one submission is found.
    """
    result = await connection.query(
        queries.get_survey_occurrence_submission_sql(data_package_id)
    )
    if result.row_count != 1:
        logger.debug(
            "Data package %s resolved %d occurrence submissions",
            data_package_id, result.row_count,
        )
        raise NotFoundError(
            "Failed to acquire distinct survey occurrence submission record"
        )
    return OccurrenceSubmissionRecord.model_validate(result.rows[0])


# ── Optional single records ──

async def get_published_survey_status(
    occurrence_submission_id: int, connection: ReadConnection
) -> SurveyStatusRecord | None:
    """Most recent published status event, or None if never published."""
    result = await connection.query(
        queries.get_published_survey_status_sql(occurrence_submission_id)
    )
    if not result.row_count:
        return None
    return SurveyStatusRecord.model_validate(result.rows[0])


async def get_survey(survey_id: int, connection: ReadConnection) -> SurveyRecord | None:
    result = await connection.query(queries.get_survey_sql(survey_id))
    if not result.row_count:
        return None
    return SurveyRecord.model_validate(result.rows[0])


async def get_project(project_id: int, connection: ReadConnection) -> ProjectRecord | None:
    result = await connection.query(queries.get_project_sql(project_id))
    if not result.row_count:
        return None
    return ProjectRecord.model_validate(result.rows[0])


async def _get_bounding_box(
    primary_key: int, target_table: str, connection: ReadConnection
) -> BoundingBoxRecord:
    # No geometry yields a box of Nones rather than a missing record
    result = await connection.query(
        queries.get_geometry_bounding_box_sql(primary_key, target_table)
    )
    if not result.row_count:
        return BoundingBoxRecord()
    return BoundingBoxRecord.model_validate(result.rows[0])


async def get_survey_bounding_box(
    survey_id: int, connection: ReadConnection
) -> BoundingBoxRecord:
    return await _get_bounding_box(survey_id, "survey", connection)


async def get_project_bounding_box(
    project_id: int, connection: ReadConnection
) -> BoundingBoxRecord:
    return await _get_bounding_box(project_id, "project", connection)


# ── Row sets ──

async def get_survey_funding_sources(
    survey_id: int, connection: ReadConnection
) -> list[FundingSourceRecord]:
    result = await connection.query(queries.get_survey_funding_source_sql(survey_id))
    return [FundingSourceRecord.model_validate(row) for row in result.rows]


async def get_project_funding_sources(
    project_id: int, connection: ReadConnection
) -> list[FundingSourceRecord]:
    result = await connection.query(queries.get_project_funding_source_sql(project_id))
    return [FundingSourceRecord.model_validate(row) for row in result.rows]


async def get_survey_polygons(
    survey_id: int, connection: ReadConnection
) -> list[PolygonRecord]:
    result = await connection.query(
        queries.get_geometry_polygons_sql(survey_id, "survey")
    )
    return [PolygonRecord.model_validate(row) for row in result.rows]


async def get_project_polygons(
    project_id: int, connection: ReadConnection
) -> list[PolygonRecord]:
    result = await connection.query(
        queries.get_geometry_polygons_sql(project_id, "project")
    )
    return [PolygonRecord.model_validate(row) for row in result.rows]


async def get_focal_taxonomic_coverage(
    survey_id: int, connection: ReadConnection
) -> list[TaxonomicUnitRecord]:
    result = await connection.query(
        queries.get_taxonomic_coverage_sql(survey_id, is_focal=True)
    )
    return [TaxonomicUnitRecord.model_validate(row) for row in result.rows]


async def get_project_iucn_conservation(
    project_id: int, connection: ReadConnection
) -> list[IucnConservationActionRecord]:
    result = await connection.query(
        queries.get_project_iucn_conservation_sql(project_id)
    )
    return [IucnConservationActionRecord.model_validate(row) for row in result.rows]


async def get_project_stakeholder_partnerships(
    project_id: int, connection: ReadConnection
) -> list[StakeholderPartnershipRecord]:
    result = await connection.query(
        queries.get_project_stakeholder_partnership_sql(project_id)
    )
    return [StakeholderPartnershipRecord.model_validate(row) for row in result.rows]
