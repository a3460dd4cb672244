"""EmlAssembler: gathers the relational fragments and builds the document.

Two phases of reads, then a pure build:

  1. Resolution (sequential): data package -> occurrence submission ->
     published status -> survey -> project. Each step needs an
     identifier from the one before.
  2. Fan-out (concurrent): funding, geometry, taxonomy, IUCN actions and
     partnerships for the resolved survey and project, plus the six
     system constants. Assembly resumes once every read has completed.
  3. Build: ``build_document`` turns an ``EmlSourceData`` into an
     ``EmlDocument`` with no further I/O.

Any BuildError or NotFoundError aborts the run; no partial document is
returned.

Usage::

    assembler = EmlAssembler(connection)
    document = await assembler.assemble(42, supplied_title="Moose 2021")
"""

import asyncio
import logging

from src.eml import fetchers
from src.eml.connection import ReadConnection
from src.eml.constants import ConstantResolver, EmlConstants
from src.eml.context import EmlSourceData
from src.eml.coverage import (
    build_geographic_coverage,
    build_temporal_coverage,
    geographic_description,
)
from src.eml.document import (
    Abstract,
    Access,
    AdditionalMetadata,
    Coverage,
    Dataset,
    EmlDocument,
    IndividualName,
    IntellectualRights,
    IUCNConservationAction,
    IUCNConservationActions,
    Metadata,
    Party,
    ProjectEntry,
    Section,
    StakeholderPartnership,
    StakeholderPartnerships,
    StudyAreaDescription,
    TaxonId,
    TaxonomicClassification,
    TaxonomicCoverage,
)
from src.eml.errors import NotFoundError
from src.eml.funding import build_funding
from src.schemas.models import ProjectRecord, SurveyRecord, TaxonomicUnitRecord
from src.utils import to_calendar_date

logger = logging.getLogger(__name__)


class EmlAssembler:
    """Builds one EML document per data package.

    Args:
        connection: Read interface borrowed from the caller.
        constant_resolver: Resolver for system constants. Defaults to a
            ``ConstantResolver`` over the same connection.
    """

    def __init__(
        self,
        connection: ReadConnection,
        constant_resolver: ConstantResolver | None = None,
    ) -> None:
        self.connection = connection
        self.constant_resolver = constant_resolver or ConstantResolver(connection)

    async def assemble(
        self, data_package_id: int, supplied_title: str | None = None
    ) -> EmlDocument:
        """Fetch every fragment for a data package and build its document."""
        sources = await self.gather(data_package_id)
        return build_document(sources, supplied_title)

    async def gather(self, data_package_id: int) -> EmlSourceData:
        """Run the resolution phase, then the fan-out phase."""
        conn = self.connection

        # Phase 1: sequential resolution
        data_package = await fetchers.get_data_package(data_package_id, conn)
        submission = await fetchers.get_survey_occurrence_submission(data_package_id, conn)
        published_status = await fetchers.get_published_survey_status(
            submission.occurrence_submission_id, conn
        )
        survey = await fetchers.get_survey(submission.survey_id, conn)
        if survey is None:
            raise NotFoundError("Failed to acquire survey record")
        project = await fetchers.get_project(survey.project_id, conn)
        if project is None:
            raise NotFoundError("Failed to acquire project record")
        logger.info(
            "Resolved data package %s -> survey %s -> project %s",
            data_package_id, survey.survey_id, project.project_id,
        )

        # Phase 2: independent reads
        survey_id = survey.survey_id
        project_id = project.project_id
        (
            survey_funding,
            project_funding,
            survey_bounding_box,
            survey_polygons,
            project_bounding_box,
            project_polygons,
            focal_taxa,
            iucn_actions,
            partnerships,
            constants,
        ) = await asyncio.gather(
            fetchers.get_survey_funding_sources(survey_id, conn),
            # Project funding is looked up by the survey's identifier
            fetchers.get_project_funding_sources(survey_id, conn),
            fetchers.get_survey_bounding_box(survey_id, conn),
            fetchers.get_survey_polygons(survey_id, conn),
            fetchers.get_project_bounding_box(project_id, conn),
            fetchers.get_project_polygons(project_id, conn),
            fetchers.get_focal_taxonomic_coverage(survey_id, conn),
            fetchers.get_project_iucn_conservation(project_id, conn),
            fetchers.get_project_stakeholder_partnerships(project_id, conn),
            self.constant_resolver.resolve_all(),
        )
        logger.info("Fan-out complete for data package %s", data_package_id)

        return EmlSourceData(
            data_package=data_package,
            occurrence_submission=submission,
            published_status=published_status,
            survey=survey,
            project=project,
            constants=constants,
            survey_funding=survey_funding,
            project_funding=project_funding,
            survey_bounding_box=survey_bounding_box,
            survey_polygons=survey_polygons,
            project_bounding_box=project_bounding_box,
            project_polygons=project_polygons,
            focal_taxonomic_coverage=focal_taxa,
            iucn_conservation_actions=iucn_actions,
            stakeholder_partnerships=partnerships,
        )


# ---------------------------------------------------------------------------
# Pure document construction
# ---------------------------------------------------------------------------

def build_document(sources: EmlSourceData, supplied_title: str | None = None) -> EmlDocument:
    """Build the EML document graph from gathered source data.

    Raises:
        ValueError: If the occurrence submission has never been published.
    """
    constants = sources.constants
    package_uuid = sources.data_package.uuid

    return EmlDocument(
        package_id=f"urn:uuid:{package_uuid}",
        system=constants.provider_url,
        access=Access(auth_system=constants.security_provider_url),
        dataset=_build_dataset(sources, supplied_title),
        additional_metadata=build_additional_metadata(sources),
    )


def _publication_date(sources: EmlSourceData) -> str:
    status = sources.published_status
    if status is None:
        raise ValueError(
            "Occurrence submission "
            f"{sources.occurrence_submission.occurrence_submission_id} "
            "has no published status"
        )
    return to_calendar_date(status.status_event_timestamp)


def _organization(constants: EmlConstants, role: str | None = None) -> Party:
    return Party(
        organization_name=constants.organization_name,
        online_url=constants.organization_url,
        role=role,
    )


def _build_dataset(sources: EmlSourceData, supplied_title: str | None) -> Dataset:
    constants = sources.constants
    package_uuid = sources.data_package.uuid
    return Dataset(
        system=constants.provider_url,
        id=package_uuid,
        title=supplied_title or package_uuid,
        creator=Party(organization_name=constants.organization_name),
        metadata_provider=_organization(constants),
        pub_date=_publication_date(sources),
        intellectual_rights=IntellectualRights(para=constants.intellectual_rights),
        contact=build_contact(sources.project, constants),
        project=_build_survey_entry(sources),
    )


def build_contact(project: ProjectRecord, constants: EmlConstants) -> Party:
    """Dataset contact: the coordinator if public, else the organization."""
    if project.coordinator_public:
        return Party(
            individual_name=IndividualName(
                given_name=project.coordinator_first_name,
                sur_name=project.coordinator_last_name,
            ),
            organization_name=project.coordinator_agency_name,
            electronic_mail_address=project.coordinator_email_address,
        )
    return _organization(constants)


def build_survey_personnel(
    survey: SurveyRecord, project: ProjectRecord, constants: EmlConstants
) -> Party:
    if project.coordinator_public:
        return Party(
            individual_name=IndividualName(
                given_name=survey.lead_first_name,
                sur_name=survey.lead_last_name,
            ),
            organization_name=project.coordinator_agency_name,
            role="pointOfContact",
        )
    return _organization(constants, role="custodianSteward")


def build_project_personnel(project: ProjectRecord, constants: EmlConstants) -> Party:
    if project.coordinator_public:
        return Party(
            individual_name=IndividualName(
                given_name=project.coordinator_first_name,
                sur_name=project.coordinator_last_name,
            ),
            organization_name=project.coordinator_agency_name,
            electronic_mail_address=project.coordinator_email_address,
            role="pointOfContact",
        )
    return _organization(constants, role="custodianSteward")


def _taxonomic_classification(
    row: TaxonomicUnitRecord, provider_url: str
) -> TaxonomicClassification:
    return TaxonomicClassification(
        taxon_rank_name=row.tty_name,
        taxon_rank_value=" ".join(n for n in (row.unit_name1, row.unit_name2) if n),
        common_name=row.english_name,
        taxon_id=TaxonId(provider=provider_url, value=row.code),
    )


def _build_survey_entry(sources: EmlSourceData) -> ProjectEntry:
    """The main EML ``project`` entry, which describes the survey."""
    survey = sources.survey
    constants = sources.constants

    coverage = Coverage(
        geographic_coverage=build_geographic_coverage(
            geographic_description(survey.location_name, survey.location_description),
            sources.survey_bounding_box,
            sources.survey_polygons,
        ),
        temporal_coverage=build_temporal_coverage(survey.start_date, survey.end_date),
        taxonomic_coverage=TaxonomicCoverage(
            taxonomic_classification=[
                _taxonomic_classification(row, constants.taxonomic_provider_url)
                for row in sources.focal_taxonomic_coverage
            ]
        ),
    )

    return ProjectEntry(
        id=survey.uuid,
        system=constants.provider_url,
        title=survey.name,
        personnel=build_survey_personnel(survey, sources.project, constants),
        abstract=Abstract(section=Section(title="Objectives", para=survey.objectives)),
        funding=build_funding(sources.survey_funding),
        study_area_description=StudyAreaDescription(coverage=coverage),
        related_project=_build_related_project(sources),
    )


def _build_related_project(sources: EmlSourceData) -> ProjectEntry:
    """The ``relatedProject`` entry, which describes the parent project."""
    project = sources.project
    constants = sources.constants

    return ProjectEntry(
        id=project.uuid,
        system=constants.provider_url,
        title=project.name,
        personnel=build_project_personnel(project, constants),
        abstract=Abstract(
            section=[
                Section(title="Objectives", para=project.objectives),
                Section(title="Caveats", para=project.caveats),
                Section(title="Comments", para=project.comments),
            ]
        ),
        funding=build_funding(sources.project_funding),
        study_area_description=StudyAreaDescription(
            coverage=Coverage(
                geographic_coverage=build_geographic_coverage(
                    geographic_description(project.location_name, project.location_description),
                    sources.project_bounding_box,
                    sources.project_polygons,
                )
            )
        ),
    )


def build_additional_metadata(sources: EmlSourceData) -> list[AdditionalMetadata] | None:
    """IUCN and partnership metadata for the project, or None if neither exists."""
    iucn_rows = sources.iucn_conservation_actions
    partnership_rows = sources.stakeholder_partnerships
    if not (len(iucn_rows) | len(partnership_rows)):
        return None

    project_uuid = sources.project.uuid
    entries = []
    if iucn_rows:
        actions = [
            IUCNConservationAction(
                level_1=row.level_1_name,
                level_2=row.level_2_name,
                level_3=row.level_3_name,
            )
            for row in iucn_rows
        ]
        entries.append(AdditionalMetadata(
            describes=project_uuid,
            metadata=Metadata(
                iucn_conservation_actions=IUCNConservationActions(actions=actions)
            ),
        ))
    if partnership_rows:
        partners = [StakeholderPartnership(name=row.name) for row in partnership_rows]
        entries.append(AdditionalMetadata(
            describes=project_uuid,
            metadata=Metadata(
                stakeholder_partnerships=StakeholderPartnerships(
                    stakeholder_partnership=partners
                )
            ),
        ))
    return entries
