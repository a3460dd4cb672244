"""Shared fixtures for EML pipeline tests.

``FakeConnection`` answers statements by name from a dict of canned rows
and records every statement it executes. System constants are answered
from a separate name -> value dict so absent constants can be simulated.

All tests run without a database.
"""

import copy

import pytest

from src.eml.connection import QueryResult


class FakeConnection:
    """In-memory ``ReadConnection`` keyed by ``SqlStatement.name``."""

    def __init__(self, rows: dict[str, list[dict]] | None = None,
                 constants: dict[str, str | None] | None = None):
        self.rows = rows or {}
        self.constants = constants or {}
        self.executed: list[tuple[str, tuple]] = []

    async def query(self, statement) -> QueryResult:
        self.executed.append((statement.name, statement.params))
        if statement.name == "system_metadata_constant":
            name = statement.params[0]
            if name not in self.constants:
                return QueryResult(rows=[])
            return QueryResult(rows=[{"constant": self.constants[name]}])
        return QueryResult(rows=copy.deepcopy(self.rows.get(statement.name, [])))

    @property
    def executed_names(self) -> list[str]:
        return [name for name, _ in self.executed]


CONSTANTS = {
    "PROVIDER_URL": "https://sims.example",
    "SECURITY_PROVIDER_URL": "https://auth.example",
    "ORGANIZATION_NAME_FULL": "Biohub Org",
    "ORGANIZATION_URL": "https://org.example",
    "INTELLECTUAL_RIGHTS": "CC BY 4.0",
    "TAXONOMIC_PROVIDER_URL": "https://taxa.example",
}


def base_rows() -> dict[str, list[dict]]:
    """Scenario A: private coordinator, no funding, taxa, IUCN or partners."""
    return {
        "data_package": [{"data_package_id": 1, "uuid": "abc-123"}],
        "survey_occurrence_submission": [
            {"occurrence_submission_id": 10, "survey_id": 2, "output_key": "p1/s1/output.zip"}
        ],
        "published_survey_status": [
            {"occurrence_submission_id": 10, "status_event_timestamp": "2022-03-04T17:00:00.000Z"}
        ],
        "survey": [{
            "survey_id": 2,
            "project_id": 1,
            "uuid": "s1",
            "name": "Moose Survey",
            "objectives": "Count moose",
            "start_date": "2021-01-01",
            "end_date": "2021-06-01",
            "lead_first_name": "Lee",
            "lead_last_name": "Lead",
            "location_name": "Skeena",
            "location_description": None,
        }],
        "project": [{
            "project_id": 1,
            "uuid": "p1",
            "name": "Moose Project",
            "objectives": "Moose stuff",
            "caveats": None,
            "comments": "None yet",
            "coordinator_first_name": "Jane",
            "coordinator_last_name": "Doe",
            "coordinator_email_address": "j@x.org",
            "coordinator_agency_name": "Ministry",
            "coordinator_public": False,
            "location_name": "Skeena Region",
            "location_description": "North",
        }],
    }


FUNDING_ROW = {
    "funding_source_name": "Grant A",
    "investment_action_category_name": "Action",
    "funding_source_project_id": "GA-1",
    "funding_amount": 5000,
    "funding_start_date": "2022-01-01T00:00:00Z",
    "funding_end_date": "2022-12-31T00:00:00Z",
}


@pytest.fixture
def rows() -> dict[str, list[dict]]:
    return base_rows()


@pytest.fixture
def connection(rows) -> FakeConnection:
    return FakeConnection(rows, dict(CONSTANTS))
