"""Tests for SQL statement builders.

Covers identifier validation (BuildError before any query runs),
geometry table restriction, and statement naming used in logs.
"""

import pytest

from src.eml import queries
from src.eml.errors import BuildError


ID_BUILDERS = [
    queries.get_data_package_sql,
    queries.get_survey_occurrence_submission_sql,
    queries.get_published_survey_status_sql,
    queries.get_survey_sql,
    queries.get_project_sql,
    queries.get_survey_funding_source_sql,
    queries.get_project_funding_source_sql,
    queries.get_taxonomic_coverage_sql,
    queries.get_project_iucn_conservation_sql,
    queries.get_project_stakeholder_partnership_sql,
]


class TestIdentifierValidation:

    @pytest.mark.parametrize("builder", ID_BUILDERS)
    @pytest.mark.parametrize("bad_id", [None, 0, -3, "7", 1.5, True])
    def test_invalid_identifier_raises_build_error(self, builder, bad_id):
        with pytest.raises(BuildError, match="Failed to build SQL statement"):
            builder(bad_id)

    @pytest.mark.parametrize("builder", ID_BUILDERS)
    def test_valid_identifier_is_bound_as_parameter(self, builder):
        statement = builder(42)
        assert statement.params == (42,)

    def test_constant_name_required(self):
        with pytest.raises(BuildError):
            queries.get_system_metadata_constant_sql("")
        with pytest.raises(BuildError):
            queries.get_system_metadata_constant_sql(None)

    def test_constant_name_bound_as_parameter(self):
        statement = queries.get_system_metadata_constant_sql("PROVIDER_URL")
        assert statement.name == "system_metadata_constant"
        assert statement.params == ("PROVIDER_URL",)


class TestGeometryStatements:

    @pytest.mark.parametrize("table", ["survey", "project"])
    def test_allowed_tables(self, table):
        box = queries.get_geometry_bounding_box_sql(5, table)
        polygons = queries.get_geometry_polygons_sql(5, table)
        assert box.name == f"{table}_bounding_box"
        assert polygons.name == f"{table}_polygons"
        assert box.params == (5,)
        assert polygons.params == (5,)

    @pytest.mark.parametrize("table", ["survey; drop table project", "user", ""])
    def test_unknown_table_rejected(self, table):
        with pytest.raises(BuildError):
            queries.get_geometry_bounding_box_sql(5, table)
        with pytest.raises(BuildError):
            queries.get_geometry_polygons_sql(5, table)

    def test_invalid_key_rejected_for_allowed_table(self):
        with pytest.raises(BuildError):
            queries.get_geometry_bounding_box_sql(None, "survey")


class TestTaxonomicCoverage:

    def test_focal_and_ancillary_names(self):
        assert queries.get_taxonomic_coverage_sql(3).name == "focal_taxonomic_coverage"
        assert (
            queries.get_taxonomic_coverage_sql(3, is_focal=False).name
            == "ancillary_taxonomic_coverage"
        )
