"""SQL statements for the EML pipeline's relational reads.

Each builder validates its identifier and returns a ``SqlStatement``:
the statement name (used in logs and by test fakes), the SQL as a
``psycopg.sql.Composable`` and a positional parameter tuple. A builder
that cannot produce a statement raises ``BuildError``; it never returns
None.

Geometry lookups take the target table as a parameter, so the table and
key column are restricted to ``GEOMETRY_TABLES`` and composed as SQL
identifiers, never interpolated as text.
"""

from dataclasses import dataclass, field

from psycopg import sql

from src.eml.errors import BuildError

GEOMETRY_TABLES: dict[str, str] = {
    "survey": "survey_id",
    "project": "project_id",
}
"""Tables carrying a ``geography`` column -> their primary key column."""


@dataclass(frozen=True)
class SqlStatement:
    """A named, parameterized SQL statement."""
    name: str
    query: sql.Composable
    params: tuple = field(default_factory=tuple)


def _require_id(value) -> int:
    """Return ``value`` if it is a positive integer identifier."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise BuildError("Failed to build SQL statement")
    return value


def _geometry_key(target_table: str) -> str:
    if target_table not in GEOMETRY_TABLES:
        raise BuildError("Failed to build SQL statement")
    return GEOMETRY_TABLES[target_table]


# ── Package identity ──

def get_data_package_sql(data_package_id: int) -> SqlStatement:
    """Data package record for a package ID."""
    return SqlStatement(
        "data_package",
        sql.SQL("""
            select
              *
            from
              data_package
            where
              data_package_id = %s;
        """),
        (_require_id(data_package_id),),
    )


def get_survey_occurrence_submission_sql(data_package_id: int) -> SqlStatement:
    """Occurrence submission(s) linked to a data package."""
    return SqlStatement(
        "survey_occurrence_submission",
        sql.SQL("""
            select
              os.*
            from
              occurrence_submission os,
              occurrence_submission_data_package osdp
            where
              osdp.data_package_id = %s
              and os.occurrence_submission_id = osdp.occurrence_submission_id;
        """),
        (_require_id(data_package_id),),
    )


def get_published_survey_status_sql(occurrence_submission_id: int) -> SqlStatement:
    """Published status events for an occurrence submission."""
    return SqlStatement(
        "published_survey_status",
        sql.SQL("""
            select
              *
            from
              survey_status
            where
              survey_status = api_get_character_system_constant('OCCURRENCE_SUBMISSION_STATE_PUBLISHED')
              and occurrence_submission_id = %s
            order by
              status_event_timestamp desc;
        """),
        (_require_id(occurrence_submission_id),),
    )


# ── Survey / Project ──

def get_survey_sql(survey_id: int) -> SqlStatement:
    return SqlStatement(
        "survey",
        sql.SQL("""
            select
              survey_id,
              project_id,
              uuid,
              name,
              objectives,
              start_date,
              end_date,
              lead_first_name,
              lead_last_name,
              location_name,
              location_description
            from
              survey
            where
              survey_id = %s;
        """),
        (_require_id(survey_id),),
    )


def get_project_sql(project_id: int) -> SqlStatement:
    return SqlStatement(
        "project",
        sql.SQL("""
            select
              project_id,
              uuid,
              name,
              objectives,
              caveats,
              comments,
              coordinator_first_name,
              coordinator_last_name,
              coordinator_email_address,
              coordinator_agency_name,
              coordinator_public,
              location_name,
              location_description
            from
              project
            where
              project_id = %s;
        """),
        (_require_id(project_id),),
    )


# ── Funding ──

def get_survey_funding_source_sql(survey_id: int) -> SqlStatement:
    """Project funding sources referenced by a survey."""
    return SqlStatement(
        "survey_funding_source",
        sql.SQL("""
            select
              a.*,
              b.name investment_action_category_name,
              c.name funding_source_name
            from
              project_funding_source a,
              investment_action_category b,
              funding_source c
            where
              a.project_funding_source_id in (
                select
                  project_funding_source_id
                from
                  survey_funding_source
                where
                  survey_id = %s)
              and b.investment_action_category_id = a.investment_action_category_id
              and c.funding_source_id = b.funding_source_id;
        """),
        (_require_id(survey_id),),
    )


def get_project_funding_source_sql(project_id: int) -> SqlStatement:
    return SqlStatement(
        "project_funding_source",
        sql.SQL("""
            select
              a.*,
              b.name investment_action_category_name,
              c.name funding_source_name
            from
              project_funding_source a,
              investment_action_category b,
              funding_source c
            where
              a.project_id = %s
              and b.investment_action_category_id = a.investment_action_category_id
              and c.funding_source_id = b.funding_source_id;
        """),
        (_require_id(project_id),),
    )


# ── Geometry ──

def get_geometry_bounding_box_sql(primary_key: int, target_table: str) -> SqlStatement:
    """Envelope extrema of a survey or project geography.

    Columns are selected as xmax, ymax, xmin, ymin.
    """
    key_name = _geometry_key(target_table)
    query = sql.SQL("""
        with envelope as (
          select
            ST_Envelope(geography::geometry) geom
          from
            {table}
          where
            {key} = %s)
        select
          st_xmax(geom) st_xmax,
          st_ymax(geom) st_ymax,
          st_xmin(geom) st_xmin,
          st_ymin(geom) st_ymin
        from
          envelope;
    """).format(table=sql.Identifier(target_table), key=sql.Identifier(key_name))
    return SqlStatement(
        f"{target_table}_bounding_box", query, (_require_id(primary_key),)
    )


def get_geometry_polygons_sql(primary_key: int, target_table: str) -> SqlStatement:
    """Polygon rings of a survey or project geography as [lat, lon] arrays."""
    key_name = _geometry_key(target_table)
    query = sql.SQL("""
        with polygons as (
          select
            (st_dumppoints(g.geom)).*
          from (
            select
              geography::geometry as geom
            from
              {table}
            where
              {key} = %s) as g),
        points as (
          select
            path[1] polygon,
            path[2] point,
            jsonb_build_array(st_y(p.geom), st_x(p.geom)) points
          from
            polygons p
          order by
            path[1],
            path[2])
        select
          json_agg(p.points order by p.point) points
        from
          points p
        group by
          polygon
        order by
          polygon;
    """).format(table=sql.Identifier(target_table), key=sql.Identifier(key_name))
    return SqlStatement(
        f"{target_table}_polygons", query, (_require_id(primary_key),)
    )


# ── Taxonomy / classification ──

def get_taxonomic_coverage_sql(survey_id: int, is_focal: bool = True) -> SqlStatement:
    focal_predicate = sql.SQL("and b.is_focal" if is_focal else "and not b.is_focal")
    query = sql.SQL("""
        select
          a.*
        from
          wldtaxonomic_units a,
          study_species b
        where
          a.wldtaxonomic_units_id = b.wldtaxonomic_units_id
          and b.survey_id = %s
          {focal};
    """).format(focal=focal_predicate)
    name = "focal_taxonomic_coverage" if is_focal else "ancillary_taxonomic_coverage"
    return SqlStatement(name, query, (_require_id(survey_id),))


def get_project_iucn_conservation_sql(project_id: int) -> SqlStatement:
    return SqlStatement(
        "project_iucn_conservation",
        sql.SQL("""
            select
              a.name level_1_name,
              b.name level_2_name,
              c.name level_3_name
            from
              iucn_conservation_action_level_1_classification a,
              iucn_conservation_action_level_2_subclassification b,
              iucn_conservation_action_level_3_subclassification c,
              project_iucn_action_classification d
            where
              d.project_id = %s
              and c.iucn_conservation_action_level_3_subclassification_id = d.iucn_conservation_action_level_3_subclassification_id
              and b.iucn_conservation_action_level_2_subclassification_id = c.iucn_conservation_action_level_2_subclassification_id
              and a.iucn_conservation_action_level_1_classification_id = b.iucn_conservation_action_level_1_classification_id;
        """),
        (_require_id(project_id),),
    )


def get_project_stakeholder_partnership_sql(project_id: int) -> SqlStatement:
    return SqlStatement(
        "project_stakeholder_partnership",
        sql.SQL("""
            select
              a.name
            from
              stakeholder_partnership a
            where
              a.project_id = %s;
        """),
        (_require_id(project_id),),
    )


# ── System constants ──

def get_system_metadata_constant_sql(constant_name: str) -> SqlStatement:
    """Character value of a named system metadata constant."""
    if not isinstance(constant_name, str) or not constant_name:
        raise BuildError("Failed to build SQL statement")
    return SqlStatement(
        "system_metadata_constant",
        sql.SQL("select api_get_character_system_metadata_constant(%s) as constant;"),
        (constant_name,),
    )
