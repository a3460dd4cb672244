"""Funding section builder.

Renders funding-source rows as nested EML text sections::

    Funding Source: <name>
      Investment Action Category: <category>
        Funding Source Project ID / Funding Amount /
        Funding Start Date / Funding End Date

Each row replaces the section built from the previous one, so the
rendered section reflects the last row only. Callers omit the funding
element entirely when there are no rows.
"""

import logging

from src.eml.document import Funding, Section
from src.schemas.models import FundingSourceRecord
from src.utils import to_calendar_date

logger = logging.getLogger(__name__)


def _optional_date(value) -> str | None:
    return to_calendar_date(value) if value is not None else None


def build_funding_source_section(row: FundingSourceRecord) -> Section:
    return Section(
        title="Funding Source",
        para=row.funding_source_name,
        section=Section(
            title="Investment Action Category",
            para=row.investment_action_category_name,
            section=[
                Section(title="Funding Source Project ID", para=row.funding_source_project_id),
                Section(title="Funding Amount", para=row.funding_amount),
                Section(title="Funding Start Date", para=_optional_date(row.funding_start_date)),
                Section(title="Funding End Date", para=_optional_date(row.funding_end_date)),
            ],
        ),
    )


def build_funding(rows: list[FundingSourceRecord]) -> Funding | None:
    """Build the ``funding`` element, or None when there are no rows.

    Args:
        rows: Funding-source rows in fetch order.

    Returns:
        Funding for the last row, or None for an empty row set.
    """
    if not rows:
        return None
    if len(rows) > 1:
        # TODO: accumulate one section per row once publishing partners
        # confirm they accept repeated funding sections
        logger.warning(
            "%d funding sources supplied; only the last is rendered", len(rows)
        )
    funding = None
    for row in rows:
        funding = Funding(section=build_funding_source_section(row))
    return funding
