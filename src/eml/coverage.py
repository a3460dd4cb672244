"""Geographic and temporal coverage builders.

Geographic coverage combines a location description, an envelope and
the polygon rings of a survey or project geometry. Polygon order and
point order are kept exactly as fetched: no sorting, deduplication or
ring closure.

Bounding coordinates map the envelope positionally, in the column order
of the envelope query (xmax, ymax, xmin, ymin -> west, east, north,
south). Downstream consumers read this mapping as published, so it is
reproduced as-is.
"""

from src.eml.document import (
    BoundingCoordinates,
    CalendarDate,
    DatasetGPolygon,
    DatasetGPolygonOuterGRing,
    GeographicCoverage,
    GRingPoint,
    RangeOfDates,
    TemporalCoverage,
)
from src.schemas.models import BoundingBoxRecord, PolygonRecord
from src.utils import check_provided, to_calendar_date


def geographic_description(location_name: str | None, location_description: str | None) -> str:
    """Return ``name - description``, or the name alone without a description."""
    if location_description:
        return f"{check_provided(location_name)} - {location_description}"
    return check_provided(location_name)


def build_bounding_coordinates(box: BoundingBoxRecord) -> BoundingCoordinates:
    return BoundingCoordinates(
        west_bounding_coordinate=box.st_xmax,
        east_bounding_coordinate=box.st_ymax,
        north_bounding_coordinate=box.st_xmin,
        south_bounding_coordinate=box.st_ymin,
    )


def build_polygon(polygon: PolygonRecord) -> DatasetGPolygon:
    points = [
        GRingPoint(g_ring_latitude=point[0], g_ring_longitude=point[1])
        for point in polygon.points
    ]
    return DatasetGPolygon(
        dataset_g_polygon_outer_g_ring=DatasetGPolygonOuterGRing(g_ring_point=points)
    )


def build_geographic_coverage(
    description: str,
    bounding_box: BoundingBoxRecord,
    polygons: list[PolygonRecord],
) -> GeographicCoverage:
    """Build the ``geographicCoverage`` element for one geometry.

    Args:
        description: Pre-composed geographic description.
        bounding_box: Envelope extrema of the geometry.
        polygons: Polygon rings, in fetch order.

    Returns:
        GeographicCoverage with one ``datasetGPolygon`` per ring.
    """
    return GeographicCoverage(
        geographic_description=description,
        bounding_coordinates=build_bounding_coordinates(bounding_box),
        dataset_g_polygon=[build_polygon(p) for p in polygons],
    )


def build_temporal_coverage(start_date, end_date) -> TemporalCoverage:
    """Build a ``rangeOfDates`` coverage; an absent end date renders empty."""
    return TemporalCoverage(
        range_of_dates=RangeOfDates(
            begin_date=CalendarDate(
                calendar_date=to_calendar_date(start_date) if start_date is not None else None
            ),
            end_date=CalendarDate(
                calendar_date=to_calendar_date(end_date) if end_date is not None else None
            ),
        )
    )
