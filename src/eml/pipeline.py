"""Pipeline driver: data package ID in, EML XML string out.

Validates the identifier before any read, drives the assembler and
serializer, and re-raises any failure unchanged after logging it. The
caller owns the connection's transaction lifecycle.
"""

import logging

from src.eml.assembler import EmlAssembler
from src.eml.connection import ReadConnection
from src.eml.constants import ConstantResolver
from src.eml.errors import BuildError
from src.eml.serializer import serialize

logger = logging.getLogger(__name__)


async def produce_eml(
    data_package_id: int,
    connection: ReadConnection,
    supplied_title: str | None = None,
    constant_resolver: ConstantResolver | None = None,
) -> str:
    """Produce the EML document for a data package.

    Args:
        data_package_id: Data package to describe. Must be non-zero.
        connection: Read interface borrowed from the caller.
        supplied_title: Dataset title; the package UUID is used when omitted.
        constant_resolver: Optional resolver override (defaults to one
            over ``connection``).

    Returns:
        The serialized EML document.

    Raises:
        BuildError: If the identifier is missing or a statement cannot be built.
        NotFoundError: If a required record is missing or not distinct.
    """
    if not data_package_id:
        raise BuildError("Missing required body param data_package_id")

    logger.debug(
        "Producing EML for data package %s (supplied title: %r)",
        data_package_id, supplied_title,
    )
    try:
        assembler = EmlAssembler(connection, constant_resolver)
        document = await assembler.assemble(data_package_id, supplied_title)
        xml = serialize(document)
    except Exception:
        logger.exception("Failed to produce EML for data package %s", data_package_id)
        raise

    logger.info(
        "EML for data package %s serialized (%d bytes)",
        data_package_id, len(xml.encode("utf-8")),
    )
    return xml
