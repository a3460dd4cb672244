"""Read-through resolver for system metadata constants.

Constants are re-read on every call; there is no cache and no
invalidation. An absent row or a NULL value resolves to the
``"Not Supplied"`` placeholder, so the assembler never sees None.

The resolver is injected into the assembler rather than reached as a
module-level singleton, which lets tests substitute a fake.
"""

import asyncio
import logging
from dataclasses import dataclass

from src.config import DEFAULT_CONSTANT_NAMES
from src.eml import queries
from src.eml.connection import ReadConnection
from src.utils import check_provided

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmlConstants:
    """The six system constants an EML document needs."""
    provider_url: str
    security_provider_url: str
    organization_name: str
    organization_url: str
    intellectual_rights: str
    taxonomic_provider_url: str


class ConstantResolver:
    """Resolves named constants through a ``ReadConnection``.

    Args:
        connection: Read interface for the constant lookup.
        names: Logical key -> database constant name. Defaults to
            ``DEFAULT_CONSTANT_NAMES``.
    """

    def __init__(self, connection: ReadConnection, names: dict[str, str] | None = None):
        self.connection = connection
        self.names = {**DEFAULT_CONSTANT_NAMES, **(names or {})}

    async def resolve(self, name: str) -> str:
        """Return the constant's value, or ``"Not Supplied"`` if absent."""
        result = await self.connection.query(
            queries.get_system_metadata_constant_sql(name)
        )
        value = result.rows[0].get("constant") if result.row_count else None
        if value is None:
            logger.debug("System constant %s not set", name)
        return check_provided(value)

    async def resolve_all(self) -> EmlConstants:
        """Resolve every constant the assembler needs, concurrently."""
        keys = list(EmlConstants.__dataclass_fields__)
        values = await asyncio.gather(*[self.resolve(self.names[k]) for k in keys])
        return EmlConstants(**dict(zip(keys, values)))
