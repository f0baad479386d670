"""Endpoint resolver backed by the ``connections`` section of the config.

Each connection binds a site root (and optionally one language) to the read
endpoint of a search core:

    [[connections]]
    site_root_id = 1
    language_id = 0
    host = "solr.internal"
    core = "core_en"
    username = "reader"
    password = "${SOLR_READ_PASSWORD}"

A connection without ``language_id`` acts as the catch-all for its site
root; an entry with a matching language always wins over it.
"""

from typing import Iterable, Optional

from smlt.config.schema import ConnectionConfig
from smlt.entities import BackendEndpoint, Credentials
from smlt.errors import ResolutionError
from smlt.observability.logging import get_logger
from smlt.resolver.base import EndpointResolver

logger = get_logger(__name__)


class ConfigEndpointResolver(EndpointResolver):
    """Resolve endpoints from a static list of connection definitions."""

    def __init__(self, connections: Iterable[ConnectionConfig]) -> None:
        self._exact: dict[tuple[int, int], ConnectionConfig] = {}
        self._site_default: dict[int, ConnectionConfig] = {}

        for connection in connections:
            if connection.language_id is None:
                target = self._site_default
                key = connection.site_root_id
            else:
                target = self._exact
                key = (connection.site_root_id, connection.language_id)

            if key in target:
                logger.warning(
                    "duplicate_connection_ignored",
                    site_root_id=connection.site_root_id,
                    language_id=connection.language_id,
                )
                continue
            target[key] = connection

    def resolve_endpoint(self, site_root_id: int, language_id: int = 0) -> BackendEndpoint:
        connection = self._find(site_root_id, language_id)
        if connection is None:
            raise ResolutionError(
                message=(
                    f"No search connection configured for site root {site_root_id} "
                    f"and language {language_id}"
                ),
                site_root_id=site_root_id,
                language_id=language_id,
            )

        credentials = None
        if connection.username is not None or connection.password is not None:
            credentials = Credentials(username=connection.username, password=connection.password)

        try:
            return BackendEndpoint(base_uri=connection.core_base_uri(), credentials=credentials)
        except ValueError as e:
            raise ResolutionError(
                message=f"Invalid endpoint for site root {site_root_id}: {e}",
                site_root_id=site_root_id,
                language_id=language_id,
                original_error=e,
            )

    def connections(self) -> list[ConnectionConfig]:
        """Return all known connections, exact matches first."""
        return list(self._exact.values()) + list(self._site_default.values())

    def _find(self, site_root_id: int, language_id: int) -> Optional[ConnectionConfig]:
        exact = self._exact.get((site_root_id, language_id))
        if exact is not None:
            return exact
        return self._site_default.get(site_root_id)
