"""Abstract base class for backend endpoint resolvers.

Why this exists:
- The similarity service only needs a base URI and optional credentials
- Where those come from (static config, a CMS connection manager, service
  discovery) is an integration concern
- Enables testing with fixed endpoints

How to extend:
1. Subclass EndpointResolver
2. Implement resolve_endpoint
3. Register the type in create_endpoint_resolver
"""

from abc import ABC, abstractmethod

from smlt.entities import BackendEndpoint


class EndpointResolver(ABC):
    """Maps a site root and language to the search core to read from."""

    @abstractmethod
    def resolve_endpoint(self, site_root_id: int, language_id: int = 0) -> BackendEndpoint:
        """Resolve the read endpoint for a site and language.

        Args:
            site_root_id: Root page/site identifier
            language_id: Language identifier

        Returns:
            Resolved endpoint

        Raises:
            ResolutionError: If no endpoint can be produced
        """
        pass
