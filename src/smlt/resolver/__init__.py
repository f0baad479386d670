"""Endpoint resolvers: site root + language -> search core endpoint."""

from smlt.config.schema import AppConfig
from smlt.resolver.base import EndpointResolver


def create_endpoint_resolver(config: AppConfig) -> EndpointResolver:
    """Factory function to create endpoint resolvers based on configuration.

    Args:
        config: Application configuration; ``resolver.resolver_type`` selects
            the implementation

    Returns:
        Endpoint resolver

    Raises:
        ValueError: If resolver_type is unknown

    Example:
        config = load_config(Path("smlt.toml"))
        resolver = create_endpoint_resolver(config)
        endpoint = resolver.resolve_endpoint(site_root_id=1, language_id=0)
    """
    resolver_type = str(getattr(config.resolver.resolver_type, "value", config.resolver.resolver_type)).lower()

    if resolver_type == "config":
        from smlt.resolver.static import ConfigEndpointResolver

        return ConfigEndpointResolver(config.connections)

    else:
        raise ValueError(
            f"Unknown endpoint resolver type: '{resolver_type}'. "
            f"Supported types: config"
        )


__all__ = [
    "EndpointResolver",
    "create_endpoint_resolver",
]
