"""Configuration schema and loading for linkorder."""

from .loader import ConfigSource, load_resolver_config, read_structured_source
from .schema import ResolverConfig

__all__ = [
    "ConfigSource",
    "ResolverConfig",
    "load_resolver_config",
    "read_structured_source",
]
