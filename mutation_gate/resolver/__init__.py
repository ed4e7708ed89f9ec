"""
Configuration resolution for Mutation Gate.

Typed, uncached lookups of prefixed names in a key/value source.
"""

from .resolver import ConfigResolver
from .sources import ConfigSource, EnvironmentSource, MappingSource

__all__ = ["ConfigResolver", "ConfigSource", "EnvironmentSource", "MappingSource"]
