"""Resolver groups for built-in facts.

Each group collects a cluster of related facts in one probing pass and
serves later requests from its store.
"""

from hostfacts.resolvers.base import BaseResolver
from hostfacts.resolvers.mountpoints import Mountpoints
from hostfacts.resolvers.os_release import OsRelease

# Registered with every FactCollection built by the bootstrap
BUILTIN_RESOLVERS: tuple[type[BaseResolver], ...] = (Mountpoints, OsRelease)

__all__ = ["BUILTIN_RESOLVERS", "BaseResolver", "Mountpoints", "OsRelease"]
