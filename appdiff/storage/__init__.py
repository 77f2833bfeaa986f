"""Store clients for AppDiff."""

from __future__ import annotations

from ..core.config import Config
from .interface import VersionStore
from .local import LocalVersionStore
from .memory import InMemoryVersionStore
from .rest import RestVersionStore


def create_store(config: Config) -> VersionStore:
    """Construct the store client selected by configuration.

    The caller owns the returned client and must close it (``aclose()`` or
    ``async with``).
    """
    if config.store.backend == "local":
        return LocalVersionStore(
            config.store.base_path,
            versions_table=config.store.versions_table,
            waitlist_table=config.store.waitlist_table,
        )
    return RestVersionStore.from_config(config.store)


__all__ = [
    "VersionStore",
    "LocalVersionStore",
    "InMemoryVersionStore",
    "RestVersionStore",
    "create_store",
]
