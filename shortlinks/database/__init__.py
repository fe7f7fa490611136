"""Database layer for the link shortener."""

import logging
from typing import Optional

from .base import LinkStoreBase
from .memory import InMemoryLinkStore
from .postgres import PostgresLinkStore
from .models import LinkRecord, InsertResult, DeleteResult

__all__ = [
    "LinkStoreBase",
    "InMemoryLinkStore",
    "PostgresLinkStore",
    "LinkRecord",
    "InsertResult",
    "DeleteResult",
    "create_link_store",
]


def create_link_store(
    database_url: str,
    create_tables: bool = False,
    logger: Optional[logging.Logger] = None,
) -> LinkStoreBase:
    """Build the store matching the URL scheme (memory:// or postgres[ql]://)."""
    scheme = database_url.split("://", 1)[0].lower()

    if scheme == "memory":
        return InMemoryLinkStore(db_config=database_url, logger=logger)
    if scheme in ("postgres", "postgresql"):
        return PostgresLinkStore(
            db_config=database_url,
            create_tables=create_tables,
            logger=logger,
        )

    raise ValueError(f"Unsupported database URL scheme: {scheme!r}")
