"""Reconciliation strategies - how fetched records are merged into storage.

Two strategies exist:

- :class:`UpsertByKey` for resources with a stable natural key (holdings
  by trading symbol, orders by order id). Existing rows are updated in
  place and keep their storage id; rows missing from the fetch are left
  alone.
- :class:`ReplaceAll` for snapshot-only resources without a stable key
  (intraday positions). The user's rows are deleted and recreated.

Strategies take a repository *factory* so one strategy instance can be
shared by pipelines running against different sessions.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Protocol, Sequence

from sqlalchemy.orm import Session

from models import User
from repositories.base import EntityRepository

logger = logging.getLogger(__name__)

RepositoryFactory = Callable[[Session], EntityRepository]


@dataclass
class ReconcileStats:
    """Counts produced by one strategy run."""

    created: int = 0
    updated: int = 0
    deleted: int = 0

    @property
    def processed(self) -> int:
        """Records written, whether inserted or updated."""
        return self.created + self.updated


class ReconciliationStrategy(Protocol):
    """Merges freshly fetched records for one user into storage."""

    name: str

    def apply(self, db: Session, user: User, records: Sequence) -> ReconcileStats:
        ...


class UpsertByKey:
    """Insert-or-update each record by its natural key.

    Records stored locally but absent from the current fetch are kept.
    Kite may omit entries (e.g. a holding sold today still settling), and
    dropping them would lose history; stale rows are therefore tolerated.
    """

    name = "upsert_by_key"

    def __init__(self, repository_factory: RepositoryFactory):
        self._repository_factory = repository_factory

    def apply(self, db: Session, user: User, records: Sequence) -> ReconcileStats:
        repository = self._repository_factory(db)
        stats = ReconcileStats()
        for record in records:
            key = repository.natural_key(record)
            existing = repository.find_by_key(user, key)
            if existing is not None:
                repository.update(user, existing, record)
                stats.updated += 1
            else:
                repository.insert(user, record)
                stats.created += 1
        db.flush()
        logger.debug(
            "Upserted %d records for user %s (%d new, %d updated)",
            stats.processed, user.id, stats.created, stats.updated,
        )
        return stats


class ReplaceAll:
    """Delete every stored record for the user, then insert the fetch."""

    name = "replace_all"

    def __init__(self, repository_factory: RepositoryFactory):
        self._repository_factory = repository_factory

    def apply(self, db: Session, user: User, records: Sequence) -> ReconcileStats:
        repository = self._repository_factory(db)
        stats = ReconcileStats()
        stats.deleted = repository.delete_all_for_user(user)
        for record in records:
            repository.insert(user, record)
            stats.created += 1
        db.flush()
        logger.debug(
            "Replaced records for user %s (%d deleted, %d inserted)",
            user.id, stats.deleted, stats.created,
        )
        return stats
