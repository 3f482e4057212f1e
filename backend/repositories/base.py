"""Repository protocol shared by the synced Kite entities."""

from typing import Any, Protocol, TypeVar

from models import User

RecordT = TypeVar("RecordT", contravariant=True)


class EntityRepository(Protocol[RecordT]):
    """Storage operations a reconciliation strategy relies on.

    ``natural_key``/``find_by_key``/``update`` are only needed by
    key-based strategies; ``delete_all_for_user``/``insert`` by
    replace-all.
    """

    def natural_key(self, record: RecordT) -> Any:
        """Return the key identifying ``record`` across syncs."""
        ...

    def find_by_key(self, user: User, key: Any) -> Any | None:
        ...

    def insert(self, user: User, record: RecordT) -> Any:
        ...

    def update(self, user: User, existing: Any, record: RecordT) -> Any:
        """Overwrite every field of ``existing`` except its storage id."""
        ...

    def delete_all_for_user(self, user: User) -> int:
        ...

    def list_for_user(self, user: User) -> list:
        ...
