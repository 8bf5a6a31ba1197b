from typing import Callable, Dict, Optional
from sqlalchemy.exc import SQLAlchemyError
from models import db
from models.kv import KeyValueEntry
from coffeehub.errors import StoreError
from coffeehub.utils.db import transactional


class KeyValueStore:
    """String slots under one namespace, one committed write per call."""

    def __init__(self, namespace: str):
        self.namespace = namespace

    def _entry(self, key: str, for_update: bool = False) -> Optional[KeyValueEntry]:
        query = KeyValueEntry.query.filter_by(namespace=self.namespace, key=key)
        if for_update:
            # Row lock where the backend has one; always bypass the identity map.
            query = query.with_for_update().populate_existing()
        return query.first()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        try:
            entry = self._entry(key)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not read {self.namespace}", store="local") from e
        if entry is None or entry.value is None:
            return default
        return entry.value

    def update(self, key: str, change: Callable[[Optional[str]], Optional[str]]) -> None:
        """Apply ``change`` to the stored value and write the result, in one transaction.

        ``change`` receives the value as currently persisted. Returning None
        leaves the slot untouched.
        """
        try:
            with transactional(f"Failed to update {self.namespace}"):
                entry = self._entry(key, for_update=True)
                value = change(entry.value if entry else None)
                if value is None:
                    return
                if entry is None:
                    db.session.add(KeyValueEntry(namespace=self.namespace, key=key, value=value))
                else:
                    entry.value = value
        except SQLAlchemyError as e:
            raise StoreError(f"Could not save {self.namespace}", store="local") from e

    def set_many(self, values: Dict[str, Optional[str]]) -> None:
        try:
            with transactional(f"Failed to write {self.namespace}"):
                for key, value in values.items():
                    entry = self._entry(key)
                    if entry is None:
                        db.session.add(KeyValueEntry(namespace=self.namespace, key=key, value=value))
                    else:
                        entry.value = value
        except SQLAlchemyError as e:
            raise StoreError(f"Could not save {self.namespace}", store="local") from e

    def set(self, key: str, value: Optional[str]) -> None:
        self.set_many({key: value})

    def clear(self) -> None:
        try:
            with transactional(f"Failed to clear {self.namespace}"):
                KeyValueEntry.query.filter_by(namespace=self.namespace).delete()
        except SQLAlchemyError as e:
            raise StoreError(f"Could not clear {self.namespace}", store="local") from e
