"""Fetch, delete and add-new flows shared by the entity lists."""
from typing import Any, Generic, List, Optional, Type, TypeVar

from portfolio.core.errors import RemoteCallError
from portfolio.core.logging import setup_logging
from portfolio.core.notifications import Notification
from portfolio.core.store import RecordStore
from portfolio.features.forms.base import EntityForm
from portfolio.features.session.context import StaleGuard

logger = setup_logging('lists')

RecordT = TypeVar('RecordT')


class EntityList(Generic[RecordT]):
    """Records of one owner from one table, in a fixed order.

    Attributes:
        store: Record store to read from and delete in
        identity: Owner whose records are listed
        items: Records from the last accepted fetch
        last_notification: Notification from the last delete
    """
    table: str
    record_type: Type[Any]
    form_class: Type[EntityForm]
    order_by: str = 'created_at'
    descending: bool = True
    noun: str = 'record'

    def __init__(self, store: RecordStore, identity: str):
        self.store = store
        self.identity = identity
        self.items: List[RecordT] = []
        self.last_notification: Optional[Notification] = None

    def fetch(self, guard: Optional[StaleGuard] = None) -> List[RecordT]:
        """Reload ``items``; a result arriving for a stale guard is dropped."""
        result = self.store.select(
            self.table,
            {'user_id': self.identity},
            order_by=self.order_by,
            descending=self.descending,
        )
        rows = result.raise_for_error()

        if guard is not None and not guard.accept():
            logger.info(f"Discarding stale {self.table} fetch for {self.identity}")
            return self.items

        self.items = [self.record_type.from_row(row) for row in rows]
        return self.items

    def delete(self, item_id: str) -> Notification:
        """Delete one record and refresh; failures keep the list unchanged."""
        result = self.store.delete(self.table, {'id': item_id}, identity=self.identity)
        if result.error is not None:
            self.last_notification = Notification.failure(f"Error deleting {self.noun}", result.error.message)
            return self.last_notification

        self.last_notification = Notification.success(
            f"{self.noun.capitalize()} deleted",
            f"The {self.noun} has been removed from your portfolio.",
        )
        try:
            self.fetch()
        except RemoteCallError as e:
            # The delete went through; the list refreshes on the next fetch
            logger.error(f"Error refreshing {self.table} after delete: {str(e)}")
        return self.last_notification

    def add_form(self) -> EntityForm:
        """A form whose successful submit refreshes this list."""
        return self.form_class(self.store, self.identity, on_success=self.fetch)
