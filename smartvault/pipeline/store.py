from __future__ import annotations

import threading
from abc import ABC, abstractmethod

from .models import Item


class ItemStore(ABC):
    @abstractmethod
    def create_item(self, item: Item) -> Item:
        raise NotImplementedError

    @abstractmethod
    def items_for_user(self, user_id: str) -> list[Item]:
        raise NotImplementedError

    def categories_for_user(self, user_id: str) -> list[str]:
        return sorted({item.category for item in self.items_for_user(user_id)})


class InMemoryItemStore(ItemStore):
    """Process-local store; nothing survives a restart."""

    def __init__(self) -> None:
        self._items: dict[str, dict[str, Item]] = {}
        self._lock = threading.Lock()

    def create_item(self, item: Item) -> Item:
        with self._lock:
            self._items.setdefault(item.user_id, {})[item.id] = item
        return item

    def items_for_user(self, user_id: str) -> list[Item]:
        with self._lock:
            items = list(self._items.get(user_id, {}).values())
        return sorted(items, key=lambda i: i.created_at, reverse=True)
