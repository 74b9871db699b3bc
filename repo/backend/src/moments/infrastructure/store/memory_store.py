from __future__ import annotations

import itertools
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from moments.domain.common.ids import MenuId, TableId
from moments.domain.menu.entities import Menu
from moments.domain.service.entities import HistoricalService
from moments.domain.table.entities import Table


class InMemoryTableRepository:
    def __init__(self, tables: Iterable[Table]) -> None:
        self._tables: dict[TableId, Table] = {table.table_id: table for table in tables}

    def get(self, table_id: TableId) -> Table | None:
        return self._tables.get(table_id)

    def list(self) -> list[Table]:
        return list(self._tables.values())

    def save(self, table: Table) -> None:
        if table.table_id not in self._tables:
            # the roster is fixed at boot
            raise KeyError(f"table {table.table_id} is not part of the roster")
        self._tables[table.table_id] = table


class InMemoryMenuRepository:
    def __init__(self, menus: Iterable[Menu]) -> None:
        self._menus: dict[MenuId, Menu] = {menu.menu_id: menu for menu in menus}

    def get(self, menu_id: MenuId) -> Menu | None:
        return self._menus.get(menu_id)

    def list(self) -> list[Menu]:
        return list(self._menus.values())

    def save(self, menu: Menu) -> None:
        self._menus[menu.menu_id] = menu

    def delete(self, menu_id: MenuId) -> None:
        self._menus.pop(menu_id, None)


class InMemoryHistoryRepository:
    def __init__(self) -> None:
        self._services: list[HistoricalService] = []

    def add(self, service: HistoricalService) -> None:
        self._services.append(service)

    def list(self) -> list[HistoricalService]:
        return list(self._services)


class InMemoryServiceStore:
    """Session-scoped state owned by a single process.

    All reads and writes go through ``transaction()``, which serializes
    callers on one re-entrant lock.
    """

    def __init__(
        self,
        tables: Iterable[Table],
        menus: Iterable[Menu],
        pairings: Iterable[str],
    ) -> None:
        self.tables = InMemoryTableRepository(tables)
        self.menus = InMemoryMenuRepository(menus)
        self.history = InMemoryHistoryRepository()
        self.pairings = tuple(pairings)
        self._lock = threading.RLock()
        self._revisions = itertools.count(1)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            yield

    def next_revision(self) -> int:
        with self._lock:
            return next(self._revisions)
