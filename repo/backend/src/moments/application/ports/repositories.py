from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol

from moments.domain.common.ids import MenuId, TableId
from moments.domain.menu.entities import Menu
from moments.domain.service.entities import HistoricalService
from moments.domain.table.entities import Table


class TableRepository(Protocol):
    def get(self, table_id: TableId) -> Table | None: ...

    def list(self) -> list[Table]: ...

    def save(self, table: Table) -> None: ...


class MenuRepository(Protocol):
    def get(self, menu_id: MenuId) -> Menu | None: ...

    def list(self) -> list[Menu]: ...

    def save(self, menu: Menu) -> None: ...

    def delete(self, menu_id: MenuId) -> None: ...


class HistoryRepository(Protocol):
    def add(self, service: HistoricalService) -> None: ...

    def list(self) -> list[HistoricalService]: ...


class ServiceStore(Protocol):
    tables: TableRepository
    menus: MenuRepository
    history: HistoryRepository
    pairings: tuple[str, ...]

    def transaction(self) -> AbstractContextManager[None]: ...

    def next_revision(self) -> int: ...
