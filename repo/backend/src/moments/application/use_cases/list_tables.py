from __future__ import annotations

from moments.application.dto.responses import (
    KitchenBoardResponse,
    TableListResponse,
    TableResponse,
)
from moments.application.mappers.table_mapper import to_kitchen_ticket_response, to_table_response
from moments.application.ports.repositories import ServiceStore
from moments.application.use_cases.lookup import require_table
from moments.domain.common.ids import TableId


class ListTables:
    def __init__(self, store: ServiceStore) -> None:
        self._store = store

    def execute(self) -> TableListResponse:
        with self._store.transaction():
            tables = self._store.tables.list()
        return TableListResponse(tables=[to_table_response(table) for table in tables])


class GetTable:
    def __init__(self, store: ServiceStore) -> None:
        self._store = store

    def execute(self, table_id: TableId) -> TableResponse:
        with self._store.transaction():
            table = require_table(self._store, table_id)
        return to_table_response(table)


class GetKitchenBoard:
    """Tables the kitchen has to keep an eye on: every table with a menu."""

    def __init__(self, store: ServiceStore) -> None:
        self._store = store

    def execute(self) -> KitchenBoardResponse:
        with self._store.transaction():
            tables = [table for table in self._store.tables.list() if table.menu is not None]
        return KitchenBoardResponse(tickets=[to_kitchen_ticket_response(table) for table in tables])
