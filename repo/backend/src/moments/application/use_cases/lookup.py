from __future__ import annotations

from moments.application.ports.repositories import ServiceStore
from moments.application.use_cases.errors import MenuNotFoundError, TableNotFoundError
from moments.domain.common.ids import MenuId, TableId
from moments.domain.menu.entities import Menu
from moments.domain.table.entities import Table


def require_table(store: ServiceStore, table_id: TableId) -> Table:
    table = store.tables.get(table_id)
    if table is None:
        raise TableNotFoundError(f"table {table_id} not found")
    return table


def require_menu(store: ServiceStore, menu_id: MenuId) -> Menu:
    menu = store.menus.get(menu_id)
    if menu is None:
        raise MenuNotFoundError(f"menu {menu_id} not found")
    return menu
