from __future__ import annotations

import os

from moments.domain.common.ids import MenuId
from moments.domain.menu.entities import Menu
from moments.domain.table.entities import Table
from moments.infrastructure.store.memory_store import InMemoryServiceStore

DEFAULT_TABLE_NUMBERS: tuple[str, ...] = (
    "10", "11", "20", "21", "40", "41", "50", "1", "2", "3",
    "51", "52", "53", "54", "55", "56", "57",
)

DEFAULT_PAIRINGS: tuple[str, ...] = ("Essencial", "Gastronômico", "À Carta", "Sem Pairing")


def default_menus() -> list[Menu]:
    return [
        Menu(
            menu_id=MenuId("m1"),
            name="Menu 9 momentos",
            moments=(
                "Crocante de sementes & coalhada",
                "Moluscos",
                "Peixe",
                "Verão",
                "Carne",
                "Arroz con leche",
                "Bolo de milho & rosquilha de chocolate",
            ),
            is_active=True,
        ),
        Menu(
            menu_id=MenuId("m2"),
            name="Menu 11 momentos",
            moments=(
                "Crocante de sementes & coalhada",
                "Moluscos",
                "Lagostim",
                "Peixe",
                "Verão",
                "Carne",
                "Texturas de abóbora",
                "Arroz con leche",
                "Bolo de milho & rosquilha de chocolate",
            ),
            is_active=True,
        ),
    ]


def table_roster() -> tuple[str, ...]:
    raw_value = os.getenv("TABLE_ROSTER")
    if not raw_value:
        return DEFAULT_TABLE_NUMBERS
    numbers = [number.strip() for number in raw_value.split(",") if number.strip()]
    return tuple(dict.fromkeys(numbers)) or DEFAULT_TABLE_NUMBERS


def build_store(
    table_numbers: tuple[str, ...] | None = None,
    menus: list[Menu] | None = None,
    pairings: tuple[str, ...] = DEFAULT_PAIRINGS,
) -> InMemoryServiceStore:
    numbers = table_numbers if table_numbers is not None else table_roster()
    return InMemoryServiceStore(
        tables=[Table.empty(number) for number in numbers],
        menus=menus if menus is not None else default_menus(),
        pairings=pairings,
    )
