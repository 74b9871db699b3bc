from __future__ import annotations

from dataclasses import dataclass, replace

from moments.domain.common.ids import MenuId


@dataclass(frozen=True)
class Menu:
    menu_id: MenuId
    name: str
    moments: tuple[str, ...]
    is_active: bool = True

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if not self.moments:
            raise ValueError("menu must contain at least one moment")
        if any(not moment.strip() for moment in self.moments):
            raise ValueError("moment names must be non-empty")

    @property
    def moment_count(self) -> int:
        return len(self.moments)

    def edit(
        self,
        *,
        name: str | None = None,
        moments: tuple[str, ...] | None = None,
        is_active: bool | None = None,
    ) -> Menu:
        return replace(
            self,
            name=self.name if name is None else name,
            moments=self.moments if moments is None else moments,
            is_active=self.is_active if is_active is None else is_active,
        )

    def ensure_deletable(self) -> None:
        if self.is_active:
            raise ActiveMenuDeletionError(
                f"menu {self.menu_id} is active and must be deactivated before deletion"
            )


class ActiveMenuDeletionError(Exception):
    pass
