from __future__ import annotations

from moments.application.dto.responses import MenuResponse
from moments.domain.menu.entities import Menu
from moments.domain.table.moments import served_moment_count


def to_menu_response(menu: Menu) -> MenuResponse:
    return MenuResponse(
        menuId=str(menu.menu_id),
        name=menu.name,
        moments=list(menu.moments),
        isActive=menu.is_active,
        servedMoments=served_moment_count(menu.moment_count),
    )
