from __future__ import annotations

import logging
from uuid import uuid4

from moments.application.dto.requests import CreateMenuRequest, UpdateMenuRequest
from moments.application.dto.responses import MenuListResponse, MenuResponse, PairingListResponse
from moments.application.mappers.menu_mapper import to_menu_response
from moments.application.ports.repositories import ServiceStore
from moments.application.sync.broadcaster import SyncBroadcaster
from moments.application.use_cases.context import TraceContext
from moments.application.use_cases.lookup import require_menu
from moments.domain.common.ids import MenuId
from moments.domain.menu.entities import ActiveMenuDeletionError, Menu

logger = logging.getLogger(__name__)


class InvalidMenuError(Exception):
    pass


class MenuDeletionBlockedError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.details = {"reason": "MENU_ACTIVE"}


def _clean_moments(moments: list[str]) -> tuple[str, ...]:
    return tuple(moment.strip() for moment in moments)


class ListMenus:
    def __init__(self, store: ServiceStore) -> None:
        self._store = store

    def execute(self, *, active_only: bool = False) -> MenuListResponse:
        with self._store.transaction():
            menus = self._store.menus.list()
        if active_only:
            menus = [menu for menu in menus if menu.is_active]
        return MenuListResponse(menus=[to_menu_response(menu) for menu in menus])


class ListPairings:
    def __init__(self, store: ServiceStore) -> None:
        self._store = store

    def execute(self) -> PairingListResponse:
        return PairingListResponse(pairings=list(self._store.pairings))


class CreateMenu:
    def __init__(self, store: ServiceStore, broadcaster: SyncBroadcaster) -> None:
        self._store = store
        self._broadcaster = broadcaster

    def execute(self, request_dto: CreateMenuRequest, trace_ctx: TraceContext) -> MenuResponse:
        try:
            menu = Menu(
                menu_id=MenuId(f"m-{uuid4().hex[:12]}"),
                name=request_dto.name.strip(),
                moments=_clean_moments(request_dto.moments),
                is_active=request_dto.is_active,
            )
        except ValueError as exc:
            raise InvalidMenuError(str(exc)) from exc

        with self._store.transaction():
            self._store.menus.save(menu)
            logger.info("menu_created", extra={"menu_id": str(menu.menu_id)})
            self._broadcaster.publish_menus(self._store.menus.list(), trace_ctx)
        return to_menu_response(menu)


class UpdateMenu:
    def __init__(self, store: ServiceStore, broadcaster: SyncBroadcaster) -> None:
        self._store = store
        self._broadcaster = broadcaster

    def execute(
        self,
        menu_id: MenuId,
        request_dto: UpdateMenuRequest,
        trace_ctx: TraceContext,
    ) -> MenuResponse:
        with self._store.transaction():
            menu = require_menu(self._store, menu_id)
            try:
                updated = menu.edit(
                    name=request_dto.name.strip() if request_dto.name is not None else None,
                    moments=(
                        _clean_moments(request_dto.moments)
                        if request_dto.moments is not None
                        else None
                    ),
                    is_active=request_dto.is_active,
                )
            except ValueError as exc:
                raise InvalidMenuError(str(exc)) from exc

            self._store.menus.save(updated)
            logger.info("menu_updated", extra={"menu_id": str(menu_id)})
            self._broadcaster.publish_menus(self._store.menus.list(), trace_ctx)
        return to_menu_response(updated)


class DeleteMenu:
    def __init__(self, store: ServiceStore, broadcaster: SyncBroadcaster) -> None:
        self._store = store
        self._broadcaster = broadcaster

    def execute(self, menu_id: MenuId, trace_ctx: TraceContext) -> MenuListResponse:
        with self._store.transaction():
            menu = require_menu(self._store, menu_id)
            try:
                menu.ensure_deletable()
            except ActiveMenuDeletionError as exc:
                raise MenuDeletionBlockedError(str(exc)) from exc

            self._store.menus.delete(menu_id)
            logger.info("menu_deleted", extra={"menu_id": str(menu_id)})
            menus = self._store.menus.list()
            self._broadcaster.publish_menus(menus, trace_ctx)
        return MenuListResponse(menus=[to_menu_response(item) for item in menus])
