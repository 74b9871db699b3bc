from __future__ import annotations

from moments.application.dto.responses import HistoryResponse
from moments.application.mappers.history_mapper import to_historical_service_response
from moments.application.ports.repositories import ServiceStore


class ListHistory:
    def __init__(self, store: ServiceStore) -> None:
        self._store = store

    def execute(self) -> HistoryResponse:
        with self._store.transaction():
            services = self._store.history.list()
        return HistoryResponse(
            services=[to_historical_service_response(service) for service in services]
        )
