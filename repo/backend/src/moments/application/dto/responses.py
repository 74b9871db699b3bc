from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class MomentLogResponse(BaseModel):
    momentNumber: int
    momentName: str
    label: str | None = None
    startTime: datetime | None = None
    readyTime: datetime | None = None
    finishTime: datetime | None = None


class RestrictionResponse(BaseModel):
    type: str | None = None
    description: str = ""


class TableResponse(BaseModel):
    tableId: str
    number: str
    menu: str | None = None
    courses: list[str] = Field(default_factory=list)
    pairing: str | None = None
    pax: int | None = None
    language: str | None = None
    status: str
    phase: str
    currentMoment: int
    totalMoments: int
    servedMoments: int
    currentLabel: str | None = None
    currentCourse: str | None = None
    startTime: datetime | None = None
    lastMomentTime: datetime | None = None
    momentsHistory: list[MomentLogResponse] = Field(default_factory=list)
    restriction: RestrictionResponse


class TableListResponse(BaseModel):
    tables: list[TableResponse] = Field(default_factory=list)


class KitchenTicketResponse(BaseModel):
    tableId: str
    number: str
    menu: str
    status: str
    currentMoment: int
    totalMoments: int
    currentLabel: str | None = None
    currentCourse: str | None = None
    pax: int | None = None
    language: str | None = None
    restriction: RestrictionResponse
    preparingSince: datetime | None = None


class KitchenBoardResponse(BaseModel):
    tickets: list[KitchenTicketResponse] = Field(default_factory=list)


class MenuResponse(BaseModel):
    menuId: str
    name: str
    moments: list[str] = Field(default_factory=list)
    isActive: bool
    servedMoments: int


class MenuListResponse(BaseModel):
    menus: list[MenuResponse] = Field(default_factory=list)


class PairingListResponse(BaseModel):
    pairings: list[str] = Field(default_factory=list)


class HistoricalServiceResponse(BaseModel):
    serviceId: str
    tableNumber: str
    menuName: str
    pairing: str | None = None
    startTime: datetime
    endTime: datetime
    momentsHistory: list[MomentLogResponse] = Field(default_factory=list)


class HistoryResponse(BaseModel):
    services: list[HistoricalServiceResponse] = Field(default_factory=list)


class NotificationResponse(BaseModel):
    targetRole: str
    title: str
    body: str


class MomentTimingResponse(BaseModel):
    momentNumber: int
    momentName: str
    kitchenSeconds: float | None = None
    floorSeconds: float | None = None
    delayed: bool


class TableTimingResponse(BaseModel):
    tableId: str
    number: str
    menu: str | None = None
    elapsedSeconds: float | None = None
    moments: list[MomentTimingResponse] = Field(default_factory=list)


class MenuAverageResponse(BaseModel):
    menuName: str
    services: int
    averageSeconds: float


class ServiceReportResponse(BaseModel):
    generatedAt: datetime
    tables: list[TableTimingResponse] = Field(default_factory=list)
    menuAverages: list[MenuAverageResponse] = Field(default_factory=list)
    delayedMoments: int
