from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class SelectMenuRequest(CamelBaseModel):
    menu_id: str


class SeatTableRequest(CamelBaseModel):
    pax: int = Field(ge=1)
    language: str | None = None


class SelectPairingRequest(CamelBaseModel):
    pairing: str = Field(min_length=1)


class SetRestrictionRequest(CamelBaseModel):
    type: str | None = None
    description: str = ""


class CreateMenuRequest(CamelBaseModel):
    name: str = Field(min_length=1)
    moments: list[str] = Field(min_length=1)
    is_active: bool = True


class UpdateMenuRequest(CamelBaseModel):
    name: str | None = Field(default=None, min_length=1)
    moments: list[str] | None = Field(default=None, min_length=1)
    is_active: bool | None = None
