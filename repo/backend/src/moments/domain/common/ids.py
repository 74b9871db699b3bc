from __future__ import annotations

from typing import NewType

MenuId = NewType("MenuId", str)
TableId = NewType("TableId", str)
HistoricalServiceId = NewType("HistoricalServiceId", str)
