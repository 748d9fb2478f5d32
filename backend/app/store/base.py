"""Holiday calendar file loading (async, off the event loop)."""

import asyncio
import json
from pathlib import Path
from typing import Any

from app.models.payroll import Holiday


def _read_json(path: Path) -> Any:
    if not path.exists():
        return None
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


async def read_json_async(path: Path) -> Any:
    return await asyncio.to_thread(_read_json, path)


async def load_holiday_calendar(path: Path) -> list[Holiday]:
    """
    Load a holiday list written as
    [{"date": "2025-12-25", "type": "regular", "name": "Christmas Day"}, ...].
    A missing file yields an empty calendar.
    """
    data = await read_json_async(path)
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"Holiday calendar {path} must contain a JSON list")
    return [Holiday.model_validate(item) for item in data]
