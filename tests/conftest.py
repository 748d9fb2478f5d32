# Add backend to path so "from app...." works when running pytest from project root
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

_backend = Path(__file__).resolve().parent.parent / "backend"
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))


@pytest.fixture
def make_shift():
    """Shift factory: clock-in/clock-out default to the scheduled times."""
    from app.models.payroll import Shift

    def _make(start: datetime, hours: float = 8, shift_id: str = "shift-1", clocked: bool = True, **overrides):
        end = overrides.pop("end", start + timedelta(hours=hours))
        fields = {
            "id": shift_id,
            "employee_id": "user-1",
            "start_time": start,
            "end_time": end,
        }
        if clocked:
            fields["actual_start_time"] = start
            fields["actual_end_time"] = end
        fields.update(overrides)
        return Shift(**fields)

    return _make
