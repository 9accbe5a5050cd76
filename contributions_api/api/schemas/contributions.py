import math
import re
from datetime import date
from datetime import datetime
from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationInfo
from pydantic import field_validator
from pydantic_core import PydanticCustomError


OutputFormat = Literal["json", "csv"]
OUTPUT_FORMATS: tuple[str, ...] = ("json", "csv")

ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
QUERY_NAMES = {
    "from_date": "from",
    "to_date": "to",
    "days": "d",
    "weeks": "w",
    "months": "m",
    "years": "y",
}
DURATION_LABELS = {"d": "days", "w": "weeks", "m": "months", "y": "years"}


def _coerce_integer(value: Any) -> int | None:
    """Return `value` as an int when it is integral, otherwise None."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            pass
        try:
            value = float(value)
        except ValueError:
            return None
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return None


class QueryOptions(BaseModel):
    """Validated query-string options for a contributions request.

    Fields are validated in declaration order, so the first reported error
    always belongs to the earliest offending query parameter.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_date: date | None = Field(default=None, alias="from")
    to_date: date | None = Field(default=None, alias="to")
    days: int | None = Field(default=None, alias="d")
    weeks: int | None = Field(default=None, alias="w")
    months: int | None = Field(default=None, alias="m")
    years: int | None = Field(default=None, alias="y")
    format: OutputFormat = "json"

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def parse_iso_date(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or isinstance(value, date):
            return value

        if isinstance(value, str) and ISO_DATE_PATTERN.fullmatch(value):
            try:
                return date.fromisoformat(value)
            except ValueError:
                pass

        name = QUERY_NAMES[info.field_name or ""]
        raise PydanticCustomError(
            "iso_date", f"'{name}' must be in valid iso date format (YYYY-MM-DD)"
        )

    @field_validator("days", "weeks", "months", "years", mode="before")
    @classmethod
    def parse_duration(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return value

        name = QUERY_NAMES[info.field_name or ""]
        label = f"'{name}' ({DURATION_LABELS[name]})"
        number = _coerce_integer(value)
        if number is None:
            raise PydanticCustomError("integer", f"{label} must be an integer")
        if number < 1:
            raise PydanticCustomError("too_small", f"{label} must be at least 1")
        return number

    @field_validator("format", mode="before")
    @classmethod
    def parse_format(cls, value: Any) -> Any:
        if value not in OUTPUT_FORMATS:
            raise PydanticCustomError("format", "'format' must be 'json' or 'csv'")
        return value


class DateWindow(BaseModel):
    """Inclusive time range sent to the contributions calendar query."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_: datetime = Field(alias="from")
    to: datetime


class ActivityRecord(BaseModel):
    """Single day of contribution activity."""

    date: str
    count: int = Field(ge=0)
    level: int = Field(ge=0, le=4)


class ContributionsResponse(BaseModel):
    """Flat contributions payload returned for a user."""

    model_config = ConfigDict(populate_by_name=True)

    to: date
    from_: date = Field(alias="from")
    total: int = Field(ge=0)
    activities: list[ActivityRecord]


class ErrorResponse(BaseModel):
    error: str
    message: str
