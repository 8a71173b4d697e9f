"""Filters accepted by the detailed time entries report.

Each recognized filter key maps to one variant. Unknown keys are rejected.
"""
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from timesheet.errors import ValidationError
from timesheet.models.report import DateRange, Selector


class CustomerFilter(BaseModel):
    """Restrict to projects of one or more customers."""

    kind: Literal["customer"] = "customer"
    customer: Selector


class StateFilter(BaseModel):
    """Match the entry state; "new" also matches entries without a state."""

    kind: Literal["state"] = "state"
    state: str


class DateFilter(BaseModel):
    """A single day in the configured date format, or an explicit range."""

    kind: Literal["date"] = "date"
    date: Union[DateRange, str]


class HoursFilter(BaseModel):
    """Exact hours match; numeric strings are coerced."""

    kind: Literal["hours"] = "hours"
    hours: float


EntryFilter = Annotated[
    Union[CustomerFilter, StateFilter, DateFilter, HoursFilter],
    Field(discriminator="kind"),
]

_entry_filter_adapter = TypeAdapter(EntryFilter)

FILTER_KEYS = ("customer", "state", "date", "hours")


def parse_filters(raw: dict) -> list:
    """Turn a ``{field: value}`` mapping into filter variants."""
    unknown = sorted(set(raw) - set(FILTER_KEYS))
    if unknown:
        raise ValidationError(
            "notifications.unknown_filter",
            f"Unknown filter keys: {', '.join(unknown)}",
        )

    parsed = []
    for key in FILTER_KEYS:
        if key not in raw:
            continue
        try:
            parsed.append(_entry_filter_adapter.validate_python({"kind": key, key: raw[key]}))
        except PydanticValidationError as e:
            raise ValidationError("notifications.invalid_filter", str(e)) from e
    return parsed
