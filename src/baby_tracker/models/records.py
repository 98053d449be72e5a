"""Record data models - feeding, sleep and growth logs."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator, model_validator

from baby_tracker.errors import ValidationError


def to_local_naive(value: datetime) -> datetime:
    """Aware datetimes are converted to local wall-clock time and stored naive."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


LocalDatetime = Annotated[datetime, AfterValidator(to_local_naive)]


class RecordKind(str, Enum):
    """Kinds of logged records. Each kind maps to exactly one table."""

    FEEDING = "feeding"
    SLEEP = "sleep"
    GROWTH = "growth"

    @classmethod
    def parse(cls, value: "str | RecordKind") -> "RecordKind":
        """Resolve a record type name as sent by a screen."""
        if isinstance(value, RecordKind):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(k.value for k in cls)
            raise ValidationError(f"Unknown record type {value!r}. Use one of: {names}") from None


class FeedingAmount(str, Enum):
    """How much the baby ate."""

    NONE = "none"
    LITTLE = "little"
    NORMAL = "normal"
    A_LOT = "a_lot"

    @classmethod
    def parse(cls, value: str) -> "FeedingAmount | None":
        """Accept canonical names and the UI spellings ("a little", "a lot")."""
        key = " ".join(str(value).strip().lower().replace("_", " ").split())
        return _AMOUNT_ALIASES.get(key)


_AMOUNT_ALIASES = {
    "none": FeedingAmount.NONE,
    "little": FeedingAmount.LITTLE,
    "a little": FeedingAmount.LITTLE,
    "normal": FeedingAmount.NORMAL,
    "a lot": FeedingAmount.A_LOT,
}


class FeedingFields(BaseModel):
    """Writable fields of a feeding record."""

    model_config = ConfigDict(extra="forbid")

    datetime: LocalDatetime = Field(..., description="When the feeding happened")
    amount: FeedingAmount = Field(default=FeedingAmount.NONE)
    notes: str = Field(default="")

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> FeedingAmount:
        if value is None or value == "":
            return FeedingAmount.NONE
        if isinstance(value, FeedingAmount):
            return value
        parsed = FeedingAmount.parse(value)
        if parsed is None:
            raise ValueError(f"must be one of none, a little, normal, a lot (got {value!r})")
        return parsed

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_default(cls, value: Any) -> Any:
        return "" if value is None else value


class SleepFields(BaseModel):
    """Writable fields of a sleep record. end is None while the baby sleeps."""

    model_config = ConfigDict(extra="forbid")

    start: LocalDatetime = Field(..., description="Sleep start")
    end: LocalDatetime | None = Field(default=None, description="Sleep end")

    @model_validator(mode="after")
    def _end_after_start(self) -> "SleepFields":
        if self.end is not None and self.end < self.start:
            raise ValueError("end must not be before start")
        return self


class GrowthFields(BaseModel):
    """Writable fields of a growth measurement."""

    model_config = ConfigDict(extra="forbid")

    height: float = Field(..., gt=0, lt=150, description="Height in cm")
    weight: float = Field(..., gt=0, lt=50, description="Weight in kg")
    date: LocalDatetime = Field(..., description="Measurement date")


class FeedingRecord(BaseModel):
    """Stored feeding record. amount is kept as stored so legacy values survive reads."""

    id: int
    datetime: LocalDatetime
    amount: str = FeedingAmount.NONE.value
    notes: str = ""

    @field_validator("amount", "notes", mode="before")
    @classmethod
    def _null_columns(cls, value: Any, info: Any) -> Any:
        if value is None:
            return FeedingAmount.NONE.value if info.field_name == "amount" else ""
        return value


class SleepRecord(BaseModel):
    """Stored sleep record."""

    id: int
    start: LocalDatetime
    end: LocalDatetime | None = None

    @property
    def in_progress(self) -> bool:
        return self.end is None


class GrowthRecord(BaseModel):
    """Stored growth record. id is the creation time in epoch milliseconds."""

    id: str
    height: float
    weight: float
    date: LocalDatetime


Record = Union[FeedingRecord, SleepRecord, GrowthRecord]
