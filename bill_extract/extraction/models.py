"""Pydantic models for the structured amounts returned to callers."""

from enum import StrEnum
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)


class AmountKind(StrEnum):
    """Monetary fields extracted from a bill."""

    TOTAL_BILL = "total_bill"
    PAID = "paid"
    DUE = "due"


class ResultStatus(StrEnum):
    """Status reported alongside a structured result."""

    OK = "ok"


class AmountEntry(BaseModel):
    """One extracted amount with the text span it was read from.

    Serialized with the key ``type`` for the kind; ``kind`` is also
    accepted on input.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    kind: AmountKind = Field(alias="type")
    value: float = Field(ge=0, allow_inf_nan=False)
    source: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

    @field_validator("value", mode="before")
    @classmethod
    def _reject_bool(cls, value: object) -> object:
        if isinstance(value, bool):
            raise ValueError("amount value must be a number, not a boolean")
        return value


class StructuredResult(BaseModel):
    """Validated extraction output for one bill image."""

    model_config = ConfigDict(extra="ignore")

    currency: str = Field(min_length=1)
    amounts: list[AmountEntry]
    status: ResultStatus

    @model_validator(mode="after")
    def _unique_kinds(self) -> "StructuredResult":
        seen: set[AmountKind] = set()
        for entry in self.amounts:
            if entry.kind in seen:
                raise ValueError(
                    f"amount kind {entry.kind.value!r} appears more than once"
                )
            seen.add(entry.kind)
        return self

    def amount(self, kind: AmountKind) -> float | None:
        """Return the value for ``kind``, or ``None`` if it was not found."""
        for entry in self.amounts:
            if entry.kind == kind:
                return entry.value
        return None

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
