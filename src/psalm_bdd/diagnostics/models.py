from __future__ import annotations

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _coerce_text(value: object) -> object:
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, int | float):
        return str(value)
    return value


class DiagnosticRecord(BaseModel):
    """One finding reported by the analyzer.

    Decoded from the analyzer's JSON output, where the category lives under
    ``type``. Every other key of the analyzer record is ignored.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    kind: str = Field(alias="type", min_length=1)
    message: str

    @field_validator("kind", "message", mode="before")
    @classmethod
    def _coerce_scalars_to_text(cls, value: object) -> object:
        return _coerce_text(value)

    @field_validator("message", mode="before")
    @classmethod
    def _null_message_is_empty(cls, value: object) -> object:
        return "" if value is None else value


class DiagnosticSet:
    """Diagnostics of one analyzer run that no expectation has claimed yet.

    Order of insertion is preserved; duplicates are kept and consumed one at a time.
    """

    __slots__ = ("_records", "exit_code")

    def __init__(
        self,
        records: Iterable[DiagnosticRecord] = (),
        *,
        exit_code: int | None = None,
    ) -> None:
        self._records: list[DiagnosticRecord] = list(records)
        self.exit_code = exit_code

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[DiagnosticRecord]:
        return iter(tuple(self._records))

    def __bool__(self) -> bool:
        return bool(self._records)

    def __repr__(self) -> str:
        return f"DiagnosticSet({self._records!r}, exit_code={self.exit_code!r})"

    def snapshot(self) -> tuple[DiagnosticRecord, ...]:
        return tuple(self._records)

    def remove_at(self, index: int) -> DiagnosticRecord:
        return self._records.pop(index)


class ExpectationPattern(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind_literal: str
    message_pattern: str

    def render(self) -> str:
        return f"[ {self.kind_literal} {self.message_pattern} ]"
