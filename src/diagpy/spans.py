from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidSpan


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Half-open byte range [start, end) into a source buffer.

    Offsets are UTF-8 byte offsets, not character indices.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise InvalidSpan(f"invalid span {self.start}..{self.end}")

    @classmethod
    def coerce(cls, value: SourceSpan | tuple[int, int] | range) -> SourceSpan:
        if isinstance(value, SourceSpan):
            return value
        if isinstance(value, range):
            if value.step != 1:
                raise InvalidSpan(f"span range must have step 1, got {value!r}")
            return cls(value.start, value.stop)
        start, end = value
        return cls(start, end)

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"
