from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Vehicle:
    id: str
    condition: str
    make: str
    model: str
    year: int
    price: int
    mileage: int = 0
    body: str | None = None
    fuel_type: str | None = None
    ext_color: str | None = None
    is_special: bool = False
    is_certified: bool = False
    is_new_arrival: bool = False

    @property
    def title(self) -> str:
        return f"{self.year} {self.make} {self.model}"

    def to_dict(self) -> dict[str, Any]:
        return {**asdict(self), "title": self.title}
