"""Holiday and country values as the client displays them."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Holiday:
    name: str
    date: str
    type: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Holiday":
        return cls(
            name=str(data.get("name", "")),
            date=str(data.get("date", "")),
            type=str(data.get("type", "")),
        )


@dataclass(frozen=True)
class Country:
    code: str
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Country":
        return cls(code=str(data.get("code", "")), name=str(data.get("name", "")))
