from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime

DEFAULT_GENRE_NAME = "default"
DEFAULT_GENRE_COLOR = "blue"

# Cosmetic only; the UI maps these names to real colors.
GENRE_COLORS = ("blue", "green", "orange", "red", "purple", "pink", "yellow")


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Genre:
    name: str
    color: str | None = None
    is_default: bool = False
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "is_default": self.is_default,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Genre":
        """Raises KeyError/TypeError on malformed entries; callers skip those."""
        name = data["name"]
        if not isinstance(name, str) or not name:
            raise TypeError(f"bad genre name: {name!r}")
        color = data.get("color")
        return cls(
            id=str(data["id"]),
            name=name,
            color=str(color) if color else None,
            is_default=bool(data.get("is_default", False)),
        )


def default_genre() -> Genre:
    return Genre(name=DEFAULT_GENRE_NAME, color=DEFAULT_GENRE_COLOR, is_default=True)


@dataclass(frozen=True)
class Note:
    """
    One note file: <save root>/<genre>/<filename>.
    Timestamps and id live in memory only.
    """
    filename: str
    genre: str
    content: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    modified_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_new_id)

    def saved(self, content: str) -> "Note":
        return replace(self, content=content, modified_at=datetime.now())
