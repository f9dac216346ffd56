# hiyo_notes/core/filenames.py

from __future__ import annotations

import re
import unicodedata
from typing import Iterable


WINDOWS_RESERVED_NAMES = {
    "con", "prn", "aux", "nul",
    *(f"com{i}" for i in range(1, 10)),
    *(f"lpt{i}" for i in range(1, 10)),
}

INVALID_CHARS_RE = re.compile(r'[<>:"/\\|?*\u0000-\u001f]')
WHITESPACE_RE = re.compile(r"\s+")

MAX_FILENAME_LENGTH = 120

NOTE_EXTENSION = ".md"
NUMBER_WIDTH = 3


class InvalidGenreName(ValueError):
    """Genre name cannot be used as a directory name."""


def safe_filename(title: str) -> str:
    """
    Convert an arbitrary name into a filesystem-safe one.

    Returns "" when nothing usable is left; callers decide what to do with it.
    """
    if title is None:
        raise ValueError("safe_filename(): title is None")

    name = unicodedata.normalize("NFKC", str(title))
    name = "".join(ch for ch in name if unicodedata.category(ch)[0] != "C")

    name = name.strip()
    name = WHITESPACE_RE.sub(" ", name)
    name = name.replace("/", "-").replace("\\", "-")
    name = INVALID_CHARS_RE.sub("_", name)

    # Windows: no trailing dot or space
    name = name.rstrip(" .")
    if not name:
        return ""

    base = name.split(".", 1)[0].strip().lower()
    if base in WINDOWS_RESERVED_NAMES:
        name = f"_{name}"

    if len(name) > MAX_FILENAME_LENGTH:
        name = name[:MAX_FILENAME_LENGTH].rstrip(" .")

    return name


def validate_genre_name(name: str) -> str:
    """
    Genre names double as directory names, so they must survive
    safe_filename() unchanged.
    """
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidGenreName("Genre name is empty.")
    if cleaned in (".", ".."):
        raise InvalidGenreName(f"'{cleaned}' cannot be used as a genre name.")
    if safe_filename(cleaned) != cleaned:
        raise InvalidGenreName(
            f"'{cleaned}' contains characters that cannot be used in a folder name."
        )
    return cleaned


def note_filename(genre: str, number: int) -> str:
    return f"{genre}_{number:0{NUMBER_WIDTH}d}{NOTE_EXTENSION}"


def note_pattern(genre: str) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(genre)}_(\d+){re.escape(NOTE_EXTENSION)}")


def parse_note_number(genre: str, filename: str) -> int | None:
    m = note_pattern(genre).fullmatch(filename)
    if m is None:
        return None
    return int(m.group(1))


def next_note_filename(genre: str, filenames: Iterable[str]) -> str:
    """
    max(existing number) + 1 for the genre; gaps are not reused.
    """
    numbers = [
        n for n in (parse_note_number(genre, f) for f in filenames if f.startswith(genre))
        if n is not None
    ]
    return note_filename(genre, max(numbers, default=0) + 1)
