from .filenames import (
    InvalidGenreName,
    next_note_filename,
    note_filename,
    parse_note_number,
    safe_filename,
    validate_genre_name,
)
from .models import DEFAULT_GENRE_NAME, GENRE_COLORS, Genre, Note, default_genre

__all__ = ["InvalidGenreName",
           "next_note_filename",
           "note_filename",
           "parse_note_number",
           "safe_filename",
           "validate_genre_name",
           "DEFAULT_GENRE_NAME",
           "GENRE_COLORS",
           "Genre",
           "Note",
           "default_genre",
           ]
