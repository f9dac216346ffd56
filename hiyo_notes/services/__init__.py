from .autosave import AutosaveScheduler
from .genre_manager import GenreManager
from .markdown_renderer import MarkdownRenderer
from .note_manager import NoteManager
from .session import NotesSession, create_session
from .settings_manager import SettingsManager

__all__ = ["AutosaveScheduler",
           "GenreManager",
           "MarkdownRenderer",
           "NoteManager",
           "NotesSession",
           "create_session",
           "SettingsManager",
           ]
