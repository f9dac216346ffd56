from .filesystem import atomic_write_text, ensure_directory, probe_writable, write_recovery_copy

__all__ = ["atomic_write_text",
           "ensure_directory",
           "probe_writable",
           "write_recovery_copy",
           ]
