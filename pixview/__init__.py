"""Image viewer building blocks: viewport geometry, thread pool, shell commands, compositor IPC and UI helpers."""

__version__ = "0.1.0"
__all__ = ["compositor", "shellcmd", "tpool", "ui", "viewport"]