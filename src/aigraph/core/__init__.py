"""Core modules for aigraph."""

from aigraph.core.logging import configure_logging, LogLevel, LogComponent

__all__ = [
    'configure_logging',
    'LogLevel',
    'LogComponent'
]
