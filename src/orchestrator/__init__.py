"""Orchestrator - settings, lock workflow and command-line entry point."""

from .config import Settings, configure_logging
from .lock_orchestrator import (
    EXIT_LOCAL_ERROR,
    EXIT_LOCK_FAILED,
    EXIT_OK,
    LockOrchestrator,
)
from .main import app, cli
from .output import JsonRenderer, TextRenderer, renderer_for

__all__ = [
    "EXIT_LOCAL_ERROR",
    "EXIT_LOCK_FAILED",
    "EXIT_OK",
    "JsonRenderer",
    "LockOrchestrator",
    "Settings",
    "TextRenderer",
    "app",
    "cli",
    "configure_logging",
    "renderer_for",
]
