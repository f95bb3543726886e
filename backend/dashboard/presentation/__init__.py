"""Presentation layer: the Display protocol and the console renderer."""

from dashboard.presentation.console import ConsoleDisplay
from dashboard.presentation.display import Display, Section

__all__ = [
    "ConsoleDisplay",
    "Display",
    "Section",
]
