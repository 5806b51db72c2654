"""Presentation layer for badge views."""

from badgevault.presentation.console_presenter import ConsolePresenter, ItemView
from badgevault.presentation.formatting import format_completion_date

__all__ = ["ConsolePresenter", "ItemView", "format_completion_date"]
