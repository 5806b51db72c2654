"""Rich console presenter for badge views.

Renders each view as a table. The latest view per item is kept in
``views`` so a fresh result replaces the cached one it supersedes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from badgevault.config.models.app_settings import PresenterSettings
from badgevault.presentation.formatting import (
    LOADING_TEXT,
    UPDATING_TEXT,
    format_completion_date,
    format_level,
    no_data_text,
)
from badgevault.services.badge_models import AnnotatedRecord
from badgevault.shared.constants import NetworkConfig
from badgevault.shared.protocols.services import BasePresenter, PlaceholderReason


@dataclass
class ItemView:
    """What is currently shown for one item."""

    item_id: int
    records: list[AnnotatedRecord] = field(default_factory=list)
    fresh: bool = False
    placeholder: PlaceholderReason | None = None
    updating: bool = False


class ConsolePresenter(BasePresenter):
    """Presenter that prints badge views to a rich console.

    Args:
        console: Output console (stdout if None)
        settings: Display flags
        image_base_url: Base URL used to build badge image links
        json_output: Print one JSON document per view instead of tables
    """

    def __init__(
        self,
        console: Console | None = None,
        settings: PresenterSettings | None = None,
        image_base_url: str = NetworkConfig.IMAGE_BASE_URL,
        *,
        json_output: bool = False,
    ) -> None:
        self.console = console or Console()
        self.settings = settings or PresenterSettings()
        self.image_base_url = image_base_url
        self.json_output = json_output
        self.views: dict[int, ItemView] = {}

    def present(
        self,
        item_id: int,
        records: Sequence[AnnotatedRecord],
        fresh: bool,
    ) -> None:
        self.views[item_id] = ItemView(item_id=item_id, records=list(records), fresh=fresh)
        if self.json_output:
            self.console.print_json(data=self._view_to_dict(item_id, records, fresh))
            return
        self.console.print(self._build_table(item_id, records, fresh))
        if self.settings.show_refetch_hint:
            self.console.print(
                Text(f"Re-fetch with: badgevault refetch {item_id}", style="dim")
            )

    def present_placeholder(self, item_id: int, reason: PlaceholderReason) -> None:
        previous = self.views.get(item_id)
        # A loading placeholder never replaces data that is already shown
        if reason is PlaceholderReason.LOADING and previous and previous.records:
            return
        self.views[item_id] = ItemView(item_id=item_id, placeholder=reason)

        message = LOADING_TEXT if reason is PlaceholderReason.LOADING else no_data_text(item_id)
        if self.json_output:
            self.console.print_json(
                data={"item_id": item_id, "placeholder": reason.value, "message": message}
            )
            return
        self.console.print(Text(f"[{item_id}] {message}", style="dim"))

    def present_updating(self, item_id: int) -> None:
        view = self.views.get(item_id)
        if view is None:
            return
        view.updating = True
        if not self.settings.show_updating_notice:
            return
        if self.json_output:
            self.console.print_json(data={"item_id": item_id, "updating": True})
            return
        self.console.print(Text(f"[{item_id}] {UPDATING_TEXT}", style="dim"))

    def _build_table(
        self,
        item_id: int,
        records: Sequence[AnnotatedRecord],
        fresh: bool,
    ) -> Table:
        title = f"App {item_id}"
        if not fresh and self.settings.show_cached_marker:
            title += " (cached)"

        table = Table(title=title, show_lines=False)
        table.add_column("Level", justify="right")
        table.add_column("Name")
        table.add_column("Scarcity", justify="right")
        table.add_column("First completion")
        table.add_column("Image", overflow="fold")

        for record, highlighted in records:
            table.add_row(
                format_level(record),
                record.name,
                record.scarcity,
                format_completion_date(record.first_completion),
                record.image_url(item_id, self.image_base_url),
                style="bold green" if highlighted else None,
            )
        return table

    def _view_to_dict(
        self,
        item_id: int,
        records: Sequence[AnnotatedRecord],
        fresh: bool,
    ) -> dict[str, Any]:
        return {
            "item_id": item_id,
            "fresh": fresh,
            "badges": [
                {
                    **record.to_dict(),
                    "image_url": record.image_url(item_id, self.image_base_url),
                    "highlighted": highlighted,
                }
                for record, highlighted in records
            ],
        }


__all__ = ["ConsolePresenter", "ItemView"]
