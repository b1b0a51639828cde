"""Floating results dropdown and its Textual placement engine."""

from dataclasses import replace
from typing import Any, Callable, Optional

from rich.text import Text
from textual import events
from textual.widget import Widget
from textual.widgets import Static

from searchlib.controller import SearchSnapshot
from searchlib.matching import resolve_path
from searchlib.positioning import (
    PlacementOptions,
    PlacementResult,
    Rect,
    Size,
    compute_placement,
)

MAX_VISIBLE_ROWS = 10


class ResultsDropdown(Static):
    """Overlay listing the current results, one row per record."""

    DEFAULT_CSS = """
    ResultsDropdown {
        overlay: screen;
        dock: top;
        display: none;
        height: auto;
        max-height: 12;
        background: $surface;
        border: solid $primary;
        border-top: none;
        padding: 0 1;
    }

    ResultsDropdown.-flipped {
        border-top: solid $primary;
        border-bottom: none;
    }

    ResultsDropdown.-dark {
        background: $panel-darken-2;
    }
    """

    def __init__(self, on_activate: Callable[[int], None], **kwargs):
        super().__init__("", **kwargs)
        self._on_activate = on_activate
        self._snapshot: Optional[SearchSnapshot] = None

    def show_snapshot(self, snapshot: SearchSnapshot, width: int) -> None:
        """Render results, visibility and placement from a snapshot."""
        self._snapshot = snapshot
        self.display = snapshot.visible
        if not snapshot.visible:
            return

        self.styles.width = max(width, 10)
        self.set_class(snapshot.theme == "dark", "-dark")
        if snapshot.placement is not None:
            self.set_class(snapshot.placement.flipped, "-flipped")
            self.styles.offset = (int(snapshot.placement.x), int(snapshot.placement.y))

        if snapshot.no_results:
            self.update(Text(snapshot.no_results_text, style="italic dim", justify="center"))
            return

        lines = Text()
        for index, item in enumerate(snapshot.results):
            if index:
                lines.append("\n")
            style = "reverse" if index == snapshot.highlighted_index else ""
            lines.append(snapshot.display_value(item), style=f"bold {style}".strip())
            description = resolve_path(item, "description")
            if isinstance(description, str) and description:
                lines.append(f"  {description}", style=f"dim {style}".strip())
        self.update(lines)

    def estimated_size(self, width: int) -> Size:
        rows = 1
        if self._snapshot is not None and self._snapshot.results:
            rows = min(len(self._snapshot.results), MAX_VISIBLE_ROWS)
        # one border row, top or bottom
        return Size(width=max(width, 10), height=rows + 1)

    def on_click(self, event: events.Click) -> None:
        offset = event.get_content_offset(self)
        if offset is None or self._snapshot is None:
            return
        if 0 <= offset.y < len(self._snapshot.results):
            event.stop()
            self._on_activate(offset.y)


class TextualPlacementEngine:
    """Positioning collaborator backed by Textual screen geometry.

    Coordinates are terminal cells, so the clearance margin is given in cells
    here rather than taken from the options.
    """

    def __init__(self, margin: int = 1):
        self.margin = margin

    def __call__(self, anchor: Widget, overlay: Any, options: PlacementOptions) -> PlacementResult:
        region = anchor.region
        viewport = anchor.screen.size
        if isinstance(overlay, ResultsDropdown):
            floating = overlay.estimated_size(region.width)
        else:
            floating = Size(overlay.outer_size.width, overlay.outer_size.height)
        return compute_placement(
            Rect(region.x, region.y, region.width, region.height),
            floating,
            Size(viewport.width, viewport.height),
            replace(options, shift_margin=self.margin),
        )
