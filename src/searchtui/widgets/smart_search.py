"""Search input widget with a floating results dropdown."""

import logging
from typing import Any, Optional

from textual import events
from textual.actions import SkipAction
from textual.binding import Binding
from textual.containers import Horizontal
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Button, Input, LoadingIndicator

from searchlib.config import SearchConfig
from searchlib.controller import SearchController, SearchSnapshot
from searchlib.debounce import Scheduler

from .results_dropdown import ResultsDropdown, TextualPlacementEngine

logger = logging.getLogger(__name__)


class ClearButton(Button):
    """Clear button that never takes focus away from the input."""

    can_focus = False


class SmartSearch(Widget):
    """Autocomplete search box over an in-memory collection."""

    DEFAULT_CSS = """
    SmartSearch {
        height: auto;
    }

    SmartSearch > Horizontal {
        height: auto;
        border: round $primary-lighten-2;
    }

    SmartSearch.-dark > Horizontal {
        background: $panel-darken-2;
    }

    SmartSearch.-disabled > Horizontal {
        opacity: 0.7;
    }

    SmartSearch Input {
        width: 1fr;
        border: none;
    }

    SmartSearch LoadingIndicator {
        width: 4;
        height: 1;
        display: none;
    }

    SmartSearch ClearButton {
        min-width: 3;
        width: 3;
        height: 1;
        border: none;
        display: none;
    }
    """

    BINDINGS = [
        Binding("down", "navigate('down')", "Next", show=False, priority=True),
        Binding("up", "navigate('up')", "Previous", show=False, priority=True),
        Binding("enter", "navigate('enter')", "Select", show=False, priority=True),
        Binding("escape", "navigate('escape')", "Close", show=False, priority=True),
    ]

    class SearchInput(Message):
        """Message sent once typing settles."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    class ResultSelected(Message):
        """Message sent when a result is committed."""

        def __init__(self, item: Any) -> None:
            super().__init__()
            self.item = item

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        scheduler: Optional[Scheduler] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.config = config or SearchConfig()
        self.controller = SearchController(
            self.config,
            scheduler=scheduler,
            placement_engine=TextualPlacementEngine(),
        )
        self.controller.add_input_listener(self._on_search_input)
        self.controller.add_select_listener(self._on_result_selected)
        self._input: Optional[Input] = None
        self._dropdown = ResultsDropdown(self._activate_row)
        self._unsubscribe = None

    def compose(self):
        with Horizontal():
            yield Input(
                value=self.config.value,
                placeholder=self.config.placeholder,
                id="search-input",
            )
            yield LoadingIndicator()
            yield ClearButton("×", id="clear-button")

    async def on_mount(self) -> None:
        self._input = self.query_one("#search-input", Input)
        await self.screen.mount(self._dropdown)
        self._unsubscribe = self.controller.subscribe(self._render_snapshot)
        self.controller.mount(self._input, self._dropdown)
        for node in self.ancestors:
            if isinstance(node, Widget):
                self.watch(node, "scroll_x", self._on_ancestor_scroll, init=False)
                self.watch(node, "scroll_y", self._on_ancestor_scroll, init=False)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
        self.controller.close()
        if self._dropdown.is_attached:
            self._dropdown.remove()

    # -- Textual events -> controller ------------------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        # echo of a value the controller set itself
        if event.value == self.controller.query:
            return
        self.controller.on_input(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()

    def on_descendant_focus(self, event: events.DescendantFocus) -> None:
        self.controller.on_focus()

    def on_descendant_blur(self, event: events.DescendantBlur) -> None:
        self.controller.on_blur()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "clear-button":
            event.stop()
            self.controller.on_clear()
            self._sync_input()

    def on_resize(self, event: events.Resize) -> None:
        self.controller.on_viewport_changed()

    def _on_ancestor_scroll(self) -> None:
        self.controller.on_viewport_changed()

    def action_navigate(self, key: str) -> None:
        if not self.controller.on_key(key):
            raise SkipAction()

    # -- public API ------------------------------------------------------

    def set_data(self, records) -> None:
        self.controller.set_data(records)

    def set_loading(self, loading: bool) -> None:
        self.controller.set_loading(loading)

    def set_disabled(self, disabled: bool) -> None:
        self.controller.set_disabled(disabled)

    def clear(self) -> None:
        self.controller.on_clear()
        self._sync_input()

    def refresh_position(self) -> None:
        """Call after a screen resize; ancestor scrolls are tracked already."""
        self.controller.on_viewport_changed()

    # -- controller -> Textual -------------------------------------------

    def _activate_row(self, index: int) -> None:
        results = self.controller.results
        if 0 <= index < len(results):
            self.controller.on_result_activate(results[index])

    def _on_search_input(self, value: str) -> None:
        self.post_message(self.SearchInput(value))

    def _on_result_selected(self, item: Any) -> None:
        self._sync_input()
        self.post_message(self.ResultSelected(item))

    def _sync_input(self) -> None:
        if self._input is not None and self._input.value != self.controller.query:
            self._input.value = self.controller.query

    def _render_snapshot(self, snapshot: SearchSnapshot) -> None:
        self.set_class(snapshot.theme == "dark", "-dark")
        self.set_class(snapshot.disabled, "-disabled")
        if self._input is not None:
            self._input.disabled = snapshot.disabled
            self._input.placeholder = snapshot.placeholder
        self.query_one(LoadingIndicator).display = snapshot.loading
        self.query_one(ClearButton).display = snapshot.clearable
        width = self._input.region.width if self._input is not None else 20
        self._dropdown.show_snapshot(snapshot, width)
