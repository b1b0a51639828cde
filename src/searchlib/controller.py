"""Search component controller.

``SearchController`` owns every piece of mutable state of the component and is
the only entry point for outside events: typing, focus, blur, keys, result
clicks, collection replacement and viewport changes. After each transition it
hands an immutable ``SearchSnapshot`` to its subscribers, which is all a
rendering layer needs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from .config import SearchConfig
from .debounce import Debouncer, Scheduler
from .filtering import filter_records
from .matching import display_value
from .navigation import NavCommand, NavigationState, command_for_key
from .positioning import OverlayPositioner, Placement, PlacementEngine, PlacementOptions

logger = logging.getLogger(__name__)

Listener = Callable[["SearchSnapshot"], None]


@dataclass(frozen=True)
class SearchSnapshot:
    """Everything the presentation layer renders from."""

    query: str
    results: Tuple[Any, ...]
    highlighted_index: int
    visible: bool
    placement: Optional[Placement]
    loading: bool
    disabled: bool
    clearable: bool
    placeholder: str
    theme: str
    no_results_text: str
    display_key: str

    @property
    def no_results(self) -> bool:
        return bool(self.query) and not self.results

    @property
    def highlighted(self) -> Optional[Any]:
        if 0 <= self.highlighted_index < len(self.results):
            return self.results[self.highlighted_index]
        return None

    def display_value(self, record: Any) -> str:
        return display_value(record, self.display_key)


class SearchController:
    """Interaction state machine for the search box and its dropdown."""

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        scheduler: Optional[Scheduler] = None,
        placement_engine: Optional[PlacementEngine] = None,
    ):
        self.config = config or SearchConfig()
        self._query = self.config.value
        self._clearable = bool(self._query)
        self._data: List[Any] = list(self.config.data)
        self._keys: List[str] = list(self.config.filterable_keys)
        self._loading = self.config.loading
        self._disabled = self.config.disabled
        self._stale_data = False
        self._focused = False
        self._results: List[Any] = []
        self._nav = NavigationState()

        self._debouncer = Debouncer(scheduler, name="input-debounce")
        self._blur_timer = Debouncer(scheduler, name="blur-close")
        self._positioner = OverlayPositioner(
            placement_engine,
            is_visible=lambda: self._nav.is_open and not self._torn_down,
            on_change=self._notify,
            options=PlacementOptions(shift_margin=self.config.shift_margin),
        )
        self._anchor: Any = None
        self._overlay: Any = None
        self._torn_down = False

        self._listeners: List[Listener] = []
        self._input_listeners: List[Callable[[str], None]] = []
        self._select_listeners: List[Callable[[Any], None]] = []

    # -- subscriptions ---------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every state change."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def add_input_listener(self, callback: Callable[[str], None]) -> None:
        """Notified with the raw query once the debounce window elapses."""
        self._input_listeners.append(callback)

    def add_select_listener(self, callback: Callable[[Any], None]) -> None:
        """Notified with the full record on every commit."""
        self._select_listeners.append(callback)

    # -- read side -------------------------------------------------------

    @property
    def query(self) -> str:
        return self._query

    @property
    def results(self) -> List[Any]:
        return list(self._results)

    @property
    def visible(self) -> bool:
        return self._nav.is_open

    @property
    def highlighted_index(self) -> int:
        return self._nav.effective_highlight

    @property
    def placement(self) -> Optional[Placement]:
        return self._positioner.placement

    @property
    def disabled(self) -> bool:
        return self._disabled

    @property
    def loading(self) -> bool:
        return self._loading

    def snapshot(self) -> SearchSnapshot:
        return SearchSnapshot(
            query=self._query,
            results=tuple(self._results),
            highlighted_index=self._nav.effective_highlight,
            visible=self._nav.is_open,
            placement=self._positioner.placement if self._nav.is_open else None,
            loading=self._loading,
            disabled=self._disabled,
            clearable=self._clearable,
            placeholder=self.config.placeholder,
            theme=self.config.theme,
            no_results_text=self.config.no_results_text,
            display_key=self.config.display_key,
        )

    # -- user events -----------------------------------------------------

    def on_input(self, text: str) -> None:
        if self._inert():
            return
        # typing only reaches us from a focused input
        self._focused = True
        self._query = text or ""
        self._clearable = bool(self._query)
        self._debouncer.schedule(self._settle_input, self.config.debounce_timeout)
        self._notify()

    def _settle_input(self) -> None:
        if self._torn_down:
            return
        query = self._query
        logger.debug("Input settled: %r", query)
        for callback in list(self._input_listeners):
            callback(query)
        self._recompute()
        if query and self._focused:
            self._open()
        else:
            self._close()
        self._notify()

    def on_focus(self) -> None:
        self._focused = True
        if self._inert():
            return
        self._blur_timer.cancel()
        self._recompute()
        if self._results:
            self._open()
        self._notify()

    def on_blur(self) -> None:
        """Close after a grace period so a result click can land first."""
        self._focused = False
        if self._torn_down:
            return
        self._blur_timer.schedule(self._close_after_blur, self.config.blur_grace)

    def _close_after_blur(self) -> None:
        if self._torn_down or not self._nav.is_open:
            return
        logger.debug("Closing dropdown after blur")
        self._close()
        self._notify()

    def on_key(self, key: str) -> bool:
        """Handle a navigation key. Returns True if the key was consumed."""
        if self._inert() or not self._nav.is_open:
            return False
        command = command_for_key(key)
        if command is None:
            return False

        count = len(self._results)
        if command is NavCommand.MOVE_DOWN:
            self._nav.move_down(count)
        elif command is NavCommand.MOVE_UP:
            self._nav.move_up(count)
        elif command is NavCommand.COMMIT:
            index = self._nav.highlighted
            if 0 <= index < count:
                self._commit(self._results[index])
                return True
        elif command is NavCommand.DISMISS:
            self._nav.dismiss()
            self._positioner.invalidate()
        self._notify()
        return True

    def on_result_activate(self, record: Any) -> None:
        """Pointer activation of a result row."""
        if self._inert():
            return
        self._commit(record)

    def on_clear(self) -> None:
        if self._inert():
            return
        self._debouncer.cancel()
        self._query = ""
        self._clearable = False
        self._results = []
        self._close()
        self._notify()

    # -- embedding context -----------------------------------------------

    def set_data(self, records: Iterable[Any]) -> None:
        """Replace the collection; recomputed at once unless loading."""
        self._data = list(records or [])
        if self._loading:
            self._stale_data = True
            logger.debug("Collection replaced while loading; deferring filter")
            self._notify()
            return
        self._refilter()

    def set_filterable_keys(self, keys: Sequence[str]) -> None:
        self.config.filterable_keys = list(keys)
        self.config.normalize()
        self._keys = list(self.config.filterable_keys)
        if self._loading:
            self._stale_data = True
            return
        self._refilter()

    def set_loading(self, loading: bool) -> None:
        self._loading = bool(loading)
        if not self._loading and self._stale_data:
            self._refilter()
            return
        self._notify()

    def set_disabled(self, disabled: bool) -> None:
        self._disabled = bool(disabled)
        self._notify()

    def set_value(self, text: str) -> None:
        """Programmatic query change; no notification, no debounce."""
        self._debouncer.cancel()
        self._query = text or ""
        self._clearable = bool(self._query)
        self._recompute()
        if not self._query:
            self._close()
        elif self._nav.is_open:
            self.reposition()
        self._notify()

    def mount(self, anchor: Any, overlay: Any) -> None:
        """Attach the elements the positioning engine measures."""
        self._anchor = anchor
        self._overlay = overlay
        self.reposition()
        self._notify()

    def on_viewport_changed(self) -> None:
        """Window resize or ancestor scroll."""
        if self._nav.is_open:
            self.reposition()
            self._notify()

    def reposition(self) -> None:
        if self._torn_down:
            return
        self._positioner.reposition(self._anchor, self._overlay)

    def close(self) -> None:
        """Tear down: nothing scheduled may fire afterwards."""
        self._torn_down = True
        self._debouncer.cancel()
        self._blur_timer.cancel()
        self._positioner.close()
        self._listeners.clear()

    # -- internals -------------------------------------------------------

    def _inert(self) -> bool:
        if self._torn_down:
            return True
        if self._disabled:
            logger.debug("Ignoring event while disabled")
            return True
        return False

    def _recompute(self) -> None:
        self._results = filter_records(
            self._data, self._keys, self._query, self.config.max_results
        )
        self._stale_data = False
        self._nav.reset()

    def _refilter(self) -> None:
        self._recompute()
        if self._nav.is_open:
            self.reposition()
        self._notify()

    def _open(self) -> None:
        was_open = self._nav.is_open
        self._nav.open()
        if not was_open:
            logger.debug("Dropdown opened with %d results", len(self._results))
        self.reposition()

    def _close(self) -> None:
        self._nav.close()
        self._positioner.invalidate()

    def _commit(self, record: Any) -> None:
        self._blur_timer.cancel()
        self._debouncer.cancel()
        self._query = display_value(record, self.config.display_key)
        self._clearable = bool(self._query)
        self._close()
        logger.debug("Result selected: %r", self._query)
        for callback in list(self._select_listeners):
            callback(record)
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
