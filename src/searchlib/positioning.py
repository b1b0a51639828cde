"""Dropdown placement relative to its anchor.

``compute_placement`` is a small geometry engine in the spirit of the
floating-ui ``computePosition`` call: a preferred side and alignment, a flip
to the opposite side when the preferred one overflows, and a shift along the
cross axis that keeps a clearance margin from the viewport edges.

``OverlayPositioner`` drives any such engine, synchronous or awaitable, and
makes sure a result that arrives after the dropdown closed is dropped.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Set, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width


@dataclass(frozen=True)
class PlacementOptions:
    preferred: str = "bottom-start"
    strategy: str = "fixed"
    flip: bool = True
    shift_margin: float = 5


@dataclass(frozen=True)
class PlacementResult:
    """Raw engine output: coordinates plus the placement actually chosen."""
    x: float
    y: float
    placement: str


@dataclass(frozen=True)
class Placement:
    """What the presentation layer needs: where, and whether it flipped."""
    x: float
    y: float
    flipped: bool = False

    @classmethod
    def from_result(cls, result: Union[PlacementResult, Mapping[str, Any]]) -> "Placement":
        """Accepts a ``PlacementResult`` or a mapping with the same keys."""
        if isinstance(result, Mapping):
            x, y, placement = result["x"], result["y"], result["placement"]
        else:
            x, y, placement = result.x, result.y, result.placement
        return cls(x=x, y=y, flipped=str(placement).startswith("top"))


DEFAULT_PLACEMENT = Placement(0, 0, False)

PlacementEngine = Callable[
    [Any, Any, PlacementOptions],
    Union[PlacementResult, Awaitable[PlacementResult]],
]


def _split_placement(placement: str) -> tuple[str, str]:
    side, _, align = placement.partition("-")
    if side not in ("top", "bottom"):
        side = "bottom"
    return side, align


def _main_axis(side: str, anchor: Rect, floating: Size) -> float:
    if side == "top":
        return anchor.y - floating.height
    return anchor.bottom


def _cross_axis(align: str, anchor: Rect, floating: Size) -> float:
    if align == "start":
        return anchor.x
    if align == "end":
        return anchor.right - floating.width
    return anchor.x + (anchor.width - floating.width) / 2


def _overflow(side: str, y: float, floating: Size, viewport: Size) -> float:
    if side == "top":
        return max(0.0, -y)
    return max(0.0, y + floating.height - viewport.height)


def compute_placement(
    anchor: Rect,
    floating: Size,
    viewport: Size,
    options: PlacementOptions = PlacementOptions(),
) -> PlacementResult:
    """Place ``floating`` next to ``anchor`` inside ``viewport``."""
    side, align = _split_placement(options.preferred)
    y = _main_axis(side, anchor, floating)

    if options.flip:
        overflow = _overflow(side, y, floating, viewport)
        if overflow > 0:
            other = "top" if side == "bottom" else "bottom"
            other_y = _main_axis(other, anchor, floating)
            if _overflow(other, other_y, floating, viewport) < overflow:
                side, y = other, other_y

    x = _cross_axis(align, anchor, floating)
    margin = max(float(options.shift_margin), 0.0)
    max_x = viewport.width - floating.width - margin
    if x > max_x:
        x = max_x
    if x < margin:
        x = margin

    placement = f"{side}-{align}" if align else side
    return PlacementResult(x=x, y=y, placement=placement)


class OverlayPositioner:
    """Owns the dropdown ``Placement`` and keeps it from going stale.

    ``is_visible`` is consulted both before asking the engine and again when
    an awaitable result resolves. ``on_change`` is called whenever a new
    placement is applied.
    """

    def __init__(
        self,
        engine: Optional[PlacementEngine],
        is_visible: Callable[[], bool],
        on_change: Optional[Callable[[], None]] = None,
        options: PlacementOptions = PlacementOptions(),
    ):
        self.engine = engine
        self.options = options
        self._is_visible = is_visible
        self._on_change = on_change
        self._placement: Placement = DEFAULT_PLACEMENT
        self._valid = False
        self._generation = 0
        self._inflight: Set[asyncio.Future] = set()

    @property
    def placement(self) -> Optional[Placement]:
        """Current placement, or None once invalidated."""
        return self._placement if self._valid else None

    def invalidate(self) -> None:
        """Drop the current placement and any result still on its way."""
        self._generation += 1
        self._valid = False

    def close(self) -> None:
        self.invalidate()
        for future in list(self._inflight):
            future.cancel()
        self._inflight.clear()

    def reposition(self, anchor: Any, overlay: Any) -> None:
        """Ask the engine for a new placement; fire-and-forget."""
        if not self._is_visible():
            return
        if self.engine is None or anchor is None or overlay is None:
            self._fallback(notify=False)
            return

        self._generation += 1
        generation = self._generation
        try:
            result = self.engine(anchor, overlay, self.options)
        except Exception as e:
            logger.warning("Placement engine failed: %s", e)
            self._fallback(notify=False)
            return

        if inspect.isawaitable(result):
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as e:
                # no running loop to resolve the engine on
                if inspect.iscoroutine(result):
                    result.close()
                logger.warning("Placement engine needs a running event loop: %s", e)
                self._fallback(notify=False)
                return
            future = asyncio.ensure_future(result, loop=loop)
            self._inflight.add(future)
            future.add_done_callback(lambda f: self._resolved(f, generation))
        else:
            self._apply(result, generation, notify=False)

    def _resolved(self, future: asyncio.Future, generation: int) -> None:
        self._inflight.discard(future)
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.warning("Placement engine failed: %s", error)
            if generation == self._generation:
                self._fallback()
            return
        self._apply(future.result(), generation)

    def _apply(self, result: Any, generation: int, notify: bool = True) -> None:
        if generation != self._generation or not self._is_visible():
            logger.debug("Discarding stale placement %s", result)
            return
        try:
            placement = Placement.from_result(result)
        except (AttributeError, TypeError, KeyError) as e:
            logger.warning("Placement engine returned an unusable result %r: %s", result, e)
            self._fallback(notify=notify)
            return
        self._placement = placement
        self._valid = True
        logger.debug("Placement updated: %s", self._placement)
        if notify and self._on_change:
            self._on_change()

    def _fallback(self, notify: bool = True) -> None:
        # keep the last valid placement (or the default) so the list stays usable
        if not self._is_visible():
            return
        self._valid = True
        if notify and self._on_change:
            self._on_change()
