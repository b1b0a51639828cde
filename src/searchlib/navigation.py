"""Keyboard navigation state for the results dropdown."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NavCommand(Enum):
    """Commands understood by the navigation state machine."""
    MOVE_DOWN = "move_down"
    MOVE_UP = "move_up"
    COMMIT = "commit"
    DISMISS = "dismiss"


# Key names as reported by Textual, plus the DOM spellings
KEY_COMMANDS = {
    "down": NavCommand.MOVE_DOWN,
    "arrowdown": NavCommand.MOVE_DOWN,
    "up": NavCommand.MOVE_UP,
    "arrowup": NavCommand.MOVE_UP,
    "enter": NavCommand.COMMIT,
    "escape": NavCommand.DISMISS,
}


def command_for_key(key: str) -> Optional[NavCommand]:
    """Map a key name to a navigation command, or None."""
    return KEY_COMMANDS.get(key.lower())


@dataclass
class NavigationState:
    """Open/closed state and highlighted index of the dropdown.

    ``highlighted`` is -1 (nothing) or an index into the current results.
    Dismissing leaves the index in place, but ``effective_highlight`` reports
    -1 while closed and reopening clears it.
    """

    is_open: bool = False
    highlighted: int = -1

    @property
    def effective_highlight(self) -> int:
        return self.highlighted if self.is_open else -1

    def open(self) -> None:
        if not self.is_open:
            self.highlighted = -1
        self.is_open = True

    def close(self) -> None:
        """Close and forget the highlight (commit, clear, blur)."""
        self.is_open = False
        self.highlighted = -1

    def dismiss(self) -> None:
        """Close without touching the highlight (Escape)."""
        self.is_open = False

    def reset(self) -> None:
        """Results were recomputed; nothing is highlighted any more."""
        self.highlighted = -1

    def move_down(self, count: int) -> int:
        if count <= 0:
            self.highlighted = -1
        else:
            self.highlighted = min(self.highlighted + 1, count - 1)
        return self.highlighted

    def move_up(self, count: int) -> int:
        if count <= 0:
            self.highlighted = -1
        else:
            self.highlighted = min(max(self.highlighted - 1, 0), count - 1)
        return self.highlighted

