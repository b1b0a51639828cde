"""Core library for the smart search component.

Contains the filter engine, the interaction state machine and configuration
loading shared by the CLI and the TUI.
"""

__all__ = [
    "config",
    "controller",
    "debounce",
    "errors",
    "filtering",
    "matching",
    "navigation",
    "positioning",
]
