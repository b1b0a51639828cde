"""Error handling utilities for searchctl."""

from __future__ import annotations

from typing import Any


def format_error_message(operation: str, error: Exception, context: dict[str, Any] | None = None) -> str:
    """Format a user-friendly error message based on the exception type and context."""
    error_str = str(error)
    context = context or {}

    # Missing files
    if isinstance(error, FileNotFoundError) or "not found" in error_str.lower() or "not readable" in error_str.lower():
        path = context.get("path", "file")
        return (
            f"Could not read {path}. "
            f"Please check that the file exists and is readable. "
            f"Original error: {error_str}"
        )

    # Malformed data or config files
    if any(word in error_str.lower() for word in ["parse", "decode", "scanner", "mapping", "list of records"]):
        return (
            f"Data format error. Records must be a JSON or YAML list of mappings. "
            f"Original error: {error_str}"
        )

    # Terminal / display problems when launching the TUI
    if any(word in error_str.lower() for word in ["terminal", "tty", "driver"]):
        return (
            f"The terminal does not support the interactive UI. "
            f"Original error: {error_str}"
        )

    # Generic error with helpful context
    return f"Failed to {operation}: {error_str}"


def suggest_troubleshooting_steps(operation: str, error: Exception) -> list[str]:
    """Suggest troubleshooting steps based on the operation and error."""
    error_str = str(error).lower()
    suggestions = []

    if "not found" in error_str or "not readable" in error_str:
        suggestions.extend([
            "Check the --data path or the data_file entry in your config",
            "Relative data_file paths are resolved against the config file directory",
            "Ensure correct SEARCHCTL_CONFIG path is set",
        ])

    elif "parse" in error_str or "list of records" in error_str:
        suggestions.extend([
            "Validate the file with a JSON or YAML linter",
            "Wrap records in a top-level list, or under an 'items' key",
            "Use a .json suffix for JSON files; anything else is read as YAML",
        ])

    if "tui" in operation.lower() and not suggestions:
        suggestions.extend([
            "Run from an interactive terminal, not a pipe",
            "Check the debug log at /tmp/searchtui_debug.log",
        ])

    if not suggestions:
        suggestions.extend([
            "Check the logs with -v/--verbose flag for more details",
            "Verify your configuration file is correct",
        ])

    return suggestions


def format_config_error(error: Exception) -> str:
    """Format configuration-related error messages."""
    error_str = str(error)

    if "no config file found" in error_str.lower():
        return (
            "No configuration file found. Please either:\n"
            "  • Set SEARCHCTL_CONFIG=/path/to/config.yaml, or\n"
            "  • Create ~/.config/searchctl/config.yaml\n"
            "\n"
            "See the README for configuration examples."
        )

    if "data file" in error_str.lower():
        return (
            f"Data file error: {error_str}\n"
            "Records must be a JSON or YAML list of mappings."
        )

    return f"Configuration error: {error_str}"
