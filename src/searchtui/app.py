"""Demo TUI application hosting a single SmartSearch widget."""

import logging
from typing import Any, List, Optional

from textual.app import App
from textual.containers import Vertical
from textual.widgets import Footer, Header, Static
from textual.worker import Worker, WorkerState

from searchlib.config import Config, load_records
from searchlib.matching import display_value

from .widgets.smart_search import SmartSearch


logger = logging.getLogger(__name__)


class SearchApp(App):
    """Interactive playground for the search component."""

    TITLE = "searchctl TUI"
    SUB_TITLE = "Smart search over an in-memory collection"

    CSS = """
    Screen {
        layout: vertical;
    }

    Header {
        dock: top;
    }

    Footer {
        dock: bottom;
    }

    #search-panel {
        padding: 1 2;
        height: auto;
    }

    #selection {
        padding: 1 2;
        text-style: italic;
    }
    """

    BINDINGS = [
        ("ctrl+l", "clear", "Clear"),
        ("ctrl+r", "reload", "Reload data"),
    ]

    def __init__(self, config: Optional[Config] = None):
        super().__init__()
        self.config = config or Config()
        self.search: Optional[SmartSearch] = None

    def compose(self):
        yield Header()
        with Vertical(id="search-panel"):
            yield SmartSearch(self.config.search, id="smart-search")
        yield Static("Nothing selected yet", id="selection")
        yield Footer()

    def on_mount(self) -> None:
        self.search = self.query_one("#smart-search", SmartSearch)
        self.search.query_one("#search-input").focus()
        logger.info("TUI app initialized with %d records", len(self.config.search.data))

    def on_resize(self) -> None:
        if self.search:
            self.search.refresh_position()

    def show_notification(self, message: str) -> None:
        """Show a notification message."""
        self.sub_title = f"Smart search - {message}"
        logger.info(f"Notification: {message}")

    def on_smart_search_search_input(self, message: SmartSearch.SearchInput) -> None:
        logger.info("Search input: %r", message.value)

    def on_smart_search_result_selected(self, message: SmartSearch.ResultSelected) -> None:
        label = display_value(message.item, self.config.search.display_key)
        logger.info(f"Item selected: {message.item}")
        self.query_one("#selection", Static).update(f"Selected: {label}")

    def action_clear(self) -> None:
        if self.search:
            self.search.clear()

    def action_reload(self) -> None:
        """Reload the data file in a worker; the widget shows a spinner meanwhile."""
        if not self.config.data_file:
            self.show_notification("No data file configured")
            return
        if self.search:
            self.search.set_loading(True)
        self.run_worker(self.load_records_worker, name="reload", thread=True)

    def load_records_worker(self) -> List[Any]:
        logger.info("Reloading records from %s", self.config.data_file)
        return load_records(self.config.data_file)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        """Handle worker completion."""
        if event.worker.name != "reload" or not self.search:
            return
        if event.state == WorkerState.SUCCESS:
            records = event.worker.result
            self.config.search.data = records
            self.search.set_data(records)
            self.search.set_loading(False)
            self.show_notification(f"Loaded {len(records)} records")
        elif event.state == WorkerState.ERROR:
            self.search.set_loading(False)
            self.show_notification(f"Reload failed: {event.worker.error}")


def run_tui(config: Optional[Config] = None) -> None:
    """Entry point for running the TUI."""
    # Configure logging to file only; the terminal belongs to the UI
    log_file = "/tmp/searchtui_debug.log"
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[
            logging.FileHandler(log_file, mode='w')
        ]
    )

    logger.info(f"Starting TUI, debug log at: {log_file}")

    app = SearchApp(config)
    app.run()
