from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

import click
from tabulate import tabulate

from searchlib.config import Config, ConfigError, load_config, load_records
from searchlib.errors import format_config_error, format_error_message, suggest_troubleshooting_steps
from searchlib.filtering import filter_records
from searchlib.matching import display_value, resolve_path


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--json-output",
    "json_output",
    is_flag=True,
    help="Output JSON instead of tables (pretty-printed)",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose logging to stderr (what the CLI is doing)",
)
@click.pass_context
def cli(ctx: click.Context, json_output: bool, verbose: bool) -> None:
    """Smart search CLI.

    Filter a JSON or YAML record collection the way the search component
    does, or try the component interactively. Configuration is loaded via
    XDG or the SEARCHCTL_CONFIG environment variable and is optional.
    """
    ctx.ensure_object(dict)
    ctx.obj["json"] = json_output
    ctx.obj["verbose"] = verbose

    # Configure logging once per process
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _load(
    ctx: click.Context,
    log: logging.Logger,
    data_path: Optional[str] = None,
    keys: Tuple[str, ...] = (),
    display_key: Optional[str] = None,
    max_results: Optional[int] = None,
) -> Config:
    """Load config (optional) and apply command line overrides."""
    try:
        log.info("Loading config...")
        cfg = load_config(missing_ok=True)
        log.info("Loaded config from %s", cfg.source_path or "<defaults>")
        if data_path:
            cfg.data_file = Path(data_path)
            log.info("Loading records from %s", data_path)
            cfg.search.data = load_records(cfg.data_file)
    except ConfigError as e:
        click.echo(format_config_error(e), err=True)
        if ctx.obj.get("verbose"):
            suggestions = suggest_troubleshooting_steps("load data", e)
            if suggestions:
                click.echo("\nTroubleshooting suggestions:", err=True)
                for suggestion in suggestions[:3]:  # Show top 3 suggestions
                    click.echo(f"  • {suggestion}", err=True)
        raise SystemExit(2)

    if keys:
        cfg.search.filterable_keys = list(keys)
    if display_key:
        cfg.search.display_key = display_key
    if max_results is not None:
        cfg.search.max_results = max_results
    cfg.search.normalize()
    return cfg


@cli.command("search")
@click.argument("query")
@click.option("--data", "data_path", type=click.Path(dir_okay=False), help="JSON or YAML file of records")
@click.option("-k", "--key", "keys", multiple=True, help="Filterable field path (repeatable, e.g. address.city)")
@click.option("--display-key", help="Field path shown for each result")
@click.option("-n", "--max-results", type=int, help="Maximum number of results (0 = unbounded)")
@click.pass_context
def search(
    ctx: click.Context,
    query: str,
    data_path: Optional[str],
    keys: Tuple[str, ...],
    display_key: Optional[str],
    max_results: Optional[int],
) -> None:
    """Filter the collection with QUERY and print the matches."""
    log = logging.getLogger("searchctl.search")
    cfg = _load(ctx, log, data_path, keys, display_key, max_results)
    opts = cfg.search

    log.info(
        "Filtering %d records on %s for %r (max %d)",
        len(opts.data), ", ".join(opts.filterable_keys), query, opts.max_results,
    )
    results = filter_records(opts.data, opts.filterable_keys, query, opts.max_results)
    log.info("Found %d matches", len(results))

    if ctx.obj.get("json"):
        out = {"query": query, "count": len(results), "results": results}
        click.echo(json.dumps(out, indent=2, sort_keys=True, default=str))
        return

    if not results:
        click.echo(opts.no_results_text)
        return

    rows = []
    for i, record in enumerate(results, 1):
        row = [i, display_value(record, opts.display_key)]
        for key in opts.filterable_keys:
            value = resolve_path(record, key)
            row.append("—" if value is None else str(value))
        rows.append(row)

    headers = ["#", "DISPLAY"] + [k.upper() for k in opts.filterable_keys]
    log.info("Rendering %d results", len(rows))
    click.echo(tabulate(rows, headers=headers))


def main() -> None:  # entry point
    cli(standalone_mode=True)


if __name__ == "__main__":  # pragma: no cover
    main()


# CONFIG commands


@cli.group()
@click.pass_context
def config(ctx: click.Context) -> None:  # noqa: D401
    """Configuration commands."""
    pass


@config.command("show")
@click.option("--data", "data_path", type=click.Path(dir_okay=False), help="JSON or YAML file of records")
@click.pass_context
def config_show(ctx: click.Context, data_path: Optional[str]) -> None:
    """Show the effective component configuration."""
    log = logging.getLogger("searchctl.config")
    cfg = _load(ctx, log, data_path)
    opts = cfg.search

    if ctx.obj.get("json"):
        out = opts.to_dict()
        out["source"] = str(cfg.source_path) if cfg.source_path else None
        out["data_file"] = str(cfg.data_file) if cfg.data_file else None
        click.echo(json.dumps(out, indent=2, sort_keys=True))
        return

    rows = [
        ["source", str(cfg.source_path) if cfg.source_path else "—"],
        ["data_file", str(cfg.data_file) if cfg.data_file else "—"],
        ["records", len(opts.data)],
        ["placeholder", opts.placeholder],
        ["theme", opts.theme],
        ["debounce_timeout", f"{opts.debounce_timeout} ms"],
        ["max_results", opts.max_results or "unbounded"],
        ["no_results_text", opts.no_results_text],
        ["display_key", opts.display_key],
        ["filterable_keys", ", ".join(opts.filterable_keys)],
        ["disabled", "yes" if opts.disabled else "—"],
        ["value", opts.value or "—"],
        ["blur_grace", f"{opts.blur_grace} ms"],
    ]
    log.info("Rendering effective configuration")
    click.echo(tabulate(rows, headers=["FIELD", "VALUE"]))


@cli.command()
@click.option("--data", "data_path", type=click.Path(dir_okay=False), help="JSON or YAML file of records")
@click.option("-k", "--key", "keys", multiple=True, help="Filterable field path (repeatable)")
@click.option("--display-key", help="Field path shown for each result")
@click.pass_context
def tui(ctx: click.Context, data_path: Optional[str], keys: Tuple[str, ...], display_key: Optional[str]) -> None:
    """Launch the interactive search playground."""
    log = logging.getLogger("searchctl.tui")
    cfg = _load(ctx, log, data_path, keys, display_key)
    try:
        from searchtui.app import run_tui
        run_tui(cfg)
    except ImportError as e:
        click.echo(f"TUI dependencies not available: {e}", err=True)
        raise SystemExit(1)
    except Exception as e:
        error_msg = format_error_message("launch TUI", e, {})
        click.echo(error_msg, err=True)
        raise SystemExit(1)
