from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml


class ConfigError(RuntimeError):
    pass


THEMES = ("light", "dark")

DEFAULT_KEYS = ["label"]


@dataclass
class SearchConfig:
    placeholder: str = "Search..."
    theme: str = "light"
    debounce_timeout: int = 0  # ms
    max_results: int = 0  # 0 = unbounded
    no_results_text: str = "No results found"
    display_key: str = "label"
    filterable_keys: List[str] = field(default_factory=lambda: list(DEFAULT_KEYS))
    data: List[Any] = field(default_factory=list)
    disabled: bool = False
    value: str = ""
    loading: bool = False
    blur_grace: int = 200  # ms
    shift_margin: int = 5

    def __post_init__(self) -> None:
        self.normalize()

    def normalize(self) -> None:
        """Bring out-of-range values back to their defaults."""
        if self.theme not in THEMES:
            self.theme = "light"
        self.debounce_timeout = _non_negative(self.debounce_timeout, 0)
        self.max_results = _non_negative(self.max_results, 0)
        self.blur_grace = _non_negative(self.blur_grace, 200)
        self.shift_margin = _non_negative(self.shift_margin, 5)
        self.filterable_keys = _as_keys(self.filterable_keys)
        self.display_key = str(self.display_key or "label")
        self.value = "" if self.value is None else str(self.value)
        self.data = list(self.data or [])
        self.disabled = bool(self.disabled)
        self.loading = bool(self.loading)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "SearchConfig":
        known = {f for f in cls.__dataclass_fields__}
        return cls(**{k: v for k, v in raw.items() if k in known})

    def to_dict(self, include_data: bool = False) -> Dict[str, Any]:
        out = asdict(self)
        if not include_data:
            out.pop("data")
            out["records"] = len(self.data)
        return out


@dataclass
class Config:
    version: int = 1
    search: SearchConfig = field(default_factory=SearchConfig)
    data_file: Optional[Path] = None
    source_path: Optional[Path] = None

    def to_json(self) -> str:
        def _default(o: Any):
            if isinstance(o, Path):
                return str(o)
            if isinstance(o, SearchConfig):
                return o.to_dict()
            if hasattr(o, "__dict__"):
                return o.__dict__
            return str(o)

        return json.dumps(self, default=_default, indent=2, sort_keys=True)


def _non_negative(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 0 else default


def _as_keys(value: Any) -> List[str]:
    if isinstance(value, str):
        keys = [k.strip() for k in value.split(",")]
    elif isinstance(value, (list, tuple)):
        keys = [str(k).strip() for k in value]
    else:
        keys = []
    keys = [k for k in keys if k]
    return keys or list(DEFAULT_KEYS)


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        # Expand ${VAR} style
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    return value


def load_records(path: Path) -> List[Any]:
    """Load a record collection from a JSON or YAML file.

    The file holds either a list of records or a mapping with an ``items``
    (or ``data``) list.
    """
    try:
        text = Path(path).read_text()
    except OSError as e:
        raise ConfigError(f"Data file not readable: {path} ({e})") from e

    try:
        if Path(path).suffix.lower() == ".json":
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to parse data file {path}: {e}") from e

    if isinstance(raw, dict):
        raw = raw.get("items", raw.get("data"))
    if not isinstance(raw, list):
        raise ConfigError(f"Data file {path} must contain a list of records")
    return raw


def find_config_path() -> Optional[Path]:
    # Highest priority: explicit override
    override = os.environ.get("SEARCHCTL_CONFIG")
    if override:
        p = Path(override).expanduser()
        if p.is_file():
            return p
        raise ConfigError(f"SEARCHCTL_CONFIG path not found: {p}")

    # XDG base dirs
    xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", "~/.config")).expanduser()
    candidates = [xdg_home / "searchctl" / "config.yaml"]

    xdg_dirs = os.environ.get("XDG_CONFIG_DIRS", "/etc/xdg")
    for d in xdg_dirs.split(":"):
        candidates.append(Path(d) / "searchctl" / "config.yaml")

    for c in candidates:
        if c.is_file():
            return c
    return None


def resolve_config_path() -> Path:
    path = find_config_path()
    if path is None:
        raise ConfigError(
            "No config file found. Set SEARCHCTL_CONFIG or create ~/.config/searchctl/config.yaml"
        )
    return path


def load_config(path: Optional[Path] = None, missing_ok: bool = False) -> Config:
    cfg_path = path or (find_config_path() if missing_ok else resolve_config_path())
    if cfg_path is None:
        return Config()

    try:
        data = yaml.safe_load(Path(cfg_path).read_text()) or {}
    except FileNotFoundError as e:
        raise ConfigError(str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config {cfg_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {cfg_path} must be a mapping")

    data = _expand_env(data)
    search_raw = dict(data.get("search") or {})

    data_file = search_raw.pop("data_file", None)
    data_path: Optional[Path] = None
    if data_file:
        data_path = Path(data_file).expanduser()
        if not data_path.is_absolute():
            data_path = Path(cfg_path).parent / data_path
        search_raw["data"] = load_records(data_path)

    cfg = Config(
        version=int(data.get("version", 1)),
        search=SearchConfig.from_mapping(search_raw),
        data_file=data_path,
        source_path=Path(cfg_path),
    )
    return cfg
