"""hashbang configuration: associations, default handlers, discovery and loading."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from hashbang.core.log import log

Operation = Literal["prompt", "open", "execute"]
OPERATIONS: tuple[str, ...] = ("prompt", "open", "execute")

CONFIG_NAME = "config.toml"
APP_DIR = "hashbang"
ENV_CONFIG = "HASHBANG_CONFIG"

DEFAULT_SIZE_MB_THRESHOLD = 50
SCRIPT_PLACEHOLDER = "$script"

# Parent process names of graphical file managers
DEFAULT_GUI_SHELLS = (
    "explorer.exe",
    "nautilus",
    "dolphin",
    "thunar",
    "nemo",
    "caja",
    "pcmanfm",
    "pcmanfm-qt",
    "Finder",
)


@dataclass(frozen=True)
class Association:
    """A configured rule binding a script kind to its runtime and viewer."""

    exec_runtime: str
    shebang_interpreter: str | None = None
    exec_argv_override: str | None = None  # full argument template, see core.command
    view_runtime: str | None = None
    extension: str | None = None  # without the leading dot
    default_operation: Operation | None = None


@dataclass(frozen=True)
class DefaultHandler:
    """Viewer used when no association applies."""

    view_runtime: str
    args: str | None = None  # template using $script


@dataclass(frozen=True)
class LargeFileHandler:
    """Viewer used for files at or above size_mb_threshold MiB."""

    size_mb_threshold: int
    view_runtime: str
    args: str | None = None


@dataclass
class Config:
    """Parsed configuration."""

    gui_shells: list[str] = field(default_factory=list)
    """Parent process names that mark an interactive (double-click) launch."""

    default_operation: Operation | None = None
    default: DefaultHandler | None = None
    default_large: LargeFileHandler | None = None

    associations: list[Association] = field(default_factory=list)
    """File associations in priority order."""

    allow_user_config: bool = False
    log: Path | None = None  # None = no logging


def platform_viewer(find_executable: Callable[[str], str | None]) -> str:
    """Last-resort viewer when nothing is configured."""
    if find_executable("code") is not None:
        return "code"
    return _native_viewer()


def _native_viewer() -> str:
    if sys.platform == "win32":
        return "notepad"
    if sys.platform == "darwin":
        return "open"
    return "xdg-open"


def _never_found(name: str) -> str | None:
    return None


def _first_available(
    find_executable: Callable[[str], str | None], candidates: list[str]
) -> str:
    """Return the first candidate found on PATH, or the last one."""
    for name in candidates[:-1]:
        if find_executable(name) is not None:
            return name
    return candidates[-1]


def default_config(find_executable: Callable[[str], str | None] | None = None) -> Config:
    """Built-in configuration used when no config file can be loaded."""
    if find_executable is None:
        find_executable = _never_found

    viewer = _native_viewer()
    js_runtime = _first_available(find_executable, ["deno", "bun", "node"])
    ts_runtime = _first_available(find_executable, ["deno", "ts-node"])

    def assoc(runtime: str, extension: str) -> Association:
        return Association(
            exec_runtime=runtime,
            shebang_interpreter=runtime,
            extension=extension,
            default_operation="prompt",
        )

    return Config(
        gui_shells=list(DEFAULT_GUI_SHELLS),
        default_operation="prompt",
        default=DefaultHandler(view_runtime=viewer, args=SCRIPT_PLACEHOLDER),
        default_large=LargeFileHandler(
            size_mb_threshold=DEFAULT_SIZE_MB_THRESHOLD,
            view_runtime=viewer,
            args=SCRIPT_PLACEHOLDER,
        ),
        associations=[
            assoc("ruby", "rb"),
            assoc("python", "py"),
            assoc(js_runtime, "js"),
            assoc(ts_runtime, "ts"),
            assoc("perl", "pl"),
            assoc("bash", "sh"),
        ],
    )


# === Parsing ===


def parse_config(text: str) -> Config:
    """Parse TOML config text into a Config. Raises ValueError on invalid input.

    Sections missing from the document stay empty; they are not filled in
    from the built-in defaults.
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"invalid TOML: {e}") from None

    gui_shells = _get(data, "gui_shells", list, [])
    for i, name in enumerate(gui_shells):
        if not isinstance(name, str):
            raise ValueError(f"gui_shells[{i}]: expected a string")

    log_path = _get(data, "log", str, None)

    return Config(
        gui_shells=gui_shells,
        default_operation=_get_operation(data, "default_operation"),
        default=_parse_default(data.get("default")),
        default_large=_parse_default_large(data.get("default_large")),
        associations=_parse_associations(data.get("file_associations")),
        allow_user_config=_get(data, "allow_user_config", bool, False),
        log=Path(log_path).expanduser() if log_path else None,
    )


def _get(table: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    """Fetch key from table, checking its type."""
    value = table.get(key)
    if value is None:
        return default
    # bool is a subclass of int; keep them apart
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"'{key}' must be a {kind.__name__}, got {value!r}")
    return value


def _get_operation(table: dict[str, Any], key: str) -> Operation | None:
    value = _get(table, key, str, None)
    if value is None:
        return None
    value = value.lower()
    if value not in OPERATIONS:
        raise ValueError(
            f"'{key}' must be one of {', '.join(OPERATIONS)}, got '{value}'"
        )
    return value


def _require_table(value: Any, name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"'{name}' must be a table")
    return value


def _parse_default(value: Any) -> DefaultHandler | None:
    if value is None:
        return None
    table = _require_table(value, "default")
    try:
        view_runtime = _get(table, "view_runtime", str, None)
        if not view_runtime:
            raise ValueError("'view_runtime' is required")
        return DefaultHandler(view_runtime=view_runtime, args=_get(table, "args", str, None))
    except ValueError as e:
        raise ValueError(f"default: {e}") from None


def _parse_default_large(value: Any) -> LargeFileHandler | None:
    if value is None:
        return None
    table = _require_table(value, "default_large")
    try:
        view_runtime = _get(table, "view_runtime", str, None)
        if not view_runtime:
            raise ValueError("'view_runtime' is required")
        threshold = _get(table, "size_mb_threshold", int, None)
        if threshold is None:
            raise ValueError("'size_mb_threshold' is required")
        if threshold < 0:
            raise ValueError("'size_mb_threshold' must not be negative")
        return LargeFileHandler(
            size_mb_threshold=threshold,
            view_runtime=view_runtime,
            args=_get(table, "args", str, None),
        )
    except ValueError as e:
        raise ValueError(f"default_large: {e}") from None


def _parse_associations(value: Any) -> list[Association]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("'file_associations' must be an array of tables")

    associations = []
    for i, entry in enumerate(value):
        try:
            table = _require_table(entry, "entry")
            exec_runtime = _get(table, "exec_runtime", str, None)
            if not exec_runtime:
                raise ValueError("'exec_runtime' is required")
            extension = _get(table, "extension", str, None)
            if extension is not None:
                extension = extension.lstrip(".") or None
            associations.append(
                Association(
                    exec_runtime=exec_runtime,
                    shebang_interpreter=_get(table, "shebang_interpreter", str, None),
                    exec_argv_override=_get(table, "exec_argv_override", str, None),
                    view_runtime=_get(table, "view_runtime", str, None),
                    extension=extension,
                    default_operation=_get_operation(table, "default_operation"),
                )
            )
        except ValueError as e:
            raise ValueError(f"file_associations[{i}]: {e}") from None
    return associations


# === Discovery & loading ===


def system_config_path(env: dict[str, str] | None = None) -> Path:
    env = os.environ if env is None else env
    if sys.platform == "win32":
        base = env.get("PROGRAMDATA", r"C:\ProgramData")
        return Path(base) / APP_DIR / CONFIG_NAME
    return Path("/etc") / APP_DIR / CONFIG_NAME


def user_config_path(env: dict[str, str] | None = None) -> Path:
    env = os.environ if env is None else env
    if sys.platform == "win32" and env.get("APPDATA"):
        return Path(env["APPDATA"]) / APP_DIR / CONFIG_NAME
    base = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / APP_DIR / CONFIG_NAME


def _allows_user_config(system_path: Path) -> bool:
    """Read allow_user_config from the system config. Any error means no."""
    try:
        return parse_config(system_path.read_text(encoding="utf-8")).allow_user_config
    except (OSError, ValueError):
        return False


def find_config_path(
    cwd: Path,
    env: dict[str, str] | None = None,
    system_path: Path | None = None,
    user_path: Path | None = None,
) -> Path | None:
    """Locate the config file. Returns None if there is none.

    $HASHBANG_CONFIG wins, then ./config.toml, then the system config. The
    user config replaces either of the latter two only when the system config
    sets allow_user_config = true.
    """
    env = os.environ if env is None else env
    system_path = system_config_path(env) if system_path is None else system_path
    user_path = user_config_path(env) if user_path is None else user_path

    env_path = env.get(ENV_CONFIG)
    if env_path:
        env_config = Path(env_path).expanduser()
        if env_config.is_file():
            return env_config

    selected: Path | None = None
    local = cwd / CONFIG_NAME
    if local.is_file():
        selected = local
    elif system_path.is_file():
        selected = system_path

    if user_path.is_file() and system_path.is_file():
        if _allows_user_config(system_path):
            return user_path
        log("user_config_disallowed", path=str(user_path))

    return selected


def load_config(
    path: Path | None, find_executable: Callable[[str], str | None] | None = None
) -> Config:
    """Load config from path. Never raises: falls back to built-in defaults."""
    if path is None:
        log("config_fallback", reason="no config file")
        return default_config(find_executable)

    try:
        config = parse_config(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        log("config_fallback", level="warning", path=str(path), reason=str(e))
        return default_config(find_executable)

    log("config_loaded", path=str(path), associations=len(config.associations))
    return config
