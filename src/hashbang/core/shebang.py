"""
Shebang parsing for hashbang.

Reads the interpreter directive on the first line of a script and works out
which interpreter it names, following `env` indirection including `env -S`.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path, PureWindowsPath

from hashbang.core.log import log

# Prefixes that introduce an interpreter directive
SHEBANG_PREFIXES = ("#!", "//!")

# Only the first line is read, and never more than this many bytes of it
MAX_SHEBANG_BYTES = 4096

REDIRECTOR = "env"
SPLIT_STRING_FLAG = "-S"


def read_shebang(path: Path) -> str | None:
    """Return the shebang text after its prefix, or None if there is none.

    A first line without a recognized prefix and a prefix followed only by
    whitespace both yield None. Raises OSError if the file can't be read.
    """
    with open(path, "rb") as f:
        first_line = f.readline(MAX_SHEBANG_BYTES)

    line = first_line.decode("utf-8", errors="replace").lstrip("\ufeff").strip()
    return strip_prefix(line)


def strip_prefix(line: str) -> str | None:
    """Strip a shebang prefix from line. None if no prefix or nothing after it."""
    for prefix in SHEBANG_PREFIXES:
        if line.startswith(prefix):
            remainder = line[len(prefix) :].strip()
            log("shebang_read", prefix=prefix, shebang=remainder)
            return remainder or None
    return None


def _basename(cmd: str) -> str:
    """Strip the directory part of cmd, accepting both / and \\ separators."""
    return PureWindowsPath(cmd).name


def parse_interpreter(
    shebang: str | None, find_executable: Callable[[str], str | None]
) -> tuple[str, str | None] | None:
    """Extract (interpreter, argument) from shebang text.

    Args:
        shebang: Shebang text with the prefix already removed.
        find_executable: PATH lookup, returns the resolved path or None.

    Returns:
        The interpreter name and its optional argument string, or None if the
        line is malformed or the interpreter can't be found.
    """
    if not shebang:
        return None

    tokens = shebang.split()
    if not tokens:
        return None

    cmd, args = tokens[0], tokens[1:]
    name = _basename(cmd)

    if name == REDIRECTOR:
        result = _parse_redirected(args, find_executable)
    else:
        result = _parse_direct(cmd, name, args, find_executable)

    log("interpreter_parsed", shebang=shebang, result=result)
    return result


def _parse_redirected(
    args: list[str], find_executable: Callable[[str], str | None]
) -> tuple[str, str | None] | None:
    """Handle `env NAME` and `env -S NAME ARGS...`."""
    if not args:
        return None

    if args[0] == SPLIT_STRING_FLAG:
        rest = args[1:]
        if not rest:
            return None
        interpreter = rest[0]
        argument = " ".join(rest[1:]) or None
    else:
        if len(args) > 1:
            return None
        interpreter, argument = args[0], None

    if find_executable(interpreter) is None:
        return None
    return interpreter, argument


def _parse_direct(
    cmd: str,
    name: str,
    args: list[str],
    find_executable: Callable[[str], str | None],
) -> tuple[str, str | None] | None:
    """Handle `/path/to/interp [ARG]`."""
    if len(args) > 1 or not name:
        return None

    argument = args[0] if args else None
    if Path(cmd).exists() or find_executable(name) is not None:
        return name, argument
    return None
