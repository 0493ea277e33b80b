"""File-type handler that runs scripts with the interpreter their shebang names.

Register `hashbang` as the handler for script file types. It is invoked as

    hashbang <script> [args...]

and decides, per script:

- which interpreter runs it: the shebang (`#!` or `//!`, including
  `env` and `env -S` indirection), then a configured association by runtime
  name, shebang name or extension;
- how the interpreter is invoked: the association's argument template with
  @{script}, @{script_unix} and @{passed_args} placeholders, or the shebang
  argument followed by the script path and extra arguments;
- whether to ask first: launches from a file manager (see `gui_shells`)
  follow the resolved operation (prompt, open or execute); launches from a
  terminal or another program always execute.

Scripts with no interpreter at all are opened in a viewer, chosen by size.

Exit codes:
- 0: dispatch completed (including a cancelled prompt) or usage shown.
- 1: the script or a process could not be opened or started.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from hashbang.core.config import find_config_path, load_config
from hashbang.core.dispatch import Host, dispatch
from hashbang.core.log import configure_logging, log
from hashbang.core.script import get_script_metadata

ENV_LOG = "HASHBANG_LOG"


def _usage(prog: str) -> str:
    name = Path(prog).name
    if name == "__main__.py":
        name = "hashbang"
    return f"Usage: {name} <script> [args...]"


def run(script_path: str, extra_args: list[str], host: Host, cwd: Path | None = None) -> None:
    """Load config, read the script and dispatch it. Raises OSError on failure."""
    cwd = Path.cwd() if cwd is None else cwd
    config_path = find_config_path(cwd)
    config = load_config(config_path, host.find_executable)

    env_log = os.environ.get(ENV_LOG)
    configure_logging(Path(env_log).expanduser() if env_log else config.log)
    log("started", cwd=str(cwd), config=str(config_path), script=script_path, extra_args=extra_args)

    script = get_script_metadata(script_path, config.associations, host.find_executable)
    dispatch(script, config, host, extra_args)


def main(argv: list[str] | None = None, host: Host | None = None) -> int:
    argv = sys.argv if argv is None else argv
    if len(argv) < 2:
        print(_usage(argv[0] if argv else "hashbang"), file=sys.stderr)
        return 0

    if host is None:
        from hashbang.host import default_host

        host = default_host()

    try:
        run(argv[1], argv[2:], host)
    except OSError as e:
        log("failed", level="error", error=str(e))
        print(f"hashbang: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
