"""
Command construction for hashbang.

Turns a script and its association into an argument vector. Argument
override templates are split into shell words first and placeholders are
substituted inside each word afterwards, so a substituted path is never
split again.

Placeholders:
    @{script}        absolute script path, native separators
    @{script_unix}   absolute script path, forward slashes
    @{passed_args}   extra command-line arguments, one word each
    $script          script path in fallback viewer templates
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from hashbang.core.config import SCRIPT_PLACEHOLDER, Config, platform_viewer
from hashbang.core.log import log
from hashbang.core.parser import format_command, split_words
from hashbang.core.script import ScriptMetadata

SCRIPT = "@{script}"
SCRIPT_UNIX = "@{script_unix}"
PASSED_ARGS = "@{passed_args}"


def path_variables(script: ScriptMetadata) -> dict[str, str]:
    """Placeholder values for a script."""
    native = str(script.path)
    return {
        SCRIPT: native,
        SCRIPT_UNIX: native.replace("\\", "/"),
    }


def expand_placeholders(word: str, variables: dict[str, str]) -> str:
    """Replace every placeholder in word with its value. No re-splitting."""
    for placeholder, value in variables.items():
        word = word.replace(placeholder, value)
    return word


def expand_template(
    template: str, variables: dict[str, str], extra_args: Sequence[str] = ()
) -> list[str]:
    """Split an argument template and expand its placeholders.

    A word that is exactly @{passed_args} becomes the extra arguments.
    Words that end up empty are dropped. When the template has no
    @{passed_args} word the extra arguments are appended at the end.
    """
    words = split_words(template)
    result: list[str] = []
    for word in words:
        if word == PASSED_ARGS:
            result.extend(extra_args)
            continue
        expanded = expand_placeholders(word, variables)
        if expanded:
            result.append(expanded)

    if PASSED_ARGS not in words:
        result.extend(extra_args)
    return result


def build_command(script: ScriptMetadata, extra_args: Sequence[str] = ()) -> list[str]:
    """Build the argv that runs script with its associated runtime.

    Raises ValueError if the script has no association.
    """
    assoc = script.association
    if assoc is None:
        raise ValueError(f"no association for {script.path}")

    argv = [assoc.exec_runtime]
    if assoc.exec_argv_override is not None:
        argv.extend(
            expand_template(assoc.exec_argv_override, path_variables(script), extra_args)
        )
    else:
        argv.extend(split_words(script.interpreter_arg))
        argv.append(str(script.path))
        argv.extend(extra_args)

    log("command_built", command=format_command(argv))
    return argv


def select_fallback_handler(
    script: ScriptMetadata,
    config: Config,
    find_executable: Callable[[str], str | None],
) -> tuple[str, str]:
    """Pick (viewer, args template) for a script with no association."""
    large = config.default_large
    if large is not None and script.size_mb >= large.size_mb_threshold:
        return large.view_runtime, large.args or SCRIPT_PLACEHOLDER
    if config.default is not None:
        return config.default.view_runtime, config.default.args or SCRIPT_PLACEHOLDER
    return platform_viewer(find_executable), SCRIPT_PLACEHOLDER


def build_fallback_command(
    script: ScriptMetadata,
    config: Config,
    find_executable: Callable[[str], str | None],
) -> list[str]:
    """Build the argv that opens script in the size-appropriate fallback viewer."""
    util, template = select_fallback_handler(script, config, find_executable)
    executable = find_executable(util) or util

    words = split_words(template)
    path = str(script.path)
    if SCRIPT_PLACEHOLDER in words:
        args = [path if word == SCRIPT_PLACEHOLDER else word for word in words]
    else:
        args = words + [path]

    argv = [executable] + args
    log("command_built", command=format_command(argv), fallback=True)
    return argv
