"""
Association lookup for hashbang.

Matchers are tried in priority order and the first association any of them
accepts wins. An interpreter that matches nothing still gets a bare
association of its own, so a resolvable shebang is never ignored.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from hashbang.core.config import Association
from hashbang.core.log import log

Predicate = Callable[[Association], bool]


def _by_exec_runtime(interpreter: str | None) -> Predicate | None:
    if interpreter is None:
        return None
    return lambda assoc: assoc.exec_runtime == interpreter


def _by_shebang_interpreter(interpreter: str | None) -> Predicate | None:
    if interpreter is None:
        return None
    return lambda assoc: assoc.shebang_interpreter == interpreter


def _by_extension(extension: str | None) -> Predicate | None:
    if not extension:
        return None
    wanted = extension.lstrip(".").casefold()
    return lambda assoc: (
        assoc.extension is not None
        and assoc.extension.lstrip(".").casefold() == wanted
    )


def synthesize_association(interpreter: str) -> Association:
    """Bare association for an interpreter with no configured entry."""
    return Association(exec_runtime=interpreter, shebang_interpreter=interpreter)


def match_association(
    interpreter: str | None,
    extension: str | None,
    associations: Sequence[Association],
) -> Association | None:
    """Find the association for a script.

    Priority:
    1. exec_runtime equals the interpreter (case-sensitive)
    2. shebang_interpreter equals the interpreter (case-sensitive)
    3. extension equals the file extension (case-insensitive)
    4. a synthesized association when an interpreter was parsed

    Returns None when there is neither an interpreter nor an extension match.
    """
    matchers = [
        ("exec_runtime", _by_exec_runtime(interpreter)),
        ("shebang_interpreter", _by_shebang_interpreter(interpreter)),
        ("extension", _by_extension(extension)),
    ]

    for rule, predicate in matchers:
        if predicate is None:
            continue
        for assoc in associations:
            if predicate(assoc):
                log("association_matched", rule=rule, exec_runtime=assoc.exec_runtime)
                return assoc

    if interpreter is not None:
        log("association_matched", rule="synthesized", exec_runtime=interpreter)
        return synthesize_association(interpreter)

    log("association_matched", rule=None, extension=extension)
    return None
