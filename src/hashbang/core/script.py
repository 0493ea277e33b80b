"""Script metadata: everything dispatch needs to know about one file."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from hashbang.core.associations import match_association
from hashbang.core.config import Association
from hashbang.core.log import log
from hashbang.core.shebang import parse_interpreter, read_shebang

MIB = 1_048_576


@dataclass(frozen=True)
class ScriptMetadata:
    """Immutable description of a script being dispatched."""

    path: Path
    """Absolute path to the script."""

    size: int
    """File size in bytes."""

    shebang: str | None = None
    """Shebang line minus the prefix."""

    interpreter: str | None = None
    interpreter_arg: str | None = None
    extension: str | None = None  # without the leading dot
    association: Association | None = None

    @property
    def size_mb(self) -> int:
        """Size in whole MiB, rounded down."""
        return self.size // MIB


def get_script_metadata(
    script_path: str | Path,
    associations: Sequence[Association],
    find_executable: Callable[[str], str | None],
) -> ScriptMetadata:
    """Read a script's shebang and size and match it to an association.

    Raises OSError if the script is missing or unreadable.
    """
    path = Path(script_path).absolute()
    size = path.stat().st_size
    shebang = read_shebang(path)

    extension = path.suffix[1:] or None

    parsed = parse_interpreter(shebang, find_executable)
    interpreter, interpreter_arg = parsed if parsed is not None else (None, None)

    metadata = ScriptMetadata(
        path=path,
        size=size,
        shebang=shebang,
        interpreter=interpreter,
        interpreter_arg=interpreter_arg,
        extension=extension,
        association=match_association(interpreter, extension, associations),
    )
    log("script_metadata", metadata=repr(metadata))
    return metadata
