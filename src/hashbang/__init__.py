"""
hashbang - shebang-aware script launcher.

Runs scripts with the interpreter their shebang or extension names, prompting
first when launched from a file manager.
"""

from __future__ import annotations

__version__ = "0.1.0"

from hashbang.core.dispatch import Host, dispatch
from hashbang.core.script import ScriptMetadata, get_script_metadata

__all__ = ["Host", "ScriptMetadata", "dispatch", "get_script_metadata", "__version__"]
