from typing import Dict, Type

from ..errors import ConfigError
from .base import HEADER, Target
from .golang import GoTarget
from .python import PythonTarget
from .typescript import TypeScriptTarget

TARGETS: Dict[str, Type[Target]] = {
    "go": GoTarget,
    "python": PythonTarget,
    "typescript": TypeScriptTarget,
}

ALIASES = {
    "golang": "go",
    "py": "python",
    "ts": "typescript",
}


def get_target(language: str) -> Target:
    key = (language or "").strip().lower()
    key = ALIASES.get(key, key)
    target_cls = TARGETS.get(key)
    if target_cls is None:
        raise ConfigError(
            f"Unsupported target language: {language}",
            f"Use one of: {', '.join(sorted(TARGETS))}.",
        )
    return target_cls()


__all__ = ["HEADER", "TARGETS", "Target", "GoTarget", "PythonTarget", "TypeScriptTarget", "get_target"]
