from collections import defaultdict
from typing import Collection, Dict


def make_first_upper(text: str) -> str:
    if not text:
        return text
    return text[0].upper() + text[1:]


def normalize_name(raw: str) -> str:
    """Turn a raw schema identifier into a declaration or field name.

    ``tns:my.type-name_x`` becomes ``TnsMyTypenamex``: segments split on the
    namespace separator and on dots are capitalised and joined, then dashes
    and underscores are dropped.
    """
    joined = "".join(make_first_upper(part) for part in raw.split(":"))
    joined = "".join(make_first_upper(part) for part in joined.split("."))
    return joined.replace("-", "").replace("_", "")


def normalize_type(name: str, builtins: Collection[str], any_type: str) -> str:
    if name in builtins:
        return name
    type_name = "".join(make_first_upper(part) for part in name.split("."))
    type_name = make_first_upper(type_name.replace("-", "")).replace("_", "")
    return type_name or any_type


class NameRegistry:
    """Hands out unique top-level declaration names for one run."""

    def __init__(self):
        self._counts: Dict[str, int] = defaultdict(int)

    def declaration_name(self, raw: str) -> str:
        name = normalize_name(raw)
        self._counts[name] += 1
        count = self._counts[name]
        if count != 1:
            return f"{name}{count}"
        return name

    def field_name(self, raw: str) -> str:
        return normalize_name(raw)
