import re
from typing import Dict, FrozenSet, Iterable, Optional, Set, Tuple

from ..declarations import ALIAS, ANY, Declaration, Member
from ..documentation import field_comment

HEADER = "Code generated by xsdbind. DO NOT EDIT."

_TOKEN_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")


class Target:
    """A target language: its builtin types and how declarations are spelled.

    Subclasses fill in the class attributes and the ``render_*`` hooks.
    ``render`` is pure: it returns the declaration text together with the
    usage flags (imports) that text needs, and never touches run state.
    """

    name = ""
    suffix = ""
    any_type = ""
    comment_prefix = "//"
    # XSD builtin local name -> target type
    builtin_types: Dict[str, str] = {}
    # Target spellings that are builtins without coming from an XSD name
    extra_builtins: FrozenSet[str] = frozenset()
    # Type token -> usage flag that token requires
    flag_tokens: Dict[str, str] = {}
    # Names the generated file already binds (imports, global types)
    reserved_names: FrozenSet[str] = frozenset()

    def __init__(self):
        self.builtins: FrozenSet[str] = frozenset(self.builtin_types.values()) | self.extra_builtins | {self.any_type}

    def map_builtin(self, name: str) -> Optional[str]:
        """Target type for an XSD builtin name or a target builtin spelling."""
        if name in self.builtin_types:
            return self.builtin_types[name]
        if name in self.builtins:
            return name
        return None

    def is_builtin(self, name: str) -> bool:
        return name in self.builtins

    def safe_name(self, name: str) -> str:
        """Declaration name that does not shadow a name the generated file relies on.

        Normalized names never contain ``_``, so the suffixed form is free.
        """
        if name in self.reserved_names:
            return f"{name}_"
        return name

    def render(self, decl: Declaration) -> Tuple[str, FrozenSet[str]]:
        if decl.kind == ANY:
            text = self.render_any(decl)
            types: Iterable[str] = [self.any_type]
        elif decl.kind == ALIAS:
            text = self.render_alias(decl)
            types = [self.sequence_of(decl.alias_of) if decl.alias_plural else decl.alias_of]
        else:
            text = self.render_struct(decl)
            types = [self.member_type(member) for member in decl.members]
        return text, self.flags_for(types) | self.declaration_flags(decl)

    def flags_for(self, types: Iterable[str]) -> FrozenSet[str]:
        flags: Set[str] = set()
        for type_text in types:
            for token in _TOKEN_RE.findall(type_text):
                flag = self.flag_tokens.get(token)
                if flag:
                    flags.add(flag)
        return frozenset(flags)

    def declaration_flags(self, decl: Declaration) -> FrozenSet[str]:
        return frozenset()

    def comment(self, name: str, doc: str) -> str:
        return field_comment(self.comment_prefix, name, doc)

    def sequence_of(self, type_name: str) -> str:
        raise NotImplementedError

    def member_type(self, member: Member) -> str:
        raise NotImplementedError

    def render_struct(self, decl: Declaration) -> str:
        raise NotImplementedError

    def render_alias(self, decl: Declaration) -> str:
        raise NotImplementedError

    def render_any(self, decl: Declaration) -> str:
        raise NotImplementedError

    def render_preamble(self, package: str, flags: FrozenSet[str], header: Optional[str] = None) -> str:
        raise NotImplementedError
