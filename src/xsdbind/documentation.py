from typing import List, Optional


def extract_text(value) -> str:
    if value is None:
        return ""
    if hasattr(value, "text"):
        return (value.text or "").strip()
    if isinstance(value, (list, tuple)):
        return "\n".join(t for t in (extract_text(v) for v in value) if t)
    return str(value).strip()


def get_documentation(annotation) -> str:
    """Collect the ``xs:documentation`` text of an xmlschema annotation.

    Repeated paragraphs are dropped, order is kept. Returns an empty string
    when the component carries no documentation.
    """
    if annotation is None:
        return ""

    texts: List[str] = []
    documentation = getattr(annotation, "documentation", None)
    if documentation:
        texts.extend(extract_text(doc) for doc in documentation)

    ordered: List[str] = []
    seen = set()
    for text in texts:
        stripped = (text or "").strip()
        if not stripped or stripped in seen:
            continue
        seen.add(stripped)
        ordered.append(stripped)
    return "\n".join(ordered)


def component_doc(component) -> str:
    return get_documentation(getattr(component, "annotation", None))


def field_comment(prefix: str, name: str, doc: Optional[str]) -> str:
    """Comment block placed above a generated declaration."""
    if not doc:
        return f"\n{prefix} {name} ...\n"
    lines = [line.strip() for line in doc.replace("\t", "").splitlines()]
    body = f"\n{prefix} ".join(line for line in lines if line)
    return f"\n{prefix} {name} is {body}\n"


def escape_docstring(text: str) -> str:
    """Make ``text`` safe inside a triple-quoted literal; its value is unchanged."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def docstring(name: str, doc: Optional[str], indent: str = "    ") -> str:
    if not doc:
        return f'{indent}"""{name} ..."""\n'
    lines = [escape_docstring(line.strip()) for line in doc.splitlines() if line.strip()]
    if len(lines) == 1:
        return f'{indent}"""{name} is {lines[0]}"""\n'
    body = "\n".join(f"{indent}{line}" for line in lines[1:])
    return f'{indent}"""{name} is {lines[0]}\n\n{body}\n{indent}"""\n'
