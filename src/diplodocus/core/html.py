"""Minimal HTML element builder.

Children are inserted as markup verbatim. Attribute values are escaped.
Boolean attributes are emitted bare when True and dropped when False.
"""

from html import escape

VOID_ELEMENTS = frozenset({"meta", "link", "img", "br", "hr", "input"})

AttrValue = str | int | bool


def tag(name: str, attrs: dict[str, AttrValue] | None = None, *children: str) -> str:
    """Build an HTML element string.

    Args:
        name: Element name (e.g., "li")
        attrs: Attributes in insertion order
        children: Inner markup fragments, concatenated as-is

    Returns:
        Serialized element
    """
    open_tag = name + _render_attrs(attrs or {})
    if name in VOID_ELEMENTS:
        return f"<{open_tag}>"
    return f"<{open_tag}>{''.join(children)}</{name}>"


def link(href: str, text: str, attrs: dict[str, AttrValue] | None = None) -> str:
    """Build an anchor element with href placed after the given attributes."""
    return tag("a", {**(attrs or {}), "href": href}, text)


def _render_attrs(attrs: dict[str, AttrValue]) -> str:
    parts: list[str] = []
    for key, value in attrs.items():
        if value is True:
            parts.append(f" {key}")
        elif value is False:
            continue
        else:
            parts.append(f' {key}="{escape(str(value), quote=True)}"')
    return "".join(parts)
