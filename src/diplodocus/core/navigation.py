"""Navigation tree rendering.

Navigation is configured once as a tree of NavLink values and rendered
into nested list markup for every page.
"""

import re
from collections.abc import Sequence

from diplodocus.core.html import link, tag
from diplodocus.core.types import NavGroup, NavLink, NavPage

_WORD_SEPARATORS = re.compile(r"[-_\s]+")


def render_navbar(links: Sequence[NavLink]) -> str:
    """Render navigation links as a nested unordered list.

    Args:
        links: Navigation entries in display order

    Returns:
        `<ul>` markup with one `<li>` per entry
    """
    return tag("ul", None, *(_render_item(item) for item in links))


def _render_item(item: NavLink) -> str:
    match item:
        case NavGroup(title=title, items=items):
            return tag("li", None, tag("span", None, title), render_navbar(items))
        case NavPage(title=title, path=path):
            return tag("li", None, link(path or "#", title or to_title(path)))


def to_title(path: str) -> str:
    """Derive a human-readable title from a URL path.

    Examples:
        "/getting-started" -> "Getting Started"
        "/lorem/page_01.html" -> "Page 01"
    """
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return "Home" if path else ""
    name = segments[-1]
    if "." in name:
        name = name.rsplit(".", 1)[0]
    words = _WORD_SEPARATORS.split(name)
    return " ".join(word[:1].upper() + word[1:] for word in words if word)


def parse_nav_links(data: object, location: str = "nav") -> tuple[NavLink, ...]:
    """Build an immutable navigation tree from configuration data.

    Entries carrying `items` become groups; everything else becomes a page
    link, so an entry with neither path nor items degrades to a placeholder.

    Args:
        data: List of mappings with optional `title`, `path` and `items`
        location: Dotted config location used in error messages

    Returns:
        Tuple of NavLink trees

    Raises:
        ValueError: If the data has the wrong shape
    """
    if not isinstance(data, list):
        raise ValueError(f"{location} must be a list")

    links: list[NavLink] = []
    for index, entry in enumerate(data):
        entry_location = f"{location}[{index}]"
        if not isinstance(entry, dict):
            raise ValueError(f"{entry_location} must be a table")

        title = entry.get("title", "")
        if not isinstance(title, str):
            raise ValueError(f"{entry_location}.title must be a string")

        items = entry.get("items")
        if items is not None:
            links.append(
                NavGroup(title=title, items=parse_nav_links(items, f"{entry_location}.items"))
            )
            continue

        path = entry.get("path", "")
        if not isinstance(path, str):
            raise ValueError(f"{entry_location}.path must be a string")
        links.append(NavPage(title=title, path=path))

    return tuple(links)
