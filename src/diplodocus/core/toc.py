"""Table of contents extraction.

Scans rendered HTML for headings that carry an `id` attribute and builds a
collapsible nested list of links to them. Headings without an `id` cannot be
deep-linked and are not indexed.
"""

import re
from collections.abc import Iterable

from diplodocus.core.html import tag
from diplodocus.core.markdown import LIST_INDENT, MarkdownRenderer

TAG_PATTERN = re.compile(r"<[^>]*>")

# One attribute, name with optional quoted or unquoted value
_ATTR_TOKEN = r"""[^\s"'>/=]+(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'>]+))?"""

_ID_ATTR = r"""id\s*=\s*(?:"([^"]+)"|'([^']+)'|([^\s"'>]+))"""


def normalize_levels(toc_levels: Iterable[object]) -> str:
    """Return distinct heading levels 1-6 as a sorted digit string.

    Values outside 1-6, duplicates, and non-integers are discarded.
    """
    levels = {
        level
        for level in toc_levels
        if isinstance(level, int) and not isinstance(level, bool) and 1 <= level <= 6
    }
    return "".join(str(level) for level in sorted(levels))


def heading_pattern(levels: str) -> re.Pattern[str]:
    """Compile the pattern matching id-bearing headings of the given levels."""
    return re.compile(
        rf"<h([{levels}])(?:\s+{_ATTR_TOKEN})*?\s+{_ID_ATTR}[^>]*>(.*?)</h\1\s*>",
        re.DOTALL | re.IGNORECASE,
    )


def generate_toc(
    toc_levels: Iterable[object],
    content: str,
    renderer: MarkdownRenderer,
) -> str:
    """Build a table of contents for rendered page content.

    Args:
        toc_levels: Heading levels to include (e.g., [2, 3])
        content: Rendered page HTML
        renderer: Markdown renderer used to turn the outline into HTML

    Returns:
        `<details>` element with the nested list, or "" when nothing matches
    """
    levels = normalize_levels(toc_levels)
    if not levels:
        return ""

    items: list[tuple[int, str]] = []
    min_level = 6
    for match in heading_pattern(levels).finditer(content):
        level = int(match.group(1))
        anchor = match.group(2) or match.group(3) or match.group(4)
        text = TAG_PATTERN.sub("", match.group(5)).strip()
        min_level = min(min_level, level)
        items.append((LIST_INDENT * level, f"- [{text}](#{anchor})"))

    if not items:
        return ""

    # Shallowest matched level becomes the list root. An item indents at most
    # one step past the item before it, so skipped levels still nest.
    lines: list[str] = []
    previous = -LIST_INDENT
    for indent, item in items:
        indent = min(indent - LIST_INDENT * min_level, previous + LIST_INDENT)
        lines.append(" " * indent + item)
        previous = indent

    toc_html = renderer.render_list("\n".join(lines)).strip()
    if not toc_html:
        return ""

    return tag(
        "details",
        {"id": "table-of-contents"},
        tag("summary", None, "Table of contents"),
        toc_html.replace("\n", ""),
    )
