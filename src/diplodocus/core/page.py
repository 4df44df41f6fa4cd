"""Page composition.

Assembles a complete HTML document from rendered page content and the
merged site and page configuration.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from diplodocus.config import SiteConfig
from diplodocus.core.html import AttrValue, link, tag
from diplodocus.core.markdown import MarkdownRenderer
from diplodocus.core.navigation import render_navbar, to_title
from diplodocus.core.toc import TAG_PATTERN, generate_toc
from diplodocus.core.types import NavLink, PageLink

H1_PATTERN = re.compile(r"<h1(?:\s[^>]*)?>(.*?)</h1\s*>", re.DOTALL | re.IGNORECASE)

WEBSITE_URL_PATTERN = re.compile(r"^https?://[^/]+/?$")

VIEWPORT = "width=device-width,initial-scale=1.0,minimum-scale=1.0"

PROJECT_URL = "https://github.com/kawarimidoll/deno-diplodocus"

DEFAULT_STYLESHEET = "https://cdn.jsdelivr.net/npm/holiday.css@0.9.8"

PRISM_CDN = "https://cdn.jsdelivr.net/npm/prismjs@1.24.1/"

PRISM_THEME = (
    "themes/prism-tomorrow.css",
    "sha256-0dkohC9ZEupqWbq0hS5cVR4QQXJ+mp6N2oJyuks6gt0=",
)

PRISM_SCRIPTS = (
    (
        "components/prism-core.min.js",
        "sha256-dz05jjFU9qYuMvQQlE6iWDtNAnEsmu6uMb1vWhKdkEM=",
    ),
    (
        "plugins/autoloader/prism-autoloader.min.js",
        "sha256-sttoa+EIAvFFfeeIkmPn8ypyOOb6no2sZ2NbxtBXgqU=",
    ),
)

DEFAULT_STYLE = (
    "#table-of-contents{margin:2rem;margin-bottom:0;}"
    "#neighbors{display:flex;margin-bottom:1rem}"
    "#neighbors>#prev,#neighbors>#next{display:block;width:50%}"
    "#neighbors>#next{margin-left:auto}"
    "#neighbors>#prev::before{content:'« '}#neighbors>#next::after{content:' »'}"
)

# Front-matter spellings accepted in addition to the field names
FIELD_ALIASES = {
    "siteName": "site_name",
    "tocLevels": "toc_levels",
    "removeDefaultStyles": "remove_default_styles",
    "bottomHead": "bottom_head",
    "bottomBody": "bottom_body",
}


@dataclass(frozen=True)
class PageMeta:
    """Merged configuration for one rendered page."""

    site_name: str
    lang: str = ""
    favicon: str = ""
    twitter: str = ""
    description: str = ""
    image: str = ""
    title: str = ""
    toc_levels: tuple[int, ...] = ()
    remove_default_styles: bool = False
    bottom_head: str = ""
    bottom_body: str = ""
    prev: PageLink | None = None
    next: PageLink | None = None
    nav_links: tuple[NavLink, ...] = ()


_OVERRIDABLE = frozenset(f.name for f in fields(PageMeta)) - {"nav_links"}


def merge_meta(site: SiteConfig, page_meta: Mapping[str, Any]) -> PageMeta:
    """Merge page front-matter over site configuration.

    Page values replace site values of the same name (shallow override).
    Unknown keys are ignored and null values fall back to the defaults.

    Args:
        site: Site-wide configuration
        page_meta: Front-matter extracted from the page source

    Returns:
        PageMeta for the page
    """
    merged: dict[str, Any] = {
        "site_name": site.name,
        "lang": site.lang,
        "favicon": site.favicon,
        "twitter": site.twitter,
        "description": site.description,
        "image": site.image,
        "toc_levels": site.toc_levels,
        "remove_default_styles": site.remove_default_styles,
        "bottom_head": site.bottom_head,
        "bottom_body": site.bottom_body,
        "nav_links": site.nav,
    }

    for key, value in page_meta.items():
        name = FIELD_ALIASES.get(key, key)
        if name not in _OVERRIDABLE:
            continue
        if value is None:
            merged.pop(name, None)
        elif name in ("prev", "next"):
            merged[name] = _to_page_link(value)
        elif name == "toc_levels":
            merged[name] = _to_levels(value)
        elif name == "remove_default_styles":
            merged[name] = bool(value)
        else:
            merged[name] = str(value)

    merged.setdefault("site_name", "")
    return PageMeta(**merged)


def _to_page_link(value: object) -> PageLink | None:
    if isinstance(value, str):
        return PageLink(path=value, title=to_title(value))
    if isinstance(value, Mapping):
        path = str(value.get("path") or "#")
        title = str(value.get("title") or to_title(path))
        return PageLink(path=path, title=title)
    return None


def _to_levels(value: object) -> tuple[int, ...]:
    if isinstance(value, int):
        return (value,)
    if isinstance(value, list | tuple):
        return tuple(level for level in value if isinstance(level, int))
    return ()


def get_h1(content: str) -> str:
    """Return the text of the first level-1 heading, or ""."""
    match = H1_PATTERN.search(content)
    if match is None:
        return ""
    return TAG_PATTERN.sub("", match.group(1)).strip()


def process_title(title: str, site_name: str) -> str:
    """Format the document title with the site name suffix."""
    if title and title != site_name:
        return f"{title} | {site_name}"
    return site_name


def get_page_type(page_url: str) -> str:
    """Classify a page as an Open Graph "website" (origin root) or "article"."""
    return "website" if WEBSITE_URL_PATTERN.match(page_url) else "article"


def prism_asset(path: str, integrity: str) -> str:
    """Build a stylesheet link or deferred script tag for a Prism CDN asset."""
    attrs: dict[str, AttrValue] = {"crossorigin": "anonymous", "integrity": integrity}
    if path.endswith("css"):
        return tag("link", {**attrs, "rel": "stylesheet", "href": PRISM_CDN + path})
    return tag("script", {**attrs, "src": PRISM_CDN + path, "defer": True})


def render_head(meta: PageMeta, content: str, page_url: str) -> str:
    """Render the document head."""
    page_title = process_title(meta.title or get_h1(content), meta.site_name)

    default_assets = ""
    if not meta.remove_default_styles:
        default_assets = (
            tag("link", {"rel": "stylesheet", "href": DEFAULT_STYLESHEET})
            + prism_asset(*PRISM_THEME)
            + tag("style", None, DEFAULT_STYLE)
        )

    return tag(
        "head",
        None,
        tag("meta", {"charset": "UTF-8"}),
        tag("title", None, page_title),
        tag("meta", {"name": "viewport", "content": VIEWPORT}),
        tag("meta", {"name": "description", "content": meta.description}),
        tag("link", {"rel": "icon", "href": meta.favicon}),
        tag("link", {"rel": "canonical", "href": page_url}),
        tag("meta", {"property": "og:url", "content": page_url}),
        tag("meta", {"property": "og:type", "content": get_page_type(page_url)}),
        tag("meta", {"property": "og:title", "content": page_title}),
        tag("meta", {"property": "og:description", "content": meta.description}),
        tag("meta", {"property": "og:site_name", "content": meta.site_name}),
        tag("meta", {"property": "og:image", "content": meta.image}),
        tag("meta", {"name": "twitter:card", "content": "summary"}),
        tag("meta", {"name": "twitter:site", "content": meta.twitter}),
        default_assets,
        meta.bottom_head,
    )


def render_page_link(page: PageLink | None, attrs: dict[str, AttrValue]) -> str:
    return link(page.path, page.title, attrs) if page else ""


def render_neighbors(prev: PageLink | None, next: PageLink | None) -> str:
    """Render previous/next links, or "" when the page has no neighbors."""
    if prev is None and next is None:
        return ""
    return tag(
        "div",
        {"id": "neighbors"},
        render_page_link(prev, {"id": "prev"}),
        render_page_link(next, {"id": "next"}),
    )


def render_body(meta: PageMeta, content: str, renderer: MarkdownRenderer) -> str:
    """Render the document body."""
    default_scripts = ""
    if not meta.remove_default_styles:
        default_scripts = "".join(prism_asset(*script) for script in PRISM_SCRIPTS)

    return tag(
        "body",
        None,
        tag("header", None, tag("h1", None, link("/", meta.site_name))),
        tag("nav", {"id": "header-nav"}, render_navbar(meta.nav_links)),
        generate_toc(meta.toc_levels, content, renderer),
        tag("main", None, content),
        tag(
            "footer",
            None,
            render_neighbors(meta.prev, meta.next),
            tag("div", None, "Powered by ", link(PROJECT_URL, "Diplodocus")),
        ),
        default_scripts,
        meta.bottom_body,
    )


def render_page(
    content: str,
    meta: PageMeta,
    page_url: str,
    renderer: MarkdownRenderer,
) -> str:
    """Compose a complete HTML document.

    Args:
        content: Rendered page HTML, inserted verbatim into <main>
        meta: Merged site and page configuration
        page_url: Absolute URL of the page (canonical and Open Graph URL)
        renderer: Markdown renderer used for the table of contents

    Returns:
        HTML document string
    """
    return "<!DOCTYPE html>" + tag(
        "html",
        {"lang": meta.lang} if meta.lang else None,
        render_head(meta, content, page_url),
        render_body(meta, content, renderer),
    )
