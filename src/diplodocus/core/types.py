"""Core type definitions."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class NavPage:
    """Navigation entry linking to a single page."""

    title: str = ""
    path: str = ""


@dataclass(frozen=True)
class NavGroup:
    """Navigation entry grouping nested entries under a label."""

    title: str
    items: tuple[NavLink, ...] = field(default_factory=tuple)


NavLink = NavPage | NavGroup


@dataclass(frozen=True)
class PageLink:
    """Pointer to a neighboring page (previous or next)."""

    path: str
    title: str
