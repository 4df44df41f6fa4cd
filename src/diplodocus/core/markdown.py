"""Markdown rendering with front-matter extraction.

Wraps Python-Markdown. Headings receive `id` attributes from the toc
extension so they can be deep-linked and indexed by the table of contents.
Fenced code blocks keep the `language-*` class expected by Prism.

Generated list outlines (the ToC) are rendered with markdown-it-py, whose
CommonMark list rules nest items by their relative indentation.
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import markdown
import yaml
from markdown_it import MarkdownIt

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = ("extra", "sane_lists", "toc")

FRONT_MATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)

# Nested list indentation used by generated list markdown (e.g., the ToC)
LIST_INDENT = 2


@dataclass(frozen=True)
class RenderResult:
    """Result of rendering a markdown document."""

    content: str
    meta: dict[str, Any] = field(default_factory=dict)


class MarkdownRenderer:
    """Renders markdown documents to HTML.

    A fresh Python-Markdown instance is created per call, so one renderer can
    be shared between concurrent requests.
    """

    def __init__(self, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> None:
        """Initialize renderer.

        Args:
            extensions: Python-Markdown extension names
        """
        self._extensions = list(extensions)
        # Page documents carry their own ToC; disable the inline [TOC] marker
        self._extension_configs: dict[str, dict[str, Any]] = {"toc": {"marker": ""}}
        self._list_parser = MarkdownIt("commonmark")

    def render(self, text: str) -> RenderResult:
        """Render a markdown document.

        Args:
            text: Markdown source, optionally starting with a YAML front-matter block

        Returns:
            RenderResult with HTML content and front-matter metadata

        Raises:
            ValueError: If the front-matter is not a mapping
            yaml.YAMLError: If the front-matter is not valid YAML
        """
        meta, body = split_front_matter(text)
        content = self._convert(body)
        logger.debug(f"Converted {len(text)} characters of markdown to {len(content)} of HTML")
        return RenderResult(content=content, meta=meta)

    def render_list(self, text: str) -> str:
        """Render generated list markdown nested by indentation.

        Items indented `LIST_INDENT` spaces past their predecessor nest under it.
        """
        return self._list_parser.render(text)

    def _convert(self, text: str) -> str:
        md = markdown.Markdown(
            extensions=self._extensions,
            extension_configs=self._extension_configs,
            output_format="html",
        )
        return md.convert(text)


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split a YAML front-matter block from the markdown body.

    Args:
        text: Markdown source

    Returns:
        Tuple of (metadata mapping, remaining markdown)

    Raises:
        ValueError: If the front-matter is not a mapping
    """
    text = text.removeprefix("\ufeff")
    match = FRONT_MATTER_PATTERN.match(text)
    if match is None:
        return {}, text

    data = yaml.safe_load(match.group(1))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Front-matter must be a mapping")

    return data, text[match.end() :]
