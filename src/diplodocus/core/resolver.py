"""Request resolution.

Maps a request path to a file under the content directory, renders markdown
sources into pages, and classifies every outcome into a response.

Resolution steps for one request:
    1. "/" becomes "/index"; any other path ending in "/" redirects without it
    2. A final segment without extension gets the default extension appended
    3. Unknown MIME type for the extension -> 400
    4. Read the file; a missing default-extension file falls back once to its
       markdown source, which is rendered into a full page
    5. Still missing -> 404, any other failure -> 500
"""

import asyncio
import logging
import mimetypes
from collections.abc import Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from pathlib import Path

from diplodocus.config import DocsConfig, SiteConfig
from diplodocus.core.markdown import MarkdownRenderer
from diplodocus.core.page import merge_meta, render_page

logger = logging.getLogger(__name__)

INDEX_NAME = "index"

_MIME_TYPES = mimetypes.MimeTypes()
_MIME_TYPES.add_type("text/markdown", ".md")
_MIME_TYPES.add_type("text/markdown", ".markdown")


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one request."""

    status: int
    body: bytes | str
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class NotFound:
    """A content file that does not exist."""

    file_path: Path


def lookup_mime_type(extension: str) -> str | None:
    """Return the MIME type for a file extension, or None if unknown."""
    if not extension:
        return None
    suffix = f".{extension.lower()}"
    loose, strict = _MIME_TYPES.types_map
    return strict.get(suffix) or loose.get(suffix)


def status_response(status: int, headers: Mapping[str, str] | None = None) -> Resolution:
    """Build a response whose body is "<code>: <reason phrase>"."""
    phrase = HTTPStatus(status).phrase
    return Resolution(
        status=status,
        body=f"{status}: {phrase}",
        headers={"Content-Type": "text/plain; charset=utf-8", **(headers or {})},
    )


class RequestResolver:
    """Resolves request paths against the content directory.

    Holds only immutable configuration, so one resolver serves all requests
    concurrently.
    """

    def __init__(
        self,
        docs: DocsConfig,
        site: SiteConfig,
        renderer: MarkdownRenderer | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            docs: Content directory configuration
            site: Site-wide page configuration
            renderer: Markdown renderer (default: MarkdownRenderer())
        """
        self._docs = docs
        self._site = site
        self._renderer = renderer or MarkdownRenderer()
        self._source_dir = docs.source_dir.resolve()

    @property
    def source_dir(self) -> Path:
        """Root directory containing content files."""
        return self._source_dir

    async def resolve(self, pathname: str, page_url: str) -> Resolution:
        """Resolve a request path to a response.

        Args:
            pathname: URL path of the request (e.g., "/guide")
            page_url: Absolute URL of the page, used in page metadata

        Returns:
            Resolution with status, body and headers
        """
        if pathname == "/":
            pathname += INDEX_NAME
        elif pathname.endswith("/"):
            return status_response(HTTPStatus.FOUND, {"Location": pathname[:-1]})

        tail = pathname.rsplit("/", 1)[-1]
        extension = tail.rsplit(".", 1)[-1] if "." in tail else ""
        if not extension:
            pathname += f".{self._docs.default_extension}"
            extension = self._docs.default_extension

        mime_type = lookup_mime_type(extension)
        file_path = self._source_dir / pathname.lstrip("/")

        logger.debug(
            f"Resolving {pathname}: extension={extension!r} "
            f"mime_type={mime_type!r} file_path={file_path}"
        )

        if mime_type is None:
            logger.warning(f"Unknown extension {extension!r} for {pathname}")
            return status_response(HTTPStatus.BAD_REQUEST)

        try:
            result = await self._attempt(file_path, page_url)
            if isinstance(result, NotFound) and self._is_default_document(file_path):
                source_path = file_path.with_suffix(f".{self._docs.markdown_extension}")
                logger.debug(f"{file_path} not found, falling back to {source_path}")
                result = await self._attempt(source_path, page_url, parse_markdown=True)
        except Exception:
            logger.exception(f"Failed to serve {pathname}")
            return status_response(HTTPStatus.INTERNAL_SERVER_ERROR)

        if isinstance(result, NotFound):
            logger.warning(f"Not found: {pathname} ({result.file_path})")
            return status_response(HTTPStatus.NOT_FOUND)

        return Resolution(status=HTTPStatus.OK, body=result, headers={"Content-Type": mime_type})

    async def _attempt(
        self,
        file_path: Path,
        page_url: str,
        *,
        parse_markdown: bool = False,
    ) -> bytes | str | NotFound:
        """Read one content file, rendering it when it is a markdown source.

        Returns:
            Raw bytes, a rendered HTML document, or NotFound

        Raises:
            OSError: If the file exists but cannot be read
            UnicodeDecodeError: If a markdown source is not valid UTF-8
        """
        if not self._is_within_source_dir(file_path):
            return NotFound(file_path)

        try:
            data = await asyncio.to_thread(file_path.read_bytes)
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
            return NotFound(file_path)

        if parse_markdown and file_path.suffix == f".{self._docs.markdown_extension}":
            return self._render(data.decode("utf-8"), page_url)

        return data

    def _render(self, text: str, page_url: str) -> str:
        result = self._renderer.render(text)
        logger.debug(f"Front-matter: {result.meta}")
        meta = merge_meta(self._site, result.meta)
        return render_page(result.content, meta, page_url, self._renderer)

    def _is_default_document(self, file_path: Path) -> bool:
        return file_path.suffix == f".{self._docs.default_extension}"

    def _is_within_source_dir(self, file_path: Path) -> bool:
        return file_path.resolve().is_relative_to(self._source_dir)
