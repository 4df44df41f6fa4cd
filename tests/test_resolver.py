"""Tests for request resolution."""

from pathlib import Path
from unittest.mock import patch

import pytest
from diplodocus.config import Config
from diplodocus.core.resolver import (
    RequestResolver,
    lookup_mime_type,
    status_response,
)

PAGE_URL = "http://localhost/page"


@pytest.fixture
def resolver(test_config: Config) -> RequestResolver:
    return RequestResolver(test_config.docs, test_config.site)


class TestLookupMimeType:
    """Tests for lookup_mime_type()."""

    @pytest.mark.parametrize(
        ("extension", "expected"),
        [
            ("html", "text/html"),
            ("HTML", "text/html"),
            ("css", "text/css"),
            ("png", "image/png"),
            ("md", "text/markdown"),
        ],
    )
    def test__known_extension__returns_type(self, extension: str, expected: str) -> None:
        assert lookup_mime_type(extension) == expected

    @pytest.mark.parametrize("extension", ["", "unknownext"])
    def test__unknown_extension__returns_none(self, extension: str) -> None:
        assert lookup_mime_type(extension) is None


class TestStatusResponse:
    """Tests for status_response()."""

    def test__body__is_code_and_reason(self) -> None:
        resolution = status_response(404)

        assert resolution.status == 404
        assert resolution.body == "404: Not Found"
        assert resolution.headers["Content-Type"].startswith("text/plain")


class TestResolvePaths:
    """Tests for path normalization and extension handling."""

    @pytest.mark.asyncio
    async def test__root__resolves_to_index(
        self, docs_dir: Path, resolver: RequestResolver
    ) -> None:
        (docs_dir / "index.html").write_bytes(b"<p>home</p>")

        resolution = await resolver.resolve("/", PAGE_URL)

        assert resolution.status == 200
        assert resolution.body == b"<p>home</p>"
        assert resolution.headers["Content-Type"] == "text/html"

    @pytest.mark.asyncio
    async def test__trailing_slash__redirects(self, resolver: RequestResolver) -> None:
        """Redirect paths with a trailing slash to the path without it."""
        resolution = await resolver.resolve("/foo/", PAGE_URL)

        assert resolution.status == 302
        assert resolution.headers["Location"] == "/foo"
        assert resolution.body == "302: Found"

    @pytest.mark.asyncio
    async def test__unknown_extension__returns_400(
        self, docs_dir: Path, resolver: RequestResolver
    ) -> None:
        (docs_dir / "x.unknownext").write_bytes(b"data")

        with patch("pathlib.Path.read_bytes") as read_bytes:
            resolution = await resolver.resolve("/x.unknownext", PAGE_URL)

        assert resolution.status == 400
        assert resolution.body == "400: Bad Request"
        read_bytes.assert_not_called()

    @pytest.mark.asyncio
    async def test__static_file__served_raw(
        self, docs_dir: Path, resolver: RequestResolver
    ) -> None:
        (docs_dir / "css").mkdir()
        (docs_dir / "css" / "site.css").write_text("body{}")

        resolution = await resolver.resolve("/css/site.css", PAGE_URL)

        assert resolution.status == 200
        assert resolution.body == b"body{}"
        assert resolution.headers["Content-Type"] == "text/css"

    @pytest.mark.asyncio
    async def test__dot_in_directory__does_not_set_extension(
        self, docs_dir: Path, resolver: RequestResolver
    ) -> None:
        """Only the final path segment determines the extension."""
        (docs_dir / "v1.2").mkdir()
        (docs_dir / "v1.2" / "notes.html").write_text("<p>notes</p>")

        resolution = await resolver.resolve("/v1.2/notes", PAGE_URL)

        assert resolution.status == 200
        assert resolution.body == b"<p>notes</p>"


class TestResolveMarkdownFallback:
    """Tests for the html -> markdown fallback."""

    @pytest.mark.asyncio
    async def test__html_present__served_without_rendering(
        self, docs_dir: Path, resolver: RequestResolver
    ) -> None:
        (docs_dir / "foo.html").write_text("<p>prebuilt</p>")
        (docs_dir / "foo.md").write_text("# Source")

        resolution = await resolver.resolve("/foo", PAGE_URL)

        assert resolution.body == b"<p>prebuilt</p>"

    @pytest.mark.asyncio
    async def test__markdown_only__rendered_as_page(
        self, docs_dir: Path, resolver: RequestResolver
    ) -> None:
        """Render the markdown source when the html file is missing."""
        (docs_dir / "foo.md").write_text("# Foo\n\n## Details\n\nBody text.")

        resolution = await resolver.resolve("/foo", PAGE_URL)

        assert resolution.status == 200
        assert resolution.headers["Content-Type"] == "text/html"
        assert isinstance(resolution.body, str)
        assert resolution.body.startswith("<!DOCTYPE html>")
        assert "<title>Foo | Test Site</title>" in resolution.body
        assert "<p>Body text.</p>" in resolution.body
        assert '<a href="#details">Details</a>' in resolution.body
        assert '<a href="/about">About</a>' in resolution.body
        assert f'<meta property="og:url" content="{PAGE_URL}">' in resolution.body

    @pytest.mark.asyncio
    async def test__explicit_html_extension__falls_back(
        self, docs_dir: Path, resolver: RequestResolver
    ) -> None:
        (docs_dir / "foo.md").write_text("# Foo")

        resolution = await resolver.resolve("/foo.html", PAGE_URL)

        assert resolution.status == 200
        assert isinstance(resolution.body, str)

    @pytest.mark.asyncio
    async def test__root_markdown_index__rendered(
        self, docs_dir: Path, resolver: RequestResolver
    ) -> None:
        (docs_dir / "index.md").write_text("# Welcome")

        resolution = await resolver.resolve("/", PAGE_URL)

        assert resolution.status == 200
        assert "<title>Welcome | Test Site</title>" in resolution.body

    @pytest.mark.asyncio
    async def test__front_matter__overrides_site_config(
        self, docs_dir: Path, resolver: RequestResolver
    ) -> None:
        (docs_dir / "foo.md").write_text(
            "---\ntitle: Custom\nprev: {path: /a, title: A}\nremoveDefaultStyles: true\n---\n# Foo"
        )

        resolution = await resolver.resolve("/foo", PAGE_URL)

        assert "<title>Custom | Test Site</title>" in resolution.body
        assert '<a id="prev" href="/a">A</a>' in resolution.body
        assert "cdn.jsdelivr.net" not in resolution.body

    @pytest.mark.asyncio
    async def test__markdown_requested_directly__served_raw(
        self, docs_dir: Path, resolver: RequestResolver
    ) -> None:
        """Markdown sources requested by name are not rendered."""
        (docs_dir / "foo.md").write_text("# Foo")

        resolution = await resolver.resolve("/foo.md", PAGE_URL)

        assert resolution.status == 200
        assert resolution.body == b"# Foo"
        assert resolution.headers["Content-Type"] == "text/markdown"

    @pytest.mark.asyncio
    async def test__other_extension__does_not_fall_back(
        self, docs_dir: Path, resolver: RequestResolver
    ) -> None:
        (docs_dir / "style.md").write_text("# Not a stylesheet")

        resolution = await resolver.resolve("/style.css", PAGE_URL)

        assert resolution.status == 404

    @pytest.mark.asyncio
    async def test__neither_file__returns_404(self, resolver: RequestResolver) -> None:
        resolution = await resolver.resolve("/missing", PAGE_URL)

        assert resolution.status == 404
        assert resolution.body == "404: Not Found"

    @pytest.mark.asyncio
    async def test__fallback__attempted_exactly_once(self, resolver: RequestResolver) -> None:
        """Retry only the markdown source after a missing html file."""
        with patch.object(resolver, "_attempt", wraps=resolver._attempt) as attempt:
            resolution = await resolver.resolve("/missing", PAGE_URL)

        assert resolution.status == 404
        assert attempt.call_count == 2
        first, second = (call.args[0] for call in attempt.call_args_list)
        assert first.name == "missing.html"
        assert second.name == "missing.md"


class TestResolveErrors:
    """Tests for error classification."""

    @pytest.mark.asyncio
    async def test__path_outside_source_dir__returns_404(
        self, tmp_path: Path, resolver: RequestResolver
    ) -> None:
        (tmp_path / "secret.html").write_text("secret")

        resolution = await resolver.resolve("/../secret.html", PAGE_URL)

        assert resolution.status == 404

    @pytest.mark.asyncio
    async def test__invalid_utf8_markdown__returns_500(
        self, docs_dir: Path, resolver: RequestResolver
    ) -> None:
        (docs_dir / "broken.md").write_bytes(b"\xff\xfe\xfa")

        resolution = await resolver.resolve("/broken", PAGE_URL)

        assert resolution.status == 500
        assert resolution.body == "500: Internal Server Error"

    @pytest.mark.asyncio
    async def test__read_error__returns_500_without_details(
        self, docs_dir: Path, resolver: RequestResolver
    ) -> None:
        """Other read failures are reported without internal details."""
        (docs_dir / "locked.html").write_text("x")

        with patch("pathlib.Path.read_bytes", side_effect=PermissionError("denied")):
            resolution = await resolver.resolve("/locked", PAGE_URL)

        assert resolution.status == 500
        assert "denied" not in resolution.body
        assert str(docs_dir) not in resolution.body

    @pytest.mark.asyncio
    async def test__invalid_front_matter__returns_500(
        self, docs_dir: Path, resolver: RequestResolver
    ) -> None:
        (docs_dir / "bad.md").write_text("---\n- a\n---\n# Bad")

        resolution = await resolver.resolve("/bad", PAGE_URL)

        assert resolution.status == 500
