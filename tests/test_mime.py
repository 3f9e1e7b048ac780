"""Tests for MIME type resolution."""

from unittest.mock import patch

import pytest

from gdrive_uploader.drive.mime import (
    DEFAULT_MIME_TYPE,
    STATIC_MIME_TYPES,
    MimeTypeResolver,
    PlatformMimeTypeResolver,
    StaticMimeTypeResolver,
)


class TestStaticMimeTypeResolver:
    """Built-in table lookups."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("report.pdf", "application/pdf"),
            ("photo.JPG", "image/jpeg"),
            ("/tmp/archive.tar.gz", "application/gzip"),
            ("sheet.xlsx", STATIC_MIME_TYPES[".xlsx"]),
        ],
    )
    def test_known_extensions(self, name, expected):
        """Should map known extensions regardless of case."""
        assert StaticMimeTypeResolver().resolve(name) == expected

    def test_unknown_extension(self):
        """Should fall back to application/unknown."""
        assert StaticMimeTypeResolver().resolve("data.xyzabc") == "application/unknown"

    def test_no_extension(self):
        """Should fall back when the name has no extension."""
        assert StaticMimeTypeResolver().resolve("Makefile") == DEFAULT_MIME_TYPE

    def test_custom_table_and_default(self):
        """Should honor a custom table and fallback type."""
        resolver = StaticMimeTypeResolver({".LOG": "text/x-log"}, default="application/octet-stream")
        assert resolver.resolve("server.log") == "text/x-log"
        assert resolver.resolve("server.txt") == "application/octet-stream"


class TestPlatformMimeTypeResolver:
    """Platform lookup with table fallback."""

    def test_platform_lookup(self):
        """Should use the platform association when present."""
        assert PlatformMimeTypeResolver().resolve("index.html") == "text/html"

    def test_platform_preferred_over_table(self):
        """Should prefer the platform answer."""
        with patch(
            "gdrive_uploader.drive.mime.mimetypes.guess_type",
            return_value=("application/x-platform", None),
        ):
            assert PlatformMimeTypeResolver().resolve("report.pdf") == "application/x-platform"

    def test_table_when_platform_silent(self):
        """Should consult the table when the platform knows nothing."""
        with patch(
            "gdrive_uploader.drive.mime.mimetypes.guess_type", return_value=(None, None)
        ):
            assert PlatformMimeTypeResolver().resolve("movie.mkv") == "video/x-matroska"

    def test_unknown_extension(self):
        """Should never raise for unrecognized extensions."""
        assert PlatformMimeTypeResolver().resolve("blob.xyzabc") == "application/unknown"


class TestMimeTypeResolverBase:
    """The injectable resolver capability."""

    def test_is_abstract(self):
        """Should require a lookup implementation."""
        with pytest.raises(TypeError):
            MimeTypeResolver()

    def test_subclass_resolve(self):
        """Should lower-case the extension and fall back for unknown ones."""

        class FixedResolver(MimeTypeResolver):
            def lookup(self, extension):
                return {".bin": "application/x-fixed"}.get(extension)

        resolver = FixedResolver()
        assert resolver.resolve("firmware.BIN") == "application/x-fixed"
        assert resolver.resolve("notes.txt") == DEFAULT_MIME_TYPE
        assert isinstance(PlatformMimeTypeResolver(), MimeTypeResolver)
        assert isinstance(StaticMimeTypeResolver(), MimeTypeResolver)
