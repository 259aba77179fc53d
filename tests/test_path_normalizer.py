"""
Unit tests for path_normalizer module.

Tests canonical key generation, directory inference and configuration.
"""

import json

import pytest

from BZ_Libs.PathLib.path_normalizer import (
    InvalidPathError,
    NormalizerConfig,
    PathNormalizer,
    load_identifier_table,
)


class TestNormalize:
    """Tests for PathNormalizer.normalize."""

    def test_self_host_url_reduced_to_lowercase_path(self, normalizer):
        """Should keep only the path of URLs to the site's own host."""
        raw = "HTTP://Example.com/Images/Gallery-Page/Mustang-Rebuild/After-1-Mustang-Front.JPG"

        assert normalizer.normalize(raw) == "/images/gallery-page/mustang-rebuild/after-1-mustang-front.jpg"

    def test_self_host_with_port(self, normalizer):
        """Should ignore the port when recognizing the site's host."""
        raw = "http://localhost:8080/images/gallery-page/porsche-detail/after-2-porsche.jpg?v=3"

        assert normalizer.normalize(raw) == "/images/gallery-page/porsche-detail/after-2-porsche.jpg"

    def test_doubled_assets_root_collapsed(self, normalizer):
        """Should collapse a doubled assets root."""
        assert normalizer.normalize("/images/images/foo.jpg") == "/images/foo.jpg"

    def test_doubled_gallery_segment_collapsed(self, normalizer):
        """Should collapse a doubled gallery directory."""
        raw = "/images/gallery-page/gallery-page/mustang-rebuild/a.jpg"

        assert normalizer.normalize(raw) == "/images/gallery-page/mustang-rebuild/a.jpg"

    def test_directory_inferred_from_filename_token(self, normalizer):
        """Should place a bare filename under the directory of its identifier."""
        result = normalizer.normalize("before-3-bluealfa-front.jpg")

        assert result == "/images/gallery-page/blue-alfa-repair/before-3-bluealfa-front.jpg"

    def test_directory_inferred_from_substring(self, normalizer):
        """Should infer the directory from an identifier inside the filename."""
        result = normalizer.normalize("/uploads/my-porsche-side.jpg")

        assert result == "/images/gallery-page/porsche-detail/my-porsche-side.jpg"

    def test_longest_identifier_wins_substring_match(self, normalizer):
        """Should prefer the longest identifier found in the filename."""
        result = normalizer.normalize("/old/shot-bluemustang.jpg")

        assert result == "/images/gallery-page/blue-mustang-repair/shot-bluemustang.jpg"

    def test_context_identifier_used_when_nothing_matches(self, normalizer):
        """Should fall back to the page context directory."""
        scoped = normalizer.with_context("green-mercedes-repair")

        assert scoped.normalize("/photo.jpg") == "/images/gallery-page/green-mercedes-repair/photo.jpg"

    def test_context_identifier_looked_up_without_dashes(self, normalizer):
        """Should look up the context identifier without dashes first."""
        scoped = normalizer.with_context("blue-alfa")

        assert scoped.normalize("side.png") == "/images/gallery-page/blue-alfa-repair/side.png"

    def test_assets_root_added_for_images(self, normalizer):
        """Should prefix image paths with the assets root."""
        assert normalizer.normalize("misc/logo.png") == "/images/misc/logo.png"

    def test_non_image_path_left_alone(self, normalizer):
        """Should not prefix paths that are not images."""
        assert normalizer.normalize("/About/Team") == "/about/team"

    def test_query_and_fragment_stripped(self, normalizer):
        """Should drop the query string and fragment."""
        assert normalizer.normalize("/images/a.jpg?x=1#top") == "/images/a.jpg"

    def test_whitespace_before_query_or_fragment_stripped(self, normalizer):
        """Should drop whitespace left behind when the query or fragment is cut off."""
        assert normalizer.normalize("/images/x.jpg #frag") == "/images/x.jpg"
        assert normalizer.normalize("/images/x.jpg ?v=2") == "/images/x.jpg"

    def test_external_url_verbatim(self, normalizer):
        """Should return URLs to other hosts unchanged."""
        raw = "https://cdn.Other.net/Photo.JPG?size=large"

        assert normalizer.normalize(raw) == raw
        assert "normalize.verbatim" in normalizer.diagnostics.names()

    @pytest.mark.parametrize("raw", ["blob:http://localhost/1234-ABCD", "data:image/png;base64,AAAA"])
    def test_opaque_references_verbatim(self, normalizer, raw):
        """Should return blob and data references unchanged."""
        assert normalizer.normalize(raw) == raw

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_input_raises(self, normalizer, raw):
        """Should reject missing or blank input."""
        with pytest.raises(InvalidPathError):
            normalizer.normalize(raw)

    def test_invalid_path_error_is_value_error(self):
        """Should be catchable as ValueError."""
        assert issubclass(InvalidPathError, ValueError)

    @pytest.mark.parametrize("raw", [
        "HTTP://Example.com/Images/Gallery-Page/Mustang-Rebuild/After-1-Mustang-Front.JPG",
        "/images/images/foo.jpg",
        "before-3-bluealfa-front.jpg",
        "//Images//Gallery-Page//x//Y.jpg",
        "misc/logo.png",
        "/about",
        "https://cdn.other.net/a.jpg",
        "blob:abc",
        "/",
        "/images/x.jpg #frag",
        "a ?q",
        "f-is #g",
        "http://example.com/a.jpg ?size=2",
    ])
    def test_idempotent(self, normalizer, raw):
        """Normalizing a canonical key should return it unchanged."""
        once = normalizer.normalize(raw)

        assert normalizer.normalize(once) == once

    def test_emits_directory_inferred_event(self, normalizer, diagnostics):
        """Should report directory inference to diagnostics."""
        normalizer.normalize("after-1-mustang.jpg")

        events = diagnostics.find("normalize.directory_inferred")
        assert len(events) == 1
        assert events[0].fields["directory"] == "mustang-rebuild"


class TestIdentifiers:
    """Tests for identifier extraction helpers."""

    @pytest.mark.parametrize("filename,expected", [
        ("before-3-bluealfa-front.jpg", "bluealfa"),
        ("after-mustang-side.jpg", "mustang"),
        ("after-bluealfa-side.png", "bluealfa"),
        ("AFTER-12_Porsche.jpg", "porsche"),
        ("random.jpg", None),
    ])
    def test_filename_identifier(self, normalizer, filename, expected):
        """Should extract the identifier token from gallery filenames."""
        assert normalizer.filename_identifier(filename) == expected

    def test_extract_identifier_prefers_gallery_directory(self, normalizer):
        """Should prefer the gallery directory over the filename token."""
        key = "/images/gallery-page/mustang-rebuild/after-1-mustang.jpg"

        assert normalizer.extract_identifier(key) == "mustang-rebuild"

    def test_extract_identifier_from_filename(self, normalizer):
        """Should use the filename token outside the gallery directory."""
        assert normalizer.extract_identifier("/images/before-2-bluealfa.jpg") == "bluealfa"


class TestNormalizerConfig:
    """Tests for NormalizerConfig and load_identifier_table."""

    def test_config_is_normalized(self):
        """Should clean up hosts, directories and table entries."""
        config = NormalizerConfig(
            site_hosts=("Example.COM:443",),
            assets_root="Assets/",
            gallery_subdir="/Gallery/",
            identifier_table={"Alfa": "/Blue-Alfa/"},
            context_identifier=" Some-Item ",
        )

        assert config.site_hosts == ("example.com",)
        assert config.assets_root == "/assets"
        assert config.gallery_root == "/assets/gallery"
        assert config.identifier_table == {"alfa": "blue-alfa"}
        assert config.context_identifier == "some-item"

    def test_default_table_has_known_items(self):
        """Should ship a table of the gallery's items."""
        config = NormalizerConfig()

        assert config.identifier_table["bluealfa"] == "blue-alfa-repair"

    def test_load_identifier_table(self, tmp_path):
        """Should read an identifier table from JSON."""
        table_path = tmp_path / "table.json"
        table_path.write_text(json.dumps({"jaguar": "jaguar-repaint", "bad": 3}), encoding="utf-8")

        assert load_identifier_table(table_path) == {"jaguar": "jaguar-repaint"}

    def test_load_identifier_table_missing_file(self, tmp_path):
        """Should return an empty table for a missing file."""
        assert load_identifier_table(tmp_path / "missing.json") == {}

    def test_load_identifier_table_not_object(self, tmp_path):
        """Should return an empty table for JSON that is not an object."""
        table_path = tmp_path / "table.json"
        table_path.write_text("[1, 2]", encoding="utf-8")

        assert load_identifier_table(table_path) == {}
