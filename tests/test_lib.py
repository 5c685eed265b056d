# =============================================================================
# tests/test_lib.py - Tests for lib helpers
# =============================================================================
# Tests for string similarity, slugs, HTML helpers, localization, image
# optimization and search record building.
#
# Run with: pytest tests/test_lib.py -v
# =============================================================================

import io
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image

from app.exceptions import UnsupportedLanguageError
from lib.html_utils import (
    build_table_of_contents,
    clean_generated_html,
    clean_wordpress_html,
    extract_h2_headings,
    reading_time_minutes,
    strip_html_for_search,
)
from lib.i18n import localize, localized_value, other_langs, seed_default_lang, validate_lang
from lib.images import make_thumbnail, optimize_image
from lib.search_client import (
    INDEX_MAPPINGS,
    SearchClient,
    build_search_record,
    index_name,
    to_epoch_ms,
)
from lib.similarity import (
    clean_slug,
    fallback_slug,
    find_most_similar,
    levenshtein,
    tag_similarity,
    text_similarity,
    unique_slug,
)


# =============================================================================
# Similarity
# =============================================================================

class TestSimilarity:
    """Tests for tag and text similarity."""

    def test_levenshtein(self):
        assert levenshtein("kitten", "sitting") == 3
        assert levenshtein("", "abc") == 3
        assert levenshtein("same", "same") == 0

    def test_tag_similarity_ignores_case_and_whitespace(self):
        assert tag_similarity("Travel", " travel ") == 1.0

    def test_tag_similarity_containment(self):
        """One name inside the other scores len(shorter)/len(longer)."""
        assert tag_similarity("東京", "東京観光") == pytest.approx(0.5)

    def test_tag_similarity_empty(self):
        assert tag_similarity("", "東京") == 0.0

    def test_text_similarity_identical(self):
        assert text_similarity("Hello  World", "hello world") == pytest.approx(1.0)

    def test_text_similarity_unrelated_is_low(self):
        assert text_similarity("apple banana", "xyz qrs tuv") < 0.3

    def test_find_most_similar(self, sample_tags):
        best, score = find_most_similar("カフェ巡り", sample_tags)

        assert best["id"] == "tag-1"
        assert score == pytest.approx(3 / 5)

    def test_find_most_similar_no_candidates(self):
        assert find_most_similar("x", []) == (None, 0.0)


class TestSlugs:
    """Tests for slug helpers."""

    def test_clean_slug(self):
        assert clean_slug("Tokyo Travel Guide!") == "tokyo-travel-guide"
        assert clean_slug("  --a__b--  ") == "a-b"

    def test_fallback_slug_keeps_japanese(self):
        slug = fallback_slug("東京 カフェ")
        assert "東京" in slug
        assert " " not in slug

    def test_fallback_slug_limit(self):
        assert len(fallback_slug("a" * 100)) == 30

    def test_unique_slug(self):
        taken = {"tokyo", "tokyo-2"}
        assert unique_slug("tokyo", taken.__contains__) == "tokyo-3"
        assert unique_slug("osaka", taken.__contains__) == "osaka"


# =============================================================================
# HTML
# =============================================================================

class TestHtmlUtils:
    """Tests for HTML helpers."""

    def test_strip_html_for_search(self):
        text = strip_html_for_search("<p>A&amp;B</p>\n<p>C&nbsp;D</p>")
        assert text == "A&B C D"

    def test_strip_html_truncates(self):
        assert len(strip_html_for_search("<p>" + "あ" * 5000 + "</p>")) == 3000

    def test_strip_html_empty(self):
        assert strip_html_for_search(None) == ""

    def test_build_table_of_contents(self):
        html, toc = build_table_of_contents("<h2>はじめに</h2><p>x</p><h3>詳細</h3>")

        assert toc == [
            {"id": "heading-1", "text": "はじめに", "level": 2},
            {"id": "heading-2", "text": "詳細", "level": 3},
        ]
        assert '<h2 id="heading-1">はじめに</h2>' in html

    def test_build_table_of_contents_keeps_existing_ids(self):
        _, toc = build_table_of_contents('<h2 id="intro">Intro</h2>')
        assert toc[0]["id"] == "intro"

    def test_table_of_contents_is_deterministic(self):
        """Ids stored at publish time match a later rebuild."""
        source = "<h2>A</h2><h2>B</h2>"
        assert build_table_of_contents(source) == build_table_of_contents(source)

    def test_extract_h2_headings(self):
        assert extract_h2_headings("<h2>A</h2><h3>x</h3><h2>B</h2>") == ["A", "B"]

    def test_reading_time(self):
        assert reading_time_minutes("<p>" + "あ" * 1001 + "</p>") == 3
        assert reading_time_minutes("") == 1

    def test_clean_wordpress_html(self):
        source = (
            '<!-- wp:paragraph --><p class="wp-block-paragraph">Hello</p><!-- /wp:paragraph -->'
            "<p> </p>"
            '<figure class="wp-block-image keep"><img src="a.jpg"/><figcaption>cap</figcaption></figure>'
        )

        cleaned = clean_wordpress_html(source)

        assert "wp:" not in cleaned
        assert "wp-block" not in cleaned
        assert '<p>Hello</p>' in cleaned
        assert '<div class="keep">' in cleaned
        assert "<p>cap</p>" in cleaned
        assert "<figure" not in cleaned

    def test_clean_generated_html_strips_fences(self):
        cleaned = clean_generated_html("```html\n<h2>T</h2>\n\n<p>a</p>   <p>b</p>\n```")
        assert cleaned == "<h2>T</h2>\n<p>a</p>\n<p>b</p>"


# =============================================================================
# i18n
# =============================================================================

class TestI18n:
    """Tests for language validation and localization."""

    def test_validate_lang(self):
        assert validate_lang("ko") == "ko"

    def test_validate_lang_rejects_unknown(self):
        with pytest.raises(UnsupportedLanguageError) as exc_info:
            validate_lang("fr")
        assert exc_info.value.status_code == 400

    def test_other_langs(self):
        assert other_langs() == ["en", "zh", "ko"]

    def test_localized_value_fallback_order(self):
        record = {"title": "base", "title_ja": "日本語", "title_en": "English", "title_zh": ""}

        assert localized_value(record, "title", "en") == "English"
        assert localized_value(record, "title", "zh") == "日本語"
        assert localized_value({"title": "base"}, "title", "ko") == "base"

    def test_localize_drops_language_columns(self):
        record = {"id": "1", "title": "東京", "title_ja": "東京", "title_en": "Tokyo"}

        result = localize(record, ["title"], "en")

        assert result == {"id": "1", "title": "Tokyo"}

    def test_seed_default_lang(self):
        data = seed_default_lang({"title": "東京"}, ["title", "content"])
        assert data == {"title": "東京", "title_ja": "東京"}


# =============================================================================
# Images
# =============================================================================

def _png(width: int, height: int) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 100, 50)).save(buffer, format="PNG")
    return buffer.getvalue()


class TestImages:
    """Tests for Pillow based optimization."""

    def test_optimize_downscales_to_max_width(self):
        result = optimize_image(_png(400, 200), max_width=100)

        assert (result.width, result.height) == (100, 50)
        assert result.content_type == "image/webp"
        assert Image.open(io.BytesIO(result.data)).format == "WEBP"

    def test_optimize_never_upscales(self):
        result = optimize_image(_png(80, 60), max_width=100)
        assert (result.width, result.height) == (80, 60)

    def test_thumbnail_exact_size(self):
        result = make_thumbnail(_png(400, 200), size=(50, 50))
        assert (result.width, result.height) == (50, 50)


# =============================================================================
# Search records
# =============================================================================

class TestSearchRecord:
    """Tests for search document building."""

    def test_index_name(self):
        assert index_name("en").endswith("_en")

    def test_to_epoch_ms(self):
        assert to_epoch_ms("1970-01-01T00:00:01Z") == 1000
        assert to_epoch_ms(None) == 0
        assert to_epoch_ms("not a date") == 0

    def test_build_search_record_localizes(self, sample_article):
        article = {**sample_article, "title_en": "Tokyo Cafes"}

        record = build_search_record(article, "en", ["グルメ"], ["カフェ"])

        assert record["objectID"] == "article-1"
        assert record["title"] == "Tokyo Cafes"
        # No English excerpt: falls back to Japanese
        assert record["excerpt"] == "おすすめのカフェ"
        assert "<" not in record["content_text"]
        assert record["categories"] == ["グルメ"]
        assert record["tags"] == ["カフェ"]
        assert record["is_published"] is True
        assert record["published_at"] == to_epoch_ms("2024-03-01T00:00:00+00:00")


class TestSearchIndices:
    """Tests for index creation before the first write."""

    @pytest.fixture
    def es_client(self):
        client = MagicMock()
        client.indices.exists.return_value = False
        with patch.object(SearchClient, "get_client", return_value=client), \
                patch.object(SearchClient, "_indices_ready", False):
            yield client

    def test_indices_are_created_before_indexing(self, es_client, sample_article):
        # Act
        SearchClient.sync_article(sample_article, ["グルメ"], ["カフェ"])

        # Assert
        assert es_client.indices.create.call_count == 4
        es_client.indices.create.assert_any_call(index=index_name("ja"), mappings=INDEX_MAPPINGS)
        calls = [c[0] for c in es_client.mock_calls]
        assert calls.index("indices.create") < calls.index("index")
        assert es_client.index.call_count == 4

    def test_indices_are_checked_once(self, es_client, sample_article):
        SearchClient.sync_article(sample_article)
        SearchClient.sync_article(sample_article)

        assert es_client.indices.exists.call_count == 4

    def test_existing_indices_are_kept(self, es_client, sample_article):
        es_client.indices.exists.return_value = True

        SearchClient.sync_article(sample_article)

        es_client.indices.create.assert_not_called()

    def test_failed_creation_still_indexes_and_retries(self, es_client, sample_article):
        # Arrange
        es_client.indices.exists.side_effect = ConnectionError("cluster down")

        # Act
        indexed = SearchClient.sync_article(sample_article)

        # Assert
        assert indexed == ["ja", "en", "zh", "ko"]
        assert SearchClient.prepare_indices() is False
