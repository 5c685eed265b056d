# =============================================================================
# tests/test_public_service.py - Tests for the public read API
# =============================================================================
# Run with: pytest tests/test_public_service.py -v
# =============================================================================

from unittest.mock import patch

import pytest

from app.exceptions import ResourceNotFoundError
from core.services.public_service import (
    PublicService,
    adjacent_articles,
    article_card,
    related_articles,
)


def _card(article_id, published_at, category_ids=(), tag_ids=()):
    return {
        "id": article_id,
        "slug": article_id,
        "title": f"タイトル {article_id}",
        "title_en": f"Title {article_id}",
        "excerpt": "",
        "published_at": published_at,
        "view_count": 0,
        "category_ids": list(category_ids),
        "tag_ids": list(tag_ids),
    }


# =============================================================================
# Pure helpers
# =============================================================================

class TestRelatedArticles:
    """Tests for related article ranking."""

    def test_categories_weigh_double(self, sample_article):
        candidates = [
            _card("tag-match", "2024-05-01", tag_ids=["tag-1"]),
            _card("category-match", "2024-01-01", category_ids=["cat-1"]),
            _card("unrelated", "2024-06-01", category_ids=["cat-9"]),
            sample_article,
        ]

        result = related_articles(sample_article, candidates)

        assert [a["id"] for a in result] == ["category-match", "tag-match"]

    def test_ties_go_to_newest(self, sample_article):
        candidates = [
            _card("older", "2024-01-01", tag_ids=["tag-1"]),
            _card("newer", "2024-02-01", tag_ids=["tag-1"]),
        ]

        assert [a["id"] for a in related_articles(sample_article, candidates)] == ["newer", "older"]

    def test_limit(self, sample_article):
        candidates = [_card(f"a{i}", f"2024-01-{i + 1:02d}", tag_ids=["tag-1"]) for i in range(10)]

        assert len(related_articles(sample_article, candidates)) == 6


class TestAdjacentArticles:

    def test_previous_is_older_and_next_is_newer(self):
        ordered = [{"id": "new"}, {"id": "mid"}, {"id": "old"}]

        older, newer = adjacent_articles({"id": "mid"}, ordered)

        assert older["id"] == "old"
        assert newer["id"] == "new"

    def test_edges(self):
        ordered = [{"id": "new"}, {"id": "old"}]

        assert adjacent_articles({"id": "new"}, ordered)[1] is None
        assert adjacent_articles({"id": "old"}, ordered)[0] is None
        assert adjacent_articles({"id": "missing"}, ordered) == (None, None)


class TestArticleCard:

    def test_localized_with_fallback(self):
        card = article_card(_card("a1", "2024-01-01"), "en")

        assert card["title"] == "Title a1"
        assert card["excerpt"] == ""
        assert "title_en" not in card


# =============================================================================
# PublicService
# =============================================================================

class TestPublicArticles:
    """Tests for article listing and detail."""

    def test_get_article(self, mock_db, sample_article):
        # Arrange
        record = {**sample_article, "title_en": "Tokyo Cafes"}
        published = [
            _card("newer", "2024-04-01", tag_ids=["tag-1"]),
            record,
            _card("older", "2024-02-01", category_ids=["cat-1"]),
        ]

        def fetch_many(table, filters=None, limit=None, **kwargs):
            if limit == 1:
                return [record]
            return published

        def fetch_by_ids(table, ids, **kwargs):
            if table == "categories":
                return [{"id": "cat-1", "name": "グルメ", "name_en": "Gourmet"}]
            return [{"id": "tag-1", "name": "カフェ", "name_en": "Cafe"}]

        mock_db.fetch_many.side_effect = fetch_many
        mock_db.fetch_by_ids.side_effect = fetch_by_ids
        mock_db.fetch_by_id.return_value = {"id": "writer-1", "handle_name": "山田", "handle_name_en": "Yamada"}

        # Act
        article = PublicService.get_article("media-1", "tokyo-cafe", "en")

        # Assert
        assert article["title"] == "Tokyo Cafes"
        assert "title_en" not in article
        assert [entry["id"] for entry in article["toc"]] == ["heading-1", "heading-2"]
        assert 'id="heading-1"' in article["content"]
        assert article["reading_time"] == 1
        assert article["categories"][0]["name"] == "Gourmet"
        assert article["tags"][0]["name"] == "Cafe"
        assert article["writer"]["handle_name"] == "Yamada"
        assert [a["id"] for a in article["related"]] == ["older", "newer"]
        assert article["prev"]["id"] == "older"
        assert article["next"]["id"] == "newer"

    def test_unknown_slug(self, mock_db):
        with pytest.raises(ResourceNotFoundError):
            PublicService.get_article("media-1", "missing", "ja")

    def test_list_articles_filters_by_category_slug(self, mock_db):
        def fetch_many(table, filters=None, **kwargs):
            if table == "categories":
                return [{"id": "cat-1", "name": "グルメ", "slug": "gourmet"}]
            return [_card("a1", "2024-01-01", category_ids=["cat-1"])]

        mock_db.fetch_many.side_effect = fetch_many

        result = PublicService.list_articles("media-1", "en", category="gourmet", sort="popular", page=2, per_page=10)

        assert [a["id"] for a in result["articles"]] == ["a1"]
        assert result["page"] == 2
        kwargs = mock_db.fetch_many.call_args.kwargs
        assert kwargs["contains"] == {"category_ids": ["cat-1"]}
        assert kwargs["order_by"] == "view_count"
        assert kwargs["offset"] == 10

    def test_list_articles_unknown_category(self, mock_db):
        with pytest.raises(ResourceNotFoundError):
            PublicService.list_articles("media-1", "en", category="missing")

    def test_increment_view(self, mock_db, sample_article):
        mock_db.fetch_many.return_value = [sample_article]

        assert PublicService.increment_view("media-1", "tokyo-cafe") == 11
        assert mock_db.update.call_args[0][2]["view_count"] == 11


class TestPublicOther:
    """Tests for site, writers and search."""

    def test_site(self, sample_tenant):
        site = PublicService.site(sample_tenant, "ko")

        assert site["media_id"] == "media-1"
        assert site["name"] == "トラベルメディア"
        assert site["lang"] == "ko"
        assert site["logos"]["square"] == "https://cdn.example.com/logo.png"
        assert site["theme"]["layout_theme"] == "cobi"

    def test_writer_of_another_tenant(self, mock_db):
        mock_db.fetch_by_id.return_value = {"id": "writer-1", "media_id": "other"}

        with pytest.raises(ResourceNotFoundError):
            PublicService.get_writer("media-1", "writer-1", "ja")

    def test_search_resolves_slugs_to_names(self, mock_db):
        mock_db.fetch_many.return_value = [{"id": "cat-1", "name": "グルメ"}]

        with patch("core.services.public_service.SearchClient") as mock_search:
            mock_search.search.return_value = {"hits": [], "total": 0, "page": 1, "per_page": 20}
            PublicService.search("media-1", "en", "cafe", category="gourmet")

        mock_search.search.assert_called_once_with(
            "cafe", "en", "media-1", category="グルメ", tag=None, page=1, per_page=20,
        )
