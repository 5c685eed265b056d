# =============================================================================
# core/services/publish_service.py - Publish Pipeline
# =============================================================================
# Runs when an article is published or a published article is edited:
#
#   1. ai_summary_ja from the Japanese content
#   2. For each other language, concurrently:
#        translate fields -> ai_summary_{lang} -> faqs_{lang}
#   3. toc_{lang} for every language with content
#   4. One update with every produced field
#   5. Search sync with category/tag names
#
# Every step is "try, log, continue": a failed language contributes no
# fields and never fails the publish request.
#
# Usage:
#   from core.services.publish_service import PublishService
#   PublishService.dispatch_publish(article_id)   # Celery, inline fallback
#   PublishService.run_pipeline(article_id)       # synchronous
# =============================================================================

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any

from agents.translator import TranslatorAgent
from app.config import settings
from lib.html_utils import build_table_of_contents
from lib.i18n import DEFAULT_LANG, SUPPORTED_LANGS, localized_value, other_langs
from lib.search_client import SearchClient
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


class PublishService:
    """
    Translation, summary, table of contents and search sync for articles.
    """

    # -------------------------------------------------------------------------
    # Per-language work
    # -------------------------------------------------------------------------

    @staticmethod
    def translate_language(
        article: dict[str, Any],
        lang: str,
        translator: TranslatorAgent,
    ) -> dict[str, Any]:
        """
        Produce the localized columns of one language.

        Raises:
            TranslationError: If any translation or summary call fails
        """
        source = {
            field: localized_value(article, field, DEFAULT_LANG)
            for field in ("title", "content", "excerpt", "meta_title", "meta_description")
        }
        translated = translator.translate_article(source, lang)

        fields = {f"{name}_{lang}": value for name, value in translated.items()}
        fields[f"ai_summary_{lang}"] = translator.generate_ai_summary(translated["content"], lang)

        faqs_ja = article.get("faqs_ja")
        if faqs_ja:
            fields[f"faqs_{lang}"] = translator.translate_faqs(faqs_ja, lang)

        return fields

    @staticmethod
    def _safe_translate(
        article: dict[str, Any],
        lang: str,
        translator: TranslatorAgent,
    ) -> dict[str, Any] | None:
        try:
            fields = PublishService.translate_language(article, lang, translator)
            logger.info(f"Translated article {article['id']} to {lang}")
            return fields
        except Exception as e:
            logger.error(f"Translation of article {article['id']} to {lang} failed: {e}")
            return None

    @staticmethod
    def build_tocs(article: dict[str, Any], fields: dict[str, Any]) -> dict[str, Any]:
        """toc_{lang} for every language that has content."""
        tocs = {}
        merged = {**article, **fields}
        for lang in SUPPORTED_LANGS:
            content = merged.get(f"content_{lang}") or (merged.get("content") if lang == DEFAULT_LANG else None)
            if content:
                _, toc = build_table_of_contents(content)
                tocs[f"toc_{lang}"] = toc
        return tocs

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    @staticmethod
    def taxonomy_names(article: dict[str, Any]) -> tuple[list[str], list[str]]:
        """Japanese category and tag names of an article."""
        categories = SupabaseClient.fetch_by_ids("categories", article.get("category_ids") or [], columns="id,name")
        tags = SupabaseClient.fetch_by_ids("tags", article.get("tag_ids") or [], columns="id,name")
        return [c["name"] for c in categories if c.get("name")], [t["name"] for t in tags if t.get("name")]

    @staticmethod
    def sync_search(article: dict[str, Any]) -> list[str]:
        """
        Push an article to every language index.

        Returns:
            Indexed languages (empty when the search sync failed)
        """
        try:
            category_names, tag_names = PublishService.taxonomy_names(article)
            return SearchClient.sync_article(article, category_names, tag_names)
        except Exception as e:
            logger.error(f"Search sync of article {article.get('id')} failed: {e}")
            return []

    @staticmethod
    def remove_from_search(article_id: str) -> list[str]:
        """Remove an article from every language index, logging failures."""
        try:
            return SearchClient.delete_article(article_id)
        except Exception as e:
            logger.error(f"Search removal of article {article_id} failed: {e}")
            return []

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    @staticmethod
    def run_pipeline(
        article_id: str,
        translator: TranslatorAgent | None = None,
    ) -> dict[str, Any]:
        """
        Run the full publish pipeline for one article.

        Args:
            article_id: Article to process
            translator: Agent to use (default: a new TranslatorAgent)

        Returns:
            {success, article_id, translated_langs, failed_langs, indexed_langs, error?}
        """
        article = SupabaseClient.fetch_by_id("articles", article_id)
        if not article:
            logger.error(f"Publish pipeline: article {article_id} not found")
            return {"success": False, "article_id": article_id, "error": "Article not found"}

        translator = translator or TranslatorAgent()
        fields: dict[str, Any] = {}

        # Step 1: Japanese AI summary
        try:
            fields["ai_summary_ja"] = translator.generate_ai_summary(
                localized_value(article, "content", DEFAULT_LANG), DEFAULT_LANG
            )
        except Exception as e:
            logger.error(f"AI summary (ja) of article {article_id} failed: {e}")

        # Step 2: other languages, concurrently
        langs = other_langs()
        translated_langs: list[str] = []
        failed_langs: list[str] = []

        with ThreadPoolExecutor(max_workers=max(1, settings.TRANSLATION_MAX_WORKERS)) as executor:
            futures = {
                lang: executor.submit(PublishService._safe_translate, article, lang, translator)
                for lang in langs
            }
            for lang in langs:
                result = futures[lang].result()
                if result is None:
                    failed_langs.append(lang)
                else:
                    fields.update(result)
                    translated_langs.append(lang)

        # Step 3: tables of contents
        fields.update(PublishService.build_tocs(article, fields))

        # Step 4: single update
        fields["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            updated = SupabaseClient.update("articles", article_id, fields) or {**article, **fields}
        except SupabaseClientError as e:
            logger.error(f"Publish pipeline: saving translations of {article_id} failed: {e}")
            return {
                "success": False,
                "article_id": article_id,
                "error": e.message,
                "translated_langs": translated_langs,
                "failed_langs": failed_langs,
                "indexed_langs": [],
            }

        # Step 5: search
        indexed_langs = PublishService.sync_search(updated)

        logger.info(
            f"Publish pipeline done for {article_id}: translated={translated_langs}, "
            f"failed={failed_langs}, indexed={indexed_langs}"
        )
        return {
            "success": True,
            "article_id": article_id,
            "translated_langs": translated_langs,
            "failed_langs": failed_langs,
            "indexed_langs": indexed_langs,
        }

    @staticmethod
    def dispatch_publish(article_id: str) -> dict[str, Any]:
        """
        Queue the pipeline on Celery, or run it inline if the broker is down.

        Returns:
            {"mode": "queued", "task_id"} or {"mode": "inline", "result"}
        """
        from workers.tasks import publish_article

        try:
            task = publish_article.delay(article_id)
            logger.info(f"Queued publish pipeline for {article_id}: task {task.id}")
            return {"mode": "queued", "task_id": task.id}
        except Exception as e:
            logger.error(f"Could not queue publish pipeline for {article_id}, running inline: {e}")
            return {"mode": "inline", "result": PublishService.run_pipeline(article_id)}

    @staticmethod
    def reindex_tenant(media_id: str) -> dict[str, int]:
        """
        Bulk sync every published article of a tenant.

        Raises:
            SearchClientError: If a bulk request fails
        """
        articles = SupabaseClient.fetch_many(
            "articles", filters={"media_id": media_id, "is_published": True}
        )
        categories = {
            c["id"]: c.get("name", "")
            for c in SupabaseClient.fetch_many("categories", filters={"media_id": media_id}, columns="id,name")
        }
        tags = {
            t["id"]: t.get("name", "")
            for t in SupabaseClient.fetch_many("tags", filters={"media_id": media_id}, columns="id,name")
        }

        entries = [
            (
                article,
                [categories[i] for i in article.get("category_ids") or [] if i in categories],
                [tags[i] for i in article.get("tag_ids") or [] if i in tags],
            )
            for article in articles
        ]
        counts = SearchClient.bulk_sync(entries)
        logger.info(f"Reindexed {len(articles)} articles of tenant {media_id}: {counts}")
        return counts
