# =============================================================================
# agents/prompts/ - System Prompts for AI Agents
# =============================================================================
# This package contains the prompts used by each agent:
# - translation.py: Translator prompts (translation rules, AI summary)
# - content.py: ContentWriter prompts (slug, tags, meta title, FAQ, images)
# - generation.py: ArticleGenerator step prompts (keyword -> body)
#
# Organized with XML tags for clear structure.
# =============================================================================

from agents.prompts.translation import (
    build_translation_prompt,
    build_summary_prompt,
)

__all__ = [
    "build_translation_prompt",
    "build_summary_prompt",
]
