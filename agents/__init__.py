# =============================================================================
# agents/ - AI Agent Definitions
# =============================================================================
# This package contains the LLM agents of the CMS:
# - translator.py: TranslatorAgent - article/text translation, AI summaries
# - content_writer.py: ContentWriterAgent - slugs, tags, meta titles, FAQs,
#   category descriptions, image generation
# - article_generator.py: ArticleGeneratorAgent - 12-step draft generation
#   used by generate-advanced and scheduled generations
#
# Shared plumbing:
# - llm.py: OpenAI clients and the chat() helper
# - prompts/: prompt templates per agent
# =============================================================================

from agents.llm import AgentError, chat, get_openai_client, get_research_client
from agents.translator import TranslatorAgent, is_full_english
from agents.content_writer import ContentWriterAgent, GeneratedImage
from agents.article_generator import ArticleGeneratorAgent, GenerationResult, ResearchBrief

__all__ = [
    # Plumbing
    "AgentError",
    "chat",
    "get_openai_client",
    "get_research_client",
    # Agents
    "TranslatorAgent",
    "ContentWriterAgent",
    "ArticleGeneratorAgent",
    # Results
    "GeneratedImage",
    "GenerationResult",
    "ResearchBrief",
    # Helpers
    "is_full_english",
]
