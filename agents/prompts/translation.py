# =============================================================================
# agents/prompts/translation.py - Translation and Summary Prompts
# =============================================================================
# System prompts for the Translator agent:
# - build_translation_prompt: Japanese -> target language, HTML preserved
# - build_summary_prompt: short AI summary of an article in a language
#
# Usage:
#   prompt = build_translation_prompt("en", context="article title")
# =============================================================================

from __future__ import annotations

from lib.i18n import LANGUAGE_NAMES

TRANSLATION_RULES = """
<rules>
1. Natural wording: the result must read as if written by a native speaker.
2. Keep the meaning: preserve the nuance and intent of the original.
3. Terminology: translate IT, business and marketing terms the way they are used in the target language.
4. HTML: when the text contains HTML tags, keep every tag and attribute exactly as is and translate only the text between them.
5. Line breaks: keep the line break structure of the original.
6. SEO: prefer natural phrasing that people actually search for.
7. Output only the translation. No explanations, notes or quotes.
</rules>
"""


def build_translation_prompt(target_lang: str, context: str | None = None) -> str:
    """
    Build the system prompt for translating Japanese text.

    Args:
        target_lang: Target language code (en, zh, ko)
        context: What the text is (e.g. "article title", "FAQ answer")

    Returns:
        System prompt string
    """
    context_line = f"\n<context>The text is a {context}.</context>\n" if context else ""

    return f"""
<role>
You are a professional translator working for a web media company.
Translate the user's text from Japanese into {LANGUAGE_NAMES[target_lang]}.
</role>
{context_line}{TRANSLATION_RULES}"""


def build_summary_prompt(lang: str) -> str:
    """
    Build the system prompt for the AI summary shown above articles.

    The summary is written for both readers and AI answer engines.
    """
    return f"""
<role>
You are an expert in SEO and AI answer engine optimization.
Summarize the article in {LANGUAGE_NAMES[lang]} in about 150-200 characters.
</role>

<requirements>
- Structured so that AI assistants can quote it directly
- Cover the two or three main points of the article
- Include the important keywords naturally
- Make the value of the article clear at a glance
- Explain technical terms briefly when they are needed
- Output only the summary text
</requirements>
"""
