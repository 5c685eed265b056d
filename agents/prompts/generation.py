# =============================================================================
# agents/prompts/generation.py - Scheduled Article Generation Prompts
# =============================================================================
# Step-by-step prompts for the ArticleGenerator agent:
#   keyword -> research brief -> title -> outline -> intro -> body
#
# Every step receives the current month so the model focuses on recent
# trends. Responses use "label: value" lines that the agent parses.
# =============================================================================

from __future__ import annotations


def writer_system_prompt(date_info: str, task: str) -> str:
    """System prompt shared by the writing steps."""
    return f"""
<role>
You are a professional Japanese SEO writer. It is currently {date_info}.
{task}
Always write in Japanese.
</role>
"""


# =============================================================================
# Step 1: Keyword
# =============================================================================

def build_keyword_prompt(category_name: str, date_info: str, recent_keywords: list[str]) -> str:
    """
    Ask for one trending keyword in a category.

    Recent keywords of the same category are listed so the model avoids them.
    """
    avoid = ""
    if recent_keywords:
        listed = "\n".join(f"{i}. {kw}" for i, kw in enumerate(recent_keywords, start=1))
        avoid = f"""
<recent_keywords>
{listed}
</recent_keywords>
Choose a keyword that does not overlap with the recent keywords above.
"""

    return f"""Select one currently trending keyword that matches the category 「{category_name}」 for a new article.
It is currently {date_info}; base the choice on the latest trends.
{avoid}
Output format:
キーワード: [keyword]"""


# =============================================================================
# Step 2: Research Brief
# =============================================================================

def build_research_prompt(keyword: str, date_info: str) -> str:
    """Ask for a writing brief (persona, needs, goal, related keywords)."""
    return f"""Analyze the keyword 「{keyword}」 and write an SEO article brief. It is currently {date_info}.

Step 1: Analyze the latest trends and what searchers want to know.
Step 2: Output the brief as bullet lines in exactly this format:

検索ユーザーのペルソナ（人物像）: [persona]
検索意図（顕在ニーズ）: [explicit needs]
検索意図（潜在ニーズ）: [latent needs]
記事のゴール: [goal]
記事に記載すべき内容: [required content]
関連キーワード: [keyword1], [keyword2], [keyword3], [keyword4]"""


# =============================================================================
# Step 3-6: Title, Outline, Introduction, Body
# =============================================================================

def build_title_prompt(keyword: str, target_audience: str) -> str:
    return f"""Write an article for 「{target_audience}」.
The keyword is 「{keyword}」.
Create a title of 25-32 characters that includes the keyword and makes people want to read.

Output format:
タイトル: [title]"""


def build_outline_prompt(brief: dict[str, str], title: str, keyword: str, related_keywords: list[str]) -> str:
    return f"""Create an outline for a blog article of about 5,000 characters that readers will want to read to the end.
Include the keyword naturally in the h2 headings.

# Title
{title}

# Keyword
{keyword}

# Related keywords
{'、'.join(related_keywords)}

# Explicit needs
{brief.get('explicit_needs', '')}

# Latent needs
{brief.get('latent_needs', '')}

# Goal
{brief.get('goal', '')}

# Required content
{brief.get('content_requirements', '')}

Output format (HTML tags only):
<h2>Heading 1</h2>
<h3>Subheading 1-1</h3>
<h3>Subheading 1-2</h3>
<h2>Heading 2</h2>
<h3>Subheading 2-1</h3>"""


def build_intro_prompt(brief: dict[str, str], title: str, keyword: str) -> str:
    return f"""Write an introduction of 200-300 characters for the article below.
Start with a question and focus on the benefits for the reader.

# Title
{title}

# Keyword
{keyword}

# Explicit needs
{brief.get('explicit_needs', '')}

# Latent needs
{brief.get('latent_needs', '')}

Output format (HTML p tag):
<p>introduction...</p>"""


def build_body_prompt(keyword: str, outline: str, pattern_prompt: str | None = None) -> str:
    pattern_block = f"\n# Article structure pattern\n{pattern_prompt}\n" if pattern_prompt else ""
    return f"""Write the body of the article in HTML following the keyword and outline below.
Use tables where they help.

# Keyword
{keyword}

# Outline
{outline}
{pattern_block}
# Rules
- Answer the needs behind the keyword
- Each h2 section has 1,000-2,000 characters; each h3/h4 has at least 200-400 characters
- Every heading has at least 4 sentences
- Put a 100-200 character lead paragraph under each h2

Output format:
HTML body following the outline (h2, h3, h4, p, ul, ol, table)"""
