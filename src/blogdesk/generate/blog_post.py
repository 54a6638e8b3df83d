"""Blog post generation from a topic and a template."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from blogdesk.config import MAX_TOKENS_DEFAULT
from blogdesk.errors import GenerationError
from blogdesk.generate.templates import get_template
from blogdesk.llm.client import complete_with_retry

log = logging.getLogger(__name__)

DEFAULT_AUDIENCE = "general business professionals"

LENGTH_GUIDANCE = {
    "short": "approximately 500-700 words",
    "medium": "approximately 1000-1500 words",
    "long": "approximately 2000-2500 words",
}

RESPONSE_FORMAT = """\
IMPORTANT: Your response must be in the following format:

---TITLE---
[The blog post title]

---EXCERPT---
[A compelling 1-2 sentence excerpt/summary for previews, max 150 characters]

---META_DESCRIPTION---
[SEO meta description, max 155 characters]

---CONTENT---
[The full blog post content in markdown format]
"""

FEATURES_INSTRUCTIONS = """\
IMPORTANT INSTRUCTIONS FOR FEATURES:
- Don't be overly promotional - integrate features as helpful solutions to problems discussed in the content
- If a feature includes a "SCREENSHOTS" section with markdown image syntax, INSERT that exact markdown image into your blog content at the most relevant point when discussing that feature
- Place screenshots after introducing the feature, with a brief caption or context
- Link to the feature URL when mentioning it (use markdown link syntax)
"""

# A CONTENT section this short means the model ignored the format
MIN_CONTENT_LENGTH = 100


@dataclass
class GeneratedPost:
    title: str
    excerpt: str
    meta_description: str
    content: str


def build_user_prompt(
    topic: str,
    template: dict,
    tone: str = "professional",
    length: str = "medium",
    audience: str = DEFAULT_AUDIENCE,
    keywords: list[str] | tuple = (),
    features: list[str] | tuple = (),
) -> str:
    length_text = LENGTH_GUIDANCE.get(length, LENGTH_GUIDANCE["medium"])

    keywords_text = ""
    if keywords:
        keywords_text = (
            "Naturally incorporate these keywords where appropriate: "
            f"{', '.join(keywords)}."
        )

    features_text = ""
    if features:
        features_text = (
            "PRODUCT FEATURES TO HIGHLIGHT:\n"
            "Naturally weave in mentions of these features where relevant to the topic:\n\n"
            + "\n---\n".join(features)
            + "\n\n"
            + FEATURES_INSTRUCTIONS
        )

    return (
        f"Write a blog post about: {topic}\n\n"
        f"Target audience: {audience}\n"
        f"Tone: {tone}\n"
        f"Length: {length_text}\n"
        f"{keywords_text}\n"
        f"{features_text}\n\n"
        f"{template['structure']}\n"
        f"{RESPONSE_FORMAT}"
    )


def extract_section(text: str, name: str) -> str | None:
    """Body of a ``---NAME---`` section, up to the next marker or the end."""
    pattern = rf"---{name}---\s*\n(.*?)(?=\n---[A-Z_]+---|\Z)"
    match = re.search(pattern, text, re.DOTALL)
    return match.group(1).strip() if match else None


def parse_blog_response(text: str) -> GeneratedPost:
    """Split a model response into title, excerpt, meta description, body.

    Responses that don't follow the section format are kept whole as the
    post body.
    """
    title = extract_section(text, "TITLE")
    excerpt = extract_section(text, "EXCERPT")
    meta_description = extract_section(text, "META_DESCRIPTION")
    content = extract_section(text, "CONTENT")

    if content and len(content) > MIN_CONTENT_LENGTH:
        return GeneratedPost(
            title=title or "Untitled",
            excerpt=excerpt or content[:150],
            meta_description=meta_description or excerpt or content[:155],
            content=content,
        )

    log.warning("Response not in expected format, using raw content")
    return GeneratedPost(
        title="Generated Post",
        excerpt=text[:150],
        meta_description=text[:155],
        content=text,
    )


def generate_blog_post(
    topic: str,
    template_name: str,
    llm_client,
    tone: str = "professional",
    length: str = "medium",
    audience: str = DEFAULT_AUDIENCE,
    keywords: list[str] | tuple = (),
    features: list[str] | tuple = (),
    max_tokens: int = MAX_TOKENS_DEFAULT,
) -> GeneratedPost:
    """Generate a blog post with the LLM.

    Args:
        topic: What the post is about
        template_name: One of the TEMPLATES keys
        llm_client: Anything with ``complete(system, user, max_tokens)``
        tone: Writing tone
        length: "short", "medium" or "long"
        audience: Target audience description
        keywords: Keywords to work into the text
        features: Feature descriptions from FeatureCatalog.format_many_for_prompt

    Raises GenerationError for an unknown template or a failed API call.
    """
    template = get_template(template_name)
    if template is None:
        raise GenerationError(f"Unknown template type: {template_name}")

    user_prompt = build_user_prompt(
        topic, template,
        tone=tone, length=length, audience=audience,
        keywords=keywords, features=features,
    )

    log.info("Generating %s post about %r", template_name, topic)
    response = complete_with_retry(
        llm_client,
        system=template["system"],
        user=user_prompt,
        max_tokens=max_tokens,
    )
    return parse_blog_response(response.content)
