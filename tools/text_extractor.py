"""
Text Extractor Tool — turns a raw post body into clean text for the LLM.
Uses BeautifulSoup to strip any embedded markup.
"""

import html
import re
from bs4 import BeautifulSoup


def clean_post_body(content: str, max_length: int = 6000) -> str:
    """
    Extract readable text from a post body.

    Post bodies are markdown that may contain HTML fragments and escaped
    newlines. Truncates to max_length to stay within LLM context limits.

    Args:
        content: Raw post body.
        max_length: Maximum character length of the cleaned text.

    Returns:
        Cleaned text content.
    """
    if not content:
        return ""

    # Bodies from the GraphQL API carry literal "\n" sequences
    text = content.replace("\\r\\n", "\n").replace("\\n", "\n").replace("\\t", " ")

    if "<" in text and ">" in text:
        soup = BeautifulSoup(text, "html.parser")
        for element in soup.find_all(["script", "style", "img", "svg", "iframe"]):
            element.decompose()
        text = soup.get_text(separator="\n")

    text = html.unescape(text)

    # Collapse multiple blank lines into single ones
    text = re.sub(r"\n\s*\n\s*\n+", "\n\n", text)

    # Collapse multiple spaces
    text = re.sub(r"[ \t]{2,}", " ", text)
    text = text.strip()

    if len(text) > max_length:
        text = text[:max_length] + "\n\n[... content truncated ...]"

    return text
