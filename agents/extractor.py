"""
Offer Extractor — LLM-powered extraction of compensation offers from one post.
Talks to any OpenAI-compatible chat endpoint (Gemini by default) via LangChain.
"""

import json
import re

import openai
from langchain_openai import ChatOpenAI
from langchain_core.messages import SystemMessage, HumanMessage
from pydantic import ValidationError

from config.settings import Settings
from models.offer import ExtractedOffer
from models.post import Post
from tools.errors import ExtractionFailed, QuotaExceeded
from tools.text_extractor import clean_post_body


EXTRACTOR_SYSTEM_PROMPT = """You extract job offer compensation data from forum posts.

IMPORTANT INSTRUCTIONS:
1. A post may describe zero, one or several offers. Return one object per offer.
2. Return a JSON array of offer objects with these fields:
   - "company": company name (string or null)
   - "role": role or level, e.g. "SDE II" (string or null)
   - "yoe": total years of experience (number or null)
   - "base_offer": yearly base salary as a plain number in the post's currency (number or null)
   - "total_offer": yearly total compensation as a plain number (number or null)
   - "location": city or country of the job (string or null)
   - "visa_sponsorship": "yes", "no" or null
3. Use null for anything the post does not state. Never guess, never use 0 for unknown.
4. Write "210000", not "210k" or "$210,000".
5. If the post contains no offer, return an empty array: []
6. Return ONLY the JSON array, no other text.
7. Do NOT wrap the JSON in markdown code blocks."""

EXTRACTOR_USER_PROMPT = """Extract all compensation offers from this post.
Title: {title}

Content:
{content}

Return ONLY a JSON array of offer objects."""


def _parse_llm_response(response_text: str) -> list[dict]:
    """
    Parse the LLM response into a list of offer dicts.
    Handles common LLM output quirks (markdown code blocks, extra text, etc.).
    """
    text = response_text.strip()

    # Remove markdown code blocks if present
    if "```json" in text:
        text = text.split("```json")[-1].split("```")[0].strip()
    elif "```" in text:
        text = text.split("```")[1].split("```")[0].strip()

    # Try to find a JSON array in the response
    match = re.search(r"\[.*\]", text, re.DOTALL)
    if match:
        text = match.group(0)

    try:
        result = json.loads(text)
    except json.JSONDecodeError:
        return []

    if isinstance(result, list):
        return [item for item in result if isinstance(item, dict)]
    if isinstance(result, dict):
        return [result]
    return []


def _response_text(response) -> str:
    content = response.content
    if isinstance(content, list):
        # Some providers return content blocks instead of a plain string
        return "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    return content or ""


class OfferExtractor:
    """
    Extracts offers from a single post.

    Raises QuotaExceeded when the provider reports rate/quota exhaustion,
    and ExtractionFailed for any other failed LLM call.
    """

    def __init__(self, llm, max_post_chars: int = 6000):
        self.llm = llm
        self.max_post_chars = max_post_chars

    @classmethod
    def from_settings(cls, settings: Settings) -> "OfferExtractor":
        llm = ChatOpenAI(
            base_url=settings.llm_base_url,
            api_key=settings.llm_api_key or "missing-key",
            model=settings.llm_model_name,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            max_retries=settings.llm_max_retries,
            timeout=120,
        )
        return cls(llm, max_post_chars=settings.max_post_chars)

    def build_messages(self, post: Post) -> list:
        content = clean_post_body(post.content, max_length=self.max_post_chars)
        return [
            SystemMessage(content=EXTRACTOR_SYSTEM_PROMPT),
            HumanMessage(
                content=EXTRACTOR_USER_PROMPT.format(title=post.title, content=content)
            ),
        ]

    def extract(self, post: Post) -> list[ExtractedOffer]:
        messages = self.build_messages(post)

        try:
            response = self.llm.invoke(messages)
        except openai.RateLimitError as e:
            raise QuotaExceeded(str(e)) from e
        except Exception as e:
            raise ExtractionFailed(f"LLM call failed for post {post.id}: {e}") from e

        offers = []
        for item in _parse_llm_response(_response_text(response)):
            try:
                offer = ExtractedOffer.model_validate(item)
            except ValidationError as e:
                print(f"[Extractor] Dropping invalid offer from post {post.id}: {e}")
                continue
            if offer.has_signal():
                offers.append(offer)

        return offers
