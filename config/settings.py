"""
Configuration settings for the Offer Scout pipeline.
Loads values from .env file and provides typed access.
"""

import os
import tempfile
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Determine project root
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
env_path = os.path.join(project_root, ".env")
load_dotenv(env_path)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # Remote storage (GitHub Gist)
    gist_id: str = field(default_factory=lambda: os.getenv("GIST_ID", ""))
    github_token: str = field(default_factory=lambda: os.getenv("GITHUB_TOKEN", ""))
    gist_api_url: str = field(
        default_factory=lambda: os.getenv("GIST_API_URL", "https://api.github.com/gists")
    )

    # Local storage
    output_dir: str = field(
        default_factory=lambda: os.getenv("OUTPUT_DIR", os.path.join(project_root, "public"))
    )
    # Serverless platforms only allow writes to their scratch directory
    ephemeral_fs: bool = field(
        default_factory=lambda: _env_flag(
            "EPHEMERAL_FS", "true" if os.getenv("VERCEL") else "false"
        )
    )
    dataset_filename: str = field(
        default_factory=lambda: os.getenv("DATASET_FILENAME", "parsed_comps.json")
    )
    checkpoint_filename: str = field(
        default_factory=lambda: os.getenv("CHECKPOINT_FILENAME", ".leetoffer_metadata.json")
    )

    # Post source (LeetCode Discuss)
    leetcode_graphql_url: str = field(
        default_factory=lambda: os.getenv("LEETCODE_GRAPHQL_URL", "https://leetcode.com/graphql")
    )
    post_category: str = field(
        default_factory=lambda: os.getenv("POST_CATEGORY", "compensation")
    )
    post_page_size: int = field(
        default_factory=lambda: int(os.getenv("POST_PAGE_SIZE", "50"))
    )
    request_timeout: int = field(
        default_factory=lambda: int(os.getenv("REQUEST_TIMEOUT", "30"))
    )
    max_retries: int = field(
        default_factory=lambda: int(os.getenv("MAX_RETRIES", "3"))
    )

    # LLM Configuration (any OpenAI-compatible endpoint, Gemini by default)
    llm_base_url: str = field(
        default_factory=lambda: os.getenv(
            "LLM_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/"
        )
    )
    llm_api_key: str = field(default_factory=lambda: os.getenv("LLM_API_KEY", ""))
    llm_model_name: str = field(
        default_factory=lambda: os.getenv("LLM_MODEL_NAME", "gemini-2.0-flash")
    )
    llm_temperature: float = field(
        default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.1"))
    )
    llm_max_tokens: int = field(
        default_factory=lambda: int(os.getenv("LLM_MAX_TOKENS", "2048"))
    )
    llm_max_retries: int = field(
        default_factory=lambda: int(os.getenv("LLM_MAX_RETRIES", "1"))
    )
    max_post_chars: int = field(
        default_factory=lambda: int(os.getenv("MAX_POST_CHARS", "6000"))
    )

    # Run limits
    # Provider free tier allows 250 calls a day; keep a margin below it
    daily_call_budget: int = field(
        default_factory=lambda: int(os.getenv("DAILY_CALL_BUDGET", "240"))
    )
    incremental_depth: int = field(
        default_factory=lambda: int(os.getenv("INCREMENTAL_DEPTH", "500"))
    )
    full_depth: int = field(
        default_factory=lambda: int(os.getenv("FULL_DEPTH", "2000"))
    )

    # Pacing between LLM calls (seconds)
    pacing_short_delay: float = field(
        default_factory=lambda: float(os.getenv("PACING_SHORT_DELAY", "0.5"))
    )
    pacing_long_delay: float = field(
        default_factory=lambda: float(os.getenv("PACING_LONG_DELAY", "2.0"))
    )
    pacing_long_every: int = field(
        default_factory=lambda: int(os.getenv("PACING_LONG_EVERY", "10"))
    )

    @property
    def resolved_output_dir(self) -> str:
        """Directory the local store writes into."""
        if self.ephemeral_fs:
            return tempfile.gettempdir()
        return self.output_dir

    @property
    def has_remote_credentials(self) -> bool:
        return bool(self.gist_id and self.github_token)


# Singleton instance
settings = Settings()
