"""
Run summary returned by one ingestion run.
"""

from typing import Literal, Optional
from pydantic import BaseModel


class RunSummary(BaseModel):
    processed: int = 0
    successful: int = 0
    total_offers: int = 0
    new_offers: int = 0
    output_path: str = ""
    mode: Literal["incremental", "full"] = "full"
    stop_reason: Optional[Literal["budget", "quota"]] = None
    api_calls: int = 0
    errors: int = 0
