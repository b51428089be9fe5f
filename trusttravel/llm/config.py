from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class LLMConfig:
    api_key: str = os.getenv("GROQ_API_KEY", "")
    model: str = os.getenv("TRUSTTRAVEL_LLM_MODEL", "llama-3.3-70b-versatile")
    timeout: float = 10.0
    max_tokens: int = 1024
    max_places: int = 10  # only the head of the ranking gets LLM reasons
    enabled: bool = os.getenv("TRUSTTRAVEL_LLM_ENABLED", "1") not in ("0", "false", "no")


DEFAULT_LLM_CONFIG = LLMConfig()
