"""Settings for the hosted model and the chat pipeline.

Everything is read from the process environment, with ``.env`` loaded
first. Any OpenAI-compatible endpoint works when LLM_BASE_URL is set.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()


def _env_key() -> str:
    return os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY") or ""


class AgentConfig(BaseModel):
    """Credentials and sampling parameters for the hosted chat model."""

    api_key: str = Field(default_factory=_env_key, validate_default=True)
    base_url: str | None = Field(default_factory=lambda: os.getenv("LLM_BASE_URL") or None)
    model_name: str = Field(default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"))
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=8192, ge=1, le=128000)

    @field_validator("api_key")
    @classmethod
    def require_api_key(cls, value: str) -> str:
        key = value.strip()
        if not key:
            raise ValueError("API key required: set LLM_API_KEY (or OPENAI_API_KEY)")
        return key


class ChatSettings(BaseModel):
    """Tuning knobs for context assembly and streaming.

    Attributes:
        history_window: Number of most recent prior turns sent to the model.
        excerpt_chars: Document characters resent on follow-up turns.
        request_timeout: Wall-clock budget for one completion stream, in seconds.
        max_upload_bytes: Largest accepted document upload.
    """

    history_window: int = Field(
        default_factory=lambda: int(os.getenv("CHAT_HISTORY_WINDOW", "20")),
        ge=0,
    )
    excerpt_chars: int = Field(
        default_factory=lambda: int(os.getenv("CHAT_EXCERPT_CHARS", "8000")),
        ge=1,
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("CHAT_REQUEST_TIMEOUT", "60")),
        gt=0.0,
    )
    max_upload_bytes: int = Field(
        default_factory=lambda: int(os.getenv("CHAT_MAX_UPLOAD_MB", "10")) * 1024 * 1024,
        ge=1,
    )


def get_agent_config() -> AgentConfig:
    """Build the model settings; raises ValidationError without an API key."""
    return AgentConfig()


def get_chat_settings() -> ChatSettings:
    """Create chat settings from environment."""
    return ChatSettings()
