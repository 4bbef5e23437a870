"""
Configuration management for Agentic Navigator.

Provides the configuration dataclass and environment variable loading.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file if present
load_dotenv()


def _env_api_key() -> Optional[str]:
    return os.getenv("AGENTIC_NAVIGATOR_API_KEY") or os.getenv("OPENAI_API_KEY")


@dataclass
class NavigatorConfig:
    """Configuration for the conversation controller and its runner."""
    
    # Completion service settings
    model_endpoint: str = field(
        default_factory=lambda: os.getenv(
            "AGENTIC_NAVIGATOR_ENDPOINT",
            "https://api.openai.com/v1"
        )
    )
    model: str = field(
        default_factory=lambda: os.getenv("AGENTIC_NAVIGATOR_MODEL", "gpt-4")
    )
    api_key: Optional[str] = field(default_factory=_env_api_key)
    
    # Sampling parameters. Replies must be one short command, so the
    # token bound stays small.
    temperature: float = 0.7
    max_tokens: int = 100
    
    # HTTP timeout (seconds)
    request_timeout: float = 60.0
    
    # Runner settings
    max_steps: int = 30
    max_decode_retries: int = 2
    
    # Debug mode - enables verbose logging (off by default)
    debug: bool = field(
        default_factory=lambda: os.getenv("AGENTIC_NAVIGATOR_DEBUG", "").lower() in ("1", "true", "yes")
    )
    
    def __post_init__(self):
        """Validate sampling and retry parameters."""
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be within [0, 2], got {self.temperature}")
        if self.max_decode_retries < 0:
            raise ValueError(f"max_decode_retries must be non-negative, got {self.max_decode_retries}")


# Default configuration values for documentation
DEFAULTS = {
    "model_endpoint": "https://api.openai.com/v1",
    "model": "gpt-4",
    "temperature": 0.7,
    "max_tokens": 100,
    "request_timeout": 60.0,
    "max_steps": 30,
    "max_decode_retries": 2,
}
