"""
Completion service for Agentic Navigator.

Provides the message types shared with the conversation controller, the
abstract completion service and an OpenAI-compatible HTTP implementation.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

import httpx
from pydantic import BaseModel, Field, ValidationError

from .config import NavigatorConfig
from .errors import CompletionFailed

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Message roles understood by chat completion APIs."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """Immutable chat message.
    
    The role is a Role for the three standard roles. Any other label
    reported by a provider is kept verbatim as a string.
    """
    role: Union[Role, str]
    content: str
    
    def to_dict(self) -> dict[str, str]:
        role = self.role.value if isinstance(self.role, Role) else self.role
        return {"role": role, "content": self.content}


def coerce_role(label: str) -> Union[Role, str]:
    """Map a provider role label onto Role, keeping unknown labels as-is."""
    try:
        return Role(label)
    except ValueError:
        return label


@dataclass
class CompletionResult:
    """Candidate replies plus optional token usage."""
    choices: list[Message] = field(default_factory=list)
    total_tokens: Optional[int] = None


class _ResponseMessage(BaseModel):
    role: str = Role.ASSISTANT.value
    content: Optional[str] = None


class _Choice(BaseModel):
    message: _ResponseMessage


class _Usage(BaseModel):
    total_tokens: Optional[int] = None


class ChatCompletionResponse(BaseModel):
    """Validated subset of an OpenAI chat completion response."""
    
    choices: list[_Choice] = Field(default_factory=list)
    usage: Optional[_Usage] = None
    
    def to_result(self) -> CompletionResult:
        return CompletionResult(
            choices=[
                Message(coerce_role(c.message.role), c.message.content or "")
                for c in self.choices
            ],
            total_tokens=self.usage.total_tokens if self.usage else None,
        )


class CompletionService(ABC):
    """Abstract chat completion backend."""
    
    @abstractmethod
    def complete(
        self,
        messages: list[Message],
        *,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> CompletionResult:
        """Request a completion for the given conversation.
        
        Args:
            messages: Ordered conversation history
            model: Model identifier
            temperature: Sampling temperature
            max_tokens: Upper bound on generated tokens
            
        Returns:
            The candidate replies and token usage
            
        Raises:
            CompletionFailed: On transport, status or response format errors
        """
        pass
    
    def close(self) -> None:
        """Close any resources."""
    
    def __enter__(self):
        return self
    
    def __exit__(self, *exc_info) -> None:
        self.close()


class OpenAICompletionService(CompletionService):
    """Completion service for the OpenAI Chat Completions API.
    
    Works with OpenAI and any OpenAI-compatible server (LM Studio, vLLM, ...).
    No retries are performed; every failure surfaces as CompletionFailed.
    """
    
    def __init__(self, config: NavigatorConfig):
        self.config = config
        self.endpoint = config.model_endpoint.rstrip("/")
        
        self.headers = {"Content-Type": "application/json"}
        if config.api_key:
            self.headers["Authorization"] = f"Bearer {config.api_key}"
        
        self.client = httpx.Client(timeout=config.request_timeout)
    
    def build_payload(
        self,
        messages: list[Message],
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> dict[str, Any]:
        return {
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "messages": [m.to_dict() for m in messages],
        }
    
    def complete(
        self,
        messages: list[Message],
        *,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> CompletionResult:
        url = f"{self.endpoint}/chat/completions"
        payload = self.build_payload(messages, model, temperature, max_tokens)
        
        try:
            response = self.client.post(url, json=payload, headers=self.headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise CompletionFailed(
                f"Completion request returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise CompletionFailed(f"Completion request failed: {e}") from e
        except ValueError as e:
            raise CompletionFailed("Completion response is not valid JSON") from e
        
        try:
            parsed = ChatCompletionResponse.model_validate(data)
        except ValidationError as e:
            raise CompletionFailed(f"Malformed completion response: {e}") from e
        
        return parsed.to_result()
    
    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()
