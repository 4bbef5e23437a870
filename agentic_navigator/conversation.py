"""
Conversation controller for Agentic Navigator.

Owns the chat history sent to the model, resets it whenever the browser
moves to a different host, and turns each reply into a typed Action.

A Conversation is not thread-safe. Exactly one request_action call may be in
flight per instance.
"""

import logging
from typing import Callable, Optional

import httpx

from .actions import Action, parse_action
from .completion import CompletionService, Message, OpenAICompletionService, Role
from .config import NavigatorConfig
from .errors import ActionDecodeFailed, InvalidUrl, NoCompletionChoice
from .prompts import DEFAULT_GOAL, SYSTEM_PROMPT, format_page_prompt

logger = logging.getLogger(__name__)


def parse_host(url: str) -> str:
    """Extract the host of an absolute URL.
    
    Args:
        url: URL of the current page
        
    Returns:
        The host component (e.g., "a.example")
        
    Raises:
        InvalidUrl: If the URL cannot be parsed or carries no host
    """
    try:
        host = httpx.URL(url).host
    except (httpx.InvalidURL, TypeError, UnicodeError) as e:
        raise InvalidUrl(url, str(e)) from e
    if not host:
        raise InvalidUrl(url)
    return host


class Conversation:
    """A running conversation with the model driving the browser."""
    
    def __init__(
        self,
        completion_service: CompletionService,
        goal: str,
        system_prompt: str,
        *,
        model: str = "gpt-4",
        temperature: float = 0.7,
        max_tokens: int = 100,
        decoder: Callable[[str], Action] = parse_action,
    ):
        """Initialize the conversation.
        
        Args:
            completion_service: Backend used to request replies
            goal: Initial objective for the agent
            system_prompt: Fixed instruction prompt, kept as history[0]
            model: Model identifier sent with every request
            temperature: Sampling temperature
            max_tokens: Upper bound on reply length
            decoder: Turns reply text into an Action
        """
        self.completion_service = completion_service
        self.goal = goal
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.decoder = decoder
        
        self.current_host: Optional[str] = None
        self._history: list[Message] = [Message(Role.SYSTEM, system_prompt)]
    
    @classmethod
    def from_config(
        cls,
        config: Optional[NavigatorConfig] = None,
        completion_service: Optional[CompletionService] = None,
        goal: str = DEFAULT_GOAL,
        system_prompt: str = SYSTEM_PROMPT,
    ) -> "Conversation":
        """Create a conversation with the default goal and prompt."""
        config = config or NavigatorConfig()
        if completion_service is None:
            completion_service = OpenAICompletionService(config)
        return cls(
            completion_service,
            goal,
            system_prompt,
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )
    
    @property
    def history(self) -> tuple[Message, ...]:
        """Snapshot of the message history, oldest first."""
        return tuple(self._history)
    
    @property
    def system_message(self) -> Message:
        return self._history[0]
    
    def reset(self) -> None:
        """Drop every turn except the system message and forget the host."""
        del self._history[1:]
        self.current_host = None
    
    def request_action(self, current_url: str, page_markup: str) -> Action:
        """Request the next action for the current page.
        
        Args:
            current_url: URL of the page the browser is showing
            page_markup: Simplified markup of that page
            
        Returns:
            The decoded action
            
        Raises:
            InvalidUrl: If current_url has no parseable host (state unchanged)
            CompletionFailed: If the completion service fails
            NoCompletionChoice: If the service returned no reply
            ActionDecodeFailed: If the reply is not a valid command
        """
        self._enforce_context_length(current_url)
        
        self._history.append(Message(
            Role.USER,
            format_page_prompt(self.goal, current_url, page_markup),
        ))
        
        result = self.completion_service.complete(
            list(self._history),
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        
        if result.total_tokens is not None:
            logger.debug("Got a response, used %d tokens.", result.total_tokens)
        else:
            logger.debug("Got a response, no token usage reported.")
        
        if not result.choices:
            raise NoCompletionChoice()
        
        reply = result.choices[0]
        self._history.append(reply)
        
        try:
            return self.decoder(reply.content)
        except ActionDecodeFailed:
            logger.warning("Could not decode reply: %r", reply.content)
            raise
    
    def _enforce_context_length(self, url: str) -> None:
        host = parse_host(url)
        
        if self.current_host != host:
            logger.debug("Host changed (%s -> %s), clearing context.", self.current_host, host)
            del self._history[1:]
        
        self.current_host = host
