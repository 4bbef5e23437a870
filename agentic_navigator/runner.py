"""
Agent runner for Agentic Navigator.

Drives the observe -> request -> execute loop around a Conversation. This is
where caller-level policy lives: applying GOAL replies to the conversation and
re-prompting when a reply cannot be decoded.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .actions import Action, Goal
from .config import NavigatorConfig
from .conversation import Conversation
from .errors import ActionDecodeFailed, ConversationError
from .logger import RunConsole

logger = logging.getLogger(__name__)

# Returns (current_url, page_markup) for the page the browser is showing.
Observer = Callable[[], tuple[str, str]]
# Performs a Click or Type against the browser.
Executor = Callable[[Action], None]


@dataclass
class RunResult:
    """Result of running the agent."""
    steps_taken: int
    goal: str
    stopped_reason: str
    error: Optional[str] = None
    
    @property
    def success(self) -> bool:
        return self.error is None


class AgentRunner:
    """Runs a Conversation against an external browser."""
    
    def __init__(
        self,
        conversation: Conversation,
        observe: Observer,
        execute: Executor,
        max_steps: int = 30,
        max_decode_retries: int = 2,
        console: Optional[RunConsole] = None,
    ):
        """Initialize the runner.
        
        Args:
            conversation: The conversation to drive
            observe: Supplies the current URL and page markup
            execute: Performs browser actions
            max_steps: Number of actions to request before stopping
            max_decode_retries: Extra requests allowed after an undecodable reply
            console: Optional console reporter
        """
        if max_decode_retries < 0:
            raise ValueError(f"max_decode_retries must be non-negative, got {max_decode_retries}")
        
        self.conversation = conversation
        self.observe = observe
        self.execute = execute
        self.max_steps = max_steps
        self.max_decode_retries = max_decode_retries
        self.console = console or RunConsole(conversation.goal, enable_console=False)
    
    @classmethod
    def from_config(
        cls,
        config: NavigatorConfig,
        conversation: Conversation,
        observe: Observer,
        execute: Executor,
        console: Optional[RunConsole] = None,
    ) -> "AgentRunner":
        return cls(
            conversation,
            observe,
            execute,
            max_steps=config.max_steps,
            max_decode_retries=config.max_decode_retries,
            console=console,
        )
    
    def request_with_retries(self, url: str, page_markup: str) -> Action:
        """Request an action, re-prompting on undecodable replies.
        
        The undecodable reply stays in history, so the model sees its own
        mistake on the next attempt.
        
        Raises:
            ActionDecodeFailed: If every attempt produced an invalid reply
        """
        for attempt in range(self.max_decode_retries + 1):
            try:
                return self.conversation.request_action(url, page_markup)
            except ActionDecodeFailed as e:
                if attempt == self.max_decode_retries:
                    raise
                logger.info(
                    "Re-prompting after undecodable reply (attempt %d/%d): %r",
                    attempt + 1, self.max_decode_retries + 1, e.raw_text,
                )
        raise AssertionError("unreachable")
    
    def step(self, step_number: int) -> Action:
        """Observe the page, request one action and apply it."""
        url, page_markup = self.observe()
        action = self.request_with_retries(url, page_markup)
        self.console.print_step(step_number, url, action)
        
        if isinstance(action, Goal):
            logger.info("Goal updated: %s", action.text)
            self.conversation.goal = action.text
            self.console.print_goal_update(action.text)
        else:
            self.execute(action)
        
        return action
    
    def run(self) -> RunResult:
        """Run until max_steps actions have been taken or a step fails."""
        self.console.print_header()
        
        steps = 0
        try:
            for step_number in range(1, self.max_steps + 1):
                self.step(step_number)
                steps = step_number
        except ConversationError as e:
            logger.error("Run stopped after %d steps: %s", steps, e)
            self.console.print_error(str(e))
            result = RunResult(steps, self.conversation.goal, "error", error=str(e))
        else:
            result = RunResult(steps, self.conversation.goal, "max_steps")
        
        self.console.print_summary(
            result.steps_taken,
            len(self.conversation.history),
            result.stopped_reason,
        )
        return result
