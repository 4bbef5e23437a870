"""
Shared fixtures for Agentic Navigator tests.
"""

import pytest

from agentic_navigator.completion import CompletionResult, CompletionService, Message, Role
from agentic_navigator.conversation import Conversation
from agentic_navigator.errors import CompletionFailed


class ScriptedCompletionService(CompletionService):
    """Completion service that replays canned results and records requests."""
    
    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.requests = []
    
    def queue(self, *replies) -> None:
        self.replies.extend(replies)
    
    def complete(self, messages, *, model, temperature, max_tokens):
        self.requests.append({
            "messages": list(messages),
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, CompletionResult):
            return reply
        return CompletionResult(
            choices=[Message(Role.ASSISTANT, reply)],
            total_tokens=42,
        )


@pytest.fixture
def service():
    return ScriptedCompletionService()


@pytest.fixture
def conversation(service):
    return Conversation(service, goal="Find pricing", system_prompt="SYSTEM PROMPT")


@pytest.fixture
def failing_reply():
    return CompletionFailed("connection refused")
