"""
Agentic Navigator - the conversation controller of an LLM-driven browser agent.

Keeps a running chat with a language model, resets its context when the
browser moves to a new host, and decodes replies into typed browser commands.
"""

__version__ = "0.1.0"
__author__ = "Agentic Navigator Contributors"

from .actions import Action, Click, Goal, Type, parse_action
from .completion import CompletionService, Message, OpenAICompletionService, Role
from .conversation import Conversation
from .errors import (
    ActionDecodeFailed,
    CompletionFailed,
    ConversationError,
    InvalidUrl,
    NoCompletionChoice,
)

__all__ = [
    "Action",
    "Click",
    "Type",
    "Goal",
    "parse_action",
    "CompletionService",
    "OpenAICompletionService",
    "Message",
    "Role",
    "Conversation",
    "ConversationError",
    "InvalidUrl",
    "CompletionFailed",
    "NoCompletionChoice",
    "ActionDecodeFailed",
]
