"""
Typed browser commands and the decoder for model replies.

The model answers with exactly one of:

    CLICK <id>
    TYPE <id> "<text>"
    GOAL "<text>"

Decoding is strict: the whole reply (minus surrounding whitespace) must be a
single command, otherwise ActionDecodeFailed is raised.
"""

import re
from dataclasses import dataclass
from typing import Any, Union

from .errors import ActionDecodeFailed


@dataclass(frozen=True)
class Click:
    """Click the element with the given id."""
    element_id: int
    
    def to_command(self) -> str:
        return f"CLICK {self.element_id}"
    
    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {"action": "click", "element_id": self.element_id}


@dataclass(frozen=True)
class Type:
    """Type text into the input with the given id, then press ENTER."""
    element_id: int
    text: str
    
    def to_command(self) -> str:
        return f'TYPE {self.element_id} "{_quote_checked(self.text)}"'
    
    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {"action": "type", "element_id": self.element_id, "text": self.text}


@dataclass(frozen=True)
class Goal:
    """Replace the agent's objective."""
    text: str
    
    def to_command(self) -> str:
        return f'GOAL "{_quote_checked(self.text)}"'
    
    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {"action": "goal", "text": self.text}


Action = Union[Click, Type, Goal]


_CLICK_PATTERN = re.compile(r'CLICK\s+(\d+)', re.ASCII)
_TYPE_PATTERN = re.compile(r'TYPE\s+(\d+)\s+"([^"]*)"', re.ASCII)
_GOAL_PATTERN = re.compile(r'GOAL\s+"([^"]*)"', re.ASCII)


def _quote_checked(text: str) -> str:
    if '"' in text:
        raise ValueError(f"Command text cannot contain a double quote: {text!r}")
    return text


def parse_action(raw_text: str) -> Action:
    """Decode a model reply into an Action.
    
    Args:
        raw_text: The reply content exactly as returned by the model
        
    Returns:
        The decoded Click, Type or Goal
        
    Raises:
        ActionDecodeFailed: If the reply is not exactly one command
    """
    text = raw_text.strip()
    
    match = _CLICK_PATTERN.fullmatch(text)
    if match:
        return Click(int(match.group(1)))
    
    match = _TYPE_PATTERN.fullmatch(text)
    if match:
        return Type(int(match.group(1)), match.group(2))
    
    match = _GOAL_PATTERN.fullmatch(text)
    if match:
        return Goal(match.group(1))
    
    raise ActionDecodeFailed(raw_text)
