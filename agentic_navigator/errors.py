"""
Exceptions raised by the conversation controller.
"""


class ConversationError(Exception):
    """Base class for every failure of a request_action call."""


class InvalidUrl(ConversationError):
    """The current page URL could not be parsed or has no host."""
    
    def __init__(self, url: str, reason: str = "no parseable host"):
        self.url = url
        super().__init__(f"Invalid URL {url!r}: {reason}")


class CompletionFailed(ConversationError):
    """The completion service could not produce a response."""


class NoCompletionChoice(ConversationError):
    """The completion service answered with an empty choice list."""
    
    def __init__(self, message: str = "No choices returned from the completion service."):
        super().__init__(message)


class ActionDecodeFailed(ConversationError):
    """The model reply did not match the command grammar."""
    
    def __init__(self, raw_text: str):
        self.raw_text = raw_text
        super().__init__(f"Could not decode an action from reply: {raw_text!r}")
