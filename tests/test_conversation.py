"""
Tests for the conversation controller.
"""

import logging

import pytest

from agentic_navigator.actions import Click, Goal, Type
from agentic_navigator.completion import CompletionResult, Message, Role
from agentic_navigator.config import NavigatorConfig
from agentic_navigator.conversation import Conversation, parse_host
from agentic_navigator.errors import (
    ActionDecodeFailed,
    CompletionFailed,
    InvalidUrl,
    NoCompletionChoice,
)
from agentic_navigator.prompts import DEFAULT_GOAL, SYSTEM_PROMPT


class TestParseHost:
    """Tests for host extraction."""
    
    def test_host_extracted(self):
        assert parse_host("https://a.example/page1") == "a.example"
    
    def test_port_and_scheme_ignored(self):
        assert parse_host("http://a.example:8080/x") == parse_host("https://a.example/y")
    
    @pytest.mark.parametrize("url", ["not a url", "/relative/path", "", "http://xn--/"])
    def test_invalid(self, url):
        with pytest.raises(InvalidUrl):
            parse_host(url)


class TestConstruction:
    """Tests for creating a conversation."""
    
    def test_initial_state(self, conversation):
        assert conversation.goal == "Find pricing"
        assert conversation.current_host is None
        assert conversation.history == (Message(Role.SYSTEM, "SYSTEM PROMPT"),)
    
    def test_from_config_uses_defaults(self, service):
        config = NavigatorConfig(model="gpt-4o-mini", temperature=0.5, max_tokens=50)
        conversation = Conversation.from_config(config, completion_service=service)
        
        assert conversation.goal == DEFAULT_GOAL
        assert conversation.system_message == Message(Role.SYSTEM, SYSTEM_PROMPT)
        assert conversation.model == "gpt-4o-mini"
        assert conversation.temperature == 0.5
        assert conversation.max_tokens == 50
    
    def test_system_prompt_lists_commands(self):
        for command in ("CLICK X", 'TYPE X "TEXT"', 'GOAL "TEXT"'):
            assert command in SYSTEM_PROMPT


class TestRequestAction:
    """Tests for request_action."""
    
    def test_scenario(self, conversation, service):
        """Same-host turns accumulate, a new host resets the context."""
        service.queue("CLICK 0", "CLICK 1", 'TYPE 2 "shoes"')
        
        action = conversation.request_action("https://a.example/page1", "<p id=0>hi</p>")
        assert action == Click(0)
        assert conversation.current_host == "a.example"
        assert len(conversation.history) == 3
        assert len(service.requests[0]["messages"]) == 2
        
        conversation.request_action("https://a.example/page2", "...")
        assert len(service.requests[1]["messages"]) == 4
        assert len(conversation.history) == 5
        
        action = conversation.request_action("https://b.example/x", "...")
        assert action == Type(2, "shoes")
        assert conversation.current_host == "b.example"
        assert len(service.requests[2]["messages"]) == 2
        assert len(conversation.history) == 3
    
    def test_user_message_layout(self, conversation, service):
        service.queue("CLICK 0")
        conversation.request_action("https://a.example/page1", "<p id=0>hi</p>")
        
        user = conversation.history[1]
        assert user.role == Role.USER
        assert user.content == (
            "OBJECTIVE: Find pricing\n"
            "CURRENT URL: https://a.example/page1\n"
            "PAGE CONTENT: <p id=0>hi</p>"
        )
    
    def test_sampling_parameters(self, conversation, service):
        service.queue("CLICK 0")
        conversation.request_action("https://a.example/", "")
        
        request = service.requests[0]
        assert request["model"] == "gpt-4"
        assert request["temperature"] == 0.7
        assert request["max_tokens"] == 100
    
    def test_assistant_reply_appended(self, conversation, service):
        service.queue("CLICK 4")
        conversation.request_action("https://a.example/", "")
        assert conversation.history[-1] == Message(Role.ASSISTANT, "CLICK 4")
    
    def test_provider_role_preserved(self, conversation, service):
        service.queue(CompletionResult(choices=[Message("model", "CLICK 1")]))
        conversation.request_action("https://a.example/", "")
        assert conversation.history[-1].role == "model"
    
    def test_system_message_survives_every_call(self, conversation, service):
        service.queue("CLICK 0", "garbage", "CLICK 1", CompletionFailed("down"))
        urls = ["https://a.example/", "https://b.example/", "https://b.example/2", "https://c.example/"]
        
        for url in urls:
            try:
                conversation.request_action(url, "")
            except (ActionDecodeFailed, CompletionFailed):
                pass
            assert conversation.history[0] == Message(Role.SYSTEM, "SYSTEM PROMPT")
    
    def test_same_host_strict_growth(self, conversation, service):
        service.queue("CLICK 0", "CLICK 1")
        conversation.request_action("https://a.example/1", "")
        after_first = len(conversation.history)
        
        conversation.request_action("https://a.example/2", "")
        assert len(service.requests[1]["messages"]) == after_first + 1
    
    def test_goal_not_applied_by_controller(self, conversation, service):
        service.queue('GOAL "buy a lamp"')
        action = conversation.request_action("https://a.example/", "")
        assert action == Goal("buy a lamp")
        assert conversation.goal == "Find pricing"
    
    def test_updated_goal_used_in_next_prompt(self, conversation, service):
        service.queue("CLICK 0")
        conversation.goal = "Read the changelog"
        conversation.request_action("https://a.example/", "")
        assert conversation.history[1].content.startswith("OBJECTIVE: Read the changelog\n")
    
    def test_missing_usage_is_not_fatal(self, conversation, service):
        service.queue(CompletionResult(choices=[Message(Role.ASSISTANT, "CLICK 2")]))
        assert conversation.request_action("https://a.example/", "") == Click(2)
    
    def test_usage_logged(self, conversation, service, caplog):
        service.queue("CLICK 2")
        with caplog.at_level(logging.DEBUG, logger="agentic_navigator"):
            conversation.request_action("https://a.example/", "")
        assert "used 42 tokens" in caplog.text


class TestRequestActionErrors:
    """Tests for failure handling in request_action."""
    
    def test_invalid_url_leaves_state_unchanged(self, conversation, service):
        service.queue("CLICK 0")
        conversation.request_action("https://a.example/", "")
        history_before = conversation.history
        
        with pytest.raises(InvalidUrl):
            conversation.request_action("not a url", "")
        
        assert conversation.history == history_before
        assert conversation.current_host == "a.example"
        assert len(service.requests) == 1
    
    def test_invalid_url_on_first_call(self, conversation, service):
        with pytest.raises(InvalidUrl):
            conversation.request_action("", "")
        assert conversation.current_host is None
        assert len(conversation.history) == 1
        assert service.requests == []
    
    def test_completion_failure_keeps_user_message(self, conversation, service, failing_reply):
        service.queue(failing_reply)
        with pytest.raises(CompletionFailed):
            conversation.request_action("https://a.example/", "")
        
        assert len(conversation.history) == 2
        assert conversation.history[-1].role == Role.USER
        assert conversation.current_host == "a.example"
    
    def test_unanswered_user_message_included_next_time(self, conversation, service, failing_reply):
        service.queue(failing_reply, "CLICK 0")
        with pytest.raises(CompletionFailed):
            conversation.request_action("https://a.example/", "")
        
        conversation.request_action("https://a.example/", "")
        roles = [m.role for m in service.requests[1]["messages"]]
        assert roles == [Role.SYSTEM, Role.USER, Role.USER]
    
    def test_no_choices(self, conversation, service):
        service.queue(CompletionResult(choices=[], total_tokens=10))
        with pytest.raises(NoCompletionChoice):
            conversation.request_action("https://a.example/", "")
        
        assert [m.role for m in conversation.history] == [Role.SYSTEM, Role.USER]
    
    def test_decode_failure_keeps_reply(self, conversation, service):
        service.queue("Sure! I will click the link.")
        with pytest.raises(ActionDecodeFailed) as exc_info:
            conversation.request_action("https://a.example/", "")
        
        assert exc_info.value.raw_text == "Sure! I will click the link."
        assert conversation.history[-1] == Message(Role.ASSISTANT, "Sure! I will click the link.")
    
    def test_custom_decoder(self, service):
        conversation = Conversation(
            service, "goal", "prompt", decoder=lambda text: Goal(text.upper()),
        )
        service.queue("anything")
        assert conversation.request_action("https://a.example/", "") == Goal("ANYTHING")


class TestReset:
    """Tests for explicit resets."""
    
    def test_reset_clears_turns_and_host(self, conversation, service):
        service.queue("CLICK 0", "CLICK 1")
        conversation.request_action("https://a.example/", "")
        conversation.reset()
        
        assert conversation.history == (Message(Role.SYSTEM, "SYSTEM PROMPT"),)
        assert conversation.current_host is None
        
        conversation.request_action("https://a.example/", "")
        assert len(service.requests[1]["messages"]) == 2
