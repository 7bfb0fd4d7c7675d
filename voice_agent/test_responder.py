"""Tests for the chat rules, independent of HTTP."""

import pytest

from voice_agent.context import FixedSelector
from voice_agent.responder import CHAT_RULES, GENERIC_TEMPLATES, ChatRule, reply_to


class RecordingSelector:
    def __init__(self):
        self.calls = []

    def choose(self, candidates):
        self.calls.append(tuple(candidates))
        return candidates[-1]


@pytest.mark.parametrize(
    "message, rule_name",
    [
        ("Tell me about n8n", "workflow"),
        ("my workflow is slow", "workflow"),
        ("Hello there", "greeting"),
        ("hi", "greeting"),
        ("I need help", "help"),
    ],
)
def test_first_matching_rule(message, rule_name):
    rule = next(r for r in CHAT_RULES if r.name == rule_name)
    assert reply_to(message, FixedSelector()) == rule.render(message)


def test_rule_order_is_priority():
    """'hello, help with my workflow' hits every rule; the workflow rule wins."""
    reply = reply_to("hello, help with my workflow", FixedSelector())
    assert reply.startswith("I can help you with n8n workflows!")


def test_greeting_beats_help():
    reply = reply_to("hi, help please", FixedSelector())
    assert reply.startswith("Hello! I'm your AI workflow advisor.")


def test_hi_matches_as_substring():
    reply = reply_to("This thing", FixedSelector())
    assert "AI workflow advisor" in reply


def test_rules_never_consult_selector():
    selector = RecordingSelector()
    reply_to("help", selector)
    assert selector.calls == []


def test_fallback_consults_selector_with_all_templates():
    selector = RecordingSelector()
    reply = reply_to("random unrelated text", selector)
    assert selector.calls == [GENERIC_TEMPLATES]
    assert reply == GENERIC_TEMPLATES[-1].format(message="random unrelated text")


@pytest.mark.parametrize("index", range(len(GENERIC_TEMPLATES)))
def test_fixed_selector_picks_each_template(index):
    reply = reply_to("random unrelated text", FixedSelector(index))
    assert reply == GENERIC_TEMPLATES[index].format(message="random unrelated text")
    assert '"random unrelated text"' in reply


def test_braces_in_message_are_echoed_verbatim():
    reply = reply_to("use {{ $json.body }} in n8n", FixedSelector())
    assert '"use {{ $json.body }} in n8n"' in reply


def test_custom_rule_list():
    rules = [ChatRule(name="pricing", keywords=("price", "cost"), template="Pricing: {message}")]
    assert reply_to("What does it COST?", FixedSelector(), rules=rules) == "Pricing: What does it COST?"
    assert reply_to("hello", FixedSelector(), rules=rules, fallback=["Fallback: {message}"]) == "Fallback: hello"
