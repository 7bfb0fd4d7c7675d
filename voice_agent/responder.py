"""
Rule-based chat replies.

A reply comes from the first rule whose keywords appear in the lower-cased
message. When nothing matches, the selector picks one of the generic
templates. Templates quote the message exactly as the user typed it.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

from voice_agent.context import TemplateSelector


@dataclass(frozen=True)
class ChatRule:
    name: str
    keywords: Tuple[str, ...]
    template: str

    def matches(self, lowered: str) -> bool:
        return any(keyword in lowered for keyword in self.keywords)

    def render(self, message: str) -> str:
        return self.template.format(message=message)


CHAT_RULES = (
    ChatRule(
        name="workflow",
        keywords=("n8n", "workflow"),
        template=(
            'I can help you with n8n workflows! You mentioned: "{message}". '
            "I can analyze workflow security, optimize efficiency, and suggest improvements. "
            "What specific aspect would you like to explore?"
        ),
    ),
    ChatRule(
        name="greeting",
        keywords=("hello", "hi"),
        template=(
            'Hello! I\'m your AI workflow advisor. You said: "{message}". '
            "I'm here to help you optimize your n8n workflows and improve automation processes!"
        ),
    ),
    ChatRule(
        name="help",
        keywords=("help",),
        template=(
            'I\'m here to help! You asked: "{message}". '
            "I can assist with workflow analysis, security audits, performance optimization, "
            "and n8n best practices."
        ),
    ),
)

# Fallback when no rule matches.
GENERIC_TEMPLATES = (
    'Interesting point about: "{message}". '
    "In workflow automation, this relates to optimizing data flow and reducing bottlenecks.",
    'Thank you for sharing: "{message}". '
    "Let me analyze this from a workflow efficiency perspective.",
    'You mentioned: "{message}". '
    "This is important for workflow design - would you like me to elaborate on optimization strategies?",
)


def reply_to(
    message: str,
    selector: TemplateSelector,
    rules: Sequence[ChatRule] = CHAT_RULES,
    fallback: Sequence[str] = GENERIC_TEMPLATES,
) -> str:
    lowered = message.lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.render(message)
    return selector.choose(fallback).format(message=message)
