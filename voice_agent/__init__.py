"""Voice Agent Brain Server: rule-based chat, voice stub and mock auth endpoints."""

__version__ = "1.0.0"
