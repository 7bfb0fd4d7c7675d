from fastapi import Request

from voice_agent.context import AppContext


def get_context(request: Request) -> AppContext:
    return request.app.state.context
