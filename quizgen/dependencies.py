from fastapi import Request

from quizgen.services.orchestrator import Orchestrator


def get_orchestrator(request: Request) -> Orchestrator:
    """Orchestrator built in the app lifespan."""
    return request.app.state.orchestrator
