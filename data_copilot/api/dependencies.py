"""Route Dependencies — resolve the objects the lifespan composed onto app.state.

Invariants:
    - Routes never construct services: the lifespan (main.py) is the only composer
    - A missing component means startup did not complete: 503, not 500
"""

from fastapi import Request

from data_copilot.core.errors import LifecycleError
from data_copilot.services.chat_client import ChatClient
from data_copilot.services.chat_service import ChatService
from data_copilot.services.schema_catalog import SchemaCatalog


def _component(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise LifecycleError(f"Application component '{name}' is not initialized")
    return component


def get_chat_service(request: Request) -> ChatService:
    return _component(request, "chat_service")


def get_chat_client(request: Request) -> ChatClient:
    return _component(request, "chat_client")


def get_catalog(request: Request) -> SchemaCatalog:
    return _component(request, "catalog")
