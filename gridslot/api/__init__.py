"""
API Module - HTTP interface for drag-and-drop front ends.

Exposes the engine via REST API. The front end:
1. Lists catalog templates for its sidebar
2. Opens a grid session
3. Sends place/move/toggle-expand/remove commands from drag and click events
4. Renders the card list returned with every command

All state is session-scoped. Nothing is persisted.
"""

from .schemas import (
    # Requests
    CreateGridRequest,
    PlaceRequest,
    MoveRequest,
    CardRequest,
    # Responses
    GridResponse,
    CommandResponse,
    TemplateListResponse,
    GridListResponse,
    EndGridResponse,
    HealthResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    TemplateInfo,
    # Enums
    ErrorCode,
    NoOpCode,
    IdStrategy,
)
from .service import APIService

__all__ = [
    # Requests
    "CreateGridRequest",
    "PlaceRequest",
    "MoveRequest",
    "CardRequest",
    # Responses
    "GridResponse",
    "CommandResponse",
    "TemplateListResponse",
    "GridListResponse",
    "EndGridResponse",
    "HealthResponse",
    "ErrorResponse",
    # Shared
    "CardInfo",
    "TemplateInfo",
    # Enums
    "ErrorCode",
    "NoOpCode",
    "IdStrategy",
    # Service
    "APIService",
]
