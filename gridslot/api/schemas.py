"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between the drag-and-drop front end
and the engine. Request models are the validation step that turns raw drag
payloads into commands; malformed payloads fail here with a 422.

Error Codes:
- GRID_NOT_FOUND: Grid session does not exist or has expired
- INVALID_ID_STRATEGY: Unknown card id strategy requested
- VALIDATION_ERROR: Request body could not be parsed
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    GRID_NOT_FOUND = "GRID_NOT_FOUND"
    INVALID_ID_STRATEGY = "INVALID_ID_STRATEGY"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class NoOpCode(str, Enum):
    """Why a command left the grid unchanged."""
    UNKNOWN_TEMPLATE = "unknown_template"
    UNKNOWN_CARD = "unknown_card"
    INVALID_SLOT = "invalid_slot"
    SAME_POSITION = "same_position"
    MISALIGNED_DOUBLE = "misaligned_double"
    INVARIANT_VIOLATION = "invariant_violation"


class IdStrategy(str, Enum):
    """Card id generation strategies."""
    SEQUENTIAL = "sequential"
    UUID = "uuid"


# =============================================================================
# Shared Models
# =============================================================================

class TemplateInfo(BaseModel):
    """A catalog template the user can drag onto the grid."""
    template_type: str
    title: str

    model_config = {"from_attributes": True}


class CardInfo(BaseModel):
    """A card as the renderer needs it."""
    card_id: str
    template_type: str
    title: str
    position: int = Field(ge=0, description="Slot index; column = position % 2, row = position // 2")
    width: int = Field(ge=1, le=2, description="1 = single column, 2 = spans both columns")
    row: int
    column: int

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class CreateGridRequest(BaseModel):
    """Request to open a new grid session."""
    id_strategy: Optional[IdStrategy] = Field(
        None, description="Card id strategy; server default when omitted"
    )
    metadata: dict[str, Any] = Field(default_factory=dict)


class PlaceRequest(BaseModel):
    """A catalog template dropped onto a slot."""
    template_type: str = Field(description="Catalog template identifier")
    target_slot: int = Field(description="Slot the template was dropped on")


class MoveRequest(BaseModel):
    """An existing card dropped onto a slot."""
    card_id: str
    target_slot: int


class CardRequest(BaseModel):
    """A command that targets a single card (expand/collapse, remove)."""
    card_id: str


# =============================================================================
# Response Models
# =============================================================================

class GridResponse(BaseModel):
    """Current contents of a grid."""
    grid_id: str
    revision: int = 0
    card_count: int = 0
    row_count: int = 0
    cards: list[CardInfo] = Field(default_factory=list)


class CommandResponse(BaseModel):
    """Outcome of a grid command."""
    grid_id: str
    command: str
    applied: bool
    reason: Optional[NoOpCode] = None
    detail: Optional[str] = None
    card_id: Optional[str] = None
    changes: list[str] = Field(default_factory=list)
    displaced: list[str] = Field(default_factory=list)
    grid: GridResponse


class TemplateListResponse(BaseModel):
    """Catalog listing."""
    templates: list[TemplateInfo] = Field(default_factory=list)
    count: int = 0


class GridListResponse(BaseModel):
    """Active grid sessions."""
    grids: list[str] = Field(default_factory=list)
    count: int = 0


class EndGridResponse(BaseModel):
    """Result of closing a grid."""
    success: bool
    grid_id: str


class HealthResponse(BaseModel):
    """Health check."""
    status: str = "ok"
    version: str
    env: str
    active_grids: int = 0


class ErrorResponse(BaseModel):
    """Standardized error body."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None
