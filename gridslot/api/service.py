"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine commands
2. Manages grid sessions
3. Formats engine state for the renderer

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

import structlog

from .. import __version__
from ..config import Settings, load_settings
from ..engine_core import Card, Command, CommandResult
from ..session import SessionManager, GridSession
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
)


logger = structlog.get_logger(__name__)


@dataclass
class APIService:
    """
    Main API service for grid front ends.

    Usage:
        service = APIService()

        grid = service.create_grid(CreateGridRequest())
        response = service.place(grid.grid_id, PlaceRequest(template_type="Card 1", target_slot=0))
        response.grid.cards  # what to render
    """
    settings: Settings = field(default_factory=load_settings)
    session_manager: SessionManager | None = None

    def __post_init__(self):
        if self.session_manager is None:
            self.session_manager = SessionManager(id_strategy=self.settings.id_strategy)

    # =========================================================================
    # Catalog
    # =========================================================================

    def list_templates(self) -> TemplateListResponse:
        templates = [
            TemplateInfo(template_type=t.template_type, title=t.title)
            for t in self.session_manager.catalog
        ]
        return TemplateListResponse(templates=templates, count=len(templates))

    # =========================================================================
    # Grid sessions
    # =========================================================================

    def create_grid(self, request: CreateGridRequest) -> GridResponse:
        """
        Open a new, empty grid.

        Raises:
            ValueError: if the id strategy is unknown
        """
        self.session_manager.cleanup_stale_sessions(self.settings.session_ttl_seconds)
        strategy = request.id_strategy.value if request.id_strategy else None
        session = self.session_manager.create_session(
            id_strategy=strategy,
            metadata=request.metadata,
        )
        return self._grid_response(session)

    def get_grid(self, grid_id: str) -> GridResponse | ErrorResponse:
        session = self.session_manager.get_session(grid_id)
        if session is None:
            return self._not_found(grid_id)
        return self._grid_response(session)

    def end_grid(self, grid_id: str) -> EndGridResponse:
        success = self.session_manager.end_session(grid_id, reason="user_closed")
        return EndGridResponse(success=success, grid_id=grid_id)

    def list_grids(self) -> GridListResponse:
        grids = self.session_manager.list_active_sessions()
        return GridListResponse(grids=grids, count=len(grids))

    def health(self) -> HealthResponse:
        return HealthResponse(
            version=__version__,
            env=self.settings.env,
            active_grids=len(self.session_manager.list_active_sessions()),
        )

    # =========================================================================
    # Commands
    # =========================================================================

    def place(self, grid_id: str, request: PlaceRequest) -> CommandResponse | ErrorResponse:
        return self._execute(grid_id, Command.place(request.template_type, request.target_slot))

    def move(self, grid_id: str, request: MoveRequest) -> CommandResponse | ErrorResponse:
        return self._execute(grid_id, Command.move(request.card_id, request.target_slot))

    def toggle_expand(self, grid_id: str, request: CardRequest) -> CommandResponse | ErrorResponse:
        return self._execute(grid_id, Command.toggle_expand(request.card_id))

    def remove(self, grid_id: str, request: CardRequest) -> CommandResponse | ErrorResponse:
        return self._execute(grid_id, Command.remove(request.card_id))

    def reset(self, grid_id: str) -> CommandResponse | ErrorResponse:
        return self._execute(grid_id, Command.reset())

    def _execute(self, grid_id: str, command: Command) -> CommandResponse | ErrorResponse:
        session = self.session_manager.get_session(grid_id)
        if session is None:
            return self._not_found(grid_id)

        result = session.execute(command)
        return self._command_response(session, command, result)

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _not_found(self, grid_id: str) -> ErrorResponse:
        logger.warning("grid_not_found", grid_id=grid_id)
        return ErrorResponse(
            error=f"Grid {grid_id} not found",
            error_code=ErrorCode.GRID_NOT_FOUND,
        )

    def _grid_response(self, session: GridSession) -> GridResponse:
        """Convert a session's state to GridResponse."""
        state = session.state
        return GridResponse(
            grid_id=session.session_id,
            revision=state.revision,
            card_count=len(state),
            row_count=state.row_count,
            cards=[_card_info(card) for card in state.cards],
        )

    def _command_response(
        self,
        session: GridSession,
        command: Command,
        result: CommandResult,
    ) -> CommandResponse:
        return CommandResponse(
            grid_id=session.session_id,
            command=command.command_type.value,
            applied=result.applied,
            reason=NoOpCode(result.reason.value) if result.reason else None,
            detail=result.detail,
            card_id=result.card_id,
            changes=result.changes,
            displaced=result.displaced,
            grid=self._grid_response(session),
        )


def _card_info(card: Card) -> CardInfo:
    return CardInfo(
        card_id=card.card_id,
        template_type=card.template_type,
        title=card.title,
        position=card.position,
        width=card.width,
        row=card.row,
        column=card.column,
    )
