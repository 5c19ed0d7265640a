"""
FastAPI Application - REST API for drag-and-drop front ends.

Endpoints:
    GET    /api/v1/health                         Health check
    GET    /api/v1/templates                      List catalog templates
    POST   /api/v1/grids                          Open a grid session
    GET    /api/v1/grids                          List grid sessions
    GET    /api/v1/grids/{id}                     Get grid contents
    DELETE /api/v1/grids/{id}                     Close a grid
    POST   /api/v1/grids/{id}/place               Drop a template onto a slot
    POST   /api/v1/grids/{id}/move                Drop a card onto a slot
    POST   /api/v1/grids/{id}/toggle-expand       Expand or collapse a card
    POST   /api/v1/grids/{id}/remove              Drop a card on the trash zone
    POST   /api/v1/grids/{id}/reset               Clear the grid

Command semantics:
    Well-formed commands always return 200. A command that cannot apply
    (unknown card, negative slot, ...) comes back with applied=false and a
    reason; the grid is unchanged. Only a missing grid is an HTTP error.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Union

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, load_settings
from .service import APIService
from .schemas import (
    # Request models
    CreateGridRequest,
    PlaceRequest,
    MoveRequest,
    CardRequest,
    # Response models
    GridResponse,
    CommandResponse,
    TemplateListResponse,
    GridListResponse,
    EndGridResponse,
    HealthResponse,
    ErrorResponse,
    # Enums
    ErrorCode,
)


def create_app(service: APIService | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        settings: Optional settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    if service is None:
        settings = settings or load_settings()
        service = APIService(settings=settings)
    else:
        settings = service.settings

    app = FastAPI(
        title="Gridslot API",
        description="""
Two-column card grid with collision-free placement.

## Slots

Slot `n` sits in column `n % 2` of row `n // 2`. Width-2 cards always
start in the left column and span the whole row.

## No-op reasons

| Reason | Description |
|--------|-------------|
| `unknown_template` | Template is not in the catalog |
| `unknown_card` | Card id is not on the grid |
| `invalid_slot` | Slot is negative |
| `same_position` | Card dropped where it already is |
| `misaligned_double` | Expanded card dropped on a right-column slot |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(error=message, error_code=error_code).model_dump(mode="json"),
        )

    def respond(response, status_code: int = 404):
        """Pass models through; turn ErrorResponse into a JSON error."""
        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, status_code)
        return response

    # =========================================================================
    # Meta Endpoints
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Meta"])
    async def health() -> HealthResponse:
        return service.health()

    @app.get(
        "/api/v1/templates",
        response_model=TemplateListResponse,
        tags=["Catalog"],
        summary="List templates that can be dropped onto a grid",
    )
    async def list_templates() -> TemplateListResponse:
        return service.list_templates()

    # =========================================================================
    # Grid Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/grids",
        response_model=GridResponse,
        status_code=201,
        responses={400: {"model": ErrorResponse}},
        tags=["Grids"],
        summary="Open a new grid session",
    )
    async def create_grid(body: CreateGridRequest | None = None) -> Union[GridResponse, JSONResponse]:
        try:
            return service.create_grid(body or CreateGridRequest())
        except ValueError as e:
            return make_error_response(ErrorCode.INVALID_ID_STRATEGY, str(e))

    @app.get(
        "/api/v1/grids",
        response_model=GridListResponse,
        tags=["Grids"],
        summary="List open grids",
    )
    async def list_grids() -> GridListResponse:
        return service.list_grids()

    @app.get(
        "/api/v1/grids/{grid_id}",
        response_model=GridResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Grids"],
        summary="Get grid contents",
    )
    async def get_grid(grid_id: str) -> Union[GridResponse, JSONResponse]:
        return respond(service.get_grid(grid_id))

    @app.delete(
        "/api/v1/grids/{grid_id}",
        response_model=EndGridResponse,
        tags=["Grids"],
        summary="Close a grid and drop its cards",
    )
    async def end_grid(grid_id: str) -> EndGridResponse:
        return service.end_grid(grid_id)

    # =========================================================================
    # Command Endpoints
    # =========================================================================

    command_responses = {404: {"model": ErrorResponse, "description": "Grid not found"}}

    @app.post(
        "/api/v1/grids/{grid_id}/place",
        response_model=CommandResponse,
        responses=command_responses,
        tags=["Commands"],
        summary="Drop a catalog template onto a slot",
    )
    async def place(grid_id: str, body: PlaceRequest) -> Union[CommandResponse, JSONResponse]:
        """
        Create a card from a template.

        The card lands on `target_slot` if it is free, otherwise on the
        next free slot after it. Existing cards never move.
        """
        return respond(service.place(grid_id, body))

    @app.post(
        "/api/v1/grids/{grid_id}/move",
        response_model=CommandResponse,
        responses=command_responses,
        tags=["Commands"],
        summary="Drop an existing card onto a slot",
    )
    async def move(grid_id: str, body: MoveRequest) -> Union[CommandResponse, JSONResponse]:
        """
        Move a card, displacing whatever is in the way.

        Two expanded cards swap rows. Displaced cards are listed in
        `displaced`.
        """
        return respond(service.move(grid_id, body))

    @app.post(
        "/api/v1/grids/{grid_id}/toggle-expand",
        response_model=CommandResponse,
        responses=command_responses,
        tags=["Commands"],
        summary="Expand or collapse a card",
    )
    async def toggle_expand(grid_id: str, body: CardRequest) -> Union[CommandResponse, JSONResponse]:
        return respond(service.toggle_expand(grid_id, body))

    @app.post(
        "/api/v1/grids/{grid_id}/remove",
        response_model=CommandResponse,
        responses=command_responses,
        tags=["Commands"],
        summary="Remove a card from the grid",
    )
    async def remove(grid_id: str, body: CardRequest) -> Union[CommandResponse, JSONResponse]:
        return respond(service.remove(grid_id, body))

    @app.post(
        "/api/v1/grids/{grid_id}/reset",
        response_model=CommandResponse,
        responses=command_responses,
        tags=["Commands"],
        summary="Remove every card from the grid",
    )
    async def reset(grid_id: str) -> Union[CommandResponse, JSONResponse]:
        return respond(service.reset(grid_id))

    return app


# For running directly: uvicorn gridslot.api.app:app
app = create_app()
