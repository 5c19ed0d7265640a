"""
Tests for API Pydantic schemas.

Validates that:
- Request models reject malformed drag payloads
- Response models serialize the fields the renderer needs
- Error codes are properly structured
"""

import pytest
from pydantic import ValidationError


class TestRequestSchemas:
    """Tests for request validation."""

    def test_place_request(self):
        from gridslot.api.schemas import PlaceRequest

        request = PlaceRequest(template_type="Card 1", target_slot=3)
        assert request.target_slot == 3

    def test_place_request_requires_slot(self):
        from gridslot.api.schemas import PlaceRequest

        with pytest.raises(ValidationError):
            PlaceRequest(template_type="Card 1")

    def test_move_request_rejects_text_slot(self):
        from gridslot.api.schemas import MoveRequest

        with pytest.raises(ValidationError):
            MoveRequest(card_id="card-1", target_slot="top-left")

    def test_negative_slot_passes_validation(self):
        """Negative slots reach the engine, which treats them as a no-op."""
        from gridslot.api.schemas import MoveRequest

        assert MoveRequest(card_id="card-1", target_slot=-1).target_slot == -1

    def test_create_grid_request_strategy(self):
        from gridslot.api.schemas import CreateGridRequest, IdStrategy

        assert CreateGridRequest().id_strategy is None
        assert CreateGridRequest(id_strategy="uuid").id_strategy == IdStrategy.UUID
        with pytest.raises(ValidationError):
            CreateGridRequest(id_strategy="random")


class TestResponseSchemas:
    """Tests for response serialization."""

    def test_card_info_schema(self):
        from gridslot.api.schemas import CardInfo

        card = CardInfo(
            card_id="card-1",
            template_type="Card 1",
            title="Card 1",
            position=4,
            width=2,
            row=2,
            column=0,
        )
        data = card.model_dump()
        assert data["position"] == 4
        assert data["width"] == 2

    def test_card_info_rejects_bad_width(self):
        from gridslot.api.schemas import CardInfo

        with pytest.raises(ValidationError):
            CardInfo(
                card_id="card-1",
                template_type="Card 1",
                title="Card 1",
                position=0,
                width=3,
                row=0,
                column=0,
            )

    def test_command_response_schema(self):
        from gridslot.api.schemas import CommandResponse, GridResponse, NoOpCode

        response = CommandResponse(
            grid_id="grid-1",
            command="move",
            applied=False,
            reason=NoOpCode.MISALIGNED_DOUBLE,
            grid=GridResponse(grid_id="grid-1"),
        )

        data = response.model_dump(mode="json")
        assert data["reason"] == "misaligned_double"
        assert data["changes"] == []
        assert data["grid"]["cards"] == []

    def test_error_response_schema(self):
        from gridslot.api.schemas import ErrorResponse, ErrorCode

        error = ErrorResponse(error="Grid g not found", error_code=ErrorCode.GRID_NOT_FOUND)
        data = error.model_dump()
        assert data["error_code"] == "GRID_NOT_FOUND"
        assert data["details"] is None

    def test_engine_reasons_have_api_codes(self):
        """Every engine no-op reason maps onto an API code."""
        from gridslot.api.schemas import NoOpCode
        from gridslot.engine_core import NoOpReason

        for reason in NoOpReason:
            assert NoOpCode(reason.value).value == reason.value
