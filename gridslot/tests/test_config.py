"""
Tests for settings loading and card id generation.
"""

import pytest

from ..config import Settings, load_settings
from ..engine_core.ids import SequentialIdGenerator, UuidIdGenerator, make_id_generator


class TestLoadSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = load_settings({})
        assert settings == Settings()
        assert settings.allowed_origins == ["*"]
        assert settings.id_strategy == "sequential"

    def test_reads_environment(self):
        settings = load_settings({
            "GRIDSLOT_ENV": "production",
            "ALLOWED_ORIGINS": "https://a.example, https://b.example",
            "GRIDSLOT_ID_STRATEGY": "uuid",
            "GRIDSLOT_LOG_JSON": "true",
            "GRIDSLOT_VERBOSE": "0",
            "GRIDSLOT_SESSION_TTL": "60",
        })

        assert settings.env == "production"
        assert settings.allowed_origins == ["https://a.example", "https://b.example"]
        assert settings.id_strategy == "uuid"
        assert settings.log_json is True
        assert settings.verbose is False
        assert settings.session_ttl_seconds == 60

    def test_blank_origins_fall_back_to_wildcard(self):
        assert load_settings({"ALLOWED_ORIGINS": " , "}).allowed_origins == ["*"]


class TestIdGenerators:
    """Tests for id generation strategies."""

    def test_sequential_ids(self):
        gen = SequentialIdGenerator()
        assert [gen(), gen(), gen()] == ["card-1", "card-2", "card-3"]

    def test_sequential_prefix_and_start(self):
        gen = SequentialIdGenerator(prefix="tile", start=10)
        assert gen() == "tile-10"

    def test_generators_are_independent(self):
        first, second = SequentialIdGenerator(), SequentialIdGenerator()
        first()
        assert second() == "card-1"

    def test_uuid_ids_are_unique_hex(self):
        gen = UuidIdGenerator()
        ids = {gen() for _ in range(100)}
        assert len(ids) == 100
        assert all(len(i) == 32 and int(i, 16) >= 0 for i in ids)

    def test_make_id_generator(self):
        assert isinstance(make_id_generator("sequential"), SequentialIdGenerator)
        assert isinstance(make_id_generator("uuid"), UuidIdGenerator)

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            make_id_generator("random")


class TestInvalidSettings:
    """Bad environment values fail with the variable's name."""

    def test_non_integer_session_ttl(self):
        with pytest.raises(ValueError, match="GRIDSLOT_SESSION_TTL"):
            load_settings({"GRIDSLOT_SESSION_TTL": "1h"})

    def test_blank_session_ttl_uses_default(self):
        assert load_settings({"GRIDSLOT_SESSION_TTL": " "}).session_ttl_seconds == 3600

    def test_unknown_id_strategy(self):
        with pytest.raises(ValueError, match="GRIDSLOT_ID_STRATEGY"):
            load_settings({"GRIDSLOT_ID_STRATEGY": "ulid"})
