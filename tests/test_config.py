"""Tests for movement settings and logging setup."""

import logging

import pytest
from pydantic import ValidationError

from src.core.config import CurveMethod, MovementSettings
from src.core.logging_config import configure_logging


class TestMovementSettings:
    """Tests for MovementSettings class."""

    def test_defaults(self):
        settings = MovementSettings()
        assert settings.max_movement_per_turn == 5.0
        assert settings.interpolation_layers == 2
        assert settings.curve_method is CurveMethod.CATMULL_ROM
        assert settings.end_turn_budget_ratio == pytest.approx(0.95)

    def test_environment_override(self, monkeypatch):
        """HEXMOVE_* variables override defaults."""
        monkeypatch.setenv("HEXMOVE_MAX_MOVEMENT_PER_TURN", "7.5")
        monkeypatch.setenv("HEXMOVE_CURVE_METHOD", "chaikin")
        settings = MovementSettings()
        assert settings.max_movement_per_turn == 7.5
        assert settings.curve_method is CurveMethod.CHAIKIN

    def test_interpolation_layers_bounds(self):
        with pytest.raises(ValidationError):
            MovementSettings(interpolation_layers=0)
        with pytest.raises(ValidationError):
            MovementSettings(interpolation_layers=4)

    def test_budget_must_be_positive(self):
        with pytest.raises(ValidationError):
            MovementSettings(max_movement_per_turn=0)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_adds_handler_once(self, monkeypatch):
        root = logging.getLogger()
        monkeypatch.setattr(root, "handlers", [])
        monkeypatch.setattr(root, "level", root.level)

        configure_logging(logging.DEBUG)
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

        configure_logging(logging.WARNING)
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
