"""
Tests for application settings.
"""

from unittest.mock import patch

import pytest
from flask import Flask

from card_extractor.errors import ConfigurationError
from config import Config, DevelopmentConfig, TestingConfig, get_config


class TestConfig:
    """Test cases for Config."""

    def test_defaults_are_valid(self):
        Config.validate()

    def test_out_of_range_values_rejected(self):
        """Test settings the preprocessor cannot use fail at startup."""
        test_cases = [
            ("IMAGE_CONTRAST", -0.5),
            ("IMAGE_BRIGHTNESS", -1.0),
            ("JPEG_QUALITY", 101),
            ("JPEG_QUALITY", -1),
            ("PARALLEL_WORKERS", 0),
        ]

        for attr, value in test_cases:
            with patch.object(Config, attr, value):
                with pytest.raises(ConfigurationError):
                    Config.validate()

    def test_invalid_settings_stop_app_creation(self, tmp_path):
        from app import create_app

        with patch.object(Config, "OUTPUT_FOLDER", str(tmp_path)), patch.object(Config, "PARALLEL_WORKERS", 0):
            with pytest.raises(ConfigurationError):
                create_app("testing")

    def test_is_allowed_file(self):
        assert Config.is_allowed_file("card.JPG")
        assert Config.is_allowed_file("scan.back.tiff")
        assert not Config.is_allowed_file("notes.txt")
        assert not Config.is_allowed_file("png")
        assert not Config.is_allowed_file("")

    def test_get_config(self):
        assert get_config("testing") is TestingConfig
        assert get_config("unknown") is DevelopmentConfig

    def test_get_config_from_env(self, monkeypatch):
        monkeypatch.setenv("CARD_API_ENV", "testing")

        assert get_config() is TestingConfig

    def test_module_level_app(self):
        """Test a WSGI server can load the app straight from the module."""
        import app as app_module

        assert isinstance(app_module.app, Flask)
        assert "api" in app_module.app.blueprints
