"""
Settings for the Business Card Extractor API, read from the environment (and .env).
"""

import os
import logging
from typing import Optional
from dotenv import load_dotenv

from card_extractor.errors import ConfigurationError

load_dotenv()

logger = logging.getLogger(__name__)

ENV_PREFIX = "CARD_API_"


def _env(name: str, default: str) -> str:
    return os.getenv(ENV_PREFIX + name, default)


def _env_flag(name: str) -> bool:
    return _env(name, "False").lower() == "true"


def _first_env(*names: str) -> Optional[str]:
    """Return the first non-empty variable among names."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


class Config:
    """Base settings shared by every environment."""

    DEBUG: bool = _env_flag("DEBUG")
    TESTING: bool = _env_flag("TESTING")

    # A batch holds several photos, so the limit covers the whole request
    MAX_CONTENT_LENGTH: int = 32 * 1024 * 1024
    OUTPUT_FOLDER: str = _env("OUTPUT_FOLDER", "outputs")
    ALLOWED_EXTENSIONS: frozenset = frozenset({"png", "jpg", "jpeg", "gif", "bmp", "webp", "tif", "tiff"})

    GOOGLE_API_KEY: Optional[str] = _first_env("GOOGLE_API_KEY", "GEMINI_API_KEY", "API_KEY")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-pro")

    IMAGE_CONTRAST: float = float(_env("IMAGE_CONTRAST", "1.5"))
    IMAGE_BRIGHTNESS: float = float(_env("IMAGE_BRIGHTNESS", "1.1"))
    JPEG_QUALITY: int = int(_env("JPEG_QUALITY", "95"))
    PARALLEL_WORKERS: int = int(_env("PARALLEL_WORKERS", "4"))

    LOG_LEVEL: str = _env("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def validate(cls) -> None:
        """Reject settings the preprocessor or worker pool cannot use.

        Raises:
            ConfigurationError: On the first out-of-range value
        """
        if cls.IMAGE_CONTRAST < 0 or cls.IMAGE_BRIGHTNESS < 0:
            raise ConfigurationError(
                f"Image filter values must be non-negative, got contrast={cls.IMAGE_CONTRAST} "
                f"brightness={cls.IMAGE_BRIGHTNESS}"
            )
        if not 0 <= cls.JPEG_QUALITY <= 100:
            raise ConfigurationError(f"JPEG quality must be within 0-100, got {cls.JPEG_QUALITY}")
        if cls.PARALLEL_WORKERS < 1:
            raise ConfigurationError(f"At least one preprocessing worker is needed, got {cls.PARALLEL_WORKERS}")

    @classmethod
    def init_app(cls, app) -> None:
        """Validate, copy the settings onto the Flask app and prepare the output folder."""
        cls.validate()
        app.config.from_object(cls)

        os.makedirs(cls.OUTPUT_FOLDER, exist_ok=True)

        logging.basicConfig(
            level=getattr(logging, cls.LOG_LEVEL.upper()),
            format=cls.LOG_FORMAT
        )

        if not cls.GOOGLE_API_KEY:
            logger.warning("No Gemini API key provided. Set GOOGLE_API_KEY or GEMINI_API_KEY env var")
        logger.info(f"{cls.__name__} loaded, model {cls.GEMINI_MODEL}, {cls.PARALLEL_WORKERS} worker(s)")

    @classmethod
    def is_allowed_file(cls, filename: str) -> bool:
        _, dot, extension = filename.rpartition(".")
        return bool(dot) and extension.lower() in cls.ALLOWED_EXTENSIONS

    @classmethod
    def get_api_status(cls) -> dict:
        return {
            "gemini_api": cls.GOOGLE_API_KEY is not None
        }


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    DEBUG = False
    LOG_LEVEL = "INFO"


class TestingConfig(Config):
    TESTING = True
    DEBUG = True
    LOG_LEVEL = "DEBUG"


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(config_name: Optional[str] = None) -> type:
    """Look up a settings class by name, falling back to CARD_API_ENV and then development."""
    name = config_name or _env("ENV", "development")
    return config_by_name.get(name, DevelopmentConfig)
