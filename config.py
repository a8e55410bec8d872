"""
Central configuration for session options, AI timing and logging.
Pydantic models give type-safe settings that can come from the environment or a JSON file.
"""
from __future__ import annotations

import os
import logging
import sys
from typing import Dict, Any, Optional
from pydantic import BaseModel, Field, field_validator


VALID_MODES = ("hvh", "hva")
VALID_SIDES = ("black", "white")
VALID_DIFFICULTIES = ("easy", "normal", "hard")


class UISettings(BaseModel):
    """Console display settings."""

    use_color: bool = Field(default=True, description="Enable colored terminal output")
    use_unicode: bool = Field(default=True, description="Use Unicode characters for discs")
    show_indices: bool = Field(default=True, description="Show row and column labels")
    highlight_moves: bool = Field(default=True, description="Mark legal placements on the board")
    show_log_lines: int = Field(default=5, ge=0, le=50, description="Number of recent log entries to print")

    @field_validator('use_color', 'use_unicode', 'show_indices', 'highlight_moves', mode='before')
    @classmethod
    def validate_bool_fields(cls, v):
        return bool(v)


class AISettings(BaseModel):
    """Computer opponent timing."""

    think_delay: float = Field(default=0.6, ge=0.0, le=5.0, description="Seconds to wait before the AI acts")

    @field_validator('think_delay', mode='before')
    @classmethod
    def validate_float_fields(cls, v):
        return float(v)


class SessionSettings(BaseModel):
    """Per-game options: opponent mode, AI side and strength, tile layout seed."""

    mode: str = Field(default="hva", description="'hvh' (human vs human) or 'hva' (human vs AI)")
    ai_side: str = Field(default="white", description="Side controlled by the AI in 'hva' mode")
    difficulty: str = Field(default="normal", description="AI difficulty: easy, normal or hard")
    seed: Optional[int] = Field(default=None, description="Seed for the skill tile layout (None = random)")
    skills_enabled: bool = Field(default=True, description="Deal skill tiles at session start")

    @field_validator('mode', mode='before')
    @classmethod
    def validate_mode(cls, v):
        v_lower = str(v).lower()
        if v_lower not in VALID_MODES:
            raise ValueError(f"mode must be one of {VALID_MODES}")
        return v_lower

    @field_validator('ai_side', mode='before')
    @classmethod
    def validate_side(cls, v):
        v_lower = str(v).lower()
        if v_lower not in VALID_SIDES:
            raise ValueError(f"ai_side must be one of {VALID_SIDES}")
        return v_lower

    @field_validator('difficulty', mode='before')
    @classmethod
    def validate_difficulty(cls, v):
        v_lower = str(v).lower()
        if v_lower not in VALID_DIFFICULTIES:
            raise ValueError(f"difficulty must be one of {VALID_DIFFICULTIES}")
        return v_lower


class LoggingSettings(BaseModel):
    """Logging configuration."""

    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_to_file: bool = Field(default=False, description="Write logs to file")
    log_file_path: str = Field(default="othello.log", description="Log file path")

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
        v_upper = v.upper() if isinstance(v, str) else str(v).upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper


class OthelloConfig(BaseModel):
    """Main configuration model for the Skill Othello project."""

    ui: UISettings = Field(default_factory=UISettings)
    ai: AISettings = Field(default_factory=AISettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Metadata
    version: str = Field(default="1.0.0", description="Configuration version")
    config_file: Optional[str] = Field(default=None, description="Path to config file")

    def __init__(self, **data):
        super().__init__(**data)
        # Auto-detect terminal capabilities
        try:
            if not sys.stdout.isatty():
                self.ui.use_color = False
        except (AttributeError, OSError):
            self.ui.use_color = False

    @classmethod
    def from_env(cls) -> 'OthelloConfig':
        """Create configuration from environment variables."""
        seed = os.getenv('OTHELLO_SEED')
        return cls(
            ui=UISettings(
                use_color=os.getenv('OTHELLO_COLOR', 'true').lower() == 'true',
                use_unicode=os.getenv('OTHELLO_UNICODE', 'true').lower() == 'true',
                highlight_moves=os.getenv('OTHELLO_HIGHLIGHT', 'true').lower() == 'true',
            ),
            ai=AISettings(
                think_delay=float(os.getenv('OTHELLO_THINK_DELAY', '0.6')),
            ),
            session=SessionSettings(
                mode=os.getenv('OTHELLO_MODE', 'hva'),
                ai_side=os.getenv('OTHELLO_AI_SIDE', 'white'),
                difficulty=os.getenv('OTHELLO_DIFFICULTY', 'normal'),
                seed=int(seed) if seed else None,
                skills_enabled=os.getenv('OTHELLO_SKILLS', 'true').lower() == 'true',
            ),
            logging=LoggingSettings(
                log_level=os.getenv('OTHELLO_LOG_LEVEL', 'INFO'),
                log_to_file=os.getenv('OTHELLO_LOG_FILE', 'false').lower() == 'true',
            )
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'ui': self.ui.model_dump(),
            'ai': self.ai.model_dump(),
            'session': self.session.model_dump(),
            'logging': self.logging.model_dump(),
            'version': self.version,
            'config_file': self.config_file,
        }

    def save_to_file(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        import json
        config_dict = self.to_dict()
        config_dict['config_file'] = filepath

        with open(filepath, 'w') as f:
            json.dump(config_dict, f, indent=2)

    @classmethod
    def load_from_file(cls, filepath: str) -> 'OthelloConfig':
        """Load configuration from JSON file."""
        import json

        with open(filepath, 'r') as f:
            data = json.load(f)

        return cls(
            ui=UISettings(**data.get('ui', {})),
            ai=AISettings(**data.get('ai', {})),
            session=SessionSettings(**data.get('session', {})),
            logging=LoggingSettings(**data.get('logging', {})),
            version=data.get('version', '1.0.0'),
            config_file=filepath,
        )

    def update_from_dict(self, updates: Dict[str, Any]) -> None:
        """Update configuration from dictionary."""
        for section, settings in updates.items():
            if hasattr(self, section) and isinstance(settings, dict):
                section_model = getattr(self, section)
                merged = {**section_model.model_dump(), **settings}
                setattr(self, section, type(section_model)(**merged))


# Global configuration instance
_config: Optional[OthelloConfig] = None


def get_config() -> OthelloConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = OthelloConfig.from_env()
    return _config


def load_config_from_file(filepath: str) -> OthelloConfig:
    """Load configuration from file and update global instance."""
    global _config
    _config = OthelloConfig.load_from_file(filepath)
    return _config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _config
    _config = None


# Convenience functions for common configuration access
def get_ui_settings() -> UISettings:
    """Get UI configuration settings."""
    return get_config().ui


def get_ai_settings() -> AISettings:
    """Get AI timing settings."""
    return get_config().ai


def get_session_settings() -> SessionSettings:
    """Get session configuration settings."""
    return get_config().session


def get_logging_settings() -> LoggingSettings:
    """Get logging configuration settings."""
    return get_config().logging


def setup_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Configure root logging once, controlled by settings or OTHELLO_LOG_LEVEL."""
    if getattr(setup_logging, "_configured", False):
        return
    settings = settings or get_logging_settings()
    level: int = getattr(logging, settings.log_level, logging.INFO)
    handlers = [logging.StreamHandler()]
    if settings.log_to_file:
        handlers.append(logging.FileHandler(settings.log_file_path))
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
    )
    setup_logging._configured = True  # type: ignore[attr-defined]
