"""
Typed Settings Schema (Pydantic)
================================

Provides typed, validated configuration for the genetic search engine.

Usage:
    from config.settings_schema import load_validated_settings

    settings = load_validated_settings()
    size = settings.search.generation_size
    sigma = settings.model.refine_sigma
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from config.settings_loader import get_config_path, load_settings
from core.exceptions import SettingsValidationError

logger = logging.getLogger(__name__)


# ============================================================================
# Schema Definitions
# ============================================================================

class SearchConfig(BaseModel):
    """Generation composition and execution settings."""
    generation_size: int = Field(default=20, ge=0, description="Offspring evaluated per generation")
    refine_count: int = Field(default=10, ge=0, description="Offspring produced by the refiner")
    max_workers: int = Field(default=1, ge=1, le=256, description="Evaluation thread pool size")
    seed: Optional[int] = Field(default=None, ge=0, description="Root seed, None for OS entropy")

    @model_validator(mode="after")
    def check_refine_within_generation(self) -> "SearchConfig":
        if self.refine_count > self.generation_size:
            raise ValueError(
                f"refine_count ({self.refine_count}) cannot exceed "
                f"generation_size ({self.generation_size})"
            )
        return self


class ModelConfig(BaseModel):
    """Reference linear model settings."""
    init_scale: float = Field(default=1.0, gt=0, description="Uniform range for random weights")
    refine_sigma: float = Field(default=0.1, gt=0, description="Std-dev of refinement steps")


class Settings(BaseModel):
    """Complete settings schema."""
    model_config = ConfigDict(extra="allow", protected_namespaces=())

    search: SearchConfig = Field(default_factory=SearchConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)


# ============================================================================
# Validation Functions
# ============================================================================

def validate_settings(raw: Dict[str, Any]) -> Settings:
    """
    Validate a raw settings mapping.

    Raises:
        SettingsValidationError: If the mapping does not satisfy the schema
    """
    try:
        return Settings(**raw)
    except ValidationError as e:
        logger.error(f"Settings validation failed: {e}")
        raise SettingsValidationError(
            "Settings validation failed",
            context={"errors": [err["msg"] for err in e.errors()]},
            cause=e,
        ) from e


def load_validated_settings(force_reload: bool = False) -> Settings:
    """
    Load and validate settings from base.yaml.

    Returns:
        Validated Settings object

    Raises:
        SettingsValidationError: If settings are invalid
    """
    raw = load_settings(force_reload=force_reload)
    if not raw:
        logger.warning(f"Config file empty or not found: {get_config_path()}")
    return validate_settings(raw)
