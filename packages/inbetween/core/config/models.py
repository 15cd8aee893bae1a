"""Configuration models for Inbetween."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field


class ConfigBase(BaseModel):
    """Base class for Inbetween configurations.

    Provides loading from files with defaults. Subclasses override
    ``default_path()`` to name their default location.
    """

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    @classmethod
    def default_path(cls) -> Path:
        """Return the default config file path for this config type."""
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Load config from ``path``, or from the default path when it exists.

        Args:
            path: Path to config file, or None to use the default

        Returns:
            Loaded config instance (all defaults when no file is found at the
            default path)

        Raises:
            FileNotFoundError: If an explicit path does not exist
            ValidationError: If config is invalid
        """
        from inbetween.core.config.loader import load_config

        if path is None:
            path = cls.default_path()
            if not Path(path).exists():
                return cls()
        raw = load_config(path)
        return cls.model_validate(raw)


class InterpolationConfig(BaseModel):
    """Tuning for curve construction.

    Padding counts shape interpolated lines near the loop seam but are not
    needed for correctness; any consistent convention gives a valid curve.
    """

    model_config = ConfigDict(frozen=True)

    max_blend_gap: int = Field(
        default=1,
        ge=1,
        description=(
            "Largest number of intervening keyframes across which two adjacent keys "
            "are blended; wider gaps hold the earlier key"
        ),
    )
    wrap_padding: int = Field(
        default=2, ge=1, le=4, description="Keys duplicated per end when a run wraps the loop"
    )
    run_padding: int = Field(
        default=2,
        ge=1,
        le=4,
        description="Upper bound on keys duplicated per end when a run straddles the array seam",
    )
    decross: bool = Field(default=True, description="Orient each key line like its predecessor")
    resample: bool = Field(
        default=True, description="Subdivide key lines to a shared point count before fitting"
    )
    equality_tolerance: float = Field(
        default=0.0,
        ge=0.0,
        description="Absolute tolerance when deciding a sample is unchanged (0 = exact)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False
    filename: str | None = None


class AppConfig(ConfigBase):
    """Application-level configuration."""

    interpolation: InterpolationConfig = Field(default_factory=InterpolationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def default_path(cls) -> Path:
        return Path("inbetween.yaml")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        from inbetween.core.config.loader import load_app_config

        return load_app_config(path)  # type: ignore[return-value]
