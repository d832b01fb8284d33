"""Configuration management for the font viewer."""

from pathlib import Path

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import (
    ConfigFileNotFoundError,
    ConfigLoadError,
    ConfigurationError,
    EmptyConfigFileError,
    InvalidYamlError,
)
from .models import RenderParams, parse_color


class AppConfig(BaseSettings):
    """Defaults for the fv command, overridable from FV_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FV_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    size: int = Field(48, gt=0, description="Font size in points")
    dpi: int = Field(100, gt=0, description="Raster resolution")
    margin: int = Field(5, ge=0, description="Margin in millimetres")
    fg: str = Field("black", description="Foreground color")
    bg: str = Field("white", description="Background color")
    style: str = Field("regular", description="Font style")
    variant: str = Field("normal", description="Font variant")
    text: str = Field("", description="Template source override")
    font_dirs: list[Path] | None = Field(None, description="Font directories to scan")

    @field_validator("fg", "bg")
    @classmethod
    def validate_color(cls, v):
        parse_color(v)
        return v

    def render_params(self, **overrides) -> RenderParams:
        """Build RenderParams from this config, with explicit overrides applied."""
        values = {
            "size": self.size,
            "dpi": self.dpi,
            "margin": self.margin,
            "fg": self.fg,
            "bg": self.bg,
            "style": self.style,
            "variant": self.variant,
            "text": self.text,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return RenderParams(**values)

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "AppConfig":
        """Load configuration from YAML file."""
        return load_config_from_yaml(config_path, cls)


def load_config_from_yaml(config_path: str | Path, config_class: type) -> BaseSettings:
    """Load configuration from YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigFileNotFoundError(str(config_path))

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            raise EmptyConfigFileError(str(config_path))

        # Create a temporary config class that doesn't load from .env
        class TempConfig(config_class):
            model_config = SettingsConfigDict(
                env_file=None,
                case_sensitive=False,
                extra="ignore",
            )

        return TempConfig(**config_data)

    except ConfigurationError:
        raise
    except yaml.YAMLError as e:
        raise InvalidYamlError(str(config_path), str(e)) from e
    except (OSError, TypeError, ValidationError) as e:
        raise ConfigLoadError(str(e)) from e
