"""User-configurable settings loaded from a YAML config file."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import ClassVar, Final

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from layerfit.host.document import AnchorPosition, ResampleMethod
from layerfit.host.units import RulerUnits
from layerfit.inputs import RawDimension, RawFlag, ResizeDefaults

# Load environment variables from .env file(s)
load_dotenv()

logger: Final = logging.getLogger(__name__)


def _interpolate_env(content: str) -> str:
    return re.sub(r"\$\{(\w+)\}", lambda m: os.getenv(m.group(1), ""), content)


class UserSettings(BaseModel):
    """Defaults for the resize workflow. Every field is optional in the
    config file; a missing file means all defaults.
    """

    # Default search paths for configuration
    DEFAULT_CONFIG_PATHS: ClassVar[list[Path]] = [
        Path("layerfit.yaml"),
        Path("~/.config/layerfit/config.yaml").expanduser(),
        Path("/etc/layerfit/config.yaml"),
    ]

    # Input
    prompt_user: bool = Field(False, description="Prompt for width, height and constrain")
    default_width: int | None = Field(80, gt=0, description="Target width in pixels (null to disable)")
    default_height: int | None = Field(
        80, gt=0, description="Target height in pixels (null to disable)"
    )
    default_constrain: bool = Field(True, description="Keep the aspect ratio")

    # Resize behaviour
    anchor: AnchorPosition = Field(
        AnchorPosition.MIDDLECENTER, description="Point of the layer that stays in place"
    )
    resample: ResampleMethod = Field(ResampleMethod.BICUBIC, description="Resampling filter")

    # Editor
    ruler_units: RulerUnits = Field(
        RulerUnits.INCHES, description="Ruler units the editor starts with"
    )

    def resize_defaults(
        self,
        width: RawDimension = None,
        height: RawDimension = None,
        constrain: RawFlag | None = None,
        prompt_user: bool | None = None,
    ) -> ResizeDefaults:
        """Defaults for a resize, with explicit values taking precedence.

        Args:
            width: Width override (None keeps the configured default)
            height: Height override (None keeps the configured default)
            constrain: Constrain override (None keeps the configured default)
            prompt_user: Prompt override (None keeps the configured default)

        Returns:
            ResizeDefaults for ``collect_request``
        """
        return ResizeDefaults(
            width=self.default_width if width is None else width,
            height=self.default_height if height is None else height,
            constrain=self.default_constrain if constrain is None else constrain,
            prompt_user=self.prompt_user if prompt_user is None else prompt_user,
        )

    @classmethod
    def load(cls, path: Path | None = None) -> UserSettings:
        """Load configuration from a YAML file.

        Args:
            path: Path to config file (optional, searches default locations if None)

        Returns:
            Validated UserSettings object (all defaults if no file is found)

        Raises:
            FileNotFoundError: If an explicitly named config file is missing
            RuntimeError: If the config file cannot be parsed or is invalid
        """
        if path is None:
            # Check environment variable first
            env_path = os.environ.get("LAYERFIT_CONFIG")
            if env_path:
                path = Path(env_path)
                if not path.exists():
                    raise FileNotFoundError(f"Config file from LAYERFIT_CONFIG not found: {path}")
            else:
                path = next((p for p in cls.DEFAULT_CONFIG_PATHS if p.exists()), None)
                if path is None:
                    logger.debug("No configuration file found, using defaults")
                    return cls()
        elif not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            raw = _interpolate_env(path.read_text())
            data = yaml.safe_load(raw)
        except (OSError, yaml.YAMLError) as exc:
            raise RuntimeError(f"Unable to read config YAML: {exc}") from exc

        try:
            return cls.model_validate(data or {})
        except ValidationError as err:
            raise RuntimeError(f"Invalid configuration:\n{err}") from err
