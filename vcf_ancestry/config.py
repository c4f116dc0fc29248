"""
Configuration Module
Tunable parameters for the ancestry analyzers, loadable from TOML.
"""

import logging
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import ConfigError
from .regions import REGION_LABELS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Parameters shared by all analyzers.

    Attributes:
        low_signal_cutoff: Regions whose percentage candidate does not exceed
            this value are dropped before rescaling
        default_quality: QUAL substituted for missing or sentinel values
        locale: Locale of the region labels in the output
        y_confidence_denominator: Marker count giving full Y confidence
        mt_confidence_denominator: Marker count giving full mt confidence
        progress_interval: Parsed lines between progress log messages
        panel_path: Optional CSV marker panel replacing the packaged one
    """

    low_signal_cutoff: float = 0.5
    default_quality: float = 50.0
    locale: str = "ru"
    y_confidence_denominator: int = 10
    mt_confidence_denominator: int = 15
    progress_interval: int = 50000
    panel_path: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisConfig":
        """
        Build a config from a plain mapping, ignoring unknown keys.

        Args:
            data: Mapping of field names to values

        Returns:
            Validated AnalysisConfig
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")

        values = {k: v for k, v in data.items() if k in known}
        if values.get('panel_path') is not None:
            values['panel_path'] = Path(values['panel_path'])

        config = cls(**values)
        config.validate()
        return config

    def with_overrides(self, **overrides: Any) -> "AnalysisConfig":
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        config = replace(self, **changes)
        config.validate()
        return config

    def validate(self):
        """Raise ConfigError when any value is out of range."""
        if not isinstance(self.low_signal_cutoff, (int, float)) or not 0 <= self.low_signal_cutoff < 100:
            raise ConfigError(
                f"low_signal_cutoff must be in [0, 100), got {self.low_signal_cutoff!r}"
            )
        if not isinstance(self.default_quality, (int, float)) or self.default_quality < 0:
            raise ConfigError(
                f"default_quality must be a non-negative number, got {self.default_quality!r}"
            )
        if self.locale not in REGION_LABELS:
            raise ConfigError(
                f"locale must be one of {sorted(REGION_LABELS)}, got {self.locale!r}"
            )
        for name in ('y_confidence_denominator', 'mt_confidence_denominator', 'progress_interval'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")


def load_config(config_path: Path) -> AnalysisConfig:
    """
    Load configuration from the [analysis] table of a TOML file.

    Args:
        config_path: Path to the TOML configuration file

    Returns:
        AnalysisConfig with the loaded values

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ConfigError: If the file is not valid TOML or a value is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'rb') as f:
        try:
            toml_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    return AnalysisConfig.from_dict(toml_data.get('analysis', {}))
