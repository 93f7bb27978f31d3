"""
Commercial parameters loader

Reads the tariff constants (volumetric divisors, sea W/M ratio, LCL floor,
road density, margin threshold) from a JSON file, validates them and hands
the engine an immutable CommercialParameters object.
"""

import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional, Tuple

from django.conf import settings

from ..dataclasses import CommercialParameters

logger = logging.getLogger(__name__)


class CommercialParametersError(Exception):
    """Base exception for commercial parameter problems"""
    pass


class ConfigurationError(CommercialParametersError):
    """Raised when the configuration file cannot be read or parsed"""
    pass


class ParametersValidationError(CommercialParametersError):
    """Raised when the configuration content fails validation"""
    pass


# (section, key, dataclass field, allow zero)
PARAMETER_FIELDS: List[Tuple[str, str, str, bool]] = [
    ("air", "volumetric_divisor", "air_volumetric_divisor", False),
    ("courier", "volumetric_divisor", "courier_volumetric_divisor", False),
    ("sea", "wm_ratio_kg_per_cbm", "sea_wm_ratio_kg_per_cbm", False),
    ("sea", "lcl_min_cbm", "sea_lcl_min_cbm", True),
    ("road", "density_kg_per_cbm", "road_density_kg_per_cbm", False),
    ("quotes", "default_margin_percent", "default_margin_percent", True),
]


def default_config_path() -> Path:
    return Path(__file__).parent.parent / "config" / "commercial_parameters.json"


def load_commercial_parameters(config_path: str = None) -> dict:
    """
    Load commercial parameters from a JSON configuration file

    Args:
        config_path: Path to the JSON file. If None, uses the bundled default.

    Returns:
        dict: Parsed configuration

    Raises:
        ConfigurationError: If file cannot be loaded or parsed
    """
    if config_path is None:
        config_path = default_config_path()

    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigurationError(f"Commercial parameters file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in commercial parameters file: {e}")
    except OSError as e:
        raise ConfigurationError(f"Error loading commercial parameters: {e}")

    logger.info(f"Loaded commercial parameters from {config_path}")
    return raw


def _as_decimal(value) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        out = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return out if out.is_finite() else None


def validate_commercial_parameters(raw: dict) -> List[str]:
    """
    Check a parsed configuration for missing sections and bad values

    Args:
        raw: Parsed configuration dictionary

    Returns:
        List[str]: Every problem found (empty if valid)
    """
    errors = []
    if not isinstance(raw, dict):
        return ["Commercial parameters must be a JSON object"]

    for section, key, _, allow_zero in PARAMETER_FIELDS:
        block = raw.get(section)
        if not isinstance(block, dict):
            if f"Missing section: {section}" not in errors:
                errors.append(f"Missing section: {section}")
            continue
        if key not in block:
            errors.append(f"Missing parameter: {section}.{key}")
            continue
        value = _as_decimal(block[key])
        if value is None:
            errors.append(f"Parameter {section}.{key} must be a number")
        elif value < 0 or (value == 0 and not allow_zero):
            bound = "non-negative" if allow_zero else "positive"
            errors.append(f"Parameter {section}.{key} must be {bound}")

    if errors:
        logger.warning(f"Commercial parameters validation found {len(errors)} errors")
    return errors


def build_commercial_parameters(raw: dict) -> CommercialParameters:
    """
    Turn a validated configuration into CommercialParameters

    Raises:
        ParametersValidationError: If the configuration is invalid
    """
    errors = validate_commercial_parameters(raw)
    if errors:
        raise ParametersValidationError(f"Commercial parameters validation failed: {errors}")

    values = {field: _as_decimal(raw[section][key]) for section, key, field, _ in PARAMETER_FIELDS}
    return CommercialParameters(**values)


def _configured_path() -> Optional[str]:
    if not settings.configured:
        return None
    return getattr(settings, "COMMERCIAL_PARAMETERS_PATH", None)


def get_commercial_parameters() -> CommercialParameters:
    """Get a cached CommercialParameters instance, loading it on first use"""
    if not hasattr(get_commercial_parameters, '_cached'):
        raw = load_commercial_parameters(_configured_path())
        get_commercial_parameters._cached = build_commercial_parameters(raw)
    return get_commercial_parameters._cached


def clear_commercial_parameters_cache():
    """Clear the cached parameters (useful for testing or config updates)"""
    if hasattr(get_commercial_parameters, '_cached'):
        delattr(get_commercial_parameters, '_cached')
