"""
Central vital type registry - single source of truth for chartable vitals.

This module provides:
- The VitalType enum used throughout the analytics engine
- YAML-based configuration loading and validation (vitals.yaml)
- VitalDefinition dataclass with display metadata per vital type
- Name resolution with aliases ("bp", "heart_rate", "spo2", ...)
- Insight category colour tags

YAML access is encapsulated here - no other module should read vitals.yaml directly.

Usage:
    from core.vital_registry import VitalType, get_vital, resolve_vital_type

    vital_type = resolve_vital_type("blood-pressure")   # VitalType.BLOOD_PRESSURE
    definition = get_vital(vital_type)
    definition.chart_title                               # "Blood Pressure Trend"
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import yaml

from core.exceptions import UnknownVitalTypeError

logger = logging.getLogger(__name__)


class VitalType(str, Enum):
    """Vital types that can be charted and summarized."""

    BLOOD_PRESSURE = "bloodPressure"
    HEART_RATE = "heartRate"
    SPO2 = "spO2"
    TEMPERATURE = "temperature"


# =============================================================================
# VITAL DEFINITION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class VitalDefinition:
    """
    Immutable display definition for a vital type.

    Attributes:
        vital_type: The VitalType this definition describes
        display_name: Human-readable name
        unit: Measurement unit ("mmHg", "BPM", "%", "°F")
        colors: One hex colour per chart dataset
        legend: One dataset name per chart dataset
        chart_title: Chart heading
        chart_subtitle: Chart sub-heading
        aliases: Alternative names that resolve to this vital
    """
    vital_type: VitalType
    display_name: str
    unit: str
    colors: Tuple[str, ...]
    legend: Tuple[str, ...]
    chart_title: str
    chart_subtitle: str
    aliases: Tuple[str, ...]

    @property
    def is_dual_series(self) -> bool:
        return len(self.legend) > 1


# =============================================================================
# YAML CONFIGURATION LOADING & VALIDATION
# =============================================================================

_HEX_COLOR = re.compile(r'^#[0-9A-Fa-f]{6}$')


def _get_config_path() -> Path:
    """Get the path to the vitals configuration file."""
    return Path(__file__).parent / 'vitals.yaml'


def _load_yaml_config() -> Dict[str, Any]:
    """
    Load and parse the YAML configuration file.

    Raises:
        FileNotFoundError: If vitals.yaml is not found
        yaml.YAMLError: If YAML parsing fails
    """
    config_path = _get_config_path()
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except FileNotFoundError:
        logger.error("Vitals config file not found", extra={'path': str(config_path)})
        raise
    except yaml.YAMLError as e:
        logger.error("Failed to parse vitals config", extra={'path': str(config_path), 'error': str(e)})
        raise


def _validate_vital_entry(raw: Dict[str, Any], index: int) -> None:
    """
    Validate a single vital entry from YAML.

    Raises:
        ValueError: If required fields are missing or invalid
    """
    for field in ('key', 'display_name', 'unit', 'colors', 'legend'):
        if field not in raw:
            raise ValueError(f"Vital at index {index} is missing required field: '{field}'")

    try:
        VitalType(raw['key'])
    except ValueError:
        raise ValueError(f"Vital at index {index} has unknown key: '{raw['key']}'")

    colors = raw['colors']
    legend = raw['legend']
    if not colors or len(colors) != len(legend):
        raise ValueError(f"Vital '{raw['key']}' must define one colour per legend entry")
    for color in colors:
        if not _HEX_COLOR.match(str(color)):
            raise ValueError(f"Vital '{raw['key']}' has invalid color format: '{color}'")


def _parse_vital_entry(raw: Dict[str, Any]) -> VitalDefinition:
    """Parse a single vital entry from YAML into a VitalDefinition."""
    display_name = raw['display_name']
    return VitalDefinition(
        vital_type=VitalType(raw['key']),
        display_name=display_name,
        unit=raw['unit'],
        colors=tuple(raw['colors']),
        legend=tuple(raw['legend']),
        chart_title=raw.get('chart_title', f"{display_name} Trend"),
        chart_subtitle=raw.get('chart_subtitle', f"{display_name} readings over time"),
        aliases=tuple(raw.get('aliases') or ()),
    )


@lru_cache(maxsize=1)
def _load_registry() -> Tuple[Dict[VitalType, VitalDefinition], Dict[str, str]]:
    """
    Load and cache the vital registry from YAML.

    Returns a tuple of:
    - Vital definitions keyed by VitalType
    - Insight category colours

    Raises:
        ValueError: If the file is invalid or does not define every VitalType
    """
    config = _load_yaml_config()

    definitions: Dict[VitalType, VitalDefinition] = {}
    for i, raw in enumerate(config.get('vitals', [])):
        _validate_vital_entry(raw, i)
        definition = _parse_vital_entry(raw)
        definitions[definition.vital_type] = definition

    missing = [vt.value for vt in VitalType if vt not in definitions]
    if missing:
        raise ValueError(f"vitals.yaml is missing definitions for: {', '.join(missing)}")

    insight_colors = dict(config.get('insight_colors', {}))
    return definitions, insight_colors


# =============================================================================
# NAME NORMALIZATION & LOOKUP
# =============================================================================

def _normalize_vital_name(name: str) -> str:
    """
    Normalize a vital name for consistent lookup.

    Rules:
    - Convert to lowercase
    - Strip leading/trailing whitespace
    - Remove non-alphanumeric chars except spaces
    - Collapse multiple spaces to single space
    """
    if not name:
        return ''
    normalized = name.lower().strip()
    normalized = re.sub(r'[^a-z0-9\s]', '', normalized)
    normalized = re.sub(r'\s+', ' ', normalized)
    return normalized.strip()


@lru_cache(maxsize=1)
def _build_vital_lookup() -> Dict[str, VitalType]:
    """Build a normalized lookup map from keys, display names and aliases."""
    definitions, _ = _load_registry()

    lookup: Dict[str, VitalType] = {}
    for vital_type, definition in definitions.items():
        names = [vital_type.value, definition.display_name, *definition.aliases]
        for name in names:
            normalized = _normalize_vital_name(name)
            if not normalized:
                continue
            existing = lookup.get(normalized)
            if existing is not None and existing != vital_type:
                logger.warning(
                    "Alias collision detected",
                    extra={'alias': normalized, 'existing': existing.value}
                )
                continue
            lookup[normalized] = vital_type
            # Also accept the space-free form ("heart rate" -> "heartrate")
            lookup.setdefault(normalized.replace(' ', ''), vital_type)
    return lookup


# =============================================================================
# PUBLIC API
# =============================================================================

def resolve_vital_type(name: Union[str, VitalType]) -> VitalType:
    """
    Resolve a vital type from an enum member or any registered name.

    Raises:
        UnknownVitalTypeError: If the name does not match any vital type
    """
    if isinstance(name, VitalType):
        return name

    normalized = _normalize_vital_name(str(name))
    vital_type = _build_vital_lookup().get(normalized)
    if vital_type is None:
        raise UnknownVitalTypeError(vital_type=str(name))
    return vital_type


def get_vital(vital_type: Union[str, VitalType]) -> VitalDefinition:
    """Get the display definition for a vital type (enum or name)."""
    definitions, _ = _load_registry()
    return definitions[resolve_vital_type(vital_type)]


def list_vitals() -> List[VitalDefinition]:
    """List all vital definitions in VitalType declaration order."""
    definitions, _ = _load_registry()
    return [definitions[vt] for vt in VitalType]


def get_insight_color(category: str) -> str:
    """Colour tag for an insight category ('success', 'warning', 'info')."""
    _, insight_colors = _load_registry()
    return insight_colors.get(category, '#6B7280')
