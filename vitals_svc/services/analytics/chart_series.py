"""
Chart series preparation for vital trends.

Turns a record set into labelled datasets for one vital type. Output is
visualization-agnostic: the Plotly renderer and API clients both consume
the same ChartSeries.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence, Tuple, Union

from core.datetime_utils import format_month_day
from core.vital_registry import VitalDefinition, VitalType, get_vital, resolve_vital_type
from models.vital_record import VitalRecord
from services.analytics.aggregation import aggregate
from services.analytics.filtering import sort_chronologically

logger = logging.getLogger(__name__)

DEFAULT_MAX_POINTS = 7
NO_DATA_LABEL = "No Data"
NOT_AVAILABLE = "N/A"


# =============================================================================
# CHART DATA STRUCTURES
# =============================================================================

@dataclass
class ChartDataset:
    """One plotted line: its legend name, values and colour."""
    name: str
    data: List[float]
    color: str


@dataclass
class ChartSeries:
    """
    Prepared chart data for one vital type.

    ``labels`` and every dataset's ``data`` have the same length. A
    placeholder series (``is_placeholder``) carries a single zero point
    labelled "No Data" so empty charts still render.
    """
    vital_type: VitalType
    title: str
    subtitle: str
    labels: List[str]
    datasets: List[ChartDataset]
    legend: List[str] = field(default_factory=list)
    is_placeholder: bool = False

    @property
    def point_count(self) -> int:
        return 0 if self.is_placeholder else len(self.labels)


# VitalType -> one value extractor per dataset, in legend order.
_EXTRACTORS: Dict[VitalType, Tuple[Callable[[VitalRecord], float], ...]] = {
    VitalType.BLOOD_PRESSURE: (lambda r: r.systolic, lambda r: r.diastolic),
    VitalType.HEART_RATE: (lambda r: r.heart_rate,),
    VitalType.SPO2: (lambda r: r.spo2,),
    VitalType.TEMPERATURE: (lambda r: r.temperature,),
}


def _placeholder_series(definition: VitalDefinition) -> ChartSeries:
    return ChartSeries(
        vital_type=definition.vital_type,
        title=definition.chart_title,
        subtitle=definition.chart_subtitle,
        labels=[NO_DATA_LABEL],
        datasets=[ChartDataset(name=definition.legend[0], data=[0], color=definition.colors[0])],
        legend=[],
        is_placeholder=True,
    )


def build_chart_series(
    records: Sequence[VitalRecord],
    vital_type: Union[str, VitalType],
    max_points: int = DEFAULT_MAX_POINTS,
) -> ChartSeries:
    """
    Build the chart series for one vital type from the most recent readings.

    Keeps the last ``max_points`` records in chronological order. Labels are
    the records' calendar dates in M/D form, one per record, so two readings
    on the same day produce two "1/5" labels.

    Args:
        records: Records to chart, in any order.
        vital_type: VitalType or any registered name/alias.
        max_points: Maximum number of points to keep (at least 1).

    Returns:
        ChartSeries, or a placeholder series when ``records`` is empty.

    Raises:
        ValueError: If max_points is less than 1.
        UnknownVitalTypeError: If vital_type is not registered.
    """
    if max_points < 1:
        raise ValueError(f"max_points must be at least 1, got {max_points}")

    definition = get_vital(resolve_vital_type(vital_type))
    if not records:
        return _placeholder_series(definition)

    recent = sort_chronologically(records)[-max_points:]
    extractors = _EXTRACTORS[definition.vital_type]

    datasets = [
        ChartDataset(
            name=definition.legend[index],
            data=[extract(record) for record in recent],
            color=definition.colors[index],
        )
        for index, extract in enumerate(extractors)
    ]

    logger.debug(
        "Built chart series",
        extra={"vital_type": definition.vital_type.value, "points": len(recent)},
    )

    return ChartSeries(
        vital_type=definition.vital_type,
        title=definition.chart_title,
        subtitle=definition.chart_subtitle,
        labels=[format_month_day(record.date) for record in recent],
        datasets=datasets,
        legend=list(definition.legend) if definition.is_dual_series else [],
    )


def average_display(records: Sequence[VitalRecord], vital_type: Union[str, VitalType]) -> str:
    """
    Formatted average for a vital card: '120/80', '72', '98%', '98.6°F'.

    Returns "N/A" for an empty record set.
    """
    vital_type = resolve_vital_type(vital_type)
    averages = aggregate(records)
    if averages is None:
        return NOT_AVAILABLE

    if vital_type == VitalType.BLOOD_PRESSURE:
        return averages.blood_pressure
    if vital_type == VitalType.HEART_RATE:
        return str(averages.heart_rate)
    if vital_type == VitalType.SPO2:
        return f"{averages.spo2}%"
    return f"{averages.temperature:.1f}°F"


def build_all_chart_series(
    records: Sequence[VitalRecord],
    max_points: int = DEFAULT_MAX_POINTS,
) -> Dict[str, ChartSeries]:
    """Chart series for every registered vital type, keyed by type value."""
    return {
        vital_type.value: build_chart_series(records, vital_type, max_points)
        for vital_type in VitalType
    }
