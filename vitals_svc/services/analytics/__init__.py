"""
Vitals analytics engine.

Pure, synchronous transformations over in-memory record sets:
range filtering, aggregation, chart series, insights and report
compilation. Nothing in this package performs I/O.
"""

from services.analytics.aggregation import (
    AggregateVitals,
    FieldStatistics,
    VitalsStatistics,
    VitalsSummary,
    aggregate,
    round_half_up,
    statistics,
    summarize,
)
from services.analytics.chart_series import (
    ChartDataset,
    ChartSeries,
    average_display,
    build_all_chart_series,
    build_chart_series,
)
from services.analytics.filtering import (
    filter_between,
    filter_by_range,
    parse_window,
    window_label,
)
from services.analytics.insights import (
    BOOTSTRAP_RECOMMENDATIONS,
    Insight,
    InsightCategory,
    InsightTopic,
    generate_insights,
    generate_recommendations,
)
from services.analytics.report_compiler import (
    PreviewRow,
    ReportDocument,
    ReportRow,
    SharePreviewDocument,
    compile_report,
    compile_share_preview,
)
from services.analytics.trends import (
    BloodPressureStatus,
    VitalTrends,
    calculate_trends,
    classify_blood_pressure,
)

__all__ = [
    "AggregateVitals",
    "FieldStatistics",
    "VitalsStatistics",
    "VitalsSummary",
    "aggregate",
    "round_half_up",
    "statistics",
    "summarize",
    "ChartDataset",
    "ChartSeries",
    "average_display",
    "build_all_chart_series",
    "build_chart_series",
    "filter_between",
    "filter_by_range",
    "parse_window",
    "window_label",
    "BOOTSTRAP_RECOMMENDATIONS",
    "Insight",
    "InsightCategory",
    "InsightTopic",
    "generate_insights",
    "generate_recommendations",
    "PreviewRow",
    "ReportDocument",
    "ReportRow",
    "SharePreviewDocument",
    "compile_report",
    "compile_share_preview",
    "BloodPressureStatus",
    "VitalTrends",
    "calculate_trends",
    "classify_blood_pressure",
]
