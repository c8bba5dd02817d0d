"""
HTML rendering of compiled health reports.

The renderer only formats; every number it shows was computed by the
report compiler. Output is one self-contained HTML page (Plotly is loaded
from its CDN) suitable for the browser, for printing and for share links.
"""

import html
import logging
from typing import List, Optional

import plotly.io as pio

from core.datetime_utils import format_for_display
from core.vital_registry import VitalType, get_vital
from services.analytics.chart_series import ChartSeries
from services.analytics.report_compiler import ReportDocument, ReportRow
from services.report.plotly_builder import PlotlyBuilder

logger = logging.getLogger(__name__)

EMPTY_CHART_TEXT = "No data recorded for this period"
NO_RECORDS_TEXT = "No vitals recorded for this period."

_VITAL_ICONS = {
    VitalType.BLOOD_PRESSURE: "❤️",
    VitalType.HEART_RATE: "💓",
    VitalType.SPO2: "💧",
    VitalType.TEMPERATURE: "🌡️",
}

# (field, label, decimals) rows of the statistics table.
_STATISTICS_ROWS = (
    ("systolic", "Systolic (mmHg)", 0),
    ("diastolic", "Diastolic (mmHg)", 0),
    ("heart_rate", "Heart Rate (BPM)", 0),
    ("spo2", "SpO₂ (%)", 0),
    ("temperature", "Temperature (°F)", 1),
    ("weight", "Weight (lbs)", 0),
)

_STYLES = """
<style>
    * { box-sizing: border-box; }
    body {
        margin: 0;
        padding: 24px;
        background: #F9FAFB;
        color: #1F2937;
        font-family: -apple-system, system-ui, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
        -webkit-font-smoothing: antialiased;
    }
    .report { max-width: 900px; margin: 0 auto; background: #FFFFFF; border-radius: 12px; padding: 32px; }
    .header { text-align: center; border-bottom: 3px solid #4F46E5; padding-bottom: 16px; margin-bottom: 24px; }
    .header h1 { color: #4F46E5; margin: 8px 0 4px; }
    .subtitle { color: #6B7280; }
    .owner-info { display: flex; justify-content: space-between; background: #F3F4F6; border-radius: 8px; padding: 16px; }
    .info-label { font-size: 12px; color: #6B7280; text-transform: uppercase; }
    .info-value { font-weight: 600; }
    .report-period { text-align: center; color: #4B5563; margin: 16px 0; }
    .section { margin-top: 28px; }
    .section-title { color: #111827; border-left: 4px solid #4F46E5; padding-left: 10px; }
    .vitals-grid { display: grid; grid-template-columns: repeat(4, 1fr); gap: 12px; }
    .vital-card { border: 1px solid #E5E7EB; border-radius: 10px; padding: 14px; text-align: center; }
    .vital-icon { font-size: 22px; }
    .vital-label { font-size: 13px; color: #6B7280; }
    .vital-value { font-size: 22px; font-weight: 700; color: #4F46E5; }
    .vital-unit { font-size: 12px; color: #9CA3AF; }
    .chart { margin-bottom: 16px; border: 1px solid #E5E7EB; border-radius: 10px; padding: 8px; }
    .empty-state { text-align: center; color: #9CA3AF; padding: 24px; }
    .table { width: 100%; border-collapse: collapse; font-size: 13px; }
    .table th { background: #4F46E5; color: #FFFFFF; padding: 8px; text-align: left; }
    .table td { border-bottom: 1px solid #E5E7EB; padding: 8px; }
    .status-badge { color: #FFFFFF; border-radius: 10px; padding: 2px 8px; font-size: 11px; }
    .insights-list, .recommendations-list { list-style: none; padding: 0; }
    .insight-item { border-left: 4px solid; background: #F9FAFB; padding: 10px 14px; margin-bottom: 8px; border-radius: 6px; }
    .insight-title { font-weight: 600; }
    .insight-message { color: #4B5563; font-size: 14px; }
    .recommendation-item { padding: 6px 0; }
    .disclaimer { margin-top: 28px; background: #FEF3C7; border-radius: 8px; padding: 14px; font-size: 13px; }
    .disclaimer-title { font-weight: 700; margin-bottom: 4px; }
    .footer { text-align: center; color: #9CA3AF; font-size: 12px; margin-top: 24px; }
    @media (max-width: 600px) {
        body { padding: 4px; }
        .report { padding: 16px; }
        .vitals-grid { grid-template-columns: repeat(2, 1fr); }
    }
</style>
"""


def _e(value: object) -> str:
    return html.escape(str(value), quote=True)


class ReportRenderer:
    """
    Renders a ReportDocument as a standalone HTML page.

    Figure construction is delegated to PlotlyBuilder.
    """

    def __init__(self, plotly_builder: Optional[PlotlyBuilder] = None):
        self._builder = plotly_builder or PlotlyBuilder()

    def render_html(self, document: ReportDocument) -> str:
        """Render the full report page."""
        sections = [
            self._render_header(document),
            self._render_summary(document),
            self._render_statistics(document),
            self._render_charts(document),
            self._render_records(document.records),
            self._render_insights(document),
            self._render_recommendations(document.recommendations),
            self._render_disclaimer(document),
        ]
        body = "\n".join(sections)

        logger.debug(
            "Rendered report HTML",
            extra={"total_records": document.total_records, "window_days": document.window_days},
        )

        return (
            "<!DOCTYPE html>\n"
            "<html lang=\"en\">\n<head>\n"
            "<meta charset=\"utf-8\">\n"
            "<meta name=\"viewport\" content=\"width=device-width, initial-scale=1\">\n"
            f"<title>Vitals Health Report - {_e(document.owner_name)}</title>\n"
            f"{_STYLES}\n"
            "</head>\n<body>\n"
            f"<div class=\"report\">\n{body}\n</div>\n"
            "</body>\n</html>\n"
        )

    def _render_header(self, document: ReportDocument) -> str:
        if document.period_start is not None:
            period = (
                f"{format_for_display(document.period_start, include_time=False)} - "
                f"{format_for_display(document.period_end, include_time=False)}"
            )
        else:
            period = "No records yet"

        return (
            "<div class=\"header\">\n"
            "  <h1>Vitals Health Report</h1>\n"
            "  <div class=\"subtitle\">Personal Health Summary</div>\n"
            "</div>\n"
            "<div class=\"owner-info\">\n"
            "  <div class=\"info-item\">\n"
            "    <div class=\"info-label\">Name</div>\n"
            f"    <div class=\"info-value\">{_e(document.owner_name)}</div>\n"
            "  </div>\n"
            "  <div class=\"info-item\">\n"
            "    <div class=\"info-label\">Report Date</div>\n"
            f"    <div class=\"info-value\">{_e(format_for_display(document.generated_at))}</div>\n"
            "  </div>\n"
            "</div>\n"
            f"<div class=\"report-period\"><b>{_e(document.window_label)}</b> &middot; {_e(period)}"
            f" &middot; {document.total_records} records</div>"
        )

    def _render_summary(self, document: ReportDocument) -> str:
        cards: List[str] = []
        for vital_type in VitalType:
            definition = get_vital(vital_type)
            value = document.average_displays.get(vital_type.value, "N/A")
            cards.append(
                "<div class=\"vital-card\">"
                f"<div class=\"vital-icon\">{_VITAL_ICONS[vital_type]}</div>"
                f"<div class=\"vital-label\">{_e(definition.display_name)}</div>"
                f"<div class=\"vital-value\">{_e(value)}</div>"
                f"<div class=\"vital-unit\">Average ({_e(definition.unit)})</div>"
                "</div>"
            )
        return (
            "<div class=\"section\">\n"
            "  <h2 class=\"section-title\">Vital Signs Summary</h2>\n"
            f"  <div class=\"vitals-grid\">{''.join(cards)}</div>\n"
            "</div>"
        )

    def _render_statistics(self, document: ReportDocument) -> str:
        stats = document.statistics
        if stats is None:
            table = f"<p class=\"empty-state\">{NO_RECORDS_TEXT}</p>"
        else:
            body_rows = "".join(
                "<tr>"
                f"<td>{_e(label)}</td>"
                f"<td>{getattr(stats, name).min:.{decimals}f}</td>"
                f"<td>{getattr(stats, name).avg:.{decimals}f}</td>"
                f"<td>{getattr(stats, name).max:.{decimals}f}</td>"
                "</tr>"
                for name, label, decimals in _STATISTICS_ROWS
            )
            table = (
                "<table class=\"table statistics\">"
                "<thead><tr><th>Measurement</th><th>Min</th><th>Average</th><th>Max</th></tr></thead>"
                f"<tbody>{body_rows}</tbody>"
                "</table>"
            )
        return (
            "<div class=\"section\">\n"
            "  <h2 class=\"section-title\">Statistics</h2>\n"
            f"  {table}\n"
            "</div>"
        )

    def _render_chart(self, series: ChartSeries, include_plotlyjs: object) -> str:
        if series.is_placeholder:
            return (
                "<div class=\"chart\">"
                f"<h3>{_e(series.title)}</h3>"
                f"<p class=\"empty-state\">{EMPTY_CHART_TEXT}</p>"
                "</div>"
            )

        fig = self._builder.create_chart_figure(series)
        chart_html = pio.to_html(
            fig,
            include_plotlyjs=include_plotlyjs,
            full_html=False,
            config=self._builder.get_embed_config(),
            div_id=f"chart-{series.vital_type.value}",
        )
        return f"<div class=\"chart\">{chart_html}</div>"

    def _render_charts(self, document: ReportDocument) -> str:
        rendered: List[str] = []
        plotlyjs_loaded = False
        for series in document.charts.values():
            if series.is_placeholder:
                rendered.append(self._render_chart(series, False))
                continue
            rendered.append(self._render_chart(series, False if plotlyjs_loaded else 'cdn'))
            plotlyjs_loaded = True

        return (
            "<div class=\"section\">\n"
            "  <h2 class=\"section-title\">Trends</h2>\n"
            f"  {''.join(rendered)}\n"
            "</div>"
        )

    def _render_records(self, rows: List[ReportRow]) -> str:
        if not rows:
            table = f"<p class=\"empty-state\">{NO_RECORDS_TEXT}</p>"
        else:
            body_rows = "".join(
                "<tr>"
                f"<td>{_e(format_for_display(row.timestamp))}</td>"
                f"<td>{_e(row.blood_pressure)} "
                f"<span class=\"status-badge\" style=\"background:{_e(row.bp_status_color)}\">{_e(row.bp_status)}</span></td>"
                f"<td>{row.heart_rate}</td>"
                f"<td>{row.spo2}%</td>"
                f"<td>{row.temperature:.1f}°F</td>"
                f"<td>{row.weight}</td>"
                "</tr>"
                for row in rows
            )
            table = (
                "<table class=\"table\">"
                "<thead><tr><th>Date</th><th>Blood Pressure</th><th>Heart Rate</th>"
                "<th>SpO₂</th><th>Temperature</th><th>Weight</th></tr></thead>"
                f"<tbody>{body_rows}</tbody>"
                "</table>"
            )
        return (
            "<div class=\"section\">\n"
            "  <h2 class=\"section-title\">Detailed Records</h2>\n"
            f"  {table}\n"
            "</div>"
        )

    def _render_insights(self, document: ReportDocument) -> str:
        if not document.insights:
            items = "<li class=\"insight-item\" style=\"border-color:#3B82F6\">" \
                    "<div class=\"insight-title\">Start Tracking</div>" \
                    "<div class=\"insight-message\">Record your vitals to see personalized insights.</div></li>"
        else:
            items = "".join(
                f"<li class=\"insight-item\" style=\"border-color:{_e(insight.color)}\">"
                f"<div class=\"insight-title\">{_e(insight.title)}</div>"
                f"<div class=\"insight-message\">{_e(insight.message)}</div>"
                "</li>"
                for insight in document.insights
            )
        return (
            "<div class=\"section\">\n"
            "  <h2 class=\"section-title\">Key Insights</h2>\n"
            f"  <ul class=\"insights-list\">{items}</ul>\n"
            "</div>"
        )

    def _render_recommendations(self, recommendations: List[str]) -> str:
        items = "".join(
            f"<li class=\"recommendation-item\">&#10003; {_e(text)}</li>" for text in recommendations
        )
        return (
            "<div class=\"section\">\n"
            "  <h2 class=\"section-title\">Recommendations</h2>\n"
            f"  <ul class=\"recommendations-list\">{items}</ul>\n"
            "</div>"
        )

    def _render_disclaimer(self, document: ReportDocument) -> str:
        return (
            "<div class=\"disclaimer\">\n"
            "  <div class=\"disclaimer-title\">Medical Disclaimer</div>\n"
            f"  <div class=\"disclaimer-text\">{_e(document.disclaimer)}</div>\n"
            "</div>\n"
            f"<div class=\"footer\">Generated {_e(format_for_display(document.generated_at))}</div>"
        )
