"""
Report rendering package.

- ReportRenderer: ReportDocument -> standalone HTML page
- PlotlyBuilder: ChartSeries -> Plotly figure
"""

from services.report.plotly_builder import PlotlyBuilder
from services.report.renderer import ReportRenderer

__all__ = ["PlotlyBuilder", "ReportRenderer"]
