"""
Plotly figure builder for vital trend charts.

Responsibilities:
- Creating one trace per chart dataset
- Applying layout configuration
- Providing the embed config used in report pages

This module encapsulates all Plotly-specific figure construction logic,
allowing ReportRenderer to focus on page assembly.
"""

import logging
from typing import Any, Dict

import plotly.graph_objects as go

from core.vital_registry import get_vital
from services.analytics.chart_series import ChartDataset, ChartSeries

logger = logging.getLogger(__name__)


class PlotlyBuilder:
    """
    Builder for constructing Plotly figures from ChartSeries.

    Usage:
        builder = PlotlyBuilder()
        fig = builder.create_chart_figure(series)
    """

    def create_figure(self) -> go.Figure:
        """Create a new empty Plotly figure."""
        return go.Figure()

    def create_dataset_trace(self, series: ChartSeries, dataset: ChartDataset, unit: str) -> go.Scatter:
        """
        Create a spline trace for one dataset.

        Labels are categorical (M/D strings), so repeated days stay as
        separate points instead of collapsing onto one date.
        """
        return go.Scatter(
            x=list(range(len(series.labels))),
            y=dataset.data,
            name=dataset.name,
            mode='lines+markers',
            line=dict(width=3, color=dataset.color, shape='spline'),
            marker=dict(size=9, color=dataset.color, line=dict(width=2, color='white')),
            customdata=series.labels,
            hovertemplate=(
                f"<b>{dataset.name}</b><br>"
                "%{customdata}<br>"
                f"<b>%{{y}} {unit}</b>"
                "<extra></extra>"
            ),
        )

    def create_chart_figure(self, series: ChartSeries) -> go.Figure:
        """Build the complete figure for a non-placeholder series."""
        unit = get_vital(series.vital_type).unit
        fig = self.create_figure()
        for dataset in series.datasets:
            fig.add_trace(self.create_dataset_trace(series, dataset, unit))
        self.apply_layout(fig, series)
        return fig

    def apply_layout(self, fig: go.Figure, series: ChartSeries) -> None:
        """Apply the compact card layout used in reports."""
        fig.update_layout(
            title=dict(
                text=f"<b>{series.title}</b><br><sup style='color:#757575'>{series.subtitle}</sup>",
                font=dict(size=16),
                x=0.5, xanchor="center"
            ),
            xaxis=dict(
                tickmode='array',
                tickvals=list(range(len(series.labels))),
                ticktext=series.labels,
                showgrid=False,
            ),
            yaxis=dict(
                showgrid=True,
                gridcolor='rgba(0,0,0,0.06)',
            ),
            showlegend=bool(series.legend),
            legend=dict(
                orientation="h",
                x=0.5, xanchor="center",
                y=-0.15, yanchor="top",
                font=dict(size=11, color='#424242'),
            ),
            hovermode='x unified',
            height=320,
            margin=dict(l=40, r=20, t=70, b=50),
            template="plotly_white",
            paper_bgcolor='#FFFFFF',
            plot_bgcolor='#FFFFFF',
        )

    def get_embed_config(self) -> Dict[str, Any]:
        """Static, print-friendly Plotly config."""
        return {
            'displayModeBar': False,
            'displaylogo': False,
            'responsive': True,
            'staticPlot': False,
            'scrollZoom': False,
        }
