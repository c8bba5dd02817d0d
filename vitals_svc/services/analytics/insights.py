"""
Rule-based insights and recommendations.

Insights come from an ordered rule table per topic. Topics are evaluated
independently, and within a topic the first matching rule wins, so each
topic contributes at most one insight. Thresholds are fixed heuristics,
not clinical criteria.

Usage:
    from services.analytics.insights import generate_insights

    for insight in generate_insights(records):
        print(insight.title, insight.message)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Sequence, Tuple

from core.vital_registry import get_insight_color
from models.vital_record import VitalRecord
from services.analytics.aggregation import AggregateVitals, aggregate

logger = logging.getLogger(__name__)


class InsightCategory(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    INFO = "info"


class InsightTopic(str, Enum):
    BLOOD_PRESSURE = "blood_pressure"
    HEART_RATE = "heart_rate"
    SPO2 = "spo2"
    TRACKING = "tracking"


@dataclass(frozen=True)
class Insight:
    """A rule-triggered observation about a record set's averages."""
    category: InsightCategory
    topic: InsightTopic
    title: str
    message: str
    color: str
    icon: str


@dataclass(frozen=True)
class InsightContext:
    """Everything a rule predicate may look at."""
    averages: AggregateVitals
    record_count: int
    distinct_days: int


@dataclass(frozen=True)
class InsightRule:
    name: str
    predicate: Callable[[InsightContext], bool]
    build: Callable[[InsightContext], Insight]


@dataclass(frozen=True)
class RecommendationRule:
    name: str
    predicate: Callable[[InsightContext], bool]
    messages: Tuple[str, ...]


def _insight(
    category: InsightCategory,
    topic: InsightTopic,
    icon: str,
    title: str,
    message: str,
) -> Insight:
    return Insight(
        category=category,
        topic=topic,
        title=title,
        message=message,
        color=get_insight_color(category.value),
        icon=icon,
    )


# =============================================================================
# INSIGHT RULE TABLES
# =============================================================================

BLOOD_PRESSURE_RULES: Tuple[InsightRule, ...] = (
    InsightRule(
        name="bp_healthy",
        predicate=lambda c: c.averages.systolic < 120 and c.averages.diastolic < 80,
        build=lambda c: _insight(
            InsightCategory.SUCCESS, InsightTopic.BLOOD_PRESSURE, "trending-up",
            "Great Progress!",
            "Your blood pressure is in the healthy range",
        ),
    ),
    InsightRule(
        name="bp_high",
        predicate=lambda c: c.averages.systolic > 130,
        build=lambda c: _insight(
            InsightCategory.WARNING, InsightTopic.BLOOD_PRESSURE, "alert-circle",
            "Monitor Closely",
            f"Your systolic reading is elevated ({c.averages.systolic} mmHg)",
        ),
    ),
    InsightRule(
        name="bp_slightly_elevated",
        predicate=lambda c: 120 <= c.averages.systolic <= 130,
        build=lambda c: _insight(
            InsightCategory.INFO, InsightTopic.BLOOD_PRESSURE, "information-circle",
            "Elevated Blood Pressure",
            f"Your systolic reading is slightly elevated ({c.averages.systolic} mmHg)",
        ),
    ),
)

HEART_RATE_RULES: Tuple[InsightRule, ...] = (
    InsightRule(
        name="hr_low",
        predicate=lambda c: c.averages.heart_rate < 60,
        build=lambda c: _insight(
            InsightCategory.INFO, InsightTopic.HEART_RATE, "heart",
            "Low Heart Rate",
            f"Your average heart rate is {c.averages.heart_rate} BPM. "
            "This may be normal for athletes.",
        ),
    ),
    InsightRule(
        name="hr_high",
        predicate=lambda c: c.averages.heart_rate > 100,
        build=lambda c: _insight(
            InsightCategory.WARNING, InsightTopic.HEART_RATE, "heart",
            "Elevated Heart Rate",
            f"Your average heart rate is {c.averages.heart_rate} BPM. "
            "Consider consulting a doctor.",
        ),
    ),
)

SPO2_RULES: Tuple[InsightRule, ...] = (
    InsightRule(
        name="spo2_low",
        predicate=lambda c: c.averages.spo2 < 95,
        build=lambda c: _insight(
            InsightCategory.WARNING, InsightTopic.SPO2, "water",
            "Low Oxygen Levels",
            f"Your average SpO₂ is {c.averages.spo2}%. Consult a healthcare provider.",
        ),
    ),
)

TRACKING_RULES: Tuple[InsightRule, ...] = (
    InsightRule(
        name="tracking_consistent",
        predicate=lambda c: c.record_count >= 6,
        build=lambda c: _insight(
            InsightCategory.SUCCESS, InsightTopic.TRACKING, "calendar",
            "Consistent Tracking",
            f"You've recorded {c.record_count} measurements - keep it up!",
        ),
    ),
    InsightRule(
        name="tracking_started",
        predicate=lambda c: 3 <= c.record_count < 6,
        build=lambda c: _insight(
            InsightCategory.INFO, InsightTopic.TRACKING, "calendar",
            "Good Start",
            f"You have {c.record_count} measurements. Try to track daily for better insights.",
        ),
    ),
)

# Evaluation order of topics in the output list.
INSIGHT_RULES: Tuple[Tuple[InsightTopic, Tuple[InsightRule, ...]], ...] = (
    (InsightTopic.BLOOD_PRESSURE, BLOOD_PRESSURE_RULES),
    (InsightTopic.HEART_RATE, HEART_RATE_RULES),
    (InsightTopic.SPO2, SPO2_RULES),
    (InsightTopic.TRACKING, TRACKING_RULES),
)


# =============================================================================
# RECOMMENDATIONS
# =============================================================================

BOOTSTRAP_RECOMMENDATIONS: Tuple[str, ...] = (
    "Start recording your vitals daily to track your health",
    "Measure at the same time each day for consistency",
    "Keep a log of any symptoms or activities that may affect readings",
)

RECOMMENDATION_RULES: Tuple[RecommendationRule, ...] = (
    RecommendationRule(
        name="bp_lifestyle",
        predicate=lambda c: c.averages.systolic >= 120,
        messages=(
            "Consider monitoring BP at the same time daily for consistency",
            "Reduce sodium intake and maintain a healthy diet",
            "Regular exercise can help lower blood pressure",
        ),
    ),
    RecommendationRule(
        name="bp_maintain",
        predicate=lambda c: c.averages.systolic < 120,
        messages=("Your readings are within healthy range - maintain current lifestyle",),
    ),
    RecommendationRule(
        name="share_with_provider",
        predicate=lambda c: True,
        messages=("Share these trends with your healthcare provider at your next visit",),
    ),
    RecommendationRule(
        name="track_a_week",
        predicate=lambda c: c.record_count < 7,
        messages=("Record vitals for at least 7 days to identify patterns",),
    ),
    RecommendationRule(
        name="one_per_day",
        predicate=lambda c: c.distinct_days < c.record_count,
        messages=("Try to record only one measurement per day for accurate trends",),
    ),
)


# =============================================================================
# EVALUATION
# =============================================================================

def build_context(records: Sequence[VitalRecord], averages: AggregateVitals) -> InsightContext:
    return InsightContext(
        averages=averages,
        record_count=len(records),
        distinct_days=len({record.date for record in records}),
    )


def evaluate_insight_rules(context: InsightContext) -> List[Insight]:
    """Apply every topic's rule table to a context, first match per topic."""
    insights: List[Insight] = []
    for topic, rules in INSIGHT_RULES:
        for rule in rules:
            if rule.predicate(context):
                insights.append(rule.build(context))
                logger.debug("Insight rule fired", extra={"rule": rule.name, "topic": topic.value})
                break
    return insights


def evaluate_recommendation_rules(context: InsightContext) -> List[str]:
    """Messages of every matching recommendation rule, in table order."""
    recommendations: List[str] = []
    for rule in RECOMMENDATION_RULES:
        if rule.predicate(context):
            recommendations.extend(rule.messages)
    return recommendations


def generate_insights(records: Sequence[VitalRecord]) -> List[Insight]:
    """
    Insights for a record set.

    Returns an empty list when there are no records; callers show their own
    "start tracking" copy in that case.
    """
    averages = aggregate(records)
    if averages is None:
        return []
    return evaluate_insight_rules(build_context(records, averages))


def generate_recommendations(records: Sequence[VitalRecord]) -> List[str]:
    """
    Ordered recommendation strings for a record set.

    Returns the bootstrap list when there are no records. Duplicate-day
    detection looks only at the records passed in.
    """
    averages = aggregate(records)
    if averages is None:
        return list(BOOTSTRAP_RECOMMENDATIONS)
    return evaluate_recommendation_rules(build_context(records, averages))
