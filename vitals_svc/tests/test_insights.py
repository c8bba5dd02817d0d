"""
Tests for rule-based insights and recommendations.
"""
from services.analytics.insights import (
    BOOTSTRAP_RECOMMENDATIONS,
    InsightCategory,
    InsightTopic,
    generate_insights,
    generate_recommendations,
)


def _by_topic(insights):
    return {insight.topic: insight for insight in insights}


class TestGenerateInsights:
    """Test suite for generate_insights()."""

    def test_no_records_no_insights(self):
        assert generate_insights([]) == []

    def test_healthy_blood_pressure(self, make_record):
        insights = _by_topic(generate_insights([make_record(systolic=115, diastolic=75)]))

        bp = insights[InsightTopic.BLOOD_PRESSURE]
        assert bp.category == InsightCategory.SUCCESS
        assert bp.title == "Great Progress!"

    def test_slightly_elevated_is_info_not_success(self, make_record):
        records = [
            make_record(days_ago=1, systolic=120, diastolic=80),
            make_record(days_ago=2, systolic=130, diastolic=75),
        ]

        insights = generate_insights(records)
        bp = _by_topic(insights)[InsightTopic.BLOOD_PRESSURE]

        assert bp.category == InsightCategory.INFO
        assert bp.title == "Elevated Blood Pressure"
        assert "125 mmHg" in bp.message
        assert not any(i.title == "Great Progress!" for i in insights)

    def test_high_blood_pressure_is_warning(self, make_record):
        bp = _by_topic(generate_insights([make_record(systolic=142, diastolic=88)]))[InsightTopic.BLOOD_PRESSURE]

        assert bp.category == InsightCategory.WARNING
        assert "142 mmHg" in bp.message

    def test_one_insight_per_topic(self, make_record):
        records = [make_record(days_ago=d, systolic=150, heart_rate=110, spo2=92) for d in range(8)]

        insights = generate_insights(records)
        topics = [i.topic for i in insights]

        assert len(topics) == len(set(topics))
        assert topics == [
            InsightTopic.BLOOD_PRESSURE,
            InsightTopic.HEART_RATE,
            InsightTopic.SPO2,
            InsightTopic.TRACKING,
        ]

    def test_heart_rate_threshold(self, make_record):
        low = _by_topic(generate_insights([make_record(heart_rate=59)]))
        normal = _by_topic(generate_insights([make_record(heart_rate=60)]))

        assert low[InsightTopic.HEART_RATE].title == "Low Heart Rate"
        assert low[InsightTopic.HEART_RATE].category == InsightCategory.INFO
        assert InsightTopic.HEART_RATE not in normal

    def test_elevated_heart_rate(self, make_record):
        hr = _by_topic(generate_insights([make_record(heart_rate=101)]))[InsightTopic.HEART_RATE]
        assert hr.category == InsightCategory.WARNING

    def test_low_oxygen(self, make_record):
        insights = _by_topic(generate_insights([make_record(spo2=94)]))

        assert insights[InsightTopic.SPO2].title == "Low Oxygen Levels"
        assert InsightTopic.SPO2 not in _by_topic(generate_insights([make_record(spo2=95)]))

    def test_consistent_tracking(self, make_record):
        records = [make_record(days_ago=d) for d in range(8)]

        tracking = _by_topic(generate_insights(records))[InsightTopic.TRACKING]

        assert tracking.category == InsightCategory.SUCCESS
        assert "8 measurements" in tracking.message

    def test_good_start(self, make_record):
        records = [make_record(days_ago=d) for d in range(4)]

        tracking = _by_topic(generate_insights(records))[InsightTopic.TRACKING]

        assert tracking.title == "Good Start"
        assert tracking.category == InsightCategory.INFO

    def test_too_few_records_for_tracking_insight(self, make_record):
        records = [make_record(days_ago=d) for d in range(2)]
        assert InsightTopic.TRACKING not in _by_topic(generate_insights(records))

    def test_insights_carry_colour_tags(self, make_record):
        for insight in generate_insights([make_record()]):
            assert insight.color.startswith("#")


class TestGenerateRecommendations:
    """Test suite for generate_recommendations()."""

    def test_bootstrap_when_empty(self):
        assert generate_recommendations([]) == list(BOOTSTRAP_RECOMMENDATIONS)

    def test_healthy_readings(self, make_record):
        records = [make_record(days_ago=d) for d in range(7)]

        recommendations = generate_recommendations(records)

        assert recommendations == [
            "Your readings are within healthy range - maintain current lifestyle",
            "Share these trends with your healthcare provider at your next visit",
        ]

    def test_elevated_readings_get_lifestyle_tips(self, make_record):
        recommendations = generate_recommendations([make_record(systolic=128)])

        assert "Reduce sodium intake and maintain a healthy diet" in recommendations
        assert "Record vitals for at least 7 days to identify patterns" in recommendations
        assert not any("maintain current lifestyle" in r for r in recommendations)

    def test_duplicate_day_warning(self, make_record):
        records = [make_record(days_ago=0.1), make_record(days_ago=0)]

        recommendations = generate_recommendations(records)

        assert recommendations[-1] == "Try to record only one measurement per day for accurate trends"

    def test_no_duplicate_warning_for_distinct_days(self, make_record):
        records = [make_record(days_ago=d) for d in range(3)]

        recommendations = generate_recommendations(records)

        assert not any("one measurement per day" in r for r in recommendations)
