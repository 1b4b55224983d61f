from datetime import date, timedelta

import pytest

from app.schemas.plan_schemas import ActionCategory, ActionStatus, DailyPlan, PlannedAction
from app.schemas.summary_schemas import MetricSummary, MetricTrend
from app.services import weekly_summary_service as summary

MONDAY = date(2024, 6, 10)


def _plan(day, statuses, plan_id=None, template_prefix="t"):
    return DailyPlan(
        id=plan_id or f"plan-{day.isoformat()}",
        user_id="user-1",
        date=day,
        actions=[
            PlannedAction(
                id=f"{day.isoformat()}-{i}",
                template_id=f"{template_prefix}{i}",
                title=f"Action {template_prefix}{i}",
                category=ActionCategory.coping,
                duration=5,
                status=status,
            )
            for i, status in enumerate(statuses)
        ],
    )


class TestMetricTrend:

    @pytest.mark.parametrize("metric, values, trend", [
        ("mood", [3, 3, 6, 6], MetricTrend.improving),
        ("mood", [6, 6, 3, 3], MetricTrend.declining),
        ("stress", [3, 3, 6, 6], MetricTrend.declining),
        ("anxiety", [6, 6, 3, 3], MetricTrend.improving),
        ("mood", [5, 5, 5, 6], MetricTrend.stable),
        ("mood", [4], MetricTrend.stable),
    ])
    def test_trend(self, metric, values, trend):
        assert summary.summarize_metric(metric, values).trend == trend

    def test_stats(self):
        result = summary.summarize_metric("sleep", [4, 5, 8])
        assert (result.average, result.min, result.max) == (5.7, 4, 8)

    def test_no_values(self):
        assert summary.summarize_metric("mood", []).average == 0


def test_completion_rate():
    plans = [
        _plan(MONDAY, [ActionStatus.completed, ActionStatus.skipped, ActionStatus.pending]),
        _plan(MONDAY + timedelta(days=1), [ActionStatus.completed]),
    ]
    assert summary.completion_rate(plans) == 50
    assert summary.completion_rate([]) == 0


class TestStreaks:

    DATES = [date(2024, 6, 12), date(2024, 6, 11), date(2024, 6, 10), date(2024, 6, 8), date(2024, 6, 7)]

    @pytest.mark.parametrize("as_of, current", [
        (date(2024, 6, 12), 3),
        (date(2024, 6, 13), 3),
        (date(2024, 6, 14), 0),
    ])
    def test_current_streak(self, as_of, current):
        assert summary.checkin_streaks(self.DATES, as_of) == (current, 3)

    def test_no_checkins(self):
        assert summary.checkin_streaks([], MONDAY) == (0, 0)


def test_top_actions_are_ranked_by_completions():
    plans = [
        _plan(MONDAY, [ActionStatus.completed, ActionStatus.completed]),
        _plan(MONDAY + timedelta(days=1), [ActionStatus.skipped, ActionStatus.completed]),
    ]

    top = summary.top_actions(plans)

    assert [(a.title, a.completed_count) for a in top] == [("Action t1", 2), ("Action t0", 1)]
    assert top[0].category == "coping"
    assert summary.top_actions(plans, limit=1)[0].title == "Action t1"


class TestInsights:

    def test_capped_at_three(self):
        improving = MetricSummary(average=7, min=6, max=8, trend=MetricTrend.improving)
        metrics = {name: improving for name in ("mood", "sleep", "energy", "focus")}

        insights = summary.generate_insights(metrics, 90)

        assert len(insights) == 3
        assert insights[0] == "Your mood has been improving this week!"

    @pytest.mark.parametrize("rate, expected", [
        (85, "Great job completing your action plans!"),
        (30, "Try to complete more actions next week for better results."),
    ])
    def test_completion_feedback(self, rate, expected):
        assert summary.generate_insights({}, rate) == [expected]

    def test_no_plans_no_nagging(self):
        assert summary.generate_insights({}, 0) == []

    def test_low_mood(self):
        metrics = {"mood": MetricSummary(average=3.5, min=2, max=5)}
        assert summary.generate_insights(metrics, 60) == [
            "Your mood has been lower than usual. Consider reaching out for support."
        ]


class TestBuildWeeklySummary:

    @pytest.fixture
    def week(self, stores, make_metrics):
        for offset, mood in enumerate([3, 3, 6]):
            stores.checkins.add("user-1", MONDAY + timedelta(days=offset), make_metrics(mood=mood))
        stores.checkins.add("user-1", MONDAY + timedelta(days=7), make_metrics(mood=9))
        stores.plans.save_plan(_plan(MONDAY, [ActionStatus.completed, ActionStatus.skipped]))
        return stores

    def test_build(self, week):
        # Any day of the week selects that Monday..Sunday
        result = summary.build_weekly_summary(week, "user-1", MONDAY + timedelta(days=3))

        assert result.week_start == MONDAY
        assert result.week_end == MONDAY + timedelta(days=6)
        assert result.checkin_count == 3
        assert result.metrics["mood"].average == 4.0
        assert result.metrics["mood"].trend == MetricTrend.improving
        assert result.metrics["stress"].trend == MetricTrend.stable
        assert result.completion_rate == 50
        assert [a.title for a in result.top_actions] == ["Action t0"]
        assert result.insights == [
            "Your mood has been improving this week!",
            "Your mood has been lower than usual. Consider reaching out for support.",
        ]

    def test_streak_is_measured_at_the_following_monday(self, week):
        result = summary.build_weekly_summary(week, "user-1", MONDAY)
        # The following Monday's check-in starts a new run
        assert (result.checkin_streak, result.longest_streak) == (1, 3)

    def test_generate_stores_the_summary(self, week):
        summary.generate_weekly_summary(week, "user-1", MONDAY)
        assert week.summaries.latest("user-1").week_start == MONDAY

    def test_empty_week_is_skipped(self, stores):
        assert summary.generate_weekly_summary(stores, "user-1", MONDAY) is None
        assert stores.summaries.latest("user-1") is None
