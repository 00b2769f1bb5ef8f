# -*- coding: utf-8 -*-
"""Analytics aggregation.

Pure functions over food logs, steps logs and a profile dict. Food logs are
grouped into one bucket per logged date; rates and streaks are computed over
those logged days only, so days without any entry neither break nor extend a
streak.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..food_log.models import FoodLogEntry, GoalProgress, LogTotals
from ..food_log.storage import sum_totals
from ..steps.models import StepsLog
from .models import (
    AnalyticsSummary,
    DailyNutrition,
    GoalAchievementDay,
    Insights,
    MacroShare,
    Streaks,
)

CALORIE_GOAL_LOW = 0.8
CALORIE_GOAL_HIGH = 1.2
PROGRESS_CAP = 150.0
GOAL_SERIES_DAYS = 14
WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _percent(part: int, whole: int) -> int:
    return round_half_up(part / whole * 100) if whole else 0


@dataclass
class _DayAgg:
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sodium: float = 0.0


def group_daily_nutrition(food_logs: Iterable[FoodLogEntry]) -> List[DailyNutrition]:
    per_day: Dict[str, _DayAgg] = {}
    for log in food_logs:
        agg = per_day.setdefault(log.logged_date, _DayAgg())
        agg.calories += log.totals.calories
        agg.protein += log.totals.protein_g
        agg.carbs += log.totals.carbs_g
        agg.fat += log.totals.fat_g
        agg.fiber += log.totals.fiber_g
        agg.sodium += log.totals.sodium_mg

    return [
        DailyNutrition(
            date=day,
            calories=round(agg.calories, 1),
            protein=round(agg.protein, 1),
            carbs=round(agg.carbs, 1),
            fat=round(agg.fat, 1),
            fiber=round(agg.fiber, 1),
            sodium=round(agg.sodium, 1),
        )
        for day, agg in sorted(per_day.items())
    ]


def within_calorie_goal(calories: float, goal: float) -> bool:
    return goal * CALORIE_GOAL_LOW <= calories <= goal * CALORIE_GOAL_HIGH


def compute_streaks(days: Sequence[DailyNutrition], calorie_goal: float) -> Streaks:
    longest = 0
    run = 0
    for day in sorted(days, key=lambda d: d.date):
        if within_calorie_goal(day.calories, calorie_goal):
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    # `run` now holds the streak ending at the most recent logged day.
    return Streaks(current=run, longest=longest)


def weekly_trend(days: Sequence[DailyNutrition]) -> int:
    ordered = sorted(days, key=lambda d: d.date)
    this_week = [d.calories for d in ordered[-7:]]
    last_week = [d.calories for d in ordered[-14:-7]]
    return round_half_up(_mean(this_week) - _mean(last_week))


def most_active_day(steps_logs: Iterable[StepsLog]) -> str:
    per_weekday: Dict[str, int] = {}
    for log in steps_logs:
        try:
            weekday = WEEKDAYS[date.fromisoformat(log.logged_date).weekday()]
        except ValueError:
            continue
        per_weekday[weekday] = per_weekday.get(weekday, 0) + log.steps

    best_day, best_steps = "N/A", 0
    for weekday, steps in per_weekday.items():
        if steps > best_steps:
            best_day, best_steps = weekday, steps
    return best_day


def unique_food_names(food_logs: Iterable[FoodLogEntry]) -> int:
    return len({log.food.name for log in food_logs if log.food and log.food.name})


def health_label(score: int) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    return "Needs Improvement"


def compute_analytics(
    profile: Mapping[str, Any],
    food_logs: Sequence[FoodLogEntry],
    steps_logs: Sequence[StepsLog],
) -> AnalyticsSummary:
    calorie_goal = float(profile.get("daily_calories") or 0)
    steps_goal = int(profile.get("daily_steps_goal") or 0)
    days = group_daily_nutrition(food_logs)

    calorie_goal_days = sum(1 for d in days if within_calorie_goal(d.calories, calorie_goal))
    steps_goal_days = sum(1 for log in steps_logs if log.steps >= steps_goal)
    consistent_days = sum(1 for d in days if d.calories > 0)
    streaks = compute_streaks(days, calorie_goal)

    calorie_rate = _percent(calorie_goal_days, len(days))
    steps_rate = _percent(steps_goal_days, len(steps_logs))
    consistency = _percent(consistent_days, len(days))
    score = round_half_up((calorie_rate + steps_rate + consistency) / 3)

    return AnalyticsSummary(
        avg_calories=round_half_up(_mean([d.calories for d in days])),
        avg_steps=round_half_up(_mean([log.steps for log in steps_logs])),
        calorie_goal_rate=calorie_rate,
        steps_goal_rate=steps_rate,
        weekly_trend=weekly_trend(days),
        total_days=len(days),
        current_streak=streaks.current,
        longest_streak=streaks.longest,
        unique_foods=unique_food_names(food_logs),
        most_active_day=most_active_day(steps_logs),
        consistency_score=consistency,
        total_calories_logged=round(sum(d.calories for d in days), 1),
        total_steps_logged=sum(log.steps for log in steps_logs),
        health_score=score,
        health_label=health_label(score),
    )


def macro_distribution(days: Sequence[DailyNutrition]) -> List[MacroShare]:
    protein = sum(d.protein for d in days)
    carbs = sum(d.carbs for d in days)
    fat = sum(d.fat for d in days)
    total = protein + carbs + fat
    if total <= 0:
        return []
    return [
        MacroShare(name=name, percent=round_half_up(grams / total * 100), avg_grams=round_half_up(grams / len(days)))
        for name, grams in (("Protein", protein), ("Carbs", carbs), ("Fat", fat))
    ]


def _capped_progress(value: float, goal: float, cap: float) -> float:
    if goal <= 0:
        return 0.0
    return round(min(value / goal * 100, cap), 1)


def goal_achievement_series(
    days: Sequence[DailyNutrition],
    steps_logs: Sequence[StepsLog],
    profile: Mapping[str, Any],
) -> List[GoalAchievementDay]:
    calorie_goal = float(profile.get("daily_calories") or 0)
    steps_goal = float(profile.get("daily_steps_goal") or 0)
    steps_by_date = {}
    for log in steps_logs:
        steps_by_date.setdefault(log.logged_date, log.steps)

    series = []
    for day in sorted(days, key=lambda d: d.date):
        steps: Optional[int] = steps_by_date.get(day.date)
        series.append(
            GoalAchievementDay(
                date=day.date,
                calorie_progress=_capped_progress(day.calories, calorie_goal, PROGRESS_CAP),
                steps_progress=_capped_progress(steps, steps_goal, PROGRESS_CAP) if steps is not None else 0.0,
                calories=round_half_up(day.calories),
                steps=steps or 0,
            )
        )
    return series[-GOAL_SERIES_DAYS:]


def build_insights(summary: AnalyticsSummary, profile: Mapping[str, Any]) -> Insights:
    calorie_goal = float(profile.get("daily_calories") or 0)
    out = Insights()

    if summary.current_streak >= 7:
        out.nutrition.append(f"You're on a {summary.current_streak}-day streak within your calorie goal!")
    if summary.unique_foods >= 20:
        out.nutrition.append(f"Great food variety! You've logged {summary.unique_foods} different foods.")
    if summary.calorie_goal_rate >= 80:
        out.nutrition.append("Excellent calorie goal consistency!")
    if summary.avg_calories < calorie_goal * CALORIE_GOAL_LOW:
        out.nutrition.append("Consider increasing your calorie intake to meet your goals.")

    if summary.total_steps_logged > 100_000:
        out.activity.append(f"You've logged {round_half_up(summary.total_steps_logged / 1000)}K+ steps!")
    if summary.steps_goal_rate >= 70:
        out.activity.append("Outstanding step goal achievement rate!")
    if summary.most_active_day != "N/A":
        out.activity.append(f"{summary.most_active_day} is your most active day!")
    if summary.consistency_score >= 90:
        out.activity.append("Amazing consistency! You're building great habits.")
    return out


def goal_progress(consumed: float, goal: float) -> GoalProgress:
    percent = min(consumed / goal * 100, 100.0) if goal > 0 else 0.0
    return GoalProgress(
        consumed=round(consumed, 1),
        goal=goal,
        percent=round(max(percent, 0.0), 1),
        remaining=goal - round_half_up(consumed),
    )


def nutrition_progress(totals: LogTotals, profile: Mapping[str, Any]) -> Dict[str, GoalProgress]:
    return {
        "calories": goal_progress(totals.calories, float(profile.get("daily_calories") or 0)),
        "protein": goal_progress(totals.protein_g, float(profile.get("daily_protein_g") or 0)),
        "carbs": goal_progress(totals.carbs_g, float(profile.get("daily_carbs_g") or 0)),
        "fat": goal_progress(totals.fat_g, float(profile.get("daily_fat_g") or 0)),
    }


def dashboard_overview(
    profile: Mapping[str, Any],
    today_logs: Sequence[FoodLogEntry],
    today_steps: Optional[StepsLog],
) -> Dict[str, Any]:
    totals = sum_totals(list(today_logs))
    steps = today_steps.steps if today_steps else 0

    progress = nutrition_progress(totals, profile)
    progress["steps"] = goal_progress(float(steps), float(profile.get("daily_steps_goal") or 0))
    return {"totals": totals, "steps": steps, "progress": progress}
