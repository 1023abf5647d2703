"""
Synthetic history for demo sessions: ~30 days of weights, water, sleep and
workouts with a few gaps, plus two goals (one already past its deadline).
"""
from __future__ import annotations

import random
from datetime import date, timedelta
from typing import Optional

from .models import BODY_WEIGHT, GOAL, SLEEP_ENTRY, WATER_INTAKE, WORKOUT, TargetType

EXERCISES = ("Bench Press", "Squat", "Deadlift", "Overhead Press", "Row", "Running")


def seed_demo_rows(store, user_id: str, today: date, days: int = 30, seed: Optional[int] = None) -> None:
    rng = random.Random(seed)
    start = today - timedelta(days=days - 1)

    # Pick some gap start indices
    gap_starts = set(rng.sample(range(0, max(1, days - 5)), min(3, max(1, days - 5))))

    weights = store.collection(BODY_WEIGHT.table)
    water = store.collection(WATER_INTAKE.table)
    sleep = store.collection(SLEEP_ENTRY.table)
    workouts = store.collection(WORKOUT.table)

    i = 0
    while i < days:
        if i in gap_starts:
            i += rng.randint(1, 3)
            continue
        day = (start + timedelta(days=i)).isoformat()

        # Gentle downward trend, ~2 kg over the period
        trend = -2.0 * (i / days)
        weights.insert({"user_id": user_id, "date": day, "weight": round(82.0 + trend + rng.uniform(-0.6, 0.6), 1)})

        for _ in range(rng.randint(1, 4)):
            water.insert({"user_id": user_id, "date": day, "amount_ml": rng.choice((250, 500, 750))})

        sleep.insert({"user_id": user_id, "date": day, "duration_hr": rng.choice((5.5, 6.25, 7, 7.5, 8, 8.5)), "notes": ""})

        if rng.random() < 0.5:
            workouts.insert({
                "user_id": user_id,
                "date": day,
                "exercise_name": rng.choice(EXERCISES),
                "sets": rng.randint(3, 5),
                "reps": rng.randint(5, 12),
                "weight": float(rng.randrange(20, 120, 5)),
                "duration": float(rng.randrange(20, 75, 5)),
                "notes": "",
            })
        i += 1

    goals = store.collection(GOAL.table)
    goals.insert({
        "user_id": user_id,
        "title": "Reach 78 kg",
        "target_type": TargetType.WEIGHT.value,
        "target_value": 78.0,
        "deadline": (today + timedelta(days=60)).isoformat(),
        "notes": "",
    })
    goals.insert({
        "user_id": user_id,
        "title": "Drink 2.5 L a day",
        "target_type": TargetType.WATER.value,
        "target_value": 2.5,
        "deadline": (today - timedelta(days=3)).isoformat(),
        "notes": "Missed, try again",
    })
