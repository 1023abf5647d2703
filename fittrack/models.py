"""
Entity kinds tracked by the app and the form model used to edit them.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from dateutil import parser as dateparser

from .errors import ValidationError

class TargetType(str, Enum):
    WEIGHT = "weight"
    WORKOUT = "workout"
    WATER = "water"
    SLEEP = "sleep"


TARGET_TYPE_LABELS: Dict[str, str] = {
    TargetType.WEIGHT.value: "Weight (kg)",
    TargetType.WORKOUT.value: "Workouts per week",
    TargetType.WATER.value: "Daily water intake (L)",
    TargetType.SLEEP.value: "Sleep duration (hrs)",
}

WATER_QUICK_AMOUNTS = (250, 500, 750, 1000)


@dataclass(frozen=True)
class Field:
    name: str
    label: str
    kind: str = "float"  # date | text | textarea | int | float | choice
    required: bool = True
    min_value: Optional[float] = None
    step: Optional[float] = None
    choices: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EntityKind:
    key: str
    table: str
    title: str
    noun: str
    fields: Tuple[Field, ...]
    order_by: str = "date"
    ascending: bool = False
    defaults: Dict[str, object] = field(default_factory=dict)
    # Days from today for date fields that don't default to today
    date_offsets: Dict[str, int] = field(default_factory=dict)

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def template(self, today: date) -> Dict[str, object]:
        """Blank values for a new record."""
        values: Dict[str, object] = {}
        for f in self.fields:
            if f.kind == "date":
                values[f.name] = (today + timedelta(days=self.date_offsets.get(f.name, 0))).isoformat()
            else:
                values[f.name] = self.defaults.get(f.name, _EMPTY[f.kind])
        return values


_EMPTY = {"text": "", "textarea": "", "int": 0, "float": 0.0, "choice": "", "date": ""}


WORKOUT = EntityKind(
    key="workout",
    table="workouts",
    title="Workout Tracker",
    noun="workout",
    fields=(
        Field("date", "Date", "date"),
        Field("exercise_name", "Exercise Name", "text"),
        Field("sets", "Sets", "int", min_value=0),
        Field("reps", "Reps", "int", min_value=0),
        Field("weight", "Weight (kg)", "float", min_value=0, step=0.1),
        Field("duration", "Duration (min)", "float", min_value=0, step=0.5),
        Field("notes", "Notes (optional)", "textarea", required=False),
    ),
    order_by="date",
    ascending=False,
)

BODY_WEIGHT = EntityKind(
    key="weight",
    table="body_weight",
    title="Weight Tracker",
    noun="weight record",
    fields=(
        Field("date", "Date", "date"),
        Field("weight", "Weight (kg)", "float", min_value=0, step=0.1),
    ),
    order_by="date",
    ascending=True,
)

WATER_INTAKE = EntityKind(
    key="water",
    table="water_intake",
    title="Water Intake Tracker",
    noun="water intake",
    fields=(
        Field("date", "Date", "date"),
        Field("amount_ml", "Amount (ml)", "int", min_value=0, step=50),
    ),
    order_by="date",
    ascending=False,
    defaults={"amount_ml": 250},
)

SLEEP_ENTRY = EntityKind(
    key="sleep",
    table="sleep_tracker",
    title="Sleep Tracker",
    noun="sleep record",
    fields=(
        Field("date", "Date", "date"),
        Field("duration_hr", "Duration (hours)", "float", min_value=0, step=0.25),
        Field("notes", "Notes (optional)", "textarea", required=False),
    ),
    order_by="date",
    ascending=True,
    defaults={"duration_hr": 8.0},
)

GOAL = EntityKind(
    key="goal",
    table="goals",
    title="Fitness Goals",
    noun="goal",
    fields=(
        Field("title", "Goal Title", "text"),
        Field("target_type", "Target Type", "choice", choices=tuple(t.value for t in TargetType)),
        Field("target_value", "Target Value", "float", min_value=0, step=0.1),
        Field("deadline", "Deadline", "date"),
        Field("notes", "Notes (optional)", "textarea", required=False),
    ),
    order_by="deadline",
    ascending=True,
    defaults={"target_type": TargetType.WEIGHT.value},
    date_offsets={"deadline": 30},
)

ENTITY_KINDS: Dict[str, EntityKind] = {k.key: k for k in (WORKOUT, BODY_WEIGHT, WATER_INTAKE, SLEEP_ENTRY, GOAL)}


# -------------------------------
# Form state
# -------------------------------

@dataclass(frozen=True)
class Creating:
    values: Dict[str, object]


@dataclass(frozen=True)
class Editing:
    record_id: str
    values: Dict[str, object]


FormState = Union[Creating, Editing]


def editable_values(kind: EntityKind, record: Dict[str, object]) -> Dict[str, object]:
    """Copy of a stored record restricted to the kind's form fields."""
    values = {}
    for f in kind.fields:
        v = record.get(f.name)
        if v is None and not f.required:
            v = ""
        values[f.name] = v
    return values


# -------------------------------
# Validation
# -------------------------------

def _coerce(f: Field, raw):
    if f.kind == "date":
        if hasattr(raw, "isoformat"):
            return raw.isoformat()[:10]
        return dateparser.parse(str(raw)).date().isoformat()
    if f.kind == "int":
        return int(raw)
    if f.kind == "float":
        return float(raw)
    return str(raw).strip()


def validate(kind: EntityKind, values: Dict[str, object]) -> Dict[str, object]:
    """
    Check required fields and minimum values, returning a clean payload with
    only the kind's fields. Raises ValidationError on the first bad field.
    """
    payload: Dict[str, object] = {}
    for f in kind.fields:
        raw = values.get(f.name)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            if f.required:
                raise ValidationError(f.name, f"{f.label} is required")
            payload[f.name] = None
            continue
        try:
            value = _coerce(f, raw)
        except (TypeError, ValueError, OverflowError):
            raise ValidationError(f.name, f"{f.label} is not valid")
        if f.kind == "float" and not math.isfinite(value):
            raise ValidationError(f.name, f"{f.label} is not valid")
        if f.min_value is not None and value < f.min_value:
            raise ValidationError(f.name, f"{f.label} must be at least {f.min_value:g}")
        if f.choices and value not in f.choices:
            raise ValidationError(f.name, f"{f.label} must be one of: {', '.join(f.choices)}")
        payload[f.name] = value
    return payload
