from datetime import date

import pytest

from fittrack.errors import ValidationError
from fittrack.models import (
    BODY_WEIGHT,
    ENTITY_KINDS,
    GOAL,
    SLEEP_ENTRY,
    WATER_INTAKE,
    WORKOUT,
    editable_values,
    validate,
)

TODAY = date(2024, 1, 10)


def test_every_table_is_registered():
    assert {k.table for k in ENTITY_KINDS.values()} == {
        "workouts", "body_weight", "water_intake", "sleep_tracker", "goals",
    }


def test_templates():
    assert WORKOUT.template(TODAY) == {
        "date": "2024-01-10", "exercise_name": "", "sets": 0, "reps": 0,
        "weight": 0.0, "duration": 0.0, "notes": "",
    }
    assert WATER_INTAKE.template(TODAY)["amount_ml"] == 250
    assert SLEEP_ENTRY.template(TODAY)["duration_hr"] == 8.0
    goal = GOAL.template(TODAY)
    assert goal["deadline"] == "2024-02-09"
    assert goal["target_type"] == "weight"


def test_validate_coerces_and_keeps_only_form_fields():
    payload = validate(BODY_WEIGHT, {"date": date(2024, 1, 10), "weight": "70.5", "id": "x", "user_id": "u"})
    assert payload == {"date": "2024-01-10", "weight": 70.5}


def test_validate_optional_notes_become_none():
    payload = validate(SLEEP_ENTRY, {"date": "2024-01-10", "duration_hr": 7, "notes": "  "})
    assert payload["notes"] is None


@pytest.mark.parametrize("values,field", [
    ({"date": "2024-01-10", "weight": -1}, "weight"),
    ({"date": "", "weight": 70}, "date"),
    ({"date": "2024-01-10", "weight": "heavy"}, "weight"),
    ({"date": "2024-01-10", "weight": "nan"}, "weight"),
    ({"date": "2024-01-10", "weight": "inf"}, "weight"),
])
def test_validate_rejects(values, field):
    with pytest.raises(ValidationError) as exc:
        validate(BODY_WEIGHT, values)
    assert exc.value.field == field


def test_validate_requires_exercise_name():
    values = WORKOUT.template(TODAY)
    with pytest.raises(ValidationError, match="Exercise Name is required"):
        validate(WORKOUT, values)


def test_validate_goal_target_type_choices():
    values = dict(GOAL.template(TODAY), title="Run more", target_type="steps")
    with pytest.raises(ValidationError) as exc:
        validate(GOAL, values)
    assert exc.value.field == "target_type"


def test_editable_values_drops_server_columns():
    record = {"id": "1", "user_id": "u", "created_at": "t", "date": "2024-01-10",
              "duration_hr": 7.5, "notes": None}
    assert editable_values(SLEEP_ENTRY, record) == {"date": "2024-01-10", "duration_hr": 7.5, "notes": ""}
