from datetime import date

import pytest

from fittrack.controller import DashboardController, PageController
from fittrack.errors import StoreError
from fittrack.models import BODY_WEIGHT, GOAL, SLEEP_ENTRY, WATER_INTAKE, WORKOUT, Creating, Editing

from conftest import TODAY


def _today():
    return TODAY


def make(kind, store, session):
    controller = PageController(kind, store, session, today=_today)
    controller.refresh()
    return controller


def add(controller, **values):
    controller.open_create()
    controller.set_values(**values)
    assert controller.submit(), controller.form_error


def test_logged_weight_shows_in_chart(store, session):
    page = make(BODY_WEIGHT, store, session)
    assert page.rows == []
    add(page, date="2024-01-10", weight="70")
    assert ("Jan 10", 70.0) in page.chart_series()
    assert page.form is None
    assert [n.message for n in page.drain_notifications()] == ["Weight record added successfully"]


def test_water_same_day_is_summed(store, session):
    page = make(WATER_INTAKE, store, session)
    add(page, date="2024-01-10", amount_ml=300)
    add(page, date="2024-01-10", amount_ml=200)
    assert page.chart_series() == [("Jan 10", pytest.approx(0.5))]


def test_workout_chart_covers_last_week(store, session):
    page = make(WORKOUT, store, session)
    add(page, exercise_name="Squat", sets=3, reps=5, weight=100, duration=30)
    series = page.chart_series()
    assert len(series) == 7
    assert series[-1] == ("Jan 10", 1)


def test_rows_are_scoped_to_signed_in_user(store, session):
    store.collection("body_weight").insert({"user_id": "someone-else", "date": "2024-01-10", "weight": 90})
    page = make(BODY_WEIGHT, store, session)
    assert page.rows == []


def test_validation_error_keeps_form_open(store, session):
    page = make(BODY_WEIGHT, store, session)
    page.open_create()
    page.set_values(weight="heavy")
    assert not page.submit()
    assert isinstance(page.form, Creating)
    assert page.form.values["weight"] == "heavy"
    assert page.form_error
    assert store.collection("body_weight").list() == []


def test_edit_updates_existing_record(store, session):
    page = make(SLEEP_ENTRY, store, session)
    add(page, date="2024-01-09", duration_hr=6)
    page.open_edit(page.rows[0])
    assert isinstance(page.form, Editing)
    page.set_values(duration_hr="7.5")
    assert page.submit()
    assert [r["duration_hr"] for r in page.rows] == [7.5]
    assert page.drain_notifications()[-1].message == "Sleep record updated successfully"


def test_store_failure_keeps_form(store, session):
    page = make(GOAL, store, session)
    page.open_create()
    page.set_values(title="Run 10k", target_value=10)

    def broken(row):
        raise StoreError("insert refused", "goals")

    page.collection.insert = broken
    assert not page.submit()
    assert page.form is not None
    assert page.form_error == "Failed to save goal"


def test_delete_requires_confirmation(store, session):
    page = make(WORKOUT, store, session)
    add(page, exercise_name="Row", sets=1, reps=1, weight=0, duration=20)
    record_id = page.rows[0]["id"]
    page.request_delete(record_id)
    page.cancel_delete()
    assert len(page.rows) == 1
    page.request_delete(record_id)
    assert page.confirm_delete()
    assert page.rows == []
    assert page.drain_notifications()[-1].message == "Workout deleted successfully"


def test_load_failure_notifies(store, session):
    page = PageController(BODY_WEIGHT, store, session, today=_today)

    def broken(**kwargs):
        raise StoreError("timeout", "body_weight")

    page.collection.list = broken
    assert not page.refresh()
    assert not page.loading
    assert [n.message for n in page.drain_notifications()] == ["Failed to load weight record data"]


def test_stale_response_is_discarded(store, session):
    store.collection("body_weight").insert({"user_id": session.identity.id, "date": "2024-01-10", "weight": 70})
    page = PageController(BODY_WEIGHT, store, session, today=_today)
    original = page.collection.list

    def slow_list(**kwargs):
        rows = original(**kwargs)
        # identity changes while this request is still in flight
        session.sign_out()
        return rows

    page.collection.list = slow_list
    assert not page.refresh()
    assert page.rows == []
    assert page.loading


def test_identity_change_refetches(store, session, auth):
    store.collection("goals").insert({"user_id": "user-bo@example.com", "title": "Sleep more",
                                      "target_type": "sleep", "target_value": 8, "deadline": "2024-02-01"})
    page = make(GOAL, store, session)
    assert page.rows == []
    session.sign_out()
    session.sign_in("bo@example.com", "secret123")
    assert [r["title"] for r in page.rows] == ["Sleep more"]
    page.close()


def test_goal_display_marks_expired(store, session):
    page = make(GOAL, store, session)
    add(page, title="Old", target_value=1, deadline="2024-01-01")
    add(page, title="New", target_value=1, deadline="2024-01-10")
    flags = {r["title"]: r["expired"] for r in page.display_rows()}
    assert flags == {"Old": True, "New": False}


def test_dashboard_stats(store, session):
    uid = session.identity.id
    store.collection("body_weight").insert({"user_id": uid, "date": "2024-01-08", "weight": 72})
    store.collection("body_weight").insert({"user_id": uid, "date": "2024-01-09", "weight": 71.5})
    store.collection("water_intake").insert({"user_id": uid, "date": "2024-01-10", "amount_ml": 750})
    store.collection("water_intake").insert({"user_id": uid, "date": "2024-01-10", "amount_ml": 500})
    store.collection("water_intake").insert({"user_id": uid, "date": "2024-01-09", "amount_ml": 2000})
    store.collection("sleep_tracker").insert({"user_id": uid, "date": "2024-01-09", "duration_hr": 6.5})
    store.collection("workouts").insert({"user_id": uid, "date": "2024-01-05", "exercise_name": "Bench"})

    dash = DashboardController(store, session, today=_today)
    assert dash.refresh()
    assert dash.stats.latest_weight == 71.5
    assert dash.stats.last_sleep == 6.5
    assert dash.stats.today_water_l == pytest.approx(1.25)
    assert dash.stats.workout_today is False
    assert [label for label, _ in dash.charts.weight] == ["Jan 08", "Jan 09"]
    assert sum(count for _, count in dash.charts.workouts) == 1


def test_dashboard_empty_store(store, session):
    dash = DashboardController(store, session, today=_today)
    dash.refresh()
    assert dash.stats.latest_weight is None
    assert dash.stats.today_water_l == 0
    assert dash.charts.weight == []
    assert [count for _, count in dash.charts.workouts] == [0] * 7


def test_delete_failure_keeps_rows(store, session):
    page = make(WORKOUT, store, session)
    add(page, exercise_name="Row", sets=1, reps=1, weight=0, duration=20)
    page.drain_notifications()
    rows_before = list(page.rows)

    def broken(record_id):
        raise StoreError("delete refused", "workouts")

    page.collection.delete = broken
    page.request_delete(rows_before[0]["id"])
    assert not page.confirm_delete()
    assert page.rows == rows_before
    assert [n.message for n in page.drain_notifications()] == ["Failed to delete workout"]


def test_update_failure_keeps_editing_form(store, session):
    page = make(BODY_WEIGHT, store, session)
    add(page, date="2024-01-10", weight=70)
    record = page.rows[0]
    page.open_edit(record)
    page.set_values(weight="68.5")

    def broken(record_id, row):
        raise StoreError("update refused", "body_weight")

    page.collection.update = broken
    assert not page.submit()
    assert isinstance(page.form, Editing)
    assert page.form.record_id == record["id"]
    assert page.form.values["weight"] == "68.5"
    assert page.form_error == "Failed to save weight record"
    assert [r["weight"] for r in page.rows] == [70.0]


def test_bad_row_while_shaping_is_reported(store, session):
    store.collection("water_intake").insert({"user_id": session.identity.id, "date": "2024-01-10", "amount_ml": None})
    dash = DashboardController(store, session, today=_today)
    assert not dash.refresh()
    assert not dash.loading
    assert [n.message for n in dash.drain_notifications()] == ["An unexpected error occurred"]
