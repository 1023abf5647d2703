"""
Page controllers: fetch -> shape -> render -> mutate -> refetch, for one
entity kind (PageController) or for the dashboard summary.

Controllers never render anything themselves; views read their state
(``rows``, ``loading``, ``form``, ``notifications``) and call back into them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional

from . import aggregation as agg
from .config import local_today
from .errors import StoreError, ValidationError
from .models import (
    BODY_WEIGHT,
    SLEEP_ENTRY,
    WATER_INTAKE,
    WORKOUT,
    Creating,
    Editing,
    EntityKind,
    FormState,
    editable_values,
    validate,
)
from .session import Identity, SessionProvider

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An unexpected error occurred"


@dataclass(frozen=True)
class Notification:
    level: str  # success | error | info
    message: str


class _Controller:
    def __init__(self, session: SessionProvider, today: Callable[[], date] = local_today):
        self.session = session
        self.today = today
        self.loading = True
        self.notifications: List[Notification] = []
        self._generation = 0
        self._unsubscribe = session.subscribe(self._on_identity_change)

    def close(self) -> None:
        self._unsubscribe()

    def notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level, message))

    def drain_notifications(self) -> List[Notification]:
        pending, self.notifications = self.notifications, []
        return pending

    def _on_identity_change(self, identity: Optional[Identity]) -> None:
        # Anything in flight belongs to the previous identity
        self._generation += 1
        if identity is None:
            self._clear()
            self.loading = True
        else:
            self.refresh()

    def _clear(self) -> None:
        raise NotImplementedError

    def _load(self, identity: Identity) -> Dict[str, object]:
        raise NotImplementedError

    def _apply(self, loaded: Dict[str, object]) -> None:
        raise NotImplementedError

    def _load_failed_message(self) -> str:
        raise NotImplementedError

    def refresh(self) -> bool:
        """
        Reload from the store. Returns True when fresh data was applied; a
        response superseded by a newer request or identity change is dropped.
        """
        identity = self.session.identity
        if identity is None:
            self.loading = True
            return False
        self._generation += 1
        generation = self._generation
        self.loading = True
        try:
            loaded = self._load(identity)
            if generation != self._generation:
                logger.debug("Discarding stale response (generation %s, current %s)", generation, self._generation)
                return False
            self._apply(loaded)
        except StoreError as e:
            if generation == self._generation:
                logger.error("%s: %s", self._load_failed_message(), e)
                self.notify("error", self._load_failed_message())
                self.loading = False
            return False
        except Exception:
            if generation == self._generation:
                logger.exception("Unexpected error while loading")
                self.notify("error", GENERIC_ERROR)
                self.loading = False
            return False
        self.loading = False
        return True


# -------------------------------
# Entity pages
# -------------------------------

class PageController(_Controller):
    def __init__(self, kind: EntityKind, store, session: SessionProvider, today: Callable[[], date] = local_today):
        self.kind = kind
        self.collection = store.collection(kind.table)
        self.rows: List[dict] = []
        self.form: Optional[FormState] = None
        self.form_error: Optional[str] = None
        self.pending_delete: Optional[str] = None
        super().__init__(session, today)

    def _clear(self) -> None:
        self.rows = []
        self.form = None
        self.form_error = None
        self.pending_delete = None

    def _load(self, identity: Identity) -> Dict[str, object]:
        rows = self.collection.list(
            filters={"user_id": identity.id},
            order_by=self.kind.order_by,
            ascending=self.kind.ascending,
        )
        return {"rows": rows}

    def _apply(self, loaded: Dict[str, object]) -> None:
        self.rows = list(loaded["rows"])

    def _load_failed_message(self) -> str:
        return f"Failed to load {self.kind.noun} data"

    # -------------------------------
    # Form
    # -------------------------------

    def open_create(self, **overrides) -> None:
        values = self.kind.template(self.today())
        values.update(overrides)
        self.form = Creating(values)
        self.form_error = None

    def open_edit(self, record: dict) -> None:
        self.form = Editing(str(record["id"]), editable_values(self.kind, record))
        self.form_error = None

    def set_values(self, **values) -> None:
        if self.form is None:
            return
        merged = dict(self.form.values, **values)
        if isinstance(self.form, Editing):
            self.form = Editing(self.form.record_id, merged)
        else:
            self.form = Creating(merged)

    def close_form(self) -> None:
        self.form = None
        self.form_error = None

    @property
    def editing(self) -> bool:
        return isinstance(self.form, Editing)

    def submit(self) -> bool:
        """
        Send the open form as an insert (create) or update (edit). On success
        the form closes and rows are refetched; otherwise the form and its
        values stay as they were.
        """
        form = self.form
        if form is None:
            return False
        identity = self.session.identity
        if identity is None:
            self.notify("error", "You need to be signed in")
            return False
        try:
            payload = validate(self.kind, form.values)
        except ValidationError as e:
            self.form_error = e.message
            self.notify("error", e.message)
            return False

        noun = self.kind.noun
        try:
            if isinstance(form, Editing):
                self.collection.update(form.record_id, payload)
            else:
                payload["user_id"] = identity.id
                self.collection.insert(payload)
        except StoreError as e:
            logger.error("Error saving %s: %s", noun, e)
            self.form_error = f"Failed to save {noun}"
            self.notify("error", self.form_error)
            return False
        except Exception:
            logger.exception("Unexpected error saving %s", noun)
            self.form_error = GENERIC_ERROR
            self.notify("error", GENERIC_ERROR)
            return False

        verb = "updated" if isinstance(form, Editing) else "added"
        self.close_form()
        self.notify("success", f"{noun.capitalize()} {verb} successfully")
        self.refresh()
        return True

    # -------------------------------
    # Delete
    # -------------------------------

    def request_delete(self, record_id: str) -> None:
        self.pending_delete = str(record_id)

    def cancel_delete(self) -> None:
        self.pending_delete = None

    def confirm_delete(self) -> bool:
        record_id = self.pending_delete
        if record_id is None:
            return False
        self.pending_delete = None
        noun = self.kind.noun
        try:
            self.collection.delete(record_id)
        except StoreError as e:
            logger.error("Error deleting %s %s: %s", noun, record_id, e)
            self.notify("error", f"Failed to delete {noun}")
            return False
        except Exception:
            logger.exception("Unexpected error deleting %s %s", noun, record_id)
            self.notify("error", GENERIC_ERROR)
            return False
        self.notify("success", f"{noun.capitalize()} deleted successfully")
        self.refresh()
        return True

    # -------------------------------
    # Display shaping
    # -------------------------------

    def chart_series(self) -> agg.Series:
        """Series for the page chart; rows are re-sorted here, not trusted from the store."""
        key = self.kind.key
        if key == BODY_WEIGHT.key:
            return agg.chronological_series(self.rows, value_key="weight")
        if key == SLEEP_ENTRY.key:
            return agg.chronological_series(self.rows, value_key="duration_hr")
        if key == WATER_INTAKE.key:
            totals = agg.daily_totals(self.rows, value_key="amount_ml", limit=7)
            return agg.scale_series(totals, 1 / agg.ML_PER_LITER)
        if key == WORKOUT.key:
            return agg.frequency_by_day(self.rows, self.today(), days=7)
        return []

    def display_rows(self) -> List[dict]:
        """Rows in table order, with derived display fields."""
        today = self.today()
        out = []
        for row in self.rows:
            row = dict(row)
            if "deadline" in row:
                row["expired"] = agg.is_expired(row["deadline"], today)
            if "duration_hr" in row:
                row["quality"] = agg.sleep_quality(float(row["duration_hr"]))
            if "amount_ml" in row:
                row["amount_l"] = agg.ml_to_liters(float(row["amount_ml"]))
            out.append(row)
        if self.kind.key == SLEEP_ENTRY.key:
            # Chart wants oldest first, cards newest first
            out.reverse()
        return out


# -------------------------------
# Dashboard
# -------------------------------

@dataclass
class DashboardStats:
    latest_weight: Optional[float] = None
    last_sleep: Optional[float] = None
    today_water_l: float = 0.0
    workout_today: bool = False


@dataclass
class DashboardCharts:
    weight: agg.Series = field(default_factory=list)
    water: agg.Series = field(default_factory=list)
    sleep: agg.Series = field(default_factory=list)
    workouts: List = field(default_factory=list)


class DashboardController(_Controller):
    RECENT_LIMIT = 10

    def __init__(self, store, session: SessionProvider, today: Callable[[], date] = local_today):
        self.store = store
        self.stats = DashboardStats()
        self.charts = DashboardCharts()
        super().__init__(session, today)

    def _clear(self) -> None:
        self.stats = DashboardStats()
        self.charts = DashboardCharts()

    def _load_failed_message(self) -> str:
        return "Failed to load dashboard data"

    def _recent(self, table: str, user_id: str) -> List[dict]:
        return self.store.collection(table).list(
            filters={"user_id": user_id}, order_by="date", ascending=False, limit=self.RECENT_LIMIT
        )

    def _load(self, identity: Identity) -> Dict[str, object]:
        today = self.today()
        uid = identity.id
        return {
            "today": today,
            "weights": self._recent(BODY_WEIGHT.table, uid),
            "sleep": self._recent(SLEEP_ENTRY.table, uid),
            "water": self._recent(WATER_INTAKE.table, uid),
            "water_today": self.store.collection(WATER_INTAKE.table).list(
                filters={"user_id": uid, "date": today.isoformat()}
            ),
            "workouts_today": self.store.collection(WORKOUT.table).list(
                filters={"user_id": uid, "date": today.isoformat()}, limit=1
            ),
            "workouts_week": self.store.collection(WORKOUT.table).list(
                filters={"user_id": uid},
                since=("date", (today - timedelta(days=7)).isoformat()),
                order_by="date",
                ascending=True,
                columns="date, id",
            ),
        }

    def _apply(self, loaded: Dict[str, object]) -> None:
        today = loaded["today"]
        self.stats = DashboardStats(
            latest_weight=agg.latest_value(loaded["weights"], value_key="weight"),
            last_sleep=agg.latest_value(loaded["sleep"], value_key="duration_hr"),
            today_water_l=agg.ml_to_liters(
                agg.total_for_day(loaded["water_today"], today, value_key="amount_ml")
            ),
            workout_today=agg.has_entry_on(loaded["workouts_today"], today),
        )
        self.charts = DashboardCharts(
            weight=agg.chronological_series(loaded["weights"], value_key="weight"),
            water=agg.scale_series(
                agg.chronological_series(loaded["water"], value_key="amount_ml"), 1 / agg.ML_PER_LITER
            ),
            sleep=agg.chronological_series(loaded["sleep"], value_key="duration_hr"),
            workouts=agg.frequency_by_day(loaded["workouts_week"], today, days=7),
        )
