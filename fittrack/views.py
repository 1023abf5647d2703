"""
Page renderers. Each entity page draws from its PageController; the
dashboard from a DashboardController.
"""
from __future__ import annotations

import streamlit as st

from . import charts
from . import components as ui
from .aggregation import LONG_LABEL, format_date_label
from .controller import DashboardController, PageController
from .models import TARGET_TYPE_LABELS, WATER_QUICK_AMOUNTS
from .session import SessionProvider

_QUALITY_BADGE = {"poor": "🔴", "fair": "🟠", "good": "🟢"}


def _fmt_number(value) -> str:
    value = float(value)
    return f"{value:g}"


def _recorded(value, unit: str) -> str:
    return "Not recorded" if value is None else f"{_fmt_number(value)} {unit}"


# -------------------------------
# Auth
# -------------------------------

def render_auth(session: SessionProvider) -> None:
    st.markdown("### Welcome to FitTrack")
    st.markdown("**Track workouts, weight, water, sleep and goals in one place.**")

    if not session.available:
        st.warning("⚠️ Supabase not configured. Running in guest mode only.")

    tab1, tab2, tab3 = st.tabs(["Sign In", "Sign Up", "Continue as Guest"])

    with tab1:
        email = st.text_input("Email", key="login_email")
        password = st.text_input("Password", type="password", key="login_password")
        if st.button("Sign In", key="login_btn", disabled=not session.available):
            result = session.sign_in(email, password)
            if result.ok:
                st.toast(result.message, icon="✅")
                ui.navigate("/")
            else:
                st.error(result.error)

    with tab2:
        email = st.text_input("Email", key="signup_email")
        password = st.text_input("Password", type="password", key="signup_password",
                                 help="At least 6 characters")
        if st.button("Sign Up", key="signup_btn", disabled=not session.available):
            result = session.sign_up(email, password)
            if not result.ok:
                st.error(result.error)
            elif session.identity is not None:
                st.toast(result.message, icon="✅")
                ui.navigate("/")
            else:
                st.success(result.message)

    with tab3:
        st.info("Guest data is kept on this machine only. Demo mode loads a month of sample data.")
        c1, c2 = st.columns(2)
        with c1:
            if st.button("Continue as Guest", key="guest_btn", use_container_width=True):
                session.continue_as_guest()
                ui.navigate("/")
        with c2:
            if st.button("🚀 Try the demo", key="demo_btn", use_container_width=True, type="primary"):
                session.continue_as_guest(demo=True)
                ui.navigate("/")


def render_not_found() -> None:
    st.header("404")
    st.write("The page you are looking for doesn't exist.")
    if st.button("Back to dashboard"):
        ui.navigate("/")


# -------------------------------
# Dashboard
# -------------------------------

def render_dashboard(controller: DashboardController) -> None:
    st.header("Welcome to your fitness dashboard")
    today = controller.today()
    st.caption(f"Today is {today:%A, %B %d, %Y}")
    ui.show_notifications(controller.drain_notifications())
    if controller.loading:
        ui.loading()
        return

    s = controller.stats
    tiles = [
        ("Latest Weight", _recorded(s.latest_weight, "kg"), "/weight"),
        ("Last Sleep", _recorded(s.last_sleep, "hrs"), "/sleep"),
        ("Today's Water", f"{s.today_water_l:g} L" if s.today_water_l > 0 else "Not recorded", "/water"),
        ("Workout Today", "Completed" if s.workout_today else "Not yet", "/workouts"),
    ]
    for col, (title, value, path) in zip(st.columns(4), tiles):
        with col:
            if ui.stats_tile(title, value, key=f"tile_{path}"):
                ui.navigate(path)

    c = controller.charts
    left, right = st.columns(2)
    with left:
        st.plotly_chart(charts.line_chart(c.weight, "Weight History", "Weight (kg)", "weight",
                                          "No weight data recorded yet."), use_container_width=True)
        st.plotly_chart(charts.line_chart(c.sleep, "Sleep Duration", "Hours", "sleep",
                                          "No sleep data recorded yet."), use_container_width=True)
    with right:
        st.plotly_chart(charts.line_chart(c.water, "Water Intake", "Water (L)", "water",
                                          "No water intake recorded yet."), use_container_width=True)
        st.plotly_chart(charts.bar_chart(c.workouts, "Workout Frequency", "Workouts", "workout",
                                         "No workout data recorded yet."), use_container_width=True)


# -------------------------------
# Entity pages
# -------------------------------

def _list_header(controller: PageController, subtitle: str, action: str) -> bool:
    return ui.page_header(controller.kind.title, subtitle, action, key=controller.kind.key)


def _cards(controller: PageController, rows, title_fn, lines_fn, badge_fn=None) -> None:
    cols = st.columns(2)
    for i, row in enumerate(rows):
        with cols[i % 2]:
            edit, delete = ui.data_card(
                title_fn(row), lines_fn(row), key=f"{controller.kind.key}_{row['id']}",
                badge=badge_fn(row) if badge_fn else None,
            )
            if edit:
                controller.open_edit(row)
                st.rerun()
            if delete:
                controller.request_delete(row["id"])
                st.rerun()


def _page_footer(controller: PageController) -> None:
    kind = controller.kind
    if controller.rows:
        columns = ["date"] if "date" in kind.field_names() else []
        columns += [n for n in kind.field_names() if n not in columns]
        ui.export_button(controller.rows, columns, f"{kind.table}_export.csv", key=f"{kind.key}_export")
    ui.show_notifications(controller.drain_notifications())


def render_workouts(controller: PageController) -> None:
    if _list_header(controller, "Track and manage your exercise activity", "Add Workout"):
        controller.open_create()
    if controller.loading:
        ui.loading()
        return
    ui.entity_form(controller)
    ui.confirm_delete(controller)

    if not controller.rows:
        if ui.empty_state("No workouts yet", "Start tracking your fitness journey by adding your first workout.",
                          "Add Your First Workout", key="workout_empty"):
            controller.open_create()
            st.rerun()
    else:
        st.plotly_chart(charts.bar_chart(controller.chart_series(), "Workouts (Last 7 Days)", "Workouts", "workout"),
                        use_container_width=True)
        _cards(
            controller,
            controller.display_rows(),
            title_fn=lambda w: w["exercise_name"],
            badge_fn=lambda w: format_date_label(w["date"], LONG_LABEL),
            lines_fn=lambda w: [
                ("Sets", str(w["sets"])),
                ("Reps", str(w["reps"])),
                ("Weight", f"{_fmt_number(w['weight'])} kg"),
                ("Duration", f"{_fmt_number(w['duration'])} min"),
            ] + ([("Notes", w["notes"])] if w.get("notes") else []),
        )
    _page_footer(controller)


def render_weight(controller: PageController) -> None:
    if _list_header(controller, "Monitor your body weight over time", "Log Weight"):
        controller.open_create()
    if controller.loading:
        ui.loading()
        return
    ui.entity_form(controller)
    ui.confirm_delete(controller)

    if not controller.rows:
        if ui.empty_state("No weight records yet", "Start tracking your weight by adding your first entry.",
                          "Add Your First Weight Record", key="weight_empty"):
            controller.open_create()
            st.rerun()
    else:
        st.plotly_chart(charts.line_chart(controller.chart_series(), "Weight Progress", "Weight (kg)", "weight"),
                        use_container_width=True)
        rows = list(reversed(controller.display_rows()))
        _cards(
            controller,
            rows,
            title_fn=lambda w: format_date_label(w["date"], LONG_LABEL),
            lines_fn=lambda w: [("Weight", f"{_fmt_number(w['weight'])} kg")],
        )
    _page_footer(controller)


def render_water(controller: PageController) -> None:
    if _list_header(controller, "Track your daily hydration", "Add Water"):
        controller.open_create()
    if controller.loading:
        ui.loading()
        return

    st.markdown("#### Quick Add")
    for col, amount in zip(st.columns(len(WATER_QUICK_AMOUNTS)), WATER_QUICK_AMOUNTS):
        with col:
            if st.button(f"💧 {amount} ml", key=f"water_quick_{amount}", use_container_width=True):
                controller.open_create(amount_ml=amount)
                st.rerun()

    ui.entity_form(controller)
    ui.confirm_delete(controller)

    if not controller.rows:
        if ui.empty_state("No water intake records yet",
                          "Start tracking your hydration by adding your first water intake.",
                          "Add Your First Water Intake", key="water_empty"):
            controller.open_create()
            st.rerun()
    else:
        st.plotly_chart(charts.bar_chart(controller.chart_series(), "Water Intake (Last 7 Days)", "Liters (L)", "water"),
                        use_container_width=True)
        _cards(
            controller,
            controller.display_rows(),
            title_fn=lambda w: format_date_label(w["date"], LONG_LABEL),
            lines_fn=lambda w: [("Amount", f"{w['amount_ml']} ml ({w['amount_l']:.2f} L)")],
        )
    _page_footer(controller)


def render_sleep(controller: PageController) -> None:
    if _list_header(controller, "Monitor your sleep patterns", "Add Sleep"):
        controller.open_create()
    if controller.loading:
        ui.loading()
        return
    ui.entity_form(controller)
    ui.confirm_delete(controller)

    if not controller.rows:
        if ui.empty_state("No sleep records yet", "Start tracking your sleep by adding your first entry.",
                          "Add Your First Sleep Record", key="sleep_empty"):
            controller.open_create()
            st.rerun()
    else:
        st.plotly_chart(charts.line_chart(controller.chart_series(), "Sleep Duration", "Hours", "sleep",
                                          y_range=(4, 12)), use_container_width=True)
        _cards(
            controller,
            controller.display_rows(),
            title_fn=lambda s: format_date_label(s["date"], LONG_LABEL),
            badge_fn=lambda s: f"{_QUALITY_BADGE[s['quality']]} {_fmt_number(s['duration_hr'])} hours",
            lines_fn=lambda s: [("Notes", s["notes"])] if s.get("notes") else [],
        )
    _page_footer(controller)


def render_goals(controller: PageController) -> None:
    if _list_header(controller, "Set and track your fitness targets", "Add Goal"):
        controller.open_create()
    if controller.loading:
        ui.loading()
        return
    ui.entity_form(controller)
    ui.confirm_delete(controller)

    if not controller.rows:
        if ui.empty_state("No goals yet", "Set your first fitness goal to stay motivated.",
                          "Add Your First Goal", key="goal_empty"):
            controller.open_create()
            st.rerun()
    else:
        _cards(
            controller,
            controller.display_rows(),
            title_fn=lambda g: g["title"],
            badge_fn=lambda g: TARGET_TYPE_LABELS.get(g["target_type"], g["target_type"]),
            lines_fn=lambda g: [
                ("Target", _fmt_number(g["target_value"])),
                ("Deadline", format_date_label(g["deadline"], LONG_LABEL) + (" (Expired)" if g["expired"] else "")),
            ] + ([("Notes", g["notes"])] if g.get("notes") else []),
        )
    _page_footer(controller)


PAGE_RENDERERS = {
    "/workouts": render_workouts,
    "/weight": render_weight,
    "/water": render_water,
    "/sleep": render_sleep,
    "/goals": render_goals,
}
