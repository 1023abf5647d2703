"""
Stateless Streamlit rendering units. They take data and return what the user
clicked; page views decide what that means.
"""
from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd
import streamlit as st

from .aggregation import ensure_date
from .controller import Notification, PageController
from .models import TARGET_TYPE_LABELS, Editing
from .routing import ROUTES

_TOAST_ICONS = {"success": "✅", "error": "❌", "info": "ℹ️"}


def navigate(path: str) -> None:
    st.query_params["page"] = path
    st.rerun()


def show_notifications(notifications: Iterable[Notification]) -> None:
    for n in notifications:
        st.toast(n.message, icon=_TOAST_ICONS.get(n.level))


def loading(message: str = "Loading...") -> None:
    st.info(f"🔄 {message}")


def page_header(title: str, subtitle: str, action_label: Optional[str] = None, key: str = "") -> bool:
    col1, col2 = st.columns([3, 1])
    with col1:
        st.header(title)
        st.caption(subtitle)
    clicked = False
    if action_label:
        with col2:
            clicked = st.button(f"➕ {action_label}", key=f"{key}_header_action", use_container_width=True, type="primary")
    return clicked


def stats_tile(title: str, value: str, key: str) -> bool:
    with st.container(border=True):
        st.metric(title, value)
        return st.button("Open →", key=key)


def empty_state(title: str, description: str, action_label: str, key: str) -> bool:
    with st.container(border=True):
        st.markdown(f"#### {title}")
        st.write(description)
        return st.button(action_label, key=key, type="primary")


def data_card(title: str, lines: Sequence[Tuple[str, str]], key: str, badge: Optional[str] = None) -> Tuple[bool, bool]:
    """Render one record; returns (edit_clicked, delete_clicked)."""
    with st.container(border=True):
        head, actions = st.columns([4, 1])
        with head:
            st.markdown(f"**{title}**")
            if badge:
                st.caption(badge)
        with actions:
            edit = st.button("✏️", key=f"{key}_edit", help="Edit")
            delete = st.button("🗑️", key=f"{key}_delete", help="Delete")
        for label, value in lines:
            st.markdown(f"<small>{label}:</small> {value}", unsafe_allow_html=True)
    return edit, delete


def confirm_delete(controller: PageController) -> None:
    if controller.pending_delete is None:
        return
    st.warning(f"Are you sure you want to delete this {controller.kind.noun}?")
    c1, c2 = st.columns(2)
    with c1:
        if st.button("Delete", key=f"{controller.kind.key}_confirm_delete", type="primary", use_container_width=True):
            controller.confirm_delete()
            st.rerun()
    with c2:
        if st.button("Cancel", key=f"{controller.kind.key}_cancel_delete", use_container_width=True):
            controller.cancel_delete()
            st.rerun()


def _field_widget(f, value, key: str):
    if f.kind == "date":
        return st.date_input(f.label, value=ensure_date(value) if value else date.today(), key=key)
    if f.kind == "text":
        return st.text_input(f.label, value=str(value or ""), key=key)
    if f.kind == "textarea":
        return st.text_area(f.label, value=str(value or ""), key=key)
    if f.kind == "choice":
        options = list(f.choices)
        index = options.index(value) if value in options else 0
        return st.selectbox(f.label, options, index=index, format_func=lambda v: TARGET_TYPE_LABELS.get(v, v), key=key)
    if f.kind == "int":
        return st.number_input(
            f.label,
            value=int(value or 0),
            min_value=int(f.min_value) if f.min_value is not None else None,
            step=int(f.step or 1),
            key=key,
        )
    return st.number_input(
        f.label,
        value=float(value or 0.0),
        min_value=float(f.min_value) if f.min_value is not None else None,
        step=float(f.step or 0.1),
        format="%.2f",
        key=key,
    )


def entity_form(controller: PageController) -> None:
    """Create/edit form for the controller's open record; no-op when closed."""
    form = controller.form
    if form is None:
        return
    kind = controller.kind
    editing = isinstance(form, Editing)
    token = form.record_id if editing else "new"
    title = f"{'Edit' if editing else 'Add'} {kind.noun.title()}"

    with st.form(key=f"{kind.key}_form_{token}"):
        st.subheader(title)
        entered = {}
        for f in kind.fields:
            entered[f.name] = _field_widget(f, form.values.get(f.name), key=f"{kind.key}_{token}_{f.name}")
        if controller.form_error:
            st.error(controller.form_error)
        c1, c2 = st.columns(2)
        with c1:
            save = st.form_submit_button("Update" if editing else "Save", type="primary", use_container_width=True)
        with c2:
            cancel = st.form_submit_button("Cancel", use_container_width=True)

    if cancel:
        controller.close_form()
        st.rerun()
    if save:
        controller.set_values(**entered)
        if controller.submit():
            st.rerun()


def export_button(rows: List[dict], columns: Sequence[str], file_name: str, key: str) -> None:
    df = pd.DataFrame(rows, columns=list(columns))
    st.download_button(
        "Export CSV",
        data=df.to_csv(index=False).encode("utf-8"),
        file_name=file_name,
        mime="text/csv",
        key=key,
    )


def nav(current_path: str, email: str) -> Optional[str]:
    """Sidebar navigation; returns the chosen path, or "logout"."""
    choice = None
    with st.sidebar:
        st.markdown("### 💪 FitTrack")
        st.caption(email)
        for route in ROUTES:
            if not route.in_nav:
                continue
            label = f"**{route.label}**" if route.path == current_path else route.label
            if st.button(label, key=f"nav_{route.path}", use_container_width=True):
                choice = route.path
        st.divider()
        if st.button("🚪 Logout", key="nav_logout", use_container_width=True):
            choice = "logout"
    return choice
