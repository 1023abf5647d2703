#!/usr/bin/env python3
"""
Run instructions
- Install the project (a virtualenv is recommended):
    pip install -e .
- Configure Supabase in .streamlit/secrets.toml (or the environment):
    SUPABASE_URL = "https://<project>.supabase.co"
    SUPABASE_ANON_KEY = "<anon key>"
- Run the app:
    streamlit run app.py

Notes
- Without Supabase credentials the app runs in guest mode only. Guest data is
  persisted to a JSON file (FITTRACK_GUEST_STORE, default ./guest_data.json);
  demo sessions get a month of generated sample data kept in memory.
- The current page lives in the ``page`` query parameter (``?page=/water``).
"""
from __future__ import annotations

import logging

import streamlit as st

from fittrack import config, views
from fittrack import components as ui
from fittrack.controller import DashboardController, PageController
from fittrack.demo_data import seed_demo_rows
from fittrack.models import ENTITY_KINDS
from fittrack.routing import AUTH_PATH, HOME_PATH, NOT_FOUND_PATH, resolve
from fittrack.session import DEMO_ID, SessionProvider
from fittrack.store import LocalStore, SupabaseStore, connect_supabase

config.setup_logging()
logger = logging.getLogger("fittrack.app")

PAGE_KINDS = {
    "/workouts": ENTITY_KINDS["workout"],
    "/weight": ENTITY_KINDS["weight"],
    "/water": ENTITY_KINDS["water"],
    "/sleep": ENTITY_KINDS["sleep"],
    "/goals": ENTITY_KINDS["goal"],
}


def _init_state() -> None:
    """One Supabase client and session provider per browser session."""
    if "session" in st.session_state:
        return
    client = None
    if config.SUPABASE_AVAILABLE:
        try:
            client = connect_supabase(config.SUPABASE_URL, config.SUPABASE_ANON_KEY)
        except Exception as e:
            logger.error("Supabase initialization failed: %s", e)
    st.session_state.supabase = client
    st.session_state.session = SessionProvider(client.auth if client is not None else None)
    st.session_state.stores = {}


def _store_for(identity):
    """Remote store for real accounts; local store for guest and demo."""
    stores = st.session_state.stores
    if identity.id in stores:
        return stores[identity.id]
    if not identity.guest:
        store = SupabaseStore(st.session_state.supabase)
    elif identity.id == DEMO_ID:
        store = LocalStore()
        seed_demo_rows(store, identity.id, config.local_today())
    else:
        store = LocalStore(config.GUEST_STORE_PATH)
    stores[identity.id] = store
    return store


def _mount(path: str, session: SessionProvider):
    """
    Controller for the page at ``path``. Navigating to a page (or switching
    identity) mounts a fresh controller, which fetches once on mount.
    """
    identity = session.identity
    key = (path, identity.id)
    mounted = st.session_state.get("_mounted")
    if mounted and mounted[0] == key:
        return mounted[1]
    if mounted:
        mounted[1].close()

    store = _store_for(identity)
    if path == HOME_PATH:
        controller = DashboardController(store, session, today=config.local_today)
    else:
        controller = PageController(PAGE_KINDS[path], store, session, today=config.local_today)
    controller.refresh()
    st.session_state._mounted = (key, controller)
    return controller


def _unmount() -> None:
    mounted = st.session_state.pop("_mounted", None)
    if mounted:
        mounted[1].close()


def main():
    st.set_page_config(page_title="FitTrack", page_icon="💪", layout="wide")
    _init_state()
    session: SessionProvider = st.session_state.session

    requested = st.query_params.get("page", HOME_PATH)
    path = resolve(requested, signed_in=session.identity is not None)
    if path != requested:
        st.query_params["page"] = path

    if path == AUTH_PATH:
        _unmount()
        views.render_auth(session)
        return

    if session.identity is not None:
        choice = ui.nav(path, session.identity.email)
        if choice == "logout":
            _unmount()
            result = session.sign_out()
            if not result.ok:
                st.error(f"Logout failed: {result.error}")
            ui.navigate(AUTH_PATH)
        elif choice is not None and choice != path:
            ui.navigate(choice)

    if path == NOT_FOUND_PATH:
        views.render_not_found()
        return

    controller = _mount(path, session)
    if path == HOME_PATH:
        views.render_dashboard(controller)
    else:
        views.PAGE_RENDERERS[path](controller)


main()
