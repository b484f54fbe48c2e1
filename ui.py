import time
from typing import Any, Dict, Optional, Tuple

import requests
import streamlit as st

from app.client import UserApiClient
from app.errors import UserStoreError
from app.models import User
from app.settings import get_settings

st.set_page_config(page_title="User Record Store", layout="centered")

settings = get_settings()
API_BASE_URL = settings.api_base_url
client = UserApiClient(API_BASE_URL, timeout_seconds=settings.api_timeout_seconds)

st.title("User Record Store")
st.caption("Create, edit and delete user records")


def _healthcheck(base_url: str) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    """Returns (ok, message, json_payload_if_any). Never raises."""
    try:
        resp = requests.get(f"{base_url}/healthz", timeout=2)
        if resp.status_code != 200:
            return False, f"HTTP {resp.status_code}", None
        try:
            payload = resp.json()
        except ValueError:
            payload = None
        return True, "Healthy", payload
    except requests.exceptions.RequestException as e:
        return False, f"Not reachable: {e.__class__.__name__}", None


# --- Sidebar: backend status ---
with st.sidebar:
    st.subheader("Backend")
    st.write("API:", API_BASE_URL)

    # Small cache so we don't spam /healthz on every widget interaction.
    now = time.time()
    last_ts = st.session_state.get("health_ts", 0.0)
    if st.button("Refresh status") or (now - last_ts) > 3:
        ok, msg, payload = _healthcheck(API_BASE_URL)
        st.session_state["health_ok"] = ok
        st.session_state["health_msg"] = msg
        st.session_state["health_payload"] = payload
        st.session_state["health_ts"] = now

    ok = st.session_state.get("health_ok", False)
    msg = st.session_state.get("health_msg", "Unknown")
    payload = st.session_state.get("health_payload")

    if ok:
        st.success(f"Status: {msg}")
        if isinstance(payload, dict):
            st.caption(f"Records: {payload.get('records', '?')} | Version: {payload.get('version', 'unknown')}")
    else:
        st.error(f"Status: {msg}")
        st.caption("Start the API with: uvicorn app.main:app --reload")

# --- Create ---
st.subheader("New user")
with st.form("create_user", clear_on_submit=True):
    username = st.text_input("Username")
    email = st.text_input("Email")
    name = st.text_input("Name")
    if st.form_submit_button("Create"):
        try:
            created = client.create(User(username=username, email=email, name=name))
            st.success(f"Created {created.username} ({created.id})")
        except UserStoreError as e:
            st.error(str(e))

# --- List / edit ---
st.subheader("Users")
try:
    users = client.list()
except UserStoreError as e:
    users = []
    st.error(str(e))

if not users:
    st.info("No users yet.")

for user in users:
    with st.expander(f"{user.username} <{user.email}> v{user.version}"):
        new_name = st.text_input("Name", value=user.name, key=f"name-{user.id}")
        col_save, col_delete = st.columns(2)
        with col_save:
            if st.button("Save", key=f"save-{user.id}"):
                # Sends the version that was read; a concurrent edit surfaces as a conflict.
                try:
                    updated = client.update(user.model_copy(update={"name": new_name}))
                    st.success(f"Saved (version {updated.version})")
                except UserStoreError as e:
                    st.error(str(e))
        with col_delete:
            if st.button("Delete", key=f"delete-{user.id}"):
                try:
                    client.delete(user.id or "")
                except UserStoreError as e:
                    st.error(str(e))
                else:
                    st.rerun()
