import logging
import uuid

import streamlit as st

import config
from infrastructure.api.api_client import ApiClient
from infrastructure.api.procurement_api import ProcurementApi
from infrastructure.repositories.sqlite_session_repository import SQLiteSessionStore
from infrastructure.storage.session_store import StreamlitSessionStore
from use_cases.domain_models import DateFilter

"""
SESSION STATE CONTRACT

st.session_state keys owned by the dashboard:

api_client: ApiClient | None
    per-browser-session API client
    default: None
    owner: session_manager

session_id: str
    random id scoping this browser session's rows in the SQLite store
    default: uuid4 hex
    owner: session_manager

api_session: dict
    access token, refresh token and user snapshot (StreamlitSessionStore)
    default: {}
    owner: ApiClient via StreamlitSessionStore

date_filter: DateFilter
    filter shared by the dashboard pages
    default: DateFilter(type="last6months")
    owner: views.date_filter_view

granularity: str
    chart bucket size
    default: "month"
    owner: app
"""

log = logging.getLogger(__name__)


def init_session_state():
    if 'api_client' not in st.session_state:
        st.session_state.api_client = None
    if 'session_id' not in st.session_state:
        st.session_state.session_id = uuid.uuid4().hex
    if 'date_filter' not in st.session_state:
        st.session_state.date_filter = DateFilter()
    if 'granularity' not in st.session_state:
        st.session_state.granularity = "month"


def _build_store():
    if config.session_backend() == "sqlite":
        return SQLiteSessionStore(config.session_db_path(), st.session_state.session_id)
    return StreamlitSessionStore()


def get_api_client() -> ApiClient:
    init_session_state()
    if st.session_state.api_client is None:
        st.session_state.api_client = ApiClient(store=_build_store())
        log.debug("API client created for this session")
    return st.session_state.api_client


def get_procurement_api() -> ProcurementApi:
    return ProcurementApi(get_api_client())


def logout():
    get_api_client().logout()
    st.rerun()
