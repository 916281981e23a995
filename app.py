import streamlit as st

from infrastructure.observability import setup_observability
setup_observability()

from datetime import datetime, timezone

from infrastructure.api.api_client import ApiError, SessionExpiredError
from services import analytics_service, sorting_service
from use_cases import auth_flow, report_flow
from use_cases.domain_models import GRANULARITIES
from use_cases.session_models import display_name
from utils import session_manager
from views import date_filter_view, login_view

st.set_page_config(page_title="Procurement Dashboard", layout="wide", initial_sidebar_state="expanded")

# Health Check (Basic load-balancer heartbeat)
if st.query_params.get("health") == "1":
    st.write({"status": "ok", "version": "1.0", "uptime": datetime.now(timezone.utc).isoformat()})
    st.stop()

auth_result = auth_flow.ensure_authenticated_session()
if auth_result.status == "STOP":
    login_view.render_auth_screen()
    st.stop()

client = session_manager.get_api_client()
procurement = session_manager.get_procurement_api()

with st.sidebar:
    st.markdown(f"**{display_name(client.get_current_user())}**")
    if st.button("Sign out"):
        session_manager.logout()

st.title("📦 Purchase Requisitions")

c_filter, c_granularity = st.columns([3, 1])
with c_filter:
    st.session_state.date_filter = date_filter_view.render_date_filter(st.session_state.date_filter)
with c_granularity:
    st.session_state.granularity = st.selectbox(
        "Group by",
        list(GRANULARITIES),
        index=list(GRANULARITIES).index(st.session_state.granularity),
        label_visibility="collapsed",
    )

try:
    prs = procurement.list_prs(limit=500).data
except SessionExpiredError:
    login_view.render_auth_screen(expired=True)
    st.stop()
except ApiError as e:
    st.error(f"Could not load purchase requisitions: {e}")
    st.stop()

report = report_flow.build_period_report(prs, st.session_state.date_filter, st.session_state.granularity)
st.caption(f"{report.label} · {len(report.records)} of {len(prs)} requisitions")

if report.is_empty:
    st.info("No purchase requisitions in the selected period.")
    st.stop()

c_chart, c_status = st.columns([2, 1])
with c_chart:
    st.bar_chart(report.frame.set_index("period")["count"])
with c_status:
    st.dataframe(analytics_service.compute_status_breakdown(report.records), hide_index=True)

sort_key = st.selectbox("Sort by", ["createdAt", "prNumber", "status", "project.name"], index=0)
direction = st.radio("Direction", ["desc", "asc"], horizontal=True)
rows = sorting_service.sort_records(report.records, sort_key, direction)
st.dataframe(
    analytics_service.records_to_frame(rows, ["prNumber", "prType", "status", "createdAt"]),
    use_container_width=True,
    hide_index=True,
)
