"""Dashboard page: account counts and live system health."""
import streamlit as st

from psr_console.config import settings
from psr_console.security.session import VIEW_DASHBOARD
from psr_console.services.notifications import handle_api_response
from psr_console.state import SystemStatusMonitor

from shared import (
    admin_service,
    nav_badges,
    notifier,
    render_notifications,
    require_view,
    training_service,
)

require_view(VIEW_DASHBOARD)

st.title("📊 Dashboard")

if "status_monitor" not in st.session_state:
    st.session_state.status_monitor = SystemStatusMonitor(training_service())
monitor: SystemStatusMonitor = st.session_state.status_monitor
monitor.ensure_running()

# -----------------------------------------------------------
# Account counts
# -----------------------------------------------------------
stats = handle_api_response(
    notifier(), admin_service().get_dashboard,
    show_success=False, error_title="Could not load dashboard",
)
if stats is not None:
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("👥 Users", stats.total_users)
    col2.metric("🛠️ Engineers", stats.total_engineers)
    col3.metric("🧑‍💼 Customers", stats.total_customers)
    col4.metric("📝 Pending", nav_badges().get("applications", stats.pending_engineers))

    col5, col6, col7, col8 = st.columns(4)
    col5.metric("🛡️ Admins", stats.total_admins)
    col6.metric("✅ Approved", stats.approved_engineers)
    col7.metric("❌ Rejected", stats.rejected_engineers)
    col8.metric("🟢 Active", stats.active_users)


# -----------------------------------------------------------
# System health, re-read from the monitor on its own cadence
# -----------------------------------------------------------
@st.fragment(run_every=settings.status_poll_interval_seconds)
def system_status():
    st.subheader("System Status")
    if monitor.error:
        st.warning(f"Some services are unreachable: {monitor.error}")

    health = monitor.ai_health
    if health is not None:
        st.markdown(f"**Overall:** {health.overall_status}")
        cols = st.columns(max(len(health.services), 1))
        for col, (key, service) in zip(cols, health.services.items()):
            icon = "✅" if service.is_up else "❌"
            col.markdown(f"{icon} **{service.service or key}**")
            if service.error:
                col.caption(service.error)

    db = monitor.database_health
    if db is not None:
        if db.connected:
            st.markdown(f"✅ Database {db.database_name or ''} — {db.version or ''}")
            if db.total_connections is not None:
                st.caption(f"Connections: {db.total_connections} • Uptime: {db.uptime or 'n/a'}")
        else:
            st.markdown(f"❌ Database unavailable: {db.error or 'unknown error'}")

    if monitor.last_updated:
        st.caption(f"Last updated {monitor.last_updated:%H:%M:%S}")


system_status()

if st.button("🔄 Refresh now"):
    monitor.poller.refresh_now()
    st.rerun()

render_notifications()
