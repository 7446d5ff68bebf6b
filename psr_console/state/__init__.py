"""View state shared by the Streamlit pages, kept free of Streamlit itself."""
from psr_console.state.applications import PendingApplicationsQueue
from psr_console.state.chat import ChatSession
from psr_console.state.pollers import POLLER_OWNERS, stop_background_pollers
from psr_console.state.system_status import SystemStatusMonitor
from psr_console.state.training import TrainingWorkspace

__all__ = [
    "ChatSession",
    "POLLER_OWNERS",
    "PendingApplicationsQueue",
    "SystemStatusMonitor",
    "TrainingWorkspace",
    "stop_background_pollers",
]
