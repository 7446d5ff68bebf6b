"""Training page: upload documents, start training and watch jobs."""
import streamlit as st

from psr_console.config import settings
from psr_console.models import JobStatus, TrainingConfig
from psr_console.security.session import VIEW_TRAINING
from psr_console.state import TrainingWorkspace

from shared import notifier, render_notifications, require_view, training_service

require_view(VIEW_TRAINING)

st.title("🧠 AI Training")

if "training_workspace" not in st.session_state:
    workspace = TrainingWorkspace(training_service(), notifier())
    workspace.load_files()
    workspace.load_jobs()
    st.session_state.training_workspace = workspace
workspace: TrainingWorkspace = st.session_state.training_workspace
workspace.resume()

STATUS_ICONS = {
    JobStatus.QUEUED: "🕒",
    JobStatus.INITIALIZING: "⚙️",
    JobStatus.RUNNING: "🔄",
    JobStatus.COMPLETED: "✅",
    JobStatus.FAILED: "❌",
}

# -----------------------------------------------------------
# Upload
# -----------------------------------------------------------
st.subheader("Upload Training Data")
uploads = st.file_uploader(
    "Choose files",
    type=[ext.lstrip(".") for ext in settings.allowed_upload_extensions],
    accept_multiple_files=True,
    help=f"Max {settings.max_upload_size_mb}MB per file",
)
if uploads and st.button("📤 Upload", type="primary"):
    with st.spinner(f"Uploading {len(uploads)} file(s)..."):
        workspace.upload([(f.name, f.getvalue(), f.type) for f in uploads])
    st.rerun()

# -----------------------------------------------------------
# Uploaded files
# -----------------------------------------------------------
st.subheader(f"Training Files ({len(workspace.uploaded_files)})")
selected = []
for f in workspace.uploaded_files:
    col1, col2, col3 = st.columns([4, 1, 1])
    size = f"{f.size / 1024:.1f} KB" if f.size else ""
    if col1.checkbox(f"📄 {f.name} {size}", key=f"select_{f.id}"):
        selected.append(f.id)
    if col2.button("👁️", key=f"preview_{f.id}", help="Preview"):
        preview = workspace.preview(f.id)
        if preview is not None:
            st.session_state.training_preview = (f.name, preview.content)
    if col3.button("🗑️", key=f"delete_{f.id}", help="Delete"):
        workspace.delete_file(f.id)
        st.rerun()

if selected and st.button(f"🗑️ Delete {len(selected)} selected"):
    workspace.delete_files(selected)
    st.rerun()

if "training_preview" in st.session_state:
    name, content = st.session_state.training_preview
    with st.expander(f"Preview: {name}", expanded=True):
        st.text(content[:5000])
        if st.button("Close preview"):
            del st.session_state.training_preview
            st.rerun()

# -----------------------------------------------------------
# Start training
# -----------------------------------------------------------
st.subheader("Start Training")
with st.form("start_training"):
    name = st.text_input("Training name")
    with st.expander("Advanced settings"):
        defaults = TrainingConfig()
        col1, col2 = st.columns(2)
        learning_rate = col1.number_input("Learning rate", value=defaults.learning_rate, format="%.4f")
        batch_size = col2.number_input("Batch size", value=defaults.batch_size, min_value=1)
        epochs = col1.number_input("Epochs", value=defaults.epochs, min_value=1)
        max_tokens = col2.number_input("Max tokens", value=defaults.max_tokens, min_value=1)
        temperature = st.slider("Temperature", 0.0, 1.0, value=defaults.temperature)
    start = st.form_submit_button("🚀 Start Training", type="primary")

if start:
    workspace.start_training(name, TrainingConfig(
        learning_rate=learning_rate, batch_size=int(batch_size), epochs=int(epochs),
        max_tokens=int(max_tokens), temperature=temperature,
    ))
    st.rerun()


# -----------------------------------------------------------
# Jobs, re-read while the poller has work to do
# -----------------------------------------------------------
@st.fragment(run_every=settings.training_poll_interval_seconds)
def training_jobs():
    st.subheader("Training Jobs")
    if workspace.has_running_jobs:
        st.caption("🔄 Auto-refreshing while jobs are in progress")
    if not workspace.training_jobs:
        st.info("No training jobs yet.")
        return
    for job in reversed(workspace.training_jobs):
        icon = STATUS_ICONS.get(job.status, "❔")
        st.markdown(f"{icon} **{job.name}** — {job.status.value} ({job.file_count} files)")
        st.progress(min(max(job.progress, 0), 100) / 100)
        if job.error:
            st.caption(f"Error: {job.error}")
    if workspace.last_jobs_refresh:
        st.caption(f"Last updated {workspace.last_jobs_refresh:%H:%M:%S}")


training_jobs()

if st.button("🔄 Refresh jobs"):
    workspace.load_jobs()
    st.rerun()

render_notifications()
