import streamlit as st
from pathlib import Path
import sys

# Add current directory to path
sys.path.append(str(Path(__file__).parent))

from aggregates import ViewMode, summarize
from logging_setup import configure_logging
from storage import get_slot_store
from transaction_store import TransactionStore
from views import ViewController

# --- Configuration ---
st.set_page_config(page_title="Spending Tracker", layout="wide", page_icon="💸")
configure_logging()

VIEW_LABELS = {
    ViewMode.CUMULATIVE: "Cumulative",
    ViewMode.DAILY: "Daily",
    ViewMode.WEEKLY: "Weekly",
}

# --- Session ---
def get_controller() -> ViewController:
    """One store and controller per browser session, loaded from the saved slot."""
    if "controller" not in st.session_state:
        store = TransactionStore(get_slot_store())
        store.load()
        st.session_state.controller = ViewController(store)
        st.session_state.uploader_key = 0
    return st.session_state.controller


controller = get_controller()

# Header
st.title("Spending Tracker")
st.caption("Drop Chase CSV files to track your spending")

# Controls
toggle_cols = st.columns(len(VIEW_LABELS) + 2)
for col, (view, label) in zip(toggle_cols, VIEW_LABELS.items()):
    with col:
        on = st.toggle(label, value=controller.is_enabled(view), key=f"view_{view.value}")
        controller.set_enabled(view, on)

if len(controller.store) > 0:
    summary = summarize(controller.store.transactions)
    toggle_cols[-2].markdown(f"**{summary['count']} transactions loaded**")
    toggle_cols[-2].caption(
        f"{summary['first_date']} to {summary['last_date']} · "
        f"spent ${summary['spend']:,.2f} · credits ${summary['credits']:,.2f}"
    )
    if toggle_cols[-1].button("Clear Data", use_container_width=True):
        controller.clear()
        st.rerun()

# Drop zone
uploaded_files = st.file_uploader(
    "Drop CSV files here",
    accept_multiple_files=True,
    key=f"uploader_{st.session_state.uploader_key}",
    help="Supports Chase credit card CSV exports",
)
if uploaded_files:
    controller.handle_files(uploaded_files)
    # A fresh uploader key empties the drop zone for the next batch.
    st.session_state.uploader_key += 1
    st.rerun()

# Chart Area
if len(controller.store) == 0:
    st.info("Drop CSV files here to get started. Supports Chase credit card CSV exports.")
else:
    st.plotly_chart(controller.figure(), use_container_width=True)
