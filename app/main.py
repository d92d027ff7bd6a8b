"""
Streamlit Frontend for the Expense Tracker

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Voice only fills the form; the user always presses "Add Expense"
3. Numbers shown here come straight from ExpenseTracker.summary()
4. Display preferences are passed to each renderer explicitly

Run with:
    streamlit run app/main.py
"""

import math
from decimal import Decimal

import streamlit as st

from expense_tracker.audit import AuditLogger
from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.models.expense import (
    BudgetStatus,
    BudgetSummary,
    DraftExpense,
    ExpenseCategory,
    Preferences,
)
from expense_tracker.orchestrator import ExpenseTracker, create_app_components
from expense_tracker.reports import render_text_report
from expense_tracker.services.speech import SpeechCaptureAdapter, SpeechCaptureError


# Page configuration
st.set_page_config(
    page_title="Smart Expense Tracker",
    page_icon="💵",
    layout="wide",
    initial_sidebar_state="expanded",
)

LIGHT_CSS = """
<style>
    .stButton>button { width: 100%; margin-top: 10px; }
    .big-number { font-size: 2.2em; font-weight: bold; }
    .spent { color: #ef4444; }
    .ok { color: #22c55e; }
    .alert { color: #f97316; }
</style>
"""

DARK_CSS = """
<style>
    .stApp { background-color: #111827; color: #f9fafb; }
    .stButton>button { width: 100%; margin-top: 10px; }
    .big-number { font-size: 2.2em; font-weight: bold; }
    .spent { color: #f87171; }
    .ok { color: #4ade80; }
    .alert { color: #fb923c; }
</style>
"""


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def main():
    """Main application entry point."""
    tracker, speech_adapter, audit_logger = get_components()
    preferences = tracker.preferences

    st.markdown(DARK_CSS if preferences.dark_mode else LIGHT_CSS, unsafe_allow_html=True)

    # Sidebar navigation
    st.sidebar.title("💵 Smart Expense Tracker")
    dark_mode = st.sidebar.toggle("🌙 Dark mode", value=preferences.dark_mode)
    if dark_mode != preferences.dark_mode:
        tracker.set_dark_mode(dark_mode)
        st.rerun()

    st.sidebar.markdown("---")
    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "➕ Add Expense", "📄 Report", "⚙️ Settings"],
        index=0,
    )
    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **Try saying:**
        - "Add 12 dollars for food"
        - "Spent 45.50 bucks on groceries"
        """
    )

    if page == "📊 Dashboard":
        render_dashboard_page(tracker, preferences)
    elif page == "➕ Add Expense":
        render_add_page(tracker, speech_adapter, audit_logger)
    elif page == "📄 Report":
        render_report_page(tracker)
    elif page == "⚙️ Settings":
        render_settings_page(audit_logger)


def format_percent(percent: float) -> str:
    """Percent used for display; a zero budget has no meaningful percentage."""
    if not math.isfinite(percent):
        return "—"
    return f"{percent:.1f}%"


def render_budget_overview(tracker: ExpenseTracker, summary: BudgetSummary):
    col1, col2, col3 = st.columns(3)

    with col1:
        st.markdown("#### Total Spent")
        st.markdown(
            f'<p class="big-number spent">${summary.total:,.2f}</p>',
            unsafe_allow_html=True,
        )

    with col2:
        st.markdown("#### Budget")
        new_budget = st.number_input(
            "Budget",
            value=float(summary.budget),
            step=10.0,
            format="%.2f",
            label_visibility="collapsed",
        )
        if Decimal(str(new_budget)) != summary.budget:
            tracker.set_budget(Decimal(str(new_budget)))
            st.rerun()

    with col3:
        st.markdown("#### Remaining")
        css_class = "ok" if summary.remaining >= 0 else "spent"
        st.markdown(
            f'<p class="big-number {css_class}">${summary.remaining:,.2f}</p>',
            unsafe_allow_html=True,
        )
        if summary.alert:
            st.markdown('<span class="alert">⚠️ Budget Alert!</span>', unsafe_allow_html=True)

    st.markdown("#### Budget Progress")
    st.progress(summary.progress)
    st.caption(f"{format_percent(summary.percent_used)} of budget used")
    if summary.status == BudgetStatus.OVER:
        st.error("You are over budget.")


def render_dashboard_page(tracker: ExpenseTracker, preferences: Preferences):
    """Render budget, charts and recent expenses."""
    st.title("📊 Dashboard")
    summary = tracker.summary()

    render_budget_overview(tracker, summary)
    st.markdown("---")

    bar_color = "#60a5fa" if preferences.dark_mode else "#3b82f6"
    if summary.expense_count:
        col1, col2 = st.columns(2)
        with col1:
            st.subheader("Expenses by Category")
            st.bar_chart(
                [{"category": c.name, "amount": float(c.value)} for c in summary.by_category],
                x="category",
                y="amount",
                color=bar_color,
            )
        with col2:
            st.subheader("Monthly Spending")
            st.bar_chart(
                [{"month": m.month, "amount": float(m.amount)} for m in summary.by_month],
                x="month",
                y="amount",
                color=bar_color,
            )

    st.subheader("Recent Expenses")
    if not summary.recent:
        st.info("No expenses added yet. Try adding one with a voice command!")
        return

    for expense in summary.recent:
        col1, col2, col3 = st.columns([6, 2, 1])
        with col1:
            st.markdown(f"**{expense.description}**")
            st.caption(f"{expense.category.value} • {expense.date.isoformat()}")
        with col2:
            st.markdown(f"**${expense.amount}**")
        with col3:
            if st.button("×", key=f"delete-{expense.id}"):
                tracker.delete_expense(expense.id)
                st.rerun()


def render_voice_entry(
    tracker: ExpenseTracker,
    speech_adapter: SpeechCaptureAdapter,
    audit_logger: AuditLogger,
):
    st.subheader("🎤 Voice Command")
    clip = st.audio_input("Say something like '20 dollars for transport'")
    if clip is None:
        return

    clip_bytes = clip.getvalue()
    if st.session_state.get("last_clip") == clip_bytes:
        return
    st.session_state.last_clip = clip_bytes

    with st.spinner("Listening..."):
        try:
            transcript = speech_adapter.transcribe_audio(clip_bytes)
        except SpeechCaptureError as e:
            audit_logger.log_error("speech_capture", str(e))
            st.error(f"Could not process the recording: {e}")
            return

    if not transcript:
        st.warning("Sorry, I could not understand that.")
        return

    st.info(f'Voice Command: "{transcript}"')
    draft = tracker.handle_transcript(transcript)
    if draft is not None:
        st.session_state.draft = draft
        st.rerun()


def render_add_page(tracker: ExpenseTracker, speech_adapter, audit_logger: AuditLogger):
    """Render voice entry, the add-expense form and receipt capture."""
    st.title("➕ Add Expense")

    if "draft" not in st.session_state:
        st.session_state.draft = DraftExpense()
    draft: DraftExpense = st.session_state.draft

    flash = st.session_state.pop("flash", None)
    if flash:
        st.success(flash)

    if speech_adapter is not None:
        render_voice_entry(tracker, speech_adapter, audit_logger)
        st.markdown("---")

    st.subheader("Add New Expense")
    categories = [""] + [category.value for category in ExpenseCategory]
    col1, col2, col3 = st.columns(3)
    with col1:
        amount = st.text_input("Amount", value=draft.amount, placeholder="Amount")
    with col2:
        category = st.selectbox(
            "Category",
            options=categories,
            index=categories.index(draft.category) if draft.category in categories else 0,
            format_func=lambda c: c or "Select Category",
        )
    with col3:
        description = st.text_input("Description", value=draft.description, placeholder="Description")

    if st.button("Add Expense", type="primary"):
        expense = tracker.add_expense(
            DraftExpense(amount=amount, category=category, description=description)
        )
        if expense is None:
            st.error("Please enter an amount and choose a category.")
        else:
            st.session_state.draft = DraftExpense()
            st.session_state.flash = f"Added {expense.category.value}: ${expense.amount}"
            st.rerun()

    st.markdown("---")
    st.subheader("📷 Scan Receipt")
    receipt = st.file_uploader("Receipt photo", type=["jpg", "jpeg", "png", "webp"])
    if receipt is not None:
        if st.session_state.get("last_receipt") != receipt.file_id:
            st.session_state.last_receipt = receipt.file_id
            st.session_state.receipt_message = tracker.capture_receipt(receipt.name)
        if st.session_state.get("receipt_message"):
            st.info(st.session_state.receipt_message)


def render_report_page(tracker: ExpenseTracker):
    """Render the printable report and its download button."""
    st.title("📄 Expense Report")
    report_text = render_text_report(tracker.report())
    st.code(report_text, language=None)
    st.download_button(
        "⬇️ Export Report",
        data=report_text,
        file_name=get_settings().app.report_filename,
        mime="text/plain",
        on_click=tracker.export_report,
    )


def render_settings_page(audit_logger: AuditLogger):
    """Render configuration status and recent activity."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")
    status = validate_all_settings()
    for name, key in [("Storage", "storage"), ("Speech", "speech"), ("Application", "app")]:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            st.error(f"❌ {name} - {status.get(f'{key}_error', 'Not configured')}")

    st.markdown("### Recent Activity")
    debug_mode = get_settings().app.debug_mode
    events = audit_logger.history[-20:]
    if not events:
        st.info("Nothing has happened yet.")
    for event in reversed(events):
        st.caption(f"{event.timestamp:%Y-%m-%d %H:%M:%S} · {event.description}")
        if debug_mode:
            st.json(event.to_log_dict(), expanded=False)


if __name__ == "__main__":
    main()
