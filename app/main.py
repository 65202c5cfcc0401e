"""
Streamlit Frontend for FX Dashboard

A small dashboard showing base-currency amounts in the user's chosen
display currency.

DESIGN PRINCIPLES:
1. Amounts are always stored in the base currency
2. The page never waits on the FX service to draw
3. Rate problems show as a warning, never as a broken page
"""

import json
from datetime import datetime

import streamlit as st

from fxdash.config import get_settings
from fxdash.orchestrator import AppComponents, create_app_components
from fxdash.services.storage import CacheError


st.set_page_config(
    page_title="FX Dashboard",
    page_icon="💱",
    layout="wide",
    initial_sidebar_state="expanded",
)

LANGUAGE_OPTIONS = {"en": "English", "th": "Thai", "my": "Burmese"}

# Sample base-currency amounts for the overview page
SAMPLE_TRANSACTIONS = [
    ("Salary", 45000.0),
    ("Rent", -12000.0),
    ("Groceries", -3250.75),
    ("Savings jar: Travel", 8000.0),
]


@st.cache_resource
def get_components() -> AppComponents:
    """Get or create application components (cached)."""
    return create_app_components()


def save_preferences(components: AppComponents, currency: str, language: str) -> None:
    """Write the chosen preferences where StoredPreferences reads them."""
    key = get_settings().cache.preferences_key
    try:
        existing = json.loads(components.backend.read(key) or "{}")
    except (CacheError, ValueError):
        existing = {}
    if not isinstance(existing, dict):
        existing = {}
    existing.update({"currency": currency, "language": language})
    try:
        components.backend.write(key, json.dumps(existing))
    except CacheError as e:
        st.error(f"Could not save preferences: {e}")


def main():
    """Main application entry point."""
    components = get_components()
    binding = components.binding

    # Staleness check on every run; starts a background fetch if needed
    # and returns at once, so the page draws from the cached snapshot
    binding.sync_in_background()

    st.sidebar.title("💱 FX Dashboard")
    if binding.loading:
        st.sidebar.caption("Updating exchange rates...")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Overview", "➕ Add Amount", "⚙️ Settings"],
        index=0,
    )

    if page == "📊 Overview":
        render_overview_page(components)
    elif page == "➕ Add Amount":
        render_entry_page(components)
    elif page == "⚙️ Settings":
        render_settings_page(components)


def render_overview_page(components: AppComponents):
    """Render sample amounts in the display currency."""
    binding = components.binding
    st.title("📊 Overview")
    st.caption(f"Showing amounts in {binding.display_currency}")

    total = sum(amount for _, amount in SAMPLE_TRANSACTIONS)
    st.metric("Balance", binding.format(total))

    for label, amount in SAMPLE_TRANSACTIONS:
        col1, col2 = st.columns([3, 1])
        col1.write(label)
        col2.write(binding.format(amount))


def render_entry_page(components: AppComponents):
    """Accept an amount in the display currency and show what gets stored."""
    binding = components.binding
    st.title("➕ Add Amount")

    amount = st.number_input(
        f"Amount ({binding.symbol()})",
        min_value=0.0,
        step=1.0,
    )
    stored = binding.to_base(amount)
    st.info(
        f"Will be saved as {binding.format(stored, binding.base_currency)} "
        f"({binding.base_currency})"
    )


def render_settings_page(components: AppComponents):
    """Render currency/language preferences and rate status."""
    binding = components.binding
    fx = get_settings().fx
    st.title("⚙️ Settings")

    currencies = fx.supported_currencies_list
    current = binding.display_currency
    currency = st.selectbox(
        "Currency",
        options=currencies,
        index=currencies.index(current) if current in currencies else 0,
    )

    languages = list(LANGUAGE_OPTIONS)
    language = st.selectbox(
        "Language",
        options=languages,
        index=languages.index(binding.locale) if binding.locale in languages else 0,
        format_func=lambda x: LANGUAGE_OPTIONS[x],
    )

    if st.button("💾 Save Changes", type="primary"):
        save_preferences(components, currency, language)
        binding.sync_in_background()
        st.success("Preferences saved")

    st.markdown("---")
    st.markdown("### Exchange Rates")

    if st.button("🔄 Refresh rates", disabled=binding.loading):
        binding.refresh_rates_in_background()

    render_rate_status(components)


@st.fragment(run_every=2)
def render_rate_status(components: AppComponents):
    """Rate line, refresh state and recent events; redrawn every two seconds so a finished fetch shows up."""
    binding = components.binding

    last = (
        datetime.fromtimestamp(binding.last_updated / 1000).strftime("%Y-%m-%d %H:%M")
        if binding.last_updated
        else "never"
    )
    st.write(f"{binding.rate_summary()}  (updated: {last})")

    if binding.loading:
        st.info("Refreshing rates in the background...")
    elif binding.error:
        st.warning(f"Could not refresh rates: {binding.error}")

    events = components.event_logger.recent(limit=5)
    if events:
        with st.expander("Recent rate events"):
            for event in events:
                st.write(f"{event.timestamp:%H:%M:%S} · {event.description}")


if __name__ == "__main__":
    main()
