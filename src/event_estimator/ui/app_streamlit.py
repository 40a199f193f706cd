"""
Streamlit UI for the Event Estimator.

Features:
- Provider and plan picker
- Option and add-on configuration for the chosen plan
- Live pricing with itemised breakdown and blocking reasons
- Finalise with approval routing
- Catalog browser
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from event_estimator.api.state import get_catalog, get_estimate_service
from event_estimator.engine.models import Selections
from event_estimator.errors import CatalogError, EstimatorError


NO_SELECTION = "(none)"


st.set_page_config(
    page_title="Event Estimator",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_service():
    """Get cached service instance."""
    return get_estimate_service()


try:
    service = get_service()
    catalog = get_catalog()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


def money(cents: int, currency: str) -> str:
    return f"{cents / 100:,.2f} {currency}"


try:
    current = service.get_current()
except EstimatorError as e:
    st.error(f"Could not load estimate: {e.message}")
    st.stop()

current_plan = catalog.get_plan(current.plan_id)

# ============================================================================
# SIDEBAR: Provider / Plan
# ============================================================================
with st.sidebar:
    st.header("🏛️ Venue")

    providers = catalog.list_providers()
    provider_ids = [p.id for p in providers]
    provider_index = provider_ids.index(current_plan.provider_id) if current_plan and current_plan.provider_id in provider_ids else 0
    provider = st.selectbox(
        "Provider",
        providers,
        index=provider_index,
        format_func=lambda p: f"{p.name} ({p.location})" if p.location else p.name,
    )

    plans = catalog.list_plans(provider.id)
    if not plans:
        st.warning("This provider has no plans.")
        st.stop()

    plan_ids = [p.id for p in plans]
    plan = st.selectbox(
        "Plan",
        plans,
        index=plan_ids.index(current.plan_id) if current.plan_id in plan_ids else 0,
        format_func=lambda p: p.name,
    )

    st.caption(plan.description)
    st.markdown(f"**Base price:** {money(plan.base_price_cents, plan.currency)}")
    st.markdown(f"**Min participants:** {plan.min_participants} | **Lead time:** {plan.lead_time_days} days")
    if plan.requires_approval:
        st.info("Requires manager review before it is finalised")


st.title("Event Estimator")
st.caption(f"Estimate {current.id} | Status: {current.status.value} | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2 = st.tabs(["🧮 Estimate Builder", "📚 Catalog"])


# ============================================================================
# TAB 1: ESTIMATE BUILDER
# ============================================================================
with tab1:
    col1, col2 = st.columns([1.4, 1.0], gap="large")

    with col1:
        st.subheader("Configuration")
        same_plan = current.plan_id == plan.id

        raw_selections = {}
        for group in catalog.list_option_groups(plan.id):
            values = [v.value for v in catalog.list_option_values(group.id)]
            choices = values if group.required else [NO_SELECTION] + values
            previous = current.selections.get(group.code) if same_plan else None
            index = choices.index(previous) if previous in choices else 0
            label = f"{group.description or group.code}{' *' if group.required else ''}"
            choice = st.selectbox(label, choices, index=index, key=f"opt_{plan.id}_{group.code}")
            if choice != NO_SELECTION:
                raw_selections[group.code] = choice

        addons = catalog.list_addons(plan.id)
        if addons:
            addon_names = {a.id: f"{a.name} (+{money(a.price_cents, a.currency)})" for a in addons}
            default_addons = [a for a in current.selections.addons if a in addon_names] if same_plan else []
            raw_selections["addons"] = st.multiselect(
                "Add-ons",
                list(addon_names),
                default=default_addons,
                format_func=lambda addon_id: addon_names[addon_id],
                key=f"addons_{plan.id}",
            )

        if st.button("💾 Update Estimate", type="primary", use_container_width=True):
            try:
                current = service.update(plan.id, Selections.from_payload(raw_selections))
                st.toast("Estimate updated")
            except EstimatorError as e:
                st.error(e.message)

    with col2:
        st.subheader("Pricing")
        pricing = current.pricing
        c1, c2, c3 = st.columns(3)
        c1.metric("Base", money(pricing.base, pricing.currency))
        c2.metric("Add-ons", money(pricing.addons, pricing.currency))
        c3.metric("Total", money(pricing.total, pricing.currency))

        if pricing.lines:
            with st.expander("📊 View Detailed Pricing Breakdown"):
                st.dataframe(
                    pd.DataFrame([
                        {
                            "Item": line.kind,
                            "Code": line.code,
                            "Description": line.description,
                            "Amount": money(line.amount_cents, pricing.currency),
                        }
                        for line in pricing.lines
                    ]),
                    use_container_width=True,
                    hide_index=True,
                )

        if current.blocking_reasons:
            st.warning("This estimate cannot be finalised yet:")
            for reason in current.blocking_reasons:
                st.markdown(f"- {reason}")
        else:
            st.success("No blocking issues")

        st.divider()
        if st.button("✅ Finalise", use_container_width=True, disabled=bool(current.blocking_reasons)):
            try:
                result = service.finalise()
                st.success(f"Estimate {result.id} is now **{result.status.value}**")
            except EstimatorError as e:
                st.error(e.message)


# ============================================================================
# TAB 2: CATALOG
# ============================================================================
with tab2:
    if st.button("🔄 Reload Catalog"):
        try:
            catalog.reload_data()
            st.rerun()
        except CatalogError as e:
            st.error(e.message)
            for error in e.errors:
                st.markdown(f"- {error}")

    st.subheader("📚 Plans")
    plans_df = catalog.plans.copy()
    plans_df["base_price"] = plans_df["base_price_cents"].astype(int) / 100
    st.dataframe(
        plans_df[["id", "provider_id", "name", "base_price", "currency", "approval_type",
                  "min_participants", "lead_time_days"]],
        use_container_width=True,
        hide_index=True,
    )

    st.subheader("Add-ons")
    st.dataframe(catalog.addons, use_container_width=True, hide_index=True)
    st.caption(f"Providers: {len(catalog.providers)} | Plans: {len(catalog.plans)} | Option groups: {len(catalog.option_groups)}")
