import os
import streamlit as st

import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.analytics import (before_after, consumption_by_machine, consumption_by_source,
                           dashboard_stats, emissions_over_time, source_distribution)
from src.config import configure_logging, load_settings
from src.ingest import parse_company_profile, parse_machine_csv
from src.report import build_report, export_machines_csv, render_text
from src.schemas import EnergySource, MACHINE_TYPES, MAINTENANCE_FREQUENCIES, MachineRecord, ValidationError
from src.store import InMemoryStore
from src.workflows import register_machine, register_machines

SEVERITY_ICONS = {"warning": "⚠️", "info": "💡", "success": "✅"}


def _show_suggestions(suggestions):
    for s in suggestions:
        st.markdown(f"{SEVERITY_ICONS.get(s.severity, '')} **{s.title}**: {s.description}  \n_{s.impact}_")


def _page_dashboard(store: InMemoryStore, tenant: str):
    machines = store.list_machines(tenant)
    emissions = store.list_emissions(tenant)
    stats = dashboard_stats(machines, emissions)
    cols = st.columns(5)
    cols[0].metric("Total Machines", stats["total_machines"])
    cols[1].metric("Daily Energy (kWh)", f"{stats['total_daily_energy_kwh']:.0f}")
    cols[2].metric("Daily CO₂ (kg)", f"{stats['total_daily_co2_kg']:.1f}")
    cols[3].metric("Monthly Estimate (kg)", f"{stats['monthly_estimate_kg']:.0f}")
    cols[4].metric("Maintenance Alerts", stats["maintenance_alerts"])
    if machines:
        st.subheader("Consumption by Energy Source")
        st.bar_chart(consumption_by_source(machines))


def _page_add_machine(store: InMemoryStore, tenant: str):
    with st.form("add_machine"):
        c1, c2, c3 = st.columns(3)
        name = c1.text_input("Machine Name *", placeholder="CNC Mill #1")
        machine_type = c2.selectbox("Machine Type *", MACHINE_TYPES)
        source = c3.selectbox("Energy Source *", [s.value for s in EnergySource])
        units = c1.number_input("Active Units", min_value=1, value=1, step=1)
        runtime = c2.number_input("Runtime (h/day) *", min_value=0.0, max_value=24.0, value=8.0, step=0.5)
        consumption = c3.number_input("Daily Consumption (kWh) *", min_value=0.0, value=250.0)
        temperature = c1.text_input("Temperature (°C)", placeholder="75")
        sound = c2.text_input("Sound Level (dB)", placeholder="80")
        duration = c3.text_input("Maintenance Duration (h)", placeholder="3")
        frequency = c1.selectbox("Maintenance Frequency", ["", *MAINTENANCE_FREQUENCIES])
        submitted = st.form_submit_button("Add machine", type="primary")

    if not submitted:
        return
    if not name.strip():
        st.error("Please fill in all required fields.")
        return
    try:
        machine = MachineRecord(
            tenant_id=tenant,
            machine_name=name.strip(),
            machine_type=machine_type,
            energy_source=source,
            active_units=int(units),
            runtime_hours=float(runtime),
            daily_consumption_kwh=float(consumption),
            temperature_c=float(temperature) if temperature.strip() else None,
            sound_level_db=float(sound) if sound.strip() else None,
            maintenance_duration_hours=int(duration) if duration.strip() else None,
            maintenance_frequency=frequency or None,
        )
        result = register_machine(store, machine)
    except (ValueError, ValidationError) as e:
        st.error(f"Could not add machine: {e}")
        return

    st.success(f"{machine.machine_name} has been registered with emission data.")
    f = result.figures
    cols = st.columns(4)
    cols[0].metric("Daily CO₂", f"{f.daily_kg:.1f} kg")
    cols[1].metric("Monthly CO₂", f"{f.monthly_kg:.0f} kg")
    cols[2].metric("Yearly CO₂", f"{f.yearly_kg:.0f} kg")
    cols[3].metric("After Maintenance", f"{f.predicted_daily_after_maintenance_kg:.1f} kg")
    st.subheader("AI Suggestions")
    _show_suggestions(result.suggestions)


def _page_machines(store: InMemoryStore, tenant: str, settings):
    uploaded = st.file_uploader("Import machines from CSV", type=["csv"])
    if uploaded is not None and st.button("Import"):
        try:
            machines = parse_machine_csv(uploaded, tenant, validate=settings.strict_validation)
            register_machines(store, machines, validate=settings.strict_validation)
            st.success(f"{len(machines)} machines imported.")
        except ValidationError as e:
            st.error(f"Import failed: {e}")

    machines = store.list_machines(tenant)
    emissions = store.list_emissions(tenant)
    st.caption(f"{len(machines)} machines registered")
    search = st.text_input("Search by name or type")
    csv_text = export_machines_csv(machines, emissions, search)
    st.download_button("Export CSV", csv_text, file_name="machines.csv", mime="text/csv")
    for m in machines:
        if search and search.lower() not in m.machine_name.lower() and search.lower() not in m.machine_type.lower():
            continue
        emission = store.latest_emission(m.id)
        c1, c2 = st.columns([5, 1])
        daily = f"{emission.daily_kg:.1f} kg/day" if emission else "no emission data"
        c1.write(f"**{m.machine_name}** · {m.machine_type} · {m.energy_source} · {daily}")
        if c2.button("Delete", key=f"del-{m.id}"):
            store.delete_machine(m.id)
            st.rerun()


def _page_analytics(store: InMemoryStore, tenant: str):
    machines = store.list_machines(tenant)
    emissions = store.list_emissions(tenant)
    if not machines:
        st.info("Add machines to see analytics.")
        return
    c1, c2 = st.columns(2)
    with c1:
        st.subheader("CO₂ Emission Over Time")
        st.line_chart(emissions_over_time(emissions))
        st.subheader("Source Distribution")
        st.bar_chart(source_distribution(machines))
    with c2:
        st.subheader("Energy by Machine")
        st.bar_chart(consumption_by_machine(machines).set_index("machine_name"))
        st.subheader("Before vs After Maintenance")
        st.bar_chart(before_after(machines, emissions).set_index("machine_name"))


def _page_reports(store: InMemoryStore, tenant: str):
    with st.expander("Company details", expanded=store.get_company(tenant) is None):
        with st.form("company"):
            company_name = st.text_input("Company Name *")
            email = st.text_input("Email *")
            phone = st.text_input("Phone")
            industry = st.text_input("Industry")
            address = st.text_input("Address")
            if st.form_submit_button("Save"):
                try:
                    store.save_company(tenant, parse_company_profile({
                        "company_name": company_name, "email": email, "phone": phone or None,
                        "industry_type": industry or None, "address": address or None,
                    }))
                    st.success("Company saved.")
                except ValidationError as e:
                    st.error(str(e))

    company = store.get_company(tenant)
    machines = store.list_machines(tenant)
    if company is None or not machines:
        st.info("Add company details and machines first to generate a report.")
        return
    report = build_report(company, machines, store.list_emissions(tenant))
    for title, table in [("Machine Details & Emissions", report.machines), ("Emission Summary", report.summary),
                         ("Recommendations", report.recommendations),
                         ("Before vs After Maintenance", report.before_after)]:
        st.subheader(title)
        st.dataframe(table, hide_index=True, use_container_width=True)
    stamp = report.generated_at.strftime("%Y%m%d_%H%M%S")
    st.download_button("Download Report", render_text(report), file_name=f"CarbonTrack_Report_{stamp}.txt")


def main():
    settings = load_settings()
    configure_logging(settings.log_level)
    st.set_page_config(page_title="CarbonTrack", page_icon="🏭", layout="wide")
    st.title("CarbonTrack: Machine Emission Dashboard 🏭")
    st.caption("Register machines, estimate CO₂, and get maintenance advice.")

    if "store" not in st.session_state:
        st.session_state.store = InMemoryStore()
    store = st.session_state.store
    tenant = settings.default_tenant

    with st.sidebar:
        st.header("Navigation")
        page = st.radio("Page", ["Dashboard", "Add Machine", "Machines", "Analytics", "Reports"])
        if st.button("Clear session"):
            st.session_state.clear()
            st.rerun()

    if page == "Dashboard":
        _page_dashboard(store, tenant)
    elif page == "Add Machine":
        _page_add_machine(store, tenant)
    elif page == "Machines":
        _page_machines(store, tenant, settings)
    elif page == "Analytics":
        _page_analytics(store, tenant)
    else:
        _page_reports(store, tenant)


if __name__ == "__main__":
    main()
