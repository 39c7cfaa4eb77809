"""Tests for report assembly and CSV export."""

from __future__ import annotations

import io
from datetime import datetime

import pandas as pd

from src.report import build_report, export_machines_csv, render_text, write_report
from src.schemas import CompanyProfile, MachineRecord
from src.store import InMemoryStore
from src.workflows import register_machine

GENERATED_AT = datetime(2025, 6, 1, 12, 0, 0)


def _fleet() -> tuple[CompanyProfile, InMemoryStore]:
    store = InMemoryStore()
    company = store.save_company("acme", CompanyProfile(company_name="Acme Metals", email="ops@acme.test"))
    register_machine(store, MachineRecord(
        tenant_id="acme",
        machine_name="CNC Mill",
        machine_type="Heavy",
        energy_source="Electricity",
        active_units=2,
        runtime_hours=8.0,
        daily_consumption_kwh=250.0,
        created_at=datetime(2025, 1, 1),
    ))
    register_machine(store, MachineRecord(
        tenant_id="acme",
        machine_name="Boiler",
        machine_type="Heating",
        energy_source="Natural Gas",
        active_units=1,
        runtime_hours=20.0,
        daily_consumption_kwh=100.0,
        sound_level_db=90.0,
        created_at=datetime(2025, 2, 1),
    ))
    return company, store


def _report():
    company, store = _fleet()
    return build_report(company, store.list_machines("acme"), store.list_emissions("acme"), generated_at=GENERATED_AT)


def test_report_company_section_fills_missing_values() -> None:
    company = _report().company

    assert list(company["Field"]) == ["Company Name", "Email", "Phone", "Industry", "Employees", "Address"]
    assert list(company["Value"]) == ["Acme Metals", "ops@acme.test", "N/A", "N/A", "N/A", "N/A"]


def test_report_machine_section() -> None:
    machines = _report().machines

    assert list(machines["Machine"]) == ["Boiler", "CNC Mill"]
    mill = machines[machines["Machine"] == "CNC Mill"].iloc[0]
    assert mill["Daily CO₂"] == "425.0 kg"
    assert mill["Monthly CO₂"] == "12750 kg"
    assert mill["Runtime"] == "8h"
    assert mill["Consumption"] == "250 kWh"


def test_report_summary_totals() -> None:
    summary = dict(_report().summary.values.tolist())

    # 425 + 50
    assert summary == {
        "Total Daily CO₂": "475.0 kg",
        "Total Monthly CO₂": "14250 kg",
        "Total Yearly CO₂": "173375 kg",
        "Total Machines": "2",
    }


def test_report_recommendations_are_regenerated() -> None:
    recs = _report().recommendations

    boiler = recs[recs["Machine"] == "Boiler"]
    assert list(boiler["Recommendation"]) == ["Reduce Runtime", "Schedule Preventive Maintenance"]
    mill = recs[recs["Machine"] == "CNC Mill"]
    assert list(mill["Recommendation"]) == ["Operations Optimal"]


def test_report_before_after() -> None:
    bva = _report().before_after
    mill = bva[bva["Machine"] == "CNC Mill"].iloc[0]

    assert mill["Current Daily"] == "425.0 kg"
    assert mill["After Maintenance"] == "348.5 kg"
    assert mill["Reduction"] == "76.5 kg (18%)"


def test_report_before_after_without_emissions() -> None:
    machine = MachineRecord(
        tenant_id="acme",
        machine_name="Idle",
        machine_type="Light",
        energy_source="Other",
        active_units=1,
        runtime_hours=0.0,
        daily_consumption_kwh=0.0,
    )
    report = build_report(None, [machine], [], generated_at=GENERATED_AT)

    assert report.company.empty
    assert report.machines.iloc[0]["Daily CO₂"] == "N/A"
    assert report.before_after.iloc[0]["Reduction"] == "0.0 kg (n/a)"


def test_export_machines_csv_headers_and_search() -> None:
    _, store = _fleet()
    text = export_machines_csv(store.list_machines("acme"), store.list_emissions("acme"), search="HEAT")

    df = pd.read_csv(io.StringIO(text))
    assert list(df.columns) == [
        "Machine Name", "Type", "Energy Source", "Units", "Runtime (h)",
        "Consumption (kWh)", "Daily CO₂ (kg)", "Monthly CO₂ (kg)",
    ]
    assert list(df["Machine Name"]) == ["Boiler"]
    assert df.iloc[0]["Daily CO₂ (kg)"] == 50.0
    assert df.iloc[0]["Monthly CO₂ (kg)"] == 1500


def test_render_text_lists_all_sections() -> None:
    text = render_text(_report())

    assert text.startswith("CarbonTrack Report\nJune 01, 2025")
    for heading in ("Company Details", "Machine Details & Emissions", "Emission Summary",
                    "Recommendations", "Before vs After Maintenance Predictions"):
        assert heading in text


def test_write_report_creates_section_files(tmp_path) -> None:
    paths = write_report(_report(), tmp_path / "out")

    names = sorted(p.name for p in paths)
    assert names == sorted([
        "CarbonTrack_Report_20250601_120000_company.csv",
        "CarbonTrack_Report_20250601_120000_machines.csv",
        "CarbonTrack_Report_20250601_120000_summary.csv",
        "CarbonTrack_Report_20250601_120000_recommendations.csv",
        "CarbonTrack_Report_20250601_120000_before_after.csv",
        "CarbonTrack_Report_20250601_120000.txt",
    ])
    assert all(p.exists() for p in paths)
    summary = pd.read_csv(tmp_path / "out" / "CarbonTrack_Report_20250601_120000_summary.csv")
    assert list(summary["Metric"])[-1] == "Total Machines"
