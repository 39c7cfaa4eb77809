import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional
import pandas as pd
from .engine.calculations import DAYS_PER_MONTH, DAYS_PER_YEAR, predict_emission_after_maintenance
from .rules.maintenance_rules import to_fixed
from .schemas import CompanyProfile, EmissionRecord, MachineRecord
from .workflows import machine_suggestions

LOGGER = logging.getLogger(__name__)

MACHINE_EXPORT_HEADERS = [
    "Machine Name", "Type", "Energy Source", "Units", "Runtime (h)",
    "Consumption (kWh)", "Daily CO₂ (kg)", "Monthly CO₂ (kg)",
]


@dataclass
class EmissionReport:
    title: str
    generated_at: datetime
    company: pd.DataFrame
    machines: pd.DataFrame
    summary: pd.DataFrame
    recommendations: pd.DataFrame
    before_after: pd.DataFrame
    sections: list[str] = field(default_factory=lambda: [
        "company", "machines", "summary", "recommendations", "before_after",
    ])


def _latest_by_machine(emissions: list[EmissionRecord]) -> dict[str, EmissionRecord]:
    latest = {}
    for e in emissions:
        current = latest.get(e.machine_id)
        if current is None or e.created_at >= current.created_at:
            latest[e.machine_id] = e
    return latest


def _na(value) -> str:
    return "N/A" if value is None or value == "" else str(value)


def _company_table(company: Optional[CompanyProfile]) -> pd.DataFrame:
    if company is None:
        return pd.DataFrame(columns=["Field", "Value"])
    rows = [
        ("Company Name", company.company_name),
        ("Email", company.email),
        ("Phone", _na(company.phone)),
        ("Industry", _na(company.industry_type)),
        ("Employees", _na(company.employees)),
        ("Address", _na(company.address)),
    ]
    return pd.DataFrame(rows, columns=["Field", "Value"])


def _reduction_text(daily: float, predicted: float) -> str:
    saved = daily - predicted
    if daily == 0:
        return f"{to_fixed(saved, 1)} kg (n/a)"
    pct = (1 - predicted / daily) * 100
    return f"{to_fixed(saved, 1)} kg ({to_fixed(pct, 0)}%)"


def build_report(company: Optional[CompanyProfile], machines: list[MachineRecord],
                 emissions: list[EmissionRecord], generated_at: Optional[datetime] = None) -> EmissionReport:
    """Assemble the tenant report from stored machines and emission rows.

    Suggestions are regenerated from the stored figures rather than read back.
    """
    generated_at = generated_at or datetime.now()
    latest = _latest_by_machine(emissions)

    machine_rows, recommendation_rows, bva_rows = [], [], []
    for m in machines:
        emission = latest.get(m.id)
        machine_rows.append({
            "Machine": m.machine_name,
            "Type": m.machine_type,
            "Source": m.energy_source,
            "Units": m.active_units,
            "Runtime": f"{m.runtime_hours:g}h",
            "Consumption": f"{m.daily_consumption_kwh:g} kWh",
            "Daily CO₂": f"{to_fixed(emission.daily_kg, 1)} kg" if emission else "N/A",
            "Monthly CO₂": f"{to_fixed(emission.monthly_kg, 0)} kg" if emission else "N/A",
        })
        for s in machine_suggestions(m, emission):
            recommendation_rows.append({
                "Machine": m.machine_name,
                "Recommendation": s.title,
                "Details": s.description,
                "Impact": s.impact,
                "Severity": s.severity,
            })
        daily = emission.daily_kg if emission else 0.0
        predicted = predict_emission_after_maintenance(daily)
        bva_rows.append({
            "Machine": m.machine_name,
            "Current Daily": f"{to_fixed(daily, 1)} kg",
            "After Maintenance": f"{to_fixed(predicted, 1)} kg",
            "Reduction": _reduction_text(daily, predicted),
        })

    total_daily = sum(e.daily_kg for e in latest.values())
    summary = pd.DataFrame([
        ("Total Daily CO₂", f"{to_fixed(total_daily, 1)} kg"),
        ("Total Monthly CO₂", f"{to_fixed(total_daily * DAYS_PER_MONTH, 0)} kg"),
        ("Total Yearly CO₂", f"{to_fixed(total_daily * DAYS_PER_YEAR, 0)} kg"),
        ("Total Machines", str(len(machines))),
    ], columns=["Metric", "Value"])

    LOGGER.info("Built report for %d machine(s), %d recommendation(s)", len(machines), len(recommendation_rows))
    return EmissionReport(
        title="CarbonTrack Report",
        generated_at=generated_at,
        company=_company_table(company),
        machines=pd.DataFrame(machine_rows, columns=[
            "Machine", "Type", "Source", "Units", "Runtime", "Consumption", "Daily CO₂", "Monthly CO₂",
        ]),
        summary=summary,
        recommendations=pd.DataFrame(recommendation_rows, columns=[
            "Machine", "Recommendation", "Details", "Impact", "Severity",
        ]),
        before_after=pd.DataFrame(bva_rows, columns=["Machine", "Current Daily", "After Maintenance", "Reduction"]),
    )


def export_machines_csv(machines: list[MachineRecord], emissions: list[EmissionRecord], search: str = "") -> str:
    latest = _latest_by_machine(emissions)
    needle = search.lower()
    rows = []
    for m in machines:
        if needle and needle not in m.machine_name.lower() and needle not in m.machine_type.lower():
            continue
        emission = latest.get(m.id)
        rows.append([
            m.machine_name, m.machine_type, m.energy_source, m.active_units,
            m.runtime_hours, m.daily_consumption_kwh,
            to_fixed(emission.daily_kg, 1) if emission else "0",
            to_fixed(emission.monthly_kg, 0) if emission else "0",
        ])
    return pd.DataFrame(rows, columns=MACHINE_EXPORT_HEADERS).to_csv(index=False)


def render_text(report: EmissionReport) -> str:
    titles = {
        "company": "Company Details",
        "machines": "Machine Details & Emissions",
        "summary": "Emission Summary",
        "recommendations": "Recommendations",
        "before_after": "Before vs After Maintenance Predictions",
    }
    parts = [report.title, report.generated_at.strftime("%B %d, %Y"), ""]
    for name in report.sections:
        table = getattr(report, name)
        parts.append(titles[name])
        parts.append(table.to_string(index=False) if not table.empty else "(no data)")
        parts.append("")
    return "\n".join(parts)


def write_report(report: EmissionReport, directory) -> list[Path]:
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    stamp = report.generated_at.strftime("%Y%m%d_%H%M%S")
    written = []
    for name in report.sections:
        path = out_dir / f"CarbonTrack_Report_{stamp}_{name}.csv"
        getattr(report, name).to_csv(path, index=False)
        written.append(path)
    text_path = out_dir / f"CarbonTrack_Report_{stamp}.txt"
    text_path.write_text(render_text(report), encoding="utf-8")
    written.append(text_path)
    LOGGER.info("Wrote report to %s (%d files)", out_dir, len(written))
    return written
