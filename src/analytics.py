# Dashboard aggregates over persisted figures; the estimator is not re-run here

import pandas as pd
from .engine.calculations import DAYS_PER_MONTH, predict_emission_after_maintenance
from .rules.maintenance_rules import SOUND_LIMIT_DB
from .schemas import EmissionRecord, MachineRecord

MACHINE_COLUMNS = [
    "id", "machine_name", "machine_type", "energy_source", "active_units",
    "runtime_hours", "daily_consumption_kwh", "temperature_c", "sound_level_db", "created_at",
]
EMISSION_COLUMNS = [
    "id", "machine_id", "daily_kg", "monthly_kg", "yearly_kg",
    "predicted_after_maintenance_kg", "created_at",
]


def machines_frame(machines: list[MachineRecord]) -> pd.DataFrame:
    rows = [{c: getattr(m, c) for c in MACHINE_COLUMNS} for m in machines]
    return pd.DataFrame(rows, columns=MACHINE_COLUMNS)


def emissions_frame(emissions: list[EmissionRecord]) -> pd.DataFrame:
    rows = [{c: getattr(e, c) for c in EMISSION_COLUMNS} for e in emissions]
    return pd.DataFrame(rows, columns=EMISSION_COLUMNS)


def dashboard_stats(machines: list[MachineRecord], emissions: list[EmissionRecord]) -> dict:
    total_energy = sum(m.daily_consumption_kwh for m in machines)
    total_co2 = sum(e.daily_kg for e in emissions)
    alerts = sum(1 for m in machines if m.sound_level_db is not None and m.sound_level_db > SOUND_LIMIT_DB)
    return {
        "total_machines": len(machines),
        "total_daily_energy_kwh": total_energy,
        "total_daily_co2_kg": total_co2,
        "monthly_estimate_kg": total_co2 * DAYS_PER_MONTH,
        "maintenance_alerts": alerts,
    }


def consumption_by_source(machines: list[MachineRecord]) -> pd.Series:
    df = machines_frame(machines)
    return df.groupby("energy_source")["daily_consumption_kwh"].sum().rename("daily_consumption_kwh")


def source_distribution(machines: list[MachineRecord]) -> pd.Series:
    df = machines_frame(machines)
    return df.groupby("energy_source").size().rename("machines")


def consumption_by_machine(machines: list[MachineRecord]) -> pd.DataFrame:
    df = machines_frame(machines)
    return df[["machine_name", "daily_consumption_kwh"]].reset_index(drop=True)


def emissions_over_time(emissions: list[EmissionRecord]) -> pd.Series:
    """Sum of recorded daily CO2 per calendar day the records were created."""
    df = emissions_frame(emissions)
    if df.empty:
        return pd.Series(dtype=float, name="co2_kg")
    day = pd.to_datetime(df["created_at"]).dt.date.rename("date")
    return df.groupby(day)["daily_kg"].sum().sort_index().rename("co2_kg")


def before_after(machines: list[MachineRecord], emissions: list[EmissionRecord]) -> pd.DataFrame:
    names = {m.id: m.machine_name for m in machines}
    rows = []
    for e in emissions:
        after = e.predicted_after_maintenance_kg
        if after is None:
            after = predict_emission_after_maintenance(e.daily_kg)
        rows.append({"machine_name": names.get(e.machine_id, "Machine"), "before": e.daily_kg, "after": after})
    return pd.DataFrame(rows, columns=["machine_name", "before", "after"])
