# Turn uploaded machine sheets and stored rows into core inputs

import logging
import math
import pandas as pd
from .engine.calculations import validate_snapshot
from .schemas import CompanyProfile, MachineRecord, MachineSnapshot, ValidationError

LOGGER = logging.getLogger(__name__)

REQUIRED_COLUMNS = (
    "machine_name", "machine_type", "energy_source",
    "active_units", "runtime_hours", "daily_consumption",
)
OPTIONAL_COLUMNS = ("temperature", "sound_level", "maintenance_duration", "maintenance_frequency")


def _whole_number(name: str, value) -> int:
    number = float(value)
    # No silent truncation of 1.5 units
    if not math.isfinite(number) or number != int(number):
        raise ValueError(f"{name} must be a whole number, got {value!r}")
    return int(number)


def _optional_float(value):
    if value is None or pd.isna(value):
        return None
    return float(value)


def _optional_int(value):
    if value is None or pd.isna(value):
        return None
    return int(value)


def _optional_str(value):
    if value is None or pd.isna(value) or str(value).strip() == "":
        return None
    return str(value).strip()


def snapshot_from_machine(machine: MachineRecord) -> MachineSnapshot:
    return MachineSnapshot(
        energy_source=machine.energy_source,
        daily_consumption_kwh=machine.daily_consumption_kwh,
        active_units=machine.active_units,
        runtime_hours_per_day=machine.runtime_hours,
        temperature_c=machine.temperature_c,
        sound_level_db=machine.sound_level_db,
    )


def parse_machine_csv(file_path, tenant_id: str, validate: bool = True) -> list[MachineRecord]:
    """Read a machine sheet (path or buffer) into records.

    Required columns: machine_name, machine_type, energy_source, active_units,
    runtime_hours, daily_consumption. Blank optional cells become None.
    """
    df = pd.read_csv(file_path)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValidationError(f"CSV is missing required columns: {', '.join(missing)}")
    for column in OPTIONAL_COLUMNS:
        if column not in df.columns:
            df[column] = None

    machines = []
    for index, row in df.iterrows():
        try:
            machine = MachineRecord(
                tenant_id=tenant_id,
                machine_name=str(row["machine_name"]).strip(),
                machine_type=str(row["machine_type"]).strip(),
                energy_source=str(row["energy_source"]).strip(),
                active_units=_whole_number("active_units", row["active_units"]),
                runtime_hours=float(row["runtime_hours"]),
                daily_consumption_kwh=float(row["daily_consumption"]),
                temperature_c=_optional_float(row["temperature"]),
                sound_level_db=_optional_float(row["sound_level"]),
                maintenance_duration_hours=_optional_int(row["maintenance_duration"]),
                maintenance_frequency=_optional_str(row["maintenance_frequency"]),
            )
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Row {index + 1}: {e}") from e
        if validate:
            try:
                validate_snapshot(snapshot_from_machine(machine))
            except ValidationError as e:
                raise ValidationError(f"Row {index + 1} ({machine.machine_name}): {e}") from e
        machines.append(machine)
    LOGGER.info("Parsed %d machine(s) from %s", len(machines), getattr(file_path, "name", file_path))
    return machines


def parse_company_profile(data: dict) -> CompanyProfile:
    known = {k: v for k, v in data.items() if k in CompanyProfile.__dataclass_fields__}
    if not known.get("company_name") or not known.get("email"):
        raise ValidationError("company_name and email are required")
    return CompanyProfile(**known)
