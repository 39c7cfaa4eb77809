import math
from types import MappingProxyType
from ..schemas import EmissionResult, EnergySource, MachineSnapshot, ValidationError

# kg CO2 per kWh-equivalent
EMISSION_FACTORS = MappingProxyType({
    EnergySource.ELECTRICITY.value: 0.85,
    EnergySource.COAL.value: 2.2,
    EnergySource.NATURAL_GAS.value: 0.5,
    EnergySource.FUEL.value: 2.31,
    EnergySource.OTHER.value: 1.0,
})
DEFAULT_EMISSION_FACTOR = 1.0

DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365

# Flat ~18% reduction after maintenance
MAINTENANCE_REDUCTION_FACTOR = 0.82


def emission_factor(energy_source: str) -> float:
    # Unknown sources fall back silently
    return EMISSION_FACTORS.get(energy_source, DEFAULT_EMISSION_FACTOR)


def predict_emission_after_maintenance(current_daily_kg: float) -> float:
    return current_daily_kg * MAINTENANCE_REDUCTION_FACTOR


def calculate_emissions(energy_source: str, daily_consumption_kwh: float, active_units: int) -> EmissionResult:
    daily = daily_consumption_kwh * active_units * emission_factor(energy_source)
    return EmissionResult(
        daily_kg=daily,
        monthly_kg=daily * DAYS_PER_MONTH,
        yearly_kg=daily * DAYS_PER_YEAR,
        predicted_daily_after_maintenance_kg=predict_emission_after_maintenance(daily),
    )


def estimate_snapshot(snapshot: MachineSnapshot) -> EmissionResult:
    return calculate_emissions(snapshot.energy_source, snapshot.daily_consumption_kwh, snapshot.active_units)


def _check_non_negative(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value!r}")
    if value < 0:
        raise ValidationError(f"{name} must be >= 0, got {value!r}")


def validate_snapshot(snapshot: MachineSnapshot) -> MachineSnapshot:
    """Reject snapshots the estimator would otherwise push through arithmetically.

    Negative or non-finite numbers and unit counts below 1 raise ValidationError.
    The snapshot is returned unchanged so callers can chain the check.
    """
    _check_non_negative("daily_consumption_kwh", snapshot.daily_consumption_kwh)
    _check_non_negative("runtime_hours_per_day", snapshot.runtime_hours_per_day)
    units = snapshot.active_units
    if isinstance(units, bool) or not isinstance(units, (int, float)) or not math.isfinite(units) or units != int(units):
        raise ValidationError(f"active_units must be a whole number, got {units!r}")
    if units < 1:
        raise ValidationError(f"active_units must be >= 1, got {units!r}")
    if snapshot.temperature_c is not None:
        if not math.isfinite(snapshot.temperature_c):
            raise ValidationError(f"temperature_c must be finite, got {snapshot.temperature_c!r}")
    if snapshot.sound_level_db is not None:
        _check_non_negative("sound_level_db", snapshot.sound_level_db)
    return snapshot
