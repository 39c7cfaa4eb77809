# Threshold rules behind the machine advisory panel.
# Each rule is a (predicate, builder) pair; order in RULES is the output order.

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Callable, Optional
from ..engine.calculations import predict_emission_after_maintenance
from ..schemas import EnergySource, MachineSnapshot, Suggestion

RUNTIME_LIMIT_HOURS = 16
RUNTIME_TARGET_HOURS = 12
TEMPERATURE_LIMIT_C = 80
INSULATION_TEMPERATURE_DROP = 0.2
SOUND_LIMIT_DB = 85
CONSUMPTION_LIMIT_KWH = 500
MOTOR_SAVINGS_FRACTION = 0.08
RENEWABLE_REDUCTION_FRACTION = 0.7
CARBON_INTENSIVE_SOURCES = (EnergySource.COAL.value, EnergySource.FUEL.value)

Predicate = Callable[[MachineSnapshot, float], bool]
Builder = Callable[[MachineSnapshot, float], Suggestion]


def to_fixed(value: float, digits: int) -> str:
    """Format like a dashboard number: half away from zero on the exact float value."""
    if not math.isfinite(value):
        return "NaN" if math.isnan(value) else ("Infinity" if value > 0 else "-Infinity")
    # + 0.0 turns -0.0 into 0.0
    exact = Decimal(value + 0.0)
    with localcontext() as ctx:
        ctx.prec = max(28, exact.adjusted() + digits + 2)
        return str(exact.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP))


def _show(value: float) -> str:
    # 20.0 -> "20", 20.5 -> "20.5"
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def _runtime_reduction_pct(snapshot: MachineSnapshot) -> str:
    runtime = snapshot.runtime_hours_per_day
    return to_fixed((runtime - RUNTIME_TARGET_HOURS) / runtime * 100, 0)


def _excess_runtime(snapshot: MachineSnapshot, daily_emission_kg: float) -> bool:
    return snapshot.runtime_hours_per_day > RUNTIME_LIMIT_HOURS


def _reduce_runtime(snapshot: MachineSnapshot, daily_emission_kg: float) -> Suggestion:
    # The rounded percentage feeds the saving figure, not the raw fraction
    reduction = _runtime_reduction_pct(snapshot)
    saved = daily_emission_kg * float(reduction) / 100
    return Suggestion(
        title="Reduce Runtime",
        description=(f"Machine runs {_show(snapshot.runtime_hours_per_day)}h/day. Reducing to "
                     f"{RUNTIME_TARGET_HOURS}h could cut emissions by ~{reduction}%."),
        impact=f"Save ~{to_fixed(saved, 1)} kg CO₂/day",
        severity="warning",
        impact_value=saved,
    )


def _high_temperature(snapshot: MachineSnapshot, daily_emission_kg: float) -> bool:
    return snapshot.temperature_c is not None and snapshot.temperature_c > TEMPERATURE_LIMIT_C


def _improve_insulation(snapshot: MachineSnapshot, daily_emission_kg: float) -> Suggestion:
    drop = to_fixed(snapshot.temperature_c * INSULATION_TEMPERATURE_DROP, 0)
    return Suggestion(
        title="Improve Insulation",
        description=(f"High operating temperature ({_show(snapshot.temperature_c)}°C). "
                     "Better insulation can reduce heat loss by 15-25%."),
        impact=f"Reduce temperature by ~{drop}°C",
        severity="warning",
        impact_value=float(drop),
    )


def _high_sound_level(snapshot: MachineSnapshot, daily_emission_kg: float) -> bool:
    return snapshot.sound_level_db is not None and snapshot.sound_level_db > SOUND_LIMIT_DB


def _preventive_maintenance(snapshot: MachineSnapshot, daily_emission_kg: float) -> Suggestion:
    predicted = predict_emission_after_maintenance(daily_emission_kg)
    return Suggestion(
        title="Schedule Preventive Maintenance",
        description=(f"Sound level at {_show(snapshot.sound_level_db)} dB indicates wear. "
                     "Preventive maintenance recommended."),
        impact=f"Predicted emission after maintenance: {to_fixed(predicted, 1)} kg CO₂/day",
        severity="info",
        impact_value=predicted,
    )


def _high_consumption(snapshot: MachineSnapshot, daily_emission_kg: float) -> bool:
    return snapshot.daily_consumption_kwh > CONSUMPTION_LIMIT_KWH


def _replace_motors(snapshot: MachineSnapshot, daily_emission_kg: float) -> Suggestion:
    saved_kwh = snapshot.daily_consumption_kwh * MOTOR_SAVINGS_FRACTION
    return Suggestion(
        title="Replace Inefficient Motors",
        description=(f"High energy consumption ({_show(snapshot.daily_consumption_kwh)} kWh/day). "
                     "IE4 super-premium motors can save 5-10%."),
        impact=f"Save ~{to_fixed(saved_kwh, 0)} kWh/day",
        severity="info",
        impact_value=saved_kwh,
    )


def _carbon_intensive_source(snapshot: MachineSnapshot, daily_emission_kg: float) -> bool:
    return snapshot.energy_source in CARBON_INTENSIVE_SOURCES


def _switch_to_renewables(snapshot: MachineSnapshot, daily_emission_kg: float) -> Suggestion:
    reduction = daily_emission_kg * RENEWABLE_REDUCTION_FRACTION
    source = getattr(snapshot.energy_source, "value", snapshot.energy_source)
    return Suggestion(
        title="Switch to Renewable Energy",
        description=(f"Currently using {source}. Switching to electricity from renewables "
                     "can cut emissions by 60-80%."),
        impact=f"Potential CO₂ reduction: {to_fixed(reduction, 1)} kg/day",
        severity="success",
        impact_value=reduction,
    )


RULES: tuple[tuple[str, Predicate, Builder], ...] = (
    ("excess-runtime", _excess_runtime, _reduce_runtime),
    ("high-temperature", _high_temperature, _improve_insulation),
    ("high-sound-level", _high_sound_level, _preventive_maintenance),
    ("high-consumption", _high_consumption, _replace_motors),
    ("carbon-intensive-source", _carbon_intensive_source, _switch_to_renewables),
)

OPERATIONS_OPTIMAL = Suggestion(
    title="Operations Optimal",
    description="Current machine parameters are within acceptable ranges.",
    impact="Continue monitoring for changes",
    severity="success",
)


def generate_suggestions(snapshot: MachineSnapshot, daily_emission_kg: float,
                         rules: Optional[tuple] = None) -> list[Suggestion]:
    suggestions = []
    for _, applies, build in (RULES if rules is None else rules):
        if applies(snapshot, daily_emission_kg):
            suggestions.append(build(snapshot, daily_emission_kg))
    if not suggestions:
        suggestions.append(OPERATIONS_OPTIMAL)
    return suggestions
