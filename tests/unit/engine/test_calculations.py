"""Tests for the emission estimator."""

from __future__ import annotations

import math

import pytest

from src.engine.calculations import (
    DEFAULT_EMISSION_FACTOR,
    EMISSION_FACTORS,
    calculate_emissions,
    emission_factor,
    estimate_snapshot,
    predict_emission_after_maintenance,
    validate_snapshot,
)
from src.schemas import EnergySource, MachineSnapshot, ValidationError


def _snapshot(**overrides) -> MachineSnapshot:
    values = {
        "energy_source": "Electricity",
        "daily_consumption_kwh": 250.0,
        "active_units": 2,
        "runtime_hours_per_day": 8.0,
        "temperature_c": 60.0,
        "sound_level_db": 70.0,
    }
    values.update(overrides)
    return MachineSnapshot(**values)


def test_factor_table_matches_published_values() -> None:
    assert dict(EMISSION_FACTORS) == {
        "Electricity": 0.85,
        "Coal": 2.2,
        "Natural Gas": 0.5,
        "Fuel": 2.31,
        "Other": 1.0,
    }


def test_factor_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        EMISSION_FACTORS["Hydrogen"] = 0.1  # type: ignore[index]


def test_unknown_source_uses_default_factor() -> None:
    assert emission_factor("Unknown") == DEFAULT_EMISSION_FACTOR
    assert emission_factor("coal") == DEFAULT_EMISSION_FACTOR
    assert calculate_emissions("Unknown", 100, 1).daily_kg == 100.0


def test_enum_members_resolve_like_strings() -> None:
    assert emission_factor(EnergySource.NATURAL_GAS) == 0.5
    assert calculate_emissions(EnergySource.ELECTRICITY, 250, 2) == calculate_emissions("Electricity", 250, 2)


def test_electricity_literal_case() -> None:
    result = calculate_emissions("Electricity", 250, 2)

    assert result.daily_kg == 425.0
    assert result.monthly_kg == 12750.0
    assert result.yearly_kg == 155125.0


def test_coal_literal_case() -> None:
    # 100 * 2.2 is not exactly representable; same value as the dashboard has always shown
    result = calculate_emissions("Coal", 100, 1)

    assert result.daily_kg == pytest.approx(220.0)
    assert result.daily_kg == 100 * 1 * 2.2


@pytest.mark.parametrize(
    ("source", "consumption", "units"),
    [
        ("Electricity", 250.0, 2),
        ("Coal", 333.3, 3),
        ("Natural Gas", 0.0, 1),
        ("Fuel", 17.25, 7),
        ("Other", 1e6, 12),
        ("Biomass", 42.0, 5),
    ],
)
def test_monthly_and_yearly_are_exact_multiples(source: str, consumption: float, units: int) -> None:
    result = calculate_emissions(source, consumption, units)

    assert result.monthly_kg == result.daily_kg * 30
    assert result.yearly_kg == result.daily_kg * 365
    assert result.predicted_daily_after_maintenance_kg == result.daily_kg * 0.82


def test_multiplication_order_is_consumption_units_factor() -> None:
    result = calculate_emissions("Fuel", 17.25, 7)
    assert result.daily_kg == 17.25 * 7 * 2.31


@pytest.mark.parametrize("value", [0.0, 100.0, 425.0, 1234.5678, -10.0])
def test_predict_after_maintenance_is_flat_reduction(value: float) -> None:
    assert predict_emission_after_maintenance(value) == value * 0.82


def test_predict_after_maintenance_zero() -> None:
    assert predict_emission_after_maintenance(0) == 0.0


def test_estimator_is_idempotent() -> None:
    snapshot = _snapshot(energy_source="Fuel", daily_consumption_kwh=123.456, active_units=3)
    assert estimate_snapshot(snapshot) == estimate_snapshot(snapshot)


def test_estimator_does_not_validate() -> None:
    assert calculate_emissions("Natural Gas", -10, 1).daily_kg == -5.0
    assert calculate_emissions("Electricity", 100, 0).daily_kg == 0.0


def test_validate_snapshot_accepts_valid_input() -> None:
    snapshot = _snapshot()
    assert validate_snapshot(snapshot) is snapshot


def test_validate_snapshot_allows_sub_zero_temperature_and_missing_optionals() -> None:
    validate_snapshot(_snapshot(temperature_c=-15.0))
    validate_snapshot(_snapshot(temperature_c=None, sound_level_db=None))


@pytest.mark.parametrize(
    "overrides",
    [
        {"daily_consumption_kwh": -1.0},
        {"daily_consumption_kwh": math.nan},
        {"daily_consumption_kwh": math.inf},
        {"runtime_hours_per_day": -0.5},
        {"runtime_hours_per_day": math.nan},
        {"active_units": 0},
        {"active_units": -3},
        {"active_units": 1.5},
        {"temperature_c": math.inf},
        {"sound_level_db": -5.0},
        {"sound_level_db": math.nan},
    ],
)
def test_validate_snapshot_rejects_bad_numbers(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        validate_snapshot(_snapshot(**overrides))


def test_validation_error_is_value_error() -> None:
    with pytest.raises(ValueError, match="active_units"):
        validate_snapshot(_snapshot(active_units=0))
