import logging
from dataclasses import dataclass
from typing import Iterable, Optional
from .engine.calculations import estimate_snapshot, validate_snapshot
from .ingest import snapshot_from_machine
from .rules.maintenance_rules import generate_suggestions
from .schemas import EmissionRecord, EmissionResult, MachineRecord, MachineSnapshot, Suggestion, ValidationError
from .store import InMemoryStore

LOGGER = logging.getLogger(__name__)


@dataclass
class RegistrationResult:
    machine: MachineRecord
    emission: EmissionRecord
    figures: EmissionResult
    suggestions: list[Suggestion]  # display only, never stored


@dataclass(frozen=True)
class MachineEvaluation:
    snapshot: MachineSnapshot
    figures: EmissionResult
    suggestions: list[Suggestion]


def register_machine(store: InMemoryStore, machine: MachineRecord, validate: bool = True) -> RegistrationResult:
    snapshot = snapshot_from_machine(machine)
    if validate:
        validate_snapshot(snapshot)
    figures = estimate_snapshot(snapshot)

    store.save_machine(machine)
    emission = store.save_emission(EmissionRecord(
        machine_id=machine.id,
        tenant_id=machine.tenant_id,
        daily_kg=figures.daily_kg,
        monthly_kg=figures.monthly_kg,
        yearly_kg=figures.yearly_kg,
        predicted_after_maintenance_kg=figures.predicted_daily_after_maintenance_kg,
    ))
    LOGGER.info("Registered %s: %.1f kg CO2/day", machine.machine_name, figures.daily_kg)

    suggestions = generate_suggestions(snapshot, figures.daily_kg)
    return RegistrationResult(machine=machine, emission=emission, figures=figures, suggestions=suggestions)


def register_machines(store: InMemoryStore, machines: list[MachineRecord],
                      validate: bool = True) -> list[RegistrationResult]:
    """Register a batch; with validation on, one bad machine means none are stored."""
    if validate:
        for position, machine in enumerate(machines, 1):
            try:
                validate_snapshot(snapshot_from_machine(machine))
            except ValidationError as e:
                raise ValidationError(f"Machine {position} ({machine.machine_name}): {e}") from e
    results = [register_machine(store, machine, validate=False) for machine in machines]
    LOGGER.info("Registered batch of %d machine(s)", len(results))
    return results


def machine_suggestions(machine: MachineRecord, emission: Optional[EmissionRecord]) -> list[Suggestion]:
    # Machines without an emission row are treated as zero-emission
    daily = emission.daily_kg if emission is not None else 0.0
    return generate_suggestions(snapshot_from_machine(machine), daily)


def evaluate_machines(snapshots: Iterable[MachineSnapshot]) -> list[MachineEvaluation]:
    results = []
    for snapshot in snapshots:
        figures = estimate_snapshot(snapshot)
        results.append(MachineEvaluation(
            snapshot=snapshot,
            figures=figures,
            suggestions=generate_suggestions(snapshot, figures.daily_kg),
        ))
    return results
