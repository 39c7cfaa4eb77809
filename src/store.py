# In-memory stand-in for the hosted data backend.
# The demo UI and tests use it; production deployments keep records elsewhere.

import logging
from typing import Optional
from .schemas import CompanyProfile, EmissionRecord, MachineRecord

LOGGER = logging.getLogger(__name__)


class MachineNotFoundError(LookupError):
    pass


class InMemoryStore:
    def __init__(self):
        self._machines: dict[str, MachineRecord] = {}
        self._emissions: dict[str, EmissionRecord] = {}
        self._companies: dict[str, CompanyProfile] = {}

    def save_company(self, tenant_id: str, company: CompanyProfile) -> CompanyProfile:
        self._companies[tenant_id] = company
        return company

    def get_company(self, tenant_id: str) -> Optional[CompanyProfile]:
        return self._companies.get(tenant_id)

    def save_machine(self, machine: MachineRecord) -> MachineRecord:
        self._machines[machine.id] = machine
        LOGGER.info("Saved machine %s (%s) for tenant %s", machine.id, machine.machine_name, machine.tenant_id)
        return machine

    def get_machine(self, machine_id: str) -> MachineRecord:
        try:
            return self._machines[machine_id]
        except KeyError:
            raise MachineNotFoundError(f"Machine {machine_id} not found") from None

    def list_machines(self, tenant_id: str) -> list[MachineRecord]:
        machines = [m for m in self._machines.values() if m.tenant_id == tenant_id]
        return sorted(machines, key=lambda m: m.created_at, reverse=True)

    def delete_machine(self, machine_id: str) -> None:
        machine = self.get_machine(machine_id)
        del self._machines[machine_id]
        # Emission rows go with their machine
        orphaned = [e.id for e in self._emissions.values() if e.machine_id == machine_id]
        for emission_id in orphaned:
            del self._emissions[emission_id]
        LOGGER.info("Deleted machine %s and %d emission record(s)", machine.id, len(orphaned))

    def save_emission(self, emission: EmissionRecord) -> EmissionRecord:
        if emission.machine_id not in self._machines:
            raise MachineNotFoundError(f"Machine {emission.machine_id} not found")
        self._emissions[emission.id] = emission
        return emission

    def list_emissions(self, tenant_id: str) -> list[EmissionRecord]:
        emissions = [e for e in self._emissions.values() if e.tenant_id == tenant_id]
        return sorted(emissions, key=lambda e: e.created_at)

    def latest_emission(self, machine_id: str) -> Optional[EmissionRecord]:
        matches = [e for e in self._emissions.values() if e.machine_id == machine_id]
        if not matches:
            return None
        return max(matches, key=lambda e: e.created_at)
