from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid


class ValidationError(ValueError):
    """Raised when machine input fails boundary checks."""


class EnergySource(str, Enum):
    ELECTRICITY = "Electricity"
    COAL = "Coal"
    NATURAL_GAS = "Natural Gas"
    FUEL = "Fuel"
    OTHER = "Other"


SEVERITIES = ("warning", "info", "success")
MACHINE_TYPES = ("Heavy", "Light", "Motors", "Heating")
MAINTENANCE_FREQUENCIES = ("Monthly", "Quarterly", "Yearly")


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class MachineSnapshot:
    energy_source: str  # an EnergySource value or any other label
    daily_consumption_kwh: float
    active_units: int
    runtime_hours_per_day: float
    temperature_c: Optional[float] = None
    sound_level_db: Optional[float] = None


@dataclass(frozen=True)
class EmissionResult:
    daily_kg: float
    monthly_kg: float
    yearly_kg: float
    predicted_daily_after_maintenance_kg: float


@dataclass(frozen=True)
class Suggestion:
    title: str
    description: str
    impact: str
    severity: str  # "warning", "info", "success"
    impact_value: Optional[float] = None

    def __post_init__(self):
        if self.severity not in SEVERITIES:
            raise ValueError(f"severity must be one of {', '.join(SEVERITIES)}, got {self.severity!r}")


@dataclass
class CompanyProfile:
    company_name: str
    email: str
    phone: Optional[str] = None
    industry_type: Optional[str] = None
    employees: Optional[int] = None
    address: Optional[str] = None
    annual_energy_budget: Optional[float] = None


@dataclass
class MachineRecord:
    tenant_id: str
    machine_name: str
    machine_type: str
    energy_source: str
    active_units: int
    runtime_hours: float
    daily_consumption_kwh: float
    temperature_c: Optional[float] = None
    sound_level_db: Optional[float] = None
    maintenance_duration_hours: Optional[int] = None
    maintenance_frequency: Optional[str] = None  # "Monthly", "Quarterly", "Yearly"
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class EmissionRecord:
    machine_id: str
    tenant_id: str
    daily_kg: float
    monthly_kg: float
    yearly_kg: float
    predicted_after_maintenance_kg: Optional[float] = None
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=datetime.now)
