import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.config import configure_logging, load_settings
from src.ingest import parse_company_profile, parse_machine_csv
from src.report import build_report, write_report
from src.schemas import ValidationError
from src.store import InMemoryStore
from src.workflows import register_machines


def chatbot():
    settings = load_settings()
    configure_logging(settings.log_level)

    print("Welcome to CarbonTrack: machine emission estimates and advice.")
    print("Let's get started with some information.\n")

    # 1. Machine sheet
    default_path = os.path.join(os.path.dirname(__file__), 'sample_machines.csv')
    machine_file = input(f"Path to your machine CSV file [{default_path}]: ").strip() or default_path
    if not os.path.exists(machine_file):
        print("File not found. Please try again.")
        return

    try:
        machines = parse_machine_csv(machine_file, settings.default_tenant, validate=settings.strict_validation)
    except ValidationError as e:
        print(f"Error parsing machines: {e}")
        return

    # 2. Company
    company_name = input("Company name: ").strip() or "Demo Manufacturing Ltd"
    email = input("Contact email: ").strip() or "ops@example.com"
    industry = input("Industry (e.g., Automotive, Food, Textiles): ").strip() or None

    store = InMemoryStore()
    company = store.save_company(settings.default_tenant, parse_company_profile({
        "company_name": company_name,
        "email": email,
        "industry_type": industry,
    }))

    print("\nProcessing your machines...")
    try:
        results = register_machines(store, machines, validate=settings.strict_validation)
    except ValidationError as e:
        print(f"Error registering machines: {e}")
        return
    for result in results:
        machine = result.machine
        f = result.figures
        print(f"\n{machine.machine_name} ({machine.energy_source}, {machine.active_units} unit(s))")
        print(f"  Daily: {f.daily_kg:.1f} kg CO2 | Monthly: {f.monthly_kg:.0f} kg | Yearly: {f.yearly_kg:.0f} kg")
        print(f"  After maintenance: {f.predicted_daily_after_maintenance_kg:.1f} kg CO2/day")
        for s in result.suggestions:
            print(f"  [{s.severity}] {s.title}: {s.impact}")

    report = build_report(company, store.list_machines(settings.default_tenant),
                          store.list_emissions(settings.default_tenant))
    paths = write_report(report, settings.report_dir)
    print(f"\nReport written to {settings.report_dir}:")
    for p in paths:
        print(f"  {p.name}")

if __name__ == "__main__":
    chatbot()
