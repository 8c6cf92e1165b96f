"""Example: using the service layer directly (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

import importlib

from config import get_settings_module

from src.timekeeping_system.timekeeping_system.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    summary = container.worked_hours_service.calculate_worked_hours(2, "2024-01-01", "2024-01-31")
    print(summary.as_dict())
    print("time bank balance (min):", container.time_bank_service.get_user_time_bank_balance(2))


if __name__ == "__main__":
    main()
