"""Post overtime from unprocessed clock-outs into the time bank.

Usage: python scripts/process_time_bank.py --admin-id 1 [--user-id 2] [--start 2024-01-01] [--end 2024-01-31]
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module
from dotenv import load_dotenv

from src.timekeeping_system.timekeeping_system.container import build_container
from src.timekeeping_system.timekeeping_system.main import configure_logging


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--admin-id", type=int, required=True)
    parser.add_argument("--user-id", type=int)
    parser.add_argument("--start")
    parser.add_argument("--end")
    args = parser.parse_args()

    load_dotenv()
    settings = importlib.import_module(get_settings_module())
    configure_logging(settings)
    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        overtime_expiration_days=int(getattr(settings, "OVERTIME_EXPIRATION_DAYS", 180)),
    )

    result = container.time_bank_processor.process_pending_records(
        args.admin_id, user_id=args.user_id, start=args.start, end=args.end
    )
    logging.getLogger(__name__).info("Done: %s", result)
    print(f"OK: processed={result.processed} credited={result.credited} skipped={result.skipped}")


if __name__ == "__main__":
    main()
