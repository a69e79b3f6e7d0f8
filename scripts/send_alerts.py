"""Send birthday and appraisal reminders. Meant to run once a day from cron."""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.hr_backoffice.hr_backoffice.container import build_container


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--birthdays", action="store_true", help="only birthday alerts")
    parser.add_argument("--appraisals", action="store_true", help="only appraisal alerts")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    alerts = build_container(db_config=settings.DB_CONFIG).alert_service
    run_all = not (args.birthdays or args.appraisals)

    sent = 0
    if run_all or args.birthdays:
        sent += alerts.send_birthday_alerts()
    if run_all or args.appraisals:
        sent += alerts.send_appraisal_alerts()

    logging.getLogger("send_alerts").info("Sent %d notifications", sent)
    return 0


if __name__ == "__main__":
    sys.exit(main())
