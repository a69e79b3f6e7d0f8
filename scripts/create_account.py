"""Create a login account, e.g. the first HR or payroll user of a new install."""

from __future__ import annotations

import argparse
import getpass
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
from src.hr_backoffice.hr_backoffice.core.enums import Role
from src.hr_backoffice.hr_backoffice.core.exceptions import DomainError


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    parser.add_argument("--username", help="defaults to the part of the email before '@'")
    parser.add_argument("--role", default=Role.EMPLOYEE.value, choices=[r.value for r in Role])
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    password = getpass.getpass("Password: ")
    auth = build_container(db_config=settings.DB_CONFIG).auth_service
    try:
        user_id = auth.register(
            username=args.username or args.email.split("@")[0],
            email=args.email,
            password=password,
            role=args.role,
        )
    except DomainError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(f"OK: Created account {user_id} ({args.role})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
