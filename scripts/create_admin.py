from __future__ import annotations

import argparse
import getpass
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.job_tracker.job_tracker.container import build_container
from src.job_tracker.job_tracker.core.enums import Role


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the first admin account.")
    parser.add_argument("email")
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="User")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    supabase_config = dict(settings.SUPABASE_CONFIG)
    service_key = supabase_config.get("service_role_key")
    if not service_key:
        sys.exit("SUPABASE_SERVICE_ROLE_KEY is required to create users")

    # No signed-in user here: act with the service role for profile writes too.
    container = build_container(supabase_config=supabase_config, token_provider=lambda: service_key)

    password = getpass.getpass("Password: ")
    result = container.user_service.create_user(
        current_role=Role.ADMIN,
        email=args.email,
        password=password,
        first_name=args.first_name,
        last_name=args.last_name,
        role=Role.ADMIN,
    )

    if result.warning:
        print(f"WARNING: {result.warning}")
    print(f"OK: admin {args.email} -> {result.user_id}")


if __name__ == "__main__":
    main()
