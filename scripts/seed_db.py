"""
Seed script for Participium (mock DB or Firestore).

Creates the accounts a fresh installation needs: the first administrator
(staff accounts can only be created by an administrator), a public relations
officer and one technical officer per office.

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured DB: python scripts/seed_db.py --apply
  - Custom admin: python scripts/seed_db.py --apply --admin-email admin@comune.torino.it --admin-password secret

NOTE: When applying to real Firestore, ensure `FIREBASE_CREDENTIALS_PATH` is set
and `USE_MOCK_DB=false` in `.env`.
"""

import argparse
import logging

from participium.core.errors import ConflictError
from participium.models.user import Role
from participium.services.municipality_user_service import get_municipality_user_service
from participium.services.role_matrix import TECHNICAL_ROLES

logger = logging.getLogger("seed_db")

DEFAULT_PASSWORD = "participium"


def seed_accounts(admin_email: str, admin_password: str):
    accounts = [("Admin", "Participium", admin_email, admin_password, [Role.ADMINISTRATOR.value])]
    accounts.append(("Public", "Relations", "pr@comune.torino.it", DEFAULT_PASSWORD, [Role.PUBLIC_RELATIONS.value]))
    for role in TECHNICAL_ROLES:
        slug = role.value.lower().replace("_", ".")
        accounts.append(("Technical", role.value.title().replace("_", " "), f"{slug}@comune.torino.it",
                         DEFAULT_PASSWORD, [role.value]))
    return accounts


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write accounts to the DB instead of dry-run")
    parser.add_argument("--admin-email", default="admin@comune.torino.it")
    parser.add_argument("--admin-password", default=DEFAULT_PASSWORD)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    service = get_municipality_user_service() if args.apply else None
    for first_name, last_name, email, password, roles in seed_accounts(args.admin_email, args.admin_password):
        if not args.apply:
            logger.info(f"Would create {email} roles={roles}")
            continue
        try:
            user = service.create_user(first_name, last_name, email, password, roles)
            logger.info(f"Created {email} ({user['id']})")
        except ConflictError:
            logger.info(f"Skipped {email}: already exists")


if __name__ == "__main__":
    main()
