"""
Grant the admin role to an already registered citizen.

    portal-create-admin someone@example.org

The citizen registers through ``POST /api/auth/register`` first; this only
adds the matching ``admins`` row. Running it twice is harmless.
"""
import argparse
import asyncio
import logging

from dotenv import load_dotenv

from citizen_portal.core.config import get_settings
from citizen_portal.core.errors import NotFoundError
from citizen_portal.db.mongo import CITIZENS, connect, ensure_indexes
from citizen_portal.repositories.citizen_repository import CitizenRepository
from citizen_portal.services import portal_service

logger = logging.getLogger(__name__)


async def create_admin_user(db, email: str) -> dict:
    citizen = await CitizenRepository(db[CITIZENS]).get_by_email(email)
    if not citizen:
        raise NotFoundError(f"No citizen registered with {email}")

    await portal_service.grant_admin(db, citizen["_id"])
    logger.info("Citizen %s is now an admin", citizen["email"])
    return citizen


async def _run(email: str) -> None:
    settings = get_settings()
    db = connect(settings)
    try:
        await ensure_indexes(db)
        await create_admin_user(db, email)
    finally:
        db.client.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Grant the admin role to a registered citizen")
    parser.add_argument("email", help="email the citizen registered with")
    args = parser.parse_args(argv)

    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    try:
        asyncio.run(_run(args.email))
    except NotFoundError as e:
        print(e.message)
        return 1

    print(f"Admin role granted to {args.email}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
