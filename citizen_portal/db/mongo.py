import logging

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from citizen_portal.core.config import Settings

logger = logging.getLogger(__name__)

CITIZENS = "citizens"
COMPLAINTS = "complaints"
PORTAL_COMPLAINTS = "portal_complaints"
CATEGORIES = "categories"
OFFICIALS = "officials"
ADMINS = "admins"
RESPONSES = "responses"
UPLOAD_TICKETS = "upload_tickets"
ATTACHMENTS = "attachments"
AUDIT_LOGS = "audit_logs"


def connect(settings: Settings) -> AsyncIOMotorDatabase:
    client = AsyncIOMotorClient(settings.mongo_uri)
    return client[settings.mongo_db]


async def ensure_indexes(db) -> None:
    """
    Uniqueness lives in the storage layer: one citizen per email, one
    official / admin row per user, one upload per ticket.
    """
    await db[CITIZENS].create_index([("email", ASCENDING)], unique=True)
    await db[OFFICIALS].create_index([("user_id", ASCENDING)], unique=True)
    await db[OFFICIALS].create_index([("category_id", ASCENDING)])
    await db[ADMINS].create_index([("user_id", ASCENDING)], unique=True)

    await db[COMPLAINTS].create_index([("citizen_id", ASCENDING)])
    await db[COMPLAINTS].create_index([("category", ASCENDING)])

    await db[PORTAL_COMPLAINTS].create_index([("submitter_id", ASCENDING)])
    await db[PORTAL_COMPLAINTS].create_index([("category_id", ASCENDING)])
    await db[PORTAL_COMPLAINTS].create_index([("status", ASCENDING)])

    await db[RESPONSES].create_index([("complaint_id", ASCENDING)])
    await db[UPLOAD_TICKETS].create_index([("token", ASCENDING)], unique=True)
    await db[AUDIT_LOGS].create_index([("time", DESCENDING)])
    logger.info("Mongo indexes ensured")


def get_db(request: Request):
    """
    FastAPI dependency that returns the Mongo database bound to the app
    """
    return request.app.state.db
