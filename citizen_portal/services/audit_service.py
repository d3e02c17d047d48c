import logging

from pymongo.errors import PyMongoError

from citizen_portal.models.common import utcnow
from citizen_portal.repositories.audit_repository import AuditRepository
from citizen_portal.utils.mongo import serialize_mongo

logger = logging.getLogger(__name__)


class AuditService:
    def __init__(self, repo: AuditRepository):
        self.repo = repo

    async def list_logs(self, limit: int = 200):
        return await self.repo.list(limit=limit)

    async def log_event(self, event: dict):
        await self.repo.create(event)

    async def record(
        self,
        type_: str,
        actor,
        entity_type: str,
        entity_id,
        message: str,
        meta: dict | None = None,
    ):
        """
        Append one audit event. ``actor`` is an Identity, a citizen document
        or None (system).
        """
        if actor is None:
            actor_out = {"id": None, "email": "system"}
        elif isinstance(actor, dict):
            actor_out = {"id": str(actor.get("_id") or actor.get("id") or ""), "email": actor.get("email")}
        else:
            actor_out = {"id": actor.id, "email": actor.email}

        event = {
            "time": utcnow(),
            "type": type_,
            "actor": actor_out,
            "entity": {"type": entity_type, "id": str(entity_id) if entity_id is not None else None},
            "message": message,
            "meta": serialize_mongo(meta or {}),
        }
        # the audited change is already committed; a lost event must not fail it
        try:
            await self.log_event(event)
        except PyMongoError:
            logger.exception("Failed to record audit event %s for %s %s", type_, entity_type, entity_id)
            return
        logger.debug("audit %s: %s", type_, message)
