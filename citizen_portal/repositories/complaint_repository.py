from pymongo import ReturnDocument

from citizen_portal.models.common import parse_oid


class ComplaintRepository:
    """Complaints filed through the REST routes."""

    def __init__(self, col):
        self.col = col

    async def list(self, filt: dict | None = None, limit: int = 500):
        return await self.col.find(filt or {}).sort("created_at", -1).to_list(length=limit)

    async def list_by_category(self, category: str):
        return await self.list({"category": category})

    async def list_by_citizen(self, citizen_id):
        oid = parse_oid(citizen_id)
        if oid is None:
            return []
        return await self.list({"citizen_id": oid})

    async def get(self, complaint_id):
        oid = parse_oid(complaint_id)
        if oid is None:
            return None
        return await self.col.find_one({"_id": oid})

    async def insert(self, doc: dict) -> dict:
        res = await self.col.insert_one(doc)
        doc["_id"] = res.inserted_id
        return doc

    async def update(self, complaint_id, update_doc: dict):
        return await self.col.find_one_and_update(
            {"_id": parse_oid(complaint_id)},
            {"$set": update_doc},
            return_document=ReturnDocument.AFTER,
        )

    async def delete(self, complaint_id) -> bool:
        res = await self.col.delete_one({"_id": parse_oid(complaint_id)})
        return res.deleted_count == 1
