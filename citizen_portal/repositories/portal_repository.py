"""
Document-store access for the named procedures: categories, officials,
admins, portal complaints and responses.
"""
from citizen_portal.models.common import parse_oid


class CategoryRepository:
    def __init__(self, col):
        self.col = col

    async def list(self):
        return await self.col.find({}).sort("name", 1).to_list(length=500)

    async def get(self, category_id):
        oid = parse_oid(category_id)
        if oid is None:
            return None
        return await self.col.find_one({"_id": oid})

    async def get_by_ids(self, ids) -> dict:
        obj_ids = [oid for oid in (parse_oid(x) for x in ids) if oid is not None]
        if not obj_ids:
            return {}
        out = {}
        async for c in self.col.find({"_id": {"$in": obj_ids}}):
            out[str(c["_id"])] = c
        return out

    async def insert(self, doc: dict) -> dict:
        res = await self.col.insert_one(doc)
        doc["_id"] = res.inserted_id
        return doc


class OfficialRepository:
    def __init__(self, col):
        self.col = col

    async def get_by_user(self, user_id):
        oid = parse_oid(user_id)
        if oid is None:
            return None
        return await self.col.find_one({"user_id": oid})

    async def list(self):
        return await self.col.find({}).to_list(length=500)

    async def insert(self, doc: dict) -> dict:
        # raises DuplicateKeyError when the user already is an official
        res = await self.col.insert_one(doc)
        doc["_id"] = res.inserted_id
        return doc


class AdminRepository:
    def __init__(self, col):
        self.col = col

    async def is_admin(self, user_id) -> bool:
        oid = parse_oid(user_id)
        if oid is None:
            return False
        return await self.col.find_one({"user_id": oid}) is not None

    async def insert(self, user_id):
        await self.col.insert_one({"user_id": user_id})


class PortalComplaintRepository:
    def __init__(self, col):
        self.col = col

    async def get(self, complaint_id):
        oid = parse_oid(complaint_id)
        if oid is None:
            return None
        return await self.col.find_one({"_id": oid})

    async def list_by_submitter(self, user_id):
        return await self.col.find({"submitter_id": parse_oid(user_id)}) \
            .sort("created_at", -1) \
            .to_list(length=500)

    async def list_by_category(self, category_id):
        return await self.col.find({"category_id": parse_oid(category_id)}) \
            .sort("created_at", -1) \
            .to_list(length=500)

    async def insert(self, doc: dict) -> dict:
        res = await self.col.insert_one(doc)
        doc["_id"] = res.inserted_id
        return doc

    async def set_status(self, complaint_id, status: str):
        await self.col.update_one({"_id": parse_oid(complaint_id)}, {"$set": {"status": status}})


class ResponseRepository:
    def __init__(self, col):
        self.col = col

    async def list_for(self, complaint_id):
        return await self.col.find({"complaint_id": parse_oid(complaint_id)}) \
            .sort("created_at", 1) \
            .to_list(length=500)

    async def insert(self, doc: dict) -> dict:
        res = await self.col.insert_one(doc)
        doc["_id"] = res.inserted_id
        return doc
