from citizen_portal.models.common import parse_oid


def email_norm(email: str) -> str:
    return (email or "").lower().strip()


class CitizenRepository:
    def __init__(self, col):
        self.col = col

    async def get_by_email(self, email: str):
        return await self.col.find_one({"email": email_norm(email)})

    async def get_by_id(self, citizen_id):
        oid = parse_oid(citizen_id)
        if oid is None:
            return None
        return await self.col.find_one({"_id": oid})

    async def get_by_ids(self, ids) -> dict:
        obj_ids = [oid for oid in (parse_oid(x) for x in ids) if oid is not None]
        if not obj_ids:
            return {}

        citizens = {}
        async for c in self.col.find({"_id": {"$in": obj_ids}}):
            citizens[str(c["_id"])] = c
        return citizens

    async def insert(self, doc: dict) -> dict:
        # raises DuplicateKeyError on an existing email (unique index)
        res = await self.col.insert_one(doc)
        doc["_id"] = res.inserted_id
        return doc

