from pymongo import ReturnDocument


class UploadRepository:
    """Single-use upload tickets and the attachments they produced."""

    def __init__(self, tickets_col, attachments_col):
        self.tickets = tickets_col
        self.attachments = attachments_col

    async def create_ticket(self, doc: dict) -> dict:
        res = await self.tickets.insert_one(doc)
        doc["_id"] = res.inserted_id
        return doc

    async def claim_ticket(self, token: str):
        """Mark an unused ticket as used; None when unknown or already used."""
        return await self.tickets.find_one_and_update(
            {"token": token, "used": False},
            {"$set": {"used": True}},
            return_document=ReturnDocument.AFTER,
        )

    async def insert_attachment(self, doc: dict) -> dict:
        await self.attachments.insert_one(doc)
        return doc

    async def get_attachment(self, storage_id: str):
        if not storage_id:
            return None
        return await self.attachments.find_one({"_id": storage_id})
