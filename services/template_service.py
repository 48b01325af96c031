"""Template service providing owner-scoped persistence for website templates."""

from datetime import datetime
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from config.logging_utils import log_debug


class InvalidResourceIdError(ValueError):
    """Raised when a resource id is not a valid ObjectId."""
    pass


def owner_filter(resource_id: str, owner_id: str) -> dict:
    """
    Build the query that matches a resource only when it belongs to the owner.

    A record owned by someone else matches nothing, exactly like a missing
    record, so callers report both as not found.
    """
    try:
        oid = ObjectId(resource_id)
    except (InvalidId, TypeError):
        raise InvalidResourceIdError(resource_id)
    return {"_id": oid, "created_by": owner_id}


class TemplateStore:
    """CRUD for templates; every read and write is filtered by owner."""

    def __init__(self, collection):
        self.collection = collection

    async def create_indexes(self) -> None:
        """Create indexes for the templates collection."""
        await self.collection.create_index([("created_by", 1), ("created_at", -1)])

    async def create(self, owner_id: str, fields: dict) -> dict:
        now = datetime.utcnow()
        template_doc = {
            **fields,
            "created_by": owner_id,
            "created_at": now,
            "updated_at": now
        }
        result = await self.collection.insert_one(template_doc)
        template_doc["_id"] = result.inserted_id
        log_debug(f"Created template id={result.inserted_id} for user_id={owner_id}", prefix="TEMPLATE")
        return template_doc

    async def list_for_owner(self, owner_id: str) -> list[dict]:
        cursor = self.collection.find(
            {"created_by": owner_id},
            sort=[("created_at", -1)]
        )
        return [template async for template in cursor]

    async def get(self, template_id: str, owner_id: str) -> Optional[dict]:
        return await self.collection.find_one(owner_filter(template_id, owner_id))

    async def update(self, template_id: str, owner_id: str, fields: dict) -> Optional[dict]:
        """Overwrite only the supplied fields; returns None if no owned template matches."""
        query = owner_filter(template_id, owner_id)
        return await self.collection.find_one_and_update(
            query,
            {"$set": {**fields, "updated_at": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER
        )

    async def delete(self, template_id: str, owner_id: str) -> bool:
        result = await self.collection.delete_one(owner_filter(template_id, owner_id))
        return result.deleted_count > 0
