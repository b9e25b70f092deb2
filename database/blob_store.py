"""Key/value object storage backed by a MongoDB collection.

Each object is one document keyed by its path (``articles/hn/hn-1.json``,
``thumbnails/hn-1.png``):

    {"_id": key, "body": bytes, "content_type": str, "metadata": {...}, "updated_at": datetime}

Writes are whole-object replacements; there is no partial update. Driver
failures on writes and reads surface as ``StorageError``.
"""
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from shared.errors import StorageError
from shared.utils import get_utc_now


@dataclass
class StoredObject:
    """An object read back from the blob store."""
    key: str
    body: bytes
    content_type: str = "application/octet-stream"
    metadata: Dict[str, str] = field(default_factory=dict)
    updated_at: Optional[datetime] = None

    def text(self) -> str:
        return self.body.decode("utf-8")


class BlobStore:
    """Object store with put/get/list-by-prefix semantics."""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def put(
        self,
        key: str,
        body,
        content_type: str = "application/octet-stream",
        metadata: Optional[Dict[str, str]] = None
    ) -> None:
        """Create or overwrite the object at ``key``."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        try:
            await self.collection.replace_one(
                {"_id": key},
                {
                    "_id": key,
                    "body": bytes(body),
                    "content_type": content_type,
                    "metadata": metadata or {},
                    "updated_at": get_utc_now()
                },
                upsert=True
            )
        except PyMongoError as e:
            raise StorageError("put", f"{key}: {e}") from e

    async def get(self, key: str) -> Optional[StoredObject]:
        """Return the object at ``key`` or ``None``."""
        try:
            doc = await self.collection.find_one({"_id": key})
        except PyMongoError as e:
            raise StorageError("get", f"{key}: {e}") from e
        if doc is None:
            return None
        return StoredObject(
            key=doc["_id"],
            body=bytes(doc.get("body") or b""),
            content_type=doc.get("content_type", "application/octet-stream"),
            metadata=doc.get("metadata") or {},
            updated_at=doc.get("updated_at")
        )

    async def list(self, prefix: str) -> List[str]:
        """List keys starting with ``prefix`` in lexical order."""
        cursor = self.collection.find(
            {"_id": {"$regex": f"^{re.escape(prefix)}"}},
            {"_id": 1}
        ).sort("_id", 1)
        docs = await cursor.to_list(length=None)
        return [doc["_id"] for doc in docs]
