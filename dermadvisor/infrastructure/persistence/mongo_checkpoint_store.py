from typing import Optional, Sequence
from datetime import datetime
import asyncio

import structlog
from pydantic import ValidationError
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from dermadvisor.domain.context.memory.checkpoint_store import CheckpointStore
from dermadvisor.domain.errors import PersistenceError
from dermadvisor.domain.models.conversation import (
    BaseConversationMessage, Checkpoint, dump_messages, load_messages
)

logger = structlog.get_logger(__name__)


class MongoCheckpointStore(CheckpointStore):
    """Checkpoints stored one document per thread, keyed by thread ID
    
    The blocking driver calls run in worker threads so the event loop is
    never blocked.
    """
    
    def __init__(self, collection: Collection):
        self.collection = collection
        
    async def load(self, thread_id: str) -> Optional[Checkpoint]:
        try:
            document = await asyncio.to_thread(self.collection.find_one, {"_id": thread_id})
        except PyMongoError as e:
            logger.error("Checkpoint read failed", thread_id=thread_id, error=str(e))
            raise PersistenceError(f"Could not read checkpoint for thread {thread_id}") from e
            
        if document is None:
            return None
            
        try:
            return Checkpoint(
                thread_id=thread_id,
                messages=load_messages(document.get("messages", [])),
                steps=document.get("steps", 0),
                updated_at=document.get("updated_at") or datetime.utcnow()
            )
        except ValidationError as e:
            logger.error("Checkpoint document is corrupt", thread_id=thread_id, error=str(e))
            raise PersistenceError(f"Corrupt checkpoint for thread {thread_id}") from e
            
    async def put(self, thread_id: str, messages: Sequence[BaseConversationMessage], steps: int = 0) -> None:
        document = {
            "_id": thread_id,
            "messages": dump_messages(messages),
            "steps": steps,
            "updated_at": datetime.utcnow()
        }
        
        try:
            await asyncio.to_thread(self.collection.replace_one, {"_id": thread_id}, document, upsert=True)
        except PyMongoError as e:
            logger.error("Checkpoint write failed", thread_id=thread_id, error=str(e))
            raise PersistenceError(f"Could not write checkpoint for thread {thread_id}") from e
            
        logger.debug("Checkpoint written", thread_id=thread_id, messages=len(document["messages"]), steps=steps)
