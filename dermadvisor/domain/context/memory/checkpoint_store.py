from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence
import asyncio

from dermadvisor.domain.models.conversation import BaseConversationMessage, Checkpoint, Message


class CheckpointStore(ABC):
    """Durable per-thread message history

    A put overwrites the previous checkpoint wholesale. There is no locking:
    two requests on the same thread race and the later put wins.
    """

    @abstractmethod
    async def load(self, thread_id: str) -> Optional[Checkpoint]:
        """Get the checkpoint for a thread, or None if it has never been written"""
        pass

    @abstractmethod
    async def put(self, thread_id: str, messages: Sequence[BaseConversationMessage], steps: int = 0) -> None:
        """Replace the thread's checkpoint"""
        pass

    async def get(self, thread_id: str) -> List[Message]:
        """Get the thread's messages in order; empty for unknown threads"""

        checkpoint = await self.load(thread_id)
        return list(checkpoint.messages) if checkpoint else []


class InMemoryCheckpointStore(CheckpointStore):
    """Process-local checkpoint store"""
    
    def __init__(self):
        self.checkpoints: Dict[str, Checkpoint] = {}
        self._lock = asyncio.Lock()
        
    async def load(self, thread_id: str) -> Optional[Checkpoint]:
        async with self._lock:
            checkpoint = self.checkpoints.get(thread_id)
            return checkpoint.model_copy(deep=True) if checkpoint else None
            
    async def put(self, thread_id: str, messages: Sequence[BaseConversationMessage], steps: int = 0) -> None:
        checkpoint = Checkpoint(thread_id=thread_id, messages=list(messages), steps=steps)
        
        async with self._lock:
            self.checkpoints[thread_id] = checkpoint.model_copy(deep=True)
