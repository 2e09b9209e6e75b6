from typing import Tuple

import structlog
from pymongo import MongoClient

from dermadvisor.domain.context.context_assembler import ContextAssembler
from dermadvisor.domain.orchestration.conversation_service import ConversationService
from dermadvisor.domain.orchestration.core.turn_executor import TurnExecutor
from dermadvisor.domain.tool.product_lookup import build_product_lookup_tool
from dermadvisor.domain.tool.tool_registry import ToolSet
from dermadvisor.infrastructure.config.settings import Settings
from dermadvisor.infrastructure.llm.chat_model import LangChainChatModel
from dermadvisor.infrastructure.llm.vision_model import LangChainVisionModel
from dermadvisor.infrastructure.persistence.mongo_checkpoint_store import MongoCheckpointStore
from dermadvisor.infrastructure.retrieval.atlas_product_retriever import AtlasProductRetriever

logger = structlog.get_logger(__name__)


def build_conversation_service(settings: Settings) -> Tuple[ConversationService, MongoClient]:
    """Create the shared resources once and wire them into a ConversationService"""
    
    client = MongoClient(settings.mongodb_uri)
    client.admin.command("ping")
    logger.info("Connected to MongoDB", database=settings.database_name)
    
    database = client[settings.database_name]
    retriever = AtlasProductRetriever.from_settings(database[settings.products_collection], settings)
    toolset = ToolSet([build_product_lookup_tool(retriever)])
    
    executor = TurnExecutor(
        chat_model=LangChainChatModel.from_settings(settings),
        toolset=toolset,
        checkpoint_store=MongoCheckpointStore(database[settings.checkpoints_collection]),
        max_steps=settings.recursion_limit,
        recover_tool_errors=settings.recover_tool_errors
    )
    vision_model = LangChainVisionModel.from_settings(settings) if settings.vision_enabled else None
    assembler = ContextAssembler(toolset.names, vision_model=vision_model)
    
    return ConversationService(executor, assembler), client
