from typing import List, Tuple

import structlog
from langchain_mongodb import MongoDBAtlasVectorSearch
from langchain_openai import OpenAIEmbeddings
from pymongo.collection import Collection

from dermadvisor.domain.tool.product_lookup import ProductRetriever
from dermadvisor.infrastructure.config.settings import Settings

logger = structlog.get_logger(__name__)


class AtlasProductRetriever(ProductRetriever):
    """Catalog similarity search over a MongoDB Atlas vector index"""

    def __init__(self, vector_store: MongoDBAtlasVectorSearch):
        self.vector_store = vector_store

    @classmethod
    def from_settings(cls, collection: Collection, settings: Settings) -> "AtlasProductRetriever":
        vector_store = MongoDBAtlasVectorSearch(
            collection=collection,
            embedding=OpenAIEmbeddings(model=settings.embedding_model),
            index_name=settings.vector_index_name,
            text_key=settings.text_key,
            embedding_key=settings.embedding_key,
        )
        return cls(vector_store)

    async def search(self, query: str, k: int) -> List[Tuple[str, float]]:
        results = await self.vector_store.asimilarity_search_with_score(query, k=k)
        logger.debug("Catalog search completed", query=query, k=k, hits=len(results))
        return [(document.page_content, float(score)) for document, score in results]
