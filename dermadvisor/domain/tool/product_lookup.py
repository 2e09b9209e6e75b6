"""
Catalog search exposed to the conversational model as the ``product_lookup`` tool
"""

from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple
import json

import structlog
from pydantic import BaseModel, ConfigDict, Field

from dermadvisor.domain.errors import ToolExecutionError
from dermadvisor.domain.tool.tool_registry import ToolDeclaration

logger = structlog.get_logger(__name__)

PRODUCT_LOOKUP_TOOL = "product_lookup"
DEFAULT_RESULT_COUNT = 4


class ProductRetriever(ABC):
    """Similarity search over the product catalog"""

    @abstractmethod
    async def search(self, query: str, k: int) -> List[Tuple[str, float]]:
        """Return up to k (summary, score) pairs, best match first"""
        pass


class ProductLookupArgs(BaseModel):
    """Arguments of the product_lookup tool"""

    model_config = ConfigDict(extra="forbid")

    query: str = Field(min_length=1, description="The search query")
    n: int = Field(default=DEFAULT_RESULT_COUNT, ge=1, le=20, description="Number of results to return")


def serialize_ranked_products(ranked: Sequence[Tuple[str, float]]) -> str:
    return json.dumps([
        {"summary": summary, "score": float(score)}
        for summary, score in ranked
    ])


def build_product_lookup_tool(retriever: ProductRetriever) -> ToolDeclaration:
    """Declare product_lookup bound to a retriever"""

    async def lookup(args: ProductLookupArgs) -> str:
        logger.info("Product lookup tool called", query=args.query, n=args.n)
        try:
            ranked = await retriever.search(args.query, args.n)
        except Exception as exc:
            raise ToolExecutionError(f"Product search failed: {exc}", tool_name=PRODUCT_LOOKUP_TOOL) from exc
        return serialize_ranked_products(list(ranked)[:args.n])

    return ToolDeclaration(
        name=PRODUCT_LOOKUP_TOOL,
        description="Gathers product details from the prod database",
        args_schema=ProductLookupArgs,
        handler=lookup
    )
