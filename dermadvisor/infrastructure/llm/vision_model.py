import base64

import structlog
from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from dermadvisor.domain.errors import ModelInvocationError
from dermadvisor.domain.models.model_clients import VisionModel
from dermadvisor.infrastructure.config.settings import Settings
from .message_codec import content_text

logger = structlog.get_logger(__name__)


class LangChainVisionModel(VisionModel):
    """Image analysis through a multimodal LangChain chat model"""

    def __init__(self, llm: BaseChatModel):
        self.llm = llm

    @classmethod
    def from_settings(cls, settings: Settings) -> "LangChainVisionModel":
        return cls(ChatAnthropic(model=settings.vision_model))

    async def invoke(self, system_message: str, instruction: str, image: bytes, media_type: str) -> str:
        encoded = base64.b64encode(image).decode("ascii")
        message = HumanMessage(content=[
            {"type": "text", "text": instruction},
            {"type": "image_url", "image_url": {"url": f"data:{media_type};base64,{encoded}"}},
        ])
        
        try:
            response = await self.llm.ainvoke([SystemMessage(content=system_message), message])
        except Exception as e:
            logger.error("Vision model invocation failed", error=str(e))
            raise ModelInvocationError(f"Vision model invocation failed: {e}") from e
            
        return content_text(response.content)
