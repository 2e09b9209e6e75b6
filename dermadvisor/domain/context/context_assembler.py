from typing import List, Optional, Sequence
import structlog
from pydantic import BaseModel, Field

from dermadvisor.domain.errors import InputValidationError, ModelInvocationError
from dermadvisor.domain.models.conversation import Message, SystemMessage, UserMessage, UserProfile
from dermadvisor.domain.models.model_clients import VisionModel
from .prompts import (
    ADVISOR_SYSTEM_PROMPT,
    NO_IMAGE_ANALYSIS,
    OPENING_REQUEST,
    VISION_INSTRUCTIONS,
    VISION_SYSTEM_PROMPT,
)

logger = structlog.get_logger(__name__)

_IMAGE_SIGNATURES = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)


def detect_image_media_type(image: bytes) -> str:
    """Identify the image format from its leading bytes"""

    if not image:
        raise InputValidationError("Image payload is empty")
    for signature, media_type in _IMAGE_SIGNATURES:
        if image.startswith(signature):
            return media_type
    if image[:4] == b"RIFF" and image[8:12] == b"WEBP":
        return "image/webp"
    raise InputValidationError("Unsupported image format; expected JPEG, PNG, GIF or WEBP")


class SeedContext(BaseModel):
    """Messages a new conversation starts from"""
    messages: List[Message] = Field(default_factory=list)
    image_analysis: Optional[str] = Field(None, description="Vision model output, when an image was supplied")


class ContextAssembler:
    """Builds the seed history for new conversations"""
    
    def __init__(self, tool_names: Sequence[str], vision_model: Optional[VisionModel] = None):
        self.tool_names = list(tool_names)
        self.vision_model = vision_model
        
    async def assemble(self, profile: UserProfile, image: Optional[bytes] = None) -> SeedContext:
        """Build the seed system and opening messages"""
        
        image_analysis = None
        if image is not None:
            image_analysis = await self.analyze_image(image)
            
        system_prompt = ADVISOR_SYSTEM_PROMPT.format(
            user_responses=profile.to_json(),
            image_analysis=image_analysis or NO_IMAGE_ANALYSIS,
            tool_names=", ".join(self.tool_names)
        )
        
        return SeedContext(
            messages=[SystemMessage(content=system_prompt), UserMessage(content=OPENING_REQUEST)],
            image_analysis=image_analysis
        )
        
    async def analyze_image(self, image: bytes) -> str:
        """Run the one-shot vision analysis; attempted once, never retried"""
        
        media_type = detect_image_media_type(image)
        if self.vision_model is None:
            raise ModelInvocationError("Image supplied but no vision model is configured")
            
        logger.info("Processing image analysis", media_type=media_type, size=len(image))
        analysis = await self.vision_model.invoke(VISION_SYSTEM_PROMPT, VISION_INSTRUCTIONS, image, media_type)
        logger.info("Image analysis completed", length=len(analysis))
        
        return analysis
