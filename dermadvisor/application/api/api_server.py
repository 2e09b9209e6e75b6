from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI

from dermadvisor.application.api.route.conversation import router
from dermadvisor.application.bootstrap import build_conversation_service
from dermadvisor.domain.orchestration.conversation_service import ConversationService
from dermadvisor.infrastructure.config.settings import Settings, get_settings
from dermadvisor.infrastructure.observability.logging import setup_logging

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    conversation_service: Optional[ConversationService] = None
) -> FastAPI:
    """Build the API app; a prebuilt service skips connecting to external resources"""
    
    settings = settings or get_settings()
    app = FastAPI(title="Skincare Advisor Agent Server")
    app.include_router(router)
    app.state.conversation_service = conversation_service
    app.state.mongo_client = None
    
    @app.on_event("startup")
    async def startup_event():
        setup_logging(settings.log_level, settings.log_format, settings.service_name)
        if app.state.conversation_service is None:
            service, client = build_conversation_service(settings)
            app.state.conversation_service = service
            app.state.mongo_client = client
        logger.info("API server started", port=settings.api_port)
        
    @app.on_event("shutdown")
    async def shutdown_event():
        if app.state.mongo_client is not None:
            app.state.mongo_client.close()
        logger.info("API server shutdown")
        
    return app


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
