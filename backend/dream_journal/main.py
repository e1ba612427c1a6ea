import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .core.config import settings
from .api.conversation_endpoints import router as conversation_router
from .api.websocket_endpoints import router as ws_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY is not set; dream analysis requests will fail until it is configured")
    yield


app = FastAPI(
    title="Dream Journal API",
    description="Jungian dream analysis and cartoon visualization over OpenAI",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(conversation_router)
app.include_router(ws_router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Dream Journal API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "dream_journal.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True
    )
