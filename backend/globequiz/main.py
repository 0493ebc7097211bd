import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .routers import auth, quiz
from .config import get_settings
from .services.quiz_config import load_quiz_set
from .services.result_store import create_result_store

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle events for the application."""
    settings = get_settings()

    # Startup: quiz questions and result store
    app.state.quiz_set = load_quiz_set(settings)
    store = create_result_store(settings)
    if store is not None:
        await store.init()
    app.state.result_store = store
    logger.info("Quiz version %s ready", app.state.quiz_set.version)

    try:
        yield
    finally:
        # Shutdown: release store connections
        if store is not None:
            await store.close()


# Create FastAPI application
app = FastAPI(
    title="Globe Quiz",
    description="Guess-the-birthplace quiz on a globe for Farcaster mini apps",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(quiz.router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to Globe Quiz API",
        "docs": "/docs",
        "health": "ok"
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
