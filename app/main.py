# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Graphiste GPT API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import asyncio
import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.websocket import websocket_manager, WEBSOCKET_CHANNEL
from app.exceptions import (
    GraphisteException,
    graphiste_exception_handler,
    validation_exception_handler,
)
from app.routers import (
    admin,
    analysis,
    conversations,
    feedback,
    generation,
    health,
    history,
    payments,
    profile,
    subscriptions,
    tasks,
    templates,
    webhooks,
)
from app.auth import routes as auth_routes
from app.websocket import routes as websocket_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# Global flag for Redis listener task
_redis_listener_task = None
_shutdown_event = None


async def redis_pubsub_listener():
    """
    Background task that listens to Redis pub/sub and broadcasts to WebSockets.

    Bridges Celery workers with WebSocket clients:
    1. Subscribe to the channel where generate_poster publishes events
    2. Forward each event to the clients watching its conversation
    """
    import redis.asyncio as aioredis

    logger.info("Starting Redis pub/sub listener for WebSocket broadcasts")

    redis_client = None
    pubsub = None

    try:
        redis_client = aioredis.from_url(settings.REDIS_URL)
        pubsub = redis_client.pubsub()
        await pubsub.subscribe(WEBSOCKET_CHANNEL)

        async for message in pubsub.listen():
            if _shutdown_event and _shutdown_event.is_set():
                break

            if message["type"] != "message":
                continue

            try:
                data = json.loads(message["data"])
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid JSON in Redis message: {e}")
                continue

            conversation_id = data.pop("conversation_id", None)
            if conversation_id:
                await websocket_manager.broadcast(conversation_id, data)
                logger.debug(f"Broadcast {data.get('type')} to conversation {conversation_id}")

    except asyncio.CancelledError:
        logger.info("Redis pub/sub listener cancelled")
    except Exception as e:
        logger.error(f"Redis pub/sub listener error: {e}")
    finally:
        if pubsub is not None:
            await pubsub.unsubscribe(WEBSOCKET_CHANNEL)
        if redis_client is not None:
            await redis_client.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: log configuration, start the Redis listener
    - Shutdown: stop the Redis listener
    """
    global _redis_listener_task, _shutdown_event

    # Startup
    logger.info(f"Starting Graphiste GPT API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.KIE_AI_API_KEY:
        logger.warning("KIE_AI_API_KEY is not set: poster generation is disabled")

    _shutdown_event = asyncio.Event()
    _redis_listener_task = asyncio.create_task(redis_pubsub_listener())

    yield

    # Shutdown
    logger.info("Shutting down Graphiste GPT API")

    if _shutdown_event:
        _shutdown_event.set()
    if _redis_listener_task:
        _redis_listener_task.cancel()
        try:
            await _redis_listener_task
        except asyncio.CancelledError:
            pass


# Create FastAPI application
app = FastAPI(
    title="Graphiste GPT API",
    description="""
## AI Poster Generation API

Graphiste GPT turns a short description into a professional poster for
African businesses, churches and events.

### How It Works

1. **Start a conversation** - `POST /api/v1/conversations`
2. **Describe your poster** - the assistant suggests a domain
3. **Pick a style, colors and an image** - reference and content images are optional
4. **Generate** - `POST /api/v1/conversations/{id}/generate`, then follow the
   task over the WebSocket or `GET /api/v1/tasks/{task_id}`

### Credits

| Resolution | Credits |
|------------|---------|
| 1K | 1 |
| 2K | 2 |
| 4K | 4 |

The free plan allows a limited number of 1K generations. Refusals return
402/403 with `error`, `remaining`, `needed` and `is_free`.

### Quick Start

```bash
# 1. Start a conversation
curl -X POST http://localhost:8000/api/v1/conversations \\
  -H "Authorization: Bearer $TOKEN"

# 2. Describe the poster
curl -X POST http://localhost:8000/api/v1/conversations/{id}/messages \\
  -H "Authorization: Bearer $TOKEN" -H "Content-Type: application/json" \\
  -d '{"content": "Affiche pour un concert gospel le 12 mars à Cotonou"}'
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Current user, profile and roles",
        },
        {
            "name": "Conversations",
            "description": "Step-by-step poster wizard",
        },
        {
            "name": "Generation",
            "description": "Direct poster generation",
        },
        {
            "name": "Analysis",
            "description": "Request analysis, style description, text extraction and voice input",
        },
        {
            "name": "Tasks",
            "description": "Track background generations",
        },
        {
            "name": "Subscriptions",
            "description": "Plans, subscription and credits",
        },
        {
            "name": "Payments",
            "description": "Moneroo and FedaPay checkouts",
        },
        {
            "name": "Webhooks",
            "description": "Payment provider notifications",
        },
        {
            "name": "Templates",
            "description": "Reference poster templates",
        },
        {
            "name": "History",
            "description": "Generated posters",
        },
        {
            "name": "Profile",
            "description": "User profile and onboarding",
        },
        {
            "name": "Admin",
            "description": "Role and subscription management",
        },
        {
            "name": "WebSocket",
            "description": "Real-time generation updates",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(GraphisteException)
async def handle_graphiste_exception(request: Request, exc: GraphisteException):
    """Handle custom Graphiste GPT exceptions."""
    return await graphiste_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle request body / query validation errors."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "INTERNAL_ERROR",
            "message": "Une erreur inattendue est survenue",
        }
    )


# =============================================================================
# Routers
# =============================================================================

API_PREFIX = "/api/v1"

# Authentication endpoints
app.include_router(auth_routes.router, prefix=f"{API_PREFIX}/auth", tags=["Auth"])

# Health check endpoints
app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])

# Poster wizard
app.include_router(conversations.router, prefix=f"{API_PREFIX}/conversations", tags=["Conversations"])

# Direct generation
app.include_router(generation.router, prefix=API_PREFIX, tags=["Generation"])

# AI helpers
app.include_router(analysis.router, prefix=API_PREFIX, tags=["Analysis"])

# Task status endpoints
app.include_router(tasks.router, prefix=f"{API_PREFIX}/tasks", tags=["Tasks"])

# Plans, subscription and credits
app.include_router(subscriptions.router, prefix=API_PREFIX, tags=["Subscriptions"])

# Checkouts
app.include_router(payments.router, prefix=f"{API_PREFIX}/payments", tags=["Payments"])

# Provider webhooks
app.include_router(webhooks.router, prefix=f"{API_PREFIX}/webhooks", tags=["Webhooks"])

# Reference templates
app.include_router(templates.router, prefix=f"{API_PREFIX}/templates", tags=["Templates"])

# Generated poster history
app.include_router(history.router, prefix=f"{API_PREFIX}/history", tags=["History"])

# Generation feedback
app.include_router(feedback.router, prefix=f"{API_PREFIX}/feedback", tags=["Feedback"])

# User profile
app.include_router(profile.router, prefix=f"{API_PREFIX}/profile", tags=["Profile"])

# Admin
app.include_router(admin.router, prefix=f"{API_PREFIX}/admin", tags=["Admin"])

# WebSocket endpoints (Real-time updates)
app.include_router(websocket_routes.router, tags=["WebSocket"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Graphiste GPT API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
