# app/main.py
import uvicorn
import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.database import AsyncSessionLocal, create_db_and_tables, engine
from app.core.errors import register_exception_handlers
from app.crud.category import seed_global_categories
from app.api.routes import (
    accounts,
    auth,
    categories,
    transactions,
    users,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed the global categories on startup"""
    # Tables come from model metadata; there is no migration tooling
    await create_db_and_tables()
    logger.info("Database tables created successfully")

    if settings.SEED_GLOBAL_CATEGORIES:
        async with AsyncSessionLocal() as session:
            created = await seed_global_categories(session)
        if created:
            logger.info(f"Seeded {len(created)} global categories")

    logger.info(f"Auth provider: {settings.AUTH_PROVIDER}")
    yield
    await engine.dispose()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Authentication", "description": "Sync the authenticated caller with the users table"},
        {"name": "User Management", "description": "User profile and settings operations"},
        {"name": "accounts", "description": "Cash, checking and other money buckets"},
        {"name": "transactions", "description": "Income and expense records"},
        {"name": "categories", "description": "Global and user-owned transaction categories"},
    ],
)

register_exception_handlers(app)

# CORS Configuration
origins = [
    settings.FRONTEND_URL,
    "http://localhost:3000",  # Local development
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------------------------------------------
# ROOT ENDPOINT
# ------------------------------------------------------------
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "status": f"{settings.APP_NAME} is running!",
        "version": settings.VERSION,
    }

# ------------------------------------------------------------
# HEALTH CHECK ENDPOINT
# ------------------------------------------------------------
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
    }

# ------------------------------------------------------------
# BUSINESS LOGIC ROUTES
# ------------------------------------------------------------
app.include_router(auth.router)
app.include_router(accounts.router)
app.include_router(transactions.router)
app.include_router(categories.router)
app.include_router(users.router)

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("app.main:app", host="0.0.0.0", port=port, reload=False)
