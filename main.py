"""
Event Ticketing System - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from ticketing.core.config import settings
from ticketing.core.db import engine, Base
from ticketing import models  # noqa: F401  registers tables on Base.metadata
from ticketing.api import deps, routes_attendance, routes_dashboard, routes_events, routes_tickets, routes_users, ws
from ticketing.utils.responses import register_exception_handlers

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    policy = deps.get_scan_window_policy()
    logger.info(f"Scan window: {policy.before} before start, {policy.after} after end")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Event Ticketing System",
    description="Ticketing back-end: events, tickets, payments and gate check-in",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(routes_attendance.router, prefix="/api/attendance", tags=["attendance"])
app.include_router(routes_events.router, prefix="/api/events", tags=["events"])
app.include_router(routes_tickets.router, prefix="/api/tickets", tags=["tickets"])
app.include_router(routes_tickets.payments_router, prefix="/api/payments", tags=["payments"])
app.include_router(routes_users.auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(routes_users.users_router, prefix="/api/users", tags=["users"])
app.include_router(routes_users.roles_router, prefix="/api/roles", tags=["roles"])
app.include_router(routes_users.notifications_router, prefix="/api/notifications", tags=["notifications"])
app.include_router(routes_dashboard.router, prefix="/api/dashboard", tags=["dashboard"])
app.include_router(ws.router, prefix="/ws", tags=["websocket"])

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
