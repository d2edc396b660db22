from fastapi import FastAPI
from order_routing.routes import assignment, orders, store, settings
from order_routing.database import engine, Base, SessionLocal
import os
import logging
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

# Import all models to ensure they are registered with SQLAlchemy
from order_routing.db.models import Store, Settings, Order

# Step 1: Initialize DB models/tables
# Only create tables automatically in dev, not production
if os.getenv("ENV", "production") != "production":
    print("Development mode: Creating tables if they don't exist...")
    Base.metadata.create_all(bind=engine)
    print("✅ Tables created successfully")

    # Seed the database with initial data
    from order_routing.init_db import seed
    seed()
    print("✅ Database seeded successfully")

# Step 2: Initialize FastAPI app
app = FastAPI(
    title="Order Routing Backend",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Configure logging to show API requests
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logging.getLogger("uvicorn.access").setLevel(logging.INFO)
logging.getLogger("fastapi").setLevel(logging.INFO)
logging.getLogger("order_routing").setLevel(LOG_LEVEL)

# CORS configuration
origins = [
    # Admin and store dashboards
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",     # Vite development server
    "http://127.0.0.1:5173",
]

# Deployed dashboard origins, comma separated
extra_origins = os.getenv("CORS_ORIGINS", "")
origins.extend(o.strip() for o in extra_origins.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Step 3: Include routes
app.include_router(assignment.router)
app.include_router(orders.router)
app.include_router(store.router, prefix="/api/v1/stores", tags=["stores"])
app.include_router(settings.router, prefix="/api/v1/settings", tags=["settings"])

@app.get("/health")
def health():
    """Health check endpoint for Docker health checks"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        return {"status": "unhealthy", "database": "disconnected", "error": str(e)}

@app.on_event("startup")
def startup_event():
    """Start periodic auto-assignment if configured"""
    print("🚀 BACKEND STARTUP: Starting application initialization...")
    assignment.start_auto_assign_runner(SessionLocal)
    print("✅ BACKEND STARTUP: Application initialization completed successfully")

@app.on_event("shutdown")
def shutdown_event():
    assignment.stop_auto_assign_runner()
