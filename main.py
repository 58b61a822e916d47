# main.py
"""
CondoEase maintenance backend.

FastAPI app exposing the maintenance schedule engine, work items,
notifications and audit logs. The periodic maintenance jobs run in-process
(APScheduler) unless SCHEDULER_ENABLED=false.
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
import uvicorn

from database import check_connection
from routers import maintenance_schedules, maintenance_requests, maintenance_notifications, maintenance_logs
from scheduler import start_scheduler, shutdown_scheduler

# Load .env
load_dotenv()

logging.basicConfig(
     level=os.getenv("LOG_LEVEL", "INFO").upper(),
     format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

SCHEDULER_ENABLED = os.getenv("SCHEDULER_ENABLED", "true").lower() == "true"


@asynccontextmanager
async def lifespan(app: FastAPI):
     scheduler = start_scheduler() if SCHEDULER_ENABLED else None
     try:
          yield
     finally:
          shutdown_scheduler(scheduler)


# App instance
app = FastAPI(title="CondoEase Maintenance API", lifespan=lifespan)

# CORS
origins = os.getenv("CORS_ORIGINS", "").split(",")
app.add_middleware(
     CORSMiddleware,
     allow_origins=origins,
     allow_credentials=True,
     allow_methods=["*"],
     allow_headers=["*"],
)

app.include_router(maintenance_schedules.router)
app.include_router(maintenance_requests.router)
app.include_router(maintenance_notifications.router)
app.include_router(maintenance_logs.router)


@app.get("/api/health")
def health_check():
     return {"status": "ok", "database": "up" if check_connection() else "down"}


# 404 Fallback Middleware (unmatched routes only; handlers keep their own 404 detail)
@app.middleware("http")
async def not_found_middleware(request: Request, call_next):
     try:
          response = await call_next(request)
          if response.status_code == 404 and request.scope.get("route") is None:
               return JSONResponse(status_code=404, content={"error": "Route not found"})
          return response
     except Exception:
          logger.exception("Unhandled error on %s %s", request.method, request.url.path)
          return JSONResponse(status_code=500, content={"error": "Internal server error"})


if __name__ == "__main__":
     port = int(os.getenv("PORT", 10000))
     uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
