"""Module: main."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sos911.api.v1.api import api_router
from sos911.core.config import settings
from sos911.core.errors import register_exception_handlers
from sos911.db.init_db import init_db

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="SOS 911 API", version="0.1.0")

app.include_router(api_router, prefix=settings.api_prefix)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

init_db()


# Endpoint: service banner at the root path.
@app.get("/")
def root():
    return {"success": True, "message": "SOS 911 backend is running", "docs": "/docs"}
