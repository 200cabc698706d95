# Freelance Forge backend entrypoint: invoicing API for freelancers.

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from backend.app.core.logging import configure_logging
from backend.app.core.settings import get_settings
from backend.app.api import register
from backend.app.api import login
from backend.app.api import profile
from backend.app.api import company
from backend.app.api import invoice_templates
from backend.app.api import invoices
from backend.app.api import expenses
from backend.app.api import reports
from backend.app.api import line_item_assist
from backend.app.db.base import Base
from backend.app.db.session import engine

logger = logging.getLogger(__name__)

settings = get_settings()
app = FastAPI(title=settings.app_name, version=settings.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(register.router)
app.include_router(login.router)
app.include_router(profile.router)
app.include_router(company.router)
app.include_router(invoice_templates.router)
app.include_router(invoices.router)
app.include_router(expenses.router)
app.include_router(reports.router)
app.include_router(line_item_assist.router)


@app.get("/")
def read_root():
    return {"app": "Freelance Forge API", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def initialize():
    configure_logging()
    Base.metadata.create_all(bind=engine)
    logger.info("%s started (%s)", settings.app_name, settings.environment)
