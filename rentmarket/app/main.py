# RentMarket backend entrypoint: FastAPI app, routers and process lifecycle.

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rentmarket.app.api import auth
from rentmarket.app.api import dashboard
from rentmarket.app.api import invoices
from rentmarket.app.api import notifications
from rentmarket.app.api import payments
from rentmarket.app.api import products
from rentmarket.app.api import rental_requests
from rentmarket.app.core.errors import register_exception_handlers
from rentmarket.app.core.logging_config import setup_logging
from rentmarket.app.core.settings import get_settings
from rentmarket.app.db.session import close_db, init_db

settings = get_settings()
setup_logging(settings.log_level, settings.log_file)

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(dashboard.router)
app.include_router(notifications.router)
app.include_router(products.router)
app.include_router(rental_requests.router)
app.include_router(payments.router)
app.include_router(invoices.router)


@app.get("/")
def read_root():
    return {"app": "RentMarket backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def connect_data_store():
    init_db()
    logger.info("Database ready")


@app.on_event("shutdown")
def disconnect_data_store():
    close_db()
    logger.info("Database connections closed")
