# backend/insights/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Read-only view over the storefront database owned by the persistence layer
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",  # optional alternative location
        "sqlite:///storefront.sqlite3",  # default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Dashboard sizing
    DASHBOARD_RECENT_ORDERS = int(os.environ.get("DASHBOARD_RECENT_ORDERS", "5"))
    DASHBOARD_TOP_PRODUCTS = int(os.environ.get("DASHBOARD_TOP_PRODUCTS", "5"))

    # Browser origins allowed to read the dashboard API (comma-separated)
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
        if origin.strip()
    ]
