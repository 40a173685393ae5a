"""Pytest setup shared by every backend test run.

Environment defaults are applied here, before farmdesk is imported, so the
module-level engine points at SQLite instead of PostgreSQL.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./farmdesk_test.db")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JWT_SECRET", "test-secret")
