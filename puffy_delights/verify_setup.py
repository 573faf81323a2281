#!/usr/bin/env python3
"""
Setup verification script
Checks configuration, database and notification functions before going live.
Informational only: it never modifies the database.
"""
import os
import sys
from typing import List, Optional

import httpx
from dotenv import load_dotenv

from .config import REQUIRED_VARIABLES, is_placeholder
from .database.connection import DatabaseConnection, TABLES
from .exceptions import BackendError

COLORS = {
    "green": "\x1b[32m",
    "red": "\x1b[31m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "bold": "\x1b[1m",
    "reset": "\x1b[0m",
}


class SetupReport:
    """Collects check outcomes and prints them as they happen"""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self.failures: List[str] = []
        self.warnings: List[str] = []

    def _print(self, color: str, message: str):
        print(f"{COLORS[color]}{message}{COLORS['reset']}", file=self.stream)

    def header(self, message: str):
        print(file=self.stream)
        self._print("blue", f"{COLORS['bold']}🔍 {message}")
        self._print("blue", "=" * 50)

    def ok(self, message: str):
        self._print("green", f"✅ {message}")

    def fail(self, message: str):
        self.failures.append(message)
        self._print("red", f"❌ {message}")

    def warn(self, message: str):
        self.warnings.append(message)
        self._print("yellow", f"⚠️  {message}")

    def info(self, message: str):
        self._print("blue", f"ℹ️  {message}")


def check_environment(report: SetupReport):
    report.header("Environment variables")
    for name in REQUIRED_VARIABLES:
        if is_placeholder(os.getenv(name)):
            report.fail(f"{name} is not configured")
        else:
            report.ok(f"{name} configured")

    if is_placeholder(os.getenv("PUFFY_ADMIN_TOKEN")):
        report.warn("PUFFY_ADMIN_TOKEN is not set; admin endpoints will refuse every request")
    else:
        report.ok("PUFFY_ADMIN_TOKEN configured")

    for name in ("BANK_NAME", "BANK_ACCOUNT_NUMBER", "BANK_ACCOUNT_NAME"):
        if not os.getenv(name):
            report.warn(f"{name} is empty; customers will not see where to pay")


def check_database(report: SetupReport, db_path: str) -> Optional[DatabaseConnection]:
    report.header("Database")
    if not os.path.exists(db_path):
        report.fail(f"Database file {db_path} does not exist")
        report.info("Run: python -m puffy_delights.init_db")
        return None

    try:
        db = DatabaseConnection(db_path, create_schema=False)
        present = db.existing_tables()
    except BackendError as e:
        report.fail(f"Could not open {db_path}: {e}")
        return None

    report.ok(f"Connected to {db_path}")
    for table in TABLES:
        if table in present:
            report.ok(f"Table '{table}' exists")
        else:
            report.fail(f"Table '{table}' is missing")
    return db


def check_functions(report: SetupReport, client: Optional[httpx.Client] = None):
    report.header("Notification functions")
    base_url = os.getenv("PUFFY_FUNCTIONS_URL")
    if is_placeholder(base_url):
        report.warn("Skipping function checks; PUFFY_FUNCTIONS_URL is not configured")
        return

    names = (
        os.getenv("ORDER_CONFIRMATION_FUNCTION", "send-order-confirmation"),
        os.getenv("ADMIN_NOTIFICATION_FUNCTION", "send-admin-notification"),
    )
    owns_client = client is None
    client = client or httpx.Client(timeout=float(os.getenv("REQUEST_TIMEOUT", "5")))
    try:
        for name in names:
            url = f"{base_url.rstrip('/')}/functions/v1/{name}"
            # CORS preflight is answered without sending any email
            try:
                response = client.options(url)
            except httpx.HTTPError as e:
                report.fail(f"Function '{name}' unreachable: {e}")
                continue
            if response.status_code < 400:
                report.ok(f"Function '{name}' reachable")
            elif response.status_code == 404:
                report.fail(f"Function '{name}' is not deployed (404)")
            else:
                report.warn(f"Function '{name}' answered HTTP {response.status_code}")
    finally:
        if owns_client:
            client.close()


def run_checks(stream=None, client: Optional[httpx.Client] = None) -> SetupReport:
    report = SetupReport(stream)
    report.header("Puffy Delights setup verification")

    check_environment(report)
    check_database(report, os.getenv("PUFFY_DATABASE_PATH", "puffy_delights.db"))
    check_functions(report, client)

    report.header("Summary")
    if report.failures:
        report._print("red", f"❌ {len(report.failures)} check(s) failed, "
                             f"{len(report.warnings)} warning(s)")
    else:
        report.ok(f"All checks passed with {len(report.warnings)} warning(s)")
    return report


def main() -> int:
    load_dotenv()
    report = run_checks()
    return 1 if report.failures else 0


if __name__ == "__main__":
    sys.exit(main())
