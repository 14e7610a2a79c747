"""
Harmoniq Safety - Test Infrastructure (conftest.py)
====================================================
Provides:
  - Test database (harmoniq_test.db) seeded with the demo tenants
  - FastAPI TestClient with session login helpers
  - DB assertion helpers
  - Artifact collection
"""

import os
import sys
import sqlite3
import datetime
import json
import pytest

# Ensure project root is on path
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT_DIR)

# ============================================================================
# TEST MODE: separate database, demo seed on, scheduler off
# ============================================================================
TEST_DB_PATH = os.path.join(ROOT_DIR, "harmoniq_test.db")
ARTIFACTS_DIR = os.path.join(ROOT_DIR, "test_artifacts",
                             datetime.datetime.now().strftime("%Y%m%d_%H%M%S"))

os.environ["HARMONIQ_DB_PATH"] = TEST_DB_PATH
os.environ["HARMONIQ_SCHEDULER"] = "0"
os.environ["HARMONIQ_SEED_DEMO"] = "1"
os.environ["HARMONIQ_LOG_LEVEL"] = "WARNING"

# Seeded accounts (see harmoniq/stores/seed.py)
SUPER_ADMIN = "admin@harmoniq.io"
COMPANY_ADMIN = "sarah.johnson@nexus.com"
MANAGER = "mike.chen@nexus.com"
EMPLOYEE = "emma.wilson@nexus.com"
TECHNICIAN = "james.brown@nexus.com"
NL_ADMIN = "pieter@vdberg.nl"
SE_ADMIN = "anna@nordiskbygg.se"

API = "/api/companies/nexus"


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Session-wide test environment setup."""
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)

    for subdir in ["json_snapshots", "exported_reports"]:
        os.makedirs(os.path.join(ARTIFACTS_DIR, subdir), exist_ok=True)

    yield

    try:
        if os.path.exists(TEST_DB_PATH):
            os.remove(TEST_DB_PATH)
    except (PermissionError, OSError):
        pass


@pytest.fixture(scope="session")
def app():
    """The FastAPI app instance bound to the test DB."""
    import main
    return main.app


@pytest.fixture(scope="session")
def client(app):
    """FastAPI TestClient (session-scoped for speed)."""
    from starlette.testclient import TestClient
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def seeded_db(client):
    """Reset every store to the demo seed before a test."""
    from harmoniq.db import init_db
    from harmoniq.stores import clear_all_stores, load_all_stores

    init_db()
    clear_all_stores()
    load_all_stores()
    return TEST_DB_PATH


# ============================================================================
# Session helpers
# ============================================================================

def login(client, email):
    """Login via the session endpoint; the client keeps the cookie."""
    client.cookies.clear()
    resp = client.post("/api/session/login", json={"email": email})
    assert resp.status_code == 200, resp.text
    return client


@pytest.fixture
def anon_client(client, seeded_db):
    """Client with no session."""
    client.cookies.clear()
    return client


@pytest.fixture
def superadmin_session(client, seeded_db):
    return login(client, SUPER_ADMIN)


@pytest.fixture
def admin_session(client, seeded_db):
    """Company admin of Nexus Manufacturing (US)."""
    return login(client, COMPANY_ADMIN)


@pytest.fixture
def manager_session(client, seeded_db):
    return login(client, MANAGER)


@pytest.fixture
def employee_session(client, seeded_db):
    """Employee in the Safety Committee team."""
    return login(client, EMPLOYEE)


@pytest.fixture
def technician_session(client, seeded_db):
    """Employee in the Maintenance Crew team."""
    return login(client, TECHNICIAN)


@pytest.fixture
def nl_admin_session(client, seeded_db):
    return login(client, NL_ADMIN)


@pytest.fixture
def se_admin_session(client, seeded_db):
    return login(client, SE_ADMIN)


# ============================================================================
# DB helpers
# ============================================================================

def get_test_db():
    """Direct connection to test database for assertions."""
    conn = sqlite3.connect(TEST_DB_PATH, timeout=30)
    conn.row_factory = sqlite3.Row
    return conn


def db_query(sql, params=()):
    """Run a query against the test DB and return list of dicts."""
    conn = get_test_db()
    rows = conn.execute(sql, params).fetchall()
    result = [dict(r) for r in rows]
    conn.close()
    return result


def db_count(table, where="1=1", params=()):
    """Count rows in a table."""
    conn = get_test_db()
    row = conn.execute(f"SELECT COUNT(*) AS cnt FROM {table} WHERE {where}", params).fetchone()
    conn.close()
    return row["cnt"]


def store_count(store, where="1=1", params=()):
    """Count rows of one entity store."""
    return db_count("store_items", f"store_key = ? AND ({where})", (f"harmoniq_{store}",) + tuple(params))


# ============================================================================
# Artifact helpers
# ============================================================================

def save_artifact(name, content, subdir="json_snapshots"):
    """Save test artifact to the artifacts directory."""
    path = os.path.join(ARTIFACTS_DIR, subdir, name)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    if isinstance(content, (dict, list)):
        with open(path, "w") as f:
            json.dump(content, f, indent=2, default=str)
    elif isinstance(content, bytes):
        with open(path, "wb") as f:
            f.write(content)
    else:
        with open(path, "w") as f:
            f.write(str(content))
    return path
