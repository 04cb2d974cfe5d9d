# tests/conftest.py
# Points the app at a throwaway SQLite file before anything imports it.
from __future__ import annotations
import sys, os, tempfile
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

_TMP_DIR = tempfile.mkdtemp(prefix="spendwise-tests-")
os.environ["SPENDWISE_DB_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'tracker.db')}"

import pytest


@pytest.fixture(autouse=True)
def empty_ledger():
    from spendwise.db import init_db
    from spendwise.store import delete_all_transactions

    init_db()
    delete_all_transactions()
    yield
    delete_all_transactions()
