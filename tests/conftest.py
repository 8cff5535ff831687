import os, tempfile

# Point config at a throwaway DB and keep the ledger off before any project import.
os.environ["SQLITE_DB_PATH"] = os.path.join(tempfile.mkdtemp(prefix="sparkpets-"), "boot.sqlite")
os.environ["SPARK_ISSUER_PUBLIC"] = ""
os.environ["SPARK_DISTR_SECRET"] = ""

import pytest

import db
from app import create_app
from matchmaker_api import bp_match
from oracle_api import bp_oracle
from tests.helpers import FixedDice


@pytest.fixture(autouse=True)
def fresh_db(tmp_path, monkeypatch):
    monkeypatch.setattr(db, "DB_PATH", str(tmp_path / "sparkpets.sqlite"))
    db.init_db()
    return db.DB_PATH


@pytest.fixture
def client():
    app = create_app("test", bp_oracle, bp_match, GAME_DICE=FixedDice(0), TESTING=True)
    return app.test_client()
