# tests/conftest.py
import os
import tempfile
import pytest

from atm_engine import db
from atm_engine.app import create_engine
from atm_engine.repo import StateRepo
from atm_engine.settings import ATMSettings, TechnicianCredentials

@pytest.fixture(scope="session")
def tmp_db_path():
    with tempfile.TemporaryDirectory() as d:
        yield os.path.join(d, "test.sqlite3")  # removed automatically

@pytest.fixture(scope="session", autouse=True)
def init_storage(tmp_db_path):
    os.environ["ATM_DB_PATH"] = tmp_db_path     # <-- TEST-ONLY DB
    db.init_db(tmp_db_path)

@pytest.fixture(autouse=True)
def clean_db(tmp_db_path):
    db.truncate_all(tmp_db_path)   # isolation between tests
    yield
    db.truncate_all(tmp_db_path)

@pytest.fixture()
def settings(tmp_db_path):
    return ATMSettings(
        db_path=tmp_db_path,
        initial_cash=1000,
        technicians=(TechnicianCredentials(tech_id="tech", password="s3cret"),),
    )

@pytest.fixture()
def state(tmp_db_path):
    return StateRepo(tmp_db_path)

@pytest.fixture()
def engine(settings):
    return create_engine(settings)
