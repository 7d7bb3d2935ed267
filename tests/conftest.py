import io

import openpyxl
import pytest

from workhours.backend.api import create_app
from workhours.backend.services import FileHandler, RecordStore, WorkLog
from workhours.config import Config


@pytest.fixture
def file_handler(tmp_path):
    return FileHandler(tmp_path / "data")


@pytest.fixture
def store(file_handler):
    record_store = RecordStore(file_handler, "Ana", "03-2024")
    record_store.load()
    return record_store


@pytest.fixture
def work_log(file_handler):
    return WorkLog("Ana", file_handler)


@pytest.fixture
def app(tmp_path):
    class TestConfig(Config):
        TESTING = True
        DATA_DIR = tmp_path / "data"
        OUTPUT_DIR = tmp_path / "exports"

    return create_app(TestConfig)


@pytest.fixture
def client(app):
    return app.test_client()


def _read_sheet(data):
    """Return (sheet title, rows without empty cells) of an xlsx byte buffer."""
    wb = openpyxl.load_workbook(io.BytesIO(data))
    ws = wb.active
    rows = [
        [value for value in row if value not in (None, "")]
        for row in ws.iter_rows(values_only=True)
    ]
    return ws.title, rows


def _read_raw_rows(data):
    """Return the rows of an xlsx byte buffer exactly as stored (None for empty cells)."""
    wb = openpyxl.load_workbook(io.BytesIO(data))
    return [list(row) for row in wb.active.iter_rows(values_only=True)]


@pytest.fixture
def read_sheet():
    return _read_sheet


@pytest.fixture
def read_raw_rows():
    return _read_raw_rows
