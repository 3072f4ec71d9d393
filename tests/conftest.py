"""
Shared fixtures for ledgersheet tests.
"""
import json

import pytest

from core.config import reset_settings
from core.schema import NormalizationTable

SETTINGS_ENV = [
    "INSTITUTION",
    "CSV_PATH",
    "NORMALIZATION_CONFIG_PATH",
    "OUTPUT_DIR",
    "LOG_LEVEL",
    "SHEET_ID",
    "SHEET_TITLE",
    "GOOGLE_CREDENTIALS_PATH",
]

CAPITAL_ONE_TABLE = {
    "headerNormalization": {
        "Date": "Timestamp",
        "Description": "Item",
        "Category": "Category",
        "Debit": "Debit",
        "Credit": "Credit",
    },
    "categorize": {"Dining": "Food & Drink"},
}

SCHWAB_TABLE = {
    "headerNormalization": {
        "Date": "Timestamp",
        "Type": "Type",
        "Description": "Item",
        "Withdrawal (-)": "Debit",
        "Deposit (+)": "Credit",
        "RunningBalance": "Category",
    },
    "categorize": {"Grocery Store": "Food"},
}


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Isolate every test from the process environment and any .env file."""
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def capital_one_table():
    return NormalizationTable.model_validate(CAPITAL_ONE_TABLE)


@pytest.fixture
def schwab_table():
    return NormalizationTable.model_validate(SCHWAB_TABLE)


@pytest.fixture
def normalization_file(tmp_path):
    """Normalization JSON with both institutions."""
    path = tmp_path / "normalization.json"
    path.write_text(json.dumps({
        "sheetTitle": "Ledger",
        "institutions": {"capitalOne": CAPITAL_ONE_TABLE, "schwab": SCHWAB_TABLE},
    }), encoding="utf-8")
    return path


@pytest.fixture
def write_csv(tmp_path):
    """Write CSV text to a file under tmp_path and return its path as str."""
    def _write(text, name="export.csv"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8", newline="")
        return str(path)
    return _write


@pytest.fixture
def capital_one_csv(write_csv):
    return write_csv(
        "Date,Description,Category,Debit,Credit\n"
        "01/02/2023,Coffee,Dining,4.50,\n"
        "01/03/2023,Balance forward,,,\n"
        "01/04/2023,\"Refund, partial\",Merchandise,,12.00\n",
        name="capital_one.csv",
    )
