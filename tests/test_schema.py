"""
Unit tests for institutions and normalization tables.
"""
import json

import pytest
from pydantic import ValidationError

from core.exceptions import ConfigurationError
from core.schema import Institution, NormalizationTable, load_normalization_config


def test_institution_parse():
    assert Institution.parse("capitalOne") is Institution.CAPITAL_ONE
    assert Institution.parse("schwab") is Institution.SCHWAB


def test_institution_parse_unknown():
    with pytest.raises(ConfigurationError) as exc_info:
        Institution.parse("Schwab")
    assert exc_info.value.details["known"] == ["capitalOne", "schwab"]


def test_table_aliases():
    table = NormalizationTable.model_validate({
        "headerNormalization": {"Date": "Timestamp"},
        "categorize": {"Dining": "Food"},
        "monetaryColumns": ["Amount"],
    })
    assert table.header_normalization == {"Date": "Timestamp"}
    assert table.categorize == {"Dining": "Food"}
    assert table.monetary_columns == ("Amount",)


def test_table_defaults():
    table = NormalizationTable()
    assert table.header_normalization == {}
    assert table.categorize == {}
    assert table.monetary_columns is None


def test_table_is_immutable():
    table = NormalizationTable()
    with pytest.raises(ValidationError):
        table.categorize = {"a": "b"}


def test_table_mappings_are_read_only():
    table = NormalizationTable.model_validate({
        "headerNormalization": {"Date": "Timestamp"},
        "categorize": {"Dining": "Food"},
    })
    with pytest.raises(TypeError):
        table.categorize["Dining"] = "Restaurants"
    with pytest.raises(TypeError):
        table.header_normalization["Memo"] = "Note"
    assert table.categorize["Dining"] == "Food"


def test_table_does_not_share_source_dict():
    source = {"Dining": "Food"}
    table = NormalizationTable(categorize=source)
    source["Dining"] = "Restaurants"
    assert table.categorize["Dining"] == "Food"


def test_config_institutions_are_read_only(normalization_file):
    config = load_normalization_config(str(normalization_file))
    with pytest.raises(TypeError):
        config.institutions["chase"] = NormalizationTable()


def test_table_rejects_empty_monetary_columns():
    with pytest.raises(ValidationError):
        NormalizationTable.model_validate({"monetaryColumns": []})


def test_load_normalization_config(normalization_file):
    config = load_normalization_config(str(normalization_file))
    assert config.sheet_title == "Ledger"
    assert sorted(config.institutions) == ["capitalOne", "schwab"]
    table = config.table_for(Institution.SCHWAB)
    assert table.header_normalization["RunningBalance"] == "Category"


def test_table_for_missing_institution(tmp_path):
    path = tmp_path / "tables.json"
    path.write_text(json.dumps({"institutions": {"schwab": {}}}), encoding="utf-8")
    config = load_normalization_config(str(path))
    with pytest.raises(ConfigurationError):
        config.table_for(Institution.CAPITAL_ONE)


def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_normalization_config(str(tmp_path / "nope.json"))


def test_load_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_normalization_config(str(path))


def test_load_wrong_shape(tmp_path):
    path = tmp_path / "shape.json"
    path.write_text(json.dumps({"institutions": {"schwab": {"categorize": ["x"]}}}), encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_normalization_config(str(path))
