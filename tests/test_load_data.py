import pandas as pd
import pytest

from preprocessing.load_data import (
    EXPECTED_COLUMNS,
    INDICATOR_COLS,
    clean_bank_data,
    find_malformed_zip_codes,
    load_bank_data,
    normalize_column_names,
    read_bank_data,
)


def test_normalize_column_names():
    assert normalize_column_names(["ZIP Code", "ZIP.Code", "CCAvg", "Personal Loan", " ID "]) == [
        "zip_code",
        "zip_code",
        "ccavg",
        "personal_loan",
        "id",
    ]


def test_read_bank_data_normalizes_headers(bank_csv):
    df = read_bank_data(bank_csv)
    assert list(df.columns) == EXPECTED_COLUMNS


def test_read_bank_data_rejects_missing_columns(tmp_path, raw_bank_df):
    path = tmp_path / "broken.csv"
    raw_bank_df.drop(columns=["Online"]).to_csv(path, index=False)

    with pytest.raises(ValueError, match="online"):
        read_bank_data(str(path))


def test_find_malformed_zip_codes(bank_csv):
    df = read_bank_data(bank_csv)
    malformed = find_malformed_zip_codes(df)
    assert malformed["zip_code"].tolist() == [9307]


def test_clean_bank_data_applies_documented_edits(bank_csv):
    raw = read_bank_data(bank_csv)
    df = clean_bank_data(raw)

    assert "id" not in df.columns
    assert df.loc[0, "zip_code"] == 93007
    assert find_malformed_zip_codes(df).empty
    for col in INDICATOR_COLS:
        assert isinstance(df[col].dtype, pd.CategoricalDtype)

    # Nothing else changes
    assert df["income"].equals(raw["income"])
    assert len(df) == len(raw)


def test_clean_bank_data_leaves_input_untouched(bank_csv):
    raw = read_bank_data(bank_csv)
    snapshot = raw.copy()

    clean_bank_data(raw)

    pd.testing.assert_frame_equal(raw, snapshot)


def test_load_bank_data(bank_csv, raw_bank_df):
    df = load_bank_data(bank_csv)
    assert df.shape == (len(raw_bank_df), len(EXPECTED_COLUMNS) - 1)


def test_find_malformed_zip_codes_on_float_column():
    # A blank zip code makes pandas read the whole column as float
    df = pd.DataFrame({"zip_code": [93007.0, 9307.0, None, 94720.0, 9100.5]})

    malformed = find_malformed_zip_codes(df)

    assert malformed.index.tolist() == [1, 2, 4]
