"""
SUMMARY
--------
Ingestion and cleaning of the bank personal-loan dataset.

1. Reads the CSV and normalizes column names ("ZIP Code" -> "zip_code").
2. Checks the fixed 14-column schema.
3. Drops the identifier column.
4. Corrects the one malformed zip code (four digits instead of five).
5. Casts the binary indicator columns to ``category`` dtype.
"""

import re

import pandas as pd

EXPECTED_COLUMNS = [
    "id",
    "age",
    "experience",
    "income",
    "zip_code",
    "family",
    "ccavg",
    "education",
    "mortgage",
    "personal_loan",
    "securities_account",
    "cd_account",
    "online",
    "creditcard",
]

# Binary 0/1 columns, target included
INDICATOR_COLS = [
    "personal_loan",
    "securities_account",
    "cd_account",
    "online",
    "creditcard",
]

ID_COL = "id"
ZIP_COL = "zip_code"

# The source data holds a single four-digit zip code; 93007 is the code it lost a digit from.
ZIP_CORRECTIONS = {9307: 93007}


def normalize_column_names(columns):
    """Lowercase, snake_case column names: ``"ZIP Code"`` / ``"ZIP.Code"`` -> ``"zip_code"``."""
    return [re.sub(r"[^0-9a-z]+", "_", str(col).strip().lower()).strip("_") for col in columns]


def read_bank_data(data_path: str) -> pd.DataFrame:
    df = pd.read_csv(data_path)
    df.columns = normalize_column_names(df.columns)

    missing = [col for col in EXPECTED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Input data is missing expected columns: {missing}")

    print(f"Loaded {len(df)} rows x {df.shape[1]} columns from {data_path}")
    return df


def find_malformed_zip_codes(df: pd.DataFrame, zip_col: str = ZIP_COL) -> pd.DataFrame:
    """Return the rows whose zip code is not a five-digit number."""
    # Float columns (a CSV with blanks) would read "93007.0"; compare as whole numbers
    numeric = pd.to_numeric(df[zip_col], errors="coerce")
    zips = numeric.where(numeric.mod(1) == 0).astype("Int64").astype(str)
    return df[~zips.str.fullmatch(r"\d{5}")]


def clean_bank_data(
    df: pd.DataFrame,
    zip_corrections: dict = None,
    indicator_cols: list = None,
) -> pd.DataFrame:
    zip_corrections = ZIP_CORRECTIONS if zip_corrections is None else zip_corrections
    indicator_cols = indicator_cols or INDICATOR_COLS

    # Work on a copy, the loaded frame stays as read
    df = df.drop(columns=[ID_COL], errors="ignore").copy()

    for bad_zip, good_zip in zip_corrections.items():
        n_fixed = int((df[ZIP_COL] == bad_zip).sum())
        if n_fixed:
            df[ZIP_COL] = df[ZIP_COL].replace(bad_zip, good_zip)
            print(f"Corrected zip code {bad_zip} -> {good_zip} ({n_fixed} rows)")

    remaining = find_malformed_zip_codes(df)
    if not remaining.empty:
        print(f"WARNING: {len(remaining)} malformed zip codes remain: {remaining[ZIP_COL].unique().tolist()}")

    for col in indicator_cols:
        df[col] = df[col].astype("category")

    return df


def load_bank_data(data_path: str, zip_corrections: dict = None) -> pd.DataFrame:
    return clean_bank_data(read_bank_data(data_path), zip_corrections=zip_corrections)
