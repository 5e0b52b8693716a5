import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from preprocessing.load_data import load_bank_data
from preprocessing.transform import transform_features
from preprocessing.split_format import split_and_format_data

SOURCE_HEADERS = [
    "ID", "Age", "Experience", "Income", "ZIP Code", "Family", "CCAvg",
    "Education", "Mortgage", "Personal Loan", "Securities Account",
    "CD Account", "Online", "CreditCard",
]


def make_bank_data(n=600, positive_share=0.12, seed=0):
    """Synthetic customers shaped like the source file, one malformed zip code included."""
    rng = np.random.default_rng(seed)

    age = rng.integers(23, 68, size=n)
    experience = age - 25 + rng.integers(-2, 3, size=n)     # a few negative values, as in the source
    income = np.round(rng.gamma(2.5, 30.0, size=n) + 8).astype(int)
    family = rng.integers(1, 5, size=n)
    ccavg = np.round(rng.gamma(1.5, 1.2, size=n), 1)
    education = rng.integers(1, 4, size=n)
    mortgage = np.where(rng.random(n) < 0.7, 0, rng.integers(75, 636, size=n))
    zip_code = rng.choice([94720, 90089, 92037, 95616, 93943], size=n)
    zip_code[0] = 9307

    score = 0.04 * income + 0.8 * education + 0.3 * ccavg + rng.normal(0, 1, size=n)
    personal_loan = (score > np.quantile(score, 1 - positive_share)).astype(int)

    cd_account = np.where(personal_loan == 1, rng.random(n) < 0.3, rng.random(n) < 0.03).astype(int)

    return pd.DataFrame(
        {
            "ID": np.arange(1, n + 1),
            "Age": age,
            "Experience": experience,
            "Income": income,
            "ZIP Code": zip_code,
            "Family": family,
            "CCAvg": ccavg,
            "Education": education,
            "Mortgage": mortgage,
            "Personal Loan": personal_loan,
            "Securities Account": (rng.random(n) < 0.1).astype(int),
            "CD Account": cd_account,
            "Online": (rng.random(n) < 0.6).astype(int),
            "CreditCard": (rng.random(n) < 0.3).astype(int),
        },
        columns=SOURCE_HEADERS,
    )


@pytest.fixture
def raw_bank_df():
    return make_bank_data()


@pytest.fixture
def bank_csv(tmp_path, raw_bank_df):
    path = tmp_path / "bank.csv"
    raw_bank_df.to_csv(path, index=False)
    return str(path)


@pytest.fixture
def clean_df(bank_csv):
    return load_bank_data(bank_csv)


@pytest.fixture
def model_df(clean_df):
    return transform_features(clean_df)


@pytest.fixture
def split(model_df):
    return split_and_format_data(model_df, target_col="personal_loan", random_state=42)
