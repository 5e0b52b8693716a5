import numpy as np
import pandas as pd
import pytest

from preprocessing.transform import (
    LOW_RELEVANCE_COLS,
    SKEWED_COLS,
    drop_low_relevance,
    find_skewed_columns,
    log_transform,
    transform_features,
)


def test_log_transform(clean_df):
    out = log_transform(clean_df)

    for col in SKEWED_COLS:
        np.testing.assert_allclose(out[col], np.log1p(clean_df[col]))
    # Zero mortgages stay at zero
    assert (out.loc[clean_df["mortgage"] == 0, "mortgage"] == 0).all()
    # Input is not modified
    assert not clean_df["income"].equals(out["income"])


def test_log_transform_rejects_negative_values():
    df = pd.DataFrame({"income": [10.0, -1.0]})
    with pytest.raises(ValueError, match="income"):
        log_transform(df, ["income"])


def test_log_transform_missing_column():
    with pytest.raises(KeyError):
        log_transform(pd.DataFrame({"age": [30]}), ["income"])


def test_drop_low_relevance(clean_df):
    out = drop_low_relevance(clean_df)
    assert not set(LOW_RELEVANCE_COLS) & set(out.columns)
    assert len(out.columns) == len(clean_df.columns) - len(LOW_RELEVANCE_COLS)


def test_find_skewed_columns():
    rng = np.random.default_rng(1)
    df = pd.DataFrame({
        "skewed": rng.lognormal(0, 1, size=500),
        "symmetric": rng.normal(0, 1, size=500),
        "flag": pd.Series(rng.integers(0, 2, size=500)).astype("category"),
    })
    assert find_skewed_columns(df) == ["skewed"]
    assert find_skewed_columns(df, exclude=["skewed"]) == []


def test_transform_features(clean_df):
    out = transform_features(clean_df)
    assert "experience" not in out.columns
    assert out["income"].max() < clean_df["income"].max()
