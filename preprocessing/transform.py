"""
Feature transformation applied after exploration and before the split:
log-transform the right-skewed money columns and drop columns with no
modelling value.
"""

import numpy as np
import pandas as pd

# Income, credit-card spend and mortgage are heavily right-skewed
SKEWED_COLS = ["income", "ccavg", "mortgage"]

# zip_code carries no signal for loan acceptance; experience duplicates age (r ~ 0.99)
LOW_RELEVANCE_COLS = ["zip_code", "experience"]


def find_skewed_columns(df: pd.DataFrame, threshold: float = 1.0, exclude=()):
    """Numeric, non-categorical columns whose absolute skewness exceeds ``threshold``."""
    numeric = df.select_dtypes(include="number").drop(columns=list(exclude), errors="ignore")
    skewness = numeric.skew()
    return skewness[skewness.abs() > threshold].sort_values(ascending=False).index.tolist()


def log_transform(df: pd.DataFrame, cols=None) -> pd.DataFrame:
    cols = SKEWED_COLS if cols is None else list(cols)

    missing = [col for col in cols if col not in df.columns]
    if missing:
        raise KeyError(f"Columns not in data: {missing}")

    df = df.copy()
    for col in cols:
        if (df[col] < 0).any():
            raise ValueError(f"Cannot log-transform {col}: negative values present")
        # log1p keeps the zero mortgages at zero
        df[col] = np.log1p(df[col])

    return df


def drop_low_relevance(df: pd.DataFrame, cols=None) -> pd.DataFrame:
    cols = LOW_RELEVANCE_COLS if cols is None else list(cols)
    return df.drop(columns=cols, errors="ignore")


def transform_features(df: pd.DataFrame, log_cols=None, drop_cols=None) -> pd.DataFrame:
    df = log_transform(df, log_cols)
    df = drop_low_relevance(df, drop_cols)
    print("Model features:", list(df.columns))
    return df
