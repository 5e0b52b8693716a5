"""
SUMMARY
--------
This script defines "split_and_format_data" that:
1. Separates the target from the features (optionally dropping columns).
2. Splits the data into train/test sets, stratified on the target (70/30).
3. Identifies numeric and categorical variables.
4. Builds and fits a preprocessing pipeline:
   - Imputes missing values
   - Scales numeric variables
   - One-hot encodes categorical variables (binary ones collapse to one dummy)
5. Returns train/test sets and the fitted preprocessor.

The test set returned here is the only one models are ever scored on;
resampling happens on the training set alone.
"""

import pandas as pd
from sklearn.model_selection import train_test_split
from sklearn.compose import ColumnTransformer
from sklearn.preprocessing import StandardScaler, OneHotEncoder
from sklearn.pipeline import Pipeline
from sklearn.impute import SimpleImputer

DEFAULT_DROP_COLS = []


def identify_variable_types(X: pd.DataFrame):
    categorical_vars = [
        col for col in X.columns
        if X[col].dtype == "object" or isinstance(X[col].dtype, pd.CategoricalDtype)
    ]
    numeric_vars = [col for col in X.columns if col not in categorical_vars]
    return numeric_vars, categorical_vars


def build_preprocessor(numeric_vars: list, categorical_vars: list) -> ColumnTransformer:
    numeric_transformer = Pipeline(steps=[
        ("imputer", SimpleImputer(strategy="mean")),        # fill missing numeric values with mean
        ("scaler", StandardScaler()),                       # standardize numeric features
    ])

    categorical_transformer = Pipeline(steps=[
        ("imputer", SimpleImputer(strategy="most_frequent")),
        ("onehot", OneHotEncoder(
            handle_unknown="ignore",
            drop="if_binary",                               # 0/1 indicators stay a single column
            sparse_output=False,
        )),
    ])

    preprocessor = ColumnTransformer(
        transformers=[
            ("num", numeric_transformer, numeric_vars),
            ("cat", categorical_transformer, categorical_vars),
        ],
        remainder="passthrough",
        verbose_feature_names_out=False,
    )
    # DataFrames out, so fitted models keep readable feature names
    return preprocessor.set_output(transform="pandas")


def split_and_format_data(
    df: pd.DataFrame,                   # cleaned and transformed dataset
    target_col: str = "personal_loan",  # target column name
    drop_cols: list = None,             # extra columns to leave out of X
    test_size: float = 0.3,             # fraction of data used for testing (30%)
    random_state: int = 42,             # random seed for reproducibility
):
    drop_cols = drop_cols or DEFAULT_DROP_COLS

    if target_col not in df.columns:
        raise ValueError(f"Target column {target_col!r} not in data")

    X = df.drop(columns=[target_col] + drop_cols, errors="ignore")
    y = df[target_col].astype(int)

    # Split data into train/test sets (keeping same class proportions)
    X_train, X_test, y_train, y_test = train_test_split(
        X, y,
        test_size=test_size,
        stratify=y,
        random_state=random_state,
    )

    numeric_vars, categorical_vars = identify_variable_types(X)
    print("Numeric cols:", numeric_vars)
    print("Categorical vars:", categorical_vars)
    print(
        f"Train: {len(X_train)} rows ({y_train.mean():.1%} positive), "
        f"test: {len(X_test)} rows ({y_test.mean():.1%} positive)"
    )

    preprocessor = build_preprocessor(numeric_vars, categorical_vars)
    preprocessor.fit(X_train)

    return X_train, X_test, y_train, y_test, preprocessor
