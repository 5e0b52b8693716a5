"""
Utility for training a Logistic Regression model with manual grid-search
and cross-validation.

SUMMARY
--------
1) train_logistic_model():
   - Wraps an optional imbalance sampler, the preprocessor and a
     LogisticRegression in one imblearn Pipeline. The sampler and the
     scaler/encoder are refitted on every training fold, so the validation
     folds stay unresampled.
   - Grid search over the inverse regularization strength C with stratified
     K-fold CV (see models.grid_search).
   - Refits the best setting on the full training set.

2) extract_coefficients():
   - Coefficients and odds ratios, sorted by absolute magnitude.
"""

import numpy as np
import pandas as pd
from imblearn.pipeline import Pipeline
from sklearn.base import clone
from sklearn.linear_model import LogisticRegression

from models.grid_search import cross_validate_candidates, sampler_step


def _make_pipeline(preprocessor, sampler, C, random_state):
    return Pipeline(steps=[
        ("sampler", sampler_step(sampler)),
        ("preprocess", clone(preprocessor).set_output(transform="pandas")),
        ("model", LogisticRegression(
            C=C,
            solver="lbfgs",
            max_iter=1000,
            random_state=random_state,
        )),
    ])


def train_logistic_model(
    X,                                      # feature matrix (unresampled training set)
    y,                                      # binary target
    preprocessor,                           # ColumnTransformer from split_and_format_data
    sampler=None,                           # imblearn sampler from make_sampler, None = no resampling
    C_values=(0.01, 0.1, 1.0, 10.0),        # inverse regularization strengths
    random_state=42,                        # seed for reproducibility
    cv_folds=3,                             # number of stratified folds
    maximize="recall",                      # metric to optimize ("f1" or "recall")
    min_precision=None,                     # min precision if maximizing recall
):
    best_params, results = cross_validate_candidates(
        lambda C: _make_pipeline(preprocessor, sampler, C, random_state),
        {"C": list(C_values)},
        X,
        y,
        cv_folds=cv_folds,
        maximize=maximize,
        min_precision=min_precision,
        random_state=random_state,
    )
    best_cv = results.loc[results["eligible"], maximize].max()
    print(f"Best params: {best_params} (CV {maximize} {best_cv:.3f})")

    # Refit best model on the FULL training set with the chosen hyperparameters
    best_model = _make_pipeline(preprocessor, sampler, best_params["C"], random_state).fit(X, y)

    return best_model, best_params


# Function to extract model coefficients and sort by importance
def extract_coefficients(model):
    feature_names = model.named_steps["preprocess"].get_feature_names_out()
    coefs = model.named_steps["model"].coef_.flatten()
    return (
        pd.DataFrame({
            "feature": feature_names,
            "coefficient": coefs,
            "odds_ratio": np.exp(coefs),
        })
        .sort_values(by="coefficient", key=np.abs, ascending=False)
        .reset_index(drop=True)
    )
