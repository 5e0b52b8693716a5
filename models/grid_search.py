"""
Manual grid search shared by the model trainers.

For every combination in ``param_grid`` a fresh model is built with
``build_model(**params)`` and scored with stratified K-fold cross-validation.
Models are fitted on the training folds only; pipelines with a sampler step
resample there and predict on the unresampled validation fold.
Per-fold F1, precision and recall are averaged and the best combination is
picked on the chosen metric. When maximizing recall, ``min_precision`` (if
given) excludes candidates whose average precision falls below it.
"""

from itertools import product

import numpy as np
import pandas as pd
from sklearn.base import clone
from sklearn.metrics import f1_score, precision_score, recall_score
from sklearn.model_selection import StratifiedKFold

VALID_METRICS = ("f1", "recall")


def cross_validate_candidates(
    build_model,            # callable(**params) -> unfitted estimator
    param_grid,             # dict of hyperparameter name -> list of values
    X,                      # feature matrix (pandas DataFrame)
    y,                      # binary target vector (pandas Series)
    cv_folds=3,             # number of stratified folds
    maximize="recall",      # metric to optimize ('f1' or 'recall')
    min_precision=None,     # precision floor when maximizing recall
    random_state=42,        # seed for the fold assignment
):
    if maximize not in VALID_METRICS:
        raise ValueError("maximize must be 'f1' or 'recall'")

    # Positional indexing below; resampled sets can carry duplicate index labels
    X = X.reset_index(drop=True)
    y = pd.Series(y).reset_index(drop=True)

    param_names = list(param_grid.keys())
    grid = list(product(*param_grid.values()))

    skf = StratifiedKFold(n_splits=cv_folds, shuffle=True, random_state=random_state)

    best_score = -np.inf
    best_params = None
    results = []

    for combo in grid:
        params_dict = dict(zip(param_names, combo))
        metrics = []

        for train_idx, val_idx in skf.split(X, y):
            model = build_model(**params_dict)
            model.fit(X.iloc[train_idx], y.iloc[train_idx])
            y_pred = model.predict(X.iloc[val_idx])
            y_val_fold = y.iloc[val_idx]

            metrics.append({
                "f1": f1_score(y_val_fold, y_pred, zero_division=0),
                "precision": precision_score(y_val_fold, y_pred, zero_division=0),
                "recall": recall_score(y_val_fold, y_pred, zero_division=0),
            })

        avg = pd.DataFrame(metrics).mean(numeric_only=True).to_dict()
        score = avg[maximize]
        valid = (
            maximize == "f1"
            or min_precision is None
            or avg["precision"] >= min_precision
        )

        avg.update(params_dict)
        avg["eligible"] = valid
        results.append(avg)

        if valid and score > best_score:
            best_score = score
            best_params = params_dict

    if best_params is None:
        raise RuntimeError("No valid hyperparameter combination satisfied the criteria.")

    return best_params, pd.DataFrame(results)


def sampler_step(sampler):
    """Pipeline step for an imbalance sampler; a fresh clone, or passthrough when there is none."""
    if sampler is None or isinstance(sampler, str):
        return "passthrough"
    return clone(sampler)
