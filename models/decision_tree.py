"""
Utility for training a decision tree (CART) classifier with grid-search.

This module:
1. Tests all combinations of hyperparameters from `param_grid`
   (depth, leaf size and cost-complexity pruning strength).
2. Uses stratified K-fold cross-validation. cv_folds=3
3. Keeps the combination with the best score (default: recall).
4. Refits the final model on the full training set before returning.

An optional imbalance sampler runs as the first Pipeline step, so it is
applied to each training fold only and the validation folds stay unresampled.

It also exposes helpers to read the fitted tree: feature importances,
text rules and a tree plot.
"""

import os

import matplotlib.pyplot as plt
import pandas as pd
from imblearn.pipeline import Pipeline
from sklearn.base import clone
from sklearn.tree import DecisionTreeClassifier, export_text, plot_tree

from models.grid_search import cross_validate_candidates, sampler_step

DEFAULT_PARAM_GRID = {
    "max_depth": [3, 5, 8],
    "min_samples_leaf": [1, 5, 20],
    "ccp_alpha": [0.0, 0.001, 0.01],
}


def _make_pipeline(preprocessor, sampler, params, random_state):
    return Pipeline(steps=[
        ("sampler", sampler_step(sampler)),
        ("preprocess", clone(preprocessor).set_output(transform="pandas")),
        ("model", DecisionTreeClassifier(random_state=random_state, **params)),
    ])


def train_decision_tree(
    X,                                      # feature matrix (pandas DataFrame)
    y,                                      # binary target vector (pandas Series)
    preprocessor,                           # ColumnTransformer from split_and_format_data
    sampler=None,                           # imblearn sampler from make_sampler, None = no resampling
    param_grid=None,                        # dict of hyperparameters to test
    cv_folds=3,                             # number of cross-validation folds
    maximize="recall",                      # metric to optimize ('f1' or 'recall')
    min_precision=None,                     # minimum precision if maximizing recall
    random_state=42,                        # seed for reproducibility
):
    """Train a decision tree classifier with manual grid search."""
    param_grid = param_grid or DEFAULT_PARAM_GRID

    best_params, results = cross_validate_candidates(
        lambda **params: _make_pipeline(preprocessor, sampler, params, random_state),
        param_grid,
        X,
        y,
        cv_folds=cv_folds,
        maximize=maximize,
        min_precision=min_precision,
        random_state=random_state,
    )
    best_cv = results.loc[results["eligible"], maximize].max()
    print(f"Best params: {best_params} (CV {maximize} {best_cv:.3f})")

    best_model = _make_pipeline(preprocessor, sampler, best_params, random_state).fit(X, y)
    return best_model, best_params


def extract_feature_importances(model):
    return (
        pd.DataFrame({
            "feature": model.named_steps["preprocess"].get_feature_names_out(),
            "importance": model.named_steps["model"].feature_importances_,
        })
        .sort_values(by="importance", ascending=False)
        .reset_index(drop=True)
    )


def describe_tree(model, max_depth=10):
    """Text rendering of the fitted tree's split rules."""
    feature_names = list(model.named_steps["preprocess"].get_feature_names_out())
    return export_text(model.named_steps["model"], feature_names=feature_names, max_depth=max_depth)


def plot_tree_structure(model, output_path, max_depth=3):
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

    plt.figure(figsize=(14, 7))
    plot_tree(
        model.named_steps["model"],
        feature_names=list(model.named_steps["preprocess"].get_feature_names_out()),
        class_names=["no loan", "loan"],
        filled=True,
        max_depth=max_depth,
        fontsize=8,
    )
    plt.title("Decision tree (top levels)")
    plt.tight_layout()
    plt.savefig(output_path)
    plt.close()
    return output_path
