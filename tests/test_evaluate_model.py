import os

import numpy as np
import pandas as pd
import pytest

from explain.evaluate_model import (
    confusion_counts,
    evaluate_model,
    specificity_score,
    summarize_results,
)


class FixedProbabilityModel:
    """Returns preset positive-class probabilities, one per test row."""

    def __init__(self, proba):
        self.proba = np.asarray(proba, dtype=float)

    def predict_proba(self, X):
        return np.column_stack([1 - self.proba, self.proba])


def test_confusion_counts_and_specificity():
    y_true = [0, 0, 0, 1, 1]
    y_pred = [0, 1, 0, 1, 0]

    assert confusion_counts(y_true, y_pred) == (2, 1, 1, 1)
    assert specificity_score(y_true, y_pred) == pytest.approx(2 / 3)


def test_confusion_counts_single_class():
    assert confusion_counts([0, 0], [0, 0]) == (2, 0, 0, 0)
    assert specificity_score([1, 1], [1, 1]) == 0.0


def test_evaluate_model(tmp_path):
    X_test = pd.DataFrame({"income": range(6)}, index=[10, 11, 12, 13, 14, 15])
    y_test = pd.Series([0, 0, 0, 1, 1, 1], index=X_test.index)
    model = FixedProbabilityModel([0.1, 0.6, 0.2, 0.9, 0.8, 0.3])

    metrics = evaluate_model(model, X_test, y_test, str(tmp_path), metadata={"model_type": "stub"})

    # tp = 2, fn = 1, fp = 1, tn = 2
    assert metrics["recall"] == pytest.approx(2 / 3)
    assert metrics["precision"] == pytest.approx(2 / 3)
    assert metrics["specificity"] == pytest.approx(2 / 3)
    assert metrics["accuracy"] == pytest.approx(4 / 6)
    assert (metrics["tn"], metrics["fp"], metrics["fn"], metrics["tp"]) == (2, 1, 1, 2)
    assert metrics["model_type"] == "stub"

    for name in ["test_metrics.csv", "predictions.csv", "confusion_matrix.csv", "precision_recall_curve.pdf"]:
        assert os.path.exists(tmp_path / name)

    cm = pd.read_csv(tmp_path / "confusion_matrix.csv", index_col=0)
    assert cm.loc["Total", "Total"] == 6
    assert cm.loc["actual_1", "pred_1"] == 2

    preds = pd.read_csv(tmp_path / "predictions.csv")
    assert preds["row"].tolist() == [10, 11, 12, 13, 14, 15]


def test_evaluate_model_threshold(tmp_path):
    X_test = pd.DataFrame({"income": range(4)})
    y_test = pd.Series([0, 0, 1, 1])
    model = FixedProbabilityModel([0.1, 0.4, 0.35, 0.9])

    metrics = evaluate_model(model, X_test, y_test, str(tmp_path), threshold=0.3)

    assert metrics["threshold"] == 0.3
    assert metrics["recall"] == 1.0
    assert metrics["specificity"] == 0.5


def test_summarize_results(tmp_path):
    metrics = [
        {"model_type": "logistic", "sampling": "original", "recall": 0.6, "f1_score": 0.7},
        {"model_type": "tree", "sampling": "original", "recall": 0.8, "f1_score": 0.75},
        {"model_type": "logistic", "sampling": "smote", "recall": 0.9, "f1_score": 0.6},
        {"model_type": "tree", "sampling": "smote", "recall": 0.8, "f1_score": 0.8},
    ]

    comparison = summarize_results(metrics, str(tmp_path))

    assert comparison["recall"].tolist() == [0.9, 0.8, 0.8, 0.6]
    # Ties on recall are broken by F1
    assert comparison.loc[1, "sampling"] == "smote"
    assert os.path.exists(tmp_path / "model_comparison.csv")
    assert os.path.exists(tmp_path / "recall_comparison.pdf")
