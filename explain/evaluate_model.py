import pandas as pd
import matplotlib.pyplot as plt
from sklearn.metrics import (
    accuracy_score,
    precision_score,
    recall_score,
    f1_score,
    roc_auc_score,
    PrecisionRecallDisplay,
    confusion_matrix,
)
import os


def confusion_counts(y_true, y_pred):
    """(tn, fp, fn, tp) for a binary problem, always 2x2 even if a class is absent."""
    tn, fp, fn, tp = confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel()
    return int(tn), int(fp), int(fn), int(tp)


def specificity_score(y_true, y_pred):
    tn, fp, _, _ = confusion_counts(y_true, y_pred)
    return tn / (tn + fp) if (tn + fp) else 0.0


def evaluate_model(
    model, X_test, y_test, output_dir, threshold=0.5, metadata=None
):
    os.makedirs(output_dir, exist_ok=True)

    y_proba = model.predict_proba(X_test)[:, 1]
    y_pred = (y_proba >= threshold).astype(int)
    tn, fp, fn, tp = confusion_counts(y_test, y_pred)

    metrics = {
        "threshold": threshold,
        "accuracy": accuracy_score(y_test, y_pred),
        "precision": precision_score(y_test, y_pred, zero_division=0),
        "recall": recall_score(y_test, y_pred, zero_division=0),
        "f1_score": f1_score(y_test, y_pred, zero_division=0),
        "specificity": specificity_score(y_test, y_pred),
        "roc_auc": roc_auc_score(y_test, y_proba),
        "tn": tn,
        "fp": fp,
        "fn": fn,
        "tp": tp,
    }

    if metadata:
        metrics.update(metadata)

    pd.DataFrame([metrics]).to_csv(
        os.path.join(output_dir, "test_metrics.csv"), index=False
    )

    # Row position in the loaded dataset identifies the customer once the id column is gone
    preds_df = pd.DataFrame({
        "row": X_test.index,
        "y_test": y_test.values if hasattr(y_test, "values") else y_test,
        "y_proba": y_proba,
        "y_pred": y_pred,
    })
    preds_df.to_csv(os.path.join(output_dir, "predictions.csv"), index=False)

    # precision recall curve
    display = PrecisionRecallDisplay.from_predictions(y_test, y_proba)
    display.ax_.set_title("Precision-recall curve")
    display.figure_.savefig(os.path.join(output_dir, "precision_recall_curve.pdf"))
    plt.close(display.figure_)

    # confusion matrix
    labels = ["actual_0", "actual_1"]
    pred_labels = ["pred_0", "pred_1"]

    cm_df = pd.DataFrame([[tn, fp], [fn, tp]], index=labels, columns=pred_labels)

    cm_df["Total"] = cm_df.sum(axis=1)
    total_row = cm_df.sum(axis=0).rename("Total")
    cm_df = pd.concat([cm_df, total_row.to_frame().T])

    cm_df.to_csv(os.path.join(output_dir, "confusion_matrix.csv"))

    return metrics


def summarize_results(metrics, output_dir):
    """Side-by-side table of all evaluated models, best recall first."""
    os.makedirs(output_dir, exist_ok=True)

    comparison = (
        pd.DataFrame(metrics)
        .sort_values(by=["recall", "f1_score"], ascending=False)
        .reset_index(drop=True)
    )
    comparison.to_csv(os.path.join(output_dir, "model_comparison.csv"), index=False)

    # Grouped bar chart: one group per training variant, one bar per model type
    if {"model_type", "sampling"} <= set(comparison.columns):
        recall_table = comparison.pivot(index="sampling", columns="model_type", values="recall")
        ax = recall_table.plot(kind="bar", figsize=(8, 4.5), rot=0)
        ax.set_ylim(0, 1)
        ax.set_ylabel("Test recall")
        ax.set_xlabel("Training variant")
        ax.set_title("Recall on the held-out test set")
        plt.tight_layout()
        plt.savefig(os.path.join(output_dir, "recall_comparison.pdf"))
        plt.close()

    return comparison
