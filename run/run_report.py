"""
Run the personal-loan report pipeline.

This script orchestrates the full analysis of the bank customer data:
1. Load the CSV and clean it (drop id, fix the malformed zip code, recode indicators).
2. Explore: summary statistics, distributions, correlation matrix.
3. Transform: log the skewed money columns, drop low-relevance columns.
4. Split 70/30, stratified on personal loan acceptance.
5. Build the training variants: original, down-sampled, up-sampled, SMOTE, ROSE.
6. Fit logistic regression and a decision tree per variant; the resampling runs
   inside the pipeline, so CV scores come from unresampled validation folds.
7. Evaluate each model on the same untouched test set and compare recall.

All files are written under ``results/report``.
"""

import joblib
import pandas as pd
import os
import sys

# ----------------------------------------------------------------------
# 1️⃣  Project setup: put the repository root on ``sys.path`` so the
#     pipeline modules import when run as ``python run/run_report.py``.
# ----------------------------------------------------------------------
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# ----------------------------------------------------------------------
# 2️⃣  Import pipeline components
# ----------------------------------------------------------------------
from preprocessing.load_data import load_bank_data
from preprocessing.transform import (
    transform_features,
    find_skewed_columns,
    SKEWED_COLS,
    LOW_RELEVANCE_COLS,
)
from preprocessing.split_format import split_and_format_data
from preprocessing.resample import make_resampled_sets, make_sampler
from explore.eda import run_eda
from models.logistic_regression import train_logistic_model, extract_coefficients
from models.decision_tree import (
    train_decision_tree,
    extract_feature_importances,
    describe_tree,
    plot_tree_structure,
    DEFAULT_PARAM_GRID,
)
from explain.evaluate_model import evaluate_model, summarize_results
from explain.feature_importance import run_shap_analysis

# ----------------------------------------------------------------------
# 3️⃣  Global settings
# ----------------------------------------------------------------------
DATA_PATH = "data/Bank_Personal_Loan_Modelling.csv"
OUTPUT_DIR = "results/report"
TARGET_COL = "personal_loan"
RANDOM_STATE = 42
TEST_SIZE = 0.3
MAXIMIZE_METRIC = "recall"      # Metric to optimise during hyper-parameter search
MIN_PRECISION = 0.5             # Recall-optimal candidates must keep at least this CV precision
C_VALUES = (0.01, 0.1, 1.0, 10.0)
TREE_PARAM_GRID = DEFAULT_PARAM_GRID
SHAP_SAMPLE_SIZE = 1000


def run_report(
    data_path=DATA_PATH,
    output_dir=OUTPUT_DIR,
    random_state=RANDOM_STATE,
    test_size=TEST_SIZE,
    maximize=MAXIMIZE_METRIC,
    min_precision=MIN_PRECISION,
    C_values=C_VALUES,
    tree_param_grid=None,
    shap_sample_size=SHAP_SAMPLE_SIZE,
):
    tree_param_grid = tree_param_grid or TREE_PARAM_GRID
    os.makedirs(output_dir, exist_ok=True)

    # ------------------------------------------------------------------
    # 4️⃣  Load & clean the raw dataset
    # ------------------------------------------------------------------
    print("\n--- Loading data ---")
    df = load_bank_data(data_path)

    # ------------------------------------------------------------------
    # 5️⃣  Exploratory analysis on the cleaned, untransformed data
    # ------------------------------------------------------------------
    print("\n--- Exploration ---")
    run_eda(df, TARGET_COL, os.path.join(output_dir, "eda"))

    # Skew check behind the log transform, ignoring the columns dropped anyway
    skewed = find_skewed_columns(df, exclude=LOW_RELEVANCE_COLS)
    print(f"Skewed columns (|skew| > 1): {skewed}; log-transformed: {SKEWED_COLS}")

    # ------------------------------------------------------------------
    # 6️⃣  Transform, then split
    # ------------------------------------------------------------------
    print("\n--- Transformation & split ---")
    df_model = transform_features(df, log_cols=SKEWED_COLS, drop_cols=LOW_RELEVANCE_COLS)

    X_train, X_test, y_train, y_test, preprocessor = split_and_format_data(
        df_model,
        target_col=TARGET_COL,
        test_size=test_size,
        random_state=random_state,
    )

    # Persist the fitted pre-processor for future inference or debugging
    joblib.dump(preprocessor, os.path.join(output_dir, "preprocessor.joblib"))

    # ------------------------------------------------------------------
    # 7️⃣  Training variants for class imbalance (test set is never resampled).
    #     The full variants are built once for their sizes and as SHAP
    #     background; models resample inside each CV fold via make_sampler.
    # ------------------------------------------------------------------
    print("\n--- Resampling ---")
    train_sets = make_resampled_sets(X_train, y_train, random_state=random_state)
    pd.DataFrame(
        [
            {"sampling": name, "rows": len(y_res), "positive_share": y_res.mean()}
            for name, (_, y_res) in train_sets.items()
        ]
    ).to_csv(os.path.join(output_dir, "training_variants.csv"), index=False)

    # ------------------------------------------------------------------
    # 8️⃣  Fit, evaluate and explain both model families on every variant
    # ------------------------------------------------------------------
    all_metrics = []
    for sampling, (X_res, _) in train_sets.items():
        sampler = make_sampler(sampling, random_state=random_state)

        # Logistic regression
        print(f"\n--- Logistic regression: {sampling} ---")
        lr_dir = os.path.join(output_dir, "logistic", sampling)
        model_lr, best_params_lr = train_logistic_model(
            X_train,
            y_train,
            preprocessor,
            sampler=sampler,
            C_values=C_values,
            random_state=random_state,
            maximize=maximize,
            min_precision=min_precision,
        )
        metrics_lr = evaluate_model(
            model_lr,
            X_test,
            y_test,
            output_dir=lr_dir,
            metadata={"model_type": "logistic", "sampling": sampling, **best_params_lr},
        )
        extract_coefficients(model_lr).to_csv(os.path.join(lr_dir, "coefficients.csv"), index=False)
        run_shap_analysis(
            model_lr,
            X_test,
            output_dir=os.path.join(lr_dir, "shap"),
            X_background=X_res,
            sample_size=shap_sample_size,
            random_state=random_state,
        )
        joblib.dump(model_lr, os.path.join(lr_dir, "model.joblib"))
        all_metrics.append(metrics_lr)

        # Decision tree
        print(f"\n--- Decision tree: {sampling} ---")
        tree_dir = os.path.join(output_dir, "tree", sampling)
        model_tree, best_params_tree = train_decision_tree(
            X_train,
            y_train,
            preprocessor,
            sampler=sampler,
            param_grid=tree_param_grid,
            maximize=maximize,
            min_precision=min_precision,
            random_state=random_state,
        )
        metrics_tree = evaluate_model(
            model_tree,
            X_test,
            y_test,
            output_dir=tree_dir,
            metadata={"model_type": "tree", "sampling": sampling, **best_params_tree},
        )
        extract_feature_importances(model_tree).to_csv(
            os.path.join(tree_dir, "feature_importances.csv"), index=False
        )
        with open(os.path.join(tree_dir, "tree_rules.txt"), "w", encoding="utf-8") as f:
            f.write(describe_tree(model_tree))
        plot_tree_structure(model_tree, os.path.join(tree_dir, "tree.pdf"))
        run_shap_analysis(
            model_tree,
            X_test,
            output_dir=os.path.join(tree_dir, "shap"),
            sample_size=shap_sample_size,
            random_state=random_state,
        )
        joblib.dump(model_tree, os.path.join(tree_dir, "model.joblib"))
        all_metrics.append(metrics_tree)

        print(
            f"Test recall - logistic: {metrics_lr['recall']:.3f}, "
            f"tree: {metrics_tree['recall']:.3f}"
        )

    # ------------------------------------------------------------------
    # 9️⃣  Comparison across models and training variants
    # ------------------------------------------------------------------
    print("\n--- Model comparison ---")
    comparison = summarize_results(all_metrics, output_dir)
    print(
        comparison[
            ["model_type", "sampling", "recall", "precision", "f1_score", "specificity", "roc_auc"]
        ].to_string(index=False)
    )
    print(f"\nReport written to {output_dir}")

    return comparison


if __name__ == "__main__":
    run_report()
