import pandas as pd
import shap
import matplotlib.pyplot as plt
import os

# Beeswarm plot -------------------------------
def _plot_beeswarm(values, title, output_path):
    plt.figure()
    shap.plots.beeswarm(values, max_display=20, show=False)
    plt.title(title)
    plt.tight_layout()
    plt.savefig(output_path)
    plt.close()

# Bar plot of shap features -------------------------------
def _plot_bar(mean_abs_shap, title, output_path):
    top = mean_abs_shap.head(20)

    plt.figure(figsize=(8, 6))
    plt.barh(top["feature"][::-1], top["mean_abs_shap"][::-1])
    plt.xlabel("Mean absolute SHAP")
    plt.title(title)
    plt.tight_layout()
    plt.savefig(output_path)
    plt.close()

def _process_shap_outputs(shap_values, columns):
    return (
        pd.DataFrame(
            {
                "feature": list(columns),
                "mean_abs_shap": pd.DataFrame(shap_values.values, columns=columns).abs().mean().values,
            }
        )
        .sort_values(by="mean_abs_shap", ascending=False)
        .reset_index(drop=True)
    )

def _build_explainer(estimator, background):
    if hasattr(estimator, "tree_"):
        return shap.TreeExplainer(estimator)
    return shap.LinearExplainer(estimator, background)

def run_shap_analysis(
    model, X_test, output_dir, X_background=None, sample_size=None, random_state: int = 42
):
    """
    Mean |SHAP| per feature for a fitted preprocess -> classifier pipeline.

    SHAP values are computed in the transformed feature space (scaled numerics,
    one dummy per indicator). Linear models need a background sample; the
    transformed ``X_background`` (default: ``X_test``) is used.
    """
    os.makedirs(output_dir, exist_ok=True)

    if sample_size is not None and len(X_test) > sample_size:
        X_test = X_test.sample(n=sample_size, random_state=random_state)
    X_background = X_test if X_background is None else X_background

    preprocess = model.named_steps["preprocess"]
    estimator = model.named_steps["model"]
    X_t = preprocess.transform(X_test)

    explainer = _build_explainer(estimator, preprocess.transform(X_background))
    shap_values = explainer(X_t)

    # Tree classifiers explain both classes; keep the positive (loan accepted) class
    if len(shap_values.shape) == 3:
        shap_values = shap_values[:, :, 1]

    shap_df = _process_shap_outputs(shap_values, X_t.columns)
    shap_df.to_csv(os.path.join(output_dir, "mean_abs_shap.csv"), index=False)

    _plot_bar(shap_df, "Top feature importance (mean |SHAP|)", os.path.join(output_dir, "shap_mean_barplot.pdf"))
    _plot_beeswarm(shap_values, "SHAP values: test set", os.path.join(output_dir, "shap_summary_beeswarm.pdf"))

    return shap_df
