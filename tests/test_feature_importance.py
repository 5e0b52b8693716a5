import os

from explain.feature_importance import run_shap_analysis
from models.decision_tree import train_decision_tree
from models.logistic_regression import train_logistic_model


def test_shap_for_decision_tree(split, tmp_path):
    X_train, X_test, y_train, _, preprocessor = split
    model, _ = train_decision_tree(
        X_train, y_train, preprocessor, param_grid={"max_depth": [3]}, maximize="f1"
    )

    shap_df = run_shap_analysis(model, X_test, str(tmp_path), sample_size=60)

    assert set(shap_df["feature"]) == set(preprocessor.get_feature_names_out())
    assert shap_df["mean_abs_shap"].is_monotonic_decreasing
    assert (shap_df["mean_abs_shap"] >= 0).all()
    for name in ["mean_abs_shap.csv", "shap_mean_barplot.pdf", "shap_summary_beeswarm.pdf"]:
        assert os.path.exists(tmp_path / name)


def test_shap_for_logistic_regression(split, tmp_path):
    X_train, X_test, y_train, _, preprocessor = split
    model, _ = train_logistic_model(X_train, y_train, preprocessor, C_values=(1.0,), maximize="f1")

    shap_df = run_shap_analysis(model, X_test, str(tmp_path), X_background=X_train, sample_size=60)

    assert shap_df.loc[0, "mean_abs_shap"] > 0
    assert "income" in shap_df["feature"].head(3).tolist()
