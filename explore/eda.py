"""
Exploratory data analysis for the bank personal-loan dataset.

Tables (CSV) and plots (PDF) written by ``run_eda``:
- summary statistics with skewness, class balance, missing and negative counts
- loan acceptance rate per level of each indicator column
- per-column distributions split by loan acceptance
- correlation matrix, its heatmap and the highly correlated pairs
"""

import os
from itertools import combinations

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

CLASS_COLORS = {0: "#3B5BA5", 1: "#E45756"}


def _categorical_columns(df):
    return [col for col in df.columns if isinstance(df[col].dtype, pd.CategoricalDtype)]


def summarize_dataset(df: pd.DataFrame, target_col: str) -> dict:
    numeric = df.select_dtypes(include="number")

    summary = numeric.describe().T
    summary["skewness"] = numeric.skew()

    counts = df[target_col].value_counts().sort_index()
    class_balance = pd.DataFrame({"count": counts, "share": counts / counts.sum()})

    missing = df.isnull().sum().rename("missing").to_frame()

    # Reported, not edited: the source data has some negative experience values
    negative_values = (numeric < 0).sum().rename("negative").to_frame()

    return {
        "summary": summary,
        "class_balance": class_balance,
        "missing": missing,
        "negative_values": negative_values,
    }


def indicator_rates(df: pd.DataFrame, target_col: str) -> pd.DataFrame:
    """Share of positive targets for each level of every other indicator column."""
    target = df[target_col].astype(int)
    rows = []
    for col in _categorical_columns(df):
        if col == target_col:
            continue
        grouped = target.groupby(df[col], observed=True).agg(["count", "mean"])
        for level, row in grouped.iterrows():
            rows.append({
                "indicator": col,
                "level": level,
                "count": int(row["count"]),
                "target_rate": row["mean"],
            })
    return pd.DataFrame(rows, columns=["indicator", "level", "count", "target_rate"])


def correlation_matrix(df: pd.DataFrame) -> pd.DataFrame:
    # Indicators enter as 0/1 so their correlation with the target shows up
    numeric = df.copy()
    for col in _categorical_columns(numeric):
        numeric[col] = numeric[col].astype(int)
    return numeric.select_dtypes(include="number").corr()


def high_correlation_pairs(corr: pd.DataFrame, threshold: float = 0.8) -> pd.DataFrame:
    pairs = pd.DataFrame(
        [
            {"feature_1": a, "feature_2": b, "correlation": corr.loc[a, b]}
            for a, b in combinations(corr.columns, 2)
            if abs(corr.loc[a, b]) > threshold
        ],
        columns=["feature_1", "feature_2", "correlation"],
    )
    return pairs.sort_values(by="correlation", key=np.abs, ascending=False).reset_index(drop=True)


def plot_distributions(df: pd.DataFrame, target_col: str, output_dir: str) -> list:
    os.makedirs(output_dir, exist_ok=True)
    target = df[target_col].astype(int)
    paths = []

    for col in df.select_dtypes(include="number").columns:
        fig, ax = plt.subplots(figsize=(7, 4))
        for label, color in CLASS_COLORS.items():
            values = df.loc[target == label, col].dropna()
            ax.hist(values, bins=30, alpha=0.6, color=color, label=f"{target_col} = {label}", density=True)
        ax.set_title(f"Distribution of {col}")
        ax.set_xlabel(col)
        ax.set_ylabel("Density")
        ax.legend()
        path = os.path.join(output_dir, f"dist_{col}.pdf")
        fig.tight_layout()
        fig.savefig(path)
        plt.close(fig)
        paths.append(path)

    for col in _categorical_columns(df):
        if col == target_col:
            continue
        counts = pd.crosstab(df[col], target)
        ax = counts.plot(
            kind="bar",
            color=[CLASS_COLORS.get(label) for label in counts.columns],
            figsize=(5, 4),
            rot=0,
        )
        ax.set_title(f"{col} by {target_col}")
        ax.set_ylabel("Count")
        path = os.path.join(output_dir, f"counts_{col}.pdf")
        plt.tight_layout()
        plt.savefig(path)
        plt.close()
        paths.append(path)

    return paths


def plot_correlation_heatmap(corr: pd.DataFrame, output_dir: str) -> str:
    os.makedirs(output_dir, exist_ok=True)

    plt.figure(figsize=(9, 7))
    sns.heatmap(corr, cmap="coolwarm", center=0, annot=True, fmt=".2f", annot_kws={"size": 7})
    plt.xticks(rotation=45, ha="right", fontsize=8)
    plt.yticks(rotation=0, fontsize=8)
    plt.title("Correlation matrix")
    plt.tight_layout()

    path = os.path.join(output_dir, "correlation_heatmap.pdf")
    plt.savefig(path)
    plt.close()
    return path


def run_eda(df: pd.DataFrame, target_col: str, output_dir: str) -> dict:
    os.makedirs(output_dir, exist_ok=True)

    results = summarize_dataset(df, target_col)
    results["indicator_rates"] = indicator_rates(df, target_col)
    results["corr"] = correlation_matrix(df)
    results["high_corr"] = high_correlation_pairs(results["corr"])

    for name, table in results.items():
        table.to_csv(os.path.join(output_dir, f"{name}.csv"))

    plot_distributions(df, target_col, output_dir)
    plot_correlation_heatmap(results["corr"], output_dir)

    balance = results["class_balance"]["share"]
    print(f"Class balance: {balance.round(3).to_dict()}")
    if not results["high_corr"].empty:
        print("Highly correlated pairs:")
        print(results["high_corr"].to_string(index=False))

    return results
