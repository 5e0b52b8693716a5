# --------------------------------------------------------------
# SUMMARY:
# Class-imbalance remedies for the training set. Each returns a new, shuffled
# (X, y) pair and leaves its inputs untouched:
# 1) downsample_majority() - randomly removes majority rows (without replacement)
#    until the majority matches the minority (or shrinks by 'factor').
# 2) upsample_minority() - randomly duplicates minority rows (with replacement)
#    until the minority matches the majority (or grows by 'factor').
# 3) smote_sample() - synthetic minority rows interpolated between neighbours
#    (SMOTE-NC when categorical columns are present).
# 4) rose_sample() - Random Over-Sampling Examples: a smoothed bootstrap of both
#    classes drawn to a balanced target size.
# make_resampled_sets() builds all four plus the untouched baseline; make_sampler()
# wraps one remedy as a pipeline step so resampling happens inside each CV fold.
# --------------------------------------------------------------


import numpy as np
import pandas as pd
from imblearn import FunctionSampler
from imblearn.over_sampling import SMOTE, SMOTENC
from sklearn.utils import resample  # Used to randomly resample rows from a DataFrame


def _split_classes(X, y):
    # Combine feature matrix (X) and target vector (y) into one DataFrame
    df = pd.concat([X, y], axis=1)

    counts = y.value_counts()
    if len(counts) != 2:
        raise ValueError(f"Expected a binary target, got classes {counts.index.tolist()}")
    minority_label, majority_label = counts.idxmin(), counts.idxmax()

    return df[df[y.name] == minority_label], df[df[y.name] == majority_label]


# We define the function: upsample_minority
def upsample_minority(X, y, factor=None, random_state=42):
    df_minority, df_majority = _split_classes(X, y)

    n_samples = len(df_majority) if factor is None else len(df_minority) * factor

    # Randomly resample (duplicate) the minority class
    df_minority_upsampled = resample(
        df_minority,
        replace=True,                        # same row can appear multiple times
        n_samples=n_samples,
        random_state=random_state,
    )

    # Combine with the original majority class and shuffle the rows
    df_upsampled = pd.concat(
        [df_majority, df_minority_upsampled]
    ).sample(frac=1, random_state=random_state)

    # Separate X (features) and y (target) again before returning
    return df_upsampled.drop(columns=y.name), df_upsampled[y.name]


# We define the function: downsample_majority
def downsample_majority(X, y, factor=None, random_state=42):
    df_minority, df_majority = _split_classes(X, y)

    n_samples = len(df_minority) if factor is None else len(df_majority) // factor

    # Randomly select a subset of the majority class
    df_majority_downsampled = resample(
        df_majority,
        replace=False,                       # no row drawn twice
        n_samples=n_samples,
        random_state=random_state,
    )

    df_downsampled = pd.concat(
        [df_minority, df_majority_downsampled]
    ).sample(frac=1, random_state=random_state)

    return df_downsampled.drop(columns=y.name), df_downsampled[y.name]


def _categorical_columns(X):
    return [col for col in X.columns if isinstance(X[col].dtype, pd.CategoricalDtype)]


def smote_sample(X, y, k_neighbors=5, random_state=42):
    categorical_cols = _categorical_columns(X)

    # imblearn wants plain numbers; category columns go in as their integer levels
    X_num = X.copy()
    for col in categorical_cols:
        X_num[col] = X_num[col].astype(int)

    if categorical_cols:
        sampler = SMOTENC(
            categorical_features=[X.columns.get_loc(col) for col in categorical_cols],
            k_neighbors=k_neighbors,
            random_state=random_state,
        )
    else:
        sampler = SMOTE(k_neighbors=k_neighbors, random_state=random_state)

    X_res, y_res = sampler.fit_resample(X_num, y)

    for col in categorical_cols:
        X_res[col] = X_res[col].astype(int).astype(X[col].dtype)

    # SMOTE appends the synthetic rows at the end; shuffle like the other remedies
    order = np.random.default_rng(random_state).permutation(len(X_res))
    X_res = X_res.iloc[order].reset_index(drop=True)
    y_res = pd.Series(np.asarray(y_res)[order], name=y.name)
    return X_res, y_res


def rose_sample(X, y, n_samples=None, p=0.5, shrink=1.0, random_state=42):
    """
    Random Over-Sampling Examples.

    Draws ``n_samples`` labels with minority probability ``p``. Each new row is a
    bootstrap draw from its class with Gaussian kernel noise added to the numeric
    columns; the bandwidth per column is ``shrink * h * sd`` with the normal
    reference rule ``h = (4 / ((d + 2) * m)) ** (1 / (d + 4))``, ``d`` numeric
    columns and ``m`` rows in the class. Categorical columns are copied from the
    seed row unchanged.
    """
    if not 0 < p < 1:
        raise ValueError("p must lie strictly between 0 and 1")

    rng = np.random.default_rng(random_state)
    n_samples = len(X) if n_samples is None else n_samples

    categorical_cols = _categorical_columns(X)
    numeric_cols = [col for col in X.columns if col not in categorical_cols]
    d = len(numeric_cols)

    counts = y.value_counts()
    if len(counts) != 2:
        raise ValueError(f"Expected a binary target, got classes {counts.index.tolist()}")
    minority_label, majority_label = counts.idxmin(), counts.idxmax()
    n_minority = rng.binomial(n_samples, p)

    parts = []
    for label, n_class in [(minority_label, n_minority), (majority_label, n_samples - n_minority)]:
        if n_class == 0:
            continue
        X_class = X[(y == label).values]
        seeds = X_class.iloc[rng.integers(0, len(X_class), size=n_class)].reset_index(drop=True)

        if d:
            h = shrink * (4 / ((d + 2) * len(X_class))) ** (1 / (d + 4))
            sd = X_class[numeric_cols].astype(float).std().fillna(0.0).to_numpy()
            noise = rng.standard_normal((n_class, d)) * (h * sd)
            seeds[numeric_cols] = seeds[numeric_cols].astype(float) + noise

        seeds[y.name] = label
        parts.append(seeds)

    df_rose = pd.concat(parts, ignore_index=True)
    df_rose = df_rose.iloc[rng.permutation(len(df_rose))].reset_index(drop=True)

    for col in categorical_cols:
        df_rose[col] = df_rose[col].astype(X[col].dtype)

    return df_rose.drop(columns=y.name), df_rose[y.name].astype(y.dtype)


SAMPLING_FUNCTIONS = {
    "down": downsample_majority,
    "up": upsample_minority,
    "smote": smote_sample,
    "rose": rose_sample,
}

# "original" is the untouched training set: no sampler step
SAMPLING_METHODS = ["original"] + list(SAMPLING_FUNCTIONS)


def make_sampler(method, random_state=42):
    """
    Wrap a remedy as an imbalanced-learn sampler for use inside a Pipeline.

    In a Pipeline the sampler only runs on ``fit``, so cross-validation
    resamples each training fold and scores the untouched validation fold.
    Returns ``"passthrough"`` for ``"original"``.
    """
    if method == "original":
        return "passthrough"
    if method not in SAMPLING_FUNCTIONS:
        raise ValueError(f"Unknown sampling method {method!r}, expected one of {SAMPLING_METHODS}")

    # validate=False keeps the DataFrame, so category columns reach SMOTE-NC / ROSE intact
    return FunctionSampler(
        func=SAMPLING_FUNCTIONS[method],
        kw_args={"random_state": random_state},
        validate=False,
    )


def make_resampled_sets(X, y, random_state=42):
    """Baseline copy plus the four resampled variants of the training set."""
    sets = {"original": (X.copy(), y.copy())}
    for name, func in SAMPLING_FUNCTIONS.items():
        sets[name] = func(X, y, random_state=random_state)

    for name, (X_res, y_res) in sets.items():
        shares = y_res.value_counts(normalize=True).sort_index()
        print(f"{name:>8}: {len(X_res)} rows, class shares {shares.round(3).to_dict()}")

    return sets
