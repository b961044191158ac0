"""
feature_ablation.plot
=====================
Visualization helpers for feature rankings and removal curves.
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches


__all__ = ["plot_accuracy_curves", "plot_badness_ranking"]


def plot_badness_ranking(
    badness: Mapping[int, float],
    *,
    removed: Sequence[int] | None = None,
    feature_names: Mapping[int, str] | None = None,
    top_n: int = 20,
    title: str = "Feature badness",
    ax: Optional[plt.Axes] = None,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Bar chart of the ``top_n`` worst features by badness.

    Removed features are appended after the ``top_n`` when they rank lower,
    so an ablation run (which drops the *lowest* scores) still shows them.

    Parameters
    ----------
    badness : mapping of int to float
        Feature index -> badness, e.g. a preprocessor's ``badness_``.
    removed : sequence of int, optional
        Features to highlight in red, e.g. ``unwanted_features_``.  Always
        plotted.
    feature_names : mapping of int to str, optional
        Tick labels; defaults to the feature indices.
    top_n : int
        Number of features to display.
    title : str
    ax : matplotlib Axes, optional
    save_path : str, optional

    Returns
    -------
    matplotlib.figure.Figure
    """
    removed = set(removed or ())
    ordered = sorted(badness, key=lambda i: badness[i], reverse=True)
    ranked  = ordered[:top_n]
    ranked += [i for i in ordered[top_n:] if i in removed]
    labels  = [feature_names[i] if feature_names else str(i) for i in ranked]
    scores  = [badness[i] for i in ranked]
    colors  = ["#C44E52" if i in removed else "#4C72B0" for i in ranked]

    if ax is None:
        fig, ax = plt.subplots(figsize=(max(8, len(ranked) * 0.55), 4))
    else:
        fig = ax.get_figure()

    bars = ax.bar(range(len(ranked)), scores, color=colors, edgecolor="white", linewidth=0.5)
    ax.set_xticks(range(len(ranked)))
    ax.set_xticklabels(labels, rotation=60, ha="right", fontsize=8)
    ax.set_ylabel("badness", fontsize=12)
    ax.set_title(title, fontsize=13)
    ax.set_ylim(0, 1.05)

    for bar, score in zip(bars, scores):
        ax.text(
            bar.get_x() + bar.get_width() / 2,
            bar.get_height() + 0.01,
            f"{score:.3f}",
            ha="center", va="bottom", fontsize=7,
        )

    if removed:
        patch = mpatches.Patch(color="#C44E52", label="Removed")
        ax.legend(handles=[patch], fontsize=9)

    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig


def plot_accuracy_curves(
    curves: Mapping[str, Sequence[float]],
    *,
    title: str = "Accuracy vs. features removed",
    ax: Optional[plt.Axes] = None,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Line plot of accuracy against the number of removed features.

    Parameters
    ----------
    curves : mapping of str to sequence of float
        Label -> accuracies, entry ``i`` measured after ``i`` removals
        (the output of
        :func:`~feature_ablation.evaluation.accuracies_for_preprocessor`).
    title : str
    ax : matplotlib Axes, optional
    save_path : str, optional

    Returns
    -------
    matplotlib.figure.Figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(7, 5))
    else:
        fig = ax.get_figure()

    for label, accuracies in curves.items():
        acc = np.asarray(accuracies, dtype=float)
        ax.plot(np.arange(len(acc)), acc, marker="o", linewidth=1.5, label=label)

    ax.set_xlabel("features removed", fontsize=12)
    ax.set_ylabel("cross-validated accuracy", fontsize=12)
    ax.set_ylim(0, 1.05)
    ax.set_title(title, fontsize=13)
    if curves:
        ax.legend(fontsize=9, loc="best")
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig
