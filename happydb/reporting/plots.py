from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402
import plotly.graph_objects as go  # noqa: E402
import seaborn as sns  # noqa: E402

from happydb.messages import pipeline_messages  # noqa: E402

logger = logging.getLogger(__name__)


def _save(fig, path: Optional[str | Path]):
    if path is None:
        return
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, bbox_inches="tight")
    # saved figures are released from pyplot
    plt.close(fig)
    logger.info(pipeline_messages.FIGURE_WRITTEN.format(path=path))


def plot_top_terms(
    table: pd.DataFrame,
    facet: str = "topic",
    value: str = "beta",
    title: str = "Top terms per topic",
    path: Optional[str | Path] = None,
):
    """One horizontal bar panel per facet value (topic or tf-idf group)."""
    facets = list(dict.fromkeys(table[facet].tolist()))
    fig, axes = plt.subplots(
        1, max(len(facets), 1), figsize=(4 * max(len(facets), 1), 5), squeeze=False
    )
    for ax, key in zip(axes[0], facets):
        part = table[table[facet] == key].sort_values(value)
        ax.barh(part["term"], part[value], color="steelblue")
        ax.set_title(f"{facet} {key}")
        ax.set_xlabel(value)
    fig.suptitle(title)
    fig.tight_layout()
    _save(fig, path)
    return fig


def plot_verbosity_boxplot(
    df: pd.DataFrame,
    by: str,
    path: Optional[str | Path] = None,
):
    data = df.dropna(subset=[by])
    fig, ax = plt.subplots(figsize=(8, 5))
    sns.boxplot(data=data, x=by, y="num_sentence", ax=ax, showfliers=False)
    ax.set_title(f"Sentences per happy moment by {by}")
    ax.set_ylabel("Sentences")
    ax.set_xlabel(by)
    fig.tight_layout()
    _save(fig, path)
    return fig


def plot_category_beeswarm(
    df: pd.DataFrame,
    category: str = "predicted_category",
    sample: Optional[int] = 2000,
    random_state: int = 42,
    path: Optional[str | Path] = None,
):
    """Beeswarm of sentence counts per category; sampled, swarms get slow."""
    data = df.dropna(subset=[category])
    if sample is not None and len(data) > sample:
        data = data.sample(n=sample, random_state=random_state)
    fig, ax = plt.subplots(figsize=(10, 6))
    sns.swarmplot(data=data, x=category, y="num_sentence", size=2, ax=ax)
    ax.set_title("Verbosity by predicted category")
    ax.set_ylabel("Sentences")
    ax.set_xlabel(category)
    ax.tick_params(axis="x", rotation=30)
    fig.tight_layout()
    _save(fig, path)
    return fig


def plot_country_choropleth(
    table: pd.DataFrame,
    value: str = "mean",
    path: Optional[str | Path] = None,
) -> go.Figure:
    """World map of mean sentence count per ISO3 country, saved as HTML."""
    fig = go.Figure(
        go.Choropleth(
            locations=table["country"],
            z=table[value],
            locationmode="ISO-3",
            colorscale="Viridis",
            colorbar_title="Sentences",
            text=[f"{c}: n={n}" for c, n in zip(table["country"], table["n"])],
        )
    )
    fig.update_layout(
        title_text="Mean sentences per happy moment by country",
        margin=dict(t=60, b=20, l=10, r=10),
    )
    if path is not None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.write_html(str(path), include_plotlyjs="cdn")
        logger.info(pipeline_messages.FIGURE_WRITTEN.format(path=path))
    return fig
