"""
📊 Module: summary_plots.py

Summary visualizations for the CRM health audit.

- Missingness by signal, coloured by severity

Plots are saved to disk using run-aware naming conventions and returned as
paths so reports can embed them.
"""

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

SEVERITY_PALETTE = {"low": "#6DBE6D", "medium": "#F0AD4E", "high": "#D9534F"}


def plot_signal_missingness(signals_df: pd.DataFrame, save_dir: Path, run_id: str) -> Path | None:
    """
    Generates and saves a horizontal bar chart of missing % per signal.

    Args:
        signals_df (pd.DataFrame): The 'signals' report table (Label, Missing %, Severity).
        save_dir (Path): Directory to write the PNG into.
        run_id (str): Run identifier used in the filename.

    Returns:
        Path | None: Saved plot path, or None when nothing is missing.
    """
    if signals_df.empty or (signals_df["Missing %"] <= 0).all():
        logging.info("No missing values across audit signals. Skipping missingness plot.")
        return None

    fig, ax = plt.subplots(figsize=(10, 6))
    sns.barplot(
        data=signals_df,
        x="Missing %",
        y="Label",
        hue="Severity",
        palette=SEVERITY_PALETTE,
        dodge=False,
        ax=ax,
    )
    ax.axvline(10, color="#999", linestyle="--", linewidth=1)
    ax.axvline(30, color="#555", linestyle="--", linewidth=1)
    ax.set_title("Percentage of Records Missing Each Audited Field")
    ax.set_xlabel("Percent Missing (%)")
    ax.set_ylabel("")
    ax.set_xlim(0, 100)
    plt.tight_layout()

    save_dir = Path(save_dir)
    save_dir.mkdir(parents=True, exist_ok=True)
    save_path = save_dir / f"{run_id}_signal_missingness.png"
    plt.savefig(save_path)
    plt.close(fig)
    logging.info(f"Generated missingness plot at {save_path}")
    return save_path
