"""
Prime Distance Plotter: figures and static report for a prime sequence.

Draws the prime/distance scatter and the top-distance distribution with the
same dark theme the rest of the tooling uses, and writes a self-contained
report directory (PNG + index.html) that tools/serve_report.py can serve.

Usage:
    from prime_distance_framework import compute_primes_sync
    from tools.plotter import render_report

    records = compute_primes_sync(50_000)
    html_path = render_report(records, "figures/report")
"""

import html
import sys
import time
from contextlib import contextmanager
import numpy as np
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(_ROOT))
from prime_distance_framework import compute_stats, compute_distribution

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib import gridspec

REPORT_DIR = _ROOT / "figures" / "report"
FIGURE_NAME = "prime_distances.png"
TOP_LIMIT = 10

BACKGROUND = '#181818'
ACCENT_RGB = (37 / 255, 99 / 255, 235 / 255)


# ----------------------------------------------------------
# Theme
# ----------------------------------------------------------
def _apply_dark_theme():
    plt.rcParams.update({
        'figure.facecolor': BACKGROUND,
        'axes.facecolor': BACKGROUND,
        'axes.edgecolor': '#444444',
        'axes.labelcolor': 'white',
        'text.color': 'white',
        'xtick.color': '#cccccc',
        'ytick.color': '#cccccc',
    })


def dark_ax(ax):
    """Apply dark theme to a single axis."""
    ax.set_facecolor(BACKGROUND)
    for spine in ax.spines.values():
        spine.set_color('#444444')
    ax.tick_params(colors='#cccccc', labelsize=7)
    return ax


def create_figure(title="Prime Distance Distribution", figsize=(16, 7)):
    """Dark figure with the scatter panel (wide) and the top-distance panel."""
    _apply_dark_theme()
    fig = plt.figure(figsize=figsize, facecolor=BACKGROUND)
    gs = gridspec.GridSpec(1, 3, figure=fig, wspace=0.35, left=0.06,
                           right=0.97, top=0.88, bottom=0.1)
    fig.suptitle(title, fontsize=15, fontweight='bold', color='white')
    ax_scatter = dark_ax(fig.add_subplot(gs[0, :2]))
    ax_top = dark_ax(fig.add_subplot(gs[0, 2]))
    return fig, (ax_scatter, ax_top)


# ----------------------------------------------------------
# Panels
# ----------------------------------------------------------
def distance_colors(distances, max_distance):
    """RGBA rows whose alpha grows with the distance (0.3 .. 1.0)."""
    distances = np.asarray(distances, dtype=float)
    if max_distance > 0:
        norm = np.minimum(distances / max_distance, 1.0)
    else:
        norm = np.zeros_like(distances)
    colors = np.empty((len(distances), 4))
    colors[:, :3] = ACCENT_RGB
    colors[:, 3] = 0.3 + norm * 0.7
    return colors


def plot_prime_distances(ax, records):
    """Scatter of each prime against the distance from its predecessor."""
    ax.set_title("Prime Distance Distribution", fontsize=11)
    if len(records) == 0:
        ax.text(0.5, 0.5, "No data to display", ha='center', va='center',
                transform=ax.transAxes, color='#cccccc', fontsize=11)
        ax.set_xticks([])
        ax.set_yticks([])
        return ax

    primes = np.array([p for p, _ in records])
    distances = np.array([d for _, d in records])
    max_distance = int(distances.max())
    ax.scatter(primes, distances, s=12, c=distance_colors(distances, max_distance),
               edgecolors='none')
    ax.set_xlim(0, int(primes[-1]))
    ax.set_ylim(0, max_distance + 2)
    ax.set_xlabel("Prime Number", fontsize=10)
    ax.set_ylabel("Distance", fontsize=10)
    ax.grid(True, linestyle='--', color='#ffffff', alpha=0.05)
    return ax


def plot_top_distances(ax, distribution, limit=TOP_LIMIT):
    """Horizontal bars of the most frequent distances, labelled with shares."""
    top = distribution[:limit]
    ax.set_title(f"Top {limit} Distance Distribution", fontsize=11)
    if not top:
        ax.text(0.5, 0.5, "No data available", ha='center', va='center',
                transform=ax.transAxes, color='#cccccc', fontsize=11)
        ax.set_xticks([])
        ax.set_yticks([])
        return ax

    total = sum(count for _, count in distribution)
    labels = [str(d) for d, _ in top]
    counts = [c for _, c in top]
    y = np.arange(len(top))
    bars = ax.barh(y, counts, color=ACCENT_RGB, alpha=0.85)
    ax.set_yticks(y)
    ax.set_yticklabels(labels, fontsize=8)
    ax.invert_yaxis()
    ax.set_xlabel("Count", fontsize=10)
    ax.set_ylabel("Distance", fontsize=10)
    for bar, count in zip(bars, counts):
        ax.text(bar.get_width(), bar.get_y() + bar.get_height() / 2,
                f" {count / total * 100:.1f}%", va='center', fontsize=8,
                color='white')
    return ax


def save(fig, out_dir, name=FIGURE_NAME):
    """Save figure into out_dir and close it."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    out = out_dir / name
    fig.savefig(out, dpi=150, facecolor=BACKGROUND)
    plt.close(fig)
    return out


# ----------------------------------------------------------
# HTML report
# ----------------------------------------------------------
_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Prime Distance Plotter</title>
<style>
body {{ background: #181818; color: #eeeeee; font-family: sans-serif; margin: 2em auto; max-width: 1100px; }}
.cards {{ display: flex; gap: 1em; margin: 1.5em 0; }}
.card {{ flex: 1; border: 1px solid #444444; border-radius: 12px; padding: 1em; }}
.card .value {{ font-size: 1.8em; font-weight: bold; }}
.card .desc, .note {{ color: #999999; font-size: 0.85em; }}
table {{ border-collapse: collapse; width: 100%; }}
th, td {{ border-bottom: 1px solid #333333; padding: 0.4em; text-align: left; }}
img {{ width: 100%; border-radius: 12px; }}
</style>
</head>
<body>
<h1>Prime Distance Plotter</h1>
<p class="note">Primes up to {bound} and the distances between consecutive primes.</p>
{body}
</body>
</html>
"""


def _stat_card(title, value, description):
    return (f'<div class="card"><div>{html.escape(title)}</div>'
            f'<div class="value">{html.escape(value)}</div>'
            f'<div class="desc">{html.escape(description)}</div></div>')


def report_html(records, bound=None, figure_name=FIGURE_NAME, limit=TOP_LIMIT):
    """Build the report page for records; the figure is linked, not inlined."""
    stats = compute_stats(records)
    distribution = compute_distribution(records)
    if bound is None:
        bound = records[-1][0] if records else 0
    bound = f"{bound:,}"

    if not records:
        return _PAGE.format(bound=bound, body='<p class="note">No data to display</p>')

    cards = "".join([
        _stat_card("Total Primes", str(stats.count), "Number of primes found"),
        _stat_card("Max Distance", str(stats.max_distance), "Largest gap between primes"),
        _stat_card("Average Distance", f"{stats.avg_distance:.2f}",
                   "Mean distance between primes"),
    ])

    total = sum(count for _, count in distribution)
    top = distribution[:limit]
    rows = "\n".join(
        f"<tr><td>{d}</td><td>{c:,}</td><td>{c / total * 100:.1f}%</td></tr>"
        for d, c in top)
    body = (
        f'<img src="{html.escape(figure_name)}" alt="Prime distance scatter">\n'
        f'<div class="cards">{cards}</div>\n'
        f'<h2>Top {limit} Distance Distribution</h2>\n'
        f'<table><tr><th>Distance</th><th>Count</th><th>Percentage</th></tr>\n{rows}\n</table>\n'
        f'<p class="note">Showing top {min(limit, len(top))} of '
        f'{len(distribution)} different distances</p>'
    )
    return _PAGE.format(bound=bound, body=body)


def render_report(records, out_dir=REPORT_DIR, limit=TOP_LIMIT, bound=None):
    """Write figure + index.html into out_dir; returns the index.html path."""
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    out_dir = Path(out_dir)
    fig, (ax_scatter, ax_top) = create_figure()
    plot_prime_distances(ax_scatter, records)
    plot_top_distances(ax_top, compute_distribution(records), limit=limit)
    save(fig, out_dir)

    index = out_dir / "index.html"
    index.write_text(report_html(records, bound=bound, limit=limit), encoding="utf-8")
    return index


class Stopwatch:
    """Named wall-clock laps for a multi-step tool run.

    Usage:
        watch = Stopwatch()
        with watch.lap("scan"):
            ...
        print(watch.summary())   # "scan 0.12s"
    """

    def __init__(self):
        self.laps = {}

    @contextmanager
    def lap(self, name):
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.laps[name] = self.laps.get(name, 0.0) + time.perf_counter() - t0

    @property
    def total(self):
        return sum(self.laps.values())

    def summary(self):
        return ", ".join(f"{name} {secs:.2f}s" for name, secs in self.laps.items())
