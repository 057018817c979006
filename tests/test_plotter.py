import pytest
import numpy as np
import matplotlib.pyplot as plt
from prime_distance_framework import compute_distribution, compute_primes_sync
from tools.plotter import (
    FIGURE_NAME, Stopwatch, create_figure, distance_colors, plot_prime_distances,
    plot_top_distances, render_report, report_html,
)


def test_distance_colors_alpha_range():
    colors = distance_colors([0, 1, 2, 4], 4)
    assert colors.shape == (4, 4)
    assert np.allclose(colors[:, 3], [0.3, 0.475, 0.65, 1.0])
    assert np.allclose(colors[:, :3], colors[0, :3])


def test_distance_colors_zero_max():
    colors = distance_colors([0], 0)
    assert np.allclose(colors[:, 3], [0.3])


def test_panels_with_data():
    records = compute_primes_sync(200)
    fig, (ax_scatter, ax_top) = create_figure()
    plot_prime_distances(ax_scatter, records)
    plot_top_distances(ax_top, compute_distribution(records), limit=5)
    assert ax_scatter.get_ylim() == (0, 14 + 2)  # largest gap below 200 is 14
    assert len(ax_top.patches) == 5
    plt.close(fig)


def test_panels_empty():
    fig, (ax_scatter, ax_top) = create_figure()
    plot_prime_distances(ax_scatter, [])
    plot_top_distances(ax_top, [])
    texts = [t.get_text() for ax in (ax_scatter, ax_top) for t in ax.texts]
    assert "No data to display" in texts
    assert "No data available" in texts
    plt.close(fig)


def test_report_html_contents():
    page = report_html(compute_primes_sync(20), bound=20, limit=3)
    assert "Primes up to 20 " in page
    assert "Total Primes" in page and ">8<" in page
    assert "Average Distance" in page and "2.43" in page
    assert "<tr><td>2</td><td>3</td><td>37.5%</td></tr>" in page
    assert "Showing top 3 of 4 different distances" in page
    assert FIGURE_NAME in page


def test_report_html_empty():
    page = report_html([], bound=1)
    assert "No data to display" in page
    assert "<table>" not in page


def test_render_report_writes_files(tmp_path):
    out = tmp_path / "report"
    index = render_report(compute_primes_sync(1000), out, bound=1000)
    assert index == out / "index.html"
    assert index.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")
    png = out / FIGURE_NAME
    assert png.exists() and png.stat().st_size > 0


def test_render_report_rejects_negative_limit(tmp_path):
    with pytest.raises(ValueError):
        render_report([], tmp_path, limit=-1)


def test_stopwatch_laps():
    watch = Stopwatch()
    with watch.lap("scan"):
        compute_primes_sync(500)
    with watch.lap("render"):
        pass
    with watch.lap("scan"):
        pass
    assert list(watch.laps) == ["scan", "render"]
    assert all(secs >= 0 for secs in watch.laps.values())
    assert watch.total == pytest.approx(sum(watch.laps.values()))
    assert watch.summary().startswith("scan ")
    assert ", render " in watch.summary()


def test_stopwatch_records_lap_on_error():
    watch = Stopwatch()
    with pytest.raises(RuntimeError):
        with watch.lap("scan"):
            raise RuntimeError("boom")
    assert "scan" in watch.laps
