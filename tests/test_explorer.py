import asyncio
import pytest
from prime_distance_framework import (
    DEFAULT_BOUND, LARGE_BOUND_WARNING, ConsoleNotifier, InvalidBoundError,
    Notifier, PrimeExplorer, RecordingNotifier, compute_primes_sync,
)


def test_defaults():
    explorer = PrimeExplorer()
    assert explorer.bound == DEFAULT_BOUND
    assert explorer.records == []
    assert explorer.progress == 0
    assert not explorer.is_calculating
    assert isinstance(explorer.notifier, Notifier)
    assert explorer.stats.count == 0
    assert explorer.distribution == []
    assert explorer.top_distances() == []


def test_calculate_updates_state_and_notifies():
    notifier = RecordingNotifier()
    progress = []
    explorer = PrimeExplorer(notifier=notifier, on_progress=progress.append)
    records = asyncio.run(explorer.calculate(5000))

    assert records == compute_primes_sync(5000)
    assert explorer.records == records
    assert explorer.bound == 5000
    assert explorer.progress == 100
    assert progress[-1] == 100
    assert not explorer.is_calculating
    stats = explorer.stats
    assert notifier.events == [('success', (stats.count, stats.max_distance))]


def test_large_bound_warning():
    notifier = RecordingNotifier()
    explorer = PrimeExplorer(notifier=notifier, chunk_size=50_000)
    asyncio.run(explorer.calculate(LARGE_BOUND_WARNING + 1))
    assert notifier.kinds() == ['warning', 'success']


def test_no_warning_at_threshold():
    notifier = RecordingNotifier()
    explorer = PrimeExplorer(notifier=notifier, chunk_size=50_000)
    asyncio.run(explorer.calculate(LARGE_BOUND_WARNING))
    assert notifier.kinds() == ['success']


def test_second_calculate_while_running_is_ignored():
    async def main(explorer):
        first = asyncio.create_task(explorer.calculate(20_000))
        await asyncio.sleep(0)
        assert explorer.is_calculating
        second = await explorer.calculate(50)
        return await first, second

    explorer = PrimeExplorer(chunk_size=500)
    first, second = asyncio.run(main(explorer))
    assert second is None
    assert first == compute_primes_sync(20_000)
    assert explorer.bound == 20_000


def test_new_run_replaces_records():
    explorer = PrimeExplorer()
    asyncio.run(explorer.calculate(1000))
    assert explorer.stats.count == 168
    asyncio.run(explorer.calculate(100))
    assert explorer.stats.count == 25
    assert explorer.records == compute_primes_sync(100)


def test_failure_is_reported_and_reraised():
    notifier = RecordingNotifier()
    explorer = PrimeExplorer(notifier=notifier)
    asyncio.run(explorer.calculate(100))
    before = list(explorer.records)

    with pytest.raises(InvalidBoundError):
        asyncio.run(explorer.calculate("lots"))

    assert notifier.kinds() == ['success', 'error']
    assert isinstance(notifier.events[-1][1], InvalidBoundError)
    assert explorer.records == before
    assert explorer.bound == 100
    assert not explorer.is_calculating

    # The session still works with its last good bound.
    assert asyncio.run(explorer.calculate()) == compute_primes_sync(100)


def test_failing_progress_display_does_not_leave_partial_records():
    def broken(progress):
        if progress > 10:
            raise RuntimeError("display went away")

    notifier = RecordingNotifier()
    explorer = PrimeExplorer(notifier=notifier, chunk_size=100, on_progress=broken)
    with pytest.raises(RuntimeError):
        asyncio.run(explorer.calculate(5000))
    assert explorer.records == []
    assert notifier.kinds() == ['error']
    assert not explorer.is_calculating


def test_top_distances_rows():
    explorer = PrimeExplorer()
    asyncio.run(explorer.calculate(20))
    rows = explorer.top_distances(3)
    assert [(d, c) for d, c, _ in rows] == [(2, 3), (4, 2), (0, 1)]
    assert rows[0][2] == pytest.approx(37.5)
    assert sum(pct for _, _, pct in explorer.top_distances(100)) == pytest.approx(100.0)
    assert explorer.top_distances(0) == []
    with pytest.raises(ValueError):
        explorer.top_distances(-1)


def test_console_notifier_output(capsys):
    notifier = ConsoleNotifier()
    notifier.warning("Large calculations may take some time", "Be patient")
    notifier.success(168, 20)
    notifier.error(MemoryError("out of memory"))
    out = capsys.readouterr().out
    assert "[WARN] Large calculations may take some time - Be patient" in out
    assert "[OK] Calculation complete: found 168 primes with max distance 20" in out
    assert "[FAIL] Calculation failed: MemoryError: out of memory" in out


def test_progress_display_sees_reset_on_each_run():
    seen = []
    explorer = PrimeExplorer(chunk_size=500, on_progress=seen.append)
    asyncio.run(explorer.calculate(2000))
    assert seen[0] == 0
    assert seen[-1] == 100

    seen.clear()
    asyncio.run(explorer.calculate(3000))
    assert seen[0] == 0
    assert seen[1:] == sorted(seen[1:])
    assert seen[-1] == 100
