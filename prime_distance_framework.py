"""
Prime Distance Framework

Computes the primes up to a bound, the distance ("gap") from each prime to the
one before it, and the statistics and frequency distribution of those gaps.

COMPONENTS:

  Primality:
    - is_prime(n): deterministic 6k±1 trial division

  Generation:
    - compute_primes_sync(max_value): batch scan of [2, max_value]
    - PrimeComputation: incremental run handle, one chunk per step, with
      progress reporting and an asyncio driver that yields between chunks
    - run_prime_computation(max_value, on_progress): async convenience wrapper

  Aggregation:
    - compute_stats(records): count, max distance, mean distance
    - compute_distribution(records): (distance, count) sorted by count desc

  Session:
    - PrimeExplorer: one interactive session (bound, progress, in-flight flag,
      current records) talking to a Notifier

Usage:
    from prime_distance_framework import compute_primes_sync, compute_stats

    records = compute_primes_sync(20)
    # [(2, 0), (3, 1), (5, 2), (7, 2), (11, 4), (13, 2), (17, 4), (19, 2)]
    print(compute_stats(records))

    # Incremental, inside an event loop
    records = await run_prime_computation(50_000, on_progress=print)

    # Interactive session with console notifications
    explorer = PrimeExplorer(notifier=ConsoleNotifier())
    asyncio.run(explorer.calculate(10_000))
    for distance, count, pct in explorer.top_distances(5):
        print(distance, count, f"{pct:.1f}%")
"""

import asyncio
import numbers
from collections import Counter
import numpy as np
from dataclasses import dataclass
from typing import Callable, Iterator, List, NamedTuple, Optional, Sequence, Tuple


# =============================================================================
# CONFIGURATION
# =============================================================================

CHUNK_SIZE = 1000              # integers scanned per scheduling quantum
DEFAULT_BOUND = 1000           # initial bound of a fresh session
LARGE_BOUND_WARNING = 100_000  # bounds above this get an advisory notice

# Advisory input range for interactive front ends; not enforced by the core.
MIN_UI_BOUND = 100
MAX_UI_BOUND = 1_000_000


# =============================================================================
# ERRORS
# =============================================================================

class InvalidBoundError(ValueError):
    """The upper bound is not an integer."""


class ComputationStateError(RuntimeError):
    """A PrimeComputation was used out of order (rerun, or read before done)."""


# =============================================================================
# DATA TYPES
# =============================================================================

class PrimeRecord(NamedTuple):
    """A prime and its distance from the previous prime (0 for the first)."""
    prime: int
    distance: int


@dataclass(frozen=True)
class PrimeStats:
    """Summary of a prime sequence. The first record is left out of max/avg."""
    count: int
    max_distance: int
    avg_distance: float

    def as_dict(self):
        return {
            'count': self.count,
            'max_distance': self.max_distance,
            'avg_distance': self.avg_distance,
        }

    def __repr__(self):
        return (f"PrimeStats(count={self.count}, max_distance={self.max_distance}, "
                f"avg_distance={self.avg_distance:.4f})")


ProgressCallback = Callable[[int], None]


def _normalize_bound(max_value) -> int:
    """Coerce max_value to int, rejecting anything that is not integral."""
    if isinstance(max_value, bool) or max_value is None:
        raise InvalidBoundError(f"Bound must be an integer, got {max_value!r}")
    if isinstance(max_value, numbers.Integral):
        return int(max_value)
    if isinstance(max_value, numbers.Real) and float(max_value).is_integer():
        return int(max_value)
    raise InvalidBoundError(f"Bound must be an integer, got {max_value!r}")


# =============================================================================
# PRIMALITY
# =============================================================================

def is_prime(n: int) -> bool:
    """Deterministic primality test by trial division over 6k±1 candidates."""
    if n <= 1:
        return False
    if n <= 3:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6
    return True


# =============================================================================
# GENERATION
# =============================================================================

def compute_primes_sync(max_value) -> List[PrimeRecord]:
    """All primes in [2, max_value] with their distances, in ascending order.

    Reference semantics for the incremental scheduler: a bound below 2 gives
    an empty list.
    """
    max_value = _normalize_bound(max_value)
    records = []
    last_prime = 0
    for n in range(2, max_value + 1):
        if is_prime(n):
            distance = 0 if last_prime == 0 else n - last_prime
            records.append(PrimeRecord(n, distance))
            last_prime = n
    return records


class PrimeComputation:
    """
    Incremental run handle for one scan of [2, max_value].

    Each call to step() scans at most chunk_size integers and updates
    progress. The handle owns all scan state, so independent handles can
    run side by side without interfering.

    Usage:
        comp = PrimeComputation(100_000)
        records = await comp.run(on_progress=lambda p: print(p, end=' '))

        # or synchronously, one chunk at a time
        for progress, new_records in PrimeComputation(5000).chunks():
            ...
    """

    def __init__(self, max_value, chunk_size: int = CHUNK_SIZE):
        if (isinstance(chunk_size, bool) or not isinstance(chunk_size, numbers.Integral)
                or chunk_size < 1):
            raise ValueError(f"chunk_size must be a positive integer, got {chunk_size!r}")
        self.max_value = _normalize_bound(max_value)
        self.chunk_size = int(chunk_size)
        self.progress = 0
        self.current = 2
        self.last_prime = 0
        self.records: List[PrimeRecord] = []
        self._started = False
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    def step(self) -> int:
        """Scan the next chunk and return the updated progress percentage.

        Stepping by hand takes ownership of the handle: run() and chunks()
        refuse it afterwards.
        """
        if self._done:
            raise ComputationStateError("Computation already finished")
        self._started = True
        limit = self.max_value + 1
        end = max(min(self.current + self.chunk_size, limit), self.current)
        for n in range(self.current, end):
            if is_prime(n):
                distance = 0 if self.last_prime == 0 else n - self.last_prime
                self.records.append(PrimeRecord(n, distance))
                self.last_prime = n
        self.current = end
        if self.current >= limit:
            # Covers bounds below 2, where the range is empty from the start.
            self.progress = 100
            self._done = True
        else:
            self.progress = max(self.progress, min(100, end * 100 // limit))
        return self.progress

    def chunks(self) -> Iterator[Tuple[int, List[PrimeRecord]]]:
        """Iterator of (progress, records found in this chunk) until the scan ends.

        The handle is claimed when chunks() is called, not on the first next().
        """
        self._claim()
        return self._iter_chunks()

    def _iter_chunks(self):
        while not self._done:
            before = len(self.records)
            progress = self.step()
            yield progress, self.records[before:]

    async def run(self, on_progress: Optional[ProgressCallback] = None) -> List[PrimeRecord]:
        """Scan to completion, yielding to the event loop after every chunk.

        Cancelling the awaiting task stops the scan at the next chunk boundary;
        no partial result is returned in that case.
        """
        self._claim()
        while True:
            progress = self.step()
            if on_progress is not None:
                on_progress(progress)
            if self._done:
                return self.result()
            await asyncio.sleep(0)

    def result(self) -> List[PrimeRecord]:
        if not self._done:
            raise ComputationStateError("Computation has not finished")
        return list(self.records)

    def _claim(self):
        if self._started:
            raise ComputationStateError("A PrimeComputation can only be run once")
        self._started = True


async def run_prime_computation(max_value, on_progress: Optional[ProgressCallback] = None,
                                chunk_size: int = CHUNK_SIZE) -> List[PrimeRecord]:
    """Asynchronous equivalent of compute_primes_sync with progress reporting."""
    return await PrimeComputation(max_value, chunk_size=chunk_size).run(on_progress)


# =============================================================================
# AGGREGATION
# =============================================================================

def compute_stats(records: Sequence[Tuple[int, int]]) -> PrimeStats:
    """Count, max distance and mean distance of a prime sequence.

    The first record's distance is always 0 (no predecessor), so it is left
    out of the max and the mean. A single-record sequence gives 0 for both.
    """
    if len(records) == 0:
        return PrimeStats(0, 0, 0.0)
    distances = np.fromiter((d for _, d in records[1:]), dtype=np.int64,
                            count=len(records) - 1)
    if distances.size == 0:
        return PrimeStats(len(records), 0, 0.0)
    return PrimeStats(
        count=len(records),
        max_distance=int(distances.max()),
        avg_distance=float(distances.mean()),
    )


def compute_distribution(records: Sequence[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """(distance, count) pairs over all records, most frequent first.

    Every record contributes, including the first record's 0, so the counts
    sum to len(records). Equal counts are ordered by where the distance
    value first appears in the sequence.
    """
    counts = Counter(distance for _, distance in records)
    first_seen = {}
    for index, (_, distance) in enumerate(records):
        first_seen.setdefault(distance, index)
    ordered = sorted(counts, key=lambda d: (-counts[d], first_seen[d]))
    return [(d, counts[d]) for d in ordered]


# =============================================================================
# SESSION
# =============================================================================

class Notifier:
    """Receives session events. The base class ignores them all."""

    def warning(self, title: str, description: str = ""):
        pass

    def success(self, count: int, max_distance: int):
        pass

    def error(self, exc: BaseException):
        pass


class ConsoleNotifier(Notifier):
    """Prints session events as status lines."""

    def warning(self, title, description=""):
        print(f"[WARN] {title}" + (f" - {description}" if description else ""))

    def success(self, count, max_distance):
        print(f"[OK] Calculation complete: found {count} primes "
              f"with max distance {max_distance}")

    def error(self, exc):
        print(f"[FAIL] Calculation failed: {type(exc).__name__}: {exc}")


class RecordingNotifier(Notifier):
    """Keeps (kind, payload) tuples; handy in tests and notebooks."""

    def __init__(self):
        self.events = []

    def warning(self, title, description=""):
        self.events.append(('warning', (title, description)))

    def success(self, count, max_distance):
        self.events.append(('success', (count, max_distance)))

    def error(self, exc):
        self.events.append(('error', exc))

    def kinds(self):
        return [kind for kind, _ in self.events]


class PrimeExplorer:
    """
    State of one interactive session: the chosen bound, the in-flight flag,
    the last progress value and the records of the latest finished run.

    Stats and distribution are derived from the current records on every
    access. A new run replaces the records only when it completes.
    """

    def __init__(self, bound=DEFAULT_BOUND, notifier: Optional[Notifier] = None,
                 chunk_size: int = CHUNK_SIZE,
                 on_progress: Optional[ProgressCallback] = None):
        self.bound = bound
        self.notifier = notifier or Notifier()
        self.chunk_size = chunk_size
        self.on_progress = on_progress
        self.progress = 0
        self.is_calculating = False
        self.records: List[PrimeRecord] = []

    def _set_progress(self, progress):
        self.progress = progress
        if self.on_progress is not None:
            self.on_progress(progress)

    async def calculate(self, bound=None) -> Optional[List[PrimeRecord]]:
        """Run a computation for bound (or the current bound).

        Returns None without doing anything when a run is already in flight.
        """
        if self.is_calculating:
            return None
        requested = self.bound if bound is None else bound

        self.is_calculating = True
        try:
            computation = PrimeComputation(requested, chunk_size=self.chunk_size)
            self.bound = requested
            self._set_progress(0)
            if computation.max_value > LARGE_BOUND_WARNING:
                self.notifier.warning("Large calculations may take some time",
                                      "Be patient while we crunch the numbers")
            records = await computation.run(self._set_progress)
            self.records = records
            stats = self.stats
            self.notifier.success(stats.count, stats.max_distance)
            return records
        except Exception as exc:
            self.notifier.error(exc)
            raise
        finally:
            self.is_calculating = False

    @property
    def stats(self) -> PrimeStats:
        return compute_stats(self.records)

    @property
    def distribution(self) -> List[Tuple[int, int]]:
        return compute_distribution(self.records)

    def top_distances(self, limit: int = 10) -> List[Tuple[int, int, float]]:
        """First `limit` distribution rows as (distance, count, percentage)."""
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        distribution = self.distribution
        total = sum(count for _, count in distribution)
        return [(d, c, c / total * 100.0) for d, c in distribution[:limit]]
