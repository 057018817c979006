#!/usr/bin/env python3
"""
Prime Distance Quickstart - Run this to verify the framework and see examples.

Usage:
    pip install -e .
    python quickstart.py
"""

import asyncio

print("=" * 70)
print("PRIME DISTANCE FRAMEWORK - QUICKSTART")
print("=" * 70)

from prime_distance_framework import (
    is_prime, compute_primes_sync, compute_stats, compute_distribution,
    ConsoleNotifier, PrimeExplorer,
)
print("\n[OK] Framework imported successfully")

print("\n" + "-" * 70)
print("PRIMES UP TO 20")
print("-" * 70)

records = compute_primes_sync(20)
print(f"  Primes:     {[p for p, _ in records]}")
print(f"  Distances:  {[d for _, d in records]}")
print(f"  Stats:      {compute_stats(records)}")
print(f"  Histogram:  {compute_distribution(records)}")

assert [p for p in range(21) if is_prime(p)] == [p for p, _ in records]
print("\n[OK] Batch scan agrees with is_prime")

print("\n" + "-" * 70)
print("INCREMENTAL SESSION (bound 50,000)")
print("-" * 70)

progress_seen = []
explorer = PrimeExplorer(notifier=ConsoleNotifier(), on_progress=progress_seen.append)
asyncio.run(explorer.calculate(50_000))
print(f"  Progress updates: {len(progress_seen)} (last = {progress_seen[-1]}%)")

print("\n{:>10} | {:>8} | {:>10}".format("Distance", "Count", "Share"))
print("-" * 36)
for distance, count, pct in explorer.top_distances(5):
    print("{:>10} | {:>8} | {:>9.1f}%".format(distance, count, pct))

assert explorer.records == compute_primes_sync(50_000)
print("\n[OK] Incremental run matches the batch scan")
