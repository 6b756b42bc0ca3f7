#!/usr/bin/env python3
"""
Verify and time the packed segmented sieve.

For every configured limit and prime count:
1. Build the sieve and time it
2. Cross-check against the reference Eratosthenes sieve (up to check_limit)
3. Spot-check nth_prime against iteration

Usage:
    python benchmark_sieve.py
    python benchmark_sieve.py --config config/custom.yaml --no-check
"""

import argparse
import time
from pathlib import Path

import numpy as np
import pandas as pd

from sieve240.config import load_config
from sieve240.reference import reference_sieve
from sieve240.sieve import Sieve


def verify_against_reference(sieve: Sieve, limit: int, verbose: bool = True) -> bool:
    """Check the packed store word-for-word against the unsegmented reference."""
    expected = reference_sieve(limit)
    got = sieve.primes

    errors = int(np.sum(got != expected)) if len(got) == len(expected) else -1
    if verbose:
        if errors == 0:
            print(f"  ✓ All {len(expected):,} words below {sieve.limit():,} match")
        elif errors < 0:
            print(f"  ✗ Length mismatch: {len(got):,} vs {len(expected):,}")
        else:
            print(f"  ✗ {errors:,} mismatched words")
    return errors == 0


def verify_nth_prime(sieve: Sieve, samples: int = 100, seed: int = 0) -> bool:
    """Check nth_prime against iteration for a random sample of ranks."""
    rng = np.random.default_rng(seed)
    ranks = np.sort(rng.integers(0, sieve.num_primes(), size=samples))
    it = sieve.iter()
    pos = 0
    current = None
    for k in ranks:
        while pos <= k:
            current = next(it)
            pos += 1
        got = sieve.nth_prime(int(k))
        if got != current:
            print(f"  MISMATCH at k={k}: nth_prime={got}, iter={current}")
            return False
    return True


def run_benchmark(config: dict, check: bool = True) -> pd.DataFrame:
    """Build every configured sieve and collect timings."""
    rows = []
    jobs = [("limit", x) for x in config["limits"]]
    jobs += [("n_primes", x) for x in config["n_primes"]]

    # First call compiles the kernels
    Sieve.to_limit(1000)

    for mode, value in jobs:
        print("-" * 60)
        print(f"{mode} = {value:,}")
        print("-" * 60)

        t0 = time.time()
        if mode == "limit":
            sieve = Sieve.to_limit(value, config["segment_len"], verbose=True)
        else:
            sieve = Sieve.to_n_primes(value, config["segment_len"], verbose=True)
        elapsed = time.time() - t0
        print(f"  Built in {elapsed:.2f}s, store = {sieve.primes.nbytes / 1e6:.1f}MB")

        ok = None
        if check and sieve.limit() <= config["check_limit"]:
            ok = verify_against_reference(sieve, sieve.limit() - 1)
            ok = verify_nth_prime(sieve) and ok

        rows.append({
            'mode': mode,
            'requested': value,
            'limit': sieve.limit(),
            'num_primes': sieve.num_primes(),
            'seconds': elapsed,
            'store_bytes': sieve.primes.nbytes,
            'verified': ok,
        })
        print()

    return pd.DataFrame(rows)


def main():
    parser = argparse.ArgumentParser(description='Verify and time the segmented sieve')
    parser.add_argument('--config', type=str, default='config/default.yaml',
                        help='Path to config file')
    parser.add_argument('--check', action=argparse.BooleanOptionalAction, default=True,
                        help='Cross-check against the reference sieve')
    args = parser.parse_args()

    config = load_config(args.config)

    print("=" * 60)
    print("Segmented Wheel-240 Sieve - Benchmark")
    print("=" * 60)
    print(f"\nConfiguration:")
    print(f"  segment_len = {config['segment_len']:,}")
    print(f"  limits = {config['limits']}")
    print(f"  n_primes = {config['n_primes']}")
    print(f"  check_limit = {config['check_limit']:,}")
    print()

    total_start = time.time()
    df = run_benchmark(config, check=args.check)

    output_dir = Path(config['output_dir'])
    output_dir.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_dir / 'sieve_benchmark.csv', index=False)

    print("=" * 60)
    print(f"Total time: {time.time() - total_start:.1f}s")
    print(f"Results saved to {output_dir / 'sieve_benchmark.csv'}")
    print("=" * 60)
    print(df.to_string(index=False))


if __name__ == '__main__':
    main()
