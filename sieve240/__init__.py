"""Segmented mod-240 wheel sieve with rank and primality queries."""

from .sieve import Sieve, build_to_limit, build_to_n_primes

__all__ = ["Sieve", "build_to_limit", "build_to_n_primes"]
