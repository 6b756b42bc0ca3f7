"""
Factorisation utilities on top of a prime sieve.

Responsibility: number-theoretic functions that only need the primes in
order (sieve.iter()) and the sieve's limit. No knowledge of the packed
encoding.

A sieve covering [0, x) can resolve any n <= x**2: after dividing out every
prime below x, a cofactor that small must itself be prime.
"""

from typing import List, Optional, Tuple

Factors = List[Tuple[int, int]]


def trial_division(n: int, sieve) -> bool:
    """
    Decide primality of n by dividing by the sieve's primes up to sqrt(n).

    Only conclusive for n <= sieve.limit() ** 2.
    """
    for p in sieve.iter():
        if p * p > n:
            return True
        if n % p == 0:
            return False
    return True


def partial_factorise(n: int, sieve) -> Tuple[Factors, int]:
    """
    Factor n as far as the sieve allows.

    Parameters
    ----------
    n : int
        Integer to factor (n >= 1).
    sieve : Sieve
        Source of primes.

    Returns
    -------
    tuple
        (factors, remainder): ascending (prime, exponent) pairs, and the
        cofactor that could not be resolved (1 when factors is complete).
    """
    if n == 0:
        raise ValueError("0 has no prime factorisation")

    factors = []
    for p in sieve.iter():
        if p * p > n:
            break
        count = 0
        while n % p == 0:
            n //= p
            count += 1
        if count:
            factors.append((p, count))

    if n != 1:
        limit = sieve.limit()
        if n > limit * limit:
            return factors, n
        factors.append((n, 1))

    return factors, 1


def factorise(n: int, sieve) -> Optional[Factors]:
    """
    Factor n into (prime, exponent) pairs.

    Returns [] for 1 and None if n needs primes beyond the sieve.
    Raises ValueError for 0.
    """
    factors, remainder = partial_factorise(n, sieve)
    if remainder != 1:
        return None
    return factors


def euler_phi(n: int, sieve) -> Optional[int]:
    """
    Euler's totient: n times the product of (1 - 1/p) over distinct p | n.

    Returns None if n cannot be factored with this sieve.
    """
    factors = factorise(n, sieve)
    if factors is None:
        return None
    for p, _ in factors:
        n = n // p * (p - 1)
    return n


def number_of_divisors(n: int, sieve) -> Optional[int]:
    """
    Count divisors of n: (a_1 + 1)(a_2 + 1)...(a_k + 1) for n = prod p_i^a_i.

    Returns None if n cannot be factored with this sieve.
    """
    factors = factorise(n, sieve)
    if factors is None:
        return None
    count = 1
    for _, exponent in factors:
        count *= exponent + 1
    return count
