"""
Closed-form performance of finite-capacity Markovian queues.

Single server (M/M/1/K), with ρ = λ/μ:

    blocking probability    P_K = (1-ρ) ρ^K / (1 - ρ^(K+1))
    mean number in system   L   = ρ/(1-ρ) - (K+1) ρ^(K+1) / (1 - ρ^(K+1))
    mean time in system     W   = L / (λ (1 - P_K))        (Little's law)

At ρ = 1 every one of these is 0/0, and close to 1 the two terms of L nearly
cancel. Inside |ρ-1| < NEAR_ONE_BAND we sum the stationary distribution
instead, which is exact and lands on the limits at ρ = 1:
P_K = 1/(K+1), L = K/2, W = (K+1)/(2λ). For ρ > 1 the same formulas are
evaluated in r = 1/ρ so that ρ^K cannot overflow.

Several servers (c > 1): blocking uses the truncated Erlang loss form with
ρ = λ/(cμ), and L comes from the M/M/c/K stationary distribution.
"""
import functools

NEAR_ONE_BAND = 1e-4


def _check(arrival_rate, service_rate, capacity, servers):
    if not (arrival_rate > 0 and service_rate > 0):
        raise ValueError(f"rates must be positive, got λ={arrival_rate} μ={service_rate}")
    if capacity < 1:
        raise ValueError(f"capacity must be at least 1, got {capacity}")
    if servers < 1:
        raise ValueError(f"server count must be at least 1, got {servers}")


def _near_one(rho):
    return abs(rho - 1.0) < NEAR_ONE_BAND


def load(arrival_rate, service_rate, servers=1):
    return arrival_rate / (servers * service_rate)


@functools.lru_cache(maxsize=None)
def _erlang_terms(a, servers):
    # a^i / i! for i = 0..servers, built up without factorials
    terms = [1.0]
    for i in range(1, servers + 1):
        terms.append(terms[-1] * a / i)
    return tuple(terms)


def erlang_loss(a, servers):
    """Erlang loss (a^c / c!) / sum_{i=0..c} a^i / i!."""
    if servers < 1:
        raise ValueError(f"server count must be at least 1, got {servers}")
    if a < 0:
        raise ValueError(f"offered load must be non-negative, got {a}")
    terms = _erlang_terms(a, servers)
    return terms[-1] / sum(terms)


def state_probabilities(arrival_rate, service_rate, capacity, servers=1):
    """Stationary distribution p_0..p_K of the M/M/c/K queue."""
    _check(arrival_rate, service_rate, capacity, servers)
    if capacity < servers:
        raise ValueError(f"capacity {capacity} is smaller than the server count {servers}")
    a = arrival_rate / service_rate
    weights = [1.0]
    for n in range(1, capacity + 1):
        weights.append(weights[-1] * a / min(n, servers))
    total = sum(weights)
    return [w / total for w in weights]


def blocking_probability(arrival_rate, service_rate, capacity, servers=1):
    _check(arrival_rate, service_rate, capacity, servers)
    if servers > 1:
        return erlang_loss(load(arrival_rate, service_rate, servers), servers)

    rho = arrival_rate / service_rate
    k = capacity
    if _near_one(rho):
        return state_probabilities(arrival_rate, service_rate, k)[-1]
    if rho < 1:
        return (1 - rho) * rho ** k / (1 - rho ** (k + 1))
    r = 1.0 / rho
    return (1 - r) / (1 - r ** (k + 1))


def mean_number_in_system(arrival_rate, service_rate, capacity, servers=1):
    _check(arrival_rate, service_rate, capacity, servers)
    if servers > 1:
        probs = state_probabilities(arrival_rate, service_rate, capacity, servers)
        return sum(n * p for n, p in enumerate(probs))

    rho = arrival_rate / service_rate
    k = capacity
    if _near_one(rho):
        probs = state_probabilities(arrival_rate, service_rate, k)
        return sum(n * p for n, p in enumerate(probs))
    if rho < 1:
        return rho / (1 - rho) - (k + 1) * rho ** (k + 1) / (1 - rho ** (k + 1))
    r = 1.0 / rho
    return rho / (1 - rho) - (k + 1) / (r ** (k + 1) - 1)


def mean_wait(arrival_rate, service_rate, capacity, servers=1):
    # only accepted packets enter the system, so divide by the effective rate
    number = mean_number_in_system(arrival_rate, service_rate, capacity, servers)
    bp = blocking_probability(arrival_rate, service_rate, capacity, servers)
    return number / (arrival_rate * (1 - bp))
