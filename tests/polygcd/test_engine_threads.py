from concurrent.futures import ThreadPoolExecutor

from algebra.polynomial import Polynomial
from polygcd.engine import FailureKind, GcdConfig, GcdEngine


def _problems():
    x, y = Polynomial.variable(2, 0), Polynomial.variable(2, 1)
    return [
        (x ** 2 * y + x * y ** 2, x ** 2 - y ** 2),
        ((x + 2 * y) * (x - 3), (x + 2 * y) * (y + 1)),
        (x ** 3 - y ** 3, x ** 2 - y ** 2),
        (6 * x ** 2 * y, 4 * x ** 3 * y ** 2 + 10 * x * y ** 3),
    ] * 8


def test_shared_engine_matches_serial_results():
    problems = _problems()
    serial = [GcdEngine(GcdConfig(time_limit_s=None)).gcd(u, v) for u, v in problems]

    shared = GcdEngine(GcdConfig(time_limit_s=None))
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda p: shared.gcd(*p), problems))

    assert results == serial
    snap = shared.stats.snapshot()
    assert snap.lookups == snap.cache_hits + snap.cache_misses
    assert snap.cache_hits > 0


def test_time_budgets_are_per_caller():
    x, y = Polynomial.variable(2, 0), Polynomial.variable(2, 1)
    starved = ((x + y + 1) * (x - y), (x + y + 1) * (x + 3))
    shared = GcdEngine(GcdConfig(time_limit_s=None))

    def run_starved():
        with shared.override(time_limit_s=0.0, cache_enabled=False):
            return shared.try_gcd(*starved)

    def run_normal(p):
        return shared.try_gcd(*p)

    with ThreadPoolExecutor(max_workers=4) as pool:
        starved_f = pool.submit(run_starved)
        normal_fs = [pool.submit(run_normal, p) for p in _problems()[:4]]
        normal = [f.result() for f in normal_fs]
        starved_r = starved_f.result()

    assert starved_r.failure is FailureKind.TIMEOUT
    assert all(r.ok for r in normal)
    assert normal[0].value == x + y
