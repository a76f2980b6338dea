import threading

import pytest

from petlib.bn import Bn

from zksigma.encryption import DamgardJurikEnc
from zksigma.groups import EcDlogGroup, ZpDlogGroup
from zksigma.utils.misc import SecureRandom, to_bn


class FixedRandom(SecureRandom):
    """
    Randomness source that replays given values, then falls back to real randomness.
    """

    def __init__(self, scalars=(), byte_strings=()):
        self.scalars = [to_bn(x) for x in scalars]
        self.byte_strings = list(byte_strings)

    def random_below(self, bound):
        if self.scalars:
            return self.scalars.pop(0)
        return super().random_below(bound)

    def random_range(self, low, high):
        if self.scalars:
            return self.scalars.pop(0)
        return super().random_range(low, high)

    def random_bytes(self, num):
        if self.byte_strings:
            return self.byte_strings.pop(0)
        return super().random_bytes(num)


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture(params=["ec", "zp"])
def group(request, zp_group):
    """Groups in which the default soundness parameter of 80 bits is valid."""
    if request.param == "ec":
        return EcDlogGroup()
    return zp_group


@pytest.fixture
def ec_group():
    return EcDlogGroup()


@pytest.fixture(scope="session")
def zp_group():
    return ZpDlogGroup.generate(256)


@pytest.fixture
def toy_group():
    """p = 2039 = 2 * 1019 + 1. Only soundness 8 fits."""
    return ZpDlogGroup(2039, 1019, 4)


@pytest.fixture(scope="session")
def dj_keys():
    return DamgardJurikEnc().keygen(bits=256)


def run_parties(prover_fn, verifier_fn):
    """
    Run the two sides of a protocol in separate threads.

    Returns:
        The return value of the verifier side. An exception raised on either side is re-raised.
    """
    results = {}

    def target(name, fn):
        try:
            results[name] = fn()
        except Exception as e:
            results[name + "_error"] = e

    prover_thread = threading.Thread(target=target, args=("prover", prover_fn))
    prover_thread.start()
    target("verifier", verifier_fn)
    prover_thread.join(timeout=30)

    for name in ("prover_error", "verifier_error"):
        if name in results:
            raise results[name]
    return results["verifier"]


@pytest.fixture
def run():
    return run_parties


class SmallOrderGroup(ZpDlogGroup):
    """Group of made-up order, for checking soundness boundaries."""

    def __init__(self, order):
        super().__init__(2039, 1019, 4)
        self._fake_order = Bn(order)

    def order(self):
        return self._fake_order


@pytest.fixture
def small_order_group():
    return SmallOrderGroup
