import math
import secrets

from petlib.bn import Bn


def to_bn(x):
    """
    Ensure that value is a big number. Python integers of any size are accepted.

    >>> isinstance(to_bn(42), Bn)
    True
    >>> to_bn(2 ** 100) == Bn(2).pow(100)
    True
    >>> to_bn(-3)
    -3
    """
    if isinstance(x, Bn):
        return x
    return Bn.from_decimal(str(int(x)))


def xor_bytes(*chunks):
    """
    XOR together byte strings of equal length.

    >>> xor_bytes(b"\\x0f\\xf0", b"\\xff\\x00")
    b'\\xf0\\xf0'
    >>> xor_bytes(b"\\x01", b"\\x02", b"\\x04")
    b'\\x07'
    """
    if not chunks:
        raise ValueError("Nothing to XOR")
    length = len(chunks[0])
    if any(len(chunk) != length for chunk in chunks):
        raise ValueError("Cannot XOR byte strings of different lengths")
    result = bytearray(length)
    for chunk in chunks:
        for i, byte in enumerate(chunk):
            result[i] ^= byte
    return bytes(result)


def challenge_to_bn(challenge):
    """
    Read a challenge as an unsigned big-endian integer.

    >>> challenge_to_bn(b"\\x80\\x01")
    32769
    """
    return Bn.from_binary(challenge)


def bn_to_bytes(x, length):
    """
    Encode a non-negative big number as exactly ``length`` big-endian bytes.

    >>> bn_to_bytes(Bn(2), 3)
    b'\\x00\\x00\\x02'
    """
    raw = to_bn(x).binary()
    if len(raw) > length:
        raise ValueError("Value does not fit in %i bytes" % length)
    return raw.rjust(length, b"\x00")


def is_coprime(x, n):
    """
    Check that gcd(x, n) = 1.

    >>> is_coprime(Bn(9), Bn(10))
    True
    >>> is_coprime(Bn(6), Bn(10))
    False
    """
    return math.gcd(int(x), int(n)) == 1


class SecureRandom:
    """
    Source of cryptographic randomness.

    Scalars come from OpenSSL (:py:meth:`petlib.bn.Bn.random`), byte strings from the OS CSPRNG.
    Protocol objects take an instance of this class, so that tests can substitute a
    deterministic source.
    """

    def random_below(self, bound):
        """Draw a uniform integer in [0, bound)."""
        return to_bn(bound).random()

    def random_range(self, low, high):
        """Draw a uniform integer in [low, high)."""
        low, high = to_bn(low), to_bn(high)
        return low + (high - low).random()

    def random_bytes(self, num):
        return secrets.token_bytes(num)
