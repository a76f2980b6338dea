"""
Encryption schemes whose ciphertexts the Sigma protocols reason about.

* ElGamal over a :py:class:`zksigma.groups.DlogGroup`, encrypting group elements.
* Cramer-Shoup over the same groups, also encrypting group elements.
* Damgard-Jurik, the generalization of Paillier to the ring Z_{n^(s+1)}.
"""

import hashlib

import attr

from petlib.bn import Bn

from zksigma.consts import DEFAULT_DJ_LENGTH
from zksigma.exceptions import ConfigurationError
from zksigma.utils.groups import get_random_unit, make_generators
from zksigma.utils.misc import SecureRandom, is_coprime, to_bn


@attr.s(frozen=True)
class ElGamalPublicKey:
    h = attr.ib()


@attr.s(frozen=True)
class ElGamalPrivateKey:
    x = attr.ib(converter=to_bn, repr=False)


@attr.s(frozen=True)
class ElGamalCiphertext:
    c1 = attr.ib()
    c2 = attr.ib()


class ElGamalEnc:
    """
    ElGamal encryption of group elements.

    Args:
        group (:py:class:`zksigma.groups.DlogGroup`): Group
        random: Randomness source.

    >>> from zksigma.groups import ZpDlogGroup
    >>> G = ZpDlogGroup(2039, 1019, 4)
    >>> enc = ElGamalEnc(G)
    >>> pk, sk = enc.keygen()
    >>> msg = G.exponentiate_generator(42)
    >>> enc.decrypt(sk, enc.encrypt(pk, msg)) == msg
    True
    """

    def __init__(self, group, random=None):
        self.group = group
        self.random = random if random is not None else SecureRandom()

    def keygen(self):
        x = self.group.random_exponent(self.random)
        public_key = ElGamalPublicKey(self.group.exponentiate_generator(x))
        return public_key, ElGamalPrivateKey(x)

    def encrypt(self, public_key, msg, r=None):
        """
        Encrypt a group element: (g^r, msg * h^r).

        Args:
            public_key (:py:class:`ElGamalPublicKey`): Public key.
            msg: Group element.
            r: Encryption randomness. Sampled if not given.
        """
        group = self.group
        if r is None:
            r = group.random_exponent(self.random)
        c1 = group.exponentiate_generator(r)
        c2 = group.multiply(msg, group.exponentiate(public_key.h, r))
        return ElGamalCiphertext(c1, c2)

    def decrypt(self, private_key, ciphertext):
        group = self.group
        return group.multiply(
            ciphertext.c2, group.exponentiate(ciphertext.c1, -private_key.x)
        )


@attr.s(frozen=True)
class CramerShoupPublicKey:
    """Generators g1, g2, and c = g1^x1 g2^x2, d = g1^y1 g2^y2, h = g1^z."""

    g1 = attr.ib()
    g2 = attr.ib()
    c = attr.ib()
    d = attr.ib()
    h = attr.ib()


@attr.s(frozen=True)
class CramerShoupPrivateKey:
    x1 = attr.ib(converter=to_bn, repr=False)
    x2 = attr.ib(converter=to_bn, repr=False)
    y1 = attr.ib(converter=to_bn, repr=False)
    y2 = attr.ib(converter=to_bn, repr=False)
    z = attr.ib(converter=to_bn, repr=False)


@attr.s(frozen=True)
class CramerShoupCiphertext:
    u1 = attr.ib()
    u2 = attr.ib()
    e = attr.ib()
    v = attr.ib()


def cramer_shoup_hash(group, u1, u2, e):
    """
    Hash the first three ciphertext components to an exponent: SHA-256 of their
    serializations, reduced modulo the group order.
    """
    data = b"".join(group.serialize(elem) for elem in (u1, u2, e))
    return Bn.from_binary(hashlib.sha256(data).digest()) % group.order()


class CramerShoupEnc:
    """
    Cramer-Shoup encryption of group elements.

    Args:
        group (:py:class:`zksigma.groups.DlogGroup`): Group
        random: Randomness source.

    >>> from zksigma.groups import ZpDlogGroup
    >>> G = ZpDlogGroup(2039, 1019, 4)
    >>> enc = CramerShoupEnc(G)
    >>> pk, sk = enc.keygen()
    >>> msg = G.exponentiate_generator(42)
    >>> enc.decrypt(sk, enc.encrypt(pk, msg)) == msg
    True
    """

    def __init__(self, group, random=None):
        self.group = group
        self.random = random if random is not None else SecureRandom()

    def keygen(self):
        group = self.group
        g1 = group.generator()
        (g2,) = make_generators(1, group, self.random)
        sk = CramerShoupPrivateKey(
            *(group.random_exponent(self.random) for _ in range(5))
        )
        c = group.multiply(group.exponentiate(g1, sk.x1), group.exponentiate(g2, sk.x2))
        d = group.multiply(group.exponentiate(g1, sk.y1), group.exponentiate(g2, sk.y2))
        h = group.exponentiate(g1, sk.z)
        return CramerShoupPublicKey(g1, g2, c, d, h), sk

    def encrypt(self, public_key, msg, r=None):
        """
        Encrypt a group element: (g1^r, g2^r, h^r * msg, c^r * d^(rw)), where w is the
        :py:func:`cramer_shoup_hash` of the first three components.

        Args:
            public_key (:py:class:`CramerShoupPublicKey`): Public key.
            msg: Group element.
            r: Encryption randomness. Sampled if not given.
        """
        group = self.group
        pk = public_key
        if r is None:
            r = group.random_exponent(self.random)
        r = to_bn(r)
        u1 = group.exponentiate(pk.g1, r)
        u2 = group.exponentiate(pk.g2, r)
        e = group.multiply(group.exponentiate(pk.h, r), msg)
        w = cramer_shoup_hash(group, u1, u2, e)
        v = group.exponentiate(group.multiply(pk.c, group.exponentiate(pk.d, w)), r)
        return CramerShoupCiphertext(u1, u2, e, v)

    def decrypt(self, private_key, ciphertext):
        """
        Raises:
            ValueError: If the ciphertext fails the consistency check.
        """
        group = self.group
        sk = private_key
        u1, u2, e, v = ciphertext.u1, ciphertext.u2, ciphertext.e, ciphertext.v
        w = cramer_shoup_hash(group, u1, u2, e)
        q = group.order()
        expected = group.multiply(
            group.exponentiate(u1, sk.x1.mod_add(sk.y1.mod_mul(w, q), q)),
            group.exponentiate(u2, sk.x2.mod_add(sk.y2.mod_mul(w, q), q)),
        )
        if expected != v:
            raise ValueError("Ciphertext fails the consistency check")
        return group.multiply(e, group.exponentiate(u1, -sk.z))


@attr.s(frozen=True)
class DJPublicKey:
    """RSA modulus n = pq."""

    n = attr.ib(converter=to_bn)


@attr.s(frozen=True)
class DJPrivateKey:
    p = attr.ib(converter=to_bn, repr=False)
    q = attr.ib(converter=to_bn, repr=False)


@attr.s(frozen=True)
class DJCiphertext:
    """Ciphertext c in Z*_{n^(s+1)}, together with the length parameter s."""

    c = attr.ib(converter=to_bn)
    s = attr.ib(default=DEFAULT_DJ_LENGTH)


def dj_moduli(n, s):
    """
    Return (N, N') = (n^s, n^(s+1)).

    >>> dj_moduli(Bn(15), 2)
    (225, 3375)
    """
    n = to_bn(n)
    N = n.pow(s)
    return N, N * n


class DamgardJurikEnc:
    """
    Damgard-Jurik encryption: E(x; r) = (1 + n)^x * r^(n^s) mod n^(s+1).

    Args:
        length: Length parameter s. The plaintext space is Z_{n^s}.
        random: Randomness source.
    """

    def __init__(self, length=DEFAULT_DJ_LENGTH, random=None):
        if not isinstance(length, int) or length < 1:
            raise ConfigurationError("Length parameter must be a positive integer")
        self.length = length
        self.random = random if random is not None else SecureRandom()

    def keygen(self, bits=1024):
        """
        Generate a key pair.

        Args:
            bits: Bit length of each prime factor of n.
        """
        while True:
            p = Bn.get_prime(bits, safe=0)
            q = Bn.get_prime(bits, safe=0)
            if p != q and is_coprime(p * q, (p - 1) * (q - 1)):
                return DJPublicKey(p * q), DJPrivateKey(p, q)

    def encrypt(self, public_key, x, r=None):
        """
        Encrypt an integer of Z_{n^s}.

        Args:
            public_key (:py:class:`DJPublicKey`): Public key.
            x: Plaintext.
            r: Encryption randomness in Z*_n. Sampled if not given.

        Returns:
            :py:class:`DJCiphertext`
        """
        n = public_key.n
        N, N_prime = dj_moduli(n, self.length)
        if r is None:
            r = get_random_unit(n, self.random)
        c = (n + 1).mod_pow(to_bn(x) % N, N_prime).mod_mul(
            to_bn(r).mod_pow(N, N_prime), N_prime
        )
        return DJCiphertext(c, self.length)
