"""
Prime-order groups in which the Sigma protocols run.

Every protocol consumes the small :py:class:`DlogGroup` interface: a generator of known prime
order q, exponentiation, multiplication, inversion, a membership test, group validation, and a
byte encoding of elements.

Two implementations are provided:

* :py:class:`EcDlogGroup` wraps a petlib elliptic curve.
* :py:class:`ZpDlogGroup` is the subgroup of quadratic residues modulo a safe prime p = 2q + 1.
  Its elements (:py:class:`ZpElement`) mimic :py:class:`petlib.ec.EcPt`, so both groups are
  written additively underneath: ``a + b`` is the group operation, ``k * a`` is exponentiation,
  and ``-a`` is the inverse.

The interface itself is written multiplicatively, as in the literature: ``exponentiate(g, r)``
is g^r.
"""

import abc

import msgpack

from petlib.bn import Bn
from petlib.ec import EcGroup, EcPt
from petlib.pack import encode, decode, register_coders

from zksigma.consts import DEFAULT_CURVE_NID
from zksigma.exceptions import InvalidGroupError
from zksigma.utils.misc import SecureRandom, to_bn


class DlogGroup(metaclass=abc.ABCMeta):
    """
    Cyclic group of prime order with a fixed generator.
    """

    @abc.abstractmethod
    def generator(self):
        pass

    @abc.abstractmethod
    def order(self):
        pass

    @abc.abstractmethod
    def identity(self):
        pass

    @abc.abstractmethod
    def is_member(self, elem):
        """Check that an element belongs to the prime-order subgroup."""
        pass

    @abc.abstractmethod
    def validate_group(self):
        """Check that the group parameters are sound."""
        pass

    @abc.abstractmethod
    def serialize(self, elem):
        """Encode an element as bytes."""
        pass

    @abc.abstractmethod
    def reconstruct(self, data):
        """Decode an element from bytes produced by :py:meth:`serialize`."""
        pass

    def exponentiate(self, elem, exponent):
        """
        Compute elem^exponent. The exponent is reduced modulo the group order first, so negative
        exponents are allowed.
        """
        return (to_bn(exponent) % self.order()) * elem

    def multiply(self, elem, other):
        return elem + other

    def invert(self, elem):
        return -elem

    def divide(self, elem, other):
        """Compute elem / other."""
        return self.multiply(elem, self.invert(other))

    def exponentiate_generator(self, exponent):
        return self.exponentiate(self.generator(), exponent)

    def random_exponent(self, random=None):
        """
        Draw a scalar uniformly from [0, q).

        Args:
            random: Randomness source. Defaults to a fresh :py:class:`SecureRandom`.
        """
        if random is None:
            random = SecureRandom()
        return random.random_below(self.order())

    def check_soundness(self, soundness):
        """Return True if 2^soundness < q."""
        return Bn(2).pow(soundness) < self.order()


class EcDlogGroup(DlogGroup):
    """
    Group of points of a prime-order petlib elliptic curve.

    Args:
        nid: OpenSSL curve identifier.

    Raises:
        :py:class:`zksigma.exceptions.InvalidGroupError`: If OpenSSL does not know the curve.
    """

    def __init__(self, nid=DEFAULT_CURVE_NID):
        if nid not in EcGroup.list_curves():
            raise InvalidGroupError("Unknown curve nid: %s" % nid)
        self.nid = nid
        self.ec_group = EcGroup(nid)
        self._order = self.ec_group.order()
        self._generator = self.ec_group.generator()

    def generator(self):
        return self._generator

    def order(self):
        return self._order

    def identity(self):
        return self.ec_group.infinite()

    def is_member(self, elem):
        if not isinstance(elem, EcPt) or elem.group != self.ec_group:
            return False
        return self.ec_group.check_point(elem)

    def validate_group(self):
        if not self._order.is_prime():
            return False
        if self._generator.is_infinite():
            return False
        return (self._order * self._generator).is_infinite()

    def serialize(self, elem):
        return elem.export()

    def reconstruct(self, data):
        return EcPt.from_binary(data, self.ec_group)

    def __eq__(self, other):
        return isinstance(other, EcDlogGroup) and self.nid == other.nid

    def __hash__(self):
        return hash(("ec", self.nid))

    def __repr__(self):
        return "EcDlogGroup(%s)" % self.nid


class ZpDlogGroup(DlogGroup):
    """
    Subgroup of quadratic residues modulo a safe prime.

    Args:
        p: Safe prime modulus, p = 2q + 1.
        q: Prime order of the subgroup.
        g: Generator of the subgroup.

    >>> G = ZpDlogGroup(2039, 1019, 4)
    >>> G.validate_group()
    True
    >>> G.exponentiate(G.generator(), 6)
    ZpElement(18)
    """

    def __init__(self, p, q, g):
        self.p = to_bn(p)
        self.q = to_bn(q)
        self.g = to_bn(g)

    @staticmethod
    def generate(bits, random=None):
        """
        Draw fresh group parameters.

        Args:
            bits: Bit length of the safe prime p.
            random: Randomness source for the generator.
        """
        if random is None:
            from zksigma.utils.misc import SecureRandom

            random = SecureRandom()
        p = Bn.get_prime(bits, safe=1)
        q = (p - 1) // 2
        while True:
            # Squares of random units generate the order-q subgroup.
            h = random.random_range(Bn(2), p - 1)
            g = h.mod_mul(h, p)
            if g != 1:
                return ZpDlogGroup(p, q, g)

    def element(self, value):
        """Wrap an integer as a group element, without a membership check."""
        return ZpElement(to_bn(value) % self.p, self)

    def generator(self):
        return ZpElement(self.g, self)

    def order(self):
        return self.q

    def identity(self):
        return ZpElement(Bn(1), self)

    def is_member(self, elem):
        if not isinstance(elem, ZpElement) or elem.group != self:
            return False
        value = elem.value
        if not (0 < value < self.p):
            return False
        return value.mod_pow(self.q, self.p) == 1

    def validate_group(self):
        if not (self.p.is_prime() and self.q.is_prime()):
            return False
        if self.p != 2 * self.q + 1:
            return False
        if self.g == 1:
            return False
        return self.is_member(self.generator())

    @property
    def element_size(self):
        return (self.p.num_bits() + 7) // 8

    def serialize(self, elem):
        raw = elem.value.binary()
        return raw.rjust(self.element_size, b"\x00")

    def reconstruct(self, data):
        return ZpElement(Bn.from_binary(data), self)

    def __eq__(self, other):
        return (
            isinstance(other, ZpDlogGroup)
            and self.p == other.p
            and self.q == other.q
            and self.g == other.g
        )

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(("zp", self.p, self.q, self.g))

    def __repr__(self):
        return "ZpDlogGroup(p=%s, q=%s, g=%s)" % (self.p, self.q, self.g)


class ZpElement:
    """
    Element of a :py:class:`ZpDlogGroup`. Mimics :py:class:`petlib.ec.EcPt`.
    """

    def __init__(self, value, group):
        self.value = value
        self.group = group

    def __add__(self, other):
        return ZpElement(self.value.mod_mul(other.value, self.group.p), self.group)

    def __neg__(self):
        return ZpElement(self.value.mod_inverse(self.group.p), self.group)

    def __sub__(self, other):
        return self + (-other)

    def __rmul__(self, other):
        exponent = to_bn(other) % self.group.q
        return ZpElement(self.value.mod_pow(exponent, self.group.p), self.group)

    def is_infinite(self):
        return self.value == 1

    def __eq__(self, other):
        if not isinstance(other, ZpElement):
            return False
        return self.value == other.value and self.group == other.group

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((self.value, self.group))

    def __repr__(self):
        return "ZpElement(%s)" % self.value


def enc_ZpDlogGroup(obj):
    """Encoder for Zp groups: the parameters as big-endian bytes."""
    return msgpack.packb((obj.p.binary(), obj.q.binary(), obj.g.binary()))


def dec_ZpDlogGroup(data):
    p, q, g = msgpack.unpackb(data)
    return ZpDlogGroup(Bn.from_binary(p), Bn.from_binary(q), Bn.from_binary(g))


def enc_ZpElement(obj):
    """Encoder for Zp elements. The group goes along, packed by its own coder."""
    return msgpack.packb((obj.value.binary(), encode(obj.group)))


def dec_ZpElement(data):
    value, group = msgpack.unpackb(data)
    return ZpElement(Bn.from_binary(value), decode(group))


register_coders(ZpDlogGroup, 12, enc_ZpDlogGroup, dec_ZpDlogGroup)
register_coders(ZpElement, 13, enc_ZpElement, dec_ZpElement)
