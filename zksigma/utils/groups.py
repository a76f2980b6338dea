from petlib.bn import Bn

from zksigma.utils.misc import SecureRandom, is_coprime, to_bn


def make_generators(num, group, random=None):
    """
    Create random generators of a prime-order group.

    The discrete logarithms of the generators are discarded, so nobody knows the relation
    between them.

    .. WARNING ::

        There is a negligible chance that some generators will be the same.

    Args:
        num: Number of generators to generate.
        group (:py:class:`zksigma.groups.DlogGroup`): Group
        random: Randomness source.

    >>> from zksigma.groups import ZpDlogGroup
    >>> G = ZpDlogGroup(2039, 1019, 4)
    >>> gens = make_generators(3, G)
    >>> len(gens) == 3
    True
    >>> all(G.is_member(h) for h in gens)
    True
    """
    if random is None:
        random = SecureRandom()
    generators = []
    while len(generators) < num:
        exponent = random.random_below(group.order())
        if exponent == 0:
            continue
        generators.append(group.exponentiate_generator(exponent))
    return generators


def get_random_unit(modulus, random=None):
    """
    Draw a random element of Z*_modulus.

    >>> n = Bn(35)
    >>> is_coprime(get_random_unit(n), n)
    True
    """
    if random is None:
        random = SecureRandom()
    modulus = to_bn(modulus)
    while True:
        candidate = random.random_range(Bn(1), modulus)
        if is_coprime(candidate, modulus):
            return candidate
