r"""
Proof that a Cramer-Shoup ciphertext encrypts a given group element.

A ciphertext :math:`(u_1, u_2, e, v)` of :math:`x` under the public key
:math:`(g_1, g_2, c, d, h)` with randomness :math:`r` satisfies

.. math::

    u_1 = g_1^r, \quad u_2 = g_2^r, \quad e / x = h^r, \quad v = (c d^w)^r

where :math:`w` is the hash of :math:`(u_1, u_2, e)`. This is an extended Diffie-Hellman
statement with four pairs and witness :math:`r`, so the protocol delegates to
:py:mod:`zksigma.primitives.dh`.
"""

import attr

from zksigma.base import (
    SigmaCommonInput,
    SigmaProverAdapter,
    SigmaProverInput,
    SigmaSimulatorAdapter,
    SigmaVerifierAdapter,
)
from zksigma.consts import DEFAULT_SOUNDNESS
from zksigma.encryption import cramer_shoup_hash
from zksigma.primitives.dh import (
    DHExtendedCommonInput,
    DHExtendedProverInput,
    SigmaDHExtendedProverComputation,
    SigmaDHExtendedSimulator,
    SigmaDHExtendedVerifierComputation,
)
from zksigma.utils.misc import to_bn


@attr.s(frozen=True)
class CramerShoupEncryptedValueCommonInput(SigmaCommonInput):
    """Public key, ciphertext, and the claimed plaintext x."""

    public_key = attr.ib()
    ciphertext = attr.ib()
    x = attr.ib()


@attr.s(frozen=True)
class CramerShoupEncryptedValueProverInput(SigmaProverInput):
    public_key = attr.ib()
    ciphertext = attr.ib()
    x = attr.ib()
    r = attr.ib(converter=to_bn, repr=False)

    @property
    def common_input(self):
        return CramerShoupEncryptedValueCommonInput(
            self.public_key, self.ciphertext, self.x
        )


def encrypted_value_to_dh_extended(group, public_key, ciphertext, x):
    """
    Map an encryption of x to the bases (g1, g2, h, c * d^w) and the values
    (u1, u2, e / x, v).
    """
    pk, ct = public_key, ciphertext
    w = cramer_shoup_hash(group, ct.u1, ct.u2, ct.e)
    bases = (pk.g1, pk.g2, pk.h, group.multiply(pk.c, group.exponentiate(pk.d, w)))
    values = (ct.u1, ct.u2, group.divide(ct.e, x), ct.v)
    return DHExtendedCommonInput(bases, values)


class SigmaCramerShoupEncryptedValueProverComputation(SigmaProverAdapter):
    """
    Prover that a Cramer-Shoup ciphertext encrypts x, given the encryption randomness.

    Args:
        group (:py:class:`zksigma.groups.DlogGroup`): Group
        soundness: Soundness parameter in bits.
        random: Randomness source.
    """

    input_cls = CramerShoupEncryptedValueProverInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDHExtendedProverComputation(group, soundness, random))
        self.group = group

    def convert_input(self, prover_input):
        dh = encrypted_value_to_dh_extended(
            self.group, prover_input.public_key, prover_input.ciphertext, prover_input.x
        )
        return DHExtendedProverInput(dh.bases, dh.values, prover_input.r)

    def get_simulator(self):
        return SigmaCramerShoupEncryptedValueSimulator(
            self.group, self.soundness, self.random
        )


class SigmaCramerShoupEncryptedValueVerifierComputation(SigmaVerifierAdapter):
    input_cls = CramerShoupEncryptedValueCommonInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDHExtendedVerifierComputation(group, soundness, random))
        self.group = group

    def convert_input(self, common_input):
        return encrypted_value_to_dh_extended(
            self.group, common_input.public_key, common_input.ciphertext, common_input.x
        )


class SigmaCramerShoupEncryptedValueSimulator(SigmaSimulatorAdapter):
    input_cls = CramerShoupEncryptedValueCommonInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDHExtendedSimulator(group, soundness, random))
        self.group = group

    def convert_input(self, common_input):
        return encrypted_value_to_dh_extended(
            self.group, common_input.public_key, common_input.ciphertext, common_input.x
        )
