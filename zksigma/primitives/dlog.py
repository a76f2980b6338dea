r"""
Proof of knowledge of a discrete logarithm.

.. math::

    PK \{ (w): h = g^w \}

The prover sends :math:`a = g^r` for a random :math:`r`, receives a challenge :math:`e`, and
answers :math:`z = r + ew \mod q`. The verifier accepts iff :math:`g^z = a h^e`.

See "On Sigma-protocols" by Ivan Damgard, 2010: http://www.cs.au.dk/~ivan/Sigma.pdf
"""

import attr

from zksigma.base import (
    DlogBasedSigma,
    SigmaCommonInput,
    SigmaProverComputation,
    SigmaProverInput,
    SigmaSimulator,
    SigmaVerifierComputation,
    SimulatorOutput,
    check_numbers,
)
from zksigma.messages import BIMsg, GroupElementMsg
from zksigma.utils.misc import challenge_to_bn, to_bn


@attr.s(frozen=True)
class DlogCommonInput(SigmaCommonInput):
    h = attr.ib()


@attr.s(frozen=True)
class DlogProverInput(SigmaProverInput):
    h = attr.ib()
    w = attr.ib(converter=to_bn, repr=False)

    @property
    def common_input(self):
        return DlogCommonInput(self.h)


class SigmaDlogProverComputation(DlogBasedSigma, SigmaProverComputation):
    """
    Prover of knowledge of w such that h = g^w.

    Args:
        group (:py:class:`zksigma.groups.DlogGroup`): Group
        soundness: Soundness parameter in bits.
        random: Randomness source.
    """

    input_cls = DlogProverInput

    def _first_msg(self, prover_input):
        r = self.group.random_exponent(self.random)
        self.remember(r=r)
        return GroupElementMsg(self.group.exponentiate_generator(r))

    def _second_msg(self, challenge):
        e = challenge_to_bn(challenge)
        q = self.group.order()
        z = self._ephemeral["r"].mod_add(e.mod_mul(self.input.w, q), q)
        return BIMsg(z)

    def get_simulator(self):
        return SigmaDlogSimulator(self.group, self.soundness, self.random)


class SigmaDlogVerifierComputation(DlogBasedSigma, SigmaVerifierComputation):
    """
    Verifier of knowledge of w such that h = g^w.

    Args:
        group (:py:class:`zksigma.groups.DlogGroup`): Group
        soundness: Soundness parameter in bits.
        random: Randomness source.
    """

    input_cls = DlogCommonInput
    first_msg_cls = GroupElementMsg
    second_msg_cls = BIMsg

    def _verify(self, common_input, first_msg, second_msg, challenge):
        group = self.group
        check_numbers(second_msg, "z")
        a = first_msg.element
        if not (group.is_member(common_input.h) and group.is_member(a)):
            return False

        e = challenge_to_bn(challenge)
        lhs = group.exponentiate_generator(second_msg.z)
        rhs = group.multiply(a, group.exponentiate(common_input.h, e))
        return lhs == rhs


class SigmaDlogSimulator(DlogBasedSigma, SigmaSimulator):
    """
    Simulator for the discrete-logarithm protocol: a = g^z * h^(-e).
    """

    input_cls = DlogCommonInput

    def _simulate(self, common_input, challenge):
        group = self.group
        e = challenge_to_bn(challenge)
        z = group.random_exponent(self.random)
        a = group.multiply(
            group.exponentiate_generator(z), group.exponentiate(common_input.h, -e)
        )
        return SimulatorOutput(GroupElementMsg(a), challenge, BIMsg(z))
