r"""
Proofs that tuples of group elements share a discrete logarithm.

Diffie-Hellman tuple:

.. math::

    PK \{ (w): u = g^w \land v = h^w \}

The prover sends :math:`(a, b) = (g^r, h^r)` and answers :math:`z = r + ew \mod q`. The
verifier accepts iff :math:`g^z = a u^e` and :math:`h^z = b v^e`.

The extended variant generalizes this to any number of pairs :math:`(g_i, h_i)` with
:math:`h_i = g_i^w` for all :math:`i`.
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
from zksigma.exceptions import InvalidInputError
from zksigma.messages import BIMsg, DHExtendedMsg, DHMsg
from zksigma.utils.misc import challenge_to_bn, to_bn


@attr.s(frozen=True)
class DHCommonInput(SigmaCommonInput):
    """Tuple (g, h, u, v), with g the generator of the group."""

    h = attr.ib()
    u = attr.ib()
    v = attr.ib()


@attr.s(frozen=True)
class DHProverInput(SigmaProverInput):
    h = attr.ib()
    u = attr.ib()
    v = attr.ib()
    w = attr.ib(converter=to_bn, repr=False)

    @property
    def common_input(self):
        return DHCommonInput(self.h, self.u, self.v)


class SigmaDHProverComputation(DlogBasedSigma, SigmaProverComputation):
    """
    Prover of knowledge of w such that u = g^w and v = h^w.
    """

    input_cls = DHProverInput

    def _first_msg(self, prover_input):
        group = self.group
        r = group.random_exponent(self.random)
        self.remember(r=r)
        return DHMsg(
            group.exponentiate_generator(r), group.exponentiate(prover_input.h, r)
        )

    def _second_msg(self, challenge):
        e = challenge_to_bn(challenge)
        q = self.group.order()
        return BIMsg(self._ephemeral["r"].mod_add(e.mod_mul(self.input.w, q), q))

    def get_simulator(self):
        return SigmaDHSimulator(self.group, self.soundness, self.random)


class SigmaDHVerifierComputation(DlogBasedSigma, SigmaVerifierComputation):
    """
    Verifier of a Diffie-Hellman tuple proof.
    """

    input_cls = DHCommonInput
    first_msg_cls = DHMsg
    second_msg_cls = BIMsg

    def _verify(self, common_input, first_msg, second_msg, challenge):
        group = self.group
        check_numbers(second_msg, "z")
        elements = (
            common_input.h,
            common_input.u,
            common_input.v,
            first_msg.a,
            first_msg.b,
        )
        if not all(group.is_member(elem) for elem in elements):
            return False

        e = challenge_to_bn(challenge)
        z = second_msg.z
        verified = True

        # g^z == a * u^e
        lhs = group.exponentiate_generator(z)
        rhs = group.multiply(first_msg.a, group.exponentiate(common_input.u, e))
        verified &= lhs == rhs

        # h^z == b * v^e
        lhs = group.exponentiate(common_input.h, z)
        rhs = group.multiply(first_msg.b, group.exponentiate(common_input.v, e))
        verified &= lhs == rhs
        return verified


class SigmaDHSimulator(DlogBasedSigma, SigmaSimulator):
    """
    Simulator for the DH-tuple protocol: a = g^z * u^(-e), b = h^z * v^(-e).
    """

    input_cls = DHCommonInput

    def _simulate(self, common_input, challenge):
        group = self.group
        e = challenge_to_bn(challenge)
        z = group.random_exponent(self.random)
        a = group.multiply(
            group.exponentiate_generator(z), group.exponentiate(common_input.u, -e)
        )
        b = group.multiply(
            group.exponentiate(common_input.h, z),
            group.exponentiate(common_input.v, -e),
        )
        return SimulatorOutput(DHMsg(a, b), challenge, BIMsg(z))


def _check_pairs(bases, values):
    if len(bases) == 0 or len(bases) != len(values):
        raise InvalidInputError("Need the same positive number of bases and values")


@attr.s(frozen=True)
class DHExtendedCommonInput(SigmaCommonInput):
    """Bases g_1, ..., g_m and values h_1, ..., h_m."""

    bases = attr.ib(converter=tuple)
    values = attr.ib(converter=tuple)

    def __attrs_post_init__(self):
        _check_pairs(self.bases, self.values)


@attr.s(frozen=True)
class DHExtendedProverInput(SigmaProverInput):
    bases = attr.ib(converter=tuple)
    values = attr.ib(converter=tuple)
    w = attr.ib(converter=to_bn, repr=False)

    def __attrs_post_init__(self):
        _check_pairs(self.bases, self.values)

    @property
    def common_input(self):
        return DHExtendedCommonInput(self.bases, self.values)


class SigmaDHExtendedProverComputation(DlogBasedSigma, SigmaProverComputation):
    """
    Prover of knowledge of w such that h_i = g_i^w for all i.
    """

    input_cls = DHExtendedProverInput

    def _first_msg(self, prover_input):
        r = self.group.random_exponent(self.random)
        self.remember(r=r)
        return DHExtendedMsg(
            [self.group.exponentiate(g, r) for g in prover_input.bases]
        )

    def _second_msg(self, challenge):
        e = challenge_to_bn(challenge)
        q = self.group.order()
        return BIMsg(self._ephemeral["r"].mod_add(e.mod_mul(self.input.w, q), q))

    def get_simulator(self):
        return SigmaDHExtendedSimulator(self.group, self.soundness, self.random)


class SigmaDHExtendedVerifierComputation(DlogBasedSigma, SigmaVerifierComputation):
    input_cls = DHExtendedCommonInput
    first_msg_cls = DHExtendedMsg
    second_msg_cls = BIMsg

    def _verify(self, common_input, first_msg, second_msg, challenge):
        group = self.group
        check_numbers(second_msg, "z")
        if len(first_msg.elements) != len(common_input.bases):
            return False
        triples = list(zip(common_input.bases, common_input.values, first_msg.elements))
        if not all(group.is_member(elem) for triple in triples for elem in triple):
            return False

        e = challenge_to_bn(challenge)
        z = second_msg.z
        verified = True
        for g, h, a in triples:
            lhs = group.exponentiate(g, z)
            rhs = group.multiply(a, group.exponentiate(h, e))
            verified &= lhs == rhs
        return verified


class SigmaDHExtendedSimulator(DlogBasedSigma, SigmaSimulator):
    """
    Simulator for the extended DH protocol: a_i = g_i^z * h_i^(-e).
    """

    input_cls = DHExtendedCommonInput

    def _simulate(self, common_input, challenge):
        group = self.group
        e = challenge_to_bn(challenge)
        z = group.random_exponent(self.random)
        elements = [
            group.multiply(group.exponentiate(g, z), group.exponentiate(h, -e))
            for g, h in zip(common_input.bases, common_input.values)
        ]
        return SimulatorOutput(DHExtendedMsg(elements), challenge, BIMsg(z))
