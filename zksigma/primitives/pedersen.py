r"""
Proofs about Pedersen commitments :math:`c = g^r h^x`.

Knowledge of the committed value:

.. math::

    PK \{ (x, r): c = h^x g^r \}

The prover sends :math:`a = h^\alpha g^\beta`, and answers :math:`u = \alpha + ex \mod q` and
:math:`v = \beta + er \mod q`. The verifier accepts iff :math:`h^u g^v = a c^e`.

Committed value: when x is public, the statement reduces to knowledge of the discrete
logarithm of :math:`c h^{-x}` to the base g, so the protocol is delegated to
:py:mod:`zksigma.primitives.dlog`.
"""

import attr

from zksigma.base import (
    DlogBasedSigma,
    SigmaCommonInput,
    SigmaProverAdapter,
    SigmaProverComputation,
    SigmaProverInput,
    SigmaSimulator,
    SigmaSimulatorAdapter,
    SigmaVerifierAdapter,
    SigmaVerifierComputation,
    SimulatorOutput,
    check_numbers,
)
from zksigma.consts import DEFAULT_SOUNDNESS
from zksigma.messages import GroupElementMsg, PedersenCmtKnowledgeMsg
from zksigma.primitives.dlog import (
    DlogCommonInput,
    DlogProverInput,
    SigmaDlogProverComputation,
    SigmaDlogSimulator,
    SigmaDlogVerifierComputation,
)
from zksigma.utils.misc import challenge_to_bn, to_bn


@attr.s(frozen=True)
class PedersenCmtKnowledgeCommonInput(SigmaCommonInput):
    """Second base h and commitment c."""

    h = attr.ib()
    commitment = attr.ib()


@attr.s(frozen=True)
class PedersenCmtKnowledgeProverInput(SigmaProverInput):
    h = attr.ib()
    commitment = attr.ib()
    x = attr.ib(converter=to_bn, repr=False)
    r = attr.ib(converter=to_bn, repr=False)

    @property
    def common_input(self):
        return PedersenCmtKnowledgeCommonInput(self.h, self.commitment)


class SigmaPedersenCmtKnowledgeProverComputation(
    DlogBasedSigma, SigmaProverComputation
):
    """
    Prover of knowledge of the opening (x, r) of a Pedersen commitment.
    """

    input_cls = PedersenCmtKnowledgeProverInput

    def _first_msg(self, prover_input):
        group = self.group
        alpha = group.random_exponent(self.random)
        beta = group.random_exponent(self.random)
        self.remember(alpha=alpha, beta=beta)
        a = group.multiply(
            group.exponentiate(prover_input.h, alpha),
            group.exponentiate_generator(beta),
        )
        return GroupElementMsg(a)

    def _second_msg(self, challenge):
        e = challenge_to_bn(challenge)
        q = self.group.order()
        u = self._ephemeral["alpha"].mod_add(e.mod_mul(self.input.x, q), q)
        v = self._ephemeral["beta"].mod_add(e.mod_mul(self.input.r, q), q)
        return PedersenCmtKnowledgeMsg(u, v)

    def get_simulator(self):
        return SigmaPedersenCmtKnowledgeSimulator(
            self.group, self.soundness, self.random
        )


class SigmaPedersenCmtKnowledgeVerifierComputation(
    DlogBasedSigma, SigmaVerifierComputation
):
    input_cls = PedersenCmtKnowledgeCommonInput
    first_msg_cls = GroupElementMsg
    second_msg_cls = PedersenCmtKnowledgeMsg

    def _verify(self, common_input, first_msg, second_msg, challenge):
        group = self.group
        check_numbers(second_msg, "u", "v")
        a = first_msg.element
        c = common_input.commitment
        if not all(group.is_member(elem) for elem in (common_input.h, c, a)):
            return False

        e = challenge_to_bn(challenge)
        lhs = group.multiply(
            group.exponentiate(common_input.h, second_msg.u),
            group.exponentiate_generator(second_msg.v),
        )
        rhs = group.multiply(a, group.exponentiate(c, e))
        return lhs == rhs


class SigmaPedersenCmtKnowledgeSimulator(DlogBasedSigma, SigmaSimulator):
    """
    Simulator: draws u and v, then a = h^u * g^v * c^(-e).
    """

    input_cls = PedersenCmtKnowledgeCommonInput

    def _simulate(self, common_input, challenge):
        group = self.group
        e = challenge_to_bn(challenge)
        u = group.random_exponent(self.random)
        v = group.random_exponent(self.random)
        a = group.multiply(
            group.multiply(
                group.exponentiate(common_input.h, u), group.exponentiate_generator(v)
            ),
            group.exponentiate(common_input.commitment, -e),
        )
        return SimulatorOutput(
            GroupElementMsg(a), challenge, PedersenCmtKnowledgeMsg(u, v)
        )


@attr.s(frozen=True)
class PedersenCommittedValueCommonInput(SigmaCommonInput):
    """Second base h, commitment c, and the claimed committed value x."""

    h = attr.ib()
    commitment = attr.ib()
    x = attr.ib(converter=to_bn)


@attr.s(frozen=True)
class PedersenCommittedValueProverInput(SigmaProverInput):
    h = attr.ib()
    commitment = attr.ib()
    x = attr.ib(converter=to_bn)
    r = attr.ib(converter=to_bn, repr=False)

    @property
    def common_input(self):
        return PedersenCommittedValueCommonInput(self.h, self.commitment, self.x)


def committed_value_to_dlog(group, common_input):
    """
    Map (h, c, x) to the discrete-logarithm statement c * h^(-x) = g^r.

    >>> from zksigma.groups import ZpDlogGroup
    >>> G = ZpDlogGroup(2039, 1019, 4)
    >>> h = G.exponentiate_generator(7)
    >>> c = G.multiply(G.exponentiate_generator(3), G.exponentiate(h, 5))
    >>> committed_value_to_dlog(G, PedersenCommittedValueCommonInput(h, c, 5))
    DlogCommonInput(h=ZpElement(64))
    """
    h_prime = group.multiply(
        common_input.commitment, group.exponentiate(common_input.h, -common_input.x)
    )
    return DlogCommonInput(h_prime)


class SigmaPedersenCommittedValueProverComputation(SigmaProverAdapter):
    """
    Prover that a Pedersen commitment opens to a public value x, given the randomness r.

    Args:
        group (:py:class:`zksigma.groups.DlogGroup`): Group
        soundness: Soundness parameter in bits.
        random: Randomness source.
    """

    input_cls = PedersenCommittedValueProverInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDlogProverComputation(group, soundness, random))
        self.group = group

    def convert_input(self, prover_input):
        dlog_input = committed_value_to_dlog(self.group, prover_input.common_input)
        return DlogProverInput(dlog_input.h, prover_input.r)

    def get_simulator(self):
        return SigmaPedersenCommittedValueSimulator(
            self.group, self.soundness, self.random
        )


class SigmaPedersenCommittedValueVerifierComputation(SigmaVerifierAdapter):
    input_cls = PedersenCommittedValueCommonInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDlogVerifierComputation(group, soundness, random))
        self.group = group

    def convert_input(self, common_input):
        return committed_value_to_dlog(self.group, common_input)


class SigmaPedersenCommittedValueSimulator(SigmaSimulatorAdapter):
    input_cls = PedersenCommittedValueCommonInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDlogSimulator(group, soundness, random))
        self.group = group

    def convert_input(self, common_input):
        return committed_value_to_dlog(self.group, common_input)
