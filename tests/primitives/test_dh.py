import pytest

from petlib.bn import Bn

from zksigma.exceptions import InvalidInputError, InvalidMessageError
from zksigma.messages import BIMsg, DHExtendedMsg, DHMsg
from zksigma.primitives.dh import (
    DHCommonInput,
    DHExtendedCommonInput,
    DHExtendedProverInput,
    DHProverInput,
    SigmaDHExtendedProverComputation,
    SigmaDHExtendedSimulator,
    SigmaDHExtendedVerifierComputation,
    SigmaDHProverComputation,
    SigmaDHSimulator,
    SigmaDHVerifierComputation,
)
from zksigma.utils import make_generators
from zksigma.utils.debug import SigmaProtocol


@pytest.fixture
def dh_input(group):
    (h,) = make_generators(1, group)
    w = group.random_exponent()
    return DHProverInput(
        h, group.exponentiate_generator(w), group.exponentiate(h, w), w
    )


def test_dh_completeness(group, dh_input):
    protocol = SigmaProtocol(
        SigmaDHVerifierComputation(group), SigmaDHProverComputation(group)
    )
    assert protocol.verify(dh_input)


def test_dh_not_a_tuple(group, dh_input):
    bad_input = DHProverInput(
        dh_input.h,
        dh_input.u,
        group.multiply(dh_input.v, group.generator()),
        dh_input.w,
    )
    protocol = SigmaProtocol(
        SigmaDHVerifierComputation(group), SigmaDHProverComputation(group)
    )
    assert not protocol.verify(bad_input)


def test_dh_erasure(group, dh_input):
    prover = SigmaDHProverComputation(group)
    prover.compute_first_msg(dh_input)
    prover.compute_second_msg(bytes(10))
    assert prover.ephemeral["r"] == 0


def test_dh_simulator(group, dh_input):
    simulator = SigmaDHSimulator(group)
    out = simulator.simulate(dh_input.common_input, b"\x42" * 10)
    verifier = SigmaDHVerifierComputation(group)
    verifier.set_challenge(out.challenge)
    assert verifier.verify(dh_input.common_input, out.first_msg, out.second_msg)


def test_dh_simulated_transcript_for_false_statement(group, dh_input):
    # Simulation does not need the statement to be true.
    common_input = DHCommonInput(dh_input.h, dh_input.u, group.generator())
    out = SigmaDHSimulator(group).simulate(common_input)
    verifier = SigmaDHVerifierComputation(group)
    verifier.set_challenge(out.challenge)
    assert verifier.verify(common_input, out.first_msg, out.second_msg)


@pytest.fixture
def dh_extended_input(group):
    bases = make_generators(3, group)
    w = group.random_exponent()
    values = [group.exponentiate(g, w) for g in bases]
    return DHExtendedProverInput(bases, values, w)


def test_dh_extended_completeness(group, dh_extended_input):
    protocol = SigmaProtocol(
        SigmaDHExtendedVerifierComputation(group),
        SigmaDHExtendedProverComputation(group),
    )
    assert protocol.verify(dh_extended_input)


def test_dh_extended_wrong_value(group, dh_extended_input):
    values = list(dh_extended_input.values)
    values[1] = group.generator()
    bad_input = DHExtendedProverInput(
        dh_extended_input.bases, values, dh_extended_input.w
    )
    protocol = SigmaProtocol(
        SigmaDHExtendedVerifierComputation(group),
        SigmaDHExtendedProverComputation(group),
    )
    assert not protocol.verify(bad_input)


def test_dh_extended_message_size(group, dh_extended_input):
    prover = SigmaDHExtendedProverComputation(group)
    first_msg = prover.compute_first_msg(dh_extended_input)
    second_msg = prover.compute_second_msg(bytes(10))

    verifier = SigmaDHExtendedVerifierComputation(group)
    verifier.set_challenge(bytes(10))
    truncated = DHExtendedMsg(first_msg.elements[:2])
    assert not verifier.verify(dh_extended_input.common_input, truncated, second_msg)


def test_dh_extended_simulator(group, dh_extended_input):
    out = SigmaDHExtendedSimulator(group).simulate(dh_extended_input.common_input)
    verifier = SigmaDHExtendedVerifierComputation(group)
    verifier.set_challenge(out.challenge)
    assert verifier.verify(
        dh_extended_input.common_input, out.first_msg, out.second_msg
    )


def test_dh_extended_mismatched_pairs(group):
    bases = make_generators(2, group)
    with pytest.raises(InvalidInputError):
        DHExtendedCommonInput(bases, bases[:1])
    with pytest.raises(InvalidInputError):
        DHExtendedCommonInput([], [])


def test_dh_malformed_messages(group, dh_input):
    verifier = SigmaDHVerifierComputation(group)
    g = group.generator()
    verifier.sample_challenge()
    assert not verifier.verify(dh_input.common_input, DHMsg(g, 5), BIMsg(Bn(1)))
    verifier.sample_challenge()
    with pytest.raises(InvalidMessageError):
        verifier.verify(dh_input.common_input, DHMsg(g, g), BIMsg(1))


def test_dh_extended_malformed_messages(group, dh_extended_input):
    verifier = SigmaDHExtendedVerifierComputation(group)
    common_input = dh_extended_input.common_input
    elements = [group.generator()] * len(common_input.bases)
    verifier.sample_challenge()
    assert not verifier.verify(
        common_input, DHExtendedMsg(elements[:-1] + [None]), BIMsg(Bn(1))
    )
    verifier.sample_challenge()
    with pytest.raises(InvalidMessageError):
        verifier.verify(common_input, DHExtendedMsg(elements), BIMsg(1.5))
