import pytest

from petlib.bn import Bn

from zksigma.base import SimulatorOutput
from zksigma.exceptions import (
    ChallengeLengthError,
    InvalidGroupError,
    InvalidInputError,
    InvalidMessageError,
    InvalidSoundnessParamError,
    ProtocolStateError,
)
from zksigma.groups import ZpDlogGroup
from zksigma.messages import BIMsg, DHMsg, GroupElementMsg
from zksigma.primitives.dlog import (
    DlogCommonInput,
    DlogProverInput,
    SigmaDlogProverComputation,
    SigmaDlogSimulator,
    SigmaDlogVerifierComputation,
)
from zksigma.utils.debug import SigmaProtocol


@pytest.fixture
def dlog_input(group):
    w = group.random_exponent()
    return DlogProverInput(group.exponentiate_generator(w), w)


def test_dlog_completeness(group, dlog_input):
    prover = SigmaDlogProverComputation(group)
    verifier = SigmaDlogVerifierComputation(group)
    assert SigmaProtocol(verifier, prover).verify(dlog_input)


def test_dlog_wrong_witness(group, dlog_input):
    prover = SigmaDlogProverComputation(group)
    verifier = SigmaDlogVerifierComputation(group)
    bad_input = DlogProverInput(dlog_input.h, dlog_input.w + 1)
    assert not SigmaProtocol(verifier, prover).verify(bad_input)


def test_dlog_toy_transcript(toy_group, fixed_random):
    G = toy_group
    prover_input = DlogProverInput(G.exponentiate_generator(6), 6)
    assert prover_input.h == G.element(18)

    prover = SigmaDlogProverComputation(
        G, soundness=8, random=fixed_random(scalars=[3])
    )
    first_msg = prover.compute_first_msg(prover_input)
    assert first_msg == GroupElementMsg(G.element(64))
    assert prover.ephemeral["r"] == 3

    second_msg = prover.compute_second_msg(b"\x02")
    assert second_msg == BIMsg(Bn(15))
    assert prover.ephemeral["r"] == 0

    verifier = SigmaDlogVerifierComputation(G, soundness=8)
    verifier.set_challenge(b"\x02")
    assert verifier.verify(prover_input.common_input, first_msg, second_msg)
    assert verifier.get_challenge() is None


def test_dlog_toy_transcript_rejects_other_challenge(toy_group):
    G = toy_group
    verifier = SigmaDlogVerifierComputation(G, soundness=8)
    verifier.set_challenge(b"\x03")
    common_input = DlogCommonInput(G.element(18))
    assert not verifier.verify(
        common_input, GroupElementMsg(G.element(64)), BIMsg(Bn(15))
    )


def test_dlog_soundness_too_large(toy_group):
    with pytest.raises(InvalidSoundnessParamError):
        SigmaDlogProverComputation(toy_group, soundness=16)
    with pytest.raises(InvalidSoundnessParamError):
        SigmaDlogVerifierComputation(toy_group, soundness=16)
    with pytest.raises(InvalidSoundnessParamError):
        SigmaDlogSimulator(toy_group, soundness=16)


def test_dlog_soundness_boundary(small_order_group):
    # 2^16 == q is rejected, 2^16 < q + 1 is fine.
    with pytest.raises(InvalidSoundnessParamError):
        SigmaDlogProverComputation(small_order_group(2 ** 16), soundness=16)
    SigmaDlogProverComputation(small_order_group(2 ** 16 + 1), soundness=16)


@pytest.mark.parametrize("soundness", [0, -8, 12, "80"])
def test_dlog_soundness_not_bytes(group, soundness):
    with pytest.raises(InvalidSoundnessParamError):
        SigmaDlogProverComputation(group, soundness=soundness)


def test_dlog_verifier_rejects_invalid_group():
    bad_group = ZpDlogGroup(2041, 1020, 4)
    with pytest.raises(InvalidGroupError):
        SigmaDlogVerifierComputation(bad_group, soundness=8)


@pytest.mark.parametrize("delta", [-1, 1])
def test_dlog_challenge_length(group, dlog_input, delta):
    prover = SigmaDlogProverComputation(group)
    prover.compute_first_msg(dlog_input)
    with pytest.raises(ChallengeLengthError):
        prover.compute_second_msg(bytes(10 + delta))


def test_dlog_erasure_after_rejected_challenge(group, dlog_input):
    prover = SigmaDlogProverComputation(group)
    prover.compute_first_msg(dlog_input)
    assert prover.ephemeral["r"] != 0
    with pytest.raises(ChallengeLengthError):
        prover.compute_second_msg(b"\x00")
    assert all(value == 0 for value in prover.ephemeral.values())
    with pytest.raises(ProtocolStateError):
        prover.compute_second_msg(bytes(10))


def test_dlog_second_msg_before_first(group):
    prover = SigmaDlogProverComputation(group)
    with pytest.raises(ProtocolStateError):
        prover.compute_second_msg(bytes(10))


def test_dlog_wrong_input(group, dlog_input):
    prover = SigmaDlogProverComputation(group)
    with pytest.raises(InvalidInputError):
        prover.compute_first_msg(dlog_input.common_input)
    verifier = SigmaDlogVerifierComputation(group)
    verifier.sample_challenge()
    with pytest.raises(InvalidInputError):
        verifier.verify(dlog_input, GroupElementMsg(dlog_input.h), BIMsg(Bn(1)))


def test_dlog_wrong_message(group, dlog_input):
    verifier = SigmaDlogVerifierComputation(group)
    verifier.sample_challenge()
    h = dlog_input.h
    with pytest.raises(InvalidMessageError):
        verifier.verify(dlog_input.common_input, DHMsg(h, h), BIMsg(Bn(1)))
    # The challenge is gone even though verification failed.
    assert verifier.get_challenge() is None


def test_dlog_verify_without_challenge(group, dlog_input):
    verifier = SigmaDlogVerifierComputation(group)
    with pytest.raises(ProtocolStateError):
        verifier.verify(
            dlog_input.common_input, GroupElementMsg(dlog_input.h), BIMsg(Bn(1))
        )


def test_dlog_set_challenge_length(group):
    verifier = SigmaDlogVerifierComputation(group)
    with pytest.raises(ChallengeLengthError):
        verifier.set_challenge(bytes(11))


def test_dlog_non_member_rejected(toy_group):
    G = toy_group
    verifier = SigmaDlogVerifierComputation(G, soundness=8)
    verifier.set_challenge(b"\x00")
    # With e = 0 the equation only needs g^z == a.
    a = G.exponentiate_generator(5)
    assert not verifier.verify(
        DlogCommonInput(G.element(2038)), GroupElementMsg(a), BIMsg(Bn(5))
    )


@pytest.mark.parametrize("challenge", [bytes(10), b"\xff" * 10, None])
def test_dlog_simulator(group, dlog_input, challenge):
    simulator = SigmaDlogProverComputation(group).get_simulator()
    out = simulator.simulate(dlog_input.common_input, challenge)
    assert isinstance(out, SimulatorOutput)
    if challenge is not None:
        assert out.challenge == challenge

    verifier = SigmaDlogVerifierComputation(group)
    verifier.set_challenge(out.challenge)
    assert verifier.verify(dlog_input.common_input, out.first_msg, out.second_msg)


def test_dlog_simulator_challenge_length(group, dlog_input):
    simulator = SigmaDlogSimulator(group)
    with pytest.raises(ChallengeLengthError):
        simulator.simulate(dlog_input.common_input, bytes(9))


def test_dlog_sequential_runs(group, dlog_input):
    prover = SigmaDlogProverComputation(group)
    verifier = SigmaDlogVerifierComputation(group)
    protocol = SigmaProtocol(verifier, prover)
    for _ in range(3):
        assert protocol.verify(dlog_input, verbose=False)


def test_dlog_malformed_element(group, dlog_input):
    verifier = SigmaDlogVerifierComputation(group)
    verifier.sample_challenge()
    assert not verifier.verify(
        dlog_input.common_input, GroupElementMsg(5), BIMsg(Bn(1))
    )
    assert verifier.get_challenge() is None


def test_dlog_malformed_response(group, dlog_input):
    verifier = SigmaDlogVerifierComputation(group)
    verifier.sample_challenge()
    a = GroupElementMsg(group.generator())
    with pytest.raises(InvalidMessageError):
        verifier.verify(dlog_input.common_input, a, BIMsg(b"\x01"))
    assert verifier.get_challenge() is None
