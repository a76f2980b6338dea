import pytest

from petlib.bn import Bn

from zksigma.commitments import PedersenCommitmentScheme
from zksigma.exceptions import InvalidMessageError
from zksigma.messages import GroupElementMsg, PedersenCmtKnowledgeMsg
from zksigma.primitives.pedersen import (
    PedersenCmtKnowledgeProverInput,
    PedersenCommittedValueCommonInput,
    PedersenCommittedValueProverInput,
    SigmaPedersenCmtKnowledgeProverComputation,
    SigmaPedersenCmtKnowledgeSimulator,
    SigmaPedersenCmtKnowledgeVerifierComputation,
    SigmaPedersenCommittedValueProverComputation,
    SigmaPedersenCommittedValueSimulator,
    SigmaPedersenCommittedValueVerifierComputation,
    committed_value_to_dlog,
)
from zksigma.utils import make_generators
from zksigma.utils.debug import SigmaProtocol


@pytest.fixture
def commitment(group):
    (h,) = make_generators(1, group)
    scheme = PedersenCommitmentScheme(group, h)
    x = group.random_exponent()
    c, r = scheme.commit(x)
    return h, c, x, r


def test_cmt_knowledge_completeness(group, commitment):
    h, c, x, r = commitment
    protocol = SigmaProtocol(
        SigmaPedersenCmtKnowledgeVerifierComputation(group),
        SigmaPedersenCmtKnowledgeProverComputation(group),
    )
    assert protocol.verify(PedersenCmtKnowledgeProverInput(h, c, x, r))


def test_cmt_knowledge_wrong_opening(group, commitment):
    h, c, x, r = commitment
    protocol = SigmaProtocol(
        SigmaPedersenCmtKnowledgeVerifierComputation(group),
        SigmaPedersenCmtKnowledgeProverComputation(group),
    )
    assert not protocol.verify(PedersenCmtKnowledgeProverInput(h, c, x + 1, r))


def test_cmt_knowledge_erasure(group, commitment):
    h, c, x, r = commitment
    prover = SigmaPedersenCmtKnowledgeProverComputation(group)
    prover.compute_first_msg(PedersenCmtKnowledgeProverInput(h, c, x, r))
    assert set(prover.ephemeral) == {"alpha", "beta"}
    prover.compute_second_msg(bytes(10))
    assert prover.ephemeral["alpha"] == 0
    assert prover.ephemeral["beta"] == 0


def test_cmt_knowledge_simulator(group, commitment):
    h, c, x, r = commitment
    common_input = PedersenCmtKnowledgeProverInput(h, c, x, r).common_input
    out = SigmaPedersenCmtKnowledgeSimulator(group).simulate(common_input)
    verifier = SigmaPedersenCmtKnowledgeVerifierComputation(group)
    verifier.set_challenge(out.challenge)
    assert verifier.verify(common_input, out.first_msg, out.second_msg)


def test_committed_value_to_dlog(group, commitment):
    h, c, x, r = commitment
    dlog = committed_value_to_dlog(group, PedersenCommittedValueCommonInput(h, c, x))
    assert dlog.h == group.exponentiate_generator(r)


def test_committed_value_completeness(group, commitment):
    h, c, x, r = commitment
    protocol = SigmaProtocol(
        SigmaPedersenCommittedValueVerifierComputation(group),
        SigmaPedersenCommittedValueProverComputation(group),
    )
    assert protocol.verify(PedersenCommittedValueProverInput(h, c, x, r))


def test_committed_value_wrong_value(group, commitment):
    h, c, x, r = commitment
    prover = SigmaPedersenCommittedValueProverComputation(group)
    verifier = SigmaPedersenCommittedValueVerifierComputation(group)

    first_msg = prover.compute_first_msg(PedersenCommittedValueProverInput(h, c, x, r))
    verifier.sample_challenge()
    second_msg = prover.compute_second_msg(verifier.get_challenge())
    claimed = PedersenCommittedValueCommonInput(h, c, x + 1)
    assert not verifier.verify(claimed, first_msg, second_msg)


def test_committed_value_adapter_erases_delegate(group, commitment):
    h, c, x, r = commitment
    prover = SigmaPedersenCommittedValueProverComputation(group)
    prover.compute_first_msg(PedersenCommittedValueProverInput(h, c, x, r))
    assert "r" in prover.ephemeral
    prover.compute_second_msg(bytes(10))
    assert prover.delegate.ephemeral["r"] == 0


def test_committed_value_simulator(group, commitment):
    h, c, x, r = commitment
    common_input = PedersenCommittedValueCommonInput(h, c, x)
    simulator = SigmaPedersenCommittedValueProverComputation(group).get_simulator()
    assert isinstance(simulator, SigmaPedersenCommittedValueSimulator)
    out = simulator.simulate(common_input, b"\x01" * 10)
    verifier = SigmaPedersenCommittedValueVerifierComputation(group)
    verifier.set_challenge(out.challenge)
    assert verifier.verify(common_input, out.first_msg, out.second_msg)


def test_cmt_knowledge_malformed_messages(group, commitment):
    h, c, x, r = commitment
    common_input = PedersenCmtKnowledgeProverInput(h, c, x, r).common_input
    verifier = SigmaPedersenCmtKnowledgeVerifierComputation(group)
    verifier.sample_challenge()
    response = PedersenCmtKnowledgeMsg(Bn(1), Bn(2))
    assert not verifier.verify(common_input, GroupElementMsg("a"), response)

    verifier.sample_challenge()
    a = GroupElementMsg(group.generator())
    with pytest.raises(InvalidMessageError):
        verifier.verify(common_input, a, PedersenCmtKnowledgeMsg(Bn(1), 2))
