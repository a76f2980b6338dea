"""
And-composition of a Diffie-Hellman tuple proof and a Pedersen commitment opening proof:
PK{ (w, x, r): u = g^w & v = h^w & c = h^x g^r }
"""

from zksigma.commitments import PedersenCommitmentScheme
from zksigma.composition import (
    ANDProverInput,
    SigmaANDProverComputation,
    SigmaANDVerifierComputation,
)
from zksigma.groups import EcDlogGroup
from zksigma.primitives.dh import (
    DHProverInput,
    SigmaDHProverComputation,
    SigmaDHVerifierComputation,
)
from zksigma.primitives.pedersen import (
    PedersenCmtKnowledgeProverInput,
    SigmaPedersenCmtKnowledgeProverComputation,
    SigmaPedersenCmtKnowledgeVerifierComputation,
)
from zksigma.utils import make_generators
from zksigma.utils.debug import SigmaProtocol

group = EcDlogGroup()
h, h_cmt = make_generators(2, group)

w = group.random_exponent()
dh_input = DHProverInput(
    h, group.exponentiate_generator(w), group.exponentiate(h, w), w
)

x = 1234
c, r = PedersenCommitmentScheme(group, h_cmt).commit(x)
pedersen_input = PedersenCmtKnowledgeProverInput(h_cmt, c, x, r)

prover = SigmaANDProverComputation(
    [
        SigmaDHProverComputation(group),
        SigmaPedersenCmtKnowledgeProverComputation(group),
    ]
)
verifier = SigmaANDVerifierComputation(
    [
        SigmaDHVerifierComputation(group),
        SigmaPedersenCmtKnowledgeVerifierComputation(group),
    ]
)

protocol = SigmaProtocol(verifier, prover)
assert protocol.verify(ANDProverInput([dh_input, pedersen_input]))
