"""
Or-composition of two discrete-logarithm knowledge proofs:
PK{ (w0, w1): (h0 = g^w0) | (h1 = g^w1) }

The prover only knows w1. Branch 0 is simulated.
"""

from zksigma.composition import (
    ORTwoProverInput,
    SigmaORTwoProverComputation,
    SigmaORTwoVerifierComputation,
)
from zksigma.groups import EcDlogGroup
from zksigma.primitives.dlog import (
    DlogCommonInput,
    DlogProverInput,
    SigmaDlogProverComputation,
    SigmaDlogVerifierComputation,
)
from zksigma.utils import make_generators

group = EcDlogGroup()

# Nobody knows the discrete logarithm of h0.
(h0,) = make_generators(1, group)

# The prover knows the one of h1.
w1 = group.random_exponent()
h1 = group.exponentiate_generator(w1)

prover_input = ORTwoProverInput(DlogProverInput(h1, w1), DlogCommonInput(h0), b=1)

prover = SigmaORTwoProverComputation(
    [SigmaDlogProverComputation(group), SigmaDlogProverComputation(group)]
)
verifier = SigmaORTwoVerifierComputation(
    [SigmaDlogVerifierComputation(group), SigmaDlogVerifierComputation(group)]
)

# Execute the protocol.
first_msg = prover.compute_first_msg(prover_input)
verifier.sample_challenge()
challenge = verifier.get_challenge()
second_msg = prover.compute_second_msg(challenge)
assert verifier.verify(prover_input.common_input, first_msg, second_msg)

# The two challenge shares add up (XOR) to the challenge.
e0, e1 = second_msg.challenges
assert bytes(a ^ b for a, b in zip(e0, e1)) == challenge
