"""
Proof of knowledge of a discrete logarithm, in a toy group:
PK{ (w): h = g^w }

p = 2039 is a safe prime, and g = 4 generates the subgroup of order q = 1019. Only an 8-bit
challenge fits, since 2^8 < q < 2^16.
"""

from petlib.bn import Bn

from zksigma.groups import ZpDlogGroup
from zksigma.primitives.dlog import (
    DlogProverInput,
    SigmaDlogProverComputation,
    SigmaDlogVerifierComputation,
)

group = ZpDlogGroup(2039, 1019, 4)

# The secret, and the public value h = g^w.
w = 6
h = group.exponentiate_generator(w)
prover_input = DlogProverInput(h, w)

prover = SigmaDlogProverComputation(group, soundness=8)
verifier = SigmaDlogVerifierComputation(group, soundness=8)

# Execute the protocol.
first_msg = prover.compute_first_msg(prover_input)
verifier.sample_challenge()
second_msg = prover.compute_second_msg(verifier.get_challenge())
assert verifier.verify(prover_input.common_input, first_msg, second_msg)

# The randomness of the prover is gone.
assert prover.ephemeral["r"] == Bn(0)
