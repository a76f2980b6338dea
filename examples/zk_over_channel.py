"""
Zero-knowledge proof of a Pedersen committed value between two threads. The verifier commits to
its challenge before it sees the first message.
"""

import threading

from zksigma.channel import make_channel_pair
from zksigma.commitments import PedersenCommitmentScheme
from zksigma.config import SigmaConfig
from zksigma.primitives.pedersen import (
    PedersenCommittedValueProverInput,
    SigmaPedersenCommittedValueProverComputation,
    SigmaPedersenCommittedValueVerifierComputation,
)
from zksigma.utils import make_generators
from zksigma.zk import ZKFromSigmaProver, ZKFromSigmaVerifier

config = SigmaConfig(soundness=128)
group = config.build_group()
(h,) = make_generators(1, group)

c, r = PedersenCommitmentScheme(group, h).commit(7)
prover_input = PedersenCommittedValueProverInput(h, c, 7, r)

prover_channel, verifier_channel = make_channel_pair(timeout=10)
prover = ZKFromSigmaProver(
    prover_channel,
    SigmaPedersenCommittedValueProverComputation(group, config.soundness),
)
verifier = ZKFromSigmaVerifier(
    verifier_channel,
    SigmaPedersenCommittedValueVerifierComputation(group, config.soundness),
)

thread = threading.Thread(target=prover.prove, args=(prover_input,))
thread.start()
result = verifier.verify(prover_input.common_input)
thread.join()
assert result
