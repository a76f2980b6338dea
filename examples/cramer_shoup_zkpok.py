"""
Zero-knowledge proof of knowledge that a Cramer-Shoup ciphertext encrypts a given message. After
its response, the prover reveals the trapdoor of the challenge commitment, and the verifier checks
it.
"""

import threading

from zksigma.channel import make_channel_pair
from zksigma.encryption import CramerShoupEnc
from zksigma.groups import EcDlogGroup
from zksigma.primitives.cramer_shoup import (
    CramerShoupEncryptedValueProverInput,
    SigmaCramerShoupEncryptedValueProverComputation,
    SigmaCramerShoupEncryptedValueVerifierComputation,
)
from zksigma.zk import ZKPoKFromSigmaProver, ZKPoKFromSigmaVerifier

group = EcDlogGroup()
enc = CramerShoupEnc(group)
pk, sk = enc.keygen()

msg = group.exponentiate_generator(42)
r = group.random_exponent()
ciphertext = enc.encrypt(pk, msg, r)
assert enc.decrypt(sk, ciphertext) == msg

prover_input = CramerShoupEncryptedValueProverInput(pk, ciphertext, msg, r)
prover_channel, verifier_channel = make_channel_pair(timeout=10)
prover = ZKPoKFromSigmaProver(
    prover_channel, SigmaCramerShoupEncryptedValueProverComputation(group)
)
verifier = ZKPoKFromSigmaVerifier(
    verifier_channel, SigmaCramerShoupEncryptedValueVerifierComputation(group)
)

thread = threading.Thread(target=prover.prove, args=(prover_input,))
thread.start()
result = verifier.verify(prover_input.common_input)
thread.join()
assert result
