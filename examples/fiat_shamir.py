"""
Non-interactive proof of knowledge of an ElGamal private key, bound to a context string.
"""

from petlib.pack import encode, decode

from zksigma.encryption import ElGamalEnc
from zksigma.groups import EcDlogGroup
from zksigma.primitives.elgamal import (
    ElGamalPrivateKeyProverInput,
    SigmaElGamalPrivateKeyProverComputation,
    SigmaElGamalPrivateKeyVerifierComputation,
)
from zksigma.zk import FiatShamirProver, FiatShamirVerifier

group = EcDlogGroup()
pk, sk = ElGamalEnc(group).keygen()
prover_input = ElGamalPrivateKeyProverInput(pk, sk)

prover = FiatShamirProver(
    SigmaElGamalPrivateKeyProverComputation(group), context=b"key-reg"
)
proof = prover.prove(prover_input)

# The proof is a plain message, and can be stored or sent.
proof = decode(encode(proof))

verifier = FiatShamirVerifier(
    SigmaElGamalPrivateKeyVerifierComputation(group), context=b"key-reg"
)
assert verifier.verify(prover_input.common_input, proof)
