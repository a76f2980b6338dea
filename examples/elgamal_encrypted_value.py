"""
Proof that an ElGamal ciphertext encrypts a given message, once by the sender (who knows the
encryption randomness) and once by the receiver (who knows the private key).
"""

from zksigma.encryption import ElGamalEnc
from zksigma.groups import EcDlogGroup
from zksigma.primitives.elgamal import (
    ElGamalEncryptedValuePrivKeyProverInput,
    ElGamalEncryptedValueRandomnessProverInput,
    SigmaElGamalEncryptedValueProverComputation,
    SigmaElGamalEncryptedValueVerifierComputation,
)
from zksigma.utils.debug import SigmaProtocol

group = EcDlogGroup()
enc = ElGamalEnc(group)
pk, sk = enc.keygen()

msg = group.exponentiate_generator(42)
r = group.random_exponent()
ciphertext = enc.encrypt(pk, msg, r)

# Sender side.
protocol = SigmaProtocol(
    SigmaElGamalEncryptedValueVerifierComputation(group),
    SigmaElGamalEncryptedValueProverComputation(group),
)
assert protocol.verify(
    ElGamalEncryptedValueRandomnessProverInput(pk, ciphertext, msg, r)
)

# Receiver side.
assert protocol.verify(ElGamalEncryptedValuePrivKeyProverInput(pk, ciphertext, msg, sk))
