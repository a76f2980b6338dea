"""
Proof that three Damgard-Jurik ciphertexts encrypt x1, x2, and x1 * x2, with the length
parameter s = 2 (plaintexts modulo n^2).
"""

from zksigma.encryption import DamgardJurikEnc
from zksigma.primitives.damgard_jurik import (
    DJProductProverInput,
    SigmaDJProductProverComputation,
    SigmaDJProductVerifierComputation,
)
from zksigma.utils import get_random_unit
from zksigma.utils.debug import SigmaProtocol

enc = DamgardJurikEnc(length=2)
pk, _ = enc.keygen(bits=256)


def encrypt(x):
    r = get_random_unit(pk.n)
    return enc.encrypt(pk, x, r), r


x1, x2 = 31337, 4242
c1, r1 = encrypt(x1)
c2, r2 = encrypt(x2)
c3, r3 = encrypt(x1 * x2)

prover_input = DJProductProverInput(pk, c1, c2, c3, x1, x2, r1, r2, r3)
protocol = SigmaProtocol(
    SigmaDJProductVerifierComputation(length=2),
    SigmaDJProductProverComputation(length=2),
)
assert protocol.verify(prover_input)
