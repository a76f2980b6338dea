"""
Proofs about ElGamal keys, commitments, and ciphertexts.

None of these protocols has algebra of its own. Each maps its statement to a discrete-log or a
Diffie-Hellman tuple statement and delegates:

=========================  ==================================================================
Statement                  Delegate
=========================  ==================================================================
Commitment knowledge       Dlog: h = g^w, w the committer's private key
Committed value x          DH tuple (g, h, c1, c2 / x) with witness r
Private key                Dlog: h = g^w
Encrypted value x          DH tuple (g, h, c1, c2 / x) with witness r, or
                           DH tuple (g, c1, h, c2 / x) with witness w (the private key)
=========================  ==================================================================
"""

import attr

from zksigma.base import (
    SigmaCommonInput,
    SigmaProverAdapter,
    SigmaProverInput,
    SigmaSimulatorAdapter,
    SigmaVerifierAdapter,
)
from zksigma.consts import DEFAULT_SOUNDNESS
from zksigma.primitives.dh import (
    DHCommonInput,
    DHProverInput,
    SigmaDHProverComputation,
    SigmaDHSimulator,
    SigmaDHVerifierComputation,
)
from zksigma.primitives.dlog import (
    DlogCommonInput,
    DlogProverInput,
    SigmaDlogProverComputation,
    SigmaDlogSimulator,
    SigmaDlogVerifierComputation,
)
from zksigma.utils.misc import to_bn


# Commitment knowledge.


@attr.s(frozen=True)
class ElGamalCmtKnowledgeCommonInput(SigmaCommonInput):
    """Committer's public key and the commitment (an ElGamal ciphertext)."""

    public_key = attr.ib()
    commitment = attr.ib()


@attr.s(frozen=True)
class ElGamalCmtKnowledgeProverInput(SigmaProverInput):
    public_key = attr.ib()
    commitment = attr.ib()
    private_key = attr.ib(repr=False)

    @property
    def common_input(self):
        return ElGamalCmtKnowledgeCommonInput(self.public_key, self.commitment)


class SigmaElGamalCmtKnowledgeProverComputation(SigmaProverAdapter):
    """
    Prover of knowledge of the private key behind an ElGamal commitment.

    Args:
        group (:py:class:`zksigma.groups.DlogGroup`): Group
        soundness: Soundness parameter in bits.
        random: Randomness source.
    """

    input_cls = ElGamalCmtKnowledgeProverInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDlogProverComputation(group, soundness, random))
        self.group = group

    def convert_input(self, prover_input):
        return DlogProverInput(prover_input.public_key.h, prover_input.private_key.x)

    def get_simulator(self):
        return SigmaElGamalCmtKnowledgeSimulator(
            self.group, self.soundness, self.random
        )


class SigmaElGamalCmtKnowledgeVerifierComputation(SigmaVerifierAdapter):
    input_cls = ElGamalCmtKnowledgeCommonInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDlogVerifierComputation(group, soundness, random))
        self.group = group

    def convert_input(self, common_input):
        return DlogCommonInput(common_input.public_key.h)


class SigmaElGamalCmtKnowledgeSimulator(SigmaSimulatorAdapter):
    input_cls = ElGamalCmtKnowledgeCommonInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDlogSimulator(group, soundness, random))
        self.group = group

    def convert_input(self, common_input):
        return DlogCommonInput(common_input.public_key.h)


# Committed value.


@attr.s(frozen=True)
class ElGamalCommittedValueCommonInput(SigmaCommonInput):
    """Public key, commitment (c1, c2), and the claimed committed group element x."""

    public_key = attr.ib()
    commitment = attr.ib()
    x = attr.ib()


@attr.s(frozen=True)
class ElGamalCommittedValueProverInput(SigmaProverInput):
    public_key = attr.ib()
    commitment = attr.ib()
    x = attr.ib()
    r = attr.ib(converter=to_bn, repr=False)

    @property
    def common_input(self):
        return ElGamalCommittedValueCommonInput(
            self.public_key, self.commitment, self.x
        )


def randomness_to_dh(group, public_key, ciphertext, x):
    """Map an encryption of x to the DH tuple (g, h, c1, c2 / x)."""
    v = group.divide(ciphertext.c2, x)
    return DHCommonInput(public_key.h, ciphertext.c1, v)


def private_key_to_dh(group, public_key, ciphertext, x):
    """Map an encryption of x to the DH tuple (g, c1, h, c2 / x)."""
    v = group.divide(ciphertext.c2, x)
    return DHCommonInput(ciphertext.c1, public_key.h, v)


class SigmaElGamalCommittedValueProverComputation(SigmaProverAdapter):
    """
    Prover that an ElGamal commitment opens to a public group element x, given the randomness.
    """

    input_cls = ElGamalCommittedValueProverInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDHProverComputation(group, soundness, random))
        self.group = group

    def convert_input(self, prover_input):
        dh = randomness_to_dh(
            self.group, prover_input.public_key, prover_input.commitment, prover_input.x
        )
        return DHProverInput(dh.h, dh.u, dh.v, prover_input.r)

    def get_simulator(self):
        return SigmaElGamalCommittedValueSimulator(
            self.group, self.soundness, self.random
        )


class SigmaElGamalCommittedValueVerifierComputation(SigmaVerifierAdapter):
    input_cls = ElGamalCommittedValueCommonInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDHVerifierComputation(group, soundness, random))
        self.group = group

    def convert_input(self, common_input):
        return randomness_to_dh(
            self.group, common_input.public_key, common_input.commitment, common_input.x
        )


class SigmaElGamalCommittedValueSimulator(SigmaSimulatorAdapter):
    input_cls = ElGamalCommittedValueCommonInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDHSimulator(group, soundness, random))
        self.group = group

    def convert_input(self, common_input):
        return randomness_to_dh(
            self.group, common_input.public_key, common_input.commitment, common_input.x
        )


# Private key.


@attr.s(frozen=True)
class ElGamalPrivateKeyCommonInput(SigmaCommonInput):
    public_key = attr.ib()


@attr.s(frozen=True)
class ElGamalPrivateKeyProverInput(SigmaProverInput):
    public_key = attr.ib()
    private_key = attr.ib(repr=False)

    @property
    def common_input(self):
        return ElGamalPrivateKeyCommonInput(self.public_key)


class SigmaElGamalPrivateKeyProverComputation(SigmaProverAdapter):
    """Prover of knowledge of the ElGamal private key matching a public key."""

    input_cls = ElGamalPrivateKeyProverInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDlogProverComputation(group, soundness, random))
        self.group = group

    def convert_input(self, prover_input):
        return DlogProverInput(prover_input.public_key.h, prover_input.private_key.x)

    def get_simulator(self):
        return SigmaElGamalPrivateKeySimulator(self.group, self.soundness, self.random)


class SigmaElGamalPrivateKeyVerifierComputation(SigmaVerifierAdapter):
    input_cls = ElGamalPrivateKeyCommonInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDlogVerifierComputation(group, soundness, random))
        self.group = group

    def convert_input(self, common_input):
        return DlogCommonInput(common_input.public_key.h)


class SigmaElGamalPrivateKeySimulator(SigmaSimulatorAdapter):
    input_cls = ElGamalPrivateKeyCommonInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDlogSimulator(group, soundness, random))
        self.group = group

    def convert_input(self, common_input):
        return DlogCommonInput(common_input.public_key.h)


# Encrypted value.


@attr.s(frozen=True)
class ElGamalEncryptedValueCommonInput(SigmaCommonInput):
    """
    Public key, ciphertext, and the claimed plaintext x.

    ``is_randomness`` tells which witness the prover holds: the encryption randomness (True) or
    the private key (False). The two cases lead to different DH statements.
    """

    public_key = attr.ib()
    ciphertext = attr.ib()
    x = attr.ib()
    is_randomness = attr.ib(default=True)


@attr.s(frozen=True)
class ElGamalEncryptedValueRandomnessProverInput(SigmaProverInput):
    public_key = attr.ib()
    ciphertext = attr.ib()
    x = attr.ib()
    r = attr.ib(converter=to_bn, repr=False)

    @property
    def common_input(self):
        return ElGamalEncryptedValueCommonInput(
            self.public_key, self.ciphertext, self.x, is_randomness=True
        )


@attr.s(frozen=True)
class ElGamalEncryptedValuePrivKeyProverInput(SigmaProverInput):
    public_key = attr.ib()
    ciphertext = attr.ib()
    x = attr.ib()
    private_key = attr.ib(repr=False)

    @property
    def common_input(self):
        return ElGamalEncryptedValueCommonInput(
            self.public_key, self.ciphertext, self.x, is_randomness=False
        )


def encrypted_value_to_dh(group, common_input):
    if common_input.is_randomness:
        convert = randomness_to_dh
    else:
        convert = private_key_to_dh
    return convert(
        group, common_input.public_key, common_input.ciphertext, common_input.x
    )


class SigmaElGamalEncryptedValueProverComputation(SigmaProverAdapter):
    """
    Prover that an ElGamal ciphertext encrypts a public group element x.

    Accepts either :py:class:`ElGamalEncryptedValueRandomnessProverInput` or
    :py:class:`ElGamalEncryptedValuePrivKeyProverInput`.
    """

    input_cls = (
        ElGamalEncryptedValueRandomnessProverInput,
        ElGamalEncryptedValuePrivKeyProverInput,
    )

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDHProverComputation(group, soundness, random))
        self.group = group

    def convert_input(self, prover_input):
        dh = encrypted_value_to_dh(self.group, prover_input.common_input)
        if isinstance(prover_input, ElGamalEncryptedValuePrivKeyProverInput):
            w = prover_input.private_key.x
        else:
            w = prover_input.r
        return DHProverInput(dh.h, dh.u, dh.v, w)

    def get_simulator(self):
        return SigmaElGamalEncryptedValueSimulator(
            self.group, self.soundness, self.random
        )


class SigmaElGamalEncryptedValueVerifierComputation(SigmaVerifierAdapter):
    input_cls = ElGamalEncryptedValueCommonInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDHVerifierComputation(group, soundness, random))
        self.group = group

    def convert_input(self, common_input):
        return encrypted_value_to_dh(self.group, common_input)


class SigmaElGamalEncryptedValueSimulator(SigmaSimulatorAdapter):
    input_cls = ElGamalEncryptedValueCommonInput

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(SigmaDHSimulator(group, soundness, random))
        self.group = group

    def convert_input(self, common_input):
        return encrypted_value_to_dh(self.group, common_input)
