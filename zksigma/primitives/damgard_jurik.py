r"""
Proofs about Damgard-Jurik ciphertexts.

These protocols do not run in a prime-order group. They work modulo :math:`N' = n^{s+1}`, with
exponents modulo :math:`N = n^s`, where n is the public RSA modulus and s the length parameter.
The soundness parameter must satisfy :math:`t < |n| / 3`, which can only be checked once the
public key is known, i.e., when the input is given.

Encrypted zero, :math:`PK \{ (r): c = r^N \mod N' \}`:

* first message :math:`a = s^N \mod N'` for random :math:`s \in Z^*_n`,
* response :math:`z = s r^e \mod n`,
* accept iff c, a, z are coprime with n and :math:`z^N = a c^e \mod N'`.

Encrypted value: :math:`c` encrypts x iff :math:`c (1 + n)^{-x}` encrypts zero.

Product: :math:`c_1, c_2, c_3` encrypt :math:`x_1, x_2, x_1 x_2`.
"""

import attr

from zksigma.base import (
    SigmaCommonInput,
    SigmaProverAdapter,
    SigmaProverComputation,
    SigmaProverInput,
    SigmaSimulator,
    SigmaSimulatorAdapter,
    SigmaVerifierAdapter,
    SigmaVerifierComputation,
    SimulatorOutput,
    check_numbers,
)
from zksigma.consts import DEFAULT_DJ_LENGTH, DEFAULT_SOUNDNESS
from zksigma.encryption import DJCiphertext, dj_moduli
from zksigma.exceptions import ConfigurationError, InvalidSoundnessParamError
from zksigma.messages import BIMsg, DJProductFirstMsg, DJProductSecondMsg
from zksigma.utils.groups import get_random_unit
from zksigma.utils.misc import challenge_to_bn, is_coprime, to_bn


class DJBasedSigma:
    """
    Mixin for protocols over Damgard-Jurik ciphertexts.

    Args:
        soundness: Soundness parameter in bits.
        length: Length parameter s.
        random: Randomness source.
    """

    def __init__(
        self, soundness=DEFAULT_SOUNDNESS, length=DEFAULT_DJ_LENGTH, random=None
    ):
        super().__init__(soundness, random)
        if not isinstance(length, int) or length < 1:
            raise ConfigurationError("Length parameter must be a positive integer")
        self.length = length

    def check_modulus(self, n):
        """
        Raises:
            :py:class:`zksigma.exceptions.InvalidSoundnessParamError`: If t >= |n| / 3.
        """
        if self.soundness >= n.num_bits() // 3:
            raise InvalidSoundnessParamError(
                "Soundness parameter must be less than a third of the length of n"
            )

    def moduli(self, n):
        return dj_moduli(n, self.length)


def _power_of_one_plus_n(n, x, N, N_prime):
    # (1 + n) has order N modulo N'.
    return (n + 1).mod_pow(to_bn(x) % N, N_prime)


def _is_unit(x, n, N_prime):
    return 0 <= x < N_prime and is_coprime(x, n)


@attr.s(frozen=True)
class DJEncryptedZeroCommonInput(SigmaCommonInput):
    public_key = attr.ib()
    ciphertext = attr.ib()


@attr.s(frozen=True)
class DJEncryptedZeroProverInput(SigmaProverInput):
    public_key = attr.ib()
    ciphertext = attr.ib()
    r = attr.ib(converter=to_bn, repr=False)

    @property
    def common_input(self):
        return DJEncryptedZeroCommonInput(self.public_key, self.ciphertext)


class SigmaDJEncryptedZeroProverComputation(DJBasedSigma, SigmaProverComputation):
    """
    Prover that a Damgard-Jurik ciphertext encrypts zero.
    """

    input_cls = DJEncryptedZeroProverInput

    def _first_msg(self, prover_input):
        n = prover_input.public_key.n
        self.check_modulus(n)
        N, N_prime = self.moduli(n)
        s = get_random_unit(n, self.random)
        self.remember(s=s)
        return BIMsg(s.mod_pow(N, N_prime))

    def _second_msg(self, challenge):
        e = challenge_to_bn(challenge)
        n = self.input.public_key.n
        z = self._ephemeral["s"].mod_mul(self.input.r.mod_pow(e, n), n)
        return BIMsg(z)

    def get_simulator(self):
        return SigmaDJEncryptedZeroSimulator(self.soundness, self.length, self.random)


class SigmaDJEncryptedZeroVerifierComputation(DJBasedSigma, SigmaVerifierComputation):
    input_cls = DJEncryptedZeroCommonInput
    first_msg_cls = BIMsg
    second_msg_cls = BIMsg

    def _verify(self, common_input, first_msg, second_msg, challenge):
        check_numbers(first_msg, "z")
        check_numbers(second_msg, "z")
        n = common_input.public_key.n
        self.check_modulus(n)
        N, N_prime = self.moduli(n)
        a, z = first_msg.z, second_msg.z
        c = common_input.ciphertext.c
        if not all(_is_unit(value, n, N_prime) for value in (a, z, c)):
            return False

        e = challenge_to_bn(challenge)
        lhs = z.mod_pow(N, N_prime)
        rhs = a.mod_mul(c.mod_pow(e, N_prime), N_prime)
        return lhs == rhs


class SigmaDJEncryptedZeroSimulator(DJBasedSigma, SigmaSimulator):
    """
    Simulator: draws z in Z*_n, then a = z^N / c^e mod N'.
    """

    input_cls = DJEncryptedZeroCommonInput

    def _simulate(self, common_input, challenge):
        n = common_input.public_key.n
        self.check_modulus(n)
        N, N_prime = self.moduli(n)
        e = challenge_to_bn(challenge)
        c = common_input.ciphertext.c

        z = get_random_unit(n, self.random)
        c_to_e = c.mod_pow(e, N_prime)
        a = z.mod_pow(N, N_prime).mod_mul(c_to_e.mod_inverse(N_prime), N_prime)
        return SimulatorOutput(BIMsg(a), challenge, BIMsg(z))


@attr.s(frozen=True)
class DJEncryptedValueCommonInput(SigmaCommonInput):
    public_key = attr.ib()
    ciphertext = attr.ib()
    x = attr.ib(converter=to_bn)


@attr.s(frozen=True)
class DJEncryptedValueProverInput(SigmaProverInput):
    public_key = attr.ib()
    ciphertext = attr.ib()
    x = attr.ib(converter=to_bn)
    r = attr.ib(converter=to_bn, repr=False)

    @property
    def common_input(self):
        return DJEncryptedValueCommonInput(self.public_key, self.ciphertext, self.x)


def encrypted_value_to_zero(length, common_input):
    """
    Map "c encrypts x" to "c * (1 + n)^(-x) encrypts zero".
    """
    n = common_input.public_key.n
    N, N_prime = dj_moduli(n, length)
    ciphertext = common_input.ciphertext
    shifted = ciphertext.c.mod_mul(
        _power_of_one_plus_n(n, -common_input.x, N, N_prime), N_prime
    )
    return DJEncryptedZeroCommonInput(
        common_input.public_key, DJCiphertext(shifted, length)
    )


class SigmaDJEncryptedValueProverComputation(SigmaProverAdapter):
    """
    Prover that a Damgard-Jurik ciphertext encrypts a public value x.

    Args:
        soundness: Soundness parameter in bits.
        length: Length parameter s.
        random: Randomness source.
    """

    input_cls = DJEncryptedValueProverInput

    def __init__(
        self, soundness=DEFAULT_SOUNDNESS, length=DEFAULT_DJ_LENGTH, random=None
    ):
        super().__init__(
            SigmaDJEncryptedZeroProverComputation(soundness, length, random)
        )
        self.length = length

    def convert_input(self, prover_input):
        zero = encrypted_value_to_zero(self.length, prover_input.common_input)
        return DJEncryptedZeroProverInput(
            zero.public_key, zero.ciphertext, prover_input.r
        )

    def get_simulator(self):
        return SigmaDJEncryptedValueSimulator(self.soundness, self.length, self.random)


class SigmaDJEncryptedValueVerifierComputation(SigmaVerifierAdapter):
    input_cls = DJEncryptedValueCommonInput

    def __init__(
        self, soundness=DEFAULT_SOUNDNESS, length=DEFAULT_DJ_LENGTH, random=None
    ):
        super().__init__(
            SigmaDJEncryptedZeroVerifierComputation(soundness, length, random)
        )
        self.length = length

    def convert_input(self, common_input):
        return encrypted_value_to_zero(self.length, common_input)


class SigmaDJEncryptedValueSimulator(SigmaSimulatorAdapter):
    input_cls = DJEncryptedValueCommonInput

    def __init__(
        self, soundness=DEFAULT_SOUNDNESS, length=DEFAULT_DJ_LENGTH, random=None
    ):
        super().__init__(SigmaDJEncryptedZeroSimulator(soundness, length, random))
        self.length = length

    def convert_input(self, common_input):
        return encrypted_value_to_zero(self.length, common_input)


@attr.s(frozen=True)
class DJProductCommonInput(SigmaCommonInput):
    """Public key and ciphertexts c1, c2, c3 of x1, x2, and x1 * x2."""

    public_key = attr.ib()
    c1 = attr.ib()
    c2 = attr.ib()
    c3 = attr.ib()


@attr.s(frozen=True)
class DJProductProverInput(SigmaProverInput):
    public_key = attr.ib()
    c1 = attr.ib()
    c2 = attr.ib()
    c3 = attr.ib()
    x1 = attr.ib(converter=to_bn, repr=False)
    x2 = attr.ib(converter=to_bn, repr=False)
    r1 = attr.ib(converter=to_bn, repr=False)
    r2 = attr.ib(converter=to_bn, repr=False)
    r3 = attr.ib(converter=to_bn, repr=False)

    @property
    def common_input(self):
        return DJProductCommonInput(self.public_key, self.c1, self.c2, self.c3)


class SigmaDJProductProverComputation(DJBasedSigma, SigmaProverComputation):
    """
    Prover that three Damgard-Jurik ciphertexts encrypt x1, x2, and x1 * x2.

    First message: a1 = (1+n)^d * rd^N and a2 = (1+n)^(d * x2) * rdb^N mod N'.
    Response: z1 = e * x1 + d mod N, z2 = r1^e * rd mod n, z3 = r2^z1 / (rdb * r3^e) mod n.
    """

    input_cls = DJProductProverInput

    def _first_msg(self, prover_input):
        n = prover_input.public_key.n
        self.check_modulus(n)
        N, N_prime = self.moduli(n)

        d = self.random.random_below(N)
        rd = get_random_unit(n, self.random)
        rdb = get_random_unit(n, self.random)
        self.remember(d=d, rd=rd, rdb=rdb)

        a1 = _power_of_one_plus_n(n, d, N, N_prime).mod_mul(
            rd.mod_pow(N, N_prime), N_prime
        )
        a2 = _power_of_one_plus_n(n, d * prover_input.x2, N, N_prime).mod_mul(
            rdb.mod_pow(N, N_prime), N_prime
        )
        return DJProductFirstMsg(a1, a2)

    def _second_msg(self, challenge):
        e = challenge_to_bn(challenge)
        prover_input = self.input
        n = prover_input.public_key.n
        N, _ = self.moduli(n)
        d, rd, rdb = (self._ephemeral[name] for name in ("d", "rd", "rdb"))

        z1 = (e * prover_input.x1 + d) % N
        z2 = prover_input.r1.mod_pow(e, n).mod_mul(rd, n)
        denominator = rdb.mod_mul(prover_input.r3.mod_pow(e, n), n)
        z3 = prover_input.r2.mod_pow(z1, n).mod_mul(denominator.mod_inverse(n), n)
        return DJProductSecondMsg(z1, z2, z3)

    def get_simulator(self):
        return SigmaDJProductSimulator(self.soundness, self.length, self.random)


class SigmaDJProductVerifierComputation(DJBasedSigma, SigmaVerifierComputation):
    input_cls = DJProductCommonInput
    first_msg_cls = DJProductFirstMsg
    second_msg_cls = DJProductSecondMsg

    def _verify(self, common_input, first_msg, second_msg, challenge):
        check_numbers(first_msg, "a1", "a2")
        check_numbers(second_msg, "z1", "z2", "z3")
        n = common_input.public_key.n
        self.check_modulus(n)
        N, N_prime = self.moduli(n)
        c1, c2, c3 = common_input.c1.c, common_input.c2.c, common_input.c3.c
        a1, a2 = first_msg.a1, first_msg.a2
        z1, z2, z3 = second_msg.z1, second_msg.z2, second_msg.z3
        units = (c1, c2, c3, a1, a2, z2, z3)
        if not all(_is_unit(value, n, N_prime) for value in units):
            return False
        if not 0 <= z1 < N:
            return False

        e = challenge_to_bn(challenge)
        verified = True
        # c1^e * a1 == (1+n)^z1 * z2^N
        lhs = c1.mod_pow(e, N_prime).mod_mul(a1, N_prime)
        rhs = _power_of_one_plus_n(n, z1, N, N_prime).mod_mul(
            z2.mod_pow(N, N_prime), N_prime
        )
        verified &= lhs == rhs

        # c2^z1 / (a2 * c3^e) == z3^N
        denominator = a2.mod_mul(c3.mod_pow(e, N_prime), N_prime)
        if is_coprime(denominator, n):
            lhs = c2.mod_pow(z1, N_prime).mod_mul(
                denominator.mod_inverse(N_prime), N_prime
            )
            rhs = z3.mod_pow(N, N_prime)
            verified &= lhs == rhs
        else:
            verified = False
        return verified


class SigmaDJProductSimulator(DJBasedSigma, SigmaSimulator):
    """
    Simulator: draws z1 in Z_N and z2, z3 in Z*_n, then
    a1 = (1+n)^z1 * z2^N / c1^e and a2 = c2^z1 / (z3^N * c3^e) mod N'.
    """

    input_cls = DJProductCommonInput

    def _simulate(self, common_input, challenge):
        n = common_input.public_key.n
        self.check_modulus(n)
        N, N_prime = self.moduli(n)
        e = challenge_to_bn(challenge)
        c1, c2, c3 = common_input.c1.c, common_input.c2.c, common_input.c3.c

        z1 = self.random.random_below(N)
        z2 = get_random_unit(n, self.random)
        z3 = get_random_unit(n, self.random)

        c1_to_e = c1.mod_pow(e, N_prime)
        a1 = (
            _power_of_one_plus_n(n, z1, N, N_prime)
            .mod_mul(z2.mod_pow(N, N_prime), N_prime)
            .mod_mul(c1_to_e.mod_inverse(N_prime), N_prime)
        )
        denominator = z3.mod_pow(N, N_prime).mod_mul(c3.mod_pow(e, N_prime), N_prime)
        a2 = c2.mod_pow(z1, N_prime).mod_mul(denominator.mod_inverse(N_prime), N_prime)
        return SimulatorOutput(
            DJProductFirstMsg(a1, a2), challenge, DJProductSecondMsg(z1, z2, z3)
        )
