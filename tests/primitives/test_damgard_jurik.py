import pytest

from petlib.bn import Bn

from zksigma.encryption import DamgardJurikEnc, DJCiphertext, DJPublicKey, dj_moduli
from zksigma.exceptions import (
    ConfigurationError,
    InvalidMessageError,
    InvalidSoundnessParamError,
)
from zksigma.messages import BIMsg, DJProductSecondMsg
from zksigma.primitives.damgard_jurik import (
    DJEncryptedValueCommonInput,
    DJEncryptedValueProverInput,
    DJEncryptedZeroCommonInput,
    DJEncryptedZeroProverInput,
    DJProductProverInput,
    SigmaDJEncryptedValueProverComputation,
    SigmaDJEncryptedValueVerifierComputation,
    SigmaDJEncryptedZeroProverComputation,
    SigmaDJEncryptedZeroSimulator,
    SigmaDJEncryptedZeroVerifierComputation,
    SigmaDJProductProverComputation,
    SigmaDJProductSimulator,
    SigmaDJProductVerifierComputation,
    encrypted_value_to_zero,
)
from zksigma.utils import get_random_unit
from zksigma.utils.debug import SigmaProtocol


@pytest.fixture(params=[1, 2])
def length(request):
    return request.param


@pytest.fixture
def pk(dj_keys):
    return dj_keys[0]


def encrypt(pk, length, x):
    r = get_random_unit(pk.n)
    return DamgardJurikEnc(length).encrypt(pk, x, r), r


def test_dj_moduli(pk, length):
    N, N_prime = dj_moduli(pk.n, length)
    assert N == pk.n.pow(length)
    assert N_prime == pk.n.pow(length + 1)


def test_encrypted_zero(pk, length):
    ciphertext, r = encrypt(pk, length, 0)
    prover_input = DJEncryptedZeroProverInput(pk, ciphertext, r)
    protocol = SigmaProtocol(
        SigmaDJEncryptedZeroVerifierComputation(length=length),
        SigmaDJEncryptedZeroProverComputation(length=length),
    )
    assert protocol.verify(prover_input)


def test_encrypted_zero_nonzero_plaintext(pk, length):
    ciphertext, r = encrypt(pk, length, 1)
    protocol = SigmaProtocol(
        SigmaDJEncryptedZeroVerifierComputation(length=length),
        SigmaDJEncryptedZeroProverComputation(length=length),
    )
    assert not protocol.verify(DJEncryptedZeroProverInput(pk, ciphertext, r))


def test_encrypted_zero_erasure(pk):
    ciphertext, r = encrypt(pk, 1, 0)
    prover = SigmaDJEncryptedZeroProverComputation()
    prover.compute_first_msg(DJEncryptedZeroProverInput(pk, ciphertext, r))
    prover.compute_second_msg(bytes(10))
    assert prover.ephemeral["s"] == 0


def test_encrypted_zero_simulator(pk, length):
    ciphertext, _ = encrypt(pk, length, 0)
    common_input = DJEncryptedZeroCommonInput(pk, ciphertext)
    out = SigmaDJEncryptedZeroSimulator(length=length).simulate(common_input)
    verifier = SigmaDJEncryptedZeroVerifierComputation(length=length)
    verifier.set_challenge(out.challenge)
    assert verifier.verify(common_input, out.first_msg, out.second_msg)


def test_encrypted_zero_rejects_non_unit(pk):
    ciphertext, _ = encrypt(pk, 1, 0)
    common_input = DJEncryptedZeroCommonInput(pk, ciphertext)
    verifier = SigmaDJEncryptedZeroVerifierComputation()
    verifier.set_challenge(bytes(10))
    # With e = 0 the equation is z^N == a, which holds for z = n and a = n^N = 0.
    _, N_prime = dj_moduli(pk.n, 1)
    a = pk.n.mod_pow(pk.n, N_prime)
    assert not verifier.verify(common_input, BIMsg(a), BIMsg(pk.n))


def test_modulus_too_small_for_soundness(length):
    small_pk = DJPublicKey(Bn(3233))  # 61 * 53
    ciphertext = DJCiphertext(Bn(2), length)
    prover = SigmaDJEncryptedZeroProverComputation(length=length)
    with pytest.raises(InvalidSoundnessParamError):
        prover.compute_first_msg(DJEncryptedZeroProverInput(small_pk, ciphertext, 2))

    verifier = SigmaDJEncryptedZeroVerifierComputation(length=length)
    verifier.sample_challenge()
    with pytest.raises(InvalidSoundnessParamError):
        verifier.verify(
            DJEncryptedZeroCommonInput(small_pk, ciphertext),
            BIMsg(Bn(1)),
            BIMsg(Bn(1)),
        )


def test_invalid_length():
    with pytest.raises(ConfigurationError):
        SigmaDJEncryptedZeroProverComputation(length=0)
    with pytest.raises(ConfigurationError):
        DamgardJurikEnc(length=0)


def test_encrypted_value(pk, length):
    x = Bn(1234567)
    ciphertext, r = encrypt(pk, length, x)
    prover_input = DJEncryptedValueProverInput(pk, ciphertext, x, r)

    prover = SigmaDJEncryptedValueProverComputation(length=length)
    verifier = SigmaDJEncryptedValueVerifierComputation(length=length)
    assert SigmaProtocol(verifier, prover).verify(prover_input)

    out = prover.get_simulator().simulate(prover_input.common_input)
    verifier.set_challenge(out.challenge)
    assert verifier.verify(prover_input.common_input, out.first_msg, out.second_msg)


def test_encrypted_value_wrong_value(pk, length):
    ciphertext, r = encrypt(pk, length, 10)
    protocol = SigmaProtocol(
        SigmaDJEncryptedValueVerifierComputation(length=length),
        SigmaDJEncryptedValueProverComputation(length=length),
    )
    assert not protocol.verify(DJEncryptedValueProverInput(pk, ciphertext, 11, r))


def test_encrypted_value_to_zero(pk, length):
    ciphertext, r = encrypt(pk, length, 42)
    zero = encrypted_value_to_zero(
        length, DJEncryptedValueCommonInput(pk, ciphertext, 42)
    )
    expected = DamgardJurikEnc(length).encrypt(pk, 0, r)
    assert zero.ciphertext == expected


@pytest.fixture
def product_input(pk, length):
    x1, x2 = Bn(1234), Bn(5678)
    c1, r1 = encrypt(pk, length, x1)
    c2, r2 = encrypt(pk, length, x2)
    c3, r3 = encrypt(pk, length, x1 * x2)
    return DJProductProverInput(pk, c1, c2, c3, x1, x2, r1, r2, r3)


def test_product(product_input, length):
    protocol = SigmaProtocol(
        SigmaDJProductVerifierComputation(length=length),
        SigmaDJProductProverComputation(length=length),
    )
    assert protocol.verify(product_input)


def test_product_wrong_product(pk, length):
    x1, x2 = Bn(3), Bn(5)
    c1, r1 = encrypt(pk, length, x1)
    c2, r2 = encrypt(pk, length, x2)
    c3, r3 = encrypt(pk, length, 16)
    prover_input = DJProductProverInput(pk, c1, c2, c3, x1, x2, r1, r2, r3)
    protocol = SigmaProtocol(
        SigmaDJProductVerifierComputation(length=length),
        SigmaDJProductProverComputation(length=length),
    )
    assert not protocol.verify(prover_input)


def test_product_erasure(product_input, length):
    prover = SigmaDJProductProverComputation(length=length)
    prover.compute_first_msg(product_input)
    assert set(prover.ephemeral) == {"d", "rd", "rdb"}
    prover.compute_second_msg(b"\x07" * 10)
    assert all(value == 0 for value in prover.ephemeral.values())


def test_product_simulator(product_input, length):
    common_input = product_input.common_input
    out = SigmaDJProductSimulator(length=length).simulate(common_input, b"\x99" * 10)
    verifier = SigmaDJProductVerifierComputation(length=length)
    verifier.set_challenge(out.challenge)
    assert verifier.verify(common_input, out.first_msg, out.second_msg)


def test_encrypted_zero_malformed_messages(pk):
    ciphertext, r = encrypt(pk, 1, 0)
    common_input = DJEncryptedZeroCommonInput(pk, ciphertext)
    verifier = SigmaDJEncryptedZeroVerifierComputation()
    verifier.sample_challenge()
    with pytest.raises(InvalidMessageError):
        verifier.verify(common_input, BIMsg(int(r)), BIMsg(r))
    assert verifier.get_challenge() is None

    # Out of range values are rejected before any arithmetic.
    _, N_prime = dj_moduli(pk.n, 1)
    verifier.sample_challenge()
    assert not verifier.verify(common_input, BIMsg(N_prime + 1), BIMsg(r))
    verifier.sample_challenge()
    assert not verifier.verify(common_input, BIMsg(-r), BIMsg(r))


def test_product_malformed_messages(product_input, length):
    common_input = product_input.common_input
    out = SigmaDJProductSimulator(length=length).simulate(common_input)
    verifier = SigmaDJProductVerifierComputation(length=length)
    verifier.sample_challenge()
    second = DJProductSecondMsg(out.second_msg.z1, "z2", out.second_msg.z3)
    with pytest.raises(InvalidMessageError):
        verifier.verify(common_input, out.first_msg, second)

    # z1 is only meaningful modulo N, but must be sent reduced.
    N, _ = dj_moduli(common_input.public_key.n, length)
    z1, z2, z3 = out.second_msg.z1, out.second_msg.z2, out.second_msg.z3
    verifier.set_challenge(out.challenge)
    assert not verifier.verify(
        common_input, out.first_msg, DJProductSecondMsg(z1 + N, z2, z3)
    )
