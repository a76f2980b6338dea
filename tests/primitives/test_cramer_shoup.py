import pytest

from zksigma.encryption import CramerShoupCiphertext, CramerShoupEnc
from zksigma.exceptions import InvalidInputError
from zksigma.primitives.cramer_shoup import (
    CramerShoupEncryptedValueCommonInput,
    CramerShoupEncryptedValueProverInput,
    SigmaCramerShoupEncryptedValueProverComputation,
    SigmaCramerShoupEncryptedValueSimulator,
    SigmaCramerShoupEncryptedValueVerifierComputation,
    encrypted_value_to_dh_extended,
)
from zksigma.primitives.elgamal import ElGamalEncryptedValueCommonInput
from zksigma.utils.debug import SigmaProtocol


@pytest.fixture
def keys(group):
    return CramerShoupEnc(group).keygen()


@pytest.fixture
def message(group):
    return group.exponentiate_generator(group.random_exponent())


@pytest.fixture
def encrypted(group, keys, message):
    pk, _ = keys
    r = group.random_exponent()
    return CramerShoupEncryptedValueProverInput(
        pk, CramerShoupEnc(group).encrypt(pk, message, r), message, r
    )


def test_encryption(group, keys, message):
    pk, sk = keys
    enc = CramerShoupEnc(group)
    ciphertext = enc.encrypt(pk, message)
    assert enc.decrypt(sk, ciphertext) == message


def test_decryption_rejects_modified_ciphertext(group, keys, message):
    pk, sk = keys
    enc = CramerShoupEnc(group)
    ct = enc.encrypt(pk, message)
    modified = CramerShoupCiphertext(
        ct.u1, ct.u2, group.multiply(ct.e, group.generator()), ct.v
    )
    with pytest.raises(ValueError):
        enc.decrypt(sk, modified)


def test_statement_holds(group, encrypted):
    dh = encrypted_value_to_dh_extended(
        group, encrypted.public_key, encrypted.ciphertext, encrypted.x
    )
    assert len(dh.bases) == 4
    for g, h in zip(dh.bases, dh.values):
        assert group.exponentiate(g, encrypted.r) == h


def test_encrypted_value(group, encrypted):
    protocol = SigmaProtocol(
        SigmaCramerShoupEncryptedValueVerifierComputation(group),
        SigmaCramerShoupEncryptedValueProverComputation(group),
    )
    assert protocol.verify(encrypted)


def test_encrypted_value_wrong_value(group, encrypted):
    other = group.multiply(encrypted.x, group.generator())
    prover_input = CramerShoupEncryptedValueProverInput(
        encrypted.public_key, encrypted.ciphertext, other, encrypted.r
    )
    protocol = SigmaProtocol(
        SigmaCramerShoupEncryptedValueVerifierComputation(group),
        SigmaCramerShoupEncryptedValueProverComputation(group),
    )
    assert not protocol.verify(prover_input)


def test_encrypted_value_wrong_randomness(group, encrypted):
    prover_input = CramerShoupEncryptedValueProverInput(
        encrypted.public_key, encrypted.ciphertext, encrypted.x, encrypted.r + 1
    )
    protocol = SigmaProtocol(
        SigmaCramerShoupEncryptedValueVerifierComputation(group),
        SigmaCramerShoupEncryptedValueProverComputation(group),
    )
    assert not protocol.verify(prover_input)


def test_encrypted_value_erasure(group, encrypted):
    prover = SigmaCramerShoupEncryptedValueProverComputation(group)
    prover.compute_first_msg(encrypted)
    assert set(prover.ephemeral) == {"r"}
    prover.compute_second_msg(bytes(10))
    assert all(value == 0 for value in prover.ephemeral.values())


def test_encrypted_value_simulator(group, encrypted):
    common_input = encrypted.common_input
    out = SigmaCramerShoupEncryptedValueSimulator(group).simulate(common_input)
    verifier = SigmaCramerShoupEncryptedValueVerifierComputation(group)
    verifier.set_challenge(out.challenge)
    assert verifier.verify(common_input, out.first_msg, out.second_msg)


def test_encrypted_value_wrong_input(group, encrypted):
    verifier = SigmaCramerShoupEncryptedValueVerifierComputation(group)
    verifier.sample_challenge()
    common_input = ElGamalEncryptedValueCommonInput(
        encrypted.public_key, encrypted.ciphertext, encrypted.x
    )
    prover = SigmaCramerShoupEncryptedValueProverComputation(group)
    first_msg = prover.compute_first_msg(encrypted)
    second_msg = prover.compute_second_msg(verifier.get_challenge())
    with pytest.raises(InvalidInputError):
        verifier.verify(common_input, first_msg, second_msg)
    assert verifier.get_challenge() is None


def test_common_input_fields(encrypted):
    common_input = encrypted.common_input
    assert isinstance(common_input, CramerShoupEncryptedValueCommonInput)
    assert common_input.x == encrypted.x
