"""
Zero-knowledge wrappers around Sigma protocols.

A Sigma protocol is only honest-verifier zero-knowledge: a verifier that picks its challenge as a
function of the first message may learn something. :py:class:`ZKFromSigmaProver` and
:py:class:`ZKFromSigmaVerifier` close that gap by having the verifier commit to the challenge
with a Pedersen commitment before it sees the first message. The prover acts as the commitment
receiver, so the commitment is binding for the verifier.

:py:class:`ZKPoKFromSigmaProver` and :py:class:`ZKPoKFromSigmaVerifier` additionally have the prover
reveal the commitment trapdoor once it has answered, which makes the result a proof of
knowledge.

:py:class:`FiatShamirProver` and :py:class:`FiatShamirVerifier` make a Sigma protocol
non-interactive instead: the challenge is a hash of the statement and the first message.

Example:

>>> from zksigma.groups import ZpDlogGroup
>>> from zksigma.primitives.dlog import (
...     DlogProverInput, SigmaDlogProverComputation, SigmaDlogVerifierComputation)
>>> G = ZpDlogGroup(2039, 1019, 4)
>>> prover_input = DlogProverInput(G.exponentiate_generator(6), 6)
>>> prover = FiatShamirProver(SigmaDlogProverComputation(G, soundness=8))
>>> proof = prover.prove(prover_input)
>>> verifier = FiatShamirVerifier(SigmaDlogVerifierComputation(G, soundness=8))
>>> verifier.verify(prover_input.common_input, proof)
True
"""

import hashlib
import logging

import attr

from petlib.bn import Bn
from petlib.pack import encode

from zksigma.base import check_message
from zksigma.channel import receive_message, send_message
from zksigma.commitments import PedersenCommitter, PedersenReceiver
from zksigma.exceptions import CheatAttemptError, ConfigurationError
from zksigma.messages import FiatShamirProof, PedersenTrapdoorMsg
from zksigma.utils.misc import bn_to_bytes


logger = logging.getLogger(__name__)

# Identifier of the challenge commitment.
CHALLENGE_CID = 0


def _commitment_group(computation, group):
    if group is not None:
        return group
    group = getattr(computation, "group", None)
    if group is None:
        raise ConfigurationError(
            "%s has no group, pass one for the challenge commitment"
            % computation.__class__.__name__
        )
    return group


class ZKFromSigmaProver:
    """
    Prover of the zero-knowledge version of a Sigma protocol.

    Args:
        channel (:py:class:`zksigma.channel.Channel`): Channel to the verifier.
        computation (:py:class:`zksigma.base.SigmaProverComputation`): Protocol algebra.
        group (:py:class:`zksigma.groups.DlogGroup`): Group of the challenge commitment.
            Defaults to the group of the computation.
        random: Randomness source of the commitment trapdoor.
    """

    def __init__(self, channel, computation, group=None, random=None):
        self.channel = channel
        self.computation = computation
        self.group = _commitment_group(computation, group)
        self.receiver = PedersenReceiver(
            channel, self.group, random or computation.random
        )

    def prove(self, prover_input):
        """
        Run the protocol. If the exchange breaks off after the first message, the run is
        aborted and its randomness wiped before the error propagates.

        Raises:
            :py:class:`zksigma.exceptions.CheatAttemptError`: If the verifier opens its challenge
                commitment to something else.
        """
        self.receiver.preprocess()
        cid = self.receiver.receive_commitment()

        first_msg = self.computation.compute_first_msg(prover_input)
        try:
            send_message(self.channel, first_msg)
            challenge = self._opened_challenge(self.receiver.receive_decommitment(cid))
        except BaseException:
            self.computation.abort()
            raise

        second_msg = self.computation.compute_second_msg(challenge)
        send_message(self.channel, second_msg)
        self._after_response()
        logger.debug(
            "Sent zero-knowledge response of %s", self.computation.__class__.__name__
        )

    def _opened_challenge(self, x):
        if not isinstance(x, Bn) or x < 0:
            raise CheatAttemptError("Committed challenge is not a non-negative number")
        try:
            return bn_to_bytes(x, self.computation.challenge_length)
        except ValueError as e:
            raise CheatAttemptError("Committed challenge is too long") from e

    def _after_response(self):
        pass


class ZKFromSigmaVerifier:
    """
    Verifier of the zero-knowledge version of a Sigma protocol.

    Args:
        channel (:py:class:`zksigma.channel.Channel`): Channel to the prover.
        computation (:py:class:`zksigma.base.SigmaVerifierComputation`): Protocol algebra.
        group (:py:class:`zksigma.groups.DlogGroup`): Group of the challenge commitment.
            Defaults to the group of the computation.
        random: Randomness source of the commitment.
    """

    def __init__(self, channel, computation, group=None, random=None):
        self.channel = channel
        self.computation = computation
        self.group = _commitment_group(computation, group)
        self.committer = PedersenCommitter(
            channel, self.group, random or computation.random
        )

    def verify(self, common_input):
        """
        Run the protocol with a fresh challenge. The challenge is erased afterwards, also when
        the exchange fails.

        Returns:
            bool: Whether the proof is accepted.
        """
        try:
            self.committer.preprocess()
            self.computation.sample_challenge()
            challenge = self.computation.get_challenge()
            self.committer.commit(Bn.from_binary(challenge), CHALLENGE_CID)

            first_msg = receive_message(self.channel)
            self.committer.decommit(CHALLENGE_CID)
            second_msg = receive_message(self.channel)
            verified = self._after_response()
        except BaseException:
            self.computation.clear_challenge()
            raise

        verified &= self.computation.verify(common_input, first_msg, second_msg)
        logger.debug(
            "Zero-knowledge verification of %s: %s",
            self.computation.__class__.__name__,
            verified,
        )
        return verified

    def _after_response(self):
        return True


class ZKPoKFromSigmaProver(ZKFromSigmaProver):
    """
    Prover of the zero-knowledge proof of knowledge version of a Sigma protocol.

    Runs like :py:class:`ZKFromSigmaProver`, and reveals the trapdoor of the challenge
    commitment after the response. A knowledge extractor that knows the trapdoor can open the
    commitment to any challenge, and so rewind the prover.
    """

    def _after_response(self):
        send_message(self.channel, PedersenTrapdoorMsg(self.receiver.trapdoor))


class ZKPoKFromSigmaVerifier(ZKFromSigmaVerifier):
    """
    Verifier of the zero-knowledge proof of knowledge version of a Sigma protocol.

    Accepts iff the revealed trapdoor matches the base the prover chose, and the Sigma
    transcript verifies.
    """

    def _after_response(self):
        msg = receive_message(self.channel)
        check_message(msg, PedersenTrapdoorMsg)
        return self.committer.validate_trapdoor(msg.trapdoor)


def _statement_fields(common_input):
    if attr.has(common_input.__class__):
        return attr.astuple(common_input)
    return common_input


def fiat_shamir_challenge(common_input, first_msg, length, context=b""):
    """
    Hash the statement and the first message into a challenge of ``length`` bytes.

    The hash input is the petlib encoding of the class name of the statement, its fields, the
    first message, and a context string that binds the proof to its use.
    """
    data = encode(
        [
            common_input.__class__.__name__,
            _statement_fields(common_input),
            first_msg,
            context,
        ]
    )
    return hashlib.shake_256(data).digest(length)


class FiatShamirProver:
    """
    Non-interactive prover.

    Args:
        computation (:py:class:`zksigma.base.SigmaProverComputation`): Protocol algebra.
        context (bytes): Bound into the challenge. The verifier must use the same.
    """

    def __init__(self, computation, context=b""):
        self.computation = computation
        self.context = context

    def prove(self, prover_input):
        """
        Returns:
            :py:class:`zksigma.messages.FiatShamirProof`
        """
        first_msg = self.computation.compute_first_msg(prover_input)
        challenge = fiat_shamir_challenge(
            prover_input.common_input,
            first_msg,
            self.computation.challenge_length,
            self.context,
        )
        second_msg = self.computation.compute_second_msg(challenge)
        return FiatShamirProof(first_msg, challenge, second_msg)

    def send_proof(self, channel, prover_input):
        send_message(channel, self.prove(prover_input))


class FiatShamirVerifier:
    """
    Non-interactive verifier.

    Args:
        computation (:py:class:`zksigma.base.SigmaVerifierComputation`): Protocol algebra.
        context (bytes): Must match the prover's.
    """

    def __init__(self, computation, context=b""):
        self.computation = computation
        self.context = context

    def verify(self, common_input, proof):
        """
        Returns:
            bool: Whether the proof is accepted.

        Raises:
            :py:class:`zksigma.exceptions.InvalidMessageError`: If proof is not a
                :py:class:`zksigma.messages.FiatShamirProof`.
        """
        check_message(proof, FiatShamirProof)
        challenge = fiat_shamir_challenge(
            common_input,
            proof.first_msg,
            self.computation.challenge_length,
            self.context,
        )
        if proof.challenge != challenge:
            logger.warning("Fiat-Shamir challenge does not match the transcript")
            return False
        self.computation.set_challenge(challenge)
        return self.computation.verify(
            common_input, proof.first_msg, proof.second_msg
        )

    def receive_proof(self, channel, common_input):
        """Receive a proof from a channel and verify it."""
        return self.verify(common_input, receive_message(channel))
