"""
Parties that run a Sigma protocol over a channel.

:py:class:`SigmaProver` and :py:class:`SigmaVerifier` drive a prover or verifier computation
through the three moves, in order:

1. the prover sends the first message,
2. the verifier waits for it, then sends the challenge,
3. the prover waits for the challenge, then sends the second message, and the verifier checks
   the transcript.

Each side keeps a flag of where it is, and refuses to run a step out of order.
"""

import logging

from zksigma.channel import receive_message, send_message
from zksigma.exceptions import ProtocolStateError


logger = logging.getLogger(__name__)


class SigmaProver:
    """
    Prover side of a Sigma protocol.

    Args:
        channel (:py:class:`zksigma.channel.Channel`): Channel to the verifier.
        computation (:py:class:`zksigma.base.SigmaProverComputation`): Protocol algebra.
    """

    def __init__(self, channel, computation):
        self.channel = channel
        self.computation = computation
        self.done_first_msg = False

    def process_first_msg(self, prover_input):
        """Compute the first message and send it."""
        first_msg = self.computation.compute_first_msg(prover_input)
        try:
            send_message(self.channel, first_msg)
        except BaseException:
            self.computation.abort()
            raise
        self.done_first_msg = True
        logger.debug("Sent first message of %s", self.computation.__class__.__name__)

    def process_second_msg(self):
        """
        Wait for the challenge, then compute the second message and send it. If no challenge
        arrives, the run is aborted and its randomness wiped.

        Raises:
            :py:class:`zksigma.exceptions.ProtocolStateError`: If the first message was not sent.
        """
        if not self.done_first_msg:
            raise ProtocolStateError("process_first_msg must be called first")
        # Whatever happens below, this run is over.
        self.done_first_msg = False
        try:
            challenge = receive_message(self.channel)
        except BaseException:
            self.computation.abort()
            raise
        second_msg = self.computation.compute_second_msg(challenge)
        send_message(self.channel, second_msg)
        logger.debug("Sent second message of %s", self.computation.__class__.__name__)

    def prove(self, prover_input):
        """Run the whole protocol."""
        self.process_first_msg(prover_input)
        self.process_second_msg()


class SigmaVerifier:
    """
    Verifier side of a Sigma protocol.

    Args:
        channel (:py:class:`zksigma.channel.Channel`): Channel to the prover.
        computation (:py:class:`zksigma.base.SigmaVerifierComputation`): Protocol algebra.
    """

    def __init__(self, channel, computation):
        self.channel = channel
        self.computation = computation
        self.first_msg = None
        self.done_challenge = False

    def sample_challenge(self):
        self.computation.sample_challenge()

    def set_challenge(self, challenge):
        self.computation.set_challenge(challenge)

    def get_challenge(self):
        return self.computation.get_challenge()

    def send_challenge(self):
        """
        Wait for the first message, then send the challenge. A challenge is sampled if none was
        set.

        If the exchange fails, the challenge is cleared, so the next run starts afresh.
        """
        try:
            self.first_msg = receive_message(self.channel)
            if self.computation.get_challenge() is None:
                self.computation.sample_challenge()
            send_message(self.channel, self.computation.get_challenge())
        except BaseException:
            self.first_msg = None
            self.computation.clear_challenge()
            raise
        self.done_challenge = True
        logger.debug("Sent challenge of %s", self.computation.__class__.__name__)

    def process_verify(self, common_input):
        """
        Wait for the second message and verify the transcript.

        Returns:
            bool: Whether the proof is accepted.

        Raises:
            :py:class:`zksigma.exceptions.ProtocolStateError`: If no challenge was sent.
        """
        if not self.done_challenge:
            raise ProtocolStateError("send_challenge must be called first")
        self.done_challenge = False
        first_msg, self.first_msg = self.first_msg, None
        try:
            second_msg = receive_message(self.channel)
        except BaseException:
            self.computation.clear_challenge()
            raise
        result = self.computation.verify(common_input, first_msg, second_msg)
        logger.debug(
            "Verification of %s: %s", self.computation.__class__.__name__, result
        )
        return result

    def verify(self, common_input):
        """Run the whole protocol with a fresh challenge."""
        self.sample_challenge()
        self.send_challenge()
        return self.process_verify(common_input)
