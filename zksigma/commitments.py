"""
Commitment schemes.

Pedersen commitments :math:`c = g^r h^x` are perfectly hiding, and binding as long as the
committer does not know :math:`\\log_g h`. In the interactive scheme, the receiver picks h, so
that the receiver, and only the receiver, knows that trapdoor.

ElGamal commitments are ElGamal encryptions of a group element under the committer's key. They
are perfectly binding and computationally hiding.

The Sigma protocols proving knowledge about commitments live in
:py:mod:`zksigma.primitives.pedersen` and :py:mod:`zksigma.primitives.elgamal`.
"""

import logging

from petlib.bn import Bn

from zksigma.channel import receive_message, send_message
from zksigma.encryption import ElGamalEnc
from zksigma.exceptions import (
    CheatAttemptError,
    InvalidMessageError,
    ProtocolStateError,
)
from zksigma.messages import (
    PedersenCommitmentMsg,
    PedersenDecommitmentMsg,
    PedersenPreprocessMsg,
)
from zksigma.utils.misc import SecureRandom, to_bn


logger = logging.getLogger(__name__)


class PedersenCommitmentScheme:
    """
    Non-interactive core of Pedersen commitments.

    Args:
        group (:py:class:`zksigma.groups.DlogGroup`): Group
        h: Second base.
        random: Randomness source.

    >>> from zksigma.groups import ZpDlogGroup
    >>> G = ZpDlogGroup(2039, 1019, 4)
    >>> scheme = PedersenCommitmentScheme(G, G.exponentiate_generator(7))
    >>> c, r = scheme.commit(5)
    >>> scheme.verify(c, 5, r)
    True
    >>> scheme.verify(c, 6, r)
    False
    """

    def __init__(self, group, h, random=None):
        self.group = group
        self.h = h
        self.random = random if random is not None else SecureRandom()

    def commit(self, x, r=None):
        """
        Commit to an exponent x.

        Returns:
            tuple: Commitment g^r h^x and the randomness r.
        """
        if r is None:
            r = self.group.random_exponent(self.random)
        r = to_bn(r)
        group = self.group
        c = group.multiply(
            group.exponentiate_generator(r), group.exponentiate(self.h, x)
        )
        return c, r

    def verify(self, commitment, x, r):
        return self.commit(x, r)[0] == commitment


class PedersenCommitter:
    """
    Committing side of the interactive Pedersen scheme.

    The receiver's base h arrives in a preprocessing message, and is checked for group membership
    before use.

    Args:
        channel (:py:class:`zksigma.channel.Channel`): Channel to the receiver.
        group (:py:class:`zksigma.groups.DlogGroup`): Group
        random: Randomness source.
    """

    def __init__(self, channel, group, random=None):
        self.channel = channel
        self.group = group
        self.random = random if random is not None else SecureRandom()
        self.scheme = None
        self.commitments = {}

    def preprocess(self):
        """
        Receive the base h.

        Raises:
            :py:class:`zksigma.exceptions.CheatAttemptError`: If h is not a group element.
        """
        msg = receive_message(self.channel)
        if not isinstance(msg, PedersenPreprocessMsg):
            raise InvalidMessageError("Expected the receiver's base")
        if not self.group.is_member(msg.h):
            raise CheatAttemptError("Receiver's base is not a group element")
        self.scheme = PedersenCommitmentScheme(self.group, msg.h, self.random)

    def commit(self, x, cid):
        """
        Commit to x under the identifier cid, and send the commitment.
        """
        if self.scheme is None:
            self.preprocess()
        c, r = self.scheme.commit(x)
        self.commitments[cid] = (to_bn(x), r)
        send_message(self.channel, PedersenCommitmentMsg(c, cid))

    def decommit(self, cid):
        """Send the opening of the commitment cid."""
        if cid not in self.commitments:
            raise ProtocolStateError("Nothing committed under id %r" % (cid,))
        x, r = self.commitments.pop(cid)
        send_message(self.channel, PedersenDecommitmentMsg(x, r))

    def validate_trapdoor(self, trapdoor):
        """
        Check that the receiver's revealed trapdoor is the discrete logarithm of its base h.

        Returns:
            bool
        """
        if self.scheme is None:
            raise ProtocolStateError("preprocess must be called first")
        if not isinstance(trapdoor, Bn):
            logger.warning("Trapdoor is not a number")
            return False
        valid = self.group.exponentiate_generator(trapdoor) == self.scheme.h
        if not valid:
            logger.warning("Trapdoor does not match the receiver's base")
        return valid


class PedersenReceiver:
    """
    Receiving side of the interactive Pedersen scheme.

    Args:
        channel (:py:class:`zksigma.channel.Channel`): Channel to the committer.
        group (:py:class:`zksigma.groups.DlogGroup`): Group
        random: Randomness source.
    """

    def __init__(self, channel, group, random=None):
        self.channel = channel
        self.group = group
        self.random = random if random is not None else SecureRandom()
        self.trapdoor = None
        self.scheme = None
        self.commitments = {}

    def preprocess(self):
        """Draw the trapdoor a and send h = g^a."""
        self.trapdoor = self.group.random_exponent(self.random)
        h = self.group.exponentiate_generator(self.trapdoor)
        self.scheme = PedersenCommitmentScheme(self.group, h, self.random)
        send_message(self.channel, PedersenPreprocessMsg(h))

    def receive_commitment(self):
        """
        Receive a commitment.

        Returns:
            The identifier of the commitment.
        """
        if self.scheme is None:
            raise ProtocolStateError("preprocess must be called first")
        msg = receive_message(self.channel)
        if not isinstance(msg, PedersenCommitmentMsg):
            raise InvalidMessageError("Expected a commitment")
        self.commitments[msg.cid] = msg.commitment
        return msg.cid

    def receive_decommitment(self, cid):
        """
        Receive and check the opening of the commitment cid.

        Returns:
            The committed value.

        Raises:
            :py:class:`zksigma.exceptions.CheatAttemptError`: If the opening does not match.
        """
        if cid not in self.commitments:
            raise ProtocolStateError("No commitment with id %r" % (cid,))
        msg = receive_message(self.channel)
        if not isinstance(msg, PedersenDecommitmentMsg):
            raise InvalidMessageError("Expected a decommitment")
        commitment = self.commitments.pop(cid)
        if not self.scheme.verify(commitment, msg.x, msg.r):
            logger.warning("Decommitment of %r does not match the commitment", cid)
            raise CheatAttemptError("Decommitment does not match the commitment")
        return msg.x


class ElGamalCommitmentScheme:
    """
    ElGamal commitments to group elements, under the committer's key pair.

    Args:
        group (:py:class:`zksigma.groups.DlogGroup`): Group
        public_key (:py:class:`zksigma.encryption.ElGamalPublicKey`): Committer's public key.
        random: Randomness source.
    """

    def __init__(self, group, public_key, random=None):
        self.group = group
        self.public_key = public_key
        self.enc = ElGamalEnc(group, random)

    def commit(self, x, r=None):
        """
        Commit to a group element x.

        Returns:
            tuple: The commitment (an :py:class:`zksigma.encryption.ElGamalCiphertext`) and r.
        """
        if r is None:
            r = self.group.random_exponent(self.enc.random)
        r = to_bn(r)
        return self.enc.encrypt(self.public_key, x, r), r

    def verify(self, commitment, x, r):
        return self.commit(x, r)[0] == commitment
