"""
Channels carrying protocol messages between two parties.

Messages are serialized with :py:func:`petlib.pack.encode` on the way out and decoded on the way
in, so anything that goes through a channel must be encodable: big numbers, group elements,
bytes, lists, and the message classes of :py:mod:`zksigma.messages`.
"""

import abc
import logging
import queue

from petlib.pack import encode, decode

from zksigma.exceptions import CommunicationError

# Register message coders before anything is decoded.
import zksigma.messages  # noqa: F401


logger = logging.getLogger(__name__)


class Channel(metaclass=abc.ABCMeta):
    """
    Two-way, ordered, reliable channel.
    """

    @abc.abstractmethod
    def send(self, msg):
        """
        Raises:
            :py:class:`zksigma.exceptions.CommunicationError`
        """
        pass

    @abc.abstractmethod
    def receive(self):
        """
        Raises:
            :py:class:`zksigma.exceptions.CommunicationError`
        """
        pass

    def close(self):
        pass


class QueueChannel(Channel):
    """
    In-process channel endpoint backed by a pair of queues.

    Use :py:func:`make_channel_pair` to create two connected endpoints.

    Args:
        inbox: Queue to read from.
        outbox: Queue to write to.
        timeout: Seconds to wait on receive. None blocks forever.
    """

    def __init__(self, inbox, outbox, timeout=None):
        self.inbox = inbox
        self.outbox = outbox
        self.timeout = timeout
        self.closed = False

    def send(self, msg):
        if self.closed:
            raise CommunicationError("Channel is closed")
        try:
            data = encode(msg)
        except Exception as e:
            raise CommunicationError(
                "Cannot serialize %s" % msg.__class__.__name__
            ) from e
        logger.debug("Sending %s (%i bytes)", msg.__class__.__name__, len(data))
        self.outbox.put(data)

    def receive(self):
        if self.closed:
            raise CommunicationError("Channel is closed")
        try:
            data = self.inbox.get(timeout=self.timeout)
        except queue.Empty as e:
            raise CommunicationError("Timed out after %s seconds" % self.timeout) from e
        try:
            msg = decode(data)
        except Exception as e:
            raise CommunicationError("Cannot deserialize incoming message") from e
        logger.debug("Received %s (%i bytes)", msg.__class__.__name__, len(data))
        return msg

    def close(self):
        self.closed = True


def make_channel_pair(timeout=None):
    """
    Create two connected in-process endpoints.

    >>> alice, bob = make_channel_pair()
    >>> alice.send(b"hello")
    >>> bob.receive()
    b'hello'
    """
    left, right = queue.Queue(), queue.Queue()
    return QueueChannel(left, right, timeout), QueueChannel(right, left, timeout)


def send_message(channel, msg):
    """Send on a channel, reporting any I/O failure as a communication error."""
    try:
        channel.send(msg)
    except CommunicationError:
        raise
    except IOError as e:
        raise CommunicationError("Failed to send %s" % msg.__class__.__name__) from e


def receive_message(channel):
    """Receive from a channel, reporting any I/O failure as a communication error."""
    try:
        return channel.receive()
    except CommunicationError:
        raise
    except IOError as e:
        raise CommunicationError("Failed to receive a message") from e
