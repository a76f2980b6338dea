"""
Common classes, including subclassable prover computations, verifier computations, and
simulators.

A Sigma protocol is a three-move proof of knowledge. The prover computation produces the first
message (the commitment), receives a challenge of ``t / 8`` bytes, and produces the second
message (the response). The verifier computation samples the challenge and checks the
transcript. A simulator produces accepting transcripts for a given challenge without knowing
the witness.

Concrete protocols subclass the classes below and fill in a handful of hooks:

* :py:meth:`SigmaProverComputation._first_msg` and
  :py:meth:`SigmaProverComputation._second_msg`,
* :py:meth:`SigmaVerifierComputation._verify`,
* :py:meth:`SigmaSimulator._simulate`.

The public methods around the hooks enforce the rules every protocol shares: input and message
kinds are checked, challenges must be exactly ``t / 8`` bytes, ephemeral randomness is wiped
after the response on every exit path, and the verifier forgets its challenge after each
verification.
"""

import abc
import types

import attr

from petlib.bn import Bn

from zksigma.consts import DEFAULT_SOUNDNESS
from zksigma.exceptions import (
    ChallengeLengthError,
    InvalidGroupError,
    InvalidInputError,
    InvalidMessageError,
    InvalidSoundnessParamError,
    ProtocolStateError,
)
from zksigma.utils.misc import SecureRandom


class SigmaCommonInput:
    """
    Public statement, known to both the prover and the verifier.
    """


class SigmaProverInput:
    """
    Statement together with the witness. Lives on the prover side only.
    """

    @property
    def common_input(self):
        """The public part of the input."""
        raise NotImplementedError()


@attr.s
class SimulatorOutput:
    """
    Simulated transcript.
    """

    first_msg = attr.ib()
    challenge = attr.ib()
    second_msg = attr.ib()


def check_soundness_param(soundness):
    """
    Check that a soundness parameter can be expressed as a whole number of challenge bytes.

    Raises:
        :py:class:`zksigma.exceptions.InvalidSoundnessParamError`
    """
    if not isinstance(soundness, int) or soundness <= 0 or soundness % 8 != 0:
        raise InvalidSoundnessParamError(
            "Soundness parameter must be a positive multiple of 8, got %r"
            % (soundness,)
        )


def check_group_soundness(group, soundness):
    """
    Check that 2^t < q for the group order q.

    Raises:
        :py:class:`zksigma.exceptions.InvalidSoundnessParamError`
    """
    if not group.check_soundness(soundness):
        raise InvalidSoundnessParamError(
            "Soundness parameter t=%i does not satisfy 2^t < q" % soundness
        )


def check_message(msg, expected_cls):
    if not isinstance(msg, expected_cls):
        raise InvalidMessageError(
            "Expected %s, got %s" % (expected_cls.__name__, msg.__class__.__name__)
        )


def check_numbers(msg, *names):
    """
    Check that the named fields of a message are big numbers, before any arithmetic on them.

    Raises:
        :py:class:`zksigma.exceptions.InvalidMessageError`
    """
    for name in names:
        if not isinstance(getattr(msg, name), Bn):
            raise InvalidMessageError(
                "Field %s of %s must be a big number" % (name, msg.__class__.__name__)
            )


class _SigmaParty:
    """
    Shared plumbing: soundness parameter, randomness source, and input checks.
    """

    input_cls = None

    def __init__(self, soundness=DEFAULT_SOUNDNESS, random=None):
        check_soundness_param(soundness)
        self.soundness = soundness
        self.random = random if random is not None else SecureRandom()

    def get_soundness_param(self):
        return self.soundness

    @property
    def challenge_length(self):
        """Challenge length in bytes."""
        return self.soundness // 8

    def check_challenge(self, challenge):
        """
        Raises:
            :py:class:`zksigma.exceptions.ChallengeLengthError`: If the challenge is not
                ``t / 8`` bytes long.
        """
        if not isinstance(challenge, bytes) or len(challenge) != self.challenge_length:
            raise ChallengeLengthError(
                "Challenge must be %i bytes long" % self.challenge_length
            )

    def check_input(self, sigma_input):
        if self.input_cls is not None and not isinstance(sigma_input, self.input_cls):
            raise InvalidInputError(
                "%s cannot handle input of type %s"
                % (self.__class__.__name__, sigma_input.__class__.__name__)
            )
        return sigma_input


class SigmaProverComputation(_SigmaParty, metaclass=abc.ABCMeta):
    """
    Abstract prover side of a Sigma protocol.

    Args:
        soundness: Soundness parameter t in bits. Must be a multiple of 8.
        random: Randomness source, :py:class:`zksigma.utils.SecureRandom` by default.
    """

    def __init__(self, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(soundness, random)
        self.input = None
        self._ephemeral = {}

    @property
    def ephemeral(self):
        """Read-only view of the ephemeral randomness of the current run."""
        return types.MappingProxyType(self._ephemeral)

    def remember(self, **values):
        """Store ephemeral randomness until the response is computed."""
        self._ephemeral.update(values)

    def wipe(self):
        """Overwrite all ephemeral randomness with zero."""
        for name in self._ephemeral:
            self._ephemeral[name] = Bn(0)

    def abort(self):
        """
        Abandon the current run: wipe the ephemeral randomness and forget the input, so that
        no response can be computed until a new first message.
        """
        self.wipe()
        self.input = None

    def compute_first_msg(self, prover_input):
        """
        Compute the first message (the commitment).

        Args:
            prover_input (:py:class:`SigmaProverInput`): Statement and witness.
        """
        prover_input = self.check_input(prover_input)
        self.wipe()
        self.input = prover_input
        return self._first_msg(prover_input)

    def compute_second_msg(self, challenge):
        """
        Compute the response to a challenge. Ephemeral randomness is wiped afterwards, whether
        or not the response could be computed.

        Args:
            challenge (bytes): Challenge of ``t / 8`` bytes.

        Raises:
            :py:class:`zksigma.exceptions.ChallengeLengthError`: If the challenge length is wrong.
            :py:class:`zksigma.exceptions.ProtocolStateError`: If there was no first message.
        """
        if self.input is None:
            raise ProtocolStateError("The first message has not been computed")
        try:
            self.check_challenge(challenge)
            return self._second_msg(challenge)
        finally:
            self.abort()

    @abc.abstractmethod
    def _first_msg(self, prover_input):
        pass

    @abc.abstractmethod
    def _second_msg(self, challenge):
        pass

    @abc.abstractmethod
    def get_simulator(self):
        """Return a fresh simulator with the same soundness and randomness source."""
        pass


class SigmaVerifierComputation(_SigmaParty, metaclass=abc.ABCMeta):
    """
    Abstract verifier side of a Sigma protocol.

    Args:
        soundness: Soundness parameter t in bits. Must be a multiple of 8.
        random: Randomness source, :py:class:`zksigma.utils.SecureRandom` by default.
    """

    first_msg_cls = None
    second_msg_cls = None

    def __init__(self, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(soundness, random)
        self.challenge = None

    def sample_challenge(self):
        """Sample a fresh random challenge."""
        self.challenge = self.random.random_bytes(self.challenge_length)

    def set_challenge(self, challenge):
        """Use an externally chosen challenge, e.g., a share of a composed challenge."""
        self.check_challenge(challenge)
        self.challenge = challenge

    def get_challenge(self):
        return self.challenge

    def clear_challenge(self):
        self.challenge = None

    def verify(self, common_input, first_msg, second_msg):
        """
        Verify a transcript against the current challenge. The challenge is erased afterwards.

        Args:
            common_input (:py:class:`SigmaCommonInput`): Statement.
            first_msg: Prover's first message.
            second_msg: Prover's second message.

        Returns:
            bool: Whether the transcript is accepting.

        Raises:
            :py:class:`zksigma.exceptions.InvalidMessageError`: If a message has the wrong type.
            :py:class:`zksigma.exceptions.ProtocolStateError`: If no challenge is set.
        """
        try:
            common_input = self.check_input(common_input)
            if self.first_msg_cls is not None:
                check_message(first_msg, self.first_msg_cls)
            if self.second_msg_cls is not None:
                check_message(second_msg, self.second_msg_cls)
            if self.challenge is None:
                raise ProtocolStateError("No challenge to verify against")
            return self._verify(common_input, first_msg, second_msg, self.challenge)
        finally:
            self.clear_challenge()

    @abc.abstractmethod
    def _verify(self, common_input, first_msg, second_msg, challenge):
        pass


class SigmaSimulator(_SigmaParty, metaclass=abc.ABCMeta):
    """
    Abstract simulator of a Sigma protocol.

    Args:
        soundness: Soundness parameter t in bits. Must be a multiple of 8.
        random: Randomness source, :py:class:`zksigma.utils.SecureRandom` by default.
    """

    def simulate(self, common_input, challenge=None):
        """
        Produce an accepting transcript without the witness.

        The response is drawn first, and the first message is solved for afterwards.

        Args:
            common_input (:py:class:`SigmaCommonInput`): Statement.
            challenge (bytes): Challenge to simulate for. Sampled if not given.

        Returns:
            :py:class:`SimulatorOutput`
        """
        if challenge is None:
            challenge = self.random.random_bytes(self.challenge_length)
        self.check_challenge(challenge)
        common_input = self.check_input(common_input)
        return self._simulate(common_input, challenge)

    @abc.abstractmethod
    def _simulate(self, common_input, challenge):
        pass


class DlogBasedSigma:
    """
    Mixin for protocols over a prime-order group.

    Checks that 2^t < q. Verifiers additionally validate the group.

    Args:
        group (:py:class:`zksigma.groups.DlogGroup`): Group of order q.
        soundness: Soundness parameter t in bits.
        random: Randomness source.

    Raises:
        :py:class:`zksigma.exceptions.InvalidSoundnessParamError`: If 2^t >= q.
        :py:class:`zksigma.exceptions.InvalidGroupError`: If a verifier is given an invalid group.
    """

    def __init__(self, group, soundness=DEFAULT_SOUNDNESS, random=None):
        super().__init__(soundness, random)
        check_group_soundness(group, soundness)
        if isinstance(self, SigmaVerifierComputation) and not group.validate_group():
            raise InvalidGroupError("Group %r does not validate" % group)
        self.group = group


class SigmaProverAdapter(SigmaProverComputation):
    """
    Prover computation that rewrites its input into the input of another protocol, and lets
    that protocol do the work.

    Args:
        delegate (:py:class:`SigmaProverComputation`): Underlying computation.
    """

    def __init__(self, delegate):
        super().__init__(delegate.get_soundness_param(), delegate.random)
        self.delegate = delegate

    @abc.abstractmethod
    def convert_input(self, prover_input):
        """Map the input to the delegate's input. Must not have side effects."""
        pass

    @property
    def ephemeral(self):
        return self.delegate.ephemeral

    def wipe(self):
        self.delegate.wipe()

    def abort(self):
        self.delegate.abort()

    def compute_first_msg(self, prover_input):
        prover_input = self.check_input(prover_input)
        return self.delegate.compute_first_msg(self.convert_input(prover_input))

    def compute_second_msg(self, challenge):
        return self.delegate.compute_second_msg(challenge)

    def _first_msg(self, prover_input):
        raise NotImplementedError()

    def _second_msg(self, challenge):
        raise NotImplementedError()


class SigmaVerifierAdapter(SigmaVerifierComputation):
    """
    Verifier computation that rewrites the statement and delegates the checks.

    Args:
        delegate (:py:class:`SigmaVerifierComputation`): Underlying computation.
    """

    def __init__(self, delegate):
        super().__init__(delegate.get_soundness_param(), delegate.random)
        self.delegate = delegate

    @abc.abstractmethod
    def convert_input(self, common_input):
        pass

    def sample_challenge(self):
        self.delegate.sample_challenge()

    def set_challenge(self, challenge):
        self.delegate.set_challenge(challenge)

    def get_challenge(self):
        return self.delegate.get_challenge()

    def clear_challenge(self):
        self.delegate.clear_challenge()

    def verify(self, common_input, first_msg, second_msg):
        try:
            converted = self.convert_input(self.check_input(common_input))
        except Exception:
            # The delegate never runs, so its challenge is erased here.
            self.clear_challenge()
            raise
        return self.delegate.verify(converted, first_msg, second_msg)

    def _verify(self, common_input, first_msg, second_msg, challenge):
        raise NotImplementedError()


class SigmaSimulatorAdapter(SigmaSimulator):
    """
    Simulator that rewrites the statement and delegates the simulation.

    Args:
        delegate (:py:class:`SigmaSimulator`): Underlying simulator.
    """

    def __init__(self, delegate):
        super().__init__(delegate.get_soundness_param(), delegate.random)
        self.delegate = delegate

    @abc.abstractmethod
    def convert_input(self, common_input):
        pass

    def _simulate(self, common_input, challenge):
        return self.delegate.simulate(self.convert_input(common_input), challenge)
