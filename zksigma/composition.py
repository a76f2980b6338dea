"""
Composition of Sigma protocols: conjunctions and disjunctions.

AND-composition runs all branches on the same challenge.

OR-composition lets a prover who knows the witness of one statement among several convince the
verifier without revealing which one. The prover simulates every other branch on a challenge
share of its own choosing, and sets the share of the real branch so that all shares XOR to the
verifier's challenge. Since simulated shares are fixed before the challenge is known, the prover
can only answer for one branch it cannot simulate.

Every composed computation is itself a computation, so compositions nest.
"""

import logging

import attr

from zksigma.base import (
    SigmaCommonInput,
    SigmaProverComputation,
    SigmaProverInput,
    SigmaSimulator,
    SigmaVerifierComputation,
    SimulatorOutput,
)
from zksigma.exceptions import (
    ConfigurationError,
    InvalidInputError,
    SoundnessMismatchError,
)
from zksigma.messages import MultipleMsg, ORSecondMsg, ORTwoFirstMsg
from zksigma.utils.misc import xor_bytes


logger = logging.getLogger(__name__)


def _find_residual_challenge(subchallenges, challenge):
    """
    Determine the share that completes a list of challenge shares.

    The shares XOR to the global challenge, so the missing one is the XOR of the global challenge
    with all the others.

    >>> _find_residual_challenge([b"\\x0f", b"\\x01"], b"\\xff")
    b'\\xf1'

    Args:
        subchallenges: Shares already fixed.
        challenge: The global challenge to reach.
    """
    return xor_bytes(challenge, *subchallenges)


def _common_soundness(parties, min_parties=1):
    """
    Check that all composed parties share the soundness parameter, and return it.

    Raises:
        :py:class:`zksigma.exceptions.SoundnessMismatchError`: If soundness parameters differ.
    """
    if len(parties) < min_parties:
        raise ConfigurationError("Need at least %i branches" % min_parties)
    params = {party.get_soundness_param() for party in parties}
    if len(params) != 1:
        raise SoundnessMismatchError(
            "All branches must have the same soundness parameter, got %s"
            % sorted(params)
        )
    return params.pop()


def _check_branch_count(items, expected, what):
    if len(items) != expected:
        raise InvalidInputError("Expected %i %s, got %i" % (expected, what, len(items)))


# AND


@attr.s(frozen=True)
class ANDCommonInput(SigmaCommonInput):
    inputs = attr.ib(converter=tuple)


@attr.s(frozen=True)
class ANDProverInput(SigmaProverInput):
    inputs = attr.ib(converter=tuple)

    @property
    def common_input(self):
        return ANDCommonInput([sub.common_input for sub in self.inputs])


class SigmaANDProverComputation(SigmaProverComputation):
    """
    Prover of a conjunction. All branches answer the same challenge.

    Args:
        computations: Prover computations, one per branch.
        random: Randomness source. Defaults to the one of the first branch.

    Raises:
        :py:class:`zksigma.exceptions.SoundnessMismatchError`: If branches differ in soundness.
    """

    input_cls = ANDProverInput

    def __init__(self, computations, random=None):
        self.computations = list(computations)
        soundness = _common_soundness(self.computations)
        super().__init__(soundness, random or self.computations[0].random)

    def wipe(self):
        super().wipe()
        for computation in self.computations:
            computation.wipe()

    def abort(self):
        super().abort()
        for computation in self.computations:
            computation.abort()

    def _first_msg(self, prover_input):
        _check_branch_count(prover_input.inputs, len(self.computations), "inputs")
        return MultipleMsg(
            [
                computation.compute_first_msg(sub_input)
                for computation, sub_input in zip(
                    self.computations, prover_input.inputs
                )
            ]
        )

    def _second_msg(self, challenge):
        return MultipleMsg(
            [
                computation.compute_second_msg(challenge)
                for computation in self.computations
            ]
        )

    def get_simulator(self):
        return SigmaANDSimulator(
            [computation.get_simulator() for computation in self.computations],
            self.random,
        )


class SigmaANDVerifierComputation(SigmaVerifierComputation):
    """
    Verifier of a conjunction.

    Args:
        verifiers: Verifier computations, one per branch.
        random: Randomness source for the challenge.
    """

    input_cls = ANDCommonInput
    first_msg_cls = MultipleMsg
    second_msg_cls = MultipleMsg

    def __init__(self, verifiers, random=None):
        self.verifiers = list(verifiers)
        soundness = _common_soundness(self.verifiers)
        super().__init__(soundness, random or self.verifiers[0].random)

    def _verify(self, common_input, first_msg, second_msg, challenge):
        k = len(self.verifiers)
        _check_branch_count(common_input.inputs, k, "inputs")
        if len(first_msg.messages) != k or len(second_msg.messages) != k:
            logger.warning(
                "AND proof has %i branches, expected %i", len(first_msg.messages), k
            )
            return False

        verified = True
        for verifier, sub_input, a, z in zip(
            self.verifiers, common_input.inputs, first_msg.messages, second_msg.messages
        ):
            verifier.set_challenge(challenge)
            verified &= verifier.verify(sub_input, a, z)
        return verified


class SigmaANDSimulator(SigmaSimulator):
    input_cls = ANDCommonInput

    def __init__(self, simulators, random=None):
        self.simulators = list(simulators)
        soundness = _common_soundness(self.simulators)
        super().__init__(soundness, random or self.simulators[0].random)

    def _simulate(self, common_input, challenge):
        _check_branch_count(common_input.inputs, len(self.simulators), "inputs")
        outputs = [
            simulator.simulate(sub_input, challenge)
            for simulator, sub_input in zip(self.simulators, common_input.inputs)
        ]
        return SimulatorOutput(
            MultipleMsg([out.first_msg for out in outputs]),
            challenge,
            MultipleMsg([out.second_msg for out in outputs]),
        )


# OR, two statements


@attr.s(frozen=True)
class ORTwoCommonInput(SigmaCommonInput):
    """Statements x0 and x1."""

    input0 = attr.ib()
    input1 = attr.ib()

    @property
    def inputs(self):
        return (self.input0, self.input1)


@attr.s(frozen=True)
class ORTwoProverInput(SigmaProverInput):
    """
    Witness for statement b, and the other statement to simulate.

    Args:
        prover_input: Input of the statement the prover knows a witness for.
        simulator_input: Common input of the other statement.
        b: Index (0 or 1) of the statement with a witness.
    """

    prover_input = attr.ib()
    simulator_input = attr.ib()
    b = attr.ib()

    @b.validator
    def _check_b(self, attribute, value):
        if value not in (0, 1):
            raise InvalidInputError("b must be 0 or 1, got %r" % (value,))

    @property
    def common_input(self):
        real = self.prover_input.common_input
        if self.b == 0:
            return ORTwoCommonInput(real, self.simulator_input)
        return ORTwoCommonInput(self.simulator_input, real)


class SigmaORTwoProverComputation(SigmaProverComputation):
    """
    Prover of a disjunction of two statements.

    Args:
        computations: Prover computations for statement 0 and statement 1. Only the one for the
            statement with a witness runs for real; the other one provides the simulator.
        random: Randomness source. Defaults to the one of the first branch.
    """

    input_cls = ORTwoProverInput

    def __init__(self, computations, random=None):
        self.computations = list(computations)
        _check_branch_count(self.computations, 2, "computations")
        soundness = _common_soundness(self.computations, min_parties=2)
        super().__init__(soundness, random or self.computations[0].random)
        self.simulation = None

    def wipe(self):
        super().wipe()
        self.simulation = None
        for computation in self.computations:
            computation.wipe()

    def abort(self):
        super().abort()
        for computation in self.computations:
            computation.abort()

    def _first_msg(self, prover_input):
        b = prover_input.b
        simulator = self.computations[1 - b].get_simulator()
        self.simulation = simulator.simulate(prover_input.simulator_input)
        real_first = self.computations[b].compute_first_msg(prover_input.prover_input)
        if b == 0:
            return ORTwoFirstMsg(real_first, self.simulation.first_msg)
        return ORTwoFirstMsg(self.simulation.first_msg, real_first)

    def _second_msg(self, challenge):
        b = self.input.b
        real_challenge = _find_residual_challenge(
            [self.simulation.challenge], challenge
        )
        real_second = self.computations[b].compute_second_msg(real_challenge)
        if b == 0:
            challenges = [real_challenge, self.simulation.challenge]
            messages = [real_second, self.simulation.second_msg]
        else:
            challenges = [self.simulation.challenge, real_challenge]
            messages = [self.simulation.second_msg, real_second]
        return ORSecondMsg(challenges, messages)

    def get_simulator(self):
        return SigmaORTwoSimulator(
            [computation.get_simulator() for computation in self.computations],
            self.random,
        )


class SigmaORTwoVerifierComputation(SigmaVerifierComputation):
    """
    Verifier of a disjunction of two statements.

    Accepts iff e0 XOR e1 equals the challenge and both branches verify.

    Args:
        verifiers: Verifier computations for statement 0 and statement 1.
        random: Randomness source for the challenge.
    """

    input_cls = ORTwoCommonInput
    first_msg_cls = ORTwoFirstMsg
    second_msg_cls = ORSecondMsg

    def __init__(self, verifiers, random=None):
        self.verifiers = list(verifiers)
        _check_branch_count(self.verifiers, 2, "verifiers")
        soundness = _common_soundness(self.verifiers, min_parties=2)
        super().__init__(soundness, random or self.verifiers[0].random)

    def _verify(self, common_input, first_msg, second_msg, challenge):
        if len(second_msg.challenges) != 2 or len(second_msg.messages) != 2:
            logger.warning("OR proof does not have two branches")
            return False
        for share in second_msg.challenges:
            self.check_challenge(share)

        verified = _find_residual_challenge(second_msg.challenges, challenge) == bytes(
            self.challenge_length
        )
        if not verified:
            logger.warning("OR challenge shares do not XOR to the challenge")

        first_msgs = (first_msg.first0, first_msg.first1)
        for verifier, sub_input, a, share, z in zip(
            self.verifiers,
            common_input.inputs,
            first_msgs,
            second_msg.challenges,
            second_msg.messages,
        ):
            verifier.set_challenge(share)
            verified &= verifier.verify(sub_input, a, z)
        return verified


class SigmaORTwoSimulator(SigmaSimulator):
    input_cls = ORTwoCommonInput

    def __init__(self, simulators, random=None):
        self.simulators = list(simulators)
        _check_branch_count(self.simulators, 2, "simulators")
        soundness = _common_soundness(self.simulators, min_parties=2)
        super().__init__(soundness, random or self.simulators[0].random)

    def _simulate(self, common_input, challenge):
        e0 = self.random.random_bytes(self.challenge_length)
        e1 = _find_residual_challenge([e0], challenge)
        out0 = self.simulators[0].simulate(common_input.input0, e0)
        out1 = self.simulators[1].simulate(common_input.input1, e1)
        return SimulatorOutput(
            ORTwoFirstMsg(out0.first_msg, out1.first_msg),
            challenge,
            ORSecondMsg([e0, e1], [out0.second_msg, out1.second_msg]),
        )


# OR, any number of statements


@attr.s(frozen=True)
class ORMultipleCommonInput(SigmaCommonInput):
    inputs = attr.ib(converter=tuple)


@attr.s(frozen=True)
class ORMultipleProverInput(SigmaProverInput):
    """
    Input of a disjunction of k statements.

    Args:
        inputs (dict): Maps every index 0, ..., k-1 to a statement. Exactly one entry is a
            :py:class:`zksigma.base.SigmaProverInput` (the statement with a witness); all others
            are :py:class:`zksigma.base.SigmaCommonInput` to simulate.

    Raises:
        :py:class:`zksigma.exceptions.InvalidInputError`: If indices have gaps, or if there is
            not exactly one witness.
    """

    inputs = attr.ib(converter=dict)

    def __attrs_post_init__(self):
        if sorted(self.inputs) != list(range(len(self.inputs))):
            raise InvalidInputError(
                "Indices must be 0, ..., k-1 without gaps, got %s" % sorted(self.inputs)
            )
        witnesses = [
            index
            for index, sub in self.inputs.items()
            if isinstance(sub, SigmaProverInput)
        ]
        if len(witnesses) != 1:
            raise InvalidInputError(
                "Exactly one statement must come with a witness, got %i"
                % len(witnesses)
            )
        for index, sub in self.inputs.items():
            if index != witnesses[0] and not isinstance(sub, SigmaCommonInput):
                raise InvalidInputError(
                    "Input %i is neither a statement nor a witness" % index
                )

    @property
    def real_index(self):
        for index, sub in self.inputs.items():
            if isinstance(sub, SigmaProverInput):
                return index

    @property
    def common_input(self):
        real = self.real_index
        return ORMultipleCommonInput(
            [
                self.inputs[i].common_input if i == real else self.inputs[i]
                for i in range(len(self.inputs))
            ]
        )


class SigmaORMultipleProverComputation(SigmaProverComputation):
    """
    Prover of a disjunction of k statements, for a witness of one of them.

    Args:
        computations: Prover computations, one per statement. The one matching the witness runs
            for real, the others provide their simulators.
        random: Randomness source. Defaults to the one of the first branch.
    """

    input_cls = ORMultipleProverInput

    def __init__(self, computations, random=None):
        self.computations = list(computations)
        soundness = _common_soundness(self.computations, min_parties=2)
        super().__init__(soundness, random or self.computations[0].random)
        self.simulations = {}

    def wipe(self):
        super().wipe()
        self.simulations = {}
        for computation in self.computations:
            computation.wipe()

    def abort(self):
        super().abort()
        for computation in self.computations:
            computation.abort()

    def _first_msg(self, prover_input):
        _check_branch_count(prover_input.inputs, len(self.computations), "inputs")
        real = prover_input.real_index

        first_msgs = []
        for index, computation in enumerate(self.computations):
            sub_input = prover_input.inputs[index]
            if index == real:
                first_msgs.append(computation.compute_first_msg(sub_input))
            else:
                # Simulated shares are drawn before the challenge is known.
                simulation = computation.get_simulator().simulate(sub_input)
                self.simulations[index] = simulation
                first_msgs.append(simulation.first_msg)
        return MultipleMsg(first_msgs)

    def _second_msg(self, challenge):
        real = self.input.real_index
        real_challenge = _find_residual_challenge(
            [sim.challenge for sim in self.simulations.values()], challenge
        )
        real_second = self.computations[real].compute_second_msg(real_challenge)

        challenges = []
        messages = []
        for index in range(len(self.computations)):
            if index == real:
                challenges.append(real_challenge)
                messages.append(real_second)
            else:
                challenges.append(self.simulations[index].challenge)
                messages.append(self.simulations[index].second_msg)
        return ORSecondMsg(challenges, messages)

    def get_simulator(self):
        return SigmaORMultipleSimulator(
            [computation.get_simulator() for computation in self.computations],
            self.random,
        )


class SigmaORMultipleVerifierComputation(SigmaVerifierComputation):
    """
    Verifier of a disjunction of k statements.

    Accepts iff the challenge shares XOR to the challenge and every branch verifies on its share.
    All branches are checked even if an earlier check fails.

    Args:
        verifiers: Verifier computations, one per statement.
        random: Randomness source for the challenge.
    """

    input_cls = ORMultipleCommonInput
    first_msg_cls = MultipleMsg
    second_msg_cls = ORSecondMsg

    def __init__(self, verifiers, random=None):
        self.verifiers = list(verifiers)
        soundness = _common_soundness(self.verifiers, min_parties=2)
        super().__init__(soundness, random or self.verifiers[0].random)

    def _verify(self, common_input, first_msg, second_msg, challenge):
        k = len(self.verifiers)
        _check_branch_count(common_input.inputs, k, "inputs")
        if not (
            len(first_msg.messages)
            == len(second_msg.challenges)
            == len(second_msg.messages)
            == k
        ):
            logger.warning("OR proof does not have %i branches", k)
            return False
        for share in second_msg.challenges:
            self.check_challenge(share)

        verified = _find_residual_challenge(second_msg.challenges, challenge) == bytes(
            self.challenge_length
        )
        if not verified:
            logger.warning("OR challenge shares do not XOR to the challenge")

        for verifier, sub_input, a, share, z in zip(
            self.verifiers,
            common_input.inputs,
            first_msg.messages,
            second_msg.challenges,
            second_msg.messages,
        ):
            verifier.set_challenge(share)
            verified &= verifier.verify(sub_input, a, z)
        return verified


class SigmaORMultipleSimulator(SigmaSimulator):
    """
    Simulator of a disjunction: k - 1 random shares, and the last one completes the challenge.
    """

    input_cls = ORMultipleCommonInput

    def __init__(self, simulators, random=None):
        self.simulators = list(simulators)
        soundness = _common_soundness(self.simulators, min_parties=2)
        super().__init__(soundness, random or self.simulators[0].random)

    def _simulate(self, common_input, challenge):
        _check_branch_count(common_input.inputs, len(self.simulators), "inputs")
        shares = [
            self.random.random_bytes(self.challenge_length)
            for _ in self.simulators[:-1]
        ]
        shares.append(_find_residual_challenge(shares, challenge))

        outputs = [
            simulator.simulate(sub_input, share)
            for simulator, sub_input, share in zip(
                self.simulators, common_input.inputs, shares
            )
        ]
        return SimulatorOutput(
            MultipleMsg([out.first_msg for out in outputs]),
            challenge,
            ORSecondMsg(shares, [out.second_msg for out in outputs]),
        )
