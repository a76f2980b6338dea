"""
Utils that can be useful for debugging.
"""


class SigmaProtocol:
    """
    In-process Sigma-protocol runner. No channel, no serialization.

    Args:
        verifier: Verifier computation
        prover: Prover computation
    """

    def __init__(self, verifier, prover):
        self.verifier = verifier
        self.prover = prover

    def verify(self, prover_input, challenge=None, verbose=True):
        """Run the three moves and verify the transcript."""

        # Funky names.
        victor = self.verifier
        peggy = self.prover

        first_msg = peggy.compute_first_msg(prover_input)
        if challenge is None:
            victor.sample_challenge()
        else:
            victor.set_challenge(challenge)
        second_msg = peggy.compute_second_msg(victor.get_challenge())
        result = victor.verify(prover_input.common_input, first_msg, second_msg)

        if verbose:
            if result:
                print("Verified for {0}".format(victor.__class__.__name__))
            else:
                print("Not verified for {0}".format(victor.__class__.__name__))

        return result
