"""
Messages exchanged by Sigma protocols and commitment schemes.

Every message is a plain ``attrs`` class registered with :py:mod:`petlib.pack`, so that it can
be sent over a channel with :py:func:`petlib.pack.encode` and read back with
:py:func:`petlib.pack.decode`. The field order of a message is its wire format.

Group elements inside messages are sent as they are: petlib encodes :py:class:`petlib.ec.EcPt`
natively, and :py:class:`zksigma.groups.ZpElement` has its own coder.
"""

import attr

from petlib.pack import encode, decode, register_coders


@attr.s
class GroupElementMsg:
    """Single group element, e.g., a = g^r."""

    element = attr.ib()


@attr.s
class BIMsg:
    """Single big integer, e.g., z = r + ew."""

    z = attr.ib()


@attr.s
class DHMsg:
    """First message of the DH-tuple protocol: (g^r, h^r)."""

    a = attr.ib()
    b = attr.ib()


@attr.s
class DHExtendedMsg:
    """First message of the extended DH protocol: g_i^r for every base."""

    elements = attr.ib(converter=list)


@attr.s
class PedersenCmtKnowledgeMsg:
    """Second message of the Pedersen knowledge protocol."""

    u = attr.ib()
    v = attr.ib()


@attr.s
class MultipleMsg:
    """One message per composed branch."""

    messages = attr.ib(converter=list)


@attr.s
class ORTwoFirstMsg:
    """First message of the two-way OR composition."""

    first0 = attr.ib()
    first1 = attr.ib()


@attr.s
class ORSecondMsg:
    """
    Second message of an OR composition: the challenge share and the response of each branch.
    """

    challenges = attr.ib(converter=list)
    messages = attr.ib(converter=list)


@attr.s
class DJProductFirstMsg:
    a1 = attr.ib()
    a2 = attr.ib()


@attr.s
class DJProductSecondMsg:
    z1 = attr.ib()
    z2 = attr.ib()
    z3 = attr.ib()


@attr.s
class FiatShamirProof:
    """
    Non-interactive proof: the first message, the hashed challenge, and the response.
    """

    first_msg = attr.ib()
    challenge = attr.ib()
    second_msg = attr.ib()


@attr.s
class PedersenPreprocessMsg:
    """Second base of a Pedersen commitment, chosen by the receiver."""

    h = attr.ib()


@attr.s
class PedersenCommitmentMsg:
    commitment = attr.ib()
    cid = attr.ib()


@attr.s
class PedersenDecommitmentMsg:
    x = attr.ib()
    r = attr.ib()


@attr.s
class PedersenTrapdoorMsg:
    """Receiver's trapdoor, revealed once the commitment has served its purpose."""

    trapdoor = attr.ib()


# Ext type codes are part of the wire format. Do not reorder.
MESSAGE_CODES = [
    (GroupElementMsg, 20),
    (BIMsg, 21),
    (DHMsg, 22),
    (DHExtendedMsg, 23),
    (PedersenCmtKnowledgeMsg, 24),
    (MultipleMsg, 25),
    (ORTwoFirstMsg, 26),
    (ORSecondMsg, 27),
    (DJProductFirstMsg, 28),
    (DJProductSecondMsg, 29),
    (FiatShamirProof, 30),
    (PedersenPreprocessMsg, 31),
    (PedersenCommitmentMsg, 32),
    (PedersenDecommitmentMsg, 33),
    (PedersenTrapdoorMsg, 34),
]


def _make_coders(cls):
    names = [field.name for field in attr.fields(cls)]

    def enc(obj):
        return encode([getattr(obj, name) for name in names])

    def dec(data):
        return cls(*decode(data))

    return enc, dec


for _cls, _code in MESSAGE_CODES:
    register_coders(_cls, _code, *_make_coders(_cls))
