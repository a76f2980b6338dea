"""
Explicit configuration of the group and the protocol parameters.

Nothing is picked silently: a group comes from a :py:class:`GroupConfig`, either built in code
or read from an INI file with :py:func:`load_config`::

    [sigma]
    soundness = 80
    dj_length = 1

    [group]
    kind = zp
    p = 0x7f7
    q = 1019
    g = 4

Integers may be written in decimal or in hex with a ``0x`` prefix.
"""

import configparser
import logging

import attr

from zksigma.base import check_soundness_param
from zksigma.consts import DEFAULT_CURVE_NID, DEFAULT_DJ_LENGTH, DEFAULT_SOUNDNESS
from zksigma.exceptions import ConfigurationError, InvalidGroupError
from zksigma.groups import EcDlogGroup, ZpDlogGroup


logger = logging.getLogger(__name__)

GROUP_KINDS = ("ec", "zp")


def parse_int(value):
    """
    Parse a decimal or ``0x``-prefixed hex integer.

    >>> parse_int("0x10")
    16
    >>> parse_int(" 42 ")
    42
    """
    if isinstance(value, int):
        return value
    value = value.strip()
    try:
        if value.lower().startswith("0x"):
            return int(value, 16)
        return int(value, 10)
    except ValueError as e:
        raise ConfigurationError("Not an integer: %r" % value) from e


def _optional_int(value):
    return None if value is None else parse_int(value)


@attr.s
class GroupConfig:
    """
    Description of a group.

    Args:
        kind: ``"ec"`` for an elliptic curve, ``"zp"`` for a subgroup of Zp*.
        curve: OpenSSL curve identifier, for ``"ec"``.
        p: Safe prime, for ``"zp"``.
        q: Subgroup order, for ``"zp"``.
        g: Generator, for ``"zp"``.
    """

    kind = attr.ib(default="ec")
    curve = attr.ib(default=DEFAULT_CURVE_NID, converter=parse_int)
    p = attr.ib(default=None, converter=_optional_int)
    q = attr.ib(default=None, converter=_optional_int)
    g = attr.ib(default=None, converter=_optional_int)

    @kind.validator
    def _check_kind(self, attribute, value):
        if value not in GROUP_KINDS:
            raise ConfigurationError(
                "Unknown group kind %r, expected one of %s"
                % (value, ", ".join(GROUP_KINDS))
            )

    def build(self):
        """
        Instantiate and validate the group.

        Raises:
            :py:class:`zksigma.exceptions.InvalidGroupError`: If the curve is unknown or the
                parameters do not describe a valid group.
            :py:class:`zksigma.exceptions.ConfigurationError`: If Zp parameters are missing.
        """
        if self.kind == "ec":
            group = EcDlogGroup(self.curve)
        else:
            if None in (self.p, self.q, self.g):
                raise ConfigurationError("A zp group needs p, q, and g")
            group = ZpDlogGroup(self.p, self.q, self.g)
        if not group.validate_group():
            raise InvalidGroupError("Group %r does not validate" % group)
        logger.debug("Built group %r", group)
        return group


@attr.s
class SigmaConfig:
    """
    Protocol parameters.

    Args:
        soundness: Soundness parameter t in bits, a positive multiple of 8.
        dj_length: Length parameter s of Damgard-Jurik.
        group (:py:class:`GroupConfig`): Group description.
    """

    soundness = attr.ib(default=DEFAULT_SOUNDNESS, converter=parse_int)
    dj_length = attr.ib(default=DEFAULT_DJ_LENGTH, converter=parse_int)
    group = attr.ib(factory=GroupConfig)

    def __attrs_post_init__(self):
        check_soundness_param(self.soundness)
        if self.dj_length < 1:
            raise ConfigurationError(
                "dj_length must be at least 1, got %i" % self.dj_length
            )

    def build_group(self):
        return self.group.build()


def load_config(path):
    """
    Read a :py:class:`SigmaConfig` from an INI file. Absent sections and keys take their
    defaults.

    Raises:
        :py:class:`zksigma.exceptions.ConfigurationError`: If the file cannot be read or holds a
            malformed value.
    """
    parser = configparser.ConfigParser()
    try:
        read = parser.read(path)
    except configparser.Error as e:
        raise ConfigurationError("Cannot parse %s" % path) from e
    if not read:
        raise ConfigurationError("Cannot read configuration file %s" % path)

    sigma = dict(parser["sigma"]) if parser.has_section("sigma") else {}
    group = dict(parser["group"]) if parser.has_section("group") else {}
    unknown = set(group) - {"kind", "curve", "p", "q", "g"}
    unknown |= set(sigma) - {"soundness", "dj_length"}
    if unknown:
        raise ConfigurationError(
            "Unknown configuration keys: %s" % ", ".join(sorted(unknown))
        )

    if "kind" in group:
        group["kind"] = group["kind"].strip().lower()
    return SigmaConfig(group=GroupConfig(**group), **sigma)
