from zksigma.utils.groups import make_generators, get_random_unit
from zksigma.utils.misc import (
    SecureRandom,
    bn_to_bytes,
    challenge_to_bn,
    is_coprime,
    to_bn,
    xor_bytes,
)
