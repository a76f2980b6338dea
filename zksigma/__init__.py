__version__ = "0.1.0"
__title__ = "zksigma"
__author__ = "zksigma developers"
__email__ = ""
__url__ = ""
__license__ = "MIT"
__description__ = "Sigma protocols with AND/OR composition, over petlib groups."
__copyright__ = "2020, zksigma developers"


from zksigma.groups import EcDlogGroup, ZpDlogGroup
from zksigma.protocol import SigmaProver, SigmaVerifier
from zksigma.utils import make_generators
