"""
Package-wide defaults.
"""

# NIST P-224. Order is 224 bits, so any soundness up to 216 bits fits.
DEFAULT_CURVE_NID = 713

# Soundness parameter in bits. Challenges are t / 8 bytes long.
DEFAULT_SOUNDNESS = 80

# Length parameter s of Damgard-Jurik (s = 1 is Paillier).
DEFAULT_DJ_LENGTH = 1
