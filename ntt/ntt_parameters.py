from dataclasses import dataclass

from .constants import MOD, FFT_CUTOFF


@dataclass
class NTTParameters:
    modulus: int
    fft_cutoff: int
    verbose: bool = False


DEFAULT_PARAMETERS = NTTParameters(
    modulus=MOD,
    fft_cutoff=FFT_CUTOFF,
)
