"""
The ZCAM color appearance model and the sRGB gamut boundary in ZCAM.
"""
from .conversion import parse_hex, srgb_to_hex
from .gamut import Gamut
from .hashtable import Float64Table, init_runtime_seed, pack_key
from .spec import (
    BuildStep,
    ConvergenceError,
    CuspPoint,
    GamutConfig,
    MissingAttributeError,
    PerceptualColor,
    Surround,
    ViewingConditions,
)
from .zcam import (
    DEFAULT_VIEWING,
    complete,
    find_cusp,
    srgb_to_zcam,
    xyz_to_zcam,
    zcam_to_linear_srgb,
    zcam_to_xyz,
)

__all__ = [
    'BuildStep',
    'ConvergenceError',
    'CuspPoint',
    'DEFAULT_VIEWING',
    'Float64Table',
    'Gamut',
    'GamutConfig',
    'MissingAttributeError',
    'PerceptualColor',
    'Surround',
    'ViewingConditions',
    'complete',
    'find_cusp',
    'init_runtime_seed',
    'pack_key',
    'parse_hex',
    'srgb_to_hex',
    'srgb_to_zcam',
    'xyz_to_zcam',
    'zcam_to_linear_srgb',
    'zcam_to_xyz',
]
