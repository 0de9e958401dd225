"""
Mapping colors into the sRGB gamut in the ZCAM color appearance model.
"""
from .color import Gamut, GamutConfig, PerceptualColor, ViewingConditions

__version__ = '0.1.0'

__all__ = ['Gamut', 'GamutConfig', 'PerceptualColor', 'ViewingConditions']
