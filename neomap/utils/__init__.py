"""
Utility modules for the neomap package.
"""

from .serialization import is_spatial_point, point_component, to_jsonable

__all__ = [
    'is_spatial_point',
    'point_component',
    'to_jsonable',
]
