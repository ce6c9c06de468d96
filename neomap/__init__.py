"""
neomap - graph query results on a geographic map.
"""

__version__ = "1.0.0"
