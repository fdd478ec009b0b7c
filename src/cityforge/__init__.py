"""
cityforge: procedural city generation.

Subdivides a rectangular area into blocks separated by a planar road
network, meshes the roads, cuts blocks into lots and extrudes buildings.
"""

__version__ = "0.1.0"
