"""
2D to 3D conversion package.

Handles conversion from the city plan to triangle meshes, plus OBJ and
native JSON export.
"""

from .mesh_buffers import MeshBuffers, MeshAccumulator
from .road_mesher import RoadMesher, road_quad
from .building_extruder import BuildingExtruder, extrude_footprint
from .obj_writer import ObjWriter
from .city_serializer import (
    CitySerializationError,
    city_to_dict,
    city_from_dict,
    save_city_json,
    load_city_json,
)

__all__ = [
    'MeshBuffers',
    'MeshAccumulator',
    'RoadMesher',
    'road_quad',
    'BuildingExtruder',
    'extrude_footprint',
    'ObjWriter',
    'CitySerializationError',
    'city_to_dict',
    'city_from_dict',
    'save_city_json',
    'load_city_json',
]
