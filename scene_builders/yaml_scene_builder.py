import logging
import os
from numbers import Real
from typing import Any, Dict, Optional

import yaml

from core.camera import Camera
from core.errors import SceneError
from core.geometry import Plane, Sphere, Triangle
from core.light import Light
from core.material import Material
from core.math import Color, Vec3
from core.mesh_io import load_mesh
from core.scene import Scene

logger = logging.getLogger(__name__)

# YAML 키 -> Material 인자
MATERIAL_KEYS = {
    'ka': 'ka',
    'kd': 'kd',
    'ks': 'ks',
    'kr': 'kr',
    'kt': 'kt',
    'specRefExp': 'spec_exp',
    'refractiveIdx': 'refractive_index',
    'reflective': 'reflective',
    'refractive': 'refractive',
}


def _strip_directive(text: str) -> str:
    # OpenCV 식 '%YAML:1.0' 헤더는 PyYAML 이 읽지 못한다
    lines = text.splitlines()
    while lines and lines[0].startswith('%YAML:'):
        lines.pop(0)
    return '\n'.join(lines)


def _require(entry: Dict[str, Any], key: str, where: str):
    if key not in entry:
        raise SceneError(f"{where}: missing key {key!r}")
    return entry[key]


def _number(value, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise SceneError(f"{where}: expected a number, got {value!r}")
    return float(value)


def _vec3(value, where: str) -> Vec3:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise SceneError(f"{where}: expected [x, y, z], got {value!r}")
    return Vec3(*(_number(v, where) for v in value))


def _literal_color(value, where: str) -> Color:
    if isinstance(value, (list, tuple)):
        if len(value) != 3:
            raise SceneError(f"{where}: expected [r, g, b], got {value!r}")
        return Color(*(_number(v, where) for v in value))
    return Color.gray(_number(value, where))


class YamlSceneBuilder:
    """YAML 장면 파일(colors / materials / lights / primitives)을 Scene 으로 변환한다."""

    def __init__(self, document: Dict[str, Any], base_dir: str = '.'):
        if not isinstance(document, dict):
            raise SceneError("scene document must be a mapping")
        self.document = document
        self.base_dir = base_dir
        self.colors: Dict[str, Color] = {}
        self.materials: Dict[str, Material] = {}

    @classmethod
    def from_string(cls, text: str, base_dir: str = '.') -> "YamlSceneBuilder":
        try:
            document = yaml.safe_load(_strip_directive(text))
        except yaml.YAMLError as e:
            raise SceneError(f"invalid scene YAML: {e}") from e
        return cls(document or {}, base_dir)

    @classmethod
    def from_file(cls, path: str) -> "YamlSceneBuilder":
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
        logger.info("장면 파일 읽기: %s", path)
        return cls.from_string(text, base_dir=os.path.dirname(os.path.abspath(path)))

    def build_scene(self, aspect_ratio: float = 800 / 500) -> Scene:
        self.colors = self._parse_colors(self.document.get('colors') or {})
        self.materials = self._parse_materials(self.document.get('materials') or {})

        background = Color(0.0, 0.5, 0.5)
        if 'background' in self.document:
            background = self._color(self.document['background'], 'background')

        scene = Scene(camera=self._parse_camera(self.document.get('camera') or {}, aspect_ratio),
                      background=background)

        for i, entry in enumerate(self.document.get('lights') or []):
            scene.add_light(self._parse_light(entry, f"lights[{i}]"))

        for i, entry in enumerate(self.document.get('primitives') or []):
            scene.add_object(self._parse_primitive(entry, f"primitives[{i}]"))

        logger.info("장면 생성 완료: 도형 %d개, 광원 %d개, 재질 %d개",
                    len(scene.objects), len(scene.lights), len(self.materials))
        return scene.freeze()

    def _parse_colors(self, section) -> Dict[str, Color]:
        if not isinstance(section, dict):
            raise SceneError("colors: expected a mapping")
        return {name: _literal_color(value, f"colors.{name}") for name, value in section.items()}

    def _color(self, value, where: str) -> Color:
        if isinstance(value, str):
            if value not in self.colors:
                raise SceneError(f"{where}: unknown color {value!r}")
            return self.colors[value]
        return _literal_color(value, where)

    def _parse_materials(self, section) -> Dict[str, Material]:
        if not isinstance(section, dict):
            raise SceneError("materials: expected a mapping")
        materials = {}
        for name, entry in section.items():
            where = f"materials.{name}"
            entry = entry or {}
            if not isinstance(entry, dict):
                raise SceneError(f"{where}: expected a mapping")
            kwargs = {}
            for key, value in entry.items():
                if key == 'color':
                    kwargs['color'] = self._color(value, where)
                elif key in ('reflective', 'refractive'):
                    kwargs[MATERIAL_KEYS[key]] = bool(value)
                elif key in MATERIAL_KEYS:
                    kwargs[MATERIAL_KEYS[key]] = _number(value, f"{where}.{key}")
                else:
                    logger.warning("%s: 알 수 없는 키 %r 무시", where, key)
            materials[name] = Material(name=name, **kwargs)
            logger.debug("재질 %s: %r", name, kwargs)
        return materials

    def _material(self, entry: Dict[str, Any], where: str) -> Material:
        name = _require(entry, 'material', where)
        if name not in self.materials:
            raise SceneError(f"{where}: unknown material {name!r}")
        return self.materials[name]

    def _parse_light(self, entry, where: str) -> Light:
        if not isinstance(entry, dict):
            raise SceneError(f"{where}: expected a mapping")
        position = _vec3(_require(entry, 'pos', where), f"{where}.pos")
        color = self._color(entry.get('color', 1.0), f"{where}.color")
        factor = _number(entry.get('factor', 1.0), f"{where}.factor")
        return Light(position, color, factor)

    def _parse_primitive(self, entry, where: str):
        if not isinstance(entry, dict):
            raise SceneError(f"{where}: expected a mapping")
        kind = _require(entry, 'type', where)
        material = self._material(entry, where)

        if kind == 'sphere':
            return Sphere(_vec3(_require(entry, 'center', where), f"{where}.center"),
                          _number(_require(entry, 'radius', where), f"{where}.radius"),
                          material)
        if kind == 'plane':
            return Plane(_vec3(_require(entry, 'normal', where), f"{where}.normal"),
                         _number(_require(entry, 'distance', where), f"{where}.distance"),
                         material)
        if kind == 'triangle':
            vertices = _require(entry, 'vertices', where)
            if not isinstance(vertices, list) or len(vertices) != 3:
                raise SceneError(f"{where}.vertices: expected three points")
            v0, v1, v2 = (_vec3(v, f"{where}.vertices") for v in vertices)
            return Triangle(v0, v1, v2, material)
        if kind == 'mesh':
            filename = _require(entry, 'filename', where)
            if not os.path.isabs(filename):
                filename = os.path.join(self.base_dir, filename)
            if not os.path.exists(filename):
                raise SceneError(f"{where}: mesh file not found: {filename}")
            return load_mesh(filename, material,
                             scale=_number(entry.get('scale', 1.0), f"{where}.scale"),
                             rotation=tuple(_vec3(entry.get('rotation', [0, 0, 0]), f"{where}.rotation")),
                             translation=tuple(_vec3(entry.get('translation', [0, 0, 0]), f"{where}.translation")))

        raise SceneError(f"{where}: unknown primitive type {kind!r}")

    def _parse_camera(self, section, aspect_ratio: float) -> Camera:
        if not isinstance(section, dict):
            raise SceneError("camera: expected a mapping")
        origin: Optional[Vec3] = None
        lookat: Optional[Vec3] = None
        vup: Optional[Vec3] = None
        if 'origin' in section:
            origin = _vec3(section['origin'], 'camera.origin')
        if 'lookat' in section:
            lookat = _vec3(section['lookat'], 'camera.lookat')
        if 'up' in section:
            vup = _vec3(section['up'], 'camera.up')
        fov = _number(section.get('fov', 100.0), 'camera.fov')
        return Camera(origin, lookat, vup, fov, aspect_ratio)
