import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from core.camera import Camera
from core.errors import SceneError
from core.geometry import Primitive, TriangleMesh
from core.light import Light
from core.material import HitRecord
from core.math import Color, Ray

logger = logging.getLogger(__name__)

__all__ = ["RenderSettings", "Scene", "SceneError"]


@dataclass
class RenderSettings:
    width: int = 800
    height: int = 500
    max_depth: int = 5
    workers: int = 1

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"image size must be positive, got {self.width}x{self.height}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class Scene:
    """도형, 광원, 카메라, 배경색을 담는 컨테이너.

    freeze() 이후에는 읽기 전용이며 여러 워커가 동시에 참조한다.
    """

    def __init__(self, camera: Camera = None, background: Color = None):
        self.objects: Sequence[Primitive] = []
        self.lights: Sequence[Light] = []
        self.camera = camera if camera is not None else Camera()
        self.background = background if background is not None else Color(0.0, 0.5, 0.5)
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self):
        if self._frozen:
            raise SceneError("scene is frozen and can no longer be modified")

    def add_object(self, obj):
        self._check_mutable()
        if isinstance(obj, TriangleMesh):
            for tri in obj:
                self.add_object(tri)
            return
        if not isinstance(obj, Primitive):
            raise SceneError(f"not a primitive: {obj!r}")
        if obj.material is None:
            raise SceneError(f"primitive without material: {obj!r}")
        self.objects.append(obj)

    def add_light(self, light: Light):
        self._check_mutable()
        self.lights.append(light)

    def freeze(self) -> "Scene":
        if not self._frozen:
            self.objects = tuple(self.objects)
            self.lights = tuple(self.lights)
            self._frozen = True
            logger.debug("씬 고정: 도형 %d개, 광원 %d개", len(self.objects), len(self.lights))
        return self

    def nearest_hit(self, ray: Ray) -> Optional[HitRecord]:
        closest = None
        closest_dist = float('inf')

        for obj in self.objects:
            dist = obj.intersect(ray)
            # 거리가 완전히 같으면 먼저 나온 도형이 이긴다
            if dist is not None and dist < closest_dist:
                closest_dist = dist
                closest = obj

        if closest is None:
            return None
        point = ray.point_at(closest_dist)
        return HitRecord(closest_dist, closest, point, closest.normal_at(point))

    def occluded(self, ray: Ray, max_dist: float) -> bool:
        for obj in self.objects:
            dist = obj.intersect(ray)
            if dist is not None and dist < max_dist:
                return True
        return False

    def __repr__(self):
        return f"Scene({len(self.objects)} objects, {len(self.lights)} lights)"
