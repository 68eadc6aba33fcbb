import math
from abc import ABC, abstractmethod
from typing import List, Optional

from core.errors import SceneError
from core.material import Material
from core.math import EPSILON, Ray, Vec3


class Primitive(ABC):
    """렌더링 가능한 모든 도형의 공통 인터페이스."""

    material: Material
    # 양면 도형은 셰이딩 시 법선을 시점 쪽으로 뒤집는다
    two_sided = False

    @abstractmethod
    def intersect(self, ray: Ray) -> Optional[float]:
        """광선과의 교차 거리. 유효한 교차가 없으면 None."""

    @abstractmethod
    def normal_at(self, point: Vec3) -> Vec3:
        """표면 위의 점에서의 단위 법선 (바깥 방향)."""


class Sphere(Primitive):
    def __init__(self, center: Vec3, radius: float, material: Material):
        if not radius > 0:
            raise SceneError(f"sphere radius must be positive, got {radius}")
        self.center = center
        self.radius = float(radius)
        self.material = material

    def intersect(self, ray: Ray) -> Optional[float]:
        # (l . (o - c))^2 - |o - c|^2 + r^2
        temp = ray.origin - self.center
        a = temp.dot(ray.direction)
        b = temp.length()
        c2 = a * a - b * b + self.radius * self.radius
        if c2 < 0:
            return None

        root = math.sqrt(c2)
        dist1 = -a + root
        dist2 = -a - root

        # 광선 시작점이 구 내부면 뒤쪽 근(출구)을, 아니면 가까운 근을 택한다
        if dist1 < 0 or dist2 < 0:
            dist = max(dist1, dist2)
        else:
            dist = min(dist1, dist2)

        # 음수는 광선 뒤쪽, EPSILON 은 출발 표면 자신과의 교차 방지
        if dist > EPSILON:
            return dist
        return None

    def normal_at(self, point: Vec3) -> Vec3:
        return (point - self.center) / self.radius

    def __repr__(self):
        return f"Sphere({self.center!r}, {self.radius})"


class Plane(Primitive):
    """n . p + distance = 0 을 만족하는 무한 평면."""

    two_sided = True

    def __init__(self, normal: Vec3, distance: float, material: Material):
        if normal.length() == 0:
            raise SceneError("plane normal must be non-zero")
        self.normal = normal.normalize()
        self.distance = float(distance)
        self.material = material

    def intersect(self, ray: Ray) -> Optional[float]:
        denom = self.normal.dot(ray.direction)
        if abs(denom) < 1e-6:
            return None  # 광선과 평면이 평행

        t = -(self.normal.dot(ray.origin) + self.distance) / denom
        if t > EPSILON:
            return t
        return None

    def normal_at(self, point: Vec3) -> Vec3:
        return self.normal

    def __repr__(self):
        return f"Plane({self.normal!r}, {self.distance})"


class Triangle(Primitive):
    two_sided = True

    def __init__(self, v0: Vec3, v1: Vec3, v2: Vec3, material: Material):
        self.v0 = v0
        self.v1 = v1
        self.v2 = v2
        self.material = material
        self.edge1 = v1 - v0
        self.edge2 = v2 - v0
        n = self.edge1.cross(self.edge2)
        if n.length() == 0:
            raise SceneError(f"degenerate triangle {v0!r}, {v1!r}, {v2!r}")
        self.normal = n.normalize()

    def intersect(self, ray: Ray) -> Optional[float]:
        # Möller–Trumbore
        h = ray.direction.cross(self.edge2)
        a = self.edge1.dot(h)
        if abs(a) < 1e-8:
            return None  # 평행

        f = 1.0 / a
        s = ray.origin - self.v0
        u = f * s.dot(h)
        if u < 0.0 or u > 1.0:
            return None

        q = s.cross(self.edge1)
        v = f * ray.direction.dot(q)
        if v < 0.0 or u + v > 1.0:
            return None

        t = f * self.edge2.dot(q)
        if t > EPSILON:
            return t
        return None

    def normal_at(self, point: Vec3) -> Vec3:
        return self.normal

    def __repr__(self):
        return f"Triangle({self.v0!r}, {self.v1!r}, {self.v2!r})"


class TriangleMesh:
    """같은 재질을 공유하는 삼각형 묶음.

    씬에 추가될 때 개별 Triangle 로 펼쳐지므로 최근접 교차 탐색은
    여전히 단순 선형 탐색이다.
    """

    def __init__(self, triangles: List[Triangle], material: Material, name: str = None):
        self.triangles = triangles
        self.material = material
        self.name = name

    def __len__(self):
        return len(self.triangles)

    def __iter__(self):
        return iter(self.triangles)
