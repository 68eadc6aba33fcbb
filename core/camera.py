import math
from core.errors import SceneError
from core.math import Vec3, Ray


class Camera:
    def __init__(self,
                 lookfrom: Vec3 = None,
                 lookat: Vec3 = None,
                 vup: Vec3 = None,
                 vfov: float = 100.0,    # 수직 FOV(deg)
                 aspect: float = 1.6):   # 가로/세로 비율
        lookfrom = lookfrom if lookfrom is not None else Vec3(0, 0, 0)
        lookat = lookat if lookat is not None else lookfrom + Vec3(0, 0, -1)
        vup = vup if vup is not None else Vec3(0, 1, 0)
        if not 0 < vfov < 180:
            raise SceneError(f"field of view must be in (0, 180) degrees, got {vfov}")
        if not aspect > 0:
            raise SceneError(f"aspect ratio must be positive, got {aspect}")

        self.origin = lookfrom
        self.lookat = lookat
        self.vup = vup
        self.vfov = float(vfov)
        self.aspect = float(aspect)

        try:
            w = (lookfrom - lookat).normalize()
            u = vup.cross(w).normalize()
        except ValueError as e:
            raise SceneError(f"degenerate camera orientation: {e}") from e
        v = w.cross(u)

        self.u = u
        self.v = v
        self.w = w
        self.half_height = math.tan(math.radians(vfov) / 2)
        self.half_width = aspect * self.half_height

    def with_aspect(self, aspect: float) -> "Camera":
        return Camera(self.origin, self.lookat, self.vup, self.vfov, aspect)

    def get_ray(self, x: int, y: int, width: int, height: int) -> Ray:
        """픽셀 (x, y) 중심을 지나는 1차 광선. y=0 이 이미지 맨 윗줄."""
        px_ndc = (x + 0.5) / width
        py_ndc = (y + 0.5) / height
        cam_x = (2 * px_ndc - 1) * self.half_width
        cam_y = (1 - 2 * py_ndc) * self.half_height

        direction = self.u * cam_x + self.v * cam_y - self.w
        return Ray(self.origin, direction.normalize())
