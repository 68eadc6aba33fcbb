from core.errors import SceneError
from core.math import Color, Vec3


class Material:
    def __init__(self,
                 color: Color = None,
                 ka=0.1,
                 kd=0.7,
                 ks=0.0,
                 spec_exp=8.0,
                 kr=0.0,
                 kt=0.0,
                 refractive_index=1.0,
                 reflective=False,
                 refractive=False,
                 name: str = None):
        """
        color: 표면 기본 색
        ka / kd / ks: ambient / diffuse / specular 계수
        spec_exp: Phong 스페큘러 지수
        kr: 반사 계수 (reflective=True 일 때만 사용)
        kt: 투과 계수 (refractive=True 일 때만 사용)
        refractive_index: 굴절률(Index of Refraction)
        """
        for key, value in (("ka", ka), ("kd", kd), ("ks", ks), ("spec_exp", spec_exp),
                           ("kr", kr), ("kt", kt), ("refractive_index", refractive_index)):
            if value < 0:
                raise SceneError(f"material {name or '<anonymous>'}: {key} must be non-negative, got {value}")
        if refractive and refractive_index <= 0:
            raise SceneError(f"material {name or '<anonymous>'}: refractive material needs refractive_index > 0")

        self.color = color if color is not None else Color.white()
        self.ka = float(ka)
        self.kd = float(kd)
        self.ks = float(ks)
        self.spec_exp = float(spec_exp)
        self.kr = float(kr)
        self.kt = float(kt)
        self.refractive_index = float(refractive_index)
        self.reflective = bool(reflective)
        self.refractive = bool(refractive)
        self.name = name

    def __repr__(self):
        return f"Material({self.name or self.color!r})"


class HitRecord:
    """광선 하나의 최근접 교차 정보. 셰이딩 한 번 동안만 쓰인다."""

    def __init__(self, t: float, primitive, point: Vec3, normal: Vec3):
        self.t = t
        self.primitive = primitive
        self.point = point
        self.normal = normal

    @property
    def material(self) -> Material:
        return self.primitive.material
