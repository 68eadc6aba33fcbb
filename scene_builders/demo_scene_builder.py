from core.camera import Camera
from core.geometry import Sphere
from core.light import Light
from core.material import Material
from core.math import Color, Vec3
from core.scene import Scene


class DemoSceneBuilder:
    """원래 예제 장면: 빨간 구 다섯 개 + 흰 점광원 하나, 청록 배경.
    두 개의 구는 거울/유리 재질로 바꿔 반사와 굴절을 확인한다."""

    def __init__(self):
        self.background = Color(0.0, 0.5, 0.5)
        self.vfov = 100.0

    def build_scene(self, aspect_ratio: float = 800 / 500) -> Scene:
        scene = Scene(camera=self.create_camera(aspect_ratio), background=self.background)

        materials = self._create_materials()
        self._create_spheres(scene, materials)
        self._create_lighting(scene)

        return scene.freeze()

    def create_camera(self, aspect_ratio: float) -> Camera:
        # 원점에서 -z 방향을 바라봄
        return Camera(Vec3(0, 0, 0), Vec3(0, 0, -1), Vec3(0, 1, 0), self.vfov, aspect_ratio)

    def _create_materials(self) -> dict:
        return {
            'red': Material(color=Color.red(), ka=0.1, kd=1.0, name='red'),
            'mirror': Material(color=Color.white(), ka=0.0, kd=0.1, ks=0.5, spec_exp=32,
                               kr=0.9, reflective=True, name='mirror'),
            'glass': Material(color=Color(0.01, 0.1, 1.0), ka=0.05, kd=0.1, ks=0.2,
                              kr=0.8, kt=0.8, refractive_index=1.5,
                              reflective=True, refractive=True, name='glass'),
        }

    def _create_spheres(self, scene: Scene, materials: dict):
        scene.add_object(Sphere(Vec3(0, 0, -20), 5, materials['red']))
        scene.add_object(Sphere(Vec3(2, 1, -15), 1, materials['red']))
        scene.add_object(Sphere(Vec3(4, 4, -22), 2.5, materials['mirror']))
        scene.add_object(Sphere(Vec3(80, -6, -150), 5, materials['red']))
        scene.add_object(Sphere(Vec3(-4, 4, -5), 2.5, materials['glass']))

    def _create_lighting(self, scene: Scene):
        scene.add_light(Light(Vec3(30, 30, -2), Color.white()))
