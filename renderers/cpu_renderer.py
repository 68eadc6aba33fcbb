import logging
import math
import time
from multiprocessing import Pool
from typing import List

import numpy as np

from core.math import Color, Ray, Vec3
from core.material import HitRecord
from core.scene import Scene, RenderSettings
from renderers.base_renderer import BaseRenderer, RendererFactory

logger = logging.getLogger(__name__)

# 2차 광선(반사/굴절)이 출발 표면에 다시 걸리지 않도록 띄우는 거리
SURFACE_BIAS = 1e-4


def fresnel(direction: Vec3, normal: Vec3, ni_over_nt: float) -> float:
    """유전체 경계에서 반사되는 빛의 비율 (s, p 편광 평균).

    normal 은 입사 광선 쪽을 향해야 하며 전반사이면 1.0 을 돌려준다.
    """
    cos_i = min(1.0, max(0.0, -direction.dot(normal)))
    sin_t = ni_over_nt * math.sqrt(max(0.0, 1.0 - cos_i * cos_i))
    if sin_t >= 1.0:
        return 1.0
    cos_t = math.sqrt(max(0.0, 1.0 - sin_t * sin_t))
    rs = (ni_over_nt * cos_i - cos_t) / (ni_over_nt * cos_i + cos_t)
    rp = (cos_i - ni_over_nt * cos_t) / (cos_i + ni_over_nt * cos_t)
    return (rs * rs + rp * rp) / 2.0


# 워커 프로세스마다 한 번만 전달받는 읽기 전용 상태
_worker_state = {}


def _init_worker(renderer, scene, settings):
    _worker_state['renderer'] = renderer
    _worker_state['scene'] = scene
    _worker_state['settings'] = settings


def _render_row_task(y):
    state = _worker_state
    return y, state['renderer'].render_row(state['scene'], y, state['settings'])


class CPURenderer(BaseRenderer):
    """CPU 기반 Whitted 레이트레이싱 렌더러"""

    def __init__(self):
        super().__init__("cpu_raytracer")

    def get_capabilities(self) -> List[str]:
        return [
            "ray_tracing",
            "shadows",
            "phong_specular",
            "reflection",
            "refraction",
            "fresnel",
            "multiprocessing"
        ]

    def render(self, scene: Scene, settings: RenderSettings) -> np.ndarray:
        """메인 렌더링 함수"""
        scene.freeze()
        start_time = time.time()

        logger.info("CPU 렌더링 시작: %dx%d, depth %d, workers %d",
                    settings.width, settings.height, settings.max_depth, settings.workers)

        framebuffer = np.zeros((settings.height, settings.width, 3), dtype=np.float64)

        if settings.workers == 1:
            for y in range(settings.height):
                framebuffer[y] = self.render_row(scene, y, settings)
                self._log_progress(y, settings.height)
        else:
            # 각 줄은 서로 독립이므로 스캔라인 단위로 나눈다
            with Pool(processes=settings.workers,
                      initializer=_init_worker,
                      initargs=(self, scene, settings)) as pool:
                for done, (y, row) in enumerate(pool.imap_unordered(_render_row_task, range(settings.height))):
                    framebuffer[y] = row
                    self._log_progress(done, settings.height)

        elapsed = time.time() - start_time
        minutes = int(elapsed // 60)
        seconds = elapsed % 60
        logger.info("CPU 렌더링 완료: %d분 %.2f초", minutes, seconds)

        return framebuffer

    @staticmethod
    def _log_progress(done: int, total: int):
        if done % 50 == 0:
            logger.info("스캔라인 진행: %d / %d", done, total)

    def render_row(self, scene: Scene, y: int, settings: RenderSettings) -> List[tuple]:
        """한 스캔라인의 픽셀 색 목록. 병렬 작업의 단위."""
        camera = scene.camera
        if camera.aspect != settings.aspect_ratio:
            camera = camera.with_aspect(settings.aspect_ratio)

        row = []
        for x in range(settings.width):
            ray = camera.get_ray(x, y, settings.width, settings.height)
            row.append(self.trace(ray, scene, settings.max_depth).to_tuple())
        return row

    def trace(self, ray: Ray, scene: Scene, depth: int) -> Color:
        """레이트레이싱 함수. depth 는 남은 2차 광선 횟수."""
        rec = scene.nearest_hit(ray)
        if rec is None:
            return scene.background

        mat = rec.material
        color = self._shade_local(ray, rec, scene)

        if depth <= 0 or not (mat.reflective or mat.refractive):
            return color

        direction = ray.direction
        entering = direction.dot(rec.normal) < 0
        facing = rec.normal if entering else -rec.normal

        reflectance = 1.0
        ni_over_nt = 1.0
        if mat.refractive:
            ni_over_nt = 1.0 / mat.refractive_index if entering else mat.refractive_index
            reflectance = fresnel(direction, facing, ni_over_nt)

        # 1) Reflection
        reflected_color = None
        if mat.reflective:
            reflected_color = self._trace_reflection(ray, rec, facing, scene, depth)
            color = color + reflected_color * (mat.kr * reflectance)

        # 2) Refraction
        if mat.refractive:
            did_refract, refracted_dir = direction.refract(facing, ni_over_nt)
            if did_refract:
                refracted_ray = Ray(rec.point - facing * SURFACE_BIAS, refracted_dir)
                refracted_color = self.trace(refracted_ray, scene, depth - 1)
                color = color + refracted_color * (mat.kt * (1.0 - reflectance))
            else:
                # Total internal reflection: 투과될 에너지가 모두 반사된다
                if reflected_color is None:
                    reflected_color = self._trace_reflection(ray, rec, facing, scene, depth)
                color = color + reflected_color * mat.kt

        return color.clamp(0.0, 1.0)

    def _trace_reflection(self, ray: Ray, rec: HitRecord, facing: Vec3, scene: Scene, depth: int) -> Color:
        reflected_dir = ray.direction.reflect(rec.normal)
        reflected_ray = Ray(rec.point + facing * SURFACE_BIAS, reflected_dir)
        return self.trace(reflected_ray, scene, depth - 1)

    def _shade_local(self, ray: Ray, rec: HitRecord, scene: Scene) -> Color:
        """Ambient + 광원별 Diffuse/Specular (그림자 판정 포함)."""
        mat = rec.material
        base_color = mat.color
        view_dir = -ray.direction
        normal = rec.normal
        if rec.primitive.two_sided and normal.dot(ray.direction) > 0:
            normal = -normal

        # Ambient 는 그림자와 무관
        color = base_color * mat.ka

        for light in scene.lights:
            to_light = light.position - rec.point
            dist_to_light = to_light.length()
            if dist_to_light == 0:
                continue
            light_dir = to_light / dist_to_light

            # 출발 표면 자신은 교차 판정의 EPSILON 이 걸러낸다
            shadow_ray = Ray(rec.point, light_dir)
            if scene.occluded(shadow_ray, dist_to_light):
                continue

            diff = max(normal.dot(light_dir), 0.0)
            if diff == 0.0:
                continue

            radiance = light.radiance
            # Diffuse (Lambert)
            color = color + base_color * radiance * (mat.kd * diff)

            # Specular (Phong)
            if mat.ks > 0:
                reflect_dir = (-light_dir).reflect(normal)
                spec = max(view_dir.dot(reflect_dir), 0.0)
                color = color + radiance * (mat.ks * (spec ** mat.spec_exp))

        return color.clamp(0.0, 1.0)


# 렌더러 등록
RendererFactory.register("cpu_raytracer", CPURenderer)
