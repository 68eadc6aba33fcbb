import argparse
import logging
import sys

from core.errors import SceneError
from core.logging_config import setup_logging
from core.scene import RenderSettings
from renderers.base_renderer import RendererFactory
from scene_builders.demo_scene_builder import DemoSceneBuilder
from scene_builders.yaml_scene_builder import YamlSceneBuilder

# 렌더러 모듈들 import (등록을 위해)
import renderers.cpu_renderer  # noqa: F401

logger = logging.getLogger("main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Recursive Whitted-style Ray Tracer')
    parser.add_argument('--renderer', '-r',
                        choices=RendererFactory.list_available(),
                        default='cpu_raytracer',
                        help='렌더러 선택')
    parser.add_argument('--scene',
                        default='demo',
                        help="'demo' 또는 YAML 장면 파일 경로")
    parser.add_argument('--width', '-w', type=int, default=800,
                        help='이미지 가로 크기')
    parser.add_argument('--height', type=int, default=500,
                        help='이미지 세로 크기')
    parser.add_argument('--depth', '-d', type=int, default=5,
                        help='최대 재귀 깊이')
    parser.add_argument('--fov', type=float, default=None,
                        help='수직 FOV(deg). 지정하면 장면의 값을 덮어쓴다')
    parser.add_argument('--workers', '-j', type=int, default=1,
                        help='스캔라인을 나눠 처리할 프로세스 수')
    parser.add_argument('--output', '-o', default='output.png',
                        help='출력 파일명')
    parser.add_argument('--log-level', default='INFO',
                        help='DEBUG, INFO, WARNING, ERROR')
    parser.add_argument('--log-file', default=None,
                        help='로그 파일 경로 (선택)')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        # 렌더링 설정
        settings = RenderSettings(
            width=args.width,
            height=args.height,
            max_depth=args.depth,
            workers=args.workers
        )

        # 씬 생성
        logger.info("장면 생성 중: %s", args.scene)
        if args.scene == 'demo':
            builder = DemoSceneBuilder()
            if args.fov is not None:
                builder.vfov = args.fov
        else:
            builder = YamlSceneBuilder.from_file(args.scene)
            if args.fov is not None:
                camera = builder.document.get('camera') or {}
                camera['fov'] = args.fov
                builder.document['camera'] = camera
        scene = builder.build_scene(settings.aspect_ratio)

        renderer = RendererFactory.create(args.renderer)
        logger.info("렌더러: %s (%s)", renderer.get_name(), ', '.join(renderer.get_capabilities()))

        renderer.render_to_file(scene, settings, args.output)
    except (SceneError, OSError, ValueError) as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
