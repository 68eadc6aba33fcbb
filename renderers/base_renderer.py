from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Type

import numpy as np

from core.scene import Scene, RenderSettings
from renderers.image_writer import save_image


class BaseRenderer(ABC):
    """렌더러 공통 인터페이스. render() 는 [0, 1] 로 clamp 된 프레임버퍼를 돌려준다."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def render(self, scene: Scene, settings: RenderSettings) -> np.ndarray:
        """(height, width, 3) 실수 배열, 행 우선 순서"""

    @abstractmethod
    def get_capabilities(self) -> List[str]:
        """지원 기능 이름 목록"""

    def render_to_file(self, scene: Scene, settings: RenderSettings, path) -> Path:
        framebuffer = self.render(scene, settings)
        return save_image(framebuffer, path)

    def get_name(self) -> str:
        return self.name

    def supports(self, feature: str) -> bool:
        return feature in self.get_capabilities()


class RendererFactory:
    """이름으로 렌더러 클래스를 찾아 생성한다."""

    _renderers: Dict[str, Type[BaseRenderer]] = {}

    @classmethod
    def register(cls, name: str, renderer_class: Type[BaseRenderer]):
        """새로운 렌더러를 등록"""
        cls._renderers[name] = renderer_class

    @classmethod
    def create(cls, name: str, **kwargs) -> BaseRenderer:
        if name not in cls._renderers:
            raise ValueError(f"Unknown renderer: {name} (available: {', '.join(cls.list_available())})")
        return cls._renderers[name](**kwargs)

    @classmethod
    def list_available(cls) -> List[str]:
        return sorted(cls._renderers)
