"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.camera import Camera  # noqa: E402
from core.material import Material  # noqa: E402
from core.math import Color  # noqa: E402
from core.scene import Scene  # noqa: E402
from renderers.cpu_renderer import CPURenderer  # noqa: E402


@pytest.fixture
def renderer():
    return CPURenderer()


@pytest.fixture
def background():
    return Color(0.0, 0.5, 0.5)


@pytest.fixture
def make_scene(background):
    """Build a frozen scene from primitives and lights, camera at the origin looking down -z."""
    def _make(objects=(), lights=(), aspect=1.0):
        scene = Scene(camera=Camera(vfov=90.0, aspect=aspect), background=background)
        for obj in objects:
            scene.add_object(obj)
        for light in lights:
            scene.add_light(light)
        return scene.freeze()
    return _make


@pytest.fixture
def ambient_only():
    """Material whose shaded color is color * ka, independent of lights."""
    def _make(color=None, ka=1.0):
        return Material(color=color or Color.red(), ka=ka, kd=0.0, ks=0.0)
    return _make


@pytest.fixture(scope="session")
def scenes_dir():
    return project_root / "scenes"
