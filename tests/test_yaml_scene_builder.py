"""Tests for loading scenes from YAML documents."""

import textwrap

import pytest

from core.errors import SceneError
from core.geometry import Plane, Sphere, Triangle
from core.math import Color, Vec3
from scene_builders.yaml_scene_builder import YamlSceneBuilder


def build(text, **kwargs):
    return YamlSceneBuilder.from_string(textwrap.dedent(text)).build_scene(**kwargs)


MINIMAL = """
    colors:
      red: [1, 0, 0]
      white: 1
    materials:
      shiny:
        color: red
        ka: 0.2
        ks: 0.5
        specRefExp: 16
        reflective: true
        kr: 0.4
      plain:
        color: white
    lights:
      - pos: [0, 5, 0]
        color: white
        factor: 2.5
    primitives:
      - type: sphere
        center: [0, 0, -10]
        radius: 2
        material: shiny
      - type: sphere
        center: [3, 0, -10]
        radius: 1
        material: shiny
      - type: plane
        normal: [0, 1, 0]
        distance: 3
        material: plain
      - type: triangle
        vertices: [[0, 0, -5], [1, 0, -5], [0, 1, -5]]
        material: plain
"""


class TestYamlSceneBuilder:

    def test_resolves_scene_graph(self):
        scene = build(MINIMAL)
        assert scene.frozen
        assert [type(o) for o in scene.objects] == [Sphere, Sphere, Plane, Triangle]
        assert len(scene.lights) == 1
        assert scene.lights[0].intensity == 2.5
        assert scene.lights[0].color == Color(1, 1, 1)

    def test_materials_are_shared_and_resolved(self):
        scene = build(MINIMAL)
        first, second = scene.objects[0], scene.objects[1]
        assert first.material is second.material
        m = first.material
        assert m.name == 'shiny'
        assert m.color == Color(1, 0, 0)
        assert (m.ka, m.ks, m.spec_exp, m.kr) == (0.2, 0.5, 16.0, 0.4)
        assert m.reflective and not m.refractive

    def test_missing_material_keys_take_defaults(self):
        m = build(MINIMAL).objects[2].material
        assert (m.ka, m.kd, m.ks, m.kr, m.kt) == (0.1, 0.7, 0.0, 0.0, 0.0)
        assert m.color == Color.gray(1.0)

    def test_opencv_directive_is_accepted(self):
        scene = build("%YAML:1.0\n" + textwrap.dedent(MINIMAL))
        assert len(scene.objects) == 4

    def test_camera_and_background(self):
        scene = build("""
            background: [0.1, 0.2, 0.3]
            camera:
              origin: [0, 1, 5]
              lookat: [0, 1, 0]
              fov: 60
        """, aspect_ratio=2.0)
        assert scene.background == Color(0.1, 0.2, 0.3)
        assert scene.camera.origin == Vec3(0, 1, 5)
        assert scene.camera.vfov == 60.0
        assert scene.camera.aspect == 2.0

    def test_defaults_for_empty_document(self):
        scene = build("")
        assert scene.objects == ()
        assert scene.background == Color(0.0, 0.5, 0.5)
        assert scene.camera.vfov == 100.0

    def test_example_scene_with_mesh(self, scenes_dir):
        scene = YamlSceneBuilder.from_file(str(scenes_dir / "example.yaml")).build_scene()
        # 3 spheres + 4 tetrahedron faces + 5 walls
        assert len(scene.objects) == 12
        assert len(scene.lights) == 2
        assert sum(isinstance(o, Triangle) for o in scene.objects) == 4
        mirror = scene.objects[1].material
        assert mirror.reflective and not mirror.refractive

    @pytest.mark.parametrize("text, message", [
        ("""
            primitives:
              - type: sphere
                center: [0, 0, 0]
                radius: 1
                material: nope
        """, "unknown material"),
        ("""
            materials:
              m:
                color: chartreuse
        """, "unknown color"),
        ("""
            materials:
              m: {}
            primitives:
              - type: torus
                material: m
        """, "unknown primitive type"),
        ("""
            materials:
              m: {}
            primitives:
              - type: sphere
                center: [0, 0, 0]
                material: m
        """, "missing key 'radius'"),
        ("""
            materials:
              m: {}
            primitives:
              - type: sphere
                center: [0, 0]
                radius: 1
                material: m
        """, "expected [x, y, z]"),
        ("""
            lights:
              - color: white
        """, "missing key 'pos'"),
    ])
    def test_invalid_documents(self, text, message):
        with pytest.raises(SceneError) as excinfo:
            build(text)
        assert message in str(excinfo.value)

    def test_degenerate_geometry_rejected_at_load(self):
        with pytest.raises(SceneError):
            build("""
                materials:
                  m: {}
                primitives:
                  - type: sphere
                    center: [0, 0, 0]
                    radius: 0
                    material: m
            """)

    def test_negative_coefficient_rejected_at_load(self):
        with pytest.raises(SceneError):
            build("""
                materials:
                  m:
                    kd: -1
            """)

    def test_malformed_yaml(self):
        with pytest.raises(SceneError):
            YamlSceneBuilder.from_string("colors: [unclosed")

    def test_missing_mesh_file(self, tmp_path):
        scene_file = tmp_path / "scene.yaml"
        scene_file.write_text(textwrap.dedent("""
            materials:
              m: {}
            primitives:
              - type: mesh
                filename: missing.obj
                material: m
        """))
        with pytest.raises(SceneError):
            YamlSceneBuilder.from_file(str(scene_file)).build_scene()
