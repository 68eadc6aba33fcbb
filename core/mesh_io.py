import logging
import os
from typing import List, Sequence, Tuple

import numpy as np

from core.errors import SceneError
from core.geometry import Triangle, TriangleMesh
from core.material import Material
from core.math import Vec3

logger = logging.getLogger(__name__)


def load_obj(filename: str) -> Tuple[np.ndarray, List[Tuple[int, ...]]]:
    """OBJ 파일에서 정점(v)과 면(f)만 읽는다. 인덱스는 0-based 로 바꿔 돌려준다."""
    vertices = []
    faces = []

    with open(filename, 'r', encoding='utf-8') as f:
        for line_num, line in enumerate(f, 1):
            values = line.split()
            if not values or values[0].startswith('#'):
                continue
            try:
                if values[0] == 'v':
                    vertices.append([float(values[1]), float(values[2]), float(values[3])])
                elif values[0] == 'f':
                    face = []
                    for vertex_str in values[1:]:
                        idx = int(vertex_str.split('/')[0])
                        # 음수 인덱스는 지금까지 읽은 정점 기준 상대 위치
                        face.append(idx - 1 if idx > 0 else len(vertices) + idx)
                    faces.append(tuple(face))
            except (ValueError, IndexError) as e:
                raise SceneError(f"{filename}:{line_num}: malformed OBJ record {line.strip()!r}") from e

    return np.array(vertices, dtype=np.float64).reshape(-1, 3), faces


def load_ply(filename: str) -> Tuple[np.ndarray, List[Tuple[int, ...]]]:
    """ASCII PLY 의 vertex / face element 를 읽는다."""
    with open(filename, 'r', encoding='utf-8') as f:
        lines = f.read().splitlines()

    if not lines or lines[0].strip() != 'ply':
        raise SceneError(f"{filename}: not a PLY file")

    elements = []  # [(name, count, [property names])]
    body_start = None
    for i, line in enumerate(lines[1:], 1):
        tokens = line.split()
        if not tokens:
            continue
        if tokens[0] == 'format' and tokens[1] != 'ascii':
            raise SceneError(f"{filename}: only ascii PLY is supported, got {tokens[1]}")
        elif tokens[0] == 'element':
            elements.append((tokens[1], int(tokens[2]), []))
        elif tokens[0] == 'property' and elements:
            elements[-1][2].append(tokens[-1])
        elif tokens[0] == 'end_header':
            body_start = i + 1
            break
    if body_start is None:
        raise SceneError(f"{filename}: missing end_header")

    vertices = []
    faces = []
    cursor = body_start
    try:
        for name, count, props in elements:
            rows = lines[cursor:cursor + count]
            if len(rows) < count:
                raise SceneError(f"{filename}: expected {count} {name} records, found {len(rows)}")
            cursor += count
            if name == 'vertex':
                ix, iy, iz = props.index('x'), props.index('y'), props.index('z')
                for row in rows:
                    values = row.split()
                    vertices.append([float(values[ix]), float(values[iy]), float(values[iz])])
            elif name == 'face':
                for row in rows:
                    values = [int(v) for v in row.split()]
                    n = values[0]
                    faces.append(tuple(values[1:1 + n]))
    except (ValueError, IndexError) as e:
        raise SceneError(f"{filename}: malformed PLY body: {e}") from e

    return np.array(vertices, dtype=np.float64).reshape(-1, 3), faces


LOADERS = {
    '.obj': load_obj,
    '.ply': load_ply,
}


def rotation_matrix(rotation: Sequence[float]) -> np.ndarray:
    """X, Y, Z 축 순서로 회전하는 행렬 (라디안)."""
    rx, ry, rz = rotation
    cx, sx = np.cos(rx), np.sin(rx)
    cy, sy = np.cos(ry), np.sin(ry)
    cz, sz = np.cos(rz), np.sin(rz)
    mx = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]])
    my = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]])
    mz = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]])
    return mz @ my @ mx


def transform_vertices(vertices: np.ndarray,
                       scale: float = 1.0,
                       rotation: Sequence[float] = (0.0, 0.0, 0.0),
                       translation: Sequence[float] = (0.0, 0.0, 0.0)) -> np.ndarray:
    """scale -> rotation -> translation 순서로 적용."""
    scaled = vertices * float(scale)
    rotated = scaled @ rotation_matrix(rotation).T
    return rotated + np.asarray(translation, dtype=np.float64)


def build_mesh(vertices: np.ndarray, faces: List[Tuple[int, ...]], material: Material,
               name: str = None) -> TriangleMesh:
    points = [Vec3(*row) for row in vertices]
    triangles = []
    skipped = 0
    for face in faces:
        if len(face) < 3:
            skipped += 1
            continue
        if any(idx < 0 or idx >= len(points) for idx in face):
            raise SceneError(f"mesh {name or '<anonymous>'}: face {face} references a missing vertex")
        # 볼록 다각형이라 가정하고 팬 삼각분할
        for i in range(1, len(face) - 1):
            try:
                triangles.append(Triangle(points[face[0]], points[face[i]], points[face[i + 1]], material))
            except SceneError:
                skipped += 1

    if skipped:
        logger.warning("메쉬 %s: 퇴화된 면 %d개 건너뜀", name or '<anonymous>', skipped)
    return TriangleMesh(triangles, material, name=name)


def load_mesh(filename: str, material: Material,
              scale: float = 1.0,
              rotation: Sequence[float] = (0.0, 0.0, 0.0),
              translation: Sequence[float] = (0.0, 0.0, 0.0)) -> TriangleMesh:
    ext = os.path.splitext(filename)[1].lower()
    if ext not in LOADERS:
        raise SceneError(f"unsupported mesh format {ext!r} ({filename})")

    vertices, faces = LOADERS[ext](filename)
    vertices = transform_vertices(vertices, scale, rotation, translation)
    mesh = build_mesh(vertices, faces, material, name=os.path.basename(filename))
    logger.info("메쉬 로드: %s (정점 %d개, 삼각형 %d개)", filename, len(vertices), len(mesh))
    return mesh
