import logging
from pathlib import Path

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

MAX_VAL = 255


def to_uint8(framebuffer: np.ndarray) -> np.ndarray:
    """[0, 1] 색 배열을 0~255 정수로 변환. 반올림은 0.5 에서 위로 (half away from zero)."""
    clipped = np.clip(framebuffer, 0.0, 1.0)
    return np.floor(clipped * MAX_VAL + 0.5).astype(np.uint8)


def save_image(framebuffer: np.ndarray, path) -> Path:
    """Pillow 가 지원하는 형식(png, ppm, ...)으로 저장. 형식은 확장자로 결정된다."""
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    image = Image.fromarray(to_uint8(framebuffer))
    image.save(path)
    logger.info("이미지 저장: %s (%dx%d)", path, image.width, image.height)
    return path
