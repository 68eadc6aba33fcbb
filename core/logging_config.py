"""레이트레이서 로깅 설정."""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """
    CLI 실행 시 루트 로거를 한 번 설정한다.

    Args:
        level: 로그 레벨 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: 콘솔 출력과 함께 기록할 로그 파일 경로 (선택)

    Returns:
        설정된 루트 로거
    """
    logger = logging.getLogger()
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    formatter = logging.Formatter(LOG_FORMAT)

    # 반복 호출 시 이전에 붙인 핸들러만 교체
    for handler in list(logger.handlers):
        if getattr(handler, "_raytracer", False):
            logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler._raytracer = True
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler._raytracer = True
        logger.addHandler(file_handler)

    return logger
