class SceneError(ValueError):
    """씬 구성 단계에서 발견되는 오류 (퇴화된 도형, 잘못된 재질, 미해결 참조 등)."""
