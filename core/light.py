from core.math import Color, Vec3


class Light:
    """점 광원. 거리 감쇠는 없다."""

    def __init__(self, position: Vec3, color: Color = None, intensity: float = 1.0):
        self.position = position
        self.color = color if color is not None else Color.white()
        self.intensity = float(intensity)

    @property
    def radiance(self) -> Color:
        return self.color * self.intensity

    def __repr__(self):
        return f"Light({self.position!r}, {self.color!r}, x{self.intensity})"
