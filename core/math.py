import math

EPSILON = 1e-5


def clamp(lo, hi, val):
    """val 을 [lo, hi] 로 자른다."""
    val = lo if val < lo else val
    val = hi if val > hi else val
    return val


def deg2rad(angle: float) -> float:
    return angle * math.pi / 180.0


class Vec3:
    def __init__(self, x=0.0, y=0.0, z=0.0):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def __add__(self, other):
        return Vec3(self.x + other.x,
                    self.y + other.y,
                    self.z + other.z)

    def __sub__(self, other):
        return Vec3(self.x - other.x,
                    self.y - other.y,
                    self.z - other.z)

    def __mul__(self, t):
        return Vec3(self.x * t, self.y * t, self.z * t)

    __rmul__ = __mul__

    def __truediv__(self, t):
        return Vec3(self.x / t, self.y / t, self.z / t)

    def __neg__(self):
        return Vec3(-self.x, -self.y, -self.z)

    def __eq__(self, other):
        if not isinstance(other, Vec3):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.z == other.z

    def __hash__(self):
        return hash((self.x, self.y, self.z))

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def dot(self, other):
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other):
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    def length(self):
        return math.sqrt(self.dot(self))

    def normalize(self):
        l = self.length()
        if l == 0:
            raise ValueError("cannot normalize a zero-length vector")
        return self / l

    def reflect(self, normal):
        # r = v - 2 * dot(v, n) * n
        return self - normal * (2 * self.dot(normal))

    def refract(self, normal, ni_over_nt):
        # normal 은 입사 광선 쪽을 향해야 한다
        uv = self.normalize()
        dt = uv.dot(normal)
        discr = 1.0 - ni_over_nt * ni_over_nt * (1 - dt * dt)
        if discr >= 0:
            refracted = (uv - normal * dt) * ni_over_nt - normal * math.sqrt(discr)
            return True, refracted.normalize()
        else:
            # 전반사
            return False, None

    def __repr__(self):
        return f"Vec3({self.x:.3f}, {self.y:.3f}, {self.z:.3f})"


class Color:
    """RGB 색. 누적 중에는 [0, 1] 을 벗어날 수 있으므로 출력 전에 clamp() 한다."""

    def __init__(self, r=0.0, g=0.0, b=0.0):
        self.r = float(r)
        self.g = float(g)
        self.b = float(b)

    def __add__(self, other):
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def __mul__(self, t):
        # 스칼라 곱 또는 채널별 곱 (빛 색 x 표면 색)
        if isinstance(t, Color):
            return Color(self.r * t.r, self.g * t.g, self.b * t.b)
        return Color(self.r * t, self.g * t, self.b * t)

    __rmul__ = __mul__

    def __eq__(self, other):
        if not isinstance(other, Color):
            return NotImplemented
        return self.r == other.r and self.g == other.g and self.b == other.b

    def __hash__(self):
        return hash((self.r, self.g, self.b))

    def __iter__(self):
        yield self.r
        yield self.g
        yield self.b

    def clamp(self, lo=0.0, hi=1.0):
        return Color(clamp(lo, hi, self.r),
                     clamp(lo, hi, self.g),
                     clamp(lo, hi, self.b))

    def to_tuple(self):
        return (self.r, self.g, self.b)

    @staticmethod
    def white():
        return Color(1.0, 1.0, 1.0)

    @staticmethod
    def black():
        return Color(0.0, 0.0, 0.0)

    @staticmethod
    def red():
        return Color(1.0, 0.0, 0.0)

    @staticmethod
    def gray(v: float):
        return Color(v, v, v)

    def __repr__(self):
        return f"Color({self.r:.3f}, {self.g:.3f}, {self.b:.3f})"


class Ray:
    """origin 에서 시작하는 반직선. direction 은 호출자가 정규화해서 넘긴다."""

    def __init__(self, origin: Vec3, direction: Vec3):
        self.origin = origin
        self.direction = direction

    def point_at(self, t: float) -> Vec3:
        return self.origin + self.direction * t

    def __repr__(self):
        return f"Ray({self.origin!r}, {self.direction!r})"
