"""Vector and plan geometry helpers."""

from .vec3 import Vec3
