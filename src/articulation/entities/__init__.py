"""Domain entities for the articulation toolkit."""

from .core import Joint, JointEdge, RegistrationStatus, RigidBody

__all__ = [
    "RigidBody",
    "Joint",
    "JointEdge",
    "RegistrationStatus",
]
