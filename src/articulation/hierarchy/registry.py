"""Entity registry holding the raw rigid body and joint inputs."""

from __future__ import annotations

from typing import Dict, Iterator, List

from articulation.entities.core import Joint, RegistrationStatus, RigidBody
from articulation.utils.logging import get_logger

_LOGGER = get_logger(module=__name__)


class EntityRegistry:
    """Registration-ordered store of bodies and joints.

    A joint may only reference bodies that are already registered. Parallel
    joints between the same pair of bodies and self-joints are accepted.
    """

    def __init__(self) -> None:
        self._bodies: Dict[str, RigidBody] = {}
        self._joints: Dict[str, Joint] = {}

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------
    def bodies(self) -> List[RigidBody]:
        return list(self._bodies.values())

    def joints(self) -> List[Joint]:
        return list(self._joints.values())

    def iter_joints(self) -> Iterator[Joint]:
        yield from self._joints.values()

    def body_count(self) -> int:
        return len(self._bodies)

    def joint_count(self) -> int:
        return len(self._joints)

    def body_at(self, index: int) -> RigidBody | None:
        if 0 <= index < len(self._bodies):
            return list(self._bodies.values())[index]
        return None

    def joint_at(self, index: int) -> Joint | None:
        if 0 <= index < len(self._joints):
            return list(self._joints.values())[index]
        return None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def clear(self) -> None:
        self._bodies.clear()
        self._joints.clear()

    def register_body(self, name: str) -> RegistrationStatus:
        """Register a rigid body by unique name."""

        if not name:
            _LOGGER.warning("Rejected rigid body with empty name")
            return RegistrationStatus.INVALID_NAME
        if name in self._bodies:
            _LOGGER.warning("Rejected duplicate rigid body", body=name)
            return RegistrationStatus.DUPLICATE_NAME
        self._bodies[name] = RigidBody(name=name)
        return RegistrationStatus.ACCEPTED

    def register_joint(self, name: str, body0: str, body1: str) -> RegistrationStatus:
        """Register a joint connecting two previously registered bodies."""

        if not name:
            _LOGGER.warning("Rejected joint with empty name", body0=body0, body1=body1)
            return RegistrationStatus.INVALID_NAME
        if name in self._joints:
            _LOGGER.warning("Rejected duplicate joint", joint=name)
            return RegistrationStatus.DUPLICATE_NAME
        missing = [body for body in (body0, body1) if body not in self._bodies]
        if missing:
            _LOGGER.warning(
                "Rejected joint referencing unknown rigid bodies",
                joint=name,
                missing=missing,
            )
            return RegistrationStatus.UNKNOWN_BODY
        self._joints[name] = Joint(name=name, body0=body0, body1=body1)
        return RegistrationStatus.ACCEPTED

    def referenced_bodies(self) -> set[str]:
        """Names of every body referenced by at least one joint."""

        referenced: set[str] = set()
        for joint in self._joints.values():
            referenced.add(joint.body0)
            referenced.add(joint.body1)
        return referenced

    def disconnected_bodies(self) -> List[str]:
        """Registered bodies referenced by no joint, in registration order."""

        referenced = self.referenced_bodies()
        return [name for name in self._bodies if name not in referenced]


__all__ = ["EntityRegistry"]
