"""Core domain entities used throughout the articulation toolkit."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegistrationStatus(str, Enum):
    """Outcome of registering a body or joint.

    Only ``ACCEPTED`` is truthy so callers can treat a status like the boolean
    success flag of the builder API.
    """

    ACCEPTED = "accepted"
    DUPLICATE_NAME = "duplicate-name"
    UNKNOWN_BODY = "unknown-body"
    INVALID_NAME = "invalid-name"

    def __bool__(self) -> bool:
        return self is RegistrationStatus.ACCEPTED


class RigidBody(BaseModel):
    """An atomic named entity that joints connect."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique rigid body name")


class Joint(BaseModel):
    """A named connection between exactly two rigid bodies.

    ``body0`` and ``body1`` are order sensitive only for the initial graft
    direction; connectivity itself is undirected.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique joint name")
    body0: str = Field(..., min_length=1, description="Name of the first body")
    body1: str = Field(..., min_length=1, description="Name of the second body")

    @property
    def is_self_joint(self) -> bool:
        return self.body0 == self.body1

    def touches(self, body: str) -> bool:
        return body == self.body0 or body == self.body1

    def as_tuple(self) -> tuple[str, str, str]:
        return (self.name, self.body0, self.body1)


class JointEdge(BaseModel):
    """Read-only view of one parent -> child edge inside a hierarchy."""

    model_config = ConfigDict(frozen=True)

    joint: str
    parent: str
    child: str
    is_loop_joint: bool = False

    @field_validator("joint", "parent", "child")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value:
            raise ValueError("edge fields must be non-empty")
        return value

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


__all__ = ["RegistrationStatus", "RigidBody", "Joint", "JointEdge"]
