"""Bundled demonstration dataset: a mobile manipulator plus loose props.

Bodies and joints are listed in scrambled order on purpose; the hierarchy has
to be derived from the joint endpoints alone. A few bodies are never jointed,
the sphere joints form a loop, and some joints reference bodies that are not
registered so they are rejected at registration.
"""

from __future__ import annotations

from typing import List, Tuple

from articulation.hierarchy.io import Dataset

RIGID_BODY_NAMES: List[str] = [
    "shoulder_lift_link",
    "box1",
    "torso_lift_link",
    "wrist_flex_link",
    "torso_fixed_link",
    "estop_link",
    "bellows_link",
    "sphere1",
    "bellows_link2",
    "head_tilt_link",
    "sphere3",
    "head_pan_link",
    "box2",
    "l_gripper_finger_link",
    "base_link",
    "r_gripper_finger_link",
    "sphere0",
    "forearm_roll_link",
    "rbody8",
    "laser_link",
    "box10",
    "wrist_roll_link",
    "box3",
    "gripper_link",
    "elbow_flex_link",
    "l_wheel_link",
    "box0",
    "shoulder_pan_link",
    "rbody0",
    "upperarm_roll_link",
    "r_wheel_link",
    "sphere2",
]

JOINTS: List[Tuple[str, str, str]] = [
    ("wrist_roll_joint", "wrist_flex_link", "wrist_roll_link"),
    ("head_pan_joint", "torso_lift_link", "head_pan_link"),
    ("torso_lift_joint", "base_link", "torso_lift_link"),
    ("shoulder_pan_joint", "torso_lift_link", "shoulder_pan_link"),
    ("sphere2-sphere3", "sphere2", "sphere3"),
    ("l_gripper_finger_joint", "gripper_link", "l_gripper_finger_link"),
    ("upperarm_roll_joint", "shoulder_lift_link", "upperarm_roll_link"),
    ("elbow_flex_joint", "upperarm_roll_link", "elbow_flex_link"),
    ("l_wheel_joint", "base_link", "l_wheel_link"),
    ("sphere1-sphere2", "sphere1", "sphere2"),
    ("bellows_joint", "torso_lift_link", "bellows_link"),
    ("head_camera_depth_joint", "head_camera_link", "head_camera_depth_frame"),
    ("head_camera_rgb_joint", "head_camera_link", "head_camera_rgb_frame"),
    ("head_camera_depth_optical_joint", "head_camera_depth_frame", "head_camera_depth_optical_frame"),
    ("sphere3-sphere1", "sphere3", "sphere1"),
    ("forearm_roll_joint", "elbow_flex_link", "forearm_roll_link"),
    ("box2-box3", "box2", "box3"),
    ("torso_fixed_joint", "base_link", "torso_fixed_link"),
    ("shoulder_lift_joint", "shoulder_pan_link", "shoulder_lift_link"),
    ("sphere3-sphere4", "sphere3", "sphere4"),
    ("r_gripper_finger_joint", "gripper_link", "r_gripper_finger_link"),
    ("head_tilt_joint", "head_pan_link", "head_tilt_link"),
    ("bellows_joint2", "torso_lift_link", "bellows_link2"),
    ("r_wheel_joint", "base_link", "r_wheel_link"),
    ("gripper_axis", "wrist_roll_link", "gripper_link"),
    ("estop_joint", "base_link", "estop_link"),
    ("box1-box2", "box1", "box2"),
    ("head_camera_joint", "head_tilt_link", "head_camera_link"),
    ("laser_joint", "base_link", "laser_link"),
    ("head_camera_rgb_optical_joint", "head_camera_rgb_frame", "head_camera_rgb_optical_frame"),
    ("wrist_flex_joint", "forearm_roll_link", "wrist_flex_link"),
]


def demo_dataset() -> Dataset:
    """Return the demonstration dataset as a :class:`Dataset`."""

    return Dataset.model_validate(
        {
            "bodies": list(RIGID_BODY_NAMES),
            "joints": [list(row) for row in JOINTS],
        }
    )


__all__ = ["RIGID_BODY_NAMES", "JOINTS", "demo_dataset"]
