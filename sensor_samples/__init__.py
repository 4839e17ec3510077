"""Timestamped sensor sample types: camera frames, sonar data, bounding boxes, event-camera and inertial readings, and rigid body states."""

__version__ = "1.0.0"

__all__ = [
    "bounding_box",
    "events",
    "frame",
    "inertial",
    "rigid_body_state",
    "sonar",
    "sonar_beam",
    "sonar_scan",
]