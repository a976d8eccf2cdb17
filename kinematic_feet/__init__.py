"""Kinematic character controller toolkit: collide-and-slide, grounding, stepping, moving platforms and pushing bodies."""

__version__ = "0.1.0"

__all__ = [
    "character",
    "collide_and_slide",
    "depenetrate",
    "ground_detection",
    "grounding",
    "movement",
    "moving_platform",
    "physics_interaction",
    "projection",
    "stepping",
    "sweep",
    "vectors",
]