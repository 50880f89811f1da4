#!/usr/bin/env python3
"""
Skinning Demo

Builds a three-joint arm from the bundled skeleton definition, plays a short
keyframe animation bending the elbow, and prints where the weighted vertices
end up every few frames.
"""

import logging
import math

import numpy as np
from pyrr import quaternion

from rigkit import (
    LOG_FORMAT,
    SKELETON_CONFIG_DIR,
    Animation,
    AnimationChannel,
    AnimationController,
    AnimationTarget,
    Skin,
    load_skeleton,
)

# Vertices along the arm, matching the indices in arm.json
REST_VERTICES = np.array([
    [0.0, 1.5, 0.0],
    [0.1, 1.3, 0.0],
    [0.0, 1.0, 0.0],
    [0.1, 0.8, 0.0],
    [0.0, 0.5, 0.0],
    [0.1, 0.3, 0.0],
])


def build_wave_animation() -> Animation:
    """Bend the elbow 90 degrees and back over two seconds."""
    animation = Animation("wave")
    bend = animation.add_channel(AnimationChannel("elbow", AnimationTarget.ROTATION))
    bend.add_keyframe(0.0, quaternion.create())
    bend.add_keyframe(1.0, quaternion.create_from_z_rotation(math.pi / 2))
    bend.add_keyframe(2.0, quaternion.create())
    return animation


def main():
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    skeleton = load_skeleton(SKELETON_CONFIG_DIR / "arm.json")
    print(skeleton)

    skin = Skin(skeleton)
    controller = AnimationController(skeleton)
    controller.play(build_wave_animation(), loop=False)

    frame_time = 1.0 / 30.0
    frame = 0
    while controller.is_playing:
        controller.update(frame_time)
        if frame % 15 == 0:
            deformed = skin.deform_vertices(REST_VERTICES)
            print(f"t={controller.current_time:.2f}s  wrist vertex -> {np.round(deformed[5], 3)}")
        frame += 1

    controller.stop()
    print("Rest pose restored:", np.allclose(skin.deform_vertices(REST_VERTICES), REST_VERTICES))


if __name__ == "__main__":
    main()
