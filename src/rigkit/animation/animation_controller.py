"""
Animation Controller

Manages keyframe playback and writes sampled values into joint transforms.
"""

import logging
from typing import Dict, Optional

import numpy as np

from ..config.settings import DEFAULT_ANIMATION_LOOP, DEFAULT_PLAYBACK_SPEED
from ..core import transforms
from .animation import Animation, AnimationTarget
from .skeleton import Skeleton

logger = logging.getLogger(__name__)


class AnimationController:
    """
    Controls animation playback for a skeleton.

    Manages:
    - Current animation and playback time
    - Play/pause/loop states
    - Writing each animated joint's current ``transform``

    Components a joint has no channel for are taken from its pose transform.
    """

    def __init__(self, skeleton: Skeleton):
        self.skeleton = skeleton
        self.current_animation: Optional[Animation] = None
        self.current_time: float = 0.0
        self.is_playing: bool = False
        self.loop: bool = DEFAULT_ANIMATION_LOOP
        self.playback_speed: float = DEFAULT_PLAYBACK_SPEED

    def play(self, animation: Animation, loop: bool = DEFAULT_ANIMATION_LOOP):
        """
        Start playing an animation from the beginning.

        Args:
            animation: Animation to play
            loop: Whether to loop the animation
        """
        self.current_animation = animation
        self.current_time = 0.0
        self.is_playing = True
        self.loop = loop
        self._apply(animation.sample_all(0.0))

    def pause(self):
        self.is_playing = False

    def resume(self):
        if self.current_animation is not None:
            self.is_playing = True

    def stop(self):
        """Stop playback and reset the skeleton to its rest pose."""
        self.is_playing = False
        self.current_time = 0.0
        self.skeleton.reset_to_pose()

    def update(self, delta_time: float):
        """
        Advance playback and apply the sampled pose.

        Args:
            delta_time: Time elapsed since last frame (seconds)
        """
        if not self.is_playing or self.current_animation is None:
            return

        duration = self.current_animation.duration
        self.current_time += delta_time * self.playback_speed

        if self.current_time >= duration:
            if self.loop and duration > 0.0:
                self.current_time %= duration
            else:
                self.current_time = duration
                self.is_playing = False

        self._apply(self.current_animation.sample_all(self.current_time))

    def _apply(self, sampled: Dict):
        components: Dict[str, Dict[AnimationTarget, np.ndarray]] = {}
        for (joint_name, target), value in sampled.items():
            components.setdefault(joint_name, {})[target] = value

        for joint_name, values in components.items():
            joint = self.skeleton.get_joint(joint_name)
            if joint is None:
                logger.debug("Animation targets unknown joint '%s'", joint_name)
                continue

            pose_translation, pose_rotation, pose_scale = transforms.decompose(joint.pose_transform)
            rotation = values.get(AnimationTarget.ROTATION)
            joint.transform = transforms.compose_trs(
                values.get(AnimationTarget.TRANSLATION, pose_translation),
                pose_rotation if rotation is None else rotation,
                values.get(AnimationTarget.SCALE, pose_scale),
            )

    def __repr__(self):
        anim_name = self.current_animation.name if self.current_animation else "None"
        return f"AnimationController(animation='{anim_name}', time={self.current_time:.2f}s, playing={self.is_playing})"
