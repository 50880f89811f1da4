"""
Animation

Keyframe animation data and sampling.
"""

import bisect
from enum import Enum
from typing import Dict, List, Tuple

import numpy as np
from pyrr import quaternion

from ..core.transforms import normalize_quaternion


class InterpolationType(Enum):
    """Animation interpolation types."""
    LINEAR = "LINEAR"
    STEP = "STEP"


class AnimationTarget(Enum):
    """Joint transform component animated by a channel."""
    TRANSLATION = "translation"
    ROTATION = "rotation"
    SCALE = "scale"


_TARGET_SIZES = {
    AnimationTarget.TRANSLATION: 3,
    AnimationTarget.ROTATION: 4,
    AnimationTarget.SCALE: 3,
}


class Keyframe:
    """
    Single keyframe in an animation channel.

    Stores time and value for a specific property.
    """

    def __init__(self, time: float, value):
        """
        Initialize keyframe.

        Args:
            time: Time in seconds
            value: Vector for translation/scale, ``[x, y, z, w]`` quaternion for rotation
        """
        self.time = float(time)
        self.value = np.asarray(value, dtype=np.float64)

    def __repr__(self):
        return f"Keyframe(t={self.time:.3f}, v={self.value})"


class AnimationChannel:
    """
    Animation channel targets one transform component of a named joint.

    Keyframes are kept sorted by time.
    """

    def __init__(
        self,
        joint_name: str,
        target: AnimationTarget,
        interpolation: InterpolationType = InterpolationType.LINEAR
    ):
        self.joint_name = joint_name
        self.target = target
        self.interpolation = interpolation
        self.keyframes: List[Keyframe] = []
        self._times: List[float] = []

    def add_keyframe(self, time: float, value):
        """
        Insert a keyframe, keeping the channel time-sorted.

        Raises:
            ValueError: If the value has the wrong number of components
        """
        keyframe = Keyframe(time, value)
        expected = _TARGET_SIZES[self.target]
        if keyframe.value.shape != (expected,):
            raise ValueError(
                f"{self.target.value} keyframes need {expected} components, got {keyframe.value.shape}"
            )
        position = bisect.bisect_right(self._times, keyframe.time)
        self._times.insert(position, keyframe.time)
        self.keyframes.insert(position, keyframe)

    @property
    def duration(self) -> float:
        return self._times[-1] if self._times else 0.0

    def sample(self, time: float):
        """
        Sample the channel at a given time.

        Times before the first or after the last keyframe are clamped.

        Returns:
            Interpolated value, or None if the channel has no keyframes
        """
        if not self.keyframes:
            return None

        if time <= self._times[0]:
            return self.keyframes[0].value.copy()
        if time >= self._times[-1]:
            return self.keyframes[-1].value.copy()

        i = bisect.bisect_right(self._times, time)
        k0, k1 = self.keyframes[i - 1], self.keyframes[i]

        if self.interpolation == InterpolationType.STEP:
            return k0.value.copy()

        span = k1.time - k0.time
        t = (time - k0.time) / span if span > 0.0 else 0.0

        if self.target == AnimationTarget.ROTATION:
            q0 = normalize_quaternion(k0.value)
            q1 = normalize_quaternion(k1.value)
            return normalize_quaternion(quaternion.slerp(q0, q1, t), fallback=q0)

        return k0.value * (1.0 - t) + k1.value * t

    def __repr__(self):
        return (f"AnimationChannel(joint='{self.joint_name}', target={self.target.value}, "
                f"keyframes={len(self.keyframes)})")


class Animation:
    """
    Complete animation with multiple channels.

    Each channel targets the translation, rotation or scale of one joint.
    """

    def __init__(self, name: str):
        self.name = name
        self.channels: List[AnimationChannel] = []

    def add_channel(self, channel: AnimationChannel) -> AnimationChannel:
        self.channels.append(channel)
        return channel

    @property
    def duration(self) -> float:
        """Time of the last keyframe across all channels."""
        return max((channel.duration for channel in self.channels), default=0.0)

    def sample_all(self, time: float) -> Dict[Tuple[str, AnimationTarget], np.ndarray]:
        """
        Sample all channels at a given time.

        Returns:
            Dictionary mapping (joint_name, target) -> value
        """
        results = {}
        for channel in self.channels:
            value = channel.sample(time)
            if value is not None:
                results[(channel.joint_name, channel.target)] = value
        return results

    def __repr__(self):
        return f"Animation(name='{self.name}', duration={self.duration:.2f}s, channels={len(self.channels)})"
