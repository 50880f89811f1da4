#!/usr/bin/env python3
"""
Skeleton Diagnostic Tool

Loads a JSON skeleton definition and reports common rigging issues:
- Joints with singular or near-zero-scale rest transforms
- Weight lists that do not sum to 1
- Joints whose rest pose does not reproduce an undeformed mesh

Usage:
    python debug_skeleton.py path/to/skeleton.json
"""

import logging
import sys

import numpy as np

from rigkit import LOG_FORMAT, TRANSFORM_TOLERANCE, WEIGHT_SUM_TOLERANCE, load_skeleton_definition
from rigkit.core import transforms


class SkeletonDiagnostics:
    """Diagnostic tool for analyzing skeleton definitions."""

    def __init__(self):
        self.issues = []
        self.warnings = []

    def analyze(self, path: str) -> bool:
        """Analyze a skeleton definition and report issues."""
        print(f"🔍 Analyzing skeleton: {path}")
        print("=" * 60)

        try:
            definition = load_skeleton_definition(path)
        except (FileNotFoundError, ValueError) as e:
            print(f"❌ ERROR: Failed to load skeleton: {e}")
            return False

        skeleton = definition.instantiate()
        skeleton.reset_to_pose()

        print(f"\n🌳 {skeleton}")
        for joint in skeleton.iter_joints():
            self._analyze_joint(joint)

        self._print_summary()
        return len(self.issues) == 0

    def _analyze_joint(self, joint):
        indent = "   " + "  " * joint.depth
        weight_sum = joint.vertex_weight_sum()
        det = np.linalg.det(joint.pose_transform[:3, :3])
        print(f"{indent}🦴 '{joint.name}': {len(joint.vertex_weights)} weights (sum {weight_sum:.4f}), det {det:.3f}")

        if abs(det) < 0.001:
            self.issues.append(f"Joint '{joint.name}' has near-zero scaling (det: {det:.6f})")
        elif det < 0:
            self.warnings.append(f"Joint '{joint.name}' has negative scaling (mirrored)")

        if joint.vertex_weights and abs(weight_sum - 1.0) > WEIGHT_SUM_TOLERANCE:
            self.warnings.append(f"Joint '{joint.name}' weights sum to {weight_sum:.4f}")
        if not joint.vertex_weights:
            self.warnings.append(f"Joint '{joint.name}' influences no vertices")

        if not transforms.is_identity(joint.skinning_transform(), TRANSFORM_TOLERANCE * 100):
            self.issues.append(f"Joint '{joint.name}' deforms the mesh in its rest pose")

    def _print_summary(self):
        print("\n📋 Summary:")
        for issue in self.issues:
            print(f"   ❌ {issue}")
        for warning in self.warnings:
            print(f"   ⚠️  {warning}")
        if not self.issues and not self.warnings:
            print("   ✅ No problems found")


def main():
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    ok = SkeletonDiagnostics().analyze(sys.argv[1])
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
