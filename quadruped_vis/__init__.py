"""Trajectory visualization markers and leg kinematics for legged robots."""
