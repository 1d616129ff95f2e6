"""Database layer for DualControl."""
