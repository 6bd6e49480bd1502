"""Quadratic programming, gait scheduling, filtering, motion and contact-force helpers for legged robots."""

__version__ = "0.1.0"