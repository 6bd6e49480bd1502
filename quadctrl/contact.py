"""Foot contact forces: averaging sensor contacts and drawing them."""

from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)

FORCE_DRAW_SCALE = 20.0


def average_contact_force(contacts):
    """Average force over the contacts reported by a foot sensor.

    ``contacts`` holds one entry per contact; each entry is the sequence of
    body-1 forces ``(x, y, z)`` reported for its positions. Every position of
    a contact counts with the contact's first force, and the total is divided
    by the number of contacts. With no contacts the force is zero.
    """
    contacts = list(contacts)
    if not contacts:
        return (0.0, 0.0, 0.0)
    total = np.zeros(3)
    for wrenches in contacts:
        wrenches = [np.asarray(w, dtype=float).ravel() for w in wrenches]
        if len(wrenches) != 1:
            logger.error("Contact count isn't correct!")
        if wrenches:
            total += len(wrenches) * wrenches[0][:3]
    average = total / len(contacts)
    return tuple(float(v) for v in average)


def force_topic(sensor_name):
    """Topic on which the averaged force of ``sensor_name`` is published."""
    return f"/visual/{sensor_name}/the_force"


def scaled_force_line(force, scale=FORCE_DRAW_SCALE):
    """End points of the line drawn for ``force``: origin and force / scale."""
    if scale == 0:
        raise ValueError("The scale of a force line must not be zero")
    fx, fy, fz = (float(v) for v in np.asarray(force, dtype=float).ravel()[:3])
    return ((0.0, 0.0, 0.0), (fx / scale, fy / scale, fz / scale))