import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from quadctrl.contact import (
    FORCE_DRAW_SCALE,
    average_contact_force,
    force_topic,
    scaled_force_line,
)

finite = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False)
vec3 = st.tuples(finite, finite, finite)


def test_no_contacts_gives_zero_force():
    assert average_contact_force([]) == (0.0, 0.0, 0.0)


@given(vec3)
def test_single_contact_returns_its_force(force):
    assert np.allclose(average_contact_force([[force]]), force)


@given(vec3, st.integers(min_value=1, max_value=6))
def test_identical_contacts_average_to_same_force(force, count):
    result = average_contact_force([[force]] * count)
    assert np.allclose(result, force, rtol=1e-9, atol=1e-6)


def test_average_of_two_contacts():
    result = average_contact_force([[(2.0, 4.0, 6.0)], [(4.0, 8.0, 10.0)]])
    assert np.allclose(result, (3.0, 6.0, 8.0))


def test_extra_positions_repeat_first_force():
    first = (1.0, 2.0, 3.0)
    result = average_contact_force([[first, (9.0, 9.0, 9.0)]])
    assert np.allclose(result, 2 * np.array(first))


def test_wrong_position_count_is_logged(caplog):
    with caplog.at_level("ERROR"):
        average_contact_force([[(1.0, 0.0, 0.0), (1.0, 0.0, 0.0)]])
    assert "Contact count" in caplog.text


def test_force_topic():
    assert force_topic("FR_foot_contact") == "/visual/FR_foot_contact/the_force"


def test_default_scale_is_twenty():
    assert FORCE_DRAW_SCALE == 20.0
    start, end = scaled_force_line((20.0, -40.0, 60.0))
    assert start == (0.0, 0.0, 0.0)
    assert np.allclose(end, (1.0, -2.0, 3.0))


@given(vec3, st.floats(min_value=0.5, max_value=100.0))
def test_scaled_line_round_trip(force, scale):
    start, end = scaled_force_line(force, scale)
    assert start == (0.0, 0.0, 0.0)
    assert np.allclose(np.array(end) * scale, force, rtol=1e-9, atol=1e-6)


def test_zero_scale_is_rejected():
    with pytest.raises(ValueError):
        scaled_force_line((1.0, 2.0, 3.0), 0)