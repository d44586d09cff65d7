import pytest

from attendance_relay.errors import InvalidModeError
from attendance_relay.mode_controller import Mode, ModeController


def test_defaults_to_check_in():
    assert ModeController().get_mode() is Mode.CHECK_IN


@pytest.mark.parametrize("label, expected", [("出勤", Mode.CHECK_IN), ("退勤", Mode.CHECK_OUT)])
def test_set_mode_accepts_both_labels(label, expected):
    modes = ModeController()
    assert modes.set_mode(label) is expected
    assert modes.get_mode() is expected


@pytest.mark.parametrize("label", ["", "出勤 ", "checkin", "CheckOut", None, 1])
def test_set_mode_rejects_anything_else(label):
    modes = ModeController(default=Mode.CHECK_OUT)
    with pytest.raises(InvalidModeError):
        modes.set_mode(label)
    assert modes.get_mode() is Mode.CHECK_OUT


def test_from_label_falls_back_on_unknown_default():
    assert ModeController.from_label("退勤").get_mode() is Mode.CHECK_OUT
    assert ModeController.from_label("lunch").get_mode() is Mode.CHECK_IN
