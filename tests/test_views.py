from fittrack.views import _recorded


def test_zero_reading_is_still_recorded():
    assert _recorded(0, "kg") == "0 kg"
    assert _recorded(7.5, "hrs") == "7.5 hrs"
    assert _recorded(None, "kg") == "Not recorded"
