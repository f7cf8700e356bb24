import pytest

from sim.scenarios import converging_descending_heavy, crossing_right_to_left, overtaking_ahead
from viz.aural import AuralReadout, altitude_words, normalize_phrase, spoken_callsign, spoken_solution


@pytest.mark.parametrize("callsign, spoken", [
    ("KLM1734", "Kilo Lima Mike one seven three four"),
    ("BAW22K", "Bravo Alfa Whiskey two two Kilo"),
    ("G-OSKY", "Golf Oscar Sierra Kilo Yankee"),
    ("N4RT", "November four Romeo Tango"),
    ("TRAINER12", "Trainer one two"),
    ("VIPER09", "Viper zero niner"),
])
def test_spoken_callsign(callsign, spoken):
    assert spoken_callsign(callsign) == spoken


@pytest.mark.parametrize("feet, words", [
    (500, "five hundred"),
    (1000, "one thousand"),
    (2500, "two thousand five hundred"),
    (11000, "one one thousand"),
])
def test_altitude_words(feet, words):
    assert altitude_words(feet) == words


def test_normalize_phrase():
    assert normalize_phrase("traffic, 11 o'clock, 1 mile, 500 feet below") == (
        "traffic, eleven o'clock, one mile, five hundred feet below"
    )


def test_spoken_solution_overtaking():
    ex = overtaking_ahead()
    assert spoken_solution(ex) == (
        "Kilo Lima Mike one seven three four, traffic, twelve o'clock, five miles, "
        "overtaking, one thousand feet above, Airbus A320"
    )


def test_spoken_solution_keeps_heavy_and_level_change():
    text = spoken_solution(converging_descending_heavy())
    assert text.startswith("Delta Lima Hotel four Charlie Papa, traffic, ten o'clock, five miles")
    assert "two thousand feet above, descending through your altitude" in text
    assert text.endswith("heavy")


def test_spoken_solution_registration():
    text = spoken_solution(crossing_right_to_left())
    assert text.startswith("November four Romeo Tango, traffic, one o'clock, seven miles")


def test_readout_close_without_start_is_noop():
    aural = AuralReadout()
    aural.close()
