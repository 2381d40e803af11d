import unittest
from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest

from tonal_pitch import tuning_systems
from tonal_pitch.errors import (
    PitchRangeError,
    TuningContextError,
    UnsupportedConversionError,
)
from tonal_pitch.tuning_systems import (
    EQUAL_TEMPERAMENT,
    JUST_INTONATION,
    WERCKMEISTER_III,
    WERCKMEISTER_III_RATIOS,
    TuningSystem,
    WellTemperament,
    equal_tempered_hz,
    get_tuning_system,
    is_number,
    register_tuning_system,
    round_half_away_from_zero,
    tuning_system_names,
    validate_frequency,
    validate_ratio_table,
    well_tempered_hz,
)


class TestEqualTemperament(unittest.TestCase):
    def test_reference_pitch_is_exact(self):
        self.assertEqual(EQUAL_TEMPERAMENT.index_to_hz(440.0, 69), 440.0)
        self.assertEqual(EQUAL_TEMPERAMENT.index_to_hz(430.0, 69), 430.0)

    def test_octaves_are_exact(self):
        self.assertEqual(EQUAL_TEMPERAMENT.index_to_hz(440.0, 81), 880.0)
        self.assertEqual(EQUAL_TEMPERAMENT.index_to_hz(440.0, 57), 220.0)

    def test_middle_c(self):
        self.assertAlmostEqual(EQUAL_TEMPERAMENT.index_to_hz(440.0, 60), 261.6255653, places=6)

    def test_tonic_is_ignored(self):
        self.assertEqual(
            EQUAL_TEMPERAMENT.index_to_hz(440.0, 64, "D"),
            EQUAL_TEMPERAMENT.index_to_hz(440.0, 64),
        )

    def test_round_trip_over_midi_range(self):
        for index in range(0, 128):
            freq = EQUAL_TEMPERAMENT.index_to_hz(440.0, index)
            self.assertEqual(EQUAL_TEMPERAMENT.hz_to_index(440.0, freq), index)

    def test_nearest_index(self):
        self.assertEqual(EQUAL_TEMPERAMENT.hz_to_index(440.0, 261.63), 60)
        self.assertEqual(EQUAL_TEMPERAMENT.hz_to_index(440.0, 445.0), 69)
        self.assertEqual(EQUAL_TEMPERAMENT.hz_to_index(432.0, 432.0), 69)
        # Well below the anchor note
        self.assertEqual(EQUAL_TEMPERAMENT.hz_to_index(440.0, 4.0), -12)

    def test_invalid_frequency(self):
        for freq in (0.0, -440.0, float("nan"), float("inf")):
            with self.assertRaises(PitchRangeError):
                EQUAL_TEMPERAMENT.hz_to_index(440.0, freq)


@pytest.mark.parametrize(
    "value, expected",
    [
        (69.5, 70),
        (68.5, 69),  # banker's rounding would give 68
        (0.5, 1),
        (-0.5, -1),
        (-1.5, -2),
        (0.49, 0),
        (69.4999, 69),
        (70.0, 70),
        (0.0, 0),
    ],
)
def test_round_half_away_from_zero(value, expected):
    assert round_half_away_from_zero(value) == expected


class TestRatioTables(unittest.TestCase):
    def test_werckmeister_iii_values(self):
        ratios = WERCKMEISTER_III_RATIOS
        self.assertEqual(len(ratios), 12)
        self.assertEqual(ratios[0], 1.0)
        self.assertEqual(ratios[1], 256 / 243)
        self.assertEqual(ratios[3], 32 / 27)
        self.assertEqual(ratios[5], 4 / 3)
        self.assertEqual(ratios[6], 1024 / 729)
        self.assertEqual(ratios[8], 128 / 81)
        self.assertEqual(ratios[10], 16 / 9)
        self.assertAlmostEqual(ratios[2], 1.117403, places=6)
        self.assertAlmostEqual(ratios[4], 1.25283, places=4)
        self.assertAlmostEqual(ratios[7], 1.494927, places=6)
        self.assertAlmostEqual(ratios[9], 1.67044, places=4)
        self.assertAlmostEqual(ratios[11], 1.87924, places=4)

    def test_tables_ascend_within_octave(self):
        for table in (WERCKMEISTER_III.ratios, JUST_INTONATION.ratios):
            self.assertEqual(list(table), sorted(table))
            self.assertLess(table[-1], 2.0)

    def test_validation(self):
        with self.assertRaises(ValueError):
            validate_ratio_table([1.0] * 11)
        with self.assertRaises(ValueError):
            validate_ratio_table([1.01] + [1.1] * 11)
        with self.assertRaises(ValueError):
            validate_ratio_table([1.0, -1.0] + [1.1] * 10)
        with self.assertRaises(ValueError):
            WellTemperament("broken", [1.0, float("nan")] + [1.1] * 10)

    def test_table_is_stored_as_tuple(self):
        system = WellTemperament("listed", list(JUST_INTONATION.ratios))
        self.assertIsInstance(system.ratios, tuple)
        self.assertEqual(system.ratios, JUST_INTONATION.ratios)


class TestWellTemperament(unittest.TestCase):
    def test_requires_tonic(self):
        self.assertTrue(WERCKMEISTER_III.requires_tonic)
        self.assertFalse(EQUAL_TEMPERAMENT.requires_tonic)
        with self.assertRaises(TuningContextError):
            WERCKMEISTER_III.index_to_hz(440.0, 60)

    def test_tonic_is_equal_tempered(self):
        self.assertEqual(
            WERCKMEISTER_III.index_to_hz(440.0, 60, "C"), equal_tempered_hz(440.0, 60)
        )
        self.assertEqual(
            WERCKMEISTER_III.index_to_hz(440.0, 70, "Bb"), equal_tempered_hz(440.0, 70)
        )

    def test_ratio_above_tonic(self):
        c4 = equal_tempered_hz(440.0, 60)
        self.assertEqual(WERCKMEISTER_III.index_to_hz(440.0, 67, "C"), c4 * WERCKMEISTER_III_RATIOS[7])
        self.assertEqual(WERCKMEISTER_III.index_to_hz(440.0, 71, "C"), c4 * WERCKMEISTER_III_RATIOS[11])

    def test_below_tonic_is_halved_once(self):
        d4 = equal_tempered_hz(440.0, 62)
        c_sharp_4 = WERCKMEISTER_III.index_to_hz(440.0, 61, "D")
        self.assertEqual(c_sharp_4, d4 * WERCKMEISTER_III_RATIOS[11] / 2.0)
        # Same pitch class one octave down is half again, not a quarter of C#4
        c_sharp_3 = WERCKMEISTER_III.index_to_hz(440.0, 49, "D")
        self.assertAlmostEqual(c_sharp_4 / c_sharp_3, 2.0, places=12)
        self.assertLess(c_sharp_4, d4)

    def test_every_octave_doubles(self):
        for tonic in ("C", "D", "F#", "A"):
            for index in range(24, 100):
                low = WERCKMEISTER_III.index_to_hz(440.0, index, tonic)
                high = WERCKMEISTER_III.index_to_hz(440.0, index + 12, tonic)
                self.assertAlmostEqual(high / low, 2.0, places=12)

    def test_monotonic_across_tonic_boundary(self):
        freqs = [WERCKMEISTER_III.index_to_hz(440.0, i, "E") for i in range(48, 84)]
        self.assertEqual(freqs, sorted(freqs))

    def test_negative_index(self):
        freq = WERCKMEISTER_III.index_to_hz(440.0, -1, "C")
        self.assertGreater(freq, 0.0)
        self.assertLess(freq, WERCKMEISTER_III.index_to_hz(440.0, 0, "C"))
        self.assertEqual(freq, equal_tempered_hz(440.0, -12) * WERCKMEISTER_III_RATIOS[11])

    def test_pure_function_matches_method(self):
        self.assertEqual(
            well_tempered_hz(WERCKMEISTER_III_RATIOS, 415.0, 65, "G"),
            WERCKMEISTER_III.index_to_hz(415.0, 65, "G"),
        )

    def test_inverse_is_unsupported(self):
        with self.assertRaises(UnsupportedConversionError):
            WERCKMEISTER_III.hz_to_index(440.0, 440.0, "C")
        # Also a NotImplementedError for generic callers
        with self.assertRaises(NotImplementedError):
            JUST_INTONATION.hz_to_index(440.0, 440.0, "C")

    def test_just_intonation_fifth(self):
        c4 = equal_tempered_hz(440.0, 60)
        self.assertEqual(JUST_INTONATION.index_to_hz(440.0, 67, "C"), c4 * 1.5)


TONIC_SPELLINGS = [
    letter + accidentals
    for letter in "CDEFGAB"
    for accidentals in ("", "#", "b", "##", "bb", "bbb", "#b")
]


@pytest.mark.parametrize("tonic", TONIC_SPELLINGS)
def test_every_tonic_spelling_stays_in_octave(tonic):
    for index in range(24, 100):
        freq = WERCKMEISTER_III.index_to_hz(440.0, index, tonic)
        # Within a few cents of equal temperament, never an octave off
        assert 0.98 < freq / equal_tempered_hz(440.0, index) < 1.02
        assert WERCKMEISTER_III.index_to_hz(440.0, index + 1, tonic) > freq
        assert WERCKMEISTER_III.index_to_hz(440.0, index + 12, tonic) / freq == pytest.approx(2.0)


@pytest.mark.parametrize(
    "spelled, natural",
    [("Cb", "B"), ("B#", "C"), ("Dbbb", "B"), ("Fb", "E"), ("E#", "F"), ("Gb", "F#")],
)
def test_enharmonic_tonics_tune_alike(spelled, natural):
    for index in (47, 59, 60, 61, 71, 72):
        assert WERCKMEISTER_III.index_to_hz(440.0, index, spelled) == WERCKMEISTER_III.index_to_hz(
            440.0, index, natural
        )


def test_flat_tonic_crossing_octave_boundary():
    b3 = WERCKMEISTER_III.index_to_hz(440.0, 59, "Cb")
    c4 = WERCKMEISTER_III.index_to_hz(440.0, 60, "Cb")
    assert b3 == equal_tempered_hz(440.0, 59)
    assert c4 / b3 == pytest.approx(WERCKMEISTER_III_RATIOS[1])


@pytest.mark.parametrize("value", [Fraction(861, 2), np.float32(430.5), np.int64(430), 430])
def test_validate_frequency_accepts_real_numbers(value):
    assert validate_frequency(value) == float(value)


@pytest.mark.parametrize("value", [Decimal("430"), "430", True, None, complex(430, 0)])
def test_validate_frequency_rejects_non_real(value):
    assert not is_number(value)
    with pytest.raises(PitchRangeError):
        validate_frequency(value)


class TestRegistry(unittest.TestCase):
    def tearDown(self):
        tuning_systems._registry.pop("pythagorean", None)

    def test_builtin_names(self):
        self.assertEqual(tuning_system_names(), ["equal", "just", "werckmeister_iii"])
        self.assertIs(get_tuning_system("equal"), EQUAL_TEMPERAMENT)
        self.assertIs(get_tuning_system("werckmeister_iii"), WERCKMEISTER_III)

    def test_unknown_name(self):
        with self.assertRaises(TuningContextError):
            get_tuning_system("meantone")

    def test_register_new_system(self):
        pythagorean = WellTemperament(
            "pythagorean",
            [1.0, 256 / 243, 9 / 8, 32 / 27, 81 / 64, 4 / 3, 729 / 512,
             3 / 2, 128 / 81, 27 / 16, 16 / 9, 243 / 128],
        )
        register_tuning_system("pythagorean", pythagorean)
        self.assertIs(get_tuning_system("pythagorean"), pythagorean)
        self.assertIsInstance(pythagorean, TuningSystem)
        self.assertIn("pythagorean", tuning_system_names())

    def test_register_rejects_non_systems(self):
        with self.assertRaises(TypeError):
            register_tuning_system("pythagorean", [1.0] * 12)


if __name__ == "__main__":
    unittest.main()
