import math
import unittest

from zcamgamut.color.adaptation import (
    xyz_chromatic_adaptation,
    xyz_chromatic_adaptation_inverse,
)
from zcamgamut.color.conversion import (
    linear_srgb_in_8bit_gamut,
    linear_srgb_in_gamut,
    linear_srgb_to_srgb,
    parse_hex,
    srgb_to_hex,
)
from zcamgamut.color.jzazbz import (
    izazbz_to_xyz,
    jzazbz_to_xyz,
    xyz_to_izazbz,
    xyz_to_jzazbz,
)
from zcamgamut.color.spec import (
    MissingAttributeError,
    PerceptualColor,
    Surround,
    ViewingConditions,
)
from zcamgamut.color.zcam import (
    complete,
    DEFAULT_VIEWING,
    hue_from_quadrature,
    hue_quadrature,
    srgb_to_zcam,
    xyz_to_zcam,
    zcam_to_linear_srgb,
    zcam_to_xyz,
)


D65 = (95.047, 100.0, 108.883)
D50 = (96.422, 100.0, 82.521)
ILLUMINANT_A = (109.85, 100.0, 35.585)


class TestConversion(unittest.TestCase):

    def test_hex(self) -> None:
        self.assertEqual(parse_hex('#ff8000'), (1.0, 128 / 255, 0.0))
        self.assertEqual(parse_hex('#fff'), (1.0, 1.0, 1.0))
        self.assertEqual(srgb_to_hex(1.0, 128 / 255, -0.2), '#ff8000')
        for text in ('ff8000', '#ff80', '#gg8000'):
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    parse_hex(text)

    def test_gamut_predicates(self) -> None:
        self.assertTrue(linear_srgb_in_gamut(0.0, 0.5, 1.0))
        self.assertFalse(linear_srgb_in_gamut(0.0, 0.5, 1.001))
        self.assertTrue(linear_srgb_in_8bit_gamut(0.0, 0.5, 1.001))
        self.assertFalse(linear_srgb_in_8bit_gamut(-0.01, 0.5, 1.0))


class TestAdaptation(unittest.TestCase):

    def test_white_point(self) -> None:
        # Adapting the source white yields the reference white scaled by the
        # luminance ratio between both whites
        prev = tuple(2 * c for c in D50)
        adapted = xyz_chromatic_adaptation(prev, prev, D65)  # type: ignore[arg-type]
        for actual, expected in zip(adapted, D65):
            self.assertAlmostEqual(actual, 2 * expected, places=9)

    def test_scaled_white(self) -> None:
        xyz = (41.24, 21.26, 1.93)
        bright = tuple(2.03 * c for c in D65)
        adapted = xyz_chromatic_adaptation(xyz, D65, bright)  # type: ignore[arg-type]
        for actual, expected in zip(adapted, xyz):
            self.assertAlmostEqual(actual, expected, places=9)

    def test_warm_to_daylight(self) -> None:
        adapted = xyz_chromatic_adaptation((41.24, 21.26, 1.93), ILLUMINANT_A, D65)
        ratio = ILLUMINANT_A[1] / D65[1]
        self.assertEqual(ratio, 1.0)
        # Adaptation to a bluer white raises Z and lowers X
        self.assertLess(adapted[0], 41.24)
        self.assertGreater(adapted[2], 1.93)
        self.assertAlmostEqual(
            xyz_chromatic_adaptation_inverse(adapted, ILLUMINANT_A, D65)[1],
            21.26, places=9,
        )

    def test_no_adaptation(self) -> None:
        xyz = (41.24, 21.26, 1.93)
        self.assertEqual(xyz_chromatic_adaptation(xyz, D65, D65, 0.5), xyz)
        for actual, expected in zip(xyz_chromatic_adaptation(xyz, D50, D65, 0.0), xyz):
            self.assertAlmostEqual(actual, expected, places=9)

    def test_inverse(self) -> None:
        xyz = (30.0, 40.0, 50.0)
        for D in (0.0, 0.3, 0.7, 1.0):
            with self.subTest(D=D):
                adapted = xyz_chromatic_adaptation(xyz, D50, D65, D)
                restored = xyz_chromatic_adaptation_inverse(adapted, D50, D65, D)
                for actual, expected in zip(restored, xyz):
                    self.assertAlmostEqual(actual, expected, places=9)

    def test_invalid_degree(self) -> None:
        with self.assertRaises(ValueError):
            xyz_chromatic_adaptation((1.0, 1.0, 1.0), D50, D65, 1.5)
        with self.assertRaises(ValueError):
            xyz_chromatic_adaptation_inverse((1.0, 1.0, 1.0), D50, D65, -0.1)


class TestJzazbz(unittest.TestCase):

    def test_jzazbz(self) -> None:
        for xyz in ((41.24, 21.26, 1.93), (95.047, 100.0, 108.883), (5.0, 1.0, 20.0)):
            with self.subTest(xyz=xyz):
                for actual, expected in zip(jzazbz_to_xyz(*xyz_to_jzazbz(*xyz)), xyz):
                    self.assertAlmostEqual(actual, expected, places=6)

    def test_izazbz(self) -> None:
        for xyz in ((41.24, 21.26, 1.93), (95.047, 100.0, 108.883), (5.0, 1.0, 20.0)):
            with self.subTest(xyz=xyz):
                for actual, expected in zip(izazbz_to_xyz(*xyz_to_izazbz(*xyz)), xyz):
                    self.assertAlmostEqual(actual, expected, places=6)

    def test_black(self) -> None:
        Iz, az, bz = xyz_to_izazbz(0.0, 0.0, 0.0)
        self.assertAlmostEqual(Iz, 0.0, places=9)
        self.assertAlmostEqual(az, 0.0, places=9)
        self.assertAlmostEqual(bz, 0.0, places=9)


class TestViewingConditions(unittest.TestCase):

    def test_surround(self) -> None:
        self.assertEqual(Surround.DIM.Fs, 0.59)
        self.assertEqual(Surround.DIM.F, 0.9)
        self.assertEqual(Surround.AVERAGE.Fs, 0.69)

    def test_defaults(self) -> None:
        viewing = ViewingConditions.create()
        self.assertEqual(viewing.surround, Surround.AVERAGE)
        self.assertEqual(viewing.Yw, 203.0)
        self.assertAlmostEqual(viewing.white[0], 95.047 * 2.03, places=9)
        self.assertGreaterEqual(viewing.D, 0.0)
        self.assertLessEqual(viewing.D, 1.0)

        self.assertEqual(DEFAULT_VIEWING.surround, Surround.DIM)
        self.assertEqual(DEFAULT_VIEWING.white, D65)
        self.assertEqual(DEFAULT_VIEWING.Fs, 0.59)

    def test_invalid(self) -> None:
        with self.assertRaises(ValueError):
            ViewingConditions.create(La=0)


class TestZcam(unittest.TestCase):

    def test_red(self) -> None:
        red = srgb_to_zcam(*parse_hex('#ff0000'))
        self.assertTrue(red.is_complete())
        self.assertAlmostEqual(red.hue, 42.477, delta=0.05)  # type: ignore[arg-type]

    def test_white(self) -> None:
        white = xyz_to_zcam(*D65)
        self.assertAlmostEqual(white.lightness, 100.0, places=6)  # type: ignore[arg-type]
        self.assertAlmostEqual(
            white.brightness, DEFAULT_VIEWING.Qz_w, places=6  # type: ignore[arg-type]
        )
        self.assertLess(white.chroma, 2.0)  # type: ignore[operator]

        black = srgb_to_zcam(0.0, 0.0, 0.0)
        self.assertAlmostEqual(black.lightness, 0.0, places=6)  # type: ignore[arg-type]

    def test_quadrature(self) -> None:
        self.assertAlmostEqual(hue_quadrature(259), 311.94, delta=0.01)
        self.assertAlmostEqual(hue_quadrature(33.44), 0.0, places=9)
        self.assertAlmostEqual(hue_quadrature(89.29), 100.0, places=9)
        for hue in (1.0, 20.0, 33.44, 60.0, 146.3, 200.0, 259.0, 359.0):
            with self.subTest(hue=hue):
                self.assertAlmostEqual(
                    hue_from_quadrature(hue_quadrature(hue)), hue, places=9
                )

    def test_srgb_round_trip(self) -> None:
        for viewing in (DEFAULT_VIEWING, ViewingConditions.create()):
            for text in ('#3366cc', '#ff0000', '#ffca00', '#0d9488', '#7c3aed'):
                with self.subTest(text=text, surround=viewing.surround):
                    srgb = parse_hex(text)
                    color = srgb_to_zcam(*srgb, viewing)
                    restored = linear_srgb_to_srgb(*zcam_to_linear_srgb(color, viewing))
                    for actual, expected in zip(restored, srgb):
                        self.assertAlmostEqual(actual, expected, places=6)

    def test_xyz_round_trip(self) -> None:
        viewing = ViewingConditions.create(surround=Surround.DARK, La=40, Yw=150)
        xyz = (30.0, 25.0, 40.0)
        for actual, expected in zip(zcam_to_xyz(xyz_to_zcam(*xyz, viewing), viewing), xyz):
            self.assertAlmostEqual(actual, expected, places=6)

    def test_complete(self) -> None:
        color = srgb_to_zcam(*parse_hex('#3366cc'))
        assert color.chroma is not None

        alternatives = {
            'quadrature': PerceptualColor(
                quadrature=color.quadrature,
                brightness=color.brightness,
                colorfulness=color.colorfulness,
            ),
            'saturation': PerceptualColor(
                hue=color.hue, lightness=color.lightness, saturation=color.saturation
            ),
            'vividness': PerceptualColor(
                hue=color.hue, lightness=color.lightness, vividness=color.vividness
            ),
            'blackness': PerceptualColor(
                hue=color.hue, lightness=color.lightness, blackness=color.blackness
            ),
            'whiteness': PerceptualColor(
                hue=color.hue, lightness=color.lightness, whiteness=color.whiteness
            ),
        }

        for name, partial in alternatives.items():
            with self.subTest(attribute=name):
                completed = complete(partial)
                self.assertTrue(completed.is_complete())
                self.assertAlmostEqual(completed.hue, color.hue, places=6)  # type: ignore[arg-type]
                self.assertAlmostEqual(
                    completed.lightness, color.lightness, places=6  # type: ignore[arg-type]
                )
                self.assertAlmostEqual(completed.chroma, color.chroma, places=6)  # type: ignore[arg-type]

    def test_complete_prefers_first(self) -> None:
        color = complete(PerceptualColor(hue=100, lightness=50, chroma=10, saturation=90))
        self.assertEqual(color.chroma, 10)
        self.assertNotEqual(color.saturation, 90)

    def test_missing_attributes(self) -> None:
        cases = {
            'a hue': PerceptualColor(lightness=50, chroma=10),
            'an achromatic attribute': PerceptualColor(hue=50, chroma=10),
            'a colorfulness attribute': PerceptualColor(hue=50, lightness=10),
        }
        for axis, color in cases.items():
            with self.subTest(axis=axis):
                with self.assertRaises(MissingAttributeError) as context:
                    complete(color)
                self.assertEqual(context.exception.axis, axis)
                self.assertIsInstance(context.exception, ValueError)

    def test_replace(self) -> None:
        color = PerceptualColor(hue=10, lightness=20, chroma=30)
        self.assertFalse(color.is_complete())
        self.assertEqual(color.replace(chroma=5).chroma, 5)
        self.assertEqual(color.chroma, 30)
        self.assertTrue(math.isfinite(complete(color).vividness))  # type: ignore[arg-type]


if __name__ == '__main__':
    unittest.main()
