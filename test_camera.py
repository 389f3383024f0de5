import unittest

from planetsim.camera import CoordinateMapper, scale_to_fit
from planetsim.constants import AU, HEIGHT, SCALE, WIDTH
from planetsim.data_models import Body
from planetsim.errors import ConfigurationError


class TestCoordinateMapper(unittest.TestCase):

    def test_default_maps_origin_to_window_center(self):
        mapper = CoordinateMapper()
        self.assertEqual(mapper.to_screen((0.0, 0.0)), (WIDTH / 2, HEIGHT / 2))
        self.assertEqual(mapper.scale, SCALE)

    def test_to_screen_is_affine(self):
        mapper = CoordinateMapper(scale=250.0 / AU, origin=(400.0, 400.0))
        sx, sy = mapper.to_screen((-AU, 0.5 * AU))
        self.assertAlmostEqual(sx, 150.0)
        self.assertAlmostEqual(sy, 525.0)

    def test_composes_translations(self):
        mapper = CoordinateMapper(scale=2.0e-9, origin=(100.0, 50.0))
        p1 = (3.0e10, -1.0e10)
        p2 = (-5.0e9, 4.0e10)
        s1 = mapper.to_screen(p1)
        s2 = mapper.to_screen(p2)
        s12 = mapper.to_screen((p1[0] + p2[0], p1[1] + p2[1]))
        o = mapper.to_screen((0.0, 0.0))
        self.assertAlmostEqual(s12[0], s1[0] + s2[0] - o[0])
        self.assertAlmostEqual(s12[1], s1[1] + s2[1] - o[1])

    def test_doubling_scale_doubles_displacement(self):
        offset = (7.5e10, -2.25e11)
        origin = (400.0, 300.0)
        single = CoordinateMapper(scale=1.0e-9, origin=origin).to_screen(offset)
        double = CoordinateMapper(scale=2.0e-9, origin=origin).to_screen(offset)
        self.assertAlmostEqual(double[0] - origin[0], 2 * (single[0] - origin[0]))
        self.assertAlmostEqual(double[1] - origin[1], 2 * (single[1] - origin[1]))

    def test_to_world_inverts_to_screen(self):
        mapper = CoordinateMapper(scale=SCALE, origin=(400.0, 400.0))
        world = (1.2e11, -3.4e10)
        back = mapper.to_world(mapper.to_screen(world))
        self.assertAlmostEqual(back[0] / world[0], 1.0)
        self.assertAlmostEqual(back[1] / world[1], 1.0)

    def test_configure_rejects_bad_scale(self):
        mapper = CoordinateMapper()
        for bad in (0.0, -1.0, float("inf"), float("nan")):
            with self.assertRaises(ConfigurationError):
                mapper.configure(bad, (0.0, 0.0))
        with self.assertRaises(ConfigurationError):
            mapper.configure(1.0, (float("nan"), 0.0))
        self.assertEqual(mapper.scale, SCALE)

    def test_configure_rejects_non_numeric_input(self):
        mapper = CoordinateMapper()
        with self.assertRaises(ConfigurationError):
            mapper.configure("x", (0.0, 0.0))
        with self.assertRaises(ConfigurationError):
            mapper.configure(1.0, ("left", 0.0))
        with self.assertRaises(ConfigurationError):
            mapper.configure(1.0, (0.0,))
        self.assertEqual(mapper.scale, SCALE)

    def test_configure_changes_mapping(self):
        mapper = CoordinateMapper()
        mapper.configure(1.0, (10.0, 20.0))
        self.assertEqual(mapper.to_screen((1.0, 2.0)), (11.0, 22.0))


class TestScaleToFit(unittest.TestCase):

    def test_fits_farthest_body(self):
        bodies = [Body("Sun", 1.0, 1.0), Body("Far", 1.0, 1.0, position=(0.0, -2.0e11))]
        scale = scale_to_fit(bodies, (800, 600), margin=1.0)
        self.assertAlmostEqual(scale * 2.0e11, 300.0)

    def test_no_bodies_uses_default(self):
        self.assertEqual(scale_to_fit([]), SCALE)


if __name__ == '__main__':
    unittest.main()
