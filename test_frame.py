import json
import os
import tempfile
import unittest

from planetsim.camera import CoordinateMapper
from planetsim.constants import AU
from planetsim.errors import ConfigurationError
from planetsim.frame import advance, format_distance, render_pass
from planetsim.presets_loader import build_inner_solar_system, list_templates, load_template


class TestRenderPass(unittest.TestCase):

    def setUp(self):
        self.sim = build_inner_solar_system()
        self.mapper = CoordinateMapper(scale=250.0 / AU, origin=(400.0, 400.0))

    def test_one_command_per_body(self):
        commands = render_pass(self.sim, self.mapper)
        self.assertEqual([c.label for c in commands], ["Sun", "Earth", "Mars", "Mercury", "Venus"])

        sun, earth = commands[0], commands[1]
        self.assertEqual((sun.screen_x, sun.screen_y), (400.0, 400.0))
        self.assertEqual(sun.radius, 30.0)
        self.assertEqual(sun.color, (255, 255, 0))
        self.assertIsNone(sun.distance_text)

        self.assertAlmostEqual(earth.screen_x, 150.0)
        self.assertAlmostEqual(earth.screen_y, 400.0)
        self.assertEqual(earth.distance_text, "149600000.0km")

    def test_advance_steps_then_renders(self):
        commands = advance(self.sim, self.mapper)
        self.assertEqual(self.sim.steps, 1)
        earth = self.sim.bodies[1]
        self.assertEqual(commands[1].distance_text, format_distance(earth.distance_to_star))
        self.assertEqual(
            (commands[1].screen_x, commands[1].screen_y), self.mapper.to_screen(earth.position)
        )


class TestPresets(unittest.TestCase):

    def test_builtin_scene(self):
        sim = build_inner_solar_system()
        self.assertEqual(len(sim.bodies), 5)
        self.assertEqual(sim.star.name, "Sun")
        self.assertTrue(sim.fixed_star)
        earth = sim.bodies[1]
        self.assertEqual(earth.position, (-AU, 0.0))
        self.assertAlmostEqual(earth.velocity[1], 29783.0)

    def test_builtin_scene_runs_a_year(self):
        sim = build_inner_solar_system()
        for _ in range(365):
            sim.step()
        for body in sim.bodies[1:]:
            self.assertGreater(body.distance_to_star, 0.3 * AU)
            self.assertLess(body.distance_to_star, 1.7 * AU)

    def test_list_templates(self):
        names = dict(list_templates())
        self.assertEqual(names["sun_earth.json"], "Sun and Earth")
        self.assertIn("inner_planets_mutual.json", names)

    def test_load_si_template(self):
        sim, scale, name = load_template("sun_earth.json")
        self.assertEqual(name, "Sun and Earth")
        self.assertAlmostEqual(scale * AU, 250.0)
        self.assertEqual(sim.time_step, 86400.0)
        sun, earth = sim.bodies
        self.assertTrue(sun.is_star)
        self.assertEqual(earth.position, (1.496e11, 0.0))
        self.assertEqual(earth.velocity, (0.0, 29780.0))

    def test_load_au_template(self):
        sim, _, _ = load_template("inner_planets_mutual.json")
        self.assertFalse(sim.fixed_star)
        earth = sim.bodies[1]
        self.assertEqual(earth.name, "Earth")
        self.assertAlmostEqual(earth.position[0] / AU, -1.0)
        self.assertAlmostEqual(earth.velocity[1], 29783.0)

    def _write(self, payload):
        fd, path = tempfile.mkstemp(suffix=".json")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            if isinstance(payload, str):
                f.write(payload)
            else:
                json.dump(payload, f)
        self.addCleanup(os.remove, path)
        return path

    def test_invalid_json_raises(self):
        with self.assertRaises(ConfigurationError):
            load_template(self._write("{not json"))

    def test_missing_file_raises(self):
        with self.assertRaises(ConfigurationError):
            load_template("no_such_template.json")

    def test_bad_body_raises(self):
        payload = {
            "name": "Broken",
            "bodies": [
                {"name": "Sun", "mass": 1.0e30, "radius": 10, "position": [0, 0], "velocity": [0, 0]},
                {"name": "Ghost", "mass": -5.0, "radius": 4, "position": [1e11, 0], "velocity": [0, 3e4]},
            ],
        }
        with self.assertRaises(ConfigurationError):
            load_template(self._write(payload))

    def test_missing_field_raises(self):
        payload = {"bodies": [{"name": "Sun", "radius": 10, "position": [0, 0], "velocity": [0, 0]}]}
        with self.assertRaises(ConfigurationError):
            load_template(self._write(payload))

    def test_coincident_bodies_raise(self):
        payload = {
            "bodies": [
                {"name": "A", "mass": 1.0e24, "radius": 4, "position": [5e10, 0], "velocity": [0, 0]},
                {"name": "B", "mass": 1.0e24, "radius": 4, "position": [5e10, 0], "velocity": [0, 0]},
            ],
        }
        with self.assertRaises(ConfigurationError):
            load_template(self._write(payload))

    def test_template_without_scale(self):
        payload = {
            "units": "au",
            "bodies": [{"name": "Rock", "mass": 1.0e20, "radius": 3, "position": [2, 0], "velocity": [0, 10]}],
        }
        sim, scale, name = load_template(self._write(payload))
        self.assertIsNone(scale)
        self.assertIsNone(sim.star)
        self.assertEqual(sim.bodies[0].distance_to_star, 0.0)

    def test_fixed_star_must_be_boolean(self):
        payload = {
            "fixed_star": "false",
            "bodies": [{"name": "Rock", "mass": 1.0e20, "radius": 3, "position": [1e11, 0], "velocity": [0, 10]}],
        }
        with self.assertRaises(ConfigurationError):
            load_template(self._write(payload))

    def test_packaged_template_wins_over_working_directory(self):
        workdir = tempfile.mkdtemp()
        self.addCleanup(os.rmdir, workdir)
        decoy = os.path.join(workdir, "sun_earth.json")
        with open(decoy, "w", encoding="utf-8") as f:
            json.dump({"name": "Decoy", "bodies": [
                {"name": "Rock", "mass": 1.0e20, "radius": 3, "position": [1e11, 0], "velocity": [0, 10]}
            ]}, f)
        self.addCleanup(os.remove, decoy)
        previous = os.getcwd()
        os.chdir(workdir)
        self.addCleanup(os.chdir, previous)
        sim, _, name = load_template("sun_earth.json")
        self.assertEqual(name, "Sun and Earth")
        self.assertEqual(len(sim.bodies), 2)

    def test_explicit_path_outside_templates(self):
        path = self._write({"name": "Custom", "bodies": [
            {"name": "Rock", "mass": 1.0e20, "radius": 3, "position": [1e11, 0], "velocity": [0, 10]}
        ]})
        _, _, name = load_template(path)
        self.assertEqual(name, "Custom")

    def test_unknown_units_raise(self):
        payload = {"units": "parsec", "bodies": []}
        with self.assertRaises(ConfigurationError):
            load_template(self._write(payload))


if __name__ == '__main__':
    unittest.main()
