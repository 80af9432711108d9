import os
import tempfile
import unittest
from unittest import mock

import numpy as np

import ray
from ray import *
from geometry import Sphere, Hit, no_hit
from materials import Material, Albedo
from utils import vec, normalize, clamp_color, to_bytes
from ImLite import Image
from ExampleSceneDef import FourSpheresExample, DiffuseSphereExample, EmptySceneExample, GradientExample

def assert_direction_matches(v, w):
    np.testing.assert_almost_equal(normalize(v), normalize(w), decimal=6)


matte = Material(vec([0.2, 0.4, 0.6]), Albedo(1.0, 0.0, 0.0, 0.0))
shiny = Material(vec([0.2, 0.4, 0.6]), Albedo(0.0, 1.0, 0.0, 0.0), p=10.)
chrome = Material(vec([1.0, 1.0, 1.0]), Albedo(0.0, 0.0, 1.0, 0.0), p=100.)


class TestVectorAlgebra(unittest.TestCase):

    def test_normalize_is_unit_length(self):
        for d in [[1, 0, 0], [3, 4, 0], [-1, -2, 0.5], [1e-3, 2e-3, -5e-4], [100, -250, 12]]:
            self.assertAlmostEqual(np.linalg.norm(normalize(vec(d))), 1.0, places=6)

    def test_normalize_zero_vector(self):
        with self.assertRaises(ValueError):
            normalize(vec([0, 0, 0]))

    def test_vec_is_read_only(self):
        v = vec([1, 2, 3])
        with self.assertRaises(ValueError):
            v[0] = 5
        # arithmetic makes new values and leaves the operands alone
        w = v + vec([1, 1, 1])
        np.testing.assert_array_equal(v, [1, 2, 3])
        np.testing.assert_array_equal(w, [2, 3, 4])

    def test_clamp_color(self):
        # the brightest channel is scaled down to one, keeping the ratios
        np.testing.assert_allclose(clamp_color(vec([2.0, 1.0, 0.5])), [1.0, 0.5, 0.25])
        # in-range and negative colors are untouched
        np.testing.assert_array_equal(clamp_color(vec([0.2, 0.7, 0.8])), vec([0.2, 0.7, 0.8]))
        np.testing.assert_array_equal(clamp_color(vec([-0.5, 0.3, 0.1])), vec([-0.5, 0.3, 0.1]))

    def test_clamp_color_image(self):
        img = np.array([[[4.0, 2.0, 0.0], [0.5, 0.5, 0.5]]], np.float32)
        np.testing.assert_allclose(clamp_color(img), [[[1.0, 0.5, 0.0], [0.5, 0.5, 0.5]]])

    def test_to_bytes(self):
        np.testing.assert_array_equal(to_bytes(vec([0.2, 0.7, 0.8])), [51, 178, 204])
        np.testing.assert_array_equal(to_bytes(vec([1.5, -0.2, 1.0])), [255, 0, 255])
        self.assertEqual(to_bytes(vec([0.5, 0.5, 0.5])).dtype, np.uint8)
        # truncation, not rounding
        np.testing.assert_array_equal(to_bytes(vec([0.999, 0.5, 0.25])), [254, 127, 63])

    def test_nan_channel_saturates(self):
        nan = float('nan')
        np.testing.assert_array_equal(to_bytes(vec([nan, 0.5, 0.0])), [255, 127, 0])
        # the other channels still decide the scale
        np.testing.assert_array_equal(to_bytes(clamp_color(vec([nan, 2.0, 1.0]))), [255, 255, 127])


class TestSphereIntersect(unittest.TestCase):

    def confirm_hit(self, sphere, ray):
        # make sure hit is self-consistent, then return it
        hit = sphere.intersect(ray)
        self.assertLess(hit.t, np.inf)
        np.testing.assert_allclose(ray.origin + hit.t * ray.direction, hit.point, atol=1e-5)
        np.testing.assert_allclose(normalize(hit.point - sphere.center), hit.normal, atol=1e-6)
        self.assertAlmostEqual(np.linalg.norm(hit.point - sphere.center), sphere.radius, places=4)
        self.assertIs(hit.material, sphere.material)
        return hit

    def test_unitsphere_hits(self):
        unit_sphere = Sphere(vec([0, 0, 0]), 1.0, None)
        # dead center hit
        hit = self.confirm_hit(unit_sphere, Ray(vec([2.0, 0.0, 0.0]), vec([-1.0, 0.0, 0.0])))
        self.assertAlmostEqual(hit.t, 1.0, places=6)
        np.testing.assert_allclose(hit.normal, [1, 0, 0])
        # off center hit
        hit = self.confirm_hit(unit_sphere, Ray(vec([1.0, 0.5, 0.0]), vec([-1.0, 0.0, 0.0])))
        self.assertAlmostEqual(hit.t, 1 - np.sin(np.pi/3), places=5)
        # center hit from off axis: distance is |origin - center| - radius
        hit = self.confirm_hit(unit_sphere, Ray(vec([2.0, 3.0, 4.0]), normalize(vec([-2.0, -3.0, -4.0]))))
        self.assertAlmostEqual(hit.t, np.sqrt(29) - 1, places=4)

    def test_unitsphere_misses(self):
        unit_sphere = Sphere(vec([0, 0, 0]), 1.0, None)
        # on axis miss
        hit = unit_sphere.intersect(Ray(vec([2.0, 3.0, 0.0]), vec([-1.0, 0.0, 0.0])))
        self.assertEqual(hit.t, np.inf)
        # pointing away from the sphere
        hit = unit_sphere.intersect(Ray(vec([0.0, 0.0, 5.0]), vec([0.0, 0.0, 1.0])))
        self.assertIs(hit, no_hit)

    def test_origin_inside(self):
        sphere = Sphere(vec([0, 0, -5]), 2.0, None)
        hit = self.confirm_hit(sphere, Ray(vec([0.0, 0.0, -5.0]), vec([0.0, 0.0, -1.0])))
        self.assertAlmostEqual(hit.t, 2.0, places=6)
        # normal still points out of the sphere
        np.testing.assert_allclose(hit.normal, [0, 0, -1])

    def test_nonunit_hits(self):
        # all the same as the first case, but scaled by 3 and shifted by (-1, -5, -7)
        sphere = Sphere(vec([-1, -5, -7]), 3.0, None)
        hit = self.confirm_hit(sphere, Ray(vec([5.0, -5.0, -7.0]), vec([-1.0, 0.0, 0.0])))
        self.assertAlmostEqual(hit.t, 3.0, places=5)
        hit = self.confirm_hit(sphere, Ray(vec([2.0, -3.5, -7.0]), vec([-1.0, 0.0, 0.0])))
        self.assertAlmostEqual(hit.t, 3 * (1 - np.sin(np.pi/3)), places=5)


class TestSceneIntersect(unittest.TestCase):

    def test_nearest_wins(self):
        far = Sphere(vec([0, 0, -10]), 1.0, matte)
        near = Sphere(vec([0, 0, -5]), 1.0, shiny)
        hit = Scene([far, near]).intersect(Ray(vec([0, 0, 0]), vec([0, 0, -1])))
        self.assertAlmostEqual(hit.t, 4.0, places=6)
        self.assertIs(hit.material, shiny)
        np.testing.assert_allclose(hit.normal, [0, 0, 1])

    def test_tie_goes_to_first_sphere(self):
        a = Sphere(vec([0, 0, -5]), 1.0, matte)
        b = Sphere(vec([0, 0, -5]), 1.0, shiny)
        hit = Scene([a, b]).intersect(Ray(vec([0, 0, 0]), vec([0, 0, -1])))
        self.assertIs(hit.material, matte)

    def test_horizon(self):
        scene = Scene([Sphere(vec([0, 0, -2000]), 1.0, matte)])
        r = Ray(vec([0, 0, 0]), vec([0, 0, -1]))
        self.assertAlmostEqual(scene.intersect(r).t, 1999.0, places=2)
        self.assertIs(scene.intersect(r, HORIZON), no_hit)
        np.testing.assert_array_equal(cast_ray(r, scene), BG_COLOR)

    def test_empty_scene(self):
        self.assertIs(Scene([]).intersect(Ray(vec([0, 0, 0]), vec([0, 0, -1]))), no_hit)


class TestCamera(unittest.TestCase):

    def test_default_camera(self):
        # A camera located at the origin facing the -z direction
        cam = Camera()
        # Center ray is straight down the axis
        r = cam.generate_ray(np.array([0.5, 0.5]))
        np.testing.assert_almost_equal(r.origin, vec([0, 0, 0]))
        assert_direction_matches(r.direction, vec([0, 0, -1]))
        # FOV is 90 degrees, so corner rays are centered in octants
        r = cam.generate_ray(np.array([0, 0]))
        assert_direction_matches(r.direction, vec([-1, 1, -1]))
        r = cam.generate_ray(np.array([1, 0]))
        assert_direction_matches(r.direction, vec([1, 1, -1]))
        r = cam.generate_ray(np.array([0, 1]))
        assert_direction_matches(r.direction, vec([-1, -1, -1]))

    def test_directions_are_unit(self):
        cam = Camera(aspect=4 / 3)
        for uv in [[0.1, 0.9], [0.5, 0.25], [1, 1]]:
            self.assertAlmostEqual(np.linalg.norm(cam.generate_ray(np.array(uv)).direction), 1.0, places=6)

    def test_fov(self):
        # A camera with a different fov: rays should be scaled in x and y
        vfov = 60
        cam = Camera(vfov=vfov)
        s = np.tan(vfov/2 * np.pi/180)
        r = cam.generate_ray(np.array([0.5, 0.5]))
        assert_direction_matches(r.direction, vec([0, 0, -1]))
        r = cam.generate_ray(np.array([1, 0.5]))
        assert_direction_matches(r.direction, vec([s, 0, -1]))
        r = cam.generate_ray(np.array([0.5, 0]))
        assert_direction_matches(r.direction, vec([0, s, -1]))

    def test_aspect(self):
        # A camera with a different aspect ratio: rays should be scaled in x
        aspect = 1.5
        cam = Camera(aspect=aspect)
        r = cam.generate_ray(np.array([0.5, 0.5]))
        assert_direction_matches(r.direction, vec([0, 0, -1]))
        r = cam.generate_ray(np.array([1, 0.5]))
        assert_direction_matches(r.direction, vec([aspect, 0, -1]))


class TestReflectRefract(unittest.TestCase):

    def test_reflect_flips_normal_component(self):
        d = normalize(vec([1, -2, 0.5]))
        n = normalize(vec([0.3, 1, 0.2]))
        self.assertAlmostEqual(np.dot(reflect(d, n), n), -np.dot(d, n), places=6)
        self.assertAlmostEqual(np.linalg.norm(reflect(d, n)), 1.0, places=6)

    def test_reflect_normal_incidence(self):
        np.testing.assert_allclose(reflect(vec([0, -1, 0]), vec([0, 1, 0])), [0, 1, 0])

    def test_refract_index_one_does_not_bend(self):
        n = vec([0, 0, 1])
        for d in [[1, 0, -1], [0.3, -0.2, -1], [0.5, 0.5, 1]]:
            d = normalize(vec(d))
            np.testing.assert_allclose(refract(d, n, 1.0), d, atol=1e-6)

    def test_refract_normal_incidence(self):
        np.testing.assert_allclose(refract(vec([0, 0, -1]), vec([0, 0, 1]), 1.5), [0, 0, -1], atol=1e-6)

    def test_refract_snell(self):
        # entering glass at 45 degrees: sin(theta_t) = sin(45) / 1.5
        d = normalize(vec([1, 0, -1]))
        t = normalize(refract(d, vec([0, 0, 1]), 1.5))
        self.assertAlmostEqual(t[0], np.sin(np.pi/4) / 1.5, places=5)
        self.assertLess(t[2], 0)
        # leaving glass the ray bends away from the normal
        inside = normalize(vec([0.3, 0, 1]))
        t = normalize(refract(inside, vec([0, 0, 1]), 1.5))
        self.assertAlmostEqual(t[0], 1.5 * inside[0], places=5)
        self.assertGreater(t[2], 0)

    def test_total_internal_reflection(self):
        # grazing exit from inside glass
        d = normalize(vec([1, 0, 0.1]))
        np.testing.assert_array_equal(refract(d, vec([0, 0, 1]), 1.5), [1, 0, 0])


class TestCastRay(unittest.TestCase):

    def setUp(self):
        # hit point (0, 0, -4) with normal (0, 0, 1) for the axis ray
        self.axis_ray = Ray(vec([0, 0, 0]), vec([0, 0, -1]))
        self.target = Sphere(vec([0, 0, -5]), 1.0, matte)

    def test_miss_returns_background(self):
        scene = Scene([self.target])
        away = Ray(vec([0, 0, 0]), vec([0, 0, 1]))
        for depth in [0, 2, 4, 5, 10]:
            np.testing.assert_array_equal(cast_ray(away, scene, depth), vec([0.2, 0.7, 0.8]))
            np.testing.assert_array_equal(cast_ray(self.axis_ray, Scene([]), depth), BG_COLOR)

    def test_past_depth_cap_returns_background(self):
        scene = Scene([self.target], [PointLight(vec([0, 0, 10]), 1.0)])
        np.testing.assert_array_equal(cast_ray(self.axis_ray, scene, MAX_DEPTH + 1), BG_COLOR)
        self.assertFalse(np.array_equal(cast_ray(self.axis_ray, scene, MAX_DEPTH), BG_COLOR))

    def test_diffuse(self):
        # light directly overhead, unit intensity
        scene = Scene([self.target], [PointLight(vec([0, 0, 10]), 1.0)])
        np.testing.assert_allclose(cast_ray(self.axis_ray, scene), [0.2, 0.4, 0.6], rtol=1e-5)
        # light at 60 degrees from the normal
        light = PointLight(vec([0, 10 * np.sin(np.pi/3), -4 + 10 * np.cos(np.pi/3)]), 1.0)
        scene = Scene([self.target], [light])
        np.testing.assert_allclose(cast_ray(self.axis_ray, scene), 0.5 * vec([0.2, 0.4, 0.6]), atol=1e-5)
        # lights add up, scaled by intensity
        scene = Scene([self.target], [PointLight(vec([0, 0, 10]), 1.0), PointLight(vec([0, 0, 20]), 0.5)])
        np.testing.assert_allclose(cast_ray(self.axis_ray, scene), 1.5 * vec([0.2, 0.4, 0.6]), rtol=1e-5)

    def test_light_behind_surface(self):
        scene = Scene([self.target], [PointLight(vec([0, 0, -20]), 1.0)])
        np.testing.assert_array_equal(cast_ray(self.axis_ray, scene, config=RenderConfig(shadows=False)), [0, 0, 0])

    def test_specular_is_not_clamped(self):
        scene = Scene([Sphere(vec([0, 0, -5]), 1.0, shiny)], [PointLight(vec([0, 0, 10]), 2.0)])
        np.testing.assert_allclose(cast_ray(self.axis_ray, scene), [2.0, 2.0, 2.0], rtol=1e-5)

    def test_specular_exponent(self):
        # light at 60 degrees from the normal, so the mirror direction is 60 degrees off the eye
        light = PointLight(vec([0, 10 * np.sin(np.pi/3), -4 + 10 * np.cos(np.pi/3)]), 1.0)
        for p in [1., 3., 10.]:
            glossy = Material(vec([0.2, 0.4, 0.6]), Albedo(0.0, 1.0, 0.0, 0.0), p=p)
            scene = Scene([Sphere(vec([0, 0, -5]), 1.0, glossy)], [light])
            np.testing.assert_allclose(cast_ray(self.axis_ray, scene), WHITE * 0.5 ** p, atol=1e-5)

    def test_refraction_starts_inside_the_surface(self):
        glass = Material(vec([1.0, 1.0, 1.0]), Albedo(0.0, 0.0, 0.0, 1.0), ior=1.5)
        scene = Scene([Sphere(vec([0, 0, -5]), 1.0, glass)])
        with mock.patch.object(ray, 'cast_ray', wraps=ray.cast_ray) as spy:
            color = ray.cast_ray(self.axis_ray, scene, 0, DEFAULT_CONFIG)
        # in through the front at z=-4, out through the back at z=-6, then the background
        rays = [c.args[0] for c in spy.call_args_list]
        self.assertEqual([c.args[2] for c in spy.call_args_list], [0, 1, 2])
        np.testing.assert_allclose(rays[1].origin, [0, 0, -4 - EPSILON], atol=1e-5)
        np.testing.assert_allclose(rays[2].origin, [0, 0, -6 - EPSILON], atol=1e-5)
        np.testing.assert_allclose(rays[2].direction, [0, 0, -1], atol=1e-6)
        np.testing.assert_allclose(color, BG_COLOR, rtol=1e-6)

    def test_reflection_starts_outside_the_surface(self):
        scene = Scene([Sphere(vec([0, 0, -5]), 1.0, chrome)])
        with mock.patch.object(ray, 'cast_ray', wraps=ray.cast_ray) as spy:
            ray.cast_ray(self.axis_ray, scene, 0, DEFAULT_CONFIG)
        rays = [c.args[0] for c in spy.call_args_list]
        self.assertEqual(len(rays), 2)
        np.testing.assert_allclose(rays[1].origin, [0, 0, -4 + EPSILON], atol=1e-5)
        np.testing.assert_allclose(rays[1].direction, [0, 0, 1], atol=1e-6)

    def test_offset_origin(self):
        point, n = vec([0, 0, -4]), vec([0, 0, 1])
        np.testing.assert_allclose(offset_origin(point, vec([0, 0, -1]), n, 0.01), [0, 0, -4.01], atol=1e-6)
        np.testing.assert_allclose(offset_origin(point, vec([0, 1, 0.5]), n, 0.01), [0, 0, -3.99], atol=1e-6)
        # grazing directions go to the outside
        np.testing.assert_allclose(offset_origin(point, vec([1, 0, 0]), n, 0.01), [0, 0, -3.99], atol=1e-6)

    def test_hard_shadow(self):
        blocker = Sphere(vec([0, 0, 3]), 1.0, matte)
        light = PointLight(vec([0, 0, 10]), 1.0)
        scene = Scene([self.target, blocker], [light])
        np.testing.assert_array_equal(cast_ray(self.axis_ray, scene), [0, 0, 0])
        # switching shadows off lets the light through
        np.testing.assert_allclose(
            cast_ray(self.axis_ray, scene, config=RenderConfig(shadows=False)),
            [0.2, 0.4, 0.6], rtol=1e-5)

    def test_occluder_beyond_light_casts_no_shadow(self):
        beyond = Sphere(vec([0, 0, 20]), 1.0, matte)
        scene = Scene([self.target, beyond], [PointLight(vec([0, 0, 10]), 1.0)])
        np.testing.assert_allclose(cast_ray(self.axis_ray, scene), [0.2, 0.4, 0.6], rtol=1e-5)

    def test_diffuse_material_casts_no_secondary_rays(self):
        scene = Scene([self.target], [PointLight(vec([0, 0, 10]), 1.0)])
        with mock.patch.object(ray, 'cast_ray', wraps=ray.cast_ray) as spy:
            color = ray.cast_ray(self.axis_ray, scene, 0, DEFAULT_CONFIG)
        self.assertEqual(spy.call_count, 1)
        np.testing.assert_allclose(color, [0.2, 0.4, 0.6], rtol=1e-5)

    def test_recursion_depth_is_capped(self):
        # two facing mirrors bounce the ray back and forth forever without the cap
        scene = Scene([Sphere(vec([0, 0, -5]), 1.0, chrome), Sphere(vec([0, 0, 5]), 1.0, chrome)])
        with mock.patch.object(ray, 'cast_ray', wraps=ray.cast_ray) as spy:
            color = ray.cast_ray(self.axis_ray, scene, 0, DEFAULT_CONFIG)
        depths = [c.args[2] for c in spy.call_args_list]
        self.assertEqual(depths, list(range(MAX_DEPTH + 2)))
        np.testing.assert_allclose(color, BG_COLOR)

        with mock.patch.object(ray, 'cast_ray', wraps=ray.cast_ray) as spy:
            ray.cast_ray(self.axis_ray, scene, 0, RenderConfig(max_depth=1))
        self.assertEqual(max(c.args[2] for c in spy.call_args_list), 2)

    def test_glass_sphere_calls_stay_within_cap(self):
        scene = FourSpheresExample().scene
        with mock.patch.object(ray, 'cast_ray', wraps=ray.cast_ray) as spy:
            # straight through the glass ball
            ray.cast_ray(Ray(vec([0, 0, 0]), normalize(vec([-1, -1.5, -12]))), scene, 0, DEFAULT_CONFIG)
        depths = [c.args[2] for c in spy.call_args_list]
        self.assertGreater(len(depths), MAX_DEPTH + 2)
        self.assertLessEqual(max(depths), MAX_DEPTH + 1)


class TestRender(unittest.TestCase):

    def test_empty_scene_is_all_background(self):
        img = render_image(Scene([]), RenderConfig(width=8, height=6))
        self.assertEqual(img.shape, (6, 8, 3))
        self.assertEqual(img.dtype, np.float32)
        np.testing.assert_array_equal(img, np.broadcast_to(BG_COLOR, (6, 8, 3)))

    def test_four_spheres(self):
        img = render_image(FourSpheresExample().scene, RenderConfig(width=16, height=12))
        # the top-left corner looks past every sphere
        np.testing.assert_array_equal(img[0, 0], BG_COLOR)
        self.assertTrue(np.any(img != BG_COLOR))

    def test_four_spheres_reference_colors(self):
        scene = FourSpheresExample().scene
        # nearest point of the red rubber ball: lit by the first and third lights,
        # the second is behind the surface
        rubber = cast_ray(Ray(vec([0, 0, 0]), normalize(vec([1.5, -0.5, -18]))), scene)
        np.testing.assert_allclose(rubber, [0.7033954, 0.2536670, 0.2536670], atol=2e-4)
        np.testing.assert_array_equal(to_bytes(clamp_color(rubber)), [179, 64, 64])
        # nearest point of the mirror ball: the reflection goes straight back to the sky
        # and the highlights are too narrow to reach this point
        mirror = cast_ray(Ray(vec([0, 0, 0]), normalize(vec([7, 5, -18]))), scene)
        np.testing.assert_allclose(mirror, 0.8 * BG_COLOR, atol=1e-5)
        np.testing.assert_array_equal(to_bytes(clamp_color(mirror)), [40, 142, 163])

    def test_parallel_matches_sequential(self):
        scene = FourSpheresExample().scene
        seq = render_image(scene, RenderConfig(width=16, height=12))
        par = render_image(scene, RenderConfig(width=16, height=12, workers=3))
        np.testing.assert_array_equal(seq, par)

    def test_diffuse_sphere_falloff(self):
        example = DiffuseSphereExample()
        img = render_image(example.scene, RenderConfig(width=32, height=48, max_depth=0, shadows=False))
        column = img[:, 16]
        on_sphere = np.any(column != BG_COLOR, axis=1)
        self.assertGreater(on_sphere.sum(), 4)
        red = column[on_sphere, 0]
        # brightest on top, fading smoothly toward the bottom
        self.assertTrue(np.all(np.diff(red) <= 1e-6))
        self.assertGreater(red[0], red[-1])
        # only the diffuse term contributes, so every channel keeps the base color ratio
        np.testing.assert_allclose(column[on_sphere, 1], red / 3, atol=1e-6)

    def test_gradient(self):
        img = render_gradient(4, 2)
        self.assertEqual(img.shape, (2, 4, 3))
        np.testing.assert_array_equal(img[0, 0], [0, 0, 0])
        np.testing.assert_allclose(img[1, 2], [0.5, 0.5, 0])
        np.testing.assert_array_equal(img[:, :, 2], 0)


class TestImageWriter(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def test_ppm_layout(self):
        path = os.path.join(self.tmpdir.name, 'out.ppm')
        im = Image(pixels=render_gradient(4, 2))
        im.writeToFile(path)
        with open(path, 'rb') as f:
            data = f.read()
        header = b"P6\n4 2\n255\n"
        self.assertTrue(data.startswith(header))
        self.assertEqual(len(data), len(header) + 4 * 2 * 3)
        self.assertEqual(data[len(header):len(header) + 3], b"\x00\x00\x00")
        offset = len(header) + (1 * 4 + 2) * 3
        self.assertEqual(data[offset:offset + 3], bytes([127, 127, 0]))
        self.assertEqual(data[len(header):], im.tobytes())

    def test_read_back(self):
        path = os.path.join(self.tmpdir.name, 'out.ppm')
        im = Image(pixels=render_image(Scene([]), RenderConfig(width=5, height=3)))
        im.writeToFile(path)
        loaded = Image(path)
        self.assertEqual((loaded.width, loaded.height), (5, 3))
        np.testing.assert_array_equal(loaded.pixels, im.ipixels)
        np.testing.assert_array_equal(loaded.pixels[2, 4], [51, 178, 204])

    def test_colors_are_scaled_before_encoding(self):
        im = Image(pixels=np.array([[[2.0, 1.0, 0.5], [-1.0, 0.5, 0.25]]], np.float32))
        np.testing.assert_array_equal(im.ipixels, [[[255, 127, 63], [0, 127, 63]]])

    def test_unwritable_path(self):
        path = os.path.join(self.tmpdir.name, 'missing', 'out.ppm')
        with self.assertRaises(OSError):
            Image(pixels=render_gradient(2, 2)).writeToFile(path)

    def test_example_render(self):
        path = os.path.join(self.tmpdir.name, 'empty.ppm')
        EmptySceneExample().render(path, width=6, height=4)
        with open(path, 'rb') as f:
            data = f.read()
        self.assertEqual(data, b"P6\n6 4\n255\n" + bytes([51, 178, 204]) * 24)

    def test_gradient_example(self):
        im = GradientExample(output_shape=[2, 4])
        self.assertEqual((im.width, im.height), (4, 2))
        path = os.path.join(self.tmpdir.name, 'gradient.ppm')
        GradientExample(path, output_shape=[2, 4])
        with open(path, 'rb') as f:
            self.assertEqual(f.read(), b"P6\n4 2\n255\n" + im.tobytes())


class TestValidation(unittest.TestCase):

    def test_scene(self):
        with self.assertRaises(ValueError):
            Scene([Sphere(vec([0, 0, -5]), 0.0, matte)])
        with self.assertRaises(ValueError):
            Scene([Sphere(vec([0, 0, -5]), -1.0, matte)])
        with self.assertRaises(ValueError):
            Scene([], [PointLight(vec([0, 0, 0]), -0.5)])
        with self.assertRaises(ValueError):
            Scene([], [PointLight(vec([0, 0, 0]), float('nan'))])
        with self.assertRaises(ValueError):
            Scene([Sphere(vec([0, 0, -5]), float('nan'), matte)])
        Scene([Sphere(vec([0, 0, -5]), 1.0, matte)], [PointLight(vec([0, 0, 0]), 0.0)])

    def test_material(self):
        with self.assertRaises(ValueError):
            Material(vec([1, 1, 1]), p=-1.)
        with self.assertRaises(ValueError):
            Material(vec([1, 1, 1]), ior=0.)
        self.assertEqual(Material(vec([1, 1, 1])).albedo, Albedo(1., 0., 0., 0.))

    def test_config_defaults(self):
        config = RenderConfig()
        self.assertEqual((config.width, config.height), (1024, 768))
        self.assertEqual(config.fov, 90.0)
        self.assertEqual(config.max_depth, 4)
        self.assertEqual(config.epsilon, 1e-3)
        self.assertEqual(config.horizon, 1000.)
        self.assertEqual(config.workers, 1)

    def test_config_rejects_bad_values(self):
        for bad in [dict(width=0), dict(height=-3), dict(fov=0), dict(fov=180),
                    dict(max_depth=-1), dict(epsilon=-1e-3), dict(horizon=0), dict(workers=0)]:
            with self.assertRaises(ValueError):
                RenderConfig(**bad)



if __name__ == '__main__':
    unittest.main()
