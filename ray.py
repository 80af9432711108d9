import numpy as np
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from geometry import no_hit
from utils import vec, normalize

"""
Core implementation of the ray tracer.  This module contains the classes (Ray, Camera,
PointLight, Scene) used by the rendering algorithm, the shading function `cast_ray`,
and the main entry point `render_image`.

In the documentation of these classes, we indicate the expected types of arguments with a
colon, and use the convention that just writing a tuple means that the expected type is a
NumPy array of that shape.
"""

MAX_DEPTH = 4 # max recursion depth
EPSILON = 1e-3 # for offsetting rays
HORIZON = 1000. # hits at or beyond this distance are not visible
BG_COLOR = vec([0.2, 0.7, 0.8])
WHITE = vec([1., 1., 1.])
BLACK = vec([0., 0., 0.])


@dataclass(frozen=True)
class RenderConfig:
    """Parameters consumed by the renderer.

      width, height : int -- image size in pixels
      fov : float -- the full vertical field of view in degrees
      max_depth : int -- reflection/refraction bounces before the background is substituted
      epsilon : float -- offset of secondary ray origins along the surface normal
      horizon : float -- maximum visible hit distance
      shadows : bool -- whether lights can be occluded
      workers : int -- number of processes sharing the scanlines
      verbose : bool -- print per-row progress
    """
    width: int = 1024
    height: int = 768
    fov: float = 90.0
    max_depth: int = MAX_DEPTH
    epsilon: float = EPSILON
    horizon: float = HORIZON
    shadows: bool = True
    workers: int = 1
    verbose: bool = False

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"image size must be positive, got {self.width}x{self.height}")
        if not 0 < self.fov < 180:
            raise ValueError(f"field of view must be in (0, 180) degrees, got {self.fov}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.epsilon < 0:
            raise ValueError(f"epsilon must be non-negative, got {self.epsilon}")
        if self.horizon <= 0:
            raise ValueError(f"horizon must be positive, got {self.horizon}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")

DEFAULT_CONFIG = RenderConfig()


class Ray:

    def __init__(self, origin, direction):
        """Create a ray with the given origin and direction.

        Parameters:
          origin : (3,) -- the start point of the ray, a 3D point
          direction : (3,) -- the direction of the ray, a unit 3D vector
        """
        self.origin = origin
        self.direction = direction


class Camera:

    def __init__(self, vfov=90.0, aspect=1.0):
        """Create a pinhole camera at the origin looking down -z with y up.

        Parameters:
          vfov : float -- the full vertical field of view in degrees
          aspect : float -- the aspect ratio of the camera's view (ratio of width to height)
        """
        self.eye = vec([0, 0, 0])
        self.aspect = aspect
        self.vfov = vfov

        rads = np.radians(self.vfov)

        self.img_h_half = np.tan(rads / 2.0)
        self.img_w_half = self.aspect * self.img_h_half

    def generate_ray(self, img_point):
        """Compute the ray corresponding to a point in the image.

        Parameters:
          img_point : (2,) -- a 2D point in [0,1] x [0,1], where (0,0) is the upper left
                      corner of the image and (1,1) is the lower right.
        Return:
          Ray -- The ray corresponding to that image location, with a unit direction
        """
        alpha = self.img_w_half * (img_point[0] * 2.0 - 1.0)
        beta = self.img_h_half * (1.0 - img_point[1] * 2.0)

        direction = vec([alpha, beta, -1.0])

        return Ray(self.eye, normalize(direction))


class PointLight:

    def __init__(self, position, intensity):
        """Create a point light at given position and with given intensity

        Parameters:
          position : (3,) -- 3D point giving the light source location in scene
          intensity : float -- non-negative scale on the light's contribution
        """
        self.position = position
        self.intensity = intensity


class Scene:

    def __init__(self, spheres, lights=(), bg_color=BG_COLOR):
        """Create a scene containing the given objects.

        Parameters:
          spheres : [Sphere] -- list of the spheres in the scene; on equal distance the
                    earlier sphere wins
          lights : [PointLight] -- the lights illuminating the scene
          bg_color : (3,) -- RGB color that is seen where no objects appear
        """
        for sphere in spheres:
            if not sphere.radius > 0:
                raise ValueError(f"sphere radius must be positive, got {sphere.radius}")
        for light in lights:
            if not light.intensity >= 0:
                raise ValueError(f"light intensity must be non-negative, got {light.intensity}")
        self.spheres = list(spheres)
        self.lights = list(lights)
        self.bg_color = bg_color

    def intersect(self, ray, horizon=np.inf):
        """Computes the first (smallest t) intersection between a ray and the scene.

        Parameters:
          ray : Ray -- the ray to intersect with the scene
          horizon : float -- hits at this distance or farther are ignored
        Return:
          Hit -- the hit data
        """
        closest_hit = no_hit

        for sphere in self.spheres:
            hit = sphere.intersect(ray)
            if hit.t < closest_hit.t:
                closest_hit = hit

        if closest_hit.t < horizon:
            return closest_hit
        return no_hit


def reflect(incidence, normal):
    """Mirror the direction `incidence` about `normal`."""
    return incidence - normal * 2.0 * np.dot(incidence, normal)

def refract(incidence, normal, ior):
    """Bend the direction `incidence` through a surface by Snell's law.

    `normal` is the outward normal; the sign of the incidence cosine tells whether
    the ray is entering (indices 1 -> ior) or leaving (ior -> 1) the medium.
    Under total internal reflection the fixed direction (1, 0, 0) is returned.
    """
    cos_i = -max(-1.0, min(1.0, np.dot(incidence, normal)))
    eta_i = 1.0
    eta_t = ior
    n = normal
    if cos_i < 0:
        cos_i = -cos_i
        n = -normal
        eta_i, eta_t = eta_t, eta_i

    eta = eta_i / eta_t
    k = 1 - eta * eta * (1 - cos_i * cos_i)
    if k < 0: # TIR
        return vec([1, 0, 0])
    return incidence * eta + n * (eta * cos_i - np.sqrt(k))

def offset_origin(point, direction, normal, epsilon):
    """Nudge `point` off the surface to the side `direction` leaves through."""
    if np.dot(direction, normal) < 0:
        return point - normal * epsilon
    return point + normal * epsilon


def cast_ray(ray, scene, depth=0, config=DEFAULT_CONFIG):
    """Compute the color seen along a ray.

    Parameters:
      ray : Ray -- the ray to follow, with a unit direction
      scene : Scene -- the scene
      depth : int -- the recursion depth so far
      config : RenderConfig -- depth cap, ray bias, horizon and shadow switch
    Return:
      (3,) -- the unclamped color seen along this ray
    Reflection and refraction rays are followed recursively; past `config.max_depth`
    bounces the background color is returned instead.
    """
    if depth > config.max_depth:
        return scene.bg_color

    hit = scene.intersect(ray, config.horizon)
    if hit.t == np.inf:
        return scene.bg_color

    mat = hit.material
    point = hit.point
    n = hit.normal
    k_d, k_s, k_m, k_t = mat.albedo

    # a zero weight would discard the subtree anyway
    reflect_color = BLACK
    if k_m != 0:
        reflect_dir = normalize(reflect(ray.direction, n))
        reflect_orig = offset_origin(point, reflect_dir, n, config.epsilon)
        reflect_color = cast_ray(Ray(reflect_orig, reflect_dir), scene, depth + 1, config)

    refract_color = BLACK
    if k_t != 0:
        refract_dir = normalize(refract(ray.direction, n, mat.ior))
        refract_orig = offset_origin(point, refract_dir, n, config.epsilon)
        refract_color = cast_ray(Ray(refract_orig, refract_dir), scene, depth + 1, config)

    diffuse = 0.0
    specular = 0.0
    for light in scene.lights:
        to_light = light.position - point
        light_dir = normalize(to_light)
        light_distance = np.linalg.norm(to_light)

        if config.shadows:
            shadow_orig = offset_origin(point, light_dir, n, config.epsilon)
            blocker = scene.intersect(Ray(shadow_orig, light_dir), config.horizon)
            if blocker.t < np.inf and np.linalg.norm(blocker.point - shadow_orig) < light_distance:
                continue

        diffuse += light.intensity * max(0.0, np.dot(light_dir, n))
        specular += max(0.0, -np.dot(reflect(-light_dir, n), ray.direction)) ** mat.p * light.intensity

    return (mat.diffuse_color * diffuse * k_d
            + WHITE * (specular * k_s)
            + reflect_color * k_m
            + refract_color * k_t)


def _render_rows(scene, config, y0, y1):
    """Render scanlines y0 (inclusive) to y1 (exclusive)."""
    nx, ny = config.width, config.height
    camera = Camera(vfov=config.fov, aspect=nx / ny)
    rows = np.zeros((y1 - y0, nx, 3), np.float32)
    for i in range(y0, y1):
        if config.verbose:
            print(f"rendering row {i+1}/{ny}...")
        for j in range(nx):
            pixel_uv = np.array([(j + 0.5) / nx, (i + 0.5) / ny])
            ray = camera.generate_ray(pixel_uv)
            rows[i - y0, j] = cast_ray(ray, scene, 0, config)
    return y0, y1, rows

def render_image(scene, config=DEFAULT_CONFIG):
    """Render a ray traced image.

    Parameters:
      scene : Scene -- the scene to be rendered
      config : RenderConfig -- image size, camera and tracing parameters
    Returns:
      (ny, nx, 3) float32 -- the unclamped RGB image, top row first
    """
    nx, ny = config.width, config.height
    if config.workers == 1:
        return _render_rows(scene, config, 0, ny)[2]

    output_image = np.zeros((ny, nx, 3), np.float32)
    band = -(-ny // config.workers)
    with ProcessPoolExecutor(max_workers=config.workers) as exe:
        futures = [exe.submit(_render_rows, scene, config, y0, min(y0 + band, ny))
                   for y0 in range(0, ny, band)]
        for f in as_completed(futures):
            y0, y1, rows = f.result()
            output_image[y0:y1] = rows
    return output_image


def render_gradient(nx, ny):
    """Render the flat test gradient: red grows down the image, green to the right.

    Returns:
      (ny, nx, 3) float32 -- the RGB image
    """
    output_image = np.zeros((ny, nx, 3), np.float32)
    output_image[:, :, 0] = (np.arange(ny, dtype=np.float32) / ny)[:, None]
    output_image[:, :, 1] = (np.arange(nx, dtype=np.float32) / nx)[None, :]
    return output_image
