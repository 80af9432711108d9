import ray
from dataclasses import replace
from ImLite import *
from utils import *
from materials import Material, Albedo
from geometry import Sphere

class ExampleSceneDef(object):
    def __init__(self, scene, config=None):
        self.scene = scene;
        if(config is None):
            config = ray.RenderConfig();
        self.config = config;

    def render(self, output_path=None, **config_overrides):
        config = self.config;
        if(config_overrides):
            config = replace(config, **config_overrides);
        pix = ray.render_image(self.scene, config);
        im = Image(pixels=pix);
        if(output_path is None):
            return im;
        else:
            im.writeToFile(output_path);
            print(f"wrote {config.width}x{config.height} image to {output_path}");


ivory = Material(vec([0.4, 0.4, 0.3]), Albedo(0.6, 0.3, 0.1, 0.0), p=50., ior=1.0)
red_rubber = Material(vec([0.3, 0.1, 0.1]), Albedo(0.9, 0.1, 0.0, 0.0), p=10., ior=1.0)
mirror = Material(vec([1.0, 1.0, 1.0]), Albedo(0.0, 10.0, 0.8, 0.0), p=1425., ior=1.0)
glass = Material(vec([1.0, 1.0, 1.0]), Albedo(0.0, 0.5, 0.1, 0.8), p=125., ior=1.5)


def FourSpheresExample():
    # The reference scene: ivory, glass, red rubber and mirror balls under three lights.
    scene = ray.Scene([
        Sphere(vec([-3, 0, -16]), 2, ivory),
        Sphere(vec([-1, -1.5, -12]), 2, glass),
        Sphere(vec([1.5, -0.5, -18]), 3, red_rubber),
        Sphere(vec([7, 5, -18]), 4, mirror),
    ], [
        ray.PointLight(vec([-20, 20, 20]), 1.5),
        ray.PointLight(vec([30, 50, -25]), 1.8),
        ray.PointLight(vec([30, 20, 30]), 1.7),
    ])
    return ExampleSceneDef(scene=scene);


def DiffuseSphereExample():
    # A single matte sphere lit from straight above, with no shadows or bounces.
    matte = Material(vec([0.3, 0.1, 0.1]), Albedo(1.0, 0.0, 0.0, 0.0))
    scene = ray.Scene([
        Sphere(vec([0, 0, -16]), 4, matte),
    ], [
        ray.PointLight(vec([0, 20, -16]), 1.0),
    ])
    config = ray.RenderConfig(max_depth=0, shadows=False)
    return ExampleSceneDef(scene=scene, config=config);


def EmptySceneExample():
    return ExampleSceneDef(scene=ray.Scene([]));


def GradientExample(output_path=None, output_shape=None):
    # Test image with no scene at all.
    if(output_shape is None):
        output_shape = [768, 1024];
    im = Image(pixels=ray.render_gradient(output_shape[1], output_shape[0]));
    if(output_path is None):
        return im;
    im.writeToFile(output_path);
