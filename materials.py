from collections import namedtuple

Albedo = namedtuple('Albedo', ['k_d', 'k_s', 'k_m', 'k_t'])
Albedo.__doc__ = """Weights of the four light transport terms of a surface.

  k_d : float -- diffuse gain
  k_s : float -- specular highlight gain
  k_m : float -- mirror reflection gain
  k_t : float -- transmission (refraction) gain

The weights are independent and need not sum to one.
"""


class Material:

    def __init__(self, diffuse_color, albedo=Albedo(1., 0., 0., 0.), p=0., ior=1.0):
        """
        Create a new material with the given parameters.

        Parameters:
          diffuse_color : (3,) -- base color used for the diffuse term
          albedo : Albedo -- weights of the diffuse/specular/reflect/refract terms
          p : float -- Specular exponent (shininess)
          ior : float -- Index of Refraction (1.0 for air, 1.5 for glass)
        """
        if p < 0:
            raise ValueError(f"specular exponent must be non-negative, got {p}")
        if ior <= 0:
            raise ValueError(f"refractive index must be positive, got {ior}")
        self.diffuse_color = diffuse_color
        self.albedo = Albedo(*albedo)
        self.p = p
        self.ior = ior
