import numpy as np

def vec(list):
    """Handy shorthand to make a single-precision float array.

    The array is read-only; arithmetic on it always produces a new array.
    """
    v = np.array(list, dtype=np.float32)
    v.flags.writeable = False
    return v

def normalize(v):
    """Return a unit vector in the direction of the vector v."""
    length = np.linalg.norm(v)
    if length == 0:
        raise ValueError("cannot normalize a zero-length vector")
    return v * (1.0 / length)


def clamp_color(c):
    """Scale a color (or an image of colors) down so no channel exceeds 1.

    If the brightest channel is above 1.0 all channels are divided by it,
    which keeps the hue. Colors already in range are returned unchanged.
    NaN channels are skipped when looking for the brightest one.
    """
    c = np.asarray(c, dtype=np.float32)
    brightest = np.fmax.reduce(c, axis=-1, keepdims=True)
    return c * (1.0 / np.maximum(brightest, 1.0))

def to_bytes(c):
    """Encode a color (or an image of colors) as 8-bit channels.

    Each channel is clipped to [0, 1], scaled by 255 and truncated.
    A NaN channel clips to 1.
    """
    c = np.asarray(c, dtype=np.float32)
    # fmin/fmax return the non-NaN operand
    return (255.0 * np.fmax(np.fmin(c, 1.0), 0.0)).astype(np.uint8)
