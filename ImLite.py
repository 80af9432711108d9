from PIL import Image as PIM
import numpy as np

from utils import clamp_color, to_bytes


class Image(object):
    """Image

    Wraps a rendered (height, width, 3) framebuffer. Float pixels hold linear,
    unclamped color; they are only tone mapped to bytes on the way out.
    """

    def __init__(self, path=None, pixels=None, **kwargs):
        # You can do Image(pixels) or Image(path)
        self._samples = None
        self.file_path = None
        if (isinstance(path, np.ndarray) and (pixels is None)):
            # if the path looks like pixels and pixels are undefined, treat the path as pixels
            pixels = path
            path = None
        self.pixels = pixels
        self.file_path = path
        if (self.file_path is not None and pixels is None):
            self.loadImageData(self.file_path)

    @property
    def pixels(self):
        return self._samples

    @pixels.setter
    def pixels(self, data):
        self._samples = data

    @property
    def dtype(self):
        return self.pixels.dtype

    @property
    def _is_float(self):
        return (self.dtype.kind in 'f')

    @property
    def ipixels(self):
        """8-bit pixels: each color is scaled into range, then clipped and truncated."""
        if (self._is_float):
            return to_bytes(clamp_color(self.pixels))
        return self.pixels.astype(np.uint8)

    @property
    def shape(self):
        return np.asarray(self.pixels.shape)[:]

    @property
    def width(self):
        return self.shape[1]

    @property
    def height(self):
        return self.shape[0]

    def loadImageData(self, path=None):
        if (path):
            self.file_path = path
        with PIM.open(fp=self.file_path) as pim:
            self._samples = np.array(pim.convert('RGB'))

    def PIL(self):
        return PIM.fromarray(self.ipixels)

    def tobytes(self):
        """Raw RGB bytes, row-major from the top-left pixel."""
        return self.ipixels.tobytes()

    def writeToFile(self, output_path=None, **kwargs):
        """Write a binary PPM (P6) file.

        The layout is the ASCII header "P6\\n<width> <height>\\n255\\n" followed by
        width*height RGB byte triples. I/O errors propagate to the caller.
        """
        if (output_path is None):
            output_path = self.file_path
        self.PIL().save(output_path, format='PPM', **kwargs)
