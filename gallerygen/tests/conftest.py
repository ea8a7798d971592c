"""
Pytest fixtures for gallerygen tests.
"""

import pytest

from gallerygen.encoder import EncodeResult, FFmpegRunner


class FakeRunner(FFmpegRunner):
    """
    Stand-in for ffmpeg: writes a small file to the output argument.

    Args:
        fail_codecs: Codec names (value after -c:v) that exit non-zero
        fail_thumbnail: If True, invocations with a duration limit fail
        timeout_codecs: Codec names reported as timed out
        available: If False, behaves like a missing executable
    """

    def __init__(self, fail_codecs=(), fail_thumbnail=False, timeout_codecs=(), available=True):
        super().__init__(binary='fake-ffmpeg', timeout=1.0)
        self.fail_codecs = set(fail_codecs)
        self.fail_thumbnail = fail_thumbnail
        self.timeout_codecs = set(timeout_codecs)
        self.available = available
        self.calls = []

    def run(self, args):
        args = list(args)
        if not self.available:
            return EncodeResult(ok=False, stderr='fake-ffmpeg: not found')
        if args == ['-version']:
            return EncodeResult(ok=True, returncode=0, stdout='ffmpeg version 6.0-fake\nbuilt with gcc')

        self.calls.append(args)
        codec = args[args.index('-c:v') + 1]
        is_thumbnail = '-t' in args

        if codec in self.timeout_codecs:
            return EncodeResult(ok=False, timed_out=True, elapsed_seconds=self.timeout)
        if codec in self.fail_codecs or (is_thumbnail and self.fail_thumbnail):
            return EncodeResult(ok=False, returncode=1, stderr=f'{codec} encoder error')

        with open(args[-1], 'wb') as f:
            f.write(b'\x1a\x45\xdf\xa3 fake webm')
        return EncodeResult(ok=True, returncode=0)

    @property
    def codecs_tried(self):
        return [c[c.index('-c:v') + 1] for c in self.calls]


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')


@pytest.fixture
def project(tmp_path):
    """Fixture providing an empty project root with an images/ directory."""
    (tmp_path / 'images').mkdir()
    return tmp_path


@pytest.fixture
def config(project):
    """Fixture providing a configuration rooted at the temporary project."""
    from gallerygen.config import PipelineConfig

    return PipelineConfig(project_root=str(project))


@pytest.fixture
def make_image(project):
    """Fixture returning a helper that writes a generated image under the project root."""
    from PIL import Image

    def _make(relpath, size=(400, 300), mode='RGB', color='red', fmt=None):
        path = project / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        if mode == 'RGBA' and isinstance(color, str):
            color = (255, 0, 0, 128)
        img = Image.new(mode, size, color=color)
        img.save(path, format=fmt)
        return relpath

    return _make


@pytest.fixture
def make_gif(project):
    """Fixture returning a helper that writes a two-frame animated GIF."""
    from PIL import Image

    def _make(relpath, size=(120, 80)):
        path = project / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        frames = [Image.new('P', size, color=i) for i in (1, 2)]
        frames[0].save(path, format='GIF', save_all=True, append_images=frames[1:], duration=100, loop=0)
        return relpath

    return _make


@pytest.fixture
def fake_runner():
    """Fixture providing an ffmpeg stand-in where every encode succeeds."""
    return FakeRunner()


@pytest.fixture
def sample_manifest():
    """Fixture providing a manifest with one static and one animated entry."""
    from gallerygen.manifest import Manifest
    from gallerygen.manifest_entry import ImageEntry, Tier, VariantSet, VideoEntry

    manifest = Manifest()
    manifest.add_entry(ImageEntry(
        original='images/2022-05-01_cat.png',
        optimized=VariantSet(Tier.FULL, {
            'webp': 'images-optimized/2022-05-01_cat.webp',
            'jpg': 'images-optimized/2022-05-01_cat.jpg',
        }),
        thumbnail=VariantSet(Tier.THUMBNAIL, {
            'webp': 'images-thumbs/2022-05-01_cat.webp',
            'jpg': 'images-thumbs/2022-05-01_cat.jpg',
        }),
    ))
    manifest.add_entry(ImageEntry(
        original='images/2023_dog.jpg',
        optimized=VariantSet(Tier.FULL, {
            'webp': 'images-optimized/2023_dog.webp',
            'jpg': 'images-optimized/2023_dog.jpg',
        }),
        thumbnail=VariantSet(Tier.THUMBNAIL, {
            'webp': 'images-thumbs/2023_dog.webp',
            'jpg': 'images-thumbs/2023_dog.jpg',
        }),
    ))
    manifest.add_entry(VideoEntry(
        original='images/party.gif',
        optimized=VariantSet(Tier.FULL, {'webm': 'images-optimized/party.webm'}),
        thumbnail=VariantSet(Tier.THUMBNAIL, {'webm': 'images-thumbs/party.webm'}),
    ))
    return manifest


@pytest.fixture
def temp_manifest_file(sample_manifest, tmp_path):
    """Fixture providing a temporary manifest file."""
    filepath = tmp_path / "index.json"
    sample_manifest.save(str(filepath))
    return str(filepath)


@pytest.fixture
def make_runner():
    """Fixture returning the FakeRunner class for tests that configure failures."""
    return FakeRunner
