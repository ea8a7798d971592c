"""Tests for ImageTranscoder class."""

import pytest
from PIL import Image

from gallerygen.image_transcoder import ImageTranscoder
from gallerygen.manifest_entry import ImageEntry
from gallerygen.source_asset import SourceAsset


class TestImageTranscoder:
    """Tests for ImageTranscoder class."""

    def test_transcode_writes_four_variants(self, config, logger, project, make_image):
        """Test both tiers are written in WebP and JPEG."""
        make_image('images/2022-05-01_cat.png')
        asset = SourceAsset.from_path('images/2022-05-01_cat.png')

        entry = ImageTranscoder(config, logger).transcode(asset)

        assert isinstance(entry, ImageEntry)
        assert entry.to_dict() == {
            'original': 'images/2022-05-01_cat.png',
            'optimized': {
                'webp': 'images-optimized/2022-05-01_cat.webp',
                'jpg': 'images-optimized/2022-05-01_cat.jpg',
            },
            'thumbnail': {
                'webp': 'images-thumbs/2022-05-01_cat.webp',
                'jpg': 'images-thumbs/2022-05-01_cat.jpg',
            },
            'format': 'image',
        }
        for path in entry.paths():
            assert (project / path).is_file()

    def test_output_formats(self, config, logger, project, make_image):
        """Test files are encoded in the format their extension names."""
        make_image('images/a.png')
        ImageTranscoder(config, logger).transcode(SourceAsset.from_path('images/a.png'))

        with Image.open(project / 'images-optimized' / 'a.webp') as img:
            assert img.format == 'WEBP'
        with Image.open(project / 'images-thumbs' / 'a.jpg') as img:
            assert img.format == 'JPEG'

    def test_full_tier_never_upscales(self, config, logger, project, make_image):
        """Test a narrow source keeps its width."""
        make_image('images/small.png', size=(200, 150))
        ImageTranscoder(config, logger).transcode(SourceAsset.from_path('images/small.png'))

        with Image.open(project / 'images-optimized' / 'small.jpg') as img:
            assert img.size == (200, 150)

    def test_full_tier_caps_width(self, config, logger, project, make_image):
        """Test a wide source is scaled down preserving aspect ratio."""
        config.full_max_width = 100
        make_image('images/wide.jpg', size=(400, 200))
        ImageTranscoder(config, logger).transcode(SourceAsset.from_path('images/wide.jpg'))

        with Image.open(project / 'images-optimized' / 'wide.webp') as img:
            assert img.size == (100, 50)

    def test_thumbnail_is_square(self, config, logger, project, make_image):
        """Test thumbnails are cropped to a fixed square."""
        config.thumb_size = 64
        make_image('images/tall.png', size=(120, 400))
        ImageTranscoder(config, logger).transcode(SourceAsset.from_path('images/tall.png'))

        for name in ('tall.webp', 'tall.jpg'):
            with Image.open(project / 'images-thumbs' / name) as img:
                assert img.size == (64, 64)

    def test_transparent_png(self, config, logger, project, make_image):
        """Test RGBA input is flattened for JPEG and kept for WebP."""
        make_image('images/alpha.png', mode='RGBA')
        ImageTranscoder(config, logger).transcode(SourceAsset.from_path('images/alpha.png'))

        with Image.open(project / 'images-thumbs' / 'alpha.jpg') as img:
            assert img.mode == 'RGB'
        with Image.open(project / 'images-thumbs' / 'alpha.webp') as img:
            assert img.mode == 'RGBA'

    def test_palette_image(self, config, logger, project, make_image):
        """Test palette images are converted before resampling."""
        make_image('images/pal.png', mode='P', color=3)

        entry = ImageTranscoder(config, logger).transcode(SourceAsset.from_path('images/pal.png'))

        assert (project / entry.thumbnail.files['jpg']).is_file()

    def test_invalid_image_leaves_no_files(self, config, logger, project):
        """Test an unreadable source raises and writes nothing."""
        (project / 'images' / 'broken.png').write_bytes(b'not an image')

        with pytest.raises(Exception):
            ImageTranscoder(config, logger).transcode(SourceAsset.from_path('images/broken.png'))

        for root in ('images-optimized', 'images-thumbs'):
            directory = project / root
            assert not directory.exists() or list(directory.iterdir()) == []

    def test_encode_failure_cleans_up(self, config, logger, project, make_image, mocker):
        """Test a single failing encode discards the other three."""
        make_image('images/cat.png')
        transcoder = ImageTranscoder(config, logger)
        original_encode = transcoder._encode

        def flaky_encode(img, encoding, quality, path):
            if encoding == 'jpg' and 'thumbs' in str(path):
                raise OSError('disk full')
            original_encode(img, encoding, quality, path)

        mocker.patch.object(transcoder, '_encode', side_effect=flaky_encode)

        with pytest.raises(OSError):
            transcoder.transcode(SourceAsset.from_path('images/cat.png'))

        assert list((project / 'images-optimized').iterdir()) == []
        assert list((project / 'images-thumbs').iterdir()) == []

    def test_rejects_animated(self, config, logger):
        """Test animated assets are refused."""
        with pytest.raises(ValueError):
            ImageTranscoder(config, logger).transcode(SourceAsset.from_path('images/a.gif'))
