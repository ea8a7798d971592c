"""End-to-end tests for Pipeline."""

import json

from gallerygen.encoder import EncodeResult
from gallerygen.manifest import Manifest
from gallerygen.pipeline import Pipeline


class TestPipeline:
    """Tests for Pipeline class."""

    def test_static_image_scenario(self, config, logger, project, make_image, fake_runner):
        """Test a dated PNG produces the documented manifest entry."""
        make_image('images/2022-05-01_cat.png')

        result = Pipeline(config, runner=fake_runner, logger=logger).run()

        data = json.loads((project / 'index.json').read_text())
        assert data == [{
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
        }]
        assert result.stats.processed == 1

    def test_mixed_batch_with_failure(self, config, logger, project, make_image, make_gif, make_runner):
        """Test statics come first, a broken GIF is dropped and later assets still appear."""
        make_gif('images/a_party.gif')
        make_image('images/b_photo.jpg')
        make_gif('images/broken.gif')
        make_gif('images/z_party.gif')
        make_image('images/c_photo.PNG')
        runner = make_runner()
        original_run = runner.run

        def run(args):
            if any('broken.gif' in a for a in args):
                return EncodeResult(ok=False, returncode=1, stderr='corrupt')
            return original_run(args)

        runner.run = run

        Pipeline(config, runner=runner, logger=logger).run()

        manifest = Manifest.load(str(project / 'index.json'))
        assert manifest.originals == [
            'images/b_photo.jpg',
            'images/c_photo.PNG',
            'images/a_party.gif',
            'images/z_party.gif',
        ]
        assert [e.format for e in manifest] == ['image', 'image', 'webm', 'webm']
        assert manifest.verify(str(project)) == []

    def test_no_dangling_references(self, config, logger, project, make_image, make_gif, fake_runner):
        """Test every path in the manifest exists after a run."""
        make_image('images/2021_a.png', size=(3000, 2000))
        make_image('images/b.webp', fmt='WEBP')
        make_gif('images/2020.c.gif')

        Pipeline(config, runner=fake_runner, logger=logger).run()

        manifest = Manifest.load(str(project / 'index.json'))
        assert len(manifest) == 3
        assert manifest.verify(str(project)) == []

    def test_same_stem_thumbnail_failure_keeps_earlier_entry(
        self, config, logger, project, make_gif, make_runner
    ):
        """Test a later same-named GIF whose thumbnail fails leaves the earlier entry intact."""
        make_gif('images/a/party.gif')
        make_gif('images/b/party.gif')
        runner = make_runner()
        original_run = runner.run

        def run(args):
            if '-t' in args and any(a.endswith('b/party.gif') for a in args):
                return EncodeResult(ok=False, returncode=1, stderr='thumbnail error')
            return original_run(args)

        runner.run = run

        result = Pipeline(config, runner=runner, logger=logger).run()

        assert result.manifest.originals == ['images/a/party.gif']
        assert result.manifest.verify(str(project)) == []
        assert sorted(p.name for p in (project / 'images-optimized').iterdir()) == ['party.webm']

    def test_no_files_writes_no_manifest(self, config, logger, project, fake_runner):
        """Test an empty source tree ends the run without a manifest."""
        (project / 'images' / 'notes.txt').write_text('hello')

        result = Pipeline(config, runner=fake_runner, logger=logger).run()

        assert result is None
        assert not (project / 'index.json').exists()

    def test_missing_encoder_still_processes_statics(self, config, logger, project, make_image, make_gif, make_runner):
        """Test an unavailable encoder is a warning, not a fatal error."""
        make_image('images/a.png')
        make_gif('images/b.gif')
        pipeline = Pipeline(config, runner=make_runner(available=False), logger=logger)

        assert pipeline.check_encoder() is False
        result = pipeline.run()

        assert result.manifest.originals == ['images/a.png']
        assert (project / 'images-optimized' / 'b.gif').is_file()

    def test_rerun_replaces_manifest(self, config, logger, project, make_image, fake_runner):
        """Test a second run overwrites rather than merges."""
        make_image('images/a.png')
        Pipeline(config, runner=fake_runner, logger=logger).run()
        (project / 'images' / 'a.png').unlink()
        make_image('images/b.png')

        Pipeline(config, runner=fake_runner, logger=logger).run()

        manifest = Manifest.load(str(project / 'index.json'))
        assert manifest.originals == ['images/b.png']

    def test_limit(self, config, logger, project, make_image, fake_runner):
        """Test limiting the batch size."""
        for name in ('a', 'b', 'c'):
            make_image(f'images/{name}.png')

        result = Pipeline(config, runner=fake_runner, logger=logger).run(limit=2)

        assert len(result.manifest) == 2
