import os

import pytest

from parasurf.errors import AssetLoadFailure

VISUALTEST = os.environ.get('VISUALTEST', 'false').lower() in ('true', '1', 'yes')
if VISUALTEST:
    import pyglet

    from parasurf.viewer import load_texture, view_scene


@pytest.mark.visual
class TestViewer:
    """Window and texture smoke tests; need a display."""

    def test_missing_texture(self, tmp_path):
        if not VISUALTEST:
            pytest.skip("Visual tests disabled (set VISUALTEST=true to enable)")
        with pytest.raises(AssetLoadFailure) as info:
            load_texture(tmp_path / "missing.png")
        assert info.value.path == tmp_path / "missing.png"

    def test_checker_texture(self):
        if not VISUALTEST:
            pytest.skip("Visual tests disabled (set VISUALTEST=true to enable)")
        texture = load_texture()
        assert texture.width == 64
        assert texture.height == 64

    def test_view_default_scene(self):
        if not VISUALTEST:
            pytest.skip("Visual tests disabled (set VISUALTEST=true to enable)")
        # leave the event loop after two seconds
        pyglet.clock.schedule_once(lambda dt: pyglet.app.exit(), 2.0)
        assert view_scene() is True
