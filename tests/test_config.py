from pathlib import Path

import pytest

from parasurf.config import SceneConfig, build_entity, config_from_dict, load_config
from parasurf.errors import ConfigError, InvalidDomain
from parasurf.mesh import Topology

SCENE = """
surface:
  kind: torus
  a: 2.0
  b: 0.5
domain:
  start: [0.0, 0.0]
  end: [1.0, 1.0]
  resolution: [8, 4]
topology: lines
uv_encoding: angular
texture: textures/gradient.png
mero:
  factor: [2.0, -1.0]
  zeros: [[0.25, 0.5], 0.75]
  poles: [[0.5, 0.5]]
"""


def _write(tmp_path, text, name="scene.yaml"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    """Reading YAML scene files."""

    def test_full_scene(self, tmp_path):
        cfg = load_config(_write(tmp_path, SCENE))
        assert cfg.surface_kind == "torus"
        assert cfg.surface_params == {"a": 2.0, "b": 0.5}
        assert cfg.start == (0.0, 0.0)
        assert cfg.end == (1.0, 1.0)
        assert cfg.resolution == (8, 4)
        assert cfg.topology is Topology.LINES
        assert cfg.uv_encoding == "angular"
        assert cfg.texture == tmp_path / "textures" / "gradient.png"
        assert cfg.factor == 2 - 1j
        assert cfg.zeros == [0.25 + 0.5j, 0.75 + 0j]
        assert cfg.poles == [0.5 + 0.5j]

    def test_empty_file_uses_defaults(self, tmp_path):
        cfg = load_config(_write(tmp_path, ""))
        default = SceneConfig()
        assert cfg == default
        assert cfg.surface_kind == "torus"
        assert cfg.resolution == (100, 100)
        assert cfg.uv_encoding == "modulus"
        assert cfg.texture is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError) as info:
            load_config(tmp_path / "nope.yaml")
        assert info.value.path == tmp_path / "nope.yaml"

    def test_bad_yaml(self, tmp_path):
        path = _write(tmp_path, "surface: [unclosed\n")
        with pytest.raises(ConfigError, match="invalid YAML"):
            load_config(path)

    def test_bad_resolution_names_file(self, tmp_path):
        path = _write(tmp_path, "domain:\n  resolution: [8.5, 4]\n")
        with pytest.raises(ConfigError) as info:
            load_config(path)
        assert info.value.path == path
        assert "resolution" in str(info.value)

    def test_error_mentions_path(self, tmp_path):
        path = _write(tmp_path, "topology: quads\n")
        with pytest.raises(ConfigError) as info:
            load_config(path)
        assert str(path) in str(info.value)

    def test_absolute_texture_kept(self, tmp_path):
        tex = tmp_path / "abs.png"
        cfg = load_config(_write(tmp_path, f"texture: {tex}\n"))
        assert cfg.texture == tex


class TestConfigFromDict:
    """Interpreting parsed scene documents."""

    def test_resolution_shorthand(self):
        cfg = config_from_dict({"domain": {"resolution": 16}})
        assert cfg.resolution == (16, 16)

    def test_surface_without_params(self):
        cfg = config_from_dict({"surface": {"kind": "wave"}})
        assert cfg.surface_kind == "wave"
        assert cfg.surface_params == {}

    def test_texture_without_base_dir(self):
        cfg = config_from_dict({"texture": "t.png"})
        assert cfg.texture == Path("t.png")

    @pytest.mark.parametrize("doc", [
        [1, 2, 3],
        {"surface": "torus"},
        {"domain": {"start": [0.0]}},
        {"domain": {"resolution": [1, 2, 3]}},
        {"domain": {"resolution": "big"}},
        {"domain": {"resolution": [2.5, 4]}},
        {"domain": {"resolution": [0, 4]}},
        {"domain": {"resolution": -3}},
        {"domain": {"resolution": [True, 4]}},
        {"topology": "quads"},
        {"uv_encoding": "hue"},
        {"mero": {"factor": "one"}},
        {"mero": {"zeros": [[1.0, 2.0, 3.0]]}},
        {"mero": {"poles": [True]}},
        {"mero": [1.0]},
    ])
    def test_rejected(self, doc):
        with pytest.raises(ConfigError):
            config_from_dict(doc)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            config_from_dict({"topology": 3})


class TestBuildEntity:
    """Sampling the configured surface."""

    def test_build(self):
        cfg = config_from_dict({
            "surface": {"kind": "plane"},
            "domain": {"start": [-1, -1], "end": [1, 1], "resolution": 2},
            "mero": {"zeros": [[0.0, 0.0]]},
        })
        entity = build_entity(cfg, name="demo")
        assert entity.name == "demo"
        assert entity.mesh.vertex_count == 9
        assert entity.mesh.topology is Topology.TRIANGLES
        assert entity.mero.zeros == (0j,)
        assert entity.mesh.uvs[4].tolist() == [0.0, 0.0]

    def test_unknown_surface(self):
        cfg = config_from_dict({"surface": {"kind": "klein"}})
        with pytest.raises(ConfigError):
            build_entity(cfg)

    def test_bad_surface_params(self):
        cfg = config_from_dict({"surface": {"kind": "torus", "a": 0.2, "b": 0.5}})
        with pytest.raises(ConfigError):
            build_entity(cfg)

    def test_unexpected_surface_param(self):
        cfg = config_from_dict({"surface": {"kind": "plane", "height": 2}})
        with pytest.raises(ConfigError):
            build_entity(cfg)

    def test_bad_domain(self):
        cfg = config_from_dict({"surface": {"kind": "plane"},
                                "domain": {"start": [0, 0], "end": [0, 1]}})
        with pytest.raises(InvalidDomain):
            build_entity(cfg)
