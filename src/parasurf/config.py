"""YAML scene configuration.

A scene file names the parametric surface, its parameter domain, how the
mesh is drawn and the initial zeros and poles::

    surface:
      kind: torus
      a: 1.0
      b: 0.4
    domain:
      start: [0.0, 0.0]
      end: [1.0, 1.0]
      resolution: [100, 100]
    topology: triangles
    uv_encoding: modulus
    texture: gradient.png
    mero:
      factor: [1.0, 0.0]
      zeros: [[0.25, 0.5]]
      poles: [[0.75, 0.5]]

Every section is optional.  Relative texture paths are resolved against
the directory holding the scene file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from parasurf.errors import ConfigError
from parasurf.geom import Vec2, to_vec2
from parasurf.mero import ENCODINGS, Mero
from parasurf.mesh import Topology, as_topology
from parasurf.sampler import sample
from parasurf.scene import MeroEntity
from parasurf.surfaces import surface_from_spec


@dataclass
class SceneConfig:
    surface_kind: str = "torus"
    surface_params: Dict[str, Any] = field(default_factory=lambda: {"a": 1.0, "b": 0.4})
    start: Vec2 = (0.0, 0.0)
    end: Vec2 = (1.0, 1.0)
    resolution: Tuple[int, int] = (100, 100)
    topology: Topology = Topology.TRIANGLES
    uv_encoding: str = "modulus"
    texture: Optional[Path] = None
    factor: complex = 1 + 0j
    zeros: List[complex] = field(default_factory=list)
    poles: List[complex] = field(default_factory=list)


def _complex(value, what: str) -> complex:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return complex(value)
    if isinstance(value, (list, tuple)) and len(value) == 2:
        try:
            return complex(float(value[0]), float(value[1]))
        except (TypeError, ValueError):
            pass
    raise ConfigError(f"{what} must be a number or [re, im] pair, got {value!r}")


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    sec = data.get(name) or {}
    if not isinstance(sec, dict):
        raise ConfigError(f"'{name}' must be a mapping")
    return sec


def config_from_dict(data: Optional[Dict[str, Any]], *,
                     base_dir: Optional[Path] = None) -> SceneConfig:
    """Interpret an already-parsed scene document."""

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("scene document must be a mapping")
    cfg = SceneConfig()

    surf = dict(_section(data, "surface"))
    if surf:
        cfg.surface_kind = str(surf.pop("kind", cfg.surface_kind))
        cfg.surface_params = surf

    domain = _section(data, "domain")
    try:
        if "start" in domain:
            cfg.start = to_vec2(domain["start"])
        if "end" in domain:
            cfg.end = to_vec2(domain["end"])
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"bad domain bounds: {exc}") from exc
    if "resolution" in domain:
        res = domain["resolution"]
        if isinstance(res, int) and not isinstance(res, bool):
            res = [res, res]
        if not isinstance(res, (list, tuple)) or len(res) != 2:
            raise ConfigError(f"resolution must be an int or [rx, ry], got {res!r}")
        for r in res:
            if isinstance(r, bool) or not isinstance(r, int) or r <= 0:
                raise ConfigError(f"resolution must be positive integers, got {res!r}")
        cfg.resolution = (res[0], res[1])

    if "topology" in data:
        try:
            cfg.topology = as_topology(data["topology"])
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    if "uv_encoding" in data:
        enc = str(data["uv_encoding"])
        if enc not in ENCODINGS:
            raise ConfigError(f"unknown uv_encoding {enc!r} (known: {', '.join(ENCODINGS)})")
        cfg.uv_encoding = enc

    if data.get("texture"):
        tex = Path(str(data["texture"]))
        if base_dir is not None and not tex.is_absolute():
            tex = base_dir / tex
        cfg.texture = tex

    mero = _section(data, "mero")
    if "factor" in mero:
        cfg.factor = _complex(mero["factor"], "mero.factor")
    cfg.zeros = [_complex(p, "mero zero") for p in mero.get("zeros") or []]
    cfg.poles = [_complex(p, "mero pole") for p in mero.get("poles") or []]
    return cfg


def load_config(path: Path | str) -> SceneConfig:
    """Read and interpret a YAML scene file."""

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp)
    except OSError as exc:
        raise ConfigError(f"cannot read scene file: {exc}", path=path) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML: {exc}", path=path) from exc
    try:
        return config_from_dict(data, base_dir=path.parent)
    except ConfigError as exc:
        raise ConfigError(str(exc), path=path) from exc


def build_entity(cfg: SceneConfig, name: str = "surface") -> MeroEntity:
    """Sample the configured surface and wrap it with its Mero."""

    try:
        f = surface_from_spec(cfg.surface_kind, **cfg.surface_params)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"bad surface '{cfg.surface_kind}': {exc}") from exc
    surface = sample(cfg.start, cfg.end, cfg.resolution, f)
    mero = Mero(cfg.factor, cfg.zeros, cfg.poles)
    return MeroEntity(surface, mero, topology=cfg.topology,
                      encoding=cfg.uv_encoding, name=name)


__all__ = ["SceneConfig", "config_from_dict", "load_config", "build_entity"]
