"""Interactive torus demo.

Opens the scene in ``torus_scene.yaml``.  Left click adds a zero, right
click adds a pole, drag to orbit, scroll to zoom, ``w`` toggles the
wireframe and ESC quits.

Usage:
    python torus_demo.py
"""

from pathlib import Path

from parasurf.viewer import view_scene


if __name__ == "__main__":
    view_scene(Path(__file__).with_name("torus_scene.yaml"))
