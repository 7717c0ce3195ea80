"""Interactive pyglet viewer for parasurf scenes.

Left click adds a zero at the cursor, right click adds a pole, dragging
orbits the camera, the scroll wheel zooms, ``w`` toggles the wireframe
overlay and ESC exits.  Window coordinates are mapped to the parameter
domain through the normalised cursor position.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Union

import pyglet
from pyglet.gl import (
    GL_DEPTH_TEST,
    GL_LINES,
    GL_POINTS,
    GL_PROGRAM_POINT_SIZE,
    GL_REPEAT,
    GL_TEXTURE0,
    GL_TEXTURE_WRAP_S,
    GL_TEXTURE_WRAP_T,
    GL_TRIANGLES,
    glActiveTexture,
    glBindTexture,
    glClearColor,
    glEnable,
    glTexParameteri,
)
from pyglet.graphics.shader import Shader, ShaderProgram
from pyglet.math import Mat4, Vec3
from pyglet.util import DecodeException
from pyglet.window import key, mouse

from parasurf.config import SceneConfig, build_entity, load_config
from parasurf.errors import AssetLoadFailure
from parasurf.mesh import Mesh, Topology, bounding_box, diagnose
from parasurf.scene import (
    Button,
    KeyPress,
    MeroEntity,
    OrbitCamera,
    PointerDrag,
    PointerRelease,
    Session,
    cursor_to_domain,
)

_GL_MODES = {
    Topology.TRIANGLES: GL_TRIANGLES,
    Topology.LINES: GL_LINES,
    Topology.POINTS: GL_POINTS,
}

_VERTEX_SOURCE = """#version 330 core
in vec3 position;
in vec3 normal;
in vec2 uv;

out vec3 v_normal;
out vec2 v_uv;

uniform WindowBlock
{
    mat4 projection;
    mat4 view;
} window;

void main()
{
    gl_Position = window.projection * window.view * vec4(position, 1.0);
    gl_PointSize = 3.0;
    v_normal = normal;
    v_uv = uv;
}
"""

_FRAGMENT_SOURCE = """#version 330 core
in vec3 v_normal;
in vec2 v_uv;

out vec4 final_color;

uniform sampler2D surface_texture;
uniform vec3 light_dir;
uniform vec4 tint;

void main()
{
    // zero normals carry no lighting information
    float shade = 1.0;
    if (length(v_normal) > 0.0) {
        shade = 0.25 + 0.75 * abs(dot(normalize(v_normal), normalize(light_dir)));
    }
    vec4 color = texture(surface_texture, v_uv) * tint;
    final_color = vec4(color.rgb * shade, color.a);
}
"""


def load_texture(path: Optional[Union[Path, str]] = None):
    """Load the surface texture, or build a checker pattern without one.

    Raises
    ------
    AssetLoadFailure
        If ``path`` is given but the image cannot be read or decoded.
    """

    if path is None:
        pattern = pyglet.image.CheckerImagePattern((235, 235, 245, 255), (40, 40, 70, 255))
        return pattern.create_image(64, 64).get_texture()
    try:
        image = pyglet.image.load(str(path))
    except (OSError, DecodeException) as exc:
        raise AssetLoadFailure(path, str(exc)) from exc
    return image.get_texture()


class SurfaceGroup(pyglet.graphics.Group):
    """Binds the shader program and surface texture for one draw."""

    def __init__(self, program: ShaderProgram, texture, tint=(1.0, 1.0, 1.0, 1.0),
                 order: int = 0):
        super().__init__(order=order)
        self.program = program
        self.texture = texture
        self.tint = tint

    def set_state(self):
        self.program.use()
        self.program['tint'] = self.tint
        glActiveTexture(GL_TEXTURE0)
        glBindTexture(self.texture.target, self.texture.id)
        glTexParameteri(self.texture.target, GL_TEXTURE_WRAP_S, GL_REPEAT)
        glTexParameteri(self.texture.target, GL_TEXTURE_WRAP_T, GL_REPEAT)

    def unset_state(self):
        self.program.stop()

    def __hash__(self):
        return hash((self.program, self.texture.id, self.tint, self.order))

    def __eq__(self, other):
        return (self.__class__ is other.__class__ and
                self.program is other.program and
                self.texture.id == other.texture.id and
                self.tint == other.tint and
                self.order == other.order)


class SurfaceWindow(pyglet.window.Window):
    """Window drawing the meshes of a :class:`Session`."""

    def __init__(self, session: Session, texture, *, wireframe: Optional[MeroEntity] = None,
                 caption: str = "parasurf"):
        super().__init__(width=1000, height=800, caption=caption, resizable=True)
        self.session = session
        self.wireframe = wireframe
        self.show_wireframe = False
        self.batch = pyglet.graphics.Batch()
        self.program = ShaderProgram(Shader(_VERTEX_SOURCE, 'vertex'),
                                     Shader(_FRAGMENT_SOURCE, 'fragment'))
        self.program['light_dir'] = (0.4, 0.6, 1.0)
        self.program['surface_texture'] = 0
        self.group = SurfaceGroup(self.program, texture)
        self.line_group = SurfaceGroup(self.program, texture, tint=(0.0, 0.0, 0.0, 1.0), order=1)
        self._vertex_lists: Dict[int, object] = {}
        self._dragged = False
        glEnable(GL_DEPTH_TEST)
        glEnable(GL_PROGRAM_POINT_SIZE)
        glClearColor(0.05, 0.05, 0.07, 1.0)

        for entity in session.entities:
            self.upload(entity, self.group)
        pyglet.clock.schedule_interval(self.tick, 1 / 60.0)

    def upload(self, entity: MeroEntity, group: SurfaceGroup) -> None:
        """Replace the GPU copy of ``entity``'s published mesh."""

        mesh: Mesh = entity.mesh
        old = self._vertex_lists.pop(id(entity), None)
        if old is not None:
            old.delete()
        self._vertex_lists[id(entity)] = self.program.vertex_list_indexed(
            mesh.vertex_count,
            _GL_MODES[mesh.topology],
            mesh.indices.tolist(),
            batch=self.batch,
            group=group,
            position=('f', mesh.positions.ravel().tolist()),
            normal=('f', mesh.normals.ravel().tolist()),
            uv=('f', mesh.uvs.ravel().tolist()),
        )

    def toggle_wireframe(self) -> None:
        if self.wireframe is None:
            return
        self.show_wireframe = not self.show_wireframe
        if self.show_wireframe:
            self.upload(self.wireframe, self.line_group)
        else:
            vlist = self._vertex_lists.pop(id(self.wireframe), None)
            if vlist is not None:
                vlist.delete()

    def tick(self, dt):
        for entity in self.session.update():
            self.upload(entity, self.group)
            report = diagnose(entity.mesh)
            if report.nonfinite_uvs:
                print(f"Warning: {entity.name}: {report.nonfinite_uvs} vertices evaluate "
                      f"to a non-finite value (pole on the sample grid)")
        if not self.session.running:
            self.close()

    def on_draw(self):
        self.clear()
        cam = self.session.camera
        self.projection = Mat4.perspective_projection(self.aspect_ratio, z_near=0.05,
                                                      z_far=200.0, fov=45)
        self.view = Mat4.look_at(position=Vec3(*cam.eye()),
                                 target=Vec3(*cam.target),
                                 up=Vec3(0.0, 0.0, 1.0))
        self.batch.draw()

    def on_mouse_press(self, x, y, button, modifiers):
        self._dragged = False

    def on_mouse_drag(self, x, y, dx, dy, buttons, modifiers):
        self._dragged = True
        self.session.queue.push(PointerDrag(dx, dy))

    def on_mouse_release(self, x, y, button, modifiers):
        if self._dragged:
            return
        entity = self.session.active_entity
        if entity is None:
            return
        if button == mouse.LEFT:
            which = Button.LEFT
        elif button == mouse.RIGHT:
            which = Button.RIGHT
        else:
            return
        surf = entity.surface
        pos = cursor_to_domain(x / max(self.width, 1), y / max(self.height, 1),
                               surf.start, surf.end)
        self.session.queue.push(PointerRelease(which, pos))

    def on_mouse_scroll(self, x, y, scroll_x, scroll_y):
        self.session.camera.zoom(scroll_y)

    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.session.queue.push(KeyPress("escape"))
            return pyglet.event.EVENT_HANDLED
        if symbol == key.W:
            self.toggle_wireframe()
            return pyglet.event.EVENT_HANDLED

    def on_close(self):
        pyglet.clock.unschedule(self.tick)
        for vlist in self._vertex_lists.values():
            vlist.delete()
        self._vertex_lists.clear()
        super().on_close()


def view_scene(scene: Union[SceneConfig, Path, str, None] = None) -> bool:
    """Build the configured scene and run the viewer until it is closed.

    ``scene`` is a :class:`SceneConfig`, a path to a YAML scene file, or
    ``None`` for the default torus.
    """

    if scene is None:
        cfg = SceneConfig()
    elif isinstance(scene, SceneConfig):
        cfg = scene
    else:
        cfg = load_config(scene)

    texture = load_texture(cfg.texture)
    entity = build_entity(cfg)
    wireframe = MeroEntity(entity.surface, None, topology=Topology.LINES, name="wireframe")

    report = diagnose(entity.mesh)
    bbox = bounding_box(entity.mesh)
    print(f"{cfg.surface_kind}: {report.vertices} vertices, {report.primitives} "
          f"{report.topology}, bounding box: {bbox}")
    if report.zero_normals:
        print(f"Warning: {report.zero_normals} vertices have undefined normals")

    span = max(bbox[3] - bbox[0], bbox[4] - bbox[1], bbox[5] - bbox[2]) or 1.0
    camera = OrbitCamera(distance=2.0 * span,
                         target=((bbox[0] + bbox[3]) / 2.0,
                                 (bbox[1] + bbox[4]) / 2.0,
                                 (bbox[2] + bbox[5]) / 2.0))
    session = Session([entity], camera=camera)
    SurfaceWindow(session, texture, wireframe=wireframe)
    pyglet.app.run()
    return True


__all__ = ["load_texture", "SurfaceGroup", "SurfaceWindow", "view_scene"]
