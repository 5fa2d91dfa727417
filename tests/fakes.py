"""In-memory stand-ins for the editor host and the popup surface provider."""

from __future__ import annotations

from pretty_ts_errors.core.diagnostic_selector import Diagnostic, diagnostics_on_line
from pretty_ts_errors.ui.popup_manager import text_display_width


class FakeSurfaceProvider:
    def __init__(self):
        self._next_id = 0
        self.buffers: dict[int, list[str]] = {}
        self.highlights: dict[int, list[tuple[int, int, int, str]]] = {}
        self.surfaces: dict[int, dict] = {}
        self.live: set[int] = set()
        self.created_surfaces = 0
        self.created_buffers = 0
        self.closed: list[int] = []
        self.discarded: list[int] = []

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def create_buffer(self):
        handle = self._new_id()
        self.buffers[handle] = []
        self.highlights[handle] = []
        self.created_buffers += 1
        return handle

    def is_buffer_valid(self, buffer):
        return buffer in self.buffers

    def set_buffer_lines(self, buffer, lines):
        self.buffers[buffer] = list(lines)

    def clear_highlights(self, buffer):
        self.highlights[buffer] = []

    def apply_highlight(self, buffer, line, col_start, col_end, style_name):
        self.highlights[buffer].append((line, col_start, col_end, style_name))

    def create_surface(self, buffer, anchor, width, height, style):
        handle = self._new_id()
        self.surfaces[handle] = {
            "buffer": buffer,
            "anchor": anchor,
            "width": width,
            "height": height,
            "style": style,
        }
        self.live.add(handle)
        self.created_surfaces += 1
        return handle

    def is_valid(self, surface):
        return surface in self.live

    def close(self, surface):
        self.closed.append(surface)
        self.live.discard(surface)

    def discard_buffer(self, buffer):
        self.discarded.append(buffer)
        self.buffers.pop(buffer, None)
        self.highlights.pop(buffer, None)

    def display_width(self, text):
        return text_display_width(text)

    def invalidate(self, surface):
        """Simulate the surface being closed behind the manager's back."""
        self.live.discard(surface)


class FakeEditorHost:
    def __init__(self, *, kind="typescript", diagnostics=None, cursor=(0, 0)):
        self.kind = kind
        self.diagnostics: list[Diagnostic] = list(diagnostics or [])
        self.cursor = cursor
        self.moves: list[tuple[int, int]] = []

    def document_kind(self):
        return self.kind

    def cursor_position(self):
        return self.cursor

    def diagnostics_at_line(self, line):
        return diagnostics_on_line(self.diagnostics, line)

    def document_diagnostics(self):
        return list(self.diagnostics)

    def set_cursor_position(self, line, column):
        self.cursor = (line, column)
        self.moves.append((line, column))


class FakeDefer:
    """Records deferred callbacks; a new request replaces the pending one."""

    def __init__(self):
        self.pending = None
        self.delays: list[int] = []

    def __call__(self, delay_ms, callback):
        self.delays.append(delay_ms)
        self.pending = callback

    def flush(self):
        callback, self.pending = self.pending, None
        if callback is not None:
            callback()
