"""
Signature capture service - freehand pointer/touch strokes drawn onto a fixed-size bitmap

The pad is a two-state machine. Idle becomes Drawing on pointer down, each move
while Drawing draws one segment from the last point, and pointer up encodes the
whole surface and hands it to on_stroke_committed. clear() wipes the surface
from any state and fires on_cleared.
"""

import io
import base64
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple, Union

from PIL import Image, ImageDraw

# Local imports
from config import CONFIG

_SIGNATURE = CONFIG["signature"]


@dataclass(frozen=True)
class StrokePoint:
    """A position relative to the surface's top-left corner."""
    x: float
    y: float


@dataclass(frozen=True)
class SurfaceRect:
    """Where the surface currently sits in the viewport."""
    left: float
    top: float


@dataclass(frozen=True)
class PointerEvent:
    """
    A mouse or touch event in viewport coordinates.
    Touch events carry their contacts in `touches`; only the first one is used.
    """
    client_x: float = 0.0
    client_y: float = 0.0
    touches: Tuple[Tuple[float, float], ...] = ()
    rect: Optional[SurfaceRect] = None

    def client_position(self) -> Tuple[float, float]:
        if self.touches:
            return self.touches[0]
        return (self.client_x, self.client_y)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PointerEvent":
        """Builds an event from the JSON the planner page posts (browser field names)."""
        touches = tuple(
            (float(t["clientX"]), float(t["clientY"])) for t in data.get("touches") or []
        )
        rect_data = data.get("rect")
        rect = SurfaceRect(float(rect_data["left"]), float(rect_data["top"])) if rect_data else None
        return cls(
            client_x=float(data.get("clientX", 0.0)),
            client_y=float(data.get("clientY", 0.0)),
            touches=touches,
            rect=rect,
        )


class Idle:
    def __repr__(self) -> str:
        return "Idle()"


@dataclass(frozen=True)
class Drawing:
    last_point: StrokePoint


IDLE = Idle()
PadState = Union[Idle, Drawing]


class SignaturePad:
    """Captures one signature; only the latest full-surface image is ever emitted."""

    def __init__(self,
                 on_stroke_committed: Optional[Callable[[str], None]] = None,
                 on_cleared: Optional[Callable[[], None]] = None,
                 rect_provider: Optional[Callable[[], SurfaceRect]] = None,
                 width: int = _SIGNATURE["width"],
                 height: int = _SIGNATURE["height"],
                 stroke_width: int = _SIGNATURE["stroke_width"],
                 stroke_color: Sequence[int] = _SIGNATURE["stroke_color"]):
        self.on_stroke_committed = on_stroke_committed or (lambda image: None)
        self.on_cleared = on_cleared or (lambda: None)
        self.rect_provider = rect_provider
        self.size = (width, height)
        self.stroke_width = stroke_width
        self.stroke_color = tuple(stroke_color)

        self._state: PadState = IDLE
        self._surface = self._blank_surface()

    @property
    def state(self) -> PadState:
        return self._state

    @property
    def is_drawing(self) -> bool:
        return isinstance(self._state, Drawing)

    @property
    def image(self) -> Image.Image:
        """A copy of the current surface."""
        return self._surface.copy()

    def pointer_down(self, event: PointerEvent) -> None:
        self._state = Drawing(self._to_surface_point(event))

    def pointer_move(self, event: PointerEvent) -> None:
        if not isinstance(self._state, Drawing):
            return
        point = self._to_surface_point(event)
        self._draw_segment(self._state.last_point, point)
        self._state = Drawing(point)

    def pointer_up(self, event: Optional[PointerEvent] = None) -> None:
        if not isinstance(self._state, Drawing):
            return
        self._state = IDLE
        self.on_stroke_committed(self.to_data_url())

    def clear(self) -> None:
        self._surface = self._blank_surface()
        self._state = IDLE
        self.on_cleared()

    def handle_event(self, kind: str, event: Optional[PointerEvent] = None) -> None:
        """Dispatches a named event: down, move, up or clear."""
        if kind == "clear":
            self.clear()
            return
        if kind == "up":
            self.pointer_up(event)
            return
        if event is None:
            raise ValueError(f"'{kind}' events need a position")
        if kind == "down":
            self.pointer_down(event)
        elif kind == "move":
            self.pointer_move(event)
        else:
            raise ValueError(f"Unsupported signature event: {kind}")

    def to_png_bytes(self) -> bytes:
        buf = io.BytesIO()
        self._surface.save(buf, format="PNG")
        return buf.getvalue()

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.to_png_bytes()).decode("ascii")
        return f"data:image/png;base64,{encoded}"

    # ========================================================================
    # HELPER FUNCTIONS
    # ========================================================================

    def _blank_surface(self) -> Image.Image:
        return Image.new("RGBA", self.size, (0, 0, 0, 0))

    def _to_surface_point(self, event: PointerEvent) -> StrokePoint:
        # The surface can scroll or move between events, so the offset is read every time.
        rect = event.rect
        if rect is None and self.rect_provider is not None:
            rect = self.rect_provider()
        left, top = (rect.left, rect.top) if rect is not None else (0.0, 0.0)
        client_x, client_y = event.client_position()
        return StrokePoint(client_x - left, client_y - top)

    def _draw_segment(self, start: StrokePoint, end: StrokePoint) -> None:
        drw = ImageDraw.Draw(self._surface)
        drw.line([(start.x, start.y), (end.x, end.y)], fill=self.stroke_color, width=self.stroke_width)
        # Round caps
        radius = self.stroke_width / 2
        for point in (start, end):
            drw.ellipse(
                [point.x - radius, point.y - radius, point.x + radius, point.y + radius],
                fill=self.stroke_color,
            )


def decode_data_url(data_url: str) -> bytes:
    """Returns the raw image bytes of a base64 data URL."""
    header, _, payload = data_url.partition(",")
    if not header.startswith("data:image/") or ";base64" not in header or not payload:
        raise ValueError("Not a base64 image data URL")
    return base64.b64decode(payload, validate=True)
