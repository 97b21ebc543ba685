from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from rich.console import Console

from .utils import new_id

console = Console(stderr=True)

ElementType = Literal["shape", "text", "image", "path", "group", "mask"]
ShapeType = Literal["rectangle", "circle", "triangle", "star", "hexagon", "octagon"]
MaskType = Literal["none", "clip", "gradient", "opacity", "image"]
GradientDir = Literal["to right", "to left", "to bottom", "to top", "to bottom right", "radial"]
BlendMode = Literal[
    "normal", "multiply", "screen", "overlay",
    "darken", "lighten", "color-dodge", "color-burn",
    "hard-light", "soft-light", "difference", "exclusion",
    "hue", "saturation", "color", "luminosity",
]
EasingType = Literal[
    "linear", "ease-in", "ease-out", "ease-in-out",
    "cubic-bezier", "step-start", "step-end", "bounce", "elastic",
]
WidgetType = Literal["alert", "chat", "goal", "clock", "now_playing", "custom"]

NUMERIC_PROPERTIES: Tuple[str, ...] = (
    "x", "y", "width", "height", "rotation", "opacity",
    "stroke_width", "border_radius", "font_size", "letter_spacing", "line_height",
    "blur", "brightness", "contrast", "hue_rotate", "saturate", "scale_x", "scale_y",
)
COLOR_PROPERTIES: Tuple[str, ...] = ("fill", "stroke_color", "color")
ANIMATABLE_PROPERTIES: Tuple[str, ...] = NUMERIC_PROPERTIES + COLOR_PROPERTIES

# Snapshots written by the desktop editor use camelCase property keys.
_CAMEL_TO_PROPERTY: Dict[str, str] = {to_camel(name): name for name in ANIMATABLE_PROPERTIES}

PropertyValue = Union[float, str]
ElementState = Dict[str, PropertyValue]

WIDGET_PRESETS: Dict[str, Tuple[int, int, str]] = {
    "alert": (600, 180, "Alert"),
    "chat": (400, 700, "Chat Box"),
    "goal": (550, 110, "Goal Bar"),
    "clock": (320, 100, "Clock"),
    "now_playing": (550, 130, "Now Playing"),
    "custom": (400, 300, "Custom"),
}


class DocumentModel(BaseModel):
    """Base for everything persisted; field names serialize as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Point(BaseModel):
    x: float
    y: float


class Geometry(BaseModel):
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


class Element(DocumentModel):
    id: str = Field(default_factory=new_id)
    type: ElementType
    name: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    z_index: int = 0
    visible: bool = True
    locked: bool = False
    opacity: float = 1.0
    rotation: float = 0.0
    blend_mode: Optional[BlendMode] = None

    # group / mask container; child coordinates are relative to this element
    children: Optional[List[Element]] = None
    mask_type: Optional[MaskType] = None
    gradient_dir: Optional[GradientDir] = None
    gradient_start_opacity: Optional[float] = None
    gradient_end_opacity: Optional[float] = None
    clip_radius: Optional[float] = None
    mask_image_src: Optional[str] = None
    mask_with_layer_id: Optional[str] = None
    mask_invert: Optional[bool] = None

    # shape
    fill: Optional[str] = None
    fill_opacity: Optional[float] = None
    border_radius: Optional[float] = None
    stroke_color: Optional[str] = None
    stroke_width: Optional[float] = None
    shape_type: Optional[ShapeType] = None

    # path
    path_data: Optional[str] = None

    # text
    content: Optional[str] = None
    font_size: Optional[float] = None
    color: Optional[str] = None
    font_family: Optional[str] = None
    text_align: Optional[Literal["left", "center", "right"]] = None
    font_weight: Optional[str] = None
    text_shadow: Optional[str] = None
    line_height: Optional[float] = None
    letter_spacing: Optional[float] = None

    # image
    src: Optional[str] = None
    object_fit: Optional[Literal["contain", "cover", "fill"]] = None

    # filters
    blur: Optional[float] = None
    brightness: Optional[float] = None
    contrast: Optional[float] = None
    hue_rotate: Optional[float] = None
    saturate: Optional[float] = None

    scale_x: Optional[float] = None
    scale_y: Optional[float] = None

    # preset (non-keyframe) animation
    animation_name: Optional[str] = None
    animation_duration: Optional[float] = None
    animation_delay: Optional[float] = None
    animation_iteration_count: Optional[str] = None

    @field_validator("opacity")
    @classmethod
    def _clamp_opacity(cls, value: float) -> float:
        return max(0.0, min(1.0, value))

    @property
    def is_container(self) -> bool:
        return self.type in ("group", "mask")

    @property
    def geometry(self) -> Geometry:
        return Geometry(x=self.x, y=self.y, width=self.width, height=self.height, rotation=self.rotation)


class GlobalKeyframe(DocumentModel):
    id: str = Field(default_factory=new_id)
    time: float = Field(..., description="Seconds from animation start")
    easing: EasingType = Field("linear", description="Curve used from this keyframe to the next")
    element_states: Dict[str, ElementState] = Field(default_factory=dict)

    @field_validator("time")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        return max(0.0, value)

    @field_validator("element_states", mode="before")
    @classmethod
    def _normalize_keys(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {
            element_id: {_CAMEL_TO_PROPERTY.get(k, k): v for k, v in state.items()}
            if isinstance(state, dict) else state
            for element_id, state in value.items()
        }

    def state_for(self, element_id: str) -> ElementState:
        return self.element_states.get(element_id, {})


class Timeline(DocumentModel):
    duration: float = Field(5.0, gt=0, description="Total duration in seconds")
    loop: bool = False
    autoplay: bool = False
    speed: float = Field(1.0, gt=0, description="Playback speed multiplier")
    keyframes: List[GlobalKeyframe] = Field(default_factory=list)

    @field_validator("keyframes", mode="before")
    @classmethod
    def _skip_broken_keyframes(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        kept = []
        for raw in value:
            if isinstance(raw, GlobalKeyframe):
                kept.append(raw)
                continue
            try:
                kept.append(GlobalKeyframe.model_validate(raw))
            except ValidationError as exc:
                console.print(f"[yellow]Skipping invalid keyframe:[/yellow] {exc.error_count()} error(s)")
        return kept

    def sorted_keyframes(self) -> List[GlobalKeyframe]:
        return sorted(self.keyframes, key=lambda k: k.time)

    def find_keyframe(self, keyframe_id: str) -> Optional[GlobalKeyframe]:
        for kf in self.keyframes:
            if kf.id == keyframe_id:
                return kf
        return None


class Widget(DocumentModel):
    id: str = Field(default_factory=new_id)
    name: str = "Custom"
    widget_type: WidgetType = "custom"
    width: int = 400
    height: int = 300
    background: str = "transparent"
    artboard_x: float = 0.0
    artboard_y: float = 0.0
    elements: List[Element] = Field(default_factory=list)
    animation_timeline: Optional[Timeline] = None

    @classmethod
    def from_preset(cls, widget_type: WidgetType, **extra: Any) -> Widget:
        width, height, label = WIDGET_PRESETS[widget_type]
        data: Dict[str, Any] = {"name": label, "widget_type": widget_type, "width": width, "height": height}
        data.update(extra)
        return cls(**data)

    def ensure_timeline(self) -> Timeline:
        """Return the timeline, creating the default one on first use."""
        if self.animation_timeline is None:
            self.animation_timeline = Timeline()
        return self.animation_timeline


class Workspace(DocumentModel):
    id: str = Field(default_factory=new_id)
    name: str = "My Overlay"
    widgets: List[Widget] = Field(default_factory=list)

    def find_widget(self, widget_id: str) -> Optional[Widget]:
        for widget in self.widgets:
            if widget.id == widget_id:
                return widget
        return None
