from dataclasses import dataclass, field
from typing import Any, Dict, Optional

DEFAULT_PRIMARY = "#3b82f6"
DEFAULT_SECONDARY = "#e5e7eb"
DEFAULT_BACKGROUND = "#fff"
DEFAULT_TEXT = "#000"
DEFAULT_ACCENT = "#e2e8f0"
DEFAULT_FONT = "inherit"
DEFAULT_RADIUS = 4

SPACING_GAPS = {"compact": 12, "normal": 24, "relaxed": 32}

SPEED_SECONDS = {"SLOW": 0.8, "MEDIUM": 0.5, "FAST": 0.3}

_PRESETS: Dict[str, Dict[str, Dict[str, float]]] = {
    "fade": {
        "initial": {"opacity": 0},
        "animate": {"opacity": 1},
        "exit": {"opacity": 0},
    },
    "slide": {
        "initial": {"x": 50, "opacity": 0},
        "animate": {"x": 0, "opacity": 1},
        "exit": {"x": -50, "opacity": 0},
    },
    "scale": {
        "initial": {"scale": 0.9, "opacity": 0},
        "animate": {"scale": 1, "opacity": 1},
        "exit": {"scale": 0.9, "opacity": 0},
    },
    "bounce": {
        "initial": {"y": 20, "opacity": 0},
        "animate": {"y": 0, "opacity": 1},
        "exit": {"y": 20, "opacity": 0},
    },
    "zoom": {
        "initial": {"scale": 0.7, "opacity": 0},
        "animate": {"scale": 1, "opacity": 1},
        "exit": {"scale": 0.7, "opacity": 0},
    },
}


@dataclass(frozen=True)
class Transition:
    """Enter/exit animation for a step. An empty ``initial`` means none."""

    name: str = "none"
    initial: Dict[str, float] = field(default_factory=dict)
    animate: Dict[str, float] = field(default_factory=dict)
    exit: Dict[str, float] = field(default_factory=dict)
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_noop(self) -> bool:
        return self.name == "none"


@dataclass(frozen=True)
class Presentation:
    primary_color: str
    secondary_color: str
    background_color: str
    text_color: str
    accent_color: str
    font_family: str
    border_radius: int
    spacing_gap: int
    transition: Transition

    @property
    def nested_radius(self) -> int:
        return max(self.border_radius - 2, 0)

    def css_variables(self) -> Dict[str, str]:
        return {
            "--primary-color": self.primary_color,
            "--secondary-color": self.secondary_color,
            "--background-color": self.background_color,
            "--text-color": self.text_color,
            "--accent-color": self.accent_color,
            "--font-family": self.font_family,
            "--border-radius": f"{self.border_radius}px",
        }


def _enum_value(value) -> Optional[str]:
    if value is None:
        return None
    return str(getattr(value, "value", value))


def _pick(*candidates, default):
    for candidate in candidates:
        if candidate:
            return candidate
    return default


def spacing_gap(spacing: Optional[str]) -> int:
    return SPACING_GAPS.get(spacing or "", SPACING_GAPS["normal"])


def resolve_transition(animation, speed) -> Transition:
    name = (_enum_value(animation) or "none").lower()
    preset = _PRESETS.get(name)
    if preset is None:
        return Transition()

    duration = SPEED_SECONDS.get((_enum_value(speed) or "").upper(), SPEED_SECONDS["MEDIUM"])
    options: Dict[str, Any] = {"duration": duration}
    if name == "bounce":
        options.update(type="spring", stiffness=300, damping=15)
    return Transition(
        name=name,
        initial=dict(preset["initial"]),
        animate=dict(preset["animate"]),
        exit=dict(preset["exit"]),
        options=options,
    )


def resolve_presentation(form, theme=None) -> Presentation:
    # text and accent colours only ever come from a theme
    radius = getattr(theme, "border_radius", None)
    if radius is None:
        radius = getattr(form, "border_radius", None)
    if radius is None:
        radius = DEFAULT_RADIUS

    return Presentation(
        primary_color=_pick(getattr(theme, "primary_color", None), form.primary_color, default=DEFAULT_PRIMARY),
        secondary_color=_pick(getattr(theme, "secondary_color", None), form.secondary_color, default=DEFAULT_SECONDARY),
        background_color=_pick(getattr(theme, "background_color", None), form.background_color, default=DEFAULT_BACKGROUND),
        text_color=_pick(getattr(theme, "text_color", None), default=DEFAULT_TEXT),
        accent_color=_pick(getattr(theme, "accent_color", None), default=DEFAULT_ACCENT),
        font_family=_pick(getattr(theme, "font_family", None), form.font_family, default=DEFAULT_FONT),
        border_radius=radius,
        spacing_gap=spacing_gap(form.spacing),
        transition=resolve_transition(form.animation, form.animation_speed),
    )
