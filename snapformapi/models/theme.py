from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from snapformapi.models.base import CamelModel, Pagination

HEX_COLOR = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"


class Animation(str, Enum):
    NONE = "NONE"
    FADE = "FADE"
    SLIDE = "SLIDE"
    ZOOM = "ZOOM"
    BOUNCE = "BOUNCE"
    SCALE = "SCALE"


class AnimationSpeed(str, Enum):
    SLOW = "SLOW"
    MEDIUM = "MEDIUM"
    FAST = "FAST"


class FormLayout(str, Enum):
    STANDARD = "standard"
    STEP = "step"
    CARD = "card"


class ThemeIn(CamelModel):
    name: str = Field(min_length=3)
    description: Optional[str] = None
    primary_color: str = Field(pattern=HEX_COLOR)
    secondary_color: str = Field(pattern=HEX_COLOR)
    background_color: str = Field(pattern=HEX_COLOR)
    accent_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    text_color: str = Field(pattern=HEX_COLOR)
    font_family: str
    is_public: bool = False
    default_animation: Animation = Animation.FADE
    default_layout: FormLayout = FormLayout.STANDARD
    default_spacing: str = "normal"
    border_radius: int = Field(default=8, ge=0, le=32)


class ThemeUpdateIn(CamelModel):
    name: Optional[str] = Field(default=None, min_length=3)
    description: Optional[str] = None
    primary_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    secondary_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    background_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    accent_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    text_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    font_family: Optional[str] = None
    is_public: Optional[bool] = None
    default_animation: Optional[Animation] = None
    default_layout: Optional[FormLayout] = None
    default_spacing: Optional[str] = None
    border_radius: Optional[int] = Field(default=None, ge=0, le=32)


class Theme(CamelModel):
    id: Optional[int] = None
    user_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    primary_color: str
    secondary_color: str
    background_color: str
    accent_color: Optional[str] = None
    text_color: str
    font_family: str
    is_public: bool = False
    default_animation: Animation = Animation.FADE
    default_layout: FormLayout = FormLayout.STANDARD
    default_spacing: str = "normal"
    border_radius: int = 8
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ThemeList(CamelModel):
    themes: List[Theme]
    pagination: Optional[Pagination] = None
