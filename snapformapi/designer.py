"""In-memory form being designed before it is sent to the API."""
import itertools
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TypeVar

from snapformapi.models.form import FieldKind
from snapformapi.models.theme import Animation, AnimationSpeed, FormLayout

T = TypeVar("T")


class DesignerError(ValueError):
    pass


def move_item(items: List[T], old_index: int, new_index: int) -> List[T]:
    """Copy of ``items`` with one element moved from ``old_index`` to ``new_index``."""
    moved = list(items)
    if not (0 <= old_index < len(moved)) or not (0 <= new_index < len(moved)):
        raise IndexError(f"cannot move {old_index} -> {new_index} in a list of {len(moved)}")
    moved.insert(new_index, moved.pop(old_index))
    return moved


@dataclass
class DraftField:
    client_id: str
    type: FieldKind = FieldKind.TEXT
    label: str = ""
    placeholder: str = ""
    required: bool = False
    options: List[str] = field(default_factory=list)


class FormDraft:
    def __init__(self, name: str = "", description: str = ""):
        self.name = name
        self.description = description
        self.theme_id: Optional[int] = None
        self.animation = Animation.NONE
        self.animation_speed = AnimationSpeed.MEDIUM
        self.layout = FormLayout.STANDARD
        self._ids = itertools.count(1)
        self.fields: List[DraftField] = []
        self.add_field()

    def _find(self, client_id: str) -> DraftField:
        for f in self.fields:
            if f.client_id == client_id:
                return f
        raise KeyError(client_id)

    def add_field(self) -> DraftField:
        draft = DraftField(client_id=f"field_{next(self._ids)}")
        self.fields.append(draft)
        return draft

    def update_field(self, client_id: str, **changes: Any) -> DraftField:
        draft = self._find(client_id)
        if "type" in changes:
            changes["type"] = FieldKind(str(getattr(changes["type"], "value", changes["type"])).upper())
        for name, value in changes.items():
            if not hasattr(draft, name) or name == "client_id":
                raise DesignerError(f"Unknown field attribute: {name}")
            setattr(draft, name, value)
        if draft.type.has_options and not draft.options:
            draft.options = [""]
        return draft

    def remove_field(self, client_id: str):
        if len(self.fields) <= 1:
            raise DesignerError("Cannot remove the last field")
        draft = self._find(client_id)
        self.fields.remove(draft)

    def move_field(self, old_index: int, new_index: int):
        self.fields = move_item(self.fields, old_index, new_index)

    def add_option(self, client_id: str):
        self._find(client_id).options.append("")

    def update_option(self, client_id: str, index: int, value: str):
        self._find(client_id).options[index] = value

    def remove_option(self, client_id: str, index: int) -> bool:
        """Drop one option; a field always keeps at least one."""
        draft = self._find(client_id)
        if len(draft.options) <= 1:
            return False
        del draft.options[index]
        return True

    def apply_theme(self, theme):
        # a theme's animation only fills in when none was picked
        self.theme_id = theme.id
        if self.animation is Animation.NONE:
            self.animation = theme.default_animation

    def to_payload(self) -> Dict[str, Any]:
        if any(not f.label.strip() for f in self.fields):
            raise DesignerError("All fields need labels")
        return {
            "name": self.name,
            "description": self.description,
            "themeId": self.theme_id,
            "animation": self.animation.value,
            "animationSpeed": self.animation_speed.value,
            "layout": self.layout.value,
            "fields": [
                {
                    "type": f.type.value,
                    "label": f.label,
                    "placeholder": f.placeholder,
                    "required": f.required,
                    "options": list(f.options) if f.type.has_options else None,
                    "order": index,
                }
                for index, f in enumerate(self.fields)
            ],
        }
