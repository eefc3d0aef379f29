import pytest

from snapformapi.designer import DesignerError, FormDraft, move_item
from snapformapi.models.form import FieldKind, FormIn
from snapformapi.models.theme import Animation, Theme


def labelled_draft(*labels):
    draft = FormDraft(name="Survey")
    draft.update_field(draft.fields[0].client_id, label=labels[0])
    for label in labels[1:]:
        draft.update_field(draft.add_field().client_id, label=label)
    return draft


def test_move_item():
    assert move_item(["a", "b", "c", "d"], 0, 2) == ["b", "c", "a", "d"]
    assert move_item(["a", "b", "c", "d"], 3, 0) == ["d", "a", "b", "c"]
    assert move_item(["a", "b"], 1, 1) == ["a", "b"]


def test_move_item_out_of_range():
    with pytest.raises(IndexError):
        move_item(["a"], 0, 1)


def test_new_draft_has_one_text_field():
    draft = FormDraft()

    assert len(draft.fields) == 1
    assert draft.fields[0].type is FieldKind.TEXT


def test_added_fields_get_fresh_ids():
    draft = FormDraft()
    draft.add_field()
    draft.add_field()

    assert len({f.client_id for f in draft.fields}) == 3


def test_switching_to_choice_seeds_an_option():
    draft = FormDraft()
    client_id = draft.fields[0].client_id

    field = draft.update_field(client_id, type="radio")

    assert field.type is FieldKind.RADIO
    assert field.options == [""]


def test_switching_keeps_existing_options():
    draft = FormDraft()
    client_id = draft.fields[0].client_id
    draft.update_field(client_id, type=FieldKind.SELECT, options=["Red", "Blue"])

    field = draft.update_field(client_id, type=FieldKind.CHECKBOX)

    assert field.options == ["Red", "Blue"]


def test_update_unknown_attribute():
    draft = FormDraft()

    with pytest.raises(DesignerError):
        draft.update_field(draft.fields[0].client_id, colour="red")


def test_cannot_remove_last_field():
    draft = FormDraft()

    with pytest.raises(DesignerError):
        draft.remove_field(draft.fields[0].client_id)


def test_remove_field():
    draft = labelled_draft("One", "Two")

    draft.remove_field(draft.fields[0].client_id)

    assert [f.label for f in draft.fields] == ["Two"]


def test_options():
    draft = FormDraft()
    client_id = draft.fields[0].client_id
    draft.update_field(client_id, type="SELECT")
    draft.update_option(client_id, 0, "Red")
    draft.add_option(client_id)
    draft.update_option(client_id, 1, "Blue")

    assert draft.remove_option(client_id, 0)
    assert not draft.remove_option(client_id, 0)
    assert draft.fields[0].options == ["Blue"]


def test_apply_theme_fills_animation_once():
    theme = Theme(
        id=3,
        name="Ocean",
        primary_color="#0ea5e9",
        secondary_color="#0369a1",
        background_color="#f0f9ff",
        text_color="#0c4a6e",
        font_family="Inter",
        default_animation="SLIDE",
    )
    draft = FormDraft()

    draft.apply_theme(theme)
    assert draft.animation is Animation.SLIDE

    draft.animation = Animation.ZOOM
    draft.apply_theme(theme)
    assert draft.animation is Animation.ZOOM
    assert draft.theme_id == 3


def test_payload_order_follows_moves():
    draft = labelled_draft("First", "Second", "Third")

    draft.move_field(2, 0)
    payload = draft.to_payload()

    assert [(f["label"], f["order"]) for f in payload["fields"]] == [("Third", 0), ("First", 1), ("Second", 2)]


def test_payload_is_accepted_by_the_api_model():
    draft = labelled_draft("Colour", "Name")
    draft.update_field(draft.fields[0].client_id, type="SELECT", options=["Red"], required=True)

    form = FormIn.model_validate(draft.to_payload())

    assert form.fields[0].type is FieldKind.SELECT
    assert form.fields[0].options == ["Red"]
    assert form.fields[1].options is None


def test_payload_requires_labels():
    draft = labelled_draft("Named")
    draft.add_field()

    with pytest.raises(DesignerError):
        draft.to_payload()
