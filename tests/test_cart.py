import json
from pathlib import Path

import pytest

from dxforge.cart import (
    CartItem,
    clear_cart_completely,
    commit_cart_immediately,
    commit_entire_cart,
    export_cart_as_shareable_json,
    get_current_cart_contents,
    import_cart_from_json,
    remove_specific_cart_item,
    stage_item_in_cart,
)


@pytest.fixture(autouse=True)
def _empty_cart():
    clear_cart_completely()
    yield
    clear_cart_completely()


def make_item(item_id, files=("a.ts",)):
    return CartItem(
        id=item_id,
        package_id=f"pkg-{item_id}",
        variant="minimal",
        files=list(files),
        config={"theme": "dark"},
    )


def test_stage_and_contents():
    item = make_item("1")
    stage_item_in_cart(item)
    assert get_current_cart_contents() == [item]


def test_commit_returns_all_files_and_empties():
    stage_item_in_cart(make_item("1", ["a.ts", "b.ts"]))
    stage_item_in_cart(make_item("2", ["c.ts"]))
    assert commit_entire_cart() == [Path("a.ts"), Path("b.ts"), Path("c.ts")]
    assert get_current_cart_contents() == []


def test_commit_immediately_behaves_like_commit():
    stage_item_in_cart(make_item("1", ["x.ts"]))
    assert commit_cart_immediately() == [Path("x.ts")]
    assert commit_cart_immediately() == []


def test_remove_specific_item():
    stage_item_in_cart(make_item("1"))
    stage_item_in_cart(make_item("2"))
    remove_specific_cart_item("1")
    assert [item.id for item in get_current_cart_contents()] == ["2"]


def test_empty_export():
    assert export_cart_as_shareable_json() == "[]"


def test_export_import_round_trip():
    original = [make_item("1", ["src/a.ts"]), make_item("2", [])]
    for item in original:
        stage_item_in_cart(item)
    exported = export_cart_as_shareable_json()
    parsed = json.loads(exported)
    assert parsed[0]["files"] == ["src/a.ts"]
    clear_cart_completely()
    import_cart_from_json(exported)
    assert get_current_cart_contents() == original


def test_import_extends_existing_items():
    stage_item_in_cart(make_item("1"))
    import_cart_from_json(json.dumps([make_item("2").to_dict()]))
    assert [item.id for item in get_current_cart_contents()] == ["1", "2"]


def test_import_without_variant_defaults_to_none():
    import_cart_from_json('[{"id": "9", "package_id": "p", "files": [], "config": null}]')
    assert get_current_cart_contents()[0].variant is None


@pytest.mark.parametrize(
    "text",
    ["not json", '{"id": "1"}', '[{"id": "1", "package_id": "p", "files": []}]'],
)
def test_import_rejects_malformed(text):
    with pytest.raises(ValueError):
        import_cart_from_json(text)
    assert get_current_cart_contents() == []