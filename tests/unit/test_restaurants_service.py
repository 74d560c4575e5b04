import pytest
from fastapi import HTTPException
from starlette.datastructures import FormData

from backend.restaurants import service
from backend.restaurants.models import parse_restaurant_form, to_row, validate_restaurant_form


def _r(name, cuisines, **extra):
    return {"restaurantName": name, "cuisines": cuisines, **extra}


def test_filter_requires_every_selected_cuisine():
    rows = [_r("A", ["Indian", "Chinese"]), _r("B", ["Indian"]), _r("C", ["Italian"])]
    names = [r["restaurantName"] for r in service.filter_restaurants(rows, selected_cuisines="indian,chinese")]
    assert names == ["A"]


def test_filter_search_query_matches_name_or_cuisine():
    rows = [_r("Spice Route", ["Indian"]), _r("Pizza Place", ["Italian"]), _r("Wok", ["Chinese"])]
    assert [r["restaurantName"] for r in service.filter_restaurants(rows, search_query="spice")] == ["Spice Route"]
    assert [r["restaurantName"] for r in service.filter_restaurants(rows, search_query="ital")] == ["Pizza Place"]


def test_sort_unknown_option_falls_back_to_last_updated():
    rows = [
        _r("B", ["x"], lastUpdated="2026-02-01", deliveryPrice=10),
        _r("A", ["x"], lastUpdated="2026-01-01", deliveryPrice=30),
    ]
    assert [r["restaurantName"] for r in service.sort_restaurants(rows, "bogus")] == ["A", "B"]
    assert [r["restaurantName"] for r in service.sort_restaurants(rows, "deliveryPrice")] == ["B", "A"]


def test_search_paginates(monkeypatch, restaurant_row):
    rows = [{**restaurant_row, "id": f"r{i}", "restaurant_name": f"R{i:02d}"} for i in range(23)]
    monkeypatch.setattr("backend.restaurants.repository.list_restaurants_in_city", lambda city: rows)

    result = service.search_restaurants("pune", sort_option="restaurantName", page=3)
    assert result["pagination"] == {"total": 23, "page": 3, "pages": 3}
    assert [r["restaurantName"] for r in result["data"]] == ["R20", "R21", "R22"]


def test_search_empty_city_returns_none(monkeypatch):
    monkeypatch.setattr("backend.restaurants.repository.list_restaurants_in_city", lambda city: [])
    assert service.search_restaurants("nowhere") is None


def test_parse_indexed_form_keys():
    form = FormData([
        ("restaurantName", "Spice Route"),
        ("city", "Pune"),
        ("country", "India"),
        ("deliveryPrice", "40"),
        ("estimatedDeliveryTime", "30"),
        ("cuisines[0]", "Indian"),
        ("cuisines[1]", "Biryani"),
        ("menuItems[0][name]", "Paneer Tikka"),
        ("menuItems[0][price]", "150"),
    ])
    form_model = validate_restaurant_form(parse_restaurant_form(form))
    assert form_model.cuisines == ["Indian", "Biryani"]
    assert form_model.menuItems[0].price == 150.0

    row = to_row(form_model)
    assert row["menu_items"][0]["id"]
    assert row["delivery_price"] == 40.0


def test_parse_json_encoded_lists():
    form = FormData([
        ("cuisines", '["Indian"]'),
        ("menuItems", '[{"id": "M1", "name": "Dosa", "price": 19.99}]'),
    ])
    data = parse_restaurant_form(form)
    assert data["cuisines"] == ["Indian"]
    assert data["menuItems"] == [{"id": "M1", "name": "Dosa", "price": 19.99}]


def test_validation_lists_failing_fields():
    with pytest.raises(HTTPException) as exc:
        validate_restaurant_form({"restaurantName": " ", "city": "Pune", "country": "India", "deliveryPrice": "-1",
                                  "estimatedDeliveryTime": "30", "cuisines": []})
    assert exc.value.status_code == 400
    fields = {e["field"] for e in exc.value.detail}
    assert {"restaurantName", "deliveryPrice", "cuisines"} <= fields


def test_existing_menu_item_ids_are_kept():
    form_model = validate_restaurant_form({
        "restaurantName": "X", "city": "Pune", "country": "India", "deliveryPrice": 0,
        "estimatedDeliveryTime": 10, "cuisines": ["Indian"],
        "menuItems": [{"id": "M1", "name": "Dosa", "price": 5}],
    })
    assert to_row(form_model)["menu_items"][0]["id"] == "M1"


def test_create_requires_image(monkeypatch):
    monkeypatch.setattr("backend.restaurants.repository.get_restaurant_by_owner", lambda uid: None)
    form_model = validate_restaurant_form({
        "restaurantName": "X", "city": "Pune", "country": "India", "deliveryPrice": 0,
        "estimatedDeliveryTime": 10, "cuisines": ["Indian"],
    })
    with pytest.raises(HTTPException) as exc:
        service.create_my_restaurant("owner-1", form_model, None)
    assert exc.value.status_code == 400


def test_create_twice_conflicts(monkeypatch, restaurant_row):
    monkeypatch.setattr("backend.restaurants.repository.get_restaurant_by_owner", lambda uid: restaurant_row)
    with pytest.raises(HTTPException) as exc:
        service.create_my_restaurant("owner-1", None, (b"img", "image/png"))
    assert exc.value.status_code == 409
