from decimal import Decimal

import pytest

from app.core.exceptions import ValidationError
from app.models.product import Product
from app.services.import_service import import_service, parse_flag, parse_int, parse_price


@pytest.mark.parametrize(
    "value, expected",
    [(49.99, Decimal("49.99")), ("$1,200.5", Decimal("1200.50")), (0, Decimal("0.00")), ("7", Decimal("7.00"))],
)
def test_parse_price_valid(value, expected):
    assert parse_price(value) == (expected, None)


@pytest.mark.parametrize(
    "value, message",
    [
        (None, "Product price is required"),
        ("  ", "Product price is required"),
        (-1, "Product price cannot be negative"),
        ("abc", "Product price must be a number, got 'abc'"),
        (float("inf"), "Product price must be a finite number"),
        (True, "Product price must be a number"),
    ],
)
def test_parse_price_invalid(value, message):
    price, error = parse_price(value)

    assert price is None
    assert error == message


@pytest.mark.parametrize(
    "value, expected",
    [(None, True), ("", True), ("yes", True), ("false", False), ("0", False), (False, False), (0, False)],
)
def test_parse_flag(value, expected):
    assert parse_flag(value) is expected


def test_parse_int():
    assert parse_int("8", "stockQuantity") == (8, None)
    assert parse_int(None, "stockQuantity") == (None, None)
    assert parse_int("x", "stockQuantity") == (None, "stockQuantity must be an integer")
    assert parse_int(-3, "stockQuantity") == (None, "stockQuantity cannot be negative")


@pytest.mark.parametrize("value", ["1e400", 10 ** 400, "8.7", 2.5])
def test_parse_int_rejects_non_integral(value):
    number, error = parse_int(value, "stockQuantity")

    assert number is None
    assert error.startswith("stockQuantity ")


def test_parse_int_accepts_integral_float():
    assert parse_int("12.0", "lowStockThreshold") == (12, None)


def test_overflowing_stock_reported_with_field(db_session):
    summary = import_service.import_products(db_session, [
        {"name": "Pad", "sku": "OV-1", "price": 10, "category": "Brakes", "stockQuantity": "1e400"},
    ])

    assert summary["failed"] == 1
    assert "stockQuantity" in summary["errors"][0]["message"]


def test_rows_are_isolated(db_session):
    rows = [
        {"name": "Pad", "sku": "P-1", "price": 10, "category": "Brakes"},
        {"name": "Rotor", "sku": "P-2", "price": -1, "category": "Brakes"},
        "garbage",
        {"name": "Caliper", "sku": "P-3", "price": "12.5", "category": "Brakes"},
    ]

    summary = import_service.import_products(db_session, rows)

    assert summary["successful"] == 2
    assert summary["failed"] == 2
    assert [e["row"] for e in summary["errors"]] == [3, 4]
    assert summary["errors"][1]["message"] == "Row must be an object"
    assert db_session.query(Product).count() == 2


def test_numeric_sku_is_text(db_session):
    summary = import_service.import_products(
        db_session, [{"name": "Clip", "sku": 12345, "price": 1, "category": "Body"}]
    )

    assert summary["successful"] == 1
    assert db_session.query(Product).one().sku == "12345"


def test_row_models_override_batch_model(db_session):
    import_service.import_products(
        db_session,
        [{"name": "Mat", "sku": "M-1", "price": 5, "category": "Interior", "compatibleModels": "Model Y, MODEL_3"}],
        default_model="MODEL_S",
    )

    assert db_session.query(Product).one().compatible_models == "MODEL_3,MODEL_Y"


def test_duplicate_still_reports_created_category(db_session, sample_product):
    summary = import_service.import_products(
        db_session, [{"name": "Pad", "sku": sample_product.sku, "price": 1, "category": "Exhaust"}]
    )

    assert summary["duplicates"] == 1
    assert summary["categories_created"] == ["Exhaust"]


def test_zero_stock_defaults(db_session):
    import_service.import_products(
        db_session, [{"name": "Fuse", "sku": "F-1", "price": 1, "category": "Electrical", "stockQuantity": 0}]
    )

    assert db_session.query(Product).one().stock_quantity == 10


def test_invalid_batch_shapes(db_session):
    with pytest.raises(ValidationError):
        import_service.import_products(db_session, {"name": "not a list"})
    with pytest.raises(ValidationError):
        import_service.import_products(db_session, [], default_model="MODEL_Z")


def test_empty_batch(db_session):
    summary = import_service.import_products(db_session, [])

    assert summary["total"] == 0
    assert summary["message"] == "Successfully imported 0 products. Created 0 new categories."
