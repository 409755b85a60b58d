from decimal import Decimal

import pytest

from app.core.exceptions import ConflictError
from app.repositories.product_repository import product_repository


def test_integrity_error_hides_driver_detail(db_session, sample_product):
    with pytest.raises(ConflictError) as exc_info:
        product_repository.create(db_session, obj_in={
            "sku": "OTHER-SKU",
            "name": "Another Pad Set",
            "slug": sample_product.slug,
            "price": Decimal("5.00"),
            "category_id": sample_product.category_id,
        })

    error = exc_info.value
    assert error.details == {}
    assert "UNIQUE" not in error.message
    assert error.message == "Product violates a uniqueness or integrity constraint"
    assert product_repository.count(db_session) == 1
