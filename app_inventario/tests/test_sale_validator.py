import pytest

from app_inventario.errors import InsufficientStockError, ValidationError
from app_inventario.models import SaleItem
from app_inventario.services.ledger_service import available_stock
from app_inventario.services.sale_validator import clean_draft_lines, validate_sale_items


def _item(pid, qty, price=100.0):
    return SaleItem(product_id=pid, product_name='', unit_price=price, quantity=qty)


def test_new_sale_within_stock_passes(sample_data):
    validate_sale_items([_item('p1', 6)], sample_data)


def test_new_sale_over_stock_is_rejected(sample_data):
    with pytest.raises(InsufficientStockError) as exc:
        validate_sale_items([_item('p1', 7)], sample_data)

    assert exc.value.product_id == 'p1'
    assert exc.value.available == 6
    assert exc.value.requested == 7
    assert 'Funda Silicona iPhone 15 - Negro' in str(exc.value)


def test_edit_adds_back_original_quantity(sample_data):
    original = sample_data.get_sale('s1')
    # 6 disponibles + 4 de la venta original ≥ 5
    validate_sale_items([_item('p1', 5)], sample_data, original_sale=original)


def test_edit_over_adjusted_stock_is_rejected(sample_data):
    original = sample_data.get_sale('s1')
    with pytest.raises(InsufficientStockError) as exc:
        validate_sale_items([_item('p1', 11)], sample_data, original_sale=original)

    assert exc.value.available == 10
    assert exc.value.requested == 11


def test_lines_for_same_product_are_summed(sample_data):
    with pytest.raises(InsufficientStockError) as exc:
        validate_sale_items([_item('p1', 4), _item('p1', 4)], sample_data)
    assert exc.value.requested == 8


def test_validation_does_not_touch_data(sample_data):
    before = sample_data.to_dict()
    with pytest.raises(InsufficientStockError):
        validate_sale_items([_item('p2', 1), _item('p1', 50)], sample_data)
    assert sample_data.to_dict() == before
    assert available_stock('p1', sample_data) == 6


def test_deleted_product_uses_line_name(sample_data):
    with pytest.raises(InsufficientStockError) as exc:
        validate_sale_items(
            [SaleItem(product_id='gone', product_name='Vidrio templado', unit_price=1.0, quantity=1)],
            sample_data,
        )
    assert exc.value.available == 0
    assert exc.value.product_name == 'Vidrio templado'


def test_clean_draft_lines_filters_invalid_lines(sample_data):
    lines = [
        {'productId': 'p1', 'quantity': '2', 'unitPrice': '4500'},
        {'productId': '', 'quantity': 1, 'unitPrice': 10},
        {'productId': 'p2', 'quantity': 0, 'unitPrice': 10},
        {'productId': 'p2', 'quantity': 1, 'unitPrice': -1},
        {'productId': 'p2', 'quantity': 1},
    ]
    cleaned = clean_draft_lines(lines, sample_data)

    assert cleaned == [
        {'productId': 'p1', 'quantity': 2, 'unitPrice': 4500.0},
        {'productId': 'p2', 'quantity': 1, 'unitPrice': 8000.0},
    ]


def test_clean_draft_lines_requires_one_valid_line():
    with pytest.raises(ValidationError):
        clean_draft_lines([])
    with pytest.raises(ValidationError):
        clean_draft_lines([{'productId': 'p1', 'quantity': 0, 'unitPrice': 1}])
