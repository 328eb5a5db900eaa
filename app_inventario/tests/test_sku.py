from app_inventario.services.sku_service import SkuSequence, generate_sku
from app_inventario.tests.factories import build_data, product


def test_next_sku_after_highest_valid_code():
    data = build_data(products=[
        product('a', sku='SKU-0001'),
        product('b', sku='SKU-0099'),
        product('c', sku='ABC'),
    ])
    assert generate_sku(data) == 'SKU-0100'


def test_first_sku_when_there_are_no_products():
    assert generate_sku(build_data()) == 'SKU-0001'


def test_missing_and_malformed_skus_are_ignored():
    data = build_data(products=[
        product('a', sku=None),
        product('b', sku='SKU-12a'),
        product('c', sku='sku-0050'),
        product('d', sku=' SKU-0070'),
    ])
    assert generate_sku(data) == 'SKU-0001'


def test_sku_grows_past_four_digits():
    data = build_data(products=[product('a', sku='SKU-9999')])
    assert generate_sku(data) == 'SKU-10000'


def test_sequence_is_seeded_once_and_yields_consecutive_codes():
    data = build_data(products=[product('a', sku='SKU-0004'), product('b', sku='SKU-0002')])
    seq = SkuSequence.from_data(data)

    assert [seq.next(), seq.next(), seq.next()] == ['SKU-0005', 'SKU-0006', 'SKU-0007']
    # La lista de productos no cambió: generate_sku sigue viendo el máximo original
    assert generate_sku(data) == 'SKU-0005'
