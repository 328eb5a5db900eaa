import pytest

from app_inventario.errors import InsufficientStockError, NotFoundError, ValidationError
from app_inventario.repositories import DataRepository, JsonSheetStore
from app_inventario.services.ledger_service import available_stock
from app_inventario.services.sales_service import resolve_total
from app_inventario.tests import factories


def _reload(container):
    """Lee lo persistido con un repositorio nuevo sobre el mismo directorio."""
    return DataRepository(JsonSheetStore(container.store.base_path)).load_all()


# ==============================================================================
# PRODUCTOS
# ==============================================================================

def test_create_product_assigns_sku_and_persists(container):
    result = container.inventory_service.create_product(
        'Cargador 20W', 'Accesorio', '8500', initial_stock=3
    )

    assert result['ok'] and result['synced']
    assert result['product']['sku'] == 'SKU-0001'
    assert result['product']['defaultUnitPrice'] == 8500.0

    stored = _reload(container)
    assert [p.name for p in stored.products] == ['Cargador 20W']
    assert available_stock(stored.products[0].id, stored) == 3


@pytest.mark.parametrize('kwargs', [
    {'name': '', 'category': 'Accesorio', 'default_unit_price': 10},
    {'name': 'X', 'category': '', 'default_unit_price': 10},
    {'name': 'X', 'category': 'Accesorio', 'default_unit_price': None},
    {'name': 'X', 'category': 'Accesorio', 'default_unit_price': -1},
    {'name': 'Funda', 'category': 'Funda', 'default_unit_price': 10},
])
def test_create_product_validation(container, kwargs):
    with pytest.raises(ValidationError):
        container.inventory_service.create_product(**kwargs)
    assert container.synchronizer.data.products == []


def test_create_variants_batch(seeded_container):
    result = seeded_container.inventory_service.create_variants(
        'Funda Silicona', 'Funda', 5000,
        variants=[
            {'model': 'iPhone 14', 'color': 'Rojo'},
            {'model': 'iPhone 14', 'color': ''},
            {'model': 'iPhone 13', 'color': 'Azul'},
        ],
        initial_stock=2,
    )

    products = result['products']
    assert [p['sku'] for p in products] == ['SKU-0003', 'SKU-0004', 'SKU-0005']
    assert [p['name'] for p in products] == [
        'Funda Silicona iPhone 14 - Rojo',
        'Funda Silicona iPhone 14',
        'Funda Silicona iPhone 13 - Azul',
    ]
    data = seeded_container.synchronizer.data
    assert all(available_stock(p['id'], data) == 2 for p in products)


def test_create_variants_rejects_duplicates(seeded_container):
    with pytest.raises(ValidationError):
        seeded_container.inventory_service.create_variants(
            'Funda', 'Funda', 10,
            variants=[{'model': 'iPhone 14', 'color': 'Rojo'}, {'model': 'iphone 14', 'color': 'rojo'}],
        )


def test_update_product_keeps_sku_and_position(seeded_container):
    result = seeded_container.inventory_service.update_product(
        'p2', {'name': 'Cargador USB-C 25W', 'defaultUnitPrice': '9000', 'sku': 'SKU-9999'}
    )

    assert result['product']['sku'] == 'SKU-0002'
    data = seeded_container.synchronizer.data
    assert [p.id for p in data.products] == ['p1', 'p2']
    assert data.get_product('p2').name == 'Cargador USB-C 25W'
    assert data.get_product('p2').default_unit_price == 9000.0


def test_update_unknown_product(seeded_container):
    with pytest.raises(NotFoundError):
        seeded_container.inventory_service.update_product('nope', {'name': 'X'})


def test_delete_product_keeps_movements_and_sales(seeded_container):
    seeded_container.inventory_service.delete_product('p1')
    data = seeded_container.synchronizer.data

    assert data.get_product('p1') is None
    assert any(m.product_id == 'p1' for m in data.stock_movements)
    assert data.get_sale('s1').items[0].product_id == 'p1'


def test_delete_products_bulk(seeded_container):
    result = seeded_container.inventory_service.delete_products(['p1', 'p2', 'missing'])
    assert result['deleted'] == 2
    assert seeded_container.synchronizer.data.products == []

    with pytest.raises(NotFoundError):
        seeded_container.inventory_service.delete_products(['missing'])


# ==============================================================================
# STOCK
# ==============================================================================

def test_add_stock(seeded_container):
    seeded_container.inventory_service.add_stock('p2', 5)
    assert seeded_container.inventory_service.available_stock('p2') == 8


@pytest.mark.parametrize('quantity', [0, -3, 'abc'])
def test_add_stock_requires_positive_quantity(seeded_container, quantity):
    with pytest.raises(ValidationError):
        seeded_container.inventory_service.add_stock('p2', quantity)


def test_add_stock_unknown_product(seeded_container):
    with pytest.raises(NotFoundError):
        seeded_container.inventory_service.add_stock('nope', 1)


def test_adjust_stock_appends_difference(seeded_container):
    result = seeded_container.inventory_service.adjust_stock('p1', 2)

    assert result['movement']['quantity'] == -4
    assert seeded_container.inventory_service.available_stock('p1') == 2


def test_adjust_stock_without_difference_adds_nothing(seeded_container):
    before = len(seeded_container.synchronizer.data.stock_movements)
    result = seeded_container.inventory_service.adjust_stock('p1', 6)

    assert result['movement'] is None
    assert len(seeded_container.synchronizer.data.stock_movements) == before


# ==============================================================================
# VENTAS
# ==============================================================================

def test_create_sale_computes_lines_and_total(seeded_container):
    result = seeded_container.sales_service.create_sale(
        [{'productId': 'p1', 'quantity': 2, 'unitPrice': 4500}, {'productId': 'p2', 'quantity': 1}],
        date='2024-03-12T14:00:00Z',
        payment_method='qr',
    )

    sale = result['sale']
    assert sale['totalAmount'] == 17000.0
    assert [i['lineTotal'] for i in sale['items']] == [9000.0, 8000.0]
    assert [i['productName'] for i in sale['items']] == ['Funda Silicona iPhone 15 - Negro', 'Cargador USB-C']
    assert sale['paymentMethod'] == 'qr'
    assert seeded_container.inventory_service.available_stock('p1') == 4


def test_create_sale_with_manual_total(seeded_container):
    result = seeded_container.sales_service.create_sale(
        [{'productId': 'p2', 'quantity': 1, 'unitPrice': 8000}], total_amount='7500'
    )
    assert result['sale']['totalAmount'] == 7500.0
    assert result['sale']['items'][0]['lineTotal'] == 8000.0


def test_resolve_total_falls_back_to_line_sum():
    draft = factories.sale('s1', '2024-01-01', [('p1', 3, 33.33), ('p2', 1, 0.1)], total=0.0)

    assert resolve_total(draft) == draft.computed_total == 100.09
    assert resolve_total(draft, '') == 100.09
    assert resolve_total(draft, 'Infinity') == 100.09
    assert resolve_total(draft, '99.999') == 100.0


def test_create_sale_over_stock_changes_nothing(seeded_container):
    before = seeded_container.synchronizer.data.to_dict()
    with pytest.raises(InsufficientStockError):
        seeded_container.sales_service.create_sale([{'productId': 'p2', 'quantity': 4, 'unitPrice': 1}])
    assert seeded_container.synchronizer.data.to_dict() == before


def test_product_name_snapshot_survives_rename(seeded_container):
    seeded_container.inventory_service.update_product('p1', {'name': 'Funda renombrada', 'model': 'iPhone 15'})
    assert seeded_container.synchronizer.data.get_sale('s1').items[0].product_name == 'Producto p1'


def test_edit_sale_adds_back_original_units(seeded_container):
    seeded_container.sales_service.update_sale('s1', [{'productId': 'p1', 'quantity': 5, 'unitPrice': 5000}])

    data = seeded_container.synchronizer.data
    assert available_stock('p1', data) == 5
    assert len(data.sales) == 1
    assert data.get_sale('s1').date == '2024-03-10T15:00:00Z'


def test_edit_sale_over_adjusted_stock(seeded_container):
    with pytest.raises(InsufficientStockError) as exc:
        seeded_container.sales_service.update_sale('s1', [{'productId': 'p1', 'quantity': 11, 'unitPrice': 1}])
    assert exc.value.available == 10
    assert seeded_container.inventory_service.available_stock('p1') == 6


def test_delete_sale_returns_units(seeded_container):
    seeded_container.sales_service.delete_sale('s1')
    assert seeded_container.inventory_service.available_stock('p1') == 10

    with pytest.raises(NotFoundError):
        seeded_container.sales_service.delete_sale('s1')
