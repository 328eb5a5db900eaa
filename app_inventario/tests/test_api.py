import base64
import importlib

import pytest

from app_inventario import main
from app_inventario.app_container import AppContainer
from app_inventario.main import create_app


def test_get_data(client):
    r = client.get('/api/data')
    assert r.status_code == 200
    body = r.get_json()
    assert body['ok'] is True
    assert [p['id'] for p in body['data']['products']] == ['p1', 'p2']
    assert 'stockMovements' in body['data']


def test_inventory_report(client):
    r = client.get('/api/inventory?sort=name&dir=asc')
    rows = r.get_json()['items']
    assert [row['id'] for row in rows] == ['p2', 'p1']
    assert rows[1]['stock'] == 6

    r = client.get('/api/inventory?search=negro')
    assert [row['id'] for row in r.get_json()['items']] == ['p1']


def test_product_detail(client):
    body = client.get('/api/products/p1').get_json()
    assert body['stock'] == 6
    assert body['totalSold'] == 4
    assert body['lastSale'] == '2024-03-10T15:00:00Z'

    assert client.get('/api/products/nope').status_code == 404


def test_create_product_and_variants(client):
    assert client.get('/api/sku/next').get_json()['sku'] == 'SKU-0003'

    r = client.post('/api/products', json={
        'name': 'Vidrio templado', 'category': 'Accesorio', 'defaultUnitPrice': 3000,
    })
    assert r.status_code == 201
    assert r.get_json()['product']['sku'] == 'SKU-0003'

    r = client.post('/api/products', json={
        'name': 'Funda Clear', 'category': 'Funda', 'defaultUnitPrice': 4000, 'initialStock': 5,
        'variants': [{'model': 'iPhone 13', 'color': ''}, {'model': 'iPhone 14', 'color': 'Transparente'}],
    })
    assert r.status_code == 201
    assert [p['sku'] for p in r.get_json()['products']] == ['SKU-0004', 'SKU-0005']


def test_create_product_validation_error(client):
    r = client.post('/api/products', json={'name': 'Funda', 'category': 'Funda', 'defaultUnitPrice': 10})
    assert r.status_code == 400
    assert r.get_json() == {'ok': False, 'error': 'El modelo es obligatorio para fundas'}


def test_update_and_delete_product(client):
    r = client.put('/api/products/p2', json={'name': 'Cargador 25W'})
    assert r.get_json()['product']['name'] == 'Cargador 25W'

    assert client.delete('/api/products/p2').status_code == 200
    assert client.delete('/api/products/p2').status_code == 404

    r = client.post('/api/products/delete', json={'ids': ['p1']})
    assert r.get_json()['deleted'] == 1
    assert client.post('/api/products/delete', json={'ids': []}).status_code == 400


def test_stock_endpoints(client):
    r = client.post('/api/stock', json={'productId': 'p2', 'quantity': 4})
    assert r.status_code == 201

    r = client.post('/api/stock/adjust', json={'productId': 'p2', 'stock': 5})
    assert r.get_json()['movement']['quantity'] == -2

    assert client.post('/api/stock', json={'productId': 'p2', 'quantity': 0}).status_code == 400


def test_sale_lifecycle(client):
    r = client.post('/api/sales', json={
        'items': [{'productId': 'p2', 'quantity': 2, 'unitPrice': 8000}],
        'paymentMethod': 'tarjeta',
        'date': '2024-03-11T00:30:00Z',
    })
    assert r.status_code == 201
    sale_id = r.get_json()['sale']['id']

    r = client.put(f'/api/sales/{sale_id}', json={'items': [{'productId': 'p2', 'quantity': 3, 'unitPrice': 8000}]})
    assert r.get_json()['sale']['totalAmount'] == 24000.0

    assert client.delete(f'/api/sales/{sale_id}').status_code == 200
    assert client.get('/api/products/p2').get_json()['stock'] == 3


def test_insufficient_stock_response(client):
    r = client.post('/api/sales', json={'items': [{'productId': 'p1', 'quantity': 7, 'unitPrice': 1}]})
    assert r.status_code == 400
    body = r.get_json()
    assert body['ok'] is False
    assert body['productId'] == 'p1'
    assert body['available'] == 6
    assert body['requested'] == 7


def test_empty_sale_is_rejected(client):
    assert client.post('/api/sales', json={'items': []}).status_code == 400
    assert client.post('/api/sales', json=[1, 2]).status_code == 400


def test_reports(client):
    client.post('/api/sales', json={
        'items': [{'productId': 'p2', 'quantity': 1, 'unitPrice': 8000}],
        'date': '2024-03-11T00:30:00Z',
        'totalAmount': 7000,
    })

    r = client.get('/api/reports/sales-by-day?from=2024-03-01&to=2024-03-31&order=asc')
    body = r.get_json()
    assert body['days'] == [{'date': '2024-03-10', 'count': 2, 'total': 27000.0}]
    assert body['summary'] == {'count': 2, 'total': 27000.0}

    r = client.get('/api/reports/transactions?from=2024-03-01&to=2024-03-31&page=1')
    body = r.get_json()
    assert body['total'] == 2
    assert body['items'][0]['date'] == '2024-03-11T00:30:00Z'


def test_sheets_sync_and_read(client):
    r = client.post('/api/sheets/sync', json={'products': [], 'stockMovements': [], 'sales': []})
    assert r.status_code == 200
    assert r.get_json()['synced'] is True

    r = client.post('/api/sheets/read')
    assert r.get_json()['data'] == {'products': [], 'stockMovements': [], 'sales': []}


def _basic(user, password):
    token = base64.b64encode(f'{user}:{password}'.encode()).decode()
    return {'Authorization': f'Basic {token}'}


@pytest.fixture
def auth_client(seeded_container):
    app = create_app(seeded_container, basic_auth=('admin', 'secreto'))
    with app.test_client() as c:
        yield c


def test_basic_auth_required(auth_client):
    r = auth_client.get('/api/data')
    assert r.status_code == 401
    assert r.headers['WWW-Authenticate'].startswith('Basic')

    assert auth_client.get('/api/data', headers=_basic('admin', 'otra')).status_code == 401
    assert auth_client.get('/api/data', headers=_basic('admin', 'secreto')).status_code == 200


def test_importing_main_does_not_build_app():
    AppContainer.reset_instance()
    importlib.reload(main)

    assert not hasattr(main, 'app')
    assert AppContainer._instance is None
