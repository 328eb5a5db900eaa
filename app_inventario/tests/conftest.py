import os

# Sin archivo de log durante los tests
os.environ.setdefault('INVENTARIO_LOG_TO_FILE', '0')

import pytest

from app_inventario.app_container import AppContainer
from app_inventario.tests.factories import build_data, movement, product, sale


@pytest.fixture
def sample_data():
    """
    Dos productos:
      p1: 10 ingresados, 4 vendidos en s1 → stock 6
      p2: 3 ingresados, sin ventas       → stock 3
    """
    return build_data(
        products=[
            product('p1', name='Funda Silicona iPhone 15 - Negro', sku='SKU-0001',
                    category='Funda', model='iPhone 15', color='Negro', price=5000.0),
            product('p2', name='Cargador USB-C', sku='SKU-0002', price=8000.0),
        ],
        movements=[movement('p1', 10), movement('p2', 3)],
        sales=[sale('s1', '2024-03-10T15:00:00Z', [('p1', 4, 5000.0)])],
    )


@pytest.fixture
def container(tmp_path):
    AppContainer.reset_instance()
    c = AppContainer(data_dir=str(tmp_path / 'data'))
    yield c
    AppContainer.reset_instance()


@pytest.fixture
def seeded_container(container, sample_data):
    container.synchronizer.update_data(sample_data)
    return container


@pytest.fixture
def client(seeded_container):
    from app_inventario.main import create_app

    app = create_app(seeded_container)
    app.config['TESTING'] = True
    with app.test_client() as c:
        yield c
