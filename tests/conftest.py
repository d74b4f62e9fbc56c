import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client():
    from app.checkout.core.metrics import metrics
    from app.checkout.services.platform_config import load_membership_config
    from app.main import create_app

    metrics.reset()
    load_membership_config.cache_clear()
    with TestClient(create_app()) as client:
        yield client
    load_membership_config.cache_clear()
