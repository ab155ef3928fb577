import copy

import pytest

from bookit.auth import create_token
from bookit.config import get_settings
from bookit.database import get_db_client
from bookit.main import app


class InMemoryDocumentClient:
    """Document client keeping items in a dict, with the DynamoDBClient contract"""

    def __init__(self):
        self.items = {}
        self.fail_transactions = False

    def _matches(self, key, expected_version):
        stored = self.items.get(key)
        if expected_version is None:
            return True
        if expected_version == 0:
            return stored is None
        return stored is not None and stored.get("version") == expected_version

    def test_connection(self):
        return {"status": "connected", "table_name": "memory", "item_count": len(self.items)}

    def put_item(self, item, expected_version=None):
        key = (item["pk"], item["sk"])
        if not self._matches(key, expected_version):
            return {"status": "conflict", "error": "ConditionalCheckFailedException"}
        self.items[key] = copy.deepcopy(item)
        return {"status": "success", "response": {}}

    def get_item(self, pk, sk):
        item = self.items.get((pk, sk))
        if item is None:
            return {"status": "not_found", "item": None}
        return {"status": "success", "item": copy.deepcopy(item)}

    def delete_item(self, pk, sk):
        self.items.pop((pk, sk), None)
        return {"status": "success", "response": {}}

    def scan_items(self, sk, filters=None):
        items = [
            copy.deepcopy(item)
            for (_, item_sk), item in self.items.items()
            if item_sk == sk and all(item.get(k) == v for k, v in (filters or {}).items())
        ]
        return {"status": "success", "items": items, "count": len(items)}

    def transact_put_items(self, puts):
        if self.fail_transactions:
            return {"status": "error", "error": "TransactionCanceledException: injected"}
        for item, expected_version in puts:
            if not self._matches((item["pk"], item["sk"]), expected_version):
                return {"status": "conflict", "error": "TransactionCanceledException"}
        for item, _ in puts:
            self.items[(item["pk"], item["sk"])] = copy.deepcopy(item)
        return {"status": "success", "response": {}}

    # Test helpers
    def host_request(self, host_request_id):
        return self.items.get((host_request_id, "HOST_REQUEST"))

    def venues(self):
        return [item for (_, sk), item in self.items.items() if sk == "VENUE"]


@pytest.fixture(autouse=True)
def db():
    """Fresh document store for every test"""
    client = InMemoryDocumentClient()
    app.dependency_overrides[get_db_client] = lambda: client
    yield client
    app.dependency_overrides.pop(get_db_client, None)


def auth_headers(email, role=None):
    token = create_token(email, get_settings(), role=role)
    return {"Authorization": f"Bearer {token}"}


OWNER_EMAIL = "owner@example.com"
USER_EMAIL = "guest@example.com"
ADMIN_EMAIL = "admin@example.com"


@pytest.fixture
def make_headers():
    return auth_headers


@pytest.fixture
def owner_headers():
    return auth_headers(OWNER_EMAIL)


@pytest.fixture
def user_headers():
    return auth_headers(USER_EMAIL)


@pytest.fixture
def admin_headers():
    return auth_headers(ADMIN_EMAIL, role="admin")


@pytest.fixture
def host_request_data():
    return {
        "venue_name": "Test Studio",
        "business_type": "Co-working",
        "contact_person": "Test Owner",
        "email": "studio@example.com",
        "phone": "+911234567890",
        "address": "1 Test Street",
        "city": "Mumbai",
        "description": "A quiet test studio",
        "capacity": 3,
        "price_per_hour": 100.0,
    }
