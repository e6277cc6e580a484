"""Integration tests for the schema management helpers."""

import pytest
from fooddash.utils.db import drop_db, setup_db
from protean import current_domain


@pytest.mark.fast
class TestSchemaManagement:
    def test_memory_configuration_has_no_relational_providers(self):
        assert setup_db(current_domain) == []
        assert drop_db(current_domain) == []
