import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def fooddash_bed():
    from fooddash.domain import fooddash

    bed = DomainFixture(fooddash)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(fooddash_bed):
    with fooddash_bed.domain_context():
        yield
