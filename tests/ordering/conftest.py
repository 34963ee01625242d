import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()


@pytest.fixture()
def products():
    """Two catalogue products, keyed by a short label."""
    from ordering.catalogue.management import CreateProduct

    return {
        "mug": current_domain.process(CreateProduct(name="Mug", price=10.0), asynchronous=False),
        "spoon": current_domain.process(CreateProduct(name="Spoon", price=5.0), asynchronous=False),
    }
