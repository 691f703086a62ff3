"""Requisitions test bed.

Every test starts with the same catalog and actor directory:

    cook-ana     CanRequest          requester of most fixtures
    cook-bia     CanRequest          another requester
    stock-carl   CanManageStock      store keeper
    admin-dora   CanAdminister
    guest-eve    (no capabilities)

Products: prod-rice (code 1001), prod-oil (code 1002), prod-salt (code 1003).
"""

import pytest
from protean.integrations.pytest import DomainFixture

from requisitions.actors import get_actor_directory, reset_actor_directory
from requisitions.actors.port import Capability
from requisitions.catalog import get_product_catalog, reset_product_catalog


@pytest.fixture(scope="session")
def requisitions_bed():
    from requisitions.domain import requisitions

    bed = DomainFixture(requisitions)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(requisitions_bed):
    with requisitions_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def seed_collaborators():
    reset_product_catalog()
    reset_actor_directory()

    catalog = get_product_catalog()
    catalog.register("prod-rice", "Arroz Agulhinha", unit="kg", category="Estoque Seco", code="1001", barcode="7891000100011")
    catalog.register("prod-oil", "Azeite Extra Virgem", unit="l", category="Estoque Seco", code="1002", barcode="7891000100028")
    catalog.register("prod-salt", "Sal Grosso", unit="kg", category="Estoque Seco", code="1003")

    directory = get_actor_directory()
    directory.grant("cook-ana", Capability.REQUEST)
    directory.grant("cook-bia", Capability.REQUEST)
    directory.grant("stock-carl", Capability.MANAGE_STOCK)
    directory.grant("admin-dora", Capability.ADMINISTER)

    yield

    reset_product_catalog()
    reset_actor_directory()
