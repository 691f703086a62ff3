"""In-memory product catalog — for development and testing."""

import json

from requisitions.catalog.port import ProductCatalog, ProductSnapshot


class InMemoryProductCatalog(ProductCatalog):
    """Product catalog backed by a dict of product id -> snapshot."""

    def __init__(self):
        self._products: dict[str, ProductSnapshot] = {}

    def register(
        self,
        product_id: str,
        name: str,
        unit: str | None = None,
        category: str | None = None,
        code: str | None = None,
        barcode: str | None = None,
    ) -> ProductSnapshot:
        product = ProductSnapshot(
            product_id=str(product_id),
            name=name,
            unit=unit,
            category=category,
            code=code,
            barcode=barcode,
        )
        self._products[product.product_id] = product
        return product

    def snapshot(self, product_id: str) -> ProductSnapshot | None:
        return self._products.get(str(product_id))

    def load_seed(self, path: str) -> None:
        """Register products from a JSON list of ``register`` keyword arguments."""
        with open(path) as f:
            for product in json.load(f):
                self.register(**product)
