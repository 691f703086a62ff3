"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
and match the exact field names expected by the API's Pydantic request
schemas. Actor and product ids come from the seed files under
``loadtests/seed``; start the server with them loaded:

    ACTOR_DIRECTORY_SEED=loadtests/seed/actors.json \\
    PRODUCT_CATALOG_SEED=loadtests/seed/products.json \\
    uvicorn app:app --app-dir src
"""

import json
import random
from datetime import date, timedelta
from pathlib import Path

from faker import Faker

fake = Faker("pt_BR")

_SEED_DIR = Path(__file__).parent / "seed"

with open(_SEED_DIR / "actors.json") as f:
    _ACTORS = json.load(f)

with open(_SEED_DIR / "products.json") as f:
    PRODUCTS = json.load(f)

REQUESTERS = [a for a, caps in _ACTORS.items() if "CanRequest" in caps]
STOCK_KEEPERS = [a for a, caps in _ACTORS.items() if "CanManageStock" in caps]
ADMINISTRATORS = [a for a, caps in _ACTORS.items() if "CanAdminister" in caps]

STORES = ["store-001", "store-002"]
SECTORS = ["Cozinha Quente", "Cozinha Fria", "Confeitaria", "Bar", "Salao"]
SHIFTS = ["Morning", "Afternoon"]


def actor_headers(actor_id: str) -> dict:
    return {"X-Actor-Id": actor_id}


def requester() -> str:
    return random.choice(REQUESTERS)


def stock_keeper() -> str:
    return random.choice(STOCK_KEEPERS)


def administrator() -> str:
    return random.choice(ADMINISTRATORS)


# ---------- Requisitions ----------


def requisition_item(product: dict | None = None) -> dict:
    """Generate a RequisitionItemRequest payload."""
    product = product or random.choice(PRODUCTS)
    return {
        "product_id": product["product_id"],
        "requested_qty": round(random.uniform(0.5, 20.0), 1),
    }


def requisition_data(store_id: str | None = None, num_items: int = 3) -> dict:
    """Generate CreateRequisitionRequest payload with distinct products."""
    products = random.sample(PRODUCTS, k=min(num_items, len(PRODUCTS)))
    payload = {
        "store_id": store_id or random.choice(STORES),
        "sector": random.choice(SECTORS),
        "items": [requisition_item(p) for p in products],
        "expected_delivery_date": (date.today() + timedelta(days=random.randint(0, 6))).isoformat(),
        "shift": random.choice(SHIFTS),
    }
    if random.random() < 0.3:
        payload["observations"] = fake.sentence(nb_words=6)
    return payload


def separated_qty(requested_qty: float) -> float:
    """A quantity between half and all of what was requested."""
    return round(random.uniform(requested_qty / 2, requested_qty), 1) or requested_qty


def shortage_observations() -> str:
    return random.choice(["Sem estoque", "Fornecedor nao entregou", "Produto vencido", "Aguardando reposicao"])


def adjustment_justification() -> str:
    return fake.sentence(nb_words=5)


# ---------- Suggestions ----------


def suggestion_data(store_id: str | None = None, weekday: int | None = None) -> dict:
    """Generate SaveSuggestionRequest payload for a seeded product."""
    product = random.choice(PRODUCTS)
    return {
        "store_id": store_id or random.choice(STORES),
        "product_code": product["code"],
        "product_name": product["name"],
        "weekday": weekday if weekday is not None else random.randint(0, 6),
        "average_qty": round(random.uniform(1.0, 30.0), 1),
    }
