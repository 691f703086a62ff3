"""Schema management for SQL-backed providers of the Requisitions domain."""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _touch_daos(domain: Domain, provider_name: str) -> None:
    """Force DAO creation so every table is registered on the provider metadata."""
    registries = (
        domain.registry.aggregates,
        domain.registry.entities,
        domain.registry.projections,
    )
    for registry in registries:
        for _, record in registry.items():
            if record.cls.meta_.provider == provider_name:
                domain.repository_for(record.cls)._dao  # noqa: B018

    # Outbox tables are registered as internal repositories
    if hasattr(domain, "_outbox_repos") and provider_name in domain._outbox_repos:
        domain._outbox_repos[provider_name]._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create requisition tables on every SQL provider."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] not in _SQL_PROVIDERS:
                continue
            engine = create_engine(provider.conn_info["database_uri"])
            _touch_daos(domain, provider.name)
            provider._metadata.create_all(engine)


def drop_db(domain: Domain) -> None:
    """Drop requisition tables on every SQL provider."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] not in _SQL_PROVIDERS:
                continue
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
