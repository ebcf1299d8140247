"""Schema management for domains backed by a SQL provider.

In-memory providers need no schema, so both helpers skip them.
"""

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine

logger = structlog.get_logger(__name__)

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _register_models(domain: Domain, provider) -> None:
    # Accessing the DAO forces the model class to register with SQLAlchemy metadata
    registries = (
        domain.registry.aggregates,
        domain.registry.entities,
        domain.registry.projections,
    )
    for registry in registries:
        for _, record in registry.items():
            if record.cls.meta_.provider == provider.name:
                domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> list[str]:
    """Create tables for every SQL provider of the domain. Returns provider names touched."""
    touched = []
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] not in _SQL_PROVIDERS:
                continue
            engine = create_engine(provider.conn_info["database_uri"])
            _register_models(domain, provider)
            provider._metadata.create_all(engine)
            touched.append(provider.name)
            logger.info("Schema created", domain=domain.name, provider=provider.name)
    return touched


def drop_db(domain: Domain) -> list[str]:
    """Drop tables for every SQL provider of the domain. Returns provider names touched."""
    touched = []
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] not in _SQL_PROVIDERS:
                continue
            engine = create_engine(provider.conn_info["database_uri"])
            _register_models(domain, provider)
            provider._metadata.drop_all(engine)
            touched.append(provider.name)
            logger.info("Schema dropped", domain=domain.name, provider=provider.name)
    return touched
