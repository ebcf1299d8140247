"""Catalogue bounded context — products on sale and their reviews."""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

catalogue = Domain(name="catalogue")
