"""Identity bounded context — storefront users and their roles.

Authentication itself is delegated to the hosted auth service; this context
keeps the profile record for each authenticated uid and decides who may use
the admin back office.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

identity = Domain(name="identity")
