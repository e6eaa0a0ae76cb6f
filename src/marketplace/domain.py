"""Marketplace bounded context: crop listings and buyer interests.

Handles the crop catalog (CQRS) and the interest workflow: buyers register
interest in a quantity of a crop, owners accept or reject, and acceptance
draws down the crop's remaining quantity.
"""

from protean.domain import Domain

from marketplace.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
marketplace = Domain(name="marketplace")
