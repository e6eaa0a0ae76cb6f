"""Identity bounded context: marketplace users.

Registers producers and buyers by email. Registration is idempotent, so a
client can call it on every sign-in.
"""

import structlog
from protean.domain import Domain

identity = Domain(name="identity")

logger = structlog.get_logger(__name__)
