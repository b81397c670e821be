"""Constants module for the prompt console.

This module contains various constants used throughout the application and tests
to make the codebase more maintainable and the tests less fragile.
"""

# Wildcard imports give a single import point for all constants.
from .audit_constants import *  # noqa: F403
from .http_status_constants import *  # noqa: F403
from .paging_constants import *  # noqa: F403
from .resource_key_constants import *  # noqa: F403
