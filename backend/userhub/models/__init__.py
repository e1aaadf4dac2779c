"""Records — in-memory dataclasses for the two stored entities.

Invariants:
    - Records are owned by their store; callers receive references, not copies

Design Decisions:
    - One file per entity for locality
"""

from userhub.models.user import User  # noqa: F401
from userhub.models.contact import Contact  # noqa: F401
