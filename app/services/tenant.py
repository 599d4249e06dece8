"""Tenant isolation checks shared by the domain services."""
import logging
from typing import Optional

from app.core.exceptions import InstitutionAccessDenied

logger = logging.getLogger(__name__)


def ensure_same_institution(entity_institution_id: Optional[int], caller_institution_id: Optional[int],
                            what: str = "resource") -> None:
    """
    Raise unless the entity belongs to the caller's institution.

    Raises:
        InstitutionAccessDenied: If the institutions differ
    """
    if entity_institution_id is None or entity_institution_id != caller_institution_id:
        logger.warning(
            "Cross-institution access to %s blocked (entity institution %s, caller institution %s)",
            what, entity_institution_id, caller_institution_id,
        )
        raise InstitutionAccessDenied(f"This {what} belongs to another institution")
