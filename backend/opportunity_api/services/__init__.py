# Services: opportunity repository and request validation

from opportunity_api.services.opportunity_repository import (
    LIST_LIMIT,
    OpportunityRepository,
    get_opportunity_repository,
)
from opportunity_api.services.validation import validation_error_from_errors

__all__ = [
    "LIST_LIMIT",
    "OpportunityRepository",
    "get_opportunity_repository",
    "validation_error_from_errors",
]
