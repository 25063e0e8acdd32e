# Overview: Error taxonomy shared by the resolvers and the HTTP layer.

"""
Insights error taxonomy.

Services raise these; routes map each one to a status code. Data-integrity
problems (ConfigurationError) are kept distinct from ordinary lookups that
come back empty (NotFoundError) so operators can tell them apart.
"""


class InsightsError(Exception):
    """Base class for all engine errors."""

    status_code = 500
    code = "internal_error"


class ConfigurationError(InsightsError):
    """Missing role template or a cycle in the management tree."""

    status_code = 500
    code = "configuration_error"


class NotFoundError(InsightsError):
    """A principal, product or order id did not resolve."""

    status_code = 404
    code = "not_found"


class AuthorizationError(InsightsError):
    """Principal lacks the permission or hierarchy scope for a view."""

    status_code = 403
    code = "permission_denied"


class CalendarInputError(InsightsError):
    """Unusable period/year combination for the calendar engine."""

    status_code = 400
    code = "invalid_period"
