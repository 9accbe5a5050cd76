from collections.abc import Mapping

from pydantic import ValidationError

from contributions_api.api.schemas.contributions import QueryOptions


class OptionsValidationError(ValueError):
    """Raised when a query parameter fails validation.

    The message describes the first offending parameter only.
    """


def parse_query_options(
    params: Mapping[str, str], default_years: int = 1
) -> QueryOptions:
    """Validate raw query parameters into `QueryOptions`.

    Unknown parameters are ignored. When no `y` is given, `default_years`
    is used so a duration is always available for the date window.

    Raises:
        OptionsValidationError: If any known parameter is invalid.
    """

    try:
        options = QueryOptions.model_validate(dict(params))
    except ValidationError as exc:
        errors = exc.errors()
        message = errors[0]["msg"] if errors else "Invalid query parameters"
        raise OptionsValidationError(message) from exc

    if options.years is None:
        options = options.model_copy(update={"years": default_years})
    return options
