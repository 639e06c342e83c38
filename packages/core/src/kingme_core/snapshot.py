"""Loading profile snapshots.

The store layer persists the profile as JSON with camelCase keys. This is
the one boundary where bad input is rejected instead of defaulted: a
snapshot whose shape cannot be validated raises SnapshotError.
"""

from typing import Any, Mapping, Union

import structlog
from pydantic import ValidationError

from .exceptions import SnapshotError
from .models import UserProfile

logger = structlog.get_logger()


def _flatten_errors(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
        for err in exc.errors()
    ]


def load_profile(data: Union[Mapping[str, Any], str, bytes]) -> UserProfile:
    """Validate a snapshot into a UserProfile.

    Args:
        data: Mapping, or a JSON document, using snake_case or camelCase keys.

    Returns:
        Validated, immutable UserProfile

    Raises:
        SnapshotError: If the snapshot does not validate.
    """
    try:
        if isinstance(data, (str, bytes)):
            profile = UserProfile.model_validate_json(data)
        else:
            profile = UserProfile.model_validate(data)
    except ValidationError as e:
        errors = _flatten_errors(e)
        logger.warning("snapshot_rejected", error_count=len(errors), first_error=errors[0])
        raise SnapshotError(
            f"Invalid profile snapshot: {len(errors)} validation error(s)",
            field=errors[0]["loc"],
            errors=errors,
        ) from e

    logger.debug(
        "snapshot_loaded",
        accounts=len(profile.accounts),
        income_sources=len(profile.income_sources),
        obligations=len(profile.obligations),
        assets=len(profile.assets),
    )
    return profile
