from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError

from app.checkout.core.config import settings
from app.checkout.core.error_catalog import AppError, ErrorCatalog
from app.checkout.schemas.checkout import MembershipConfig


@lru_cache(maxsize=8)
def load_membership_config(path: str) -> MembershipConfig | None:
    """Read the membership block from an exported platform configuration file.

    Accepts either the full platform document (``{"membership": {...}}``) or
    the membership block alone.
    """
    try:
        document = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise AppError(ErrorCatalog.MEMBERSHIP_CONFIG_UNAVAILABLE, details={"path": path}) from exc
    except json.JSONDecodeError as exc:
        raise AppError(
            ErrorCatalog.MEMBERSHIP_CONFIG_INVALID,
            details={"path": path, "message": str(exc)},
        ) from exc

    if isinstance(document, dict) and "membership" in document:
        document = document["membership"]
    if document is None:
        return None
    try:
        return MembershipConfig.model_validate(document)
    except ValidationError as exc:
        raise AppError(
            ErrorCatalog.MEMBERSHIP_CONFIG_INVALID,
            details={"path": path, "errors": exc.errors(include_url=False)},
        ) from exc


def default_membership_config() -> MembershipConfig | None:
    if not settings.MEMBERSHIP_CONFIG_PATH:
        return None
    return load_membership_config(settings.MEMBERSHIP_CONFIG_PATH)
