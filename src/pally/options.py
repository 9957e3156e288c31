"""Default options, option resolution and validation.

``resolve_options`` merges caller overrides onto a base configuration
(``DEFAULT_OPTIONS`` unless another base is given) and normalises the ignore
list. ``verify_options`` checks the fields that can make a run meaningless
and must be called before any browser is launched.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from pally.errors import ConfigurationError
from pally.models.options import Configuration, Standard

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = Configuration()

ALLOWED_STANDARDS = tuple(standard.value for standard in Standard)

# Option names accepted in overrides, including camelCase aliases
_FIELD_NAMES: Dict[str, str] = {}
for _name, _field in Configuration.model_fields.items():
    _FIELD_NAMES[_name] = _name
    if _field.alias:
        _FIELD_NAMES[_field.alias] = _name


def _as_dict(value: Any) -> Dict[str, Any]:
    if isinstance(value, BaseModel):
        return value.model_dump()
    return dict(value)


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``overrides`` into a copy of ``base``, key by key.

    Nested mappings are merged recursively; any other value replaces the
    base value outright.
    """
    merged = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, (Mapping, BaseModel)):
            merged[key] = _deep_merge(_as_dict(current), value)
        else:
            merged[key] = value
    return merged


def _normalise_ignore(ignore: Any, include_notices: bool, include_warnings: bool) -> List[str]:
    if isinstance(ignore, str):
        ignore = [ignore]
    normalised: List[str] = []
    for entry in ignore or ():
        lowered = str(entry).lower()
        if lowered not in normalised:
            normalised.append(lowered)
    if not include_notices and "notice" not in normalised:
        normalised.append("notice")
    if not include_warnings and "warning" not in normalised:
        normalised.append("warning")
    return normalised


def resolve_options(
    overrides: Optional[Union[Mapping[str, Any], Configuration]] = None,
    base: Configuration = DEFAULT_OPTIONS,
) -> Configuration:
    """Merge overrides onto a base configuration.

    Args:
        overrides: Option mapping (snake_case or camelCase keys) or an
            existing Configuration whose explicitly set fields are applied
        base: Configuration supplying every value not overridden

    Returns:
        A new, frozen Configuration with a lower-cased ignore list that
        also contains "notice" and "warning" unless those are included

    Raises:
        ConfigurationError: If an option value has the wrong type

    Example:
        options = resolve_options({"standard": "WCAG2AAA", "includeNotices": True})
        assert "notice" not in options.ignore
    """
    if isinstance(overrides, Configuration):
        overrides = {
            name: getattr(overrides, name) for name in overrides.model_fields_set
        }

    merged: Dict[str, Any] = {
        name: getattr(base, name) for name in Configuration.model_fields
    }
    named_overrides: Dict[str, Any] = {}
    for key, value in (overrides or {}).items():
        name = _FIELD_NAMES.get(key)
        if name is None:
            logger.debug(f"Ignoring unknown option: {key}")
            continue
        named_overrides[name] = value
    merged = _deep_merge(merged, named_overrides)

    if isinstance(merged["standard"], Standard):
        merged["standard"] = merged["standard"].value
    if isinstance(merged["actions"], str):
        merged["actions"] = [merged["actions"]]
    if isinstance(merged["rules"], str):
        merged["rules"] = [merged["rules"]]
    merged["ignore"] = _normalise_ignore(
        merged["ignore"],
        bool(merged["include_notices"]),
        bool(merged["include_warnings"]),
    )

    try:
        return Configuration.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid options: {e}") from e


def verify_options(options: Configuration) -> None:
    """Check that the configured standard is supported.

    Raises:
        ConfigurationError: If ``options.standard`` is not an allowed standard
    """
    if options.standard not in ALLOWED_STANDARDS:
        raise ConfigurationError(
            f"Standard must be one of {', '.join(ALLOWED_STANDARDS)}"
        )
