"""Recursive ${ENV_VAR} / ${ENV_VAR:-default} interpolation for raw settings data."""

import os
import re

_ENV_VAR_PATTERN = re.compile(
    r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}"
)

type RawValue = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


def collect_missing_vars(data: RawValue) -> list[str]:
    """
    Return the names of every referenced variable that is unset and has no
    inline default. All of them are collected before returning so the caller
    can report the complete list at once.
    """
    missing: list[str] = []
    _collect(data, missing)
    return missing


def _collect(data: RawValue, missing: list[str]) -> None:
    if isinstance(data, str):
        for match in _ENV_VAR_PATTERN.finditer(data):
            name = match.group("name")
            if (
                name not in os.environ
                and match.group("default") is None
                and name not in missing
            ):
                missing.append(name)
    elif isinstance(data, list):
        for item in data:
            _collect(item, missing)
    elif isinstance(data, dict):
        for value in data.values():
            _collect(value, missing)


def _substitute(match: re.Match[str]) -> str:
    name = match.group("name")
    if name in os.environ:
        return os.environ[name]
    return match.group("default") or ""


def interpolate(data: RawValue) -> RawValue:
    """
    Substitute every ${ENV_VAR} occurrence with its runtime value, falling back
    to the inline default of ``${ENV_VAR:-default}`` references.

    Call `collect_missing_vars` first; unset variables without a default are
    replaced by an empty string here.
    """
    if isinstance(data, str):
        return _ENV_VAR_PATTERN.sub(_substitute, data)
    if isinstance(data, list):
        return [interpolate(item) for item in data]
    if isinstance(data, dict):
        return {key: interpolate(value) for key, value in data.items()}
    return data
