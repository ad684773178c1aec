"""${ENV_VAR} and ${ENV_VAR:-default} substitution over parsed YAML data."""

from typing import TypeAlias
import os
import re

# group 1: variable name, group 2: optional default after ":-"
_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

RawValue: TypeAlias = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


def collect_missing_vars(data: RawValue) -> list[str]:
    """Return every referenced variable that is unset and has no default.

    Names are reported once each, in first-seen order.
    """
    missing: list[str] = []
    for text in _strings(data):
        for ref in _REFERENCE.finditer(text):
            name, default = ref.group(1), ref.group(2)
            if default is None and name not in os.environ and name not in missing:
                missing.append(name)
    return missing


def interpolate(data: RawValue) -> RawValue:
    """Return a copy of ``data`` with every reference substituted.

    Call `collect_missing_vars` first; an unset variable without a default
    raises KeyError here.
    """
    if isinstance(data, str):
        return _REFERENCE.sub(_resolve, data)
    if isinstance(data, list):
        return [interpolate(item) for item in data]
    if isinstance(data, dict):
        return {key: interpolate(value) for key, value in data.items()}
    return data


def _resolve(ref: re.Match[str]) -> str:
    name, default = ref.group(1), ref.group(2)
    if default is not None:
        return os.environ.get(name, default)
    return os.environ[name]


def _strings(data: RawValue):
    if isinstance(data, str):
        yield data
    elif isinstance(data, list):
        for item in data:
            yield from _strings(item)
    elif isinstance(data, dict):
        for value in data.values():
            yield from _strings(value)
