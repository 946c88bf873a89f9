"""
Helpers for constructing Dockerfile instruction lines and docker CLI arguments.
"""
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

StringOrList = Union[str, Sequence[str]]

# Separator between key/value entries of a multi-entry LABEL or ENV
CONTINUATION = " \\\n\t"


def escape_string(value: str) -> str:
    """
    Escapes a string for use in a Dockerfile instruction.

    Every literal double quote is replaced with an escaped one; nothing else
    is touched.

    :param value: The raw value.
    :return: The escaped value.
    """
    if not value:
        return value
    return value.replace('"', '\\"')


def escape_string_list(values: Sequence[str]) -> List[str]:
    """
    Escapes every element of a list of strings.

    :param values: The raw values.
    :return: A new list holding the escaped values.
    """
    return [escape_string(value) for value in values]


def is_string_list(value: Any) -> bool:
    """Returns True for list-like values that should use the exec/array form."""
    return isinstance(value, (list, tuple))


def construct_simple_command(keyword: str, value: Any) -> str:
    """
    Constructs an instruction that takes a single plain value, e.g. `USER app`.
    """
    return f"{keyword} {value}"


def construct_string_or_list_command(keyword: str, value: StringOrList) -> str:
    """
    Constructs an instruction accepting either a string or a list of strings.

    A string produces the shell form, `RUN echo hi`. A list produces the
    exec form, `RUN ["echo", "hi"]`.

    Args:
        keyword (str): The instruction keyword, for example "RUN".
        value (StringOrList): The string or list used with the keyword.

    Returns:
        str: The formatted instruction line.
    """
    if is_string_list(value):
        escaped = escape_string_list([str(item) for item in value])
        return '{} ["{}"]'.format(keyword, '", "'.join(escaped))
    return f"{keyword} {escape_string(str(value))}"


def construct_key_value_command(keyword: str,
                                pairs: Mapping[str, Any],
                                quote_keys: bool) -> str:
    """
    Constructs a LABEL or ENV instruction from a mapping.

    Entries are written as `"key"="value"` (or `key="value"` when
    ``quote_keys`` is False) and joined with a line continuation, so each
    entry after the first lands on its own tab-indented line.

    :param keyword: "LABEL" or "ENV".
    :param pairs: Mapping of keys to values, iterated in insertion order.
    :param quote_keys: Whether keys are quoted and escaped.
    :return: The formatted instruction.
    """
    entries = []
    for key, value in pairs.items():
        escaped_value = escape_string(str(value))
        if quote_keys:
            entries.append(f'"{escape_string(str(key))}"="{escaped_value}"')
        else:
            entries.append(f'{key}="{escaped_value}"')
    return f"{keyword} {CONTINUATION.join(entries)}"


def construct_args_from_map(args: Optional[Mapping[str, Any]]) -> List[str]:
    """
    Flattens a mapping of CLI flags into an argument list.

    ``{"-f": "Dockerfile.dev", "--pull": "true"}`` becomes
    ``["-f", "Dockerfile.dev", "--pull", "true"]``.
    """
    flattened: List[str] = []
    if not args:
        return flattened
    for flag, value in args.items():
        flattened.append(flag)
        flattened.append(str(value))
    return flattened


def parse_flag_assignments(assignments: Sequence[str]) -> Dict[str, str]:
    """
    Parses ``FLAG=VALUE`` strings into a flag map.

    :param assignments: Strings such as ``-f=path/Dockerfile``.
    :return: Mapping from flag to value.
    :raises ValueError: If an assignment has no '=' or an empty flag.
    """
    flags: Dict[str, str] = {}
    for assignment in assignments:
        if '=' not in assignment:
            raise ValueError(f"Expected FLAG=VALUE, got '{assignment}'")
        flag, value = assignment.split('=', 1)
        flag = flag.strip()
        if not flag:
            raise ValueError(f"Empty flag in '{assignment}'")
        flags[flag] = value
    return flags
