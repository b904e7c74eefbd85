"""
:author: Doug Skrypa
"""

import re
from numbers import Number
from typing import Any, Union

from yaml import safe_load, YAMLError

from .conversion import is_numeric

__all__ = ['parse_bool', 'parse_temperature']

_int_match = re.compile(r'^[+-]?\d+$').match


def parse_bool(value: Any) -> bool:
    original = value
    if isinstance(value, bool):
        return value
    elif isinstance(value, str):
        try:
            value = safe_load(value)        # Handles 0/1/true/True/TRUE/false/False/FALSE
        except YAMLError:
            pass
    if isinstance(value, (Number, bool)):
        return bool(value)
    elif isinstance(value, str):
        value = value.strip().lower()
        if value in ('t', 'y', 'yes', 'on'):
            return True
        elif value in ('f', 'n', 'no', 'off'):
            return False
    # ValueError works with argparse to provide a useful error message
    raise ValueError(f'Unable to parse boolean value from input: {original!r}')


def parse_temperature(user_input: Any) -> Union[int, float, Any]:
    """
    Parse a raw temperature from user input.

    :param user_input: Raw user input (typically form text)
    :return: An int if the input was integral text, a float if it was other numeric text, or the original value
      unchanged if it was not numeric, so that it will be rejected by the converter.
    """
    if not isinstance(user_input, str) or not is_numeric(user_input):
        return user_input
    value = user_input.strip()
    return int(value) if _int_match(value) else float(value)
