"""
Fahrenheit / Celsius conversion.

The :class:`TemperatureConverter` holds a single raw temperature value.  The value is validated when the converter
is created, but :meth:`TemperatureConverter.set_temperature` stores whatever it is given, so every conversion checks
the held value again before using it.  Conversions never raise - when no usable value is held, they return
:data:`INVALID_INPUT` instead of a number.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from enum import Enum
from math import isfinite
from numbers import Real
from typing import Any, Optional, Union

__all__ = [
    'TemperatureConverter', 'InvalidInput', 'INVALID_INPUT', 'ConversionResult', 'Direction', 'InvalidDirection',
    'convert', 'is_numeric', 'celsius_to_fahrenheit', 'fahrenheit_to_celsius',
]
log = logging.getLogger(__name__)

_numeric_str_match = re.compile(r'^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$').match


class InvalidInput:
    """Returned by conversions when no valid numeric temperature is held.  Use :data:`INVALID_INPUT`."""

    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return '<InvalidInput>'

    def __reduce__(self):
        return InvalidInput, ()


INVALID_INPUT = InvalidInput()
ConversionResult = Union[float, InvalidInput]


def celsius_to_fahrenheit(deg_c):
    return (deg_c * (9 / 5)) + 32


def fahrenheit_to_celsius(deg_f):
    return (deg_f - 32) * (5 / 9)


def _as_float(value: Any) -> Optional[float]:
    """
    :param value: A raw value of any type
    :return: The value as a finite float, or None if it cannot be interpreted as a number
    """
    if isinstance(value, bool):
        return None
    elif isinstance(value, (Real, Decimal)):
        try:
            num = float(value)
        except (ValueError, OverflowError):  # Decimal('sNaN'), or an int too large for a float
            return None
    elif isinstance(value, str) and _numeric_str_match(value):
        num = float(value)
    else:
        return None
    return num if isfinite(num) else None


def _finite_or_invalid(result: float) -> ConversionResult:
    if isfinite(result):
        return result
    log.debug(f'Converted value={result} is outside the range of a float')
    return INVALID_INPUT


def is_numeric(value: Any) -> bool:
    """
    Numbers and numeric text (such as ``'3'`` or ``' -4.5e1'``) are numeric.  Booleans, None, collections, and any
    other text are not, and neither are NaN or infinite values.
    """
    return _as_float(value) is not None


class TemperatureConverter:
    __slots__ = ('_temperature',)

    def __init__(self, temperature: Any = None):
        """
        :param temperature: The initial temperature.  If it is not numeric, it is discarded, and conversions will
          return :data:`INVALID_INPUT` until a new value is provided via :meth:`.set_temperature`.
        """
        self._temperature = None
        if temperature is not None:
            if is_numeric(temperature):
                self._temperature = temperature
            else:
                log.debug(f'Discarding non-numeric initial {temperature=}')

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[{self._temperature!r}]>'

    @property
    def temperature(self) -> Any:
        """The raw stored value, or None if no value is held"""
        return self._temperature

    @property
    def is_valid(self) -> bool:
        return is_numeric(self._temperature)

    def set_temperature(self, temperature: Any):
        """Replace the stored value.  No validation is performed here; conversions validate the value when used."""
        self._temperature = temperature

    def convert_to_celsius(self) -> ConversionResult:
        """
        :return: The held temperature, interpreted as Fahrenheit, converted to Celsius, or :data:`INVALID_INPUT` if no
          valid numeric temperature is held, or if the result is too large to be represented as a float
        """
        if (deg_f := _as_float(self._temperature)) is None:
            return INVALID_INPUT
        return _finite_or_invalid(fahrenheit_to_celsius(deg_f))

    def convert_to_fahrenheit(self) -> ConversionResult:
        """
        :return: The held temperature, interpreted as Celsius, converted to Fahrenheit, or :data:`INVALID_INPUT` if no
          valid numeric temperature is held, or if the result is too large to be represented as a float
        """
        if (deg_c := _as_float(self._temperature)) is None:
            return INVALID_INPUT
        return _finite_or_invalid(celsius_to_fahrenheit(deg_c))


class InvalidDirection(ValueError):
    """Raised when a conversion direction cannot be parsed"""


class Direction(Enum):
    TO_FAHRENHEIT = 1
    TO_CELSIUS = 2

    @classmethod
    def parse(cls, value: Union[Direction, str, int, None]) -> Direction:
        """
        :param value: A Direction, its form value (``1`` / ``2``, as int or str), or a name such as ``'to_celsius'``,
          ``'f2c'``, or ``'ftoc'``
        :return: The matching Direction
        :raises: :class:`InvalidDirection` if the value does not match a direction
        """
        if isinstance(value, cls):
            return value
        elif isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        elif isinstance(value, str):
            key = value.strip().lower()
            try:
                return _DIRECTION_ALIASES[key]
            except KeyError:
                pass
        raise InvalidDirection(f'Invalid conversion direction: {value!r}')

    @property
    def source_unit(self) -> str:
        return 'C' if self is Direction.TO_FAHRENHEIT else 'F'

    @property
    def target_unit(self) -> str:
        return 'F' if self is Direction.TO_FAHRENHEIT else 'C'

    @property
    def label(self) -> str:
        if self is Direction.TO_FAHRENHEIT:
            return 'Celsius to Fahrenheit'
        return 'Fahrenheit to Celsius'

    def apply(self, converter: TemperatureConverter) -> ConversionResult:
        if self is Direction.TO_FAHRENHEIT:
            return converter.convert_to_fahrenheit()
        return converter.convert_to_celsius()


_DIRECTION_ALIASES = {
    '1': Direction.TO_FAHRENHEIT, 'to_fahrenheit': Direction.TO_FAHRENHEIT, 'fahrenheit': Direction.TO_FAHRENHEIT,
    'c2f': Direction.TO_FAHRENHEIT, 'ctof': Direction.TO_FAHRENHEIT, 'f': Direction.TO_FAHRENHEIT,
    '2': Direction.TO_CELSIUS, 'to_celsius': Direction.TO_CELSIUS, 'celsius': Direction.TO_CELSIUS,
    'f2c': Direction.TO_CELSIUS, 'ftoc': Direction.TO_CELSIUS, 'c': Direction.TO_CELSIUS,
}


def convert(temperature: Any, direction: Union[Direction, str, int]) -> ConversionResult:
    """
    Convert the given raw temperature in the given direction.

    :param temperature: The raw temperature value
    :param direction: The conversion direction (see :meth:`Direction.parse`)
    :return: The converted value, or :data:`INVALID_INPUT` if the temperature was not numeric
    :raises: :class:`InvalidDirection` if the direction is not valid
    """
    direction = Direction.parse(direction)
    result = direction.apply(TemperatureConverter(temperature))
    log.debug(f'Converted {temperature=} {direction.source_unit} => {result!r} {direction.target_unit}')
    return result
