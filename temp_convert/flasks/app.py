"""
Single-page form for converting a temperature between Fahrenheit and Celsius.

:author: Doug Skrypa
"""

import logging
from typing import Optional

from flask import Flask, Blueprint, request, render_template_string

from ..config import ServerConfig
from ..conversion import Direction, InvalidDirection, INVALID_INPUT, ConversionResult, convert
from ..parsers import parse_temperature
from .server import base

__all__ = ['create_app', 'converter', 'format_temperature']
log = logging.getLogger(__name__)

converter = Blueprint('converter', __name__)

INVALID_TEMP_MSG = 'Invalid temperature - please enter a number'
NO_DIRECTION_MSG = 'Please select a conversion direction'

FORM_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
    <head>
        <title>Temperature Conversion</title>
        <style type="text/css">
            table {
                text-align: center;
                border-collapse: collapse;
                width: 30%;
            }
            td, th {
                border: solid 1px black;
                padding: 5px;
            }
            .error {
                color: red;
            }
        </style>
    </head>
    <body>
        <h2>Temperature Conversion</h2>
        <div>
            <form method="post" action="">
                <table>
                    <tbody>
                        <tr>
                            <td width="30%"><label for="temp">Temperature:</label></td>
                            <td width="70%"><input type="text" id="temp" name="temp" size="34" value="{{ temp }}" /></td>
                        </tr>
                        <tr>
                            <td colspan="2">
                            {% for d in directions %}
                                <input type="radio" id="dir{{ d.value }}" name="type" value="{{ d.value }}"{% if d == direction %} checked{% endif %} />
                                <label for="dir{{ d.value }}">{{ d.label }}</label>
                                {% if not loop.last %}<br />{% endif %}
                            {% endfor %}
                            </td>
                        </tr>
                        <tr>
                            <td colspan="2"><input type="submit" value="Convert!" /></td>
                        </tr>
                    </tbody>
                </table>
            </form>
        </div>
        {% if error %}
        <div class="error">
            <h1>{{ error }}</h1>
        </div>
        {% elif result is not none %}
        <div>
            <h1>{{ temp }}&#176;{{ direction.source_unit }} &#8660; {{ result }}&#176;{{ direction.target_unit }}</h1>
        </div>
        {% endif %}
    </body>
</html>
"""


def create_app(config: Optional[ServerConfig] = None) -> Flask:
    """
    :param config: Server configuration (optional)
    :return: A Flask app that serves the conversion form at ``/``
    """
    app = Flask(__name__)
    app.config.update(PROPAGATE_EXCEPTIONS=True)
    if config is not None:
        app.debug = config.debug
    app.register_blueprint(base)
    app.register_blueprint(converter)
    return app


def format_temperature(value: ConversionResult) -> str:
    """Formats a conversion result for display without rounding it."""
    if value is INVALID_INPUT:
        return ''
    value = float(value)
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def _render(temp: str = '', direction: Optional[Direction] = None, result: Optional[str] = None, error: str = None):
    return render_template_string(
        FORM_TEMPLATE, temp=temp, direction=direction, result=result, error=error, directions=list(Direction)
    )


@converter.route('/', methods=['GET'])
def show_form():
    return _render()


@converter.route('/', methods=['POST'])
def submit_form():
    raw_temp = request.form.get('temp', '').strip()
    try:
        direction = Direction.parse(request.form.get('type'))
    except InvalidDirection as e:
        log.info(f'Rejecting conversion request: {e}')
        return _render(raw_temp, error=NO_DIRECTION_MSG), 400

    result = convert(parse_temperature(raw_temp), direction)
    if result is INVALID_INPUT:
        log.info(f'Unable to convert invalid temperature={raw_temp!r}')
        return _render(raw_temp, direction, error=INVALID_TEMP_MSG)

    return _render(raw_temp, direction, format_temperature(result))
