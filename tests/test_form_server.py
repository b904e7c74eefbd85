#!/usr/bin/env python

import logging
import sys
from pathlib import Path
from unittest.mock import patch

from flask import Flask

sys.path.append(Path(__file__).parents[1].as_posix())
from temp_convert.config import ServerConfig
from temp_convert.conversion import INVALID_INPUT
from temp_convert.flasks.app import create_app, format_temperature, INVALID_TEMP_MSG, NO_DIRECTION_MSG
from temp_convert.flasks.server import FlaskServer
from temp_convert.test_common import TestCaseBase, main

log = logging.getLogger(__name__)


class ConversionFormTest(TestCaseBase):
    def setUp(self):
        self.app = create_app()
        self.client = self.app.test_client()

    def _post(self, temp=None, direction=None):
        data = {}
        if temp is not None:
            data['temp'] = temp
        if direction is not None:
            data['type'] = direction
        return self.client.post('/', data=data)

    def test_get_form(self):
        resp = self.client.get('/')
        self.assertEqual(200, resp.status_code)
        body = resp.get_data(as_text=True)
        self.assertIn('<h2>Temperature Conversion</h2>', body)
        self.assertIn('name="temp"', body)
        self.assertIn('Celsius to Fahrenheit', body)
        self.assertIn('Fahrenheit to Celsius', body)
        self.assertNotIn('checked', body)
        self.assertNotIn('&#8660;', body)

    def test_celsius_to_fahrenheit(self):
        resp = self._post('3', '1')
        self.assertEqual(200, resp.status_code)
        body = resp.get_data(as_text=True)
        self.assertIn('3&#176;C &#8660; 37.4&#176;F', body)
        self.assertIn('value="3"', body)
        self.assertIn('value="1" checked', body)

    def test_fahrenheit_to_celsius(self):
        resp = self._post('212', '2')
        self.assertEqual(200, resp.status_code)
        self.assertIn('212&#176;F &#8660; 100&#176;C', resp.get_data(as_text=True))

    def test_result_is_not_rounded(self):
        resp = self._post('3', '2')
        self.assertIn('3&#176;F &#8660; -16.111111111111114&#176;C', resp.get_data(as_text=True))

    def test_large_result_uses_exponent(self):
        body = self._post('1e300', '2').get_data(as_text=True)
        self.assertIn('1e300&#176;F &#8660; 5.55555555555555', body)
        self.assertIn('e+299&#176;C', body)

    def test_result_out_of_float_range(self):
        resp = self._post('1.5e308', '1')
        self.assertEqual(200, resp.status_code)
        self.assertIn(INVALID_TEMP_MSG, resp.get_data(as_text=True))

    def test_invalid_temperature(self):
        for temp in ('LOL', '', '1_000'):
            with self.subTest(temp=temp):
                resp = self._post(temp, '1')
                self.assertEqual(200, resp.status_code)
                body = resp.get_data(as_text=True)
                self.assertIn(INVALID_TEMP_MSG, body)
                self.assertNotIn('&#8660;', body)

    def test_missing_direction(self):
        resp = self._post('3')
        self.assertEqual(400, resp.status_code)
        self.assertIn(NO_DIRECTION_MSG, resp.get_data(as_text=True))

    def test_unknown_direction(self):
        resp = self._post('3', '7')
        self.assertEqual(400, resp.status_code)
        self.assertIn(NO_DIRECTION_MSG, resp.get_data(as_text=True))

    def test_input_is_escaped(self):
        resp = self._post('"><script>alert(1)</script>', '1')
        body = resp.get_data(as_text=True)
        self.assertNotIn('<script>', body)
        self.assertIn('&lt;script&gt;', body)

    def test_debug_from_config(self):
        self.assertTrue(create_app(ServerConfig(debug=True)).debug)
        self.assertFalse(create_app(ServerConfig()).debug)


class FormatTemperatureTest(TestCaseBase):
    def test_format(self):
        cases = {77.0: '77', 37.4: '37.4', -16.111111111111114: '-16.111111111111114', 0.0: '0', -40: '-40'}
        for value, expected in cases.items():
            with self.subTest(value=value):
                self.assertEqual(expected, format_temperature(value))

    def test_format_large_values(self):
        cases = {1e16: '1e+16', -5.555555555555556e299: '-5.555555555555556e+299', 9999999999999998.0: '9999999999999998'}
        for value, expected in cases.items():
            with self.subTest(value=value):
                self.assertEqual(expected, format_temperature(value))

    def test_format_invalid(self):
        self.assertEqual('', format_temperature(INVALID_INPUT))


class FlaskServerTest(TestCaseBase):
    def test_blueprints_registered_once(self):
        app = create_app()
        server = FlaskServer(app, 12345)
        self.assertSetEqual({'base', 'converter'}, set(app.blueprints))
        self.assertIn('0.0.0.0:12345', repr(server))

    def test_registers_request_logging_on_plain_app(self):
        app = Flask(__name__)
        FlaskServer(app, 12345)
        self.assertSetEqual({'base'}, set(app.blueprints))

    def test_start_and_stop(self):
        app = create_app()
        server = FlaskServer(app, 0, 'localhost', debug=True)
        with patch('werkzeug.serving.make_server') as make_server:
            make_server.return_value.socket.getsockname.return_value = ('127.0.0.1', 54321)
            server.start_server()
            make_server.assert_called_once_with('localhost', 0, app, threaded=True)
            make_server.return_value.serve_forever.assert_called_once_with()

        self.assertTrue(app.debug)
        srv = make_server.return_value
        server.stop_server()
        srv.shutdown.assert_called_once_with()
        server.stop_server()  # no-op once stopped
        srv.shutdown.assert_called_once_with()


if __name__ == '__main__':
    try:
        main()
    except KeyboardInterrupt:
        print()
