#!/usr/bin/env python

import logging
import sys
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

sys.path.append(Path(__file__).parents[1].as_posix())
from temp_convert.flasks.app import create_app
from temp_convert.flasks.server import init_logging as init_server_logging
from temp_convert.logging import init_logging

log = logging.getLogger(__name__)


class LoggingInitTest(unittest.TestCase):
    def _cleanup_handlers(self, *names):
        for name in names:
            logger = logging.getLogger(name)
            while logger.handlers:
                logger.handlers[0].close()
                del logger.handlers[0]

    def test_stream_handler_levels(self):
        init_logging(2, names='test_streams')
        handlers = {h.name: h for h in logging.getLogger('test_streams').handlers}
        self.assertSetEqual({'stdout', 'stderr'}, set(handlers))
        self.assertEqual(logging.DEBUG, handlers['stdout'].level)
        self.assertEqual(logging.INFO, handlers['stderr'].level)
        self.assertEqual('VERBOSE', logging.getLevelName(19))
        self._cleanup_handlers('test_streams')

    def test_log_file(self):
        with TemporaryDirectory() as tmp_dir:
            log_path = Path(tmp_dir).joinpath('nested', 'test.log')
            self.assertEqual(log_path, init_logging(log_path=log_path, names='test_file', streams=False))
            logging.getLogger('test_file').info('hello from the test')
            self._cleanup_handlers('test_file')
            self.assertIn('hello from the test', log_path.read_text('utf-8'))

    def test_no_file_by_default(self):
        self.assertIsNone(init_logging(names='test_no_file', streams=False))
        self.assertEqual([], logging.getLogger('test_no_file').handlers)

    def test_request_uid_logged(self):
        with TemporaryDirectory() as tmp_dir:
            log_path = Path(tmp_dir).joinpath('server.log')
            init_server_logging(log_path.as_posix(), names='temp_convert', streams=False)
            try:
                create_app().test_client().post('/', data={'temp': '10', 'type': '1'})
            finally:
                self._cleanup_handlers('temp_convert')

            lines = [line for line in log_path.read_text('utf-8').splitlines() if 'Returning code=200' in line]
            self.assertEqual(1, len(lines))
            self.assertNotIn('[-]', lines[0])


if __name__ == '__main__':
    try:
        unittest.main(warnings='ignore', verbosity=2, exit=False)
    except KeyboardInterrupt:
        print()
