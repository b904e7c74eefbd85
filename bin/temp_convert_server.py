#!/usr/bin/env python

import logging
import socket
from functools import cached_property

from cli_command_parser import Command, Option, Flag, TriFlag, Counter, main, inputs

from temp_convert.__version__ import __author_email__, __version__  # noqa
from temp_convert.config import ServerConfig

log = logging.getLogger(__name__)


class TempConvertServer(Command, description='Temperature Conversion Form Server'):
    port: int = Option('-p', type=int, help='Port to use (default: 10000)')
    host = Option('-H', help='Host/address to listen on (default: all interfaces)')
    use_hostname = Flag('-u', help='Use hostname instead of localhost/127.0.0.1')
    config = Option('-c', type=inputs.Path(type='file', exists=True), help='Path to a YAML config file')
    log_path = Option('-l', help='Path to a log file (default: no log file)')
    verbose = Counter('-v', help='Increase logging verbosity (can specify multiple times)')
    debug = TriFlag('-d', help='Enable Flask debug mode (default: the config file value, or False)')

    def _init_command_(self):
        from temp_convert.flasks.server import init_logging

        init_logging(self.server_config.log_path, self.server_config.verbose)

    @cached_property
    def server_config(self) -> ServerConfig:
        return ServerConfig.load(
            self.config,
            port=self.port,
            host=socket.gethostname() if self.use_hostname else self.host,
            log_path=self.log_path,
            verbose=self.verbose or None,
            debug=self.debug,
        )

    def main(self):
        from temp_convert.flasks import create_app, FlaskServer

        config = self.server_config
        server = FlaskServer(create_app(config), config.port, config.host, debug=config.debug)
        log.info(f'Starting {server}')
        try:
            server.start_server()
        except KeyboardInterrupt:
            server.stop_server()


if __name__ == '__main__':
    main()
