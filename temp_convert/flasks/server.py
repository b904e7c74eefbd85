"""
Utilities for running Flask servers

:author: Doug Skrypa
"""

import logging
import time
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from flask import request, Blueprint, Response
from werkzeug.local import Local, release_local

if TYPE_CHECKING:
    from flask import Flask

from ..logging import ENTRY_FMT_DETAILED_UID
from ..logging import init_logging as _init_logging

__all__ = ['FlaskServer', 'init_logging', 'base']
log = logging.getLogger(__name__)

wz_local = Local()
base = Blueprint('base', __name__)


class FlaskServer:
    def __init__(
        self,
        app: 'Flask',
        port: int,
        host: Optional[str] = None,
        *,
        debug: bool = False,
    ):
        self._app = app
        self._port = port
        self._host = host or '0.0.0.0'
        self._debug = debug
        self._server = None

        if base.name not in app.blueprints:
            log.debug(f'Registering blueprint={base.name!r} pkg={base.import_name!r}')
            app.register_blueprint(base)

    def __repr__(self):
        return f'<{self.__class__.__name__}[{self._host}:{self._port}, app={self._app}]>'

    def start_server(self, **options):
        from werkzeug.serving import make_server

        app = self._app
        app.debug = bool(self._debug)
        log.warning(
            'Using werkzeug.serving.make_server - use a production WSGI server instead of the built-in development'
            ' server for anything other than local use!'
        )

        options.setdefault('threaded', True)
        self._server = srv = make_server(self._host, self._port, app, **options)

        host = self._host if self._host not in ('', '*', '0.0.0.0') else 'localhost'
        if ':' in host:
            host = f'[{host}]'
        scheme = 'http' if options.get('ssl_context') is None else 'https'
        log.info(f' * Running on {scheme}://{host}:{srv.socket.getsockname()[1]}/ (Press CTRL+C to quit)')

        srv.serve_forever()

    def stop_server(self):
        if self._server is not None:
            log.info('Stopping server...')
            self._server.shutdown()
            self._server = None


def _patch_log_record():
    """
    Adds a ``uid`` attribute to all :class:`LogRecord` objects by patching :meth:`LogRecord.__init__`.  It does not work
    as a property because the formatter calls ``self._fmt % record.__dict__`` without first attempting to access the
    value as an attribute.
    """
    original_init = logging.LogRecord.__init__  # noqa
    if getattr(original_init, '_uid_patched', False):
        return

    def init(self, *args, **kwargs):
        self.uid = getattr(wz_local, 'uid', '-')
        original_init(self, *args, **kwargs)

    init._uid_patched = True
    logging.LogRecord.__init__ = init


def init_logging(
    log_path: Optional[str],
    verbose: int = 0,
    log_fmt: Optional[str] = None,
    patch_log_record: bool = True,
    **kwargs
):
    """
    :param log_path: Location to store log file
    :param verbose: Verbosity
    :param log_fmt: The log format to use
    :param patch_log_record: Patch :class:`LogRecord` to include a ``uid`` attribute for tracking actions related
      to specific requests (see :func:`_patch_log_record`)
    :param kwargs: Additional kwargs to pass to :func:`init_logging<temp_convert.logging.init_logging>`
    :return: The path to which logs are being written, or None if no file handler was configured.
    """
    log_fmt = log_fmt or ENTRY_FMT_DETAILED_UID

    init_args = {
        'date_fmt': '%Y-%m-%d %H:%M:%S.%f %Z',
        'log_path': log_path,
        'file_fmt': log_fmt,
        'entry_fmt': log_fmt if verbose and verbose > 1 else None,
        'names': None,
    }
    init_args.update(kwargs)
    if patch_log_record:
        _patch_log_record()
    return _init_logging(verbose, **init_args)


@base.before_app_request
def before_requests():
    wz_local.time = time.monotonic()
    wz_local.uid = str(uuid4())
    user = request.remote_user or '-'
    method = request.method
    path = request.path
    qs = request.environ.get('QUERY_STRING')
    ip = request.remote_addr
    referrer = request.referrer
    log.info(f'Beginning request for {ip=} {user=} {method=} {path=} {qs=!r} {referrer=!r}')


@base.after_app_request
def after_requests(response: Response):
    duration = time.monotonic() - getattr(wz_local, 'time', time.monotonic())
    user = request.remote_user or '-'
    method = request.method
    path = request.path
    code = response.status_code
    size = response.content_length
    log.info(f'Returning {code=} {duration=:.3f} s {size=} for {user=} {method=} {path=}')

    release_local(wz_local)
    return response
