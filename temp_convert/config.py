"""
Configuration for the conversion form server.

The :class:`ConfigSection` class is intended to be used as a base class for configuration classes, and the
:class:`ConfigItem` descriptor is intended to be used to define each configurable option in subclasses of ConfigSection.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from collections import ChainMap
from pathlib import Path
from typing import Union, Callable, Any, Mapping, Generic, Type, TypeVar, Optional, overload

from yaml import safe_load, YAMLError

from .parsers import parse_bool

__all__ = [
    'ConfigItem', 'ConfigSection', 'ServerConfig', 'ConfigException', 'InvalidConfigError', 'MissingConfigItemError',
    'ConfigTypeError',
]
log = logging.getLogger(__name__)

CV = TypeVar('CV')
DV = TypeVar('DV')
ConfigValue = Union[CV, DV]
ConfigMap = Union[Mapping[str, Any], 'ConfigSection', None]
PathLike = Union[Path, str]

_NotSet = object()


class ConfigItem(Generic[CV, DV]):
    __slots__ = ('name', 'type', 'default')

    def __init__(self, default: DV = _NotSet, type: Callable[..., CV] = None):  # noqa
        self.type = type
        self.default = default

    def __set_name__(self, owner: Type[ConfigSection], name: str):
        self.name = name
        owner._config_items_[name] = self

    @overload
    def __get__(self, instance: None, owner: Type[ConfigSection]) -> ConfigItem[CV, DV]:
        ...

    @overload
    def __get__(self, instance: ConfigSection, owner: Type[ConfigSection]) -> ConfigValue:
        ...

    def __get__(self, instance, owner):
        try:
            return instance.__dict__[self.name]
        except AttributeError:  # instance is None
            return self
        except KeyError as e:
            if self.default is not _NotSet:
                return self.default
            raise MissingConfigItemError(self.name) from e

    def __set__(self, instance: ConfigSection, value: ConfigValue):
        if self.type is not None and value is not None:
            try:
                value = self.type(value)
            except (TypeError, ValueError) as e:
                raise ConfigTypeError(f'Invalid value for {self.name}={value!r}: {e}') from e
        instance.__dict__[self.name] = value

    def __delete__(self, instance: ConfigSection):
        try:
            del instance.__dict__[self.name]
        except KeyError as e:
            raise AttributeError(f'No {self.name!r} config was stored for {instance}') from e

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}({self.default!r}, type={self.type!r})>'


class ConfigMeta(type):
    """
    Metaclass for ConfigSections.  Necessary to initialize the ``_config_items_`` dict for ConfigItem registration
    because the contents of a class is evaluated before ``__init_subclass__`` is called.
    """
    _config_items_: dict[str, ConfigItem]

    @classmethod
    def __prepare__(mcs, name: str, bases, **kwargs) -> dict[str, Any]:
        """Called before ``__new__`` and before evaluating the contents of a class."""
        config_items = {}
        for base in bases:
            if isinstance(base, mcs):
                config_items.update(base._config_items_)
        return {'_config_items_': config_items}


class ConfigSection(metaclass=ConfigMeta):
    _config_items_: dict[str, ConfigItem]
    _strict_config_keys_: bool = True

    def __init_subclass__(cls, strict: bool = None, **kwargs):
        """
        :param strict: Whether init and update methods should accept keys that do not match registered ConfigItems
          (default: True / strict).
        """
        super().__init_subclass__(**kwargs)
        if strict is not None:
            cls._strict_config_keys_ = strict

    def __init__(self, config: ConfigMap = None, **kwargs):
        self.update(config, **kwargs)

    def __repr__(self) -> str:
        settings = ', '.join(f'{k}={v!r}' for k, v in sorted(self.as_dict().items()))
        return f'<{self.__class__.__name__}({settings})>'

    def update(self, config: ConfigMap = None, **kwargs):
        """
        Update this section with the given content.  If this is a ``strict`` section and any of the provided keys are
        not expected, then an :class:`InvalidConfigError` will be raised.

        :param config: A dict or other mapping containing values that should be used in this section
        :param kwargs: Additional keyword arguments for values that should be used in this section
        """
        if isinstance(config, ConfigSection):
            config = config.__dict__
        if not (config_map := ChainMap(kwargs, config) if config and kwargs else (config or kwargs)):
            return
        if self._strict_config_keys_ and (bad := set(config_map).difference(self._config_items_)):
            raise InvalidConfigError(f'Invalid configuration - unsupported options: {", ".join(sorted(bad))}')
        for key, val in config_map.items():
            setattr(self, key, val)

    def __contains__(self, key: str) -> bool:
        """True if the given key has a non-default value"""
        return key in self.__dict__

    def __getitem__(self, key: str):
        if self._strict_config_keys_ and key not in self._config_items_:
            raise KeyError(key)
        try:
            return getattr(self, key)
        except AttributeError:
            raise KeyError(key) from None

    def __setitem__(self, key: str, value: Any):
        if self._strict_config_keys_ and key not in self._config_items_:
            raise KeyError(key)
        setattr(self, key, value)

    def as_dict(self, include_defaults: bool = True) -> dict[str, Any]:
        keys = set(self._config_items_).union(self.__dict__) if include_defaults else set(self.__dict__)
        return {key: getattr(self, key) for key in keys}


class ServerConfig(ConfigSection):
    host: Optional[str] = ConfigItem(None, type=str)
    port: int = ConfigItem(10000, type=int)
    debug: bool = ConfigItem(False, type=parse_bool)
    log_path: Optional[str] = ConfigItem(None, type=str)
    verbose: int = ConfigItem(0, type=int)

    @classmethod
    def load(cls, path: Optional[PathLike] = None, **overrides) -> ServerConfig:
        """
        :param path: Path to a YAML file containing a mapping of config keys to values (optional)
        :param overrides: Values that should take precedence over the file's values.  Overrides with a value of None
          are ignored, so unset CLI parameters may be passed as-is.
        :return: The resulting ServerConfig
        """
        config = cls()
        if path is not None:
            config.update(_read_yaml(Path(path).expanduser()))
        if overrides := {key: val for key, val in overrides.items() if val is not None}:
            config.update(overrides)
        log.debug(f'Loaded {config}')
        return config


def _read_yaml(path: Path) -> dict[str, Any]:
    log.debug(f'Reading config from {path.as_posix()}')
    try:
        with path.open('r', encoding='utf-8') as f:
            data = safe_load(f)
    except OSError as e:
        raise InvalidConfigError(f'Unable to read config file {path.as_posix()}: {e}') from e
    except YAMLError as e:
        raise InvalidConfigError(f'Invalid YAML in config file {path.as_posix()}: {e}') from e

    if data is None:
        return {}
    elif not isinstance(data, dict):
        raise InvalidConfigError(f'Invalid config file {path.as_posix()} - expected a mapping, found {type(data).__name__}')
    return data


# region Exceptions


class ConfigException(Exception):
    """Base exception for config-related errors"""


class InvalidConfigError(ConfigException):
    """Raised when invalid config items are provided when initializing a ConfigSection"""


class MissingConfigItemError(ConfigException):
    """Raised if a required config item is accessed when no value was provided for it"""


class ConfigTypeError(ConfigException, TypeError):
    """Raised if a config value could not be converted to the type expected for its config item"""


# endregion
