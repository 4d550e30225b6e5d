from collections import defaultdict
from functools import partial
import inspect
import logging
from typing import Generic, TypeVar

import yaml

T = TypeVar('T')
config: 'GlobalConfig'  # singleton, set below

logger = logging.getLogger(__name__)


class Setting(Generic[T]):
    """
    Simple type to indicate that a parameter is read from the global config.
    """
    pass


def _is_setting(annotation):
    return inspect.isclass(annotation) and issubclass(annotation, Setting)


def update_settings(func=None, *, name=None):
    """
    Updates function parameters from global config.

    Usage::

        @update_settings(name='filled')
        def filled(value, shape, kind: Setting = 'numpy'):
            ...

    In the above example the ``config['filled.kind']`` entry is set to
    ``'numpy'`` if it does not already exist. If it does exist, the
    function's default parameter value is replaced with the one in the
    config. Parameters without a default must be present in the config.

    Whenever the config gets updated, the defaults get updated too. Values
    passed explicitly by the caller always win.
    """
    if func is None:
        # use as a decorator, e.g.
        #   @update_settings(name='foobar')
        return partial(update_settings, name=name)
    if name is None:
        name = func.__name__
    base_name = name + '.' if name else ''

    if not callable(func):
        raise ValueError(f"'{func}' is not callable.")

    wrapper = partial(func)
    sig = inspect.signature(func)
    for pname, param in sig.parameters.items():
        cname = base_name + pname
        if _is_setting(param.annotation):
            def update_param(val, pname=pname, wrapper=wrapper):
                wrapper.keywords[pname] = val
            if param.default is not sig.empty:
                val = config.setdefault(cname, param.default)
            else:
                val = config[cname]
            config.addhook(cname, update_param)
            update_param(val)
    return wrapper


class GlobalConfig(dict):
    """
    Global configuration object.

    This is a simple subclass of a dictionary to allow for callbacks whenever
    a new item is set.
    """

    def __init__(self, *args, **kw):
        super().__init__(*args, **kw)
        # Hooks get called whenever items get set, so that function defaults
        # bound with ``update_settings`` follow the config.
        self._hooks = defaultdict(list)
        # keys that some function registered a default for
        self._known = set()

    def __setitem__(self, name, val):
        super().__setitem__(name, val)
        for hook in self._hooks[name]:
            hook(val)

    def update(self, *args, **kwargs):
        super().update(*args, **kwargs)
        # Just run all of the hooks for simplicity.
        for key, hooks in self._hooks.items():
            if key in self:
                val = self[key]
                for hook in hooks:
                    hook(val)

    def setdefault(self, key, val=None):
        self._known.add(key)
        return super().setdefault(key, val)

    def load_yaml(self, stream):
        """
        Add settings from a YAML mapping (a string or an open file).

        Nested mappings are flattened into dotted keys, so ``filled: {kind:
        list}`` sets ``config['filled.kind']``. Keys that no function reads
        are still stored, but logged as a warning since they are most likely
        typos.
        """
        data = yaml.safe_load(stream) or {}
        if not isinstance(data, dict):
            raise ValueError("config file must contain a mapping, got %s"
                             % type(data).__name__)
        params = {}

        def flatten(prefix, mapping):
            for key, val in mapping.items():
                key = prefix + str(key)
                if isinstance(val, dict):
                    flatten(key + '.', val)
                else:
                    params[key] = val
        flatten('', data)
        self.update(params)
        for key in sorted(set(params) - self._known):
            logger.warning(f"Setting {key} was set, "
                           "but it is not used by the code.")
        return params

    def addhook(self, name, hook):
        self._hooks[name].append(hook)


config = GlobalConfig()
