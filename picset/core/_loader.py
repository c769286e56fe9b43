from __future__ import annotations

import copy
import importlib
import inspect
import os
import re
from typing import Any

from ._component import Component
from ._log_helper import warn
from ._provider import Provider
from .exceptions import LoadError
from .manifest import MANIFEST_FILE, Manifest

REF_PATTERN = re.compile(r"^\$\{(.+)\}$")


class Loader:
    """Build components declared in a manifest.

    Parameter values of the form ${env.NAME}, ${variables.NAME}
    and ${handle} resolve to an environment variable, a manifest
    variable and another component of the manifest. A tag selects
    the provider of each component through the manifest bindings;
    without a binding the first provider is used.
    """

    path: str
    manifest_path: str
    manifest: Manifest

    _components: dict[str, Component]
    _resolving: set[str]

    def __init__(
        self,
        path: str = ".",
        manifest: str = MANIFEST_FILE,
    ):
        self.path = path
        self.manifest_path = os.path.join(path, manifest)
        self.manifest = Manifest.parse(path=self.manifest_path)
        self._components = dict()
        self._resolving = set()

    def get_component_type(self, handle: str) -> str:
        if handle in self.manifest.components:
            return self.manifest.components[handle].type
        raise LoadError(f"Component {handle} not found in manifest")

    def load_component(
        self,
        handle: str,
        tag: str | None = None,
    ) -> Component:
        if handle in self._components:
            return self._components[handle]
        if handle not in self.manifest.components:
            raise LoadError(f"Component {handle} not found in manifest")
        if handle in self._resolving:
            raise LoadError(f"Circular reference to component {handle}")
        self._resolving.add(handle)
        try:
            cconfig = self.manifest.components[handle]
            parameters = self._resolve_param(
                copy.deepcopy(cconfig.parameters), tag
            )
            provider = None
            if cconfig.providers:
                phandle = self._resolve_provider_handle(handle, tag)
                pconfig = cconfig.providers[phandle]
                provider = Loader.load_provider_instance(
                    path=Loader.get_provider_path(cconfig.type, pconfig.type),
                    parameters=self._resolve_param(
                        copy.deepcopy(pconfig.parameters), tag
                    ),
                )
                provider.__handle__ = phandle
            component = Loader.load_component_instance(
                path=Loader.get_component_path(cconfig.type),
                parameters=parameters,
                provider=provider,
            )
            component.__handle__ = handle
            component.__type__ = cconfig.type
        finally:
            self._resolving.discard(handle)
        self._components[handle] = component
        return component

    def _resolve_provider_handle(
        self,
        chandle: str,
        tag: str | None = None,
    ) -> str:
        cconfig = self.manifest.components[chandle]
        if tag is not None:
            if tag not in self.manifest.bindings:
                raise LoadError(f"Tag {tag} not found in bindings")
            bindings = self.manifest.bindings[tag]
            if chandle in bindings:
                phandle = bindings[chandle]
                if phandle not in cconfig.providers:
                    raise LoadError(
                        (
                            f"Provider handle {phandle} not found in "
                            f"providers for {chandle}"
                        )
                    )
                return phandle
        if len(cconfig.providers) > 1:
            warn(
                f"No binding for {chandle}. "
                "Selecting the first provider in the manifest."
            )
        return next(iter(cconfig.providers.keys()))

    def _resolve_param(self, value: Any, tag: str | None) -> Any:
        if isinstance(value, dict):
            for k, v in value.items():
                value[k] = self._resolve_param(value=v, tag=tag)
            return value
        elif isinstance(value, list):
            for i, item in enumerate(value):
                value[i] = self._resolve_param(value=item, tag=tag)
            return value
        elif isinstance(value, str):
            match = REF_PATTERN.match(value)
            if match:
                return self._resolve_ref(match.group(1), tag)
        return value

    def _resolve_ref(self, ref: str, tag: str | None) -> Any:
        if ref.startswith("env."):
            return os.getenv(ref[len("env.") :])
        if ref.startswith("variables."):
            name = ref[len("variables.") :]
            if name not in self.manifest.variables:
                return None
            return self._resolve_param(
                copy.deepcopy(self.manifest.variables[name]), tag
            )
        return self.load_component(handle=ref, tag=tag)

    @staticmethod
    def get_component_path(component_type: str) -> str:
        if ":" in component_type:
            return component_type
        return f"{component_type}.component"

    @staticmethod
    def get_provider_path(component_type: str, provider_type: str) -> str:
        if ":" in provider_type or "." in provider_type:
            return provider_type
        return f"{component_type}.providers.{provider_type}"

    @staticmethod
    def load_provider_instance(
        path: str | None = None,
        parameters: dict[str, Any] = dict(),
    ) -> Provider:
        if path is None:
            return Provider(**parameters)
        provider = Loader.load_class(path, Provider)
        return provider(**parameters)

    @staticmethod
    def load_component_instance(
        path: str | None,
        parameters: dict,
        provider: Provider | None,
    ) -> Component:
        if path is None:
            return Component(__provider__=provider, **parameters)
        component = Loader.load_class(path, Component)
        if provider is None:
            return component(**parameters)
        return component(__provider__=provider, **parameters)

    @staticmethod
    def load_class(path: str, type: Any) -> Any:
        class_name = None
        if ":" in path:
            module_name, class_name = path.split(":", 1)
        else:
            module_name = path
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise LoadError(f"Module {module_name} could not be loaded") from e
        if class_name is not None:
            return getattr(module, class_name)
        for _, cls in inspect.getmembers(module, inspect.isclass):
            if issubclass(cls, type) and cls.__module__ == module_name:
                return cls
        raise LoadError(f"{type.__name__} not found at {module_name}")
