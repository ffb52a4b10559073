# pageobject/core/loader.py
from __future__ import annotations

"""Command registration
-----------------------
Binds the functions returned by a command loader onto a page, a section or
one of their namespaces, each wrapped in a `Command`.
"""

import inspect
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, Union

from pageobject.core import api
from pageobject.core.command import Command
from pageobject.core.errors import DuplicateCommandError
from pageobject.utils.logger import get_logger

log = get_logger(__name__)

CommandMap = Mapping[str, Union[Callable[..., Any], Mapping[str, Callable[..., Any]]]]
CommandLoaderFn = Callable[["CommandRegistry"], CommandMap]

__all__ = ["CommandLoader", "CommandRegistry"]


class CommandRegistry(dict):
    """
    The mapping handed to a loader function. `page_object_item` is the page or
    section the commands are being loaded for (None for async registration).
    """

    def __init__(self, owner: Any = None) -> None:
        super().__init__()
        self._owner = owner

    @property
    def page_object_item(self) -> Any:
        return self._owner


class CommandLoader:

    @staticmethod
    def add_wrapped_commands(parent: Any, command_loader: CommandLoaderFn, *, overwrite: bool = False) -> None:
        """
        Entry point to add commands (element commands, assertions, etc.) to a
        page or section.
        """
        registry = CommandRegistry(parent)
        wrapped_commands = command_loader(registry)

        CommandLoader.apply_commands_to_target(parent, parent, wrapped_commands, overwrite=overwrite)

        assert_attr = api.namespace_attribute("assert")
        assert_ns = getattr(parent, assert_attr, None)
        verify_ns = getattr(parent, "verify", None)
        if assert_ns is not None and verify_ns is not None:
            setattr(parent, assert_attr, api.make_assert_proxy(assert_ns))
            setattr(parent, "verify", api.make_assert_proxy(verify_ns))

    @staticmethod
    def add_wrapped_commands_async(parent: Any, command_loader: CommandLoaderFn) -> CommandMap:
        wrapped_commands = command_loader(CommandRegistry())
        CommandLoader.apply_commands_to_target(parent, parent, wrapped_commands)
        return wrapped_commands

    @staticmethod
    def apply_commands_to_target(parent: Any, target: Any, commands: CommandMap, *, overwrite: bool = False) -> None:
        """
        Add commands to `target` (the parent itself, or a namespace on it).

        Whitelisted namespaces (assert, verify, expect, ...) get one wrapped
        command per inner function; any other mapping is skipped, so it is not
        wrapped as if it were a function.
        """
        for command_name, value in commands.items():
            if api.is_allowed_namespace(command_name):
                attr = api.namespace_attribute(command_name)
                namespace = getattr(target, attr, None)
                if namespace is None:
                    namespace = api.CommandNamespace(command_name)
                    setattr(target, attr, namespace)
                elif isinstance(namespace, api.AssertProxy):
                    namespace = namespace.namespace

                is_chai_assertion = command_name == "expect"
                for ns_command_name, command_fn in value.items():
                    setattr(namespace, ns_command_name, CommandLoader.add_command(
                        target=namespace,
                        command_fn=command_fn,
                        command_name=ns_command_name,
                        parent=parent,
                        is_chai_assertion=is_chai_assertion,
                        overwrite=overwrite,
                    ))
                continue

            if isinstance(value, Mapping):
                continue

            setattr(target, command_name, CommandLoader.add_command(
                target=target,
                command_fn=value,
                command_name=command_name,
                parent=parent,
                is_chai_assertion=False,
                is_async=inspect.iscoroutinefunction(value),
                overwrite=overwrite,
            ))

    @staticmethod
    def wrap_element_command(parent: Any, original_api: Any, target_api: Any, command_name: str) -> Callable[..., Any]:
        original_fn = getattr(original_api, command_name)
        command = Command(parent, command_name, False)

        def wrapper(*args: Any, **kwargs: Any) -> Any:
            args = list(args)
            orig_args = list(args)

            result = command.parse_element_selector(args)

            if result.only_locate_sections_recursively:
                # Plain selector passed to a scoped element method on a section:
                # hand the ancestor sections to `element()` and the original
                # arguments to the method on whatever it returns.
                args[0].selector.pop()
                parent_section_element = target_api(args[0])
                return getattr(parent_section_element, command_name)(*orig_args, **kwargs)

            return original_fn(*args, **kwargs)

        wrapper.__name__ = command_name
        wrapper.command = command
        return wrapper

    @staticmethod
    def wrap_protocol_commands(parent: Any, api_obj: Any, commands: Iterable[str]) -> None:
        for command_name in commands:
            setattr(api_obj, command_name, CommandLoader.wrap_element_command(parent, api_obj, api_obj, command_name))

    @staticmethod
    def wrap_scoped_element_api(parent: Any, api_obj: Any, element_commands: Iterable[Union[str, Iterable[str]]]) -> None:
        wrapped_element_fn = CommandLoader.wrap_element_command(parent, api_obj, api_obj, "element")

        for names in element_commands:
            if isinstance(names, str):
                names = [names]
            for command_name in names:
                setattr(wrapped_element_fn, command_name, CommandLoader.wrap_element_command(
                    parent, api_obj.element, wrapped_element_fn, command_name,
                ))

        api_obj.element = wrapped_element_fn

    @staticmethod
    def add_command(
        *,
        target: Any,
        command_fn: Callable[..., Any],
        command_name: str,
        parent: Any,
        is_chai_assertion: bool,
        is_async: bool = False,
        overwrite: bool = False,
    ) -> Callable[..., Any]:
        if getattr(target, command_name, None) is not None and not overwrite:
            err = DuplicateCommandError(command_name)
            log.debug(f"{err} (target: {target!r})")
            raise err

        command = Command(parent, command_name, is_chai_assertion, is_async)
        log.debug(f"registered {command!r}")
        return command.create_wrapper(command_fn)


def commands_from_mapping(commands: Dict[str, Any]) -> CommandLoaderFn:
    """Turn a plain {name: function} mapping into a loader function."""
    def loader(registry: CommandRegistry) -> CommandMap:
        return commands
    return loader
