from __future__ import annotations
import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import List

from graceful.commands.manager import CommandManager
from graceful.commands.registry import CommandDefinition

logger = logging.getLogger(__name__)


def register_definition(manager: CommandManager, cmd: CommandDefinition) -> bool:
    """Register one CommandDefinition instance, plus its short aliases."""
    ok = manager.define_command(
        name=cmd.name,
        handler=cmd.run,
        template=cmd.template,
        argument_count=cmd.argument_count,
        delimiter=cmd.delimiter,
        run_last=cmd.run_last,
        context_reassign=getattr(cmd, 'reassign_context', None),
        help=cmd.help,
    )
    if ok:
        # 'q' -> 'quit', 'w path' -> 'save path'
        takes_args = cmd.argument_count != 0 and (cmd.argument_count is not None or bool(cmd.template))
        target = f"{cmd.name} {{0}}" if takes_args else cmd.name
        for a in getattr(cmd, 'aliases', []):
            manager.alias_command(a, target)
    return ok


def register_module(manager: CommandManager, module: ModuleType) -> List[str]:
    names: List[str] = []
    for _attr, obj in inspect.getmembers(module, inspect.isclass):
        if issubclass(obj, CommandDefinition) and obj is not CommandDefinition and obj.__module__ == module.__name__:
            cmd = obj()
            if register_definition(manager, cmd):
                names.append(cmd.name)
    for alias_name, target in (getattr(module, 'ALIASES', None) or {}).items():
        if manager.alias_command(alias_name, target):
            names.append(alias_name)
    return names


def discover_commands(manager: CommandManager, package_root: str = 'graceful.extensions') -> List[str]:
    """
    Import every module under <package_root>.<extension>.commands and register
    the commands and aliases it defines. Returns the registered names.
    """
    registered: List[str] = []
    pkg = importlib.import_module(package_root)
    for modinfo in pkgutil.iter_modules(pkg.__path__):
        commands_pkg_name = f"{package_root}.{modinfo.name}.commands"
        try:
            commands_pkg = importlib.import_module(commands_pkg_name)
        except ModuleNotFoundError as e:
            if e.name != commands_pkg_name:
                raise
            logger.debug("Extension '%s' has no commands package.", modinfo.name)
            continue
        for subinfo in pkgutil.iter_modules(commands_pkg.__path__):
            module = importlib.import_module(f"{commands_pkg_name}.{subinfo.name}")
            registered.extend(register_module(manager, module))
    logger.info("Loaded %d command(s) from %s.", len(registered), package_root)
    return registered
