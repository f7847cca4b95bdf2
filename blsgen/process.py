# vim:fileencoding=utf-8
# (c) 2026 Michał Górny <mgorny@gentoo.org>
# Released under the terms of the 2-clause BSD license.

import enum
import logging
import typing

from blsgen.config import Config
from blsgen.entry import kernel_to_entry
from blsgen.file import remove_file
from blsgen.kernel import Kernel
from blsgen.layout import Layout
from blsgen.sort import VersionSort


@enum.unique
class Action(enum.Enum):
    WRITE = 'write'
    REMOVE = 'remove'
    KEEP = 'keep'


class EntryUpdate(typing.NamedTuple):
    kernel: Kernel
    action: Action


class UpdateResult(typing.NamedTuple):
    written: int
    removed: int


def resolve_microcode(layout: Layout,
                      microcode: typing.Optional[str]
                      ) -> typing.Optional[str]:
    """
    Verify that the microcode image exists

    Return `microcode` if it is present in /boot, or None
    (with a warning) otherwise.
    """
    if microcode is None:
        return None
    if layout.has_boot_file(microcode):
        logging.debug(f'Microcode image: {microcode}')
        return microcode
    print(f'Warning: microcode image {microcode} not found in '
          f'{layout.boot_directory}, proceeding without it')
    return None


def get_update_list(kernels: typing.Iterable[Kernel],
                    remove_invalid: bool = False
                    ) -> typing.List[EntryUpdate]:
    """
    Decide what to do with entries for `kernels`

    Return a list of `EntryUpdate` tuples, newest version first.
    Valid kernels get their entries written, entries of invalid
    kernels are removed if `remove_invalid` is True and kept
    otherwise.
    """

    updates = []
    for k in VersionSort().sorted(kernels):
        if k.is_valid():
            action = Action.WRITE
        elif remove_invalid and k.has_entry:
            action = Action.REMOVE
        else:
            logging.debug(f'Skipping incomplete kernel: {k}')
            action = Action.KEEP
        updates.append(EntryUpdate(k, action))
    return updates


def update_entries(kernels: typing.Iterable[Kernel],
                   config: Config,
                   layout: Layout,
                   microcode: typing.Optional[str] = None,
                   remove_invalid: bool = False,
                   pretend: bool = False
                   ) -> UpdateResult:
    """
    Write and remove entries for `kernels`

    `microcode` is the name of an already verified microcode image.
    If `pretend` is True, only print what would be done.
    """

    written = 0
    removed = 0
    for k, action in get_update_list(kernels, remove_invalid):
        if action == Action.WRITE:
            entry = kernel_to_entry(config.machine_id,
                                    config.os_name,
                                    config.cmdline,
                                    k,
                                    microcode=microcode)
            if pretend:
                path = layout.entries_directory / entry.name
                print(f'Would write systemd-boot config: {path}')
            else:
                path = entry.write(layout.entries_directory)
                print(f'Wrote systemd-boot config: {path}')
            written += 1
        elif action == Action.REMOVE:
            path = layout.entry_path(config.machine_id, k.version)
            if pretend:
                print(f'Would remove invalid config: {path}')
            elif remove_file(path):
                print(f'Removing invalid config: {path}')
            else:
                logging.debug(f'{path} does not exist anymore')
                continue
            removed += 1

    return UpdateResult(written, removed)
