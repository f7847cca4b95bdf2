# vim:fileencoding=utf-8
# (c) 2026 Michał Górny <mgorny@gentoo.org>
# Released under the terms of the 2-clause BSD license.

import logging
import os
import stat
import typing

from pathlib import Path

from blsgen.entry import entry_version
from blsgen.file import KernelFileType
from blsgen.kernel import Kernel, check_version


class DirectoryReadError(Exception):
    def __init__(self,
                 path: Path,
                 err: OSError
                 ) -> None:
        self.path = path
        self.err = err
        Exception.__init__(
            self, f'Unable to read {path}: {err.strerror}')

    @property
    def friendly_desc(self) -> str:
        return f'''The following path could not be read:
  {self.path}
  ({self.err.strerror})

This usually indicates that /boot is not mounted, the boot loader
is not installed, or that you have insufficient permissions to run
blsgen.  Generating entries from an incomplete view of /boot could
result in wrong entries being written or removed, and therefore
the program refuses to proceed.'''


class Layout(object):
    """
    The /boot layout used by systemd-boot entries

    Kernel images and initramfs images are placed directly in /boot,
    and entries are stored in /boot/loader/entries, named after
    the machine identifier.
    """

    def __init__(self,
                 root: Path = Path('/')
                 ) -> None:
        self.root = root
        self.boot_directory = root / 'boot'
        self.entries_directory = self.boot_directory / 'loader/entries'

    def entry_path(self,
                   machine_id: str,
                   version: str
                   ) -> Path:
        """Get path to the entry file for `version`"""
        return self.entries_directory / KernelFileType.ENTRY.file_name(
            version, machine_id=machine_id)

    def has_boot_file(self,
                      fn: str
                      ) -> bool:
        """Check whether `fn` exists in the images directory"""
        return self.is_regular_file(self.boot_directory / fn)

    @staticmethod
    def is_regular_file(path: Path) -> bool:
        """Check whether `path` is a regular file, following symlinks"""
        try:
            st = os.stat(path)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise DirectoryReadError(path, e)
        return stat.S_ISREG(st.st_mode)

    @staticmethod
    def list_directory(path: Path) -> typing.List[str]:
        try:
            return sorted(os.listdir(path))
        except OSError as e:
            raise DirectoryReadError(path, e)

    def find_kernels(self,
                     machine_id: str
                     ) -> typing.List[Kernel]:
        """
        Find all kernel versions present in /boot

        Scan the images directory for kernel and initramfs images,
        and the entries directory for entries belonging
        to `machine_id`.  Return a list of `Kernel` objects, one
        for every version seen.
        """

        kernels: typing.Dict[str, Kernel] = {}

        def add(kernel: Kernel) -> None:
            check_version(kernel.version)
            if kernel.version in kernels:
                kernel = kernels[kernel.version].merge(kernel)
            kernels[kernel.version] = kernel

        for fn in self.list_directory(self.boot_directory):
            # skip hidden and GRUB signature files
            if fn.startswith('.') or fn.endswith('.sig'):
                continue
            if not self.is_regular_file(self.boot_directory / fn):
                continue

            ver = KernelFileType.KERNEL.match(fn)
            if ver is not None:
                logging.debug(f'Kernel image found: {fn}')
                add(Kernel(ver, has_image=True))
                continue
            ver = KernelFileType.INITRAMFS.match(fn)
            if ver is not None:
                logging.debug(f'Initramfs found: {fn}')
                add(Kernel(ver, has_initramfs=True))

        for fn in self.list_directory(self.entries_directory):
            ver = entry_version(machine_id, fn)
            if ver is None:
                continue
            if not self.is_regular_file(self.entries_directory / fn):
                continue
            logging.debug(f'Entry found: {fn}')
            add(Kernel(ver, has_entry=True))

        return list(kernels.values())
