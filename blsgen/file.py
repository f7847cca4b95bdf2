# vim:fileencoding=utf-8
# (c) 2026 Michał Górny <mgorny@gentoo.org>
# Released under the terms of the 2-clause BSD license.

import enum
import os
import typing

from pathlib import Path


@enum.unique
class KernelFileType(enum.Enum):
    ENTRY = 'entry'
    KERNEL = 'vmlinuz'
    INITRAMFS = 'initramfs'

    def file_name(self,
                  version: str,
                  machine_id: str = '',
                  ) -> str:
        """Get the file name used for `version` of this file type"""
        if self == KernelFileType.ENTRY:
            return f'{machine_id}-{version}.conf'
        elif self == KernelFileType.KERNEL:
            return f'vmlinuz-{version}'
        return f'initramfs-{version}.img'

    def match(self,
              fn: str,
              machine_id: str = '',
              ) -> typing.Optional[str]:
        """
        Extract version from file name

        Return the version part of `fn` if it is a file name of this
        type, None otherwise.  `machine_id` is used to match entry
        files.
        """
        if self == KernelFileType.ENTRY:
            prefix, suffix = f'{machine_id}-', '.conf'
        elif self == KernelFileType.KERNEL:
            prefix, suffix = 'vmlinuz-', ''
        else:
            prefix, suffix = 'initramfs-', '.img'

        if not fn.startswith(prefix) or not fn.endswith(suffix):
            return None
        ver = fn[len(prefix):len(fn) - len(suffix)]
        if not ver:
            return None
        return ver


def remove_file(path: Path) -> bool:
    """
    Remove the file at `path`

    Return True if it was removed, False if it did not exist
    anymore.
    """
    try:
        os.unlink(path)
    except FileNotFoundError:
        return False
    return True
