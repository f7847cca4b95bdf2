# vim:fileencoding=utf-8
# (c) 2026 Michał Górny <mgorny@gentoo.org>
# Released under the terms of the 2-clause BSD license.

import typing

from pathlib import Path

from blsgen.file import KernelFileType
from blsgen.kernel import Kernel


class Entry(typing.NamedTuple):
    """A boot entry, as a list of lines read by systemd-boot"""

    name: str
    title: str
    version: str
    linux: str
    initrd: str
    options: str
    microcode: typing.Optional[str] = None

    @property
    def lines(self) -> typing.List[str]:
        lines = [self.title, self.version, self.linux]
        # microcode needs to be loaded before the initramfs
        if self.microcode is not None:
            lines.append(self.microcode)
        lines += [self.initrd, self.options]
        return lines

    def __str__(self) -> str:
        return ''.join(f'{x}\n' for x in self.lines)

    def write(self,
              directory: Path
              ) -> Path:
        """Write the entry into `directory`, return its path"""
        path = directory / self.name
        data = str(self).encode('utf-8')
        with open(path, 'wb') as f:
            f.write(data)
        return path


def kernel_to_entry(machine_id: str,
                    os_name: str,
                    cmdline: str,
                    kernel: Kernel,
                    microcode: typing.Optional[str] = None,
                    ) -> Entry:
    """
    Render the boot entry for `kernel`

    `kernel` must be valid, i.e. have both the image and the initramfs.
    `microcode` is the file name of the microcode image in /boot,
    if one should be loaded.
    """

    assert kernel.is_valid()
    ver = kernel.version

    return Entry(
        name=KernelFileType.ENTRY.file_name(ver, machine_id=machine_id),
        title=f'title {os_name} ({ver})',
        version=f'version {ver}',
        linux=f'linux /{KernelFileType.KERNEL.file_name(ver)}',
        initrd=f'initrd /{KernelFileType.INITRAMFS.file_name(ver)}',
        options=f'options {cmdline}',
        microcode=(f'initrd /{microcode}' if microcode is not None
                   else None),
    )


def entry_version(machine_id: str,
                  name: str
                  ) -> typing.Optional[str]:
    """Get the kernel version from entry file name, if it matches"""
    return KernelFileType.ENTRY.match(name, machine_id=machine_id)
