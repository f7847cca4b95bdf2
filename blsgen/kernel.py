# vim:fileencoding=utf-8
# (c) 2026 Michał Górny <mgorny@gentoo.org>
# Released under the terms of the 2-clause BSD license.

import typing


class InvalidVersionError(Exception):
    def __init__(self,
                 version: str
                 ) -> None:
        self.version = version
        Exception.__init__(
            self, f'Invalid kernel version: {version!r}')

    @property
    def friendly_desc(self) -> str:
        return f'''The following kernel version is not usable:
  {self.version!r}

Kernel versions are taken from file names in /boot and used verbatim
to construct boot entry file names and titles.  A version containing
a path separator or a null byte would make the entry escape
the entries directory, and one that is not valid UTF-8 cannot be
written into the entry, and therefore the program refuses to proceed.
Please rename or remove the offending files.'''


def check_version(version: str) -> str:
    """Return `version` if it is safe to use, raise otherwise"""
    if not version or '/' in version or '\0' in version:
        raise InvalidVersionError(version)
    try:
        version.encode('utf-8')
    except UnicodeEncodeError:
        # undecodable bytes in the file name
        raise InvalidVersionError(version)
    return version


class Kernel(typing.NamedTuple):
    """
    An object representing a single kernel version

    The three booleans state whether the boot entry, the kernel image
    and the initramfs were found for `version`.
    """

    version: str
    has_entry: bool = False
    has_image: bool = False
    has_initramfs: bool = False

    def is_valid(self) -> bool:
        """Return True if the kernel can be booted"""
        return self.has_image and self.has_initramfs

    def merge(self,
              other: 'Kernel'
              ) -> 'Kernel':
        """Combine sightings of the same version"""
        assert self.version == other.version
        return Kernel(self.version,
                      has_entry=self.has_entry or other.has_entry,
                      has_image=self.has_image or other.has_image,
                      has_initramfs=(self.has_initramfs
                                     or other.has_initramfs))
