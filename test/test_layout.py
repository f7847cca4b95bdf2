# vim:fileencoding=utf-8
# (c) 2026 Michał Górny <mgorny@gentoo.org>
# Released under the terms of the 2-clause BSD license.

import errno
import os
import tempfile
import typing
import unittest

from pathlib import Path
from unittest.mock import patch

from blsgen.kernel import InvalidVersionError, Kernel
from blsgen.layout import DirectoryReadError, Layout


MACHINE_ID = 'abcdef'


def make_test_files(spec: typing.Iterable[str]
                    ) -> tempfile.TemporaryDirectory:
    """Create empty test files for paths in `spec`"""
    tempdir = tempfile.TemporaryDirectory()
    path = Path(tempdir.name)
    for fn in spec:
        fnpath = path / fn
        os.makedirs(fnpath.parent, exist_ok=True)
        with open(fnpath, 'w'):
            pass
    return tempdir


def make_system(spec: typing.Iterable[str] = (),
                os_release: str = 'NAME="Test Linux"\n',
                cmdline: str = 'CMDLINE="root=/dev/sda2 rw"\n',
                machine_id: str = f'{MACHINE_ID}\n',
                ) -> tempfile.TemporaryDirectory:
    """Create a root with system configuration and files in `spec`"""
    td = make_test_files(list(spec) + ['boot/loader/entries/.keep'])
    path = Path(td.name)
    os.makedirs(path / 'etc/default', exist_ok=True)
    for fn, data in (('etc/os-release', os_release),
                     ('etc/default/cmdline', cmdline),
                     ('etc/machine-id', machine_id)):
        with open(path / fn, 'w') as f:
            f.write(data)
    return td


class LayoutTests(unittest.TestCase):
    maxDiff = None

    def create_layout(self) -> tempfile.TemporaryDirectory:
        return make_test_files([
            'boot/vmlinuz-5.10.2',
            'boot/initramfs-5.10.2.img',
            'boot/vmlinuz-5.10.2.sig',
            'boot/vmlinuz-5.9.1',
            'boot/initramfs-5.4.0.img',
            'boot/initramfs-5.4.0-fallback.img',
            'boot/intel-ucode.img',
            'boot/System.map-5.10.2',
            'boot/.vmlinuz-5.10.2.hmac',
            'boot/loader/entries/abcdef-5.10.2.conf',
            'boot/loader/entries/abcdef-4.19.0.conf',
            'boot/loader/entries/012345-5.9.1.conf',
            'boot/loader/entries/other.conf',
        ])

    def test_find_kernels(self) -> None:
        with self.create_layout() as td:
            self.assertEqual(
                sorted(Layout(root=Path(td)).find_kernels(MACHINE_ID)),
                [Kernel('4.19.0', has_entry=True),
                 Kernel('5.10.2', has_entry=True, has_image=True,
                        has_initramfs=True),
                 Kernel('5.4.0', has_initramfs=True),
                 Kernel('5.4.0-fallback', has_initramfs=True),
                 Kernel('5.9.1', has_image=True),
                 ])

    def test_find_kernels_one_per_version(self) -> None:
        with self.create_layout() as td:
            versions = [k.version for k in
                        Layout(root=Path(td)).find_kernels(MACHINE_ID)]
            self.assertEqual(len(versions), len(set(versions)))

    def test_skip_directories(self) -> None:
        with make_test_files([
                'boot/vmlinuz-1.0/foo',
                'boot/initramfs-1.0.img',
                'boot/loader/entries/abcdef-2.0.conf/foo',
                ]) as td:
            self.assertEqual(
                Layout(root=Path(td)).find_kernels(MACHINE_ID),
                [Kernel('1.0', has_initramfs=True)])

    def test_no_boot(self) -> None:
        with make_test_files(['etc/machine-id']) as td:
            with self.assertRaises(DirectoryReadError):
                Layout(root=Path(td)).find_kernels(MACHINE_ID)

    def test_no_entries(self) -> None:
        with make_test_files(['boot/vmlinuz-1.0']) as td:
            with self.assertRaises(DirectoryReadError) as e:
                Layout(root=Path(td)).find_kernels(MACHINE_ID)
            self.assertEqual(e.exception.path,
                             Path(td) / 'boot/loader/entries')

    def test_entry_path(self) -> None:
        layout = Layout(root=Path('/mnt'))
        self.assertEqual(layout.entry_path(MACHINE_ID, '1.0'),
                         Path('/mnt/boot/loader/entries/abcdef-1.0.conf'))

    def test_has_boot_file(self) -> None:
        with self.create_layout() as td:
            layout = Layout(root=Path(td))
            self.assertTrue(layout.has_boot_file('intel-ucode.img'))
            self.assertFalse(layout.has_boot_file('amd-ucode.img'))
            self.assertFalse(layout.has_boot_file('loader'))

    def test_undecodable_version(self) -> None:
        with make_test_files(['boot/loader/entries/.keep']) as td:
            with open(os.fsencode(td) + b'/boot/vmlinuz-9\xff', 'wb'):
                pass
            with self.assertRaises(InvalidVersionError):
                Layout(root=Path(td)).find_kernels(MACHINE_ID)

    def test_unreadable_file(self) -> None:
        with self.create_layout() as td:
            with patch('blsgen.layout.os.stat',
                       side_effect=PermissionError(errno.EACCES,
                                                   'Permission denied')):
                with self.assertRaises(DirectoryReadError) as e:
                    Layout(root=Path(td)).find_kernels(MACHINE_ID)
            self.assertEqual(e.exception.path.parent, Path(td) / 'boot')

    def test_vanished_file(self) -> None:
        with make_test_files(['boot/vmlinuz-1.0',
                              'boot/loader/entries/.keep']) as td:
            with patch('blsgen.layout.os.stat',
                       side_effect=FileNotFoundError(errno.ENOENT,
                                                     'No such file')):
                self.assertEqual(
                    Layout(root=Path(td)).find_kernels(MACHINE_ID), [])
