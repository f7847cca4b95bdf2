# vim:fileencoding=utf-8
# (c) 2026 Michał Górny <mgorny@gentoo.org>
# Released under the terms of the 2-clause BSD license.

import argparse
import logging
import os
import os.path
import shlex
import sys
import typing

from pathlib import Path

from blsgen import __version__
from blsgen.config import load_config
from blsgen.file import KernelFileType
from blsgen.layout import Layout
from blsgen.process import resolve_microcode, update_entries
from blsgen.sort import VersionSort

blsgen_desc = '''
Generate systemd-boot entries for all kernels in /boot that have
a matching initramfs, optionally removing entries for kernels
that are gone.
'''


def main(argv: typing.List[str]) -> int:
    argp = argparse.ArgumentParser(description=blsgen_desc.strip())
    argp.add_argument('-V', '--version',
                      action='version',
                      version=__version__)

    group = argp.add_argument_group('action control')
    group.add_argument('-l', '--list-kernels',
                       action='store_true',
                       help='List kernel files and exit')
    group.add_argument('-p', '--pretend',
                       action='store_true',
                       help='Print the entries to be written or removed '
                            'and exit')

    group = argp.add_argument_group('system configuration')
    group.add_argument('-m', '--microcode',
                       metavar='NAME',
                       help='Microcode image in /boot to load before '
                            'the initramfs')
    group.add_argument('-r', '--root',
                       type=Path,
                       default=Path('/'),
                       help='Alternate filesystem root to use')

    group = argp.add_argument_group('entry selection')
    group.add_argument('-R', '--remove-invalid',
                       action='store_true',
                       help='Remove entries for kernels missing vmlinuz '
                            'or initramfs')

    group = argp.add_argument_group('misc options')
    group.add_argument('-D', '--debug',
                       action='store_true',
                       help='Enable debugging output')

    all_args = []
    config_dirs = os.environ.get('XDG_CONFIG_DIRS', '/etc/xdg').split(':')
    config_dirs.insert(0, os.environ.get('XDG_CONFIG_HOME', '~/.config'))
    for x in reversed(config_dirs):
        try:
            with open(Path(os.path.expanduser(x)) / 'blsgen.rc',
                      'r') as f:
                all_args.extend(shlex.split(f.read(), comments=True))
        except FileNotFoundError:
            pass
        except NotADirectoryError:
            # XDG_CONFIG_* does not have to be correct
            pass

    all_args.extend(argv)
    args = argp.parse_args(all_args)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.INFO)

    try:
        config = load_config(args.root)
        layout = Layout(root=args.root)
        logging.debug(f'Boot directory: {layout.boot_directory}, '
                      f'entries: {layout.entries_directory}')

        kernels = layout.find_kernels(config.machine_id)

        if args.list_kernels:
            for k in VersionSort().sorted(kernels):
                status = 'valid' if k.is_valid() else 'invalid'
                print(f'{k.version} [{status}]')
                for ftype, present in ((KernelFileType.ENTRY, k.has_entry),
                                       (KernelFileType.KERNEL, k.has_image),
                                       (KernelFileType.INITRAMFS,
                                        k.has_initramfs)):
                    if present:
                        fn = ftype.file_name(k.version, config.machine_id)
                        print(f'- {ftype.value}: {fn}')
            return 0

        microcode = resolve_microcode(layout, args.microcode)
        result = update_entries(kernels,
                                config,
                                layout,
                                microcode=microcode,
                                remove_invalid=args.remove_invalid,
                                pretend=args.pretend)
        if not result.written:
            print('No bootable kernels found.')
        return 0
    except Exception as e:
        if args.debug:
            raise
        print('blsgen has met the following issue:\n')

        if hasattr(e, 'friendly_desc'):
            print(getattr(e, 'friendly_desc'))
        else:
            print(f'  {e!r}')
        return 1


def setuptools_main() -> None:
    sys.exit(main(sys.argv[1:]))


if __name__ == '__main__':
    setuptools_main()
