# vim:fileencoding=utf-8
# (c) 2026 Michał Górny <mgorny@gentoo.org>
# Released under the terms of the 2-clause BSD license.

import logging
import re
import shlex
import typing

from pathlib import Path


OS_RELEASE = 'etc/os-release'
CMDLINE = 'etc/default/cmdline'
MACHINE_ID = 'etc/machine-id'

key_re = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


class ConfigError(Exception):
    def __init__(self,
                 path: Path,
                 problem: str
                 ) -> None:
        self.path = path
        self.problem = problem
        Exception.__init__(self, f'{path}: {problem}')

    @property
    def friendly_desc(self) -> str:
        return f'''The system configuration is incomplete:
  {self.path}: {self.problem}

The OS name is read from NAME= in /etc/os-release, the kernel
command line from CMDLINE= in /etc/default/cmdline, and entries are
named after /etc/machine-id.  Without them no usable boot entries
can be written, and therefore the program refuses to proceed.'''


class Config(typing.NamedTuple):
    """System metadata used to render entries"""

    machine_id: str
    os_name: str
    cmdline: str


def strip_comment(value: str) -> str:
    """Strip a trailing comment, i.e. an unquoted word starting with #"""
    quote = None
    escaped = False
    for i, c in enumerate(value):
        if escaped:
            escaped = False
        elif c == '\\' and quote != "'":
            escaped = True
        elif quote is not None:
            if c == quote:
                quote = None
        elif c in '"\'':
            quote = c
        elif c == '#' and (i == 0 or value[i-1].isspace()):
            return value[:i]
    return value


def read_env_file(path: Path) -> typing.Dict[str, str]:
    """
    Read a shell-style KEY=value file

    Return a dict of all assignments found in `path`.  Values
    are unquoted like the shell does.  Raise ConfigError if a line
    is not an assignment, or its value is more than one word.
    """
    try:
        with open(path, 'r') as f:
            lines = f.readlines()
    except OSError as e:
        raise ConfigError(path, e.strerror)

    ret = {}
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        if line.startswith('export '):
            line = line[len('export '):].lstrip()
        key, sep, value = line.partition('=')
        if not sep or not key_re.match(key):
            raise ConfigError(path, f'line {lineno}: not an assignment')
        try:
            words = shlex.split(strip_comment(value))
        except ValueError as e:
            raise ConfigError(path, f'line {lineno}: {e}')
        if len(words) > 1:
            raise ConfigError(
                path, f'line {lineno}: value of {key}= needs quoting')
        ret[key] = words[0] if words else ''
    return ret


def read_machine_id(path: Path) -> str:
    try:
        with open(path, 'r') as f:
            machine_id = f.read().strip()
    except OSError as e:
        raise ConfigError(path, e.strerror)
    if not machine_id:
        raise ConfigError(path, 'machine identifier is empty')
    return machine_id


def load_config(root: Path = Path('/')) -> Config:
    """Load system metadata from files in `root`"""
    env: typing.Dict[str, str] = {}
    for fn in (OS_RELEASE, CMDLINE):
        path = root / fn
        env.update(read_env_file(path))
        logging.debug(f'Read {path}')

    for key, fn in (('NAME', OS_RELEASE), ('CMDLINE', CMDLINE)):
        if key not in env:
            raise ConfigError(root / fn, f'{key}= not set')

    config = Config(machine_id=read_machine_id(root / MACHINE_ID),
                    os_name=env['NAME'],
                    cmdline=env['CMDLINE'])
    logging.debug(f'Config: {config}')
    return config
