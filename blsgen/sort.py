# vim:fileencoding=utf-8
# (c) 2026 Michał Górny <mgorny@gentoo.org>
# Released under the terms of the 2-clause BSD license.

import re
import typing

from blsgen.kernel import Kernel


class VersionSort(object):
    """Order kernels by version, comparing numeric parts as numbers"""

    component_re = re.compile(r'\d+|[a-zA-Z]+')

    # components marking a release older than the version they follow
    prerelease_weights = {
        'old': -3,
        'rc': -5,
    }

    def component_key(self,
                      comp: str
                      ) -> typing.Tuple[typing.Tuple[int, str], ...]:
        if comp.isdecimal():
            head: typing.Tuple[typing.Tuple[int, str], ...] = (
                (int(comp), ''),)
        elif comp in self.prerelease_weights:
            head = ((self.prerelease_weights[comp], ''),)
        else:
            head = ()
        # 5.6-foo sorts before 5.6.0
        return head + ((-1, comp),)

    def key(self,
            k: Kernel
            ) -> tuple:
        parts: typing.List[typing.Tuple[int, str]] = []
        for comp in self.component_re.findall(k.version):
            parts.extend(self.component_key(comp))
        # a version sorts before any of its extensions
        parts.append((-2, ''))
        return tuple(parts)

    def sorted(self,
               kernels: typing.Iterable[Kernel]
               ) -> typing.List[Kernel]:
        """Return `kernels` ordered newest first"""
        return sorted(kernels,
                      key=lambda k: (self.key(k), k.version),
                      reverse=True)
