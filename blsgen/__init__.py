# vim:fileencoding=utf-8
# (c) 2026 Michał Górny <mgorny@gentoo.org>
# Released under the terms of the 2-clause BSD license.

__version__ = '1.0.0'
