##############################################################################
#
# Copyright (c) 2003 Zope Corporation and Contributors.
# All Rights Reserved.
#
# This software is subject to the provisions of the Zope Public License,
# Version 2.1 (ZPL).  A copy of the ZPL should accompany this distribution.
# THIS SOFTWARE IS PROVIDED "AS IS" AND ANY AND ALL EXPRESS OR IMPLIED
# WARRANTIES ARE DISCLAIMED, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED
# WARRANTIES OF TITLE, MERCHANTABILITY, AGAINST INFRINGEMENT, AND FITNESS
# FOR A PARTICULAR PURPOSE.
#
##############################################################################
"""
Object creation from configuration

Declared actions, controllers, modules, messages and composers are all
described by a configuration value and built with `create_object`.  A
configuration is one of:

- a class or any other callable, called with the extra positional
  arguments;

- a dotted name (``'pkg.module.Class'`` or ``'pkg.module:Class'``), resolved
  and then called like the above;

- a mapping with a ``'class'`` key holding one of the above; the remaining
  items are set as attributes on the new instance.
"""

import importlib

from repoze.lifecycle.exceptions import InvalidConfiguration


def resolve(dotted):
    if ':' in dotted:
        modname, attrs = dotted.split(':', 1)
    else:
        modname, _, attrs = dotted.rpartition('.')
    if not modname or not attrs:
        raise InvalidConfiguration('%r is not a dotted name' % dotted)
    try:
        found = importlib.import_module(modname)
    except ImportError as e:
        raise InvalidConfiguration('Cannot import %r: %s' % (modname, e))
    for attr in attrs.split('.'):
        try:
            found = getattr(found, attr)
        except AttributeError:
            raise InvalidConfiguration('%r has no attribute %r'
                                       % (modname, attrs))
    return found


def create_object(config, *args):
    properties = {}
    if isinstance(config, dict):
        properties = dict(config)
        try:
            config = properties.pop('class')
        except KeyError:
            raise InvalidConfiguration(
                'Object configuration must contain a "class" element.')
    if isinstance(config, str):
        config = resolve(config)
    if not callable(config):
        raise InvalidConfiguration('Unsupported configuration: %r' % (config,))
    instance = config(*args)
    for name, value in properties.items():
        setattr(instance, name, value)
    return instance
