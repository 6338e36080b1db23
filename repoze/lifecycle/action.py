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
Actions

An action is created by its controller for a single dispatch and thrown
away afterwards.  Parameters reach it as a name/value mapping which
`normalize_params` binds to the keyword arguments of `run`.
"""

import inspect

from zope.interface import implementer

from repoze.lifecycle.interfaces import IAction


def bind_params(func, params):
    """Bind the `params` mapping to the signature of `func`.

    Returns the keyword arguments to call `func` with, or None if a required
    argument is missing or positional-only.  Unknown names are dropped
    unless `func` accepts ``**kwargs``.
    """
    bound = {}
    takes_any = False
    for name, param in inspect.signature(func).parameters.items():
        if param.kind is param.VAR_KEYWORD:
            takes_any = True
        elif param.kind is param.VAR_POSITIONAL:
            continue
        elif param.kind is param.POSITIONAL_ONLY:
            # cannot be bound by name
            if param.default is param.empty:
                return None
        elif name in params:
            bound[name] = params[name]
        elif param.default is param.empty:
            return None
    if takes_any:
        for name, value in params.items():
            bound.setdefault(name, value)
    return bound


def to_exit_status(result):
    # bool is an int subclass but never an exit status
    if isinstance(result, int) and not isinstance(result, bool):
        return result
    return 0


@implementer(IAction)
class Action(object):
    """Base class for actions declared in `Controller.actions`.

    Subclasses implement `run`, declaring the request parameters they need
    as keyword arguments.
    """

    def __init__(self, id, controller):
        self.id = id
        self.controller = controller

    @property
    def unique_id(self):
        return self.controller.unique_id + '/' + self.id

    def normalize_params(self, params):
        return bind_params(self.run, params)

    def run(self, **params):
        raise NotImplementedError


class InlineAction(Action):
    """An action implemented by a handler method of the controller."""

    def __init__(self, id, controller, handler):
        super(InlineAction, self).__init__(id, controller)
        self.handler = handler

    def normalize_params(self, params):
        return bind_params(self.handler, params)

    def run(self, **params):
        return self.handler(**params)
