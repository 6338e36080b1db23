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
"""Lifecycle events and the per-object dispatcher publishing them.
"""
__docformat__ = 'restructuredtext'

from zope.interface import implementer

from repoze.lifecycle.interfaces import IActionEvent
from repoze.lifecycle.interfaces import IEventDispatcher
from repoze.lifecycle.interfaces import IMailEvent


class Event(object):
    """Base event: carries a name and the `handled` flag."""

    def __init__(self, name=None):
        self.name = name
        self.handled = False


@implementer(IActionEvent)
class ActionEvent(Event):
    __doc__ = IActionEvent.__doc__

    def __init__(self, action, name=None):
        super(ActionEvent, self).__init__(name)
        self.action = action
        self.is_valid = True


@implementer(IMailEvent)
class MailEvent(Event):
    __doc__ = IMailEvent.__doc__

    def __init__(self, message, name=None, is_successful=None):
        super(MailEvent, self).__init__(name)
        self.message = message
        self.is_valid = True
        self.is_successful = is_successful


@implementer(IEventDispatcher)
class EventDispatcher(object):
    """Mixin giving an object its own event handlers.

    There is no global registry: handlers attached to one object are never
    seen by another.
    """

    _handlers = None

    def on(self, name, handler):
        if self._handlers is None:
            self._handlers = {}
        self._handlers.setdefault(name, []).append(handler)

    def off(self, name, handler=None):
        handlers = (self._handlers or {}).get(name)
        if not handlers:
            return False
        if handler is None:
            del self._handlers[name]
            return True
        try:
            handlers.remove(handler)
        except ValueError:
            return False
        return True

    def has_handlers(self, name):
        return bool((self._handlers or {}).get(name))

    def trigger(self, name, event):
        if event.name is None:
            event.name = name
        # copy, so a handler may detach itself while being notified
        for handler in list((self._handlers or {}).get(name, ())):
            handler(event)
            if event.handled:
                break
