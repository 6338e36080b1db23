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
"""Exceptions raised by the dispatch lifecycle.

Hook cancellations (``authorize``, ``before_action``, ``before_send``) are
not errors and never raise; only resolution and parameter binding failures
are reported as exceptions.
"""


class LifecycleError(Exception):
    """Base class for all errors raised by `repoze.lifecycle`."""

    status = 500


class ActionNotFound(LifecycleError, LookupError):
    """The requested action does not exist on the controller."""

    status = 404

    def __init__(self, action_id):
        self.action_id = action_id
        LifecycleError.__init__(
            self,
            'The system is unable to find the requested action "%s".'
            % action_id)


class InvalidActionParameters(LifecycleError, ValueError):
    """The request parameters cannot be bound to the action."""

    status = 400

    def __init__(self, action=None, message='Your request is invalid.'):
        self.action = action
        LifecycleError.__init__(self, message)


class InvalidConfiguration(LifecycleError, ValueError):
    """An object configuration could not be turned into an instance."""


class ExitRequest(LifecycleError):
    """Ends the current request with the given exit status."""

    def __init__(self, status=0):
        self.status = status
        LifecycleError.__init__(self, 'Request ended with status %d' % status)
