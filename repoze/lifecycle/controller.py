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
Controller base class

A controller runs actions through the following life cycle:

1. `Controller.authorize`
2. `Controller.before_action`
3. the action itself (which may call `Controller.render`, firing
   `Controller.before_render` and `Controller.after_render`)
4. `Controller.after_action`

Each hook publishes an `ActionEvent` through the controller's own event
handlers (see `EventDispatcher`); clearing ``event.is_valid`` in a handler
of ``authorize``, ``before_action`` or ``before_render`` cancels what
follows.
"""

import logging

from zope.interface import implementer

from repoze.lifecycle.action import InlineAction
from repoze.lifecycle.action import to_exit_status
from repoze.lifecycle.event import ActionEvent
from repoze.lifecycle.event import EventDispatcher
from repoze.lifecycle.exceptions import ActionNotFound
from repoze.lifecycle.exceptions import InvalidActionParameters
from repoze.lifecycle.factory import create_object
from repoze.lifecycle.interfaces import IApplication
from repoze.lifecycle.interfaces import IController

INLINE_PREFIX = 'action_'

_marker = object()

# ``actions`` is the action map, never an inline action named "s"
RESERVED_ACTION_IDS = ('s',)


def inline_handlers(controller):
    """Collect the ``action_<id>`` methods of `controller` by id."""
    handlers = {}
    for name in dir(type(controller)):
        if not name.startswith(INLINE_PREFIX):
            continue
        action_id = name[len(INLINE_PREFIX):]
        if not action_id or action_id.lower() in RESERVED_ACTION_IDS:
            continue
        handler = getattr(controller, name)
        if callable(handler):
            handlers[action_id] = handler
    return handlers


def is_top_level(module):
    return module is None or IApplication.providedBy(module)


@implementer(IController)
class Controller(EventDispatcher):
    """Base class for classes containing controller logic.

    Inline actions are methods named ``action_<id>``; they are collected
    once, when the controller is created.  Further actions can be declared
    by overriding `actions`.
    """

    EVENT_AUTHORIZE = 'authorize'
    EVENT_BEFORE_ACTION = 'before_action'
    EVENT_AFTER_ACTION = 'after_action'
    EVENT_BEFORE_RENDER = 'before_render'
    EVENT_AFTER_RENDER = 'after_render'

    log = logging.getLogger(__name__)

    id = property(lambda self: self._id)
    default_action = 'index'
    action = None
    view = None

    def __init__(self, id, module=None):
        self._id = id
        self.module = module
        self._inline_actions = inline_handlers(self)

    def init(self):
        """Called by the module once the controller has been created."""

    def actions(self):
        """Return the external actions, mapping ids to configurations.

        Values are anything `create_object` accepts, e.g.::

          {'captcha': 'myapp.actions.CaptchaAction',
           'page': {'class': PageAction, 'view_path': 'pages'}}

        Subclasses extending a parent's map should merge it in explicitly.
        """
        return {}

    def get_action_params(self):
        """Return the request parameters used when `run` gets none."""
        return {}

    def create_action(self, action_id):
        if action_id == '':
            action_id = self.default_action
        handler = self._inline_actions.get(action_id)
        if handler is not None:
            return InlineAction(action_id, self, handler)
        config = self.actions().get(action_id)
        if config is not None:
            return create_object(config, action_id, self)
        return None

    def run(self, action, params=None):
        """Run `action` (an action or an action id) with `params`.

        Returns the exit status: 0 means normal, anything else abnormal.
        """
        if isinstance(action, str):
            resolved = self.create_action(action)
            if resolved is None:
                self.missing_action(action)
                return 1
            action = resolved

        prior_action = self.action
        self.action = action
        try:
            self.log.debug('Running action "%s".', self.route)
            exit_status = 1
            if self.authorize(action):
                if params is None:
                    params = self.get_action_params()
                bound = action.normalize_params(params)
                if bound is None:
                    self.invalid_action_params(action)
                elif self.before_action(action):
                    exit_status = to_exit_status(action.run(**bound))
                    self.after_action(action)
            return exit_status
        finally:
            self.action = prior_action

    def invalid_action_params(self, action):
        """Called when the parameters do not satisfy `action`.

        Override to render an error page instead of raising.
        """
        raise InvalidActionParameters(action)

    def missing_action(self, action_id):
        """Called when `action_id` cannot be resolved.

        Override to render an error page instead of raising.
        """
        raise ActionNotFound(action_id or self.default_action)

    @property
    def application(self):
        module = self.module
        while module is not None and not IApplication.providedBy(module):
            module = module.module
        return module

    @property
    def unique_id(self):
        if is_top_level(self.module):
            return self.id
        return self.module.unique_id + '/' + self.id

    @property
    def route(self):
        if self.action is not None:
            return self.unique_id + '/' + self.action.id
        return self.unique_id

    def forward(self, route, params=_marker, exit=True):
        """Process the request with another action.

        `route` is either an action id of this controller or a route with
        (optional within the current module) module id, controller id and
        action id.  When `exit` is true the request ends with the resulting
        status; otherwise the status is returned.  Passing None for `params`
        hands the request parameters (`get_action_params`) to the action.
        """
        if params is _marker:
            params = {}
        if '/' not in route:
            status = self.run(route, params)
        else:
            if not route.startswith('/') and not is_top_level(self.module):
                route = '/' + self.module.unique_id + '/' + route
            status = self._get_application().dispatch(route, params)
        if exit:
            self._get_application().end(status)
        return status

    def _get_application(self):
        application = self.application
        if application is None:
            raise RuntimeError(
                'Controller "%s" does not belong to an application'
                % self.id)
        return application

    def get_view(self):
        if self.view is not None:
            return self.view
        view = getattr(self.application, 'view', None)
        if view is None:
            raise RuntimeError('No view renderer is configured')
        return view

    def render(self, view, params=None):
        """Render `view` for the current action.

        Returns None when a ``before_render`` handler cancels rendering.
        """
        if not self.before_render(self.action):
            return None
        output = self.get_view().render(view, params or {}, self)
        self.after_render(self.action)
        return output

    def authorize(self, action):
        """Return whether `action` may be executed."""
        return self._fire(self.EVENT_AUTHORIZE, action)

    def before_action(self, action):
        """Return whether `action` should continue to be executed."""
        return self._fire(self.EVENT_BEFORE_ACTION, action)

    def after_action(self, action):
        self._fire(self.EVENT_AFTER_ACTION, action)

    def before_render(self, action):
        """Return whether the current action should continue to render."""
        return self._fire(self.EVENT_BEFORE_RENDER, action)

    def after_render(self, action):
        self._fire(self.EVENT_AFTER_RENDER, action)

    def _fire(self, name, action):
        event = ActionEvent(action)
        self.trigger(name, event)
        return event.is_valid
