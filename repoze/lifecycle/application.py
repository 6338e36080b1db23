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
Modules and the application

A module maps ids to controller and sub-module configurations (anything
`create_object` accepts); routes such as ``admin/site/login`` are resolved
segment by segment, descending into sub-modules first.  The application is
the top level module: it dispatches routes and ends requests.
"""

import logging

from zope.interface import implementer

from repoze.lifecycle.controller import is_top_level
from repoze.lifecycle.exceptions import ActionNotFound
from repoze.lifecycle.exceptions import ExitRequest
from repoze.lifecycle.factory import create_object
from repoze.lifecycle.interfaces import IApplication
from repoze.lifecycle.interfaces import IModule


@implementer(IModule)
class Module(object):

    id = property(lambda self: self._id)
    default_route = 'default'

    def __init__(self, id, module=None, controller_map=None, modules=None):
        self._id = id
        self.module = module
        self.controller_map = dict(controller_map or {})
        self.modules = dict(modules or {})
        self._loaded_modules = {}

    @property
    def unique_id(self):
        if is_top_level(self.module):
            return self.id
        return self.module.unique_id + '/' + self.id

    def get_module(self, id):
        """Return the sub-module `id`, creating it on first use."""
        module = self._loaded_modules.get(id)
        if module is None:
            config = self.modules.get(id)
            if config is None:
                return None
            module = self._loaded_modules[id] = create_object(config, id, self)
        return module

    def create_controller(self, route):
        route = route.strip('/')
        if route == '':
            route = self.default_route
        id, _, rest = route.partition('/')
        module = self.get_module(id)
        if module is not None:
            return module.create_controller(rest)
        config = self.controller_map.get(id)
        if config is None:
            return None
        controller = create_object(config, id, self)
        controller.init()
        return controller, rest


@implementer(IApplication)
class Application(Module):
    """The top level module.

    `view` is the `IViewRenderer` shared by controllers that have none of
    their own.
    """

    log = logging.getLogger(__name__)

    def __init__(self, id='application', controller_map=None, modules=None,
                 view=None):
        super(Application, self).__init__(id, None, controller_map, modules)
        self.view = view

    @property
    def unique_id(self):
        return ''

    def dispatch(self, route, params=None):
        result = self.create_controller(route)
        if result is None:
            raise ActionNotFound(route)
        controller, action_id = result
        self.log.debug('Dispatching "%s" to controller "%s".',
                       route, controller.unique_id)
        return controller.run(action_id, params)

    def end(self, status=0):
        raise ExitRequest(status)

    def handle_request(self, route, params=None):
        """Dispatch `route`, turning an ended request into its status."""
        try:
            return self.dispatch(route, params)
        except ExitRequest as e:
            return e.status
