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
import unittest

from repoze.lifecycle.controller import Controller

CALLS = []


class PostController(Controller):

    initialized = False

    def init(self):
        self.initialized = True

    def action_index(self):
        CALLS.append(self.route)

    def action_view(self, id):
        CALLS.append((self.route, id))
        return 2

    def action_related(self, id):
        return self.forward('post/view', {'id': id})

    def action_home(self):
        return self.forward('/site/index', exit=False)


class SiteController(Controller):

    def action_index(self):
        CALLS.append(self.route)
        return 7


def _makeApplication():
    from repoze.lifecycle.application import Application
    from repoze.lifecycle.application import Module
    blog = {'class': Module,
            'controller_map': {'post': PostController}}
    admin = {'class': Module,
             'controller_map': {'post': PostController,
                                'default': SiteController},
             'modules': {'blog': blog}}
    return Application(controller_map={'post': PostController,
                                       'site': SiteController,
                                       'default': SiteController},
                       modules={'admin': admin})


class TestModule(unittest.TestCase):

    def setUp(self):
        del CALLS[:]

    def _getTargetClass(self):
        from repoze.lifecycle.application import Module
        return Module

    def _makeOne(self, *args, **kw):
        return self._getTargetClass()(*args, **kw)

    def test_instance_conforms_to_IModule(self):
        from zope.interface.verify import verifyObject
        from repoze.lifecycle.interfaces import IModule
        verifyObject(IModule, self._makeOne('admin'))

    def test_unique_id_chain(self):
        application = _makeApplication()
        admin = application.get_module('admin')
        blog = admin.get_module('blog')
        self.assertEqual(admin.unique_id, 'admin')
        self.assertEqual(blog.unique_id, 'admin/blog')
        controller, action_id = blog.create_controller('post/view')
        self.assertEqual(controller.unique_id, 'admin/blog/post')

    def test_unique_id_without_parent(self):
        self.assertEqual(self._makeOne('admin').unique_id, 'admin')

    def test_get_module_is_cached(self):
        application = _makeApplication()
        self.assertTrue(application.get_module('admin') is
                        application.get_module('admin'))
        self.assertTrue(application.get_module('admin').module
                        is application)

    def test_get_module_unknown(self):
        self.assertEqual(_makeApplication().get_module('nonesuch'), None)

    def test_create_controller(self):
        module = self._makeOne('admin',
                               controller_map={'post': PostController})
        controller, action_id = module.create_controller('post/view')
        self.assertTrue(isinstance(controller, PostController))
        self.assertTrue(controller.module is module)
        self.assertTrue(controller.initialized)
        self.assertEqual(action_id, 'view')

    def test_create_controller_without_action(self):
        module = self._makeOne('admin',
                               controller_map={'post': PostController})
        controller, action_id = module.create_controller('post')
        self.assertEqual(action_id, '')

    def test_create_controller_default_route(self):
        module = self._makeOne('admin',
                               controller_map={'default': SiteController})
        controller, action_id = module.create_controller('')
        self.assertEqual(controller.id, 'default')

    def test_create_controller_descends_into_modules(self):
        application = _makeApplication()
        controller, action_id = application.create_controller(
            '/admin/blog/post/view')
        self.assertEqual(controller.unique_id, 'admin/blog/post')
        self.assertEqual(action_id, 'view')

    def test_create_controller_module_default_route(self):
        application = _makeApplication()
        controller, action_id = application.create_controller('admin')
        self.assertEqual(controller.unique_id, 'admin/default')

    def test_create_controller_unknown(self):
        self.assertEqual(_makeApplication().create_controller('nonesuch'),
                         None)


class TestApplication(unittest.TestCase):

    def setUp(self):
        del CALLS[:]

    def test_instance_conforms_to_IApplication(self):
        from zope.interface.verify import verifyObject
        from repoze.lifecycle.interfaces import IApplication
        verifyObject(IApplication, _makeApplication())

    def test_unique_id(self):
        self.assertEqual(_makeApplication().unique_id, '')

    def test_dispatch(self):
        application = _makeApplication()
        self.assertEqual(application.dispatch('post/view', {'id': 1}), 2)
        self.assertEqual(CALLS, [('post/view', 1)])

    def test_dispatch_in_module(self):
        application = _makeApplication()
        application.dispatch('/admin/post/view', {'id': 3})
        self.assertEqual(CALLS, [('admin/post/view', 3)])

    def test_dispatch_default_action(self):
        application = _makeApplication()
        self.assertEqual(application.dispatch('post', {}), 0)
        self.assertEqual(CALLS, ['post/index'])

    def test_dispatch_unknown_route(self):
        from repoze.lifecycle.exceptions import ActionNotFound
        application = _makeApplication()
        self.assertRaises(ActionNotFound, application.dispatch, 'nonesuch')

    def test_dispatch_unknown_action(self):
        from repoze.lifecycle.exceptions import ActionNotFound
        application = _makeApplication()
        self.assertRaises(ActionNotFound, application.dispatch,
                          'post/nonesuch')

    def test_end(self):
        from repoze.lifecycle.exceptions import ExitRequest
        application = _makeApplication()
        try:
            application.end(3)
        except ExitRequest as e:
            self.assertEqual(e.status, 3)
        else:
            self.fail('ExitRequest not raised')

    def test_handle_request(self):
        application = _makeApplication()
        self.assertEqual(application.handle_request('post/view', {'id': 1}),
                         2)

    def test_forward_with_exit_ends_request(self):
        application = _makeApplication()
        status = application.handle_request('admin/post/related', {'id': 4})
        self.assertEqual(status, 2)
        self.assertEqual(CALLS, [('admin/post/view', 4)])

    def test_forward_absolute_route(self):
        application = _makeApplication()
        status = application.handle_request('admin/blog/post/home', {})
        self.assertEqual(status, 7)
        self.assertEqual(CALLS, ['site/index'])
