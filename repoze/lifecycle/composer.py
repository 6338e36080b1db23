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
Message composition

The composer renders message bodies through an `IViewRenderer`.  A view is
either a single view name, rendered into the HTML body (the text body is
derived from it), or a mapping with ``'html'`` and/or ``'text'`` entries.
"""

import html
import re

from zope.interface import implementer

from repoze.lifecycle.interfaces import IComposer

_BODY = re.compile(r'<body[^>]*>(.*?)</body>', re.I | re.S)
_TAGS = re.compile(r'<[^>]*>')
_BLANK_LINES = re.compile(r'\n\s*\n\s*\n+')


def html_to_text(markup):
    match = _BODY.search(markup)
    if match is not None:
        markup = match.group(1)
    text = html.unescape(_TAGS.sub('', markup))
    return _BLANK_LINES.sub('\n\n', text).strip()


@implementer(IComposer)
class Composer(object):

    def __init__(self, view=None, html_layout=None, text_layout=None):
        self.view = view
        self.html_layout = html_layout
        self.text_layout = text_layout

    def compose(self, message, view, params=None):
        params = params or {}
        if isinstance(view, dict):
            html_view = view.get('html')
            text_view = view.get('text')
        else:
            html_view, text_view = view, None

        if html_view is not None:
            message.html_body = self.render(
                html_view, params, self.html_layout, message)
        if text_view is not None:
            message.text_body = self.render(
                text_view, params, self.text_layout, message)
        elif html_view is not None:
            message.text_body = html_to_text(message.html_body)
        return message

    def render(self, view, params, layout=None, message=None):
        if self.view is None:
            raise RuntimeError('No view renderer is configured')
        output = self.view.render(view, params, self)
        if layout is not None:
            output = self.view.render(
                layout, {'content': output, 'message': message}, self)
        return output
