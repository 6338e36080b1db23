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
Mailer base class

`BaseMailer.send` runs the send pipeline:

1. `BaseMailer.before_send` (a handler clearing ``event.is_valid`` cancels
   the send, which then reports failure);
2. an INFO log record naming the subject and the recipients;
3. delivery, either by saving the message under `file_transport_path`
   (when `use_file_transport` is set, a debugging aid) or through
   `send_message`, which concrete mailers implement;
4. `BaseMailer.after_send` with the outcome.
"""

import logging
import os
import random
import time

from zope.interface import implementer

from repoze.lifecycle.composer import Composer
from repoze.lifecycle.event import EventDispatcher
from repoze.lifecycle.event import MailEvent
from repoze.lifecycle.factory import create_object
from repoze.lifecycle.interfaces import IComposer
from repoze.lifecycle.interfaces import IMailer
from repoze.lifecycle.message import MailMessage


def format_recipients(value):
    if value is None or isinstance(value, str):
        return value
    # mappings are keyed by address
    return ', '.join(value)


@implementer(IMailer)
class BaseMailer(EventDispatcher):

    EVENT_BEFORE_SEND = 'before_send'
    EVENT_AFTER_SEND = 'after_send'

    log = logging.getLogger(__name__)

    message_class = MailMessage

    def __init__(self, message_config=None, composer=None, view=None,
                 use_file_transport=False, file_transport_path='mail',
                 file_transport_callback=None):
        # applied to every new message, e.g. {'from_': 'noreply@example.com'}
        self.message_config = dict(message_config or {})
        self.composer = composer if composer is not None else {}
        self.view = view
        self.use_file_transport = use_file_transport
        self.file_transport_path = file_transport_path
        # called as callback(mailer, message), returns a file name
        self.file_transport_callback = file_transport_callback

    def get_composer(self):
        """Return the composer, creating it from its configuration."""
        composer = self.composer
        if not IComposer.providedBy(composer):
            if isinstance(composer, dict) and 'class' not in composer:
                composer = dict(composer)
                composer['class'] = Composer
            composer = create_object(composer)
            if getattr(composer, 'view', None) is None:
                composer.view = self.view
            self.composer = composer
        return composer

    def compose(self, view=None, params=None):
        message = self.create_message()
        if view is None:
            return message
        self.get_composer().compose(message, view, params or {})
        return message

    def create_message(self):
        config = dict(self.message_config)
        config.setdefault('class', self.message_class)
        message = create_object(config)
        message.mailer = self
        return message

    def send(self, message):
        if not self.before_send(message):
            return False

        self.log.info('Sending email "%s" to "%s"',
                      message.subject, format_recipients(message.to),
                      extra={'category': 'BaseMailer.send'})

        if self.use_file_transport:
            is_successful = self.save_message(message)
        else:
            is_successful = self.send_message(message)
        self.after_send(message, is_successful)
        return is_successful

    def send_multiple(self, messages):
        """Send `messages` one by one; return how many were sent."""
        success_count = 0
        for message in messages:
            if self.send(message):
                success_count += 1
        return success_count

    def render(self, view, params=None, layout=None, message=None):
        """Render `view`, wrapped in `layout` when given.

        The layout receives the rendered ``content`` and the ``message``
        being composed.
        """
        if self.view is None:
            raise RuntimeError('No view renderer is configured')
        output = self.view.render(view, params or {}, self)
        if layout is not None:
            output = self.view.render(
                layout, {'content': output, 'message': message}, self)
        return output

    def send_message(self, message):
        """Deliver `message`; return whether it was sent successfully."""
        raise NotImplementedError

    def save_message(self, message):
        path = self.file_transport_path
        if not os.path.isdir(path):
            os.makedirs(path, exist_ok=True)
        if self.file_transport_callback is not None:
            filename = self.file_transport_callback(self, message)
        else:
            filename = self.generate_message_file_name()
        with open(os.path.join(path, filename), 'w', encoding='utf-8') as f:
            f.write(message.to_string())
        return True

    def generate_message_file_name(self):
        """Return ``YYYYMMDD-HHMMSS-SSSS-RRRR.eml`` for the current time."""
        now = time.time()
        fraction = int((now - int(now)) * 10000)
        return '%s-%04d-%04d.eml' % (
            time.strftime('%Y%m%d-%H%M%S', time.localtime(now)),
            fraction, random.randrange(10000))

    def before_send(self, message):
        """Return whether `message` should be sent."""
        event = MailEvent(message)
        self.trigger(self.EVENT_BEFORE_SEND, event)
        return event.is_valid

    def after_send(self, message, is_successful):
        event = MailEvent(message, is_successful=is_successful)
        self.trigger(self.EVENT_AFTER_SEND, event)
