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
Mailer configuration from ini files

Settings live in the ``[app:mailer]`` section::

  [app:mailer]
  transport = smtp
  hostname = mail.example.com
  port = 587
  username = Chris
  password = Rossi
  force_tls = true
  use_file_transport = false
  file_transport_path = var/mail
  transactional = true

Missing keys take the values in `DEFAULTS`.
"""

from configparser import ConfigParser

from repoze.lifecycle.delivery import DirectMailer
from repoze.lifecycle.delivery import TransactionalMailer
from repoze.lifecycle.transport import SendmailMailer
from repoze.lifecycle.transport import SMTPMailer

SECTION = 'app:mailer'

DEFAULTS = {
    'transport': 'smtp',
    'hostname': 'localhost',
    'port': 25,
    'username': None,
    'password': None,
    'force_tls': False,
    'no_tls': False,
    'ssl': False,
    'debug_smtp': False,
    'sendmail_app': None,
    'use_file_transport': False,
    'file_transport_path': 'mail',
    'transactional': False,
}


def boolean(s):
    s = str(s).lower()
    return s.startswith("t") or s.startswith("y") or s.startswith("1")


def string_or_none(s):
    if s == 'None' or s == '':
        return None
    return s


CONVERTERS = {
    'port': int,
    'username': string_or_none,
    'password': string_or_none,
    'sendmail_app': string_or_none,
    'force_tls': boolean,
    'no_tls': boolean,
    'ssl': boolean,
    'debug_smtp': boolean,
    'use_file_transport': boolean,
    'transactional': boolean,
}


def load_settings(path, section=SECTION):
    """Read the mailer settings of `path`, converted to Python values."""
    config = ConfigParser(dict((name, str(value))
                               for name, value in DEFAULTS.items()),
                          interpolation=None)
    if not config.read(path):
        raise ValueError('Cannot read configuration file %s' % path)
    if not config.has_section(section):
        raise ValueError('%s has no [%s] section' % (path, section))

    settings = {}
    for name in DEFAULTS:
        value = config.get(section, name)
        settings[name] = CONVERTERS.get(name, str)(value)
    if ((settings['username'] or settings['password'])
            and not (settings['username'] and settings['password'])):
        raise ValueError('Must use username and password together.')
    if settings['force_tls'] and settings['no_tls']:
        raise ValueError('force_tls and no_tls are mutually exclusive.')
    return settings


def transport_from_settings(settings):
    kind = settings.get('transport', 'smtp')
    if kind == 'smtp':
        return SMTPMailer(settings.get('hostname', 'localhost'),
                          settings.get('port', 25),
                          settings.get('username'),
                          settings.get('password'),
                          no_tls=settings.get('no_tls', False),
                          force_tls=settings.get('force_tls', False),
                          ssl=settings.get('ssl', False),
                          debug_smtp=settings.get('debug_smtp', False))
    if kind == 'sendmail':
        return SendmailMailer(settings.get('sendmail_app'))
    raise ValueError('Unknown mail transport %r' % kind)


def mailer_from_settings(settings, **kw):
    """Build the mailer described by `settings`.

    Extra keyword arguments (``view``, ``message_config``, ...) are passed
    to the mailer.
    """
    transport = transport_from_settings(settings)
    kw.setdefault('use_file_transport',
                  settings.get('use_file_transport', False))
    kw.setdefault('file_transport_path',
                  settings.get('file_transport_path', 'mail'))
    if settings.get('transactional'):
        return TransactionalMailer(transport, **kw)
    return DirectMailer(transport, **kw)
