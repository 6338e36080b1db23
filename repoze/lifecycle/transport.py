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
Mail transports

Transports take an already composed `email.message.Message` and hand it to
the outside world right away.  Mailers (see `repoze.lifecycle.delivery`)
decide when that happens.
"""

from email.message import Message
import logging
import smtplib
from ssl import SSLError
import subprocess

from zope.interface import implementer

from repoze.lifecycle.interfaces import IMailTransport


def _as_bytes(message):
    if not isinstance(message, Message):
        raise ValueError(
           'Message must be instance of email.message.Message')
    return message.as_bytes()


@implementer(IMailTransport)
class SMTPMailer(object):

    smtp = smtplib.SMTP  # allow replacement for testing.
    smtp_ssl = smtplib.SMTP_SSL  # allow replacement for testing.
    timeout = 10

    log = logging.getLogger(__name__)

    def __init__(self, hostname='localhost', port=25,
                 username=None, password=None,
                 no_tls=False, force_tls=False, ssl=False, debug_smtp=False):
        self.hostname = hostname
        self.port = port
        self.username = username
        self.password = password
        self.force_tls = force_tls
        self.no_tls = no_tls
        self.ssl = ssl
        self.debug_smtp = debug_smtp

    def smtp_factory(self):
        factory = self.smtp
        if self.ssl:
            if self.smtp_ssl is None:
                raise RuntimeError('No SSL available, cannot send via SSL')
            factory = self.smtp_ssl
        connection = factory(self.hostname, str(self.port),
                             timeout=self.timeout)
        connection.set_debuglevel(self.debug_smtp)
        return connection

    def _greet(self, connection):
        code, response = connection.ehlo()
        if 200 <= code < 300:
            return
        code, response = connection.helo()
        if not 200 <= code < 300:
            raise RuntimeError(
                'Error sending HELO to the SMTP server '
                '(code=%s, response=%s)' % (code, response))

    def send(self, fromaddr, toaddrs, message):
        data = _as_bytes(message)
        connection = self.smtp_factory()
        self._greet(connection)

        have_tls = connection.has_extn('starttls')
        if not have_tls and self.force_tls:
            raise RuntimeError('TLS is not available but TLS is required')
        if have_tls and not self.no_tls and not self.ssl:
            connection.starttls()
            connection.ehlo()

        if connection.does_esmtp:
            if self.username is not None and self.password is not None:
                connection.login(self.username, self.password)
        elif self.username:
            raise RuntimeError(
                    'Mailhost does not support ESMTP but a username '
                    'is configured')

        connection.sendmail(fromaddr, toaddrs, data)
        try:
            connection.quit()
        except SSLError:
            self.log.debug('SSL error while closing the connection to %s',
                           self.hostname)
            connection.close()


@implementer(IMailTransport)
class SendmailMailer(object):
    """Delivers through the local ``sendmail`` binary.

    `sendmail_template` is the command line; ``{sendmail_app}`` and
    ``{sender}`` are substituted and the recipients are appended.  The
    default, ``sendmail -t -i -f <sender>``, also reads recipients from the
    To:, Cc: and Bcc: headers and sets the envelope sender.
    """
    sendmail_app = '/usr/sbin/sendmail'
    sendmail_template = [
        "{sendmail_app}", "-t", "-i", "-f", "{sender}"]

    def __init__(self, sendmail_app=None, sendmail_template=None):
        if sendmail_app:
            self.sendmail_app = sendmail_app
        if sendmail_template:
            self.sendmail_template = sendmail_template

    def send(self, fromaddr=None, toaddrs=None, message=None):
        data = _as_bytes(message)
        args = [arg.format(sendmail_app=self.sendmail_app, sender=fromaddr)
                for arg in self.sendmail_template] + list(toaddrs or ())
        p = self._popen(args)
        p.communicate(data)
        if p.returncode:
            raise subprocess.CalledProcessError(p.returncode, args)

    def _popen(self, *args, **kw):  # pragma NO COVER
        """Start the sendmail process; same signature as subprocess.Popen."""
        kw['stdin'] = subprocess.PIPE
        return subprocess.Popen(*args, **kw)
