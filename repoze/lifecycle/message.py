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
Mail messages

Address fields (`from_`, `to`, `reply_to`, `cc`, `bcc`) accept a single
address, a sequence of addresses, or a mapping of address to display name::

  message.to = {'jim@example.com': 'Jim', 'guido@example.com': 'Guido'}
"""

from email.message import EmailMessage
from email.utils import formataddr
from email.utils import formatdate
from email.utils import make_msgid

from zope.interface import implementer

from repoze.lifecycle.interfaces import IMailMessage


def addresses(value):
    """Return the bare addresses of an address field."""
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def format_addresses(value):
    """Return the header form of an address field."""
    if isinstance(value, dict):
        return ', '.join(formataddr((name, address)) if name else address
                         for address, name in value.items())
    return ', '.join(addresses(value))


@implementer(IMailMessage)
class MailMessage(object):

    charset = 'utf-8'
    mailer = None
    from_ = None
    to = None
    reply_to = None
    cc = None
    bcc = None
    subject = None
    text_body = None
    html_body = None

    def __init__(self, **fields):
        self.headers = {}
        for name, value in fields.items():
            setattr(self, name, value)

    def recipients(self):
        """Return every envelope recipient, blind copies included."""
        return addresses(self.to) + addresses(self.cc) + addresses(self.bcc)

    def sender(self):
        found = addresses(self.from_)
        return found[0] if found else None

    def as_email(self):
        message = EmailMessage()
        for header, value in (('From', self.from_),
                              ('To', self.to),
                              ('Reply-To', self.reply_to),
                              ('Cc', self.cc)):
            if value:
                message[header] = format_addresses(value)
        if self.subject is not None:
            message['Subject'] = self.subject
        for header, value in self.headers.items():
            message[header] = value
        if message['Date'] is None:
            message['Date'] = formatdate()
        if message['Message-Id'] is None:
            message['Message-Id'] = make_msgid('repoze.lifecycle')

        if self.html_body is not None and self.text_body is not None:
            message.set_content(self.text_body, charset=self.charset)
            message.add_alternative(self.html_body, subtype='html',
                                    charset=self.charset)
        elif self.html_body is not None:
            message.set_content(self.html_body, subtype='html',
                                charset=self.charset)
        else:
            message.set_content(self.text_body or '', charset=self.charset)
        return message

    def to_string(self):
        return self.as_email().as_string()

    def send(self, mailer=None):
        if mailer is None:
            mailer = self.mailer
        if mailer is None:
            raise RuntimeError('The message is not bound to a mailer')
        return mailer.send(self)
