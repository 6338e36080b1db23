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
Concrete mailers

`DirectMailer` hands every message to its transport as soon as it is sent.
`TransactionalMailer` joins the current transaction instead and only hands
messages to the transport when the transaction commits, so an aborted
request sends nothing.
"""

import smtplib
import subprocess

import transaction
from transaction.interfaces import IDataManagerSavepoint
from transaction.interfaces import ISavepointDataManager
from zope.interface import implementer

from repoze.lifecycle.mail import BaseMailer

TRANSPORT_ERRORS = (smtplib.SMTPException, subprocess.CalledProcessError,
                    OSError)


class MailDataManagerState(object):
    INIT = 0
    TPC_FINISHED = 15
    TPC_ABORTED = 16


@implementer(ISavepointDataManager)
class MailDataManager(object):
    """Calls ``callable(*args)`` when its transaction commits.

    The manager is created outside of any transaction and joined to one
    with `join_transaction`.
    """
    def __init__(self, callable, args=(), onAbort=None,
                 transaction_manager=None):
        self.callable = callable
        self.args = args
        self.onAbort = onAbort
        if transaction_manager is None:
            transaction_manager = transaction.manager
        self.transaction_manager = transaction_manager
        self.transaction = None
        self.state = MailDataManagerState.INIT
        self.tpc_phase = 0

    def join_transaction(self, trans=None):
        """Join `trans`, or the current transaction of the manager."""
        if trans is None:
            trans = self.transaction_manager.get()
        joined = self.transaction
        if (joined is not None and joined is not trans
                and self in joined._resources):
            raise ValueError("Item is in the former transaction. "
                             "It must be removed before it can be added "
                             "to a new transaction")
        if self not in trans._resources:
            trans.join(self)
        self.transaction = trans

    def _check(self, trans=None, phase=None):
        if self.transaction is None:
            raise ValueError("Not in a transaction")
        if trans is not None and self.transaction is not trans:
            raise ValueError("In a different transaction")
        if phase is not None and self.tpc_phase != phase:
            raise ValueError("TPC phase error: %d" % self.tpc_phase)

    def _finish(self, final_state):
        self._check()
        self.state = final_state

    def commit(self, trans):
        # delivery happens in tpc_finish
        self._check(trans)

    def abort(self, trans):
        self._check(trans, phase=0)
        if self.onAbort:
            self.onAbort()

    def sortKey(self):
        return str(id(self))

    def savepoint(self):
        self._check()
        return MailDataSavepoint(self)

    def tpc_begin(self, trans, subtransaction=False):
        self._check(trans, phase=0)
        if subtransaction:
            raise ValueError("Subtransactions not supported")
        self.tpc_phase = 1

    def tpc_vote(self, trans):
        self._check(trans, phase=1)
        self.tpc_phase = 2

    def tpc_finish(self, trans):
        self._check(trans, phase=2)
        self.callable(*self.args)
        self._finish(MailDataManagerState.TPC_FINISHED)

    def tpc_abort(self, trans):
        self._check(trans)
        if self.tpc_phase == 0:
            raise ValueError("TPC phase error: %d" % self.tpc_phase)
        if self.state == MailDataManagerState.TPC_FINISHED:
            raise ValueError("TPC already finished")
        self._finish(MailDataManagerState.TPC_ABORTED)


@implementer(IDataManagerSavepoint)
class MailDataSavepoint(object):
    """Rolling back is left to the transaction."""

    def __init__(self, mail_data_manager):
        self.mail_data_manager = mail_data_manager

    def rollback(self):
        pass


class DirectMailer(BaseMailer):
    """Sends messages through `transport` right away."""

    def __init__(self, transport, **kw):
        super(DirectMailer, self).__init__(**kw)
        self.transport = transport

    def send_message(self, message):
        fromaddr = message.sender()
        toaddrs = message.recipients()
        try:
            self.transport.send(fromaddr, toaddrs, message.as_email())
        except TRANSPORT_ERRORS:
            self.log.error("Error while sending mail from %s to %s.",
                           fromaddr, ", ".join(toaddrs), exc_info=True)
            return False
        self.log.info("Mail from %s to %s sent.", fromaddr, ", ".join(toaddrs))
        return True


class TransactionalMailer(BaseMailer):
    """Sends messages through `transport` when the transaction commits.

    `send` reports success once the message is scheduled; transport errors
    surface from the commit.
    """

    def __init__(self, transport, transaction_manager=None, **kw):
        super(TransactionalMailer, self).__init__(**kw)
        self.transport = transport
        if transaction_manager is None:
            transaction_manager = transaction.manager
        self.transaction_manager = transaction_manager

    def send_message(self, message):
        data_manager = MailDataManager(
            self.transport.send,
            args=(message.sender(), message.recipients(), message.as_email()),
            transaction_manager=self.transaction_manager)
        data_manager.join_transaction()
        return True
