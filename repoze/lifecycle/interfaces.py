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
"""`repoze.lifecycle` interfaces

Handling a request works as follows:

- The application resolves a route to a module, a controller and an action
  id, and calls `IController.run` with the action id and the request
  parameters.

- The controller turns the id into an `IAction`, either an inline handler
  method or an action declared in its action map.

- The controller fires its ``authorize`` hook, binds the parameters to the
  action, fires ``before_action``, runs the action and finally fires
  ``after_action``.  Every hook publishes an `IActionEvent`; any observer
  may clear ``is_valid`` to cancel the rest of the lifecycle.

- The run returns an integer exit status: 0 for normal completion, anything
  else for abnormal completion.

Sending e-mail works in a similar way:

- An application asks an `IMailer` to compose a message (optionally
  rendering its bodies from views through an `IComposer`) and to send it.

- The mailer fires ``before_send`` with an `IMailEvent`, hands the message
  either to the file transport (messages are dumped to ``.eml`` files) or
  to the concrete delivery strategy, and fires ``after_send`` with the
  outcome.

- Concrete mailers deliver through an `IMailTransport`; the package
  provides two transports:

    - `SMTPMailer` sends all messages to a relay host using SMTP

    - `SendmailMailer` sends all messages using the `sendmail` command.
"""

from zope.interface import Attribute, Interface


class IEventDispatcher(Interface):
    """Synchronous, per-object publication of named events.
    """

    def on(name, handler):
        """Attach `handler` to the event `name`.

        Handlers are called with the event object, in registration order.
        """

    def off(name, handler=None):
        """Detach `handler` (or every handler) from the event `name`.

        Returns whether anything was detached.
        """

    def has_handlers(name):
        """Return whether any handler is attached to `name`."""

    def trigger(name, event):
        """Call every handler attached to `name` with `event`.

        Stops early when a handler sets ``event.handled``.
        """


class IActionEvent(Interface):
    """Published by the controller lifecycle hooks."""

    name = Attribute("The name of the hook that published the event.")

    action = Attribute("The `IAction` the hook is about.")

    is_valid = Attribute(
        "Whether the lifecycle should continue.  Observers may set this to "
        "False to cancel.  Defaults to True.")

    handled = Attribute(
        "Set to True by an observer to stop the remaining observers.")


class IMailEvent(Interface):
    """Published right before and right after a message is sent."""

    name = Attribute("Either 'before_send' or 'after_send'.")

    message = Attribute("The `IMailMessage` being sent.")

    is_valid = Attribute(
        "Whether the message should be sent.  Only meaningful for "
        "'before_send'.")

    is_successful = Attribute(
        "Whether the message was sent.  Only meaningful for 'after_send'.")

    handled = Attribute(
        "Set to True by an observer to stop the remaining observers.")


class IAction(Interface):
    """A unit of request handling logic."""

    id = Attribute("The action id, unique within its controller.")

    controller = Attribute("The `IController` owning this action.")

    def normalize_params(params):
        """Bind a name/value mapping to the arguments of `run`.

        Returns the keyword arguments to call `run` with, or None when the
        parameters do not satisfy the action.
        """

    def run(**params):
        """Execute the action; the result is turned into an exit status."""


class IController(IEventDispatcher):
    """An addressable request handling unit."""

    id = Attribute("The controller id.")

    module = Attribute(
        "The `IModule` this controller belongs to, or None.")

    default_action = Attribute(
        "The action id used when an empty id is requested.")

    action = Attribute(
        "The `IAction` currently being executed, or None.")

    unique_id = Attribute(
        "The controller id prefixed with the unique id of its module.")

    route = Attribute(
        "The unique id followed by the id of the current action, if any.")

    def create_action(action_id):
        """Return the `IAction` for `action_id`, or None if there is none."""

    def run(action, params=None):
        """Run an action (or action id) and return its exit status."""

    def forward(route, params=None, exit=True):
        """Process the request with another action or route.

        Omitted `params` forward no parameters; None forwards the request
        parameters.
        """


class IModule(Interface):
    """A container of controllers and sub-modules."""

    id = Attribute("The module id.")

    module = Attribute("The parent `IModule`, or None.")

    unique_id = Attribute(
        "The module id prefixed with the unique id of its parent.")

    def create_controller(route):
        """Return ``(controller, action_id)`` for `route`, or None."""


class IApplication(IModule):
    """The top level module."""

    def dispatch(route, params=None):
        """Run the action addressed by `route`; return its exit status."""

    def end(status=0):
        """Terminate the current request with `status`.  Never returns."""


class IViewRenderer(Interface):
    """Renders a view to a string."""

    def render(view, params, context):
        """Render `view` (a name or path) with `params` for `context`."""


class IMailMessage(Interface):
    """A composed e-mail."""

    mailer = Attribute("The `IMailer` used by `send`.")

    subject = Attribute("The subject line.")

    to = Attribute(
        "Recipients: a string, a sequence of addresses or a mapping of "
        "address to display name.")

    def to_string():
        """Return the message serialized as RFC 5322 text."""

    def send(mailer=None):
        """Send the message with `mailer` (defaults to ``self.mailer``)."""


class IComposer(Interface):
    """Fills message bodies from views."""

    def compose(message, view, params=None):
        """Render `view` into the bodies of `message`."""


class IMailer(IEventDispatcher):
    """Composes and sends messages."""

    use_file_transport = Attribute(
        "Whether messages are saved as files instead of being sent.")

    file_transport_path = Attribute(
        "The directory holding the saved messages.")

    def compose(view=None, params=None):
        """Create a new `IMailMessage`, optionally rendering its bodies."""

    def send(message):
        """Send `message`; return whether it was sent successfully."""

    def send_multiple(messages):
        """Send every message; return how many were sent successfully."""


class IMailTransport(Interface):
    """Handles synchronous mail delivery.
    """
    def send(fromaddr, toaddrs, message):
        """Send an email message.

        `fromaddr` is the sender address (unicode string),

        `toaddrs` is a sequence of recipient addresses (unicode strings).

        `message` is a `Message` object from the stdlib
        `email.message` module.

        Messages are sent immediately.
        """
