"""Delivery of contact messages and quote requests by email.

Messages are always written to the application log.  They are only handed to
Flask-Mail when SMTP credentials and the business inbox are configured, so a
development checkout works without a mail account.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict

from flask import render_template
from flask_mail import Message

from athenas import app, mail
from athenas.i18n import get_translation, text_direction


def is_mail_configured() -> bool:
    return bool(
        app.config.get('MAIL_USERNAME')
        and app.config.get('MAIL_PASSWORD')
        and app.config.get('BUSINESS_EMAIL')
    )


def _log_unconfigured() -> None:
    app.logger.info(
        "Mail is not configured - message logged only. "
        "Set MAIL_USERNAME, MAIL_PASSWORD and BUSINESS_EMAIL to enable sending."
    )


def send_contact_email(data: Dict) -> None:
    """Relay a validated contact message to the business inbox."""
    context = dict(data, sent_at=datetime.utcnow())
    text_body = render_template('emails/contact.txt', **context)
    app.logger.info("Contact form message:\n%s", text_body)

    if not is_mail_configured():
        _log_unconfigured()
        return

    msg = Message(
        f"Contact Form: {data['subject']}",
        sender=app.config['MAIL_DEFAULT_SENDER'],
        recipients=[app.config['BUSINESS_EMAIL']],
        reply_to=data['email'],
    )
    msg.body = text_body
    msg.html = render_template('emails/contact.html', **context)
    mail.send(msg)
    app.logger.info("Contact email sent for %s", data['email'])


def send_quote_request_email(data: Dict) -> None:
    """Notify the business of a quote request and confirm it to the customer."""
    customer = data['customerInfo']
    lang = data.get('locale', 'en')
    context = dict(
        data,
        customer=customer,
        sent_at=datetime.utcnow(),
        lang=lang,
        direction=text_direction(lang),
        t=lambda key, **values: get_translation(key, lang).format(**values),
    )
    text_body = render_template('emails/quote_request.txt', **context)
    app.logger.info("Quote request:\n%s", text_body)

    if not is_mail_configured():
        _log_unconfigured()
        return

    with mail.connect() as conn:
        notification = Message(
            f"Quote Request from {customer['fullName']}",
            sender=app.config['MAIL_DEFAULT_SENDER'],
            recipients=[app.config['BUSINESS_EMAIL']],
            reply_to=customer['email'],
        )
        notification.body = text_body
        notification.html = render_template('emails/quote_request.html', **context)
        conn.send(notification)

        confirmation = Message(
            get_translation('email.quote.subject', lang),
            sender=app.config['MAIL_DEFAULT_SENDER'],
            recipients=[customer['email']],
        )
        confirmation.body = text_body
        confirmation.html = render_template('emails/quote_confirmation.html', **context)
        conn.send(confirmation)
    app.logger.info("Quote request emails sent to the business and %s", customer['email'])
