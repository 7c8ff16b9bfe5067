"""
Contact Form Routes

Renders a form submission into the email template and hands it to the mail
client. The caller waits for the transport; nothing is stored.
"""

import logging

from flask import jsonify, render_template

from sitecms.contact import contact_bp
from sitecms.dependencies import get_mail_client
from sitecms.errors import EmailDeliveryError, ValidationError
from sitecms.http import request_payload
from sitecms.services.forms import FORMS, REPLY_TEXT
from sitecms.services.mailer import OutboundEmail

logger = logging.getLogger(__name__)


def _reply(form, ok):
    if form.reply == REPLY_TEXT:
        if ok:
            return 'Email sent', 200
        return 'Error sending email. Please try again later.', 500
    if ok:
        return jsonify(success=True, message='Email sent successfully!'), 200
    return jsonify(success=False, message='Email sending failed.'), 500


def send_form(form):
    try:
        submission = form.render(request_payload())
    except ValidationError as e:
        return jsonify(success=False, message=e.message), 400

    html = render_template('email/form_submission.html', submission=submission)
    email = OutboundEmail(subject=submission.subject, html=html, sender_name=form.sender_name)
    try:
        get_mail_client().send(email)
    except EmailDeliveryError as e:
        logger.error('Error sending %s email: %s', form.name, e.message)
        return _reply(form, ok=False)

    logger.info('%s email sent', form.name)
    return _reply(form, ok=True)


def _register(form):
    def view():
        return send_form(form)
    contact_bp.add_url_rule(form.route, endpoint=form.name, view_func=view, methods=['POST'])


for _form in FORMS:
    _register(_form)
