"""
Contact Form Table

Each marketing form on the site is described by a FormSpec: where it posts,
which fields go into the email and under which label, and how the sender is
answered. One view serves all of them.
"""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from typing import Optional

from sitecms.errors import ValidationError

REPLY_TEXT = 'text'
REPLY_JSON = 'json'


class _Blank(dict):
    def __missing__(self, key):
        return ''


def _template_keys(template):
    return [name for _, name, _, _ in string.Formatter().parse(template) if name]


def _one_line(value):
    return ' '.join(value.split())


@dataclass(frozen=True)
class FormField:
    """One labelled line of the email body.

    `template` is a str.format template over the submitted field names, e.g.
    ``'{firstName} {lastName}'``. When every referenced field is empty and a
    `default` is given, the default is shown instead.
    """
    label: str
    template: str
    default: Optional[str] = None

    def render(self, values):
        keys = _template_keys(self.template)
        if self.default is not None and not any(values.get(k) for k in keys):
            return self.default
        return self.template.format_map(values).strip()


@dataclass(frozen=True)
class FormSpec:
    name: str
    route: str
    subject: str
    heading: str
    fields: tuple
    sender_name: Optional[str] = None
    required: tuple = ()
    reply: str = REPLY_JSON

    @property
    def field_names(self):
        names = []
        for f in self.fields:
            for key in _template_keys(f.template):
                if key not in names:
                    names.append(key)
        for key in _template_keys(self.subject) + _template_keys(self.heading):
            if key not in names:
                names.append(key)
        return names

    def clean(self, payload):
        """Pick this form's fields out of a raw payload, checking required ones."""
        values = _Blank()
        for key in self.field_names:
            raw = payload.get(key)
            values[key] = '' if raw is None else str(raw).strip()
        missing = [key for key in self.required if not values.get(key)]
        if missing:
            raise ValidationError('All fields are required.')
        return values

    def render(self, payload):
        values = self.clean(payload)
        return FormSubmission(
            form=self,
            subject=_one_line(self.subject.format_map(values)),
            heading=self.heading.format_map(values),
            rows=[(f.label, f.render(values)) for f in self.fields],
        )


@dataclass
class FormSubmission:
    form: FormSpec
    subject: str
    heading: str
    rows: list = field(default_factory=list)


FORMS = (
    FormSpec(
        name='demo_class',
        route='/send',
        sender_name='Demo Class Form',
        subject='New French Demo Class Booking',
        heading='You have a new demo class request!',
        fields=(
            FormField('Name', '{username}'),
            FormField('Email', '{email}'),
            FormField('Phone', '+{country-code} {phone-number}'),
            FormField('Selected Level', '{language_lvl}', 'Not selected'),
            FormField('Additional Message', '{message}', 'None'),
        ),
        reply=REPLY_TEXT,
    ),
    FormSpec(
        name='contact_us_page',
        route='/send-contactUsForm',
        sender_name='Contact Us Page Enquiry',
        subject='Contact Us Page enquiry',
        heading='Contact Us Page Enquiry!',
        fields=(
            FormField('Service Choosen', '{service}', 'Not specified'),
            FormField('Name', '{username}'),
            FormField('Email', '{email}'),
            FormField('Message', '{message}', 'None'),
        ),
        reply=REPLY_TEXT,
    ),
    FormSpec(
        name='german_course_inquiry',
        route='/send-indexG',
        sender_name='Course Inquiry Form',
        subject='German classes enquiry',
        heading='You have a new Course Inquiry!',
        fields=(
            FormField('Course Type', '{level}', 'Not specified'),
            FormField('Name', '{name}'),
            FormField('Email', '{email}'),
            FormField('Message', '{message}', 'None'),
        ),
        reply=REPLY_TEXT,
    ),
    FormSpec(
        name='contact',
        route='/send-contact',
        sender_name='Website Contact Form',
        subject='Get in touch form from German Page',
        heading='New Contact Message Received',
        fields=(
            FormField('Name', '{firstName} {lastName}'),
            FormField('Email', '{email}'),
            FormField('Phone', '{countryCode} {phoneNumber}'),
            FormField('Message', '{message}'),
        ),
    ),
    FormSpec(
        name='german_courses',
        route='/send-contactUs',
        sender_name='Contact Us Form',
        subject='Germany Courses enquiry form',
        heading='You have a new German Course Enquiry!',
        fields=(
            FormField('German Courses Selected', '{level}', 'Not specified'),
            FormField('Name', '{name}'),
            FormField('Email', '{email}'),
            FormField('Message', '{message}', 'None'),
        ),
    ),
    FormSpec(
        name='german_booking',
        route='/send-german-form',
        subject='New German Course Booking - {course}',
        heading='Course: {course}',
        fields=(
            FormField('Name', '{name}'),
            FormField('Email', '{email}'),
            FormField('Phone', '{phone}'),
        ),
        required=('course', 'name', 'email', 'phone'),
    ),
    FormSpec(
        name='ielts_demo',
        route='/send-ielts',
        sender_name='Contact Us Form',
        subject='Ielts Demo Class Enquiry Form',
        heading='You have a new Ielts Demo Class Enquiry',
        fields=(
            FormField('Name', '{name}'),
            FormField('Email', '{email}'),
            FormField('Phone Number', '{phoneNumber}'),
        ),
    ),
    FormSpec(
        name='french_enquiry',
        route='/send-frenchReq',
        sender_name='French Enquire Form',
        subject='French Enquiry Class Form',
        heading='You have a new French Class Enquiry',
        fields=(
            FormField('Name', '{name}'),
            FormField('Email', '{email}'),
            FormField('Course Selected', '{course}'),
            FormField('Phone Number', '{phone}'),
            FormField('Message', '{message}'),
        ),
    ),
    FormSpec(
        name='ielts_coaching',
        route='/send-ieltsCoaching',
        sender_name='Ielts Coaching Form Option',
        subject='Ielts Coaching Form',
        heading='You have a new Ielts Class Enquiry',
        fields=(
            FormField('Name', '{name}'),
            FormField('Email', '{email}'),
            FormField('Course Selected', '{course}'),
            FormField('Phone Number', '{phone}'),
        ),
    ),
    FormSpec(
        name='toefl_contact',
        route='/send-contactFormToefl',
        sender_name='Toefl Page Enquiry',
        subject='Toefl Page enquiry',
        heading='TOEFL Contact Us Enquiry!',
        fields=(
            FormField('Name', '{name}'),
            FormField('Email', '{email}'),
            FormField('Phone Number', '{phone}'),
            FormField('Message', '{message}', 'None'),
        ),
        reply=REPLY_TEXT,
    ),
)


def get_form(name):
    for form in FORMS:
        if form.name == name:
            return form
    raise KeyError(name)
