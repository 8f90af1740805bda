import json
from datetime import date, datetime
from decimal import Decimal
from django.core.files.uploadedfile import UploadedFile
from users.forms import form_errors
from users.helpers.errors import ValidationFailed


def to_storable(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def package_value(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str)
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return ''
    return str(value)


class FilingWizard:
    """Step cursor over a filing.

    ``advance`` only looks at the current step's fields; nothing moves or is
    stored when they fail validation. Submission is only possible from the
    final step and re-validates everything.
    """

    def __init__(self, definition, values=None, current_step=0):
        self.definition = definition
        self.values = dict(values or {})
        self.current_step = max(0, min(int(current_step or 0), self.last_step))

    @property
    def last_step(self):
        return len(self.definition.steps) - 1

    @property
    def is_last_step(self):
        return self.current_step == self.last_step

    def step_fields(self):
        file_fields = set(self.definition.file_fields)
        return [f for f in self.definition.fields_for_step(self.current_step) if f not in file_fields]

    def advance(self, data):
        fields = self.step_fields()
        form = self.definition.build_form(data={**self.values, **data}, only=fields)

        if not form.is_valid():
            raise ValidationFailed('Please correct the highlighted fields', errors=form_errors(form))

        for field in fields:
            self.values[field] = to_storable(form.cleaned_data.get(field))

        self.current_step = min(self.current_step + 1, self.last_step)
        return self

    def retreat(self):
        self.current_step = max(self.current_step - 1, 0)
        return self

    def validate_all(self, data, files=None, uploaded_keys=None):
        """Validate every field of every step; returns cleaned data.

        ``uploaded_keys`` maps file fields to objects already placed in storage
        through a signed upload, which satisfy a required file field.
        """
        if not self.is_last_step:
            raise ValidationFailed('Complete all steps before submitting', errors={
                'step': f'currently on step {self.current_step + 1} of {self.last_step + 1}'
            })

        uploaded_keys = uploaded_keys or {}
        form = self.definition.build_form(data={**self.values, **data}, files=files)
        for field in uploaded_keys:
            if field in form.fields:
                form.fields[field].required = False

        if not form.is_valid():
            raise ValidationFailed('Please correct the highlighted fields', errors=form_errors(form))

        cleaned = dict(form.cleaned_data)
        cleaned.update(uploaded_keys)
        return cleaned

    def package(self, cleaned, user_email):
        """Flatten cleaned data into multipart-ready ``(fields, files)``."""
        fields = {}
        files = {}
        for name, value in cleaned.items():
            if isinstance(value, UploadedFile):
                files[name] = value
            elif value is None and name in self.definition.file_fields:
                continue
            else:
                fields[name] = package_value(value)

        fields['collectionName'] = self.definition.collection_name
        fields['formId'] = self.definition.form_id
        fields['submittedBy'] = user_email
        return fields, files

    def state(self):
        return {
            'slug': self.definition.slug,
            'currentStep': self.current_step,
            'stepName': self.definition.step_names[self.current_step],
            'steps': self.definition.step_names,
            'isLastStep': self.is_last_step,
            'values': self.values
        }
