from django import forms
from users.models import ContactSubmission


class ContactForm(forms.ModelForm):
    class Meta:
        model = ContactSubmission
        fields = ['first_name', 'last_name', 'company', 'email', 'phone', 'country', 'message']

    def clean_phone(self):
        phone = self.cleaned_data['phone'].strip()
        digits = [c for c in phone if c.isdigit()]
        if len(digits) < 7:
            raise forms.ValidationError('Enter a valid phone number')
        return phone

    def clean_message(self):
        message = self.cleaned_data['message'].strip()
        if len(message) < 10:
            raise forms.ValidationError('Message must be at least 10 characters')
        return message


class NewsletterForm(forms.Form):
    email = forms.EmailField()


def form_errors(form):
    return {field: ' '.join(str(e) for e in errors) for field, errors in form.errors.items()}
