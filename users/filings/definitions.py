"""Filing forms offered in the client dashboard.

Each filing is a Django form holding the full schema plus an ordered list of
steps naming which of its fields are collected on each screen. File fields
always sit on the final step; they are only checked when the filing is
submitted.
"""
import json
from django import forms
from django.conf import settings

ACCEPTED_FILE_TYPES = ('application/pdf', 'image/jpeg', 'image/png')


def validate_upload(upload):
    if upload.size > settings.UPLOAD_MAX_BYTES:
        raise forms.ValidationError(f'Max file size is {settings.UPLOAD_MAX_BYTES // (1024 * 1024)}MB.')
    content_type = getattr(upload, 'content_type', None)
    if content_type and content_type not in ACCEPTED_FILE_TYPES:
        raise forms.ValidationError('Only .pdf, .jpg and .png files are accepted.')


def document_field(required=True):
    return forms.FileField(required=required, validators=[validate_upload])


def phone_field():
    return forms.CharField(
        min_length=10,
        error_messages={'min_length': 'Contact number must be at least 10 digits'}
    )


YES_NO = [('yes', 'Yes'), ('no', 'No')]
CONSULTATION_TIMES = [(t, t) for t in ('09:00', '10:00', '11:00', '12:00', '13:00', '14:00', '15:00', '16:00')]


class ContactDetailsForm(forms.Form):
    fullName = forms.CharField(
        min_length=2,
        error_messages={'min_length': 'Full name must be at least 2 characters'}
    )
    email = forms.EmailField(error_messages={'invalid': 'Invalid email address'})
    contactNumber = phone_field()


class CipcAnnualReturnForm(ContactDetailsForm):
    priorAnnualReturn = forms.CharField()
    annualTurnover = forms.CharField()
    fileMoreReturns = forms.CharField()
    file = document_field(required=False)


class CoidaRegistrationForm(ContactDetailsForm):
    priorAnnualReturn = forms.CharField()
    annualTurnover = forms.CharField()
    fileMoreReturns = forms.CharField()


class CoidaReturnOfEarningsForm(ContactDetailsForm):
    consultationDate = forms.DateField()
    consultationTime = forms.ChoiceField(choices=CONSULTATION_TIMES)


class EfilingProfileForm(forms.Form):
    contactInfo = forms.CharField()
    fullNames = forms.CharField()
    surname = forms.CharField()
    idNumber = forms.CharField(
        min_length=13,
        max_length=13,
        error_messages={
            'min_length': 'ID number must be at least 13 characters',
            'max_length': 'ID number must not exceed 13 characters',
        }
    )
    cellNumber1 = phone_field()
    cellNumber2 = phone_field()
    cellNumber3 = phone_field()
    email1 = forms.EmailField()
    email2 = forms.EmailField()
    email3 = forms.EmailField()
    idPassportCopy = document_field()
    photoWithId = document_field()
    proofOfAddress = document_field()
    bankConfirmationLetter = document_field()


class VatRegistrationForm(forms.Form):
    sarsUsername = forms.CharField()
    sarsPassword = forms.CharField()
    natureOfIndustry = forms.CharField()
    turnoverOption = forms.ChoiceField(choices=[('lessThan50k', 'Less than R50 000'), ('moreThan50k', 'More than R50 000')])
    turnover = forms.CharField()
    assessmentPeriod = forms.CharField()
    assessmentTurnover = forms.CharField()
    assessmentBankStatements = document_field()
    cipcDocument = document_field(required=False)
    proofOfBusinessAddress = document_field()
    customerInvoices = document_field()
    makeBooking = forms.BooleanField(required=False)


class PersonalIncomeTaxForm(forms.Form):
    contactInfo = forms.CharField()
    submissionMethod = forms.ChoiceField(choices=[('sarsCredentials', 'SARS credentials'), ('appointment', 'Appointment')])
    sarsUsername = forms.CharField(required=False)
    sarsPassword = forms.CharField(required=False)
    incomeTaxCertificates = document_field()
    expenseTaxCertificates = document_field()
    otherSupportingDocuments = document_field(required=False)
    agreeToContact = forms.BooleanField(required=False)

    def clean(self):
        cleaned_data = super().clean()
        method = cleaned_data.get('submissionMethod') or self.data.get('submissionMethod')
        if method == 'sarsCredentials':
            for field in ('sarsUsername', 'sarsPassword'):
                if field in self.fields and not cleaned_data.get(field):
                    self.add_error(field, 'Required when submitting with SARS credentials')
        return cleaned_data


class AnnualFinancialStatementsForm(forms.Form):
    contactInfo = forms.CharField()
    businessRegistrationNumber = forms.CharField()
    usesAccountingSoftware = forms.ChoiceField(choices=YES_NO)
    accountingSoftwareName = forms.CharField(required=False)
    hasPriorYearFinancialStatements = forms.ChoiceField(choices=YES_NO)
    bookingDate = forms.DateField()
    bookingTime = forms.ChoiceField(choices=CONSULTATION_TIMES)
    priorYearFinancialStatements = document_field(required=False)

    def clean(self):
        cleaned_data = super().clean()
        if 'accountingSoftwareName' in self.fields and cleaned_data.get('usesAccountingSoftware') == 'yes':
            if not cleaned_data.get('accountingSoftwareName'):
                self.add_error('accountingSoftwareName', 'Tell us which accounting software you use')
        return cleaned_data


def id_number_field():
    return forms.CharField(
        min_length=13,
        max_length=13,
        error_messages={
            'min_length': 'ID number must be 13 digits',
            'max_length': 'ID number must be 13 digits',
        }
    )


def optional_choice(choices):
    return forms.ChoiceField(required=False, choices=[('', '')] + list(choices))


REGISTRATION_METHODS = [('cipcNumber', 'CIPC number'), ('uploadDocument', 'Upload document')]
BOOKING_PREFERENCES = [('scheduleCall', 'Schedule a call'), ('contact24Hours', 'Contact me within 24 hours')]


class ChoiceListField(forms.MultipleChoiceField):
    """Multiple choice that also takes a JSON list or a comma separated string."""

    def to_python(self, value):
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                value = [part.strip() for part in value.split(',') if part.strip()]
        if isinstance(value, str):
            value = [value]
        return super().to_python(value)


class PeopleListField(forms.JSONField):
    """JSON list of people; every entry needs a non-empty value for each of ``required_keys``."""

    def __init__(self, required_keys, min_items=0, **kwargs):
        self.required_keys = required_keys
        self.min_items = min_items
        super().__init__(**kwargs)

    def validate(self, value):
        super().validate(value)
        if value in self.empty_values:
            return
        if not isinstance(value, list) or not all(isinstance(person, dict) for person in value):
            raise forms.ValidationError('Expected a list of people.')
        if len(value) < self.min_items:
            raise forms.ValidationError(f'At least {self.min_items} required.')
        for position, person in enumerate(value, start=1):
            missing = [key for key in self.required_keys if not str(person.get(key) or '').strip()]
            if missing:
                raise forms.ValidationError(f'Entry {position} is missing {", ".join(missing)}.')


class RequiredWhenMixin:
    # {field: (controlling field, value that makes it required)}
    required_when = {}

    def clean(self):
        cleaned_data = super().clean()
        for field, (control, expected) in self.required_when.items():
            if field not in self.fields or field in self.errors:
                continue
            chosen = cleaned_data.get(control) or self.data.get(control)
            if chosen == expected and not cleaned_data.get(field):
                self.add_error(field, 'This field is required.')
        return cleaned_data


class BbbeeAffidavitForm(RequiredWhenMixin, ContactDetailsForm):
    natureOfTrade = forms.CharField(
        min_length=5,
        error_messages={'min_length': 'Nature of trade must be at least 5 characters'}
    )
    directorName = forms.CharField(min_length=2)
    directorSurname = forms.CharField(min_length=2)
    directorIdNumber = id_number_field()
    numberOfShareholders = forms.IntegerField(min_value=1)
    blackFemaleShareholding = forms.DecimalField(min_value=0, max_value=100, decimal_places=2)
    blackMaleShareholding = forms.DecimalField(min_value=0, max_value=100, decimal_places=2)
    otherShareholding = forms.DecimalField(min_value=0, max_value=100, decimal_places=2)
    registrationMethod = forms.ChoiceField(choices=[('cipc', 'CIPC number'), ('upload', 'Upload documents')])
    cipcRegistrationNumber = forms.CharField(required=False)
    companyRegistrationDocuments = document_field(required=False)

    required_when = {'cipcRegistrationNumber': ('registrationMethod', 'cipc')}


class TrustFormationForm(ContactDetailsForm):
    trustName = forms.CharField(
        min_length=2,
        error_messages={'min_length': 'Trust name must be at least 2 characters'}
    )
    trustPurpose = forms.CharField(
        min_length=10,
        error_messages={'min_length': 'Please provide more details about the trust purpose'}
    )
    consultationDate = forms.DateField()
    consultationTime = forms.ChoiceField(choices=CONSULTATION_TIMES)


class NewCompanyForm(forms.Form):
    companyName = forms.CharField()
    registrationNumber = forms.CharField()
    registrationDate = forms.DateField()
    numberOfDirectors = forms.IntegerField(min_value=1)
    directors = PeopleListField(
        required_keys=('fullName', 'surname', 'email', 'cellNumber', 'idOrPassport',
                       'countryOfOrigin', 'residentialAddress', 'postalAddress'),
        min_items=1
    )
    memorandumOfIncorporation = document_field()

    def clean(self):
        cleaned_data = super().clean()
        directors = cleaned_data.get('directors')
        expected = cleaned_data.get('numberOfDirectors') or self.data.get('numberOfDirectors')
        if directors and str(expected).isdigit() and len(directors) != int(expected):
            self.add_error('directors', f'Provide details for {expected} director(s)')
        return cleaned_data


class ChangeOfCompanyNameForm(RequiredWhenMixin, forms.Form):
    nameChangeType = forms.ChoiceField(choices=[('reserved', 'Reserved name'), ('new', 'New name')])
    reservedName = forms.CharField(required=False)
    reservationNumber = forms.CharField(required=False)
    newName = forms.CharField(required=False)
    contactInfo = forms.CharField()
    currentCompanyName = forms.CharField()
    desiredCompanyName = forms.CharField()
    natureOfBusiness = forms.CharField(
        min_length=10,
        error_messages={'min_length': 'Business description must be at least 10 characters'}
    )
    bankName = forms.CharField()
    accountNumber = forms.CharField()
    accountHolder = forms.CharField()
    registrationMethod = forms.ChoiceField(choices=[('cipc', 'CIPC number'), ('other', 'Other')])
    cipcRegistrationNumber = forms.CharField(required=False)
    otherRegistrationNumber = forms.CharField(required=False)
    companyRegistrationDocuments = document_field(required=False)

    required_when = {
        'reservedName': ('nameChangeType', 'reserved'),
        'reservationNumber': ('nameChangeType', 'reserved'),
        'newName': ('nameChangeType', 'new'),
        'cipcRegistrationNumber': ('registrationMethod', 'cipc'),
        'otherRegistrationNumber': ('registrationMethod', 'other'),
    }


class SocialDevelopmentForm(forms.Form):
    organizationName = forms.CharField()
    registrationMethod = forms.ChoiceField(choices=[('cipc', 'CIPC'), ('trust', 'Trust'), ('other', 'Other')])
    registrationNumber = forms.CharField()
    physicalAddress = forms.CharField()
    postalAddress = forms.CharField()
    contactPerson = forms.CharField()
    contactNumber = phone_field()
    email = forms.EmailField(error_messages={'invalid': 'Invalid email address'})
    organizationObjectives = forms.CharField()
    constitutionDocument = document_field()


class CsdProfileForm(RequiredWhenMixin, forms.Form):
    natureOfTrade = forms.CharField()
    descriptionOfServices = forms.CharField(
        min_length=10,
        error_messages={'min_length': 'Description must be at least 10 characters long'}
    )
    email = forms.EmailField(error_messages={'invalid': 'Invalid email address'})
    cellNumber = phone_field()
    otpDate = forms.DateField()
    otpTime = forms.ChoiceField(choices=CONSULTATION_TIMES)
    registrationMethod = forms.ChoiceField(choices=[('upload', 'Upload document'), ('number', 'CIPC number')])
    cipcRegistrationNumber = forms.CharField(required=False)
    cipcRegistrationDocument = document_field(required=False)
    bankAccountConfirmation = document_field()
    bbbeeAffidavit = document_field(required=False)
    cipcDocument = document_field()

    required_when = {'cipcRegistrationNumber': ('registrationMethod', 'number')}


class IncorporationForm(forms.Form):
    businessNameOptions = forms.JSONField()
    yearEnd = forms.CharField()
    numberOfShares = forms.IntegerField(min_value=100, max_value=1000)
    businessAddress = forms.CharField()
    postalAddress = forms.CharField()
    emailAddress = forms.EmailField(required=False)
    directorName = forms.CharField()
    directorSurname = forms.CharField()
    directorIdOrPassport = forms.CharField()
    directorDateOfBirth = forms.DateField()
    directorResidentialAddress = forms.CharField()
    directorPostalAddress = forms.CharField()
    directorContactNumber = phone_field()
    directorEmail = forms.EmailField()
    incorporationRules = forms.ChoiceField(choices=[('standard', 'Standard rules'), ('custom', 'Customised rules')])
    directorIdCopy = document_field()

    def clean_businessNameOptions(self):
        options = self.cleaned_data['businessNameOptions']
        if not isinstance(options, list) or len(options) != 5 \
                or not all(isinstance(o, str) and o.strip() for o in options):
            raise forms.ValidationError('Please provide 5 business name options')
        return [o.strip() for o in options]


class ChangeOfRegisteredAddressForm(forms.Form):
    companyName = forms.CharField(
        min_length=2,
        error_messages={'min_length': 'Company name must be at least 2 characters'}
    )
    registrationNumber = forms.CharField()
    currentAddress = forms.CharField()
    newAddress = forms.CharField()
    effectiveDate = forms.DateField()
    cipcDocument = document_field()


class IncorporationDocumentsForm(forms.Form):
    contactInfo = forms.CharField()
    cipcRegistrationNumber = forms.CharField()


DIRECTOR_KEYS = ('name', 'surname', 'email', 'idNumber', 'cellNumber', 'homeAddress', 'postalAddress')


class ChangeOfDirectorsForm(forms.Form):
    companyName = forms.CharField()
    registrationNumber = forms.CharField()
    newDirectorsCount = forms.IntegerField(min_value=1)
    resigningDirectorsCount = forms.IntegerField(min_value=0)
    newDirectors = PeopleListField(required_keys=DIRECTOR_KEYS, min_items=1)
    resigningDirectors = PeopleListField(required_keys=DIRECTOR_KEYS, required=False)
    cipcDocument = document_field(required=False)


class ObjectionAppealForm(RequiredWhenMixin, forms.Form):
    contactInfo = forms.CharField()
    description = forms.CharField(
        min_length=10,
        error_messages={'min_length': 'Description must be at least 10 characters long'}
    )
    registrationMethod = forms.ChoiceField(choices=REGISTRATION_METHODS)
    cipcNumber = forms.CharField(required=False)
    bookingPreference = forms.ChoiceField(choices=BOOKING_PREFERENCES)
    callDate = forms.DateField(required=False)
    callTime = optional_choice(CONSULTATION_TIMES)
    relevantDocuments = document_field(required=False)
    registrationDocument = document_field(required=False)

    required_when = {
        'cipcNumber': ('registrationMethod', 'cipcNumber'),
        'callDate': ('bookingPreference', 'scheduleCall'),
        'callTime': ('bookingPreference', 'scheduleCall'),
    }


class CompanyTaxReturnForm(RequiredWhenMixin, forms.Form):
    contactInfo = forms.CharField()
    sarsUsername = forms.CharField()
    sarsPassword = forms.CharField()
    registrationMethod = forms.ChoiceField(choices=REGISTRATION_METHODS)
    cipcNumber = forms.CharField(required=False)
    financialYear = forms.RegexField(regex=r'^\d{4}$', error_messages={'invalid': 'Invalid year'})
    companyStatus = forms.ChoiceField(choices=[('active', 'Active'), ('dormant', 'Dormant')])
    bookingPreference = forms.ChoiceField(choices=[('upload', 'Upload documents'), ('scheduleCall', 'Schedule a call')])
    callDate = forms.DateField(required=False)
    callTime = optional_choice(CONSULTATION_TIMES)
    callMethod = optional_choice([('phone', 'Phone'), ('video', 'Video'), ('whatsapp', 'WhatsApp')])
    registrationDocument = document_field(required=False)
    financialStatements = document_field(required=False)
    shareholderDeclaration = document_field(required=False)

    required_when = {
        'cipcNumber': ('registrationMethod', 'cipcNumber'),
        'callDate': ('bookingPreference', 'scheduleCall'),
        'callTime': ('bookingPreference', 'scheduleCall'),
        'callMethod': ('bookingPreference', 'scheduleCall'),
    }


class UifRegistrationForm(RequiredWhenMixin, forms.Form):
    directorName = forms.CharField()
    directorSurname = forms.CharField()
    directorIdNumber = id_number_field()
    directorCellNumber = phone_field()
    directorEmail = forms.EmailField(error_messages={'invalid': 'Invalid email address'})
    employeeName = forms.CharField()
    employeeSurname = forms.CharField()
    employeeIdNumber = id_number_field()
    employeeDateOfBirth = forms.DateField()
    employeeStartDate = forms.DateField()
    employeeGrossSalary = forms.CharField()
    employeeAddress = forms.CharField()
    registrationMethod = forms.ChoiceField(choices=REGISTRATION_METHODS)
    cipcNumber = forms.CharField(required=False)
    registrationDocument = document_field(required=False)

    required_when = {'cipcNumber': ('registrationMethod', 'cipcNumber')}


class PayeSdlRegistrationForm(RequiredWhenMixin, forms.Form):
    natureOfIndustry = forms.CharField()
    contactInfo = forms.CharField()
    registrationTypes = ChoiceListField(
        choices=[('PAYE', 'PAYE'), ('SDL', 'SDL'), ('UIF', 'UIF')],
        error_messages={'required': 'At least one registration type must be selected'}
    )
    desiredRegistrationDate = forms.DateField()
    sarsEfilingUsername = forms.CharField()
    sarsPassword = forms.CharField()
    exampleAttachment = forms.ChoiceField(choices=[('attach', 'Attach example'), ('doNotHave', 'I do not have one')])
    registrationMethod = forms.ChoiceField(choices=REGISTRATION_METHODS)
    cipcNumber = forms.CharField(required=False)
    otherRegistrationNumber = forms.CharField(required=False)
    exampleFile = document_field(required=False)
    registrationDocument = document_field(required=False)

    required_when = {'cipcNumber': ('registrationMethod', 'cipcNumber')}


class NpoExemptionForm(RequiredWhenMixin, forms.Form):
    contactInfo = forms.CharField()
    registrationMethod = forms.ChoiceField(choices=REGISTRATION_METHODS)
    cipcNumber = forms.CharField(required=False)
    bookingPreference = forms.ChoiceField(choices=BOOKING_PREFERENCES)
    callDate = forms.DateField(required=False)
    callTime = optional_choice(CONSULTATION_TIMES)
    registrationDocument = document_field(required=False)

    required_when = {
        'cipcNumber': ('registrationMethod', 'cipcNumber'),
        'callDate': ('bookingPreference', 'scheduleCall'),
        'callTime': ('bookingPreference', 'scheduleCall'),
    }


class CustomsRegistrationForm(RequiredWhenMixin, forms.Form):
    contactInfo = forms.CharField()
    registrationType = forms.ChoiceField(choices=[('import', 'Import'), ('export', 'Export'), ('other', 'Other')])
    sarsUsername = forms.CharField()
    sarsPassword = forms.CharField()
    registrationMethod = forms.ChoiceField(choices=REGISTRATION_METHODS)
    cipcNumber = forms.CharField(required=False)
    exampleAttachment = document_field(required=False)
    registrationDocument = document_field(required=False)

    required_when = {'cipcNumber': ('registrationMethod', 'cipcNumber')}


class RegisteredRepresentativeForm(RequiredWhenMixin, forms.Form):
    businessName = forms.CharField()
    businessRegistrationNumber = forms.CharField()
    representativeFullName = forms.CharField()
    representativeSurname = forms.CharField()
    representativeIdNumber = id_number_field()
    representativePosition = forms.ChoiceField(choices=[
        ('publicOfficer', 'Public officer'),
        ('memberDirector', 'Member or director'),
        ('accountingOffice', 'Accounting office'),
        ('executor', 'Executor'),
    ])
    dateOfAppointment = forms.DateField()
    remainingDirectorsOption = forms.ChoiceField(choices=[
        ('uploadCertificate', 'Upload certificate'),
        ('enterDetails', 'Enter details'),
    ])
    remainingDirectors = PeopleListField(required_keys=('fullName', 'surname', 'idNumber'), required=False)
    registrationDocuments = document_field(required=False)
    certificateCopy = document_field(required=False)

    required_when = {'remainingDirectors': ('remainingDirectorsOption', 'enterDetails')}


class FilingDefinition:

    def __init__(self, form_id, slug, title, product_id, form_class, steps, chatbot_subject=None):
        self.form_id = form_id
        self.slug = slug
        self.collection_name = slug
        self.title = title
        self.product_id = product_id
        self.form_class = form_class
        self.steps = steps
        self.chatbot_subject = chatbot_subject or title

        declared = set(form_class.base_fields)
        listed = [f for _, fields in steps for f in fields]
        if set(listed) != declared or len(listed) != len(declared):
            raise ValueError(f'Steps of {slug} must list every field of {form_class.__name__} exactly once')

    @property
    def step_names(self):
        return [name for name, _ in self.steps]

    @property
    def file_fields(self):
        return [name for name, field in self.form_class.base_fields.items() if isinstance(field, forms.FileField)]

    def fields_for_step(self, index):
        return list(self.steps[index][1])

    def build_form(self, data, files=None, only=None):
        form = self.form_class(data=data, files=files)
        if only is not None:
            form.fields = {name: field for name, field in form.fields.items() if name in only}
        return form

    def serialize(self):
        base_fields = self.form_class.base_fields
        return {
            'formId': self.form_id,
            'slug': self.slug,
            'title': self.title,
            'collectionName': self.collection_name,
            'productId': self.product_id,
            'steps': [
                {
                    'name': name,
                    'fields': [
                        {
                            'name': field_name,
                            'type': type(base_fields[field_name]).__name__.replace('Field', '').lower(),
                            'required': base_fields[field_name].required,
                            'choices': [c[0] for c in getattr(base_fields[field_name], 'choices', [])] or None,
                        }
                        for field_name in fields
                    ]
                }
                for name, fields in self.steps
            ]
        }


FILINGS = [
    FilingDefinition(
        form_id='1',
        slug='cipc-annual-return-filing',
        title='CIPC Annual Return Filing',
        product_id='1',
        form_class=CipcAnnualReturnForm,
        steps=[
            ('personalInfo', ['fullName', 'email', 'contactNumber']),
            ('businessInfo', ['priorAnnualReturn', 'annualTurnover', 'fileMoreReturns']),
            ('documents', ['file']),
        ],
    ),
    FilingDefinition(
        form_id='2',
        slug='coida-workmens-compensation-registration',
        title='COIDA Workmens Compensation Registration',
        product_id='2',
        form_class=CoidaRegistrationForm,
        steps=[
            ('personalInfo', ['fullName', 'email', 'contactNumber']),
            ('businessInfo', ['priorAnnualReturn', 'annualTurnover', 'fileMoreReturns']),
        ],
    ),
    FilingDefinition(
        form_id='3',
        slug='coida-workmens-compensation-return-of-earnings',
        title='COIDA Workmens Compensation Return Of Earnings',
        product_id='3',
        form_class=CoidaReturnOfEarningsForm,
        steps=[
            ('personalInfo', ['fullName', 'email', 'contactNumber']),
            ('consultation', ['consultationDate', 'consultationTime']),
        ],
    ),
    FilingDefinition(
        form_id='4',
        slug='bbbee-affidavits-eme-and-qse',
        title='BBBEE Affidavits - EME And QSE',
        product_id='4',
        form_class=BbbeeAffidavitForm,
        steps=[
            ('contactInfo', ['fullName', 'email', 'contactNumber', 'natureOfTrade']),
            ('directorDetails', ['directorName', 'directorSurname', 'directorIdNumber']),
            ('shareholding', ['numberOfShareholders', 'blackFemaleShareholding', 'blackMaleShareholding', 'otherShareholding']),
            ('companyRegistration', ['registrationMethod', 'cipcRegistrationNumber', 'companyRegistrationDocuments']),
        ],
    ),
    FilingDefinition(
        form_id='5',
        slug='formation-of-trust',
        title='Formation Of Trust',
        product_id='5',
        form_class=TrustFormationForm,
        steps=[
            ('contactInfo', ['fullName', 'email', 'contactNumber']),
            ('trustDetails', ['trustName', 'trustPurpose']),
            ('consultation', ['consultationDate', 'consultationTime']),
        ],
    ),
    FilingDefinition(
        form_id='6',
        slug='newly-registered-company-pty-ltd',
        title='Newly Registered Company Pty Ltd',
        product_id='6',
        form_class=NewCompanyForm,
        steps=[
            ('companyInformation', ['companyName', 'registrationNumber', 'registrationDate', 'numberOfDirectors']),
            ('directors', ['directors', 'memorandumOfIncorporation']),
        ],
    ),
    FilingDefinition(
        form_id='7',
        slug='change-of-company-name',
        title='Change Of Company Name',
        product_id='7',
        form_class=ChangeOfCompanyNameForm,
        steps=[
            ('nameChange', ['nameChangeType', 'reservedName', 'reservationNumber', 'newName',
                            'currentCompanyName', 'desiredCompanyName']),
            ('business', ['contactInfo', 'natureOfBusiness', 'bankName', 'accountNumber', 'accountHolder']),
            ('registration', ['registrationMethod', 'cipcRegistrationNumber', 'otherRegistrationNumber',
                              'companyRegistrationDocuments']),
        ],
    ),
    FilingDefinition(
        form_id='8',
        slug='department-of-social-development-registration',
        title='Department of Social Development Registration',
        product_id='8',
        form_class=SocialDevelopmentForm,
        steps=[
            ('organization', ['organizationName', 'registrationMethod', 'registrationNumber',
                              'physicalAddress', 'postalAddress']),
            ('contactDetails', ['contactPerson', 'contactNumber', 'email', 'organizationObjectives',
                                'constitutionDocument']),
        ],
    ),
    FilingDefinition(
        form_id='9',
        slug='csd-profile-registration',
        title='CSD Profile Registration',
        product_id='9',
        form_class=CsdProfileForm,
        steps=[
            ('business', ['natureOfTrade', 'descriptionOfServices']),
            ('otpBooking', ['email', 'cellNumber', 'otpDate', 'otpTime']),
            ('documents', ['registrationMethod', 'cipcRegistrationNumber', 'cipcRegistrationDocument',
                           'bankAccountConfirmation', 'bbbeeAffidavit', 'cipcDocument']),
        ],
    ),
    FilingDefinition(
        form_id='10',
        slug='formation-of-incorporation',
        title='Formation Of Incorporation',
        product_id='10',
        form_class=IncorporationForm,
        steps=[
            ('company', ['businessNameOptions', 'yearEnd', 'numberOfShares', 'businessAddress',
                         'postalAddress', 'emailAddress']),
            ('director', ['directorName', 'directorSurname', 'directorIdOrPassport', 'directorDateOfBirth',
                          'directorResidentialAddress', 'directorPostalAddress', 'directorContactNumber',
                          'directorEmail']),
            ('rules', ['incorporationRules', 'directorIdCopy']),
        ],
    ),
    FilingDefinition(
        form_id='11',
        slug='change-of-registered-address',
        title='Change Of Registered Address',
        product_id='11',
        form_class=ChangeOfRegisteredAddressForm,
        steps=[
            ('companyInformation', ['companyName', 'registrationNumber', 'currentAddress']),
            ('newAddress', ['newAddress', 'effectiveDate', 'cipcDocument']),
        ],
    ),
    FilingDefinition(
        form_id='12',
        slug='cipc-incorporation-documents-post-2012',
        title='CIPC Incorporation Documents - Post 2012',
        product_id='12',
        form_class=IncorporationDocumentsForm,
        steps=[
            ('details', ['contactInfo', 'cipcRegistrationNumber']),
        ],
    ),
    FilingDefinition(
        form_id='13',
        slug='change-of-directors-or-members',
        title='Change Of Directors or Members',
        product_id='13',
        form_class=ChangeOfDirectorsForm,
        steps=[
            ('companyInformation', ['companyName', 'registrationNumber', 'newDirectorsCount', 'resigningDirectorsCount']),
            ('directors', ['newDirectors', 'resigningDirectors', 'cipcDocument']),
        ],
    ),
    FilingDefinition(
        form_id='14',
        slug='sars-notice-of-objection-appeal',
        title='SARS Notice of Objection / Appeal',
        product_id='14',
        form_class=ObjectionAppealForm,
        steps=[
            ('objection', ['contactInfo', 'description']),
            ('registration', ['registrationMethod', 'cipcNumber']),
            ('booking', ['bookingPreference', 'callDate', 'callTime', 'relevantDocuments', 'registrationDocument']),
        ],
    ),
    FilingDefinition(
        form_id='15',
        slug='sars-company-cc-trust-tax-returns',
        title='SARS Company CC Trust Tax Returns',
        product_id='15',
        form_class=CompanyTaxReturnForm,
        steps=[
            ('sarsDetails', ['contactInfo', 'sarsUsername', 'sarsPassword']),
            ('company', ['registrationMethod', 'cipcNumber', 'financialYear', 'companyStatus']),
            ('booking', ['bookingPreference', 'callDate', 'callTime', 'callMethod',
                         'registrationDocument', 'financialStatements', 'shareholderDeclaration']),
        ],
    ),
    FilingDefinition(
        form_id='16',
        slug='department-of-labour-uif-registration',
        title='Department of Labour UIF Registration',
        product_id='16',
        form_class=UifRegistrationForm,
        steps=[
            ('director', ['directorName', 'directorSurname', 'directorIdNumber', 'directorCellNumber', 'directorEmail']),
            ('employee', ['employeeName', 'employeeSurname', 'employeeIdNumber', 'employeeDateOfBirth',
                          'employeeStartDate', 'employeeGrossSalary', 'employeeAddress']),
            ('registration', ['registrationMethod', 'cipcNumber', 'registrationDocument']),
        ],
    ),
    FilingDefinition(
        form_id='17',
        slug='sars-paye-sdl-registration',
        title='SARS PAYE SDL Registration',
        product_id='17',
        form_class=PayeSdlRegistrationForm,
        steps=[
            ('business', ['natureOfIndustry', 'contactInfo', 'registrationTypes', 'desiredRegistrationDate']),
            ('sarsCredentials', ['sarsEfilingUsername', 'sarsPassword']),
            ('documents', ['exampleAttachment', 'registrationMethod', 'cipcNumber', 'otherRegistrationNumber',
                           'exampleFile', 'registrationDocument']),
        ],
    ),
    FilingDefinition(
        form_id='18',
        slug='sars-non-profit-organization-income-tax-exemption',
        title='SARS Non-profit Organization Income Tax Exemption',
        product_id='18',
        form_class=NpoExemptionForm,
        steps=[
            ('registration', ['contactInfo', 'registrationMethod', 'cipcNumber']),
            ('booking', ['bookingPreference', 'callDate', 'callTime', 'registrationDocument']),
        ],
    ),
    FilingDefinition(
        form_id='19',
        slug='efiling-profile-registration',
        title='Efiling Profile Registration',
        product_id='19',
        form_class=EfilingProfileForm,
        steps=[
            ('personalDetails', ['contactInfo', 'fullNames', 'surname', 'idNumber']),
            ('contactDetails', ['cellNumber1', 'cellNumber2', 'cellNumber3', 'email1', 'email2', 'email3']),
            ('documents', ['idPassportCopy', 'photoWithId', 'proofOfAddress', 'bankConfirmationLetter']),
        ],
    ),
    FilingDefinition(
        form_id='20',
        slug='vat-registration',
        title='VAT Registration',
        product_id='20',
        form_class=VatRegistrationForm,
        steps=[
            ('sarsCredentials', ['sarsUsername', 'sarsPassword']),
            ('businessDetails', ['natureOfIndustry', 'turnoverOption', 'turnover', 'assessmentPeriod', 'assessmentTurnover']),
            ('documents', ['assessmentBankStatements', 'cipcDocument', 'proofOfBusinessAddress', 'customerInvoices', 'makeBooking']),
        ],
    ),
    FilingDefinition(
        form_id='21',
        slug='sars-customs-registration',
        title='SARS Customs Registration',
        product_id='21',
        form_class=CustomsRegistrationForm,
        steps=[
            ('details', ['contactInfo', 'registrationType']),
            ('sarsCredentials', ['sarsUsername', 'sarsPassword']),
            ('registration', ['registrationMethod', 'cipcNumber', 'exampleAttachment', 'registrationDocument']),
        ],
    ),
    FilingDefinition(
        form_id='22',
        slug='sars-registered-representative',
        title='SARS Registered Representative',
        product_id='22',
        form_class=RegisteredRepresentativeForm,
        steps=[
            ('business', ['businessName', 'businessRegistrationNumber']),
            ('representative', ['representativeFullName', 'representativeSurname', 'representativeIdNumber',
                                'representativePosition', 'dateOfAppointment']),
            ('directors', ['remainingDirectorsOption', 'remainingDirectors', 'registrationDocuments', 'certificateCopy']),
        ],
    ),
    FilingDefinition(
        form_id='23',
        slug='sars-personal-income-tax-returns',
        title='SARS Personal Income Tax Returns',
        product_id='23',
        form_class=PersonalIncomeTaxForm,
        steps=[
            ('contact', ['contactInfo', 'submissionMethod']),
            ('credentials', ['sarsUsername', 'sarsPassword']),
            ('documents', ['incomeTaxCertificates', 'expenseTaxCertificates', 'otherSupportingDocuments', 'agreeToContact']),
        ],
    ),
    FilingDefinition(
        form_id='25',
        slug='annual-financial-statements',
        title='Annual Financial Statements',
        product_id='25',
        form_class=AnnualFinancialStatementsForm,
        steps=[
            ('businessDetails', ['contactInfo', 'businessRegistrationNumber']),
            ('accounting', ['usesAccountingSoftware', 'accountingSoftwareName', 'hasPriorYearFinancialStatements']),
            ('booking', ['bookingDate', 'bookingTime', 'priorYearFinancialStatements']),
        ],
    ),
]

REGISTRY = {definition.slug: definition for definition in FILINGS}


def get_definition(slug):
    return REGISTRY.get(slug)


def list_definitions():
    return list(FILINGS)
