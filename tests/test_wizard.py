import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from users.filings.definitions import FILINGS, FilingDefinition, ContactDetailsForm, get_definition
from users.catalog import PRODUCTS
from users.filings.wizard import FilingWizard
from users.helpers.errors import ValidationFailed

PERSONAL = {'fullName': 'Jane Doe', 'email': 'jane@example.com', 'contactNumber': '0821234567'}
BUSINESS = {'priorAnnualReturn': 'yes', 'annualTurnover': '1000000', 'fileMoreReturns': 'no'}


def coida():
    return get_definition('coida-workmens-compensation-registration')


def test_every_filing_keeps_files_on_the_last_step():
    for definition in FILINGS:
        for index in range(len(definition.steps) - 1):
            assert not set(definition.fields_for_step(index)) & set(definition.file_fields), definition.slug


def test_steps_must_cover_the_form():
    with pytest.raises(ValueError):
        FilingDefinition('99', 'broken', 'Broken', '99', ContactDetailsForm, [('only', ['fullName'])])


def test_advance_only_validates_current_step():
    wizard = FilingWizard(coida())
    wizard.advance(PERSONAL)

    assert wizard.current_step == 1
    assert wizard.values['fullName'] == 'Jane Doe'
    assert 'annualTurnover' not in wizard.values


def test_failed_advance_changes_nothing():
    wizard = FilingWizard(coida())

    with pytest.raises(ValidationFailed) as exc:
        wizard.advance({**PERSONAL, 'contactNumber': '123'})

    assert 'contactNumber' in exc.value.errors
    assert wizard.current_step == 0
    assert wizard.values == {}


def test_advance_on_last_step_stays_there():
    wizard = FilingWizard(coida(), values=PERSONAL, current_step=1)
    wizard.advance(BUSINESS)

    assert wizard.current_step == 1
    assert wizard.is_last_step


def test_retreat_stops_at_first_step():
    wizard = FilingWizard(coida(), current_step=1)
    wizard.retreat()
    wizard.retreat()
    assert wizard.current_step == 0


def test_out_of_range_step_is_clamped():
    assert FilingWizard(coida(), current_step=7).current_step == 1
    assert FilingWizard(coida(), current_step=-2).current_step == 0


def test_submit_requires_last_step():
    wizard = FilingWizard(coida())
    with pytest.raises(ValidationFailed):
        wizard.validate_all({**PERSONAL, **BUSINESS})


def test_validate_all_rechecks_earlier_steps():
    wizard = FilingWizard(coida(), values={**PERSONAL, 'email': 'broken'}, current_step=1)
    with pytest.raises(ValidationFailed) as exc:
        wizard.validate_all(BUSINESS)
    assert 'email' in exc.value.errors


def test_package_adds_routing_fields():
    wizard = FilingWizard(coida(), values=PERSONAL, current_step=1)
    cleaned = wizard.validate_all(BUSINESS)
    fields, files = wizard.package(cleaned, 'jane@example.com')

    assert files == {}
    assert fields['collectionName'] == 'coida-workmens-compensation-registration'
    assert fields['formId'] == '2'
    assert fields['submittedBy'] == 'jane@example.com'
    assert fields['annualTurnover'] == '1000000'


def test_required_file_is_checked_at_submit():
    definition = get_definition('sars-personal-income-tax-returns')
    values = {'contactInfo': 'Jane', 'submissionMethod': 'appointment'}
    wizard = FilingWizard(definition, values=values, current_step=2)

    with pytest.raises(ValidationFailed) as exc:
        wizard.validate_all({})
    assert 'incomeTaxCertificates' in exc.value.errors

    pdf = SimpleUploadedFile('cert.pdf', b'%PDF-1.4', content_type='application/pdf')
    cleaned = wizard.validate_all(
        {},
        files={'incomeTaxCertificates': pdf},
        uploaded_keys={'expenseTaxCertificates': 'sars-personal-income-tax-returns/1-expenses.pdf'}
    )
    fields, files = wizard.package(cleaned, 'jane@example.com')

    assert files == {'incomeTaxCertificates': pdf}
    assert fields['expenseTaxCertificates'] == 'sars-personal-income-tax-returns/1-expenses.pdf'
    assert fields['agreeToContact'] == 'false'


def test_sars_credentials_required_for_that_method():
    definition = get_definition('sars-personal-income-tax-returns')
    wizard = FilingWizard(definition, values={'contactInfo': 'Jane', 'submissionMethod': 'sarsCredentials'}, current_step=1)

    with pytest.raises(ValidationFailed) as exc:
        wizard.advance({'sarsUsername': 'jane'})
    assert 'sarsPassword' in exc.value.errors


def test_rejects_unsupported_file_type():
    definition = get_definition('cipc-annual-return-filing')
    wizard = FilingWizard(definition, values={**PERSONAL, **BUSINESS}, current_step=2)
    exe = SimpleUploadedFile('tool.exe', b'MZ', content_type='application/x-msdownload')

    with pytest.raises(ValidationFailed) as exc:
        wizard.validate_all({}, files={'file': exe})
    assert 'file' in exc.value.errors


def test_every_service_product_has_a_filing():
    filings = {definition.product_id: definition for definition in FILINGS}

    assert set(filings) == {str(i) for i in range(1, 26)} - {'24'}
    for product_id, definition in filings.items():
        assert definition.title == PRODUCTS[product_id]['name']
        assert definition.form_id == product_id


def test_cipc_number_required_only_for_that_method():
    definition = get_definition('sars-notice-of-objection-appeal')
    wizard = FilingWizard(definition, values={'contactInfo': 'Jane', 'description': 'Assessment is wrong'}, current_step=1)

    with pytest.raises(ValidationFailed) as exc:
        wizard.advance({'registrationMethod': 'cipcNumber'})
    assert set(exc.value.errors) == {'cipcNumber'}

    wizard.advance({'registrationMethod': 'uploadDocument'})
    assert wizard.current_step == 2


def test_scheduled_call_needs_date_time_and_method():
    definition = get_definition('sars-company-cc-trust-tax-returns')
    values = {
        'contactInfo': 'Acme', 'sarsUsername': 'acme', 'sarsPassword': 'secret',
        'registrationMethod': 'uploadDocument', 'financialYear': '2024', 'companyStatus': 'active',
    }
    wizard = FilingWizard(definition, values=values, current_step=2)

    with pytest.raises(ValidationFailed) as exc:
        wizard.validate_all({'bookingPreference': 'scheduleCall'})
    assert set(exc.value.errors) == {'callDate', 'callTime', 'callMethod'}

    cleaned = wizard.validate_all({
        'bookingPreference': 'scheduleCall', 'callDate': '2024-07-01', 'callTime': '10:00', 'callMethod': 'video',
    })
    assert cleaned['callMethod'] == 'video'
    assert wizard.validate_all({'bookingPreference': 'upload'})['callDate'] is None


def test_financial_year_must_be_four_digits():
    wizard = FilingWizard(get_definition('sars-company-cc-trust-tax-returns'), current_step=1)
    with pytest.raises(ValidationFailed) as exc:
        wizard.advance({'registrationMethod': 'uploadDocument', 'financialYear': '24', 'companyStatus': 'active'})
    assert exc.value.errors['financialYear'] == 'Invalid year'


def test_registration_types_accept_lists_and_strings():
    definition = get_definition('sars-paye-sdl-registration')
    step = {'natureOfIndustry': 'Retail', 'contactInfo': 'Jane', 'desiredRegistrationDate': '2024-08-01'}

    wizard = FilingWizard(definition)
    wizard.advance({**step, 'registrationTypes': ['PAYE', 'UIF']})
    assert wizard.values['registrationTypes'] == ['PAYE', 'UIF']

    wizard = FilingWizard(definition)
    wizard.advance({**step, 'registrationTypes': 'PAYE, SDL'})
    assert wizard.values['registrationTypes'] == ['PAYE', 'SDL']

    for bad in ([], ['VAT']):
        with pytest.raises(ValidationFailed) as exc:
            FilingWizard(definition).advance({**step, 'registrationTypes': bad})
        assert 'registrationTypes' in exc.value.errors


def test_director_list_must_match_declared_count():
    definition = get_definition('newly-registered-company-pty-ltd')
    director = {
        'fullName': 'Ann', 'surname': 'Lee', 'email': 'ann@example.com', 'cellNumber': '0821234567',
        'idOrPassport': '9001015009087', 'countryOfOrigin': 'RSA',
        'residentialAddress': '1 Main Rd', 'postalAddress': 'PO Box 1',
    }
    values = {'companyName': 'Acme', 'registrationNumber': '2024/000001/07', 'registrationDate': '2024-01-10', 'numberOfDirectors': 2}
    wizard = FilingWizard(definition, values=values, current_step=1)
    moi = SimpleUploadedFile('moi.pdf', b'%PDF-1.4', content_type='application/pdf')

    with pytest.raises(ValidationFailed) as exc:
        wizard.validate_all({'directors': [director]}, files={'memorandumOfIncorporation': moi})
    assert 'directors' in exc.value.errors

    with pytest.raises(ValidationFailed) as exc:
        wizard.validate_all({'directors': [director, {**director, 'email': ''}]}, files={'memorandumOfIncorporation': moi})
    assert 'email' in exc.value.errors['directors']

    cleaned = wizard.validate_all({'directors': [director, director]}, files={'memorandumOfIncorporation': moi})
    fields, files = wizard.package(cleaned, 'jane@example.com')
    assert files == {'memorandumOfIncorporation': moi}
    assert fields['directors'].startswith('[{')


def test_incorporation_needs_five_name_options():
    wizard = FilingWizard(get_definition('formation-of-incorporation'))
    company = {'yearEnd': 'February', 'numberOfShares': 1000, 'businessAddress': '1 Main Rd', 'postalAddress': 'PO Box 1'}

    with pytest.raises(ValidationFailed) as exc:
        wizard.advance({**company, 'businessNameOptions': ['Acme', 'Acme Two']})
    assert 'businessNameOptions' in exc.value.errors

    wizard.advance({**company, 'businessNameOptions': '["A", "B", "C", "D", "E"]'})
    assert wizard.values['businessNameOptions'] == ['A', 'B', 'C', 'D', 'E']
