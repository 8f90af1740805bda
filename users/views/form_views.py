from django.core.exceptions import ValidationError
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from users.filings.definitions import get_definition, list_definitions, validate_upload
from users.filings.wizard import FilingWizard
from users.helpers.errors import UpstreamFailure
from users.helpers.request import parse_json_body
from users.helpers.require_login import user_required
from users.helpers.response import APIResponse
from users.services.form_service import FormDraftService, FormSubmissionService

CONTROL_FIELDS = ('collectionName', 'formId', 'submittedBy')


def load_wizard(user, definition):
    current_step, values = FormDraftService.load(user, definition.slug)
    return FilingWizard(definition, values=values, current_step=current_step)


@csrf_exempt
@require_http_methods(["GET"])
@user_required
def list_forms(request):
    return APIResponse.success(data=[d.serialize() for d in list_definitions()])


@csrf_exempt
@require_http_methods(["GET"])
@user_required
def form_detail(request, slug):
    definition = get_definition(slug)
    if definition is None:
        return APIResponse.not_found(message='Form not found')

    wizard = load_wizard(request.user, definition)
    return APIResponse.success(data={'form': definition.serialize(), 'state': wizard.state()})


@csrf_exempt
@require_http_methods(["POST"])
@user_required
def advance(request, slug):
    definition = get_definition(slug)
    if definition is None:
        return APIResponse.not_found(message='Form not found')

    data, error = parse_json_body(request)
    if error:
        return error

    wizard = load_wizard(request.user, definition)
    wizard.advance(data)
    FormDraftService.save(request.user, wizard)
    return APIResponse.success(data=wizard.state(), message='Step saved')


@csrf_exempt
@require_http_methods(["POST"])
@user_required
def retreat(request, slug):
    definition = get_definition(slug)
    if definition is None:
        return APIResponse.not_found(message='Form not found')

    wizard = load_wizard(request.user, definition)
    wizard.retreat()
    FormDraftService.save(request.user, wizard)
    return APIResponse.success(data=wizard.state())


@csrf_exempt
@require_http_methods(["DELETE"])
@user_required
def discard_draft(request, slug):
    if get_definition(slug) is None:
        return APIResponse.not_found(message='Form not found')

    FormDraftService.discard(request.user, slug)
    return APIResponse.success(message='Draft discarded')


@csrf_exempt
@require_http_methods(["POST"])
@user_required
def submit(request, slug):
    """Multipart submit of the final step; earlier steps come from the saved draft.

    A file field may carry the storage key of a file already uploaded through
    /api/uploads/sign instead of the file itself.
    """
    definition = get_definition(slug)
    if definition is None:
        return APIResponse.not_found(message='Form not found')

    files = {name: request.FILES[name] for name in definition.file_fields if name in request.FILES}
    uploaded_keys = {
        name: request.POST[name] for name in definition.file_fields
        if name not in files and request.POST.get(name)
    }
    data = {k: v for k, v in request.POST.items() if k not in uploaded_keys and k not in CONTROL_FIELDS}

    wizard = load_wizard(request.user, definition)
    cleaned = wizard.validate_all(data, files, uploaded_keys)
    fields, upload_files = wizard.package(cleaned, request.user.email)

    result = FormSubmissionService.submit(request.user, definition, fields, upload_files, uploaded_keys)

    try:
        FormDraftService.discard(request.user, slug)
    except UpstreamFailure:
        result['warnings'].append('Saved progress could not be cleared')

    return APIResponse.created(data=result, message='Form submitted successfully')


@csrf_exempt
@require_http_methods(["POST"])
@user_required
def submit_form(request):
    """Direct multipart submission of an already packaged filing.

    Requires ``formId`` and ``collectionName``; ``key[0]`` style fields become
    lists and JSON-looking values are parsed.
    """
    missing = [f for f in ('formId', 'collectionName') if not request.POST.get(f)]
    if missing:
        return APIResponse.missing_fields(missing)

    definition = get_definition(request.POST['collectionName'])
    if definition is None or definition.form_id != request.POST['formId']:
        return APIResponse.validation_error(
            errors={'collectionName': 'Unknown form'},
            message='Unknown form'
        )

    files = {}
    for name in request.FILES:
        upload = request.FILES[name]
        try:
            validate_upload(upload)
        except ValidationError as e:
            return APIResponse.validation_error(errors={name: ' '.join(e.messages)})
        files[name] = upload

    fields = request.POST.dict()
    fields['submittedBy'] = request.user.email

    result = FormSubmissionService.submit(request.user, definition, fields, files)
    return APIResponse.created(data=result, message='Form submitted successfully')


@csrf_exempt
@require_http_methods(["GET"])
@user_required
def my_submissions(request):
    return APIResponse.success(data=FormSubmissionService.list_user_submissions(request.user))
