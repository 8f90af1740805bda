from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from users.filings.definitions import list_definitions
from users.helpers.response import APIResponse
from users.helpers.request import parse_json_body
from users.services.form_service import FormSubmissionService
from admins.helpers.require_admin import require_admin


@csrf_exempt
@require_http_methods(["GET"])
@require_admin
def list_forms(request):
    counts = FormSubmissionService.count_submissions()
    return APIResponse.success(data=[
        {
            'formId': d.form_id,
            'formType': d.slug,
            'title': d.title,
            'submissions': counts.get(d.slug, 0)
        }
        for d in list_definitions()
    ])


@csrf_exempt
@require_http_methods(["GET"])
@require_admin
def list_submissions(request):
    form_type = request.GET.get('formType')
    if not form_type:
        return APIResponse.missing_fields(['formType'])

    submissions = FormSubmissionService.list_submissions(form_type, status=request.GET.get('status'))
    return APIResponse.success(data=submissions)


@csrf_exempt
@require_http_methods(["PATCH"])
@require_admin
def update_submission_status(request, form_type, submission_id):
    data, error = parse_json_body(request)
    if error:
        return error

    if not data.get('status'):
        return APIResponse.missing_fields(['status'])

    status = FormSubmissionService.set_status(form_type, submission_id, data['status'])
    return APIResponse.success(data={'id': submission_id, 'status': status}, message='Submission updated')
