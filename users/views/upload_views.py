import os
import uuid
from django.conf import settings
from django.http import HttpResponseRedirect
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from users.filings.definitions import ACCEPTED_FILE_TYPES, get_definition
from users.helpers.request import parse_json_body
from users.helpers.require_login import user_required
from users.helpers.response import APIResponse
from users.services.storage_service import ObjectStorage, get_storage

IMAGE_TYPES = {'image/jpeg': 'jpg', 'image/png': 'png', 'image/webp': 'webp', 'image/gif': 'gif'}


@csrf_exempt
@require_http_methods(["POST"])
@user_required
def sign_upload(request):
    """{"filename", "content_type", "size", "collection"?} -> pre-signed POST for the browser."""
    data, error = parse_json_body(request)
    if error:
        return error

    missing = [f for f in ('filename', 'content_type', 'size') if data.get(f) in (None, '')]
    if missing:
        return APIResponse.missing_fields(missing)

    # size first: oversized requests never reach storage
    ObjectStorage.check_size(data['size'])

    content_type = data['content_type']
    if content_type not in ACCEPTED_FILE_TYPES:
        return APIResponse.validation_error(errors={'content_type': 'Only PDF, JPEG and PNG files are accepted'})

    if not ObjectStorage.safe_filename(data['filename']):
        return APIResponse.validation_error(errors={'filename': 'Invalid filename'})

    collection = data.get('collection') or 'uploads'
    if collection != 'uploads' and get_definition(collection) is None:
        return APIResponse.validation_error(errors={'collection': 'Unknown form'})

    key = ObjectStorage.build_key(f'{collection}/{request.user.id}', data['filename'])
    return APIResponse.success(data=get_storage().presign_upload(key, content_type, data['size']))


@csrf_exempt
@require_http_methods(["GET", "POST"])
@user_required
def profile_image(request):
    user = request.user

    if request.method == 'GET':
        if not user.image:
            return APIResponse.not_found(message='No profile image')
        if user.image.startswith(('http://', 'https://')):
            return HttpResponseRedirect(user.image)
        return HttpResponseRedirect(get_storage().presign_download(user.image))

    upload = request.FILES.get('image')
    if upload is None:
        return APIResponse.missing_fields(['image'])

    ObjectStorage.check_size(upload.size)
    if upload.content_type not in IMAGE_TYPES:
        return APIResponse.validation_error(errors={'image': 'Only JPEG, PNG, WebP and GIF images are accepted'})

    extension = os.path.splitext(upload.name)[1].lstrip('.').lower()
    if not extension.isalnum():
        extension = IMAGE_TYPES[upload.content_type]
    key = f"user/user-profile/{user.id}/{uuid.uuid4()}.{extension}"
    get_storage().upload(upload, key, upload.content_type)

    user.image = key
    user.save(update_fields=['image', 'updated_at'])

    return APIResponse.success(
        data={'key': key, 'url': get_storage().presign_download(key, settings.DOWNLOAD_URL_EXPIRES)},
        message='Profile image updated'
    )
