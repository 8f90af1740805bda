from django.urls import path
from .views import ticket_views, bot_response_views, submission_views, user_views, storage_views

app_name = 'admins'

urlpatterns = [
    path('chatlogs', ticket_views.chat_logs, name='chat_logs'),
    path('reply', ticket_views.reply, name='reply'),
    path('update-ticket-status', ticket_views.update_ticket_status, name='update_ticket_status'),

    path('bot-responses', bot_response_views.bot_responses, name='bot_responses'),
    path('bot-responses/<int:bot_response_id>', bot_response_views.bot_response_detail, name='bot_response_detail'),

    path('forms', submission_views.list_forms, name='list_forms'),
    path('submissions', submission_views.list_submissions, name='list_submissions'),
    path('submissions/<slug:form_type>/<str:submission_id>/status', submission_views.update_submission_status, name='update_submission_status'),

    path('users', user_views.list_users, name='list_users'),
    path('users/<int:user_id>', user_views.update_user, name='update_user'),
    path('users/<int:user_id>/pf-data', user_views.update_pf_data, name='update_pf_data'),

    path('s3/files', storage_views.list_files, name='list_files'),
    path('s3/file', storage_views.fetch_file, name='fetch_file'),
]
