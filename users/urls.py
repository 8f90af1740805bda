from django.urls import path
from .views import (
    auth_views, ticket_views, chatbot_views, form_views, upload_views, catalog_views,
    cart_views, checkout_views, profile_views, contact_views
)


app_name = 'users'

urlpatterns = [
    path('auth/register', auth_views.register, name='register'),
    path('auth/confirm', auth_views.confirm_email, name='confirm_email'),
    path('auth/login', auth_views.login, name='login'),
    path('auth/logout', auth_views.logout, name='logout'),
    path('auth/refresh', auth_views.refresh_token, name='refresh_token'),
    path('auth/me', auth_views.me, name='me'),
    path('auth/forgot-password', auth_views.forgot_password, name='forgot_password'),
    path('auth/reset-password', auth_views.reset_password, name='reset_password'),

    path('tickets', ticket_views.tickets, name='tickets'),
    path('tickets/<int:ticket_id>', ticket_views.ticket_detail, name='ticket_detail'),
    path('tickets/<int:ticket_id>/status', ticket_views.ticket_status, name='ticket_status'),
    path('notifications', ticket_views.notifications, name='notifications'),

    path('chatbot/messages', chatbot_views.messages, name='chatbot_messages'),
    path('chatbot/tickets', chatbot_views.tickets, name='chatbot_tickets'),

    path('forms', form_views.list_forms, name='list_forms'),
    path('forms/submissions', form_views.my_submissions, name='my_submissions'),
    path('forms/submit', form_views.submit_form, name='submit_form'),
    path('forms/<slug:slug>', form_views.form_detail, name='form_detail'),
    path('forms/<slug:slug>/advance', form_views.advance, name='form_advance'),
    path('forms/<slug:slug>/retreat', form_views.retreat, name='form_retreat'),
    path('forms/<slug:slug>/draft', form_views.discard_draft, name='form_discard_draft'),
    path('forms/<slug:slug>/submit', form_views.submit, name='form_submit'),

    path('uploads/sign', upload_views.sign_upload, name='sign_upload'),
    path('profile/image', upload_views.profile_image, name='profile_image'),

    path('profile/update', profile_views.update_profile, name='update_profile'),
    path('profile/pf-data', profile_views.pf_data, name='pf_data'),
    path('profile/pf-data/count', profile_views.pf_data_count, name='pf_data_count'),
    path('profile/pf-data/remove', profile_views.remove_pf_item, name='remove_pf_item'),
    path('profile/services', profile_views.purchased_services, name='purchased_services'),

    path('products', catalog_views.list_products, name='list_products'),
    path('products/<str:product_id>', catalog_views.get_product, name='get_product'),

    path('cart/summary', cart_views.get_cart_summary, name='cart_summary'),
    path('checkout', checkout_views.checkout, name='checkout'),
    path('payments/notify', checkout_views.payment_notify, name='payment_notify'),

    path('contact', contact_views.contact, name='contact'),
    path('newsletter', contact_views.newsletter, name='newsletter'),
]
