from django.contrib import admin
from unfold.admin import ModelAdmin
from .models import User, Session, Ticket, BotResponse, ContactSubmission, NewsletterSubscriber, PaymentNotification


@admin.register(User)
class UserAdmin(ModelAdmin):
    list_display = ('email', 'name', 'role', 'email_verified', 'created_at')
    list_filter = ('role', 'email_verified')
    search_fields = ('email', 'name')
    exclude = ('password', 'confirmation_token', 'reset_token')
    readonly_fields = ('created_at', 'updated_at', 'last_login_at')


@admin.register(Session)
class SessionAdmin(ModelAdmin):
    list_display = ('user_id', 'ip_address', 'user_agent', 'last_activity')


@admin.register(Ticket)
class TicketAdmin(ModelAdmin):
    list_display = ('number', 'subject', 'user', 'status', 'updated_at')
    list_filter = ('status',)
    search_fields = ('number', 'subject', 'user__email')
    readonly_fields = ('number', 'created_at', 'updated_at')


@admin.register(BotResponse)
class BotResponseAdmin(ModelAdmin):
    list_display = ('trigger', 'updated_at')
    search_fields = ('trigger', 'response')


@admin.register(ContactSubmission)
class ContactSubmissionAdmin(ModelAdmin):
    list_display = ('email', 'first_name', 'last_name', 'country', 'created_at')
    list_filter = ('country',)
    search_fields = ('email', 'company')


@admin.register(NewsletterSubscriber)
class NewsletterSubscriberAdmin(ModelAdmin):
    list_display = ('email', 'subscribed_at')
    search_fields = ('email',)


@admin.register(PaymentNotification)
class PaymentNotificationAdmin(ModelAdmin):
    list_display = ('m_payment_id', 'email', 'amount', 'payment_status', 'created_at')
    search_fields = ('m_payment_id', 'pf_payment_id', 'email')
    readonly_fields = ('payload', 'item_names', 'created_at')
