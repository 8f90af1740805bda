from django.db import models


def default_pf_data():
    return {'item_name': []}


class User(models.Model):
    class RoleChoices(models.TextChoices):
        USER = "user", "User"
        ADMIN = "admin", "Admin"

    name = models.CharField(max_length=120)
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=128)

    role = models.CharField(
        max_length=10,
        choices=RoleChoices.choices,
        default=RoleChoices.USER
    )

    # {"item_name": [{"name": "<product id>", "timestamp": "<iso>"}], "adminChanges": [...]}
    pf_data = models.JSONField(default=default_pf_data, blank=True)

    email_verified = models.BooleanField(default=False)
    confirmation_token = models.CharField(max_length=64, blank=True, null=True)
    confirmation_token_expiry = models.DateTimeField(blank=True, null=True)
    reset_token = models.CharField(max_length=64, blank=True, null=True)
    reset_token_expiry = models.DateTimeField(blank=True, null=True)

    # external provider URL or an object-storage key
    image = models.CharField(max_length=500, blank=True, default='')

    last_login_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} <{self.email}>"


class Session(models.Model):
    user_id = models.ForeignKey(User, on_delete=models.CASCADE, null=True, blank=True)
    ip_address = models.CharField(max_length=45)
    user_agent = models.CharField(max_length=30, null=True, blank=True, default='Unknown')
    payload = models.CharField(max_length=20, null=True, blank=True)
    last_activity = models.DateTimeField(auto_now_add=True)


class Ticket(models.Model):
    class TicketStatus(models.TextChoices):
        OPEN = "Open", "Open"
        IN_PROGRESS = "InProgress", "In progress"
        CLOSED = "Closed", "Closed"

    number = models.CharField(max_length=12, unique=True)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='tickets')
    subject = models.CharField(max_length=255)
    status = models.CharField(
        max_length=12,
        choices=TicketStatus.choices,
        default=TicketStatus.OPEN
    )
    # [{"id", "text", "sender", "created_at"}]
    messages = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='users_ticket_user_status_idx'),
        ]

    def __str__(self):
        return f"#{self.number} {self.subject}"


class BotResponse(models.Model):
    trigger = models.CharField(max_length=255)
    response = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['trigger']

    def __str__(self):
        return self.trigger


class ContactSubmission(models.Model):
    class Country(models.TextChoices):
        RSA = "RSA", "South Africa"
        EU = "EU", "Europe"
        US = "US", "United States"

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    company = models.CharField(max_length=150, blank=True, default='')
    email = models.EmailField()
    phone = models.CharField(max_length=30)
    country = models.CharField(max_length=3, choices=Country.choices)
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']


class NewsletterSubscriber(models.Model):
    email = models.EmailField(unique=True)
    subscribed_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.email


class PaymentNotification(models.Model):
    m_payment_id = models.CharField(max_length=64, unique=True)
    pf_payment_id = models.CharField(max_length=64, blank=True, default='')
    email = models.EmailField()
    amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    payment_status = models.CharField(max_length=20, blank=True, default='')
    item_names = models.JSONField(default=list)
    payload = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.m_payment_id
