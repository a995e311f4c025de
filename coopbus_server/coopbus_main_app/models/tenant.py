"""Tenant and user-profile models"""
import uuid

from django.db import models
from django.contrib.auth.models import User

from ..utils.constants import UserRole, AccountStatus


class Cooperative(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=150)
    ruc = models.CharField(max_length=20, unique=True)
    contact_email = models.EmailField(null=True, blank=True)
    contact_phone = models.CharField(max_length=20, null=True, blank=True)
    config = models.JSONField(default=dict, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


class Profile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE)
    cooperative = models.ForeignKey(Cooperative, on_delete=models.PROTECT, null=True, blank=True, related_name='members')
    role = models.CharField(max_length=20, choices=UserRole.CHOICES, default=UserRole.CLIENT)
    status = models.CharField(max_length=10, choices=AccountStatus.CHOICES, default=AccountStatus.ACTIVE)
    id_number = models.CharField(max_length=20, null=True, blank=True)
    phone = models.CharField(max_length=20, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['cooperative', 'role', 'status'], name='profile_coop_role_status_idx'),
        ]

    def __str__(self):
        return f"{self.user.username} ({self.role})"

    @property
    def is_super_admin(self):
        return self.role == UserRole.SUPER_ADMIN
