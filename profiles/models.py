"""Profiles app models.

Defines the Profile model that extends the base user with the customer's
display name, phone number and delivery block. Phone numbers are stored
normalized and double as the login identifier.
"""

from django.conf import settings
from django.db import models


class Profile(models.Model):
    """
    Profile for a single user.

    A profile is created at most once per user (OneToOne relationship).
    Its phone number is also part of the broadcast recipient set.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    name = models.CharField(max_length=150)
    phone = models.CharField(max_length=20, unique=True)
    block_number = models.CharField(max_length=50, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def role(self) -> str:
        return "admin" if self.user.is_staff else "user"

    def __str__(self):
        """Readable representation for admin and debugging."""
        return f"Profile<{self.user_id}:{self.phone}>"
