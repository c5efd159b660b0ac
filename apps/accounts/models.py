from django.conf import settings
from django.contrib.auth.models import AbstractUser, UserManager as BaseUserManager
from django.core.validators import MinLengthValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

SOCIAL_PLATFORMS = ("youtube", "instagram", "facebook", "twitter", "github", "website")


def default_social_links():
    return {platform: "" for platform in SOCIAL_PLATFORMS}


class UserManager(BaseUserManager):
    """Manager that gives superusers the superadmin role."""

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("role", User.Role.SUPERADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class User(AbstractUser):
    """
    Blog platform user.

    Personal info (fullname, username, email, bio, profile_img), account
    counters (total_posts, total_reads), social links and the site role.
    """

    class Role(models.TextChoices):
        USER = "user", _("User")
        ADMIN = "admin", _("Admin")
        SUPERADMIN = "superadmin", _("Superadmin")

    fullname = models.CharField(
        _("full name"),
        max_length=150,
        validators=[MinLengthValidator(3)],
    )
    email = models.EmailField(
        _("email address"),
        unique=True,
        error_messages={"unique": _("A user with that email already exists.")},
    )
    bio = models.CharField(
        _("biography"),
        max_length=150,
        blank=True,
        default="",
    )
    profile_img = models.URLField(
        _("profile image"),
        max_length=500,
        blank=True,
        default="",
    )
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.USER,
        db_index=True,
    )
    google_auth = models.BooleanField(
        _("google account"),
        default=False,
        help_text=_("Account was created through Google sign-in."),
    )
    total_posts = models.PositiveIntegerField(default=0)
    total_reads = models.PositiveIntegerField(default=0)
    social_links = models.JSONField(default=default_social_links, blank=True)

    objects = UserManager()

    class Meta:
        verbose_name = _("user")
        verbose_name_plural = _("users")
        ordering = ["-date_joined"]

    def __str__(self):
        return self.username

    def save(self, *args, **kwargs):
        """Store email lowercase and fill in the generated avatar."""
        if self.email:
            self.email = self.email.lower()
        if not self.profile_img:
            self.profile_img = settings.DEFAULT_PROFILE_IMG_URL.format(
                seed=self.username
            )
        super().save(*args, **kwargs)

    @property
    def is_admin_role(self):
        return self.role in (self.Role.ADMIN, self.Role.SUPERADMIN)

    @property
    def is_superadmin(self):
        return self.role == self.Role.SUPERADMIN
