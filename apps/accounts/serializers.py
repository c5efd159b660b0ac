import re
from urllib.parse import urlparse

from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from .models import SOCIAL_PLATFORMS

User = get_user_model()

PASSWORD_REGEX = re.compile(r"^(?=.*\d)(?=.*[a-z])(?=.*[A-Z]).{6,20}$")
PASSWORD_HELP = _(
    "Password should be 6 to 20 characters long with a numeric, "
    "1 lowercase and 1 uppercase letters"
)


def validate_password_rules(value):
    if not PASSWORD_REGEX.match(value):
        raise serializers.ValidationError(PASSWORD_HELP)
    return value


class UserPayloadSerializer(serializers.ModelSerializer):
    """Session payload returned by every auth endpoint."""

    _id = serializers.IntegerField(source="id", read_only=True)
    joinedAt = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = User
        fields = [
            "_id",
            "fullname",
            "username",
            "email",
            "profile_img",
            "role",
            "bio",
            "social_links",
            "joinedAt",
        ]
        read_only_fields = fields


class PersonalInfoSerializer(serializers.ModelSerializer):
    """Author/commenter summary nested under ``personal_info``."""

    class Meta:
        model = User
        fields = ["fullname", "username", "profile_img"]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source="id", read_only=True)
    personal_info = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["_id", "personal_info"]

    def get_personal_info(self, obj):
        return PersonalInfoSerializer(obj).data


class PublicProfileSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source="id", read_only=True)
    personal_info = serializers.SerializerMethodField()
    account_info = serializers.SerializerMethodField()
    joinedAt = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = User
        fields = ["_id", "personal_info", "account_info", "social_links", "joinedAt"]

    def get_personal_info(self, obj):
        return {
            "fullname": obj.fullname,
            "username": obj.username,
            "bio": obj.bio,
            "profile_img": obj.profile_img,
        }

    def get_account_info(self, obj):
        return {"total_posts": obj.total_posts, "total_reads": obj.total_reads}


class SignupSerializer(serializers.Serializer):
    fullname = serializers.CharField(
        min_length=3,
        max_length=150,
        error_messages={"min_length": _("Fullname must be at least 3 letters long")},
    )
    email = serializers.EmailField(
        error_messages={"invalid": _("Email is invalid")},
    )
    password = serializers.CharField(write_only=True, max_length=128)

    def validate_email(self, value):
        return value.strip().lower()

    def validate_password(self, value):
        return validate_password_rules(value)


class SigninSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, max_length=128)

    def validate_email(self, value):
        return value.strip().lower()


class GoogleAuthSerializer(serializers.Serializer):
    access_token = serializers.CharField(
        help_text=_("Firebase ID token from the Google sign-in popup")
    )


class ChangePasswordSerializer(serializers.Serializer):
    currentPassword = serializers.CharField(write_only=True)
    newPassword = serializers.CharField(write_only=True)

    def validate_newPassword(self, value):
        return validate_password_rules(value)


class ChangeEmailSerializer(serializers.Serializer):
    newEmail = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate_newEmail(self, value):
        return value.strip().lower()


class SocialLinksField(serializers.DictField):
    """
    Social profile links keyed by platform.

    Every non-empty link must be an http(s) URL; platform links must point at
    a host containing the platform name.
    """

    child = serializers.CharField(allow_blank=True, max_length=500)

    def to_internal_value(self, data):
        links = super().to_internal_value(data)
        cleaned = {}
        for platform in SOCIAL_PLATFORMS:
            value = (links.get(platform) or "").strip()
            if value:
                parsed = urlparse(value)
                host = (parsed.hostname or "").lower()
                if parsed.scheme not in ("http", "https") or not host:
                    raise serializers.ValidationError(
                        f"{platform} link is invalid. You must enter a full link"
                    )
                if platform != "website" and platform not in host:
                    raise serializers.ValidationError(
                        f"{platform} link is invalid. You must enter a full link"
                    )
            cleaned[platform] = value
        return cleaned


class UpdateProfileSerializer(serializers.Serializer):
    username = serializers.CharField(
        min_length=3,
        max_length=150,
        error_messages={"min_length": _("Username should be at least 3 letters long")},
    )
    bio = serializers.CharField(
        max_length=150,
        allow_blank=True,
        required=False,
        default="",
        error_messages={"max_length": _("Bio should not be more than 150 characters")},
    )
    social_links = SocialLinksField(required=False)

    def validate_username(self, value):
        value = value.strip()
        if not re.match(r"^[\w.@+-]+$", value):
            raise serializers.ValidationError(
                _("Username may only contain letters, digits and @/./+/-/_")
            )
        return value


class UpdateProfileImgSerializer(serializers.Serializer):
    url = serializers.URLField(max_length=500)
