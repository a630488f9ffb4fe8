from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'phone',
            'role',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields


class FarmerIdentitySerializer(serializers.ModelSerializer):
    """Minimal farmer identity for nesting in collections and payments."""

    class Meta:
        model = User
        fields = ['id', 'name', 'email']
        read_only_fields = fields


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )
