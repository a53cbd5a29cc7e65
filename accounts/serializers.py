"""
Serializers for user authentication.
"""
from rest_framework import serializers
from django.contrib.auth import authenticate

from sitegenie.exceptions import AuthError
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Serializer for User model."""
    user_id = serializers.UUIDField(source='id', read_only=True)

    class Meta:
        model = User
        fields = ('user_id', 'email', 'first_name', 'last_name', 'created_at', 'last_login')
        read_only_fields = ('user_id', 'email', 'created_at', 'last_login')


class LoginSerializer(serializers.Serializer):
    """Serializer for login requests."""
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate(self, attrs):
        user = authenticate(username=attrs['email'].lower(), password=attrs['password'])
        if not user or not user.is_active:
            raise AuthError('Invalid credentials')
        attrs['user'] = user
        return attrs


class RegisterSerializer(serializers.Serializer):
    """Serializer for user registration. Duplicate emails are rejected by the view with 409."""
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'}, min_length=8)
    first_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    last_name = serializers.CharField(required=False, allow_blank=True, max_length=150)

    def create(self, validated_data):
        email = validated_data['email'].lower()
        # Use email as username for compatibility with USERNAME_FIELD = 'email'
        return User.objects.create_user(
            username=email,
            email=email,
            password=validated_data['password'],
            first_name=validated_data.get('first_name', '').strip(),
            last_name=validated_data.get('last_name', '').strip(),
        )


class ProfileUpdateSerializer(serializers.Serializer):
    first_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    last_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    password = serializers.CharField(required=False, write_only=True, min_length=8)

    def update(self, instance, validated_data):
        for field in ('first_name', 'last_name'):
            if field in validated_data:
                setattr(instance, field, validated_data[field].strip())
        if validated_data.get('password'):
            instance.set_password(validated_data['password'])
        instance.save()
        return instance
