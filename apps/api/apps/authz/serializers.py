"""
Authz serializers: registration and current-user profile.
"""
import re

from rest_framework import serializers
from apps.authz.models import User, EmissorInfo, RoleChoices


def normalize_cpf(value):
    return re.sub(r'\D', '', value or '')


class EmissorInfoSerializer(serializers.ModelSerializer):
    class Meta:
        model = EmissorInfo
        fields = ['clinic_name', 'cnpj', 'address', 'contact']


class UserProfileSerializer(serializers.ModelSerializer):
    """GET/PATCH /api/v1/me/"""
    emissor_info = EmissorInfoSerializer(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'cpf', 'phone', 'role', 'emissor_info', 'created_at']
        read_only_fields = ['id', 'email', 'cpf', 'role', 'emissor_info', 'created_at']


class AdminUserSerializer(serializers.ModelSerializer):
    """Row of the ADMIN user listing."""
    emissor_info = EmissorInfoSerializer(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'cpf', 'name', 'role', 'is_active', 'emissor_info', 'created_at']
        read_only_fields = fields


class RegisterSerializer(serializers.ModelSerializer):
    """
    Self-service sign-up.

    Only RECEPTOR accounts can register; EMISSOR accounts are provisioned
    by administrators. CPF is optional; when given it must have 11 digits
    and be unused.
    """
    password = serializers.CharField(write_only=True, min_length=8)
    cpf = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    role = serializers.ChoiceField(choices=RoleChoices.choices, default=RoleChoices.RECEPTOR)

    class Meta:
        model = User
        fields = ['id', 'email', 'password', 'name', 'cpf', 'phone', 'role']
        read_only_fields = ['id']
        extra_kwargs = {'email': {'validators': []}}

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('Usuário já existe')
        return value

    def validate_cpf(self, value):
        digits = normalize_cpf(value)
        if not digits:
            return None
        if len(digits) != 11:
            raise serializers.ValidationError('CPF deve ter 11 dígitos')
        if User.objects.filter(cpf=digits).exists():
            raise serializers.ValidationError('CPF já cadastrado')
        return digits

    def create(self, validated_data):
        validated_data.pop('role', None)
        password = validated_data.pop('password')
        return User.objects.create_user(
            password=password,
            role=RoleChoices.RECEPTOR,
            **validated_data
        )
