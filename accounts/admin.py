"""
Admin configuration for accounts app
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import UserCreationForm, ReadOnlyPasswordHashField
from django import forms
from .models import User


class UserAdminForm(forms.ModelForm):
    """
    Change form with proper password handling.
    Password is read-only (hash display only). Use "Change password" link to set new password.
    """
    password = ReadOnlyPasswordHashField(label='Password')

    class Meta:
        model = User
        fields = '__all__'


class UserAddForm(UserCreationForm):

    class Meta(UserCreationForm.Meta):
        model = User
        fields = ('email', 'full_name', 'role', 'phone')


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Custom User Admin"""
    form = UserAdminForm
    add_form = UserAddForm
    list_display = ['email', 'full_name', 'role', 'is_active', 'is_staff', 'date_joined']
    list_filter = ['role', 'is_active', 'is_staff', 'is_superuser', 'date_joined']
    search_fields = ['email', 'full_name']
    ordering = ['-date_joined']

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Personal Info', {'fields': ('full_name', 'role', 'phone')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Important dates', {'fields': ('last_login', 'date_joined', 'updated_at')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'full_name', 'role', 'phone', 'password1', 'password2', 'is_active', 'is_staff'),
        }),
    )

    readonly_fields = ['date_joined', 'updated_at', 'last_login']
