"""
Admin configuration for payments app
"""
from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Payment Admin (read-only: the ledger is append-only)"""
    list_display = ['receipt_no', 'student', 'amount', 'paid_at', 'paid_by']
    list_filter = ['paid_at']
    search_fields = ['receipt_no', 'student__first_name', 'student__last_name', 'student__student_code']
    readonly_fields = ['receipt_no', 'student', 'amount', 'paid_at', 'paid_by', 'note']
    ordering = ['-paid_at', '-id']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
