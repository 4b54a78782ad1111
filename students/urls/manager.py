"""
Manager API URLs
"""
from django.urls import path
from catalog.views import manager_packages_view
from payments.views import manager_payment_create_view
from ..views.manager import (
    manager_student_enroll_view,
    manager_student_package_view,
    manager_student_payments_view,
)

app_name = 'manager'

urlpatterns = [
    path('students', manager_student_enroll_view, name='student-enroll'),
    path('students/<int:pk>/package', manager_student_package_view, name='student-package'),
    path('students/<int:pk>/payments', manager_student_payments_view, name='student-payments'),
    path('payments', manager_payment_create_view, name='payment-create'),
    path('packages', manager_packages_view, name='packages'),
]
