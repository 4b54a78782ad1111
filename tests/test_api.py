"""
HTTP API: role checks, error rendering and the teacher/manager endpoints.
"""
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from attendance.models import AttendanceRecord
from catalog.models import LessonPackage
from payments.models import Payment

from .helpers import make_manager, make_student, make_teacher


class APITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.teacher = make_teacher()
        self.other_teacher = make_teacher(email="other@test.az", full_name="Other")
        self.manager = make_manager()

    def _auth(self, user: User):
        token = str(AccessToken.for_user(user))
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")


class AuthTests(APITestCase):
    def test_login_returns_tokens(self):
        res = self.client.post("/api/auth/login", {"email": "teacher@test.az", "password": "pass123"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertIn("accessToken", res.data)
        self.assertEqual(res.data["user"]["role"], "teacher")

    def test_login_wrong_password(self):
        res = self.client.post("/api/auth/login", {"email": "teacher@test.az", "password": "nope"}, format="json")
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.data["code"], "invalid_credentials")

    def test_me(self):
        self._auth(self.manager)
        res = self.client.get("/api/auth/me")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["email"], "manager@test.az")

    def test_health_is_public(self):
        res = self.client.get("/api/health/")
        self.assertEqual(res.status_code, 200)


class RBACTests(APITestCase):
    def test_anonymous_is_rejected(self):
        res = self.client.get("/api/teacher/attendance?date=2025-12-05")
        self.assertEqual(res.status_code, 401)

    def test_manager_hitting_teacher_endpoint_returns_403(self):
        self._auth(self.manager)
        res = self.client.get("/api/teacher/attendance?date=2025-12-05")
        self.assertEqual(res.status_code, 403)

    def test_teacher_hitting_manager_endpoint_returns_403(self):
        self._auth(self.teacher)
        res = self.client.get("/api/manager/packages")
        self.assertEqual(res.status_code, 403)


class TeacherAttendanceAPITests(APITestCase):
    def setUp(self):
        super().setUp()
        self.s1 = make_student(self.teacher, remaining_lessons=12, last_name="A")
        self.s2 = make_student(self.teacher, remaining_lessons=1, last_name="B")
        self.s3 = make_student(self.teacher, remaining_lessons=12, debt="100.00", last_name="C")
        self.foreign = make_student(self.other_teacher, remaining_lessons=12, last_name="Z")
        self._auth(self.teacher)

    def test_day_view_lists_roster_with_flags(self):
        res = self.client.get("/api/teacher/attendance?date=2025-12-05")
        self.assertEqual(res.status_code, 200)
        rows = {row["id"]: row for row in res.data["students"]}
        self.assertEqual(set(rows), {self.s1.id, self.s2.id, self.s3.id})
        self.assertEqual(rows[self.s1.id]["rowFlag"], "")
        self.assertEqual(rows[self.s2.id]["rowFlag"], "low")
        self.assertEqual(rows[self.s3.id]["rowFlag"], "debt")
        self.assertIsNone(rows[self.s1.id]["attendance"])

    def test_day_view_date_too_early(self):
        res = self.client.get("/api/teacher/attendance?date=2025-11-30")
        self.assertEqual(res.status_code, 400)
        self.assertFalse(res.data["success"])
        self.assertEqual(res.data["error"], "date_too_early")
        self.assertEqual(res.data["minDate"], "2025-12-01")

    def test_day_view_invalid_date(self):
        res = self.client.get("/api/teacher/attendance?date=05.12.2025")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["code"], "invalid_date")

    def test_save_batch(self):
        res = self.client.post("/api/teacher/attendance/save-batch", {
            "date": "2025-12-05",
            "items": [
                {"studentId": self.s1.id, "status": "PRESENT", "extraLessons": 1},
                {"studentId": self.foreign.id, "status": "PRESENT"},
            ],
        }, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data["success"])
        self.assertCountEqual(res.data["autofilled"], [self.s2.id, self.s3.id])
        results = {r["studentId"]: r for r in res.data["results"]}
        self.assertEqual(results[self.s1.id]["newRemaining"], 10)
        self.assertEqual(results[self.foreign.id]["error"], "not_your_student")
        self.assertEqual(AttendanceRecord.objects.filter(lesson_date="2025-12-05").count(), 3)

    def test_save_batch_date_too_early(self):
        res = self.client.post("/api/teacher/attendance/save-batch", {
            "date": "2025-11-01",
            "items": [{"studentId": self.s1.id, "status": "PRESENT"}],
        }, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"], "date_too_early")
        self.assertFalse(AttendanceRecord.objects.exists())

    def test_update_and_status(self):
        res = self.client.post("/api/teacher/attendance/update", {
            "studentId": self.s1.id, "date": "2025-12-05", "status": "late",
        }, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["remainingLessons"], 11)
        self.assertEqual(res.data["lessonDelta"], -1)

        res = self.client.get(f"/api/teacher/attendance/status?studentId={self.s1.id}&date=2025-12-05")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["record"]["status"], "LATE")

        res = self.client.get(f"/api/teacher/attendance/status?studentId={self.s2.id}&date=2025-12-05")
        self.assertIsNone(res.data["record"])

    def test_update_foreign_student(self):
        res = self.client.post("/api/teacher/attendance/update", {
            "studentId": self.foreign.id, "date": "2025-12-05", "status": "PRESENT",
        }, format="json")
        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.data["code"], "not_your_student")

    def test_update_unknown_student(self):
        res = self.client.post("/api/teacher/attendance/update", {
            "studentId": 999999, "date": "2025-12-05", "status": "PRESENT",
        }, format="json")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["code"], "student_not_found")

    def test_monthly(self):
        self.client.post("/api/teacher/attendance/update", {
            "studentId": self.s1.id, "date": "2025-12-05", "status": "PRESENT",
        }, format="json")
        res = self.client.get("/api/teacher/attendance/monthly?year=2025&month=12")
        self.assertEqual(res.status_code, 200)
        rows = {row["studentId"]: row for row in res.data["students"]}
        self.assertEqual(rows[self.s1.id]["counts"]["PRESENT"], 1)

    def test_consume(self):
        res = self.client.post(f"/api/teacher/students/{self.s2.id}/consume")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["remainingLessons"], 0)
        res = self.client.post(f"/api/teacher/students/{self.s2.id}/consume")
        self.assertEqual(res.data["remainingLessons"], 0)

    def test_consume_foreign_student(self):
        res = self.client.post(f"/api/teacher/students/{self.foreign.id}/consume")
        self.assertEqual(res.status_code, 403)


class ManagerAPITests(APITestCase):
    def setUp(self):
        super().setUp()
        call_command("seed_packages", stdout=StringIO())
        self.mwf = LessonPackage.objects.get(code="LESSONS_12_MWF")
        self._auth(self.manager)

    def _enroll(self, **extra):
        payload = {
            "firstName": "Aysel",
            "lastName": "Quliyeva",
            "teacherId": self.teacher.id,
            "packageId": self.mwf.id,
            "initialPayment": "1000",
        }
        payload.update(extra)
        return self.client.post("/api/manager/students", payload, format="json")

    def test_packages(self):
        res = self.client.get("/api/manager/packages")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 4)

    def test_enroll_and_pay(self):
        res = self._enroll()
        self.assertEqual(res.status_code, 201)
        student_id = res.data["student"]["id"]
        self.assertEqual(res.data["student"]["debt"], 2400.0)
        self.assertEqual(res.data["student"]["remainingLessons"], 12)
        self.assertTrue(res.data["student"]["studentCode"].startswith("S1"))

        res = self.client.post("/api/manager/payments", {"studentId": student_id, "amount": "2000"}, format="json")
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["newDebt"], 400.0)
        self.assertEqual(res.data["appliedAmount"], 2000.0)
        self.assertTrue(res.data["receiptNo"].startswith("PAY-"))

        res = self.client.get(f"/api/manager/students/{student_id}/payments")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([p["amount"] for p in res.data], [2000.0, 1000.0])

    def test_enroll_unknown_teacher(self):
        res = self._enroll(teacherId=999999)
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["code"], "teacher_not_found")

    def test_payment_rejects_non_positive_amount(self):
        student = make_student(self.teacher, debt="100.00")
        res = self.client.post("/api/manager/payments", {"studentId": student.id, "amount": "0"}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertFalse(Payment.objects.exists())

    def test_package_change_is_additive(self):
        student = make_student(self.teacher, remaining_lessons=2, debt="500.00")
        res = self.client.post(f"/api/manager/students/{student.id}/package", {
            "packageType": "LESSONS_24", "initialPayment": "0",
        }, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["packageCode"], "LESSONS_24")
        self.assertEqual(res.data["remainingLessons"], 24)
        self.assertEqual(res.data["debt"], 5900.0)
        student.refresh_from_db()
        self.assertEqual(student.debt, Decimal("5900.00"))

    def test_package_change_requires_package(self):
        student = make_student(self.teacher)
        res = self.client.post(f"/api/manager/students/{student.id}/package", {}, format="json")
        self.assertEqual(res.status_code, 400)

    def test_package_change_unknown_student(self):
        res = self.client.post("/api/manager/students/999999/package", {"packageId": self.mwf.id}, format="json")
        self.assertEqual(res.status_code, 404)


class RoleAndRangeTests(APITestCase):
    def test_admin_counts_as_manager(self):
        admin = User.objects.create_user(
            email="admin@test.az", password="pass123", full_name="Admin", role=User.ROLE_ADMIN,
        )
        self._auth(admin)
        res = self.client.get("/api/manager/packages")
        self.assertEqual(res.status_code, 200)

    def test_monthly_rejects_out_of_range_year(self):
        self._auth(self.teacher)
        for year in (0, 10000):
            res = self.client.get(f"/api/teacher/attendance/monthly?year={year}&month=12")
            self.assertEqual(res.status_code, 400)
            self.assertEqual(res.data["code"], "invalid_month")

    def test_save_batch_out_of_range_extra_lessons(self):
        student = make_student(self.teacher, remaining_lessons=12)
        self._auth(self.teacher)
        res = self.client.post("/api/teacher/attendance/save-batch", {
            "date": "2025-12-05",
            "items": [{"studentId": student.id, "status": "PRESENT", "extraLessons": 10 ** 20}],
        }, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["results"][0]["error"], "invalid_extra_lessons")
        self.assertEqual(res.data["autofilled"], [student.id])
