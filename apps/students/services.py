# students/services.py

"""
Student record operations.

Every mutation runs in one service transaction together with its audit
entry. Deleting a student removes their fee assessments, payments and
supply distributions through database cascades.
"""

import logging

from students.models import Student
from utils.audit import log_activity
from utils.exceptions import NotFoundError, ValidationError
from utils.transactions import service_transaction

logger = logging.getLogger(__name__)


STUDENT_FIELDS = (
    'student_number', 'first_name', 'last_name', 'date_of_birth', 'gender',
    'class_year', 'address', 'phone', 'email', 'status',
)
REQUIRED_FIELDS = (
    'student_number', 'first_name', 'last_name', 'date_of_birth', 'gender',
    'class_year', 'address',
)


def _validate_student_data(student_data, exclude_pk=None):
    missing = [field for field in REQUIRED_FIELDS if not student_data.get(field)]
    if missing:
        raise ValidationError(
            "Please fill in all required fields",
            field_errors={field: "This field is required." for field in missing}
        )

    duplicates = Student.objects.filter(student_number=student_data['student_number'])
    if exclude_pk is not None:
        duplicates = duplicates.exclude(pk=exclude_pk)
    if duplicates.exists():
        raise ValidationError(
            "Student number already exists",
            field_errors={'student_number': "Student number already exists."}
        )


class StudentService:
    """Create, update and delete student records"""

    @staticmethod
    def get_student(student_id):
        try:
            return Student.objects.get(pk=student_id)
        except (Student.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Student not found")

    @staticmethod
    def create_student(context, student_data):
        """
        Register a new student.

        Args:
            context (ServiceContext): Acting user
            student_data (dict): Student fields; ``status`` defaults to active

        Returns:
            Student instance
        """
        _validate_student_data(student_data)
        data = {field: student_data[field] for field in STUDENT_FIELDS if field in student_data}
        data.setdefault('status', Student.STATUS_ACTIVE)

        with service_transaction("registering the student"):
            student = Student(**data)
            student.set_actor(context)
            student.save()
            log_activity(
                context, 'student_created',
                f"Created student ID: {student.pk} ({student.student_number})",
                target_object=student,
            )

        logger.info(f"Registered student {student.student_number}")
        return student

    @staticmethod
    def update_student(context, student_id, student_data):
        student = StudentService.get_student(student_id)
        merged = {field: getattr(student, field) for field in STUDENT_FIELDS}
        merged.update({k: v for k, v in student_data.items() if k in STUDENT_FIELDS})
        _validate_student_data(merged, exclude_pk=student.pk)

        with service_transaction("updating the student"):
            for field, value in merged.items():
                setattr(student, field, value)
            student.set_actor(context)
            student.save()
            log_activity(
                context, 'student_updated',
                f"Updated student ID: {student.pk}",
                target_object=student,
            )

        return student

    @staticmethod
    def delete_student(context, student_id):
        student = StudentService.get_student(student_id)
        description = f"{student.student_number} {student.get_full_name()}"

        with service_transaction("deleting the student"):
            Student.objects.filter(pk=student.pk).delete()
            log_activity(
                context, 'student_deleted',
                f"Deleted student: {description}",
                target_object=student,
            )

        logger.info(f"Deleted student {description}")
