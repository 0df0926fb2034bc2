# students/models.py

from django.db import models
import logging

from utils.models import BaseModel

logger = logging.getLogger(__name__)


class ActiveStudentManager(models.Manager):
    def get_queryset(self):
        return super().get_queryset().filter(status=Student.STATUS_ACTIVE)


class Student(BaseModel):
    """Core model for student information"""

    # -------------------------------------------------------------------------
    # CHOICE FIELDS
    # -------------------------------------------------------------------------

    GENDER_CHOICES = (
        ('M', 'Male'),
        ('F', 'Female'),
        ('O', 'Other'),
    )

    STATUS_ACTIVE = 'active'
    STATUS_CHOICES = (
        (STATUS_ACTIVE, 'Active'),
        ('inactive', 'Inactive'),
        ('graduated', 'Graduated'),
        ('withdrawn', 'Withdrawn'),
    )

    # -------------------------------------------------------------------------
    # IDENTIFICATION & BASIC INFORMATION
    # -------------------------------------------------------------------------

    student_number = models.CharField(
        "Student Number",
        max_length=20,
        unique=True,
        db_index=True
    )
    first_name = models.CharField("First Name", max_length=50)
    last_name = models.CharField("Last Name", max_length=50)
    date_of_birth = models.DateField("Date of Birth")
    gender = models.CharField("Gender", max_length=1, choices=GENDER_CHOICES)
    class_year = models.CharField("Class / Year", max_length=20)

    # -------------------------------------------------------------------------
    # CONTACT
    # -------------------------------------------------------------------------

    address = models.TextField("Address")
    phone = models.CharField("Phone", max_length=20, blank=True)
    email = models.EmailField("Email", blank=True)

    status = models.CharField(
        "Status",
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_ACTIVE,
        db_index=True
    )

    objects = models.Manager()
    active = ActiveStudentManager()

    class Meta:
        verbose_name = "Student"
        verbose_name_plural = "Students"
        ordering = ['last_name', 'first_name']
        indexes = [
            models.Index(fields=['last_name', 'first_name'], name='student_name_idx'),
        ]

    def __str__(self):
        return f"{self.student_number} - {self.get_full_name()}"

    def get_full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self):
        return self.status == self.STATUS_ACTIVE
