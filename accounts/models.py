from django.db import models, transaction
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db.models.functions import Length


class UserManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, phone_number, password=None, role="resident", **extra_fields):
        if not phone_number:
            raise ValueError("Users must have a phone number.")
        email = extra_fields.pop("email", None)
        user = self.model(
            phone_number=phone_number,
            email=self.normalize_email(email) if email else None,
            role=role,
            **extra_fields,
        )
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        phone_number = extra_fields.pop("phone_number", None) or username
        return self.create_user(
            phone_number, password, role="admin", username=username, **extra_fields
        )


class User(AbstractBaseUser, PermissionsMixin):
    RESIDENT = "resident"
    COLLECTOR = "collector"
    ADMIN = "admin"

    ROLE_CHOICES = (
        (RESIDENT, "Resident"),
        (COLLECTOR, "Garbage Collector"),
        (ADMIN, "Admin"),
    )

    PREFIXES = {
        RESIDENT: "RES",
        COLLECTOR: "COL",
        ADMIN: "ADM",
    }

    username = models.CharField(max_length=20, unique=True)
    phone_number = models.CharField(max_length=17, unique=True)
    email = models.EmailField(unique=True, null=True, blank=True)
    first_name = models.CharField(max_length=50, blank=True)
    last_name = models.CharField(max_length=50, blank=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES)
    address = models.CharField(max_length=255, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    objects = UserManager()

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS = ["phone_number"]

    @property
    def is_resident(self):
        return self.role == self.RESIDENT

    @property
    def is_collector(self):
        return self.role == self.COLLECTOR

    @property
    def is_admin(self):
        return self.role == self.ADMIN

    def get_full_name(self):
        """Returns first + last name combined, falling back to the username."""
        return f"{self.first_name} {self.last_name}".strip() or self.username

    def save(self, *args, **kwargs):
        if not self.username:
            prefix = self.PREFIXES.get(self.role, "USR")

            with transaction.atomic():
                # Numeric order: RES1000 comes after RES999
                last_user = (
                    User.objects.select_for_update()
                    .filter(username__regex=rf"^{prefix}[0-9]+$")
                    .order_by(Length("username").desc(), "-username")
                    .first()
                )

                if last_user and last_user.username[len(prefix):].isdigit():
                    new_number = int(last_user.username[len(prefix):]) + 1
                else:
                    new_number = 1

                self.username = f"{prefix}{new_number:03d}"  # RES001, COL002, etc.

        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.username} - ({self.role})"
