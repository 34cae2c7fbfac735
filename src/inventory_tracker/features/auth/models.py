from tortoise import fields
from ...common.models import TimestampMixin, generate_ksuid

ROLE_ADMIN = "admin"
ROLE_USER = "user"


class User(TimestampMixin):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(max_length=27, unique=True, default=generate_ksuid, db_index=True)
    name = fields.CharField(max_length=100)
    email = fields.CharField(max_length=255, unique=True, db_index=True)
    hashed_password = fields.CharField(max_length=255)
    role = fields.CharField(max_length=20, default=ROLE_USER)  # "admin" or "user"
    is_active = fields.BooleanField(default=True)
    last_login = fields.DatetimeField(null=True)

    def __str__(self):
        return f"{self.email} ({self.role})"

    class Meta:
        table = "users"
