import datetime

from tortoise import fields
from ...common.models import TimestampMixin, generate_ksuid


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Sale(TimestampMixin):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )

    item: fields.ForeignKeyRelation["Item"] = fields.ForeignKeyField(
        "models.Item",
        related_name="sales",
        on_delete=fields.RESTRICT,
    )

    quantity = fields.IntField()
    total_amount = fields.FloatField()
    sale_date = fields.DatetimeField(default=utcnow, db_index=True)

    def __str__(self):
        return f"Sale {self.public_id}: {self.quantity} for ${self.total_amount:.2f}"

    class Meta:
        table = "sales"
