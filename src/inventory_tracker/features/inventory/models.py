"""Data models for inventory management, including Category and Item."""

from tortoise import fields
from ...common.models import TimestampMixin, generate_ksuid


class Category(TimestampMixin):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )
    name = fields.CharField(max_length=100, unique=True)
    description = fields.TextField(null=True)

    items: fields.ReverseRelation["Item"]

    def __str__(self):
        return self.name

    class Meta:
        table = "categories"


class Item(TimestampMixin):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )
    name = fields.CharField(max_length=255, unique=True)
    description = fields.TextField(null=True)
    price = fields.FloatField(default=0.0)
    quantity = fields.IntField(default=0)

    # Sales are removed by the service before their item, see delete_item
    sales: fields.ReverseRelation["Sale"]

    category: fields.ForeignKeyNullableRelation[Category] = fields.ForeignKeyField(
        "models.Category",
        related_name="items",
        on_delete=fields.SET_NULL,
        null=True,
    )

    def __str__(self):
        return f"{self.name} (Stock: {self.quantity}, Price: ${self.price:.2f})"

    class Meta:
        table = "items"
