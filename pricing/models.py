from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from .rates import WasteCategory


class PricedItem(models.Model):
    """
    One category + weight line. ``rate_per_kg`` is copied from the rate table
    when the line is created, so later rate changes never reprice it.
    ``line_total`` is derived from weight and rate on every save.
    """

    category = models.CharField(max_length=20, choices=WasteCategory.choices)
    weight_kg = models.DecimalField(
        max_digits=10, decimal_places=3,
        validators=[MinValueValidator(Decimal('0'))]
    )
    rate_per_kg = models.DecimalField(max_digits=10, decimal_places=2)
    line_total = models.DecimalField(max_digits=18, decimal_places=5, editable=False)

    # Position within the parent document
    position = models.PositiveIntegerField(default=0)

    class Meta:
        abstract = True
        ordering = ['position', 'id']

    @classmethod
    def from_valued(cls, valued, position, **kwargs):
        return cls(
            category=valued.category,
            weight_kg=valued.weight_kg,
            rate_per_kg=valued.rate_per_kg,
            line_total=valued.weight_kg * valued.rate_per_kg,
            position=position,
            **kwargs,
        )

    def save(self, *args, **kwargs):
        self.line_total = Decimal(self.weight_kg) * Decimal(self.rate_per_kg)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.category}: {self.weight_kg}kg @ {self.rate_per_kg}/kg"
