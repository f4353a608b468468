from django.db import models


class TimestampedModel(models.Model):
    """Abstract model carrying ``created_at`` and ``updated_at``.

    ``auto_now`` fields are skipped by ``save(update_fields=[...])``, so
    ``updated_at`` is appended to any explicit field list.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        fields = kwargs.get("update_fields")
        if fields is not None:
            fields = set(fields)
            fields.add("updated_at")
            kwargs["update_fields"] = fields
        super().save(*args, **kwargs)
