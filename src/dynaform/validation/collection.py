"""
Collection field validation.

Checks the item count of a list-valued field and runs the item form's
validators against every item.
"""

from typing import Any

from dynaform.core.field import CollectionFieldDescriptor


class CollectionFieldValidator:
    """
    Validates a collection field and each of its items.

    Messages name the collection, the 1-based item index and the item
    field, e.g. ``"Lines [1] - ProductName: This field is required."``.
    """

    def __init__(self, collection: CollectionFieldDescriptor):
        self.collection = collection

    @property
    def label(self) -> str:
        return self.collection.label or self.collection.field_name

    async def validate(self, model: Any, services: Any = None) -> list[str]:
        """Return the list of error messages; empty when valid."""
        errors: list[str] = []
        items = self.collection.get_items(model)
        count = len(items)

        if self.collection.min_items > 0 and count < self.collection.min_items:
            errors.append(f"{self.label} requires at least {self.collection.min_items} item(s).")

        if self.collection.max_items > 0 and count > self.collection.max_items:
            errors.append(f"{self.label} allows at most {self.collection.max_items} item(s).")

        item_form = self.collection.item_configuration
        if item_form is None:
            return errors

        for index, item in enumerate(items, start=1):
            for field in item_form.fields:
                value = field.get_value(item)
                for validator in field.validators:
                    result = await validator.validate(item, value, services)
                    if not result.is_valid:
                        errors.append(
                            f"{self.label} [{index}] - {field.label or field.field_name}: {result.error_message}"
                        )

        return errors
