"""Tests for renderer resolution and rendered field descriptions."""

import datetime

import pytest

from dynaform.builders import FormBuilder
from dynaform.rendering import (
    ColorPickerRenderer,
    CustomFieldRenderer,
    FieldEditBuffer,
    FieldRenderContext,
    RatingRenderer,
    RenderDispatcher,
    TextFieldRenderer,
    UnsupportedFieldRenderer,
)
from dynaform.services import ServiceRegistry

from sample_models import Customer, Order, OrderLine


class DateTimeHolder:
    created_at: datetime.datetime
    opens_at: datetime.time

    def __init__(self):
        self.created_at = datetime.datetime(2024, 1, 1, 12, 0)
        self.opens_at = datetime.time(9, 0)


class UppercaseRenderer(CustomFieldRenderer):
    value_type = str
    widget = "uppercase"

    def __init__(self, prefix: str):
        self.prefix = prefix


@pytest.fixture
def form():
    return (
        FormBuilder(Customer)
        .add_field("name").with_label("Name").required().with_placeholder("Full name")
        .add_field("email").as_password()
        .add_field("nickname").as_text_area(lines=3)
        .add_field("age").with_range(18, 99)
        .add_field("is_active")
        .add_field("balance")
        .add_field("rating").as_slider(0, 10, step=0.5)
        .add_field("birth_date")
        .add_field("favorite_color").with_options([("red", "Red"), ("blue", "Blue")])
        .add_field("tags").as_file_upload(accepted_file_types=".png", multiple=True)
        .add_field("address")
        .build()
    )


class TestBuiltInRenderers:
    """Tests for widget selection by value type."""

    @pytest.mark.parametrize(
        "field_name, widget",
        [
            ("name", "text"),
            ("email", "password"),
            ("nickname", "textarea"),
            ("age", "number"),
            ("is_active", "checkbox"),
            ("balance", "number"),
            ("rating", "slider"),
            ("birth_date", "date"),
            ("favorite_color", "select"),
            ("tags", "file"),
        ],
    )
    def test_widget(self, form, field_name, widget):
        rendered = RenderDispatcher().render(Customer(), form.get_field(field_name))
        assert rendered.widget == widget

    def test_text_field_description(self, form):
        rendered = RenderDispatcher().render(Customer(name="Ada"), form.get_field("name"), errors=["bad"])
        assert rendered.label == "Name"
        assert rendered.value == "Ada"
        assert rendered.placeholder == "Full name"
        assert rendered.required is True
        assert rendered.errors == ["bad"]

    def test_numeric_attributes(self, form):
        dispatcher = RenderDispatcher()
        age = dispatcher.render(Customer(), form.get_field("age"))
        rating = dispatcher.render(Customer(), form.get_field("rating"))
        assert age.attributes == {"min": 18, "max": 99, "step": 1}
        assert rating.attributes == {"min": 0, "max": 10, "step": 0.5}

    def test_select_options(self, form):
        rendered = RenderDispatcher().render(Customer(), form.get_field("favorite_color"))
        assert [o.value for o in rendered.options] == ["red", "blue"]

    def test_datetime_and_time(self):
        form = FormBuilder(DateTimeHolder).add_field("created_at").add_field("opens_at").build()
        dispatcher = RenderDispatcher()
        holder = DateTimeHolder()
        assert dispatcher.render(holder, form.get_field("created_at")).widget == "datetime"
        assert dispatcher.render(holder, form.get_field("opens_at")).widget == "time"

    def test_unsupported_type_placeholder(self, form):
        rendered = RenderDispatcher().render(Customer(), form.get_field("address"))
        assert rendered.is_supported is False
        assert rendered.message == "Unsupported field type: Address for field: address"

    def test_conditional_flags(self):
        form = (
            FormBuilder(Customer)
            .add_field("nickname").disabled_when(lambda c: not c.is_active).read_only_when(lambda c: c.age > 90)
            .build()
        )
        dispatcher = RenderDispatcher()
        inactive = dispatcher.render(Customer(is_active=False), form.get_field("nickname"))
        old = dispatcher.render(Customer(is_active=True, age=95), form.get_field("nickname"))
        assert inactive.disabled is True
        assert old.disabled is False
        assert old.read_only is True


class TestCustomRenderers:
    """Tests for custom renderer resolution."""

    def test_compatible_custom_renderer_is_used(self):
        form = FormBuilder(Customer).add_field("age").with_custom_renderer(RatingRenderer).build()
        rendered = RenderDispatcher().render(Customer(age=3), form.get_field("age"))
        assert rendered.widget == "rating"
        assert rendered.attributes == {"max_rating": 5}

    def test_incompatible_custom_renderer_falls_through(self):
        form = FormBuilder(Customer).add_field("favorite_color").with_custom_renderer(RatingRenderer).build()
        dispatcher = RenderDispatcher()
        field = form.get_field("favorite_color")
        assert isinstance(dispatcher.resolve(field), TextFieldRenderer)
        assert dispatcher.render(Customer(), field).widget == "text"

    def test_renderer_instance(self):
        form = (
            FormBuilder(Customer)
            .add_field("favorite_color").with_custom_renderer(ColorPickerRenderer(palette=["#123456"]))
            .build()
        )
        rendered = RenderDispatcher().render(Customer(), form.get_field("favorite_color"))
        assert rendered.widget == "color"
        assert rendered.value == "#000000"
        assert rendered.attributes == {"palette": ["#123456"]}

    def test_renderer_from_services(self):
        services = ServiceRegistry().register(UppercaseRenderer, UppercaseRenderer(prefix=">"))
        form = FormBuilder(Customer).add_field("name").with_custom_renderer(UppercaseRenderer).build()
        dispatcher = RenderDispatcher(services=services)
        resolved = dispatcher.resolve(form.get_field("name"))
        assert isinstance(resolved, UppercaseRenderer)
        assert resolved.prefix == ">"

    def test_unconstructible_renderer_falls_through(self):
        form = FormBuilder(Customer).add_field("name").with_custom_renderer(UppercaseRenderer).build()
        assert isinstance(RenderDispatcher().resolve(form.get_field("name")), TextFieldRenderer)

    def test_renderer_registered_first_wins(self):
        class LoudText(TextFieldRenderer):
            widget = "loud"

            def render(self, context):
                return self.describe(context, self.widget)

        form = FormBuilder(Customer).add_field("name").build()
        dispatcher = RenderDispatcher().register(LoudText(), first=True)
        assert dispatcher.render(Customer(), form.get_field("name")).widget == "loud"

    def test_empty_dispatcher_uses_placeholder(self):
        form = FormBuilder(Customer).add_field("name").build()
        assert isinstance(RenderDispatcher(renderers=[]).resolve(form.get_field("name")), UnsupportedFieldRenderer)


class TestCollectionRendering:
    """Tests for collection field descriptions."""

    def test_children_per_item(self):
        form = (
            FormBuilder(Order)
            .add_collection_field(
                "lines",
                OrderLine,
                lambda c: c.with_label("Lines").with_item_form(
                    lambda item: item.add_field("product_name").add_field("quantity")
                ),
            )
            .build()
        )
        order = Order(lines=[OrderLine("Widget", 2), OrderLine("Gadget")])
        rendered = RenderDispatcher().render_collection(order, form.collection_fields[0])

        assert rendered.widget == "collection"
        assert rendered.attributes["item_count"] == 2
        assert len(rendered.children) == 2
        assert [c.value for c in rendered.children[0]] == ["Widget", 2]


class TestFieldEditBuffer:
    """Tests for the per-widget edit buffer."""

    @pytest.mark.asyncio
    async def test_sync_does_not_revert_pending_edits(self):
        committed = []

        async def on_value_changed(value):
            committed.append(value)

        form = FormBuilder(Customer).add_field("name").build()
        context = FieldRenderContext(
            model=Customer(),
            field=form.get_field("name"),
            actual_field_type=str,
            current_value="",
            on_value_changed=on_value_changed,
        )
        buffer = FieldEditBuffer("")

        buffer.edit("Ad")
        buffer.sync("")
        assert buffer.text == "Ad"

        await buffer.commit(context)
        assert committed == ["Ad"]

        buffer.sync("Ada")
        assert buffer.text == "Ada"
