import pytest

from recipes import catalog
from recipes.exceptions import Conflict, Unauthorized, ValidationFailed
from recipes.models import Category, Ingredient

pytestmark = pytest.mark.django_db


def test_staff_creates_category_with_slug(editor):
    category = catalog.create_category(editor, "  Main Course ")
    assert category.name == "Main Course"
    assert category.slug == "main-course"


def test_cyrillic_category_name(editor):
    category = catalog.create_category(editor, "Первые блюда")
    assert category.slug == "первые-блюда"


def test_regular_user_cannot_manage_catalog(chef):
    with pytest.raises(Unauthorized):
        catalog.create_category(chef, "Soups")
    with pytest.raises(Unauthorized):
        catalog.create_ingredient(chef, "Salt")


def test_names_are_unique_case_insensitively(editor, italian, flour):
    with pytest.raises(ValidationFailed) as exc_info:
        catalog.create_category(editor, "ITALIAN")
    assert "name" in exc_info.value.errors
    with pytest.raises(ValidationFailed):
        catalog.create_ingredient(editor, "flour")
    with pytest.raises(ValidationFailed):
        catalog.update_ingredient(
            Ingredient.objects.create(name="Sugar"), editor, "FLOUR"
        )


def test_update_keeps_category_slug(editor, italian):
    catalog.update_category(italian, editor, "Italian cuisine")
    italian.refresh_from_db()
    assert italian.name == "Italian cuisine"
    assert italian.slug == "italian"


def test_referenced_entries_cannot_be_deleted(pasta, editor, italian, flour):
    with pytest.raises(Conflict):
        catalog.delete_category(italian, editor)
    with pytest.raises(Conflict):
        catalog.delete_ingredient(flour, editor)
    assert Category.objects.filter(pk=italian.pk).exists()
    assert Ingredient.objects.filter(pk=flour.pk).exists()


def test_unused_entries_are_deleted(editor, dessert):
    salt = catalog.create_ingredient(editor, "Salt", " g ")
    assert salt.default_unit == "g"
    catalog.delete_ingredient(salt, editor)
    catalog.delete_category(dessert, editor)
    assert not Ingredient.objects.filter(name="Salt").exists()
    assert not Category.objects.filter(pk=dessert.pk).exists()
