import pytest
from django.contrib import admin

from recipes.admin import RecipeAdmin, RecipeAdminForm
from recipes.models import Recipe

pytestmark = pytest.mark.django_db


def recipe_form(author, title, instance=None):
    return RecipeAdminForm(
        data={
            "author": author.pk,
            "title": title,
            "description": "",
            "difficulty": "easy",
            "is_public": True,
        },
        instance=instance,
    )


@pytest.mark.parametrize("title", ["PASTA", "!!!"])
def test_new_recipe_needs_free_slug(chef, pasta, title):
    form = recipe_form(chef, title)
    assert not form.is_valid()
    assert "title" in form.errors
    assert Recipe.objects.count() == 1


def test_existing_recipe_keeps_slug_on_rename(chef, pasta):
    form = recipe_form(chef, "Fresh Pasta", instance=pasta)
    assert form.is_valid(), form.errors
    form.save()
    pasta.refresh_from_db()
    assert pasta.slug == "pasta"


def test_admin_derives_slug_for_new_recipe(chef, rf):
    form = recipe_form(chef, "Щи")
    assert form.is_valid(), form.errors
    recipe = form.save(commit=False)
    model_admin = RecipeAdmin(Recipe, admin.site)
    model_admin.save_model(rf.post("/"), recipe, form, change=False)
    assert Recipe.objects.get().slug == "щи"
