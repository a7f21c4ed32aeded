import pytest
from rest_framework.test import APIClient

from recipes import services
from recipes.dto import IngredientLinkInput, RecipeDraft, StepInput
from recipes.models import Category, Ingredient

PASSWORD = "Str0ng-pass-123"

# 1x1 PNG
PNG_BASE64 = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhf"
    "DwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


@pytest.fixture
def password():
    return PASSWORD


@pytest.fixture
def png_image():
    return PNG_BASE64


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / "media")


@pytest.fixture
def make_user(django_user_model):
    def _make(username, **extra):
        extra.setdefault("email", f"{username}@example.com")
        extra.setdefault("name", username.capitalize())
        return django_user_model.objects.create_user(
            username=username, password=PASSWORD, **extra
        )

    return _make


@pytest.fixture
def chef(make_user):
    return make_user("chef1")


@pytest.fixture
def guest(make_user):
    return make_user("guest")


@pytest.fixture
def editor(make_user):
    return make_user("editor", is_staff=True)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client


@pytest.fixture
def italian(db):
    return Category.objects.create(name="Italian", slug="italian")


@pytest.fixture
def dessert(db):
    return Category.objects.create(name="Dessert", slug="dessert")


@pytest.fixture
def flour(db):
    return Ingredient.objects.create(name="Flour", default_unit="g")


@pytest.fixture
def egg(db):
    return Ingredient.objects.create(name="Egg", default_unit="pcs")


@pytest.fixture
def make_recipe():
    def _make(author, title="Pasta", **fields):
        steps = fields.pop("steps", ())
        ingredients = fields.pop("ingredients", ())
        category_ids = fields.pop("category_ids", ())
        fields.setdefault("difficulty", "easy")
        return services.create_recipe(
            author,
            RecipeDraft(title=title, **fields),
            steps=steps,
            ingredients=ingredients,
            category_ids=category_ids,
        )

    return _make


@pytest.fixture
def pasta(chef, make_recipe, flour, egg, italian):
    return make_recipe(
        chef,
        "Pasta",
        prep_minutes=10,
        cook_minutes=20,
        steps=[StepInput(1, "Boil water"), StepInput(2, "Cook pasta")],
        ingredients=[
            IngredientLinkInput(flour.pk, quantity=200, unit="g"),
            IngredientLinkInput(egg.pk, quantity=2),
        ],
        category_ids=[italian.pk],
    )
