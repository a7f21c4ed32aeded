# Generated to match models
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models
from django.db.models.functions import Lower


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        # Category
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField('Название', max_length=60, unique=True)),
                ('slug', models.SlugField(
                    'Слаг', max_length=70, unique=True, allow_unicode=True,
                    validators=[django.core.validators.RegexValidator(regex='^[-\w]+\Z', message='Разрешены буквы, цифры, дефис и подчеркивание.')],
                )),
            ],
            options={
                'verbose_name': 'Категория',
                'verbose_name_plural': 'Категории',
                'ordering': ['name'],
                'constraints': [
                    models.UniqueConstraint(Lower('name'), name='category_name_ci_unique'),
                ],
            },
        ),

        # Ingredient
        migrations.CreateModel(
            name='Ingredient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField('Название', max_length=120, unique=True)),
                ('default_unit', models.CharField('Единица измерения по умолчанию', max_length=20, blank=True, default='')),
            ],
            options={
                'verbose_name': 'Ингредиент',
                'verbose_name_plural': 'Ингредиенты',
                'ordering': ['name'],
                'constraints': [
                    models.UniqueConstraint(Lower('name'), name='ingredient_name_ci_unique'),
                ],
            },
        ),

        # Recipe
        migrations.CreateModel(
            name='Recipe',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField('Название', max_length=150, db_index=True)),
                ('slug', models.SlugField('Слаг', max_length=160, unique=True, allow_unicode=True, editable=False)),
                ('description', models.TextField('Описание', blank=True, default='')),
                ('prep_minutes', models.PositiveIntegerField('Подготовка, мин', null=True, blank=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('cook_minutes', models.PositiveIntegerField('Приготовление, мин', null=True, blank=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('servings', models.PositiveSmallIntegerField('Количество порций', null=True, blank=True, validators=[django.core.validators.MinValueValidator(1)])),
                ('difficulty', models.CharField('Сложность', max_length=6, choices=[('easy', 'Легко'), ('medium', 'Средне'), ('hard', 'Сложно')])),
                ('is_public', models.BooleanField('Публичный', default=True)),
                ('calories', models.PositiveIntegerField('Калорийность', null=True, blank=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('created_at', models.DateTimeField('Создан', auto_now_add=True)),
                ('updated_at', models.DateTimeField('Изменен', auto_now=True)),
                ('author', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='recipes',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Автор',
                )),
            ],
            options={
                'verbose_name': 'Рецепт',
                'verbose_name_plural': 'Рецепты',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['is_public', '-created_at'], name='recipe_public_created_idx'),
                ],
            },
        ),

        # RecipeStep
        migrations.CreateModel(
            name='RecipeStep',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('step_number', models.PositiveSmallIntegerField('Номер шага', validators=[django.core.validators.MinValueValidator(1)])),
                ('instruction', models.TextField('Инструкция')),
                ('recipe', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='steps',
                    to='recipes.recipe',
                    verbose_name='Рецепт',
                )),
            ],
            options={
                'verbose_name': 'Шаг рецепта',
                'verbose_name_plural': 'Шаги рецепта',
                'ordering': ['step_number'],
                'constraints': [
                    models.UniqueConstraint(fields=('recipe', 'step_number'), name='unique_recipe_step_number'),
                    models.CheckConstraint(condition=models.Q(step_number__gte=1), name='recipe_step_number_positive'),
                ],
            },
        ),

        # RecipeIngredient
        migrations.CreateModel(
            name='RecipeIngredient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField('Количество', max_digits=10, decimal_places=2, null=True, blank=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('unit', models.CharField('Единица измерения', max_length=20, blank=True, default='')),
                ('note', models.CharField('Примечание', max_length=255, blank=True, default='')),
                ('ingredient', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='recipe_links',
                    to='recipes.ingredient',
                )),
                ('recipe', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='ingredient_links',
                    to='recipes.recipe',
                )),
            ],
            options={
                'verbose_name': 'Ингредиент в рецепте',
                'verbose_name_plural': 'Ингредиенты в рецепте',
                'ordering': ['id'],
                'constraints': [
                    models.UniqueConstraint(fields=('recipe', 'ingredient'), name='unique_recipe_ingredient'),
                ],
            },
        ),

        # RecipeCategory
        migrations.CreateModel(
            name='RecipeCategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('category', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='recipe_links',
                    to='recipes.category',
                )),
                ('recipe', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='category_links',
                    to='recipes.recipe',
                )),
            ],
            options={
                'verbose_name': 'Категория рецепта',
                'verbose_name_plural': 'Категории рецептов',
                'constraints': [
                    models.UniqueConstraint(fields=('recipe', 'category'), name='unique_recipe_category'),
                ],
            },
        ),

        migrations.AddField(
            model_name='recipe',
            name='categories',
            field=models.ManyToManyField(
                related_name='recipes',
                through='recipes.RecipeCategory',
                to='recipes.category',
                verbose_name='Категории',
            ),
        ),
        migrations.AddField(
            model_name='recipe',
            name='ingredients',
            field=models.ManyToManyField(
                related_name='recipes',
                through='recipes.RecipeIngredient',
                to='recipes.ingredient',
                verbose_name='Ингредиенты',
            ),
        ),

        # Comment
        migrations.CreateModel(
            name='Comment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('content', models.TextField('Текст')),
                ('created_at', models.DateTimeField('Создан', auto_now_add=True)),
                ('updated_at', models.DateTimeField('Изменен', auto_now=True)),
                ('author', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='comments',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Автор',
                )),
                ('recipe', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='comments',
                    to='recipes.recipe',
                    verbose_name='Рецепт',
                )),
            ],
            options={
                'verbose_name': 'Комментарий',
                'verbose_name_plural': 'Комментарии',
                'ordering': ['-created_at', '-id'],
            },
        ),

        # Rating
        migrations.CreateModel(
            name='Rating',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('value', models.PositiveSmallIntegerField('Оценка', validators=[
                    django.core.validators.MinValueValidator(1, message='Оценка не может быть меньше 1.'),
                    django.core.validators.MaxValueValidator(5, message='Оценка не может быть больше 5.'),
                ])),
                ('created_at', models.DateTimeField('Создана', auto_now_add=True)),
                ('updated_at', models.DateTimeField('Изменена', auto_now=True)),
                ('author', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='ratings',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Автор',
                )),
                ('recipe', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='ratings',
                    to='recipes.recipe',
                    verbose_name='Рецепт',
                )),
            ],
            options={
                'verbose_name': 'Оценка',
                'verbose_name_plural': 'Оценки',
                'ordering': ['-created_at', '-id'],
                'constraints': [
                    models.UniqueConstraint(fields=('recipe', 'author'), name='unique_rating_recipe_author'),
                    models.CheckConstraint(condition=models.Q(value__gte=1, value__lte=5), name='rating_value_range'),
                ],
            },
        ),

        # Photo
        migrations.CreateModel(
            name='Photo',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('image', models.ImageField('Файл', upload_to='recipes/photos/')),
                ('is_cover', models.BooleanField('Обложка', default=False)),
                ('created_at', models.DateTimeField('Загружено', auto_now_add=True)),
                ('author', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='photos',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Загрузил',
                )),
                ('recipe', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='photos',
                    to='recipes.recipe',
                    verbose_name='Рецепт',
                )),
            ],
            options={
                'verbose_name': 'Фото',
                'verbose_name_plural': 'Фото',
                'ordering': ['-is_cover', 'id'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(is_cover=True), fields=('recipe',), name='unique_recipe_cover_photo'),
                ],
            },
        ),

        # Favorite
        migrations.CreateModel(
            name='Favorite',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField('Добавлено', auto_now_add=True)),
                ('recipe', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='favorites',
                    to='recipes.recipe',
                )),
                ('user', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='favorites',
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                'verbose_name': 'Избранное',
                'verbose_name_plural': 'Избранное',
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'recipe'), name='unique_favorite_user_recipe'),
                ],
            },
        ),
    ]
