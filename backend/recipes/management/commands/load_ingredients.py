import csv
import json
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils.text import slugify

from recipes.constants import CATEGORY_SLUG_MAX_LEN
from recipes.models import Category, Ingredient

UNIT_KEYS = ("default_unit", "measurement_unit", "unit")


class Command(BaseCommand):
    help = "Load ingredients (and optionally categories) from JSON or CSV."

    def add_arguments(self, parser):
        parser.add_argument("--path", type=str, default=None)
        parser.add_argument(
            "--categories",
            type=str,
            default=None,
            help="JSON/CSV file with category names.",
        )
        parser.add_argument("--truncate", action="store_true")

    def handle(self, *args, **opts):
        path = self._resolve(opts["path"], "ingredients")
        items = self._load(path)

        with transaction.atomic():
            if opts["truncate"]:
                Ingredient.objects.filter(recipe_links__isnull=True).delete()
            created = self._save_ingredients(items)

        self.stdout.write(
            self.style.SUCCESS(
                f"Loaded {len(items)} items, created {created}, "
                f"total {Ingredient.objects.count()}"
            )
        )

        if opts["categories"]:
            cat_path = self._resolve(opts["categories"], "categories")
            cat_items = self._load(cat_path)
            with transaction.atomic():
                cat_created = self._save_categories(cat_items)
            self.stdout.write(
                self.style.SUCCESS(
                    f"Loaded {len(cat_items)} categories, "
                    f"created {cat_created}, "
                    f"total {Category.objects.count()}"
                )
            )

    def _resolve(self, raw, stem: str) -> Path:
        base = Path(settings.BASE_DIR)
        if raw:
            path = Path(raw).expanduser().resolve()
        elif (base / "data" / f"{stem}.json").exists():
            path = base / "data" / f"{stem}.json"
        else:
            path = base / "data" / f"{stem}.csv"
        if not path.exists():
            raise CommandError(f"Data file not found: {path}")
        return path

    def _load(self, path: Path):
        if path.suffix.lower() == ".json":
            return self._load_json(path)
        return self._load_csv(path)

    def _save_ingredients(self, items) -> int:
        created = 0
        for it in items:
            name = (it.get("name") or "").strip()
            if not name:
                continue
            if Ingredient.objects.filter(name__iexact=name).exists():
                continue
            Ingredient.objects.create(
                name=name,
                default_unit=(it.get("default_unit") or "").strip(),
            )
            created += 1
        return created

    def _save_categories(self, items) -> int:
        created = 0
        for it in items:
            name = (it.get("name") or "").strip()
            slug = slugify(name, allow_unicode=True)[:CATEGORY_SLUG_MAX_LEN]
            if not name or not slug:
                continue
            if Category.objects.filter(name__iexact=name).exists():
                continue
            if Category.objects.filter(slug=slug).exists():
                continue
            Category.objects.create(name=name, slug=slug)
            created += 1
        return created

    def _normalize(self, row: dict) -> dict:
        unit = next((row[k] for k in UNIT_KEYS if row.get(k)), "")
        return {"name": row.get("name"), "default_unit": unit}

    def _load_json(self, path: Path):
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise CommandError(f"Expected a JSON list in {path}")
        rows = []
        for item in data:
            if isinstance(item, str):
                rows.append({"name": item})
            elif isinstance(item, dict) and "fields" in item:
                rows.append(self._normalize(item["fields"]))
            elif isinstance(item, dict):
                rows.append(self._normalize(item))
        return rows

    def _load_csv(self, path: Path):
        text = path.read_text(encoding="utf-8")
        try:
            dialect = csv.Sniffer().sniff(text[:2048], delimiters=";,")
        except csv.Error:
            dialect = csv.get_dialect("excel")

        rows = list(csv.reader(text.splitlines(), dialect))
        items = []

        header = [str(x).strip().lower() for x in rows[0]] if rows else []
        has_header = any(
            h in header
            for h in (
                "name",
                *UNIT_KEYS,
                "название",
                "единица",
                "единица_измерения",
            )
        )
        start = 1 if has_header else 0

        for r in rows[start:]:
            if not r:
                continue
            name = (r[0] if len(r) > 0 else "").strip()
            unit = (r[1] if len(r) > 1 else "").strip()
            if name:
                items.append({"name": name, "default_unit": unit})

        return items
