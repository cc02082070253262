"""Starter catalog and the ``flask seed`` command that loads it."""

import click

from athenas import app, db
from athenas.crud import create_category, create_product, slugify
from athenas.models import Category, Product

CATEGORIES = [
    {"slug": "french-fries", "en": "French Fries", "ar": "بطاطس مقلية", "icon": "🍟"},
    {"slug": "vegetables", "en": "Vegetables", "ar": "خضروات", "icon": "🥦"},
    {"slug": "fruits", "en": "Fruits", "ar": "فواكه", "icon": "🍓"},
    {"slug": "fresh-products", "en": "Fresh Products", "ar": "منتجات طازجة", "icon": "🌿"},
]

PRODUCTS = [
    {
        "name": {"en": "Pommes Frites", "ar": "بطاطس مقلية"},
        "description": {
            "en": "Premium Egyptian frozen potato fries made from carefully selected potatoes. "
                  "IQF frozen for a crispy texture, natural flavor and consistent size.",
            "ar": "بطاطس مقلية مصرية مجمدة فاخرة مصنوعة من بطاطس مختارة بعناية، "
                  "مجمدة بتقنية IQF لقوام مقرمش ونكهة طبيعية وحجم متسق.",
        },
        "category": "french-fries",
        "weight": "2.5 kg",
    },
    {
        "name": {"en": "Okra Extra", "ar": "بامية إكسترا"},
        "description": {
            "en": "High-quality Egyptian frozen okra, cleaned and individually quick frozen "
                  "to keep its natural flavor, color and texture.",
            "ar": "بامية مصرية مجمدة عالية الجودة، منظفة ومجمدة بسرعة بشكل فردي "
                  "للحفاظ على النكهة واللون والملمس الطبيعي.",
        },
        "category": "vegetables",
    },
    {
        "name": {"en": "Broccoli", "ar": "بروكلي"},
        "description": {
            "en": "Egyptian broccoli florets harvested at peak freshness and IQF frozen "
                  "to lock in nutrients, color and flavor.",
            "ar": "زهور بروكلي مصرية يتم حصادها في ذروة نضارتها وتجميدها بتقنية IQF "
                  "لحفظ العناصر الغذائية واللون والنكهة.",
        },
        "category": "vegetables",
    },
    {
        "name": {"en": "Green Peas", "ar": "بازلاء خضراء"},
        "description": {
            "en": "Egyptian frozen green peas, IQF frozen to preserve sweetness, freshness "
                  "and vibrant green color.",
            "ar": "بازلاء خضراء مصرية مجمدة بتقنية IQF للحفاظ على الحلاوة والنضارة "
                  "واللون الأخضر.",
        },
        "category": "vegetables",
    },
    {
        "name": {"en": "Peas & Carrots", "ar": "بازلاء وجزر"},
        "description": {
            "en": "Evenly cut and mixed Egyptian peas and carrots, IQF frozen and ready to cook.",
            "ar": "بازلاء وجزر مصرية مقطعة ومخلوطة بالتساوي، مجمدة بتقنية IQF وجاهزة للطبخ.",
        },
        "category": "vegetables",
    },
    {
        "name": {"en": "Strawberries", "ar": "فراولة"},
        "description": {
            "en": "Whole Egyptian strawberries, sorted by size and IQF frozen for smoothies, "
                  "bakeries and desserts.",
            "ar": "فراولة مصرية كاملة مفرزة حسب الحجم ومجمدة بتقنية IQF للعصائر والمخابز والحلويات.",
        },
        "category": "fruits",
        "grade": "A",
    },
    {
        "name": {"en": "Mango Chunks", "ar": "قطع مانجو"},
        "description": {
            "en": "Ripe Egyptian mango cut into chunks and IQF frozen at the peak of the season.",
            "ar": "مانجو مصرية ناضجة مقطعة إلى مكعبات ومجمدة بتقنية IQF في ذروة الموسم.",
        },
        "category": "fruits",
    },
    {
        "name": {"en": "Fresh Oranges", "ar": "برتقال طازج"},
        "description": {
            "en": "Egyptian Valencia and navel oranges packed fresh for export.",
            "ar": "برتقال مصري فالنسيا وأبو سرة معبأ طازجاً للتصدير.",
        },
        "category": "fresh-products",
    },
]


def seed_catalog(force=False):
    """Load the starter catalog; returns (categories, products) created."""
    seeded = (
        db.session.query(Product.id).first() is not None
        or db.session.query(Category.id).first() is not None
    )
    if seeded and not force:
        return 0, 0
    if force:
        db.session.query(Product).delete()
        db.session.query(Category).delete()
        db.session.commit()

    for index, category in enumerate(CATEGORIES):
        create_category({
            "slug": category["slug"],
            "name_en": category["en"],
            "name_ar": category["ar"],
            "icon": category["icon"],
            "order": index,
        })

    for index, product in enumerate(PRODUCTS):
        create_product({
            "slug": slugify(product["name"]["en"]),
            "name_en": product["name"]["en"],
            "name_ar": product["name"]["ar"],
            "description_en": product["description"]["en"],
            "description_ar": product["description"]["ar"],
            "category": product["category"],
            "weight": product.get("weight", ""),
            "grade": product.get("grade", ""),
            # The first products are highlighted on the home page.
            "featured": index < 6,
            "new": index < 3,
        })
    return len(CATEGORIES), len(PRODUCTS)


@app.cli.command('seed')
@click.option('--force', is_flag=True, help='Delete the existing catalog first.')
def seed_command(force):
    """Load the starter categories and products."""
    categories, products = seed_catalog(force=force)
    if not categories and not products:
        click.echo('Catalog is not empty; use --force to reseed.')
        return
    click.echo(f'Seeded {categories} categories and {products} products (en + ar).')
