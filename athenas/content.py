"""Read-side queries over the locale-paired catalog."""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import String, func, or_

from athenas import db
from athenas.models import LOCALES, Category, Product

SORT_KEYS = ('default', 'name-asc', 'name-desc', 'newest')


def _newest_first(query):
    return query.order_by(Product.createdAt.desc(), Product.id.desc())


def _contains(column, term):
    return func.lower(column, type_=String).contains(term.lower(), autoescape=True)


def list_products(
    locale: str = 'en',
    category: Optional[str] = None,
    featured: bool = False,
    new: bool = False,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 0,
    all_locales: bool = False,
    active_only: bool = True,
) -> Tuple[List[Product], int]:
    """Return one page of products, newest first, and the total match count.

    ``limit=0`` returns every match.  ``all_locales`` skips the locale filter
    so the dashboard can see both versions of each product.
    """
    query = db.session.query(Product)
    if active_only:
        query = query.filter(Product.active.is_(True))
    if not all_locales:
        query = query.filter(Product.locale == locale)
    if category and category != 'all':
        query = query.filter(Product.category == category.strip().lower())
    if featured:
        query = query.filter(Product.featured.is_(True))
    if new:
        query = query.filter(Product.new.is_(True))
    term = (search or '').strip()
    if term:
        query = query.filter(or_(
            _contains(Product.name, term),
            _contains(Product.description, term),
            _contains(Product.slug, term),
        ))

    total = query.count()
    query = _newest_first(query)
    if limit and limit > 0:
        query = query.offset((max(page, 1) - 1) * limit).limit(limit)
    return query.all(), total


def paginate(total: int, page: int, limit: int) -> Dict[str, int]:
    return {
        'total': total,
        'page': page,
        'limit': limit if limit > 0 else total,
        'pages': math.ceil(total / limit) if limit > 0 else 1,
    }


def get_product(slug: str, locale: str, active_only: bool = False) -> Optional[Product]:
    query = db.session.query(Product).filter(Product.slug == slug, Product.locale == locale)
    if active_only:
        query = query.filter(Product.active.is_(True))
    return query.first()


def get_product_pair(slug: str) -> Dict[str, Optional[Product]]:
    pair: Dict[str, Optional[Product]] = {code: None for code in LOCALES}
    for product in db.session.query(Product).filter(Product.slug == slug):
        pair[product.locale] = product
    return pair


def get_featured_products(locale: str, limit: int = 8) -> List[Product]:
    products, _ = list_products(locale, featured=True, limit=limit)
    return products


def get_new_products(locale: str, limit: int = 4) -> List[Product]:
    products, _ = list_products(locale, new=True, limit=limit)
    return products


def get_related_products(product: Product, limit: int = 4) -> List[Product]:
    """Same category and locale, excluding *product*; featured ones first."""
    return (
        db.session.query(Product)
        .filter(
            Product.locale == product.locale,
            Product.category == product.category,
            Product.slug != product.slug,
            Product.active.is_(True),
        )
        .order_by(Product.featured.desc(), Product.createdAt.desc(), Product.id.desc())
        .limit(limit)
        .all()
    )


def sort_products(products: Iterable[Product], sort_key: str = 'default') -> List[Product]:
    """Order an already loaded product list for the catalog page."""
    result = list(products)
    if sort_key == 'name-asc':
        result.sort(key=lambda p: p.name.casefold())
    elif sort_key == 'name-desc':
        result.sort(key=lambda p: p.name.casefold(), reverse=True)
    elif sort_key == 'newest':
        result.sort(key=lambda p: not p.new)
    else:
        result.sort(key=lambda p: (not p.featured, not p.new))
    return result


def list_categories(locale: str = 'en', all_locales: bool = False) -> List[Category]:
    query = db.session.query(Category)
    if not all_locales:
        query = query.filter(Category.locale == locale)
    return query.order_by(Category.order.asc(), Category.name.asc()).all()


def get_category(slug: str, locale: str) -> Optional[Category]:
    return (
        db.session.query(Category)
        .filter(Category.slug == slug, Category.locale == locale)
        .first()
    )


def get_category_pair(slug: str) -> Dict[str, Optional[Category]]:
    pair: Dict[str, Optional[Category]] = {code: None for code in LOCALES}
    for category in db.session.query(Category).filter(Category.slug == slug):
        pair[category.locale] = category
    return pair


def get_categories_with_counts(locale: str) -> List[Tuple[Category, int]]:
    counts = dict(
        db.session.query(Product.category, func.count(Product.id))
        .filter(Product.locale == locale, Product.active.is_(True))
        .group_by(Product.category)
        .all()
    )
    return [(category, counts.get(category.slug, 0)) for category in list_categories(locale)]


def resolve_wishlist(refs: Iterable[str], locale: str) -> List[Product]:
    """Map wishlist references to active products in *locale*.

    References are slugs, or database ids written by older versions of the
    site.  A slug match wins; otherwise the id is translated to its slug using
    every loaded product (either locale).  Unknown references are skipped.
    """
    refs = list(refs)
    if not refs:
        return []
    loaded = db.session.query(Product).filter(Product.active.is_(True)).all()
    by_slug = {p.slug: p for p in loaded if p.locale == locale}
    id_to_slug = {str(p.id): p.slug for p in loaded}

    resolved: List[Product] = []
    seen = set()
    for ref in refs:
        slug = ref if ref in by_slug else id_to_slug.get(ref)
        if slug is None or slug not in by_slug or slug in seen:
            continue
        seen.add(slug)
        resolved.append(by_slug[slug])
    return resolved


def catalog_stats() -> Dict[str, int]:
    products = db.session.query(func.count(func.distinct(Product.slug))).scalar() or 0
    active = (
        db.session.query(func.count(func.distinct(Product.slug)))
        .filter(Product.active.is_(True))
        .scalar() or 0
    )
    featured = (
        db.session.query(func.count(func.distinct(Product.slug)))
        .filter(Product.featured.is_(True))
        .scalar() or 0
    )
    categories = db.session.query(func.count(func.distinct(Category.slug))).scalar() or 0
    return {
        'products': products,
        'active_products': active,
        'featured_products': featured,
        'categories': categories,
    }
