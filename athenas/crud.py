"""Create, update and delete products and categories as locale pairs.

Each logical product or category is stored as one row per locale sharing a
slug.  Only ``name`` (and for products ``description``) differ between the
two rows; every other field is written to both from a single base update.
Both rows of an operation are committed together.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from athenas import db
from athenas.errors import ConflictError, NotFoundError, ValidationError
from athenas.models import LOCALES, Category, Product

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')

PRODUCT_REQUIRED = ('slug', 'name_en', 'name_ar', 'category')
CATEGORY_REQUIRED = ('slug', 'name_en', 'name_ar')

PRODUCT_TEXT_FIELDS = ('image', 'weight', 'minOrder', 'grade')
PRODUCT_FLAGS = ('featured', 'new', 'active')


def slugify(value: str) -> str:
    """Turn a display name into a URL-safe slug ("Peas & Carrots" -> "peas-carrots")."""
    return re.sub(r'[^a-z0-9]+', '-', (value or '').lower()).strip('-')


def normalise_slug(value) -> str:
    slug = str(value or '').strip().lower()
    if not SLUG_PATTERN.match(slug):
        raise ValidationError(
            'Slug may only contain lowercase letters, digits and single dashes.',
            fields=['slug'],
        )
    return slug


def _require(data: Dict, required: Tuple[str, ...]) -> None:
    missing = [field for field in required if not str(data.get(field) or '').strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", fields=missing)


def _as_bool(value, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ('true', 'false'):
        return value.strip().lower() == 'true'
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValidationError(f'{field} must be true or false.', fields=[field])


def _as_int(value, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a whole number.', fields=[field])
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be a whole number.', fields=[field])


def _as_gallery(value) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(url, str) for url in value):
        raise ValidationError('gallery must be a list of image URLs.', fields=['gallery'])
    return [url.strip() for url in value if url.strip()]


def _product_base(data: Dict, partial: bool) -> Dict:
    """Shared product fields from *data*; with ``partial`` only the keys present."""
    base: Dict = {}
    if not partial or 'category' in data:
        category = str(data.get('category') or '').strip().lower()
        if not category:
            raise ValidationError('Missing required fields: category', fields=['category'])
        base['category'] = category
    for field in PRODUCT_TEXT_FIELDS:
        if not partial or field in data:
            base[field] = str(data.get(field) or '').strip()
    if not partial or 'gallery' in data:
        base['gallery'] = _as_gallery(data.get('gallery'))
    for flag in PRODUCT_FLAGS:
        if flag in data and data[flag] is not None:
            base[flag] = _as_bool(data[flag], flag)
        elif not partial:
            base[flag] = flag == 'active'
    return base


def _category_base(data: Dict, partial: bool) -> Dict:
    base: Dict = {}
    if not partial or 'icon' in data:
        base['icon'] = str(data.get('icon') or '').strip()
    if not partial or 'order' in data:
        base['order'] = _as_int(data.get('order') or 0, 'order')
    return base


def _localized(data: Dict, locale: str, fields: Tuple[str, ...], partial: bool) -> Dict:
    values: Dict = {}
    for field in fields:
        key = f'{field}_{locale}'
        if partial and key not in data:
            continue
        value = str(data.get(key) or '').strip()
        if field == 'name' and not value:
            raise ValidationError(f'Missing required fields: {key}', fields=[key])
        values[field] = value
    return values


def _slug_taken(model, slug: str) -> bool:
    return db.session.query(model.id).filter(model.slug == slug).first() is not None


def _commit(label: str) -> None:
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race against another write of the same slug.
        db.session.rollback()
        raise ConflictError(f"A {label} with this slug already exists")
    except SQLAlchemyError:
        db.session.rollback()
        raise


def _create_pair(model, label: str, data: Dict, base: Dict, localized_fields) -> Dict:
    slug = normalise_slug(data.get('slug'))
    if _slug_taken(model, slug):
        raise ConflictError(f'A {label} with this slug already exists')

    rows = {}
    for locale in LOCALES:
        row = model(slug=slug, locale=locale, **base, **_localized(data, locale, localized_fields, False))
        db.session.add(row)
        rows[locale] = row
    _commit(label)
    logger.info('Created %s %s (%s)', label, slug, ', '.join(LOCALES))
    return rows


def _update_pair(model, label: str, slug: str, data: Dict, base: Dict, localized_fields) -> Dict:
    rows = {row.locale: row for row in db.session.query(model).filter(model.slug == slug)}
    if not rows:
        raise NotFoundError(f'{label.capitalize()} not found')

    if data.get('slug'):
        new_slug = normalise_slug(data['slug'])
        if new_slug != slug:
            if _slug_taken(model, new_slug):
                raise ConflictError(f'A {label} with this slug already exists')
            base['slug'] = new_slug

    for locale, row in rows.items():
        for field, value in base.items():
            setattr(row, field, value)
        for field, value in _localized(data, locale, localized_fields, True).items():
            setattr(row, field, value)
    _commit(label)
    if len(rows) != len(LOCALES):
        logger.warning('%s %s is missing a locale version: found %s', label, slug, sorted(rows))
    logger.info('Updated %s %s', label, base.get('slug', slug))
    return {locale: rows.get(locale) for locale in LOCALES}


def _delete_pair(model, label: str, slug: str) -> int:
    deleted = db.session.query(model).filter(model.slug == slug).delete(synchronize_session=False)
    _commit(label)
    if deleted == 1:
        logger.warning('Deleted only one locale version of %s %s', label, slug)
    logger.info('Deleted %d row(s) of %s %s', deleted, label, slug)
    return deleted


# -- products -------------------------------------------------------------

def create_product(data: Dict) -> Dict[str, Product]:
    _require(data, PRODUCT_REQUIRED)
    return _create_pair(Product, 'product', data,
                        _product_base(data, partial=False), ('name', 'description'))


def update_product(slug: str, data: Dict) -> Dict[str, Product]:
    return _update_pair(Product, 'product', slug, data,
                        _product_base(data, partial=True), ('name', 'description'))


def delete_product(slug: str) -> int:
    return _delete_pair(Product, 'product', slug)


# -- categories -----------------------------------------------------------

def create_category(data: Dict) -> Dict[str, Category]:
    _require(data, CATEGORY_REQUIRED)
    return _create_pair(Category, 'category', data,
                        _category_base(data, partial=False), ('name',))


def update_category(slug: str, data: Dict) -> Dict[str, Category]:
    return _update_pair(Category, 'category', slug, data,
                        _category_base(data, partial=True), ('name',))


def delete_category(slug: str) -> int:
    return _delete_pair(Category, 'category', slug)
