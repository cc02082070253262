"""Validation of the public contact and quote-request forms.

Fields are checked in a fixed order and the first failure is reported on its
own, so the form can point the visitor at exactly one field at a time.
"""

from __future__ import annotations

from typing import Dict, List

from email_validator import EmailNotValidError, validate_email

from athenas.content import list_categories, resolve_wishlist
from athenas.errors import ValidationError
from athenas.i18n import normalise_lang


def _text(payload: Dict, key: str) -> str:
    value = payload.get(key)
    return value.strip() if isinstance(value, str) else ''


def is_valid_email(address: str) -> bool:
    try:
        validate_email(address, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _check_email(address: str) -> None:
    if not address:
        raise ValidationError('Email is required', fields=['email'])
    if not is_valid_email(address):
        raise ValidationError('Invalid email format', fields=['email'])


def validate_contact(payload: Dict) -> Dict[str, str]:
    """Return the cleaned contact message or raise on the first bad field."""
    payload = payload if isinstance(payload, dict) else {}
    cleaned = {key: _text(payload, key) for key in ('name', 'email', 'phone', 'subject', 'message')}

    if not cleaned['name']:
        raise ValidationError('Name is required', fields=['name'])
    _check_email(cleaned['email'])
    if not cleaned['phone']:
        raise ValidationError('Phone is required', fields=['phone'])
    if not cleaned['subject']:
        raise ValidationError('Subject is required', fields=['subject'])
    if not cleaned['message']:
        raise ValidationError('Message is required', fields=['message'])

    cleaned['locale'] = normalise_lang(payload.get('locale'))
    return cleaned


def _resolve_products(entries: List, locale: str) -> List[Dict[str, str]]:
    """Turn the submitted product list into ``{id, name, category}`` rows.

    Entries may already be objects from the wishlist page, or bare wishlist
    references that still need looking up.
    """
    refs = [entry for entry in entries if isinstance(entry, str)]
    by_ref = {}
    if refs:
        category_names = {c.slug: c.name for c in list_categories(locale)}
        for product in resolve_wishlist(refs, locale):
            row = {
                'id': product.slug,
                'name': product.name,
                'category': category_names.get(product.category, product.category),
            }
            by_ref[product.slug] = row
            by_ref[str(product.id)] = row

    products = []
    for entry in entries:
        if isinstance(entry, dict) and str(entry.get('name') or '').strip():
            products.append({
                'id': str(entry.get('id') or '').strip(),
                'name': str(entry['name']).strip(),
                'category': str(entry.get('category') or '').strip(),
            })
        elif isinstance(entry, str) and entry in by_ref and by_ref[entry] not in products:
            products.append(by_ref[entry])
    return products


def validate_quote_request(payload: Dict) -> Dict:
    """Return the cleaned quote request or raise on the first bad field."""
    payload = payload if isinstance(payload, dict) else {}
    info = payload.get('customerInfo')
    if not isinstance(info, dict):
        raise ValidationError('Missing customer information', fields=['customerInfo'])

    customer = {key: _text(info, key) for key in ('fullName', 'email', 'phone', 'company', 'message')}
    if not customer['fullName']:
        raise ValidationError('Full name is required', fields=['fullName'])
    _check_email(customer['email'])
    if not customer['phone']:
        raise ValidationError('Phone number is required', fields=['phone'])

    locale = normalise_lang(payload.get('locale'))
    entries = payload.get('products')
    products = _resolve_products(entries, locale) if isinstance(entries, list) else []
    if not products:
        raise ValidationError('At least one product is required', fields=['products'])

    return {'customerInfo': customer, 'products': products, 'locale': locale}
