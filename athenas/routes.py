from athenas import app, db, login_manager
from datetime import datetime
from urllib.parse import urlparse

from flask import (
    g,
    render_template,
    request,
    jsonify,
    redirect,
    url_for,
    flash,
    session,
    abort,
)
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from athenas import content, crud, mailer
from athenas.auth import (
    clear_auth_cookie,
    generate_token,
    get_credential_verifier,
    set_auth_cookie,
)
from athenas.errors import CatalogError, NotFoundError, ValidationError
from athenas.forms import LoginForm
from athenas.i18n import (
    AVAILABLE_LANGUAGES,
    DEFAULT_LANGUAGE,
    get_translation,
    normalise_lang,
    serialise_translations,
    text_direction,
)
from athenas.models import (
    categories_schema,
    category_schema,
    product_schema,
    products_schema,
)
from athenas.submissions import validate_contact, validate_quote_request
from athenas.wishlist import SessionStorage, WishlistStore


# Initialize database tables once at startup
with app.app_context():
    db.create_all()


def json_success(message='OK', status=200, **extra):
    """Create a standard JSON success response."""
    payload = {'success': True}
    if message is not None:
        payload['message'] = message
    if extra:
        payload.update(extra)
    return jsonify(payload), status


def json_error(message, status=400, **extra):
    """Create a standard JSON error response."""
    payload = {'success': False, 'error': message}
    if extra:
        payload.update(extra)
    return jsonify(payload), status


def _arg_flag(name):
    return request.args.get(name, '').strip().lower() == 'true'


def _arg_int(name, default, minimum):
    try:
        return max(int(request.args.get(name, default)), minimum)
    except (TypeError, ValueError):
        return default


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object.')
    return data


def _dump_pair(schema, pair):
    return {locale: schema.dump(row) if row is not None else None for locale, row in pair.items()}


# Strings read by static/js/site.js.
CLIENT_TRANSLATION_KEYS = ('wishlist.add', 'wishlist.remove', 'form.error')


def _is_api_request():
    return request.path.startswith('/api/')


# ---------------------------------------------------------------------------
# Request context: language, wishlist, template helpers
# ---------------------------------------------------------------------------

@app.url_value_preprocessor
def _pull_lang(endpoint, values):
    if values and 'lang' in values:
        lang = values.pop('lang')
        if lang not in AVAILABLE_LANGUAGES:
            abort(404)
        g.current_lang = lang


@app.url_defaults
def _add_lang(endpoint, values):
    if 'lang' in values or not app.url_map.is_endpoint_expecting(endpoint, 'lang'):
        return
    values['lang'] = getattr(g, 'current_lang', DEFAULT_LANGUAGE)


@app.before_request
def _open_wishlist():
    g.wishlist = WishlistStore(SessionStorage(session))


@app.context_processor
def inject_layout_helpers():
    current_lang = getattr(g, 'current_lang', DEFAULT_LANGUAGE)

    def switch_lang_url(lang_code):
        endpoint = request.endpoint or 'home_page'
        values = dict(request.view_args or {})
        if not app.url_map.is_endpoint_expecting(endpoint, 'lang'):
            endpoint, values = 'home_page', {}
        values.update(request.args.to_dict())
        values['lang'] = lang_code
        return url_for(endpoint, **values)

    def translate(key, default=None, **values):
        text = get_translation(key, current_lang, default)
        return text.format(**values) if values else text

    wishlist = getattr(g, 'wishlist', None)
    return {
        'current_lang': current_lang,
        'direction': text_direction(current_lang),
        'available_languages': AVAILABLE_LANGUAGES,
        'switch_lang_url': switch_lang_url,
        't': translate,
        'base_translations': serialise_translations(CLIENT_TRANSLATION_KEYS),
        'wishlist_refs': wishlist.get() if wishlist is not None else [],
        'current_year': datetime.utcnow().year,
    }


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

@app.errorhandler(CatalogError)
def handle_catalog_error(exc):
    db.session.rollback()
    extra = {}
    if isinstance(exc, ValidationError) and exc.fields:
        extra['fields'] = exc.fields
    return json_error(exc.message, status=exc.status, **extra)


@app.errorhandler(SQLAlchemyError)
def handle_database_error(exc):
    db.session.rollback()
    app.logger.exception("Database error while handling %s %s", request.method, request.path)
    if _is_api_request():
        return json_error('Something went wrong. Please try again later.', status=500)
    return render_template('error.html', status=500), 500


@app.errorhandler(404)
def handle_not_found(exc):
    if _is_api_request():
        return json_error('Not found', status=404)
    return render_template('error.html', status=404), 404


@login_manager.unauthorized_handler
def handle_unauthorized():
    if _is_api_request():
        return json_error('Unauthorized', status=401)
    return redirect(url_for('dashboard_login', **{'from': request.path}))


# ---------------------------------------------------------------------------
# Public pages
# ---------------------------------------------------------------------------

@app.route('/')
def root_redirect():
    lang = normalise_lang(request.accept_languages.best_match(list(AVAILABLE_LANGUAGES)))
    return redirect(url_for('home_page', lang=lang))


@app.route('/<lang>/')
def home_page():
    lang = g.current_lang
    return render_template(
        'home.html',
        featured=content.get_featured_products(lang),
        new_products=content.get_new_products(lang),
        categories=content.get_categories_with_counts(lang),
    )


@app.route('/<lang>/about/')
def about_page():
    return render_template('about.html')


@app.route('/<lang>/contact/')
def contact_page():
    return render_template('contact.html')


@app.route('/<lang>/products/')
def products_page():
    lang = g.current_lang
    category = request.args.get('category') or None
    search = request.args.get('search', '').strip()
    sort = request.args.get('sort', 'default')
    if sort not in content.SORT_KEYS:
        sort = 'default'
    products, total = content.list_products(lang, category=category, search=search)
    return render_template(
        'products.html',
        products=content.sort_products(products, sort),
        total=total,
        categories=content.list_categories(lang),
        selected_category=category,
        search=search,
        sort=sort,
        sort_keys=content.SORT_KEYS,
    )


@app.route('/<lang>/products/<slug>/')
def product_page(slug):
    lang = g.current_lang
    product = content.get_product(slug, lang, active_only=True)
    if not product:
        return render_template('product_not_found.html', slug=slug), 404
    return render_template(
        'product.html',
        product=product,
        category=content.get_category(product.category, lang),
        related=content.get_related_products(product),
    )


@app.route('/<lang>/wishlist/')
def wishlist_page():
    lang = g.current_lang
    categories = {c.slug: c.name for c in content.list_categories(lang)}
    return render_template(
        'wishlist.html',
        products=content.resolve_wishlist(g.wishlist.get(), lang),
        category_names=categories,
    )


# ---------------------------------------------------------------------------
# Products API
# ---------------------------------------------------------------------------

@app.route('/api/products', methods=['GET'])
def api_products():
    page = _arg_int('page', 1, 1)
    limit = _arg_int('limit', 0, 0)
    products, total = content.list_products(
        normalise_lang(request.args.get('locale')),
        category=request.args.get('category'),
        featured=_arg_flag('featured'),
        new=_arg_flag('new'),
        search=request.args.get('search'),
        page=page,
        limit=limit,
        all_locales=_arg_flag('all'),
        active_only=request.args.get('active', 'true').lower() != 'all',
    )
    return json_success(
        None,
        products=products_schema.dump(products),
        pagination=content.paginate(total, page, limit),
    )


@app.route('/api/products', methods=['POST'])
@login_required
def api_products_create():
    pair = crud.create_product(_json_body())
    return json_success('Product created successfully.', status=201, products=_dump_pair(product_schema, pair))


@app.route('/api/products/<slug>', methods=['GET'])
def api_product(slug):
    if _arg_flag('both'):
        pair = content.get_product_pair(slug)
        if not any(pair.values()):
            raise NotFoundError('Product not found')
        return json_success(None, **_dump_pair(product_schema, pair))

    product = content.get_product(slug, normalise_lang(request.args.get('locale')))
    if not product:
        raise NotFoundError('Product not found')
    return json_success(None, product=product_schema.dump(product))


@app.route('/api/products/<slug>', methods=['PUT'])
@login_required
def api_product_update(slug):
    pair = crud.update_product(slug, _json_body())
    return json_success('Product updated successfully.', products=_dump_pair(product_schema, pair))


@app.route('/api/products/<slug>', methods=['DELETE'])
@login_required
def api_product_delete(slug):
    deleted = crud.delete_product(slug)
    if deleted == 0:
        raise NotFoundError('Product not found')
    return json_success('Product deleted successfully.', deleted=deleted)


# ---------------------------------------------------------------------------
# Categories API
# ---------------------------------------------------------------------------

@app.route('/api/categories', methods=['GET'])
def api_categories():
    categories = content.list_categories(
        normalise_lang(request.args.get('locale')),
        all_locales=_arg_flag('all'),
    )
    return json_success(None, categories=categories_schema.dump(categories))


@app.route('/api/categories', methods=['POST'])
@login_required
def api_categories_create():
    pair = crud.create_category(_json_body())
    return json_success('Category created successfully.', status=201, categories=_dump_pair(category_schema, pair))


@app.route('/api/categories/<slug>', methods=['GET'])
def api_category(slug):
    if _arg_flag('both'):
        pair = content.get_category_pair(slug)
        if not any(pair.values()):
            raise NotFoundError('Category not found')
        return json_success(None, **_dump_pair(category_schema, pair))

    category = content.get_category(slug, normalise_lang(request.args.get('locale')))
    if not category:
        raise NotFoundError('Category not found')
    return json_success(None, category=category_schema.dump(category))


@app.route('/api/categories/<slug>', methods=['PUT'])
@login_required
def api_category_update(slug):
    pair = crud.update_category(slug, _json_body())
    return json_success('Category updated successfully.', categories=_dump_pair(category_schema, pair))


@app.route('/api/categories/<slug>', methods=['DELETE'])
@login_required
def api_category_delete(slug):
    deleted = crud.delete_category(slug)
    if deleted == 0:
        raise NotFoundError('Category not found')
    return json_success('Category deleted successfully.', deleted=deleted)


# ---------------------------------------------------------------------------
# Forms
# ---------------------------------------------------------------------------

@app.route('/api/contact', methods=['POST'])
def api_contact():
    data = validate_contact(request.get_json(silent=True))
    try:
        mailer.send_contact_email(data)
    except Exception as exc:
        app.logger.exception("Failed to send contact form email: %s", exc)
        return json_error('Unable to send message right now.', status=500)
    return json_success('Message sent successfully.')


@app.route('/api/quote-request', methods=['POST'])
def api_quote_request():
    data = validate_quote_request(request.get_json(silent=True))
    try:
        mailer.send_quote_request_email(data)
    except Exception as exc:
        app.logger.exception("Failed to send quote request email: %s", exc)
        return json_error('Unable to send quote request right now.', status=500)
    return json_success('Quote request submitted successfully.')


# ---------------------------------------------------------------------------
# Wishlist API
# ---------------------------------------------------------------------------

def _wishlist_payload(**extra):
    items = g.wishlist.get()
    return json_success(None, items=items, count=len(items), **extra)


@app.route('/api/wishlist', methods=['GET'])
def api_wishlist():
    return _wishlist_payload()


@app.route('/api/wishlist', methods=['POST'])
def api_wishlist_add():
    ref = str(_json_body().get('ref') or '').strip()
    if not ref:
        raise ValidationError('Missing required fields: ref', fields=['ref'])
    g.wishlist.add(ref)
    return _wishlist_payload()


@app.route('/api/wishlist', methods=['DELETE'])
def api_wishlist_clear():
    g.wishlist.clear()
    return _wishlist_payload()


@app.route('/api/wishlist/<ref>', methods=['DELETE'])
def api_wishlist_remove(ref):
    g.wishlist.remove(ref)
    return _wishlist_payload()


@app.route('/api/wishlist/<ref>/toggle', methods=['POST'])
def api_wishlist_toggle(ref):
    liked = g.wishlist.toggle(ref)
    return _wishlist_payload(liked=liked)


# ---------------------------------------------------------------------------
# Auth API
# ---------------------------------------------------------------------------

@app.route('/api/auth/login', methods=['POST'])
def api_login():
    data = request.get_json(silent=True) or {}
    username = str(data.get('username') or '').strip()
    password = str(data.get('password') or '')
    if not username or not password:
        return json_error('Username and password are required', status=400)

    if not get_credential_verifier().verify(username, password):
        app.logger.warning("Failed dashboard login for '%s'", username)
        return json_error('Invalid credentials', status=401)

    response, status = json_success('Signed in.')
    set_auth_cookie(response, generate_token(username))
    app.logger.info("Dashboard login for '%s'", username)
    return response, status


@app.route('/api/auth/me', methods=['GET'])
def api_me():
    if not current_user.is_authenticated:
        return jsonify({'success': False, 'authenticated': False}), 401
    return jsonify({'success': True, 'authenticated': True, 'user': current_user.to_dict()})


@app.route('/api/auth/logout', methods=['POST'])
def api_logout():
    response, status = json_success('Signed out.')
    clear_auth_cookie(response)
    return response, status


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

@app.route('/dashboard/login/', methods=['GET', 'POST'])
def dashboard_login():
    if current_user.is_authenticated:
        return redirect(url_for('dashboard_home'))

    form = LoginForm()
    if form.validate_on_submit():
        username = form.username.data.strip()
        if get_credential_verifier().verify(username, form.password.data):
            next_url = request.args.get('from')
            if not next_url or urlparse(next_url).netloc or not next_url.startswith('/dashboard'):
                next_url = url_for('dashboard_home')
            response = redirect(next_url)
            set_auth_cookie(response, generate_token(username))
            app.logger.info("Dashboard login for '%s'", username)
            return response
        app.logger.warning("Failed dashboard login for '%s'", username)
        flash(get_translation('auth.login.error', DEFAULT_LANGUAGE), 'danger')

    return render_template('dashboard/login.html', form=form)


@app.route('/dashboard/logout/')
def dashboard_logout():
    flash(get_translation('auth.logout.success', DEFAULT_LANGUAGE), 'info')
    return clear_auth_cookie(redirect(url_for('dashboard_login')))


@app.route('/dashboard/')
@login_required
def dashboard_home():
    return render_template('dashboard/index.html', stats=content.catalog_stats())


@app.route('/dashboard/products/')
@login_required
def dashboard_products():
    search = request.args.get('search', '').strip()
    products, total = content.list_products('en', search=search, active_only=False)
    return render_template(
        'dashboard/products.html',
        products=products,
        total=total,
        search=search,
        categories={c.slug: c.name for c in content.list_categories('en')},
    )


@app.route('/dashboard/products/new/')
@login_required
def dashboard_product_new():
    return render_template(
        'dashboard/product_form.html',
        pair=None,
        categories=content.list_categories('en'),
    )


@app.route('/dashboard/products/<slug>/edit/')
@login_required
def dashboard_product_edit(slug):
    pair = content.get_product_pair(slug)
    if not any(pair.values()):
        abort(404)
    return render_template(
        'dashboard/product_form.html',
        pair=pair,
        categories=content.list_categories('en'),
    )


@app.route('/dashboard/categories/')
@login_required
def dashboard_categories():
    pairs = {}
    for category in content.list_categories(all_locales=True):
        pairs.setdefault(category.slug, {})[category.locale] = category
    return render_template('dashboard/categories.html', pairs=pairs)
