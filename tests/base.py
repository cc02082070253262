import os
import unittest

# Configure the app before it is imported: the package reads its settings
# from the environment at import time.
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['TESTING'] = '1'
os.environ['SECRET_KEY'] = 'test-secret'
os.environ['ADMIN_USERNAME'] = 'admin'
os.environ['ADMIN_PASSWORD'] = 'correct-horse'
os.environ['BCRYPT_LOG_ROUNDS'] = '4'
os.environ['WTF_CSRF_ENABLED'] = '0'
os.environ['MAIL_SUPPRESS_SEND'] = '1'
os.environ['MAIL_DEFAULT_SENDER'] = 'noreply@athenas.test'
os.environ['LOG_LEVEL'] = 'CRITICAL'

from athenas import app, db  # noqa: E402
from athenas import crud  # noqa: E402

ADMIN_USERNAME = 'admin'
ADMIN_PASSWORD = 'correct-horse'


class AppTestCase(unittest.TestCase):
    """Fresh schema for every test, with an application context held open."""

    def setUp(self):
        self.app = app
        self.ctx = app.app_context()
        self.ctx.push()
        db.drop_all()
        db.create_all()

    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.ctx.pop()

    def make_category(self, slug='vegetables', **overrides):
        data = {'slug': slug, 'name_en': slug.title(), 'name_ar': 'فئة ' + slug, 'icon': '🥦'}
        data.update(overrides)
        return crud.create_category(data)

    def make_product(self, slug='okra', **overrides):
        data = {
            'slug': slug,
            'name_en': slug.replace('-', ' ').title(),
            'name_ar': 'منتج ' + slug,
            'description_en': 'Frozen ' + slug,
            'description_ar': 'مجمد ' + slug,
            'category': 'vegetables',
        }
        data.update(overrides)
        return crud.create_product(data)


class ClientTestCase(AppTestCase):
    """Drives the app through the test client.

    Requests must not share the test's application context (``g`` would leak
    between them), so the context is only opened around direct database work.
    """

    def setUp(self):
        super().setUp()
        self.ctx.pop()
        self.client = app.test_client()

    def tearDown(self):
        self.ctx = app.app_context()
        self.ctx.push()
        super().tearDown()

    def make_category(self, slug='vegetables', **overrides):
        with app.app_context():
            super().make_category(slug, **overrides)

    def make_product(self, slug='okra', **overrides):
        with app.app_context():
            super().make_product(slug, **overrides)

    def login(self, username=ADMIN_USERNAME, password=ADMIN_PASSWORD):
        return self.client.post('/api/auth/login', json={'username': username, 'password': password})
