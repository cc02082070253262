import unittest
from unittest import mock

from tests.base import AppTestCase, ClientTestCase

from athenas import mail
from athenas.errors import ValidationError
from athenas.submissions import is_valid_email, validate_contact, validate_quote_request

CONTACT = {
    'name': 'Mona',
    'email': 'mona@nilefoods.com',
    'phone': '+20 100 000 0000',
    'subject': 'Prices',
    'message': 'Please send your price list.',
}

QUOTE = {
    'customerInfo': {
        'fullName': 'Mona Ali',
        'email': 'mona@nilefoods.com',
        'phone': '+20 100 000 0000',
        'company': 'Nile Foods',
    },
    'products': [{'id': 'okra', 'name': 'Okra', 'category': 'Vegetables'}],
    'locale': 'ar',
}


def with_customer(**changes):
    info = dict(QUOTE['customerInfo'], **changes)
    return dict(QUOTE, customerInfo=info)


class ContactValidationTestCase(unittest.TestCase):
    def assertRejected(self, payload, message):
        with self.assertRaises(ValidationError) as caught:
            validate_contact(payload)
        self.assertEqual(caught.exception.message, message)

    def test_valid_message_is_trimmed(self):
        cleaned = validate_contact(dict(CONTACT, name='  Mona  ', locale='ar'))
        self.assertEqual(cleaned['name'], 'Mona')
        self.assertEqual(cleaned['locale'], 'ar')

    def test_unknown_locale_falls_back_to_english(self):
        self.assertEqual(validate_contact(dict(CONTACT, locale='fr'))['locale'], 'en')

    def test_first_failing_field_is_reported(self):
        self.assertRejected({}, 'Name is required')
        self.assertRejected(dict(CONTACT, name=' '), 'Name is required')
        self.assertRejected(dict(CONTACT, email=''), 'Email is required')
        self.assertRejected(dict(CONTACT, email='a@b', phone=''), 'Invalid email format')
        self.assertRejected(dict(CONTACT, phone=''), 'Phone is required')
        self.assertRejected(dict(CONTACT, subject=''), 'Subject is required')
        self.assertRejected(dict(CONTACT, message=''), 'Message is required')

    def test_non_dict_payload(self):
        self.assertRejected(None, 'Name is required')

    def test_email_syntax(self):
        self.assertTrue(is_valid_email('buyer@athenas-foods.com'))
        self.assertFalse(is_valid_email('a@b'))
        self.assertFalse(is_valid_email('no-at-sign'))


class QuoteValidationTestCase(AppTestCase):
    def assertRejected(self, payload, message):
        with self.assertRaises(ValidationError) as caught:
            validate_quote_request(payload)
        self.assertEqual(caught.exception.message, message)

    def test_valid_request(self):
        cleaned = validate_quote_request(QUOTE)
        self.assertEqual(cleaned['customerInfo']['fullName'], 'Mona Ali')
        self.assertEqual(cleaned['customerInfo']['message'], '')
        self.assertEqual(cleaned['products'], QUOTE['products'])
        self.assertEqual(cleaned['locale'], 'ar')

    def test_validation_order(self):
        self.assertRejected({'products': QUOTE['products']}, 'Missing customer information')
        self.assertRejected(with_customer(fullName=''), 'Full name is required')
        self.assertRejected(with_customer(email=''), 'Email is required')
        self.assertRejected(with_customer(email='a@b'), 'Invalid email format')
        self.assertRejected(with_customer(phone=''), 'Phone number is required')
        self.assertRejected(dict(QUOTE, products=[]), 'At least one product is required')
        self.assertRejected(dict(QUOTE, products='okra'), 'At least one product is required')

    def test_wishlist_refs_are_resolved_in_the_request_locale(self):
        self.make_category('vegetables')
        self.make_product('okra')
        cleaned = validate_quote_request(dict(QUOTE, products=['okra', 'missing']))
        self.assertEqual(cleaned['products'], [{'id': 'okra', 'name': 'منتج okra', 'category': 'فئة vegetables'}])

    def test_only_unknown_refs(self):
        self.assertRejected(dict(QUOTE, products=['missing']), 'At least one product is required')


class SubmissionEndpointTestCase(ClientTestCase):
    def configure_mail(self):
        patcher = mock.patch.dict(self.app.config, {
            'MAIL_USERNAME': 'mailer@athenas.test',
            'MAIL_PASSWORD': 'app-password',
            'BUSINESS_EMAIL': 'sales@athenas.test',
        })
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_contact_is_validated_before_sending(self):
        with mock.patch('athenas.routes.mailer.send_contact_email') as send:
            response = self.client.post('/api/contact', json=dict(CONTACT, email='a@b'))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json(), {'success': False, 'error': 'Invalid email format', 'fields': ['email']})
        send.assert_not_called()

    def test_contact_without_mail_configuration_is_logged_only(self):
        with mail.record_messages() as outbox:
            response = self.client.post('/api/contact', json=CONTACT)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.get_json()['success'])
        self.assertEqual(outbox, [])

    def test_contact_is_mailed_to_the_business(self):
        self.configure_mail()
        with mail.record_messages() as outbox:
            response = self.client.post('/api/contact', json=CONTACT)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(outbox), 1)
        self.assertEqual(outbox[0].recipients, ['sales@athenas.test'])
        self.assertEqual(outbox[0].reply_to, 'mona@nilefoods.com')
        self.assertIn('Please send your price list.', outbox[0].body)

    def test_quote_request_sends_notification_and_confirmation(self):
        self.configure_mail()
        with mail.record_messages() as outbox:
            response = self.client.post('/api/quote-request', json=QUOTE)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['message'], 'Quote request submitted successfully.')
        self.assertEqual([m.recipients for m in outbox], [['sales@athenas.test'], ['mona@nilefoods.com']])
        self.assertIn('Mona Ali', outbox[0].subject)
        self.assertIn('Nile Foods', outbox[0].body)
        self.assertIn('Okra', outbox[1].html)
        self.assertIn('dir="rtl"', outbox[1].html)

    def test_invalid_quote_request_never_reaches_the_mailer(self):
        with mock.patch('athenas.routes.mailer.send_quote_request_email') as send:
            missing_name = self.client.post('/api/quote-request', json=with_customer(fullName=''))
            bad_email = self.client.post('/api/quote-request', json=with_customer(email='a@b'))
        self.assertEqual(missing_name.status_code, 400)
        self.assertEqual(missing_name.get_json()['error'], 'Full name is required')
        self.assertEqual(bad_email.get_json()['error'], 'Invalid email format')
        send.assert_not_called()

    def test_mail_failure_is_reported(self):
        with mock.patch('athenas.routes.mailer.send_quote_request_email', side_effect=OSError('smtp down')):
            response = self.client.post('/api/quote-request', json=QUOTE)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json(), {'success': False, 'error': 'Unable to send quote request right now.'})


if __name__ == '__main__':
    unittest.main()
