from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, override_settings

from ..validators import is_valid_mac_address, validate_connection_range, validate_mac_address


class MacAddressValidationTests(SimpleTestCase):

    def test_colon_and_dash_separators_are_accepted(self):
        for value in ("00:1A:79:AA:BB:CC", "00-1A-79-AA-BB-CC", "00:1a:79:aa:bb:cc"):
            with self.subTest(value=value):
                self.assertTrue(is_valid_mac_address(value))
                self.assertEqual(validate_mac_address(value), value)

    def test_malformed_addresses_are_rejected(self):
        for value in ("00:1A:79:AA:BB", "ZZ:1A:79:AA:BB:CC", "", None, "001A79AABBCC"):
            with self.subTest(value=value):
                self.assertFalse(is_valid_mac_address(value))

    def test_validator_raises_with_code(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_mac_address("00:1A:79:AA:BB")
        self.assertEqual(ctx.exception.code, 'invalid_mac_address')


@override_settings(MAX_CONNECTIONS=10)
class ConnectionRangeTests(SimpleTestCase):

    def test_valid_window(self):
        validate_connection_range(1, 10)
        validate_connection_range(3, 3)

    def test_inverted_window(self):
        with self.assertRaises(ValidationError):
            validate_connection_range(5, 2)

    def test_out_of_bounds(self):
        with self.assertRaises(ValidationError):
            validate_connection_range(0, 4)
        with self.assertRaises(ValidationError):
            validate_connection_range(1, 11)
