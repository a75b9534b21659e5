import base64
import unittest

from otp_core import hotp, totp
from otp_core.errors import InvalidOptions, MissingAccountName, MissingIssuer, RandomSourceError
from otp_core.factory import b32encode_nopad, generate_hotp, generate_totp
from otp_core.key import Key
from otp_core.otp_types import Algorithm, Digits


def zeros(n):
    return b"\x00" * n


class TestGenerateHOTP(unittest.TestCase):

    def test_basic(self):
        k = generate_hotp("Brisanet Telecomunicações", "flavia@gmail.com")
        assert k.type() == "hotp"
        assert k.issuer() == "Brisanet Telecomunicações"
        assert k.account_name() == "flavia@gmail.com"
        assert len(k.secret()) == 16
        assert "period=" not in str(k)

    def test_larger_secret(self):
        k = generate_hotp("Brisa", "amatiasdias0102@gmail.com", secret_size=20)
        assert len(k.secret()) == 32

    def test_secret_size_not_multiple_of_five(self):
        k = generate_hotp("Zenir", "Flavio@gmail.com", secret_size=17)
        assert "=" not in k.secret()

    def test_explicit_secret(self):
        k = generate_hotp("Boticario", "maria@gmail.com", secret=b"helloworld")
        assert k.secret() == "NBSWY3DPO5XXE3DE"
        padded = k.secret() + "=" * (-len(k.secret()) % 8)
        assert base64.b32decode(padded) == b"helloworld"

    def test_missing_issuer(self):
        with self.assertRaises(MissingIssuer):
            generate_hotp("", "Suziane@gmail.com")

    def test_missing_account_name(self):
        with self.assertRaises(MissingAccountName):
            generate_hotp("Aamazom", "")

    def test_missing_fields_do_not_touch_random_source(self):
        def rand(n):
            raise AssertionError("random source must not be called")

        with self.assertRaises(MissingIssuer):
            generate_hotp("", "", rand=rand)

    def test_zero_digits_means_six(self):
        k = generate_hotp("Example", "alice", digits=0, rand=zeros)
        assert "digits=6" in str(k)
        assert k.digits() == Digits.SIX

    def test_unsupported_digits_rejected(self):
        for digits in (7, 10, -6):
            with self.assertRaises(InvalidOptions):
                generate_hotp("Example", "alice", digits=digits, rand=zeros)

    def test_codes_from_generated_key(self):
        k = generate_hotp("Example", "alice", digits=Digits.EIGHT, algorithm=Algorithm.SHA256)
        code = hotp.generate_code_custom(k.secret(), 7, k.hotp_options())
        assert len(code) == 8
        assert hotp.validate_custom(code, 7, k.secret(), k.hotp_options())


class TestGenerateTOTP(unittest.TestCase):

    def test_basic(self):
        k = generate_totp("Brisa", "matiasdias@gmail.com")
        assert k.type() == "totp"
        assert k.issuer() == "Brisa"
        assert k.account_name() == "matiasdias@gmail.com"
        assert len(k.secret()) == 32
        assert k.period() == 30

    def test_secret_size_not_multiple_of_five(self):
        k = generate_totp("Zenir", "mateus@gmail.com", secret_size=13)
        assert "=" not in k.secret()

    def test_zero_values_use_defaults(self):
        k = generate_totp("Zenir", "mateus@gmail.com", period=0, secret_size=0)
        assert k.period() == 30
        assert len(k.secret()) == 32

    def test_digits_round_trip(self):
        for digits in (Digits.SIX, Digits.EIGHT, 8):
            k = generate_totp("Example", "alice", digits=digits, rand=zeros)
            assert k.digits() == digits
            assert f"digits={digits}" in str(k)
        assert generate_totp("Example", "alice", digits=0, rand=zeros).digits() == Digits.SIX
        with self.assertRaises(InvalidOptions):
            generate_totp("Example", "alice", digits=7, rand=zeros)

    def test_negative_period_rejected(self):
        with self.assertRaises(InvalidOptions):
            generate_totp("Example", "alice", period=-5, rand=zeros)

    def test_period_round_trip(self):
        k = generate_totp("Example", "alice", period=45, rand=zeros)
        assert "period=45" in str(k)
        assert k.period() == 45

    def test_exact_url(self):
        k = generate_totp("Example", "alice@google.com", secret=b"helloworld")
        assert str(k) == (
            "otpauth://totp/Example:alice@google.com"
            "?algorithm=SHA1&digits=6&issuer=Example&period=30&secret=NBSWY3DPO5XXE3DE"
        )

    def test_special_characters_are_escaped(self):
        k = generate_totp("ACME Co", "john doe?#", rand=zeros)
        url = str(k)
        assert url.startswith("otpauth://totp/ACME%20Co:john%20doe%3F%23?")
        assert "issuer=ACME+Co" in url
        assert k.issuer() == "ACME Co"
        assert k.account_name() == "john doe?#"
        assert k.secret() == "A" * 32

    def test_round_trip(self):
        k = generate_totp(
            "Example", "alice@google.com", period=60,
            digits=Digits.EIGHT, algorithm=Algorithm.SHA512,
        )
        parsed = Key.from_url(str(k))
        assert parsed == k
        for accessor in ("type", "issuer", "account_name", "secret", "period", "digits", "algorithm"):
            assert getattr(parsed, accessor)() == getattr(k, accessor)()
        assert parsed.period() == 60
        assert parsed.digits() == Digits.EIGHT
        assert parsed.algorithm() is Algorithm.SHA512

    def test_generated_key_validates(self):
        k = generate_totp("Example", "alice")
        code = totp.generate_code_custom(k.secret(), 1700000000, k.totp_options())
        assert totp.validate_custom(code, k.secret(), 1700000000, k.totp_options(skew=0))

    def test_random_source_failure(self):
        def broken(n):
            raise OSError("no entropy")

        with self.assertRaises(RandomSourceError):
            generate_totp("Example", "alice", rand=broken)

    def test_random_source_short_read(self):
        with self.assertRaises(RandomSourceError):
            generate_totp("Example", "alice", rand=lambda n: b"\x01" * (n - 1))


class TestEncoding(unittest.TestCase):

    def test_b32encode_nopad(self):
        assert b32encode_nopad(b"12345678901234567890") == "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
        assert b32encode_nopad(b"a") == "ME"


if __name__ == "__main__":
    unittest.main()
