import base64
import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from otp_core import hotp, otp_cli

RFC_SECRET = base64.b32encode(b"12345678901234567890").decode("ascii")
RFC_URI = f"otpauth://totp/Example:alice@google.com?secret={RFC_SECRET}&issuer=Example&digits=8"


def run_cli(*argv):
    out = io.StringIO()
    err = io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        status = otp_cli.main(list(argv))
    return status, out.getvalue(), err.getvalue()


class TestCli(unittest.TestCase):

    def test_hotp(self):
        status, out, _ = run_cli("hotp", "--secret", RFC_SECRET, "--counter", "1")
        assert status == 0
        assert "287082" in out

    def test_uri(self):
        status, out, _ = run_cli("uri", "--uri", RFC_URI)
        assert status == 0
        assert "Issuer: Example" in out
        assert "Account Name: alice@google.com" in out
        assert "Digits: 8" in out
        assert "Period: 30" in out

    def test_verify_totp(self):
        status, out, _ = run_cli("verify", "totp", "--uri", RFC_URI, "--code", "94287082", "--timestamp", "59")
        assert status == 0
        assert "VALID" in out
        status, out, _ = run_cli("verify", "totp", "--uri", RFC_URI, "--code", "94287083", "--timestamp", "59")
        assert status == 1
        assert "INVALID" in out

    def test_verify_hotp_look_ahead(self):
        status, _, _ = run_cli("verify", "hotp", "--secret", RFC_SECRET, "--code", "359152", "--counter", "0")
        assert status == 1
        status, out, _ = run_cli("verify", "hotp", "--secret", RFC_SECRET, "--code", "359152",
                                 "--counter", "0", "--look-ahead", "2")
        assert status == 0
        assert "next counter = 3" in out

    def test_bad_secret_reports_error(self):
        status, _, err = run_cli("hotp", "--secret", "not base32!", "--counter", "0")
        assert status == 2
        assert "Invalid Base32 secret" in err

    def test_totp_once(self):
        status, out, _ = run_cli("totp", "--uri", RFC_URI)
        assert status == 0
        assert "TOTP (8d):" in out

    def test_init_writes_qr_code(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "qr-code.png")
            status, out, _ = run_cli("init", "--issuer", "Example1.com", "--account", "alice@example.com",
                                     "--qr", path)
            assert status == 0
            assert "URL: otpauth://totp/Example1.com:alice@example.com?" in out
            with open(path, "rb") as f:
                assert f.read(8) == b"\x89PNG\r\n\x1a\n"

    def test_negative_counter_reports_error(self):
        status, _, err = run_cli("hotp", "--secret", RFC_SECRET, "--counter", "-1")
        assert status == 2
        assert "out of range" in err

    def test_negative_window_reports_error(self):
        status, _, err = run_cli("verify", "totp", "--secret", RFC_SECRET, "--code", "123456", "--window", "-1")
        assert status == 2
        assert "skew" in err

    def _run_init_prompt(self, answer):
        out = io.StringIO()
        err = io.StringIO()

        def enter_passcode(prompt):
            secret = next(line.split(": ", 1)[1] for line in out.getvalue().splitlines()
                          if line.startswith("Secret: "))
            return answer(secret)

        with mock.patch("builtins.input", side_effect=enter_passcode), \
                redirect_stdout(out), redirect_stderr(err):
            status = otp_cli.main(["init", "--type", "hotp", "--issuer", "Example",
                                   "--account", "alice", "--prompt"])
        return status, out.getvalue()

    def test_init_prompt(self):
        status, out = self._run_init_prompt(lambda secret: hotp.generate_code_custom(secret, 0) + "\n")
        assert status == 0
        assert "Passcode is VALID" in out

    def test_init_prompt_wrong_code(self):
        def wrong(secret):
            code = hotp.generate_code_custom(secret, 0)
            return code[:-1] + str((int(code[-1]) + 1) % 10)

        status, out = self._run_init_prompt(wrong)
        assert status == 1
        assert "Passcode is INVALID" in out


if __name__ == "__main__":
    unittest.main()
