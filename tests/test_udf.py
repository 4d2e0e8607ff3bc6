"""Tests for the host-facing masking functions."""

import concurrent.futures
import threading

import pytest

from regexmask import udf
from regexmask.catalog import PatternCatalog
from regexmask.lifecycle import ExecutionScope, ScopeLifecycle
from regexmask.models import MaskError, MaskPolicy
from regexmask.udf import ScopedMasker


@pytest.fixture
def scope():
    """Prepared scope bound to the default lifecycle."""
    scope = ExecutionScope(scope_id="udf")
    udf.init(scope)
    yield scope
    udf.teardown(scope)


class TestScenarios:
    """End-to-end masking scenarios."""

    def test_ssn_asterisk(self, scope):
        """Test masking an SSN with asterisks."""
        result = udf.mask_default(scope, "SSN", "my ssn is 123456-1234567 thanks")

        assert result == "my ssn is ************** thanks"

    def test_email_replace_char(self, scope):
        """Test masking an email with a custom character."""
        result = udf.mask(scope, "EMAIL", "contact: a.b@example.com now", "X")

        assert result == "contact: XXXXXXXXXXXXXXX now"

    def test_apn_asterisk(self, scope):
        """Test masking several account numbers."""
        assert udf.mask_default(scope, "APN", "codes 1234 5678") == "codes **** ****"

    def test_unknown_key(self, scope):
        """Test that unknown keys give None without diagnostics."""
        assert udf.mask_default(scope, "UNKNOWN", "abc") is None
        assert udf.mask(scope, "UNKNOWN", "abc", "X") is None
        assert scope.errors == []

    def test_empty_input_passthrough(self, scope):
        """Test that empty text comes back as empty text."""
        assert udf.mask_default(scope, "SSN", "") == ""
        assert udf.mask(scope, "SSN", "", "#") == ""

    def test_no_match_passthrough(self, scope):
        """Test that text without matches is unchanged."""
        assert udf.mask(scope, "EMAIL", "nothing to see", "#") == "nothing to see"


class TestSilentFailures:
    """Tests for failures that return None without diagnostics."""

    @pytest.mark.parametrize(
        "key,text,mask_char",
        [
            (None, "abc", "X"),
            ("SSN", None, "X"),
            ("SSN", "abc", None),
            (None, None, None),
        ],
    )
    def test_null_arguments(self, scope, key, text, mask_char):
        """Test that any None argument gives None."""
        assert udf.mask(scope, key, text, mask_char) is None
        assert scope.errors == []

    @pytest.mark.parametrize("key,text", [(None, "abc"), ("SSN", None)])
    def test_null_arguments_default(self, scope, key, text):
        """Test the asterisk variant with None arguments."""
        assert udf.mask_default(scope, key, text) is None
        assert scope.errors == []

    @pytest.mark.parametrize("mask_char", ["", "XY", "***"])
    def test_invalid_mask_length(self, scope, mask_char):
        """Test that mask characters of length other than one give None."""
        assert udf.mask(scope, "SSN", "123456-1234567", mask_char) is None
        assert scope.errors == []

    def test_detailed_reports_error_kind(self, scope):
        """Test that the detailed call names the failure."""
        assert udf.mask_detailed(scope, "SSN", None).error == MaskError.NULL_ARGUMENT
        assert udf.mask_detailed(scope, "NOPE", "x").error == MaskError.UNKNOWN_KEY
        assert udf.mask_detailed(scope, "SSN", "x", "ab").error == MaskError.INVALID_MASK_LENGTH

    def test_detailed_match_count(self, scope):
        """Test that the detailed call reports the number of matches."""
        result = udf.mask_detailed(scope, "APN", "1234 5678 9012")

        assert result.text == "**** **** ****"
        assert result.match_count == 3


class TestOperationalFaults:
    """Tests for failures reported on the scope's error channel."""

    def test_uninitialized_scope(self):
        """Test that a scope without init gives None and a diagnostic."""
        scope = ExecutionScope()

        assert udf.mask_default(scope, "SSN", "123456-1234567") is None
        assert len(scope.errors) == 1
        assert "not initialized" in scope.errors[0]

    def test_closed_scope(self):
        """Test that a torn down scope gives None and a diagnostic."""
        scope = ExecutionScope()
        udf.init(scope)
        udf.teardown(scope)

        assert udf.mask(scope, "SSN", "123456-1234567", "X") is None
        assert len(scope.errors) == 1

    def test_missing_scope(self):
        """Test that no scope at all still returns None."""
        result = udf.mask_detailed(None, "SSN", "123456-1234567")

        assert result.text is None
        assert result.error == MaskError.UNINITIALIZED_STATE

    def test_compile_error(self):
        """Test that a malformed pattern gives None and a diagnostic."""
        masker = ScopedMasker(ScopeLifecycle(PatternCatalog({"BAD": "[a-"})))
        scope = ExecutionScope()
        masker.lifecycle.init(scope)

        assert masker.mask(scope, "BAD", "abc", "X") is None
        assert masker.mask_default(scope, "BAD", "abc") is None
        assert len(scope.errors) == 2
        assert all("BAD" in message for message in scope.errors)

    def test_one_failure_does_not_poison_scope(self):
        """Test that later calls in the same scope still succeed."""
        masker = ScopedMasker(ScopeLifecycle(PatternCatalog({"BAD": "(", "APN": r"\d{4}"})))
        scope = ExecutionScope()
        masker.lifecycle.init(scope)

        assert masker.mask(scope, "BAD", "1234", "X") is None
        assert masker.mask(scope, "APN", "1234", "X") == "XXXX"


class TestConcurrentCalls:
    """Tests for many threads sharing one scope."""

    def test_threads_share_one_compiled_pattern(self):
        """Test that N threads on an uncompiled key all mask correctly."""
        thread_count = 24
        masker = ScopedMasker()
        scope = ExecutionScope()
        masker.lifecycle.init(scope)
        barrier = threading.Barrier(thread_count)

        def worker(i):
            barrier.wait()
            text = f"row {i}: a.b@example.com"
            return text, masker.mask(scope, "EMAIL", text, "#")

        with concurrent.futures.ThreadPoolExecutor(max_workers=thread_count) as executor:
            results = list(executor.map(worker, range(thread_count)))

        for text, masked in results:
            assert masked == text.replace("a.b@example.com", "#" * 15)

        cache = masker.lifecycle.cache(scope)
        assert cache.compile_count == 1
        assert cache.compiled_keys() == ["EMAIL"]
        assert scope.errors == []


class TestPackageExports:
    """Tests for the top-level package surface."""

    def test_hooks_exported(self):
        """Test that a host can drive a scope through the package alone."""
        import regexmask

        scope = regexmask.ExecutionScope()
        regexmask.init(scope)
        try:
            assert regexmask.mask(scope, "APN", "1234", "X") == "XXXX"
            assert regexmask.mask_default(scope, "APN", "1234") == "****"
            assert regexmask.mask_detailed(scope, "APN", "1234 5678").match_count == 2
        finally:
            regexmask.teardown(scope)

        assert regexmask.mask_default(scope, "APN", "1234") is None
        for name in ("init", "teardown", "mask_detailed"):
            assert name in regexmask.__all__


class TestScopedMasker:
    """Tests for masker configuration."""

    def test_policy_override(self):
        """Test passing an explicit policy to the detailed call."""
        masker = ScopedMasker()
        scope = ExecutionScope()
        masker.lifecycle.init(scope)

        result = masker.mask_detailed(scope, "APN", "1234", policy=MaskPolicy.FILL_ASTERISK)

        assert result.text == "****"
