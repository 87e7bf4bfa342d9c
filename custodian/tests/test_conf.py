"""
Tests for Custodian settings.
"""

from custodian.conf import custodian_settings, get_custodian_settings


class TestCustodianSettings:
    """Tests for the CUSTODIAN settings dict."""

    def test_defaults(self, settings):
        """Missing keys fall back to the documented defaults."""
        settings.CUSTODIAN = {}

        conf = get_custodian_settings()

        assert conf.OVERRIDE_ROLES == ['ADMIN', 'STAFF']
        assert conf.MAX_RETRIES == 3
        assert conf.RETRY_BACKOFF_SECONDS == 0.05
        assert conf.LOCK_TIMEOUT_MS == 5000
        assert conf.DEFAULT_LIST_LIMIT == 100

    def test_overrides_and_unknown_keys(self, settings):
        """Known keys override; unknown keys are ignored."""
        settings.CUSTODIAN = {'OVERRIDE_ROLES': ['ADMIN'], 'COLOR': 'blue'}

        conf = get_custodian_settings()

        assert conf.OVERRIDE_ROLES == ['ADMIN']
        assert not hasattr(conf, 'COLOR')

    def test_lazy_proxy_rereads(self, settings):
        """The proxy sees settings changed after import."""
        settings.CUSTODIAN = {'DEFAULT_LIST_LIMIT': 7}

        assert custodian_settings.DEFAULT_LIST_LIMIT == 7
