"""Tests for retry markers."""

from types import SimpleNamespace

import pytest

from requeue.core.config import get_config
from requeue.core.exceptions import ConfigurationError
from requeue.core.markers import is_retried, mark_retried, marker_key
from requeue.core.models import RequestDescriptor


class TestMarkers:
    """Test marking requests as retried."""

    def test_marker_key_uses_prefix(self):
        """Key is the configured prefix followed by the tag."""
        assert marker_key("auth") == "_retryauth"

    def test_marker_key_custom_prefix(self, monkeypatch):
        """Prefix comes from configuration."""
        monkeypatch.setattr(get_config(), "marker_prefix", "retried_")

        assert marker_key("auth") == "retried_auth"

    def test_empty_tag_rejected(self):
        """Empty tag raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            marker_key("")

    def test_mark_mapping(self):
        """Mappings are marked with an item."""
        request = {"url": "/a"}

        assert not is_retried(request, "auth")
        mark_retried(request, "auth")

        assert request["_retryauth"] is True
        assert is_retried(request, "auth")

    def test_mark_object(self):
        """Plain objects are marked with an attribute."""
        request = SimpleNamespace(url="/a")

        mark_retried(request, "auth")

        assert request._retryauth is True
        assert is_retried(request, "auth")

    def test_mark_request_descriptor(self):
        """Request descriptors accept markers."""
        request = RequestDescriptor(url="/a")

        mark_retried(request, "auth")

        assert is_retried(request, "auth")
        assert not is_retried(request, "csrf")

    def test_tags_do_not_collide(self):
        """Marking for one tag does not mark for another."""
        request = {"url": "/a"}

        mark_retried(request, "auth")

        assert not is_retried(request, "csrf")
