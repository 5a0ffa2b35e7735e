from pos_client.consts import (
    CLIENT_NAME,
    PACKAGE_VERSION,
    REFRESH_URL_PATH,
    USER_AGENT,
)


class TestPackageConstants:
    """Test package constants are properly defined"""

    def test_package_version_defined(self):
        """Test that package version is defined"""
        assert isinstance(PACKAGE_VERSION, str)
        assert "." in PACKAGE_VERSION  # Should be semantic version

    def test_user_agent_format(self):
        """Test that user agent follows expected format"""
        assert USER_AGENT == f"{CLIENT_NAME}/{PACKAGE_VERSION}"

    def test_refresh_path_matches_backend_contract(self):
        assert REFRESH_URL_PATH == "/auth/refresh"
