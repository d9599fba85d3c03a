"""Test configuration hooks."""

import pytest

from weixin_api.core import (
    OfficialAccountConfig,
    OpenPlatformConfig,
    StaticTokenSource,
    WeixinClient,
    WeixinConfig,
    WorkAgentConfig,
)


# Configure anyio to only use asyncio backend (skip trio tests)
@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to use only asyncio backend."""
    return "asyncio"


@pytest.fixture
def weixin_config():
    """Provides a WeixinConfig with credentials for every API family."""
    return WeixinConfig(
        official_account=OfficialAccountConfig(appid="wx1234567890", secret="oa_secret"),
        open_platform=OpenPlatformConfig(
            component_appid="wxcomponent01", component_appsecret="component_secret"
        ),
        work=WorkAgentConfig(corpid="ww0123456789", agent_id="1000002"),
    )


@pytest.fixture
def api_client():
    """Provides an unconnected transport for api.weixin.qq.com."""
    return WeixinClient(token_source=StaticTokenSource("ACCESS_TOKEN"))


@pytest.fixture
def component_client():
    """Provides an unconnected transport carrying a component access token."""
    return WeixinClient(
        token_source=StaticTokenSource("COMPONENT_TOKEN"),
        token_param="component_access_token",
    )


@pytest.fixture
def work_client():
    """Provides an unconnected transport for qyapi.weixin.qq.com."""
    return WeixinClient(
        base_url="https://qyapi.weixin.qq.com",
        token_source=StaticTokenSource("WORK_TOKEN"),
    )
