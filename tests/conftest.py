"""
Shared fixtures for the tv-devops infrastructure tests.
"""

import aws_cdk as cdk
import pytest
from aws_cdk import assertions

from tv_devops_infra import ServiceStack, resolve_configuration, synthesize


@pytest.fixture
def config():
    """Configuration resolved from an empty environment (all defaults)."""
    return resolve_configuration({})


@pytest.fixture
def synthesis(config):
    return synthesize(config)


@pytest.fixture
def make_template():
    """Factory rendering a raw environment mapping into a CloudFormation template."""

    def _make(environ=None):
        result = synthesize(resolve_configuration(environ or {}))
        app = cdk.App()
        stack = ServiceStack(
            app,
            "TestStack",
            synthesis=result,
            env=cdk.Environment(account="123456789012", region=result.config.region),
        )
        return assertions.Template.from_stack(stack)

    return _make
