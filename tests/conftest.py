import logging

import boto3
import pytest
from botocore.stub import Stubber

LOGGER_NAMES = (
    "sg-ip-sync",
    "sg-ip-sync.request",
    "sg-ip-sync.security_groups",
    "sg-ip-sync.sync",
)


@pytest.fixture
def ec2():
    return boto3.client(
        "ec2",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def stubber(ec2):
    with Stubber(ec2) as stub:
        yield stub
        stub.assert_no_pending_responses()


@pytest.fixture
def logs(caplog):
    # the package loggers do not propagate, hook caplog in directly
    loggers = [logging.getLogger(name) for name in LOGGER_NAMES]
    for logger in loggers:
        logger.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG)
    yield caplog
    for logger in loggers:
        logger.removeHandler(caplog.handler)
