import ipaddress

import backoff
import requests

from sg_ip_sync.pylog import get_logger

logger = get_logger("sg-ip-sync.request")

DEFAULT_IP_URL = "https://checkip.amazonaws.com"


class InvalidPublicIP(ValueError):
    pass


def log_backoff(details):
    logger.info(
        "Public IP lookup failed, waiting %0.1f seconds before try %s",
        details["wait"],
        details["tries"] + 1,
    )


def get_public_ip(url=DEFAULT_IP_URL, timeout=10, max_tries=1):
    @backoff.on_exception(
        backoff.expo,
        (requests.ConnectionError, requests.Timeout),
        max_tries=max_tries,
        on_backoff=log_backoff,
    )
    def fetch():
        response = requests.get(url, timeout=timeout)
        if not response.ok:
            logger.info(
                "Request GET:%s failed with code %s" % (url, response.status_code),
                extra={"text": response.text},
            )
            response.raise_for_status()
        return response.text

    text = fetch().strip()
    try:
        address = ipaddress.IPv4Address(text)
    except ipaddress.AddressValueError:
        raise InvalidPublicIP(f"{url} did not return an IPv4 address: {text[:64]!r}")
    return str(address)
